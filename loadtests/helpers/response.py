"""Response error extraction for load test observability.

Parses BeanStream API error responses into human-readable messages.
Handles three response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Protean validation (400): {"error": {"field": ["msg", ...]}}
- Typed command errors (403/404/409/503): {"error": "code", "message": "...", "retryable": bool}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message from an API error response.

    Unparseable bodies and missing fields degrade to the raw text.
    """
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            return " | ".join(f"{k}: {v}" for k, v in error.items())
        if "message" in body:
            reason = f" ({body['reason']})" if "reason" in body else ""
            return f"{error}{reason}: {body['message']}"
        return str(error)

    return str(body)[:300]


def is_conflict(response: Response, reason: str | None = None) -> bool:
    """True for a 409 Conflict, optionally with the given reason."""
    if response.status_code != 409:
        return False
    if reason is None:
        return True
    try:
        return response.json().get("reason") == reason
    except ValueError:
        return False
