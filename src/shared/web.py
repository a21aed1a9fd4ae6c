"""HTTP plumbing shared by the ordering, loyalty and dashboard routers."""

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from shared.actors import Actor
from shared.errors import (
    BeanStreamError,
    Conflict,
    InsufficientBalance,
    NotFound,
    PermissionDenied,
    Unavailable,
)
from shared.logging import get_logger

logger = get_logger(__name__)

_STATUS_CODES = {
    PermissionDenied: 403,
    NotFound: 404,
    Conflict: 409,
    InsufficientBalance: 409,
    Unavailable: 503,
}


def status_code_for(exc: BeanStreamError) -> int:
    for exc_class, status_code in _STATUS_CODES.items():
        if isinstance(exc, exc_class):
            return status_code
    return 400


async def _handle_beanstream_error(request: Request, exc: BeanStreamError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info("request_rejected", path=request.url.path, error=exc.code, status_code=status_code)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Map typed command failures onto HTTP responses.

    Install next to ``protean.integrations.fastapi.register_exception_handlers``,
    which covers Protean's own ValidationError (400) and lookup errors.
    """
    app.add_exception_handler(BeanStreamError, _handle_beanstream_error)


def current_actor(
    x_actor_id: str = Header(..., description="Authenticated actor id"),
    x_actor_role: str = Header(..., description="Admin, Cashier or Courier"),
) -> Actor:
    """FastAPI dependency turning identity headers into an Actor."""
    try:
        return Actor.from_claim(x_actor_id, x_actor_role)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=f"Unknown role: {x_actor_role}") from exc
