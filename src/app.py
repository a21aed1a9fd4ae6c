"""BeanStream FastAPI application.

Café order fulfillment service: order lifecycle and courier dispatch,
loyalty points, and live dashboard statistics. Commands are processed
synchronously; each request runs in the domain context matching its URL
prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the configuration overlay.
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loyalty.domain import loyalty
from ordering.domain import ordering
from protean.integrations.fastapi import register_exception_handlers

from shared.logging import add_context, clear_context
from shared.web import register_error_handlers

ordering.init()
loyalty.init()

# ---------------------------------------------------------------------------
# Change feed wiring
# ---------------------------------------------------------------------------
from dashboard.engine import get_aggregation_engine  # noqa: E402
from loyalty.ledger import get_loyalty_ledger  # noqa: E402
from loyalty.rewards import CompletedOrderRewarder  # noqa: E402
from ordering.engine import get_fulfillment_engine  # noqa: E402


def wire_change_feed():
    """Attach the dashboard and the loyalty rewarder to the order change feed.

    Returns the unsubscribe callbacks.
    """
    engine = get_fulfillment_engine()
    return [
        get_aggregation_engine().attach(engine.store),
        engine.subscribe(CompletedOrderRewarder(get_loyalty_ledger())),
    ]


@asynccontextmanager
async def lifespan(app: FastAPI):
    unsubscribers = wire_change_feed()
    yield
    for unsubscribe in unsubscribers:
        unsubscribe()


# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/orders": ordering,
    "/loyalty": loyalty,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="BeanStream API",
    description="Café order fulfillment: orders, courier dispatch, loyalty and dashboard",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the matching Protean domain context and tag log lines with the caller."""
    add_context(path=request.url.path, actor_id=request.headers.get("x-actor-id"))
    try:
        domain = _resolve_domain(request.url.path)
        if domain is not None:
            with domain.domain_context():
                return await call_next(request)
        # No domain match: health check, dashboard and docs pass straight through
        return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from dashboard.api.routes import dashboard_router  # noqa: E402
from loyalty.api.routes import loyalty_router  # noqa: E402
from ordering.api.routes import order_router  # noqa: E402

app.include_router(order_router)
app.include_router(loyalty_router)
app.include_router(dashboard_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ordering": {"name": ordering.name},
                "loyalty": {"name": loyalty.name},
            },
        }
    )
