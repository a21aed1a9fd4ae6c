"""FastAPI routes for the Dashboard — read-only order statistics."""

from fastapi import APIRouter

from dashboard.api.schemas import StatsResponse
from dashboard.engine import get_aggregation_engine

dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@dashboard_router.get("/stats", response_model=StatsResponse)
def get_stats() -> StatsResponse:
    return StatsResponse(**get_aggregation_engine().get_stats().to_dict())
