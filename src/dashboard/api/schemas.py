"""Pydantic response schemas for the Dashboard API."""

from pydantic import BaseModel


class ProductRankResponse(BaseModel):
    product_id: str
    name: str
    count: int


class DailyRevenueResponse(BaseModel):
    date: str
    revenue: float


class StatsResponse(BaseModel):
    total_orders: int
    total_revenue: float
    average_order_value: float
    counts_by_status: dict[str, int]
    counts_by_type: dict[str, int]
    share_by_type: dict[str, float]
    top_products: list[ProductRankResponse]
    daily_revenue: list[DailyRevenueResponse]
    revenue_by_category: dict[str, float]
    sequence: int
    computed_at: str
