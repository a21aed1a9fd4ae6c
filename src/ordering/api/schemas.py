"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Prices and totals are never accepted on input.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class DeliveryLocationSchema(BaseModel):
    address: str
    city: str


class OrderItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    customer_name: str
    customer_id: str | None = None
    order_type: str
    items: list[OrderItemRequest]
    delivery_location: DeliveryLocationSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_name": "Maya Chen",
                    "customer_id": "cust-001",
                    "order_type": "Delivery",
                    "items": [
                        {"product_id": "cappuccino", "quantity": 2},
                        {"product_id": "croissant", "quantity": 1},
                    ],
                    "delivery_location": {"address": "12 Harbour St", "city": "Lisbon"},
                }
            ]
        }
    }


class AssignCourierRequest(BaseModel):
    courier_id: str | None = None  # defaults to the calling courier


class ChangeStatusRequest(BaseModel):
    status: str
    expected_version: int | None = Field(default=None, ge=1)


class UpdateItemQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderLineResponse(BaseModel):
    product_id: str
    name: str
    category: str | None = None
    unit_price: float
    quantity: int


class OrderResponse(BaseModel):
    order_id: str
    customer_name: str
    customer_id: str | None = None
    order_type: str
    status: str
    total: float
    items: list[OrderLineResponse]
    delivery_location: DeliveryLocationSchema | None = None
    courier_id: str | None = None
    courier_name: str | None = None
    version: int
    created_at: str | None = None
    updated_at: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
