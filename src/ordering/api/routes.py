"""FastAPI routes for the Ordering domain — orders and the delivery board."""

from fastapi import APIRouter, Depends
from protean.exceptions import ValidationError

from ordering.api.schemas import (
    AssignCourierRequest,
    ChangeStatusRequest,
    CreateOrderRequest,
    OrderResponse,
    StatusResponse,
    UpdateItemQuantityRequest,
)
from ordering.engine import OrderDraft, get_fulfillment_engine
from ordering.order.order import OrderStatus
from ordering.store import OrderSnapshot
from shared.actors import Actor
from shared.web import current_actor

order_router = APIRouter(prefix="/orders", tags=["orders"])


def _to_response(order: OrderSnapshot) -> OrderResponse:
    return OrderResponse(**order.to_dict())


def _parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError as exc:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError({"status": [f"Unknown status {value!r}; expected one of {allowed}"]}) from exc


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(body: CreateOrderRequest, actor: Actor = Depends(current_actor)) -> OrderResponse:
    draft = OrderDraft(
        customer_name=body.customer_name,
        customer_id=body.customer_id,
        order_type=body.order_type,
        items=[item.model_dump() for item in body.items],
        delivery_location=body.delivery_location.model_dump() if body.delivery_location else None,
    )
    return _to_response(get_fulfillment_engine().create_order(actor, draft))


@order_router.put("/{order_id}/courier", response_model=OrderResponse)
def assign_courier(
    order_id: str,
    body: AssignCourierRequest,
    actor: Actor = Depends(current_actor),
) -> OrderResponse:
    courier_id = body.courier_id or actor.id
    return _to_response(get_fulfillment_engine().assign_courier(actor, order_id, courier_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
def change_status(
    order_id: str,
    body: ChangeStatusRequest,
    actor: Actor = Depends(current_actor),
) -> OrderResponse:
    order = get_fulfillment_engine().change_status(
        actor,
        order_id,
        _parse_status(body.status),
        expected_version=body.expected_version,
    )
    return _to_response(order)


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(order_id: str, actor: Actor = Depends(current_actor)) -> OrderResponse:
    return _to_response(get_fulfillment_engine().cancel_order(actor, order_id))


@order_router.put("/{order_id}/items/{product_id}", response_model=OrderResponse)
def update_item_quantity(
    order_id: str,
    product_id: str,
    body: UpdateItemQuantityRequest,
    actor: Actor = Depends(current_actor),
) -> OrderResponse:
    order = get_fulfillment_engine().update_item_quantity(actor, order_id, product_id, body.quantity)
    return _to_response(order)


@order_router.post("/{order_id}/duplicate", status_code=201, response_model=OrderResponse)
def duplicate_order(order_id: str, actor: Actor = Depends(current_actor)) -> OrderResponse:
    return _to_response(get_fulfillment_engine().duplicate_order(actor, order_id))


@order_router.delete("/{order_id}", response_model=StatusResponse)
def delete_order(order_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    get_fulfillment_engine().delete_order(actor, order_id)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@order_router.get("", response_model=list[OrderResponse])
def list_orders() -> list[OrderResponse]:
    return [_to_response(order) for order in get_fulfillment_engine().list_orders()]


@order_router.get("/deliveries", response_model=list[OrderResponse])
def list_deliveries(status: str | None = None, search: str | None = None) -> list[OrderResponse]:
    parsed = _parse_status(status) if status else None
    return [_to_response(order) for order in get_fulfillment_engine().deliveries(parsed, search)]


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str) -> OrderResponse:
    return _to_response(get_fulfillment_engine().get_order(order_id))
