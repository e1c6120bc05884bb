"""Domain -> DTO mapping shared by the order use cases."""

from __future__ import annotations

from datetime import datetime

from canteen.application.dto import (
    OrderDTO,
    OrderLineItemDTO,
    QuoteDTO,
    StatusChangeDTO,
)
from canteen.domain.model.order import Order, OrderLineItem
from canteen.domain.service.pricing_service import PricedOrder

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


def _fmt(at: datetime) -> str:
    return at.strftime(TIMESTAMP_FORMAT)


def line_item_to_dto(item: OrderLineItem) -> OrderLineItemDTO:
    return OrderLineItemDTO(
        name=item.name,
        quantity=item.quantity.value,
        unit_price=item.unit_price.amount,
        item_total=item.item_total.amount,
    )


def quote_to_dto(priced: PricedOrder) -> QuoteDTO:
    return QuoteDTO(
        items=[line_item_to_dto(item) for item in priced.items],
        subtotal=priced.subtotal.amount,
        tax=priced.tax.amount,
        total=priced.total.amount,
        currency=priced.currency,
        priced_at=priced.priced_at.isoformat(),
    )


def order_to_dto(order: Order) -> OrderDTO:
    stamps = {
        "accepted": (order.accepted_at, order.accepted_by),
        "ready": (order.ready_at, order.marked_ready_by),
        "completed": (order.completed_at, order.completed_by),
        "cancelled": (order.cancelled_at, order.cancelled_by),
    }
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        status=order.status.value,
        customer_email=str(order.customer.email),
        customer_name=order.customer.display_name,
        items=[line_item_to_dto(item) for item in order.items],
        subtotal=order.subtotal.amount,
        tax=order.tax.amount,
        total=order.total.amount,
        currency=order.currency,
        payment_status=order.payment.status.value,
        payment_method=order.payment.method,
        notes=order.notes,
        created_at=_fmt(order.created_at),
        updated_at=_fmt(order.updated_at),
        attribution={
            status: (_fmt(at), actor or "")
            for status, (at, actor) in stamps.items()
            if at is not None
        },
        cancellation_reason=order.cancellation_reason,
        history=[
            StatusChangeDTO(
                from_status=change.from_status.value,
                to_status=change.to_status.value,
                actor=change.actor,
                at=_fmt(change.at),
                note=change.note,
            )
            for change in order.history
        ],
    )
