"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from canteen.domain.service.pricing_service import LineItemRequest

__all__ = [
    "CreateOrderResult",
    "CustomerSpec",
    "LineItemRequest",
    "OrderDTO",
    "OrderLineItemDTO",
    "OrderListing",
    "PaymentSpec",
    "QuoteDTO",
    "StaffDTO",
    "StatusChangeDTO",
    "TransitionResult",
]


# --- Input ---------------------------------------------------------------------


@dataclass(frozen=True)
class CustomerSpec:
    email: str
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class PaymentSpec:
    """Payment outcome decided upstream (gateway, counter staff)."""

    status: str
    method: str | None = None
    transaction_id: str | None = None


# --- Output --------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineItemDTO:
    name: str
    quantity: int
    unit_price: int
    item_total: int


@dataclass(frozen=True)
class QuoteDTO:
    items: list[OrderLineItemDTO]
    subtotal: int
    tax: int
    total: int
    currency: str
    priced_at: str


@dataclass(frozen=True)
class StatusChangeDTO:
    from_status: str
    to_status: str
    actor: str
    at: str
    note: str | None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    status: str
    customer_email: str
    customer_name: str
    items: list[OrderLineItemDTO]
    subtotal: int
    tax: int
    total: int
    currency: str
    payment_status: str
    payment_method: str
    notes: str
    created_at: str
    updated_at: str
    # status -> (timestamp, actor) for every status the order has entered
    attribution: dict[str, tuple[str, str]] = field(default_factory=dict)
    cancellation_reason: str | None = None
    history: list[StatusChangeDTO] = field(default_factory=list)


@dataclass(frozen=True)
class CreateOrderResult:
    order_id: int
    order: OrderDTO
    message: str


@dataclass(frozen=True)
class TransitionResult:
    order_id: int
    status: str
    message: str


@dataclass(frozen=True)
class OrderListing:
    orders: list[OrderDTO]
    counts: dict[str, int]


@dataclass(frozen=True)
class StaffDTO:
    email: str
    display_name: str
    role: str
