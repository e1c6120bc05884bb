"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items, its monetary
snapshot and its position in the fulfillment lifecycle.  All status
changes go through ``transition_to`` which consults the explicit
transition table below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from canteen.domain.exceptions import IllegalTransitionError, ValidationError
from canteen.domain.model.value_objects import EmailAddress, Money, Quantity

if TYPE_CHECKING:
    from canteen.domain.service.pricing_service import PricedOrder


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]

    @staticmethod
    def parse(raw: str) -> OrderStatus:
        """Strict conversion from the wire vocabulary."""
        try:
            return OrderStatus(raw)
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Invalid status: {raw!r}. Must be one of: {allowed}"
            ) from None


# ---------------------------------------------------------------------------
# Lifecycle graph: current status -> statuses it may move to
# ---------------------------------------------------------------------------
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.ACCEPTED, OrderStatus.CANCELLED}),
    OrderStatus.ACCEPTED: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

_unmapped = set(OrderStatus) - set(ALLOWED_TRANSITIONS)
if _unmapped:
    raise RuntimeError(f"Lifecycle table is missing {sorted(s.value for s in _unmapped)}")


class PaymentStatus(Enum):
    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"

    @staticmethod
    def parse(raw: str) -> PaymentStatus:
        try:
            return PaymentStatus(raw)
        except ValueError:
            raise ValidationError(
                "Payment status must be success, pending, or failed"
            ) from None


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
DEFAULT_ACTOR = "staff"
DEFAULT_CANCELLATION_REASON = "Payment failed"
DEFAULT_PAYMENT_METHOD = "UPI"
MAX_NAME_LENGTH = 100
MAX_TEXT_LENGTH = 500


def _bounded(value: str | None, label: str, limit: int) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if len(value) > limit:
        raise ValidationError(f"{label} must be at most {limit} characters")
    return value


@dataclass(frozen=True)
class OrderLineItem:
    """One priced row of an order.

    The unit price is a snapshot taken from the catalog when the order
    was priced; ``item_total`` is always derived, never stored.
    """

    name: str
    quantity: Quantity
    unit_price: Money

    @property
    def item_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class Customer:
    email: EmailAddress
    display_name: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None

    @staticmethod
    def create(
        email: str,
        display_name: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> Customer:
        first_name = _bounded(first_name, "First name", MAX_NAME_LENGTH) or None
        last_name = _bounded(last_name, "Last name", MAX_NAME_LENGTH) or None
        name = _bounded(display_name, "Display name", MAX_NAME_LENGTH)
        if not name:
            name = f"{first_name or ''} {last_name or ''}".strip()
        return Customer(
            email=EmailAddress(email),
            display_name=name,
            first_name=first_name,
            last_name=last_name,
            phone=_bounded(phone, "Phone", 32) or None,
        )


@dataclass(frozen=True)
class PaymentSnapshot:
    """Payment outcome as reported by the caller at creation time."""

    status: PaymentStatus
    method: str
    amount: Money
    recorded_at: datetime
    transaction_id: str | None = None


@dataclass(frozen=True)
class StatusChange:
    """Audit record appended for every accepted transition."""

    from_status: OrderStatus
    to_status: OrderStatus
    actor: str
    at: datetime
    note: str | None = None


@dataclass
class Order:
    """Aggregate root for counter orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer: Customer
    items: list[OrderLineItem]
    subtotal: Money
    tax: Money
    total: Money
    payment: PaymentSnapshot
    notes: str = ""
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    accepted_at: datetime | None = None
    accepted_by: str | None = None
    ready_at: datetime | None = None
    marked_ready_by: str | None = None
    completed_at: datetime | None = None
    completed_by: str | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancellation_reason: str | None = None

    history: list[StatusChange] = field(default_factory=list)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer: Customer,
        priced: PricedOrder,
        payment_status: PaymentStatus,
        payment_method: str | None = None,
        transaction_id: str | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Create a new pending order from a priced item set."""
        if not priced.items:
            raise ValidationError("Order must contain at least one item")

        line_sum = Money.zero(priced.currency)
        for item in priced.items:
            line_sum = line_sum + item.item_total
        if line_sum != priced.subtotal:
            raise ValidationError(
                f"Subtotal {priced.subtotal} does not match line items ({line_sum})"
            )

        at = now or utcnow()
        payment = PaymentSnapshot(
            status=payment_status,
            method=_bounded(payment_method, "Payment method", MAX_NAME_LENGTH)
            or DEFAULT_PAYMENT_METHOD,
            amount=priced.total,
            recorded_at=at,
            transaction_id=_bounded(transaction_id, "Transaction ID", MAX_NAME_LENGTH)
            or None,
        )
        return Order(
            id=None,
            customer=customer,
            items=list(priced.items),
            subtotal=priced.subtotal,
            tax=priced.tax,
            total=priced.total,
            payment=payment,
            notes=_bounded(notes, "Notes", MAX_TEXT_LENGTH) or "",
            created_at=at,
            updated_at=at,
        )

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def transition_to(
        self,
        target: OrderStatus,
        actor: str | None = None,
        reason: str | None = None,
        note: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Move the order to *target*, stamping attribution fields.

        Raises IllegalTransitionError (leaving the order untouched) when
        *target* is not a successor of the current status.  Re-sending an
        already-applied transition is rejected the same way.
        """
        if not self.can_transition_to(target):
            raise IllegalTransitionError(self.status.value, target.value)

        actor = _bounded(actor, "Actor", MAX_NAME_LENGTH) or DEFAULT_ACTOR
        reason = _bounded(reason, "Cancellation reason", MAX_TEXT_LENGTH)
        note = _bounded(note, "Note", MAX_TEXT_LENGTH) or None
        at = now or utcnow()

        if target is OrderStatus.ACCEPTED:
            self.accepted_at, self.accepted_by = at, actor
        elif target is OrderStatus.READY:
            self.ready_at, self.marked_ready_by = at, actor
        elif target is OrderStatus.COMPLETED:
            self.completed_at, self.completed_by = at, actor
        elif target is OrderStatus.CANCELLED:
            self.cancelled_at, self.cancelled_by = at, actor
            self.cancellation_reason = reason or DEFAULT_CANCELLATION_REASON

        self.history.append(StatusChange(self.status, target, actor, at, note))
        self.status = target
        self.updated_at = at

    def accept(self, actor: str | None = None, now: datetime | None = None) -> None:
        self.transition_to(OrderStatus.ACCEPTED, actor=actor, now=now)

    def mark_ready(self, actor: str | None = None, now: datetime | None = None) -> None:
        self.transition_to(OrderStatus.READY, actor=actor, now=now)

    def complete(self, actor: str | None = None, now: datetime | None = None) -> None:
        self.transition_to(OrderStatus.COMPLETED, actor=actor, now=now)

    def cancel(
        self,
        actor: str | None = None,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> None:
        self.transition_to(OrderStatus.CANCELLED, actor=actor, reason=reason, now=now)

    # --- Computed properties --------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def currency(self) -> str:
        return self.total.currency
