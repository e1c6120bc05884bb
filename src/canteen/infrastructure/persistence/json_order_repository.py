"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from canteen.domain.exceptions import (
    ConcurrencyConflictError,
    EntityNotFoundError,
)
from canteen.domain.model.order import (
    Customer,
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentSnapshot,
    PaymentStatus,
    StatusChange,
)
from canteen.domain.model.value_objects import EmailAddress, Money, Quantity
from canteen.domain.repository.order_repository import OrderRepository
from canteen.infrastructure.persistence.json_file import JsonListFile

logger = logging.getLogger(__name__)


def _dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonListFile(file_path, "Order store")

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> Order:
        with self._file.locked():
            records = self._file.load()
            order.id = max((r["id"] for r in records), default=0) + 1
            records.append(self._to_raw(order))
            self._file.save(records)
        logger.debug("Stored order #%s in %s", order.id, self._file.path)
        return order

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def update(self, order: Order, expected_status: OrderStatus) -> Order:
        # The file lock spans the read-compare-write, so a writer in
        # another process or another repository instance cannot slip in.
        with self._file.locked():
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["id"] != order.id:
                    continue
                if raw["status"] != expected_status.value:
                    logger.info(
                        "Order #%s is %s on disk, expected %s",
                        order.id, raw["status"], expected_status.value,
                    )
                    raise ConcurrencyConflictError(
                        f"Order #{order.id} is {raw['status']}, "
                        f"expected {expected_status.value}"
                    )
                records[i] = self._to_raw(order)
                self._file.save(records)
                return order
        raise EntityNotFoundError(f"Order #{order.id} not found")

    def list_by_status(self, status: OrderStatus, limit: int) -> list[Order]:
        matching = [r for r in self._file.load() if r["status"] == status.value]
        return self._newest_first(matching, limit)

    def list_all(self, limit: int) -> list[Order]:
        return self._newest_first(self._file.load(), limit)

    # --- Serialization --------------------------------------------------------

    def _newest_first(self, records: list[dict], limit: int) -> list[Order]:
        orders = [self._to_domain(raw) for raw in records]
        orders.sort(key=lambda o: (o.created_at, o.id), reverse=True)
        return orders[:limit]

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "status": order.status.value,
            "currency": order.currency,
            "customer": {
                "email": str(order.customer.email),
                "display_name": order.customer.display_name,
                "first_name": order.customer.first_name,
                "last_name": order.customer.last_name,
                "phone": order.customer.phone,
            },
            "items": [
                {
                    "name": item.name,
                    "quantity": item.quantity.value,
                    "unit_price": item.unit_price.amount,
                    "item_total": item.item_total.amount,
                }
                for item in order.items
            ],
            "subtotal": order.subtotal.amount,
            "tax": order.tax.amount,
            "total": order.total.amount,
            "payment": {
                "status": order.payment.status.value,
                "method": order.payment.method,
                "transaction_id": order.payment.transaction_id,
                "amount": order.payment.amount.amount,
                "recorded_at": _dt(order.payment.recorded_at),
            },
            "notes": order.notes,
            "created_at": _dt(order.created_at),
            "updated_at": _dt(order.updated_at),
            "accepted_at": _dt(order.accepted_at),
            "accepted_by": order.accepted_by,
            "ready_at": _dt(order.ready_at),
            "marked_ready_by": order.marked_ready_by,
            "completed_at": _dt(order.completed_at),
            "completed_by": order.completed_by,
            "cancelled_at": _dt(order.cancelled_at),
            "cancelled_by": order.cancelled_by,
            "cancellation_reason": order.cancellation_reason,
            "history": [
                {
                    "from": change.from_status.value,
                    "to": change.to_status.value,
                    "actor": change.actor,
                    "at": _dt(change.at),
                    "note": change.note,
                }
                for change in order.history
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "INR")
        customer = raw["customer"]
        payment = raw["payment"]
        # itemTotal is derived, so the stored copy is ignored on load
        items = [
            OrderLineItem(
                name=i["name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(i["unit_price"], currency),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            customer=Customer(
                email=EmailAddress(customer["email"]),
                display_name=customer.get("display_name", ""),
                first_name=customer.get("first_name"),
                last_name=customer.get("last_name"),
                phone=customer.get("phone"),
            ),
            items=items,
            subtotal=Money(raw["subtotal"], currency),
            tax=Money(raw["tax"], currency),
            total=Money(raw["total"], currency),
            payment=PaymentSnapshot(
                status=PaymentStatus(payment["status"]),
                method=payment["method"],
                amount=Money(payment["amount"], currency),
                recorded_at=_parse_dt(payment["recorded_at"]),
                transaction_id=payment.get("transaction_id"),
            ),
            notes=raw.get("notes", ""),
            status=OrderStatus(raw["status"]),
            created_at=_parse_dt(raw["created_at"]),
            updated_at=_parse_dt(raw["updated_at"]),
            accepted_at=_parse_dt(raw.get("accepted_at")),
            accepted_by=raw.get("accepted_by"),
            ready_at=_parse_dt(raw.get("ready_at")),
            marked_ready_by=raw.get("marked_ready_by"),
            completed_at=_parse_dt(raw.get("completed_at")),
            completed_by=raw.get("completed_by"),
            cancelled_at=_parse_dt(raw.get("cancelled_at")),
            cancelled_by=raw.get("cancelled_by"),
            cancellation_reason=raw.get("cancellation_reason"),
            history=[
                StatusChange(
                    from_status=OrderStatus(h["from"]),
                    to_status=OrderStatus(h["to"]),
                    actor=h["actor"],
                    at=_parse_dt(h["at"]),
                    note=h.get("note"),
                )
                for h in raw.get("history", [])
            ],
        )

