"""Status board projection (query side).

Partitions an already-fetched list of orders by status for dashboards.
Pure: no repository access, no mutation of the input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

from canteen.domain.model.order import OrderStatus

T = TypeVar("T")


@dataclass(frozen=True)
class StatusBoard(Generic[T]):
    buckets: dict[str, list[T]]

    @property
    def counts(self) -> dict[str, int]:
        counts = {status: len(orders) for status, orders in self.buckets.items()}
        counts["total"] = self.total
        return counts

    @property
    def total(self) -> int:
        return sum(len(orders) for orders in self.buckets.values())

    def __getitem__(self, status: str) -> list[T]:
        return self.buckets[status]


def _status_of(order: object) -> str:
    status = getattr(order, "status")
    return status.value if isinstance(status, OrderStatus) else status


def project_by_status(orders: Iterable[T]) -> StatusBoard[T]:
    """Group *orders* (domain objects or DTOs) into one bucket per status.

    Every status gets a bucket, empty or not; input order is preserved
    inside each bucket.
    """
    buckets: dict[str, list[T]] = {status.value: [] for status in OrderStatus}
    for order in orders:
        buckets[_status_of(order)].append(order)
    return StatusBoard(buckets)
