"""Abstract repository for Order aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Implementations must raise StoreUnavailableError when
the backing storage fails and ConcurrencyConflictError when a
conditional update loses a race.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from canteen.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> Order:
        """Persist a new order, assigning its ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return a detached copy of an order, or None if not found."""

    @abstractmethod
    def update(self, order: Order, expected_status: OrderStatus) -> Order:
        """Replace a stored order only if its stored status is still *expected_status*."""

    @abstractmethod
    def list_by_status(self, status: OrderStatus, limit: int) -> list[Order]:
        """Return up to *limit* orders in *status*, newest first by creation time."""

    @abstractmethod
    def list_all(self, limit: int) -> list[Order]:
        """Return up to *limit* orders, newest first by creation time."""
