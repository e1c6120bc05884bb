"""Application service: List Orders use case (query).

Reads the current state of the store; live updates are a transport
concern and are served by polling this query.
"""

from __future__ import annotations

from canteen.application.dto import OrderDTO, OrderListing
from canteen.application.mapping import order_to_dto
from canteen.application.projection import StatusBoard, project_by_status
from canteen.domain.exceptions import ValidationError
from canteen.domain.model.order import OrderStatus
from canteen.domain.repository.order_repository import OrderRepository

DEFAULT_LIMIT = 50
BOARD_LIMIT = 100
MAX_LIMIT = 100


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, status: str | None = None, limit: int = DEFAULT_LIMIT) -> OrderListing:
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {MAX_LIMIT}")

        if status is None:
            orders = self._order_repo.list_all(limit)
        else:
            orders = self._order_repo.list_by_status(OrderStatus.parse(status), limit)

        dtos = [order_to_dto(order) for order in orders]
        return OrderListing(orders=dtos, counts=project_by_status(dtos).counts)

    def board(self, limit: int = BOARD_LIMIT) -> StatusBoard[OrderDTO]:
        """Newest orders grouped by status, as shown on the staff dashboard."""
        return project_by_status(self.handle(limit=limit).orders)
