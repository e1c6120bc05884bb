"""Tests for the order queries and the status board projection."""

import pytest

from canteen.application.create_order import CreateOrderHandler
from canteen.application.dto import CustomerSpec, LineItemRequest, PaymentSpec
from canteen.application.list_orders import ListOrdersHandler
from canteen.application.projection import project_by_status
from canteen.application.show_order import ShowOrderHandler
from canteen.application.transition_order import TransitionOrderHandler
from canteen.domain.exceptions import EntityNotFoundError, ValidationError
from canteen.domain.model.order import OrderStatus
from tests.fakes import FakeClock, FakeOrderRepository, make_catalog, make_order


def _seed() -> FakeOrderRepository:
    """Five orders: #1 pending, #2 accepted, #3 ready, #4 completed, #5 cancelled."""
    order_repo = FakeOrderRepository()
    clock = FakeClock()
    create = CreateOrderHandler(order_repo, make_catalog(), clock=clock)
    transition = TransitionOrderHandler(order_repo, clock=clock)
    paths = [
        [],
        ["accepted"],
        ["accepted", "ready"],
        ["accepted", "ready", "completed"],
        ["cancelled"],
    ]
    for i, path in enumerate(paths, start=1):
        result = create.handle(
            [LineItemRequest("Ginger Tea", i)],
            CustomerSpec(email=f"customer{i}@example.com"),
            PaymentSpec(status="success"),
        )
        for status in path:
            transition.handle(result.order_id, status)
    return order_repo


class TestProjection:

    def test_partitions_by_status(self):
        orders = [make_order(), make_order(), make_order()]
        orders[1].accept()
        orders[2].cancel()

        board = project_by_status(orders)

        assert board["pending"] == [orders[0]]
        assert board["accepted"] == [orders[1]]
        assert board["cancelled"] == [orders[2]]
        assert board["ready"] == []
        assert board.counts == {
            "pending": 1,
            "accepted": 1,
            "ready": 0,
            "completed": 0,
            "cancelled": 1,
            "total": 3,
        }

    def test_empty_input_has_every_bucket(self):
        board = project_by_status([])
        assert set(board.buckets) == {s.value for s in OrderStatus}
        assert board.total == 0

    def test_does_not_mutate_input(self):
        orders = [make_order()]
        project_by_status(orders)
        assert len(orders) == 1 and orders[0].status == OrderStatus.PENDING


class TestListOrders:

    def test_all_newest_first(self):
        listing = ListOrdersHandler(_seed()).handle()
        assert [o.id for o in listing.orders] == [5, 4, 3, 2, 1]
        assert listing.counts["total"] == 5
        assert listing.counts["completed"] == 1

    def test_filter_by_status(self):
        listing = ListOrdersHandler(_seed()).handle(status="ready")
        assert [o.id for o in listing.orders] == [3]
        assert listing.counts["ready"] == 1
        assert listing.counts["pending"] == 0

    def test_limit(self):
        listing = ListOrdersHandler(_seed()).handle(limit=2)
        assert [o.id for o in listing.orders] == [5, 4]

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError, match="Invalid status"):
            ListOrdersHandler(_seed()).handle(status="archived")

    @pytest.mark.parametrize("limit", [0, -1, 101])
    def test_limit_out_of_range(self, limit):
        with pytest.raises(ValidationError, match="Limit"):
            ListOrdersHandler(_seed()).handle(limit=limit)

    def test_board(self):
        board = ListOrdersHandler(_seed()).board()
        assert {status: [o.id for o in orders] for status, orders in board.buckets.items()} == {
            "pending": [1],
            "accepted": [2],
            "ready": [3],
            "completed": [4],
            "cancelled": [5],
        }


class TestShowOrder:

    def test_shows_attribution(self):
        dto = ShowOrderHandler(_seed()).handle(4)
        assert dto.status == "completed"
        assert set(dto.attribution) == {"accepted", "ready", "completed"}
        assert dto.attribution["ready"][1] == "staff"
        assert [h.to_status for h in dto.history] == ["accepted", "ready", "completed"]

    def test_cancelled_reason(self):
        dto = ShowOrderHandler(_seed()).handle(5)
        assert dto.cancellation_reason == "Payment failed"

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError, match="#42 not found"):
            ShowOrderHandler(FakeOrderRepository()).handle(42)
