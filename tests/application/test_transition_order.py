"""Integration tests for the TransitionOrder use case."""

import threading

import pytest

from canteen.application.create_order import CreateOrderHandler
from canteen.application.dto import CustomerSpec, LineItemRequest, PaymentSpec
from canteen.application.locking import KeyedLock
from canteen.application.transition_order import TransitionOrderHandler
from canteen.domain.exceptions import (
    AuthorizationError,
    ConcurrencyConflictError,
    EntityNotFoundError,
    IllegalTransitionError,
    StoreUnavailableError,
    ValidationError,
)
from canteen.domain.model.order import OrderStatus
from canteen.domain.model.staff import Role, StaffMember
from canteen.domain.model.value_objects import EmailAddress
from canteen.domain.service.authorization import StaffRolePolicy
from tests.fakes import FakeClock, FakeOrderRepository, FakeStaffRepository, make_catalog


def _setup(policy=None):
    order_repo = FakeOrderRepository()
    clock = FakeClock()
    create = CreateOrderHandler(order_repo, make_catalog(), clock=clock)
    result = create.handle(
        [LineItemRequest("Plain Maggi", 2), LineItemRequest("Coca Cola", 1)],
        CustomerSpec(email="asha@example.com"),
        PaymentSpec(status="success"),
    )
    handler = TransitionOrderHandler(order_repo, policy=policy, clock=clock)
    return handler, order_repo, result.order_id


class TestTransitionHappyPath:

    def test_accept(self):
        handler, order_repo, order_id = _setup()
        result = handler.handle(order_id, "accepted", actor="ravi@counter.in")

        assert result.order_id == order_id
        assert result.status == "accepted"
        assert result.message == "Order status updated to accepted"

        order = order_repo.get_by_id(order_id)
        assert order.status == OrderStatus.ACCEPTED
        assert order.accepted_by == "ravi@counter.in"
        assert order.accepted_at is not None
        assert order.updated_at == order.accepted_at

    def test_full_lifecycle(self):
        handler, order_repo, order_id = _setup()
        handler.handle(order_id, OrderStatus.ACCEPTED)
        handler.handle(order_id, OrderStatus.READY, actor="meena@counter.in")
        handler.handle(order_id, OrderStatus.COMPLETED)

        order = order_repo.get_by_id(order_id)
        assert order.status == OrderStatus.COMPLETED
        assert order.accepted_by == "staff"
        assert order.marked_ready_by == "meena@counter.in"
        assert order.completed_by == "staff"
        assert order.accepted_at < order.ready_at < order.completed_at
        assert len(order.history) == 3

    def test_cancel_defaults(self):
        handler, order_repo, order_id = _setup()
        handler.handle(order_id, "cancelled")
        order = order_repo.get_by_id(order_id)
        assert order.cancellation_reason == "Payment failed"
        assert order.cancelled_by == "staff"

    def test_cancel_with_reason(self):
        handler, order_repo, order_id = _setup()
        handler.handle(order_id, "cancelled", actor="owner@counter.in", reason="Out of stock")
        order = order_repo.get_by_id(order_id)
        assert order.cancellation_reason == "Out of stock"
        assert order.cancelled_by == "owner@counter.in"


class TestTransitionRejections:

    def test_pending_to_ready_rejected(self):
        handler, order_repo, order_id = _setup()
        with pytest.raises(IllegalTransitionError) as info:
            handler.handle(order_id, "ready")
        assert (info.value.current, info.value.requested) == ("pending", "ready")
        assert order_repo.get_by_id(order_id).status == OrderStatus.PENDING

    def test_cancelled_order_is_terminal(self):
        handler, order_repo, order_id = _setup()
        handler.handle(order_id, "accepted")
        handler.handle(order_id, "cancelled")
        with pytest.raises(IllegalTransitionError) as info:
            handler.handle(order_id, "ready")
        assert info.value.current == "cancelled"
        assert order_repo.get_by_id(order_id).status == OrderStatus.CANCELLED

    def test_repeated_transition_rejected(self):
        handler, order_repo, order_id = _setup()
        handler.handle(order_id, "accepted")
        stamped = order_repo.get_by_id(order_id).accepted_at

        with pytest.raises(IllegalTransitionError) as info:
            handler.handle(order_id, "accepted")
        assert info.value.current == info.value.requested == "accepted"
        assert order_repo.get_by_id(order_id).accepted_at == stamped

    def test_unknown_order(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="#999 not found"):
            handler.handle(999, "accepted")

    def test_unknown_status_string(self):
        handler, _, order_id = _setup()
        with pytest.raises(ValidationError, match="Invalid status"):
            handler.handle(order_id, "done")

    def test_store_outage_leaves_order_unchanged(self):
        handler, order_repo, order_id = _setup()
        order_repo.available = False
        with pytest.raises(StoreUnavailableError):
            handler.handle(order_id, "accepted")
        order_repo.available = True
        assert order_repo.get_by_id(order_id).status == OrderStatus.PENDING


class TestTransitionConcurrency:

    def test_racing_accepts_one_wins(self):
        handler, order_repo, order_id = _setup()
        barrier = threading.Barrier(2)
        outcomes: list[str] = []

        def accept() -> None:
            barrier.wait()
            try:
                handler.handle(order_id, "accepted")
                outcomes.append("ok")
            except IllegalTransitionError:
                outcomes.append("illegal")

        threads = [threading.Thread(target=accept) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(outcomes) == ["illegal", "ok"]
        assert len(order_repo.get_by_id(order_id).history) == 1

    def test_conflict_from_store_reported_as_illegal_transition(self):
        handler, order_repo, order_id = _setup()

        # Another process accepts the order between our read and our write.
        original_update = order_repo.update

        def racing_update(order, expected_status):
            rival = order_repo.get_by_id(order_id)
            rival.accept(actor="other-till")
            original_update(rival, expected_status=OrderStatus.PENDING)
            return original_update(order, expected_status)

        order_repo.update = racing_update  # type: ignore[method-assign]

        with pytest.raises(IllegalTransitionError) as info:
            handler.handle(order_id, "accepted")
        assert info.value.current == "accepted"
        assert isinstance(info.value.__cause__, ConcurrencyConflictError)
        assert order_repo.get_by_id(order_id).accepted_by == "other-till"

    def test_shared_lock_registry_is_used_even_when_empty(self):
        locks = KeyedLock()
        _, order_repo, order_id = _setup()
        handler = TransitionOrderHandler(order_repo, locks=locks)
        seen: list[int] = []

        def update(order, expected_status):
            seen.append(len(locks))
            return FakeOrderRepository.update(order_repo, order, expected_status)

        order_repo.update = update  # type: ignore[method-assign]
        handler.handle(order_id, "accepted")

        assert seen == [1]
        assert len(locks) == 0


class TestTransitionAuthorization:

    def _policy(self):
        return StaffRolePolicy(FakeStaffRepository([
            StaffMember(EmailAddress("ravi@counter.in"), "Ravi", Role.STAFF),
            StaffMember(EmailAddress("asha@example.com"), "Asha", Role.CUSTOMER),
        ]))

    def test_registered_staff_allowed(self):
        handler, order_repo, order_id = _setup(policy=self._policy())
        handler.handle(order_id, "accepted", actor="ravi@counter.in")
        assert order_repo.get_by_id(order_id).status == OrderStatus.ACCEPTED

    def test_customer_rejected_and_order_unchanged(self):
        handler, order_repo, order_id = _setup(policy=self._policy())
        with pytest.raises(AuthorizationError):
            handler.handle(order_id, "cancelled", actor="asha@example.com")
        assert order_repo.get_by_id(order_id).status == OrderStatus.PENDING

    def test_anonymous_actor_rejected_when_roles_enforced(self):
        handler, _, order_id = _setup(policy=self._policy())
        with pytest.raises(AuthorizationError):
            handler.handle(order_id, "accepted")
