"""Integration tests for the CreateOrder use case.

Uses in-memory fake repositories, no file I/O.
"""

from dataclasses import replace

import pytest

from canteen.application.create_order import CREATED_MESSAGE, CreateOrderHandler
from canteen.application.dto import CustomerSpec, LineItemRequest, PaymentSpec
from canteen.domain.exceptions import StoreUnavailableError, ValidationError
from canteen.domain.model.order import OrderLineItem, OrderStatus
from canteen.domain.model.value_objects import Money, Quantity
from canteen.domain.service.pricing_service import PricedOrder, PricingService
from tests.fakes import FakeClock, FakeOrderRepository, make_catalog

CUSTOMER = CustomerSpec(email="Asha@Example.com", first_name="Asha", last_name="Rao")
PAID = PaymentSpec(status="success", transaction_id="txn_123456")


def _setup() -> tuple[CreateOrderHandler, FakeOrderRepository]:
    order_repo = FakeOrderRepository()
    handler = CreateOrderHandler(order_repo, make_catalog(), clock=FakeClock())
    return handler, order_repo


class TestCreateOrderHappyPath:

    def test_creates_priced_pending_order(self):
        handler, _ = _setup()
        result = handler.handle(
            [LineItemRequest("Plain Maggi", 2), LineItemRequest("Coca Cola", 1)],
            CUSTOMER,
            PAID,
        )
        assert result.message == CREATED_MESSAGE
        assert result.order.status == "pending"
        assert (result.order.subtotal, result.order.tax, result.order.total) == (135, 7, 142)
        assert result.order.customer_email == "asha@example.com"
        assert result.order.customer_name == "Asha Rao"
        assert result.order.payment_method == "UPI"

    def test_assigns_order_id(self):
        handler, _ = _setup()
        result = handler.handle([LineItemRequest("Pasta", 1)], CUSTOMER, PAID)
        assert result.order_id == 1
        assert result.order.id == 1

    def test_persists_order(self):
        handler, order_repo = _setup()
        result = handler.handle([LineItemRequest("Pasta", 1)], CUSTOMER, PAID, notes="No onion")
        saved = order_repo.get_by_id(result.order_id)
        assert saved is not None
        assert saved.status == OrderStatus.PENDING
        assert saved.notes == "No onion"
        assert saved.payment.transaction_id == "txn_123456"

    def test_sequential_ids(self):
        handler, _ = _setup()
        first = handler.handle([LineItemRequest("Pasta", 1)], CUSTOMER, PAID)
        second = handler.handle([LineItemRequest("Pasta", 1)], CUSTOMER, PAID)
        assert second.order_id == first.order_id + 1


class TestCreateOrderPrePriced:

    def test_quote_is_used_as_is(self):
        handler, order_repo = _setup()
        quote = PricingService(make_catalog()).price([LineItemRequest("Cheese Maggi", 2)])
        result = handler.handle([], CUSTOMER, PAID, quote=quote)
        assert result.order.total == quote.total.amount
        assert order_repo.get_by_id(result.order_id).items == list(quote.items)

    def test_inconsistent_quote_rejected(self):
        handler, order_repo = _setup()
        quote = PricingService(make_catalog()).price([LineItemRequest("Cheese Maggi", 2)])
        with pytest.raises(ValidationError, match="Inconsistent quote"):
            handler.handle([], CUSTOMER, PAID, quote=replace(quote, tax=Money(0)))
        assert order_repo.list_all(10) == []

    def test_quote_with_forged_price_rejected(self):
        handler, order_repo = _setup()
        line = OrderLineItem("Plain Maggi", Quantity(10), Money(1))
        forged = PricedOrder((line,), Money(10), Money(1), Money(11), "INR")
        with pytest.raises(ValidationError, match="menu price"):
            handler.handle([], CUSTOMER, PAID, quote=forged)
        assert order_repo.list_all(10) == []

    def test_quote_with_off_menu_item_rejected(self):
        handler, order_repo = _setup()
        line = OrderLineItem("Free Lunch", Quantity(1), Money(0))
        forged = PricedOrder((line,), Money(0), Money(0), Money(0), "INR")
        with pytest.raises(ValidationError, match="not found in menu"):
            handler.handle([], CUSTOMER, PAID, quote=forged)
        assert order_repo.list_all(10) == []


class TestCreateOrderValidation:

    def test_unknown_item_creates_nothing(self):
        handler, order_repo = _setup()
        with pytest.raises(ValidationError, match='"Invalid Item" not found in menu'):
            handler.handle([LineItemRequest("Invalid Item", 1)], CUSTOMER, PAID)
        assert order_repo.list_all(10) == []

    def test_one_bad_line_rejects_whole_order(self):
        handler, order_repo = _setup()
        with pytest.raises(ValidationError):
            handler.handle(
                [LineItemRequest("Pasta", 1), LineItemRequest("Pasta", -1)],
                CUSTOMER,
                PAID,
            )
        assert order_repo.list_all(10) == []

    def test_missing_email_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Email address is required"):
            handler.handle([LineItemRequest("Pasta", 1)], CustomerSpec(email=""), PAID)

    def test_unknown_payment_status_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Payment status"):
            handler.handle(
                [LineItemRequest("Pasta", 1)], CUSTOMER, PaymentSpec(status="refunded")
            )

    def test_missing_payment_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Payment details are required"):
            handler.handle([LineItemRequest("Pasta", 1)], CUSTOMER, PaymentSpec(status=""))


class TestCreateOrderStoreFailure:

    def test_store_outage_surfaces(self):
        handler, order_repo = _setup()
        order_repo.available = False
        with pytest.raises(StoreUnavailableError):
            handler.handle([LineItemRequest("Pasta", 1)], CUSTOMER, PAID)
