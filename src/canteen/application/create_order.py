"""Application service: Create Order use case.

Orchestrates the flow between the catalog, the pricing service and the
order repository.  Nothing is persisted unless every line prices
successfully.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from canteen.application.dto import (
    CreateOrderResult,
    CustomerSpec,
    LineItemRequest,
    PaymentSpec,
)
from canteen.application.mapping import order_to_dto
from canteen.domain.exceptions import ValidationError
from canteen.domain.model.catalog import Catalog
from canteen.domain.model.order import Customer, Order, PaymentStatus, utcnow
from canteen.domain.repository.order_repository import OrderRepository
from canteen.domain.service.pricing_service import PricedOrder, PricingService

logger = logging.getLogger(__name__)

CREATED_MESSAGE = "Order created successfully and is now pending staff approval"


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog: Catalog,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._pricing = PricingService(catalog)
        self._clock = clock

    def handle(
        self,
        items: list[LineItemRequest],
        customer: CustomerSpec,
        payment: PaymentSpec,
        notes: str | None = None,
        quote: PricedOrder | None = None,
    ) -> CreateOrderResult:
        """Create a new pending order.

        Steps:
        1. Price the items (or check the caller's quote when pre-priced).
        2. Build the Customer and let the Order aggregate validate the rest.
        3. Persist and return a DTO.
        """
        now = self._clock()

        if quote is None:
            priced = self._pricing.price(items, now=now)
        else:
            self._pricing.verify(quote)
            priced = quote

        if payment is None or not payment.status:
            raise ValidationError("Payment details are required")

        order = Order.create(
            customer=Customer.create(
                email=customer.email,
                display_name=customer.display_name,
                first_name=customer.first_name,
                last_name=customer.last_name,
                phone=customer.phone,
            ),
            priced=priced,
            payment_status=PaymentStatus.parse(payment.status),
            payment_method=payment.method,
            transaction_id=payment.transaction_id,
            notes=notes,
            now=now,
        )
        order = self._order_repo.add(order)

        logger.info(
            "Order #%s created for %s: %d item(s), total %s",
            order.id, order.customer.email, len(order.items), order.total,
        )
        return CreateOrderResult(
            order_id=order.id,  # type: ignore[arg-type]
            order=order_to_dto(order),
            message=CREATED_MESSAGE,
        )
