"""Domain service: Pricing.

Turns a customer's item + quantity list into a priced line-item set using
the menu catalog.  Pricing is a pure function of the catalog and the
input; the only non-deterministic field is ``priced_at``, which is left
out of equality.

Validation is two-phase like the rest of the domain: every line is
checked first and all failures are reported together, so a request with
three bad lines yields one error naming all three.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from canteen.domain.exceptions import CatalogItemNotFoundError, ValidationError
from canteen.domain.model.catalog import Catalog
from canteen.domain.model.order import OrderLineItem, utcnow
from canteen.domain.model.value_objects import Money, Quantity

TAX_RATE = Decimal("0.05")
TOTAL_RATE = Decimal("1") + TAX_RATE


@dataclass(frozen=True)
class LineItemRequest:
    """Input: what the customer asked for (item name + quantity).

    Fields are left loosely typed because requests arrive from outside
    the process; the pricing service validates them.
    """

    name: object
    quantity: object


@dataclass(frozen=True)
class PricedOrder:
    items: tuple[OrderLineItem, ...]
    subtotal: Money
    tax: Money
    total: Money
    currency: str
    priced_at: datetime = field(default_factory=utcnow, compare=False)


def tax_for(subtotal: Money) -> Money:
    return subtotal.apply_rate(TAX_RATE)


def total_for(subtotal: Money) -> Money:
    # Rounded independently of tax_for; the two may disagree by one unit.
    return subtotal.apply_rate(TOTAL_RATE)


def _whole_quantity(raw: object) -> int | None:
    """Floor a numeric quantity, or None when it is not usable."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
        return None
    if isinstance(raw, float) and not math.isfinite(raw):
        return None
    if isinstance(raw, Decimal) and not raw.is_finite():
        return None
    if raw <= 0:
        return None
    whole = math.floor(raw)
    return whole if whole > 0 else None


class PricingService:

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    def price(
        self, requests: list[LineItemRequest], now: datetime | None = None
    ) -> PricedOrder:
        """Price *requests* against the catalog.

        Raises ValidationError listing every failing line when any line
        has a missing name, a missing or non-positive quantity, or a name
        the menu does not know.
        """
        if not requests:
            raise ValidationError("Items array cannot be empty")

        errors: list[str] = []
        items: list[OrderLineItem] = []

        for index, request in enumerate(requests, start=1):
            name = request.name
            if not isinstance(name, str) or not name.strip():
                errors.append(f"Item {index}: Missing or invalid name")
                continue

            quantity = _whole_quantity(request.quantity)
            if quantity is None:
                errors.append(f"Item {index} ({name}): Missing or invalid quantity")
                continue

            try:
                unit_price = self._catalog.lookup(name)
            except CatalogItemNotFoundError as exc:
                errors.append(f"Item {index}: {exc}")
                continue

            items.append(
                OrderLineItem(
                    name=name.strip(),
                    quantity=Quantity(quantity),
                    unit_price=unit_price,
                )
            )

        if errors:
            raise ValidationError(f"Validation errors: {'; '.join(errors)}", errors)

        subtotal = Money.zero(self._catalog.currency)
        for item in items:
            subtotal = subtotal + item.item_total

        return PricedOrder(
            items=tuple(items),
            subtotal=subtotal,
            tax=tax_for(subtotal),
            total=total_for(subtotal),
            currency=self._catalog.currency,
            priced_at=now or utcnow(),
        )

    def verify(self, priced: PricedOrder) -> None:
        """Check an externally supplied quote against the catalog.

        Used when an order arrives already priced.  Every line must name a
        menu item at its current menu price, line totals must add up to the
        subtotal, and tax/total must follow from the subtotal.
        """
        if not priced.items:
            raise ValidationError("Items array cannot be empty")

        errors: list[str] = []
        for index, item in enumerate(priced.items, start=1):
            try:
                menu_price = self._catalog.lookup(item.name)
            except CatalogItemNotFoundError as exc:
                errors.append(f"Item {index}: {exc}")
                continue
            if item.unit_price != menu_price:
                errors.append(
                    f"Item {index} ({item.name}): quoted at {item.unit_price}, "
                    f"menu price is {menu_price}"
                )
        if errors:
            raise ValidationError(f"Validation errors: {'; '.join(errors)}", errors)

        line_sum = Money.zero(priced.currency)
        for item in priced.items:
            line_sum = line_sum + item.item_total

        problems: list[str] = []
        if line_sum != priced.subtotal:
            problems.append(f"subtotal {priced.subtotal} != sum of items {line_sum}")
        if tax_for(priced.subtotal) != priced.tax:
            problems.append(f"tax {priced.tax} != {tax_for(priced.subtotal)}")
        if total_for(priced.subtotal) != priced.total:
            problems.append(f"total {priced.total} != {total_for(priced.subtotal)}")
        if problems:
            raise ValidationError(f"Inconsistent quote: {'; '.join(problems)}", problems)
