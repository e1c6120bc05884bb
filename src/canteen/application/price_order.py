"""Application service: Price Order use case (quote, no persistence)."""

from __future__ import annotations

from canteen.application.dto import LineItemRequest, QuoteDTO
from canteen.application.mapping import quote_to_dto
from canteen.domain.model.catalog import Catalog
from canteen.domain.service.pricing_service import PricingService


class PriceOrderHandler:

    def __init__(self, catalog: Catalog) -> None:
        self._pricing = PricingService(catalog)

    def handle(self, items: list[LineItemRequest]) -> QuoteDTO:
        return quote_to_dto(self._pricing.price(items))
