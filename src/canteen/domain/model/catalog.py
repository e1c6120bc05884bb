"""Menu catalog: the immutable name -> unit price table.

The catalog is loaded once at process start and never changes while the
process runs.  Orders copy the unit price into their line items, so a
later menu reload cannot affect existing orders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from canteen.domain.exceptions import CatalogItemNotFoundError, ValidationError
from canteen.domain.model.value_objects import CURRENCY, Money


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    unit_price: Money

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("Menu item name is required")
        object.__setattr__(self, "name", self.name.strip())


class Catalog:
    """Exact-match lookup of menu items.

    Names are canonical strings: matching trims surrounding whitespace
    but is otherwise case-sensitive.
    """

    def __init__(self, entries: Iterable[CatalogEntry], currency: str = CURRENCY) -> None:
        self._currency = currency
        self._entries: dict[str, CatalogEntry] = {}
        for entry in entries:
            if entry.unit_price.currency != currency:
                raise ValidationError(
                    f"Menu item '{entry.name}' is priced in "
                    f"{entry.unit_price.currency}, expected {currency}"
                )
            if entry.name in self._entries:
                raise ValidationError(f"Duplicate menu item '{entry.name}'")
            self._entries[entry.name] = entry

    @classmethod
    def from_prices(cls, prices: Mapping[str, int], currency: str = CURRENCY) -> Catalog:
        return cls(
            (CatalogEntry(name, Money(price, currency)) for name, price in prices.items()),
            currency=currency,
        )

    @property
    def currency(self) -> str:
        return self._currency

    def get(self, name: str) -> CatalogEntry | None:
        """Return the entry for *name*, or None."""
        if not isinstance(name, str):
            return None
        return self._entries.get(name.strip())

    def lookup(self, name: str) -> Money:
        """Return the unit price for *name*.

        Raises CatalogItemNotFoundError when the menu has no such item.
        """
        entry = self.get(name)
        if entry is None:
            raise CatalogItemNotFoundError(name.strip() if isinstance(name, str) else str(name))
        return entry.unit_price

    def entries(self) -> list[CatalogEntry]:
        return sorted(self._entries.values(), key=lambda e: e.name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._entries)
