"""Small immutable values used by the catalog, pricing and orders.

Each one validates itself on construction, so a Money, Quantity or
EmailAddress that exists is always well formed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from canteen.domain.exceptions import ValidationError

CURRENCY = "INR"

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Money:
    """Monetary amount in whole currency units.

    The counter prices everything in whole rupees, so amounts are plain
    integers.  Fractional results (tax) are rounded by ``apply_rate``.
    """

    amount: int
    currency: str = CURRENCY

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(
                f"Money amount must be an integer, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def apply_rate(self, rate: Decimal) -> Money:
        """Scale by *rate* and round half away from zero to a whole unit."""
        scaled = (Decimal(self.amount) * rate).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        return Money(int(scaled), self.currency)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    @staticmethod
    def zero(currency: str = CURRENCY) -> Money:
        return Money(0, currency)


@dataclass(frozen=True)
class Quantity:
    """How many units of a menu item a line orders; always at least 1."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EmailAddress:
    """A customer or staff email, stored trimmed and lowercased."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError("Email address is required")
        normalized = self.value.strip().lower()
        if not _EMAIL_PATTERN.match(normalized):
            raise ValidationError(f"Invalid email address: {self.value!r}")
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value
