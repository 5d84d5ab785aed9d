from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

DEFAULT_CURRENCY = "USD"
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Non-negative amount kept at full precision.

    Rounding to cents happens only through ``rounded()``, which callers use at
    display and order-total boundaries.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("amount must be >= 0")
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise ValueError("currency must be a 3-letter uppercase code")

    @classmethod
    def of(cls, value: Decimal | int | float | str, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(amount=Decimal(str(value)), currency=currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(amount=Decimal("0"), currency=currency)

    @classmethod
    def total(cls, values: Iterable[Money], currency: str = DEFAULT_CURRENCY) -> Money:
        result = cls.zero(currency)
        for value in values:
            result = result + value
        return result

    def __add__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def minus_floor_zero(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(amount=max(self.amount - other.amount, Decimal("0")), currency=self.currency)

    def times(self, factor: int | Decimal) -> Money:
        return Money(amount=self.amount * Decimal(factor), currency=self.currency)

    def percent(self, rate: Decimal) -> Money:
        return Money(amount=self.amount * rate / Decimal("100"), currency=self.currency)

    def min(self, other: Money) -> Money:
        self._check_currency(other)
        return self if self.amount <= other.amount else other

    def rounded(self) -> Money:
        return Money(amount=self.amount.quantize(_CENT, rounding=ROUND_HALF_UP), currency=self.currency)

    def is_zero(self) -> bool:
        return self.amount == 0

    def __lt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def _check_currency(self, other: Money) -> None:
        if other.currency != self.currency:
            raise ValueError("currency mismatch")
