"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from erms.domain.exceptions import ValidationError

SUPPORTED_CURRENCIES = ("LKR", "USD", "EUR")
DEFAULT_CURRENCY = "LKR"


@dataclass(frozen=True)
class Money:
    """Rental rate with currency.

    Uses Decimal to avoid floating-point rounding errors.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValidationError(
                f"Unsupported currency {self.currency!r} "
                f"(expected one of {', '.join(SUPPORTED_CURRENCIES)})"
            )

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency.upper())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class Quantity:
    """A positive integer number of equipment units."""

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


def as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class RentalPeriod:
    """Half-open time window ``[start, end)``.

    A window ending exactly where another starts does not overlap it.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.start >= self.end:
            raise ValidationError("Start date must be before end date")

    def overlaps(self, other: RentalPeriod) -> bool:
        return self.start < other.end and self.end > other.start

    @property
    def duration_hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"
