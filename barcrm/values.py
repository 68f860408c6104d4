"""Value objects of the points context: amounts, rates, date ranges and sources."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import IntEnum

from .errors import (
    INVALID_CONVERSION_RATE,
    INVALID_DATE_RANGE,
    INVALID_POINTS_AMOUNT,
    NEGATIVE_POINTS_AMOUNT,
)

MAX_POINTS = 2**63 - 1
"""Largest number of points an amount may reach through addition."""

MIN_CONVERSION_RATE = 1
MAX_CONVERSION_RATE = 1000

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True, order=True)
class PointsAmount:
    """A non-negative, immutable number of points.

    Amounts compare and order by their value.
    """

    value: int = 0

    def __post_init__(self) -> None:
        if self.value < 0:
            raise NEGATIVE_POINTS_AMOUNT.with_context(
                attempted_value=self.value, constraint=">= 0"
            )

    def add(self, other: PointsAmount) -> PointsAmount:
        """Return the sum; raise a DomainError on overflow past MAX_POINTS."""
        if self.value > MAX_POINTS - other.value:
            raise INVALID_POINTS_AMOUNT.with_context(
                operation="add",
                operand1=self.value,
                operand2=other.value,
                error="integer overflow",
            )
        return PointsAmount(self.value + other.value)

    def subtract(self, other: PointsAmount) -> PointsAmount:
        """Return the difference; raise a DomainError if it would be negative."""
        if self.value < other.value:
            raise NEGATIVE_POINTS_AMOUNT.with_context(
                operation="subtract",
                minuend=self.value,
                subtrahend=other.value,
                result=self.value - other.value,
            )
        return PointsAmount(self.value - other.value)

    def is_zero(self) -> bool:
        """True when the amount is zero."""
        return self.value == 0


@dataclass(frozen=True)
class ConversionRate:
    """How many currency units earn one point; between 1 and 1000."""

    value: int

    def __post_init__(self) -> None:
        if not MIN_CONVERSION_RATE <= self.value <= MAX_CONVERSION_RATE:
            raise INVALID_CONVERSION_RATE.with_context(
                attempted_value=self.value,
                constraint=f"{MIN_CONVERSION_RATE}-{MAX_CONVERSION_RATE}",
            )


@dataclass(frozen=True)
class DateRange:
    """An inclusive span of time from ``start`` to ``end``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise INVALID_DATE_RANGE.with_context(
                start_date=self.start, end_date=self.end
            )

    def duration_days(self) -> int:
        """Number of days covered, counting both the first and the last day."""
        return int((self.end - self.start) / _ONE_DAY) + 1

    def contains(self, moment: datetime) -> bool:
        """True when ``moment`` lies within the range, boundaries included."""
        return self.start <= moment <= self.end

    def overlaps(self, other: DateRange) -> bool:
        """True when the ranges share time; merely touching does not count."""
        return self.start < other.end and other.start < self.end


class PointsSource(IntEnum):
    """Where points came from."""

    UNDEFINED = 0
    INVOICE = 1
    SURVEY = 2
    REDEMPTION = 3
    EXPIRATION = 4
    TRANSFER = 5

    def __str__(self) -> str:
        return f"PointsSource({self.name.title()})"


def source_label(value: int) -> str:
    """Debug label for any integer source value, ``PointsSource(Unknown)`` if unknown."""
    try:
        return str(PointsSource(value))
    except ValueError:
        return "PointsSource(Unknown)"


def is_valid_source(value: int) -> bool:
    """True for defined sources other than UNDEFINED."""
    return PointsSource.INVOICE <= value <= PointsSource.TRANSFER