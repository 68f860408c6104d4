"""Domain services of the points context."""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction

from .values import ConversionRate, PointsAmount


class PointsCalculationService:
    """Stateless conversion of spent money into points."""

    def calculate_from_amount(
        self, amount: Decimal | int, rate: ConversionRate
    ) -> PointsAmount:
        """Return ``floor(amount / rate)`` points; negative amounts earn nothing."""
        points = math.floor(Fraction(amount) / rate.value)
        return PointsAmount(max(points, 0))