"""Domain errors of the points context, with codes and structured context."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    NEGATIVE_POINTS_AMOUNT = "POINTS_NEGATIVE"
    INVALID_POINTS_AMOUNT = "POINTS_INVALID"
    INSUFFICIENT_POINTS = "POINTS_INSUFFICIENT"
    INVALID_CONVERSION_RATE = "CONVERSION_RATE_INVALID"
    INVALID_ACCOUNT_ID = "ACCOUNT_ID_INVALID"
    INVALID_MEMBER_ID = "MEMBER_ID_INVALID"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"
    INVALID_DATE_RANGE = "DATE_RANGE_INVALID"
    INVALID_POINTS_SOURCE = "POINTS_SOURCE_INVALID"


class DomainError(Exception):
    """A business-rule failure carrying a code, a message and read-only context.

    Instances are immutable; ``with_context`` returns a new error.
    Two errors ``match`` when they share a code.
    """

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.code = ErrorCode(code)
        self.message = message
        self.context: Mapping[str, Any] = MappingProxyType(dict(context or {}))
        super().__init__(self.code, message, dict(self.context))

    def with_context(self, **kwargs: Any) -> DomainError:
        """Return a copy whose context is extended (or overridden) by ``kwargs``."""
        return DomainError(self.code, self.message, {**self.context, **kwargs})

    def matches(self, other: object) -> bool:
        """True when ``other`` is a DomainError with the same code."""
        return isinstance(other, DomainError) and other.code == self.code

    def __str__(self) -> str:
        head = f"[{self.code.value}] {self.message}"
        if not self.context:
            return head
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{head} (context: {details})"


NEGATIVE_POINTS_AMOUNT = DomainError(ErrorCode.NEGATIVE_POINTS_AMOUNT, "積分數量不能為負數")
INVALID_POINTS_AMOUNT = DomainError(ErrorCode.INVALID_POINTS_AMOUNT, "無效的積分數量")
INSUFFICIENT_POINTS = DomainError(ErrorCode.INSUFFICIENT_POINTS, "積分餘額不足")
INSUFFICIENT_EARNED_POINTS = DomainError(
    ErrorCode.INSUFFICIENT_POINTS, "重算後的累積積分不能小於已使用積分"
)

INVALID_CONVERSION_RATE = DomainError(
    ErrorCode.INVALID_CONVERSION_RATE, "轉換率必須在 1-1000 之間"
)

INVALID_ACCOUNT_ID = DomainError(ErrorCode.INVALID_ACCOUNT_ID, "無效的帳戶 ID")
INVALID_MEMBER_ID = DomainError(ErrorCode.INVALID_MEMBER_ID, "無效的會員 ID")
INVARIANT_VIOLATION = DomainError(
    ErrorCode.INVARIANT_VIOLATION,
    "資料完整性違反（usedPoints 不能大於 earnedPoints）",
)
CORRUPTED_EARNED_POINTS = DomainError(
    ErrorCode.INVALID_POINTS_AMOUNT, "資料庫中累積積分數據損壞"
)
CORRUPTED_USED_POINTS = DomainError(
    ErrorCode.INVALID_POINTS_AMOUNT, "資料庫中已使用積分數據損壞"
)

INVALID_DATE_RANGE = DomainError(
    ErrorCode.INVALID_DATE_RANGE, "無效的日期範圍（開始日期必須 <= 結束日期）"
)

INVALID_POINTS_SOURCE = DomainError(ErrorCode.INVALID_POINTS_SOURCE, "無效的積分來源")