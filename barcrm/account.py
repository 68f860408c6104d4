"""The points account aggregate: earned and used points plus pending events."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Protocol, runtime_checkable

from .errors import (
    CORRUPTED_EARNED_POINTS,
    CORRUPTED_USED_POINTS,
    INSUFFICIENT_EARNED_POINTS,
    INSUFFICIENT_POINTS,
    INVALID_ACCOUNT_ID,
    INVALID_MEMBER_ID,
    INVARIANT_VIOLATION,
    DomainError,
)
from .events import (
    PointsAccountCreatedEvent,
    PointsDeductedEvent,
    PointsEarnedEvent,
    PointsRecalculatedEvent,
)
from .identifiers import AccountId, MemberId
from .services import PointsCalculationService
from .shared import DomainEvent
from .values import ConversionRate, PointsAmount, PointsSource

_INT64_SPAN = 2**64
_INT64_OFFSET = 2**63


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _wrap_int64(value: int) -> int:
    """Reduce ``value`` to the signed 64-bit range the totals are stored in."""
    return (value + _INT64_OFFSET) % _INT64_SPAN - _INT64_OFFSET


@runtime_checkable
class PointsCalculableTransaction(Protocol):
    """A transaction whose spent amount can be turned into points."""

    def amount(self) -> int:
        """Amount spent, in whole currency units."""


class PointsAccount:
    """Aggregate root holding a member's earned and used points.

    Invariant: ``0 <= used_points <= earned_points``. Every change records
    a domain event, collected with :meth:`pull_events`.
    """

    def __init__(
        self,
        account_id: AccountId,
        member_id: MemberId,
        earned_points: PointsAmount,
        used_points: PointsAmount,
        created_at: datetime,
        updated_at: datetime,
    ) -> None:
        self._account_id = account_id
        self._member_id = member_id
        self._earned_points = earned_points
        self._used_points = used_points
        self._created_at = created_at
        self._updated_at = updated_at
        self._events: list[DomainEvent] = []

    @classmethod
    def create(cls, member_id: MemberId) -> PointsAccount:
        """Open a new, empty account for ``member_id``."""
        if member_id.is_empty():
            raise INVALID_MEMBER_ID.with_context(reason="memberID cannot be empty")
        now = _now()
        account = cls(AccountId.generate(), member_id, PointsAmount(0), PointsAmount(0), now, now)
        account._events.append(PointsAccountCreatedEvent(account._account_id, member_id))
        return account

    @classmethod
    def reconstruct(
        cls,
        account_id: AccountId,
        member_id: MemberId,
        earned_points: int,
        used_points: int,
        created_at: datetime,
        updated_at: datetime,
    ) -> PointsAccount:
        """Rebuild a stored account, validating the data; records no events."""
        if account_id.is_empty():
            raise INVALID_ACCOUNT_ID.with_context(reason="invalid account ID in database")
        if member_id.is_empty():
            raise INVALID_MEMBER_ID.with_context(reason="invalid member ID in database")
        try:
            earned = PointsAmount(earned_points)
        except DomainError as exc:
            raise CORRUPTED_EARNED_POINTS.with_context(
                value=earned_points, underlying_error=str(exc)
            ) from exc
        try:
            used = PointsAmount(used_points)
        except DomainError as exc:
            raise CORRUPTED_USED_POINTS.with_context(
                value=used_points, underlying_error=str(exc)
            ) from exc
        if used > earned:
            raise INVARIANT_VIOLATION.with_context(
                usedPoints=used_points, earnedPoints=earned_points
            )
        return cls(account_id, member_id, earned, used, created_at, updated_at)

    @property
    def account_id(self) -> AccountId:
        return self._account_id

    @property
    def member_id(self) -> MemberId:
        return self._member_id

    @property
    def earned_points(self) -> PointsAmount:
        return self._earned_points

    @property
    def used_points(self) -> PointsAmount:
        return self._used_points

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def available_points(self) -> PointsAmount:
        """Earned minus used points, computed on every call."""
        return self._earned_points.subtract(self._used_points)

    def pull_events(self) -> list[DomainEvent]:
        """Return the pending events and forget them."""
        events, self._events = self._events, []
        return events

    def earn_points(
        self,
        amount: PointsAmount,
        source: PointsSource,
        source_id: str,
        description: str,
    ) -> None:
        """Add ``amount`` to the earned points; zero is accepted."""
        self._earned_points = self._earned_points.add(amount)
        self._updated_at = _now()
        self._events.append(
            PointsEarnedEvent(self._account_id, amount, source, source_id, description)
        )
        self._assert_invariants()

    def deduct_points(self, amount: PointsAmount, reason: str) -> None:
        """Spend ``amount`` points; raise when the balance is insufficient."""
        available = self.available_points()
        if amount > available:
            raise INSUFFICIENT_POINTS.with_context(
                requested=amount.value, available=available.value, reason=reason
            )
        self._used_points = self._used_points.add(amount)
        self._updated_at = _now()
        self._events.append(PointsDeductedEvent(self._account_id, amount, reason))
        self._assert_invariants()

    def recalculate_points(
        self,
        transactions: Iterable[PointsCalculableTransaction],
        calculator: PointsCalculationService,
        rate: ConversionRate,
        reason: str,
    ) -> None:
        """Recompute earned points from ``transactions`` at ``rate``.

        Raises when the new total is negative (after overflow) or would fall
        below the points already used; the account is then left unchanged.
        """
        total = 0
        for transaction in transactions:
            points = calculator.calculate_from_amount(transaction.amount(), rate)
            total = _wrap_int64(total + points.value)
        new_earned = PointsAmount(total)
        if new_earned < self._used_points:
            raise INSUFFICIENT_EARNED_POINTS.with_context(
                newEarned=new_earned.value, used=self._used_points.value
            )
        old_earned = self._earned_points
        self._earned_points = new_earned
        self._updated_at = _now()
        self._events.append(
            PointsRecalculatedEvent(
                self._account_id,
                old_earned.value,
                new_earned.value,
                reason,
                rate.value,
                "",
            )
        )
        self._assert_invariants()

    def _assert_invariants(self) -> None:
        if self._used_points > self._earned_points:
            raise AssertionError(
                f"INVARIANT VIOLATION: usedPoints ({self._used_points.value}) > "
                f"earnedPoints ({self._earned_points.value}) for account {self._account_id}"
            )