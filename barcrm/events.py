"""Domain events raised by the points account aggregate."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .identifiers import AccountId, MemberId
from .values import PointsAmount, PointsSource


def _new_event_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PointsAccountCreatedEvent:
    """A points account was opened for a member."""

    account_id: AccountId
    member_id: MemberId
    event_id: str = field(default_factory=_new_event_id)
    occurred_at: datetime = field(default_factory=_now)

    def event_type(self) -> str:
        return "points.account_created"

    def aggregate_id(self) -> str:
        return str(self.account_id)


@dataclass(frozen=True)
class PointsEarnedEvent:
    """Points were added to an account."""

    account_id: AccountId
    amount: PointsAmount
    source: PointsSource
    source_id: str
    description: str
    event_id: str = field(default_factory=_new_event_id)
    occurred_at: datetime = field(default_factory=_now)

    def event_type(self) -> str:
        return "points.earned"

    def aggregate_id(self) -> str:
        return str(self.account_id)


@dataclass(frozen=True)
class PointsDeductedEvent:
    """Points were spent from an account."""

    account_id: AccountId
    amount: PointsAmount
    reason: str
    event_id: str = field(default_factory=_new_event_id)
    occurred_at: datetime = field(default_factory=_now)

    def event_type(self) -> str:
        return "points.deducted"

    def aggregate_id(self) -> str:
        return str(self.account_id)


@dataclass(frozen=True)
class PointsRecalculatedEvent:
    """An account's earned points were recomputed, with the audit details."""

    account_id: AccountId
    old_points: int
    new_points: int
    reason: str
    conversion_rate: int
    triggered_by: str = ""
    event_id: str = field(default_factory=_new_event_id)
    occurred_at: datetime = field(default_factory=_now)

    def event_type(self) -> str:
        return "points.recalculated"

    def aggregate_id(self) -> str:
        return str(self.account_id)