from datetime import datetime, timedelta, timezone

import pytest

from barcrm.account import PointsAccount
from barcrm.errors import (
    CORRUPTED_EARNED_POINTS,
    CORRUPTED_USED_POINTS,
    INSUFFICIENT_EARNED_POINTS,
    INSUFFICIENT_POINTS,
    INVALID_ACCOUNT_ID,
    INVALID_MEMBER_ID,
    INVARIANT_VIOLATION,
    NEGATIVE_POINTS_AMOUNT,
    DomainError,
)
from barcrm.identifiers import AccountId, MemberId
from barcrm.services import PointsCalculationService
from barcrm.values import ConversionRate, PointsAmount, PointsSource


class _Tx:
    def __init__(self, value):
        self._value = value

    def amount(self):
        return self._value


def _clean_account():
    account = PointsAccount.create(MemberId.generate())
    account.pull_events()
    return account


def _funded_account(points):
    account = _clean_account()
    account.earn_points(PointsAmount(points), PointsSource.INVOICE, "inv-1", "消費")
    return account


def test_create_valid_member():
    member_id = MemberId.generate()
    account = PointsAccount.create(member_id)
    assert account.member_id == member_id
    assert not account.account_id.is_empty()
    assert account.earned_points.value == 0
    assert account.used_points.value == 0


def test_create_empty_member_raises():
    with pytest.raises(DomainError) as exc:
        PointsAccount.create(MemberId())
    assert exc.value.matches(INVALID_MEMBER_ID)


def test_create_generates_unique_account_ids():
    member_id = MemberId.generate()
    first = PointsAccount.create(member_id)
    second = PointsAccount.create(member_id)
    assert len({first.account_id, second.account_id}) == 2


def test_create_publishes_account_created_event():
    account = PointsAccount.create(MemberId.generate())
    events = account.pull_events()
    assert len(events) == 1
    assert events[0].event_type() == "points.account_created"
    assert events[0].aggregate_id() == str(account.account_id)


def test_pull_events_clears_list():
    account = PointsAccount.create(MemberId.generate())
    assert len(account.pull_events()) == 1
    assert account.pull_events() == []


def test_earn_points_accumulates():
    account = _clean_account()
    account.earn_points(PointsAmount(100), PointsSource.INVOICE, "invoice-123", "購買商品")
    assert account.earned_points.value == 100
    assert account.used_points.value == 0


def test_earn_points_publishes_event():
    account = _clean_account()
    account.earn_points(PointsAmount(100), PointsSource.INVOICE, "invoice-123", "購買商品")
    events = account.pull_events()
    assert len(events) == 1
    assert events[0].event_type() == "points.earned"
    assert events[0].amount.value == 100
    assert events[0].source_id == "invoice-123"


def test_earn_points_multiple_times():
    account = _clean_account()
    account.earn_points(PointsAmount(100), PointsSource.INVOICE, "inv-1", "消費獲得")
    account.earn_points(PointsAmount(50), PointsSource.INVOICE, "inv-2", "消費獲得")
    account.earn_points(PointsAmount(25), PointsSource.SURVEY, "survey-1", "問卷獎勵")
    assert account.earned_points.value == 175


def test_earn_zero_points():
    account = _clean_account()
    account.earn_points(PointsAmount(0), PointsSource.INVOICE, "invoice-0", "零金額發票")
    assert account.earned_points.value == 0
    assert len(account.pull_events()) == 1


def test_earn_points_maintains_invariant():
    account = _funded_account(100)
    assert account.used_points.value <= account.earned_points.value


def test_available_points_new_account_is_zero():
    assert _clean_account().available_points().value == 0


def test_available_points_after_earning():
    account = _funded_account(100)
    assert account.available_points().value == 100
    assert account.available_points() == account.available_points()


def test_deduct_points_from_balance():
    account = _funded_account(100)
    account.pull_events()
    account.deduct_points(PointsAmount(30), "兌換商品")
    assert account.earned_points.value == 100
    assert account.used_points.value == 30
    assert account.available_points().value == 70


def test_deduct_points_insufficient_balance():
    account = _funded_account(50)
    with pytest.raises(DomainError) as exc:
        account.deduct_points(PointsAmount(100), "兌換商品")
    assert exc.value.matches(INSUFFICIENT_POINTS)
    assert exc.value.context["requested"] == 100
    assert exc.value.context["available"] == 50
    assert account.used_points.value == 0
    assert account.available_points().value == 50


def test_deduct_exact_amount():
    account = _funded_account(100)
    account.deduct_points(PointsAmount(100), "兌換商品")
    assert account.used_points.value == 100
    assert account.available_points().value == 0


def test_deduct_zero_amount():
    account = _funded_account(100)
    account.deduct_points(PointsAmount(0), "測試零扣減")
    assert account.used_points.value == 0


def test_deduct_publishes_event():
    account = _funded_account(100)
    account.pull_events()
    account.deduct_points(PointsAmount(30), "兌換商品")
    events = account.pull_events()
    assert len(events) == 1
    assert events[0].event_type() == "points.deducted"
    assert events[0].reason == "兌換商品"


def test_deduct_maintains_invariant():
    account = _funded_account(100)
    account.deduct_points(PointsAmount(30), "兌換商品")
    assert account.used_points.value <= account.earned_points.value


def test_recalculate_from_transactions():
    account = _clean_account()
    account.recalculate_points(
        [_Tx(350), _Tx(250)],
        PointsCalculationService(),
        ConversionRate(100),
        "test_scenario",
    )
    assert account.earned_points.value == 5
    assert account.used_points.value == 0


def test_recalculate_rejects_total_below_used():
    account = _funded_account(100)
    account.deduct_points(PointsAmount(80), "兌換商品")
    with pytest.raises(DomainError) as exc:
        account.recalculate_points(
            [_Tx(5000)], PointsCalculationService(), ConversionRate(100), "data_correction"
        )
    assert exc.value.matches(INSUFFICIENT_EARNED_POINTS)
    assert exc.value.message == INSUFFICIENT_EARNED_POINTS.message
    assert account.earned_points.value == 100


def test_recalculate_publishes_event():
    account = _funded_account(100)
    account.pull_events()
    account.recalculate_points(
        [_Tx(15000)], PointsCalculationService(), ConversionRate(100), "rule_change"
    )
    events = account.pull_events()
    assert len(events) == 1
    event = events[0]
    assert event.event_type() == "points.recalculated"
    assert event.old_points == 100
    assert event.new_points == 150
    assert event.reason == "rule_change"
    assert event.conversion_rate == 100
    assert event.triggered_by == ""


def test_recalculate_empty_transactions():
    account = _clean_account()
    account.recalculate_points([], PointsCalculationService(), ConversionRate(100), "migration")
    assert account.earned_points.value == 0


def test_recalculate_detects_overflow():
    max_int = 2**63 - 1
    account = _clean_account()
    with pytest.raises(DomainError) as exc:
        account.recalculate_points(
            [_Tx(max_int - 1000), _Tx(2000)],
            PointsCalculationService(),
            ConversionRate(1),
            "overflow_test",
        )
    assert exc.value.matches(NEGATIVE_POINTS_AMOUNT)
    assert account.earned_points.value == 0


def test_reconstruct_valid_data():
    account_id = AccountId.generate()
    member_id = MemberId.generate()
    created_at = datetime.now(timezone.utc) - timedelta(hours=24)
    updated_at = datetime.now(timezone.utc)
    account = PointsAccount.reconstruct(account_id, member_id, 150, 50, created_at, updated_at)
    assert account.account_id == account_id
    assert account.member_id == member_id
    assert account.earned_points.value == 150
    assert account.used_points.value == 50
    assert account.available_points().value == 100
    assert account.created_at == created_at
    assert account.updated_at == updated_at
    assert account.pull_events() == []


_VALID_ACCOUNT = AccountId.generate()
_VALID_MEMBER = MemberId.generate()


@pytest.mark.parametrize(
    "account_id, member_id, earned, used, expected",
    [
        (_VALID_ACCOUNT, _VALID_MEMBER, -100, 0, CORRUPTED_EARNED_POINTS),
        (_VALID_ACCOUNT, _VALID_MEMBER, 100, -50, CORRUPTED_USED_POINTS),
        (_VALID_ACCOUNT, _VALID_MEMBER, 50, 100, INVARIANT_VIOLATION),
        (AccountId(), _VALID_MEMBER, 100, 50, INVALID_ACCOUNT_ID),
        (_VALID_ACCOUNT, MemberId(), 100, 50, INVALID_MEMBER_ID),
    ],
    ids=[
        "negative_earned_points",
        "negative_used_points",
        "invariant_violation_data_corruption",
        "empty_account_id",
        "empty_member_id",
    ],
)
def test_reconstruct_invalid_inputs(account_id, member_id, earned, used, expected):
    now = datetime.now(timezone.utc)
    with pytest.raises(DomainError) as exc:
        PointsAccount.reconstruct(account_id, member_id, earned, used, now, now)
    assert exc.value.matches(expected)
    assert exc.value.message == expected.message