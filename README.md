# barcrm

The member points domain for a restaurant member management system.
It covers points accounts, the value objects they are made of, the
calculation of points from spending, and the domain events that a
change to an account records.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
barcrm
```

This prints the application name and its version, `1.0.0`. It takes no
options.

## Usage

```python
from decimal import Decimal

from barcrm.account import PointsAccount
from barcrm.identifiers import MemberId
from barcrm.services import PointsCalculationService
from barcrm.values import ConversionRate, PointsAmount, PointsSource

account = PointsAccount.create(MemberId.generate())

account.earn_points(PointsAmount(100), PointsSource.INVOICE, "invoice-123", "purchase")
account.deduct_points(PointsAmount(30), "redeem item")
print(account.available_points().value)   # 70

for event in account.pull_events():
    print(event.event_type())
# points.account_created
# points.earned
# points.deducted

service = PointsCalculationService()
points = service.calculate_from_amount(Decimal("350.00"), ConversionRate(100))
print(points.value)   # 3
```

Recalculating an account takes any objects with an `amount()` method
that returns the amount spent in whole currency units:

```python
class Sale:
    def __init__(self, spent):
        self.spent = spent

    def amount(self):
        return self.spent

account.recalculate_points([Sale(350), Sale(250)], service, ConversionRate(100), "rule_change")
print(account.earned_points.value)   # 5
```

## Modules

- `barcrm.account`: `PointsAccount` (`create`, `reconstruct`,
  `earn_points`, `deduct_points`, `recalculate_points`,
  `available_points`, `pull_events`, and read-only properties for ids,
  points and timestamps) and the `PointsCalculableTransaction` protocol.
- `barcrm.values`: `PointsAmount`, `ConversionRate`, `DateRange`,
  `PointsSource`, `source_label` and `is_valid_source`.
- `barcrm.services`: `PointsCalculationService`.
- `barcrm.events`: `PointsAccountCreatedEvent`, `PointsEarnedEvent`,
  `PointsDeductedEvent` and `PointsRecalculatedEvent`.
- `barcrm.identifiers`: `AccountId`, `MemberId`,
  `account_id_from_string` and `member_id_from_string`.
- `barcrm.shared`: `EntityId`, the `DomainEvent` protocol and the
  abstract `EventPublisher`, `EventHandler`, `EventSubscriber` and
  `TransactionManager`.
- `barcrm.errors`: `DomainError`, `ErrorCode` and the predefined errors.

## Rules

- A `PointsAmount` is never negative. Adding two amounts checks for
  overflow past 2**63 - 1, and subtracting below zero raises an error.
- A `ConversionRate` lies between 1 and 1000. Points are
  `floor(amount / rate)`, and a negative amount earns no points.
- An account never has more used points than earned points. A deduction
  larger than the available balance raises an error. So does a
  recalculation that would leave the earned total below the used total;
  the account is then left unchanged.
- `PointsAccount.reconstruct` rebuilds an account from stored values.
  It checks the same invariants and records no events.
- A `DateRange` includes both its ends. Two ranges that only touch at an
  edge do not overlap.
- Ids parse from the standard, braced, URN or compact UUID forms and
  print as lower-case hyphenated UUIDs. A default-constructed id is
  empty. Ids of different kinds never compare equal.
- `str(PointsSource.INVOICE)` is `PointsSource(Invoice)`;
  `source_label` gives `PointsSource(Unknown)` for undefined values.
  `is_valid_source` rejects `UNDEFINED`.

## Errors

Every domain failure raises a `DomainError` from `barcrm.errors`. The
error carries an `ErrorCode`, a message and read-only context values;
`with_context` returns a new error with more context. Use
`DomainError.matches` to test whether an error has the same code as a
predefined one, for example `errors.INSUFFICIENT_POINTS.matches(exc)`.

## What this package does not do

It holds the domain model only. It does not store accounts anywhere,
deliver events, or run a server: `EventPublisher`, `EventSubscriber`,
`EventHandler` and `TransactionManager` are abstract interfaces with no
implementation here, and events collected by `pull_events` are left for
the caller to handle.