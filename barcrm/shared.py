"""Building blocks shared by every bounded context: entity ids, events, units of work."""

from __future__ import annotations

import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Protocol, TypeVar, runtime_checkable

_NIL = uuid.UUID(int=0)
_HYPHENATED = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
_COMPACT = re.compile(r"[0-9a-fA-F]{32}")
_URN_PREFIX = "urn:uuid:"

_IdT = TypeVar("_IdT", bound="EntityId")
_T = TypeVar("_T")


def _parse_uuid(text: str) -> uuid.UUID:
    """Parse the standard, braced, URN or compact textual forms of a UUID."""
    candidate = text
    if len(text) == 36 + len(_URN_PREFIX) and text[: len(_URN_PREFIX)].lower() == _URN_PREFIX:
        candidate = text[len(_URN_PREFIX):]
    elif len(text) == 38 and text.startswith("{") and text.endswith("}"):
        candidate = text[1:-1]
    if not (_HYPHENATED.fullmatch(candidate) or _COMPACT.fullmatch(candidate)):
        raise ValueError(f"invalid UUID format: {text!r}")
    return uuid.UUID(candidate)


@dataclass(frozen=True)
class EntityId:
    """Immutable UUID-backed identifier.

    Subclass it once per entity kind: ids of different subclasses never
    compare equal, even when they wrap the same UUID. The default value
    is the nil UUID, which counts as empty.
    """

    value: uuid.UUID = _NIL

    @classmethod
    def generate(cls: type[_IdT]) -> _IdT:
        """Return a fresh random (version 4) id."""
        return cls(uuid.uuid4())

    @classmethod
    def parse(cls: type[_IdT], text: str, error_template: BaseException) -> _IdT:
        """Parse ``text`` as a UUID.

        On failure, raise ``error_template.with_context(input=..., parse_error=...)``
        when the template offers ``with_context``, otherwise the template itself.
        """
        try:
            value = _parse_uuid(text)
        except ValueError as exc:
            with_context = getattr(error_template, "with_context", None)
            if callable(with_context):
                raise with_context(input=text, parse_error=str(exc)) from exc
            raise error_template from exc
        return cls(value)

    def is_empty(self) -> bool:
        """True for the nil UUID."""
        return self.value == _NIL

    def __str__(self) -> str:
        return str(self.value)


@runtime_checkable
class DomainEvent(Protocol):
    """Something that happened to an aggregate."""

    @property
    def event_id(self) -> str:
        """Unique id of this event."""

    @property
    def occurred_at(self) -> datetime:
        """When the event happened."""

    def event_type(self) -> str:
        """Dotted name of the kind of event."""

    def aggregate_id(self) -> str:
        """Id of the aggregate the event belongs to."""


class EventPublisher(ABC):
    """Delivers domain events to the outside world."""

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publish one event."""

    @abstractmethod
    def publish_batch(self, events: Iterable[DomainEvent]) -> None:
        """Publish several events in order."""


class EventHandler(ABC):
    """Reacts to one type of domain event."""

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """Process the event."""

    @abstractmethod
    def event_type(self) -> str:
        """The event type this handler accepts."""


class EventSubscriber(ABC):
    """Registers handlers for event types."""

    @abstractmethod
    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Route events of ``event_type`` to ``handler``."""


class TransactionManager(ABC):
    """Runs work inside a storage transaction."""

    @abstractmethod
    def in_transaction(self, fn: Callable[[Any], _T]) -> _T:
        """Call ``fn`` with a transaction context; commit on success, roll back on error."""