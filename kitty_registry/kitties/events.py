"""Registry events and the sinks that receive them"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Protocol

from .kitty import AccountId, KittyId


class EventType(str, Enum):
    CREATED = "created"
    TRANSFERRED = "transferred"
    BRED = "bred"


@dataclass(frozen=True)
class Event:
    """Base class for registry events."""

    event_type: ClassVar[EventType]

    def to_dict(self) -> dict[str, Any]:
        return {"event_type": self.event_type.value}


@dataclass(frozen=True)
class Created(Event):
    """A kitty was created for owner."""

    owner: AccountId
    kitty_id: KittyId
    event_type: ClassVar[EventType] = EventType.CREATED

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["owner"] = self.owner
        d["kitty_id"] = self.kitty_id
        return d


@dataclass(frozen=True)
class Transferred(Event):
    """A kitty moved from one owner to another."""

    from_id: AccountId
    to_id: AccountId
    kitty_id: KittyId
    event_type: ClassVar[EventType] = EventType.TRANSFERRED

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["from_id"] = self.from_id
        d["to_id"] = self.to_id
        d["kitty_id"] = self.kitty_id
        return d


@dataclass(frozen=True)
class Bred(Event):
    """owner bred parent_a with parent_b, producing kitty_id."""

    owner: AccountId
    kitty_id: KittyId
    parent_a: KittyId
    parent_b: KittyId
    event_type: ClassVar[EventType] = EventType.BRED

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["owner"] = self.owner
        d["kitty_id"] = self.kitty_id
        d["parent_a"] = self.parent_a
        d["parent_b"] = self.parent_b
        return d


class EventSink(Protocol):
    """Fire-and-forget receiver of registry events."""

    def deposit(self, event: Event) -> None: ...


class MemoryEventSink:
    """Keeps deposited events in order. Useful for tests and embedding."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def deposit(self, event: Event) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()


class BufferedEventSink:
    """Holds events until flush() forwards them, or discard() drops them.

    The runtime wraps each call's events in one of these so a rejected
    call emits nothing.
    """

    def __init__(self, target: EventSink) -> None:
        self._target = target
        self._pending: list[Event] = []

    def deposit(self, event: Event) -> None:
        self._pending.append(event)

    def flush(self) -> list[Event]:
        flushed, self._pending = self._pending, []
        for event in flushed:
            self._target.deposit(event)
        return flushed

    def discard(self) -> None:
        self._pending.clear()
