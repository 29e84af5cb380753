"""Logical clocks for ordering replica events.

- **LamportClock**: a single monotonic counter giving a total order
  consistent with causality.
- **VersionVector**: one counter per actor, enough to tell whether two
  histories are ordered or concurrent.
- **CausalOrder**: the result of comparing two version vectors.

Both clocks guard their state with a lock, so one instance can be shared
between threads of the same replica.

Usage::

    from convergent.causality import CausalOrder, LamportClock, VersionVector

    clock = LamportClock()
    ts = clock.send()       # Timestamp to embed in a message
    clock.receive(ts)       # max(local, remote) + 1

    a = VersionVector()
    b = VersionVector()
    a.increment("node-a")
    b.increment("node-b")
    assert a.compare(b) is CausalOrder.CONCURRENT
    a.merge(b)
    assert a.compare(b) is CausalOrder.GREATER
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import TYPE_CHECKING, Self

from convergent.crdt.errors import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


class CausalOrder(Enum):
    """How one clock relates to another."""

    EQUAL = "equal"
    GREATER = "greater"
    LESS = "less"
    CONCURRENT = "concurrent"


def _check_time(time: int) -> int:
    if not isinstance(time, int) or isinstance(time, bool) or time < 0:
        raise InvalidArgumentError(f"Logical times must be non-negative ints, got {time!r}")
    return time


# =============================================================================
# Lamport Clock
# =============================================================================


class LamportClock:
    """Monotonic counter for establishing a total order of events.

    Args:
        initial: Starting counter value (default 0).
    """

    __slots__ = ("_time", "_lock")

    def __init__(self, initial: int = 0):
        self._time = _check_time(initial)
        self._lock = threading.Lock()

    @property
    def time(self) -> int:
        """Current counter value."""
        return self._time

    def tick(self) -> int:
        """Record a local event and return the new time."""
        with self._lock:
            self._time += 1
            return self._time

    def send(self) -> int:
        """Advance the clock and return a timestamp for an outgoing message."""
        return self.tick()

    def receive(self, remote_ts: int) -> int:
        """Update the clock on receiving a message.

        Sets the counter to ``max(local, remote) + 1``.
        """
        _check_time(remote_ts)
        with self._lock:
            self._time = max(self._time, remote_ts) + 1
            return self._time

    def witness(self, remote_ts: int) -> None:
        """Move past ``remote_ts`` without recording a local event.

        Does nothing if ``remote_ts`` is not newer than the local time.
        """
        _check_time(remote_ts)
        with self._lock:
            if remote_ts > self._time:
                self._time = remote_ts + 1

    def dominates(self, other: LamportClock) -> bool:
        """True if this clock is strictly ahead of ``other``."""
        return self._time > other._time

    def __repr__(self) -> str:
        return f"LamportClock(time={self._time})"


# =============================================================================
# Version Vector
# =============================================================================


class VersionVector:
    """Per-actor logical times for comparing replica histories.

    Missing actors count as time 0, so ``{"a": 1}`` and
    ``{"a": 1, "b": 0}`` describe the same history.

    Args:
        dots: Optional initial ``actor -> time`` mapping. Copied.
    """

    __slots__ = ("_dots", "_lock")

    def __init__(self, dots: Mapping[str, int] | None = None):
        self._dots: dict[str, int] = {}
        self._lock = threading.Lock()
        for actor, time in (dots or {}).items():
            if _check_time(time):
                self._dots[actor] = time

    def get(self, actor: str) -> int:
        """Time recorded for ``actor``, 0 if it has none."""
        return self._dots.get(actor, 0)

    def increment(self, actor: str) -> int:
        """Advance ``actor`` by one and return its new time."""
        with self._lock:
            time = self._dots.get(actor, 0) + 1
            self._dots[actor] = time
            return time

    def witness(self, actor: str, time: int) -> bool:
        """Record ``time`` for ``actor`` if it is newer than what is held.

        Returns:
            True if the vector changed.
        """
        _check_time(time)
        with self._lock:
            if time <= self._dots.get(actor, 0):
                return False
            self._dots[actor] = time
            return True

    def merge(self, other: VersionVector) -> None:
        """Take the per-actor maximum of both vectors (in place)."""
        for actor, time in other.snapshot().items():
            self.witness(actor, time)

    def snapshot(self) -> dict[str, int]:
        """A copy of the ``actor -> time`` mapping."""
        with self._lock:
            return dict(self._dots)

    def compare(self, other: VersionVector) -> CausalOrder:
        """Causal order of this vector relative to ``other``."""
        mine, theirs = self.snapshot(), other.snapshot()
        ahead = behind = False
        for actor in mine.keys() | theirs.keys():
            local, remote = mine.get(actor, 0), theirs.get(actor, 0)
            if local > remote:
                ahead = True
            elif local < remote:
                behind = True
        if ahead and behind:
            return CausalOrder.CONCURRENT
        if ahead:
            return CausalOrder.GREATER
        if behind:
            return CausalOrder.LESS
        return CausalOrder.EQUAL

    def descends_from(self, other: VersionVector) -> bool:
        """True if this vector has seen everything ``other`` has, and more."""
        return self.compare(other) is CausalOrder.GREATER

    def happened_before(self, other: VersionVector) -> bool:
        """True if ``other`` descends from this vector."""
        return self.compare(other) is CausalOrder.LESS

    def is_concurrent_with(self, other: VersionVector) -> bool:
        """True if neither vector descends from the other."""
        return self.compare(other) is CausalOrder.CONCURRENT

    def subtract(self, other: VersionVector) -> VersionVector:
        """Entries of this vector that are ahead of the same actor in ``other``."""
        theirs = other.snapshot()
        return VersionVector(
            {actor: time for actor, time in self.snapshot().items() if time > theirs.get(actor, 0)}
        )

    def intersection(self, other: VersionVector) -> VersionVector:
        """Entries held with the same time by both vectors."""
        theirs = other.snapshot()
        return VersionVector(
            {actor: time for actor, time in self.snapshot().items() if theirs.get(actor) == time}
        )

    def is_empty(self) -> bool:
        """True if no actor has recorded an event."""
        return not self._dots

    def copy(self) -> Self:
        """Return an independent copy."""
        return type(self)(self.snapshot())

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return {"type": "VersionVector", "dots": self.snapshot()}

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Deserialize from a plain dict.

        Args:
            data: Dict produced by ``to_dict()``.
        """
        return cls(data["dots"])

    def __len__(self) -> int:
        return len(self._dots)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"VersionVector({self._dots!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionVector):
            return NotImplemented
        return self.compare(other) is CausalOrder.EQUAL
