"""Grow-only counter (G-Counter) CRDT.

A G-Counter is a replicated counter that can only be incremented. The
state is a fixed-length vector with one slot per replica; replica *i*
only ever increments slot *i*. The value is the sum of all slots and
merge takes the element-wise maximum.

This is the foundational CRDT: PNCounter builds on two G-Counters.

Example::

    a = GCounter(0, total_replicas=2)
    b = GCounter(1, total_replicas=2)

    a.increment(5)
    b.increment(3)

    a.merge(b)
    assert a.value == 8  # 5 + 3
    assert a.state == [5, 3]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Self

from convergent.crdt.errors import InvalidArgumentError, ShapeMismatchError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def _check_replica(replica_id: int, total_replicas: int) -> None:
    if total_replicas < 1:
        raise InvalidArgumentError(f"total_replicas must be at least 1, got {total_replicas}")
    if not 0 <= replica_id < total_replicas:
        raise InvalidArgumentError(
            f"replica_id must be in [0, {total_replicas}), got {replica_id}"
        )


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_slots(vector: Sequence[int], label: str = "state") -> None:
    """Reject slots that are not non-negative ints (bools included)."""
    if not all(_is_count(slot) and slot >= 0 for slot in vector):
        raise InvalidArgumentError(f"{label} slots must be non-negative ints, got {list(vector)}")


def _coerce_vector(state: Sequence[int], total_replicas: int, label: str = "state") -> list[int]:
    """Copy a snapshot vector, rejecting wrong lengths and bad slots."""
    vector = list(state)
    if len(vector) != total_replicas:
        raise ShapeMismatchError(
            f"{label} has {len(vector)} slots, expected {total_replicas}"
        )
    _check_slots(vector, label)
    return vector


def _check_shape(local: list[int], remote: Sequence[int], label: str = "state") -> None:
    if len(remote) != len(local):
        logger.debug("Rejecting %s merge: %d remote slots vs %d local", label, len(remote), len(local))
        raise ShapeMismatchError(
            f"Cannot merge {label} with {len(remote)} slots into one with {len(local)}"
        )


def _merge_max(local: list[int], remote: Sequence[int]) -> None:
    """Raise each local slot to the remote slot where the remote is ahead."""
    for i, count in enumerate(remote):
        if count > local[i]:
            local[i] = count


class GCounter:
    """Grow-only counter CRDT.

    Each replica has its own monotonically increasing slot. The total
    value is the sum across all slots. Merge uses element-wise max,
    which is commutative, associative, and idempotent.

    Args:
        replica_id: Index of this replica, ``0 <= replica_id < total_replicas``.
        total_replicas: Number of replicas sharing this counter.
        state: Optional initial snapshot (one non-negative int per
            replica). Copied, never aliased. Defaults to all zeros.

    Raises:
        InvalidArgumentError: If ``replica_id`` is out of range or the
            snapshot has negative slots.
        ShapeMismatchError: If the snapshot length differs from
            ``total_replicas``.
    """

    __slots__ = ("_replica_id", "_state")

    def __init__(
        self,
        replica_id: int,
        total_replicas: int,
        state: Sequence[int] | None = None,
    ):
        _check_replica(replica_id, total_replicas)
        self._replica_id = replica_id
        if state is None:
            self._state = [0] * total_replicas
        else:
            self._state = _coerce_vector(state, total_replicas)

    @property
    def replica_id(self) -> int:
        """This replica's index."""
        return self._replica_id

    @property
    def total_replicas(self) -> int:
        """Number of slots in the state vector."""
        return len(self._state)

    @property
    def state(self) -> list[int]:
        """A copy of the per-replica slot vector."""
        return list(self._state)

    @property
    def value(self) -> int:
        """Total count across all replicas."""
        return sum(self._state)

    def increment(self, delta: int = 1) -> None:
        """Add ``delta`` to this replica's slot.

        Args:
            delta: Amount to add. Zero is accepted and changes nothing.

        Raises:
            InvalidArgumentError: If delta is negative or not an int.
                State is unchanged.
        """
        if not _is_count(delta):
            raise InvalidArgumentError(f"GCounter increments must be ints, got {delta!r}")
        if delta < 0:
            raise InvalidArgumentError(
                f"GCounter can only grow, negative increments are not allowed (got {delta})"
            )
        self._state[self._replica_id] += delta

    def node_value(self, replica_id: int) -> int:
        """Get a specific replica's contribution.

        Args:
            replica_id: The replica to query.
        """
        return self._state[replica_id]

    def merge(self, other: GCounter | Sequence[int]) -> None:
        """Merge another G-Counter into this one (element-wise max).

        Args:
            other: Another GCounter, or its raw state vector.

        Raises:
            ShapeMismatchError: If the vectors have different lengths.
                Nothing is merged in that case.
            InvalidArgumentError: If a raw vector holds a slot that is not
                a non-negative int. Nothing is merged in that case.
        """
        remote = other._state if isinstance(other, GCounter) else list(other)
        _check_shape(self._state, remote)
        if not isinstance(other, GCounter):
            _check_slots(remote)
        _merge_max(self._state, remote)

    def copy(self) -> Self:
        """Return an independent copy of this counter."""
        return type(self)(self._replica_id, len(self._state), self._state)

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return {
            "type": "GCounter",
            "replica_id": self._replica_id,
            "state": list(self._state),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Deserialize from a plain dict.

        Args:
            data: Dict produced by ``to_dict()``.
        """
        state = data["state"]
        return cls(data["replica_id"], len(state), state)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"GCounter(replica_id={self._replica_id}, value={self.value}, state={self._state})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GCounter):
            return NotImplemented
        return self._state == other._state
