"""Positive-Negative counter (PN-Counter) CRDT.

A PN-Counter supports both increment and decrement by combining two
G-Counters: one for increments (``inc``) and one for the magnitudes of
decrements (``dec``). The value is ``sum(inc) - sum(dec)``.

Example::

    c = PNCounter(0, total_replicas=1)
    c.increment(10)
    c.decrement(3)
    assert c.value == 7
    assert c.state == {"inc": [10], "dec": [3]}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Self

from convergent.crdt.errors import InvalidArgumentError, ShapeMismatchError
from convergent.crdt.g_counter import GCounter, _check_shape, _check_slots, _is_count

if TYPE_CHECKING:
    from collections.abc import Sequence


class PNCounter:
    """Positive-Negative counter CRDT.

    Wraps two G-Counters: ``_inc`` for positive increments and ``_dec``
    for negative ones. Each merges independently with element-wise max;
    the value is recomputed on every read.

    Args:
        replica_id: Index of this replica, ``0 <= replica_id < total_replicas``.
        total_replicas: Number of replicas sharing this counter.
        state: Optional ``{"inc": [...], "dec": [...]}`` snapshot. A
            missing side defaults to zeros.
    """

    __slots__ = ("_replica_id", "_inc", "_dec")

    def __init__(
        self,
        replica_id: int,
        total_replicas: int,
        state: Mapping[str, Sequence[int]] | None = None,
    ):
        state = state or {}
        self._replica_id = replica_id
        self._inc = GCounter(replica_id, total_replicas, state.get("inc"))
        self._dec = GCounter(replica_id, total_replicas, state.get("dec"))

    @property
    def replica_id(self) -> int:
        """This replica's index."""
        return self._replica_id

    @property
    def total_replicas(self) -> int:
        """Number of replicas sharing this counter."""
        return self._inc.total_replicas

    @property
    def value(self) -> int:
        """Net count (increments - decrements)."""
        return self._inc.value - self._dec.value

    @property
    def increments(self) -> int:
        """Total increments across all replicas."""
        return self._inc.value

    @property
    def decrements(self) -> int:
        """Total decrements across all replicas."""
        return self._dec.value

    @property
    def inc(self) -> list[int]:
        """Copy of the per-replica increment vector."""
        return self._inc.state

    @property
    def dec(self) -> list[int]:
        """Copy of the per-replica decrement vector."""
        return self._dec.state

    @property
    def state(self) -> dict[str, list[int]]:
        """Snapshot in the ``{"inc": [...], "dec": [...]}`` shape."""
        return {"inc": self._inc.state, "dec": self._dec.state}

    def increment(self, delta: int = 1) -> None:
        """Apply a signed change to this replica's slots.

        Positive deltas go to ``inc``, negative deltas add their magnitude
        to ``dec``, and zero is a no-op. Any int is accepted.

        Raises:
            InvalidArgumentError: If delta is not an int.
        """
        if not _is_count(delta):
            raise InvalidArgumentError(f"PNCounter increments must be ints, got {delta!r}")
        if delta > 0:
            self._inc.increment(delta)
        elif delta < 0:
            self._dec.increment(-delta)

    def decrement(self, delta: int = 1) -> None:
        """Equivalent to ``increment(-delta)``."""
        self.increment(-delta)

    def merge(self, other: PNCounter | Mapping[str, Sequence[int]]) -> None:
        """Merge another PN-Counter into this one.

        Both vectors are shape-checked before either is touched, then
        each is merged with the G-Counter element-wise max rule.

        Args:
            other: Another PNCounter, or an ``{"inc", "dec"}`` snapshot.

        Raises:
            ShapeMismatchError: If either vector has the wrong length, or
                ``other`` is neither a PNCounter nor a mapping.
            InvalidArgumentError: If a snapshot slot is not a non-negative int.
        """
        if isinstance(other, PNCounter):
            remote_inc, remote_dec = other._inc.state, other._dec.state
        elif not isinstance(other, Mapping):
            raise ShapeMismatchError(
                f"Cannot merge {type(other).__name__} into a PNCounter"
            )
        else:
            try:
                remote_inc, remote_dec = list(other["inc"]), list(other["dec"])
            except KeyError as e:
                raise ShapeMismatchError(f"PNCounter snapshot is missing {e.args[0]!r}") from e

        _check_shape(self._inc.state, remote_inc, "inc")
        _check_shape(self._dec.state, remote_dec, "dec")
        _check_slots(remote_inc, "inc")
        _check_slots(remote_dec, "dec")
        self._inc.merge(remote_inc)
        self._dec.merge(remote_dec)

    def copy(self) -> Self:
        """Return an independent copy of this counter."""
        return type(self)(self._replica_id, self.total_replicas, self.state)

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return {
            "type": "PNCounter",
            "replica_id": self._replica_id,
            "inc": self._inc.state,
            "dec": self._dec.state,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Deserialize from a plain dict.

        Args:
            data: Dict produced by ``to_dict()``.
        """
        return cls(
            data["replica_id"],
            len(data["inc"]),
            {"inc": data["inc"], "dec": data["dec"]},
        )

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"PNCounter(replica_id={self._replica_id}, value={self.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PNCounter):
            return NotImplemented
        return self._inc == other._inc and self._dec == other._dec
