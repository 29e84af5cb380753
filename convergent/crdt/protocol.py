"""Protocol definition for state-based Conflict-free Replicated Data Types.

A CRDT replica can be mutated locally without coordination and later
reconciled with any other replica through ``merge``. Any implementation
must satisfy:

- **Commutativity**: ``merge(a, b) == merge(b, a)``
- **Associativity**: ``merge(a, merge(b, c)) == merge(merge(a, b), c)``
- **Idempotency**: ``merge(a, a) == a``

These properties guarantee that replicas converge to the same state
regardless of the order or number of merge operations.
"""

from __future__ import annotations

from typing import Any, Protocol, Self, runtime_checkable


@runtime_checkable
class CRDT(Protocol):
    """Protocol for all CRDT types.

    All CRDTs must support:
    - ``replica_id``: The owning replica.
    - ``value``: Read the current resolved value.
    - ``merge(other)``: Merge another replica's state (in-place).
    - ``copy()``: An independent deep copy.
    - ``to_dict()`` / ``from_dict()``: Snapshot serialization.
    """

    @property
    def replica_id(self) -> Any:
        """Identifier of the replica that owns this instance."""
        ...

    @property
    def value(self) -> Any:
        """The current resolved value of this CRDT."""
        ...

    def merge(self, other: Any) -> None:
        """Merge another replica's state into this one (in-place).

        Must be commutative, associative, and idempotent.

        Args:
            other: Another instance of the same CRDT type, or its raw
                state snapshot.
        """
        ...

    def copy(self) -> Self:
        """Return an independent deep copy of this replica."""
        ...

    def to_dict(self) -> dict:
        """Serialize this CRDT's state to a plain dict."""
        ...

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Deserialize a CRDT from a plain dict.

        Args:
            data: Dict produced by ``to_dict()``.
        """
        ...
