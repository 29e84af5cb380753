"""Unique tag generation for OR-Set insertions.

Every ``ORSet.add`` stamps the insertion with a tag that must never be
produced again by any replica. The set itself does not care how tags are
made, only that they are unique, so the generator is injected.

Two generators are provided:

- ``uuid_tags``: random UUID4 hex strings. The default.
- ``ReplicaTagGenerator``: ``"<replica>-<sequence>"`` strings. Unique as
  long as replica ids are unique, and deterministic, which keeps tests
  and simulations reproducible.
"""

from __future__ import annotations

import threading
import uuid
from typing import Protocol, runtime_checkable

_SEQ_LENGTH = 12


@runtime_checkable
class TagGenerator(Protocol):
    """Zero-argument callable returning a globally unique tag."""

    def __call__(self) -> str: ...


def uuid_tags() -> str:
    """Return a random UUID4 as a 32-character hex string."""
    return uuid.uuid4().hex


class ReplicaTagGenerator:
    """Replica-scoped monotonic tag generator.

    Tags look like ``"r0-00000000002A"``: the replica prefix followed by
    an uppercase hex sequence number zero-padded to 12 digits (it grows
    past 12 digits if needed). Safe to share between threads.

    Args:
        replica_id: Prefix that distinguishes this generator from the
            generators of other replicas.
        start: First sequence number to hand out.
    """

    def __init__(self, replica_id: object, start: int = 0):
        self._prefix = str(replica_id)
        self._next = start
        self._lock = threading.Lock()

    @property
    def issued(self) -> int:
        """Next sequence number that will be handed out."""
        return self._next

    def __call__(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return f"{self._prefix}-{value:0{_SEQ_LENGTH}X}"

    def __repr__(self) -> str:
        return f"ReplicaTagGenerator(prefix={self._prefix!r}, issued={self._next})"
