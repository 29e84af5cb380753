"""Last-Writer-Wins Register (LWW-Register) CRDT.

A register holds a single value stamped with the time it was written.
Merging keeps whichever side was written last. Timestamps are
timezone-aware ``datetime`` objects, compared as instants.

Local writes may not travel back in time: ``set`` rejects a timestamp
older than the one already held. Two replicas holding different values
under the same timestamp have diverged, and merging them raises
``DivergedReplicaError`` instead of silently picking one.

Example::

    from datetime import UTC, datetime

    r = LWWRegister("node-a")
    r.set("hello", datetime(2024, 1, 1, tzinfo=UTC))
    assert r.value == "hello"
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Self

from convergent.crdt.errors import (
    DivergedReplicaError,
    InvalidArgumentError,
    StaleTimestampError,
)

logger = logging.getLogger(__name__)


def _check_timestamp(timestamp: Any) -> datetime:
    if not isinstance(timestamp, datetime) or timestamp.tzinfo is None:
        raise InvalidArgumentError(
            f"LWWRegister timestamps must be timezone-aware datetimes, got {timestamp!r}"
        )
    return timestamp


class LWWRegister:
    """Last-Writer-Wins register CRDT.

    Args:
        replica_id: Identifier for this replica.
        value: Initial value (default None).
        timestamp: Timestamp of the initial value. When omitted, a
            register created with a value is stamped with the current
            UTC time, and one created without a value has never been
            written.

    Raises:
        InvalidArgumentError: If ``timestamp`` is not a timezone-aware
            datetime.
    """

    __slots__ = ("_replica_id", "_value", "_timestamp")

    def __init__(
        self,
        replica_id: Any,
        value: Any = None,
        timestamp: datetime | None = None,
    ):
        if timestamp is None and value is not None:
            timestamp = datetime.now(UTC)
        self._replica_id = replica_id
        self._value = value
        self._timestamp = None if timestamp is None else _check_timestamp(timestamp)

    @property
    def replica_id(self) -> Any:
        """This replica's identifier."""
        return self._replica_id

    @property
    def value(self) -> Any:
        """Current value of the register."""
        return self._value

    @property
    def timestamp(self) -> datetime | None:
        """Timestamp of the current value, None if never written."""
        return self._timestamp

    def get(self) -> Any:
        """Return the current value (alias for ``value``)."""
        return self._value

    def set(self, value: Any, timestamp: datetime) -> None:
        """Write a value stamped with ``timestamp``.

        A timestamp equal to the current one overwrites it.

        Raises:
            StaleTimestampError: If ``timestamp`` is older than the
                current timestamp. The register is unchanged.
            InvalidArgumentError: If ``timestamp`` is not a timezone-aware
                datetime.
        """
        _check_timestamp(timestamp)
        if self._timestamp is not None and timestamp < self._timestamp:
            raise StaleTimestampError(
                f"Cannot set register to a value from the past: {timestamp.isoformat()} "
                f"< {self._timestamp.isoformat()}"
            )
        self._value = value
        self._timestamp = timestamp

    def merge(self, other: LWWRegister | Mapping[str, Any]) -> None:
        """Merge another register into this one (latest timestamp wins).

        Args:
            other: Another LWWRegister, or the dict from its ``to_dict()``.

        Raises:
            DivergedReplicaError: If both sides carry the same timestamp
                with different values.
        """
        if isinstance(other, Mapping):
            other = type(self).from_dict(other)
        if other._timestamp is None:
            return
        if self._timestamp is None or self._timestamp < other._timestamp:
            self._value = copy.deepcopy(other._value)
            self._timestamp = other._timestamp
        elif self._timestamp == other._timestamp and self._value != other._value:
            logger.debug(
                "LWWRegister %r diverged at %s: %r vs %r",
                self._replica_id,
                self._timestamp.isoformat(),
                self._value,
                other._value,
            )
            raise DivergedReplicaError(
                f"Registers hold different values at {self._timestamp.isoformat()}: "
                f"{self._value!r} vs {other._value!r}"
            )

    def copy(self) -> Self:
        """Return an independent copy of this register."""
        return type(self)(self._replica_id, copy.deepcopy(self._value), self._timestamp)

    def to_dict(self) -> dict:
        """Serialize to a plain dict with an ISO-8601 timestamp."""
        return {
            "type": "LWWRegister",
            "replica_id": self._replica_id,
            "value": self._value,
            "timestamp": self._timestamp.isoformat() if self._timestamp else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Deserialize from a plain dict.

        Args:
            data: Dict produced by ``to_dict()``.
        """
        raw = data.get("timestamp")
        timestamp = datetime.fromisoformat(raw) if raw else None
        return cls(data.get("replica_id"), data.get("value"), timestamp)

    def __repr__(self) -> str:
        return f"LWWRegister(replica_id={self._replica_id!r}, value={self._value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LWWRegister):
            return NotImplemented
        return self._value == other._value and self._timestamp == other._timestamp
