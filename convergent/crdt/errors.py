"""Exceptions raised by the CRDT types.

All are ``ValueError`` subclasses, so callers that only care about bad
input can keep catching ``ValueError``.
"""


class InvalidArgumentError(ValueError):
    """An operation was called with an argument that breaks a CRDT invariant.

    Raised for negative or non-integer G-Counter increments, for counters
    built with an out-of-range replica id or bad slots, and for OR-Set
    snapshots whose tag collections are bare strings.
    """


class ShapeMismatchError(ValueError):
    """Two counter vectors have different replica counts.

    Merging such vectors would either drop data or index out of bounds,
    so it is rejected before any slot is touched.
    """


class StaleTimestampError(InvalidArgumentError):
    """A register write carried a timestamp older than the current one."""


class DivergedReplicaError(ValueError):
    """Two register replicas hold different values under the same timestamp.

    Last-writer-wins cannot pick a winner, so the merge is refused and
    the local register is left untouched.
    """
