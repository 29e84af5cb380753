"""convergent: state-based CRDTs for Python.

Replicas of a G-Counter, PN-Counter, OR-Set or LWW-Register can be mutated
independently and reconciled later with ``merge``, in any order and any
number of times, always converging to the same state.

Example::

    from convergent import GCounter

    a = GCounter(0, total_replicas=2)
    b = GCounter(1, total_replicas=2)
    a.increment(4)
    b.increment(1)
    a.merge(b)
    b.merge(a)
    assert a.value == b.value == 5

The library is silent by default. Call ``enable_console_logging()`` or
``configure_from_env()`` to see what it is doing.
"""

import logging

from convergent.crdt import (
    CRDT,
    DivergedReplicaError,
    GCounter,
    InvalidArgumentError,
    LWWRegister,
    ORSet,
    PNCounter,
    ReplicaTagGenerator,
    ShapeMismatchError,
    StaleTimestampError,
    TagGenerator,
    difference,
    dumps,
    from_dict,
    loads,
    union,
    uuid_tags,
)
from convergent.causality import CausalOrder, LamportClock, VersionVector
from convergent.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
)
from convergent.replication import ReplicaGroup, ReplicaGroupStats, state_hash

logging.getLogger("convergent").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # CRDTs
    "CRDT",
    "GCounter",
    "PNCounter",
    "ORSet",
    "LWWRegister",
    # Causality
    "CausalOrder",
    "LamportClock",
    "VersionVector",
    # Errors
    "InvalidArgumentError",
    "ShapeMismatchError",
    "StaleTimestampError",
    "DivergedReplicaError",
    # Set helpers
    "union",
    "difference",
    # Tags
    "TagGenerator",
    "ReplicaTagGenerator",
    "uuid_tags",
    # Codec
    "from_dict",
    "dumps",
    "loads",
    # Replication
    "ReplicaGroup",
    "ReplicaGroupStats",
    "state_hash",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
]
