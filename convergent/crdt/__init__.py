"""State-based Conflict-free Replicated Data Types (CRDTs).

CRDTs are data structures that can be updated on several replicas
without coordination and still converge, because their merge operation
is commutative, associative, and idempotent.

Provided CRDTs:

- **GCounter**: Grow-only counter (increment only)
- **PNCounter**: Positive-negative counter (increment and decrement)
- **ORSet**: Observed-remove set (add-wins semantics)
- **LWWRegister**: Last-writer-wins register

Supporting pieces: the ``union`` / ``difference`` set helpers, tag
generators for OR-Set insertions, and a JSON snapshot codec.
"""

from convergent.crdt.codec import dumps, from_dict, loads
from convergent.crdt.errors import (
    DivergedReplicaError,
    InvalidArgumentError,
    ShapeMismatchError,
    StaleTimestampError,
)
from convergent.crdt.g_counter import GCounter
from convergent.crdt.lww_register import LWWRegister
from convergent.crdt.or_set import ORSet
from convergent.crdt.pn_counter import PNCounter
from convergent.crdt.protocol import CRDT
from convergent.crdt.set_ops import difference, union
from convergent.crdt.tags import ReplicaTagGenerator, TagGenerator, uuid_tags

__all__ = [
    "CRDT",
    "GCounter",
    "PNCounter",
    "ORSet",
    "LWWRegister",
    "InvalidArgumentError",
    "ShapeMismatchError",
    "StaleTimestampError",
    "DivergedReplicaError",
    "union",
    "difference",
    "TagGenerator",
    "ReplicaTagGenerator",
    "uuid_tags",
    "from_dict",
    "dumps",
    "loads",
]
