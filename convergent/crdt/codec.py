"""Type-tagged snapshot codec for exchanging replica state.

Every CRDT serializes itself with ``to_dict()``, which carries a
``"type"`` field. This module dispatches on that field to rebuild the
right class, and wraps the dict form in JSON for callers that move
snapshots over a transport of their own.

Example::

    text = dumps(counter)
    remote = loads(text)
    counter.merge(remote)
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from convergent.crdt.g_counter import GCounter
from convergent.crdt.lww_register import LWWRegister
from convergent.crdt.or_set import ORSet
from convergent.crdt.pn_counter import PNCounter

if TYPE_CHECKING:
    from convergent.crdt.protocol import CRDT

logger = logging.getLogger(__name__)

CRDT_TYPES: dict[str, type] = {
    "GCounter": GCounter,
    "PNCounter": PNCounter,
    "ORSet": ORSet,
    "LWWRegister": LWWRegister,
}


def from_dict(data: dict) -> CRDT:
    """Rebuild a CRDT from the dict produced by its ``to_dict()``.

    Raises:
        ValueError: If ``data["type"]`` names no known CRDT.
    """
    crdt_type = data.get("type", "")
    cls = CRDT_TYPES.get(crdt_type)
    if cls is None:
        logger.warning("Unknown CRDT type: %r", crdt_type)
        raise ValueError(f"Unknown CRDT type: {crdt_type!r}")
    return cls.from_dict(data)


def dumps(crdt: CRDT, **kwargs) -> str:
    """Serialize a CRDT to a JSON string.

    Extra keyword arguments are passed to ``json.dumps``.
    """
    return json.dumps(crdt.to_dict(), **kwargs)


def loads(text: str | bytes) -> CRDT:
    """Rebuild a CRDT from a JSON string produced by ``dumps``."""
    return from_dict(json.loads(text))
