"""Observed-Remove Set (OR-Set) CRDT.

An OR-Set supports both add and remove with add-wins semantics on
concurrent operations. Each value maps to a pair of tag sets:

- ``added``: one unique tag per ``add`` call ever observed.
- ``removed``: tombstones, tags that some replica has removed.

A value is a member while at least one of its added tags is not in
``removed``. ``remove`` only tombstones the tags this replica has
observed, so an ``add`` made concurrently on another replica carries a
fresh tag that survives the merge (add-wins).

Both tag sets only ever grow and entries are never deleted, so merge is
a pointwise set union: commutative, associative, and idempotent.

Example::

    a = ORSet("node-a")
    a.add("apple")
    a.add("banana")
    a.remove("apple")
    assert a.elements == frozenset({"banana"})
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any, Generic, Self, TypeVar

from convergent.crdt.errors import InvalidArgumentError
from convergent.crdt.set_ops import difference, union
from convergent.crdt.tags import uuid_tags

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from convergent.crdt.tags import TagGenerator

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)

TagPair = tuple[set[str], set[str]]


def _hashable(value: Any) -> Any:
    """Turn JSON lists back into tuples so they can be dict keys."""
    if isinstance(value, list):
        return tuple(_hashable(v) for v in value)
    return value


def _tag_pair(value: Any, pair: tuple[Iterable[str], Iterable[str]]) -> TagPair:
    """Copy a raw ``(added, removed)`` pair into fresh tag sets."""
    added, removed = pair
    for tags in (added, removed):
        if isinstance(tags, (str, bytes)):
            raise InvalidArgumentError(
                f"Tags for {value!r} must be a collection of tags, not {type(tags).__name__} {tags!r}"
            )
    return set(added), set(removed)


class ORSet(Generic[T]):
    """Observed-Remove Set CRDT.

    Maintains a dict mapping each value to its ``(added, removed)`` tag
    sets. Tags come from an injected generator and must be unique across
    all replicas; ``uuid_tags`` is used when none is given.

    Args:
        replica_id: Identifier for this replica. Provenance only, it is
            not encoded into tags.
        state: Optional initial snapshot mapping values to
            ``(added, removed)`` tag collections. Copied, never aliased.
        tag_generator: Zero-argument callable returning a fresh unique tag.
    """

    __slots__ = ("_replica_id", "_entries", "_next_tag")

    def __init__(
        self,
        replica_id: Any,
        state: Mapping[T, tuple[Iterable[str], Iterable[str]]] | None = None,
        tag_generator: TagGenerator | None = None,
    ):
        self._replica_id = replica_id
        self._next_tag = tag_generator or uuid_tags
        self._entries: dict[T, TagPair] = {}
        if state:
            for value, pair in state.items():
                self._entries[value] = _tag_pair(value, pair)

    @property
    def replica_id(self) -> Any:
        """This replica's identifier."""
        return self._replica_id

    @property
    def value(self) -> frozenset[T]:
        """Current members of the set (alias for ``elements``)."""
        return self.elements

    @property
    def elements(self) -> frozenset[T]:
        """Frozenset of values with at least one live tag."""
        return frozenset(v for v, entry in self._entries.items() if self._is_live(entry))

    @property
    def state(self) -> dict[T, TagPair]:
        """Deep copy of the full state, tombstones included."""
        return {v: (set(added), set(removed)) for v, (added, removed) in self._entries.items()}

    @staticmethod
    def _is_live(entry: TagPair) -> bool:
        added, removed = entry
        return len(difference(added, removed)) > 0

    def add(self, value: T) -> str:
        """Add a value under a fresh unique tag.

        Adding a value that is already a member does not change
        membership, but records one more tag for it.

        Args:
            value: The value to add.

        Returns:
            The tag recorded for this insertion.
        """
        tag = self._next_tag()
        if value not in self._entries:
            self._entries[value] = (set(), set())
        self._entries[value][0].add(tag)
        return tag

    def remove(self, value: T) -> None:
        """Remove a value by tombstoning every tag observed for it.

        If the value has never been seen, this is a no-op. Tags added on
        other replicas and not merged in yet are left untouched.

        Args:
            value: The value to remove.
        """
        entry = self._entries.get(value)
        if entry is None:
            return
        added, removed = entry
        union(removed, difference(added, removed))

    def has(self, value: T) -> bool:
        """Check if a value is in the set.

        Returns:
            True if the value has at least one tag that is not removed.
        """
        entry = self._entries.get(value)
        return entry is not None and self._is_live(entry)

    def contains(self, value: T) -> bool:
        """Alias for ``has``."""
        return self.has(value)

    def tags(self, value: T) -> tuple[frozenset[str], frozenset[str]]:
        """The ``(added, removed)`` tags recorded for a value.

        Returns two empty frozensets for a value that was never added.
        """
        added, removed = self._entries.get(value, (set(), set()))
        return frozenset(added), frozenset(removed)

    def merge(self, other: ORSet[T] | Mapping[T, tuple[Iterable[str], Iterable[str]]]) -> None:
        """Merge another OR-Set into this one.

        Tag sets of values known on both sides are unioned. Values only
        known remotely are adopted as fresh copies, so later local
        removes never write into the other replica's sets.

        Args:
            other: Another ORSet, or a raw ``value -> (added, removed)``
                mapping.

        Raises:
            InvalidArgumentError: If a raw mapping gives a bare string
                where a tag collection belongs. Nothing is merged then.
        """
        if isinstance(other, ORSet):
            remote = other._entries
        else:
            remote = {value: _tag_pair(value, pair) for value, pair in other.items()}
        adopted = 0
        for value, (added_r, removed_r) in remote.items():
            entry = self._entries.get(value)
            if entry is None:
                self._entries[value] = (set(added_r), set(removed_r))
                adopted += 1
            else:
                union(entry[0], added_r)
                union(entry[1], removed_r)
        logger.debug(
            "ORSet %r merged %d entries (%d new)", self._replica_id, len(remote), adopted
        )

    def copy(self) -> Self:
        """Return a deep copy sharing this replica's tag generator."""
        return type(self)(self._replica_id, self._entries, tag_generator=self._next_tag)

    def to_list(self) -> list[T]:
        """Current members as a list."""
        return list(self)

    def to_dict(self) -> dict:
        """Serialize to a plain dict.

        Entries are ``[value, added_tags, removed_tags]`` triples with
        sorted tag lists, so values need not be strings.
        """
        return {
            "type": "ORSet",
            "replica_id": self._replica_id,
            "entries": [
                [value, sorted(added), sorted(removed)]
                for value, (added, removed) in self._entries.items()
            ],
        }

    @classmethod
    def from_dict(cls, data: dict, tag_generator: TagGenerator | None = None) -> Self:
        """Deserialize from a plain dict.

        Args:
            data: Dict produced by ``to_dict()``.
            tag_generator: Generator for tags of future local adds.
        """
        state = {
            _hashable(value): (added, removed) for value, added, removed in data["entries"]
        }
        return cls(data["replica_id"], state, tag_generator=tag_generator)

    def __contains__(self, value: object) -> bool:
        return self.has(value)

    def __len__(self) -> int:
        return sum(1 for entry in self._entries.values() if self._is_live(entry))

    def __iter__(self) -> Iterator[T]:
        return iter([v for v, entry in self._entries.items() if self._is_live(entry)])

    def __repr__(self) -> str:
        return f"ORSet(replica_id={self._replica_id!r}, elements={set(self.elements)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ORSet):
            return NotImplemented
        return self._entries == other._entries
