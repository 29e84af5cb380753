"""In-process replica groups for convergence experiments.

A ReplicaGroup holds one CRDT instance per logical replica and moves
state between them by calling ``merge`` directly. This stands in for a
real transport: full-mesh anti-entropy (``sync_all``) or randomized
push-pull gossip (``gossip_round``), with the same convergence
guarantees either way.

Every replica can be sampled after each round, and the samples are
returned as a pandas DataFrame for analysis or plotting.

Example::

    from convergent import GCounter, ReplicaGroup

    group = ReplicaGroup([GCounter(i, 3) for i in range(3)], seed=42)
    group[0].increment(4)
    group[1].increment(1)
    group[2].increment(2)

    rounds = group.gossip_until_converged()
    assert {r.value for r in group} == {7}
"""

from __future__ import annotations

import hashlib
import json
import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import pandas as pd

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from convergent.crdt.protocol import CRDT

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = ["round", "label", "replica_id", "value"]


@dataclass(frozen=True)
class ReplicaGroupStats:
    """Statistics for a ReplicaGroup.

    Attributes:
        merges: Total replica-to-replica merge calls performed.
        gossip_rounds: Gossip rounds run so far.
        sync_rounds: Full-mesh sync rounds run so far.
        samples: Rows recorded into the history.
    """

    merges: int = 0
    gossip_rounds: int = 0
    sync_rounds: int = 0
    samples: int = 0


def state_hash(crdt: CRDT) -> str:
    """Hash of a replica's state, ignoring which replica owns it.

    Two replicas that have converged produce the same hash.
    """
    data = crdt.to_dict()
    data.pop("replica_id", None)
    if "entries" in data:
        data["entries"] = sorted(data["entries"], key=lambda entry: repr(entry[0]))
    content = json.dumps(data, sort_keys=True, default=repr)
    return hashlib.md5(content.encode()).hexdigest()


class ReplicaGroup:
    """A set of replicas of the same CRDT exchanging state in-process.

    Args:
        replicas: One CRDT instance per replica. All must be the same
            type (and, for counters, the same replica count).
        seed: Seed for peer selection in ``gossip_round``.

    Raises:
        ValueError: If ``replicas`` is empty or mixes CRDT types.
    """

    def __init__(self, replicas: Sequence[CRDT], seed: int | None = None):
        if not replicas:
            raise ValueError("ReplicaGroup needs at least one replica")
        kinds = {type(r) for r in replicas}
        if len(kinds) > 1:
            names = sorted(k.__name__ for k in kinds)
            raise ValueError(f"ReplicaGroup replicas must share one CRDT type, got {names}")

        self._replicas = list(replicas)
        self._rng = random.Random(seed)
        self._round = 0
        self._samples: list[tuple[int, str, Any, Any]] = []
        self._merges = 0
        self._gossip_rounds = 0
        self._sync_rounds = 0

    @property
    def replicas(self) -> list[CRDT]:
        """The replicas in this group."""
        return list(self._replicas)

    @property
    def round(self) -> int:
        """Number of sync or gossip rounds run so far."""
        return self._round

    @property
    def stats(self) -> ReplicaGroupStats:
        """Return a frozen snapshot of group statistics."""
        return ReplicaGroupStats(
            merges=self._merges,
            gossip_rounds=self._gossip_rounds,
            sync_rounds=self._sync_rounds,
            samples=len(self._samples),
        )

    @property
    def converged(self) -> bool:
        """True if every replica holds the same state."""
        return len({state_hash(r) for r in self._replicas}) == 1

    def values(self) -> list[Any]:
        """Current ``value`` of each replica, in replica order."""
        return [r.value for r in self._replicas]

    def _merge(self, dest: CRDT, source: CRDT) -> None:
        dest.merge(source)
        self._merges += 1
        logger.debug("Replica %r merged state from %r", dest.replica_id, source.replica_id)

    def sync_all(self, rounds: int = 1) -> None:
        """Full-mesh anti-entropy: every replica merges every other one.

        Args:
            rounds: Number of full passes to run.
        """
        for _ in range(rounds):
            for dest in self._replicas:
                for source in self._replicas:
                    if dest is not source:
                        self._merge(dest, source)
            self._round += 1
            self._sync_rounds += 1

    def gossip_round(self) -> None:
        """Each replica does a push-pull exchange with one random peer."""
        self._round += 1
        self._gossip_rounds += 1
        if len(self._replicas) < 2:
            return
        for replica in self._replicas:
            peer = self._rng.choice([r for r in self._replicas if r is not replica])
            self._merge(peer, replica)
            self._merge(replica, peer)

    def gossip_until_converged(self, max_rounds: int = 100, record: bool = False) -> int:
        """Run gossip rounds until all replicas hold the same state.

        Args:
            max_rounds: Give up after this many rounds.
            record: Record a history sample after every round.

        Returns:
            Number of rounds it took (0 if already converged).

        Raises:
            RuntimeError: If the group has not converged after ``max_rounds``.
        """
        rounds = 0
        while not self.converged:
            if rounds >= max_rounds:
                raise RuntimeError(f"Replicas did not converge within {max_rounds} gossip rounds")
            self.gossip_round()
            rounds += 1
            if record:
                self.record("gossip")
        logger.info(
            "%d %s replicas converged after %d gossip rounds",
            len(self._replicas),
            type(self._replicas[0]).__name__,
            rounds,
        )
        return rounds

    def record(self, label: str = "") -> None:
        """Append one history sample per replica for the current round."""
        for replica in self._replicas:
            self._samples.append((self._round, label, replica.replica_id, replica.value))

    def history_frame(self) -> pd.DataFrame:
        """Recorded samples as a DataFrame.

        Columns: ``round``, ``label``, ``replica_id``, ``value``.
        """
        return pd.DataFrame(self._samples, columns=HISTORY_COLUMNS)

    def __len__(self) -> int:
        return len(self._replicas)

    def __getitem__(self, index: int) -> CRDT:
        return self._replicas[index]

    def __iter__(self) -> Iterator[CRDT]:
        return iter(self._replicas)

    def __repr__(self) -> str:
        kind = type(self._replicas[0]).__name__
        return f"ReplicaGroup(type={kind}, replicas={len(self._replicas)}, round={self._round})"
