"""PN-Counter convergence demo.

Replica 0 counts +4 then -1. Replica 2 picks that up, adds +8 and -5 of
its own, and pushes back to replica 0. Replica 1 only hears about any of
this much later, yet all three end at the same value.
"""

from convergent import PNCounter

TOTAL_REPLICAS = 3


def main():
    counters = [PNCounter(i, TOTAL_REPLICAS) for i in range(TOTAL_REPLICAS)]

    counters[0].increment(4)
    counters[0].increment(-1)
    counters[2].merge(counters[0])

    counters[2].increment(8)
    counters[0].merge(counters[2])

    counters[2].increment(-5)
    counters[0].merge(counters[2])
    counters[1].merge(counters[2])

    # Replica 1 receives the updates much later
    counters[1].merge(counters[0])
    counters[1].merge(counters[2])

    print("=" * 60)
    print("PN-Counter convergence")
    print("=" * 60)
    for counter in counters:
        print(f"  replica {counter.replica_id}: value={counter.value} state={counter.state}")


if __name__ == "__main__":
    main()
