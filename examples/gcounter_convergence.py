"""G-Counter convergence demo.

Three replicas increment locally by 4, 1 and 2, then every replica merges
every other one. All three end up reporting the same total.
"""

from convergent import GCounter

TOTAL_REPLICAS = 3


def main():
    counters = [GCounter(i, TOTAL_REPLICAS) for i in range(TOTAL_REPLICAS)]

    counters[0].increment(4)
    counters[1].increment(1)
    counters[2].increment(2)

    counters[0].merge(counters[1])
    counters[0].merge(counters[2])
    counters[1].merge(counters[0])
    counters[1].merge(counters[2])
    counters[2].merge(counters[0])
    counters[2].merge(counters[1])

    print("=" * 60)
    print("G-Counter convergence")
    print("=" * 60)
    for counter in counters:
        print(f"  replica {counter.replica_id}: value={counter.value} state={counter.state}")
    print()
    print(f"Result: {' === '.join(str(c) for c in counters)}")


if __name__ == "__main__":
    main()
