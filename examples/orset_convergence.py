"""OR-Set convergence demo.

Two replicas add overlapping values, exchange state, then one of them
removes a value. After another exchange both agree on what is left.
"""

from convergent import ORSet, ReplicaTagGenerator


def main():
    sets = [ORSet(i, tag_generator=ReplicaTagGenerator(f"r{i}")) for i in range(2)]

    sets[0].add("Foo")
    sets[0].add("Bar")

    sets[1].add("Foo")
    sets[1].add("Bar")
    sets[1].add("Baz")

    sets[0].merge(sets[1])
    sets[1].merge(sets[0])

    sets[1].remove("Bar")

    sets[0].merge(sets[1])
    sets[1].merge(sets[0])

    print("=" * 60)
    print("OR-Set convergence")
    print("=" * 60)
    for s in sets:
        print(f"  replica {s.replica_id}: {sorted(s)}")
    print()
    added, removed = sets[0].tags("Bar")
    print(f"Tombstones kept for 'Bar': added={sorted(added)} removed={sorted(removed)}")


if __name__ == "__main__":
    main()
