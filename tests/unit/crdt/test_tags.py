"""Tests for OR-Set tag generators."""

import threading

from convergent.crdt.tags import ReplicaTagGenerator, TagGenerator, uuid_tags


class TestUuidTags:
    """Tests for the random default generator."""

    def test_returns_hex_string(self):
        tag = uuid_tags()
        assert isinstance(tag, str)
        assert len(tag) == 32
        int(tag, 16)

    def test_tags_are_unique(self):
        assert len({uuid_tags() for _ in range(1000)}) == 1000

    def test_satisfies_protocol(self):
        assert isinstance(uuid_tags, TagGenerator)


class TestReplicaTagGenerator:
    """Tests for the replica-scoped counter generator."""

    def test_sequence_format(self):
        gen = ReplicaTagGenerator("r1")
        assert gen() == "r1-000000000000"
        assert gen() == "r1-000000000001"

    def test_hex_sequence(self):
        gen = ReplicaTagGenerator(0, start=255)
        assert gen() == "0-0000000000FF"

    def test_issued_tracks_next_sequence(self):
        gen = ReplicaTagGenerator("r0")
        gen()
        gen()
        assert gen.issued == 2

    def test_different_replicas_never_collide(self):
        a = ReplicaTagGenerator("a")
        b = ReplicaTagGenerator("b")
        tags = {a() for _ in range(50)} | {b() for _ in range(50)}
        assert len(tags) == 100

    def test_thread_safe(self):
        gen = ReplicaTagGenerator("r0")
        results: list[str] = []
        lock = threading.Lock()

        def worker():
            local = [gen() for _ in range(200)]
            with lock:
                results.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(results)) == 800

    def test_satisfies_protocol(self):
        assert isinstance(ReplicaTagGenerator("r0"), TagGenerator)

    def test_repr(self):
        assert "r7" in repr(ReplicaTagGenerator("r7"))
