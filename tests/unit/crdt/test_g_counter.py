"""Tests for GCounter CRDT."""

import pytest

from convergent.crdt.errors import InvalidArgumentError, ShapeMismatchError
from convergent.crdt.g_counter import GCounter
from convergent.crdt.protocol import CRDT


class TestGCounterCreation:
    """Tests for GCounter construction."""

    def test_creates_with_replica_id(self):
        c = GCounter(1, 3)
        assert c.replica_id == 1
        assert c.total_replicas == 3

    def test_initial_state_is_zeros(self):
        c = GCounter(0, 3)
        assert c.state == [0, 0, 0]
        assert c.value == 0

    @pytest.mark.parametrize("state", [[0], [1, 0], [0, 1], [1, 2, 3]])
    def test_initial_state_snapshot(self, state):
        c = GCounter(0, len(state), state)
        assert c.state == state

    def test_snapshot_is_copied(self):
        snapshot = [1, 2]
        c = GCounter(0, 2, snapshot)
        c.increment(5)
        assert snapshot == [1, 2]

    def test_snapshot_wrong_length_raises(self):
        with pytest.raises(ShapeMismatchError):
            GCounter(0, 3, [1, 2])

    def test_negative_snapshot_slot_raises(self):
        with pytest.raises(InvalidArgumentError):
            GCounter(0, 2, [1, -1])

    @pytest.mark.parametrize("replica_id", [-1, 3])
    def test_replica_id_out_of_range_raises(self, replica_id):
        with pytest.raises(InvalidArgumentError, match="replica_id"):
            GCounter(replica_id, 3)

    def test_zero_replicas_raises(self):
        with pytest.raises(InvalidArgumentError):
            GCounter(0, 0)

    def test_implements_crdt_protocol(self):
        assert isinstance(GCounter(0, 1), CRDT)

    def test_repr(self):
        c = GCounter(2, 3)
        assert "replica_id=2" in repr(c)


class TestGCounterValue:
    """Tests for the derived value and numeric views."""

    @pytest.mark.parametrize(
        "state,expected",
        [([0, 0], 0), ([1, 0], 1), ([0, 1], 1), ([1, 2, 3], 6), ([4, 6, 8], 18)],
    )
    def test_value_is_sum_of_slots(self, state, expected):
        assert GCounter(0, len(state), state).value == expected

    def test_int_coercion(self):
        c = GCounter(0, 2, [3, 4])
        assert int(c) == 7

    def test_str_coercion(self):
        c = GCounter(0, 2, [3, 4])
        assert str(c) == "7"

    def test_state_is_a_copy(self):
        c = GCounter(0, 2)
        c.state[0] = 99
        assert c.value == 0


class TestGCounterIncrement:
    """Tests for increment operations."""

    def test_single_increment(self):
        c = GCounter(0, 1)
        c.increment()
        assert c.value == 1

    def test_increment_by_n(self):
        c = GCounter(0, 1)
        c.increment(2)
        assert c.value == 2
        c.increment(1)
        assert c.value == 3

    def test_increment_only_touches_own_slot(self):
        c = GCounter(1, 3)
        c.increment(4)
        assert c.state == [0, 4, 0]

    def test_increment_zero_is_noop(self):
        c = GCounter(0, 2, [1, 1])
        c.increment(0)
        assert c.state == [1, 1]

    def test_increment_negative_raises(self):
        c = GCounter(0, 1)
        with pytest.raises(InvalidArgumentError, match="negative"):
            c.increment(-2)

    def test_increment_negative_leaves_state_unchanged(self):
        c = GCounter(0, 2, [3, 1])
        with pytest.raises(InvalidArgumentError):
            c.increment(-1)
        assert c.state == [3, 1]

    def test_invalid_argument_is_value_error(self):
        c = GCounter(0, 1)
        with pytest.raises(ValueError):
            c.increment(-1)

    def test_node_value(self):
        c = GCounter(0, 2)
        c.increment(3)
        assert c.node_value(0) == 3
        assert c.node_value(1) == 0


class TestGCounterIntegerSlots:
    """Slots hold ints only, on every path that writes them."""

    @pytest.mark.parametrize("delta", [1.5, 2.0, True, "3"])
    def test_increment_rejects_non_int(self, delta):
        c = GCounter(0, 2)
        with pytest.raises(InvalidArgumentError, match="must be ints"):
            c.increment(delta)
        assert c.state == [0, 0]

    def test_copy_matches_after_increments(self):
        c = GCounter(0, 2)
        c.increment(3)
        assert c.copy() == c
        assert GCounter.from_dict(c.to_dict()) == c

    @pytest.mark.parametrize("slot", [2.9, 2.0, False, "2", None])
    def test_snapshot_rejects_non_int_slot(self, slot):
        with pytest.raises(InvalidArgumentError):
            GCounter(0, 2, [slot, 0])

    def test_from_dict_rejects_float_slot(self):
        with pytest.raises(InvalidArgumentError):
            GCounter.from_dict({"type": "GCounter", "replica_id": 0, "state": [1.5, 0]})

    @pytest.mark.parametrize("vector", [[0, 2.5], [0, True], [0, -1], [0, "4"]])
    def test_raw_merge_rejects_bad_slot(self, vector):
        c = GCounter(0, 2, [1, 1])
        with pytest.raises(InvalidArgumentError):
            c.merge(vector)
        assert c.state == [1, 1]

    def test_raw_merge_checks_shape_first(self):
        c = GCounter(0, 2)
        with pytest.raises(ShapeMismatchError):
            c.merge([0.5, 0.5, 0.5])


class TestGCounterMerge:
    """Tests for merge operations."""

    def test_merge_pulls_greater_remote_slots(self):
        counter = GCounter(0, 2)
        replica = GCounter(1, 2)
        replica.increment(2)

        counter.merge(replica)
        assert counter.value == 2
        assert replica.value == 2

        counter.increment(1)
        replica.increment(3)
        assert counter.value == 3
        assert replica.value == 5

        counter.merge(replica)
        assert counter.value == 6
        assert replica.value == 5

        replica.merge(counter)
        assert counter.value == 6
        assert replica.value == 6

    def test_merge_ignores_stale_remote_slots(self):
        counter = GCounter(0, 3, [0, 0, 2])
        replica1 = GCounter(1, 3, [0, 0, 1])

        counter.merge(replica1)
        assert counter.state == [0, 0, 2]
        assert replica1.state == [0, 0, 1]

        replica1.merge(counter)
        assert replica1.state == [0, 0, 2]

    def test_merge_raw_state(self):
        c = GCounter(0, 3, [1, 0, 0])
        c.merge([0, 5, 2])
        assert c.state == [1, 5, 2]

    def test_merge_is_idempotent(self):
        a = GCounter(0, 2)
        b = GCounter(1, 2)
        a.increment(5)
        b.increment(3)

        a.merge(b)
        a.merge(b)
        assert a.state == [5, 3]

    def test_merge_with_self_is_noop(self):
        a = GCounter(0, 2, [4, 1])
        a.merge(a)
        assert a.state == [4, 1]

    def test_merge_is_commutative(self):
        a = GCounter(0, 2)
        b = GCounter(1, 2)
        a.increment(5)
        b.increment(3)

        a_copy = a.copy()
        b_copy = b.copy()
        a_copy.merge(b)
        b_copy.merge(a)
        assert a_copy.state == b_copy.state

    def test_merge_is_associative(self):
        a = GCounter(0, 3, [1, 0, 0])
        b = GCounter(1, 3, [0, 2, 0])
        c = GCounter(2, 3, [0, 0, 3])

        ab = a.copy()
        ab.merge(b)
        ab.merge(c)

        bc = b.copy()
        bc.merge(c)
        a2 = a.copy()
        a2.merge(bc)

        assert ab.state == a2.state
        assert ab.value == 6

    def test_merge_never_lowers_a_slot(self):
        a = GCounter(0, 3, [5, 1, 7])
        before = a.state
        a.merge([2, 4, 0])
        assert all(after >= prior for after, prior in zip(a.state, before))

    def test_merge_shape_mismatch_raises(self):
        a = GCounter(0, 3)
        b = GCounter(0, 2, [9, 9])
        with pytest.raises(ShapeMismatchError):
            a.merge(b)

    def test_merge_shape_mismatch_leaves_state_unchanged(self):
        a = GCounter(0, 2, [1, 1])
        with pytest.raises(ShapeMismatchError):
            a.merge([9, 9, 9])
        assert a.state == [1, 1]


class TestGCounterSerialization:
    """Tests for copy and dict serialization."""

    def test_copy_is_independent(self):
        a = GCounter(0, 2)
        b = a.copy()
        b.increment(3)
        assert a.value == 0
        assert b.replica_id == a.replica_id

    def test_to_dict_structure(self):
        c = GCounter(1, 2)
        c.increment(3)
        assert c.to_dict() == {"type": "GCounter", "replica_id": 1, "state": [0, 3]}

    def test_from_dict(self):
        c = GCounter.from_dict({"type": "GCounter", "replica_id": 0, "state": [2, 5]})
        assert c.total_replicas == 2
        assert c.value == 7

    def test_equality(self):
        a = GCounter(0, 2)
        b = GCounter(1, 2)
        assert a == b
        a.increment()
        assert a != b
