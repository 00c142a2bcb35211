"""Tests for merging aggregation states."""

import copy

import pytest

from engine.merge import merge_into, merge_states
from engine.state import AggregationState, PatchMismatchError
from engine.stats_engine import aggregate_slices


@pytest.fixture
def partials(sample_slices):
    """Three states built from disjoint subsets of the sample batch."""
    return (
        aggregate_slices(sample_slices[:2], "15.4"),
        aggregate_slices(sample_slices[2:4], "15.4"),
        aggregate_slices(sample_slices[4:], "15.4"),
    )


class TestMergeAlgebra:
    def test_associative_and_commutative(self, partials):
        a, b, c = partials
        left = merge_states(merge_states(a, b), c)
        right = merge_states(a, merge_states(b, c))
        swapped = merge_states(merge_states(b, a), c)

        assert left == right == swapped

    def test_equals_single_pass(self, partials, sample_slices):
        a, b, c = partials
        assert merge_states(merge_states(a, b), c) == aggregate_slices(sample_slices, "15.4")

    def test_empty_is_identity(self, partials):
        a = partials[0]
        empty = AggregationState(patch="15.4")
        assert merge_states(a, empty) == a
        assert merge_states(empty, a) == a


class TestMergeBehaviour:
    def test_merge_states_does_not_mutate_inputs(self, partials):
        a, b, _ = partials
        a_before, b_before = copy.deepcopy(a), copy.deepcopy(b)
        merge_states(a, b)
        assert a == a_before
        assert b == b_before

    def test_merge_into_copies_one_sided_buckets(self, partials):
        target = AggregationState(patch="15.4")
        delta = partials[0]
        merge_into(target, delta)

        key = next(iter(delta.compositions))
        target.compositions[key].units.setdefault("NEW", {})["i"] = 1
        assert "NEW" not in delta.compositions[key].units

    def test_leaf_counts_summed(self, make_slice):
        a = aggregate_slices([make_slice([("A", ["x", "y", "z"])], placement=1)], "15.4")
        b = aggregate_slices([make_slice([("A", ["x", "w", "y", "z"])], placement=3)], "15.4")

        merged = merge_states(a, b)
        comp = merged.compositions[("15.4", "A")]
        assert (comp.picks, comp.wins, comp.sum_placement) == (2, 1, 4)
        assert comp.units == {"A": {"x": 2, "y": 2, "z": 2, "w": 1}}
        assert comp.unit_set == ["A"]

        combo = merged.combos[("A", "x|y|z")]
        assert (combo.picks, combo.wins, combo.sum_placement) == (2, 1, 4)
        assert merged.combos[("A", "w|x|y")].picks == 1

    def test_cross_patch_merge_rejected(self):
        with pytest.raises(PatchMismatchError):
            merge_states(AggregationState(patch="15.4"), AggregationState(patch="15.3"))
