"""
Tests for FlatSet.
"""

import copy
import pickle

import pytest
from hypothesis import given
from hypothesis import strategies as st

from advanced.flat import FlatSet, is_strictly_sorted

flat_sets = st.lists(st.integers(-30, 30)).map(FlatSet)


class TestFlatSetScenarios:

    def test_construction_sorts_and_dedups(self):
        assert FlatSet([3, 1, 2, 1]).to_list() == [1, 2, 3]

    def test_union(self):
        assert (FlatSet([1, 2, 3]) | FlatSet([2, 3, 4])).to_list() == [1, 2, 3, 4]

    def test_intersection(self):
        assert (FlatSet([1, 2, 3]) & FlatSet([2, 3, 4])).to_list() == [2, 3]

    def test_difference(self):
        assert (FlatSet([1, 2, 3]) - FlatSet([2])).to_list() == [1, 3]

    def test_symmetric_difference(self):
        assert (FlatSet([1, 2, 3]) ^ FlatSet([2, 3, 4])).to_list() == [1, 4]

    def test_repr(self):
        assert repr(FlatSet([2, 1])) == "FlatSet([1, 2])"

    def test_last_occurrence_wins(self):
        s = FlatSet([1, 1.0])
        assert type(s[0]) is float


class TestFlatSetElements:

    def test_contains(self):
        s = FlatSet([1, 3])
        assert 1 in s
        assert 2 not in s

    def test_contains_incomparable(self):
        assert "a" not in FlatSet([1, 2])

    def test_add_and_discard(self):
        s = FlatSet([1, 3])
        s.add(2)
        s.add(3)
        assert s.to_list() == [1, 2, 3]
        s.discard(2)
        s.discard(5)
        assert s.to_list() == [1, 3]

    def test_add_replaces_equal_element(self):
        s = FlatSet([1])
        s.add(1.0)
        assert type(s[0]) is float

    def test_remove_missing_raises(self):
        s = FlatSet([1])
        with pytest.raises(KeyError):
            s.remove(2)
        s.remove(1)
        assert len(s) == 0

    def test_pop_largest(self):
        s = FlatSet([2, 5, 1])
        assert s.pop() == 5
        assert s.to_list() == [1, 2]

    def test_pop_empty_raises(self):
        with pytest.raises(KeyError):
            FlatSet().pop()

    def test_indexing_and_reversed(self):
        s = FlatSet([5, 1, 3])
        assert s[0] == 1
        assert s[-1] == 5
        assert s[1:] == [3, 5]
        assert list(reversed(s)) == [5, 3, 1]

    def test_singleton(self):
        assert FlatSet.singleton(4).to_list() == [4]


class TestFlatSetConstruction:

    def test_from_sorted(self):
        assert FlatSet.from_sorted([1, 2, 3]) == FlatSet([3, 2, 1])

    def test_from_sorted_rejects_unsorted(self):
        with pytest.raises(ValueError):
            FlatSet.from_sorted([2, 1])

    def test_from_sorted_rejects_duplicates(self):
        with pytest.raises(ValueError):
            FlatSet.from_sorted([1, 1])

    def test_from_sorted_unchecked_takes_ownership(self):
        data = [1, 2]
        s = FlatSet.from_sorted_unchecked(data)
        s.add(3)
        assert data == [1, 2, 3]

    def test_copy_is_independent(self):
        s = FlatSet([1, 2])
        t = copy.copy(s)
        t.add(3)
        assert s.to_list() == [1, 2]

    def test_not_iterable(self):
        with pytest.raises(TypeError):
            FlatSet([1]).union(5)

    def test_pickle(self):
        s = FlatSet(["b", "a"])
        assert pickle.loads(pickle.dumps(s)) == s

    def test_unpickle_revalidates(self):
        s = FlatSet.__new__(FlatSet)
        s.__setstate__([3, 1, 3, 2])
        assert s.to_list() == [1, 2, 3]


class TestFlatSetOperations:

    def test_named_operations_take_many_iterables(self):
        s = FlatSet([1, 2, 3, 4])
        assert s.union([5], {6}).to_list() == [1, 2, 3, 4, 5, 6]
        assert s.intersection([1, 2, 3], [2, 3, 4]).to_list() == [2, 3]
        assert s.difference([1], (4,)).to_list() == [2, 3]

    def test_named_operations_copy_without_arguments(self):
        s = FlatSet([1])
        t = s.union()
        t.add(2)
        assert s.to_list() == [1]

    def test_operators_with_builtin_sets(self):
        s = FlatSet([1, 2])
        assert (s | {3}).to_list() == [1, 2, 3]
        assert ({3} | s).to_list() == [1, 2, 3]
        assert ({1, 3} - s).to_list() == [3]
        assert ({2, 3} & s).to_list() == [2]
        assert ({2, 3} ^ s).to_list() == [1, 3]

    def test_operators_reject_lists(self):
        with pytest.raises(TypeError):
            FlatSet([1]) | [2]

    def test_comparisons(self):
        a = FlatSet([1, 2])
        b = FlatSet([1, 2, 3])
        assert a < b
        assert a <= b
        assert b > a
        assert b >= a
        assert not a < a
        assert a == FlatSet([2, 1])
        assert a == {1, 2}
        assert a != b

    def test_predicates(self):
        a = FlatSet([1, 2])
        assert a.issubset([1, 2, 3])
        assert a.issuperset([2])
        assert a.isdisjoint([3, 4])
        assert not a.isdisjoint([2])

    def test_in_place_with_itself(self):
        s = FlatSet([1, 2])
        s -= s
        assert len(s) == 0
        t = FlatSet([1, 2])
        t ^= t
        assert len(t) == 0
        u = FlatSet([1, 2])
        u |= u
        u &= u
        assert u.to_list() == [1, 2]

    def test_failed_update_leaves_set_unchanged(self):
        s = FlatSet([(0,), (1,), (2,), (5,), (6,), (7, "x")])
        before = s.to_list()
        with pytest.raises(TypeError):
            s.update([(1,), (3,), (7, 0)])
        assert s.to_list() == before
        assert is_strictly_sorted(s.to_list())

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(FlatSet())


class TestFlatSetLaws:

    @given(flat_sets, flat_sets)
    def test_union_commutes(self, a, b):
        assert a | b == b | a

    @given(flat_sets, flat_sets)
    def test_absorption(self, a, b):
        assert a & (a | b) == a

    @given(flat_sets, flat_sets)
    def test_union_is_superset(self, a, b):
        assert a <= a | b

    @given(flat_sets)
    def test_difference_with_self(self, a):
        assert len(a - a) == 0

    @given(flat_sets, flat_sets)
    def test_symmetric_difference(self, a, b):
        assert a ^ b == (a - b) | (b - a)

    @given(flat_sets, flat_sets)
    def test_matches_builtin_sets(self, a, b):
        assert set(a | b) == set(a) | set(b)
        assert set(a & b) == set(a) & set(b)
        assert set(a - b) == set(a) - set(b)
        assert set(a ^ b) == set(a) ^ set(b)

    @given(flat_sets, flat_sets)
    def test_order_invariant(self, a, b):
        for result in (a | b, a & b, a - b, a ^ b):
            assert is_strictly_sorted(result.to_list())

    @given(flat_sets, flat_sets)
    def test_in_place_equivalence(self, a, b):
        expected = (a | b, a & b, a - b, a ^ b)
        results = [a.copy() for _ in range(4)]
        results[0] |= b
        results[1] &= b
        results[2] -= b
        results[3] ^= b
        for result, value in zip(results, expected):
            assert result.to_list() == value.to_list()
            assert is_strictly_sorted(result.to_list())

    @given(st.lists(st.integers(-30, 30)), st.randoms())
    def test_permutation_independent(self, items, random):
        shuffled = items.copy()
        random.shuffle(shuffled)
        assert FlatSet(items).to_list() == FlatSet(shuffled).to_list()

    @given(flat_sets, st.integers(-30, 30))
    def test_add_keeps_order(self, a, x):
        a.add(x)
        assert x in a
        assert is_strictly_sorted(a.to_list())
