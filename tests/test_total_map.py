"""
Tests for TotalMap.
"""

import operator
import pickle

import pytest
from hypothesis import given
from hypothesis import strategies as st

from advanced.flat import TotalMap

KEYS = range(-6, 7)

total_maps = st.builds(
    TotalMap,
    st.dictionaries(st.integers(-5, 5), st.integers(-3, 3)),
    default=st.integers(-3, 3),
)


def is_canonical(m):
    return all(value != m.default for _, value in m.items())


class TestTotalMapBasics:

    def test_strips_default_on_construction(self):
        m = TotalMap({"a": 1, "b": 0}, default=0)
        assert list(m.items()) == [("a", 1)]
        assert m.entries.to_list() == [("a", 1)]

    def test_lookup_never_fails(self):
        m = TotalMap({"a": 1}, default=0)
        assert m["a"] == 1
        assert m["z"] == 0
        assert m.get("z") == 0

    def test_setitem_normalizes(self):
        m = TotalMap(default=0)
        m["a"] = 2
        assert list(m.items()) == [("a", 2)]
        m["a"] = 0
        assert list(m.items()) == []
        m["b"] = 0
        assert list(m.items()) == []

    def test_delitem_resets(self):
        m = TotalMap({"a": 2}, default=0)
        del m["a"]
        del m["missing"]
        assert m["a"] == 0
        assert m.is_constant()

    def test_delitem_incomparable_key(self):
        m = TotalMap({1: 2}, default=0)
        del m["x"]
        m["x"] = 0
        assert m == TotalMap({1: 2}, default=0)

    def test_entries_is_a_copy(self):
        m = TotalMap({1: 5}, default=0)
        m.entries[2] = 0
        assert list(m.items()) == [(1, 5)]
        assert m == TotalMap({1: 5}, default=0)

    def test_constant(self):
        m = TotalMap.constant(7)
        assert m[123] == 7
        assert m.default == 7
        assert m.is_constant()

    def test_equality(self):
        assert TotalMap({1: 0}, default=0) == TotalMap.constant(0)
        assert TotalMap({1: 2}, default=0) != TotalMap({1: 2}, default=1)

    def test_repr(self):
        assert repr(TotalMap({1: 2}, default=0)) == "TotalMap([(1, 2)], default=0)"

    def test_pickle(self):
        m = TotalMap({1: 2, 3: 4}, default=0)
        assert pickle.loads(pickle.dumps(m)) == m

    def test_unpickle_normalizes(self):
        m = TotalMap.__new__(TotalMap)
        m.__setstate__(([(2, 0), (1, 5)], 0))
        assert list(m.items()) == [(1, 5)]


class TestTotalMapCombine:

    def test_combine_defaults(self):
        a = TotalMap({1: 5}, default=1)
        b = TotalMap({2: 7}, default=3)
        r = a.combine(b, operator.add)
        assert r.default == 4
        assert list(r.items()) == [(1, 8), (2, 8)]

    def test_combine_strips_result_default(self):
        a = TotalMap({1: 1, 2: 2}, default=0)
        b = TotalMap({1: -1}, default=0)
        assert list((a + b).items()) == [(2, 2)]

    def test_combine_update(self):
        a = TotalMap({1: 1, 2: 2}, default=0)
        b = TotalMap({1: -1, 3: 3}, default=1)
        expected = a.combine(b, operator.mul)
        a.combine_update(b, operator.mul)
        assert a == expected
        assert a.default == 0

    def test_failed_combine_update_leaves_map_unchanged(self):
        def add(left, right):
            if left == 2:
                raise ValueError(left)
            return left + right

        a = TotalMap({1: 1, 2: 2, 3: 3}, default=0)
        b = TotalMap({2: 5, 4: 4}, default=0)
        with pytest.raises(ValueError):
            a.combine_update(b, add)
        assert a == TotalMap({1: 1, 2: 2, 3: 3}, default=0)
        assert is_canonical(a)

    def test_supremum_and_infimum(self):
        a = TotalMap({1: 5, 2: -5}, default=0)
        b = TotalMap({2: 3}, default=1)
        assert a.supremum(b) == TotalMap({1: 5, 2: 3}, default=1)
        assert a.infimum(b) == TotalMap({1: 1, 2: -5}, default=0)

    def test_map_values(self):
        m = TotalMap({1: 2, 2: 3}, default=1)
        assert m.map_values(lambda x: x % 2) == TotalMap({1: 0}, default=1)

    def test_arithmetic(self):
        a = TotalMap({1: 2}, default=1)
        b = TotalMap({2: 4}, default=2)
        assert (a + b) == TotalMap({1: 4, 2: 5}, default=3)
        assert (a - b) == TotalMap({1: 0, 2: -3}, default=-1)
        assert (a * b) == TotalMap({1: 4, 2: 4}, default=2)
        assert (b / a)[1] == 1.0
        assert (-a) == TotalMap({1: -2}, default=-1)

    def test_scalars_are_constants(self):
        a = TotalMap({1: 2}, default=1)
        assert (a + 1) == TotalMap({1: 3}, default=2)
        assert (1 + a) == TotalMap({1: 3}, default=2)
        assert (10 - a) == TotalMap({1: 8}, default=9)
        assert (2 * a) == TotalMap({1: 4}, default=2)
        assert (a / 2)[5] == 0.5


class TestTotalMapLaws:

    @given(total_maps)
    def test_construction_is_canonical(self, m):
        assert is_canonical(m)

    @given(total_maps, total_maps)
    def test_combine_matches_pointwise(self, a, b):
        for function in (operator.add, operator.mul, max, min):
            r = a.combine(b, function)
            assert is_canonical(r)
            for key in KEYS:
                assert r[key] == function(a[key], b[key])

    @given(total_maps, total_maps)
    def test_combine_update_matches_combine(self, a, b):
        for function in (operator.add, operator.sub, max):
            result = a.copy()
            result.combine_update(b, function)
            assert result == a.combine(b, function)
            assert is_canonical(result)

    @given(total_maps)
    def test_negation_is_involution(self, m):
        assert -(-m) == m
