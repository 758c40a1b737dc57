"""
Merge operations for sets, maps and total maps.

Set operations keep the left element when both sides hold an equal
element. Map operations compare pairs by key and decide what value to
store for keys found on both sides.
"""
from collections.abc import Callable, Sequence
from operator import itemgetter
from typing import Any, Final, Optional, TypeVar

from .merge import MergeOperation, MergeState, merge_predicate

VT = TypeVar("VT")

KEY: Final = itemgetter(0)


def prefer_right(left: VT, right: VT, /) -> VT:
    """The default way to combine values: the right value wins."""
    return right


class _Missing:

    __slots__ = ()

    def __repr__(self, /) -> str:
        return "MISSING"


MISSING: Final = _Missing()


class KeyedOperation(MergeOperation):
    key: Optional[Callable[[Any], Any]]

    __slots__ = ("key",)

    def __init__(self, key: Optional[Callable[[Any], Any]] = None, /) -> None:
        self.key = key

    def __repr__(self, /) -> str:
        return f"{type(self).__name__}({'' if self.key is None else 'KEY'})"


class Union(KeyedOperation):

    __slots__ = ()

    def collision(self, state: MergeState[Any, Any], /) -> bool:
        return state.advance_a(1, True) and state.advance_b(1, False)

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_a(n, True)

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_b(n, True)


class Intersection(KeyedOperation):

    __slots__ = ()

    def collision(self, state: MergeState[Any, Any], /) -> bool:
        return state.advance_a(1, True) and state.advance_b(1, False)

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_a(n, False)

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_b(n, False)


class Difference(KeyedOperation):

    __slots__ = ()

    def collision(self, state: MergeState[Any, Any], /) -> bool:
        return state.advance_a(1, False) and state.advance_b(1, False)

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_a(n, True)

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_b(n, False)


class SymmetricDifference(KeyedOperation):

    __slots__ = ()

    def collision(self, state: MergeState[Any, Any], /) -> bool:
        return state.advance_a(1, False) and state.advance_b(1, False)

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_a(n, True)

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_b(n, True)


UNION: Final = Union()
INTERSECTION: Final = Intersection()
DIFFERENCE: Final = Difference()
SYMMETRIC_DIFFERENCE: Final = SymmetricDifference()

KEYED_DIFFERENCE: Final = Difference(KEY)
KEYED_SYMMETRIC_DIFFERENCE: Final = SymmetricDifference(KEY)


class CombineOperation(MergeOperation):
    """Map operations which combine the values of colliding keys."""
    combine: Callable[[Any, Any], Any]
    key = KEY

    __slots__ = ("combine",)

    def __init__(self, combine: Callable[[Any, Any], Any] = prefer_right, /) -> None:
        self.combine = combine

    def collision(self, state: MergeState[Any, Any], /) -> bool:
        [(key, left)] = state.take_a(1)
        [(_, right)] = state.take_b(1)
        state.push((key, self.combine(left, right)))
        return True


class CombineUnion(CombineOperation):

    __slots__ = ()

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_a(n, True)

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_b(n, True)


class CombineIntersection(CombineOperation):

    __slots__ = ()

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_a(n, False)

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_b(n, False)


class JoinOperation(MergeOperation):
    """
    Map joins. The function is called as ``function(key, left, right)``
    with ``MISSING`` for an absent side, and returns the value to store
    or None to leave the key out.
    """
    function: Callable[[Any, Any, Any], Any]
    key = KEY

    __slots__ = ("function",)

    def __init__(self, function: Callable[[Any, Any, Any], Any], /) -> None:
        self.function = function

    def collision(self, state: MergeState[Any, Any], /) -> bool:
        [(key, left)] = state.take_a(1)
        [(_, right)] = state.take_b(1)
        value = self.function(key, left, right)
        if value is not None:
            state.push((key, value))
        return True

    def _join_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        function = self.function
        for key, left in state.take_a(n):
            value = function(key, left, MISSING)
            if value is not None:
                state.push((key, value))
        return True

    def _join_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        function = self.function
        for key, right in state.take_b(n):
            value = function(key, MISSING, right)
            if value is not None:
                state.push((key, value))
        return True


class OuterJoin(JoinOperation):

    __slots__ = ()

    from_a = JoinOperation._join_a
    from_b = JoinOperation._join_b


class LeftJoin(JoinOperation):

    __slots__ = ()

    from_a = JoinOperation._join_a

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_b(n, False)


class RightJoin(JoinOperation):

    __slots__ = ()

    from_b = JoinOperation._join_b

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_a(n, False)


class InnerJoin(JoinOperation):

    __slots__ = ()

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_a(n, False)

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        return state.advance_b(n, False)


class TotalCombine(MergeOperation):
    """
    Combines two total maps. A key missing on one side stands for that
    side's default, and results equal to the result's default are left
    out so that the output stays canonical.
    """
    a_default: Any
    b_default: Any
    function: Callable[[Any, Any], Any]
    key = KEY
    r_default: Any

    __slots__ = {
        "a_default":
            "The value of keys missing from the left map.",
        "b_default":
            "The value of keys missing from the right map.",
        "function":
            "Combines a left value with a right value.",
        "r_default":
            "The default of the result, never stored.",
    }

    def __init__(
        self,
        function: Callable[[Any, Any], Any],
        a_default: Any,
        b_default: Any,
        r_default: Any,
        /,
    ) -> None:
        self.function = function
        self.a_default = a_default
        self.b_default = b_default
        self.r_default = r_default

    def collision(self, state: MergeState[Any, Any], /) -> bool:
        [(key, left)] = state.take_a(1)
        [(_, right)] = state.take_b(1)
        value = self.function(left, right)
        if value != self.r_default:
            state.push((key, value))
        return True

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        function = self.function
        b_default = self.b_default
        r_default = self.r_default
        for key, left in state.take_a(n):
            value = function(left, b_default)
            if value != r_default:
                state.push((key, value))
        return True

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        function = self.function
        a_default = self.a_default
        r_default = self.r_default
        for key, right in state.take_b(n):
            value = function(a_default, right)
            if value != r_default:
                state.push((key, value))
        return True


def is_disjoint(a: Sequence[Any], b: Sequence[Any], /) -> bool:
    return not merge_predicate(a, b, INTERSECTION)


def is_equal(a: Sequence[Any], b: Sequence[Any], /) -> bool:
    return len(a) == len(b) and not merge_predicate(a, b, SYMMETRIC_DIFFERENCE)


def is_subset(a: Sequence[Any], b: Sequence[Any], /) -> bool:
    return len(a) <= len(b) and not merge_predicate(a, b, DIFFERENCE)


def is_superset(a: Sequence[Any], b: Sequence[Any], /) -> bool:
    return is_subset(b, a)
