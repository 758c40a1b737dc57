"""
Binary merge of two sorted sequences.

A merge walks two strictly increasing sequences ``a`` and ``b`` and
hands runs of elements to a merge operation, which decides what to
keep. Rather than stepping through both sequences one element at a
time, the merge picks the middle element of what is left of ``a``,
bisects for it in what is left of ``b``, and recurses on both halves.
When one sequence is much smaller than the other, most of the larger
one is handed over in a few large runs instead of being compared
element by element.

The merge operation is kept separate from where its output goes. The
same operation can produce a new list, rebuild the left operand in
place, or only report whether it would produce anything at all.
"""
from bisect import bisect_left
from collections.abc import Callable, Sequence
from typing import Any, Generic, Optional, TypeVar

from .builder import InPlaceBuilder

A = TypeVar("A")
B = TypeVar("B")

Self = TypeVar("Self", bound="MergeState")


def find(
    data: Sequence[Any],
    value: Any,
    lo: int = 0,
    hi: Optional[int] = None,
    /,
    key: Optional[Callable[[Any], Any]] = None,
) -> tuple[int, bool]:
    """
    Find the insertion point of ``value`` within ``data[lo:hi]`` using
    bisection, and whether the element at that point equals ``value``.

    If ``key`` is given, elements are compared by their key.

    Example
    -------
        >>> find([1, 3, 5], 3)
        (1, True)
        >>> find([1, 3, 5], 4)
        (2, False)
        >>> find([(1, "a"), (3, "b")], 3, key=lambda pair: pair[0])
        (1, True)
    """
    if hi is None:
        hi = len(data)
    i = bisect_left(data, value, lo, hi, key=key)
    if i == hi:
        return (i, False)
    elif key is None:
        return (i, not value < data[i])
    else:
        return (i, not value < key(data[i]))


class MergeState(Generic[A, B]):
    """
    Where the output of a merge goes.

    Every state exposes the remaining input as ``a[i:]`` and ``b[j:]``.
    The advance methods consume ``n`` elements from the front of one
    side, adding them to the output if ``take`` is true. They return
    ``False`` if the merge should stop early.
    """
    a: Sequence[A]
    b: Sequence[B]
    i: int
    j: int

    __slots__ = ()

    def advance_a(self: Self, n: int, take: bool, /) -> bool:
        raise NotImplementedError("advance_a is a required method for merge states")

    def advance_b(self: Self, n: int, take: bool, /) -> bool:
        raise NotImplementedError("advance_b is a required method for merge states")

    def push(self: Self, item: Any, /) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not accept items")

    def take_a(self: Self, n: int, /) -> list[A]:
        raise NotImplementedError(f"{type(self).__name__} does not hand out items")

    def take_b(self: Self, n: int, /) -> Sequence[B]:
        i = self.j
        assert i + n <= len(self.b), "merge cursor out of bounds"
        self.j = i + n
        return self.b[i : i + n]


class ListMergeState(MergeState[A, B]):
    """Merges into a new list."""
    a: Sequence[A]
    b: Sequence[B]
    i: int
    j: int
    result: list[Any]

    __slots__ = {
        "a":
            "The left input.",
        "b":
            "The right input.",
        "i":
            "The start of the remaining left input.",
        "j":
            "The start of the remaining right input.",
        "result":
            "The merged output.",
    }

    def __init__(self: Self, a: Sequence[A], b: Sequence[B], /) -> None:
        self.a = a
        self.b = b
        self.i = 0
        self.j = 0
        self.result = []

    def advance_a(self: Self, n: int, take: bool, /) -> bool:
        i = self.i
        assert i + n <= len(self.a), "merge cursor out of bounds"
        if take:
            self.result.extend(self.a[i : i + n])
        self.i = i + n
        return True

    def advance_b(self: Self, n: int, take: bool, /) -> bool:
        j = self.j
        assert j + n <= len(self.b), "merge cursor out of bounds"
        if take:
            self.result.extend(self.b[j : j + n])
        self.j = j + n
        return True

    def push(self: Self, item: Any, /) -> None:
        self.result.append(item)

    def take_a(self: Self, n: int, /) -> Sequence[A]:
        i = self.i
        assert i + n <= len(self.a), "merge cursor out of bounds"
        self.i = i + n
        return self.a[i : i + n]


class InPlaceMergeState(MergeState[A, B]):
    """
    Merges back into the left list.

    Elements kept from the left list stay where they are or move
    towards the front, elements taken from the right list are written
    into the gap of an ``InPlaceBuilder``.
    """
    b: Sequence[B]
    builder: InPlaceBuilder[Any]
    j: int
    original: list[A]

    __slots__ = {
        "b":
            "The right input.",
        "builder":
            "Rebuilds the left input in place.",
        "j":
            "The start of the remaining right input.",
        "original":
            "A copy of the left input, restored if the merge fails.",
    }

    def __init__(self: Self, a: list[A], b: Sequence[B], /) -> None:
        self.original = a.copy()
        # The right input must not change while the left one is rebuilt.
        if b is a:
            b = self.original
        self.b = b
        self.builder = InPlaceBuilder(a)
        self.j = 0

    @property
    def a(self: Self, /) -> list[Any]:
        return self.builder.data

    @property
    def i(self: Self, /) -> int:
        return self.builder.source

    def advance_a(self: Self, n: int, take: bool, /) -> bool:
        assert n <= self.builder.remaining, "merge cursor out of bounds"
        self.builder.consume(n, take)
        return True

    def advance_b(self: Self, n: int, take: bool, /) -> bool:
        j = self.j
        assert j + n <= len(self.b), "merge cursor out of bounds"
        if take:
            self.builder.extend(self.b[j : j + n])
        self.j = j + n
        return True

    def abort(self: Self, /) -> list[Any]:
        return self.builder.abort(self.original)

    def finish(self: Self, /) -> list[Any]:
        return self.builder.finish()

    def push(self: Self, item: Any, /) -> None:
        self.builder.push(item)

    def take_a(self: Self, n: int, /) -> list[A]:
        assert n <= self.builder.remaining, "merge cursor out of bounds"
        return self.builder.pop_front(n)


class BoolOpMergeState(MergeState[A, B]):
    """
    Only tracks if the merge would produce anything, and stops as soon
    as the first element would be produced.
    """
    a: Sequence[A]
    b: Sequence[B]
    i: int
    j: int
    result: bool

    __slots__ = {
        "a":
            "The left input.",
        "b":
            "The right input.",
        "i":
            "The start of the remaining left input.",
        "j":
            "The start of the remaining right input.",
        "result":
            "True once the merge produced an element.",
    }

    def __init__(self: Self, a: Sequence[A], b: Sequence[B], /) -> None:
        self.a = a
        self.b = b
        self.i = 0
        self.j = 0
        self.result = False

    def advance_a(self: Self, n: int, take: bool, /) -> bool:
        if take:
            self.result = True
            return False
        assert self.i + n <= len(self.a), "merge cursor out of bounds"
        self.i += n
        return True

    def advance_b(self: Self, n: int, take: bool, /) -> bool:
        if take:
            self.result = True
            return False
        assert self.j + n <= len(self.b), "merge cursor out of bounds"
        self.j += n
        return True


class MergeOperation:
    """
    Decides what happens to each run of elements during a merge.

    ``from_a`` is called with a run of ``n`` elements found only in
    ``a``, ``from_b`` likewise for ``b``, and ``collision`` for one
    element found in both. Each returns ``False`` to stop early.

    ``key`` extracts the sort key from an element, or is None if the
    elements are compared directly.
    """
    key: Optional[Callable[[Any], Any]] = None

    __slots__ = ()

    def collision(self, state: MergeState[Any, Any], /) -> bool:
        raise NotImplementedError("collision is a required method for merge operations")

    def from_a(self, state: MergeState[Any, Any], n: int, /) -> bool:
        raise NotImplementedError("from_a is a required method for merge operations")

    def from_b(self, state: MergeState[Any, Any], n: int, /) -> bool:
        raise NotImplementedError("from_b is a required method for merge operations")

    def merge(self, state: MergeState[Any, Any], /) -> None:
        self._merge(state, len(state.a) - state.i, len(state.b) - state.j)

    def _merge(self, state: MergeState[Any, Any], an: int, bn: int, /) -> bool:
        # Merge the next `an` elements of a with the next `bn` elements of b.
        if an == 0:
            return bn == 0 or self.from_b(state, bn)
        elif bn == 0:
            return self.from_a(state, an)
        am = an // 2
        key = self.key
        value = state.a[state.i + am]
        if key is not None:
            value = key(value)
        j = state.j
        bm, found = find(state.b, value, j, j + bn, key=key)
        bm -= j
        if found:
            return (
                self._merge(state, am, bm)
                and self.collision(state)
                and self._merge(state, an - am - 1, bn - bm - 1)
            )
        else:
            return (
                self._merge(state, am, bm)
                and self.from_a(state, 1)
                and self._merge(state, an - am - 1, bn - bm)
            )


def merge(a: Sequence[A], b: Sequence[B], operation: MergeOperation, /) -> list[Any]:
    """Merge two sorted sequences into a new list."""
    state: ListMergeState[A, B] = ListMergeState(a, b)
    operation.merge(state)
    return state.result


def merge_in_place(a: list[A], b: Sequence[B], operation: MergeOperation, /) -> None:
    """
    Merge a sorted sequence into a sorted list, rebuilding the list in
    place.

    If the merge raises, for example because two elements cannot be
    compared or a combine function fails, the list is restored to its
    contents before the merge and the exception is propagated.
    """
    state: InPlaceMergeState[A, B] = InPlaceMergeState(a, b)
    try:
        operation.merge(state)
    except BaseException:
        state.abort()
        raise
    state.finish()


def merge_predicate(a: Sequence[A], b: Sequence[B], operation: MergeOperation, /) -> bool:
    """Check if merging two sorted sequences would produce any element."""
    state: BoolOpMergeState[A, B] = BoolOpMergeState(a, b)
    operation.merge(state)
    return state.result

