import enum
from collections.abc import Callable, Iterable
from itertools import groupby, pairwise
from operator import itemgetter
from typing import Any, Final, Optional, TypeVar

KT = TypeVar("KT")
T = TypeVar("T")
VT = TypeVar("VT")


class Keep(enum.Enum):
    """Which element to keep out of a run of equal elements."""
    FIRST = "first"
    LAST = "last"


DEFAULT_KEEP: Final = Keep.LAST


def is_strictly_sorted(
    data: Iterable[Any],
    /,
    key: Optional[Callable[[Any], Any]] = None,
) -> bool:
    """
    Check if every element is less than the next.

    Example
    -------
        >>> is_strictly_sorted([1, 2, 3])
        True
        >>> is_strictly_sorted([1, 1, 2])
        False
    """
    if key is not None:
        data = map(key, data)
    return all(x < y for x, y in pairwise(data))


def sort_dedup(
    iterable: Iterable[T],
    /,
    key: Optional[Callable[[T], Any]] = None,
    keep: Keep = DEFAULT_KEEP,
) -> list[T]:
    """
    Sort the elements and keep one element out of each run of equal
    elements. Sorting is stable, so the first and last elements of a
    run are the first and last occurrences in the input.

    Example
    -------
        >>> sort_dedup([3, 1, 2, 1])
        [1, 2, 3]
        >>> sort_dedup([(1, "a"), (0, "x"), (1, "b")], key=lambda pair: pair[0])
        [(0, 'x'), (1, 'b')]
        >>> sort_dedup([(1, "a"), (0, "x"), (1, "b")], key=lambda pair: pair[0], keep=Keep.FIRST)
        [(0, 'x'), (1, 'a')]
    """
    data = sorted(iterable, key=key)
    if keep is Keep.FIRST:
        return [next(group) for _, group in groupby(data, key)]
    result: list[T] = []
    for _, group in groupby(data, key):
        for last in group:
            pass
        result.append(last)
    return result


def sort_combine(
    items: Iterable[tuple[KT, VT]],
    combine: Callable[[VT, VT], VT],
    /,
) -> list[tuple[KT, VT]]:
    """
    Sort pairs by key, folding the values of equal keys from left to
    right with ``combine``.

    Example
    -------
        >>> sort_combine([("b", 1), ("a", 2), ("b", 3)], lambda x, y: x + y)
        [('a', 2), ('b', 4)]
    """
    result: list[tuple[KT, VT]] = []
    first = itemgetter(0)
    for key, group in groupby(sorted(items, key=first), first):
        _, value = next(group)
        for _, other in group:
            value = combine(value, other)
        result.append((key, value))
    return result
