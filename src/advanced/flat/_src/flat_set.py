import logging
from collections.abc import Iterable, Iterator, MutableSet
from collections.abc import Set as AbstractSet
from typing import Any, Generic, TypeVar, overload

from .dedup import is_strictly_sorted, sort_dedup
from .merge import find, merge, merge_in_place
from .policies import DIFFERENCE, INTERSECTION, SYMMETRIC_DIFFERENCE, UNION
from .policies import is_disjoint, is_equal, is_subset, is_superset

T = TypeVar("T")

Self = TypeVar("Self", bound="FlatSet")

logger = logging.getLogger(__name__)


def as_sorted(iterable: Iterable[T], /) -> list[T]:
    """The elements of an iterable as a strictly increasing list."""
    if isinstance(iterable, FlatSet):
        return iterable._data
    elif isinstance(iterable, Iterable):
        return sort_dedup(iterable)
    else:
        raise TypeError(f"expected an iterable, got {iterable!r}")


class FlatSet(MutableSet[T], Generic[T]):
    """
    A set stored as a single sorted list.

    Membership is checked by bisection. Set operations merge the sorted
    lists of both operands, which is fast for small and medium sets and
    for sets of very different sizes. Adding or removing a single
    element shifts the rest of the list, so building a large set one
    element at a time is slow. Build it from an iterable instead.

    When the input contains equal elements, the last one is kept.

    Examples
    --------
        >>> FlatSet([3, 1, 2, 1])
        FlatSet([1, 2, 3])
        >>> FlatSet([1, 2, 3]) | FlatSet([2, 3, 4])
        FlatSet([1, 2, 3, 4])
        >>> FlatSet([1, 2, 3]) & FlatSet([2, 3, 4])
        FlatSet([2, 3])
        >>> FlatSet([1, 2, 3]) - FlatSet([2])
        FlatSet([1, 3])
    """
    _data: list[T]

    __slots__ = {
        "_data":
            "The elements in strictly increasing order.",
    }

    def __init__(self: Self, iterable: Iterable[T] = (), /) -> None:
        self._data = sort_dedup(iterable)

    def __and__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return self.intersection(other)

    def __contains__(self: Self, element: Any, /) -> bool:
        try:
            return find(self._data, element)[1]
        except TypeError:
            return False

    def __copy__(self: Self, /) -> Self:
        return type(self).from_sorted_unchecked(self._data.copy())

    def __eq__(self: Self, other: Any, /) -> bool:
        if isinstance(other, FlatSet):
            return is_equal(self._data, other._data)
        elif isinstance(other, AbstractSet):
            return len(self) == len(other) and all(element in other for element in self._data)
        else:
            return NotImplemented

    def __ge__(self: Self, other: Any, /) -> bool:
        if isinstance(other, FlatSet):
            return is_superset(self._data, other._data)
        elif isinstance(other, AbstractSet):
            return len(self) >= len(other) and all(element in self for element in other)
        else:
            return NotImplemented

    @overload
    def __getitem__(self: Self, index: int, /) -> T: ...

    @overload
    def __getitem__(self: Self, index: slice, /) -> list[T]: ...

    def __getitem__(self, index, /):
        """
        Get elements by their position in sorted order.

        Example
        -------
            >>> s = FlatSet([5, 1, 3])
            >>> s[0], s[-1]
            (1, 5)
            >>> s[1:]
            [3, 5]
        """
        return self._data[index]

    def __getstate__(self: Self, /) -> list[T]:
        return self._data

    def __gt__(self: Self, other: Any, /) -> bool:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return len(self) > len(other) and self >= other

    def __iand__(self: Self, other: Iterable[Any], /) -> Self:
        self.intersection_update(other)
        return self

    def __ior__(self: Self, other: Iterable[T], /) -> Self:
        self.update(other)
        return self

    def __isub__(self: Self, other: Iterable[Any], /) -> Self:
        if other is self:
            self.clear()
        else:
            self.difference_update(other)
        return self

    def __iter__(self: Self, /) -> Iterator[T]:
        return iter(self._data)

    def __ixor__(self: Self, other: Iterable[T], /) -> Self:
        if other is self:
            self.clear()
        else:
            self.symmetric_difference_update(other)
        return self

    def __le__(self: Self, other: Any, /) -> bool:
        if isinstance(other, FlatSet):
            return is_subset(self._data, other._data)
        elif isinstance(other, AbstractSet):
            return len(self) <= len(other) and all(element in other for element in self._data)
        else:
            return NotImplemented

    def __len__(self: Self, /) -> int:
        return len(self._data)

    def __lt__(self: Self, other: Any, /) -> bool:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return len(self) < len(other) and self <= other

    def __or__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return self.union(other)

    def __rand__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return type(self).from_sorted_unchecked(merge(as_sorted(other), self._data, INTERSECTION))

    def __repr__(self: Self, /) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def __reversed__(self: Self, /) -> Iterator[T]:
        return reversed(self._data)

    def __ror__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return type(self).from_sorted_unchecked(merge(as_sorted(other), self._data, UNION))

    def __rsub__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return type(self).from_sorted_unchecked(merge(as_sorted(other), self._data, DIFFERENCE))

    def __rxor__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return type(self).from_sorted_unchecked(merge(as_sorted(other), self._data, SYMMETRIC_DIFFERENCE))

    def __setstate__(self: Self, state: Iterable[T], /) -> None:
        data = list(state)
        if not is_strictly_sorted(data):
            logger.debug("restoring %s from %d unsorted elements", type(self).__name__, len(data))
            data = sort_dedup(data)
        self._data = data

    def __sub__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return self.difference(other)

    def __xor__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return self.symmetric_difference(other)

    def add(self: Self, element: T, /) -> None:
        """Add an element, replacing an equal element if there is one."""
        data = self._data
        i, found = find(data, element)
        if found:
            data[i] = element
        else:
            data.insert(i, element)

    def clear(self: Self, /) -> None:
        self._data.clear()

    def copy(self: Self, /) -> Self:
        return self.__copy__()

    def difference(self: Self, /, *iterables: Iterable[Any]) -> Self:
        data = self._data
        for iterable in iterables:
            data = merge(data, as_sorted(iterable), DIFFERENCE)
        if data is self._data:
            data = data.copy()
        return type(self).from_sorted_unchecked(data)

    def difference_update(self: Self, /, *iterables: Iterable[Any]) -> None:
        for iterable in iterables:
            merge_in_place(self._data, as_sorted(iterable), DIFFERENCE)

    def discard(self: Self, element: Any, /) -> None:
        data = self._data
        i, found = find(data, element)
        if found:
            del data[i]

    @classmethod
    def from_sorted(cls: type[Self], iterable: Iterable[T], /) -> Self:
        """
        Create a set from strictly increasing elements without sorting
        them again.

        Raises
        ------
        ValueError:
            The elements are not strictly increasing.
        """
        data = list(iterable)
        if not is_strictly_sorted(data):
            raise ValueError(f"{cls.__name__}.from_sorted expects strictly increasing elements")
        return cls.from_sorted_unchecked(data)

    @classmethod
    def from_sorted_unchecked(cls: type[Self], data: list[T], /) -> Self:
        """
        Create a set which takes ownership of a list, trusting the
        caller that it is strictly increasing.

        Never use this on data from an untrusted source. A list which
        is not strictly increasing makes every later operation on the
        set unreliable. Use ``from_sorted`` to check it instead.
        """
        self = cls.__new__(cls)
        self._data = data
        return self

    def intersection(self: Self, /, *iterables: Iterable[Any]) -> Self:
        data = self._data
        for iterable in iterables:
            data = merge(data, as_sorted(iterable), INTERSECTION)
        if data is self._data:
            data = data.copy()
        return type(self).from_sorted_unchecked(data)

    def intersection_update(self: Self, /, *iterables: Iterable[Any]) -> None:
        for iterable in iterables:
            merge_in_place(self._data, as_sorted(iterable), INTERSECTION)

    def isdisjoint(self: Self, iterable: Iterable[Any], /) -> bool:
        return is_disjoint(self._data, as_sorted(iterable))

    def issubset(self: Self, iterable: Iterable[Any], /) -> bool:
        return is_subset(self._data, as_sorted(iterable))

    def issuperset(self: Self, iterable: Iterable[Any], /) -> bool:
        return is_superset(self._data, as_sorted(iterable))

    def pop(self: Self, /) -> T:
        """Remove and return the largest element."""
        if not self._data:
            raise KeyError("pop from an empty set")
        return self._data.pop()

    def remove(self: Self, element: Any, /) -> None:
        data = self._data
        i, found = find(data, element)
        if not found:
            raise KeyError(element)
        del data[i]

    @classmethod
    def singleton(cls: type[Self], element: T, /) -> Self:
        return cls.from_sorted_unchecked([element])

    def symmetric_difference(self: Self, iterable: Iterable[T], /) -> Self:
        return type(self).from_sorted_unchecked(merge(self._data, as_sorted(iterable), SYMMETRIC_DIFFERENCE))

    def symmetric_difference_update(self: Self, iterable: Iterable[T], /) -> None:
        merge_in_place(self._data, as_sorted(iterable), SYMMETRIC_DIFFERENCE)

    def to_list(self: Self, /) -> list[T]:
        return self._data.copy()

    def union(self: Self, /, *iterables: Iterable[T]) -> Self:
        data = self._data
        for iterable in iterables:
            data = merge(data, as_sorted(iterable), UNION)
        if data is self._data:
            data = data.copy()
        return type(self).from_sorted_unchecked(data)

    def update(self: Self, /, *iterables: Iterable[T]) -> None:
        for iterable in iterables:
            merge_in_place(self._data, as_sorted(iterable), UNION)
