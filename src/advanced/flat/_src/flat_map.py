import logging
from collections.abc import Callable, ItemsView, Iterable, Iterator
from collections.abc import KeysView, Mapping, MutableMapping, ValuesView
from operator import itemgetter
from typing import Any, Generic, Optional, TypeVar, Union

from .dedup import is_strictly_sorted, sort_combine, sort_dedup
from .flat_set import FlatSet
from .merge import MergeOperation, find, merge, merge_in_place
from .policies import KEY, KEYED_DIFFERENCE, KEYED_SYMMETRIC_DIFFERENCE
from .policies import CombineIntersection, CombineUnion, prefer_right
from .policies import InnerJoin, LeftJoin, OuterJoin, RightJoin

KT = TypeVar("KT")
VT = TypeVar("VT")
WT = TypeVar("WT")
RT = TypeVar("RT")

Self = TypeVar("Self", bound="FlatMap")

MapLike = Union["FlatMap[KT, VT]", Mapping[KT, VT], Iterable[tuple[KT, VT]]]

logger = logging.getLogger(__name__)


def sorted_items(
    items: MapLike[KT, VT],
    /,
    combine: Optional[Callable[[VT, VT], VT]] = None,
) -> list[tuple[KT, VT]]:
    """The pairs of a map or iterable as a list in strictly increasing key order."""
    if isinstance(items, FlatMap):
        return items._data
    elif isinstance(items, Mapping):
        items = items.items()
    elif not isinstance(items, Iterable):
        raise TypeError(f"expected a mapping or an iterable of pairs, got {items!r}")
    if combine is None:
        return sort_dedup(((key, value) for key, value in items), key=KEY)
    else:
        return sort_combine(((key, value) for key, value in items), combine)


class FlatItemsView(ItemsView[KT, VT]):

    __slots__ = ()

    def __contains__(self, item: Any, /) -> bool:
        key, value = item
        try:
            i, found = find(self._mapping._data, key, key=KEY)
        except TypeError:
            return False
        return found and self._mapping._data[i][1] == value

    def __iter__(self, /) -> Iterator[tuple[KT, VT]]:
        return iter(self._mapping._data)

    def __reversed__(self, /) -> Iterator[tuple[KT, VT]]:
        return reversed(self._mapping._data)


class FlatValuesView(ValuesView[VT]):

    __slots__ = ()

    def __iter__(self, /) -> Iterator[VT]:
        return map(itemgetter(1), self._mapping._data)

    def __reversed__(self, /) -> Iterator[VT]:
        return map(itemgetter(1), reversed(self._mapping._data))


class FlatMap(MutableMapping[KT, VT], Generic[KT, VT]):
    """
    A map stored as a single list of ``(key, value)`` pairs sorted by key.

    Lookup is by bisection. Binary operations merge the pair lists of
    both maps by key. Wherever values of equal keys have to be combined
    and no ``combine`` function is given, the value on the right wins:
    the later pair during construction, the right operand in binary
    operations.

    Examples
    --------
        >>> FlatMap([(1, "a"), (1, "b")])
        FlatMap([(1, 'b')])
        >>> FlatMap({2: "x", 1: "y"}) | FlatMap({2: "z"})
        FlatMap([(1, 'y'), (2, 'z')])
        >>> FlatMap([("a", 1), ("a", 2)], combine=lambda x, y: x + y)
        FlatMap([('a', 3)])
    """
    _data: list[tuple[KT, VT]]

    __slots__ = {
        "_data":
            "The (key, value) pairs in strictly increasing key order.",
    }

    def __init__(
        self: Self,
        items: MapLike[KT, VT] = (),
        /,
        combine: Optional[Callable[[VT, VT], VT]] = None,
    ) -> None:
        data = sorted_items(items, combine)
        if isinstance(items, FlatMap):
            data = data.copy()
        self._data = data

    def __and__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, (FlatMap, Mapping)):
            return NotImplemented
        return self.intersection(other)

    def __contains__(self: Self, key: Any, /) -> bool:
        try:
            return find(self._data, key, key=KEY)[1]
        except TypeError:
            return False

    def __copy__(self: Self, /) -> Self:
        return type(self).from_sorted_unchecked(self._data.copy())

    def __delitem__(self: Self, key: KT, /) -> None:
        data = self._data
        i, found = find(data, key, key=KEY)
        if not found:
            raise KeyError(key)
        del data[i]

    def __eq__(self: Self, other: Any, /) -> bool:
        if isinstance(other, FlatMap):
            return self._data == other._data
        elif isinstance(other, Mapping):
            return dict(self._data) == dict(other.items())
        else:
            return NotImplemented

    def __getitem__(self: Self, key: KT, /) -> VT:
        data = self._data
        i, found = find(data, key, key=KEY)
        if not found:
            raise KeyError(key)
        return data[i][1]

    def __getstate__(self: Self, /) -> list[tuple[KT, VT]]:
        return self._data

    def __iand__(self: Self, other: MapLike[KT, VT], /) -> Self:
        self.intersection_update(other)
        return self

    def __ior__(self: Self, other: MapLike[KT, VT], /) -> Self:
        self.update(other)
        return self

    def __isub__(self: Self, other: MapLike[KT, Any], /) -> Self:
        self.difference_update(other)
        return self

    def __iter__(self: Self, /) -> Iterator[KT]:
        return map(KEY, self._data)

    def __ixor__(self: Self, other: MapLike[KT, VT], /) -> Self:
        self.symmetric_difference_update(other)
        return self

    def __len__(self: Self, /) -> int:
        return len(self._data)

    def __or__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, (FlatMap, Mapping)):
            return NotImplemented
        return self.union(other)

    def __repr__(self: Self, /) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def __reversed__(self: Self, /) -> Iterator[KT]:
        return map(KEY, reversed(self._data))

    def __setitem__(self: Self, key: KT, value: VT, /) -> None:
        self.insert(key, value)

    def __setstate__(self: Self, state: Iterable[tuple[KT, VT]], /) -> None:
        data = [(key, value) for key, value in state]
        if not is_strictly_sorted(data, key=KEY):
            logger.debug("restoring %s from %d unsorted pairs", type(self).__name__, len(data))
            data = sort_dedup(data, key=KEY)
        self._data = data

    def __sub__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, (FlatMap, Mapping)):
            return NotImplemented
        return self.difference(other)

    def __xor__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, (FlatMap, Mapping)):
            return NotImplemented
        return self.symmetric_difference(other)

    def _merged(self: Self, other: MapLike[KT, Any], operation: MergeOperation, /) -> Self:
        return type(self).from_sorted_unchecked(merge(self._data, sorted_items(other), operation))

    def clear(self: Self, /) -> None:
        self._data.clear()

    def copy(self: Self, /) -> Self:
        return self.__copy__()

    def difference(self: Self, other: MapLike[KT, Any], /) -> Self:
        """The pairs whose keys are not in the other map."""
        return self._merged(other, KEYED_DIFFERENCE)

    def difference_update(self: Self, other: MapLike[KT, Any], /) -> None:
        merge_in_place(self._data, sorted_items(other), KEYED_DIFFERENCE)

    @classmethod
    def from_sorted(cls: type[Self], items: Iterable[tuple[KT, VT]], /) -> Self:
        """
        Create a map from pairs in strictly increasing key order
        without sorting them again.

        Raises
        ------
        ValueError:
            The keys are not strictly increasing.
        """
        data = [(key, value) for key, value in items]
        if not is_strictly_sorted(data, key=KEY):
            raise ValueError(f"{cls.__name__}.from_sorted expects strictly increasing keys")
        return cls.from_sorted_unchecked(data)

    @classmethod
    def from_sorted_unchecked(cls: type[Self], data: list[tuple[KT, VT]], /) -> Self:
        """
        Create a map which takes ownership of a list of pairs, trusting
        the caller that the keys are strictly increasing. Never use
        this on data from an untrusted source.
        """
        self = cls.__new__(cls)
        self._data = data
        return self

    def get(self: Self, key: KT, default: Any = None, /) -> Any:
        data = self._data
        try:
            i, found = find(data, key, key=KEY)
        except TypeError:
            return default
        return data[i][1] if found else default

    def inner_join(
        self: Self,
        other: MapLike[KT, WT],
        function: Callable[[KT, VT, WT], Optional[RT]],
        /,
    ) -> "FlatMap[KT, RT]":
        """
        Join the keys found in both maps. ``function(key, left, right)``
        returns the value to store, or None to leave the key out.
        """
        return self._merged(other, InnerJoin(function))

    def inner_join_update(
        self: Self,
        other: MapLike[KT, WT],
        function: Callable[[KT, VT, WT], Optional[VT]],
        /,
    ) -> None:
        merge_in_place(self._data, sorted_items(other), InnerJoin(function))

    def insert(self: Self, key: KT, value: VT, /) -> Optional[VT]:
        """Set the value of a key, returning the previous value or None."""
        data = self._data
        i, found = find(data, key, key=KEY)
        if found:
            previous = data[i][1]
            data[i] = (key, value)
            return previous
        data.insert(i, (key, value))
        return None

    def intersection(
        self: Self,
        other: MapLike[KT, VT],
        /,
        combine: Callable[[VT, VT], VT] = prefer_right,
    ) -> Self:
        """
        The keys found in both maps, with values combined by
        ``combine(left, right)``.

        Example
        -------
            >>> a = FlatMap({1: "a", 2: "b"})
            >>> a.intersection({2: "x", 3: "y"})
            FlatMap([(2, 'x')])
            >>> a.intersection({2: "x"}, combine=lambda left, right: left)
            FlatMap([(2, 'b')])
        """
        return self._merged(other, CombineIntersection(combine))

    def intersection_update(
        self: Self,
        other: MapLike[KT, VT],
        /,
        combine: Callable[[VT, VT], VT] = prefer_right,
    ) -> None:
        merge_in_place(self._data, sorted_items(other), CombineIntersection(combine))

    def items(self: Self, /) -> FlatItemsView[KT, VT]:
        return FlatItemsView(self)

    def keys(self: Self, /) -> KeysView[KT]:
        return KeysView(self)

    def keys_set(self: Self, /) -> FlatSet[KT]:
        """The keys as a set. Keys are already sorted, so this is O(n)."""
        return FlatSet.from_sorted_unchecked([key for key, _ in self._data])

    def left_join(
        self: Self,
        other: MapLike[KT, WT],
        function: Callable[[KT, VT, Any], Optional[RT]],
        /,
    ) -> "FlatMap[KT, RT]":
        """
        Join every key of this map. ``function(key, left, right)`` gets
        ``MISSING`` as ``right`` for keys not in the other map.
        """
        return self._merged(other, LeftJoin(function))

    def left_join_update(
        self: Self,
        other: MapLike[KT, WT],
        function: Callable[[KT, VT, Any], Optional[VT]],
        /,
    ) -> None:
        merge_in_place(self._data, sorted_items(other), LeftJoin(function))

    def map_values(self: Self, function: Callable[[VT], RT], /) -> "FlatMap[KT, RT]":
        return type(self).from_sorted_unchecked([(key, function(value)) for key, value in self._data])

    def outer_join(
        self: Self,
        other: MapLike[KT, WT],
        function: Callable[[KT, Any, Any], Optional[RT]],
        /,
    ) -> "FlatMap[KT, RT]":
        """
        Join every key of either map. ``function(key, left, right)``
        gets ``MISSING`` for the side which does not have the key.

        Example
        -------
            >>> from advanced.flat import MISSING
            >>> def count(key, left, right):
            ...     return (left is not MISSING) + (right is not MISSING)
            >>> FlatMap({1: "a", 2: "b"}).outer_join({2: "c", 3: "d"}, count)
            FlatMap([(1, 1), (2, 2), (3, 1)])
        """
        return self._merged(other, OuterJoin(function))

    def outer_join_update(
        self: Self,
        other: MapLike[KT, WT],
        function: Callable[[KT, Any, Any], Optional[VT]],
        /,
    ) -> None:
        merge_in_place(self._data, sorted_items(other), OuterJoin(function))

    def popitem(self: Self, /) -> tuple[KT, VT]:
        """Remove and return the pair with the largest key."""
        if not self._data:
            raise KeyError("popitem from an empty map")
        return self._data.pop()

    def retain(self: Self, predicate: Callable[[KT, VT], bool], /) -> None:
        """Keep only the pairs for which ``predicate(key, value)`` is true."""
        self._data[:] = [(key, value) for key, value in self._data if predicate(key, value)]

    def right_join(
        self: Self,
        other: MapLike[KT, WT],
        function: Callable[[KT, Any, WT], Optional[RT]],
        /,
    ) -> "FlatMap[KT, RT]":
        return self._merged(other, RightJoin(function))

    def right_join_update(
        self: Self,
        other: MapLike[KT, WT],
        function: Callable[[KT, Any, WT], Optional[VT]],
        /,
    ) -> None:
        merge_in_place(self._data, sorted_items(other), RightJoin(function))

    def symmetric_difference(self: Self, other: MapLike[KT, VT], /) -> Self:
        """The pairs whose keys are in exactly one of the maps."""
        return self._merged(other, KEYED_SYMMETRIC_DIFFERENCE)

    def symmetric_difference_update(self: Self, other: MapLike[KT, VT], /) -> None:
        merge_in_place(self._data, sorted_items(other), KEYED_SYMMETRIC_DIFFERENCE)

    def to_list(self: Self, /) -> list[tuple[KT, VT]]:
        return self._data.copy()

    def union(
        self: Self,
        other: MapLike[KT, VT],
        /,
        combine: Callable[[VT, VT], VT] = prefer_right,
    ) -> Self:
        """
        The keys found in either map. Keys found in both get the value
        ``combine(left, right)``.

        Example
        -------
            >>> a = FlatMap({1: 1, 2: 2})
            >>> a.union({2: 10, 3: 30}, combine=lambda left, right: left + right)
            FlatMap([(1, 1), (2, 12), (3, 30)])
        """
        return self._merged(other, CombineUnion(combine))

    def union_update(
        self: Self,
        other: MapLike[KT, VT],
        /,
        combine: Callable[[VT, VT], VT] = prefer_right,
    ) -> None:
        merge_in_place(self._data, sorted_items(other), CombineUnion(combine))

    def update(self: Self, other: MapLike[KT, VT] = (), /, **kwargs: VT) -> None:
        """Merge in the pairs of another map, its values winning on equal keys."""
        self.union_update(other)
        if kwargs:
            self.union_update(kwargs)

    def values(self: Self, /) -> FlatValuesView[VT]:
        return FlatValuesView(self)
