import operator
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, Generic, TypeVar

from .flat_map import FlatMap, MapLike
from .merge import find, merge, merge_in_place
from .policies import KEY, TotalCombine

KT = TypeVar("KT")
VT = TypeVar("VT")
WT = TypeVar("WT")

Self = TypeVar("Self", bound="TotalMap")


class TotalMap(Generic[KT, VT]):
    """
    A map with a default value, defined for every key.

    Only the entries which differ from the default are stored, so two
    total maps describing the same function are stored identically.
    Every operation which may produce a value equal to the default
    removes that entry again.

    Examples
    --------
        >>> m = TotalMap({"a": 1, "b": 0}, default=0)
        >>> m
        TotalMap([('a', 1)], default=0)
        >>> m["a"], m["z"]
        (1, 0)
        >>> m + TotalMap({"a": -1, "c": 2}, default=0)
        TotalMap([('c', 2)], default=0)
        >>> (m + 10)["z"]
        10
    """
    _default: VT
    _entries: FlatMap[KT, VT]

    __slots__ = {
        "_default":
            "The value of every key which is not stored.",
        "_entries":
            "The entries whose values differ from the default.",
    }

    def __init__(self: Self, entries: MapLike[KT, VT] = (), /, *, default: VT) -> None:
        self._entries = FlatMap(entries)
        self._default = default
        self._normalize()

    def __add__(self: Self, other: Any, /) -> Self:
        return self._arithmetic(other, operator.add)

    def __copy__(self: Self, /) -> Self:
        return type(self)._from_parts(self._entries.copy(), self._default)

    def __delitem__(self: Self, key: KT, /) -> None:
        """Reset a key to the default. Keys are never missing, so this never raises."""
        self._reset(key)

    def __eq__(self: Self, other: Any, /) -> bool:
        if not isinstance(other, TotalMap):
            return NotImplemented
        return self._default == other._default and self._entries == other._entries

    def __getitem__(self: Self, key: KT, /) -> VT:
        return self._entries.get(key, self._default)

    def __getstate__(self: Self, /) -> tuple[list[tuple[KT, VT]], VT]:
        return (self._entries._data, self._default)

    def __mul__(self: Self, other: Any, /) -> Self:
        return self._arithmetic(other, operator.mul)

    def __neg__(self: Self, /) -> Self:
        return self.map_values(operator.neg)

    def __radd__(self: Self, other: Any, /) -> Self:
        return self._arithmetic(other, operator.add, reflected=True)

    def __repr__(self: Self, /) -> str:
        return f"{type(self).__name__}({self._entries._data!r}, default={self._default!r})"

    def __rmul__(self: Self, other: Any, /) -> Self:
        return self._arithmetic(other, operator.mul, reflected=True)

    def __rsub__(self: Self, other: Any, /) -> Self:
        return self._arithmetic(other, operator.sub, reflected=True)

    def __rtruediv__(self: Self, other: Any, /) -> Self:
        return self._arithmetic(other, operator.truediv, reflected=True)

    def __setitem__(self: Self, key: KT, value: VT, /) -> None:
        if value == self._default:
            self._reset(key)
        else:
            self._entries[key] = value

    def __setstate__(self: Self, state: tuple[Iterable[tuple[KT, VT]], VT], /) -> None:
        entries, default = state
        self._entries = FlatMap.__new__(FlatMap)
        self._entries.__setstate__(entries)
        self._default = default
        self._normalize()

    def __sub__(self: Self, other: Any, /) -> Self:
        return self._arithmetic(other, operator.sub)

    def __truediv__(self: Self, other: Any, /) -> Self:
        return self._arithmetic(other, operator.truediv)

    def _arithmetic(
        self: Self,
        other: Any,
        function: Callable[[Any, Any], Any],
        /,
        reflected: bool = False,
    ) -> Self:
        if not isinstance(other, TotalMap):
            if isinstance(other, Mapping):
                return NotImplemented
            other = type(self).constant(other)
        if reflected:
            return other.combine(self, function)
        return self.combine(other, function)

    @classmethod
    def _from_parts(cls: type[Self], entries: FlatMap[KT, VT], default: VT, /) -> Self:
        self = cls.__new__(cls)
        self._entries = entries
        self._default = default
        return self

    def _reset(self: Self, key: Any, /) -> None:
        data = self._entries._data
        try:
            i, found = find(data, key, key=KEY)
        except TypeError:
            return
        if found:
            del data[i]

    def _normalize(self: Self, /) -> None:
        default = self._default
        self._entries.retain(lambda key, value: value != default)

    def combine(self: Self, other: "TotalMap[KT, WT]", function: Callable[[VT, WT], Any], /) -> Self:
        """
        Combine two total maps key by key with ``function(left, right)``.
        The new default is ``function`` applied to both defaults.

        Example
        -------
            >>> a = TotalMap({1: 5}, default=1)
            >>> b = TotalMap({2: 7}, default=3)
            >>> a.combine(b, max)
            TotalMap([(1, 5), (2, 7)], default=3)
        """
        r_default = function(self._default, other._default)
        operation = TotalCombine(function, self._default, other._default, r_default)
        data = merge(self._entries._data, other._entries._data, operation)
        return type(self)._from_parts(FlatMap.from_sorted_unchecked(data), r_default)

    def combine_update(self: Self, other: "TotalMap[KT, WT]", function: Callable[[VT, WT], VT], /) -> None:
        """Like ``combine``, but replaces this map with the result."""
        r_default = function(self._default, other._default)
        operation = TotalCombine(function, self._default, other._default, r_default)
        merge_in_place(self._entries._data, other._entries._data, operation)
        self._default = r_default

    @classmethod
    def constant(cls: type[Self], value: VT, /) -> Self:
        """The map of every key to the same value."""
        return cls._from_parts(FlatMap(), value)

    def copy(self: Self, /) -> Self:
        return self.__copy__()

    @property
    def default(self: Self, /) -> VT:
        return self._default

    @property
    def entries(self: Self, /) -> FlatMap[KT, VT]:
        """
        A copy of the entries which differ from the default. Changing it
        does not change this map.
        """
        return self._entries.copy()

    def get(self: Self, key: KT, /) -> VT:
        return self._entries.get(key, self._default)

    def infimum(self: Self, other: "TotalMap[KT, VT]", /) -> Self:
        """The key by key minimum of two maps."""
        return self.combine(other, min)

    def is_constant(self: Self, /) -> bool:
        return not self._entries

    def items(self: Self, /) -> Iterator[tuple[KT, VT]]:
        """Iterate over the entries which differ from the default."""
        return iter(self._entries._data)

    def map_values(self: Self, function: Callable[[VT], WT], /) -> "TotalMap[KT, WT]":
        """
        Apply a function to every value, the default included.

        Example
        -------
            >>> TotalMap({1: 2, 2: 3}, default=1).map_values(lambda x: x % 2)
            TotalMap([(1, 0)], default=1)
        """
        default = function(self._default)
        data = []
        for key, value in self._entries._data:
            value = function(value)
            if value != default:
                data.append((key, value))
        return type(self)._from_parts(FlatMap.from_sorted_unchecked(data), default)

    def supremum(self: Self, other: "TotalMap[KT, VT]", /) -> Self:
        """The key by key maximum of two maps."""
        return self.combine(other, max)
