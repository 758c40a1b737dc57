"""
Sets which may be the complement of a finite set.

A ``TotalSet`` stores a finite ``FlatSet`` of elements and a negation
flag. When the flag is set, the total set contains everything except
the stored elements. Every binary operation on two total sets reduces
to one merge of the stored elements, chosen from a table by the
operation and the negation flags of both operands.

The universe is never bounded, so a complement is never a subset of a
finite set and the complement of a finite set is never empty.
"""
import enum
import logging
from collections.abc import Iterable, Iterator
from collections.abc import Set as AbstractSet
from typing import Any, Final, Generic, TypeVar, Union

from .flat_set import FlatSet
from .merge import MergeOperation, merge, merge_in_place
from .policies import DIFFERENCE, INTERSECTION, SYMMETRIC_DIFFERENCE, UNION
from .policies import is_disjoint, is_equal, is_subset, is_superset

T = TypeVar("T")

Self = TypeVar("Self", bound="TotalSet")

logger = logging.getLogger(__name__)


class SetOp(enum.Enum):
    UNION = "union"
    INTERSECTION = "intersection"
    DIFFERENCE = "difference"
    SYMMETRIC_DIFFERENCE = "symmetric_difference"


# (operation, left negated, right negated) -> (merge, swap operands, result negated)
OPERATION_TABLE: Final[dict[tuple[SetOp, bool, bool], tuple[MergeOperation, bool, bool]]] = {
    (SetOp.UNION, False, False): (UNION, False, False),
    (SetOp.UNION, False, True): (DIFFERENCE, True, True),
    (SetOp.UNION, True, False): (DIFFERENCE, False, True),
    (SetOp.UNION, True, True): (INTERSECTION, False, True),
    (SetOp.INTERSECTION, False, False): (INTERSECTION, False, False),
    (SetOp.INTERSECTION, False, True): (DIFFERENCE, False, False),
    (SetOp.INTERSECTION, True, False): (DIFFERENCE, True, False),
    (SetOp.INTERSECTION, True, True): (UNION, False, True),
    (SetOp.DIFFERENCE, False, False): (DIFFERENCE, False, False),
    (SetOp.DIFFERENCE, False, True): (INTERSECTION, False, False),
    (SetOp.DIFFERENCE, True, False): (UNION, False, True),
    (SetOp.DIFFERENCE, True, True): (DIFFERENCE, True, False),
    (SetOp.SYMMETRIC_DIFFERENCE, False, False): (SYMMETRIC_DIFFERENCE, False, False),
    (SetOp.SYMMETRIC_DIFFERENCE, False, True): (SYMMETRIC_DIFFERENCE, False, True),
    (SetOp.SYMMETRIC_DIFFERENCE, True, False): (SYMMETRIC_DIFFERENCE, False, True),
    (SetOp.SYMMETRIC_DIFFERENCE, True, True): (SYMMETRIC_DIFFERENCE, False, False),
}


def _never(a: Any, b: Any, /) -> bool:
    return False


# (left negated, right negated) -> predicate on the stored elements
ISSUBSET_TABLE: Final = {
    (False, False): is_subset,
    (False, True): is_disjoint,
    (True, False): _never,
    (True, True): is_superset,
}

ISDISJOINT_TABLE: Final = {
    (False, False): is_disjoint,
    (False, True): is_subset,
    (True, False): is_superset,
    (True, True): _never,
}

TotalSetLike = Union["TotalSet[T]", FlatSet[T], AbstractSet[T]]


class TotalSet(Generic[T]):
    """
    A set which is either finite or the complement of a finite set.

    Examples
    --------
        >>> a = TotalSet.all()
        >>> a.discard(1)
        >>> 1 in a, 2 in a
        (False, True)
        >>> (a | TotalSet([1])).is_all()
        True
        >>> ~TotalSet([1, 2]) & TotalSet([2, 3])
        TotalSet([3])
    """
    _elements: FlatSet[T]
    _negated: bool

    __slots__ = {
        "_elements":
            "The finite set of elements, which are excluded if negated.",
        "_negated":
            "True if the set is the complement of its elements.",
    }

    def __init__(self: Self, iterable: Iterable[T] = (), /, negated: bool = False) -> None:
        self._elements = FlatSet(iterable)
        self._negated = bool(negated)

    def __and__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, (TotalSet, AbstractSet)):
            return NotImplemented
        return self._binary(SetOp.INTERSECTION, other)

    def __contains__(self: Self, element: Any, /) -> bool:
        return self._negated != (element in self._elements)

    def __copy__(self: Self, /) -> Self:
        return type(self)._from_parts(self._elements.copy(), self._negated)

    def __eq__(self: Self, other: Any, /) -> bool:
        if isinstance(other, TotalSet):
            return (
                self._negated == other._negated
                and is_equal(self._elements._data, other._elements._data)
            )
        elif isinstance(other, AbstractSet):
            return not self._negated and self._elements == other
        else:
            return NotImplemented

    def __ge__(self: Self, other: Any, /) -> bool:
        if not isinstance(other, (TotalSet, AbstractSet)):
            return NotImplemented
        return self.issuperset(other)

    def __getstate__(self: Self, /) -> tuple[list[T], bool]:
        return (self._elements._data, self._negated)

    def __gt__(self: Self, other: Any, /) -> bool:
        if not isinstance(other, (TotalSet, AbstractSet)):
            return NotImplemented
        return self != other and self.issuperset(other)

    def __iand__(self: Self, other: TotalSetLike[T], /) -> Self:
        self._binary_update(SetOp.INTERSECTION, other)
        return self

    def __invert__(self: Self, /) -> Self:
        return type(self)._from_parts(self._elements.copy(), not self._negated)

    def __ior__(self: Self, other: TotalSetLike[T], /) -> Self:
        self._binary_update(SetOp.UNION, other)
        return self

    def __isub__(self: Self, other: TotalSetLike[T], /) -> Self:
        self._binary_update(SetOp.DIFFERENCE, other)
        return self

    def __ixor__(self: Self, other: TotalSetLike[T], /) -> Self:
        self._binary_update(SetOp.SYMMETRIC_DIFFERENCE, other)
        return self

    def __le__(self: Self, other: Any, /) -> bool:
        if not isinstance(other, (TotalSet, AbstractSet)):
            return NotImplemented
        return self.issubset(other)

    def __lt__(self: Self, other: Any, /) -> bool:
        if not isinstance(other, (TotalSet, AbstractSet)):
            return NotImplemented
        return self != other and self.issubset(other)

    def __or__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, (TotalSet, AbstractSet)):
            return NotImplemented
        return self._binary(SetOp.UNION, other)

    def __rand__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return type(self)._coerce(other)._binary(SetOp.INTERSECTION, self)

    def __repr__(self: Self, /) -> str:
        if self._negated:
            return f"~{type(self).__name__}({self._elements._data!r})"
        return f"{type(self).__name__}({self._elements._data!r})"

    def __ror__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return type(self)._coerce(other)._binary(SetOp.UNION, self)

    def __rsub__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return type(self)._coerce(other)._binary(SetOp.DIFFERENCE, self)

    def __rxor__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return type(self)._coerce(other)._binary(SetOp.SYMMETRIC_DIFFERENCE, self)

    def __setstate__(self: Self, state: tuple[Iterable[T], bool], /) -> None:
        elements, negated = state
        self._elements = FlatSet.__new__(FlatSet)
        self._elements.__setstate__(elements)
        self._negated = bool(negated)

    def __sub__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, (TotalSet, AbstractSet)):
            return NotImplemented
        return self._binary(SetOp.DIFFERENCE, other)

    def __xor__(self: Self, other: Any, /) -> Self:
        if not isinstance(other, (TotalSet, AbstractSet)):
            return NotImplemented
        return self._binary(SetOp.SYMMETRIC_DIFFERENCE, other)

    def _binary(self: Self, op: SetOp, other: TotalSetLike[T], /) -> Self:
        other = type(self)._coerce(other)
        operation, swap, negated = OPERATION_TABLE[op, self._negated, other._negated]
        a = self._elements._data
        b = other._elements._data
        if swap:
            a, b = b, a
        return type(self)._from_parts(FlatSet.from_sorted_unchecked(merge(a, b, operation)), negated)

    def _binary_update(self: Self, op: SetOp, other: TotalSetLike[T], /) -> None:
        other = type(self)._coerce(other)
        operation, swap, negated = OPERATION_TABLE[op, self._negated, other._negated]
        if swap:
            # The result is built from the other operand's elements.
            logger.debug("%s swaps operands in place, copying %d elements", op.value, len(other._elements))
            data = other._elements.to_list()
            merge_in_place(data, self._elements._data, operation)
            self._elements._data = data
        else:
            merge_in_place(self._elements._data, other._elements._data, operation)
        self._negated = negated

    @classmethod
    def _coerce(cls: type[Self], other: TotalSetLike[T], /) -> "TotalSet[T]":
        if isinstance(other, TotalSet):
            return other
        elif isinstance(other, FlatSet):
            return cls._from_parts(other, False)
        elif isinstance(other, Iterable):
            return cls._from_parts(FlatSet(other), False)
        else:
            raise TypeError(f"expected a set, got {other!r}")

    @classmethod
    def _from_parts(cls: type[Self], elements: FlatSet[T], negated: bool, /) -> Self:
        self = cls.__new__(cls)
        self._elements = elements
        self._negated = negated
        return self

    def add(self: Self, element: T, /) -> None:
        if self._negated:
            self._elements.discard(element)
        else:
            self._elements.add(element)

    @classmethod
    def all(cls: type[Self], /) -> Self:
        """The set of everything."""
        return cls._from_parts(FlatSet(), True)

    def complement(self: Self, /) -> Self:
        return ~self

    @classmethod
    def constant(cls: type[Self], value: bool, /) -> Self:
        """``all()`` if true, ``empty()`` otherwise."""
        return cls._from_parts(FlatSet(), bool(value))

    def copy(self: Self, /) -> Self:
        return self.__copy__()

    def difference(self: Self, other: TotalSetLike[T], /) -> Self:
        return self._binary(SetOp.DIFFERENCE, other)

    def difference_update(self: Self, other: TotalSetLike[T], /) -> None:
        self._binary_update(SetOp.DIFFERENCE, other)

    def discard(self: Self, element: Any, /) -> None:
        if self._negated:
            self._elements.add(element)
        else:
            self._elements.discard(element)

    @property
    def elements(self: Self, /) -> FlatSet[T]:
        """The stored elements, which are excluded if the set is negated."""
        return self._elements

    @classmethod
    def empty(cls: type[Self], /) -> Self:
        return cls._from_parts(FlatSet(), False)

    def intersection(self: Self, other: TotalSetLike[T], /) -> Self:
        return self._binary(SetOp.INTERSECTION, other)

    def intersection_update(self: Self, other: TotalSetLike[T], /) -> None:
        self._binary_update(SetOp.INTERSECTION, other)

    def is_all(self: Self, /) -> bool:
        return self._negated and not self._elements

    def is_empty(self: Self, /) -> bool:
        return not self._negated and not self._elements

    def isdisjoint(self: Self, other: TotalSetLike[T], /) -> bool:
        """
        Check if no element is in both sets.

        Example
        -------
            >>> TotalSet([1, 2]).isdisjoint(~TotalSet([1, 2, 3]))
            True
            >>> (~TotalSet([1])).isdisjoint(~TotalSet([2]))
            False
        """
        other = type(self)._coerce(other)
        predicate = ISDISJOINT_TABLE[self._negated, other._negated]
        return predicate(self._elements._data, other._elements._data)

    def issubset(self: Self, other: TotalSetLike[T], /) -> bool:
        """
        Check if every element of this set is in the other set.

        Example
        -------
            >>> TotalSet([1]).issubset(~TotalSet([2]))
            True
            >>> (~TotalSet([2])).issubset(TotalSet([1]))
            False
        """
        other = type(self)._coerce(other)
        predicate = ISSUBSET_TABLE[self._negated, other._negated]
        return predicate(self._elements._data, other._elements._data)

    def issuperset(self: Self, other: TotalSetLike[T], /) -> bool:
        return type(self)._coerce(other).issubset(self)

    def iter_elements(self: Self, /) -> Iterator[T]:
        """Iterate over the stored elements, excluded ones if negated."""
        return iter(self._elements)

    @property
    def negated(self: Self, /) -> bool:
        return self._negated

    def symmetric_difference(self: Self, other: TotalSetLike[T], /) -> Self:
        return self._binary(SetOp.SYMMETRIC_DIFFERENCE, other)

    def symmetric_difference_update(self: Self, other: TotalSetLike[T], /) -> None:
        self._binary_update(SetOp.SYMMETRIC_DIFFERENCE, other)

    def union(self: Self, other: TotalSetLike[T], /) -> Self:
        return self._binary(SetOp.UNION, other)

    def union_update(self: Self, other: TotalSetLike[T], /) -> None:
        self._binary_update(SetOp.UNION, other)

    update = union_update
