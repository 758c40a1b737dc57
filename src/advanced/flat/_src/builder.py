from collections.abc import Sequence
from typing import Any, Final, Generic, TypeVar

T = TypeVar("T")

Self = TypeVar("Self", bound="InPlaceBuilder")


class InPlaceBuilder(Generic[T]):
    """
    Rebuilds a list out of itself.

    The list is split into three regions::

        data[:target]          the result written so far
        data[target:source]    a gap of unused slots
        data[source:]          the input which has not been read yet

    Writes go to ``target`` and reads come from ``source``. Since
    ``target <= source`` at all times, no slot is ever overwritten
    before it has been read.

    Example
    -------
        >>> data = [1, 2, 3, 4]
        >>> builder = InPlaceBuilder(data)
        >>> builder.consume(1, True)
        >>> builder.push(5)
        >>> builder.consume(2, False)
        >>> builder.consume(1, True)
        >>> builder.finish()
        [1, 5, 4]
        >>> data
        [1, 5, 4]
    """
    data: Final[list[Any]]
    source: int
    target: int

    __slots__ = {
        "data":
            "The list being rebuilt.",
        "source":
            "The start of the unread input.",
        "target":
            "The end of the written result.",
    }

    def __init__(self: Self, data: list[T], /) -> None:
        self.data = data
        self.source = 0
        self.target = 0

    def __repr__(self: Self, /) -> str:
        return (
            f"{type(self).__name__}"
            f"(0..{self.target}, {self.source}..{len(self.data)})"
        )

    def _reserve(self: Self, n: int, /) -> None:
        if self.target + n > self.source:
            data = self.data
            gap = max(n, len(data) - self.source)
            data[self.source : self.source] = [None] * gap
            self.source += gap

    def abort(self: Self, original: Sequence[T], /) -> list[T]:
        """Discard everything written so far and restore the list to ``original``."""
        self.data[:] = original
        self.source = 0
        self.target = 0
        return self.data

    def check(self: Self, /) -> None:
        assert 0 <= self.target <= self.source <= len(self.data), repr(self)

    def consume(self: Self, n: int, take: bool, /) -> None:
        """
        Consume up to ``n`` elements from the source. If ``take`` is
        true they are moved to the target, otherwise they are dropped.
        """
        data = self.data
        source = self.source
        n = min(n, len(data) - source)
        if take:
            if self.target != source:
                data[self.target : self.target + n] = data[source : source + n]
            self.target += n
        else:
            data[source : source + n] = [None] * n
        self.source = source + n
        assert self.target <= self.source

    def extend(self: Self, items: Sequence[T], /) -> None:
        n = len(items)
        if n > 0:
            self._reserve(n)
            self.data[self.target : self.target + n] = items
            self.target += n
            assert self.target <= self.source

    def finish(self: Self, /) -> list[T]:
        """Drop the gap and any unread input, leaving only the result."""
        del self.data[self.target :]
        self.source = self.target
        return self.data

    def pop_front(self: Self, n: int = 1, /) -> list[T]:
        """Remove up to ``n`` elements from the source and return them."""
        data = self.data
        source = self.source
        items = data[source : source + n]
        data[source : source + len(items)] = [None] * len(items)
        self.source = source + len(items)
        return items

    def push(self: Self, item: T, /) -> None:
        self._reserve(1)
        self.data[self.target] = item
        self.target += 1
        assert self.target <= self.source

    @property
    def remaining(self: Self, /) -> int:
        return len(self.data) - self.source
