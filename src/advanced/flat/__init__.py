"""
Sets and maps stored as single sorted lists.

Binary operations merge the sorted lists of both operands, bisecting
into the larger operand instead of stepping through it. ``TotalSet``
adds complements of finite sets and ``TotalMap`` adds maps with a
default value for every key.
"""
from ._src.dedup import DEFAULT_KEEP, Keep, is_strictly_sorted, sort_combine, sort_dedup
from ._src.flat_map import FlatMap
from ._src.flat_set import FlatSet
from ._src.merge import MergeOperation, find, merge, merge_in_place, merge_predicate
from ._src.policies import MISSING, prefer_right
from ._src.total_map import TotalMap
from ._src.total_set import TotalSet

__all__ = [
    "DEFAULT_KEEP",
    "FlatMap",
    "FlatSet",
    "Keep",
    "MISSING",
    "MergeOperation",
    "TotalMap",
    "TotalSet",
    "find",
    "is_strictly_sorted",
    "merge",
    "merge_in_place",
    "merge_predicate",
    "prefer_right",
    "sort_combine",
    "sort_dedup",
]
