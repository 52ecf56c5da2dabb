"""
Paginator - returns one window of the sorted, filtered groups.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from hpgroups.exceptions import QueryConfigError

T = TypeVar("T")


def paginate(items: Sequence[T], start_index: int, slice_size: int) -> tuple[list[T], int]:
    """Slice ``items[start_index:start_index + slice_size]``.

    Args:
        items: Full ordered list
        start_index: 0-based index of the first item to return
        slice_size: Maximum number of items to return

    Returns:
        Tuple of (slice, total number of items before slicing). The slice is
        empty when start_index is past the end.

    Raises:
        QueryConfigError: If start_index or slice_size is negative
    """
    if start_index < 0:
        raise QueryConfigError("start_index", f"must be non-negative, got {start_index}")
    if slice_size < 0:
        raise QueryConfigError("slice_size", f"must be non-negative, got {slice_size}")

    return list(items[start_index : start_index + slice_size]), len(items)
