"""
Tests for the Paginator
"""

import pytest

from hpgroups.engine import paginate
from hpgroups.exceptions import QueryConfigError


def test_slice_and_total():
    assert paginate(list(range(10)), 2, 3) == ([2, 3, 4], 10)


def test_slice_clipped_at_end():
    assert paginate(list(range(5)), 3, 10) == ([3, 4], 5)


@pytest.mark.parametrize("start_index", [5, 6, 100])
def test_start_past_end_is_empty(start_index):
    assert paginate(list(range(5)), start_index, 10) == ([], 5)


def test_zero_slice_size():
    assert paginate(list(range(5)), 0, 0) == ([], 5)


@pytest.mark.parametrize(("start_index", "slice_size", "field"), [(-1, 10, "start_index"), (0, -1, "slice_size")])
def test_negative_inputs_rejected(start_index, slice_size, field):
    with pytest.raises(QueryConfigError) as exc_info:
        paginate([1, 2, 3], start_index, slice_size)

    assert exc_info.value.field == field
