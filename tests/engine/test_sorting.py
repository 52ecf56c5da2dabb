"""
Tests for the Sort Engine
"""

import itertools
import math

from hpgroups.engine import MISSING, GroupedSessions, ResolvedGroup, sort_groups
from hpgroups.models import ColParams, HParamColumn, SortOrder


def _group(name, *values):
    return ResolvedGroup(group=GroupedSessions(name=name, hparams={}, sessions=()), metrics={}, columns=tuple(values))


def _col(order=SortOrder.ASC, missing_first=False, hparam="x"):
    return ColParams(column=HParamColumn(hparam=hparam), order=order, missing_values_first=missing_first)


def _names(groups):
    return [g.name for g in groups]


def test_ascending_and_descending():
    groups = [_group("a", 2.0), _group("b", 1.0), _group("c", 3.0)]

    assert _names(sort_groups(groups, [_col(SortOrder.ASC)])) == ["b", "a", "c"]
    assert _names(sort_groups(groups, [_col(SortOrder.DESC)])) == ["c", "a", "b"]


def test_missing_placement_ignores_direction():
    groups = [_group("a", 2.0), _group("m", MISSING), _group("b", 1.0)]

    assert _names(sort_groups(groups, [_col(SortOrder.ASC, missing_first=False)])) == ["b", "a", "m"]
    assert _names(sort_groups(groups, [_col(SortOrder.DESC, missing_first=False)])) == ["a", "b", "m"]
    assert _names(sort_groups(groups, [_col(SortOrder.ASC, missing_first=True)])) == ["m", "b", "a"]
    assert _names(sort_groups(groups, [_col(SortOrder.DESC, missing_first=True)])) == ["m", "a", "b"]


def test_secondary_key_and_name_tiebreak():
    groups = [_group("d", 1.0, "x"), _group("c", 1.0, "y"), _group("b", 1.0, "x"), _group("a", 0.0, "z")]
    cols = [_col(SortOrder.ASC), _col(SortOrder.DESC, hparam="y")]

    assert _names(sort_groups(groups, cols)) == ["a", "c", "b", "d"]


def test_unspecified_columns_do_not_sort():
    groups = [_group("b", 1.0), _group("a", 2.0)]

    assert _names(sort_groups(groups, [_col(SortOrder.UNSPECIFIED)])) == ["a", "b"]


def test_booleans_and_strings():
    flags = [_group("t", True), _group("f", False)]
    words = [_group("1", "beta"), _group("2", "Alpha"), _group("3", "alpha")]

    assert _names(sort_groups(flags, [_col()])) == ["f", "t"]
    assert _names(sort_groups(words, [_col()])) == ["2", "3", "1"]


def test_nan_sorts_after_numbers():
    groups = [_group("n", math.nan), _group("a", 5.0), _group("b", -1.0)]

    assert _names(sort_groups(groups, [_col()])) == ["b", "a", "n"]


def test_mixed_runtime_types_do_not_raise():
    groups = [_group("s", "text"), _group("f", 1.0), _group("b", True)]

    assert _names(sort_groups(groups, [_col()])) == ["b", "f", "s"]


def test_order_is_total_and_independent_of_input_order():
    groups = [_group("a", 1.0), _group("b", MISSING), _group("c", 1.0), _group("d", 0.5), _group("e", MISSING)]
    cols = [_col(SortOrder.DESC, missing_first=True)]

    orders = {tuple(_names(sort_groups(list(p), cols))) for p in itertools.permutations(groups)}

    assert orders == {("b", "e", "a", "c", "d")}
