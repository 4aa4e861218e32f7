"""Tests for tree navigation (siblings, ancestors)."""

from favorites_tree.core.tree.navigation import (
    get_ancestors,
    get_siblings,
    group_by_parent,
)
from favorites_tree.models.resource import Resource
from tests.unit.fakes import make


def test_siblings_sorted_by_sort_order(nested: list[Resource]) -> None:
    assert [r.id for r in get_siblings(nested, parent_id="G1")] == ["X", "G2"]
    assert [r.id for r in get_siblings(nested, parent_id=None)] == ["G1", "F"]


def test_empty_string_parent_counts_as_root() -> None:
    resources = [make("A", parent_id="", sort_order=1), make("B", sort_order=0)]
    assert [r.id for r in get_siblings(resources, parent_id=None)] == ["B", "A"]
    assert set(group_by_parent(resources)) == {None}


def test_ancestors_root_first(nested: list[Resource]) -> None:
    assert [r.id for r in get_ancestors(nested, resource_id="Y")] == ["G1", "G2"]
    assert get_ancestors(nested, resource_id="G1") == ()


def test_ancestors_stop_on_corrupt_cycle() -> None:
    resources = [make("P", parent_id="Q"), make("Q", parent_id="P")]
    assert [r.id for r in get_ancestors(resources, resource_id="P")] == ["Q"]

