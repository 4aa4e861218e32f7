"""Reject moves that would put a group under itself or a descendant."""

from collections.abc import Mapping

from favorites_tree.core.tree.navigation import get_ancestors
from favorites_tree.models.resource import Resource


def would_create_cycle(
    arena: Mapping[str, Resource],
    *,
    moved: Resource,
    target_parent_id: str | None,
) -> bool:
    """Return True if re-parenting ``moved`` under ``target_parent_id`` forms a cycle.

    Only groups can own children, so non-groups and root placements always pass.
    The ancestor walk also terminates on any revisited id.
    """
    if not moved.is_group or target_parent_id is None:
        return False
    if target_parent_id == moved.id:
        return True
    ancestors = get_ancestors(arena.values(), resource_id=target_parent_id)
    return any(a.id == moved.id for a in ancestors)
