"""Recompute contiguous sibling ordering for one destination parent."""

from collections.abc import Sequence

from loguru import logger

from favorites_tree.core.tree.navigation import order_siblings
from favorites_tree.models.resource import APPEND, InsertionIndex, Resource


def reconcile_sort_order(
    resources: Sequence[Resource],
    *,
    parent_id: str | None,
    moved_ids: Sequence[str],
    index: InsertionIndex = APPEND,
) -> list[Resource]:
    """Rewrite ``sort_order`` for every child of ``parent_id``.

    Moved children are placed, in drag order, at ``index`` among the
    remaining children; the result is numbered 0..n-1. Only the destination
    sibling set is touched; parents that lost children keep their sparse
    ordering.

    Args:
        resources: Snapshot whose ``parent_id`` values already reflect the move.
        parent_id: Destination parent (None is the root set).
        moved_ids: Ids of moved resources, in the order they were dragged.
        index: Position among the non-moved children, or APPEND.

    Returns:
        The destination sibling set in its final order.
    """
    siblings = [r for r in resources if (r.parent_id or None) == parent_id]

    drag_rank = {rid: rank for rank, rid in enumerate(dict.fromkeys(moved_ids))}
    moved = sorted((r for r in siblings if r.id in drag_rank), key=lambda r: drag_rank[r.id])
    other = order_siblings(r for r in siblings if r.id not in drag_rank)

    insert_at = len(other) if index is APPEND else max(0, min(int(index), len(other)))

    ordered = [*other[:insert_at], *moved, *other[insert_at:]]
    for position, resource in enumerate(ordered):
        resource.sort_order = position

    logger.debug(
        "Reconciled {} children of {!r}: {} moved in at {}",
        len(ordered), parent_id, len(moved), insert_at,
    )
    return ordered
