"""Tree navigation over the flat parent-pointer representation."""

from collections import defaultdict
from collections.abc import Iterable

from favorites_tree.models.resource import Resource


def index_by_id(resources: Iterable[Resource]) -> dict[str, Resource]:
    """Build the id -> resource arena for one operation."""
    return {r.id: r for r in resources}


def group_by_parent(resources: Iterable[Resource]) -> dict[str | None, list[Resource]]:
    """Group resources by ``parent_id``. Each list keeps snapshot order."""
    groups: dict[str | None, list[Resource]] = defaultdict(list)
    for r in resources:
        groups[r.parent_id or None].append(r)
    return groups


def sibling_sort_key(resource: Resource) -> tuple[bool, int, str]:
    """Sort key for a sibling set.

    Resources with a ``sort_order`` come first, by that order. Legacy
    resources without one follow, ordered by case-sensitive name.
    """
    if resource.sort_order is None:
        return (True, 0, resource.name or "")
    return (False, resource.sort_order, "")


def order_siblings(siblings: Iterable[Resource]) -> list[Resource]:
    """Return ``siblings`` sorted by :func:`sibling_sort_key` (stable)."""
    return sorted(siblings, key=sibling_sort_key)


def get_siblings(resources: Iterable[Resource], *, parent_id: str | None) -> list[Resource]:
    """Get the ordered sibling set of ``parent_id`` (None is the root set)."""
    return order_siblings(r for r in resources if (r.parent_id or None) == parent_id)


def get_ancestors(resources: Iterable[Resource], *, resource_id: str) -> tuple[Resource, ...]:
    """Get ancestors of a resource, ordered from root to immediate parent.

    Stops at a missing parent or on a repeated id.
    """
    arena = index_by_id(resources)
    current = arena.get(resource_id)
    chain: list[Resource] = []
    seen = {resource_id}
    while current is not None and current.parent_id and current.parent_id not in seen:
        seen.add(current.parent_id)
        current = arena.get(current.parent_id)
        if current is not None:
            chain.append(current)
    return tuple(reversed(chain))
