"""Map a drop target to a destination parent and insertion index."""

from collections.abc import Sequence

from favorites_tree.core.tree.navigation import get_siblings
from favorites_tree.models.resource import APPEND, Placement, Resource


def resolve_drop_target(resources: Sequence[Resource], target: Resource | None) -> Placement:
    """Resolve where dropped resources land.

    - No target (root drop): root, appended.
    - Group target: inside the group, appended.
    - Any other target: the target's parent, immediately after the target in
      the current sibling ordering. Falls back to appending if the target is
      not among its computed siblings.
    """
    if target is None:
        return Placement(parent_id=None, index=APPEND)

    if target.is_group:
        return Placement(parent_id=target.id, index=APPEND)

    parent_id = target.parent_id or None
    siblings = get_siblings(resources, parent_id=parent_id)
    for position, sibling in enumerate(siblings):
        if sibling.id == target.id:
            return Placement(parent_id=parent_id, index=position + 1)
    return Placement(parent_id=parent_id, index=APPEND)


def resolve_destination_group(target: Resource | None) -> str | None:
    """Group that receives externally dropped paths.

    Same group/non-group branching as :func:`resolve_drop_target`, without
    needing the snapshot.
    """
    if target is None:
        return None
    if target.is_group:
        return target.id
    return target.parent_id or None
