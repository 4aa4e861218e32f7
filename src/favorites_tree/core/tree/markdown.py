"""Render the favorites tree as markdown."""

import io
from collections.abc import Sequence

from favorites_tree.core.tree.navigation import group_by_parent, order_siblings
from favorites_tree.models.resource import Resource, ResourceType


def _label(resource: Resource) -> str:
    if resource.type is ResourceType.URL:
        return f"[{resource.name}]({resource.url})"
    if resource.type is ResourceType.GROUP:
        return f"**{resource.name}**"
    if resource.type is ResourceType.DIRECTORY:
        return f"{resource.name}/"
    return resource.name


def render_tree_as_markdown(
    resources: Sequence[Resource],
    *,
    root_id: str | None = None,
    max_depth: int | None = None,
    show_ids: bool = False,
) -> str:
    """Render favorites as an indented markdown list.

    Args:
        resources: Full snapshot.
        root_id: Render only the children of this group (None = whole tree).
        max_depth: Max levels to include (None = unlimited).
        show_ids: Append each resource id.

    Returns:
        Markdown string with bullet-list hierarchy, siblings in sort order.
    """
    children = group_by_parent(resources)
    out = io.StringIO()

    def _walk(parent_id: str | None, depth: int, seen: frozenset[str]) -> None:
        for r in order_siblings(children.get(parent_id, [])):
            suffix = f" `{r.id}`" if show_ids else ""
            out.write(f"{'    ' * depth}- {_label(r)}{suffix}\n")
            if r.id in seen:
                continue
            grandchildren = children.get(r.id, [])
            if not grandchildren:
                continue
            if max_depth is not None and depth + 1 >= max_depth:
                noun = "child" if len(grandchildren) == 1 else "children"
                out.write(f"{'    ' * (depth + 1)}- ... ({len(grandchildren)} more {noun})\n")
                continue
            _walk(r.id, depth + 1, seen | {r.id})

    _walk(root_id, 0, frozenset({root_id} if root_id else ()))
    return out.getvalue()
