"""Parse legacy favorites JSON into domain models."""

from typing import Any

from favorites_tree.core.store.sqlite_store import generate_id
from favorites_tree.models.resource import Resource, ResourceType


def _optional_str(raw: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return str(value)
    return None


def parse_resource(raw: dict[str, Any]) -> Resource:
    """Parse one stored favorite.

    Accepts the camelCase keys written by the editor extension as well as
    this project's snake_case field names. Entries without an id get a new one.
    """
    try:
        kind = ResourceType(raw["type"])
    except (KeyError, ValueError) as e:
        msg = f"Unknown resource type in {raw!r}"
        raise ValueError(msg) from e

    sort_order = raw.get("sortOrder", raw.get("sort_order"))
    return Resource(
        id=_optional_str(raw, "id") or generate_id(),
        name=str(raw.get("name") or raw.get("label") or ""),
        type=kind,
        parent_id=_optional_str(raw, "parent_id", "parentId"),
        sort_order=int(sort_order) if sort_order is not None else None,
        fs_path=_optional_str(raw, "fsPath", "fs_path"),
        workspace_path=raw.get("workspacePath", raw.get("workspace_path")),
        workspace_root=raw.get("workspaceRoot", raw.get("workspace_root")),
        url=_optional_str(raw, "url"),
        url_alias=_optional_str(raw, "urlAlias", "url_alias"),
        highlight_color=_optional_str(raw, "highlightColor", "highlight_color"),
        highlight_badge=_optional_str(raw, "highlightBadge", "highlight_badge"),
    )


def parse_favorites_data(data: Any) -> list[Resource]:
    """Parse a legacy favorites list into Resources.

    Args:
        data: Decoded JSON: a list of stored resources, or a dict with a
            ``resources`` list.

    Returns:
        Resources in file order.
    """
    items = data.get("resources", []) if isinstance(data, dict) else data
    if not isinstance(items, list):
        msg = f"Expected a list of favorites, got {type(items).__name__}"
        raise ValueError(msg)

    resources = [parse_resource(item) for item in items]

    ids = [r.id for r in resources]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        msg = f"Duplicate resource ids: {duplicates!r}"
        raise ValueError(msg)
    return resources
