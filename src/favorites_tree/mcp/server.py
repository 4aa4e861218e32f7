"""MCP server exposing favorites tree listing and drag-and-drop tools."""

import os
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from favorites_tree.config import (
    DATABASE_FILENAME,
    resolve_data_directory,
    resolve_workspace_root,
)
from favorites_tree.controller import FavoritesDragAndDropController
from favorites_tree.core.database.schema import migrate_schema
from favorites_tree.core.store.sqlite_store import SqliteResourceStore
from favorites_tree.core.tree.markdown import render_tree_as_markdown
from favorites_tree.core.workspace import ProjectWorkspace
from favorites_tree.events import RefreshChannel
from favorites_tree.models.resource import APPEND, Resource

# --- Core functions (testable without MCP context) ---


def _serialize(resource: Resource) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": resource.id,
        "name": resource.name,
        "type": resource.type.value,
        "parent_id": resource.parent_id,
        "sort_order": resource.sort_order,
    }
    if resource.url:
        data["url"] = resource.url
    if resource.fs_path:
        data["path"] = resource.fs_path
    return data


def _find(resources: list[Resource], resource_id: str) -> Resource | None:
    return next((r for r in resources if r.id == resource_id), None)


async def favorites_list(
    controller: FavoritesDragAndDropController,
    *,
    group: str | None = None,
    output_format: str = "markdown",
) -> dict[str, Any]:
    """List favorites as a markdown tree or a flat JSON list.

    Args:
        group: Only show the children of this group id.
        output_format: "markdown" or "json".
    """
    resources = await controller.store.get_all()
    if group is not None and _find(resources, group) is None:
        return {"error": f"Group '{group}' not found."}

    if output_format == "json":
        return {
            "count": len(resources),
            "resources": [_serialize(r) for r in resources],
        }
    return {
        "count": len(resources),
        "content": render_tree_as_markdown(resources, root_id=group, show_ids=True),
    }


async def favorites_move(
    controller: FavoritesDragAndDropController,
    *,
    ids: list[str],
    target_id: str | None = None,
) -> dict[str, Any]:
    """Move favorites as if they were dragged onto ``target_id``.

    Args:
        ids: Resource ids in drag order.
        target_id: Drop target id (None = root). Dropping on a group appends
            into it; dropping on anything else inserts right after it.
    """
    if not ids:
        return {"error": "No ids to move."}

    target: Resource | None = None
    if target_id is not None:
        target = _find(await controller.store.get_all(), target_id)
        if target is None:
            return {"error": f"Target '{target_id}' not found."}

    report = await controller.reorder(ids, target)
    if report is None:
        return {"error": "Nothing to move."}
    return {
        "success": True,
        "parent_id": report.placement.parent_id,
        "index": None if report.placement.index is APPEND else report.placement.index,
        "moved": list(report.moved_ids),
        "rejected": list(report.rejected_ids),
        "missing": list(report.missing_ids),
    }


async def favorites_drop(
    controller: FavoritesDragAndDropController,
    *,
    uris: list[str],
    target_id: str | None = None,
) -> dict[str, Any]:
    """Add dropped file URIs or paths next to or inside ``target_id``.

    Args:
        uris: file:// URIs or absolute paths. Other schemes are ignored.
        target_id: Drop target id (None = root).
    """
    target: Resource | None = None
    if target_id is not None:
        target = _find(await controller.store.get_all(), target_id)
        if target is None:
            return {"error": f"Target '{target_id}' not found."}

    report = await controller.ingest_external_drop(target, uris)
    return {
        "success": report.succeeded > 0,
        "group_id": report.group_id,
        "added": [o.path for o in report.outcomes if o.succeeded],
        "failed": [{"path": o.path, "error": o.error} for o in report.outcomes if not o.succeeded],
    }


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    conn: sqlite3.Connection
    controller: FavoritesDragAndDropController
    warnings: list[str] = field(default_factory=list)


def _resolve_paths() -> tuple[Path, Path]:
    return resolve_data_directory(), resolve_workspace_root()


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Open database on startup, close on shutdown."""
    data_dir, workspace_root = _resolve_paths()
    data_dir.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(data_dir / DATABASE_FILENAME))
    migrate_schema(conn)

    warnings: list[str] = []
    store = SqliteResourceStore(conn, workspace_root=workspace_root)
    controller = FavoritesDragAndDropController(
        store,
        ProjectWorkspace(workspace_root),
        RefreshChannel(),
        warn=warnings.append,
    )
    logger.info("Favorites server ready: data {}, workspace {}", data_dir, workspace_root)
    try:
        yield ServerContext(conn=conn, controller=controller, warnings=warnings)
    finally:
        conn.close()


mcp_server = FastMCP(
    "favorites-tree",
    instructions="""\
Favorites is an ordered tree of files, folders, URLs and groups.

- favorites_list_tool shows the tree with ids.
- favorites_move_tool moves ids as a drag-and-drop: onto a group appends
  inside it, onto any other item inserts right after it, no target means root.
- favorites_drop_tool adds file:// URIs or paths the same way.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


def _with_warnings(ctx: ServerContext, result: dict[str, Any]) -> dict[str, Any]:
    if ctx.warnings:
        result["warnings"] = list(dict.fromkeys(ctx.warnings))
        ctx.warnings.clear()
    return result


@mcp_server.tool()
async def favorites_list_tool(
    ctx: Context,
    group: str | None = None,
    output_format: str = "markdown",
) -> dict[str, Any]:
    """List favorites as a markdown tree (with ids) or flat JSON.

    Args:
        group: Only show the children of this group id.
        output_format: "markdown" or "json".
    """
    return await favorites_list(_ctx(ctx).controller, group=group, output_format=output_format)


@mcp_server.tool()
async def favorites_move_tool(
    ctx: Context,
    ids: list[str],
    target_id: str | None = None,
) -> dict[str, Any]:
    """Move favorites onto a target, like a drag-and-drop in the tree view.

    Args:
        ids: Resource ids in drag order.
        target_id: Drop target id (omit for root).
    """
    server_ctx = _ctx(ctx)
    result = await favorites_move(server_ctx.controller, ids=ids, target_id=target_id)
    return _with_warnings(server_ctx, result)


@mcp_server.tool()
async def favorites_drop_tool(
    ctx: Context,
    uris: list[str],
    target_id: str | None = None,
) -> dict[str, Any]:
    """Add file URIs or paths onto a target, like a drop from a file browser.

    Args:
        uris: file:// URIs or absolute paths.
        target_id: Drop target id (omit for root).
    """
    server_ctx = _ctx(ctx)
    result = await favorites_drop(server_ctx.controller, uris=uris, target_id=target_id)
    return _with_warnings(server_ctx, result)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from favorites_tree.logging_config import configure_logging

    configure_logging(verbose=os.environ.get("FAVORITES_VERBOSE") == "1")
    mcp_server.run(transport="stdio")
