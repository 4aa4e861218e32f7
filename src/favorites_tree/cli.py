"""CLI for the favorites tree (import, list, add, move, drop)."""

import asyncio
import json
import sqlite3
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from favorites_tree.config import DATABASE_FILENAME, resolve_data_directory, resolve_workspace_root
from favorites_tree.controller import FavoritesDragAndDropController
from favorites_tree.core.database.schema import migrate_schema
from favorites_tree.core.importer.loader import import_favorites_file
from favorites_tree.core.store.sqlite_store import SqliteResourceStore
from favorites_tree.core.tree.markdown import render_tree_as_markdown
from favorites_tree.core.workspace import ProjectWorkspace
from favorites_tree.events import RefreshChannel
from favorites_tree.logging_config import configure_logging
from favorites_tree.models.resource import IngestReport, MoveReport, Resource

app = typer.Typer(help="Favorites tree: organize files, folders, URLs and groups.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Favorites database directory"),
]
WorkspaceOption = Annotated[
    Path | None,
    typer.Option("--workspace", "-w", help="Primary project root (default: current directory)"),
]
OntoOption = Annotated[
    str | None,
    typer.Option("--onto", "-o", help="Drop target id (omit to drop on the root)"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


@contextmanager
def _open_store(data_dir: Path | None, workspace: Path | None) -> Iterator[SqliteResourceStore]:
    """Open (creating if needed) the favorites database."""
    dst = data_dir or resolve_data_directory()
    dst.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(dst / DATABASE_FILENAME))
    try:
        migrate_schema(conn)
        yield SqliteResourceStore(conn, workspace_root=workspace or resolve_workspace_root())
    finally:
        conn.close()


def _warn(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW, err=True)


def _controller(store: SqliteResourceStore, workspace: Path | None) -> FavoritesDragAndDropController:
    return FavoritesDragAndDropController(
        store,
        ProjectWorkspace(workspace or resolve_workspace_root()),
        RefreshChannel(),
        warn=_warn,
    )


def _find_target(store: SqliteResourceStore, target_id: str | None) -> Resource | None:
    if target_id is None:
        return None
    for r in store.load():
        if r.id == target_id:
            return r
    logger.error("Target {} not found", target_id)
    raise typer.Exit(1)


@app.command(name="import")
def import_cmd(
    file: Path = typer.Argument(..., help="Favorites JSON file"),
    data_dir: DataDirOption = None,
    replace: bool = typer.Option(False, "--replace", help="Delete existing favorites first"),
) -> None:
    """Import a favorites JSON file into the database."""
    if not file.exists():
        logger.error("File not found: {}", file)
        raise typer.Exit(1)

    with _open_store(data_dir, None) as store:
        try:
            stats = import_favorites_file(store.conn, file, replace=replace)
        except (ValueError, json.JSONDecodeError) as e:
            logger.error("Cannot import {}: {}", file, e)
            raise typer.Exit(1) from e
    typer.echo(
        f"Imported {stats.resources_imported} favorites "
        f"({stats.groups_imported} groups)"
    )


@app.command(name="list")
def list_cmd(
    data_dir: DataDirOption = None,
    group: Annotated[str | None, typer.Option("--group", "-g", help="Only this group")] = None,
    max_depth: Annotated[int | None, typer.Option("--depth", help="Max levels")] = None,
    show_ids: bool = typer.Option(True, "--ids/--no-ids", help="Show resource ids"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show the favorites tree."""
    with _open_store(data_dir, None) as store:
        resources = store.load()

    if output_json:
        data = [
            {
                "id": r.id,
                "name": r.name,
                "type": r.type.value,
                "parent_id": r.parent_id,
                "sort_order": r.sort_order,
            }
            for r in resources
        ]
        typer.echo(json.dumps(data, indent=2))
        return

    text = render_tree_as_markdown(resources, root_id=group, max_depth=max_depth, show_ids=show_ids)
    typer.echo(text.rstrip("\n") if text else "No favorites.")


@app.command(name="add-group")
def add_group_cmd(
    name: str = typer.Argument(..., help="Group name"),
    parent: Annotated[str | None, typer.Option("--parent", "-p", help="Parent group id")] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Create a group."""
    with _open_store(data_dir, None) as store:
        try:
            group = asyncio.run(store.add_group(name, parent))
        except ValueError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from e
    typer.echo(group.id)


@app.command(name="add")
def add_cmd(
    paths: list[Path] = typer.Argument(..., help="Files or directories to favorite"),
    group: Annotated[str | None, typer.Option("--group", "-g", help="Destination group id")] = None,
    data_dir: DataDirOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Add files or directories, classified as in-workspace or external."""
    with _open_store(data_dir, workspace) as store:
        controller = _controller(store, workspace)
        report = asyncio.run(controller.adapter.add_paths(group, [str(p) for p in paths]))
    _echo_ingest(report)
    if report.failed:
        raise typer.Exit(1)


@app.command(name="add-url")
def add_url_cmd(
    url: str = typer.Argument(..., help="http(s) URL"),
    alias: Annotated[str | None, typer.Option("--alias", "-a", help="Display name")] = None,
    group: Annotated[str | None, typer.Option("--group", "-g", help="Destination group id")] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Add a URL favorite."""
    with _open_store(data_dir, None) as store:
        try:
            resource = asyncio.run(store.add_url(url, alias=alias, parent_id=group))
        except ValueError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from e
    typer.echo(resource.id)


@app.command()
def move(
    ids: list[str] = typer.Argument(..., help="Ids to move, in drag order"),
    onto: OntoOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """Move favorites as if dragged onto a target."""
    with _open_store(data_dir, None) as store:
        target = _find_target(store, onto)
        report = asyncio.run(_controller(store, None).reorder(ids, target))
    if report is not None:
        _echo_move(report)


@app.command()
def drop(
    onto: OntoOption = None,
    payload: Annotated[
        str | None,
        typer.Option("--payload", help="text/uri-list content (default: read stdin)"),
    ] = None,
    data_dir: DataDirOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Drop a text/uri-list payload, as from an external file browser."""
    text = payload if payload is not None else sys.stdin.read()
    with _open_store(data_dir, workspace) as store:
        target = _find_target(store, onto)
        report = asyncio.run(_controller(store, workspace).ingest_external_drop(target, text))
    _echo_ingest(report)


def _echo_move(report: MoveReport) -> None:
    where = report.placement.parent_id or "root"
    typer.echo(f"Moved {len(report.moved_ids)} into {where}")
    for outcome in report.outcomes:
        if outcome.status != "moved":
            typer.echo(f"  {outcome.status}: {outcome.resource_id}")


def _echo_ingest(report: IngestReport) -> None:
    if not report.outcomes:
        typer.echo("No local paths found.")
        return
    typer.echo(f"Added {report.succeeded}, failed {report.failed}")
    for outcome in report.outcomes:
        line = f"  {outcome.status}: {outcome.path}"
        if outcome.error:
            line += f" ({outcome.error})"
        typer.echo(line)
