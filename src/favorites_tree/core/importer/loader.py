"""Import a legacy favorites JSON file into SQLite."""

import json
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from favorites_tree.core.database.schema import set_metadata
from favorites_tree.core.importer.json_reader import parse_favorites_data
from favorites_tree.core.store.sqlite_store import insert_resources
from favorites_tree.core.tree.navigation import index_by_id


@dataclass(frozen=True)
class ImportStats:
    """Summary of an import operation."""

    resources_imported: int
    groups_imported: int
    orphans_reparented: int


def import_favorites_file(
    conn: sqlite3.Connection,
    path: Path,
    *,
    replace: bool = False,
) -> ImportStats:
    """Load a favorites JSON file into the database.

    Resources whose parent is missing from the file are moved to the root.

    Args:
        conn: SQLite connection (schema must already exist).
        path: Legacy favorites JSON file.
        replace: Delete existing favorites before importing.

    Returns:
        ImportStats with counts.
    """
    resources = parse_favorites_data(json.loads(path.read_text(encoding="utf-8")))

    arena = index_by_id(resources)
    orphans = 0
    for r in resources:
        if r.parent_id is not None and r.parent_id not in arena:
            logger.warning("Parent {} of {!r} not found, moving to root", r.parent_id, r.name)
            r.parent_id = None
            orphans += 1

    try:
        if replace:
            conn.execute("DELETE FROM resources")
        start = conn.execute("SELECT COALESCE(MAX(position) + 1, 0) FROM resources").fetchone()[0]
        insert_resources(conn, resources, start=start)
        conn.commit()
    except Exception:
        conn.rollback()
        raise

    set_metadata(conn, "imported_from", str(path))
    stats = ImportStats(
        resources_imported=len(resources),
        groups_imported=sum(1 for r in resources if r.is_group),
        orphans_reparented=orphans,
    )
    logger.info(
        "Import complete: {} resources ({} groups), {} orphans moved to root",
        stats.resources_imported, stats.groups_imported, stats.orphans_reparented,
    )
    return stats
