"""SQLite-backed favorites store."""

import os
import secrets
import sqlite3
import time
from pathlib import Path
from urllib.parse import urlsplit

from loguru import logger

from favorites_tree.core.database.schema import set_metadata
from favorites_tree.core.move.reconciler import reconcile_sort_order
from favorites_tree.models.resource import Resource, ResourceType

_COLUMNS = (
    "id, name, type, parent_id, sort_order, fs_path, workspace_path, workspace_root, "
    "url, url_alias, highlight_color, highlight_badge"
)


def generate_id() -> str:
    """Return a new random 16-character resource id."""
    return secrets.token_hex(8)


def is_valid_url(url: str) -> bool:
    """Only http and https URLs can be favorited."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def _row_to_resource(row: tuple) -> Resource:
    return Resource(
        id=row[0], name=row[1], type=ResourceType(row[2]), parent_id=row[3],
        sort_order=row[4], fs_path=row[5], workspace_path=row[6], workspace_root=row[7],
        url=row[8], url_alias=row[9], highlight_color=row[10], highlight_badge=row[11],
    )


def insert_resources(conn: sqlite3.Connection, resources: list[Resource], *, start: int = 0) -> None:
    conn.executemany(
        f"""INSERT OR REPLACE INTO resources ({_COLUMNS}, position)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        [
            (
                r.id, r.name, r.type.value, r.parent_id, r.sort_order, r.fs_path,
                r.workspace_path, r.workspace_root, r.url, r.url_alias,
                r.highlight_color, r.highlight_badge, start + i,
            )
            for i, r in enumerate(resources)
        ],
    )


class SqliteResourceStore:
    """Favorites persisted in one SQLite table.

    Every read returns fresh ``Resource`` objects, so callers may mutate a
    snapshot freely and commit it with :meth:`save`.
    """

    def __init__(self, conn: sqlite3.Connection, *, workspace_root: str | Path) -> None:
        self.conn = conn
        self.workspace_root = str(Path(workspace_root).expanduser().resolve())

    def load(self) -> list[Resource]:
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM resources ORDER BY position, rowid"
        ).fetchall()
        return [_row_to_resource(r) for r in rows]

    async def get_all(self) -> list[Resource]:
        return self.load()

    async def save(self, resources: list[Resource]) -> None:
        """Replace every stored resource in one transaction."""
        try:
            self.conn.execute("DELETE FROM resources")
            insert_resources(self.conn, resources)
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        set_metadata(self.conn, "last_saved_at", str(int(time.time() * 1000)))
        logger.debug("Saved {} resources", len(resources))

    def _append(self, resource: Resource) -> Resource:
        """Insert ``resource`` at the end of its sibling set and renumber the set."""
        existing = self.load()
        siblings = [r for r in existing if (r.parent_id or None) == resource.parent_id]
        reconcile_sort_order(
            [*siblings, resource], parent_id=resource.parent_id, moved_ids=[resource.id]
        )
        try:
            self.conn.executemany(
                "UPDATE resources SET sort_order = ? WHERE id = ?",
                [(r.sort_order, r.id) for r in siblings],
            )
            insert_resources(self.conn, [resource], start=len(existing))
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        logger.debug("Added {} {!r} under {!r}", resource.type.value, resource.name, resource.parent_id)
        return resource

    def _check_parent(self, group_id: str | None) -> None:
        if group_id is None:
            return
        row = self.conn.execute(
            "SELECT type FROM resources WHERE id = ?", (group_id,)
        ).fetchone()
        if row is None or row[0] != ResourceType.GROUP.value:
            msg = f"Group {group_id!r} not found"
            raise ValueError(msg)

    def _path_resource(self, group_id: str | None, path: str) -> Resource:
        self._check_parent(group_id)
        abs_path = os.path.abspath(path)
        kind = ResourceType.DIRECTORY if os.path.isdir(abs_path) else ResourceType.FILE
        name = os.path.basename(abs_path.rstrip(os.sep)) or abs_path
        return Resource(id=generate_id(), name=name, type=kind, parent_id=group_id, fs_path=abs_path)

    async def add_path_to_group(self, group_id: str | None, path: str) -> Resource:
        """Add a path inside the workspace, stored relative to the workspace root."""
        resource = self._path_resource(group_id, path)
        resource.workspace_root = self.workspace_root
        resource.workspace_path = os.path.relpath(
            os.path.realpath(resource.fs_path or path), self.workspace_root
        )
        return self._append(resource)

    async def add_external_path_to_group(self, group_id: str | None, path: str) -> Resource:
        """Add a path outside the workspace, stored as an absolute path."""
        resource = self._path_resource(group_id, path)
        resource.workspace_root = ""
        resource.workspace_path = ""
        return self._append(resource)

    async def add_group(self, name: str, parent_id: str | None = None) -> Resource:
        self._check_parent(parent_id)
        if not name.strip():
            msg = "Group name must not be empty"
            raise ValueError(msg)
        group = Resource(id=generate_id(), name=name.strip(), type=ResourceType.GROUP, parent_id=parent_id)
        return self._append(group)

    async def add_url(self, url: str, *, alias: str | None = None, parent_id: str | None = None) -> Resource:
        """Add a URL favorite. Name is the alias, else the URL hostname."""
        if not is_valid_url(url):
            msg = f"Invalid URL {url!r}. Must be http:// or https://"
            raise ValueError(msg)
        self._check_parent(parent_id)
        resource = Resource(
            id=generate_id(),
            name=alias or urlsplit(url).hostname or url,
            type=ResourceType.URL,
            parent_id=parent_id,
            url=url,
            url_alias=alias,
            workspace_root="",
            workspace_path="",
        )
        return self._append(resource)
