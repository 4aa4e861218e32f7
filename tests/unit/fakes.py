"""Fake implementations for testing the drag-and-drop engine."""

import copy
import os
from typing import Any

from favorites_tree.controller import FavoritesDragAndDropController
from favorites_tree.events import RefreshChannel
from favorites_tree.models.resource import Resource, ResourceType


class FakeStore:
    """In-memory fake for SqliteResourceStore.

    Hands out deep copies, like the real store, and records saves and adds
    for assertions. New resources get max+1 of their siblings' orders and
    nothing is renumbered, so gaps and legacy orders survive an add.
    """

    def __init__(self, resources: list[Resource] | None = None) -> None:
        self.resources: list[Resource] = list(resources or [])
        self.saves: list[list[Resource]] = []
        self.adds: list[tuple[str, str | None, str]] = []
        self.failing_paths: set[str] = set()
        self._next_id = 0

    async def get_all(self) -> list[Resource]:
        return copy.deepcopy(self.resources)

    async def save(self, resources: list[Resource]) -> None:
        self.saves.append(copy.deepcopy(resources))
        self.resources = copy.deepcopy(resources)

    def _add(self, kind: str, group_id: str | None, path: str) -> Resource:
        if path in self.failing_paths:
            msg = f"FakeStore: cannot add {path!r}"
            raise OSError(msg)
        self._next_id += 1
        orders = [
            r.sort_order
            for r in self.resources
            if r.parent_id == group_id and r.sort_order is not None
        ]
        resource = Resource(
            id=f"new{self._next_id}",
            name=os.path.basename(path),
            type=ResourceType.FILE,
            parent_id=group_id,
            sort_order=max(orders, default=-1) + 1,
            fs_path=path,
        )
        self.resources.append(resource)
        self.adds.append((kind, group_id, path))
        return copy.deepcopy(resource)

    async def add_path_to_group(self, group_id: str | None, path: str) -> Resource:
        return self._add("internal", group_id, path)

    async def add_external_path_to_group(self, group_id: str | None, path: str) -> Resource:
        return self._add("external", group_id, path)

    def by_id(self, resource_id: str) -> Resource:
        return next(r for r in self.resources if r.id == resource_id)


class FakeWorkspace:
    """Workspace whose primary project is a single path prefix."""

    def __init__(self, root: str) -> None:
        self.root = root.rstrip("/")
        self.queries: list[str] = []

    async def is_inside_primary_project(self, path: str) -> bool:
        self.queries.append(path)
        return path == self.root or path.startswith(self.root + "/")


class FakeAttachment:
    """Drop attachment with scripted materialization results.

    A value that is an Exception instance is raised instead of returned.
    """

    def __init__(self, *, file: Any = None, text: Any = "") -> None:
        self.file = file
        self.text = text

    async def as_file(self) -> object | None:
        if isinstance(self.file, Exception):
            raise self.file
        return self.file

    async def as_string(self) -> str:
        if isinstance(self.text, Exception):
            raise self.text
        return str(self.text)


class FakeUri:
    """Editor-style URI object with already-decoded components."""

    def __init__(self, scheme: str, path: str, authority: str = "") -> None:
        self.scheme = scheme
        self.path = path
        self.authority = authority


def make(
    resource_id: str,
    *,
    type: ResourceType = ResourceType.FILE,
    parent_id: str | None = None,
    sort_order: int | None = None,
    name: str | None = None,
) -> Resource:
    """Build a resource whose name defaults to its id."""
    return Resource(
        id=resource_id,
        name=name or resource_id,
        type=type,
        parent_id=parent_id,
        sort_order=sort_order,
    )


class Harness:
    """Controller wired to fakes, with refresh and warning recorders."""

    def __init__(self, resources: list[Resource], *, workspace_root: str = "/proj") -> None:
        self.store = FakeStore(resources)
        self.workspace = FakeWorkspace(workspace_root)
        self.refresh = RefreshChannel()
        self.refresh_count = 0
        self.warnings: list[str] = []
        self.refresh.subscribe(self._on_refresh)
        self.controller = FavoritesDragAndDropController(
            self.store, self.workspace, self.refresh, warn=self.warnings.append
        )

    def _on_refresh(self) -> None:
        self.refresh_count += 1

    def order(self, parent_id: str | None) -> list[tuple[str, int | None]]:
        """(id, sort_order) of parent_id's children, sorted by sort_order."""
        children = [r for r in self.store.resources if r.parent_id == parent_id]
        children.sort(key=lambda r: (r.sort_order is None, r.sort_order or 0))
        return [(r.id, r.sort_order) for r in children]
