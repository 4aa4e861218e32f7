"""Protocols for the collaborators of the drag-and-drop engine."""

from typing import Protocol, runtime_checkable

from favorites_tree.models.resource import Resource


@runtime_checkable
class ResourceStoreProtocol(Protocol):
    """Persistent collection of favorites."""

    async def get_all(self) -> list[Resource]:
        """Return a fresh copy of every stored resource."""
        ...

    async def save(self, resources: list[Resource]) -> None:
        """Replace the stored collection with ``resources``."""
        ...

    async def add_path_to_group(self, group_id: str | None, path: str) -> Resource:
        """Add a path inside the primary project under ``group_id``."""
        ...

    async def add_external_path_to_group(self, group_id: str | None, path: str) -> Resource:
        """Add a path outside the primary project under ``group_id``."""
        ...


@runtime_checkable
class WorkspaceProtocol(Protocol):
    """Answers workspace-boundary questions."""

    async def is_inside_primary_project(self, path: str) -> bool:
        """Return True if ``path`` lies within the active project."""
        ...


@runtime_checkable
class AttachmentProtocol(Protocol):
    """Opaque drop attachment that must be materialized asynchronously."""

    async def as_file(self) -> object | None:
        """Resolve to a file-like entry (URI, path-bearing object, or path string)."""
        ...

    async def as_string(self) -> str:
        """Resolve to text, usually a URI list."""
        ...
