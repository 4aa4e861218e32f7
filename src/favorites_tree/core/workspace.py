"""Workspace-boundary checks."""

from pathlib import Path


class ProjectWorkspace:
    """The primary project: a single root directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser().resolve()

    async def is_inside_primary_project(self, path: str) -> bool:
        return Path(path).expanduser().resolve().is_relative_to(self.root)
