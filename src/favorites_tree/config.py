"""Configuration constants for favorites-tree."""

import os
from pathlib import Path

# Directory with data. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/favorites-tree").expanduser(),
    Path("~/.config/favorites-tree").expanduser(),
]

DATABASE_FILENAME: str = "favorites.db"

# Drag-and-drop wire formats.
FAVORITES_MIME_TYPE: str = "application/vnd.code.tree.favorites"
URI_LIST_MIME_TYPE: str = "text/uri-list"

# Environment overrides for the CLI and MCP server.
DATA_DIR_ENV: str = "FAVORITES_DATA_DIR"
WORKSPACE_ENV: str = "FAVORITES_WORKSPACE"


def resolve_data_directory() -> Path:
    """Return the data directory: env override, first existing candidate, or the default."""
    env_dir = os.environ.get(DATA_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]


def resolve_workspace_root() -> Path:
    """Return the primary project root used for workspace-boundary checks."""
    env_root = os.environ.get(WORKSPACE_ENV)
    return Path(env_root).expanduser() if env_root else Path.cwd()
