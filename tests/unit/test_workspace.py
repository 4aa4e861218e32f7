"""Tests for workspace-boundary checks and path configuration."""

import asyncio
from pathlib import Path

import pytest

from favorites_tree import config
from favorites_tree.core.workspace import ProjectWorkspace
from favorites_tree.models.resource import APPEND, Placement


def test_inside_and_outside_primary_project(tmp_path: Path) -> None:
    root = tmp_path / "proj"
    (root / "src").mkdir(parents=True)
    workspace = ProjectWorkspace(root)

    assert asyncio.run(workspace.is_inside_primary_project(str(root / "src" / "a.py")))
    assert asyncio.run(workspace.is_inside_primary_project(str(root)))
    assert not asyncio.run(workspace.is_inside_primary_project(str(tmp_path / "proj-other" / "a.py")))
    assert not asyncio.run(workspace.is_inside_primary_project(str(root / ".." / "b.py")))


def test_data_directory_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(config.DATA_DIR_ENV, str(tmp_path))
    assert config.resolve_data_directory() == tmp_path


def test_data_directory_prefers_existing(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(config.DATA_DIR_ENV, raising=False)
    existing = tmp_path / "second"
    existing.mkdir()
    monkeypatch.setattr(config, "DATA_DIRECTORIES", [tmp_path / "first", existing])
    assert config.resolve_data_directory() == existing


def test_workspace_root_defaults_to_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(config.WORKSPACE_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    assert config.resolve_workspace_root() == tmp_path


def test_placement_defaults_to_append() -> None:
    assert Placement("G").index is APPEND
    assert repr(APPEND) == "APPEND"
