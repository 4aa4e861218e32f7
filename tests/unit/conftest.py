"""Shared test fixtures."""

import sqlite3
from collections.abc import Iterator

import pytest

from favorites_tree.core.database.schema import create_schema
from favorites_tree.models.resource import Resource, ResourceType
from tests.unit.fakes import make


@pytest.fixture
def flat_root() -> list[Resource]:
    """Root siblings A(0), B(1), C(2)."""
    return [make("A", sort_order=0), make("B", sort_order=1), make("C", sort_order=2)]


@pytest.fixture
def nested() -> list[Resource]:
    """G1 > (X, G2 > Y), plus root file F."""
    return [
        make("G1", type=ResourceType.GROUP, sort_order=0),
        make("F", sort_order=1),
        make("X", parent_id="G1", sort_order=0),
        make("G2", type=ResourceType.GROUP, parent_id="G1", sort_order=1),
        make("Y", parent_id="G2", sort_order=0),
    ]


@pytest.fixture
def db() -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    yield conn
    conn.close()
