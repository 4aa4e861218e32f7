"""Tests for routing dropped paths into the store."""

import asyncio

from favorites_tree.core.ingest.adapter import ExternalSourceAdapter
from favorites_tree.models.resource import ResourceType
from tests.unit.fakes import FakeStore, FakeWorkspace, make


def test_paths_routed_by_workspace_membership() -> None:
    store = FakeStore([make("G", type=ResourceType.GROUP, sort_order=0)])
    adapter = ExternalSourceAdapter(store, FakeWorkspace("/proj"))
    target = store.by_id("G")

    report = asyncio.run(adapter.ingest(target, "file:///proj/a.ts\nfile:///elsewhere/b.ts"))

    assert store.adds == [("internal", "G", "/proj/a.ts"), ("external", "G", "/elsewhere/b.ts")]
    assert [o.status for o in report.outcomes] == ["internal", "external"]
    assert report.succeeded == 2
    assert report.group_id == "G"


def test_non_group_target_adds_to_its_parent() -> None:
    store = FakeStore([make("I", parent_id="G", sort_order=0)])
    adapter = ExternalSourceAdapter(store, FakeWorkspace("/proj"))

    report = asyncio.run(adapter.ingest(store.by_id("I"), ["/proj/x.ts"]))

    assert report.group_id == "G"
    assert store.adds == [("internal", "G", "/proj/x.ts")]


def test_failing_path_does_not_stop_batch() -> None:
    store = FakeStore()
    store.failing_paths.add("/proj/bad.ts")
    adapter = ExternalSourceAdapter(store, FakeWorkspace("/proj"))

    report = asyncio.run(
        adapter.ingest(None, "file:///proj/bad.ts\nfile:///proj/good.ts")
    )

    assert report.failed == 1
    assert report.succeeded == 1
    assert report.outcomes[0].status == "failed"
    assert "cannot add" in report.outcomes[0].error
    assert store.adds == [("internal", None, "/proj/good.ts")]


def test_no_paths_means_no_store_calls() -> None:
    store = FakeStore()
    workspace = FakeWorkspace("/proj")
    adapter = ExternalSourceAdapter(store, workspace)

    report = asyncio.run(adapter.ingest(None, "https://example.com\n# comment"))

    assert report.outcomes == ()
    assert store.adds == []
    assert workspace.queries == []


def test_added_resources_go_to_end_of_group() -> None:
    store = FakeStore([
        make("G", type=ResourceType.GROUP, sort_order=0),
        make("X", parent_id="G", sort_order=0),
        make("Y", parent_id="G", sort_order=4),
    ])
    adapter = ExternalSourceAdapter(store, FakeWorkspace("/proj"))

    asyncio.run(adapter.ingest(store.by_id("G"), ["/proj/z.ts"]))

    added = store.resources[-1]
    assert added.parent_id == "G"
    assert added.sort_order == 5
