"""Drag-and-drop controller for the favorites tree.

Two drop paths share one pipeline shape:

- internal reorder: JSON id list under the favorites MIME type. Resolve the
  target, cycle-filter each id, re-parent survivors, reconcile the
  destination's sibling order, commit once, refresh once.
- external drop: ``text/uri-list`` (or an array/attachment carrying paths).
  Resolve paths, add each one to the destination group, refresh once if
  anything was added.

Handlers are not serialized against each other. Two drops in flight at the
same time each commit their own snapshot and the later commit wins.
"""

import json
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loguru import logger

from favorites_tree.config import FAVORITES_MIME_TYPE, URI_LIST_MIME_TYPE
from favorites_tree.core.ingest.adapter import ExternalSourceAdapter
from favorites_tree.core.ingest.payload import PayloadError, parse_dragged_ids
from favorites_tree.core.move.cycle_guard import would_create_cycle
from favorites_tree.core.move.reconciler import reconcile_sort_order
from favorites_tree.core.move.resolver import resolve_drop_target
from favorites_tree.core.tree.navigation import index_by_id
from favorites_tree.events import RefreshChannel
from favorites_tree.models.resource import (
    IngestReport,
    MoveOutcome,
    MoveReport,
    Placement,
    Resource,
)
from favorites_tree.protocols import ResourceStoreProtocol, WorkspaceProtocol

CYCLE_WARNING = "Cannot move a group into itself or its subgroups"


@dataclass(frozen=True)
class DataTransferItem:
    """One value carried by a drag-and-drop transfer."""

    value: Any


class DataTransfer:
    """MIME-keyed drag-and-drop payload. Keys are case-insensitive."""

    def __init__(self, items: dict[str, Any] | None = None) -> None:
        self._items: dict[str, DataTransferItem] = {}
        for mime, value in (items or {}).items():
            self.set(mime, value if isinstance(value, DataTransferItem) else DataTransferItem(value))

    def set(self, mime: str, item: DataTransferItem) -> None:
        self._items[mime.lower()] = item

    def get(self, mime: str) -> DataTransferItem | None:
        return self._items.get(mime.lower())

    def __contains__(self, mime: object) -> bool:
        return isinstance(mime, str) and mime.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)


class DropKind(Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    NONE = "none"


def classify_transfer(transfer: DataTransfer) -> DropKind:
    """Decide the drop path from MIME types alone, before parsing anything."""
    if FAVORITES_MIME_TYPE in transfer:
        return DropKind.INTERNAL
    if URI_LIST_MIME_TYPE in transfer:
        return DropKind.EXTERNAL
    return DropKind.NONE


class FavoritesDragAndDropController:
    """Applies drops to the favorites store and notifies observers."""

    drop_mime_types: tuple[str, ...] = (FAVORITES_MIME_TYPE, URI_LIST_MIME_TYPE)
    drag_mime_types: tuple[str, ...] = (FAVORITES_MIME_TYPE,)

    def __init__(
        self,
        store: ResourceStoreProtocol,
        workspace: WorkspaceProtocol,
        refresh: RefreshChannel,
        *,
        warn: Callable[[str], None] | None = None,
    ) -> None:
        self.store = store
        self.refresh = refresh
        self.adapter = ExternalSourceAdapter(store, workspace)
        self._warn = warn or logger.warning

    def handle_drag(self, source: Sequence[Resource], transfer: DataTransfer) -> None:
        """Put the dragged ids on the transfer as a JSON array."""
        dragged_ids = [r.id for r in source if r.id]
        logger.debug("Drag started with {} items", len(dragged_ids))
        if dragged_ids:
            transfer.set(FAVORITES_MIME_TYPE, DataTransferItem(json.dumps(dragged_ids)))

    async def handle_drop(
        self, target: Resource | None, transfer: DataTransfer
    ) -> MoveReport | IngestReport | None:
        """Dispatch a drop to the reorder or the external-ingest path.

        Returns None when the drop was aborted without touching the store.
        """
        logger.debug("Drop on {}", repr(target.id) if target else "root")
        kind = classify_transfer(transfer)

        if kind is DropKind.EXTERNAL:
            item = transfer.get(URI_LIST_MIME_TYPE)
            return await self.ingest_external_drop(target, item.value if item else None)

        if kind is DropKind.NONE:
            logger.debug("No supported MIME type in drop, ignoring")
            return None

        item = transfer.get(FAVORITES_MIME_TYPE)
        try:
            dragged_ids = parse_dragged_ids(item.value if item else None)
        except PayloadError as e:
            logger.error("Failed to parse dragged ids: {}", e)
            return None
        if not dragged_ids:
            logger.debug("No dragged ids, aborting")
            return None
        return await self.reorder(dragged_ids, target)

    async def reorder(self, dragged_ids: Sequence[str], target: Resource | None) -> MoveReport | None:
        """Move ``dragged_ids`` (in drag order) onto ``target``.

        Unknown ids are skipped. A group that would end up under itself is
        skipped with a warning. Everything else lands at the resolved
        position. The snapshot is committed and refresh published once.
        """
        ids = list(dict.fromkeys(dragged_ids))
        if not ids:
            return None

        resources = await self.store.get_all()
        placement: Placement = resolve_drop_target(resources, target)
        arena = index_by_id(resources)

        outcomes: list[MoveOutcome] = []
        moved: list[str] = []
        for resource_id in ids:
            item = arena.get(resource_id)
            if item is None:
                logger.debug("Dragged id {} not found, skipping", resource_id)
                outcomes.append(MoveOutcome(resource_id, "missing"))
                continue
            if would_create_cycle(arena, moved=item, target_parent_id=placement.parent_id):
                self._warn(CYCLE_WARNING)
                outcomes.append(MoveOutcome(resource_id, "rejected", CYCLE_WARNING))
                continue
            item.parent_id = placement.parent_id
            moved.append(resource_id)
            outcomes.append(MoveOutcome(resource_id, "moved"))

        reconcile_sort_order(
            resources, parent_id=placement.parent_id, moved_ids=moved, index=placement.index
        )
        await self.store.save(resources)
        self.refresh.publish()

        report = MoveReport(placement=placement, outcomes=tuple(outcomes))
        logger.info(
            "Moved {} of {} items into {!r} ({} rejected, {} missing)",
            len(report.moved_ids), len(ids), placement.parent_id,
            len(report.rejected_ids), len(report.missing_ids),
        )
        return report

    async def ingest_external_drop(self, target: Resource | None, payload: Any) -> IngestReport:
        """Add externally dropped paths next to or inside ``target``.

        Refresh is published only if at least one path was added.
        """
        report = await self.adapter.ingest(target, payload)
        if report.failed:
            noun = "path" if report.failed == 1 else "paths"
            self._warn(f"Could not add {report.failed} dropped {noun}")
        if report.succeeded:
            self.refresh.publish()
        return report
