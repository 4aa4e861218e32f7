"""Route externally dropped paths into the favorites store."""

from collections.abc import Sequence
from typing import Any

from loguru import logger

from favorites_tree.core.ingest.payload import resolve_paths
from favorites_tree.core.move.reconciler import reconcile_sort_order
from favorites_tree.core.move.resolver import resolve_destination_group
from favorites_tree.models.resource import APPEND, IngestReport, PathOutcome, Resource
from favorites_tree.protocols import ResourceStoreProtocol, WorkspaceProtocol


class ExternalSourceAdapter:
    """Turn a drop payload into "add path" calls on the store.

    Each path is classified as inside or outside the primary project and
    added independently; a failing path is logged and recorded, and the
    rest of the batch continues. Once anything was added, the destination
    sibling set is renumbered with the new resources at its end.
    """

    def __init__(self, store: ResourceStoreProtocol, workspace: WorkspaceProtocol) -> None:
        self.store = store
        self.workspace = workspace

    async def ingest(self, target: Resource | None, payload: Any) -> IngestReport:
        """Resolve ``payload`` to paths and add them next to or inside ``target``."""
        group_id = resolve_destination_group(target)
        paths = await resolve_paths(payload)
        if not paths:
            logger.debug("External drop resolved to no local paths")
            return IngestReport(group_id=group_id)
        return await self.add_paths(group_id, paths)

    async def add_paths(self, group_id: str | None, paths: Sequence[str]) -> IngestReport:
        outcomes: list[PathOutcome] = []
        for path in paths:
            try:
                if await self.workspace.is_inside_primary_project(path):
                    added = await self.store.add_path_to_group(group_id, path)
                    outcomes.append(PathOutcome(path=path, status="internal", resource_id=added.id))
                else:
                    added = await self.store.add_external_path_to_group(group_id, path)
                    outcomes.append(PathOutcome(path=path, status="external", resource_id=added.id))
            except Exception as e:
                logger.exception("Failed to add dropped path {}", path)
                outcomes.append(PathOutcome(path=path, status="failed", error=str(e)))

        report = IngestReport(group_id=group_id, outcomes=tuple(outcomes))
        if report.added_ids:
            await self._append_in_order(group_id, report.added_ids)
        logger.info(
            "External drop into {!r}: {} added, {} failed",
            group_id, report.succeeded, report.failed,
        )
        return report

    async def _append_in_order(self, group_id: str | None, added_ids: Sequence[str]) -> None:
        """Number ``group_id``'s children 0..n-1 with ``added_ids`` last."""
        resources = await self.store.get_all()
        reconcile_sort_order(resources, parent_id=group_id, moved_ids=added_ids, index=APPEND)
        await self.store.save(resources)
