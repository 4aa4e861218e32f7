"""Ordered favorites tree with drag-and-drop reconciliation."""

from favorites_tree.controller import DataTransfer, DataTransferItem, FavoritesDragAndDropController
from favorites_tree.events import RefreshChannel
from favorites_tree.models.resource import APPEND, Placement, Resource, ResourceType
from favorites_tree.protocols import ResourceStoreProtocol, WorkspaceProtocol

__all__ = [
    "APPEND",
    "DataTransfer",
    "DataTransferItem",
    "FavoritesDragAndDropController",
    "Placement",
    "RefreshChannel",
    "Resource",
    "ResourceStoreProtocol",
    "ResourceType",
    "WorkspaceProtocol",
]
