"""Domain models for the favorites tree."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Literal


class ResourceType(str, Enum):
    """Kind of favorite."""

    FILE = "File"
    DIRECTORY = "Directory"
    GROUP = "Group"
    URL = "URL"


class _Append:
    """Sentinel type for "after the last current sibling"."""

    _instance: "_Append | None" = None

    def __new__(cls) -> "_Append":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "APPEND"


APPEND: Final = _Append()

InsertionIndex = int | _Append


@dataclass
class Resource:
    """A single favorite in the hierarchy.

    Mutable: the reconciliation engine rewrites ``parent_id`` and ``sort_order``
    in place on a snapshot copy before committing it.
    """

    id: str
    name: str
    type: ResourceType
    parent_id: str | None = None
    sort_order: int | None = None
    fs_path: str | None = None
    workspace_path: str | None = None
    workspace_root: str | None = None
    url: str | None = None
    url_alias: str | None = None
    highlight_color: str | None = None
    highlight_badge: str | None = None

    @property
    def is_group(self) -> bool:
        """True if this resource can own children."""
        return self.type is ResourceType.GROUP


@dataclass(frozen=True)
class Placement:
    """Where a batch of moved resources lands."""

    parent_id: str | None
    index: InsertionIndex = APPEND


@dataclass(frozen=True)
class MoveOutcome:
    """Result of one dragged id within a reorder batch."""

    resource_id: str
    status: Literal["moved", "missing", "rejected"]
    reason: str = ""


@dataclass(frozen=True)
class MoveReport:
    """Per-item outcomes of a reorder batch."""

    placement: Placement
    outcomes: tuple[MoveOutcome, ...] = ()

    @property
    def moved_ids(self) -> tuple[str, ...]:
        """Ids that were re-parented, in drag order."""
        return tuple(o.resource_id for o in self.outcomes if o.status == "moved")

    @property
    def rejected_ids(self) -> tuple[str, ...]:
        """Ids skipped because the move would create a cycle."""
        return tuple(o.resource_id for o in self.outcomes if o.status == "rejected")

    @property
    def missing_ids(self) -> tuple[str, ...]:
        """Dragged ids that were not in the snapshot."""
        return tuple(o.resource_id for o in self.outcomes if o.status == "missing")


@dataclass(frozen=True)
class PathOutcome:
    """Result of adding one externally dropped path."""

    path: str
    status: Literal["internal", "external", "failed"]
    error: str = ""
    resource_id: str | None = None

    @property
    def succeeded(self) -> bool:
        """True if the path was added to the store."""
        return self.status != "failed"


@dataclass(frozen=True)
class IngestReport:
    """Per-path outcomes of an external drop."""

    group_id: str | None
    outcomes: tuple[PathOutcome, ...] = field(default_factory=tuple)

    @property
    def paths(self) -> tuple[str, ...]:
        """Every resolved path, in drop order."""
        return tuple(o.path for o in self.outcomes)

    @property
    def succeeded(self) -> int:
        """Number of paths added."""
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def added_ids(self) -> tuple[str, ...]:
        """Ids of the resources created by this drop, in drop order."""
        return tuple(o.resource_id for o in self.outcomes if o.resource_id is not None)

    @property
    def failed(self) -> int:
        """Number of paths that could not be added."""
        return sum(1 for o in self.outcomes if not o.succeeded)
