"""
VendorScrub — Data models for artifacts, pipeline sections, and the cleanup report.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


class ArtifactKind(enum.Enum):
    """Kind of system object a source can discover and a remover can delete."""
    DIRECTORY = "directory"
    REGISTRY_KEY = "registry_key"
    TEMP_ENTRY = "temp_entry"
    SERVICE = "service"
    SCHEDULED_TASK = "scheduled_task"
    STARTUP_REGISTRY_VALUE = "startup_registry_value"
    STARTUP_FILE = "startup_file"


# Report category for each artifact kind
KIND_CATEGORIES: Dict[ArtifactKind, str] = {
    ArtifactKind.DIRECTORY: "Directories",
    ArtifactKind.REGISTRY_KEY: "Registry Keys",
    ArtifactKind.TEMP_ENTRY: "Temp Files",
    ArtifactKind.SERVICE: "Services",
    ArtifactKind.SCHEDULED_TASK: "Scheduled Tasks",
    ArtifactKind.STARTUP_REGISTRY_VALUE: "Startup Entries",
    ArtifactKind.STARTUP_FILE: "Startup Entries",
}

_PATH_KINDS = {ArtifactKind.DIRECTORY, ArtifactKind.TEMP_ENTRY, ArtifactKind.STARTUP_FILE}


@dataclass(frozen=True)
class Artifact:
    """A single discovered system object eligible for removal."""
    kind: ArtifactKind
    identifier: str                         # Path, registry key, service or task name
    display_name: Optional[str] = None      # Friendly name (service display name, value data...)
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def category(self) -> str:
        return KIND_CATEGORIES[self.kind]

    @property
    def is_path(self) -> bool:
        return self.kind in _PATH_KINDS

    @property
    def key(self) -> Tuple[ArtifactKind, str]:
        """Identity used for deduplication."""
        if self.is_path:
            return self.kind, os.path.normcase(os.path.normpath(self.identifier))
        return self.kind, self.identifier.casefold()

    def describe(self) -> str:
        """Return the descriptor shown in listings and the final report."""
        if self.display_name:
            return f"{self.identifier} ({self.display_name})"
        return self.identifier


class SectionState(enum.Enum):
    PENDING = "pending"
    DISCOVERED = "discovered"
    SKIPPED = "skipped"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


class Outcome(enum.Enum):
    DELETED = "deleted"
    FAILED = "failed"


@dataclass
class Section:
    """One pipeline stage: a group of sources confirmed and executed as a unit."""
    name: str
    sources: Tuple[Any, ...]                      # Source modules (see sources/__init__.py)
    state: SectionState = SectionState.PENDING
    discovered: Tuple[Artifact, ...] = ()         # Frozen at confirmation time
    confirmed: bool = False
    skipped: bool = False
    deleted: List[Artifact] = field(default_factory=list)
    failed: List[Artifact] = field(default_factory=list)
    scan_error: Optional[str] = None

    @property
    def item_count(self) -> int:
        return len(self.discovered)

    @property
    def categories(self) -> List[str]:
        """Report categories covered by the discovered artifacts, in first-seen order."""
        seen: List[str] = []
        for artifact in self.discovered:
            if artifact.category not in seen:
                seen.append(artifact.category)
        return seen


class ReportStatus(enum.Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    NOTHING_TO_DO = "nothing_to_do"


@dataclass(frozen=True)
class LogEntry:
    """One removal attempt, as written to the audit log."""
    timestamp: str
    section: str
    category: str
    kind: str
    identifier: str
    status: str
    error: str
    duration_ms: str


@dataclass(frozen=True)
class CleanupReport:
    """Final, read-only summary of a run."""
    skipped_sections: Tuple[str, ...] = ()
    deleted_by_category: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    failed_by_category: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    entries: Tuple[LogEntry, ...] = ()
    duration_s: float = 0.0

    @property
    def deleted_count(self) -> int:
        return sum(len(items) for items in self.deleted_by_category.values())

    @property
    def failed_count(self) -> int:
        return sum(len(items) for items in self.failed_by_category.values())

    @property
    def status(self) -> ReportStatus:
        if self.failed_count:
            return ReportStatus.PARTIAL
        if self.deleted_count:
            return ReportStatus.SUCCESS
        return ReportStatus.NOTHING_TO_DO

    def summary_line(self) -> str:
        status = self.status
        if status is ReportStatus.SUCCESS:
            return f"All {self.deleted_count} item(s) were removed successfully."
        if status is ReportStatus.PARTIAL:
            return (f"Partial cleanup: {self.deleted_count} item(s) removed, "
                    f"{self.failed_count} item(s) could not be removed.")
        if self.skipped_sections:
            return (f"Nothing was removed: {len(self.skipped_sections)} section(s) "
                    f"declined ({', '.join(self.skipped_sections)}).")
        return "Nothing was eligible for removal."


def _format_duration(seconds: float) -> str:
    """Format seconds into a human-readable duration string."""
    if seconds < 0.001:
        return "<1ms"
    if seconds < 1.0:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60.0:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes < 60:
        return f"{minutes}m {secs:.0f}s"
    hours = minutes // 60
    mins = minutes % 60
    return f"{hours}h {mins}m {secs:.0f}s"
