"""
VendorScrub — Cleanup engine: discover, confirm, remove, and record, one section at a time.

Sections run in a fixed order and never affect each other. Within a
section the discovered set is frozen before the confirmation prompt and
every artifact in it is handed to its remover exactly once.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

import cleaner
from config import ExclusionConfig, Scope, VendorProfile, excluded_inside, is_excluded
from confirmation import ConfirmationGate
from models import Artifact, CleanupReport, Outcome, Section, SectionState
from report import ReportAggregator
from sources import directories, registry_keys, scheduled_tasks, services, startup, temp_entries

logger = logging.getLogger("vendorscrub")

# callback(event, section, artifact, error)
# events: "discovered", "empty", "skipped", "deleted", "failed", "completed"
EventCallback = Optional[Callable[[str, Section, Optional[Artifact], str], None]]


@dataclass(frozen=True)
class SectionDef:
    """A pipeline stage definition: a name and the sources feeding it."""
    name: str
    sources: Tuple[Any, ...]


DEFAULT_SECTIONS: Tuple[SectionDef, ...] = (
    SectionDef("Directories", (directories,)),
    SectionDef("Registry Keys", (registry_keys,)),
    SectionDef("Temp Files", (temp_entries,)),
    SectionDef("Services, Tasks & Startup", (services, scheduled_tasks, startup)),
)


class CleanupEngine:
    """Drives every section through Pending → Discovered → Skipped/Confirmed → Completed."""

    def __init__(
        self,
        profile: VendorProfile,
        gate: ConfirmationGate,
        scope: Optional[Scope] = None,
        sections: Sequence[SectionDef] = DEFAULT_SECTIONS,
        exclusions: Optional[ExclusionConfig] = None,
        remover: Callable[[Artifact], None] = cleaner.remove,
        on_event: EventCallback = None,
    ):
        self.profile = profile
        self.gate = gate
        self.scope = scope if scope is not None else Scope.from_environ()
        self.section_defs = tuple(sections)
        self.exclusions = exclusions or ExclusionConfig()
        self.remover = remover
        self.on_event = on_event
        self.sections: List[Section] = []

    # ── Public API ───────────────────────────────────────────────────────

    def run(self) -> CleanupReport:
        """Run every section in order and return the finalized report."""
        aggregator = ReportAggregator()
        self.sections = []
        for stage in self.section_defs:
            section = Section(name=stage.name, sources=stage.sources)
            self.sections.append(section)
            self._run_section(section, aggregator)
        return aggregator.finalize()

    def discover_all(self) -> List[Section]:
        """Discover every section without prompting or removing anything."""
        self.sections = []
        for stage in self.section_defs:
            section = Section(name=stage.name, sources=stage.sources)
            self._discover(section)
            self.sections.append(section)
        return self.sections

    # ── Section state machine ────────────────────────────────────────────

    def _run_section(self, section: Section, aggregator: ReportAggregator) -> None:
        self._discover(section)

        if not section.discovered:
            self._emit("empty", section)
            section.state = SectionState.COMPLETED
            return

        self._emit("discovered", section)
        if not self.gate.confirm(section.name, section.discovered):
            section.skipped = True
            section.state = SectionState.SKIPPED
            aggregator.skip(section.name)
            self._emit("skipped", section)
            section.state = SectionState.COMPLETED
            return

        section.confirmed = True
        section.state = SectionState.CONFIRMED
        for artifact in section.discovered:
            self._remove_one(section, artifact, aggregator)

        section.state = SectionState.COMPLETED
        self._emit("completed", section)

    def _discover(self, section: Section) -> None:
        found: List[Artifact] = []
        seen = set()
        for source in section.sources:
            try:
                for artifact in source.discover(self.profile, self.scope):
                    if artifact.key in seen:
                        continue
                    if is_excluded(artifact.identifier, self.exclusions):
                        logger.debug("Excluded by user: %s", artifact.identifier)
                        continue
                    if artifact.is_path:
                        kept = excluded_inside(artifact.identifier, self.exclusions)
                        if kept:
                            logger.warning("Not removing %s: it contains excluded path %s",
                                           artifact.identifier, kept)
                            continue
                    seen.add(artifact.key)
                    found.append(artifact)
            except Exception as exc:
                logger.exception("Discovery failed in %s (%s)", section.name, source.display_name)
                section.scan_error = f"{source.display_name}: {exc}"

        section.discovered = tuple(found)
        section.state = SectionState.DISCOVERED
        logger.debug("%s: %d artifact(s) discovered", section.name, len(found))

    def _remove_one(self, section: Section, artifact: Artifact, aggregator: ReportAggregator) -> None:
        start = time.perf_counter()
        error = ""
        try:
            self.remover(artifact)
        except Exception as exc:
            error = str(exc) or exc.__class__.__name__
        duration = time.perf_counter() - start

        if error:
            logger.debug("Failed to remove %s: %s", artifact.identifier, error)
            section.failed.append(artifact)
            aggregator.record(section.name, artifact, Outcome.FAILED, error, duration)
            self._emit("failed", section, artifact, error)
        else:
            section.deleted.append(artifact)
            aggregator.record(section.name, artifact, Outcome.DELETED, "", duration)
            self._emit("deleted", section, artifact)

    def _emit(self, event: str, section: Section, artifact: Optional[Artifact] = None, error: str = "") -> None:
        if self.on_event:
            self.on_event(event, section, artifact, error)
