"""
VendorScrub — Result aggregation and the CSV audit log.
"""

from __future__ import annotations

import csv
import logging
import os
import time
from dataclasses import asdict
from datetime import datetime
from typing import Dict, List, Optional

from models import Artifact, CleanupReport, LogEntry, Outcome

logger = logging.getLogger("vendorscrub")

LOG_FIELDS = ["timestamp", "section", "category", "kind", "identifier", "status", "error", "duration_ms"]


class ReportAggregator:
    """
    Accumulates per-category outcomes for one run.

    Categories keep the order in which they were first recorded, and items
    within a category keep processing order. Once finalize() has been
    called the aggregator is closed.
    """

    def __init__(self) -> None:
        self._deleted: Dict[str, List[str]] = {}
        self._failed: Dict[str, List[str]] = {}
        self._skipped: List[str] = []
        self._entries: List[LogEntry] = []
        self._started = time.perf_counter()
        self._report: Optional[CleanupReport] = None

    def record(
        self,
        section: str,
        artifact: Artifact,
        outcome: Outcome,
        error: str = "",
        duration_s: float = 0.0,
    ) -> None:
        self._check_open()
        bucket = self._deleted if outcome is Outcome.DELETED else self._failed
        bucket.setdefault(artifact.category, []).append(artifact.describe())
        self._entries.append(LogEntry(
            timestamp=datetime.now().isoformat(),
            section=section,
            category=artifact.category,
            kind=artifact.kind.value,
            identifier=artifact.identifier,
            status=outcome.value,
            error=error,
            duration_ms=f"{duration_s * 1000:.1f}",
        ))

    def skip(self, section_name: str) -> None:
        self._check_open()
        if section_name not in self._skipped:
            self._skipped.append(section_name)

    def finalize(self) -> CleanupReport:
        if self._report is None:
            self._report = CleanupReport(
                skipped_sections=tuple(self._skipped),
                deleted_by_category={k: tuple(v) for k, v in self._deleted.items()},
                failed_by_category={k: tuple(v) for k, v in self._failed.items()},
                entries=tuple(self._entries),
                duration_s=time.perf_counter() - self._started,
            )
        return self._report

    def _check_open(self) -> None:
        if self._report is not None:
            raise RuntimeError("Report already finalized")


def write_log(report: CleanupReport, log_dir: str) -> str:
    """
    Write one CSV row per removal attempt.

    Returns the log path, or "" when there was nothing to log or the file
    could not be written.
    """
    if not report.entries:
        return ""

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = os.path.join(log_dir, f"cleanup_log_{timestamp}.csv")
    try:
        with open(log_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=LOG_FIELDS)
            writer.writeheader()
            writer.writerows(asdict(entry) for entry in report.entries)
    except OSError as exc:
        logger.warning("Could not write cleanup log %s: %s", log_path, exc)
        return ""
    return log_path
