"""
VendorScrub — Artifact sources registry.

Each source module exposes:
    name: str           — internal identifier
    display_name: str   — human-readable name
    description: str    — what this source looks for
    kind: ArtifactKind  — kind of artifact it yields (startup yields two kinds)
    discover(profile, scope) -> Iterator[Artifact]

discover() is lazy and side-effect free: it only reads the system. Access
errors on part of what a source enumerates are skipped, not raised.
"""

from __future__ import annotations

from typing import Any, List

from sources import (
    directories,
    registry_keys,
    temp_entries,
    services,
    scheduled_tasks,
    startup,
)

# Master list of all available sources, in pipeline order
ALL_SOURCES: List[Any] = [
    directories,
    registry_keys,
    temp_entries,
    services,
    scheduled_tasks,
    startup,
]


def get_source_names() -> List[str]:
    """Return list of all source internal names."""
    return [s.name for s in ALL_SOURCES]
