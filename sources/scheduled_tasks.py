"""
Source: Vendor scheduled tasks.
Matches on the full task path, so both the task name and its folder count.
"""

from __future__ import annotations

import logging
from typing import Iterator

import system
from config import Scope, VendorProfile
from models import Artifact, ArtifactKind

logger = logging.getLogger("vendorscrub")

name = "scheduled_tasks"
display_name = "Scheduled Tasks"
description = "Vendor scheduled tasks (updaters, license checks, telemetry)"
kind = ArtifactKind.SCHEDULED_TASK


def discover(profile: VendorProfile, scope: Scope) -> Iterator[Artifact]:
    rule = profile.rule
    try:
        tasks = system.list_scheduled_tasks()
    except OSError as exc:
        logger.debug("Cannot enumerate scheduled tasks: %s", exc)
        return

    for task_path in tasks:
        folder, _, task_name = task_path.rpartition("\\")
        if rule.matches(task_path):
            yield Artifact(
                kind=kind,
                identifier=task_path,
                metadata={"folder": folder + "\\", "name": task_name},
            )
