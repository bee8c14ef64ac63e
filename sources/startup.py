"""
Source: Vendor auto-start entries.

Two sub-adapters:
  1. Values under the Run keys. A value is included when its name OR its
     data matches, so an innocuous name pointing at a vendor executable is
     still caught.
  2. Files in the per-user and machine-wide Startup folders, matched by name.
"""

from __future__ import annotations

import logging
import os
from typing import Iterator

import registry
from config import Scope, VendorProfile
from models import Artifact, ArtifactKind

logger = logging.getLogger("vendorscrub")

name = "startup"
display_name = "Startup Entries"
description = "Run-key values and Startup folder shortcuts that launch vendor software"
kind = ArtifactKind.STARTUP_REGISTRY_VALUE


def discover(profile: VendorProfile, scope: Scope) -> Iterator[Artifact]:
    yield from discover_run_values(profile)
    yield from discover_startup_files(profile, scope)


def discover_run_values(profile: VendorProfile) -> Iterator[Artifact]:
    rule = profile.rule
    for run_key in profile.run_keys:
        try:
            values = registry.list_values(run_key)
        except OSError as exc:
            logger.debug("Skipping run key %s: %s", run_key, exc)
            continue

        for value_name, value_data, _value_type in values:
            data = "" if value_data is None else str(value_data)
            if not rule.matches_any(value_name, data):
                continue
            yield Artifact(
                kind=ArtifactKind.STARTUP_REGISTRY_VALUE,
                identifier=f"{run_key}\\{value_name}",
                display_name=data or None,
                metadata={"key": run_key, "value": value_name, "data": data},
            )


def discover_startup_files(profile: VendorProfile, scope: Scope) -> Iterator[Artifact]:
    rule = profile.rule
    for folder in scope.startup_dirs:
        if not os.path.isdir(folder):
            continue
        try:
            entries = sorted(os.scandir(folder), key=lambda e: e.name.lower())
        except OSError as exc:
            logger.debug("Cannot list startup folder %s: %s", folder, exc)
            continue

        for entry in entries:
            try:
                if not entry.is_file(follow_symlinks=False):
                    continue
            except OSError:
                continue
            if rule.matches(entry.name):
                yield Artifact(kind=ArtifactKind.STARTUP_FILE, identifier=entry.path)
