"""
Source: Vendor entries in the temp directory.
Scans the immediate children of %TEMP% and matches on entry name only.
"""

from __future__ import annotations

import logging
import os
from typing import Iterator

from config import Scope, VendorProfile
from models import Artifact, ArtifactKind

logger = logging.getLogger("vendorscrub")

name = "temp_entries"
display_name = "Temp Files"
description = "Vendor files and folders directly under the temp directory"
kind = ArtifactKind.TEMP_ENTRY


def discover(profile: VendorProfile, scope: Scope) -> Iterator[Artifact]:
    temp_dir = scope.temp_dir
    if not temp_dir or not os.path.isdir(temp_dir):
        return

    rule = profile.rule
    try:
        entries = sorted(os.scandir(temp_dir), key=lambda e: e.name.lower())
    except OSError as exc:
        logger.debug("Cannot list temp directory %s: %s", temp_dir, exc)
        return

    for entry in entries:
        if not rule.matches(entry.name):
            continue
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        yield Artifact(kind=kind, identifier=entry.path, metadata={"is_dir": is_dir})
