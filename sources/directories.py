"""
Source: Vendor install, shared-data, and per-user data directories.
Candidates come from the profile's directory templates; only existing paths are yielded.
"""

from __future__ import annotations

import os
from typing import Iterator

from config import Scope, VendorProfile
from models import Artifact, ArtifactKind

name = "directories"
display_name = "Directories"
description = "Vendor installation, shared and per-user data directories"
kind = ArtifactKind.DIRECTORY


def discover(profile: VendorProfile, scope: Scope) -> Iterator[Artifact]:
    for template in profile.directories:
        path = scope.expand(template)
        if path and os.path.exists(path):
            yield Artifact(kind=kind, identifier=path)
