"""
Source: Vendor Windows services.
Matches on the service short name or its display name; either is enough.
"""

from __future__ import annotations

import logging
from typing import Iterator

import system
from config import Scope, VendorProfile
from models import Artifact, ArtifactKind

logger = logging.getLogger("vendorscrub")

name = "services"
display_name = "Services"
description = "Vendor background services (update agents, licensing daemons)"
kind = ArtifactKind.SERVICE


def discover(profile: VendorProfile, scope: Scope) -> Iterator[Artifact]:
    rule = profile.rule
    try:
        services = system.list_services()
    except OSError as exc:
        logger.debug("Cannot enumerate services: %s", exc)
        return

    for service_name, service_display in services:
        if rule.matches_any(service_name, service_display):
            yield Artifact(
                kind=kind,
                identifier=service_name,
                display_name=service_display or None,
            )
