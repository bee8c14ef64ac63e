"""
Source: Vendor registry keys.

Walks each configured root (e.g. HKLM\\SOFTWARE) down to its depth limit and
matches on the leaf key name. A matched key is not descended into, since it
is removed together with its subtree. Subtrees that cannot be opened are
skipped; their siblings are still enumerated.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List

import registry
from config import Scope, VendorProfile
from matching import MatchRule
from models import Artifact, ArtifactKind

logger = logging.getLogger("vendorscrub")

name = "registry_keys"
display_name = "Registry Keys"
description = "Vendor keys under the configured registry roots"
kind = ArtifactKind.REGISTRY_KEY


def discover(profile: VendorProfile, scope: Scope) -> Iterator[Artifact]:
    rule = profile.rule
    matched: List[str] = []
    for root in profile.registry_roots:
        _walk(root.path, root.depth, rule, matched)

    for key_path in collapse_nested(matched):
        yield Artifact(kind=kind, identifier=key_path)


def _walk(key_path: str, depth: int, rule: MatchRule, matched: List[str]) -> None:
    try:
        children = registry.list_subkeys(key_path)
    except OSError as exc:
        logger.debug("Skipping registry subtree %s: %s", key_path, exc)
        return

    for child in children:
        child_path = f"{key_path}\\{child}"
        if rule.matches(child):
            matched.append(child_path)
        elif depth > 1:
            _walk(child_path, depth - 1, rule, matched)


def collapse_nested(keys: Iterable[str]) -> List[str]:
    """
    Sort unique keys and drop every key that is a strict descendant of
    another retained key, so each subtree is deleted exactly once.

    Comparison is case-insensitive, like the registry itself.
    """
    retained: List[str] = []
    retained_folded = set()
    for key in sorted(keys, key=str.casefold):
        folded = key.casefold()
        if folded in retained_folded:
            continue
        parts = folded.split("\\")
        if any("\\".join(parts[:i]) in retained_folded for i in range(1, len(parts))):
            continue
        retained.append(key)
        retained_folded.add(folded)
    return retained
