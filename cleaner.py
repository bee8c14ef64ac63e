"""
VendorScrub — Removal strategies, one per artifact kind.

Every remover returns normally when the artifact is gone afterwards and
raises RemovalError otherwise. Something that has already disappeared
counts as removed.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import sys
from typing import Callable, Dict

import registry
import system
from models import Artifact, ArtifactKind

logger = logging.getLogger("vendorscrub")


class RemovalError(Exception):
    """An artifact could not be removed (in use, access denied, non-zero exit...)."""


def remove(artifact: Artifact) -> None:
    """Dispatch to the remover for the artifact's kind."""
    remover = REMOVERS[artifact.kind]
    try:
        remover(artifact)
    except RemovalError:
        raise
    except OSError as exc:
        raise RemovalError(str(exc)) from exc


# ── Filesystem ───────────────────────────────────────────────────────────────

def _remove_path(artifact: Artifact) -> None:
    path = artifact.identifier
    if os.path.isdir(path) and not os.path.islink(path):
        _delete_directory(path)
    else:
        _delete_file(path)


def _remove_file(artifact: Artifact) -> None:
    _delete_file(artifact.identifier)


def _delete_file(path: str) -> None:
    """Delete a single file, handling read-only attributes."""
    if not os.path.lexists(path):
        return  # Already gone

    _make_writable(path)
    os.remove(path)


def _delete_directory(path: str) -> None:
    """Delete an entire directory tree."""
    if not os.path.isdir(path):
        return  # Already gone

    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_on_rm_error)
    else:
        shutil.rmtree(path, onerror=_on_rm_error)
    if os.path.exists(path):
        raise RemovalError(f"{path} could not be fully removed (files in use or access denied)")


def _make_writable(path: str) -> None:
    """Clear the read-only attribute without following symlinks."""
    if os.path.islink(path):
        return
    try:
        os.chmod(path, stat.S_IWRITE)
    except OSError:
        pass


def _on_rm_error(func, path, exc_info):
    """Error handler for shutil.rmtree — try to fix read-only and retry."""
    try:
        _make_writable(path)
        func(path)
    except OSError as exc:
        logger.debug("Could not remove %s: %s", path, exc)


# ── Registry ─────────────────────────────────────────────────────────────────

def _remove_registry_key(artifact: Artifact) -> None:
    try:
        registry.delete_tree(artifact.identifier)
    except FileNotFoundError:
        pass


def _remove_run_value(artifact: Artifact) -> None:
    try:
        registry.delete_value(artifact.metadata["key"], artifact.metadata["value"])
    except FileNotFoundError:
        pass


# ── Services & Tasks ─────────────────────────────────────────────────────────

def _remove_service(artifact: Artifact) -> None:
    name = artifact.identifier
    try:
        stopped = system.stop_service(name)
        if stopped.returncode != 0:
            logger.debug("sc stop %s exited with %s", name, stopped.returncode)
    except OSError as exc:
        logger.debug("Could not stop service %s: %s", name, exc)

    result = system.delete_service(name)
    if result.returncode != 0:
        detail = (result.stdout or result.stderr or "").strip()
        raise RemovalError(f"sc delete {name} exited with {result.returncode}: {detail}")


def _remove_scheduled_task(artifact: Artifact) -> None:
    result = system.delete_scheduled_task(artifact.identifier)
    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip()
        raise RemovalError(f"schtasks /Delete exited with {result.returncode}: {detail}")


REMOVERS: Dict[ArtifactKind, Callable[[Artifact], None]] = {
    ArtifactKind.DIRECTORY: _remove_path,
    ArtifactKind.TEMP_ENTRY: _remove_path,
    ArtifactKind.REGISTRY_KEY: _remove_registry_key,
    ArtifactKind.SERVICE: _remove_service,
    ArtifactKind.SCHEDULED_TASK: _remove_scheduled_task,
    ArtifactKind.STARTUP_REGISTRY_VALUE: _remove_run_value,
    ArtifactKind.STARTUP_FILE: _remove_file,
}
