"""
VendorScrub — Service control and task scheduler wrappers.

Wraps ``sc.exe`` and ``schtasks.exe``. Listing helpers raise CommandError
when the tool is missing, times out, or exits non-zero; the stop/delete
helpers return the completed process so callers decide what a non-zero
exit means.
"""

from __future__ import annotations

import csv
import io
import logging
import subprocess
from typing import List, Sequence, Tuple

logger = logging.getLogger("vendorscrub")

COMMAND_TIMEOUT_S = 120


class CommandError(OSError):
    """An OS tool could not be run to completion."""


def run_command(args: Sequence[str], timeout: int = COMMAND_TIMEOUT_S) -> subprocess.CompletedProcess:
    """Run a command and capture its text output."""
    logger.debug("Running: %s", " ".join(args))
    try:
        return subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandError(f"{args[0]} timed out after {timeout}s") from exc
    except OSError as exc:
        raise CommandError(f"{args[0]} could not be started: {exc}") from exc


# ── Services ─────────────────────────────────────────────────────────────────

def parse_sc_query(output: str) -> List[Tuple[str, str]]:
    """Extract (service_name, display_name) pairs from ``sc query`` output."""
    services: List[Tuple[str, str]] = []
    current = None
    for line in output.splitlines():
        line = line.strip()
        if line.startswith("SERVICE_NAME:"):
            if current is not None:
                services.append((current, ""))
            current = line.split(":", 1)[1].strip()
        elif line.startswith("DISPLAY_NAME:") and current is not None:
            services.append((current, line.split(":", 1)[1].strip()))
            current = None
    if current is not None:
        services.append((current, ""))
    return services


def list_services() -> List[Tuple[str, str]]:
    result = run_command(["sc.exe", "query", "type=", "service", "state=", "all"])
    if result.returncode != 0:
        raise CommandError(f"sc query exited with {result.returncode}: {result.stdout.strip()}")
    return parse_sc_query(result.stdout)


def stop_service(name: str) -> subprocess.CompletedProcess:
    return run_command(["sc.exe", "stop", name], timeout=60)


def delete_service(name: str) -> subprocess.CompletedProcess:
    return run_command(["sc.exe", "delete", name], timeout=60)


# ── Scheduled Tasks ──────────────────────────────────────────────────────────

def parse_schtasks_csv(output: str) -> List[str]:
    """Extract unique task paths ('\\Folder\\Name') from ``schtasks /Query /FO CSV`` output."""
    tasks: List[str] = []
    seen = set()
    for row in csv.reader(io.StringIO(output)):
        if not row:
            continue
        task = row[0].strip()
        # Header rows repeat once per folder on some Windows builds
        if not task or task == "TaskName" or not task.startswith("\\"):
            continue
        if task.casefold() in seen:
            continue
        seen.add(task.casefold())
        tasks.append(task)
    return tasks


def list_scheduled_tasks() -> List[str]:
    result = run_command(["schtasks.exe", "/Query", "/FO", "CSV", "/NH"])
    if result.returncode != 0:
        raise CommandError(f"schtasks /Query exited with {result.returncode}: {result.stderr.strip()}")
    return parse_schtasks_csv(result.stdout)


def delete_scheduled_task(task_path: str) -> subprocess.CompletedProcess:
    return run_command(["schtasks.exe", "/Delete", "/TN", task_path, "/F"], timeout=60)
