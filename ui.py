"""
VendorScrub - Console presentation using Rich + InquirerPy.

Lists what each section found, asks for a per-section yes/no, prints
per-item results as they happen, and renders the final report.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from InquirerPy import inquirer

from confirmation import ConfirmationGate, is_affirmative
from config import BUILTIN_PROFILES
from models import Artifact, ArtifactKind, CleanupReport, ReportStatus, Section, _format_duration

console = Console()

KIND_TAGS: Dict[ArtifactKind, str] = {
    ArtifactKind.DIRECTORY: "DIR",
    ArtifactKind.REGISTRY_KEY: "REG",
    ArtifactKind.TEMP_ENTRY: "TMP",
    ArtifactKind.SERVICE: "SVC",
    ArtifactKind.SCHEDULED_TASK: "TASK",
    ArtifactKind.STARTUP_REGISTRY_VALUE: "RUN",
    ArtifactKind.STARTUP_FILE: "LNK",
}

STATUS_COLORS = {
    ReportStatus.SUCCESS: "green",
    ReportStatus.PARTIAL: "yellow",
    ReportStatus.NOTHING_TO_DO: "cyan",
}


def _items_table(title: str, items: Sequence[Artifact]) -> Table:
    table = Table(box=box.SIMPLE, title=title, title_style="bold cyan", title_justify="left")
    table.add_column("#", justify="right", width=4)
    table.add_column("Type", justify="center", width=6)
    table.add_column("Item", overflow="fold")
    for idx, item in enumerate(items, 1):
        table.add_row(str(idx), KIND_TAGS.get(item.kind, "?"), item.describe())
    return table


class ConsoleGate(ConfirmationGate):
    """Shows the full list for a section, then reads one answer."""

    def __init__(self, affirmative_tokens: Sequence[str] = ("y", "yes")):
        self.affirmative_tokens = tuple(affirmative_tokens)

    def confirm(self, section_name: str, items: Sequence[Artifact]) -> bool:
        console.print()
        console.print(_items_table(f"{section_name} — {len(items):,} item(s) found", items))

        hint = "/".join(self.affirmative_tokens[:2]) or "y"
        try:
            answer = inquirer.text(
                message=f"Remove these {len(items):,} item(s)? ({hint} to confirm, anything else skips):",
            ).execute()
        except KeyboardInterrupt:
            answer = ""

        if is_affirmative(answer or "", self.affirmative_tokens):
            return True

        console.print(f"[yellow]Skipped {section_name}.[/]")
        return False


def print_event(event: str, section: Section, artifact: Optional[Artifact], error: str) -> None:
    """Engine callback: one colored status line per event."""
    if event == "empty":
        console.print(f"[dim]{section.name}: nothing found.[/]")
        if section.scan_error:
            console.print(f"  [red]scan error: {section.scan_error[:200]}[/]")
    elif event == "discovered" and section.scan_error:
        console.print(f"[red]{section.name}: partial scan ({section.scan_error[:200]})[/]")
    elif event == "deleted" and artifact is not None:
        console.print(f"  [green]Removed[/] {artifact.describe()}")
    elif event == "failed" and artifact is not None:
        console.print(f"  [red]Failed[/]  {artifact.describe()} [dim]({error})[/]")
    elif event == "completed":
        console.print(f"[bold]{section.name}:[/] {len(section.deleted):,} removed, "
                      f"{len(section.failed):,} failed")


def show_scan_results(sections: List[Section]) -> None:
    """Scan-only mode: list everything every section would act on."""
    total = 0
    for section in sections:
        if section.scan_error:
            console.print(f"[red]X {section.name}: SCAN ERROR[/]")
            console.print(f"  [dim]{section.scan_error[:200]}[/]")
        if not section.discovered:
            console.print(f"[dim]{section.name}: nothing found.[/]")
            continue
        total += section.item_count
        console.print(_items_table(f"{section.name} — {section.item_count:,} item(s)", section.discovered))

    console.print(Panel.fit(
        f"[bold cyan]Scan Complete[/]\nFound [bold]{total:,}[/] item(s). Nothing was removed.",
        border_style="cyan",
    ))


def show_cleanup_report(report: CleanupReport, log_path: str = "") -> None:
    """Display the final cleanup report."""
    table = Table(box=box.ROUNDED, title="Results by Category", title_style="bold cyan")
    table.add_column("Category", min_width=20)
    table.add_column("Removed", justify="right", width=9)
    table.add_column("Failed", justify="right", width=8)

    categories = list(report.deleted_by_category)
    categories += [c for c in report.failed_by_category if c not in categories]
    for category in categories:
        deleted = len(report.deleted_by_category.get(category, ()))
        failed = len(report.failed_by_category.get(category, ()))
        table.add_row(category, f"[green]{deleted:,}[/]", f"[{'red' if failed else 'dim'}]{failed:,}[/]")

    console.print()
    if categories:
        console.print(table)

    for category, items in report.failed_by_category.items():
        console.print(f"[bold red]Could not remove ({category}):[/]")
        for item in items:
            console.print(f"  - {item}")

    lines = [f"[bold {STATUS_COLORS[report.status]}]{report.summary_line()}[/]"]
    if report.skipped_sections:
        lines.append(f"Skipped: [yellow]{', '.join(report.skipped_sections)}[/]")
    lines.append(f"Duration: [bold cyan]{_format_duration(report.duration_s)}[/]")
    if log_path:
        lines.append(f"Log file: [cyan]{log_path}[/]")

    console.print(Panel.fit(
        "\n".join(lines),
        border_style=STATUS_COLORS[report.status],
        title="[bold]VendorScrub Report[/]",
    ))
    console.print()


def show_profiles() -> None:
    console.print("[bold cyan]Available Vendor Profiles:[/]\n")
    for name, profile in BUILTIN_PROFILES.items():
        console.print(f"  [bold]{name:12s}[/] — {profile.description}")
        console.print(f"               [dim]Terms: {', '.join(profile.terms)}[/]")
