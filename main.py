r"""
VendorScrub - Vendor Software Residue Remover

Entry point: privilege check -> per-section scan / confirm / remove -> report.

Usage:
    python main.py --profile adobe              Interactive cleanup, one prompt per section
    python main.py --profile autodesk --scan-only
                                                List what would be removed, remove nothing
    python main.py --profile adobe --yes        Confirm every section without prompting
    python main.py --profile adobe --accept y --accept o
                                                Also accept "o" (oui) as a yes answer
    python main.py --profile adobe --exclude "C:\ProgramData\Adobe"
    python main.py --list-profiles
"""

from __future__ import annotations

import argparse
import ctypes
import logging
import os
import sys
from typing import List, Optional

from rich.logging import RichHandler
from rich.panel import Panel

from config import BUILTIN_PROFILES, AppConfig, ExclusionConfig, Scope
from confirmation import PolicyGate
from engine import CleanupEngine
from report import write_log
import ui

console = ui.console

BANNER = r"""
  VendorScrub :: vendor software residue remover  v1.0
  ----------------------------------------------------
"""


def is_admin() -> bool:
    """Check if the process is running with administrator privileges."""
    try:
        return ctypes.windll.shell32.IsUserAnAdmin() != 0
    except AttributeError:
        # Not Windows: root is the closest equivalent
        return hasattr(os, "geteuid") and os.geteuid() == 0
    except OSError:
        return False


def request_elevation() -> None:
    """Show message about needing admin rights."""
    console.print(Panel(
        "[bold red](!!) Administrator privileges required![/]\n\n"
        "VendorScrub needs admin rights to remove:\n"
        "  - folders under Program Files and ProgramData\n"
        "  - HKEY_LOCAL_MACHINE registry keys\n"
        "  - services and scheduled tasks\n\n"
        "Please right-click your terminal and select\n"
        "[bold]'Run as administrator'[/], then try again.",
        border_style="red",
        title="[bold]Elevation Required[/]",
    ))


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Route the vendorscrub logger through Rich."""
    logger = logging.getLogger("vendorscrub")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="VendorScrub - remove every trace of a vendor's software suite",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--profile",
        type=str,
        default=None,
        metavar="NAME",
        help=f"Vendor profile to clean: {', '.join(BUILTIN_PROFILES)}",
    )
    parser.add_argument(
        "--list-profiles",
        action="store_true",
        help="List available vendor profiles and exit",
    )
    parser.add_argument(
        "--scan-only",
        action="store_true",
        help="Scan and display results without deleting anything",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm every section without prompting",
    )
    parser.add_argument(
        "--accept",
        action="append",
        default=None,
        metavar="TOKEN",
        help="Answer accepted as 'yes' at prompts (repeatable, default: y, yes)",
    )
    parser.add_argument(
        "--exclude",
        type=str,
        nargs="*",
        default=[],
        metavar="PATH",
        help="Paths, registry keys or glob patterns to exclude from cleanup",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=".",
        help="Directory to save the cleanup log CSV (default: current dir)",
    )
    parser.add_argument(
        "--no-log",
        action="store_true",
        help="Do not write the cleanup log CSV",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging (skipped subtrees, commands run)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    config = AppConfig()
    if args.accept:
        config.affirmative_tokens = tuple(t.strip().lower() for t in args.accept if t.strip())
    config.log_dir = None if args.no_log else args.log_dir
    config.scan_only = args.scan_only
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    console.print(f"[bold cyan]{BANNER}[/]")

    # -- LIST PROFILES --
    if args.list_profiles:
        ui.show_profiles()
        return 0

    if not args.profile:
        console.print("[red]No vendor profile given. Use --profile NAME "
                      "(see --list-profiles).[/]")
        return 2

    profile = BUILTIN_PROFILES.get(args.profile.lower())
    if not profile:
        console.print(f"[red]Unknown profile '{args.profile}'. "
                      f"Use --list-profiles to see options.[/]")
        return 2

    # Check admin before anything touches the system
    if not is_admin():
        request_elevation()
        return 1

    config = build_config(args)

    exclusions = ExclusionConfig()
    for entry in args.exclude:
        exclusions.add(entry)

    console.print(f"[cyan]Using profile: [bold]{profile.name}[/] — {profile.description}[/]\n")

    gate = PolicyGate(True) if args.yes else ui.ConsoleGate(config.affirmative_tokens)
    engine = CleanupEngine(
        profile=profile,
        gate=gate,
        scope=Scope.from_environ(),
        exclusions=exclusions,
        on_event=ui.print_event,
    )

    # -- SCAN-ONLY MODE --
    if config.scan_only:
        with console.status("[bold blue]Scanning...", spinner="dots"):
            sections = engine.discover_all()
        ui.show_scan_results(sections)
        console.print("[dim]Scan-only mode. Nothing was removed.[/]")
        return 0

    if args.yes:
        console.print("[yellow]--yes given: every section will be removed without prompting.[/]")

    report = engine.run()

    log_path = write_log(report, config.log_dir) if config.log_dir else ""
    ui.show_cleanup_report(report, log_path)

    if report.failed_count > 0:
        console.print(
            f"[yellow]Note: {report.failed_count} items could not be removed "
            f"(likely locked by the OS or another process). "
            f"A reboot followed by a second run usually clears them.[/]"
        )

    return 0


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted. Sections not yet confirmed were left untouched.[/]")
        sys.exit(130)


if __name__ == "__main__":
    run()
