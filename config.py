"""
VendorScrub — Vendor profiles, resolved OS folders, exclusions, and app settings.

Provides:
  - Scope: special folders resolved from the environment (temp, Program Files, ...)
  - Vendor profiles (compiled-in term lists, directory and registry root lists)
  - Exclusion patterns (paths/globs that should never be deleted)
  - Application-wide defaults (affirmative answer tokens, log directory)
"""

from __future__ import annotations

import fnmatch
import os
import string
import tempfile
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Mapping, Optional, Set, Tuple

from matching import MatchRule


# ── Scope ────────────────────────────────────────────────────────────────────

_START_MENU_STARTUP = os.path.join("Microsoft", "Windows", "Start Menu", "Programs", "Startup")
_COMMON_STARTUP = os.path.join("Microsoft", "Windows", "Start Menu", "Programs", "StartUp")


@dataclass
class Scope:
    """Special folders the sources resolve their candidates against.

    Empty values mean the folder does not exist on this system; templates
    referring to them are dropped instead of being resolved to a relative path.
    """
    temp_dir: str = ""
    program_files: str = ""
    program_files_x86: str = ""
    common_files: str = ""
    common_files_x86: str = ""
    program_data: str = ""
    appdata: str = ""
    local_appdata: str = ""
    user_startup: str = ""
    common_startup: str = ""

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "Scope":
        env = os.environ if environ is None else environ
        appdata = env.get("APPDATA", "")
        program_data = env.get("ProgramData", env.get("PROGRAMDATA", ""))
        return cls(
            temp_dir=env.get("TEMP", "") or tempfile.gettempdir(),
            program_files=env.get("ProgramFiles", ""),
            program_files_x86=env.get("ProgramFiles(x86)", ""),
            common_files=env.get("CommonProgramFiles", ""),
            common_files_x86=env.get("CommonProgramFiles(x86)", ""),
            program_data=program_data,
            appdata=appdata,
            local_appdata=env.get("LOCALAPPDATA", ""),
            user_startup=os.path.join(appdata, _START_MENU_STARTUP) if appdata else "",
            common_startup=os.path.join(program_data, _COMMON_STARTUP) if program_data else "",
        )

    def expand(self, template: str) -> Optional[str]:
        """Resolve a `{placeholder}/Sub/Dir` template, or None if a placeholder is unset."""
        values = asdict(self)
        for _, field_name, _, _ in string.Formatter().parse(template):
            if field_name is not None and not values[field_name]:
                return None
        return os.path.normpath(template.format(**values))

    @property
    def startup_dirs(self) -> List[str]:
        return [d for d in (self.user_startup, self.common_startup) if d]


# ── Vendor Profiles ──────────────────────────────────────────────────────────

RUN_KEYS: Tuple[str, ...] = (
    r"HKCU\SOFTWARE\Microsoft\Windows\CurrentVersion\Run",
    r"HKLM\SOFTWARE\Microsoft\Windows\CurrentVersion\Run",
    r"HKLM\SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Run",
)


@dataclass(frozen=True)
class RegistryRoot:
    """A registry subtree to enumerate, and how deep to look below it."""
    path: str
    depth: int = 1


@dataclass
class VendorProfile:
    """Everything needed to recognise one vendor's leftovers."""
    name: str
    description: str
    terms: List[str]                                  # Case-insensitive substrings
    patterns: List[str] = field(default_factory=list)  # Regular expressions
    directories: List[str] = field(default_factory=list)
    registry_roots: List[RegistryRoot] = field(default_factory=list)
    run_keys: Tuple[str, ...] = RUN_KEYS

    @property
    def rule(self) -> MatchRule:
        return MatchRule(self.terms, self.patterns)


_SOFTWARE_ROOTS = [
    RegistryRoot(r"HKLM\SOFTWARE"),
    RegistryRoot(r"HKLM\SOFTWARE\WOW6432Node"),
    RegistryRoot(r"HKCU\SOFTWARE"),
]


BUILTIN_PROFILES: Dict[str, VendorProfile] = {
    "adobe": VendorProfile(
        name="adobe",
        description="Adobe Creative Cloud, Acrobat, and the Adobe Genuine licensing services",
        terms=[
            "Adobe", "Creative Cloud", "Acrobat", "Photoshop", "Illustrator",
            "Lightroom", "Premiere", "CoreSync", "CCXProcess", "AGSService",
            "AdobeGC", "Genuine Service",
        ],
        directories=[
            "{program_files}/Adobe",
            "{program_files_x86}/Adobe",
            "{common_files}/Adobe",
            "{common_files_x86}/Adobe",
            "{program_data}/Adobe",
            "{appdata}/Adobe",
            "{local_appdata}/Adobe",
        ],
        registry_roots=list(_SOFTWARE_ROOTS),
    ),
    "autodesk": VendorProfile(
        name="autodesk",
        description="Autodesk desktop products and the FLEXnet / AdskLicensing subsystem",
        terms=[
            "Autodesk", "AutoCAD", "Revit", "Inventor", "3ds Max", "Maya",
            "Fusion 360", "FLEXnet", "FLEXlm",
        ],
        patterns=[r"^adsk"],
        directories=[
            "{program_files}/Autodesk",
            "{program_files_x86}/Autodesk",
            "{common_files}/Autodesk Shared",
            "{common_files_x86}/Autodesk Shared",
            "{program_data}/Autodesk",
            "{program_data}/FLEXnet",
            "{appdata}/Autodesk",
            "{local_appdata}/Autodesk",
        ],
        registry_roots=list(_SOFTWARE_ROOTS),
    ),
}


# ── Exclusion List ───────────────────────────────────────────────────────────

@dataclass
class ExclusionConfig:
    """Paths and patterns that should be excluded from cleanup."""
    # Exact paths to exclude (case-insensitive on Windows)
    paths: Set[str] = field(default_factory=set)
    # Glob patterns to exclude (e.g., "*.important", "C:\\MyData\\**")
    patterns: List[str] = field(default_factory=list)

    def add(self, entry: str) -> None:
        """Add a CLI-provided entry: globs go to patterns, everything else is a path."""
        if any(ch in entry for ch in "*?["):
            self.patterns.append(entry)
        else:
            self.paths.add(entry)


def is_excluded(path: str, exclusions: ExclusionConfig) -> bool:
    """Check if a path matches any exclusion rule."""
    path_lower = os.path.normpath(path).lower()

    # Check exact path matches
    for excl in exclusions.paths:
        if os.path.normpath(excl).lower() == path_lower:
            return True

    # Check glob patterns
    for pattern in exclusions.patterns:
        if fnmatch.fnmatch(path_lower, pattern.lower()):
            return True

    return False


def excluded_inside(path: str, exclusions: ExclusionConfig) -> Optional[str]:
    """Return an excluded exact path lying under `path`, if any.

    Removing `path` recursively would take that excluded path with it.
    """
    root = os.path.normcase(os.path.normpath(path)).rstrip("\\/")
    for excl in sorted(exclusions.paths):
        candidate = os.path.normcase(os.path.normpath(excl))
        if candidate.startswith(root + os.sep):
            return excl
    return None


# ── General Config ───────────────────────────────────────────────────────────

@dataclass
class AppConfig:
    """Application-wide configuration."""
    affirmative_tokens: Tuple[str, ...] = ("y", "yes")
    log_dir: Optional[str] = "."    # None disables the audit log
    scan_only: bool = False
