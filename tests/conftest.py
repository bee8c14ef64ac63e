"""Shared fixtures: a vendor profile, a scope rooted in tmp_path, and in-memory OS fakes."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest

import registry
import system
from config import RegistryRoot, Scope, VendorProfile

RUN_KEY = r"HKCU\SOFTWARE\Microsoft\Windows\CurrentVersion\Run"


class FakeRegistry:
    """Case-sensitive in-memory registry tree addressed by full key paths."""

    def __init__(self) -> None:
        self.children: Dict[str, List[str]] = {}
        self.values: Dict[str, Dict[str, object]] = {}
        self.denied: Set[str] = set()
        self.undeletable: Set[str] = set()
        self.deleted: List[str] = []

    def add_key(self, path: str) -> None:
        parts = path.split("\\")
        for i in range(1, len(parts) + 1):
            current = "\\".join(parts[:i])
            self.children.setdefault(current, [])
            if i > 1:
                parent = "\\".join(parts[:i - 1])
                if parts[i - 1] not in self.children[parent]:
                    self.children[parent].append(parts[i - 1])

    def set_value(self, path: str, name: str, data: object) -> None:
        self.add_key(path)
        self.values.setdefault(path, {})[name] = data

    def list_subkeys(self, path: str) -> List[str]:
        if path in self.denied:
            raise PermissionError(5, "Access is denied", path)
        if path not in self.children:
            raise FileNotFoundError(2, "The system cannot find the file specified", path)
        return list(self.children[path])

    def list_values(self, path: str) -> List[Tuple[str, object, int]]:
        if path in self.denied:
            raise PermissionError(5, "Access is denied", path)
        if path not in self.children:
            raise FileNotFoundError(2, "The system cannot find the file specified", path)
        return [(name, data, 1) for name, data in self.values.get(path, {}).items()]

    def delete_tree(self, path: str) -> None:
        if path not in self.children:
            raise FileNotFoundError(2, "The system cannot find the file specified", path)
        if path in self.undeletable:
            raise PermissionError(5, "Access is denied", path)
        for key in [k for k in self.children if k == path or k.startswith(path + "\\")]:
            del self.children[key]
            self.values.pop(key, None)
        parent, _, leaf = path.rpartition("\\")
        if parent in self.children:
            self.children[parent].remove(leaf)
        self.deleted.append(path)

    def delete_value(self, path: str, name: str) -> None:
        if name not in self.values.get(path, {}):
            raise FileNotFoundError(2, "The system cannot find the file specified", path)
        del self.values[path][name]
        self.deleted.append(f"{path}\\{name}")


class FakeSystem:
    """Stands in for sc.exe and schtasks.exe."""

    def __init__(self) -> None:
        self.services: List[Tuple[str, str]] = []
        self.tasks: List[str] = []
        self.calls: List[Tuple[str, str]] = []
        self.delete_failures: Set[str] = set()
        self.stop_failures: Set[str] = set()

    def _result(self, args: List[str], returncode: int) -> subprocess.CompletedProcess:
        stdout = "" if returncode == 0 else "[SC] DeleteService FAILED 1072"
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr="")

    def list_services(self) -> List[Tuple[str, str]]:
        return list(self.services)

    def list_scheduled_tasks(self) -> List[str]:
        return list(self.tasks)

    def stop_service(self, name: str) -> subprocess.CompletedProcess:
        self.calls.append(("stop", name))
        return self._result(["sc.exe", "stop", name], 1062 if name in self.stop_failures else 0)

    def delete_service(self, name: str) -> subprocess.CompletedProcess:
        self.calls.append(("delete", name))
        if name in self.delete_failures:
            return self._result(["sc.exe", "delete", name], 1072)
        self.services = [s for s in self.services if s[0] != name]
        return self._result(["sc.exe", "delete", name], 0)

    def delete_scheduled_task(self, task_path: str) -> subprocess.CompletedProcess:
        self.calls.append(("delete_task", task_path))
        if task_path in self.delete_failures:
            return subprocess.CompletedProcess([], 1, stdout="", stderr="ERROR: Access is denied.")
        self.tasks = [t for t in self.tasks if t != task_path]
        return subprocess.CompletedProcess([], 0, stdout="SUCCESS", stderr="")


@pytest.fixture
def fake_registry(monkeypatch) -> FakeRegistry:
    fake = FakeRegistry()
    monkeypatch.setattr(registry, "list_subkeys", fake.list_subkeys)
    monkeypatch.setattr(registry, "list_values", fake.list_values)
    monkeypatch.setattr(registry, "delete_tree", fake.delete_tree)
    monkeypatch.setattr(registry, "delete_value", fake.delete_value)
    return fake


@pytest.fixture
def fake_system(monkeypatch) -> FakeSystem:
    fake = FakeSystem()
    monkeypatch.setattr(system, "list_services", fake.list_services)
    monkeypatch.setattr(system, "list_scheduled_tasks", fake.list_scheduled_tasks)
    monkeypatch.setattr(system, "stop_service", fake.stop_service)
    monkeypatch.setattr(system, "delete_service", fake.delete_service)
    monkeypatch.setattr(system, "delete_scheduled_task", fake.delete_scheduled_task)
    return fake


@pytest.fixture
def scope(tmp_path: Path) -> Scope:
    folders = {
        "temp_dir": tmp_path / "temp",
        "program_files": tmp_path / "pf",
        "program_data": tmp_path / "pd",
        "appdata": tmp_path / "appdata",
        "user_startup": tmp_path / "startup",
    }
    for folder in folders.values():
        folder.mkdir()
    return Scope(**{k: str(v) for k, v in folders.items()})


@pytest.fixture
def profile() -> VendorProfile:
    return VendorProfile(
        name="vendorx",
        description="VendorX test suite",
        terms=["VendorX", "XLicensing"],
        patterns=[r"^vx[a-z]+svc$"],
        directories=[
            "{program_files}/VendorX",
            "{program_files_x86}/VendorX",
            "{program_data}/VendorX",
            "{appdata}/VendorX",
        ],
        registry_roots=[RegistryRoot(r"HKLM\SOFTWARE", depth=2), RegistryRoot(r"HKCU\SOFTWARE")],
        run_keys=(RUN_KEY,),
    )


def make_dir(root: str, *parts: str, files: Optional[List[str]] = None) -> Path:
    path = Path(root, *parts)
    path.mkdir(parents=True, exist_ok=True)
    for name in files or []:
        (path / name).write_text("data")
    return path
