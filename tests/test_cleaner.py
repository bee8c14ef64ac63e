"""Tests for the per-kind removers."""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from conftest import RUN_KEY, make_dir

import cleaner
from models import Artifact, ArtifactKind


def test_every_kind_has_a_remover() -> None:
    assert set(cleaner.REMOVERS) == set(ArtifactKind)


def test_directory_removed_recursively_including_read_only_files(tmp_path: Path) -> None:
    target = make_dir(str(tmp_path), "VendorX", files=["a.dll", "b.dat"])
    make_dir(str(target), "nested", files=["c.cfg"])
    read_only = target / "a.dll"
    os.chmod(read_only, stat.S_IREAD)

    cleaner.remove(Artifact(ArtifactKind.DIRECTORY, str(target)))

    assert not target.exists()


def test_missing_directory_counts_as_removed(tmp_path: Path) -> None:
    cleaner.remove(Artifact(ArtifactKind.DIRECTORY, str(tmp_path / "gone")))


def test_directory_still_present_raises(monkeypatch, tmp_path: Path) -> None:
    target = make_dir(str(tmp_path), "Locked", files=["in_use.dll"])
    monkeypatch.setattr(cleaner.shutil, "rmtree", lambda path, **kwargs: None)

    with pytest.raises(cleaner.RemovalError):
        cleaner.remove(Artifact(ArtifactKind.DIRECTORY, str(target)))


def test_temp_entry_handles_files_and_folders(tmp_path: Path) -> None:
    log = tmp_path / "vendorx.log"
    log.write_text("log")
    folder = make_dir(str(tmp_path), "VendorX_Install", files=["setup.exe"])

    cleaner.remove(Artifact(ArtifactKind.TEMP_ENTRY, str(log)))
    cleaner.remove(Artifact(ArtifactKind.TEMP_ENTRY, str(folder)))

    assert not log.exists()
    assert not folder.exists()


def _symlink_or_skip(target: Path, link: Path) -> None:
    try:
        os.symlink(target, link)
    except (OSError, NotImplementedError) as exc:
        pytest.skip(f"symlinks unavailable: {exc}")


def test_symlinked_temp_entry_leaves_target_mode_alone(tmp_path: Path) -> None:
    outside = tmp_path / "outside.txt"
    outside.write_text("not ours")
    os.chmod(outside, 0o644)
    link = make_dir(str(tmp_path), "temp") / "VendorX_link"
    _symlink_or_skip(outside, link)

    cleaner.remove(Artifact(ArtifactKind.TEMP_ENTRY, str(link)))

    assert not os.path.lexists(link)
    assert outside.read_text() == "not ours"
    assert stat.S_IMODE(os.stat(outside).st_mode) == 0o644


def test_rmtree_retry_on_a_symlink_leaves_target_mode_alone(tmp_path: Path) -> None:
    outside = tmp_path / "outside.txt"
    outside.write_text("not ours")
    os.chmod(outside, 0o644)
    link = make_dir(str(tmp_path), "VendorX") / "shared.lnk"
    _symlink_or_skip(outside, link)

    cleaner._on_rm_error(os.unlink, str(link), None)

    assert not os.path.lexists(link)
    assert stat.S_IMODE(os.stat(outside).st_mode) == 0o644


def test_directory_removal_passes_error_handler(monkeypatch, tmp_path: Path) -> None:
    target = make_dir(str(tmp_path), "VendorX")
    seen = {}

    def fake_rmtree(path, **kwargs):
        seen.update(kwargs)
        os.rmdir(path)

    monkeypatch.setattr(cleaner.shutil, "rmtree", fake_rmtree)

    cleaner.remove(Artifact(ArtifactKind.DIRECTORY, str(target)))

    expected = "onexc" if sys.version_info >= (3, 12) else "onerror"
    assert list(seen) == [expected]
    assert seen[expected] is cleaner._on_rm_error


def test_os_errors_become_removal_errors(monkeypatch, tmp_path: Path) -> None:
    shortcut = tmp_path / "VendorX.lnk"
    shortcut.write_text("lnk")

    def denied(path):
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr(cleaner.os, "remove", denied)

    with pytest.raises(cleaner.RemovalError, match="Permission denied"):
        cleaner.remove(Artifact(ArtifactKind.STARTUP_FILE, str(shortcut)))


def test_startup_file_removed(tmp_path: Path) -> None:
    shortcut = tmp_path / "VendorX Helper.lnk"
    shortcut.write_text("lnk")

    cleaner.remove(Artifact(ArtifactKind.STARTUP_FILE, str(shortcut)))

    assert not shortcut.exists()


def test_registry_key_deleted_with_subtree(fake_registry) -> None:
    fake_registry.add_key(r"HKLM\SOFTWARE\VendorX\Sub\Leaf")

    cleaner.remove(Artifact(ArtifactKind.REGISTRY_KEY, r"HKLM\SOFTWARE\VendorX"))

    assert fake_registry.deleted == [r"HKLM\SOFTWARE\VendorX"]
    assert r"HKLM\SOFTWARE\VendorX\Sub" not in fake_registry.children


def test_registry_key_already_gone_is_not_a_failure(fake_registry) -> None:
    cleaner.remove(Artifact(ArtifactKind.REGISTRY_KEY, r"HKLM\SOFTWARE\Missing"))


def test_registry_key_access_denied_fails(fake_registry) -> None:
    fake_registry.add_key(r"HKLM\SOFTWARE\VendorX")
    fake_registry.undeletable.add(r"HKLM\SOFTWARE\VendorX")

    with pytest.raises(cleaner.RemovalError):
        cleaner.remove(Artifact(ArtifactKind.REGISTRY_KEY, r"HKLM\SOFTWARE\VendorX"))


def test_run_value_deletes_only_the_value(fake_registry) -> None:
    fake_registry.set_value(RUN_KEY, "Updater1", r"C:\Program Files\VendorX\updater.exe")
    fake_registry.set_value(RUN_KEY, "OneDrive", r"C:\OneDrive\OneDrive.exe")
    artifact = Artifact(
        ArtifactKind.STARTUP_REGISTRY_VALUE,
        RUN_KEY + "\\Updater1",
        metadata={"key": RUN_KEY, "value": "Updater1"},
    )

    cleaner.remove(artifact)

    assert fake_registry.values[RUN_KEY] == {"OneDrive": r"C:\OneDrive\OneDrive.exe"}
    assert RUN_KEY in fake_registry.children


def test_service_is_stopped_before_delete(fake_system) -> None:
    fake_system.services = [("VendorXUpdate", "VendorX Update")]

    cleaner.remove(Artifact(ArtifactKind.SERVICE, "VendorXUpdate"))

    assert fake_system.calls == [("stop", "VendorXUpdate"), ("delete", "VendorXUpdate")]


def test_service_stop_failure_is_ignored(fake_system) -> None:
    fake_system.stop_failures.add("VendorXUpdate")

    cleaner.remove(Artifact(ArtifactKind.SERVICE, "VendorXUpdate"))

    assert ("delete", "VendorXUpdate") in fake_system.calls


def test_service_stop_raising_is_ignored(monkeypatch, fake_system) -> None:
    def broken(name):
        raise OSError("sc.exe timed out")

    monkeypatch.setattr(cleaner.system, "stop_service", broken)

    cleaner.remove(Artifact(ArtifactKind.SERVICE, "VendorXUpdate"))

    assert fake_system.calls == [("delete", "VendorXUpdate")]


def test_service_delete_non_zero_exit_fails(fake_system) -> None:
    fake_system.delete_failures.add("VendorXLicensing")

    with pytest.raises(cleaner.RemovalError, match="1072"):
        cleaner.remove(Artifact(ArtifactKind.SERVICE, "VendorXLicensing"))


def test_scheduled_task_unregistered_by_full_path(fake_system) -> None:
    fake_system.tasks = ["\\VendorX\\Daily Check"]

    cleaner.remove(Artifact(ArtifactKind.SCHEDULED_TASK, "\\VendorX\\Daily Check"))

    assert fake_system.calls == [("delete_task", "\\VendorX\\Daily Check")]
    assert fake_system.tasks == []


def test_scheduled_task_failure_raises(fake_system) -> None:
    fake_system.delete_failures.add("\\VendorX\\Daily Check")

    with pytest.raises(cleaner.RemovalError, match="Access is denied"):
        cleaner.remove(Artifact(ArtifactKind.SCHEDULED_TASK, "\\VendorX\\Daily Check"))
