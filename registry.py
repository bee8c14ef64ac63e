"""
VendorScrub — Thin wrapper over winreg.

Keys are addressed by full paths such as 'HKLM\\SOFTWARE\\Adobe'. Every
handle is opened in a `with` block so it is released on all exit paths.
All functions raise OSError on failure (FileNotFoundError when the key or
value does not exist); on hosts without winreg every call raises OSError.
"""

from __future__ import annotations

from typing import Any, List, Tuple

try:
    import winreg
except ImportError:  # non-Windows hosts
    winreg = None  # type: ignore[assignment]


_HIVE_NAMES = {
    "HKLM": "HKEY_LOCAL_MACHINE",
    "HKEY_LOCAL_MACHINE": "HKEY_LOCAL_MACHINE",
    "HKCU": "HKEY_CURRENT_USER",
    "HKEY_CURRENT_USER": "HKEY_CURRENT_USER",
    "HKCR": "HKEY_CLASSES_ROOT",
    "HKEY_CLASSES_ROOT": "HKEY_CLASSES_ROOT",
    "HKU": "HKEY_USERS",
    "HKEY_USERS": "HKEY_USERS",
}


def split_key(key_path: str) -> Tuple[str, str]:
    """Split 'HKLM\\SOFTWARE\\X' into ('HKLM', 'SOFTWARE\\X')."""
    hive_str, _, sub_path = key_path.partition("\\")
    if hive_str.upper() not in _HIVE_NAMES:
        raise ValueError(f"Unknown registry hive in {key_path!r}")
    return hive_str.upper(), sub_path


def _hive(hive_str: str) -> int:
    if winreg is None:
        raise OSError("Windows registry is not available on this platform")
    return getattr(winreg, _HIVE_NAMES[hive_str])


def _open(key_path: str, access: int):
    hive_str, sub_path = split_key(key_path)
    hive = _hive(hive_str)
    return winreg.OpenKey(hive, sub_path, 0, access | winreg.KEY_WOW64_64KEY)


def list_subkeys(key_path: str) -> List[str]:
    """Return the names of the immediate subkeys of a key."""
    names: List[str] = []
    with _open(key_path, winreg.KEY_READ if winreg else 0) as key:
        subkey_count = winreg.QueryInfoKey(key)[0]
        for i in range(subkey_count):
            try:
                names.append(winreg.EnumKey(key, i))
            except OSError:
                # Key removed while enumerating
                break
    return names


def list_values(key_path: str) -> List[Tuple[str, Any, int]]:
    """Return (name, data, type) for every value stored directly under a key."""
    values: List[Tuple[str, Any, int]] = []
    with _open(key_path, winreg.KEY_READ if winreg else 0) as key:
        num_values = winreg.QueryInfoKey(key)[1]
        for i in range(num_values):
            try:
                values.append(winreg.EnumValue(key, i))
            except OSError:
                break
    return values


def delete_tree(key_path: str) -> None:
    """Delete a key together with all of its subkeys."""
    parent_path, _, leaf_name = key_path.rpartition("\\")
    if not parent_path or not leaf_name:
        raise ValueError(f"Refusing to delete a hive root: {key_path!r}")

    for child in list_subkeys(key_path):
        delete_tree(f"{key_path}\\{child}")

    with _open(parent_path, winreg.KEY_ALL_ACCESS if winreg else 0) as parent:
        winreg.DeleteKey(parent, leaf_name)


def delete_value(key_path: str, value_name: str) -> None:
    """Delete a single named value, leaving the key itself in place."""
    with _open(key_path, winreg.KEY_SET_VALUE if winreg else 0) as key:
        winreg.DeleteValue(key, value_name)
