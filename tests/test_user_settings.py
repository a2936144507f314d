from __future__ import annotations

import json
from pathlib import Path

from pnputil_manager.user_settings import SettingsStore, UserSettings


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    assert store.load() == UserSettings()


def test_saved_settings_are_loaded_back(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "nested" / "settings.json")
    store.save(UserSettings(pnputil_path=r"C:\Tools\pnputil.exe", force_delete=True, command_timeout_seconds=45))
    loaded = store.load()
    assert loaded.pnputil_path == r"C:\Tools\pnputil.exe"
    assert loaded.force_delete is True
    assert loaded.command_timeout_seconds == 45


def test_corrupt_or_foreign_content_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert SettingsStore(path).load() == UserSettings()
    path.write_text(json.dumps(["a", "b"]), encoding="utf-8")
    assert SettingsStore(path).load() == UserSettings()


def test_unknown_keys_and_bad_timeouts_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"pnputil_path": "  pnputil.exe  ", "command_timeout_seconds": "soon", "legacy_option": 1}),
        encoding="utf-8",
    )
    loaded = SettingsStore(path).load()
    assert loaded.pnputil_path == "pnputil.exe"
    assert loaded.command_timeout_seconds is None
    path.write_text(json.dumps({"command_timeout_seconds": -3}), encoding="utf-8")
    assert SettingsStore(path).load().command_timeout_seconds is None
