"""User-editable settings persisted as JSON next to the application data."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from pnputil_manager.paths import get_application_directory

SETTINGS_FILE_NAME = "settings.json"


@dataclass
class UserSettings:
    pnputil_path: str = ""
    force_delete: bool = False
    command_timeout_seconds: float | None = None


class SettingsStore:
    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else get_application_directory() / SETTINGS_FILE_NAME

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> UserSettings:
        if not self._path.exists():
            return UserSettings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return UserSettings()
        if not isinstance(data, dict):
            return UserSettings()
        known = {field.name for field in fields(UserSettings)}
        settings = UserSettings(**{key: value for key, value in data.items() if key in known})
        settings.pnputil_path = str(settings.pnputil_path or "").strip()
        settings.force_delete = bool(settings.force_delete)
        settings.command_timeout_seconds = _coerce_timeout(settings.command_timeout_seconds)
        return settings

    def save(self, settings: UserSettings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")


def _coerce_timeout(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        timeout = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return timeout if timeout > 0 else None
