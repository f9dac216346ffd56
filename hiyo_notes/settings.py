from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QSettings

APP_NAME = "hiyo-notes"
ORG_NAME = "hiyo-notes"
LOG_DIR = Path.home() / f".{APP_NAME}" / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"
RECOVERY_DIR = Path.home() / f".{APP_NAME}" / "recovery"

# Sub-folder created under the platform documents location.
DEFAULT_SUBFOLDER = "hiyo-notes"

AUTOSAVE_DEBOUNCE_MS = 1000
ERROR_CLEAR_MS = 3000


@dataclass(frozen=True)
class SettingsKeys:
    SAVE_LOCATION: str = "storage/save_location"
    GENRES: str = "genres/saved"
    CURRENT_GENRE: str = "genres/current"
    GENRES_INITIALIZED: str = "genres/initialized"
    UI_GEOMETRY: str = "ui/geometry"
    UI_ALWAYS_ON_TOP: str = "ui/always_on_top"
    UI_SHOW_PREVIEW: str = "ui/show_preview"


def open_settings(path: Path | None = None) -> QSettings:
    """
    Native per-user store by default.
    With an explicit path an INI file is used instead (tests, portable setups).
    """
    if path is None:
        return QSettings(ORG_NAME, APP_NAME)
    return QSettings(str(path), QSettings.Format.IniFormat)


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        if isinstance(val, list):
            # hand-edited INI values with bare commas come back split
            return ",".join(str(v) for v in val)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_bool(settings: QSettings, key: str, default: bool) -> bool:
    try:
        val = settings.value(key, default)
    except Exception:
        return default
    # INI backend hands booleans back as "true"/"false"
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes")
    return bool(val)


def get_json(settings: QSettings, key: str, default=None):
    raw = get_str(settings, key, "")
    if not raw:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        return default


def set_json(settings: QSettings, key: str, value) -> None:
    settings.setValue(key, json.dumps(value, ensure_ascii=False))
