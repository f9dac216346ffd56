# hiyo_notes/services/settings_manager.py

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QObject, QSettings, QStandardPaths, Signal

from hiyo_notes.infrastructure.filesystem import ensure_directory, probe_writable
from hiyo_notes.logging_setup import log
from hiyo_notes.settings import DEFAULT_SUBFOLDER, SettingsKeys, get_str


def default_save_location() -> Path:
    docs = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.DocumentsLocation)
    base = Path(docs) if docs else Path.home()
    return base / DEFAULT_SUBFOLDER


class SettingsManager(QObject):
    """
    Owns the root directory under which genre folders and notes live.
    """

    save_location_changed = Signal(str)

    def __init__(self, settings: QSettings):
        super().__init__()
        self._settings = settings
        self._save_location = ""

    def initialize(self) -> None:
        stored = get_str(self._settings, SettingsKeys.SAVE_LOCATION, "").strip()
        if stored:
            self._save_location = str(Path(stored).expanduser())
        else:
            self._save_location = str(default_save_location())
            self._settings.setValue(SettingsKeys.SAVE_LOCATION, self._save_location)
            log.info("No save location stored, using default: %s", self._save_location)

        self._prepare(Path(self._save_location))

    # ───────────────────────── public API ─────────────────────────

    def save_location(self) -> Path:
        return Path(self._save_location)

    def resolve_save_root(self) -> Path | None:
        if not self._save_location:
            return None
        return Path(self._save_location)

    def set_save_location(self, path: Path | str) -> None:
        """
        Only the root changes; reconciling existing notes is up to the caller.
        """
        new_location = str(Path(path).expanduser())
        if new_location == self._save_location:
            return
        self._save_location = new_location
        self._settings.setValue(SettingsKeys.SAVE_LOCATION, new_location)
        log.info("Save location updated: %s", new_location)

        self._prepare(Path(new_location))
        self.save_location_changed.emit(new_location)

    def is_writable(self) -> bool:
        if not self._save_location:
            return False
        return probe_writable(Path(self._save_location))

    def is_configured(self) -> bool:
        return bool(self._save_location) and Path(self._save_location).exists()

    # ───────────────────────── internal ─────────────────────────

    def _prepare(self, location: Path) -> None:
        if not ensure_directory(location):
            log.warning("Save location could not be created, continuing anyway: %s", location)
            return
        if not probe_writable(location):
            log.warning("Save location is not writable, continuing anyway: %s", location)
