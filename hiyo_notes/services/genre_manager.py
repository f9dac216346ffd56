# hiyo_notes/services/genre_manager.py

from __future__ import annotations

import uuid

from PySide6.QtCore import QObject, QSettings, QTimer, Signal

from hiyo_notes.core.filenames import InvalidGenreName, validate_genre_name
from hiyo_notes.core.models import GENRE_COLORS, Genre, default_genre
from hiyo_notes.logging_setup import log
from hiyo_notes.settings import (
    ERROR_CLEAR_MS,
    SettingsKeys,
    get_bool,
    get_json,
    set_json,
)


class GenreManager(QObject):
    """
    Catalog of genres plus the current selection.

    Signals:
      genres_changed(list[Genre])
      current_genre_changed(Genre)
      error_changed(message, error_id)  -- empty message means cleared
    """

    genres_changed = Signal(list)
    current_genre_changed = Signal(object)
    error_changed = Signal(str, str)

    def __init__(self, settings: QSettings, *, error_clear_ms: int = ERROR_CLEAR_MS):
        super().__init__()
        self._settings = settings

        seed = default_genre()
        self._genres: list[Genre] = [seed]
        self._current: Genre = seed

        self._error_message = ""
        self._error_id = ""
        self._error_timer = QTimer(self)
        self._error_timer.setSingleShot(True)
        self._error_timer.setInterval(int(error_clear_ms))
        self._error_timer.timeout.connect(self.clear_error)

    def initialize(self) -> None:
        loaded = self._load_genres()
        reseeded = False
        if not loaded:
            loaded = [default_genre()]
            reseeded = True
        elif not any(g.is_default for g in loaded):
            log.warning("Stored genres have no default genre, re-seeding it")
            loaded.insert(0, default_genre())
            reseeded = True
        self._genres = loaded
        # a fresh default must keep its id across restarts
        if reseeded:
            self._save_genres()

        self._current = self.default_genre
        stored_current = get_json(self._settings, SettingsKeys.CURRENT_GENRE)
        if isinstance(stored_current, dict):
            match = self._by_id(str(stored_current.get("id", "")))
            if match is not None:
                self._current = match
            else:
                log.info("Stored current genre is unknown, falling back to default")

        if not get_bool(self._settings, SettingsKeys.GENRES_INITIALIZED, False):
            self._save_genres()
            self._save_current()
            self._settings.setValue(SettingsKeys.GENRES_INITIALIZED, True)

        log.info(
            "GenreManager initialized: genres=%d current=%s",
            len(self._genres), self._current.name,
        )
        self.genres_changed.emit(self.genres)
        self.current_genre_changed.emit(self._current)

    # ───────────────────────── queries ─────────────────────────

    @property
    def genres(self) -> list[Genre]:
        return list(self._genres)

    @property
    def current_genre(self) -> Genre:
        return self._current

    @property
    def default_genre(self) -> Genre:
        for g in self._genres:
            if g.is_default:
                return g
        return self._genres[0]

    def current_genre_name(self) -> str:
        return self._current.name

    def get_genre(self, name: str) -> Genre | None:
        for g in self._genres:
            if g.name == name:
                return g
        return None

    # ───────────────────────── mutations ─────────────────────────

    def set_current_genre(self, genre: Genre) -> bool:
        member = self._by_id(genre.id)
        if member is None:
            log.warning("Refusing to select genre outside the list: %s", genre.name)
            return False
        self._current = member
        self._save_current()
        log.info("Genre changed to: %s", member.name)
        self.current_genre_changed.emit(member)
        return True

    def add_genre(self, name: str, color: str | None = None) -> Genre | None:
        try:
            name = validate_genre_name(name)
        except InvalidGenreName as exc:
            self.show_error(str(exc))
            return None

        key = name.casefold()
        if any(g.name.casefold() == key for g in self._genres):
            self.show_error(f"Genre '{name}' already exists.")
            return None

        genre = Genre(name=name, color=color or self._next_color())
        self._genres.append(genre)
        self._save_genres()
        log.info("Added new genre: %s color=%s", genre.name, genre.color)
        self.genres_changed.emit(self.genres)
        return genre

    def delete_genre(self, genre: Genre) -> bool:
        if genre.is_default:
            self.show_error(f"The default genre '{genre.name}' cannot be deleted.")
            log.info("Cannot delete default genre: %s", genre.name)
            return False

        before = len(self._genres)
        self._genres = [g for g in self._genres if g.id != genre.id]
        if len(self._genres) == before:
            log.warning("Delete requested for unknown genre: %s", genre.name)
            return False

        if self._current.id == genre.id:
            self._current = self.default_genre
            self._save_current()
            self.current_genre_changed.emit(self._current)

        self._save_genres()
        log.info("Deleted genre: %s", genre.name)
        self.genres_changed.emit(self.genres)
        return True

    # ───────────────────────── transient errors ─────────────────────────

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def error_id(self) -> str:
        return self._error_id

    def show_error(self, message: str) -> None:
        # id changes on every call, even for a repeated message
        self._error_timer.stop()
        self._error_message = message
        self._error_id = uuid.uuid4().hex
        log.info("Genre error: %s", message)
        self.error_changed.emit(self._error_message, self._error_id)
        self._error_timer.start()

    def clear_error(self) -> None:
        self._error_timer.stop()
        if not self._error_message:
            return
        self._error_message = ""
        self._error_id = ""
        self.error_changed.emit("", "")

    # ───────────────────────── internal ─────────────────────────

    def _by_id(self, genre_id: str) -> Genre | None:
        for g in self._genres:
            if g.id == genre_id:
                return g
        return None

    def _next_color(self) -> str:
        used = {g.color for g in self._genres}
        for color in GENRE_COLORS:
            if color not in used:
                return color
        return GENRE_COLORS[len(self._genres) % len(GENRE_COLORS)]

    def _load_genres(self) -> list[Genre]:
        raw = get_json(self._settings, SettingsKeys.GENRES, [])
        if not isinstance(raw, list):
            log.warning("Stored genres are not a list, ignoring")
            return []
        out: list[Genre] = []
        for item in raw:
            try:
                out.append(Genre.from_dict(item))
            except (KeyError, TypeError, AttributeError):
                log.warning("Skipping malformed stored genre: %r", item)
        return out

    def _save_genres(self) -> None:
        set_json(self._settings, SettingsKeys.GENRES, [g.to_dict() for g in self._genres])

    def _save_current(self) -> None:
        set_json(self._settings, SettingsKeys.CURRENT_GENRE, self._current.to_dict())
