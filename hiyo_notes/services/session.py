# hiyo_notes/services/session.py

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QSettings

from hiyo_notes.core.models import Genre
from hiyo_notes.logging_setup import log
from hiyo_notes.services.genre_manager import GenreManager
from hiyo_notes.services.note_manager import NoteManager
from hiyo_notes.services.settings_manager import SettingsManager


@dataclass
class NotesSession:
    settings: SettingsManager
    genres: GenreManager
    notes: NoteManager

    def _on_genre_changed(self, genre: Genre) -> None:
        self.notes.switch_to_genre(genre.name)

    def _on_save_location_changed(self, path: str) -> None:
        log.info("Reconciling notes with new save location: %s", path)
        self.notes.handle_save_location_changed()
        self.notes.load_index()


def create_session(store: QSettings, **genre_kwargs) -> NotesSession:
    """
    Build and initialize the three stores in dependency order:
    settings -> genres -> notes, then wire genre and location changes
    into the note manager.
    """
    settings = SettingsManager(store)
    settings.initialize()

    genres = GenreManager(store, **genre_kwargs)
    genres.initialize()

    notes = NoteManager(
        save_root=settings.resolve_save_root,
        current_genre=genres.current_genre_name,
    )
    notes.load_index()
    notes.ensure_initial_note()

    session = NotesSession(settings=settings, genres=genres, notes=notes)
    genres.current_genre_changed.connect(session._on_genre_changed)
    settings.save_location_changed.connect(session._on_save_location_changed)
    return session
