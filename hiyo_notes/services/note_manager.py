# hiyo_notes/services/note_manager.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable

from PySide6.QtCore import QObject, Signal

from hiyo_notes.core.filenames import next_note_filename, note_filename, note_pattern
from hiyo_notes.core.models import Note
from hiyo_notes.infrastructure.filesystem import (
    atomic_write_text,
    ensure_directory,
    write_recovery_copy,
)
from hiyo_notes.logging_setup import log


class NoteManager(QObject):
    """
    The only component that reads or writes note files.

    Keeps an in-memory index of notes sorted by modified_at (newest first).
    Files live at <save root>/<genre>/<genre>_<NNN>.md.

    Collaborators are passed in as plain callables:
      save_root()     -> current root directory (None when unset)
      current_genre() -> name of the selected genre
    """

    current_note_changed = Signal(object)
    notes_changed = Signal()
    save_failed = Signal(str)

    def __init__(
        self,
        *,
        save_root: Callable[[], Path | None],
        current_genre: Callable[[], str],
    ):
        super().__init__()
        self._save_root = save_root
        self._current_genre = current_genre

        self._notes: list[Note] = []
        self._current: Note | None = None

    # ───────────────────────── queries ─────────────────────────

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    @property
    def current_note(self) -> Note | None:
        return self._current

    def notes_for_genre(self, genre: str) -> list[Note]:
        return [n for n in self._notes if n.genre == genre]

    def find_latest_note(self, genre: str) -> Note | None:
        # index is kept sorted newest first
        for note in self._notes:
            if note.genre == genre:
                return note
        return None

    def note_path(self, note: Note) -> Path | None:
        root = self._save_root()
        if root is None:
            return None
        return Path(root) / note.genre / note.filename

    def next_filename(self, genre: str) -> str:
        """Numbering only looks at the index, never at the directory."""
        return next_note_filename(genre, (n.filename for n in self.notes_for_genre(genre)))

    # ───────────────────────── lifecycle ─────────────────────────

    def load_index(self) -> int:
        """
        Index note files already on disk under every genre folder.
        Returns the number of notes added.
        """
        root = self._save_root()
        if root is None or not Path(root).is_dir():
            log.info("No save root to index")
            return 0

        known = {(n.genre, n.filename) for n in self._notes}
        added = 0
        for genre_dir in sorted(p for p in Path(root).iterdir() if p.is_dir()):
            genre = genre_dir.name
            pattern = note_pattern(genre)
            for path in genre_dir.glob("*.md"):
                if not pattern.fullmatch(path.name) or (genre, path.name) in known:
                    continue
                try:
                    text = path.read_text(encoding="utf-8")
                    st = path.stat()
                except (OSError, UnicodeDecodeError):
                    log.exception("Skipping unreadable note: %s", path)
                    continue
                modified = datetime.fromtimestamp(st.st_mtime)
                self._notes.append(Note(
                    filename=path.name,
                    genre=genre,
                    content=text,
                    created_at=min(modified, datetime.fromtimestamp(st.st_ctime)),
                    modified_at=modified,
                ))
                added += 1

        self._sort()
        log.info("Note index loaded: root=%s added=%d total=%d", root, added, len(self._notes))
        if added:
            self.notes_changed.emit()
        return added

    def ensure_initial_note(self) -> Note:
        genre = self._current_genre()
        latest = self.find_latest_note(genre)
        if latest is not None:
            log.info("Found existing note: %s", latest.filename)
            self._set_current(latest)
            return latest
        return self.create_new_note()

    def create_new_note(self) -> Note:
        genre = self._current_genre()
        note = Note(filename=self.next_filename(genre), genre=genre)
        note = self._create_physical_file(note)
        self._insert(note)
        log.info("Created new note: %s/%s", note.genre, note.filename)
        return note

    def switch_to_genre(self, name: str) -> Note:
        latest = self.find_latest_note(name)
        if latest is not None:
            log.info("Switched to existing note: %s", latest.filename)
            self._set_current(latest)
            return latest

        note = Note(filename=note_filename(name, 1), genre=name)
        note = self._create_physical_file(note)
        self._insert(note)
        log.info("Created first note for genre: %s", note.filename)
        return note

    def select_note(self, note: Note) -> bool:
        for n in self._notes:
            if n.id == note.id:
                self._set_current(n)
                return True
        return False

    # ───────────────────────── saving ─────────────────────────

    def save_note(self, content: str) -> bool:
        """
        Overwrite the current note's file.

        On failure the genre directory is recreated and the write retried once.
        A second failure is logged, a recovery copy is attempted and
        save_failed is emitted; nothing is raised.
        """
        note = self._current
        if note is None:
            log.warning("No current note to save")
            return False

        path = self.note_path(note)
        if path is None:
            log.error("No save location available")
            return False

        if not path.parent.exists():
            log.info("Genre directory missing, creating: %s", path.parent)
            ensure_directory(path.parent)

        try:
            atomic_write_text(path, content)
        except OSError as exc:
            log.warning("Failed to save note %s: %s; recreating folders and retrying", path, exc)
            self._recreate_structure(path)
            try:
                atomic_write_text(path, content)
            except OSError:
                log.exception("Final save attempt failed: %s", path)
                self._write_recovery(path, content)
                self.save_failed.emit(str(path))
                return False
            log.info("Note saved after recreation: %s", path)
        else:
            log.debug("Note saved: %s chars=%d", path, len(content))

        self._update_after_save(note, content)
        return True

    # ───────────────────────── import / export ─────────────────────────

    def load_note_from_document(self, text: str, filename: str) -> Note:
        """
        Bring external text in as a note of the *current* genre.
        An indexed note with the same genre+filename is not replaced; the
        imported text becomes the current note under that record's id.
        """
        genre = self._current_genre()
        filename = Path(filename).name
        note = Note(filename=filename, genre=genre, content=text)

        existing = next(
            (n for n in self._notes if n.filename == filename and n.genre == genre), None
        )
        if existing is None:
            self._insert(note)
        else:
            log.info("Note %s/%s already indexed, not inserting", genre, filename)
            self._set_current(replace(note, id=existing.id, created_at=existing.created_at))

        log.info("Note loaded: %s", filename)
        return self._current

    def import_note(self, path: Path | str) -> Note:
        """Raises OSError/UnicodeDecodeError; the UI reports them."""
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        return self.load_note_from_document(text, path.name)

    def export_current_note(self, path: Path | str, content: str | None = None) -> None:
        """
        Write content (default: current note's) to an arbitrary path.
        Raises OSError; the UI reports it.
        """
        note = self._current
        if content is None:
            content = note.content if note is not None else ""
        atomic_write_text(Path(path), content)
        log.info("Note exported: %s", path)
        if note is not None:
            self._update_after_save(note, content)

    # ───────────────────────── removal / relocation ─────────────────────────

    def delete_note(self, note: Note) -> None:
        """Index only; the file stays on disk."""
        self._notes = [n for n in self._notes if n.id != note.id]
        if self._current is not None and self._current.id == note.id:
            self._current = self._notes[0] if self._notes else None
            self.current_note_changed.emit(self._current)
        log.info("Note removed from index: %s", note.filename)
        self.notes_changed.emit()

    def handle_save_location_changed(self) -> int:
        """
        Materialize indexed notes under the new root where absent.
        Old files are left where they were. Returns the number of files created.
        """
        created = 0
        if self._current is not None:
            log.info("Save location changed, recreating current note at new location")
            if self._materialize(self._current):
                created += 1

        for note in self._notes:
            if self._current is not None and note.id == self._current.id:
                continue
            if self._materialize(note):
                created += 1
        log.info("Notes recreated at new location: %d", created)
        return created

    # ───────────────────────── internal ─────────────────────────

    def _sort(self) -> None:
        self._notes.sort(key=lambda n: n.modified_at, reverse=True)

    def _set_current(self, note: Note | None) -> None:
        changed = note != self._current
        self._current = note
        if changed:
            self.current_note_changed.emit(note)

    def _insert(self, note: Note) -> None:
        self._notes.append(note)
        self._sort()
        self.notes_changed.emit()
        self._set_current(note)

    def _update_after_save(self, note: Note, content: str) -> None:
        updated = note.saved(content)
        for i, n in enumerate(self._notes):
            if n.id == note.id:
                self._notes[i] = updated
                break
        else:
            self._notes.append(updated)
        self._sort()
        self.notes_changed.emit()
        self._set_current(updated)

    def _recreate_structure(self, path: Path) -> None:
        ensure_directory(path.parent)

    def _write_recovery(self, path: Path, content: str) -> None:
        try:
            rec = write_recovery_copy(path, content)
        except OSError:
            log.exception("Recovery copy failed too: %s", path)
            return
        log.warning("Recovery copy written: %s", rec)

    def _materialize(self, note: Note) -> bool:
        path = self.note_path(note)
        if path is None or path.exists():
            return False
        return self._write_new_file(path, note.content)

    def _create_physical_file(self, note: Note) -> Note:
        """
        Create the note's file if missing. An existing file is never
        overwritten; its content is adopted into the returned record.
        """
        path = self.note_path(note)
        if path is None:
            log.error("No save location available, note kept in memory: %s", note.filename)
            return note

        if path.exists():
            try:
                existing = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                log.exception("Existing note file unreadable, keeping it untouched: %s", path)
                return note
            log.info("Physical file already exists, adopting it: %s", path)
            return replace(note, content=existing)

        self._write_new_file(path, note.content)
        return note

    def _write_new_file(self, path: Path, content: str) -> bool:
        if not ensure_directory(path.parent):
            return False
        try:
            atomic_write_text(path, content)
        except OSError:
            log.exception("Failed to create note file: %s", path)
            return False
        log.info("Physical file created: %s", path)
        return True
