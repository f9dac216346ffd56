from __future__ import annotations

from PySide6.QtCore import QSettings, Qt, QTimer, Slot
from PySide6.QtGui import QAction, QColor, QFont, QIcon, QPixmap
from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QInputDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QSplitter,
    QTextBrowser,
    QToolBar,
)

from hiyo_notes.core.models import Genre, Note
from hiyo_notes.logging_setup import log
from hiyo_notes.services.autosave import AutosaveScheduler
from hiyo_notes.services.markdown_renderer import MarkdownRenderer
from hiyo_notes.services.session import NotesSession
from hiyo_notes.settings import ERROR_CLEAR_MS, SettingsKeys, get_bool
from hiyo_notes.ui.qt_utils import blocked_signals, store_ui_value
from hiyo_notes.ui.settings_dialog import SettingsDialog

_SWATCH = {
    "blue": "#1e88e5", "green": "#43a047", "orange": "#fb8c00", "red": "#e53935",
    "purple": "#8e24aa", "pink": "#d81b60", "yellow": "#fdd835",
}


def _genre_icon(genre: Genre) -> QIcon:
    pix = QPixmap(12, 12)
    pix.fill(QColor(_SWATCH.get(genre.color or "", "#9e9e9e")))
    return QIcon(pix)


class MainWindow(QMainWindow):
    def __init__(self, session: NotesSession, store: QSettings):
        super().__init__()
        self.setWindowTitle("hiyo-notes")
        self.session = session
        self._store = store
        self.renderer = MarkdownRenderer()

        self.autosave = AutosaveScheduler(
            save=self.session.notes.save_note,
            current_note_id=self._current_note_id,
            parent=self,
        )

        # UI
        self.genre_box = QComboBox()
        self.genre_box.setMinimumWidth(140)
        self.note_box = QComboBox()
        self.note_box.setMinimumWidth(160)

        self.editor = QPlainTextEdit()
        font = self.editor.font()
        font.setFamily("monospace")
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.editor.setFont(font)

        self.preview = QTextBrowser()
        self.preview.setOpenExternalLinks(True)

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.addWidget(self.editor)
        self.splitter.addWidget(self.preview)
        self.setCentralWidget(self.splitter)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #e53935;")
        self.statusBar().addPermanentWidget(self.error_label)

        self.preview_timer = QTimer(self)
        self.preview_timer.setInterval(200)
        self.preview_timer.setSingleShot(True)
        self.preview_timer.timeout.connect(self._render_preview)

        self._build_toolbar()

        # Signals
        genres = self.session.genres
        notes = self.session.notes
        genres.genres_changed.connect(self._refresh_genres)
        genres.current_genre_changed.connect(self._on_current_genre_changed)
        genres.error_changed.connect(self._on_genre_error)
        notes.current_note_changed.connect(self._on_current_note_changed)
        notes.notes_changed.connect(self._refresh_note_box)
        notes.save_failed.connect(self._on_save_failed)
        self.session.settings.save_location_changed.connect(self._on_location_changed)

        self.genre_box.currentIndexChanged.connect(self._on_genre_selected)
        self.note_box.currentIndexChanged.connect(self._on_note_selected)
        self.editor.textChanged.connect(self._on_text_changed)

        self._restore_ui_state()
        self._refresh_genres(genres.genres)
        self._on_current_note_changed(notes.current_note)

    # ───────────────────────── construction ─────────────────────────

    def _build_toolbar(self) -> None:
        tb = QToolBar("Main")
        tb.setMovable(False)
        self.addToolBar(tb)

        tb.addWidget(self.genre_box)
        act_add_genre = QAction("+", self)
        act_add_genre.setToolTip("Add genre")
        act_add_genre.triggered.connect(self.add_genre_dialog)
        act_del_genre = QAction("−", self)
        act_del_genre.setToolTip("Delete current genre")
        act_del_genre.triggered.connect(self.delete_current_genre)
        tb.addAction(act_add_genre)
        tb.addAction(act_del_genre)
        tb.addSeparator()

        tb.addWidget(self.note_box)
        act_new = QAction("New", self)
        act_new.setShortcut("Ctrl+N")
        act_new.triggered.connect(self.new_note)
        tb.addAction(act_new)

        act_save = QAction("Save", self)
        act_save.setShortcut("Ctrl+S")
        act_save.triggered.connect(self.save_now)
        tb.addAction(act_save)

        act_export = QAction("Export…", self)
        act_export.triggered.connect(self.export_dialog)
        act_import = QAction("Import…", self)
        act_import.triggered.connect(self.import_dialog)
        tb.addAction(act_export)
        tb.addAction(act_import)
        tb.addSeparator()

        self.act_on_top = QAction("Always on top", self, checkable=True)
        self.act_on_top.toggled.connect(self._set_always_on_top)
        self.act_preview = QAction("Preview", self, checkable=True)
        self.act_preview.toggled.connect(self._set_preview_visible)
        tb.addAction(self.act_on_top)
        tb.addAction(self.act_preview)

        act_settings = QAction("Settings…", self)
        act_settings.setShortcut("Ctrl+,")
        act_settings.triggered.connect(self.open_settings)
        tb.addAction(act_settings)

    def _restore_ui_state(self) -> None:
        geo = self._store.value(SettingsKeys.UI_GEOMETRY)
        if geo:
            self.restoreGeometry(geo)
        else:
            self.resize(600, 400)
        with blocked_signals(self.act_on_top):
            self.act_on_top.setChecked(get_bool(self._store, SettingsKeys.UI_ALWAYS_ON_TOP, False))
        self._set_always_on_top(self.act_on_top.isChecked())
        show_preview = get_bool(self._store, SettingsKeys.UI_SHOW_PREVIEW, False)
        with blocked_signals(self.act_preview):
            self.act_preview.setChecked(show_preview)
        self.preview.setVisible(show_preview)

    def closeEvent(self, event):  # type: ignore[override]
        """Persist last edits even if the autosave timer has not fired yet."""
        try:
            self.autosave.flush()
        except Exception:
            log.exception("Failed to flush note on close")
        store_ui_value(self._store, SettingsKeys.UI_GEOMETRY, self.saveGeometry())
        super().closeEvent(event)

    # ───────────────────────── genres ─────────────────────────

    @Slot(list)
    def _refresh_genres(self, genres: list) -> None:
        current = self.session.genres.current_genre
        with blocked_signals(self.genre_box):
            self.genre_box.clear()
            for g in genres:
                self.genre_box.addItem(_genre_icon(g), g.name, g.id)
            idx = self.genre_box.findData(current.id)
            self.genre_box.setCurrentIndex(max(idx, 0))

    @Slot(int)
    def _on_genre_selected(self, index: int) -> None:
        genre_id = self.genre_box.itemData(index)
        genre = next((g for g in self.session.genres.genres if g.id == genre_id), None)
        if genre is None or genre.id == self.session.genres.current_genre.id:
            return
        self.autosave.flush()
        self.session.genres.set_current_genre(genre)

    @Slot(object)
    def _on_current_genre_changed(self, genre: Genre) -> None:
        with blocked_signals(self.genre_box):
            idx = self.genre_box.findData(genre.id)
            if idx >= 0:
                self.genre_box.setCurrentIndex(idx)

    def add_genre_dialog(self) -> None:
        name, ok = QInputDialog.getText(self, "Add genre", "Genre name:")
        if not ok:
            return
        genre = self.session.genres.add_genre(name)
        if genre is not None:
            self.autosave.flush()
            self.session.genres.set_current_genre(genre)

    def delete_current_genre(self) -> None:
        genre = self.session.genres.current_genre
        if not genre.is_default:
            answer = QMessageBox.question(
                self,
                "Delete genre",
                f"Delete genre '{genre.name}'? Its files stay on disk.",
            )
            if answer != QMessageBox.StandardButton.Yes:
                return
            self.autosave.flush()
        self.session.genres.delete_genre(genre)

    @Slot(str, str)
    def _on_genre_error(self, message: str, _error_id: str) -> None:
        self.error_label.setText(message)

    # ───────────────────────── notes ─────────────────────────

    def _current_note_id(self) -> str | None:
        note = self.session.notes.current_note
        return note.id if note is not None else None

    @Slot()
    def _refresh_note_box(self) -> None:
        notes = self.session.notes
        current = notes.current_note
        genre = current.genre if current is not None else self.session.genres.current_genre_name()
        with blocked_signals(self.note_box):
            self.note_box.clear()
            for n in sorted(notes.notes_for_genre(genre), key=lambda n: n.filename):
                self.note_box.addItem(n.filename, n.id)
            if current is not None:
                self.note_box.setCurrentIndex(self.note_box.findData(current.id))

    @Slot(int)
    def _on_note_selected(self, index: int) -> None:
        note_id = self.note_box.itemData(index)
        note = next((n for n in self.session.notes.notes if n.id == note_id), None)
        if note is None or note_id == self._current_note_id():
            return
        self.autosave.flush()
        self.session.notes.select_note(note)

    @Slot(object)
    def _on_current_note_changed(self, note: Note | None) -> None:
        text = note.content if note is not None else ""
        # saving replaces the record too; don't disturb the cursor then
        if text != self.editor.toPlainText():
            with blocked_signals(self.editor):
                self.editor.setPlainText(text)
            self._render_preview()
        title = f"hiyo-notes: {note.genre}/{note.filename}" if note is not None else "hiyo-notes"
        self.setWindowTitle(title)
        self._refresh_note_box()

    def new_note(self) -> None:
        self.autosave.flush()
        self.session.notes.create_new_note()

    def _on_text_changed(self) -> None:
        self.autosave.schedule(self.editor.toPlainText())
        if self.preview.isVisible():
            self.preview_timer.start()

    def save_now(self) -> None:
        self.autosave.cancel()
        if not self.session.settings.is_writable():
            log.warning("Save location not writable, falling back to export")
            self.export_dialog()
            return
        if self.session.notes.save_note(self.editor.toPlainText()):
            self.statusBar().showMessage("Saved", 1500)

    @Slot(str)
    def _on_save_failed(self, path: str) -> None:
        self.statusBar().showMessage(f"Could not save {path}", ERROR_CLEAR_MS)

    @Slot(str)
    def _on_location_changed(self, path: str) -> None:
        self.statusBar().showMessage(f"Save location: {path}", ERROR_CLEAR_MS)

    # ───────────────────────── import / export ─────────────────────────

    def export_dialog(self) -> None:
        note = self.session.notes.current_note
        suggested = note.filename if note is not None else "note.md"
        path, _ = QFileDialog.getSaveFileName(
            self, "Export note", suggested, "Markdown (*.md);;Text (*.txt);;All files (*)"
        )
        if not path:
            return
        try:
            self.session.notes.export_current_note(path, self.editor.toPlainText())
        except OSError as e:
            log.exception("Export failed: %s", path)
            QMessageBox.critical(self, "Export failed", str(e))

    def import_dialog(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Import note", "", "Text (*.md *.txt);;All files (*)"
        )
        if not path:
            return
        self.autosave.flush()
        try:
            self.session.notes.import_note(path)
        except (OSError, UnicodeDecodeError) as e:
            log.exception("Import failed: %s", path)
            QMessageBox.critical(self, "Import failed", str(e))

    # ───────────────────────── view ─────────────────────────

    def open_settings(self) -> None:
        self.autosave.flush()
        SettingsDialog(self, self.session.settings).exec()

    def _set_always_on_top(self, on: bool) -> None:
        self.setWindowFlag(Qt.WindowStaysOnTopHint, bool(on))
        # changing window flags hides the window
        if self.isVisible():
            self.show()
        store_ui_value(self._store, SettingsKeys.UI_ALWAYS_ON_TOP, bool(on))

    def _set_preview_visible(self, on: bool) -> None:
        self.preview.setVisible(bool(on))
        if on:
            self._render_preview()
        store_ui_value(self._store, SettingsKeys.UI_SHOW_PREVIEW, bool(on))

    def _render_preview(self) -> None:
        if not self.preview.isVisible():
            return
        self.preview.setHtml(self.renderer.render_page(self.editor.toPlainText()))
