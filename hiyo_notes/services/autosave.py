# hiyo_notes/services/autosave.py

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer

from hiyo_notes.logging_setup import log
from hiyo_notes.settings import AUTOSAVE_DEBOUNCE_MS


class AutosaveScheduler(QObject):
    """
    Debounced save: every schedule() restarts a single-shot timer, so the
    save runs once the text has been idle for the interval.

    The pending save remembers which note it was scheduled for; if the
    current note changed before the timer fired, the save is dropped.
    """

    def __init__(
        self,
        *,
        save: Callable[[str], bool],
        current_note_id: Callable[[], str | None],
        interval_ms: int = AUTOSAVE_DEBOUNCE_MS,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._save = save
        self._current_note_id = current_note_id

        self._pending_text: str | None = None
        self._pending_note_id: str | None = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self._fire)

    def schedule(self, text: str) -> None:
        self._pending_text = text
        self._pending_note_id = self._current_note_id()
        self._timer.start()

    def is_pending(self) -> bool:
        return self._pending_text is not None

    def cancel(self) -> None:
        self._timer.stop()
        self._pending_text = None
        self._pending_note_id = None

    def flush(self) -> bool:
        """Run the pending save now. Returns True if something was written."""
        self._timer.stop()
        return self._fire()

    def _fire(self) -> bool:
        text, note_id = self._pending_text, self._pending_note_id
        self._pending_text = None
        self._pending_note_id = None
        if text is None:
            return False

        if note_id != self._current_note_id():
            log.debug("Autosave skipped: note switched before timer fired")
            return False
        return bool(self._save(text))
