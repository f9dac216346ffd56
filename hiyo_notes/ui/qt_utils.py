from __future__ import annotations

from contextlib import contextmanager

from PySide6.QtCore import QObject, QSettings

from hiyo_notes.logging_setup import log


@contextmanager
def blocked_signals(*objects: QObject):
    """Mute the given objects while the block runs, then put back their previous state."""
    previous = [(obj, obj.blockSignals(True)) for obj in objects]
    try:
        yield
    finally:
        for obj, was_blocked in previous:
            try:
                obj.blockSignals(was_blocked)
            except RuntimeError:
                log.debug("Object deleted while its signals were blocked")


def store_ui_value(store: QSettings, key: str, value) -> bool:
    # window state only; a failed write is logged and the window carries on
    try:
        store.setValue(key, value)
    except Exception:
        log.exception("Could not remember UI value: %s", key)
        return False
    return True
