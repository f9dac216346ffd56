from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from hiyo_notes.logging_setup import log
from hiyo_notes.services.settings_manager import SettingsManager


class SettingsDialog(QDialog):
    """Save location picker with a writability indicator."""

    def __init__(self, parent: QWidget | None, settings: SettingsManager):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setModal(True)
        self.resize(450, 180)
        self._settings = settings

        self.location = QLineEdit()
        self.location.setReadOnly(True)
        self.status = QLabel()

        btn_change = QPushButton("Change…")
        btn_change.clicked.connect(self._choose_location)

        row = QHBoxLayout()
        row.addWidget(self.location, 1)
        row.addWidget(btn_change)

        btn_done = QPushButton("Done")
        btn_done.setDefault(True)
        btn_done.clicked.connect(self.accept)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        buttons.addWidget(btn_done)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Save location"))
        layout.addLayout(row)
        layout.addWidget(self.status)
        layout.addStretch(1)
        layout.addWidget(QLabel("Notes are stored as <folder>/<genre>/<genre>_001.md"))
        layout.addLayout(buttons)

        self._refresh()

    def _refresh(self) -> None:
        self.location.setText(str(self._settings.save_location()))
        if self._settings.is_writable():
            self.status.setText("✔ Writable")
            self.status.setStyleSheet("color: green;")
        else:
            self.status.setText("⚠ Check write permissions for this folder")
            self.status.setStyleSheet("color: orange;")

    def _choose_location(self) -> None:
        path = QFileDialog.getExistingDirectory(
            self, "Choose a folder for notes", str(self._settings.save_location())
        )
        if not path:
            log.info("Folder selection cancelled")
            return
        self._settings.set_save_location(path)
        self._refresh()
