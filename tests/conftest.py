import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from PySide6.QtCore import QCoreApplication

from hiyo_notes.settings import SettingsKeys, open_settings


@pytest.fixture(scope="session", autouse=True)
def qapp():
    # timers need an event dispatcher
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture()
def store(tmp_path):
    return open_settings(tmp_path / "settings.ini")


@pytest.fixture()
def notes_root(tmp_path, store):
    root = tmp_path / "notes"
    store.setValue(SettingsKeys.SAVE_LOCATION, str(root))
    return root
