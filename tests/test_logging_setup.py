import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import logging
from types import SimpleNamespace

import pytest
from PySide6.QtCore import QtMsgType

from hiyo_notes.logging_setup import SESSION_ID, log, qt_message_to_log


class _Collect(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture()
def records():
    handler = _Collect()
    log.addHandler(handler)
    yield handler.records
    log.removeHandler(handler)


def test_records_carry_session(records):
    log.info("hello")

    assert records[-1].session == SESSION_ID


@pytest.mark.parametrize("mode, level", [
    (QtMsgType.QtDebugMsg, logging.DEBUG),
    (QtMsgType.QtWarningMsg, logging.WARNING),
    (QtMsgType.QtCriticalMsg, logging.ERROR),
])
def test_qt_messages_map_to_levels(records, mode, level):
    qt_message_to_log(mode, SimpleNamespace(file="view.qml", line=12), "boom")

    assert records[-1].levelno == level
    assert "boom" in records[-1].getMessage()
    assert "view.qml:12" in records[-1].getMessage()


def test_qt_message_without_origin(records):
    qt_message_to_log(QtMsgType.QtInfoMsg, SimpleNamespace(file=None, line=0), "plain")

    assert records[-1].getMessage() == "Qt: plain"
