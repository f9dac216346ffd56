from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler

from PySide6.QtCore import QtMsgType, qInstallMessageHandler

from hiyo_notes.settings import APP_NAME, LOG_DIR, LOG_PATH

SESSION_ID = uuid.uuid4().hex[:8]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s | sid=%(session)s"

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


class SessionStamp(logging.Filter):
    """Tags every record with the id of this app run."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session"):
            record.session = SESSION_ID
        return True


def _rotating_file() -> logging.Handler | None:
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            LOG_PATH, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
    except OSError:
        # read-only home: console only
        return None


def configure_logging() -> logging.Logger:
    logger = logging.getLogger(APP_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addFilter(SessionStamp())
    formatter = logging.Formatter(LOG_FORMAT)

    targets: list[tuple[logging.Handler, int]] = [
        (logging.StreamHandler(sys.stdout or sys.stderr), logging.INFO),
    ]
    file_handler = _rotating_file()
    if file_handler is not None:
        targets.append((file_handler, logging.DEBUG))

    for handler, level in targets:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging ready, file=%s", LOG_PATH if file_handler else "-")
    return logger


log = configure_logging()


def qt_message_to_log(mode, context, message: str) -> None:
    """Forwards Qt's own diagnostics into the app log."""
    level = _QT_LEVELS.get(mode, logging.WARNING)
    origin = getattr(context, "file", None)
    if origin:
        log.log(level, "Qt: %s (%s:%s)", message, origin, getattr(context, "line", "?"))
    else:
        log.log(level, "Qt: %s", message)


def install_global_exception_hooks() -> None:
    def _excepthook(exc_type, exc, tb):
        log.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook
    qInstallMessageHandler(qt_message_to_log)
