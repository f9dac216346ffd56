from __future__ import annotations

from PySide6.QtWidgets import QApplication

from hiyo_notes.logging_setup import SESSION_ID, install_global_exception_hooks, log
from hiyo_notes.services.session import create_session
from hiyo_notes.settings import APP_NAME, ORG_NAME, open_settings
from hiyo_notes.ui.main_window import MainWindow


def main() -> int:
    install_global_exception_hooks()
    app = QApplication([])
    app.setOrganizationName(ORG_NAME)
    app.setApplicationName(APP_NAME)

    store = open_settings()
    session = create_session(store)
    win = MainWindow(session, store)
    win.show()
    log.info("Application started, SID=%s", SESSION_ID)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
