import logging
import sys

from PySide6 import QtWidgets

from skynav.app.app_settings_manager import AppSettingsManager
from skynav.app.logging_setup import (
    LogSystem,
    apply_logging_policy,
    install_excepthook,
    install_qt_message_handler,
)

logger = logging.getLogger(__name__)


def main():
    logs = LogSystem("skynav")
    install_excepthook()
    install_qt_message_handler()

    # Reuse an existing QApplication if there is one.
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication(sys.argv)

    settings_mgr = AppSettingsManager()
    apply_logging_policy(logs, settings_mgr)
    logger.info("App start (run_mode=%s)", settings_mgr.run_mode)

    # VTK widgets need the QApplication first
    from skynav.ui.mainwindow import MainWindow
    main_window = MainWindow(settings_mgr)

    app.aboutToQuit.connect(logs.stop)
    try:
        rc = app.exec()
        logger.info("App exit (rc=%s)", rc)
        sys.exit(rc)
    finally:
        logs.stop()


if __name__ == "__main__":
    main()
