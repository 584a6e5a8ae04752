from __future__ import annotations

import logging
import logging.config
import os
import queue
import sys
import traceback
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path

from skynav.app.app_settings_manager import AppSettingsManager, RunMode
from skynav.utils.log_util import level_from_name


LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(process)d %(threadName)s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def default_log_dir(app_name: str) -> Path:
    """
    SKYNAV_LOG_DIR if set, otherwise ~/.<app_name>/logs.
    Falls back to ./logs when the home directory is not writable.
    """
    override = os.getenv("SKYNAV_LOG_DIR")
    candidates = [Path(override)] if override else []
    candidates += [Path.home() / f".{app_name.lower()}" / "logs", Path.cwd() / "logs"]
    for d in candidates:
        try:
            d.mkdir(parents=True, exist_ok=True)
            return d
        except OSError:
            continue
    raise RuntimeError(f"No writable log directory among {candidates}")


def build_config(app_name: str,
                 root_level: int | str | None = None,
                 console_level: int | str = logging.INFO,
                 log_dir: Path | None = None) -> dict:
    """Build a logging config dict."""
    if root_level is None:
        root_level = os.getenv("SKYNAV_LOG_LEVEL", "INFO")
    root_level = level_from_name(root_level)
    console_level = level_from_name(console_level)
    log_dir = log_dir or default_log_dir(app_name)
    log_file = str(log_dir / f"{app_name}.log")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": LOG_FORMAT, "datefmt": DATE_FORMAT,
            },
        },
        "handlers": {
            # records go through the queue, the listener writes the file
            "queue": {"class": "logging.handlers.QueueHandler", "queue": queue.Queue(-1)},
            "console": {"class": "logging.StreamHandler", "formatter": "standard",
                        "level": console_level},
        },
        "root": {"level": root_level, "handlers": ["queue", "console"]},
        "_file_settings": {
            "filename": log_file,
            "maxBytes": 1024 * 1024 * 5,
            "backupCount": int(os.getenv("SKYNAV_LOG_BACKUP_COUNT", 5)),
            "encoding": "utf-8",
            "format": LOG_FORMAT,
            "datefmt": DATE_FORMAT,
        },
    }


class LogSystem:
    """Thin wrapper that owns the QueueListener writing the log file."""
    def __init__(self, app_name: str, level: int | str | None = None,
                 console_level: int | str = logging.INFO):
        cfg = build_config(app_name, level, console_level)
        file_settings = cfg.pop("_file_settings")
        logging.config.dictConfig(cfg)

        root_logger = logging.getLogger()
        qh: QueueHandler | None = None
        self._console_handler: logging.Handler | None = None
        for h in root_logger.handlers:
            if qh is None and isinstance(h, QueueHandler):
                qh = h
            elif self._console_handler is None and isinstance(h, logging.StreamHandler):
                self._console_handler = h
        if qh is None:
            raise RuntimeError("QueueHandler not found.")

        self.log_file = Path(file_settings["filename"])
        self._file_handler = RotatingFileHandler(
            file_settings["filename"],
            maxBytes=file_settings["maxBytes"],
            backupCount=file_settings["backupCount"],
            encoding=file_settings["encoding"],
        )
        self._file_handler.setFormatter(
            logging.Formatter(file_settings["format"], file_settings["datefmt"]))

        self.listener = QueueListener(qh.queue, self._file_handler, respect_handler_level=True)
        self.listener.start()
        self._running = True

    @classmethod
    def from_levels(cls, app_name: str, root_level: int, console_level: int) -> LogSystem:
        return cls(app_name, level=root_level, console_level=console_level)

    def apply_levels(self, root_level: int, console_level: int | None = None,
                     file_level: int | None = None) -> None:
        """Change levels after startup."""
        logging.getLogger().setLevel(root_level)
        if self._console_handler is not None and console_level is not None:
            self._console_handler.setLevel(console_level)
        if file_level is not None:
            self._file_handler.setLevel(file_level)

    def stop(self):
        """Flush queued records and close the file. Safe to call twice."""
        if self._running:
            self.listener.stop()
            self._running = False
        self._file_handler.close()


def apply_logging_policy(logs: LogSystem, settings: AppSettingsManager) -> None:
    """Pick log levels from the run mode and the configured level."""
    configured = level_from_name(settings.logging_level)
    if settings.run_mode in (RunMode.DEVELOPMENT, RunMode.VERBOSE):
        logs.apply_levels(root_level=logging.DEBUG, console_level=logging.DEBUG,
                          file_level=logging.DEBUG)
    else:
        logs.apply_levels(root_level=logging.DEBUG, console_level=configured,
                          file_level=min(configured, logging.INFO))


def install_excepthook() -> None:
    """Log uncaught exceptions instead of only printing them."""
    def _excepthook(exc_type, exc, tb):
        logging.critical(
            "Uncaught exception: \n%s",
            "".join(traceback.format_exception(exc_type, exc, tb)),
        )

    sys.excepthook = _excepthook


def install_qt_message_handler():
    from PySide6.QtCore import QtMsgType, qInstallMessageHandler

    qt_logger = logging.getLogger("Qt")
    levels = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }

    def handler(msg_type, context, message):
        qt_logger.log(levels.get(msg_type, logging.ERROR), message)

    qInstallMessageHandler(handler)
    qt_logger.info("Qt message handler installed.")
