"""
Logging Configuration
=====================
Console (and optional file) output for the 'clockpair' logger namespace.

Qt's own diagnostics (qDebug/qWarning from widgets, timers, QSettings) are
forwarded into the same handlers under 'clockpair.qt', so one log file
holds both sides of a session.

Environment:
    CLOCKPAIR_DEBUG: Any non-empty value makes DEBUG the default level.
    CLOCKPAIR_LOG_FILE: Path of a log file written next to the console output.
"""
import logging
import os
import sys
from typing import Optional

from PySide6.QtCore import QMessageLogContext, QtMsgType, qInstallMessageHandler

LOGGER_NAME = "clockpair"
DEBUG_ENV = "CLOCKPAIR_DEBUG"
LOG_FILE_ENV = "CLOCKPAIR_LOG_FILE"

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}

qt_logger = logging.getLogger(f"{LOGGER_NAME}.qt")


def level_from_env(default: int = logging.INFO) -> int:
    return logging.DEBUG if os.environ.get(DEBUG_ENV) else default


def qt_message_handler(mode: QtMsgType, context: QMessageLogContext, message: str) -> None:
    """Qt message handler that re-emits through the 'clockpair.qt' logger."""
    category = getattr(context, "category", None) or "default"
    qt_logger.log(_QT_LEVELS.get(mode, logging.WARNING), f"[{category}] {message}")


def setup_logging(
    level: Optional[int] = None,
    log_file: Optional[str] = None,
    capture_qt: bool = True,
) -> logging.Logger:
    """
    Configure the 'clockpair' logger. Safe to call more than once.

    Args:
        level: Logging level. Defaults to DEBUG when CLOCKPAIR_DEBUG is set, else INFO.
        log_file: Extra file output. Defaults to CLOCKPAIR_LOG_FILE when set.
        capture_qt: Install the Qt message handler.
    """
    if level is None:
        level = level_from_env()
    if log_file is None:
        log_file = os.environ.get(LOG_FILE_ENV) or None

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if capture_qt:
        qInstallMessageHandler(qt_message_handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)} (file: {log_file or 'none'}).")
    return logger
