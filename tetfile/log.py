"""
tetfile.log - module-level logging facade for the tetfile package.

Usage:
    from tetfile import log

    log.info("Loaded mesh")
    log.warn("3 degenerate faces")

    try:
        mesh.update()
    except Exception as e:
        log.error(e, "Failed to update mesh")  # includes traceback

Every function accepts either a message or an exception. Records go to the
standard "tetfile" logger; set_callback() additionally routes them to a
function, e.g. an editor console.
"""

import logging
import traceback
from enum import IntEnum
from typing import Callable, Optional

_logger = logging.getLogger("tetfile")


class Level(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR


def _format(msg_or_exc, context: str) -> str:
    if not isinstance(msg_or_exc, BaseException):
        return str(msg_or_exc)

    exc = msg_or_exc
    head = f"{type(exc).__name__}: {exc}"
    if context:
        head = f"{context}: {head}"
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return f"{head}\n{tb}"


def _emit(level: Level, msg_or_exc, context: str) -> None:
    if _logger.isEnabledFor(level):
        _logger.log(level, _format(msg_or_exc, context))


def debug(msg_or_exc, context: str = ""):
    _emit(Level.DEBUG, msg_or_exc, context)


def info(msg_or_exc, context: str = ""):
    _emit(Level.INFO, msg_or_exc, context)


def warn(msg_or_exc, context: str = ""):
    _emit(Level.WARN, msg_or_exc, context)


warning = warn


def error(msg_or_exc, context: str = ""):
    _emit(Level.ERROR, msg_or_exc, context)


def exception(msg: str = ""):
    """Log error with the exception currently being handled."""
    _logger.exception(msg)


def set_level(level) -> None:
    """Set minimum level for the tetfile logger (Level, int or name)."""
    if isinstance(level, str):
        name, level = level, logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")
    _logger.setLevel(int(level))


class _CallbackHandler(logging.Handler):
    def __init__(self, callback: Callable[[Level, str], None]):
        super().__init__()
        self.callback = callback

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno >= logging.ERROR:
            level = Level.ERROR
        elif record.levelno >= logging.WARNING:
            level = Level.WARN
        elif record.levelno >= logging.INFO:
            level = Level.INFO
        else:
            level = Level.DEBUG
        self.callback(level, self.format(record))


_callback_handler: Optional[_CallbackHandler] = None


def set_callback(callback: Optional[Callable[[Level, str], None]]) -> None:
    """Route records to callback(level, message); None removes it."""
    global _callback_handler
    if _callback_handler is not None:
        _logger.removeHandler(_callback_handler)
        _callback_handler = None
    if callback is not None:
        _callback_handler = _CallbackHandler(callback)
        _logger.addHandler(_callback_handler)
