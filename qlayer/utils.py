# qlayer/utils.py
"""
Small shared primitives: diagnostics, runtime type checks and the
periodic-timer helper used by widget connections.

Nothing in here raises on bad user input. Problems are reported through
`warning` / `error` and the caller carries on with whatever it was given.
"""
import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Union

from PySide6.QtCore import QObject, QTimer
from PySide6.QtWidgets import QWidget

logger = logging.getLogger("qlayer")

_LOG_FORMAT = "[qlayer] %(levelname)s: %(message)s"


def setup_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Attach a stream handler to the `qlayer` logger (only once)."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    if not any(getattr(h, "_qlayer", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._qlayer = True
        logger.addHandler(handler)

    logger.setLevel(level)


def warning(message: str) -> None:
    logger.warning(message)


def error(message: str) -> None:
    logger.error(message)


# --- Runtime kinds ---

def kind_of(value: Any) -> str:
    """
    Returns the semantic kind of a value, as used by `typecheck`.

    :param value: Anything found in a descriptor.
    :return: One of 'undefined', 'boolean', 'number', 'string', 'array',
             'object', 'widget', 'function' or the Python type name.
    """
    if value is None:
        return "undefined"
    # bool is a subclass of int, test it first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, QWidget):
        return "widget"
    if callable(value):
        return "function"
    return type(value).__name__


def typecheck(name: str, value: Any, kinds: Union[str, Iterable[str]], context: str) -> bool:
    """
    Reports a warning if `value` is not one of the expected kinds.

    :param name: The option name, used in the message.
    :param value: The value to check.
    :param kinds: One kind or an iterable of kinds (see `kind_of`).
    :param context: The owning widget or window type.
    :return: True when the value matched.
    """
    expected = (kinds,) if isinstance(kinds, str) else tuple(kinds)
    actual = kind_of(value)
    if actual in expected:
        return True

    warning(f'{context}: "{name}" has to be {" or ".join(expected)}, got {actual}')
    return False


def restcheck(rest: Mapping, context: str) -> int:
    """Warns once per key left over after all known options were taken out."""
    for key in rest:
        warning(f'{context} has no property "{key}"')
    return len(rest)


# --- Timers ---

def interval(period: Union[int, float], callback: Callable[[], Any], scope: QObject) -> QTimer:
    """
    Runs `callback` now and then every `period` milliseconds.

    The timer is a child of `scope`, so destroying `scope` stops it.
    """
    timer = QTimer(scope)
    timer.setInterval(max(0, int(period)))

    def tick():
        try:
            callback()
        except Exception as e:
            error(f"interval callback failed: {e!r}")

    timer.timeout.connect(tick)
    tick()
    timer.start()
    return timer
