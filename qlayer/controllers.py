# qlayer/controllers.py
"""
Input controllers.

A controller is a QObject child of the widget it serves, installed as that
widget's event filter. It turns raw Qt events into a handful of named
signals and runs the handlers connected to them in order. A handler that
returns literal ``False`` stops the remaining handlers and consumes the Qt
event; any other return value lets it continue.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtWidgets import QWidget

Handler = Callable[..., Any]
Translated = Optional[Tuple[str, tuple]]

C = TypeVar("C", bound="Controller")


class Controller(QObject):
    signals: Tuple[str, ...] = ()

    def __init__(self, widget: QWidget):
        super().__init__(widget)
        self._widget = widget
        self._handlers: Dict[str, List[Handler]] = {name: [] for name in self.signals}
        self.prepare(widget)
        widget.installEventFilter(self)

    @property
    def widget(self) -> QWidget:
        return self._widget

    def prepare(self, widget: QWidget) -> None:
        """Hook for controllers that need the widget configured first."""

    def add_handler(self, signal: str, handler: Handler) -> None:
        if signal not in self._handlers:
            raise ValueError(f"{type(self).__name__} has no signal {signal!r}")
        self._handlers[signal].append(handler)

    def handlers(self, signal: str) -> Tuple[Handler, ...]:
        return tuple(self._handlers.get(signal, ()))

    def dispatch(self, signal: str, *args) -> bool:
        """
        Runs the handlers of `signal`.

        :return: True if a handler stopped propagation.
        """
        for handler in list(self._handlers.get(signal, ())):
            if handler(*args) is False:
                return True
        return False

    def translate(self, event: QEvent) -> Translated:
        return None

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        translated = self.translate(event)
        if translated is not None:
            signal, args = translated
            if self._handlers.get(signal) and self.dispatch(signal, *args):
                return True
        return super().eventFilter(watched, event)


class FocusController(Controller):
    signals = ("enter", "leave")

    def prepare(self, widget):
        if widget.focusPolicy() == Qt.FocusPolicy.NoFocus:
            widget.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    def translate(self, event):
        if event.type() == QEvent.Type.FocusIn:
            return "enter", ()
        if event.type() == QEvent.Type.FocusOut:
            return "leave", ()
        return None


class KeyController(Controller):
    signals = ("key-pressed", "key-released")

    def prepare(self, widget):
        if widget.focusPolicy() == Qt.FocusPolicy.NoFocus:
            widget.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    def translate(self, event):
        kind = event.type()
        if kind not in (QEvent.Type.KeyPress, QEvent.Type.KeyRelease):
            return None
        name = "key-pressed" if kind == QEvent.Type.KeyPress else "key-released"
        return name, (event.key(), event.nativeScanCode(), event.modifiers())


class MotionController(Controller):
    signals = ("motion", "enter", "leave")

    def prepare(self, widget):
        widget.setMouseTracking(True)

    def translate(self, event):
        kind = event.type()
        if kind == QEvent.Type.MouseMove:
            pos = event.position()
            return "motion", (pos.x(), pos.y())
        if kind == QEvent.Type.Enter:
            pos = event.position()
            return "enter", (pos.x(), pos.y())
        if kind == QEvent.Type.Leave:
            return "leave", ()
        return None


# One wheel notch is reported by Qt as 120 eighths of a degree.
WHEEL_STEP = 120.0


class ScrollController(Controller):
    """Reports wheel deltas in notches, negative meaning up or left."""

    signals = ("scroll",)

    def translate(self, event):
        if event.type() != QEvent.Type.Wheel:
            return None
        delta = event.angleDelta()
        if delta.isNull():
            return None
        return "scroll", (-delta.x() / WHEEL_STEP, -delta.y() / WHEEL_STEP)


BUTTONS = {
    Qt.MouseButton.LeftButton: 1,
    Qt.MouseButton.MiddleButton: 2,
    Qt.MouseButton.RightButton: 3,
    Qt.MouseButton.BackButton: 8,
    Qt.MouseButton.ForwardButton: 9,
}


def button_index(button: Qt.MouseButton) -> int:
    return BUTTONS.get(button, 0)


class ButtonController(Controller):
    signals = ("pressed", "released")

    def translate(self, event):
        kind = event.type()
        if kind in (QEvent.Type.MouseButtonPress, QEvent.Type.MouseButtonDblClick):
            return "pressed", (button_index(event.button()),)
        if kind == QEvent.Type.MouseButtonRelease:
            return "released", (button_index(event.button()),)
        return None


def controllers_of(widget: QWidget, cls: Type[C] = Controller) -> List[C]:
    """Controllers attached directly to `widget`, in attachment order."""
    return [child for child in widget.children() if isinstance(child, cls)]


def attach_controller(widget: QWidget, cls: Type[C]) -> C:
    """Returns the widget's controller of type `cls`, creating it on first use."""
    for child in widget.children():
        if type(child) is cls:
            return child
    return cls(widget)
