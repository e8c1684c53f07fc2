# qlayer/widget.py
"""
The widget construction engine.

`build` accepts any descriptor and always returns a QWidget:

    build("hello")                          # plain text label
    build(lambda: QPushButton("raw"))       # factory, used as is
    build(existing_widget)                  # passed through
    build({"type": "box", "children": ["a", "b"], "className": "bar"})

Structured descriptors are split into engine options (`WidgetProps`), event
slots (`EventListeners`) and the options of the widget type itself, which
go to the constructor registered under `type`.
"""
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QWidget

from .events import parse_event_listeners, split_listeners
from .props import apply_props, run_setup, split_props
from .style import toggle_class_name
from .utils import error, restcheck

Constructor = Callable[..., QWidget]


class WidgetRegistry:
    """
    Maps widget type names to constructor functions.

    Constructors are called with ``type=<name>`` plus the descriptor's own
    options as keyword arguments and must return a QWidget.
    """

    def __init__(self):
        self._constructors: Dict[str, Constructor] = {}

    def register(self, key: str, constructor: Optional[Constructor] = None, *, replace: bool = False):
        """
        Registers `constructor` under `key`. Usable as a decorator.

        :raises ValueError: for an empty key, a non callable constructor or
                            a key that is taken (unless `replace` is set).
        """
        if constructor is None:
            return lambda fn: self.register(key, fn, replace=replace)

        if not isinstance(key, str) or not key:
            raise ValueError(f"widget type name has to be a non-empty string, got {key!r}")
        if not callable(constructor):
            raise ValueError(f"constructor for {key!r} is not callable")
        if key in self._constructors and not replace:
            raise ValueError(f"widget type {key!r} is already registered")

        self._constructors[key] = constructor
        return constructor

    def unregister(self, key: str) -> Optional[Constructor]:
        return self._constructors.pop(key, None)

    def get(self, key: str) -> Optional[Constructor]:
        return self._constructors.get(key)

    def keys(self):
        return sorted(self._constructors)

    def __contains__(self, key: Any) -> bool:
        return isinstance(key, str) and key in self._constructors

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._constructors)


registry = WidgetRegistry()


def text(label: str) -> QLabel:
    widget = QLabel(label)
    widget.setTextFormat(Qt.TextFormat.PlainText)
    return widget


def placeholder(message: str) -> QLabel:
    """A visible stand-in for a subtree that could not be built."""
    widget = text(message)
    toggle_class_name(widget, "error")
    return widget


def _describe(type_: Any) -> str:
    if isinstance(type_, str):
        return type_
    return getattr(type_, "__name__", repr(type_))


def _invoke(fn: Callable[..., Any], context: str, kwargs: Optional[dict] = None) -> Optional[QWidget]:
    try:
        result = fn(**(kwargs or {}))
    except Exception as e:
        error(f"{context}: construction failed: {e!r}")
        return None
    if not isinstance(result, QWidget):
        error(f"{context}: constructor returned {type(result).__name__}, not a widget")
        return None
    return result


def _build_structured(descriptor: Mapping) -> QWidget:
    bag = dict(descriptor)
    type_ = bag.pop("type", None)
    props = split_props(bag)
    listeners = split_listeners(bag)
    context = _describe(type_)

    if isinstance(type_, str) and type_ in registry:
        widget = _invoke(registry.get(type_), context, dict(bag, type=type_))
    elif callable(type_):
        restcheck(bag, context)
        widget = _invoke(type_, context)
    else:
        error(f'There is no widget with type "{context}"')
        return placeholder(f"{context} doesn't exist")

    if widget is None:
        return placeholder(f"{context} failed to build")

    apply_props(widget, props, context)
    parse_event_listeners(widget, listeners)
    run_setup(widget, props.setup, context)
    return widget


def build(descriptor: Any) -> QWidget:
    """
    Resolves a descriptor into a live widget.

    Never raises: a descriptor that cannot be built is reported and replaced
    by a placeholder label so the rest of the tree still renders.
    """
    if isinstance(descriptor, QWidget):
        return descriptor

    if not descriptor:
        error("Widget from null/undefined")
        return placeholder(f'error widget from: "{descriptor}"')

    if isinstance(descriptor, str):
        return text(descriptor)

    if isinstance(descriptor, Mapping):
        return _build_structured(descriptor)

    if callable(descriptor):
        widget = _invoke(descriptor, _describe(descriptor))
        return widget if widget is not None else placeholder(f"{_describe(descriptor)} failed to build")

    error(f"can not build a widget from {type(descriptor).__name__}")
    return placeholder(f'error widget from: "{descriptor!r}"')


Widget = build
