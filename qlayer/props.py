# qlayer/props.py
"""
Properties shared by every structured widget descriptor.
"""
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Callable, Optional, Sequence

from PySide6.QtWidgets import QWidget

from .layout import set_align, set_expand
from .style import add_class_names, set_style
from .utils import error, interval, typecheck, warning


@dataclass
class WidgetProps:
    """
    The engine-level options of a descriptor, with their defaults.

    Anything that is not a field here (or an event slot) belongs to the
    widget type's own constructor.
    """
    className: Optional[str] = None
    style: Optional[str] = None
    halign: Optional[str] = None
    valign: Optional[str] = None
    hexpand: Optional[bool] = None
    vexpand: Optional[bool] = None
    sensitive: Optional[bool] = None
    tooltip: Optional[str] = None
    visible: bool = True
    name: Optional[str] = None
    properties: Any = None
    connections: Optional[Sequence] = None
    setup: Optional[Callable[[QWidget], Any]] = None

    @classmethod
    def names(cls):
        return tuple(f.name for f in fields(cls))


def split_props(bag: dict) -> WidgetProps:
    """Pops the engine-level options out of `bag` (a private copy)."""
    found = {name: bag.pop(name) for name in WidgetProps.names() if name in bag}
    return WidgetProps(**found)


def _check(props: WidgetProps, context: str) -> None:
    typecheck("className", props.className, ["string", "undefined"], context)
    typecheck("style", props.style, ["string", "undefined"], context)
    typecheck("halign", props.halign, ["string", "undefined"], context)
    typecheck("valign", props.valign, ["string", "undefined"], context)
    typecheck("hexpand", props.hexpand, ["boolean", "undefined"], context)
    typecheck("vexpand", props.vexpand, ["boolean", "undefined"], context)
    typecheck("sensitive", props.sensitive, ["boolean", "undefined"], context)
    typecheck("tooltip", props.tooltip, ["string", "undefined"], context)
    typecheck("visible", props.visible, "boolean", context)
    typecheck("name", props.name, ["string", "undefined"], context)
    typecheck("properties", props.properties, ["array", "object", "undefined"], context)
    typecheck("connections", props.connections, ["array", "undefined"], context)
    typecheck("setup", props.setup, ["function", "undefined"], context)


def _store_properties(widget: QWidget, properties: Any, context: str) -> None:
    pairs = properties.items() if isinstance(properties, Mapping) else properties
    for pair in pairs:
        try:
            key, value = pair
        except (TypeError, ValueError):
            warning(f"{context}: properties entries have to be [key, value] pairs, got {pair!r}")
            continue
        setattr(widget, f"_{key}", value)


def connect_signal(widget: QWidget, signal: str, callback: Callable, context: str = "widget") -> bool:
    """Connects `callback(widget, *args)` to the Qt signal called `signal`."""
    bound = getattr(widget, signal, None)
    if bound is None or not hasattr(bound, "connect"):
        warning(f'{context}: there is no signal "{signal}"')
        return False
    bound.connect(lambda *args: callback(widget, *args))
    return True


def _connect(widget: QWidget, connection: Any, context: str) -> None:
    if not isinstance(connection, (list, tuple)) or len(connection) < 2:
        warning(f"{context}: connections have to be [source, callback, event?], got {connection!r}")
        return

    source, callback = connection[0], connection[1]
    event = connection[2] if len(connection) > 2 else None

    if not callable(callback):
        warning(f"{context}: connection callback has to be a function")
        return

    if isinstance(source, str):
        connect_signal(widget, source, callback, context)

    elif isinstance(source, (int, float)) and not isinstance(source, bool):
        interval(source, lambda: callback(widget), widget)

    else:
        service = getattr(source, "instance", source)
        connect_widget = getattr(service, "connect_widget", None)
        if not callable(connect_widget):
            warning(f"{context}: {source!r} is not a signal name, interval or service")
            return
        connect_widget(widget, callback, event)


def apply_props(widget: QWidget, props: WidgetProps, context: str) -> None:
    """Applies everything except `setup`, see `run_setup`."""
    _check(props, context)

    if isinstance(props.name, str):
        widget.setObjectName(props.name)

    if isinstance(props.className, str):
        add_class_names(widget, props.className)

    halign = props.halign if isinstance(props.halign, str) else None
    valign = props.valign if isinstance(props.valign, str) else None
    if halign or valign:
        set_align(widget, halign, valign, context)

    hexpand = props.hexpand if isinstance(props.hexpand, bool) else None
    vexpand = props.vexpand if isinstance(props.vexpand, bool) else None
    if hexpand is not None or vexpand is not None:
        set_expand(widget, hexpand, vexpand)

    if isinstance(props.sensitive, bool):
        widget.setEnabled(props.sensitive)

    if isinstance(props.tooltip, str):
        widget.setToolTip(props.tooltip)

    if isinstance(props.style, str):
        set_style(widget, props.style)

    # children are shown together with their parent; only hiding is explicit
    if props.visible is False:
        widget.setVisible(False)
    elif widget.parentWidget() is not None:
        widget.setVisible(True)

    if props.properties:
        _store_properties(widget, props.properties, context)

    if isinstance(props.connections, (list, tuple)):
        for connection in props.connections:
            _connect(widget, connection, context)


def run_setup(widget: QWidget, setup: Any, context: str) -> None:
    """Calls the descriptor's `setup` hook, the last step of construction."""
    if not callable(setup):
        return
    try:
        setup(widget)
    except Exception as e:
        error(f"{context}: setup failed: {e!r}")
