# qlayer/layout.py
"""
Alignment, expansion and orientation helpers.

In Qt a child's alignment and stretch live on the parent layout, not on the
widget. The widget remembers its requested `halign` / `valign` as dynamic
properties and containers read them back in `add_child`.
"""
from functools import reduce
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QBoxLayout, QLayout, QSizePolicy, QWidget

from .utils import warning

_NO_ALIGN = Qt.AlignmentFlag(0)

HALIGN = {
    "start": Qt.AlignmentFlag.AlignLeft,
    "center": Qt.AlignmentFlag.AlignHCenter,
    "end": Qt.AlignmentFlag.AlignRight,
    "fill": _NO_ALIGN,
}

VALIGN = {
    "start": Qt.AlignmentFlag.AlignTop,
    "center": Qt.AlignmentFlag.AlignVCenter,
    "end": Qt.AlignmentFlag.AlignBottom,
    "fill": _NO_ALIGN,
}

ORIENTATION = {
    "h": Qt.Orientation.Horizontal,
    "horizontal": Qt.Orientation.Horizontal,
    "v": Qt.Orientation.Vertical,
    "vertical": Qt.Orientation.Vertical,
}

_HORIZONTAL_DIRECTIONS = (QBoxLayout.Direction.LeftToRight, QBoxLayout.Direction.RightToLeft)


def orientation(value: str, context: str = "widget") -> Qt.Orientation:
    """Resolves 'h', 'v', 'horizontal' or 'vertical'; defaults to horizontal."""
    if isinstance(value, str) and value.lower() in ORIENTATION:
        return ORIENTATION[value.lower()]
    warning(f'{context}: wrong orientation value "{value}"')
    return Qt.Orientation.Horizontal


def box_direction(value: Qt.Orientation) -> QBoxLayout.Direction:
    if value == Qt.Orientation.Vertical:
        return QBoxLayout.Direction.TopToBottom
    return QBoxLayout.Direction.LeftToRight


def set_align(widget: QWidget, halign: Optional[str] = None, valign: Optional[str] = None,
              context: str = "widget") -> None:
    """
    Records the requested alignment, reporting unknown tokens.

    An unknown token leaves the widget's previous alignment in place.
    """
    for prop, value, table in (("halign", halign, HALIGN), ("valign", valign, VALIGN)):
        if value is None:
            continue
        if isinstance(value, str) and value.lower() in table:
            widget.setProperty(prop, value.lower())
        else:
            warning(f'{context}: wrong {prop} value "{value}"')
    _refresh_in_parent(widget)


def alignment_of(widget: QWidget) -> Qt.AlignmentFlag:
    h = HALIGN.get(widget.property("halign") or "fill", _NO_ALIGN)
    v = VALIGN.get(widget.property("valign") or "fill", _NO_ALIGN)
    return reduce(lambda a, b: a | b, (h, v), _NO_ALIGN)


def set_expand(widget: QWidget, hexpand: Optional[bool] = None, vexpand: Optional[bool] = None) -> None:
    policy = widget.sizePolicy()
    if hexpand is not None:
        policy.setHorizontalPolicy(QSizePolicy.Policy.Expanding if hexpand else QSizePolicy.Policy.Preferred)
        widget.setProperty("hexpand", bool(hexpand))
    if vexpand is not None:
        policy.setVerticalPolicy(QSizePolicy.Policy.Expanding if vexpand else QSizePolicy.Policy.Preferred)
        widget.setProperty("vexpand", bool(vexpand))
    widget.setSizePolicy(policy)
    _refresh_in_parent(widget)


def _stretch_in(layout: QBoxLayout, widget: QWidget) -> int:
    prop = "hexpand" if layout.direction() in _HORIZONTAL_DIRECTIONS else "vexpand"
    return 1 if widget.property(prop) else 0


def add_child(layout: QLayout, widget: QWidget) -> None:
    """Appends `widget` to `layout` honouring its alignment and expansion."""
    if isinstance(layout, QBoxLayout):
        layout.addWidget(widget, _stretch_in(layout, widget), alignment_of(widget))
    else:
        layout.addWidget(widget)
        layout.setAlignment(widget, alignment_of(widget))


def _refresh_in_parent(widget: QWidget) -> None:
    parent = widget.parentWidget()
    layout = parent.layout() if parent is not None else None
    if layout is None or layout.indexOf(widget) < 0:
        return
    layout.setAlignment(widget, alignment_of(widget))
    if isinstance(layout, QBoxLayout):
        layout.setStretchFactor(widget, _stretch_in(layout, widget))
