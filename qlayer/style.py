# qlayer/style.py
"""
Inline styles and class names for live widgets.

Qt has no notion of CSS classes, so class names are kept in the
``cssClass`` dynamic property as a space separated list. Style sheets can
target them with ``[cssClass~="name"]``.
"""
import itertools
from typing import List

from PySide6.QtWidgets import QWidget

CLASS_PROPERTY = "cssClass"
STYLE_PROPERTY = "qlayerStyle"

_style_ids = itertools.count(1)


def _repolish(widget: QWidget) -> None:
    style = widget.style()
    style.unpolish(widget)
    style.polish(widget)
    widget.update()


def set_style(widget: QWidget, css: str) -> None:
    """
    Applies `css` declarations to `widget`.

    The declarations are wrapped in a rule matching this widget and none of
    its descendants, and appended to the widget's own sheet, so a later
    call overrides an earlier one.
    """
    tag = widget.property(STYLE_PROPERTY)
    if not tag:
        tag = str(next(_style_ids))
        widget.setProperty(STYLE_PROPERTY, tag)
    rule = f'*[{STYLE_PROPERTY}="{tag}"] {{ {css} }}'
    current = widget.styleSheet()
    widget.setStyleSheet(f"{current}\n{rule}" if current else rule)


def class_names(widget: QWidget) -> List[str]:
    value = widget.property(CLASS_PROPERTY)
    if not value:
        return []
    return str(value).split()


def toggle_class_name(widget: QWidget, class_name: str, present: bool = True) -> None:
    names = class_names(widget)
    if present == (class_name in names):
        return

    if present:
        names.append(class_name)
    else:
        names = [n for n in names if n != class_name]

    widget.setProperty(CLASS_PROPERTY, " ".join(names))
    _repolish(widget)


def add_class_names(widget: QWidget, class_name: str) -> None:
    for name in class_name.split():
        toggle_class_name(widget, name, True)


class Styled:
    """
    Pairs a live widget with the style helpers, so callers can restyle it
    after construction without touching the widget's own attributes.
    """

    def __init__(self, widget: QWidget):
        self.widget = widget

    def set_style(self, css: str) -> None:
        set_style(self.widget, css)

    def toggle_class_name(self, class_name: str, present: bool = True) -> None:
        toggle_class_name(self.widget, class_name, present)

    @property
    def class_names(self) -> List[str]:
        return class_names(self.widget)

    def __repr__(self):
        return f"Styled({type(self.widget).__name__})"


def styled(widget: QWidget) -> Styled:
    return Styled(widget)
