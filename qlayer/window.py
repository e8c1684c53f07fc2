# qlayer/window.py
"""
Top-level layer surfaces.

    Window(
        name="bar",
        anchor="top left right",
        margin=[4, 8],
        exclusive=True,
        child={"type": "box", "children": ["left", "right"]},
    )
"""
from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QDialog, QVBoxLayout, QWidget

from .layershell import Edge, KeyboardMode, Layer, LayerSurface
from .layout import add_child
from .props import run_setup
from .style import add_class_names, set_style
from .utils import restcheck, typecheck, warning
from .widget import build

Number = Union[int, float]

DEFAULT_NAME = "qlayer"

_MARGIN_INDEX = {
    1: (0, 0, 0, 0),
    2: (0, 1, 0, 1),
    3: (0, 1, 2, 1),
    4: (0, 1, 2, 3),
}


def expand_margin(margin: Any) -> Dict[Edge, Number]:
    """
    Expands a CSS style margin shorthand into per-edge values.

    A number, or a sequence of 1 to 4 numbers ordered top, right, bottom,
    left. Any other length yields no margins at all.
    """
    if isinstance(margin, (int, float)) and not isinstance(margin, bool):
        margin = [margin]
    if not isinstance(margin, (list, tuple)) or len(margin) not in _MARGIN_INDEX:
        return {}

    edges = (Edge.TOP, Edge.RIGHT, Edge.BOTTOM, Edge.LEFT)
    return {edge: margin[i] for edge, i in zip(edges, _MARGIN_INDEX[len(margin)])}


def parse_anchor(anchor: str, context: str = "window"):
    """Yields the recognized edges of a space separated anchor string."""
    for side in anchor.split():
        try:
            yield Edge(side.lower())
        except ValueError:
            warning(f'{context}: wrong anchor value "{side}"')


def parse_layer(layer: Any, context: str = "window") -> Optional[Layer]:
    try:
        return Layer(layer.lower())
    except (AttributeError, ValueError):
        warning(f'{context}: wrong layer value "{layer}"')
        return None


def set_child(window: QWidget, child: QWidget) -> None:
    layout = window.layout()
    if layout is None:
        layout = QVBoxLayout(window)
        layout.setContentsMargins(0, 0, 0, 0)
    while layout.count():
        old = layout.takeAt(0).widget()
        if old is not None:
            old.setParent(None)
    add_child(layout, child)


def Window(name=DEFAULT_NAME, anchor="", margin=(), layer="top", exclusive=False, focusable=False,
           child=None, className="", style="", monitor=None, visible=True, dialog=False,
           setup=None, **rest) -> QWidget:
    """
    Builds and configures a layer surface window.

    Every step reports its own problems and the remaining steps still run.
    """
    typecheck("name", name, "string", "window")
    typecheck("anchor", anchor, "string", "window")
    typecheck("margin", margin, ["number", "array"], "window")
    typecheck("layer", layer, "string", "window")
    typecheck("exclusive", exclusive, "boolean", "window")
    typecheck("focusable", focusable, "boolean", "window")
    typecheck("className", className, "string", "window")
    typecheck("style", style, "string", "window")
    typecheck("monitor", monitor, ["number", "undefined"], "window")
    typecheck("visible", visible, "boolean", "window")
    typecheck("dialog", dialog, "boolean", "window")
    typecheck("setup", setup, ["function", "undefined"], "window")
    restcheck(rest, f"window: {name}")

    context = f"window: {name}"
    win = QDialog() if dialog is True else QWidget()
    if isinstance(name, str):
        win.setObjectName(name)
    win.resize(1, 1)

    surface = LayerSurface.init_for_window(win)
    surface.set_namespace(name if isinstance(name, str) else DEFAULT_NAME)

    if isinstance(anchor, str):
        for edge in parse_anchor(anchor, context):
            surface.set_anchor(edge, True)

    for edge, value in expand_margin(margin).items():
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            surface.set_margin(edge, int(value))
        else:
            warning(f"{context}: margin values have to be numbers, got {value!r}")

    resolved = parse_layer(layer, context)
    if resolved is not None:
        surface.set_layer(resolved)

    if exclusive is True:
        surface.auto_exclusive_zone_enable()

    if isinstance(monitor, (int, float)) and not isinstance(monitor, bool):
        screens = QGuiApplication.screens()
        if monitor == int(monitor) and 0 <= monitor < len(screens):
            surface.set_monitor(screens[int(monitor)])
        else:
            warning(f"{context}: could not find monitor with id {monitor}")

    if isinstance(className, str):
        add_class_names(win, className)

    if isinstance(style, str) and style:
        set_style(win, style)

    if child:
        set_child(win, build(child))

    surface.set_keyboard_mode(KeyboardMode.ON_DEMAND if focusable is True else KeyboardMode.NONE)

    if visible is False:
        win.setVisible(False)
    else:
        win.show()

    run_setup(win, setup, context)
    return win


def build_window(descriptor: Any) -> Optional[QWidget]:
    """`Window` for descriptors held as mappings (e.g. loaded from config)."""
    if isinstance(descriptor, QWidget):
        return descriptor
    if not isinstance(descriptor, Mapping):
        warning(f"window descriptor has to be a mapping, got {type(descriptor).__name__}")
        return None
    options = {str(key): value for key, value in descriptor.items()}
    return Window(**options)
