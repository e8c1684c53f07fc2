# qlayer/layershell.py
"""
Layer-shell style placement for top-level Qt windows.

A `LayerSurface` is attached to a frameless top-level widget. It keeps the
anchor edges, per-edge margins, stacking layer, exclusive zone, target
monitor and keyboard mode of the surface, and positions the window on its
screen from them every time the window is shown or resized.
"""
from enum import Enum
from typing import Dict, Iterable, Optional, Set

from PySide6.QtCore import QEvent, QObject, QRect, QSize, Qt
from PySide6.QtGui import QGuiApplication, QScreen
from PySide6.QtWidgets import QWidget


class Edge(Enum):
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


class Layer(Enum):
    BACKGROUND = "background"
    BOTTOM = "bottom"
    TOP = "top"
    OVERLAY = "overlay"


class KeyboardMode(Enum):
    NONE = "none"
    EXCLUSIVE = "exclusive"
    ON_DEMAND = "on_demand"


def compute_geometry(area: QRect, size: QSize, anchors: Iterable[Edge], margins: Dict[Edge, int]) -> QRect:
    """
    Places a surface of `size` inside `area`.

    Anchoring two opposite edges stretches the surface between them; a
    single edge pins it there; no edge on an axis centers it on that axis.
    """
    anchors = set(anchors)
    top, right = margins.get(Edge.TOP, 0), margins.get(Edge.RIGHT, 0)
    bottom, left = margins.get(Edge.BOTTOM, 0), margins.get(Edge.LEFT, 0)

    width = size.width()
    if Edge.LEFT in anchors and Edge.RIGHT in anchors:
        x = area.x() + left
        width = area.width() - left - right
    elif Edge.LEFT in anchors:
        x = area.x() + left
    elif Edge.RIGHT in anchors:
        x = area.x() + area.width() - width - right
    else:
        x = area.x() + (area.width() - width) // 2

    height = size.height()
    if Edge.TOP in anchors and Edge.BOTTOM in anchors:
        y = area.y() + top
        height = area.height() - top - bottom
    elif Edge.TOP in anchors:
        y = area.y() + top
    elif Edge.BOTTOM in anchors:
        y = area.y() + area.height() - height - bottom
    else:
        y = area.y() + (area.height() - height) // 2

    return QRect(x, y, max(width, 0), max(height, 0))


def exclusive_edge(anchors: Iterable[Edge]) -> Optional[Edge]:
    """
    The edge an exclusive zone applies to: the only anchored edge, or the
    edge anchored together with both of its neighbours.
    """
    anchors = set(anchors)
    if len(anchors) == 1:
        return next(iter(anchors))
    if len(anchors) == 3:
        missing = ({Edge.TOP, Edge.RIGHT, Edge.BOTTOM, Edge.LEFT} - anchors).pop()
        return {Edge.TOP: Edge.BOTTOM, Edge.BOTTOM: Edge.TOP,
                Edge.LEFT: Edge.RIGHT, Edge.RIGHT: Edge.LEFT}[missing]
    return None


def auto_exclusive_zone(anchors: Iterable[Edge], size: QSize, margins: Dict[Edge, int]) -> int:
    edge = exclusive_edge(anchors)
    if edge is None:
        return 0
    if edge in (Edge.TOP, Edge.BOTTOM):
        return size.height() + margins.get(edge, 0)
    return size.width() + margins.get(edge, 0)


class LayerSurface(QObject):
    """Layer-shell state of one top-level window."""

    def __init__(self, window: QWidget):
        super().__init__(window)
        self.setObjectName("qlayer-layer-surface")
        self._window = window
        self.namespace = ""
        self.anchors: Set[Edge] = set()
        self.margins: Dict[Edge, int] = {edge: 0 for edge in Edge}
        self.layer = Layer.TOP
        self.exclusive_zone = 0
        self.auto_exclusive = False
        self.screen: Optional[QScreen] = None
        self.keyboard_mode = KeyboardMode.NONE
        self._apply_flags()
        window.installEventFilter(self)

    @classmethod
    def init_for_window(cls, window: QWidget) -> "LayerSurface":
        return cls.of(window) or cls(window)

    @classmethod
    def of(cls, window: QWidget) -> Optional["LayerSurface"]:
        for child in window.children():
            if isinstance(child, cls):
                return child
        return None

    @property
    def window(self) -> QWidget:
        return self._window

    # --- configuration ---

    def set_namespace(self, namespace: str) -> None:
        self.namespace = namespace

    def set_anchor(self, edge: Edge, anchored: bool = True) -> None:
        if anchored:
            self.anchors.add(edge)
        else:
            self.anchors.discard(edge)
        self._changed()

    def set_margin(self, edge: Edge, margin: int) -> None:
        self.margins[edge] = int(margin)
        self._changed()

    def set_layer(self, layer: Layer) -> None:
        self.layer = layer
        self._apply_flags()

    def set_keyboard_mode(self, mode: KeyboardMode) -> None:
        self.keyboard_mode = mode
        self._apply_flags()

    def set_exclusive_zone(self, zone: int) -> None:
        self.auto_exclusive = False
        self.exclusive_zone = int(zone)

    def auto_exclusive_zone_enable(self) -> None:
        self.auto_exclusive = True
        self._changed()

    def set_monitor(self, screen: Optional[QScreen]) -> None:
        self.screen = screen
        if screen is not None:
            self._window.setScreen(screen)
        self._changed()

    # --- placement ---

    def target_screen(self) -> Optional[QScreen]:
        return self.screen or self._window.screen() or QGuiApplication.primaryScreen()

    def arrange(self) -> None:
        window = self._window
        size = window.size().expandedTo(window.minimumSizeHint())
        if self.auto_exclusive:
            self.exclusive_zone = auto_exclusive_zone(self.anchors, size, self.margins)

        screen = self.target_screen()
        if screen is None:
            return
        window.setGeometry(compute_geometry(screen.geometry(), size, self.anchors, self.margins))

    def _changed(self) -> None:
        if self._window.isVisible():
            self.arrange()

    def _apply_flags(self) -> None:
        window = self._window
        flags = window.windowFlags()
        flags |= Qt.WindowType.FramelessWindowHint | Qt.WindowType.Tool
        flags &= ~(Qt.WindowType.WindowStaysOnTopHint | Qt.WindowType.WindowStaysOnBottomHint)
        if self.layer in (Layer.TOP, Layer.OVERLAY):
            flags |= Qt.WindowType.WindowStaysOnTopHint
        else:
            flags |= Qt.WindowType.WindowStaysOnBottomHint

        accepts_focus = self.keyboard_mode != KeyboardMode.NONE
        if accepts_focus:
            flags &= ~Qt.WindowType.WindowDoesNotAcceptFocus
        else:
            flags |= Qt.WindowType.WindowDoesNotAcceptFocus
        window.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, not accepts_focus)

        if flags != window.windowFlags():
            visible = window.isVisible()
            window.setWindowFlags(flags)
            if visible:
                window.show()

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if event.type() in (QEvent.Type.Show, QEvent.Type.Resize):
            self.arrange()
        return super().eventFilter(watched, event)
