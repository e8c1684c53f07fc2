# qlayer/widgets.py
"""
Built-in widget types.

Each constructor receives the descriptor's own options as keyword
arguments (engine options such as `className` or `onScroll` have already
been taken out), checks them, and returns a configured QWidget. Nested
descriptors are resolved through `build`.
"""
import os
from collections.abc import Mapping
from typing import Dict, List, Optional

from PySide6.QtCore import QParallelAnimationGroup, QPoint, QPropertyAnimation, QRect, QSize, Qt, Signal
from PySide6.QtGui import QIcon, QPainter, QPalette, QPolygon
from PySide6.QtWidgets import (
    QBoxLayout,
    QCheckBox,
    QFrame,
    QGraphicsOpacityEffect,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QProgressBar,
    QPushButton,
    QScrollArea,
    QSizePolicy,
    QSlider,
    QStackedLayout,
    QStackedWidget,
    QStyle,
    QStyleOptionSlider,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from .commands import run_command, to_command
from .layout import add_child, alignment_of, box_direction, orientation as _orientation
from .utils import error, restcheck, typecheck, warning
from .widget import build, registry

QWIDGETSIZE_MAX = 16777215


def _children(value) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# --- Box ---

class Box(QWidget):
    """A row or column of widgets."""

    def __init__(self, orientation: Qt.Orientation = Qt.Orientation.Horizontal, homogeneous: bool = False):
        super().__init__()
        self.homogeneous = homogeneous
        layout = QBoxLayout(box_direction(orientation), self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

    def orientation(self) -> Qt.Orientation:
        if self.layout().direction() in (QBoxLayout.Direction.TopToBottom, QBoxLayout.Direction.BottomToTop):
            return Qt.Orientation.Vertical
        return Qt.Orientation.Horizontal

    def append(self, widget: QWidget) -> None:
        add_child(self.layout(), widget)
        if self.homogeneous:
            self.layout().setStretchFactor(widget, 1)

    def child_widgets(self) -> List[QWidget]:
        layout = self.layout()
        items = (layout.itemAt(i) for i in range(layout.count()))
        return [item.widget() for item in items if item.widget() is not None]

    def remove_children(self) -> None:
        layout = self.layout()
        while layout.count():
            widget = layout.takeAt(0).widget()
            if widget is not None:
                widget.setParent(None)
                widget.deleteLater()


@registry.register("box")
def build_box(type="box", orientation="horizontal", homogeneous=False, children=(), **rest):
    typecheck("orientation", orientation, "string", type)
    typecheck("homogeneous", homogeneous, "boolean", type)
    typecheck("children", children, "array", type)
    restcheck(rest, type)

    box = Box(_orientation(orientation, type), homogeneous is True)
    for child in _children(children):
        box.append(build(child))
    return box


# --- CenterBox ---

class CenterBox(QWidget):
    """Three slots: start, a truly centered middle, and end."""

    def __init__(self, orientation: Qt.Orientation = Qt.Orientation.Horizontal):
        super().__init__()
        self._vertical = orientation == Qt.Orientation.Vertical
        layout = QGridLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        for index, stretch in enumerate((1, 0, 1)):
            if self._vertical:
                layout.setRowStretch(index, stretch)
            else:
                layout.setColumnStretch(index, stretch)
        self._slots: Dict[int, QWidget] = {}

    def _default_alignment(self, index: int) -> Qt.AlignmentFlag:
        if index == 1:
            return Qt.AlignmentFlag.AlignCenter
        if self._vertical:
            return Qt.AlignmentFlag.AlignTop if index == 0 else Qt.AlignmentFlag.AlignBottom
        return Qt.AlignmentFlag.AlignLeft if index == 0 else Qt.AlignmentFlag.AlignRight

    def _set(self, index: int, widget: Optional[QWidget]) -> None:
        layout = self.layout()
        old = self._slots.pop(index, None)
        if old is not None:
            layout.removeWidget(old)
            old.setParent(None)
        if widget is None:
            return
        align = alignment_of(widget) or self._default_alignment(index)
        row, column = (index, 0) if self._vertical else (0, index)
        layout.addWidget(widget, row, column, align)
        self._slots[index] = widget

    def set_start_widget(self, widget):
        self._set(0, widget)

    def set_center_widget(self, widget):
        self._set(1, widget)

    def set_end_widget(self, widget):
        self._set(2, widget)

    def start_widget(self):
        return self._slots.get(0)

    def center_widget(self):
        return self._slots.get(1)

    def end_widget(self):
        return self._slots.get(2)


@registry.register("centerbox")
def build_centerbox(type="centerbox", startWidget=None, centerWidget=None, endWidget=None,
                    orientation="horizontal", **rest):
    typecheck("orientation", orientation, "string", type)
    restcheck(rest, type)

    box = CenterBox(_orientation(orientation, type))
    if startWidget:
        box.set_start_widget(build(startWidget))
    if centerWidget:
        box.set_center_widget(build(centerWidget))
    if endWidget:
        box.set_end_widget(build(endWidget))
    return box


# --- Label ---

JUSTIFY = {
    "left": Qt.AlignmentFlag.AlignLeft,
    "center": Qt.AlignmentFlag.AlignHCenter,
    "right": Qt.AlignmentFlag.AlignRight,
    "fill": Qt.AlignmentFlag.AlignJustify,
}


def _fraction_alignment(value: float, start, center, end):
    """Qt has no fractional alignment, so 0 .. 1 is split in thirds."""
    if value < 1 / 3:
        return start
    if value > 2 / 3:
        return end
    return center


@registry.register("label")
def build_label(type="label", label="", markup=False, wrap=False, maxWidth=-1, justify="center",
                xalign=None, yalign=0.5, **rest):
    typecheck("label", label, "string", type)
    typecheck("markup", markup, "boolean", type)
    typecheck("wrap", wrap, "boolean", type)
    typecheck("maxWidth", maxWidth, "number", type)
    typecheck("justify", justify, "string", type)
    typecheck("xalign", xalign, ["number", "undefined"], type)
    typecheck("yalign", yalign, "number", type)
    restcheck(rest, type)

    lbl = QLabel()
    lbl.setTextFormat(Qt.TextFormat.RichText if markup is True else Qt.TextFormat.PlainText)
    lbl.setText(label if isinstance(label, str) else str(label))
    lbl.setWordWrap(wrap is True)

    if _is_number(maxWidth) and maxWidth > 0:
        lbl.setMaximumWidth(int(lbl.fontMetrics().averageCharWidth() * maxWidth))

    horizontal = Qt.AlignmentFlag.AlignHCenter
    if isinstance(justify, str) and justify.lower() in JUSTIFY:
        horizontal = JUSTIFY[justify.lower()]
    else:
        warning(f'{type}: wrong justify value "{justify}"')

    # an explicit xalign wins over justify
    if _is_number(xalign):
        horizontal = _fraction_alignment(xalign, Qt.AlignmentFlag.AlignLeft,
                                         Qt.AlignmentFlag.AlignHCenter, Qt.AlignmentFlag.AlignRight)
    vertical = Qt.AlignmentFlag.AlignVCenter
    if _is_number(yalign):
        vertical = _fraction_alignment(yalign, Qt.AlignmentFlag.AlignTop,
                                       Qt.AlignmentFlag.AlignVCenter, Qt.AlignmentFlag.AlignBottom)

    lbl.setAlignment(horizontal | vertical)
    return lbl


# --- Icon ---

class Icon(QLabel):
    """Shows a themed icon by name, or an image file by path."""

    def __init__(self, icon_name: str = "", size: int = 16):
        super().__init__()
        self.icon_size = size
        self.icon_name = ""
        self.set_icon(icon_name)

    def set_icon(self, icon_name: str) -> None:
        self.icon_name = icon_name
        if not icon_name:
            icon = QIcon()
        elif os.path.isfile(os.path.expanduser(icon_name)):
            icon = QIcon(os.path.expanduser(icon_name))
        else:
            icon = QIcon.fromTheme(icon_name)

        if icon.isNull():
            self.clear()
        else:
            self.setPixmap(icon.pixmap(self.icon_size, self.icon_size))


@registry.register("icon")
def build_icon(type="icon", iconName="", icon=None, size=16, **rest):
    icon_name = icon if icon else iconName
    typecheck("iconName", icon_name, "string", type)
    typecheck("size", size, "number", type)
    restcheck(rest, type)

    return Icon(icon_name if isinstance(icon_name, str) else "",
                int(size) if isinstance(size, (int, float)) else 16)


# --- Button ---

@registry.register("button")
def build_button(type="button", child=None, onClick="", **rest):
    typecheck("onClick", onClick, ["string", "function"], type)
    restcheck(rest, type)

    btn = QPushButton()
    if child:
        layout = QHBoxLayout(btn)
        layout.setContentsMargins(0, 0, 0, 0)
        add_child(layout, build(child))
        btn.setMinimumSize(layout.sizeHint())

    command = to_command(onClick, "onClick")
    if command is not None:
        btn.clicked.connect(lambda: run_command(command, btn))

    return btn


# --- Entry ---

@registry.register("entry")
def build_entry(type="entry", text="", placeholderText="", visibility=True, onChange="", onAccept="", **rest):
    typecheck("text", text, "string", type)
    typecheck("placeholderText", placeholderText, "string", type)
    typecheck("onChange", onChange, ["string", "function"], type)
    typecheck("onAccept", onAccept, ["string", "function"], type)
    typecheck("visibility", visibility, "boolean", type)
    restcheck(rest, type)

    entry = QLineEdit()
    entry.setText(text if isinstance(text, str) else "")
    entry.setPlaceholderText(placeholderText if isinstance(placeholderText, str) else "")
    entry.setEchoMode(QLineEdit.EchoMode.Normal if visibility is not False else QLineEdit.EchoMode.Password)

    on_accept = to_command(onAccept, "onAccept")
    if on_accept is not None:
        entry.returnPressed.connect(lambda: run_command(on_accept, entry, entry.text()))

    on_change = to_command(onChange, "onChange")
    if on_change is not None:
        entry.textChanged.connect(lambda value: run_command(on_change, entry, value))

    return entry


# --- Slider ---

class Slider(QSlider):
    """A QSlider over a floating point range, split into `steps` ticks."""

    steps = 100
    digits = 1

    def __init__(self, orientation: Qt.Orientation, minimum: float = 0.0, maximum: float = 1.0,
                 draw_value: bool = False):
        super().__init__(orientation)
        self.lower = minimum
        self.upper = maximum
        self.draw_value = draw_value
        self.setRange(0, self.steps)
        self.setSingleStep(1)

    def value_text(self, value: Optional[float] = None) -> str:
        return f"{self.real_value() if value is None else value:.{self.digits}f}"

    def _value_room(self) -> int:
        """Space kept beside the groove for the drawn value."""
        metrics = self.fontMetrics()
        if self.orientation() == Qt.Orientation.Horizontal:
            return metrics.height()
        return max(metrics.horizontalAdvance(self.value_text(v)) for v in (self.lower, self.upper)) + 2

    def _with_value_room(self, hint: QSize) -> QSize:
        if self.draw_value:
            room = 2 * self._value_room()
            if self.orientation() == Qt.Orientation.Horizontal:
                hint.setHeight(hint.height() + room)
            else:
                hint.setWidth(hint.width() + room)
        return hint

    def sizeHint(self):
        return self._with_value_room(super().sizeHint())

    def minimumSizeHint(self):
        return self._with_value_room(super().minimumSizeHint())

    def paintEvent(self, event):
        super().paintEvent(event)
        if not self.draw_value:
            return

        option = QStyleOptionSlider()
        self.initStyleOption(option)
        handle = self.style().subControlRect(QStyle.ComplexControl.CC_Slider, option,
                                             QStyle.SubControl.SC_SliderHandle, self)
        text = self.value_text()
        metrics = self.fontMetrics()
        width, height = metrics.horizontalAdvance(text), metrics.height()
        if self.orientation() == Qt.Orientation.Horizontal:
            x = min(max(handle.center().x() - width // 2, 0), max(self.width() - width, 0))
            area = QRect(x, handle.top() - height, width, height)
        else:
            area = QRect(handle.left() - width - 2, handle.center().y() - height // 2, width, height)

        painter = QPainter(self)
        painter.setPen(self.palette().color(QPalette.ColorRole.WindowText))
        painter.drawText(area, Qt.AlignmentFlag.AlignCenter, text)
        painter.end()

    def step_increment(self) -> float:
        return (self.upper - self.lower) / self.steps

    def real_value(self) -> float:
        return self.lower + self.value() * self.step_increment()

    def set_real_value(self, value: float) -> None:
        if self.upper <= self.lower:
            return
        self.setValue(round((value - self.lower) / self.step_increment()))

    def wheelEvent(self, event):
        # one step per notch, ignoring the platform scroll settings
        delta = event.angleDelta()
        notch = delta.y() or delta.x()
        if notch:
            self.setValue(self.value() + (self.singleStep() if notch > 0 else -self.singleStep()))
        event.accept()


@registry.register("slider")
def build_slider(type="slider", inverted=False, orientation="horizontal", min=0, max=1, value=0,
                 onChange="", drawValue=False, **rest):
    typecheck("inverted", inverted, "boolean", type)
    typecheck("orientation", orientation, "string", type)
    typecheck("min", min, "number", type)
    typecheck("max", max, "number", type)
    typecheck("value", value, "number", type)
    typecheck("onChange", onChange, ["string", "function"], type)
    typecheck("drawValue", drawValue, "boolean", type)
    restcheck(rest, type)

    lower = min if isinstance(min, (int, float)) else 0
    upper = max if isinstance(max, (int, float)) else 1
    direction = _orientation(orientation, type)

    slider = Slider(direction, lower, upper, drawValue is True)
    slider.setInvertedAppearance(inverted is True)
    if isinstance(value, (int, float)):
        slider.set_real_value(value)

    on_change = to_command(onChange, "onChange")
    if on_change is not None:
        slider.valueChanged.connect(lambda _: run_command(on_change, slider, slider.real_value()))

    return slider


# --- Stack ---

STACK_TRANSITIONS = ("none", "crossfade", "slide_right", "slide_left", "slide_up", "slide_down",
                     "slide_left_right", "slide_up_down")


class Stack(QStackedWidget):
    """
    Named pages, one visible at a time.

    Page switches on a visible stack are animated with `transition`. With
    `interpolate_size` a non homogeneous stack also grows or shrinks
    smoothly to the new page.
    """

    def __init__(self, hhomogeneous: bool = True, vhomogeneous: bool = True, transition: str = "none",
                 duration: int = 200, interpolate_size: bool = False):
        super().__init__()
        self.hhomogeneous = hhomogeneous
        self.vhomogeneous = vhomogeneous
        self.transition = transition
        self.duration = duration
        self.interpolate_size = interpolate_size
        self._pages: Dict[str, QWidget] = {}
        self._animation: Optional[QParallelAnimationGroup] = None
        self.currentChanged.connect(self._update_policies)

    def animation(self) -> Optional[QParallelAnimationGroup]:
        return self._animation

    def setCurrentWidget(self, widget: QWidget) -> None:
        previous = self.currentIndex()
        before = self.size()
        super().setCurrentWidget(widget)
        if self.currentIndex() != previous and previous >= 0:
            self._animate(widget, self.currentIndex() > previous, before)

    def _animate(self, page: QWidget, forward: bool, before: QSize) -> None:
        self._stop_animation()
        if not self.isVisible() or self.duration <= 0:
            return

        group = QParallelAnimationGroup(self)
        kind = self.transition
        if kind == "slide_left_right":
            kind = "slide_left" if forward else "slide_right"
        elif kind == "slide_up_down":
            kind = "slide_up" if forward else "slide_down"

        if kind == "crossfade":
            effect = QGraphicsOpacityEffect(page)
            page.setGraphicsEffect(effect)
            group.addAnimation(self._animation_of(effect, b"opacity", 0.0, 1.0))
        elif kind.startswith("slide_"):
            origin = self.contentsRect().topLeft()
            offset = {
                "slide_left": QPoint(self.width(), 0),
                "slide_right": QPoint(-self.width(), 0),
                "slide_up": QPoint(0, self.height()),
                "slide_down": QPoint(0, -self.height()),
            }[kind]
            group.addAnimation(self._animation_of(page, b"pos", origin + offset, origin))

        hint = page.sizeHint()
        if self.interpolate_size and hint.isValid():
            if not self.hhomogeneous:
                group.addAnimation(self._animation_of(self, b"maximumWidth", before.width(), hint.width()))
            if not self.vhomogeneous:
                group.addAnimation(self._animation_of(self, b"maximumHeight", before.height(), hint.height()))

        if group.animationCount() == 0:
            group.deleteLater()
            return
        group.finished.connect(self._stop_animation)
        self._animation = group
        group.start()

    def _animation_of(self, target, prop: bytes, start, end) -> QPropertyAnimation:
        animation = QPropertyAnimation(target, prop)
        animation.setDuration(self.duration)
        animation.setStartValue(start)
        animation.setEndValue(end)
        return animation

    def _stop_animation(self) -> None:
        group, self._animation = self._animation, None
        if group is None:
            return
        group.stop()
        group.deleteLater()
        if self.interpolate_size:
            self.setMaximumSize(QWIDGETSIZE_MAX, QWIDGETSIZE_MAX)
        origin = self.contentsRect().topLeft()
        for page in self._pages.values():
            page.setGraphicsEffect(None)
            page.move(origin)

    def add_named(self, widget: QWidget, name: str) -> None:
        self._pages[name] = widget
        self.addWidget(widget)
        self._update_policies()

    def get_child_by_name(self, name: str) -> Optional[QWidget]:
        return self._pages.get(name)

    def visible_child_name(self) -> Optional[str]:
        current = self.currentWidget()
        for name, widget in self._pages.items():
            if widget is current:
                return name
        return None

    def show_child(self, name) -> None:
        """Shows page `name`; hides the whole stack if there is none."""
        page = self._pages.get(name() if callable(name) else name)
        if page is None:
            self.setVisible(False)
            return
        self.setCurrentWidget(page)
        if self.parentWidget() is not None:
            self.setVisible(True)

    def _update_policies(self, *_):
        if self.hhomogeneous and self.vhomogeneous:
            return
        current = self.currentWidget()
        for widget in self._pages.values():
            policy = widget.sizePolicy()
            if widget is not current:
                if not self.hhomogeneous:
                    policy.setHorizontalPolicy(QSizePolicy.Policy.Ignored)
                if not self.vhomogeneous:
                    policy.setVerticalPolicy(QSizePolicy.Policy.Ignored)
            else:
                policy.setHorizontalPolicy(QSizePolicy.Policy.Preferred)
                policy.setVerticalPolicy(QSizePolicy.Policy.Preferred)
            widget.setSizePolicy(policy)
        self.updateGeometry()


@registry.register("stack")
def build_stack(type="stack", items=(), hhomogeneous=True, vhomogeneous=True, interpolateSize=False,
                transition="none", transitionDuration=200, **rest):
    typecheck("hhomogeneous", hhomogeneous, "boolean", type)
    typecheck("vhomogeneous", vhomogeneous, "boolean", type)
    typecheck("interpolateSize", interpolateSize, "boolean", type)
    typecheck("transition", transition, "string", type)
    typecheck("transitionDuration", transitionDuration, "number", type)
    typecheck("items", items, "array", type)
    restcheck(rest, type)

    stack = Stack(hhomogeneous is not False, vhomogeneous is not False,
                  duration=int(transitionDuration) if _is_number(transitionDuration) else 200,
                  interpolate_size=interpolateSize is True)
    if isinstance(transition, str) and transition.lower() in STACK_TRANSITIONS:
        stack.transition = transition.lower()
    else:
        error(f'{type}: wrong transition type "{transition}"')

    for item in _children(items):
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            warning(f"{type}: items have to be [name, widget] pairs, got {item!r}")
            continue
        name, widget = item
        if widget:
            stack.add_named(build(widget), str(name))
    return stack


# --- Scrollable ---

SCROLL_POLICY = {
    "always": Qt.ScrollBarPolicy.ScrollBarAlwaysOn,
    "automatic": Qt.ScrollBarPolicy.ScrollBarAsNeeded,
    "never": Qt.ScrollBarPolicy.ScrollBarAlwaysOff,
    "external": Qt.ScrollBarPolicy.ScrollBarAlwaysOff,
}


@registry.register("scrollable")
def build_scrollable(type="scrollable", child=None, hscroll="automatic", vscroll="automatic", **rest):
    typecheck("hscroll", hscroll, "string", type)
    typecheck("vscroll", vscroll, "string", type)
    restcheck(rest, type)

    area = QScrollArea()
    area.setWidgetResizable(True)
    area.setFrameShape(QFrame.Shape.NoFrame)

    for name, value, setter in (("hscroll", hscroll, area.setHorizontalScrollBarPolicy),
                                ("vscroll", vscroll, area.setVerticalScrollBarPolicy)):
        if isinstance(value, str) and value.lower() in SCROLL_POLICY:
            setter(SCROLL_POLICY[value.lower()])
        else:
            error(f'{type}: wrong scroll policy "{value}" for {name}')

    if child:
        area.setWidget(build(child))
    return area


# --- Revealer ---

REVEALER_TRANSITIONS = ("none", "crossfade", "slide_right", "slide_left", "slide_up", "slide_down")


class Revealer(QWidget):
    """Shows or hides its child with an animated transition."""

    def __init__(self, transition: str = "crossfade", duration: int = 250):
        super().__init__()
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.transition = transition
        self.duration = duration
        self._child: Optional[QWidget] = None
        self._revealed = False
        self._animation: Optional[QPropertyAnimation] = None

    def child(self) -> Optional[QWidget]:
        return self._child

    def set_child(self, widget: QWidget) -> None:
        if self._child is not None:
            self.layout().removeWidget(self._child)
            self._child.setParent(None)
        self._child = widget
        add_child(self.layout(), widget)
        widget.setVisible(self._revealed)

    def reveal_child(self) -> bool:
        return self._revealed

    def set_reveal_child(self, reveal: bool, animate: bool = True) -> None:
        reveal = bool(reveal)
        if reveal == self._revealed:
            return
        self._revealed = reveal
        if self._animation is not None:
            self._animation.stop()
            self._animation = None
        if self._child is None:
            return

        if not animate or self.transition == "none" or self.duration <= 0:
            self._finish(reveal)
        elif self.transition == "crossfade":
            self._fade(reveal)
        else:
            self._slide(reveal)

    def _fade(self, reveal: bool) -> None:
        effect = QGraphicsOpacityEffect(self._child)
        self._child.setGraphicsEffect(effect)
        self._child.setVisible(True)
        self._start(QPropertyAnimation(effect, b"opacity", self), 0.0 if reveal else 1.0, 1.0 if reveal else 0.0, reveal)

    def _slide(self, reveal: bool) -> None:
        vertical = self.transition in ("slide_up", "slide_down")
        hint = self._child.sizeHint()
        full = hint.height() if vertical else hint.width()
        prop = b"maximumHeight" if vertical else b"maximumWidth"
        self._child.setVisible(True)
        self._start(QPropertyAnimation(self, prop, self), 0 if reveal else full, full if reveal else 0, reveal)

    def _start(self, animation: QPropertyAnimation, start, end, reveal: bool) -> None:
        animation.setDuration(self.duration)
        animation.setStartValue(start)
        animation.setEndValue(end)
        animation.finished.connect(lambda: self._finish(reveal))
        self._animation = animation
        animation.start()

    def _finish(self, reveal: bool) -> None:
        self._animation = None
        self.setMaximumSize(QWIDGETSIZE_MAX, QWIDGETSIZE_MAX)
        if self._child is not None:
            self._child.setGraphicsEffect(None)
            self._child.setVisible(reveal)


@registry.register("revealer")
def build_revealer(type="revealer", transition="crossfade", transitionDuration=250, duration=None,
                   child=None, revealChild=False, **rest):
    transitionDuration = duration if duration else transitionDuration
    typecheck("transition", transition, "string", type)
    typecheck("transitionDuration", transitionDuration, "number", type)
    typecheck("revealChild", revealChild, "boolean", type)
    restcheck(rest, type)

    revealer = Revealer(duration=int(transitionDuration) if isinstance(transitionDuration, (int, float)) else 250)
    if isinstance(transition, str) and transition.lower() in REVEALER_TRANSITIONS:
        revealer.transition = transition.lower()
    else:
        error(f'{type}: wrong transition type "{transition}"')

    if child:
        revealer.set_child(build(child))
    revealer.set_reveal_child(revealChild is True, animate=False)
    return revealer


# --- Overlay ---

class Overlay(QWidget):
    """A main child with any number of widgets stacked on top of it."""

    def __init__(self):
        super().__init__()
        layout = QStackedLayout(self)
        layout.setStackingMode(QStackedLayout.StackingMode.StackAll)
        self._overlays: List[QWidget] = []

    def set_child(self, widget: QWidget) -> None:
        self.layout().insertWidget(0, widget)
        widget.lower()

    def add_overlay(self, widget: QWidget, measure: Optional[bool] = None) -> None:
        layout = self.layout()
        layout.addWidget(widget)
        layout.setCurrentWidget(widget)
        self._overlays.append(widget)
        if measure is False:
            policy = widget.sizePolicy()
            policy.setHorizontalPolicy(QSizePolicy.Policy.Ignored)
            policy.setVerticalPolicy(QSizePolicy.Policy.Ignored)
            widget.setSizePolicy(policy)

    def overlays(self) -> List[QWidget]:
        return list(self._overlays)


@registry.register("overlay")
def build_overlay(type="overlay", overlays=(), child=None, **rest):
    typecheck("overlays", overlays, "array", type)
    restcheck(rest, type)

    overlay = Overlay()
    if child:
        overlay.set_child(build(child))

    for descriptor in _children(overlays):
        measure = None
        if isinstance(descriptor, Mapping):
            descriptor = dict(descriptor)
            measure = descriptor.pop("measure", None)
            typecheck("measure", measure, ["boolean", "undefined"], type)
        overlay.add_overlay(build(descriptor), measure if isinstance(measure, bool) else None)

    return overlay


# --- LevelBar ---

LEVELBAR_MODES = ("continuous", "discrete")


class LevelBar(QProgressBar):
    """A progress bar over a floating point range."""

    resolution = 1000

    def __init__(self, minimum: float = 0.0, maximum: float = 1.0, discrete: bool = False):
        super().__init__()
        self.setTextVisible(False)
        self.minimum_value = minimum
        self.maximum_value = maximum
        self.discrete = discrete
        if discrete:
            self.setRange(int(minimum), int(maximum))
        else:
            self.setRange(0, self.resolution)

    def level(self) -> float:
        if self.discrete:
            return float(self.value())
        span = self.maximum_value - self.minimum_value
        return self.minimum_value + span * self.value() / self.resolution

    def set_level(self, value: float) -> None:
        value = min(max(value, self.minimum_value), self.maximum_value)
        if self.discrete:
            self.setValue(int(round(value)))
            return
        span = self.maximum_value - self.minimum_value
        self.setValue(round((value - self.minimum_value) / span * self.resolution) if span > 0 else 0)


@registry.register("levelbar")
def build_levelbar(type="levelbar", value=0, maxValue=1, minValue=0, inverted=False,
                   orientation="horizontal", mode="continuous", **rest):
    typecheck("value", value, "number", type)
    typecheck("maxValue", maxValue, "number", type)
    typecheck("minValue", minValue, "number", type)
    typecheck("inverted", inverted, "boolean", type)
    typecheck("orientation", orientation, "string", type)
    typecheck("mode", mode, "string", type)
    restcheck(rest, type)

    discrete = False
    if isinstance(mode, str) and mode.lower() in LEVELBAR_MODES:
        discrete = mode.lower() == "discrete"
    else:
        warning(f'{type}: wrong levelbar mode value "{mode}"')

    bar = LevelBar(minValue if isinstance(minValue, (int, float)) else 0,
                   maxValue if isinstance(maxValue, (int, float)) else 1,
                   discrete)
    bar.setOrientation(_orientation(orientation, type))
    bar.setInvertedAppearance(inverted is True)
    if isinstance(value, (int, float)):
        bar.set_level(value)
    return bar


# --- Switch ---

@registry.register("switch")
def build_switch(type="switch", active=False, onActivate="", **rest):
    typecheck("active", active, "boolean", type)
    typecheck("onActivate", onActivate, ["string", "function"], type)
    restcheck(rest, type)

    switch = QCheckBox()
    switch.setChecked(active is True)

    on_activate = to_command(onActivate, "onActivate")
    if on_activate is not None:
        switch.toggled.connect(lambda checked: run_command(on_activate, switch, checked))

    return switch


# --- Popover ---

ARROW_SIZE = 8


class Popover(QFrame):
    """
    A popup window holding one child, shown next to an anchor widget.

    With `autohide` it is a Qt popup and closes on any click outside it.
    """

    closed = Signal()

    def __init__(self, autohide: bool = True, has_arrow: bool = False):
        if autohide:
            flags = Qt.WindowType.Popup | Qt.WindowType.FramelessWindowHint
        else:
            flags = Qt.WindowType.Tool | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint
        super().__init__(None, flags)
        self.autohide = autohide
        self.has_arrow = has_arrow
        if autohide:
            # the click closing the popover must not reach its menu button again
            self.setAttribute(Qt.WidgetAttribute.WA_NoMouseReplay)
        if has_arrow:
            self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
            self.setContentsMargins(0, ARROW_SIZE, 0, 0)
        else:
            self.setFrameShape(QFrame.Shape.StyledPanel)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._child: Optional[QWidget] = None

    def child(self) -> Optional[QWidget]:
        return self._child

    def set_child(self, widget: QWidget) -> None:
        if self._child is not None:
            self.layout().removeWidget(self._child)
            self._child.setParent(None)
        self._child = widget
        add_child(self.layout(), widget)

    def popup(self, anchor: QWidget) -> None:
        """Shows the popover centered below `anchor`, or above it when there is no room."""
        self.adjustSize()
        below = anchor.mapToGlobal(QPoint(anchor.width() // 2, anchor.height()))
        x, y = below.x() - self.width() // 2, below.y()

        screen = anchor.screen()
        if screen is not None:
            area = screen.availableGeometry()
            x = max(min(x, area.right() + 1 - self.width()), area.left())
            if y + self.height() > area.bottom() + 1:
                y = anchor.mapToGlobal(QPoint(0, 0)).y() - self.height()

        self.move(x, y)
        self.show()

    def popdown(self) -> None:
        self.hide()

    def hideEvent(self, event):
        super().hideEvent(event)
        self.closed.emit()

    def paintEvent(self, event):
        if not self.has_arrow:
            super().paintEvent(event)
            return

        mid = self.width() // 2
        painter = QPainter(self)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(self.palette().color(QPalette.ColorRole.Window))
        painter.drawRect(self.contentsRect())
        painter.drawPolygon(QPolygon([QPoint(mid - ARROW_SIZE, ARROW_SIZE), QPoint(mid, 0),
                                      QPoint(mid + ARROW_SIZE, ARROW_SIZE)]))
        painter.end()


@registry.register("popover")
def build_popover(type="popover", child=None, autohide=True, hasArrow=False, **rest):
    typecheck("autohide", autohide, "boolean", type)
    typecheck("hasArrow", hasArrow, "boolean", type)
    restcheck(rest, type)

    popover = Popover(autohide is not False, hasArrow is True)
    if child:
        popover.set_child(build(child))
    return popover


# --- MenuButton ---

class MenuButton(QToolButton):
    """A toggle button showing its popover while it is checked."""

    def __init__(self):
        super().__init__()
        self.setCheckable(True)
        self._popover: Optional[Popover] = None
        self.toggled.connect(self._toggle_popover)

    def popover(self) -> Optional[Popover]:
        return self._popover

    def set_popover(self, widget: QWidget) -> None:
        """Any widget can be given; it is wrapped in a Popover if needed."""
        if not isinstance(widget, Popover):
            wrapper = Popover()
            wrapper.set_child(widget)
            widget = wrapper

        if self._popover is not None:
            self._popover.closed.disconnect(self._popover_closed)
            self._popover.popdown()
        self._popover = widget
        # owned by the button, but still its own window
        widget.setParent(self, widget.windowFlags())
        widget.closed.connect(self._popover_closed)

    def set_child(self, widget: QWidget) -> None:
        layout = self.layout()
        if layout is None:
            layout = QHBoxLayout(self)
            layout.setContentsMargins(0, 0, 0, 0)
        while layout.count():
            old = layout.takeAt(0).widget()
            if old is not None:
                old.setParent(None)
        add_child(layout, widget)
        self.setMinimumSize(layout.sizeHint())

    def _toggle_popover(self, checked: bool) -> None:
        if self._popover is None:
            return
        if checked:
            self._popover.popup(self)
        else:
            self._popover.popdown()

    def _popover_closed(self) -> None:
        self.setChecked(False)


@registry.register("menubutton")
def build_menubutton(type="menubutton", child=None, popover=None, onActivate="", **rest):
    typecheck("onActivate", onActivate, ["string", "function"], type)
    restcheck(rest, type)

    button = MenuButton()
    if popover:
        button.set_popover(build(popover))
    if child:
        button.set_child(build(child))

    on_activate = to_command(onActivate, "onActivate")
    if on_activate is not None:
        button.toggled.connect(lambda active: run_command(on_activate, button, active))

    return button
