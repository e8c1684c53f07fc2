# qlayer/events.py
"""
Event slots of a widget descriptor and how they are wired.

Each family of slots (focus, keyboard, pointer, scroll, button) is served by
one controller from `qlayer.controllers`. A family's controller is attached
only when one of its slots is set, and never twice.
"""
from dataclasses import dataclass, fields
from typing import Any

from PySide6.QtWidgets import QWidget

from .commands import run_command, to_command
from .controllers import (
    ButtonController,
    FocusController,
    KeyController,
    MotionController,
    ScrollController,
    attach_controller,
)


@dataclass
class EventListeners:
    onFocusEnter: Any = None
    onFocusLeave: Any = None
    onKeyPressed: Any = None
    onKeyReleased: Any = None
    onMotion: Any = None
    onHoverEnter: Any = None
    onHoverLeave: Any = None
    onScroll: Any = None
    onScrollUp: Any = None
    onScrollDown: Any = None
    onButtonPressed: Any = None
    onButtonReleased: Any = None

    @classmethod
    def names(cls):
        return tuple(f.name for f in fields(cls))


def handle_event(command: Any, widget: QWidget, *args) -> bool:
    """
    Runs a slot value and maps its result to the propagation convention.

    :return: False only when the callback returned literal False.
    """
    return run_command(command, widget, *args) is not False


def _slot(listeners: EventListeners, name: str):
    return to_command(getattr(listeners, name), name)


def parse_event_listeners(widget: QWidget, listeners: EventListeners) -> None:
    on_focus_enter = _slot(listeners, "onFocusEnter")
    on_focus_leave = _slot(listeners, "onFocusLeave")
    if on_focus_enter or on_focus_leave:
        controller = attach_controller(widget, FocusController)
        if on_focus_enter:
            controller.add_handler("enter", lambda: handle_event(on_focus_enter, widget))
        if on_focus_leave:
            controller.add_handler("leave", lambda: handle_event(on_focus_leave, widget))

    on_key_pressed = _slot(listeners, "onKeyPressed")
    on_key_released = _slot(listeners, "onKeyReleased")
    if on_key_pressed or on_key_released:
        controller = attach_controller(widget, KeyController)
        if on_key_pressed:
            controller.add_handler("key-pressed", lambda val, code, state:
                               handle_event(on_key_pressed, widget, val, code, state))
        if on_key_released:
            controller.add_handler("key-released", lambda val, code, state:
                               handle_event(on_key_released, widget, val, code, state))

    on_motion = _slot(listeners, "onMotion")
    on_hover_enter = _slot(listeners, "onHoverEnter")
    on_hover_leave = _slot(listeners, "onHoverLeave")
    if on_motion or on_hover_enter or on_hover_leave:
        controller = attach_controller(widget, MotionController)
        if on_motion:
            controller.add_handler("motion", lambda x, y: handle_event(on_motion, widget, x, y))
        if on_hover_enter:
            controller.add_handler("enter", lambda x, y: handle_event(on_hover_enter, widget, x, y))
        if on_hover_leave:
            controller.add_handler("leave", lambda: handle_event(on_hover_leave, widget))

    on_scroll = _slot(listeners, "onScroll")
    on_scroll_up = _slot(listeners, "onScrollUp")
    on_scroll_down = _slot(listeners, "onScrollDown")
    if on_scroll or on_scroll_up or on_scroll_down:
        controller = attach_controller(widget, ScrollController)
        if on_scroll:
            controller.add_handler("scroll", lambda dx, dy: handle_event(on_scroll, widget, dx, dy))
        if on_scroll_up:
            def scroll_up(dx, dy):
                if dy < 0 or dx < 0:
                    return handle_event(on_scroll_up, widget, dx, dy)
                return True
            controller.add_handler("scroll", scroll_up)
        if on_scroll_down:
            def scroll_down(dx, dy):
                if dy > 0 or dx > 0:
                    return handle_event(on_scroll_down, widget, dx, dy)
                return True
            controller.add_handler("scroll", scroll_down)

    on_button_pressed = _slot(listeners, "onButtonPressed")
    on_button_released = _slot(listeners, "onButtonReleased")
    if on_button_pressed or on_button_released:
        controller = attach_controller(widget, ButtonController)
        if on_button_pressed:
            controller.add_handler("pressed", lambda button: handle_event(on_button_pressed, widget, button))
        if on_button_released:
            controller.add_handler("released", lambda button: handle_event(on_button_released, widget, button))


def split_listeners(bag: dict) -> EventListeners:
    """Pops every event slot out of `bag` (a private copy)."""
    found = {name: bag.pop(name) for name in EventListeners.names() if name in bag}
    return EventListeners(**found)
