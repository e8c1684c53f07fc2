# qlayer/__init__.py

"""
qlayer

Declarative Qt widgets and layer-shell style windows for desktop shells
(bars, docks, popups), built from plain Python descriptors.
"""

# --- Construction engine ---
from .widget import Widget, WidgetRegistry, build, placeholder, registry, text
from . import widgets  # registers the built-in widget types
from .widgets import (
    Box, CenterBox, Icon, LevelBar, Overlay, Revealer, Slider, Stack,
)

# --- Windows ---
from .window import Window, build_window, expand_margin
from .layershell import Edge, KeyboardMode, Layer, LayerSurface

# --- Styling ---
from .style import Styled, add_class_names, class_names, set_style, styled, toggle_class_name

# --- Callbacks and events ---
from .commands import DirectCallback, ShellCommandTemplate, run_command, to_command
from .events import EventListeners, parse_event_listeners
from .props import WidgetProps, connect_signal

# --- Runtime ---
from .config import Config
from .core import App
from .utils import interval, setup_logging


__all__ = [
    'Widget', 'WidgetRegistry', 'build', 'placeholder', 'registry', 'text', 'widgets',
    'Box', 'CenterBox', 'Icon', 'LevelBar', 'Overlay', 'Revealer', 'Slider', 'Stack',
    'Window', 'build_window', 'expand_margin',
    'Edge', 'KeyboardMode', 'Layer', 'LayerSurface',
    'Styled', 'add_class_names', 'class_names', 'set_style', 'styled', 'toggle_class_name',
    'DirectCallback', 'ShellCommandTemplate', 'run_command', 'to_command',
    'EventListeners', 'parse_event_listeners',
    'WidgetProps', 'connect_signal',
    'Config', 'App', 'interval', 'setup_logging',
]

__version__ = "0.1.0"
