# qlayer/core.py
import importlib.util
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, List, Optional, Union

from PySide6.QtWidgets import QApplication, QWidget

from .config import Config
from .utils import error, logger, setup_logging, warning
from .window import DEFAULT_NAME, build_window


class App:
    """
    Owns the QApplication and the top-level windows of a session.

    A config module is a plain Python file with a `windows` list (window
    descriptors or already built windows) and an optional `stylesheet`
    path, relative to the module.
    """

    _instance = None

    @classmethod
    def instance(cls, config: Optional[Config] = None) -> "App":
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    def __init__(self, config: Optional[Config] = None):
        if App._instance is not None:
            raise RuntimeError("App is a singleton, use App.instance()")
        App._instance = self

        self.config = config or Config()
        setup_logging(self.config.get("log_level", "WARNING"))

        platform = self.config.get("platform")
        if platform and QApplication.instance() is None:
            os.environ.setdefault("QT_QPA_PLATFORM", str(platform))

        self.qapp = QApplication.instance() or QApplication(sys.argv[:1])
        self._windows: Dict[str, QWidget] = {}

        stylesheet = self.config.resolve_path("stylesheet")
        if stylesheet is not None:
            self.load_stylesheet(stylesheet)

    @property
    def windows(self) -> List[QWidget]:
        return list(self._windows.values())

    def load_stylesheet(self, path: Union[str, Path]) -> bool:
        """Appends the style sheet at `path` to the application's one."""
        try:
            css = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            error(f"could not read stylesheet {path}: {e}")
            return False

        current = self.qapp.styleSheet()
        self.qapp.setStyleSheet(f"{current}\n{css}" if current else css)
        logger.info(f"loaded stylesheet {path}")
        return True

    def load_module(self, path: Union[str, Path]) -> Optional[ModuleType]:
        """Imports a config module and builds the windows it declares."""
        path = Path(path)
        if not path.is_file():
            error(f"config module {path} not found")
            return None

        spec = importlib.util.spec_from_file_location(f"qlayer_config_{path.stem}", path)
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            error(f"could not load config module {path}: {e!r}")
            return None

        stylesheet = getattr(module, "stylesheet", None)
        if stylesheet:
            css_path = Path(stylesheet)
            self.load_stylesheet(css_path if css_path.is_absolute() else path.parent / css_path)

        windows = getattr(module, "windows", None)
        if windows is None:
            warning(f"config module {path} has no windows list")
            return module
        if not isinstance(windows, (list, tuple)):
            error(f"windows in {path} has to be a list, got {type(windows).__name__}")
            return module

        for descriptor in windows:
            self.add_window(descriptor)
        return module

    def add_window(self, descriptor: Any) -> Optional[QWidget]:
        window = build_window(descriptor)
        if window is None:
            return None

        name = self._name_of(descriptor, window)
        if name is None:
            name = self._unnamed_key()
        elif name in self._windows:
            warning(f'there already is a window named "{name}", replacing it')
            self._windows[name].close()
        self._windows[name] = window
        return window

    @staticmethod
    def _name_of(descriptor: Any, window: QWidget) -> Optional[str]:
        """The name a window was explicitly given, if any."""
        if isinstance(descriptor, Mapping):
            name = descriptor.get("name")
            return name if isinstance(name, str) and name else None
        name = window.objectName()
        return name if name and name != DEFAULT_NAME else None

    def _unnamed_key(self) -> str:
        index = len(self._windows)
        while f"window-{index}" in self._windows:
            index += 1
        return f"window-{index}"

    def get_window(self, name: str) -> Optional[QWidget]:
        window = self._windows.get(name)
        if window is None:
            warning(f'there is no window named "{name}"')
        return window

    def toggle_window(self, name: str) -> None:
        window = self.get_window(name)
        if window is not None:
            window.setVisible(not window.isVisible())

    def run(self) -> int:
        """Starts the Qt event loop; returns its exit code."""
        logger.info(f"running with {len(self._windows)} window(s)")
        return self.qapp.exec()
