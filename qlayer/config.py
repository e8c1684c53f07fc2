# config.py
from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from .utils import logger


class Config:
    """
    Singleton YAML config loader.

    Usage:
        cfg = Config()                  # first call resolves and loads the file
        module = cfg.get("config_module")
        level = cfg.get_nested("log.level", "WARNING")
        cfg.reload()                    # re-read the file (useful in dev)
        Config.reset()                  # forget the instance (tests)

    The file is searched in this order:
      1. the explicit `config_file` argument
      2. $QLAYER_CONFIG
      3. $XDG_CONFIG_HOME/qlayer/config.yaml (default ~/.config/qlayer/config.yaml)
      4. ./config.yaml
    A missing or unreadable file gives an empty config.
    """

    _instance: Optional["Config"] = None

    DEFAULTS: Dict[str, Any] = {
        "config_module": None,
        "stylesheet": None,
        "log_level": "WARNING",
        "platform": None,
    }

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
        return cls._instance

    def __init__(self, config_file: Optional[str] = None):
        # initialize only once
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self.config_file_arg = config_file

        self._config: Dict[str, Any] = {}
        self._source: Optional[str] = None  # 'file' or None
        self._resolved_config_path: Optional[Path] = self._resolve_config_path(config_file)

        self.reload()

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    # ----- public API -----
    def reload(self) -> None:
        """Re-read the resolved file. Keeps an empty config when that fails."""
        if not self._try_load_file():
            self._source = None
            self._config = {}

    def as_dict(self) -> Dict[str, Any]:
        """The defaults overlaid with the loaded configuration."""
        return {**self.DEFAULTS, **self._config}

    def get(self, key: str, default: Any = None) -> Any:
        """Shallow lookup; falls back to `DEFAULTS` before `default`."""
        if key in self._config:
            return self._config[key]
        if self.DEFAULTS.get(key) is not None:
            return self.DEFAULTS[key]
        return default

    def get_nested(self, path: str, default: Any = None, sep: str = ".") -> Any:
        """
        Lookup nested keys using dot-path (e.g. "windows.bar.monitor").
        Returns default if any step is missing.
        """
        cur = self._config
        if not path:
            return default
        for part in path.split(sep):
            if not isinstance(cur, dict):
                return default
            if part in cur:
                cur = cur[part]
            else:
                return default
        return cur

    def resolve_path(self, key: str) -> Optional[Path]:
        """
        A path-valued option, relative paths taken from the config file's
        directory (or the cwd when there is no file).
        """
        value = self.get(key)
        if not value:
            return None
        path = Path(os.path.expanduser(str(value)))
        if not path.is_absolute():
            base = self._resolved_config_path.parent if self._resolved_config_path else Path.cwd()
            path = base / path
        return path

    @property
    def source(self) -> Optional[str]:
        """'file' or None depending on where config came from."""
        return self._source

    @property
    def resolved_config_path(self) -> Optional[Path]:
        """If a filesystem config was resolved, return its Path, otherwise None."""
        return self._resolved_config_path

    # ----- internal helpers -----
    @staticmethod
    def candidates(config_file: Optional[str] = None) -> List[Path]:
        paths = []
        if config_file:
            paths.append(Path(os.path.expanduser(config_file)))
        if os.environ.get("QLAYER_CONFIG"):
            paths.append(Path(os.path.expanduser(os.environ["QLAYER_CONFIG"])))
        xdg = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
        paths.append(Path(xdg) / "qlayer" / "config.yaml")
        paths.append(Path.cwd() / "config.yaml")
        return paths

    def _resolve_config_path(self, config_file: Optional[str]) -> Optional[Path]:
        for candidate in self.candidates(config_file):
            if candidate.is_file():
                return candidate.resolve()
        if config_file:
            logger.warning(f'config file "{config_file}" not found')
        return None

    def _try_load_file(self) -> bool:
        """Try to load YAML file from resolved path. Returns True on success."""
        if not self._resolved_config_path:
            return False
        try:
            with self._resolved_config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"could not read {self._resolved_config_path}: {e}")
            return False

        if data is None:
            data = {}
        if not isinstance(data, dict):
            logger.warning(f"{self._resolved_config_path} has to contain a mapping, got {type(data).__name__}")
            return False

        self._config = data
        self._source = "file"
        return True


def get_config(*args, **kwargs) -> Config:
    """
    Convenience factory that returns the singleton Config instance.
    Arguments forwarded to Config() only on the first call.
    """
    return Config(*args, **kwargs)
