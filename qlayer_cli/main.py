import logging
import os
from pathlib import Path
from typing import Optional

import typer

from qlayer import App, Config, registry
from qlayer.utils import logger


app = typer.Typer(
    name="qlayer",
    help="Run and check qlayer desktop shell configurations.",
    add_completion=False
)


class DiagnosticCounter(logging.Handler):
    """Counts the warnings and errors reported while building."""

    def __init__(self):
        super().__init__(level=logging.WARNING)
        self.count = 0

    def emit(self, record: logging.LogRecord) -> None:
        self.count += 1


def _resolve_module(module: Optional[str], config: Config) -> Path:
    if module:
        path = Path(module)
    else:
        path = config.resolve_path("config_module")
        if path is None:
            print("❌ Error: no config module given and none set in config.yaml ('config_module').")
            raise typer.Exit(code=1)

    if not path.is_file():
        print(f"❌ Error: config module not found at '{path}'")
        raise typer.Exit(code=1)
    return path


def _config(config_file: Optional[str]) -> Config:
    Config.reset()
    return Config(config_file)


def _app(config: Config) -> App:
    # always a new App, running with the config just loaded
    App.reset()
    return App.instance(config)


# --- CLI Commands ---

@app.command()
def run(
    module: Optional[str] = typer.Argument(
        None,
        help="The Python module declaring the windows. Defaults to 'config_module' from config.yaml.",
    ),
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a config.yaml."),
):
    """
    Builds the module's windows and runs the event loop until they are closed.
    """
    config = _config(config_file)
    path = _resolve_module(module, config)

    qlayer_app = _app(config)
    if qlayer_app.load_module(path) is None:
        raise typer.Exit(code=1)

    print(f"🚀 Running {path.name} with {len(qlayer_app.windows)} window(s)")
    code = qlayer_app.run()
    print("👋 Event loop has exited.")
    raise typer.Exit(code=code)


@app.command()
def check(
    module: Optional[str] = typer.Argument(
        None,
        help="The Python module declaring the windows. Defaults to 'config_module' from config.yaml.",
    ),
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a config.yaml."),
):
    """
    Builds the module's windows offscreen and fails if anything was reported.
    """
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    config = _config(config_file)
    path = _resolve_module(module, config)

    counter = DiagnosticCounter()
    logger.addHandler(counter)
    loaded, windows = None, []
    try:
        qlayer_app = _app(config)
        loaded = qlayer_app.load_module(path)
        windows = qlayer_app.windows
        for window in windows:
            window.close()
    finally:
        logger.removeHandler(counter)

    if loaded is None or counter.count:
        print(f"❌ {path.name}: {counter.count} problem(s) reported")
        raise typer.Exit(code=1)

    print(f"✅ {path.name}: {len(windows)} window(s) built without problems")


@app.command()
def widgets():
    """
    Lists the registered widget types.
    """
    for key in registry.keys():
        print(key)


if __name__ == "__main__":
    app()
