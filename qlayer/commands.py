# qlayer/commands.py
"""
Callback values found in descriptors.

A callback slot (`onClick`, `onChange`, `onScrollUp`, ...) holds either a
Python callable or a command line template such as ``"pactl set-sink-volume
@DEFAULT_SINK@ {}%"``. Both are wrapped into a `Command` so the rest of the
library can treat them the same way.
"""
import shlex
import subprocess
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Union

from .utils import error, kind_of, warning

PLACEHOLDER = "{}"


def format_value(value: Any) -> str:
    """Text form of an event value as it ends up on a command line."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class DirectCallback:
    fn: Callable[..., Any]

    def __call__(self, widget, *args):
        return self.fn(widget, *args)


@dataclass(frozen=True)
class ShellCommandTemplate:
    template: str

    def argv(self, value: Any = None) -> List[str]:
        """
        Splits the template into arguments and substitutes `{}` in each one.

        Splitting happens before substitution, so a value containing spaces
        or quotes is always passed as part of a single argument.
        """
        text = format_value(value)
        return [arg.replace(PLACEHOLDER, text) for arg in shlex.split(self.template)]

    def __call__(self, widget, *args):
        spawn(self.argv(args[0] if args else None))


Command = Union[DirectCallback, ShellCommandTemplate]


def to_command(value: Any, name: str = "callback") -> Optional[Command]:
    """
    Wraps a descriptor value into a Command.

    Empty strings and None mean "no callback". Anything that is neither a
    string nor callable is reported and ignored.
    """
    if isinstance(value, (DirectCallback, ShellCommandTemplate)):
        return value
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return ShellCommandTemplate(value)
    if callable(value):
        return DirectCallback(value)

    warning(f'"{name}" has to be a string or a function, got {kind_of(value)}')
    return None


def spawn(argv: Sequence[str]) -> Optional[subprocess.Popen]:
    """Starts a detached process. Failures are reported, not raised."""
    if not argv:
        return None
    try:
        return subprocess.Popen(
            list(argv),
            stdin=subprocess.DEVNULL,
            start_new_session=True,
        )
    except (OSError, ValueError) as e:
        error(f"could not run {' '.join(argv)!r}: {e}")
        return None


def run_command(command: Any, widget=None, *args) -> Any:
    """
    Runs a callback slot value for `widget` with the event arguments.

    :return: Whatever a Python callback returned, None for shell commands
             or when the callback raised.
    """
    cmd = to_command(command)
    if cmd is None:
        return None
    try:
        return cmd(widget, *args)
    except Exception as e:
        error(f"callback {command!r} failed: {e!r}")
        return None
