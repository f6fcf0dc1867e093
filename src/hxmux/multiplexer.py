"""Multiplexer client interface shared by the WezTerm and tmux backends."""

import os
import shlex
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from rich.console import Console
from rich.markup import escape

from hxmux.errors import MissingEnvironment, MultiplexerError

# Runs one multiplexer command and returns its stdout
CommandRunner = Callable[[list[str]], str]


class Direction(StrEnum):
    """Spatial relation between two panes."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


@dataclass
class Pane:
    """A pane as reported by the multiplexer."""

    pane_id: str
    width: int
    height: int
    command: str = ""


def run_command(cmd: list[str], debug_console: Console | None = None) -> str:
    """Run a multiplexer command and return its stdout.

    Args:
        cmd: Command to execute.
        debug_console: When set, the command line is echoed here before running.

    Returns:
        The command's standard output.

    Raises:
        MultiplexerError: If the binary is missing or exits non-zero.
    """
    if debug_console is not None:
        debug_console.print(f"[dim]$ {escape(shlex.join(cmd))}[/]", highlight=False)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        raise MultiplexerError(cmd, f"{cmd[0]} not found") from None
    if result.returncode != 0:
        raise MultiplexerError(cmd, f"exited with status {result.returncode}", result.returncode, result.stderr)
    return result.stdout


def make_runner(debug_console: Console | None = None) -> CommandRunner:
    """Build a subprocess runner, optionally echoing commands."""

    def runner(cmd: list[str]) -> str:
        return run_command(cmd, debug_console)

    return runner


class Multiplexer(ABC):
    """Request/response client for a terminal multiplexer."""

    #: Environment variable holding the invoking pane's id
    pane_env_var: str = ""

    #: Horizontal resizes always move the pane's right border (unless it is
    #: last in its row), so LEFT shrinks and the right neighbor takes the slack
    resizes_right_border: bool = False

    def __init__(self, runner: CommandRunner | None = None) -> None:
        self.run = runner or make_runner()

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name."""

    @abstractmethod
    def parse_pane_id(self, value: str) -> str:
        """Validate a pane id token.

        Raises:
            ValueError: If the token is not a pane id for this backend.
        """

    @abstractmethod
    def list_panes(self) -> list[Pane]:
        """List panes in the current tab or window."""

    @abstractmethod
    def get_neighbor(self, pane_id: str, direction: Direction) -> str | None:
        """Return the pane adjacent to pane_id in direction, or None."""

    @abstractmethod
    def split_pane(self, pane_id: str, direction: Direction, percent: int | None = None) -> str:
        """Split pane_id, placing the new pane in direction, and return its id."""

    @abstractmethod
    def resize_pane(self, pane_id: str, direction: Direction, amount: int) -> None:
        """Move the pane's edge amount cells in direction."""

    @abstractmethod
    def focus_pane(self, pane_id: str) -> None:
        """Make pane_id the active pane."""

    @abstractmethod
    def inject_text(self, pane_id: str, text: str) -> None:
        """Type text plus a newline into pane_id as literal keystrokes."""

    @abstractmethod
    def send_escape(self, pane_id: str) -> None:
        """Send a lone Escape key to pane_id."""

    @abstractmethod
    def read_screen_text(self, pane_id: str | None = None) -> str:
        """Return the rendered text of pane_id, or of the active pane when None."""

    def pane_command(self, pane_id: str) -> str | None:
        """Return the foreground program of pane_id, if listed."""
        for pane in self.list_panes():
            if pane.pane_id == pane_id:
                return pane.command
        return None

    def current_pane_id(self) -> str:
        """Read the invoking pane's id from the environment.

        Raises:
            MissingEnvironment: If the variable is unset or malformed.
        """
        value = os.environ.get(self.pane_env_var, "").strip()
        if not value:
            raise MissingEnvironment(f"{self.pane_env_var} is not set; run hxmux from inside a {self.name} pane")
        try:
            return self.parse_pane_id(value)
        except ValueError:
            raise MissingEnvironment(f"{self.pane_env_var} is not a valid pane id: {value!r}") from None

    @staticmethod
    def _check_amount(amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Resize amount must be non-negative, got {amount}")
