"""Error types raised by hxmux."""


class HxmuxError(Exception):
    """Base class for all hxmux errors."""


class MultiplexerError(HxmuxError):
    """A multiplexer command failed or produced unusable output."""

    def __init__(self, command: list[str], message: str, returncode: int | None = None, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f"{' '.join(command)}: {message}"
        if self.stderr:
            detail += f" ({self.stderr})"
        super().__init__(detail)


class StatusParseError(HxmuxError):
    """No editor status line could be found in the screen text."""


class MissingEnvironment(HxmuxError):
    """The pane id environment variable is absent or malformed."""


class NoNeighborPane(HxmuxError):
    """No pane exists in the requested direction."""


class MissingProgram(HxmuxError):
    """A program a command template needs is not installed."""
