"""WezTerm backend driven through ``wezterm cli``."""

from hxmux.errors import MultiplexerError
from hxmux.multiplexer import Direction, Multiplexer, Pane

# WINID TABID PANEID WORKSPACE SIZE TITLE [CWD]
_LIST_MIN_FIELDS = 6

_SPLIT_FLAGS: dict[Direction, str] = {
    Direction.LEFT: "--left",
    Direction.RIGHT: "--right",
    Direction.UP: "--top",
    Direction.DOWN: "--bottom",
}


def _cli(*args: str) -> list[str]:
    return ["wezterm", "cli", *args]


class WeztermMultiplexer(Multiplexer):
    """Multiplexer client for the WezTerm terminal."""

    pane_env_var = "WEZTERM_PANE"

    @property
    def name(self) -> str:
        return "wezterm"

    def parse_pane_id(self, value: str) -> str:
        """WezTerm pane ids are non-negative integers."""
        token = value.strip()
        if not token.isdigit():
            raise ValueError(f"Invalid WezTerm pane id: {value!r}")
        return str(int(token))

    def list_panes(self) -> list[Pane]:
        """Parse the table printed by ``wezterm cli list``.

        The header row and any short or malformed rows are skipped.
        """
        output = self.run(_cli("list"))
        panes: list[Pane] = []
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < _LIST_MIN_FIELDS or not parts[2].isdigit():
                continue
            width, sep, height = parts[4].partition("x")
            if not sep or not width.isdigit() or not height.isdigit():
                continue
            panes.append(Pane(pane_id=parts[2], width=int(width), height=int(height), command=parts[5]))
        return panes

    def get_neighbor(self, pane_id: str, direction: Direction) -> str | None:
        cmd = _cli("get-pane-direction", "--pane-id", pane_id, direction.value.capitalize())
        token = self.run(cmd).strip()
        if not token:
            return None
        try:
            return self.parse_pane_id(token)
        except ValueError:
            raise MultiplexerError(cmd, f"unexpected pane id {token!r}") from None

    def split_pane(self, pane_id: str, direction: Direction, percent: int | None = None) -> str:
        cmd = _cli("split-pane", "--pane-id", pane_id, _SPLIT_FLAGS[direction])
        if percent is not None:
            cmd.extend(["--percent", str(percent)])
        token = self.run(cmd).strip()
        try:
            return self.parse_pane_id(token)
        except ValueError:
            raise MultiplexerError(cmd, f"unexpected pane id {token!r}") from None

    def resize_pane(self, pane_id: str, direction: Direction, amount: int) -> None:
        self._check_amount(amount)
        self.run(
            _cli("adjust-pane-size", "--pane-id", pane_id, "--amount", str(amount), direction.value.capitalize())
        )

    def focus_pane(self, pane_id: str) -> None:
        self.run(_cli("activate-pane", "--pane-id", pane_id))

    def inject_text(self, pane_id: str, text: str) -> None:
        self.run(_cli("send-text", "--pane-id", pane_id, "--no-paste", f"{text}\n"))

    def send_escape(self, pane_id: str) -> None:
        # Its own write, so the editor does not read ESC plus the next key as Alt
        self.run(_cli("send-text", "--pane-id", pane_id, "--no-paste", "\x1b"))

    def read_screen_text(self, pane_id: str | None = None) -> str:
        cmd = _cli("get-text")
        if pane_id is not None:
            cmd.extend(["--pane-id", pane_id])
        return self.run(cmd)
