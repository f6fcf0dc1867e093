"""Shared test fixtures."""

import pytest

from hxmux.multiplexer import Direction, Multiplexer, Pane


class FakeMultiplexer(Multiplexer):
    """In-memory multiplexer that records every call."""

    pane_env_var = "FAKE_PANE"

    def __init__(self, panes: list[Pane] | None = None, screen: str = "") -> None:
        super().__init__(runner=self._refuse)
        self.panes: dict[str, Pane] = {pane.pane_id: pane for pane in panes or []}
        self.neighbors: dict[tuple[str, Direction], str] = {}
        self.screen = screen
        self.calls: list[tuple[object, ...]] = []
        self._next_id = 100

    @staticmethod
    def _refuse(cmd: list[str]) -> str:
        raise AssertionError(f"unexpected command {cmd}")

    @property
    def name(self) -> str:
        return "fake"

    def parse_pane_id(self, value: str) -> str:
        if not value.isdigit():
            raise ValueError(value)
        return value

    def list_panes(self) -> list[Pane]:
        self.calls.append(("list",))
        return list(self.panes.values())

    def get_neighbor(self, pane_id: str, direction: Direction) -> str | None:
        self.calls.append(("neighbor", pane_id, direction))
        return self.neighbors.get((pane_id, direction))

    def split_pane(self, pane_id: str, direction: Direction, percent: int | None = None) -> str:
        self.calls.append(("split", pane_id, direction, percent))
        new_id = str(self._next_id)
        self._next_id += 1
        self.panes[new_id] = Pane(pane_id=new_id, width=40, height=40, command="fish")
        self.neighbors[(pane_id, direction)] = new_id
        return new_id

    def resize_pane(self, pane_id: str, direction: Direction, amount: int) -> None:
        self._check_amount(amount)
        self.calls.append(("resize", pane_id, direction, amount))

    def focus_pane(self, pane_id: str) -> None:
        self.calls.append(("focus", pane_id))

    def inject_text(self, pane_id: str, text: str) -> None:
        self.calls.append(("inject", pane_id, text))

    def send_escape(self, pane_id: str) -> None:
        self.calls.append(("escape", pane_id))

    def read_screen_text(self, pane_id: str | None = None) -> str:
        self.calls.append(("read", pane_id))
        return self.screen

    def calls_named(self, name: str) -> list[tuple[object, ...]]:
        return [call for call in self.calls if call[0] == name]


class ScriptedRunner:
    """Command runner that records commands and replays canned output."""

    def __init__(self, *outputs: str) -> None:
        self.outputs = list(outputs)
        self.commands: list[list[str]] = []

    def __call__(self, cmd: list[str]) -> str:
        self.commands.append(cmd)
        return self.outputs.pop(0) if self.outputs else ""


STATUS_SCREEN = "\n".join(
    [
        "  1 fn main() {",
        '  2     println!("hi");',
        "  3 }",
        " NOR   ⠿ src/main.rs [+] │ 1 sel │ 42:7 ",
        "",
    ]
)


@pytest.fixture
def fake_mux() -> FakeMultiplexer:
    """Fake multiplexer whose editor pane 1 shows a Rust file status line."""
    return FakeMultiplexer(
        panes=[Pane(pane_id="1", width=120, height=40, command="hx")],
        screen=STATUS_SCREEN,
    )
