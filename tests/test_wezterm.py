"""Tests for hxmux.wezterm module."""

import pytest
from conftest import ScriptedRunner

from hxmux.errors import MultiplexerError
from hxmux.multiplexer import Direction, Pane
from hxmux.wezterm import WeztermMultiplexer

LIST_OUTPUT = """\
WINID TABID PANEID WORKSPACE SIZE    TITLE   CWD
    0     0      0 default   30x48   broot   file:///home/me/proj
    0     0      1 default   120x48  hx      file:///home/me/proj
    0     0      2 default   50x48   fish    file:///home/me/proj
garbage line
    0     0      3 default   badxsize zsh
"""


class TestListPanes:
    """Tests for WeztermMultiplexer.list_panes."""

    def test_parses_table(self) -> None:
        """Should parse rows and skip the header and malformed lines."""
        runner = ScriptedRunner(LIST_OUTPUT)
        panes = WeztermMultiplexer(runner).list_panes()

        assert runner.commands == [["wezterm", "cli", "list"]]
        assert panes == [
            Pane(pane_id="0", width=30, height=48, command="broot"),
            Pane(pane_id="1", width=120, height=48, command="hx"),
            Pane(pane_id="2", width=50, height=48, command="fish"),
        ]

    def test_empty_output(self) -> None:
        """Should return no panes for empty output."""
        assert WeztermMultiplexer(ScriptedRunner("")).list_panes() == []

    def test_pane_command(self) -> None:
        """Should look up the foreground program of one pane."""
        mux = WeztermMultiplexer(ScriptedRunner(LIST_OUTPUT, LIST_OUTPUT))
        assert mux.pane_command("0") == "broot"
        assert mux.pane_command("9") is None


class TestGetNeighbor:
    """Tests for WeztermMultiplexer.get_neighbor."""

    def test_neighbor_found(self) -> None:
        """Should return the pane id printed by wezterm."""
        runner = ScriptedRunner("2\n")
        assert WeztermMultiplexer(runner).get_neighbor("1", Direction.RIGHT) == "2"
        assert runner.commands == [["wezterm", "cli", "get-pane-direction", "--pane-id", "1", "Right"]]

    def test_no_neighbor(self) -> None:
        """Should return None on empty output."""
        assert WeztermMultiplexer(ScriptedRunner("\n")).get_neighbor("1", Direction.LEFT) is None

    def test_garbled_output(self) -> None:
        """Should raise MultiplexerError on a non-numeric id."""
        with pytest.raises(MultiplexerError, match="unexpected pane id"):
            WeztermMultiplexer(ScriptedRunner("oops")).get_neighbor("1", Direction.UP)


class TestSplitPane:
    """Tests for WeztermMultiplexer.split_pane."""

    def test_split_with_percent(self) -> None:
        """Should pass the side flag and percent."""
        runner = ScriptedRunner("7\n")
        assert WeztermMultiplexer(runner).split_pane("1", Direction.LEFT, 20) == "7"
        assert runner.commands == [
            ["wezterm", "cli", "split-pane", "--pane-id", "1", "--left", "--percent", "20"],
        ]

    @pytest.mark.parametrize(
        ("direction", "flag"),
        [
            (Direction.RIGHT, "--right"),
            (Direction.UP, "--top"),
            (Direction.DOWN, "--bottom"),
        ],
    )
    def test_split_flags(self, direction: Direction, flag: str) -> None:
        """Should map directions to split-pane flags."""
        runner = ScriptedRunner("8")
        WeztermMultiplexer(runner).split_pane("1", direction)
        assert runner.commands[0][-1] == flag

    def test_unparseable_output(self) -> None:
        """Should raise MultiplexerError when no id is printed."""
        with pytest.raises(MultiplexerError):
            WeztermMultiplexer(ScriptedRunner("")).split_pane("1", Direction.RIGHT)


class TestOtherCommands:
    """Tests for resize, focus, text injection and screen reads."""

    def test_resize(self) -> None:
        """Should issue adjust-pane-size with the amount and direction."""
        runner = ScriptedRunner()
        WeztermMultiplexer(runner).resize_pane("3", Direction.LEFT, 12)
        assert runner.commands == [
            ["wezterm", "cli", "adjust-pane-size", "--pane-id", "3", "--amount", "12", "Left"],
        ]

    def test_resize_rejects_negative(self) -> None:
        """Should reject negative amounts before running anything."""
        runner = ScriptedRunner()
        with pytest.raises(ValueError, match="non-negative"):
            WeztermMultiplexer(runner).resize_pane("3", Direction.LEFT, -1)
        assert runner.commands == []

    def test_focus(self) -> None:
        """Should activate the pane."""
        runner = ScriptedRunner()
        WeztermMultiplexer(runner).focus_pane("4")
        assert runner.commands == [["wezterm", "cli", "activate-pane", "--pane-id", "4"]]

    def test_inject_text(self) -> None:
        """Should send literal text with a trailing newline."""
        runner = ScriptedRunner()
        WeztermMultiplexer(runner).inject_text("2", "ls -lha")
        assert runner.commands == [["wezterm", "cli", "send-text", "--pane-id", "2", "--no-paste", "ls -lha\n"]]

    def test_send_escape(self) -> None:
        """Should send a lone ESC in its own send-text call."""
        runner = ScriptedRunner()
        WeztermMultiplexer(runner).send_escape("1")
        assert runner.commands == [["wezterm", "cli", "send-text", "--pane-id", "1", "--no-paste", "\x1b"]]

    def test_read_screen_text(self) -> None:
        """Should read a given pane or the active one."""
        runner = ScriptedRunner("pane text", "active text")
        mux = WeztermMultiplexer(runner)
        assert mux.read_screen_text("1") == "pane text"
        assert mux.read_screen_text() == "active text"
        assert runner.commands == [
            ["wezterm", "cli", "get-text", "--pane-id", "1"],
            ["wezterm", "cli", "get-text"],
        ]


class TestParsePaneId:
    """Tests for WeztermMultiplexer.parse_pane_id."""

    def test_valid(self) -> None:
        """Should accept integers."""
        assert WeztermMultiplexer(ScriptedRunner()).parse_pane_id(" 12\n") == "12"

    @pytest.mark.parametrize("value", ["", "%1", "abc", "-1"])
    def test_invalid(self, value: str) -> None:
        """Should reject anything but a non-negative integer."""
        with pytest.raises(ValueError):
            WeztermMultiplexer(ScriptedRunner()).parse_pane_id(value)
