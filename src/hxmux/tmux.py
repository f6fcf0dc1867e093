"""tmux backend driven through the ``tmux`` command line."""

from dataclasses import dataclass

from hxmux.errors import MultiplexerError
from hxmux.multiplexer import Direction, Multiplexer, Pane

_LIST_FORMAT = "#{pane_id} #{pane_width} #{pane_height} #{pane_left} #{pane_top} #{pane_current_command}"
# id, width, height, left, top; the command may be empty
_LIST_MIN_FIELDS = 5

_RESIZE_FLAGS: dict[Direction, str] = {
    Direction.LEFT: "-L",
    Direction.RIGHT: "-R",
    Direction.UP: "-U",
    Direction.DOWN: "-D",
}


@dataclass
class _PaneBox:
    """A pane plus its position in the window, in cells."""

    pane: Pane
    left: int
    top: int

    @property
    def right(self) -> int:
        return self.left + self.pane.width - 1

    @property
    def bottom(self) -> int:
        return self.top + self.pane.height - 1


def _validate_pane_id(pane_id: str, context: str = "") -> None:
    """Validate that a pane ID looks like ``%N``.

    Args:
        pane_id: The pane ID string.
        context: Description for error messages.

    Raises:
        ValueError: If pane ID is empty or malformed.
    """
    if not pane_id.startswith("%") or not pane_id[1:].isdigit():
        label = f" ({context})" if context else ""
        raise ValueError(f"Invalid pane ID{label}: {pane_id!r}")


def _is_adjacent(ref: _PaneBox, other: _PaneBox, direction: Direction) -> bool:
    """Check whether other touches ref on the given side.

    Panes are separated by a one-cell border, so adjacent edges differ by two.
    """
    overlaps_rows = other.top <= ref.bottom and other.bottom >= ref.top
    overlaps_cols = other.left <= ref.right and other.right >= ref.left
    if direction == Direction.RIGHT:
        return overlaps_rows and other.left == ref.right + 2
    if direction == Direction.LEFT:
        return overlaps_rows and other.right + 2 == ref.left
    if direction == Direction.DOWN:
        return overlaps_cols and other.top == ref.bottom + 2
    return overlaps_cols and other.bottom + 2 == ref.top


class TmuxMultiplexer(Multiplexer):
    """Multiplexer client for tmux."""

    pane_env_var = "TMUX_PANE"
    resizes_right_border = True

    @property
    def name(self) -> str:
        return "tmux"

    def parse_pane_id(self, value: str) -> str:
        token = value.strip()
        _validate_pane_id(token)
        return token

    def _list_boxes(self, target: str | None = None) -> list[_PaneBox]:
        cmd = ["tmux", "list-panes"]
        if target is not None:
            cmd.extend(["-t", target])
        cmd.extend(["-F", _LIST_FORMAT])

        boxes: list[_PaneBox] = []
        for line in self.run(cmd).splitlines():
            parts = line.split(maxsplit=5)
            if len(parts) < _LIST_MIN_FIELDS:
                continue
            if not parts[0].startswith("%") or not all(p.isdigit() for p in parts[1:5]):
                continue
            pane = Pane(
                pane_id=parts[0],
                width=int(parts[1]),
                height=int(parts[2]),
                command=parts[5] if len(parts) > 5 else "",
            )
            boxes.append(_PaneBox(pane=pane, left=int(parts[3]), top=int(parts[4])))
        return boxes

    def list_panes(self) -> list[Pane]:
        return [box.pane for box in self._list_boxes()]

    def get_neighbor(self, pane_id: str, direction: Direction) -> str | None:
        """Find the neighbor from pane geometry.

        When several panes share the edge, the one lined up with the
        reference pane's top-left corner wins.
        """
        boxes = self._list_boxes(pane_id)
        ref = next((box for box in boxes if box.pane.pane_id == pane_id), None)
        if ref is None:
            return None

        candidates = [box for box in boxes if box is not ref and _is_adjacent(ref, box, direction)]
        if not candidates:
            return None
        if direction in (Direction.LEFT, Direction.RIGHT):
            aligned = [box for box in candidates if box.top <= ref.top <= box.bottom]
        else:
            aligned = [box for box in candidates if box.left <= ref.left <= box.right]
        return (aligned or candidates)[0].pane.pane_id

    def split_pane(self, pane_id: str, direction: Direction, percent: int | None = None) -> str:
        cmd = ["tmux", "split-window", "-P", "-F", "#{pane_id}", "-t", pane_id]
        cmd.append("-h" if direction in (Direction.LEFT, Direction.RIGHT) else "-v")
        if direction in (Direction.LEFT, Direction.UP):
            cmd.append("-b")
        if percent is not None:
            cmd.extend(["-p", str(percent)])

        new_pane_id = self.run(cmd).strip()
        try:
            _validate_pane_id(new_pane_id, f"{direction.value} split")
        except ValueError as e:
            raise MultiplexerError(cmd, str(e)) from None
        return new_pane_id

    def resize_pane(self, pane_id: str, direction: Direction, amount: int) -> None:
        self._check_amount(amount)
        self.run(["tmux", "resize-pane", "-t", pane_id, _RESIZE_FLAGS[direction], str(amount)])

    def focus_pane(self, pane_id: str) -> None:
        self.run(["tmux", "select-pane", "-t", pane_id])

    def inject_text(self, pane_id: str, text: str) -> None:
        # -l sends the text literally; the newline goes as a separate Enter key
        self.run(["tmux", "send-keys", "-t", pane_id, "-l", "--", text])
        self.run(["tmux", "send-keys", "-t", pane_id, "Enter"])

    def send_escape(self, pane_id: str) -> None:
        self.run(["tmux", "send-keys", "-t", pane_id, "Escape"])

    def read_screen_text(self, pane_id: str | None = None) -> str:
        cmd = ["tmux", "capture-pane", "-p"]
        if pane_id is not None:
            cmd.extend(["-t", pane_id])
        return self.run(cmd)
