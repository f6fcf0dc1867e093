"""Proportional width layouts for the explorer / editor / tool pane row."""

from dataclasses import dataclass
from enum import StrEnum

from rich.console import Console
from rich.markup import escape

from hxmux.config import LayoutPreset
from hxmux.errors import MultiplexerError
from hxmux.locator import locate_pane
from hxmux.multiplexer import Direction, Multiplexer


class PresetName(StrEnum):
    """Built-in layout presets."""

    DEFAULT = "default"
    LARGE = "large"  # large terminal, roomier tool pane
    SMALL = "small"  # small terminal, keep the editor readable


BUILTIN_PRESETS: dict[PresetName, LayoutPreset] = {
    PresetName.DEFAULT: LayoutPreset(left=20, center=60, right=20),
    PresetName.LARGE: LayoutPreset(left=15, center=55, right=30),
    PresetName.SMALL: LayoutPreset(left=25, center=50, right=25),
}

# Layout descriptions for the presets command
PRESET_DESCRIPTIONS: dict[PresetName, str] = {
    PresetName.DEFAULT: "Explorer / editor / tools at 20/60/20",
    PresetName.LARGE: "Wider tool pane for large terminals (15/55/30)",
    PresetName.SMALL: "Even split for small terminals (25/50/25)",
}


def resolve_preset(name: PresetName | str, overrides: dict[str, LayoutPreset] | None = None) -> LayoutPreset:
    """Look up a preset, letting configured presets replace built-in ones.

    Args:
        name: Preset name.
        overrides: Presets from the config file, keyed by name.

    Returns:
        The preset percentages.

    Raises:
        KeyError: If no preset has that name.
    """
    key = str(name)
    if overrides and key in overrides:
        return overrides[key]
    try:
        return BUILTIN_PRESETS[PresetName(key)]
    except ValueError:
        raise KeyError(key) from None


@dataclass
class ResizeOp:
    """One relative resize issued by the layout engine."""

    pane_id: str
    direction: Direction
    amount: int


def cells_per_percent(total_width: int) -> int:
    """Cells per percentage point, never below one."""
    return max(1, total_width // 100)


def resize_to_layout(
    mux: Multiplexer,
    pane_ids: list[str],
    target_percents: list[int],
    current_widths: list[int],
    total_width: int,
) -> list[ResizeOp]:
    """Resize a row of panes toward target width percentages.

    Every pane but the last is resized once, against its own current width.
    The last pane takes whatever width is left over. Rounding drift is
    accepted. On backends that always move a pane's right border, the slack
    handed to the right neighbor is counted into that neighbor's width.

    Args:
        mux: The multiplexer client.
        pane_ids: Panes from left to right.
        target_percents: Target width of each pane, in percent.
        current_widths: Current width of each pane, in cells.
        total_width: Width of the whole row, in cells.

    Returns:
        The resize operations that were issued, in order.

    Raises:
        ValueError: If the three sequences differ in length.
    """
    if not len(pane_ids) == len(target_percents) == len(current_widths):
        raise ValueError(
            f"Layout needs one target and one width per pane "
            f"(got {len(pane_ids)} panes, {len(target_percents)} targets, {len(current_widths)} widths)"
        )

    unit = cells_per_percent(total_width)
    last_adjusted = len(pane_ids) - 2
    widths = list(current_widths)
    ops: list[ResizeOp] = []

    for index, pane_id in enumerate(pane_ids[:-1]):
        delta = widths[index] - target_percents[index] * unit
        if delta == 0:
            continue

        # The pane next to the fixed last pane moves its edge the other way
        if index == last_adjusted and not mux.resizes_right_border:
            shrink, grow = Direction.RIGHT, Direction.LEFT
        else:
            shrink, grow = Direction.LEFT, Direction.RIGHT

        op = ResizeOp(pane_id=pane_id, direction=shrink if delta > 0 else grow, amount=abs(delta))
        mux.focus_pane(pane_id)
        mux.resize_pane(op.pane_id, op.direction, op.amount)
        ops.append(op)

        if mux.resizes_right_border:
            widths[index + 1] += delta

    return ops


def apply_preset(
    mux: Multiplexer,
    reference: str,
    preset: LayoutPreset,
    left_percent: int | None = None,
    debug_console: Console | None = None,
) -> list[ResizeOp]:
    """Build the left / editor / right row around reference and resize it.

    Args:
        mux: The multiplexer client.
        reference: The editor pane.
        preset: Target percentages for the row.
        left_percent: Split size used if the left pane must be created.
        debug_console: When set, widths and targets are printed here.

    Returns:
        The resize operations that were issued.
    """
    left = locate_pane(mux, reference, Direction.LEFT, left_percent)
    right = locate_pane(mux, reference, Direction.RIGHT)
    pane_ids = [left, reference, right]

    widths = {pane.pane_id: pane.width for pane in mux.list_panes()}
    missing = [pane_id for pane_id in pane_ids if pane_id not in widths]
    if missing:
        raise MultiplexerError([mux.name, "list"], f"panes missing from pane list: {', '.join(missing)}")

    current = [widths[pane_id] for pane_id in pane_ids]
    targets = [preset.left, preset.center, preset.right]
    if debug_console is not None:
        detail = f"Panes {pane_ids} widths {current} targets {targets}"
        debug_console.print(f"[dim]{escape(detail)}[/]", highlight=False)

    ops = resize_to_layout(mux, pane_ids, targets, current, sum(current))
    mux.focus_pane(reference)
    return ops
