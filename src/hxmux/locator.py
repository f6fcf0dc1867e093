"""Get-or-create lookup of panes adjacent to a reference pane."""

from hxmux.errors import NoNeighborPane
from hxmux.multiplexer import Direction, Multiplexer


def locate_pane(mux: Multiplexer, reference: str, direction: Direction, percent: int | None = None) -> str:
    """Return the pane next to reference, splitting one off if none exists.

    Repeated calls reuse the existing neighbor instead of stacking new splits.

    Args:
        mux: The multiplexer client.
        reference: Pane to look around.
        direction: Side of the reference pane to look at.
        percent: Size of the new pane when a split is needed.

    Returns:
        The neighbor's pane id.
    """
    neighbor = mux.get_neighbor(reference, direction)
    if neighbor is not None:
        return neighbor
    return mux.split_pane(reference, direction, percent)


def require_neighbor(mux: Multiplexer, reference: str, direction: Direction) -> str:
    """Return the existing pane next to reference.

    Raises:
        NoNeighborPane: If nothing sits on that side.
    """
    neighbor = mux.get_neighbor(reference, direction)
    if neighbor is None:
        raise NoNeighborPane(f"No pane to the {direction.value} of pane {reference}")
    return neighbor
