"""Selection of the multiplexer backend."""

import os
from collections.abc import Mapping

from hxmux.config import BackendType
from hxmux.multiplexer import CommandRunner, Multiplexer
from hxmux.tmux import TmuxMultiplexer
from hxmux.wezterm import WeztermMultiplexer

_BACKENDS: dict[BackendType, type[Multiplexer]] = {
    BackendType.WEZTERM: WeztermMultiplexer,
    BackendType.TMUX: TmuxMultiplexer,
}


def detect_backend(environ: Mapping[str, str] | None = None) -> BackendType:
    """Pick the backend from the pane id variable that is set.

    tmux wins when both are set: a tmux session inside WezTerm inherits
    WEZTERM_PANE, but its panes belong to tmux.
    """
    env = os.environ if environ is None else environ
    if env.get(TmuxMultiplexer.pane_env_var):
        return BackendType.TMUX
    return BackendType.WEZTERM


def create_multiplexer(
    backend: BackendType = BackendType.AUTO,
    runner: CommandRunner | None = None,
    environ: Mapping[str, str] | None = None,
) -> Multiplexer:
    """Build a multiplexer client.

    Args:
        backend: Configured backend; AUTO detects it from the environment.
        runner: Command runner, defaults to running subprocesses.
        environ: Environment used for detection.

    Returns:
        The multiplexer client.
    """
    if backend == BackendType.AUTO:
        backend = detect_backend(environ)
    return _BACKENDS[backend](runner)
