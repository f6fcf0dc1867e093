"""User-facing actions composed from the pane locator, layouts and status parser.

Each action receives the pane it was invoked from explicitly; nothing here
reads the environment.
"""

import shlex
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from hxmux.config import Config
from hxmux.layouts import PresetName, ResizeOp, apply_preset, resolve_preset
from hxmux.locator import locate_pane, require_neighbor
from hxmux.multiplexer import CommandRunner, Direction, Multiplexer, make_runner
from hxmux.status import EditorContext, parse_editor_context
from hxmux.utils import crate_dir, render_command, split_location

PROGRAM_NAME = "hxmux"


def _template_values(cwd: Path, context: EditorContext | None = None) -> dict[str, str]:
    values = {"cwd": str(cwd), "program": PROGRAM_NAME}
    if context is not None:
        values.update(
            filename=context.filename,
            line=context.line,
            parent=context.parent,
            basename=context.basename,
            stem=context.stem,
            extension=context.extension,
            crate_dir=crate_dir(context.filename),
        )
    return values


def _cd(path: Path | str) -> str:
    return f"cd {shlex.quote(str(path))}"


def read_context(mux: Multiplexer, editor: str, debug_console: Console | None = None) -> EditorContext:
    """Parse the editor pane's status line."""
    context = parse_editor_context(mux.read_screen_text(editor))
    if debug_console is not None:
        debug_console.print(f"[dim]Filename: {escape(context.filename)}[/]", highlight=False)
        debug_console.print(f"[dim]Line Number: {context.line}[/]", highlight=False)
    return context


def _run_in_pane(mux: Multiplexer, pane_id: str, command: str) -> str:
    mux.inject_text(pane_id, command)
    mux.focus_pane(pane_id)
    return pane_id


def blame(
    mux: Multiplexer,
    reference: str,
    config: Config,
    cwd: Path,
    debug_console: Console | None = None,
) -> str:
    """Open the blame viewer for the current file and line in the right pane.

    Returns:
        The pane the blame viewer runs in.
    """
    context = read_context(mux, reference, debug_console)
    pane_id = locate_pane(mux, reference, Direction.RIGHT)
    command = render_command(config.commands.blame, **_template_values(cwd, context))
    return _run_in_pane(mux, pane_id, f"{_cd(cwd)}; {command}")


def check(
    mux: Multiplexer,
    reference: str,
    config: Config,
    cwd: Path,
    debug_console: Console | None = None,
) -> str | None:
    """Run the build checker for the current Rust crate in the right pane.

    Returns:
        The pane the checker runs in, or None if the file is not Rust source.
    """
    context = read_context(mux, reference, debug_console)
    if context.extension != "rs":
        return None

    pane_id = locate_pane(mux, reference, Direction.RIGHT)
    project = cwd / crate_dir(context.filename)
    command = render_command(config.commands.check, **_template_values(cwd, context))
    return _run_in_pane(mux, pane_id, f"{_cd(project)}; {command}")


def explorer(mux: Multiplexer, reference: str, config: Config) -> str:
    """Show the file explorer in the left pane, starting it if needed.

    Returns:
        The explorer pane.
    """
    pane_id = locate_pane(mux, reference, Direction.LEFT, config.explorer.percent)
    if mux.pane_command(pane_id) != config.explorer.process:
        mux.inject_text(pane_id, config.explorer.command)
    mux.focus_pane(pane_id)
    return pane_id


def fzf(mux: Multiplexer, reference: str, config: Config, cwd: Path) -> str:
    """Start a ripgrep + fzf search in the right pane.

    The selection is sent back through ``hxmux fzf-open``.

    Returns:
        The search pane.
    """
    pane_id = locate_pane(mux, reference, Direction.RIGHT)
    command = render_command(config.commands.fzf, **_template_values(cwd))
    return _run_in_pane(mux, pane_id, f"{_cd(cwd)}; {command}")


def fzf_open(mux: Multiplexer, reference: str, location: str) -> str:
    """Open a search result in the editor to the left of the search pane.

    Args:
        mux: The multiplexer client.
        reference: The search pane the callback runs in.
        location: ``path:line:column`` token printed by ripgrep.

    Returns:
        The editor pane.
    """
    path, line = split_location(location)
    if not path:
        raise ValueError(f"No file path in search result: {location!r}")

    editor = require_neighbor(mux, reference, Direction.LEFT)
    target = f"{path}:{line}" if line else path
    # Leave insert/select mode first
    mux.send_escape(editor)
    return _run_in_pane(mux, editor, f":open {target}")


def browse(
    mux: Multiplexer,
    reference: str,
    config: Config,
    cwd: Path,
    runner: CommandRunner | None = None,
    debug_console: Console | None = None,
) -> list[str]:
    """Open the current file and line in the browser.

    Returns:
        The command that was run.
    """
    context = read_context(mux, reference, debug_console)
    command = shlex.split(render_command(config.commands.browse, **_template_values(cwd, context)))
    (runner or make_runner(debug_console))(command)
    return command


def layout(
    mux: Multiplexer,
    reference: str,
    config: Config,
    preset: PresetName | str,
    debug_console: Console | None = None,
) -> list[ResizeOp]:
    """Arrange the explorer / editor / tool row using a named preset.

    Raises:
        KeyError: If the preset is unknown.
    """
    return apply_preset(
        mux,
        reference,
        resolve_preset(preset, config.presets),
        left_percent=config.explorer.percent,
        debug_console=debug_console,
    )
