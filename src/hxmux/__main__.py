"""CLI entry point for hxmux."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hxmux import __version__, actions
from hxmux.backends import create_multiplexer
from hxmux.config import Config, display_config_warnings, load_config, save_config
from hxmux.errors import HxmuxError, MissingProgram
from hxmux.layouts import PRESET_DESCRIPTIONS, PresetName, resolve_preset
from hxmux.multiplexer import Multiplexer, make_runner
from hxmux.utils import is_program_available, template_programs
from hxmux.xdg_paths import get_config_file_path

app = typer.Typer(
    name="hxmux",
    help="Drive WezTerm or tmux panes around the Helix editor.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


@dataclass
class _State:
    """Options shared by every command."""

    config: Config
    debug: bool = False

    @property
    def debug_console(self) -> Console | None:
        return err_console if self.debug else None


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"hxmux {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-C", help="Config file path."),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-D", help="Print multiplexer commands and parsed editor context."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version."),
    ] = None,
) -> None:
    """Launch companion tools and arrange panes around Helix."""
    config, config_warnings = load_config(config_path, project_dir=Path.cwd())
    display_config_warnings(config_warnings, err_console)
    ctx.obj = _State(config=config, debug=debug)

    if debug:
        err_console.print(f"[dim]Config file: {config_path or get_config_file_path()}[/]", highlight=False)


@contextmanager
def _handle_errors(step: str) -> Iterator[None]:
    """Report a failed action and exit non-zero."""
    try:
        yield
    except (HxmuxError, ValueError, KeyError) as e:
        message = e.args[0] if isinstance(e, KeyError) and e.args else e
        err_console.print(f"[red]Error:[/] {step} failed: {escape(str(message))}", highlight=False)
        raise typer.Exit(1) from None


def _connect(state: _State) -> tuple[Multiplexer, str]:
    """Create the multiplexer client and read the invoking pane's id."""
    mux = create_multiplexer(state.config.backend, make_runner(state.debug_console))
    reference = mux.current_pane_id()
    if state.debug:
        err_console.print(f"[dim]Backend: {mux.name}, pane id {reference}[/]", highlight=False)
    return mux, reference


def _require_programs(template: str) -> None:
    """Fail before touching panes when a program in template is not installed."""
    missing = [program for program in template_programs(template) if not is_program_available(program)]
    if missing:
        raise MissingProgram(f"not found on PATH: {', '.join(missing)}")


def _report_pane(state: _State, pane_id: str) -> None:
    if state.debug:
        err_console.print(f"[dim]pane id {pane_id}[/]", highlight=False)


@app.command()
def blame(ctx: typer.Context) -> None:
    """Open a blame view of the current file at the cursor line."""
    state: _State = ctx.obj
    with _handle_errors("blame"):
        _require_programs(state.config.commands.blame)
        mux, reference = _connect(state)
        pane_id = actions.blame(mux, reference, state.config, Path.cwd(), state.debug_console)
    _report_pane(state, pane_id)


@app.command()
def check(ctx: typer.Context) -> None:
    """Run cargo check for the crate of the current Rust file."""
    state: _State = ctx.obj
    with _handle_errors("check"):
        mux, reference = _connect(state)
        pane_id = actions.check(mux, reference, state.config, Path.cwd(), state.debug_console)
    if pane_id is None:
        console.print("[yellow]Nothing to check:[/] the current file is not Rust source.")
        return
    _report_pane(state, pane_id)


@app.command()
def explorer(ctx: typer.Context) -> None:
    """Show the file explorer in the left pane."""
    state: _State = ctx.obj
    with _handle_errors("explorer"):
        _require_programs(state.config.explorer.command)
        mux, reference = _connect(state)
        pane_id = actions.explorer(mux, reference, state.config)
    _report_pane(state, pane_id)


@app.command()
def fzf(ctx: typer.Context) -> None:
    """Search the project with ripgrep and fzf in the right pane."""
    state: _State = ctx.obj
    with _handle_errors("fzf"):
        _require_programs(state.config.commands.fzf)
        mux, reference = _connect(state)
        pane_id = actions.fzf(mux, reference, state.config, Path.cwd())
    _report_pane(state, pane_id)


@app.command("fzf-open")
def fzf_open(
    ctx: typer.Context,
    location: Annotated[str, typer.Argument(help="Search result as path:line:column.")],
) -> None:
    """Open a search result in the editor pane (called back by fzf)."""
    state: _State = ctx.obj
    with _handle_errors("fzf-open"):
        mux, reference = _connect(state)
        pane_id = actions.fzf_open(mux, reference, location)
    _report_pane(state, pane_id)


@app.command("open")
def open_in_browser(ctx: typer.Context) -> None:
    """Open the current file and line in the browser."""
    state: _State = ctx.obj
    with _handle_errors("open"):
        _require_programs(state.config.commands.browse)
        mux, reference = _connect(state)
        actions.browse(mux, reference, state.config, Path.cwd(), debug_console=state.debug_console)


def _apply_layout(ctx: typer.Context, preset: PresetName) -> None:
    state: _State = ctx.obj
    with _handle_errors(f"layout {preset.value}"):
        mux, reference = _connect(state)
        ops = actions.layout(mux, reference, state.config, preset, state.debug_console)
    if state.debug:
        for op in ops:
            err_console.print(f"[dim]resize {op.pane_id} {op.direction.value} {op.amount}[/]", highlight=False)


@app.command("layout-default")
def layout_default(ctx: typer.Context) -> None:
    """Arrange explorer / editor / tools with the default proportions."""
    _apply_layout(ctx, PresetName.DEFAULT)


@app.command("layout-large")
def layout_large(ctx: typer.Context) -> None:
    """Arrange panes for a large terminal."""
    _apply_layout(ctx, PresetName.LARGE)


@app.command("layout-small")
def layout_small(ctx: typer.Context) -> None:
    """Arrange panes for a small terminal."""
    _apply_layout(ctx, PresetName.SMALL)


@app.command()
def presets(ctx: typer.Context) -> None:
    """List layout presets."""
    state: _State = ctx.obj
    table = Table(title="Layout Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Left / Center / Right")
    table.add_column("Description")

    for name in PresetName:
        preset = resolve_preset(name, state.config.presets)
        source = "configured" if name.value in state.config.presets else PRESET_DESCRIPTIONS[name]
        table.add_row(name.value, f"{preset.left} / {preset.center} / {preset.right}", source)

    console.print(table)


@app.command()
def init_config() -> None:
    """Create default configuration file."""
    config_file = get_config_file_path()

    if config_file.exists():
        err_console.print(f"[yellow]Config file already exists:[/] {config_file}")
        raise typer.Exit(1)

    save_config(Config(), config_file)
    console.print(f"[green]✓[/] Created config file: {config_file}")


if __name__ == "__main__":
    app()
