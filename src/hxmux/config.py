"""Configuration management for hxmux."""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import cast

import yaml
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from hxmux.xdg_paths import get_config_file_path

PROJECT_CONFIG_NAME = ".hxmux.yaml"


class BackendType(StrEnum):
    """Supported terminal multiplexers."""

    AUTO = "auto"  # tmux if TMUX_PANE is set, else WezTerm
    WEZTERM = "wezterm"
    TMUX = "tmux"


class LayoutPreset(BaseModel):
    """Target widths, in percent, of the explorer / editor / tool pane row."""

    left: int = Field(ge=1, le=98)
    center: int = Field(ge=1, le=98)
    right: int = Field(ge=1, le=98)


class ExplorerConfig(BaseModel):
    """File explorer shown in the left pane."""

    command: str = "broot"
    process: str = "broot"  # foreground process name when already running
    percent: int = Field(default=20, ge=1, le=90)


class CommandTemplates(BaseModel):
    """Shell command templates.

    Available fields: {cwd}, {filename}, {line}, {parent}, {basename}, {stem},
    {extension}, {crate_dir}, {program}. Values are shell-quoted before
    substitution. Literal braces must be doubled.
    """

    blame: str = "tig blame +{line} {filename}"
    check: str = "cargo check"
    fzf: str = (
        "rg --line-number --column --no-heading --smart-case . "
        "| fzf --delimiter : "
        "--preview 'bat --style=full --color=always --highlight-line {{2}} {{1}}' "
        "--preview-window '~3,+{{2}}+3/2' "
        "| cut -d: -f1,2,3 "
        "| xargs -r {program} fzf-open"
    )
    browse: str = "gh browse {filename}:{line}"


@dataclass
class ConfigWarning:
    """A problem found while loading config, reported but not fatal."""

    source: str  # file the value came from
    key: str  # dotted option path, empty for file-level problems
    message: str
    value: object = field(default=None, repr=False)

    def describe(self) -> str:
        where = f"{self.source}: {self.key}" if self.key else self.source
        return f"{where}: {self.message}"


class Config(BaseModel):
    """Configuration settings for hxmux."""

    backend: BackendType = BackendType.AUTO
    explorer: ExplorerConfig = ExplorerConfig()
    commands: CommandTemplates = CommandTemplates()

    # Replace or extend the built-in default/large/small presets
    presets: dict[str, LayoutPreset] = {}

    # When true in a project config, ignore the user config
    ignore_parent_configs: bool = False


def _deep_merge(base: dict[str, object], override: dict[str, object]) -> dict[str, object]:
    """Overlay override onto base, merging nested mappings key by key.

    Args:
        base: Lower-priority values.
        override: Higher-priority values.

    Returns:
        A new dictionary; neither argument is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        below = merged.get(key)
        if isinstance(below, dict) and isinstance(value, dict):
            value = _deep_merge(cast(dict[str, object], below), cast(dict[str, object], value))
        merged[key] = value
    return merged


def _load_yaml_file(path: Path) -> tuple[dict[str, object], list[ConfigWarning]]:
    """Read one YAML config file.

    A missing file, or one whose top level is not a mapping, yields no
    values. Read and parse errors yield no values plus a warning.

    Args:
        path: Path to the YAML file.

    Returns:
        Tuple of (top-level mapping, warnings).
    """
    if not path.is_file():
        return {}, []
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        problem = "cannot read file" if isinstance(e, OSError) else "YAML parse error"
        return {}, [ConfigWarning(source=str(path), key="", message=f"{problem}: {e}")]
    if not isinstance(raw, dict):
        return {}, []
    return cast(dict[str, object], raw), []


def load_config(
    config_path: Path | None = None,
    project_dir: Path | None = None,
) -> tuple[Config, list[ConfigWarning]]:
    """Load configuration with layered merging.

    Loading order (last value wins via deep merge):
    1. User config (~/.config/hxmux/config.yaml)
    2. Project config (.hxmux.yaml in project_dir)

    Invalid top-level keys are dropped with a warning naming the file that set
    them, and the rest is kept.

    Args:
        config_path: Optional path to user config file. Uses default if None.
        project_dir: Optional project directory containing .hxmux.yaml.

    Returns:
        Tuple of (loaded Config, list of ConfigWarnings).
    """
    user_path = config_path or get_config_file_path()
    merged, warnings = _load_yaml_file(user_path)
    sources = dict.fromkeys(merged, str(user_path))

    if project_dir:
        project_path = project_dir / PROJECT_CONFIG_NAME
        project_config, project_warnings = _load_yaml_file(project_path)
        warnings.extend(project_warnings)
        if project_config.get("ignore_parent_configs", False):
            merged, sources = project_config, {}
        else:
            merged = _deep_merge(merged, project_config)
        sources.update(dict.fromkeys(project_config, str(project_path)))

    try:
        return Config.model_validate(merged), warnings
    except ValidationError as e:
        errors = e.errors()

    bad_keys: set[str] = set()
    for error in errors:
        loc = [str(part) for part in error["loc"]]
        top = loc[0] if loc else ""
        warnings.append(
            ConfigWarning(
                source=sources.get(top, str(user_path)),
                key=".".join(loc),
                message=error["msg"],
                value=error.get("input"),
            )
        )
        bad_keys.add(top)

    kept = {key: value for key, value in merged.items() if key not in bad_keys}
    try:
        return Config.model_validate(kept), warnings
    except ValidationError:
        return Config(), warnings


def display_config_warnings(warnings: list[ConfigWarning], console: Console) -> None:
    """Show config warnings in a yellow panel.

    Args:
        warnings: Warnings to show; nothing is printed when empty.
        console: Rich console to output to.
    """
    if not warnings:
        return

    lines = Text("\n").join(
        Text.assemble(
            (warning.describe(), "yellow"),
            (f" (got {warning.value!r})" if warning.value is not None else "", "dim"),
        )
        for warning in warnings
    )
    console.print(
        Panel(lines, title="[yellow]Config Warnings[/]", subtitle="invalid values were ignored", border_style="yellow")
    )


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to YAML file.

    Args:
        config: The configuration to save.
        config_path: Optional path to config file. Uses default if None.
    """
    path = config_path or get_config_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        yaml.dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)
