"""Utility functions for hxmux."""

import shlex
import shutil


def render_command(template: str, **values: str) -> str:
    """Fill a shell command template with shell-quoted values.

    Args:
        template: A str.format template, e.g. ``"tig blame +{line} {filename}"``.
        **values: Field values; each is quoted with shlex.quote.

    Returns:
        The command line.

    Raises:
        ValueError: If the template names an unknown field.
    """
    quoted = {key: shlex.quote(value) for key, value in values.items()}
    try:
        return template.format(**quoted)
    except KeyError as e:
        raise ValueError(f"Unknown field {e} in command template: {template!r}") from None


def crate_dir(filename: str) -> str:
    """Directory of the Cargo crate holding filename.

    The crate is assumed to live above the last ``src/`` component; without
    one, the file's own directory is used.

    Args:
        filename: Path as shown in the editor, usually relative.

    Returns:
        Directory path without a trailing slash, empty for the current directory.
    """
    head, sep, _ = filename.rpartition("src/")
    if sep and (not head or head.endswith("/")):
        return head.rstrip("/")
    return filename.rpartition("/")[0]


def split_location(token: str) -> tuple[str, str]:
    """Split a ``path:line:column:...`` token from ripgrep into path and line.

    Args:
        token: Colon-delimited location.

    Returns:
        Tuple of (path, line). Line is empty when the token has none.
    """
    parts = token.strip().split(":")
    path = parts[0]
    line = parts[1] if len(parts) > 1 and parts[1].isdigit() else ""
    return path, line



def is_program_available(program: str) -> bool:
    """Check if a program is on PATH."""
    return shutil.which(program) is not None


def template_programs(template: str) -> list[str]:
    """Programs started by a command template, one per pipeline stage.

    Args:
        template: A shell command template.

    Returns:
        The first word of each ``|``-separated stage, in order.
    """
    programs: list[str] = []
    expect_program = True
    for token in shlex.split(template):
        if token == "|":
            expect_program = True
        elif expect_program:
            programs.append(token)
            expect_program = False
    return programs
