"""Recover the open file and cursor line from Helix's rendered status line.

The status line looks like::

    NOR   ⠿ src/main.rs [+] │ 1 sel │ 42:7

The scanner walks it token by token: mode indicator, decorative glyphs,
filename, then the ``│`` separated sections. The line number is the first
section starting with ``line:column``, or failing that the first section
starting with a digit run.
"""

from collections.abc import Callable
from dataclasses import dataclass

from hxmux.errors import StatusParseError

MODE_INDICATORS = ("NORMAL", "NOR", "INSERT", "INS", "SELECT", "SEL")
_MODE_INITIALS = frozenset(mode[0] for mode in MODE_INDICATORS)
SEPARATOR = "│"

# Spinner and icon chrome drawn around the filename
_GLYPH_RANGES = (
    (0x2800, 0x28FF),  # Braille patterns
    (0xE000, 0xF8FF),  # Private Use Area (Nerd Font icons)
)


def _is_glyph(char: str) -> bool:
    code = ord(char)
    return any(low <= code <= high for low, high in _GLYPH_RANGES)


@dataclass
class EditorContext:
    """The editor's current file and cursor line."""

    filename: str
    line: str

    @property
    def basename(self) -> str:
        return self.filename.rpartition("/")[2]

    @property
    def parent(self) -> str:
        """Directory part of the filename, empty when there is none."""
        return self.filename.rpartition("/")[0]

    @property
    def stem(self) -> str:
        """Basename up to its first dot (``.gitignore`` gives ``""``)."""
        return self.basename.partition(".")[0]

    @property
    def extension(self) -> str:
        """Basename after its last dot (``.gitignore`` gives ``"gitignore"``)."""
        _, dot, tail = self.basename.rpartition(".")
        return tail if dot else ""


class _LineScanner:
    """Cursor over a single screen line."""

    def __init__(self, line: str, pos: int = 0) -> None:
        self.line = line
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.line)

    def peek(self) -> str:
        return "" if self.at_end() else self.line[self.pos]

    def skip_whitespace(self) -> int:
        start = self.pos
        while not self.at_end() and self.line[self.pos].isspace():
            self.pos += 1
        return self.pos - start

    def skip_glyphs(self) -> None:
        while not self.at_end() and (self.line[self.pos].isspace() or _is_glyph(self.line[self.pos])):
            self.pos += 1

    def take_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        while not self.at_end() and predicate(self.line[self.pos]):
            self.pos += 1
        return self.line[start : self.pos]

    def match_mode(self) -> bool:
        """Consume a mode indicator followed by whitespace."""
        if self.pos > 0 and (self.line[self.pos - 1].isalnum() or self.line[self.pos - 1] == "_"):
            return False
        for mode in MODE_INDICATORS:
            if self.line.startswith(mode, self.pos):
                after = self.pos + len(mode)
                if after < len(self.line) and self.line[after].isspace():
                    self.pos = after
                    return True
        return False


def _filename_char(char: str) -> bool:
    return not char.isspace() and char != SEPARATOR


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _scan_from(line: str, start: int) -> tuple[str, str] | None:
    scanner = _LineScanner(line, start)
    if not scanner.match_mode():
        return None
    if scanner.skip_whitespace() == 0:
        return None
    scanner.skip_glyphs()

    filename = scanner.take_while(_filename_char)
    if not filename:
        return None

    # Sections after a separator that start with digits; a "line:column"
    # section beats a bare count such as "1 sel"
    first_number = ""
    while not scanner.at_end():
        scanner.take_while(lambda c: c != SEPARATOR)
        if scanner.at_end():
            break
        scanner.pos += 1
        scanner.skip_whitespace()
        line_number = scanner.take_while(_is_digit)
        if not line_number:
            continue
        if scanner.peek() == ":":
            return filename, line_number
        first_number = first_number or line_number

    if first_number:
        return filename, first_number
    return None


def _scan_line(line: str) -> tuple[str, str] | None:
    for start in range(len(line)):
        if line[start] not in _MODE_INITIALS:
            continue
        found = _scan_from(line, start)
        if found is not None:
            return found
    return None


def parse_status_line(text: str) -> tuple[str, str]:
    """Find the first status line in screen text.

    Args:
        text: Rendered screen text of the editor pane.

    Returns:
        Tuple of (filename, line number as text).

    Raises:
        StatusParseError: If no line carries a mode indicator, filename and line number.
    """
    for line in text.splitlines():
        found = _scan_line(line)
        if found is not None:
            return found
    raise StatusParseError("Could not find the editor status line (mode, filename and line number)")


def parse_editor_context(text: str) -> EditorContext:
    """Parse screen text into an EditorContext."""
    filename, line = parse_status_line(text)
    return EditorContext(filename=filename, line=line)
