from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TextIO

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style

from scat.core.theme import Theme
from scat.models import Fragment, RenderedLine

logger = logging.getLogger(__name__)

_COLOR_SYSTEMS = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}


def detect_color_system(stream: TextIO) -> ColorSystem:
    """Ask rich what the terminal supports; assume 16 colors when it cannot tell."""
    console = Console(file=stream, force_terminal=True)
    return _COLOR_SYSTEMS.get(console.color_system or "", ColorSystem.STANDARD)


class TerminalSink:
    """Write RenderedLines as ANSI styled text.

    Styles are rendered with ``Style.render`` rather than ``rich.text.Text``
    so control characters in the content reach the terminal untouched.
    """

    def __init__(self, stream: TextIO, theme: Theme, color_system: ColorSystem | None = None) -> None:
        self._stream = stream
        self._theme = theme
        self._color_system = color_system
        self._wrote_output = False
        self._ended_with_newline = True

    @property
    def ended_with_newline(self) -> bool:
        return self._ended_with_newline

    def _style(self, fragment: Fragment) -> Style | None:
        if self._color_system is None:
            return None
        return self._theme.resolve(fragment.style)

    def _render(self, fragments: Iterable[Fragment]) -> str:
        parts: list[str] = []
        for fragment in fragments:
            style = self._style(fragment)
            if style is None:
                parts.append(fragment.text)
            else:
                parts.append(style.render(fragment.text, color_system=self._color_system))
        return "".join(parts)

    def _terminate_dangling_line(self) -> None:
        if self._wrote_output and not self._ended_with_newline:
            self._stream.write("\n")
            self._ended_with_newline = True

    def _write(self, text: str) -> None:
        try:
            text.encode("utf-8")
        except UnicodeEncodeError:
            # Lone surrogates stand for bytes that were not valid UTF-8 in the input.
            data = text.encode("utf-8", errors="surrogateescape")
            binary = getattr(self._stream, "buffer", None)
            if binary is not None:
                self._stream.flush()
                binary.write(data)
                return
            text = data.decode("utf-8", errors="replace")
        self._stream.write(text)

    def write_line(self, line: RenderedLine) -> None:
        """Write one line; a dangling previous line is only closed before a decoration prefix."""
        if line.prefix:
            self._terminate_dangling_line()
        self._write(self._render(line.prefix) + self._render(line.content))
        if line.has_trailing_newline:
            self._stream.write("\n")
        self._wrote_output = True
        self._ended_with_newline = line.has_trailing_newline

    def write_lines(self, lines: Iterable[RenderedLine]) -> int:
        count = 0
        for line in lines:
            self.write_line(line)
            count += 1
        return count

    def write_header(self, name: str) -> None:
        self._terminate_dangling_line()
        self._stream.write(f"==> {name} <==\n")
        self._wrote_output = True
        self._ended_with_newline = True

    def write_raw(self, data: bytes) -> None:
        """Pass bytes through unchanged, as plain ``cat`` would."""
        if not data:
            return
        binary = getattr(self._stream, "buffer", None)
        if binary is not None:
            self._stream.flush()
            binary.write(data)
        else:
            self._stream.write(data.decode("utf-8", errors="replace"))
        self._wrote_output = True
        self._ended_with_newline = data.endswith(b"\n")

    def flush(self) -> None:
        self._stream.flush()
