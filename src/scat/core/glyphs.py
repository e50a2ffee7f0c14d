"""Visible replacements for unprintable characters (``--show-all``).

Similar to ``cat -A``, except that every replacement keeps the style of the
character it stands for, so syntax highlighting survives.
"""

import os
from collections.abc import Mapping
from enum import Enum

from scat.models import GlyphSubstitution

EOL_STYLE = "scat.eol"


class GlyphStyle(str, Enum):
    UNICODE = "unicode"
    CARET = "caret"


_UNICODE_GLYPHS = {
    " ": ("space", "·"),
    "\t": ("tab", "→"),
    "\r": ("carriage-return", "↵"),
    "\x1b": ("escape", "␛"),
    "\x7f": ("delete", "␡"),
}

_CARET_GLYPHS = {
    " ": ("space", "·"),
    "\t": ("tab", "^I"),
    "\r": ("carriage-return", "^M"),
    "\x1b": ("escape", "^["),
    "\x7f": ("delete", "^?"),
}

_EOL_GLYPHS = {
    GlyphStyle.UNICODE: "␊",
    GlyphStyle.CARET: "$",
}


def detect_glyph_style(environ: Mapping[str, str] | None = None) -> GlyphStyle:
    """Pick unicode glyphs unless the locale says the terminal is not UTF-8."""
    env = os.environ if environ is None else environ
    for name in ("LC_ALL", "LC_CTYPE", "LANG"):
        value = env.get(name)
        if value:
            return GlyphStyle.UNICODE if "utf" in value.lower() else GlyphStyle.CARET
    return GlyphStyle.UNICODE


def classify(char: str, style: GlyphStyle = GlyphStyle.UNICODE) -> GlyphSubstitution | None:
    """Return the substitution for a single character, or None to pass it through.

    A line feed is never classified here: the end-of-line marker is handled by
    :func:`end_of_line`, because only a real line terminator gets one.
    """
    table = _UNICODE_GLYPHS if style is GlyphStyle.UNICODE else _CARET_GLYPHS
    entry = table.get(char)
    if entry is not None:
        matched_class, glyph = entry
        return GlyphSubstitution(matched_class, glyph)

    code = ord(char)
    if code <= 0x1F and char != "\n":
        if style is GlyphStyle.UNICODE:
            return GlyphSubstitution("control", chr(0x2400 + code))
        return GlyphSubstitution("control", "^" + chr(code + 0x40))
    return None


def end_of_line(style: GlyphStyle = GlyphStyle.UNICODE) -> GlyphSubstitution:
    return GlyphSubstitution("line-feed", _EOL_GLYPHS[style], style_override=EOL_STYLE)


def _build_reverse_table() -> dict[str, str]:
    reverse: dict[str, str] = {}
    for style in GlyphStyle:
        for code in [*range(0x20), 0x20, 0x7F]:
            char = chr(code)
            substitution = end_of_line(style) if char == "\n" else classify(char, style)
            if substitution is not None:
                reverse.setdefault(substitution.glyph, char)
    return reverse


_REVERSE = _build_reverse_table()


def restore(glyph: str) -> str | None:
    """Map a replacement glyph back to the character it stands for."""
    return _REVERSE.get(glyph)
