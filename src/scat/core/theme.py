"""Built-in color themes: style id -> rich style definition."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from rich.style import Style

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Theme:
    """A named palette; definitions are parsed once, when the theme is built."""

    name: str
    dark: bool
    styles: Mapping[str, str]
    _parsed: Mapping[str, Style] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        parsed = {key: Style.parse(definition) for key, definition in self.styles.items()}
        object.__setattr__(self, "_parsed", MappingProxyType(parsed))

    def resolve(self, style_id: str | None) -> Style | None:
        """Find the style for *style_id*, falling back along dotted prefixes.

        ``string.escape`` falls back to ``string``; unknown ids resolve to None.
        """
        key = style_id or ""
        while key:
            style = self._parsed.get(key)
            if style is not None:
                return style
            key = key.rpartition(".")[0]
        return None


def _palette(
    *,
    text: str,
    muted: str,
    comment: str,
    keyword: str,
    string: str,
    escape: str,
    number: str,
    constant: str,
    function: str,
    type_: str,
    property_: str,
    operator: str,
    added: str,
    modified: str,
    removed: str,
) -> dict[str, str]:
    return {
        "comment": f"italic {comment}",
        "keyword": keyword,
        "string": string,
        "string.escape": escape,
        "number": number,
        "boolean": constant,
        "constant.builtin": constant,
        "function": function,
        "type": type_,
        "property": property_,
        "variable": text,
        "operator": operator,
        "punctuation": muted,
        "scat.decoration": muted,
        "scat.added": added,
        "scat.modified": modified,
        "scat.removed": removed,
        "scat.eol": f"dim {muted}",
    }


_THEMES: dict[str, Theme] = {
    theme.name: theme
    for theme in (
        Theme(
            "catppuccin-mocha",
            True,
            _palette(
                text="#cdd6f4",
                muted="#7f849c",
                comment="#9399b2",
                keyword="#cba6f7",
                string="#a6e3a1",
                escape="#f5c2e7",
                number="#fab387",
                constant="#fab387",
                function="#89b4fa",
                type_="#f9e2af",
                property_="#b4befe",
                operator="#89dceb",
                added="#a6e3a1",
                modified="#f9e2af",
                removed="#f38ba8",
            ),
        ),
        Theme(
            "catppuccin-latte",
            False,
            _palette(
                text="#4c4f69",
                muted="#8c8fa1",
                comment="#7c7f93",
                keyword="#8839ef",
                string="#40a02b",
                escape="#ea76cb",
                number="#fe640b",
                constant="#fe640b",
                function="#1e66f5",
                type_="#df8e1d",
                property_="#7287fd",
                operator="#04a5e5",
                added="#40a02b",
                modified="#df8e1d",
                removed="#d20f39",
            ),
        ),
        Theme(
            "dracula",
            True,
            _palette(
                text="#f8f8f2",
                muted="#6272a4",
                comment="#6272a4",
                keyword="#ff79c6",
                string="#f1fa8c",
                escape="#ff79c6",
                number="#bd93f9",
                constant="#bd93f9",
                function="#50fa7b",
                type_="#8be9fd",
                property_="#66d9ef",
                operator="#ff79c6",
                added="#50fa7b",
                modified="#ffb86c",
                removed="#ff5555",
            ),
        ),
        Theme(
            "nord",
            True,
            _palette(
                text="#d8dee9",
                muted="#4c566a",
                comment="#616e88",
                keyword="#81a1c1",
                string="#a3be8c",
                escape="#ebcb8b",
                number="#b48ead",
                constant="#81a1c1",
                function="#88c0d0",
                type_="#8fbcbb",
                property_="#d8dee9",
                operator="#81a1c1",
                added="#a3be8c",
                modified="#ebcb8b",
                removed="#bf616a",
            ),
        ),
        Theme(
            "gruvbox-dark",
            True,
            _palette(
                text="#ebdbb2",
                muted="#928374",
                comment="#928374",
                keyword="#fb4934",
                string="#b8bb26",
                escape="#fe8019",
                number="#d3869b",
                constant="#d3869b",
                function="#fabd2f",
                type_="#fabd2f",
                property_="#83a598",
                operator="#8ec07c",
                added="#b8bb26",
                modified="#fabd2f",
                removed="#fb4934",
            ),
        ),
        Theme(
            "gruvbox-light",
            False,
            _palette(
                text="#3c3836",
                muted="#928374",
                comment="#928374",
                keyword="#9d0006",
                string="#79740e",
                escape="#af3a03",
                number="#8f3f71",
                constant="#8f3f71",
                function="#b57614",
                type_="#b57614",
                property_="#076678",
                operator="#427b58",
                added="#79740e",
                modified="#b57614",
                removed="#9d0006",
            ),
        ),
    )
}

DEFAULT_DARK_THEME = "catppuccin-mocha"
DEFAULT_LIGHT_THEME = "catppuccin-latte"


def list_themes() -> list[str]:
    return sorted(_THEMES)


def get_theme(name: str) -> Theme | None:
    return _THEMES.get(name.strip().lower())


def detect_dark_background(environ: Mapping[str, str] | None = None) -> bool:
    """Guess the terminal background from ``COLORFGBG`` (``fg;bg``); dark when unknown."""
    env = os.environ if environ is None else environ
    raw = env.get("COLORFGBG", "")
    background = raw.rpartition(";")[2]
    if not background.isdigit():
        return True
    return int(background) not in (7, 15)


def _named_or_default(name: str | None, dark: bool) -> Theme:
    if name:
        theme = get_theme(name)
        if theme is not None:
            return theme
        logger.warning("Unknown theme '%s'; using the default", name)
    return _THEMES[DEFAULT_DARK_THEME if dark else DEFAULT_LIGHT_THEME]


def resolve_theme(
    name: str = "auto",
    theme_light: str | None = None,
    theme_dark: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Theme:
    """Resolve ``--theme`` (``auto``, ``dark``, ``light`` or a theme name)."""
    key = name.strip().split(":", 1)[0].lower()
    if key == "dark":
        return _named_or_default(theme_dark, dark=True)
    if key == "light":
        return _named_or_default(theme_light, dark=False)
    if key not in ("", "auto"):
        theme = get_theme(key)
        if theme is not None:
            return theme
        logger.warning("Unknown theme '%s'; falling back to auto detection", name)
    if detect_dark_background(environ):
        return _named_or_default(theme_dark, dark=True)
    return _named_or_default(theme_light, dark=False)
