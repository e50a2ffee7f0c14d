import logging

import pytest
from rich.errors import StyleSyntaxError
from rich.style import Style

from scat.core.theme import (
    DEFAULT_DARK_THEME,
    DEFAULT_LIGHT_THEME,
    Theme,
    detect_dark_background,
    get_theme,
    list_themes,
    resolve_theme,
)

_DARK = {"COLORFGBG": "15;0"}
_LIGHT = {"COLORFGBG": "0;15"}


def test_list_themes_includes_defaults() -> None:
    themes = list_themes()
    assert themes == sorted(themes)
    assert DEFAULT_DARK_THEME in themes
    assert DEFAULT_LIGHT_THEME in themes


@pytest.mark.parametrize("name", list_themes())
def test_every_theme_styles_every_decoration(name: str) -> None:
    theme = get_theme(name)
    assert theme is not None
    for style_id in ("scat.decoration", "scat.added", "scat.modified", "scat.removed", "scat.eol", "keyword"):
        assert isinstance(theme.resolve(style_id), Style)


class TestResolve:
    def test_dotted_ids_fall_back_to_parent(self) -> None:
        theme = get_theme("dracula")
        assert theme is not None
        assert theme.resolve("punctuation.bracket") == theme.resolve("punctuation")
        assert theme.resolve("keyword.control.flow") == theme.resolve("keyword")

    def test_specific_id_wins_over_parent(self) -> None:
        theme = get_theme("catppuccin-mocha")
        assert theme is not None
        assert theme.resolve("string.escape") != theme.resolve("string")

    def test_unknown_and_default(self) -> None:
        theme = get_theme("nord")
        assert theme is not None
        assert theme.resolve(None) is None
        assert theme.resolve("no.such.thing") is None

    def test_comment_is_italic(self) -> None:
        theme = get_theme("gruvbox-dark")
        assert theme is not None
        style = theme.resolve("comment")
        assert style is not None
        assert style.italic

    def test_styles_are_parsed_when_theme_is_built(self) -> None:
        theme = Theme("custom", True, {"punctuation": "bold red"})
        assert theme.resolve("punctuation.bracket") is theme.resolve("punctuation")
        assert theme.resolve("punctuation") == Style(bold=True, color="red")

    def test_resolve_does_not_mutate_theme(self) -> None:
        theme = Theme("custom", True, {"keyword": "blue"})
        before = dict(theme.styles)
        theme.resolve("keyword.control")
        theme.resolve("missing")
        assert theme.styles == before
        assert theme == Theme("custom", True, {"keyword": "blue"})

    def test_invalid_definition_fails_at_construction(self) -> None:
        with pytest.raises(StyleSyntaxError):
            Theme("broken", True, {"keyword": "not a colour zz"})


@pytest.mark.parametrize(
    ("environ", "dark"),
    [
        ({}, True),
        ({"COLORFGBG": "15;0"}, True),
        ({"COLORFGBG": "0;15"}, False),
        ({"COLORFGBG": "0;7"}, False),
        ({"COLORFGBG": "0;default;15"}, False),
        ({"COLORFGBG": "garbage"}, True),
    ],
)
def test_detect_dark_background(environ: dict[str, str], dark: bool) -> None:
    assert detect_dark_background(environ) is dark


class TestResolveTheme:
    def test_auto_picks_by_background(self) -> None:
        assert resolve_theme("auto", environ=_DARK).name == DEFAULT_DARK_THEME
        assert resolve_theme("auto", environ=_LIGHT).name == DEFAULT_LIGHT_THEME

    def test_auto_uses_light_and_dark_overrides(self) -> None:
        assert resolve_theme("auto", theme_dark="nord", environ=_DARK).name == "nord"
        assert resolve_theme("auto", theme_light="gruvbox-light", environ=_LIGHT).name == "gruvbox-light"

    def test_explicit_dark_and_light(self) -> None:
        assert resolve_theme("dark", environ=_LIGHT).name == DEFAULT_DARK_THEME
        assert resolve_theme("light", theme_light="gruvbox-light", environ=_DARK).name == "gruvbox-light"

    def test_named_theme(self) -> None:
        assert resolve_theme("Dracula", environ=_LIGHT).name == "dracula"

    def test_unknown_name_warns_and_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="scat.core.theme"):
            theme = resolve_theme("neon", environ=_LIGHT)
        assert theme.name == DEFAULT_LIGHT_THEME
        assert "neon" in caplog.text

    def test_unknown_override_falls_back_to_default(self) -> None:
        assert resolve_theme("dark", theme_dark="missing", environ=_DARK).name == DEFAULT_DARK_THEME
