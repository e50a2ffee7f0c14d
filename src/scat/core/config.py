import os
from collections.abc import Mapping
from enum import Enum
from typing import TextIO

from pydantic import BaseModel, ConfigDict, Field

from scat.core.glyphs import GlyphStyle, detect_glyph_style

_STYLE_COMPONENTS = ("numbers", "changes", "grid", "rich")


class ColorWhen(str, Enum):
    AUTO = "auto"
    NEVER = "never"
    ALWAYS = "always"


class RenderConfig(BaseModel):
    """Immutable per-invocation rendering settings shared by every file."""

    model_config = ConfigDict(frozen=True)

    numbers: bool = False
    changes: bool = False
    grid: bool = False
    rich: bool = False
    show_all: bool = False
    color: bool = False
    glyph_style: GlyphStyle = GlyphStyle.UNICODE
    squeeze_limit: int | None = Field(default=None, ge=0)

    @property
    def has_decorations(self) -> bool:
        return self.numbers or self.changes


def parse_style_components(style: str, current: Mapping[str, bool] | None = None) -> dict[str, bool]:
    """Apply a comma separated ``--style`` list on top of *current*.

    Accepts ``plain``, ``full``, component names, and ``+name`` / ``-name``.
    """
    components = dict.fromkeys(_STYLE_COMPONENTS, False)
    if current:
        components.update(current)
    for raw in style.split(","):
        token = raw.strip().lower()
        if not token:
            continue
        if token == "plain":
            components = dict.fromkeys(_STYLE_COMPONENTS, False)
            continue
        if token == "full":
            components.update(numbers=True, changes=True, grid=True)
            continue
        enabled = not token.startswith("-")
        name = token.lstrip("+-")
        if name not in components:
            supported = ", ".join(("plain", "full", *_STYLE_COMPONENTS))
            raise ValueError(f"Unknown style component '{name}'. Supported: {supported}")
        components[name] = enabled
    return components


def resolve_color(
    when: ColorWhen,
    stream: TextIO,
    environ: Mapping[str, str] | None = None,
) -> bool:
    env = os.environ if environ is None else environ
    if when is ColorWhen.NEVER:
        return False
    if when is ColorWhen.ALWAYS:
        return True
    if env.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def build_render_config(
    *,
    style: str | None = None,
    plain: bool = False,
    line_numbers: bool = False,
    show_all: bool = False,
    color: bool = False,
    squeeze_blank: bool = False,
    squeeze_limit: int | None = None,
    environ: Mapping[str, str] | None = None,
) -> RenderConfig:
    """Resolve CLI flags into a RenderConfig.

    ``--plain`` drops every decoration chosen through ``--style``; an explicit
    ``-n`` still turns line numbers back on.
    """
    components = parse_style_components(style) if style else dict.fromkeys(_STYLE_COMPONENTS, False)
    if plain:
        components.update(numbers=False, changes=False, grid=False)
    if line_numbers:
        components["numbers"] = True

    limit = None
    if squeeze_blank or squeeze_limit is not None:
        limit = 1 if squeeze_limit is None else squeeze_limit

    return RenderConfig(
        **components,
        show_all=show_all,
        color=color,
        glyph_style=detect_glyph_style(environ),
        squeeze_limit=limit,
    )
