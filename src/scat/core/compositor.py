"""Merge highlighter spans, line decorations and glyph substitution into RenderedLines."""

from collections import defaultdict
from collections.abc import Iterable, Iterator, Sequence
from itertools import groupby
from operator import attrgetter

from scat.core import glyphs
from scat.core.config import RenderConfig
from scat.core.selection import LineRange
from scat.models import ChangeTag, DeletionMarker, Fragment, Line, LineChanges, RenderedLine, StyleId, StyleSpan

DECORATION_STYLE = "scat.decoration"
ADDED_STYLE = "scat.added"
MODIFIED_STYLE = "scat.modified"
REMOVED_STYLE = "scat.removed"

GRID_SEPARATOR = " │ "
PLAIN_SEPARATOR = "  "

_CHANGE_GLYPHS: dict[ChangeTag, tuple[str, StyleId]] = {
    ChangeTag.UNCHANGED: (" ", DECORATION_STYLE),
    ChangeTag.ADDED: ("+", ADDED_STYLE),
    ChangeTag.MODIFIED: ("~", MODIFIED_STYLE),
}
_REMOVED_GLYPH = "-"


def split_lines(buffer: bytes, changes: LineChanges | None = None) -> list[Line]:
    lines: list[Line] = []
    start = 0
    index = 1
    length = len(buffer)
    while start < length:
        newline = buffer.find(b"\n", start)
        terminated = newline != -1
        end = newline if terminated else length
        change = changes.tag_for(index) if changes is not None else ChangeTag.UNCHANGED
        lines.append(Line(index=index, start=start, end=end, has_trailing_newline=terminated, change=change))
        start = end + 1 if terminated else length
        index += 1
    return lines


def line_contents(buffer: bytes, lines: Iterable[Line]) -> list[bytes]:
    return [buffer[line.start : line.end] for line in lines]


class SpanCursor:
    """Forward-only walk over a sorted span list.

    Queries must come in non-decreasing offset order; the cursor never
    rewinds. Offsets covered by no span resolve to the default style (None).
    """

    def __init__(self, spans: Sequence[StyleSpan]) -> None:
        self._spans = spans
        self._index = 0

    def _skip_to(self, offset: int) -> StyleSpan | None:
        spans = self._spans
        while self._index < len(spans) and spans[self._index].end <= offset:
            self._index += 1
        return spans[self._index] if self._index < len(spans) else None

    def style_at(self, offset: int) -> StyleId | None:
        span = self._skip_to(offset)
        if span is not None and span.start <= offset:
            return span.style
        return None

    def segments(self, start: int, end: int) -> Iterator[tuple[int, int, StyleId | None]]:
        """Split [start, end) into maximal runs of one span (or one gap)."""
        offset = start
        while offset < end:
            span = self._skip_to(offset)
            if span is not None and span.start <= offset:
                stop = min(span.end, end)
                yield offset, stop, span.style
            else:
                stop = end if span is None else min(span.start, end)
                yield offset, stop, None
            offset = stop


def coalesce(fragments: Iterable[Fragment]) -> tuple[Fragment, ...]:
    merged: list[Fragment] = []
    for style, group in groupby(fragments, key=attrgetter("style")):
        parts = list(group)
        if len(parts) == 1:
            merged.append(parts[0])
        else:
            merged.append(
                Fragment(
                    "".join(part.text for part in parts),
                    style,
                    "".join(part.source for part in parts),
                )
            )
    return tuple(merged)


def _substitute(text: str, style: StyleId | None, glyph_style: glyphs.GlyphStyle) -> list[Fragment]:
    fragments: list[Fragment] = []
    plain_start = 0
    for position, char in enumerate(text):
        substitution = glyphs.classify(char, glyph_style)
        if substitution is None:
            continue
        if plain_start < position:
            fragments.append(Fragment(text[plain_start:position], style))
        fragments.append(Fragment(substitution.glyph, style, source=char))
        plain_start = position + 1
    if plain_start < len(text):
        fragments.append(Fragment(text[plain_start:], style))
    return fragments


def build_prefix(
    line_number: int | None,
    tag: ChangeTag,
    width: int,
    config: RenderConfig,
    *,
    deletion: bool = False,
) -> tuple[Fragment, ...]:
    """Line number column, change glyph column and separator.

    A None *line_number* renders a blank number column (deletion rows).
    """
    if not config.has_decorations:
        return ()

    fragments: list[Fragment] = []
    if config.numbers:
        label = "" if line_number is None else str(line_number)
        fragments.append(Fragment(label.rjust(width), DECORATION_STYLE))
    if config.changes:
        if config.numbers:
            fragments.append(Fragment(" ", DECORATION_STYLE))
        glyph, style = (_REMOVED_GLYPH, REMOVED_STYLE) if deletion else _CHANGE_GLYPHS[tag]
        fragments.append(Fragment(glyph, style))
    fragments.append(Fragment(GRID_SEPARATOR if config.grid else PLAIN_SEPARATOR, DECORATION_STYLE))

    if not config.color:
        fragments = [Fragment(fragment.text) for fragment in fragments]
    return coalesce(fragments)


def _char_offsets(raw: bytes, text: str) -> list[int] | None:
    """Map each byte offset of *raw* (plus its end) to a character index in *text*.

    Offsets inside a multi-byte character map to the next character, so the
    character stays whole and belongs to the span it starts in. None means
    the line is ASCII and offsets map one to one.
    """
    if len(raw) == len(text):
        return None
    offsets: list[int] = []
    for index, char in enumerate(text):
        width = len(char.encode("utf-8", errors="surrogateescape"))
        offsets.append(index)
        offsets.extend([index + 1] * (width - 1))
    offsets.append(len(text))
    return offsets


def compose_content(buffer: bytes, line: Line, cursor: SpanCursor, config: RenderConfig) -> tuple[Fragment, ...]:
    # Undecodable bytes survive as lone surrogates; the sink writes them back out verbatim.
    raw = buffer[line.start : line.end]
    line_text = raw.decode("utf-8", errors="surrogateescape")
    offsets = _char_offsets(raw, line_text)

    fragments: list[Fragment] = []
    for start, stop, style in cursor.segments(line.start, line.end):
        first, last = start - line.start, stop - line.start
        if offsets is not None:
            first, last = offsets[first], offsets[last]
        if first >= last:
            continue
        text = line_text[first:last]
        resolved = style if config.color else None
        if config.show_all:
            fragments.extend(_substitute(text, resolved, config.glyph_style))
        else:
            fragments.append(Fragment(text, resolved))

    if config.show_all and line.has_trailing_newline:
        marker = glyphs.end_of_line(config.glyph_style)
        fragments.append(Fragment(marker.glyph, marker.style_override if config.color else None, source="\n"))
    return coalesce(fragments)


def compose_line(buffer: bytes, line: Line, cursor: SpanCursor, width: int, config: RenderConfig) -> RenderedLine:
    return RenderedLine(
        line_number=line.index,
        prefix=build_prefix(line.index, line.change, width, config),
        content=compose_content(buffer, line, cursor, config),
        has_trailing_newline=line.has_trailing_newline,
    )


def deletion_row(width: int, config: RenderConfig) -> RenderedLine:
    return RenderedLine(
        line_number=None,
        prefix=build_prefix(None, ChangeTag.UNCHANGED, width, config, deletion=True),
        content=(),
    )


def _is_blank(buffer: bytes, line: Line) -> bool:
    content = buffer[line.start : line.end]
    return content in (b"", b"\r")


def select_lines(
    buffer: bytes,
    lines: Sequence[Line],
    line_range: LineRange | None = None,
    squeeze_limit: int | None = None,
) -> list[Line]:
    """Apply a line range and blank-line squeezing; kept lines keep their numbers."""
    selected = [line for line in lines if line_range is None or line.index in line_range]
    if squeeze_limit is None:
        return selected

    squeezed: list[Line] = []
    blank_run = 0
    for line in selected:
        if _is_blank(buffer, line):
            blank_run += 1
            if blank_run > squeeze_limit:
                continue
        else:
            blank_run = 0
        squeezed.append(line)
    return squeezed


def render_buffer(
    buffer: bytes,
    spans: Sequence[StyleSpan],
    config: RenderConfig,
    changes: LineChanges | None = None,
    line_range: LineRange | None = None,
) -> Iterator[RenderedLine]:
    """Yield one RenderedLine per selected line, in buffer order.

    Deletion markers become extra rows right after their anchor line (or
    before line 1 for markers anchored at line 0) when ``changes`` is on.
    """
    lines = split_lines(buffer, changes if config.changes else None)
    selected = select_lines(buffer, lines, line_range, config.squeeze_limit)
    width = len(str(selected[-1].index)) if selected else 1

    markers: dict[int, list[DeletionMarker]] = defaultdict(list)
    if config.changes and changes is not None:
        for marker in changes.deletions:
            markers[marker.after_line].append(marker)

    if line_range is None or 1 in line_range:
        for _ in markers.get(0, ()):
            yield deletion_row(width, config)

    cursor = SpanCursor(spans)
    for line in selected:
        yield compose_line(buffer, line, cursor, width, config)
        for _ in markers.get(line.index, ()):
            yield deletion_row(width, config)
