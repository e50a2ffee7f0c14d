from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from scat.core.compositor import line_contents, render_buffer, split_lines
from scat.core.config import RenderConfig
from scat.core.highlight import highlight, plain_spans
from scat.core.languages import resolve_language
from scat.core.ports.highlighter import SpanSource
from scat.core.ports.repository import ChangeSource
from scat.core.selection import LineRange
from scat.models import LineChanges, RenderedLine
from scat.vcs.git import line_changes_for


@dataclass(frozen=True)
class ViewRequest:
    """One file to render: its bytes plus where they came from.

    *path* is the file on disk (used for git lookups); *name* only feeds
    language detection, e.g. the ``--file-name`` given for stdin.
    """

    content: bytes
    path: Path | None = None
    name: Path | None = None
    line_range: LineRange | None = None
    language: str | None = None


def needs_composition(request: ViewRequest, config: RenderConfig) -> bool:
    """False when the bytes can be written out unchanged, like plain ``cat``."""
    return (
        config.color
        or config.has_decorations
        or config.show_all
        or config.squeeze_limit is not None
        or request.line_range is not None
    )


def _changes_for(request: ViewRequest, config: RenderConfig, change_source: ChangeSource) -> LineChanges | None:
    if not config.changes or request.path is None:
        return None
    current = line_contents(request.content, split_lines(request.content))
    return change_source(request.path, current)


def view_buffer(
    request: ViewRequest,
    config: RenderConfig,
    highlighter: SpanSource = highlight,
    change_source: ChangeSource = line_changes_for,
) -> Iterator[RenderedLine]:
    """Highlight, classify and compose one file.

    Highlighting is skipped when color is off since every style would be dropped anyway.
    """
    if config.color:
        language = resolve_language(request.language, request.name or request.path, request.content)
        spans = highlighter(request.content, language, rich=config.rich)
    else:
        spans = plain_spans(request.content)
    changes = _changes_for(request, config, change_source)
    return render_buffer(request.content, spans, config, changes=changes, line_range=request.line_range)
