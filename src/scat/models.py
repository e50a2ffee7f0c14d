from dataclasses import dataclass, field
from enum import Enum

StyleId = str


class ChangeTag(Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    MODIFIED = "modified"


@dataclass(frozen=True)
class StyleSpan:
    """Half-open byte range [start, end) tagged with an opaque style id."""

    start: int
    end: int
    style: StyleId | None


@dataclass(frozen=True)
class DeletionMarker:
    after_line: int
    count: int


@dataclass(frozen=True)
class Line:
    index: int
    start: int
    end: int
    has_trailing_newline: bool
    change: ChangeTag = ChangeTag.UNCHANGED


@dataclass(frozen=True)
class LineChanges:
    """Per-line change tags (index 0 is line 1) plus deletion markers."""

    tags: tuple[ChangeTag, ...] = ()
    deletions: tuple[DeletionMarker, ...] = ()

    @classmethod
    def untracked(cls, line_count: int) -> "LineChanges":
        return cls(tags=(ChangeTag.UNCHANGED,) * line_count)

    def tag_for(self, line_number: int) -> ChangeTag:
        if 1 <= line_number <= len(self.tags):
            return self.tags[line_number - 1]
        return ChangeTag.UNCHANGED

    def deletions_after(self, line_number: int) -> list[DeletionMarker]:
        return [marker for marker in self.deletions if marker.after_line == line_number]


@dataclass(frozen=True)
class GlyphSubstitution:
    matched_class: str
    glyph: str
    style_override: StyleId | None = None


@dataclass(frozen=True)
class Fragment:
    text: str
    style: StyleId | None = None
    source: str = field(default="")

    def __post_init__(self) -> None:
        if not self.source:
            object.__setattr__(self, "source", self.text)


@dataclass(frozen=True)
class RenderedLine:
    line_number: int | None
    prefix: tuple[Fragment, ...]
    content: tuple[Fragment, ...]
    has_trailing_newline: bool = True

    @property
    def is_deletion_row(self) -> bool:
        return self.line_number is None

    @property
    def text(self) -> str:
        return "".join(f.text for f in self.prefix) + "".join(f.text for f in self.content)

    @property
    def source(self) -> str:
        return "".join(f.source for f in self.content)

    @property
    def source_bytes(self) -> bytes:
        """The original line bytes, undecodable ones included."""
        return self.source.encode("utf-8", errors="surrogateescape")
