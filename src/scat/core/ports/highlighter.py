from typing import Protocol

from scat.models import StyleSpan


class SpanSource(Protocol):
    """Anything that turns a buffer into sorted, buffer-covering StyleSpans."""

    def __call__(self, buffer: bytes, language: str | None, rich: bool = False) -> list[StyleSpan]: ...
