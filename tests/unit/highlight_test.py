"""Unit tests for the tree-sitter span producer."""

import logging

import pytest

from scat.core.highlight import fill_gaps, highlight, plain_spans
from scat.models import StyleSpan

_PYTHON = b'def greet(name):\n    # say hi\n    return "hi\\n" + name if True else None\n\ncount = 42\ngreet("x")\n'


def _style_of(buffer: bytes, spans: list[StyleSpan], needle: bytes) -> set[str | None]:
    """Styles covering the first occurrence of *needle*."""
    start = buffer.index(needle)
    end = start + len(needle)
    return {span.style for span in spans if span.start < end and span.end > start}


def _assert_contiguous(spans: list[StyleSpan], length: int) -> None:
    assert spans[0].start == 0
    assert spans[-1].end == length
    for previous, current in zip(spans, spans[1:]):
        assert previous.end == current.start
        assert current.start < current.end


class TestPython:
    def test_spans_cover_the_buffer(self) -> None:
        spans = highlight(_PYTHON, "python")
        _assert_contiguous(spans, len(_PYTHON))

    def test_token_classes(self) -> None:
        spans = highlight(_PYTHON, "python")
        assert _style_of(_PYTHON, spans, b"def") == {"keyword"}
        assert _style_of(_PYTHON, spans, b"return") == {"keyword"}
        assert _style_of(_PYTHON, spans, b"# say hi") == {"comment"}
        assert _style_of(_PYTHON, spans, b"42") == {"number"}
        assert _style_of(_PYTHON, spans, b"True") == {"boolean"}
        assert _style_of(_PYTHON, spans, b"None") == {"constant.builtin"}
        assert _style_of(_PYTHON, spans, b'"hi\\n"') == {"string"}
        assert _style_of(_PYTHON, spans, b"(") == {"punctuation.bracket"}
        assert _style_of(_PYTHON, spans, b"+") == {"operator"}

    def test_identifiers_plain_without_rich(self) -> None:
        spans = highlight(_PYTHON, "python")
        assert _style_of(_PYTHON, spans, b"greet") == {None}
        assert _style_of(_PYTHON, spans, b"count") == {None}

    def test_rich_marks_functions_and_variables(self) -> None:
        spans = highlight(_PYTHON, "python", rich=True)
        _assert_contiguous(spans, len(_PYTHON))
        assert _style_of(_PYTHON, spans, b"greet") == {"function"}
        assert _style_of(_PYTHON, spans, b"count") == {"variable"}
        call = _PYTHON.rindex(b"greet")
        assert {span.style for span in spans if span.start <= call < span.end} == {"function"}

    def test_rich_splits_escape_sequences_out_of_strings(self) -> None:
        spans = highlight(_PYTHON, "python", rich=True)
        assert _style_of(_PYTHON, spans, b"\\n") == {"string.escape"}
        assert _style_of(_PYTHON, spans, b'"hi') == {"string"}

    def test_rich_fstring_interpolation_is_not_string(self) -> None:
        buffer = b'msg = f"a{count}b"\n'
        spans = highlight(buffer, "python", rich=True)
        assert _style_of(buffer, spans, b"count") == {"variable"}
        assert _style_of(buffer, spans, b'f"a') == {"string"}


def test_other_language_keywords() -> None:
    buffer = b"package main\n\nfunc main() {\n\treturn\n}\n"
    spans = highlight(buffer, "go")
    _assert_contiguous(spans, len(buffer))
    assert _style_of(buffer, spans, b"func") == {"keyword"}
    assert _style_of(buffer, spans, b"package") == {"keyword"}


def test_syntax_errors_still_cover_the_buffer() -> None:
    buffer = b"def broken(:\n    ]]] 'unterminated\n"
    spans = highlight(buffer, "python")
    _assert_contiguous(spans, len(buffer))


class TestFallback:
    def test_no_language(self) -> None:
        assert highlight(b"a b", None) == [StyleSpan(0, 3, None)]

    def test_empty_buffer(self) -> None:
        assert highlight(b"", "python") == []

    def test_unknown_language_logs_and_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="scat.core.highlight"):
            assert highlight(b"text", "not-a-language") == [StyleSpan(0, 4, None)]
        assert "not-a-language" in caplog.text


class TestFillGaps:
    def test_fills_holes_and_tail(self) -> None:
        spans = [StyleSpan(1, 2, "a"), StyleSpan(4, 5, "b")]
        assert fill_gaps(spans, 7) == [
            StyleSpan(0, 1, None),
            StyleSpan(1, 2, "a"),
            StyleSpan(2, 4, None),
            StyleSpan(4, 5, "b"),
            StyleSpan(5, 7, None),
        ]

    def test_drops_overlap_and_clamps(self) -> None:
        spans = [StyleSpan(0, 3, "outer"), StyleSpan(1, 2, "inner"), StyleSpan(2, 9, "tail")]
        assert fill_gaps(spans, 5) == [StyleSpan(0, 3, "outer"), StyleSpan(3, 5, "tail")]

    def test_no_spans(self) -> None:
        assert fill_gaps([], 3) == [StyleSpan(0, 3, None)]
        assert fill_gaps([], 0) == []


def test_plain_spans() -> None:
    assert plain_spans(b"abc") == [StyleSpan(0, 3, None)]
    assert plain_spans(b"") == []
