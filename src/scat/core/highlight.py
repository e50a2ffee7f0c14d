"""Tree-sitter backed span producer.

The compositor only needs buffer-covering, sorted, non-overlapping
StyleSpans; this module turns a syntax tree into such a list by classifying
leaf nodes into opaque style ids.
"""

import logging
import re
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from scat.models import StyleSpan

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"comment")
_STRING_TYPES = frozenset(
    {
        "char_literal",
        "character_literal",
        "heredoc_body",
        "interpreted_string_literal",
        "raw_string",
        "raw_string_literal",
        "string",
        "string_literal",
        "template_string",
    }
)
_STRING_PART_TYPES = frozenset({"escape_sequence"})
_INTERPOLATION_TYPES = frozenset({"interpolation", "template_substitution", "string_interpolation"})
_NUMBER_TYPES = frozenset(
    {"float", "float_literal", "integer", "integer_literal", "number", "number_literal", "decimal_integer_literal"}
)
_BOOLEAN_TYPES = frozenset({"true", "false", "boolean", "boolean_literal"})
_BUILTIN_CONSTANT_TYPES = frozenset({"none", "null", "nil", "null_literal", "undefined"})
_TYPE_TYPES = frozenset(
    {"type_identifier", "primitive_type", "predefined_type", "builtin_type", "sized_type_specifier"}
)
_PROPERTY_TYPES = frozenset({"field_identifier", "property_identifier", "shorthand_property_identifier"})
_FUNCTION_PARENTS = frozenset(
    {
        "function_declaration",
        "function_definition",
        "function_item",
        "method",
        "method_declaration",
        "method_definition",
    }
)
_CALL_PARENTS = frozenset({"call", "call_expression", "method_invocation"})
_BRACKETS = frozenset("()[]{}")
_DELIMITERS = frozenset({",", ";", ".", ":", "::"})
_WORD_RE = re.compile(r"^[A-Za-z_][A-Za-z_0-9]*$")


def _is_comment(node: Node) -> bool:
    return bool(_COMMENT_RE.search(node.type))


def _classify_anonymous(node_type: str) -> str | None:
    if _WORD_RE.match(node_type):
        return "keyword"
    if node_type in _BRACKETS:
        return "punctuation.bracket"
    if node_type in _DELIMITERS:
        return "punctuation.delimiter"
    if node_type.strip():
        return "operator"
    return None


def _classify_identifier(node: Node, rich: bool) -> str | None:
    if not rich:
        return None
    parent = node.parent
    if parent is None:
        return "variable"
    if parent.type in _FUNCTION_PARENTS and parent.child_by_field_name("name") == node:
        return "function"
    if parent.type in _CALL_PARENTS and parent.child_by_field_name("function") == node:
        return "function"
    return "variable"


def _classify_leaf(node: Node, rich: bool) -> str | None:
    node_type = node.type
    if not node.is_named:
        return _classify_anonymous(node_type)
    if node_type in _NUMBER_TYPES:
        return "number"
    if node_type in _BOOLEAN_TYPES:
        return "boolean"
    if node_type in _BUILTIN_CONSTANT_TYPES:
        return "constant.builtin"
    if node_type in _TYPE_TYPES:
        return "type"
    if node_type in _PROPERTY_TYPES:
        return "property" if rich else None
    if node_type == "identifier":
        return _classify_identifier(node, rich)
    return None


def _collect_spans(root: Node, rich: bool) -> list[StyleSpan]:
    """Depth-first walk emitting one span per classified region, in order."""
    spans: list[StyleSpan] = []
    # Stack of (node, inherited string style); children pushed in reverse to keep byte order.
    stack: list[tuple[Node, str | None]] = [(root, None)]
    while stack:
        node, inherited = stack.pop()
        if node.end_byte <= node.start_byte:
            continue
        if _is_comment(node):
            spans.append(StyleSpan(node.start_byte, node.end_byte, "comment"))
            continue
        if node.type in _STRING_TYPES and inherited is None:
            if not rich or node.child_count == 0:
                spans.append(StyleSpan(node.start_byte, node.end_byte, "string"))
                continue
            inherited = "string"
        elif rich and node.type in _INTERPOLATION_TYPES:
            inherited = None

        if node.child_count == 0:
            if inherited is not None:
                style = "string.escape" if node.type in _STRING_PART_TYPES else inherited
            else:
                style = _classify_leaf(node, rich)
            if style is not None:
                spans.append(StyleSpan(node.start_byte, node.end_byte, style))
            continue

        if inherited is not None:
            # String text between children (e.g. plain characters) belongs to the string.
            cursor = node.start_byte
            for child in node.children:
                if child.start_byte > cursor:
                    spans.append(StyleSpan(cursor, child.start_byte, inherited))
                cursor = max(cursor, child.end_byte)
            if cursor < node.end_byte:
                spans.append(StyleSpan(cursor, node.end_byte, inherited))
        stack.extend((child, inherited) for child in reversed(node.children))

    spans.sort(key=lambda span: (span.start, span.end))
    return spans


def fill_gaps(spans: list[StyleSpan], length: int) -> list[StyleSpan]:
    """Make *spans* contiguous over [0, length), dropping overlaps and filling holes with None."""
    covered: list[StyleSpan] = []
    cursor = 0
    for span in spans:
        start = max(span.start, cursor)
        end = min(span.end, length)
        if end <= start:
            continue
        if start > cursor:
            covered.append(StyleSpan(cursor, start, None))
        covered.append(StyleSpan(start, end, span.style))
        cursor = end
    if cursor < length:
        covered.append(StyleSpan(cursor, length, None))
    return covered


def plain_spans(buffer: bytes) -> list[StyleSpan]:
    return [StyleSpan(0, len(buffer), None)] if buffer else []


def highlight(buffer: bytes, language: str | None, rich: bool = False) -> list[StyleSpan]:
    """Return a buffer-covering span list; falls back to one plain span on any failure."""
    if language is None or not buffer:
        return plain_spans(buffer)
    try:
        parser = get_parser(cast(SupportedLanguage, language))
        tree = parser.parse(buffer)
    except Exception:
        logger.warning("Highlighting with %s failed; showing plain text", language, exc_info=True)
        return plain_spans(buffer)
    spans = _collect_spans(tree.root_node, rich)
    logger.debug("Highlighted %d bytes as %s into %d span(s)", len(buffer), language, len(spans))
    return fill_gaps(spans, len(buffer))
