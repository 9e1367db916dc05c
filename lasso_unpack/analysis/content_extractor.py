"""Verbatim extraction of module factory bodies from bundle source."""

from typing import Optional

from tree_sitter import Node

from .syntax import NodeKind, ParsedSource, node_kind


def extract_factory_body(parsed: ParsedSource, factory: Optional[Node]) -> str:
    """Return the raw source of a factory function's body, braces included.

    The text is sliced from the original bytes rather than re-printed from the
    tree, so whitespace and comments survive exactly. Anything other than a
    function expression with a block body yields an empty string.
    """
    if node_kind(factory) is not NodeKind.FUNCTION:
        return ""

    body = factory.child_by_field_name("body")
    if node_kind(body) is not NodeKind.STATEMENT_BLOCK:
        return ""

    return parsed.span_text(body.start_byte, body.end_byte)
