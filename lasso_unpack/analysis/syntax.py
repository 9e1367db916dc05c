"""
Syntax tree adapter for Lasso bundles.

Wraps the tree-sitter JavaScript grammar behind a small typed surface: an explicit
NodeKind enumeration for the node shapes the decoder inspects, a parse function that
turns tree-sitter's error recovery into a hard ParseError, and helpers to read string
literal values and raw source spans by byte offset.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional
import logging
import re

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

from ..exceptions import ParseError

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tree_sitter_javascript.language())


class NodeKind(Enum):
    """Node shapes relevant to registration-call decoding."""

    PROGRAM = "program"
    CALL = "call_expression"
    MEMBER = "member_expression"
    PARENTHESIZED = "parenthesized_expression"
    FUNCTION = "function_expression"
    STATEMENT_BLOCK = "statement_block"
    STRING = "string"
    IDENTIFIER = "identifier"
    PROPERTY_IDENTIFIER = "property_identifier"
    COMMENT = "comment"
    HASH_BANG = "hash_bang_line"
    OTHER = "other"


_KIND_BY_TYPE = {kind.value: kind for kind in NodeKind if kind is not NodeKind.OTHER}
# Grammar releases before 0.21 named function expressions plain "function"
_KIND_BY_TYPE["function"] = NodeKind.FUNCTION

# Nodes that do not count as statements of the program
_NON_STATEMENT_KINDS = frozenset({NodeKind.COMMENT, NodeKind.HASH_BANG})

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ERROR_EXCERPT_LENGTH = 40

_OCTAL_ESCAPE = re.compile(r"[0-7]{1,3}")
_MAX_CODE_POINT = 0x10FFFF


def node_kind(node: Optional[Node]) -> NodeKind:
    """Map a tree-sitter node onto the NodeKind enumeration."""
    if node is None:
        return NodeKind.OTHER
    return _KIND_BY_TYPE.get(node.type, NodeKind.OTHER)


@dataclass
class ParsedSource:
    """A parsed bundle: the UTF-8 source bytes and the tree built over them."""

    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def statement_count(self) -> int:
        """Number of top-level statements, ignoring comments and a hash-bang line."""
        return sum(1 for child in self.root.named_children if node_kind(child) not in _NON_STATEMENT_KINDS)

    def span_text(self, start: int, end: int) -> str:
        """Raw source text between two byte offsets."""
        return self.source[start:end].decode("utf-8", errors="replace")

    def text_of(self, node: Node) -> str:
        return self.span_text(node.start_byte, node.end_byte)


def parse_source(text: str) -> ParsedSource:
    """Parse bundle text as a JavaScript script.

    Args:
        text: Complete bundle source

    Returns:
        ParsedSource holding the tree and the encoded source

    Raises:
        ParseError: If the text is not syntactically valid JavaScript
    """
    source = text.encode("utf-8")
    parser = Parser(JS_LANGUAGE)
    tree = parser.parse(source)
    parsed = ParsedSource(source=source, tree=tree)

    if tree.root_node.has_error:
        raise _parse_error_for(parsed)

    return parsed


def _parse_error_for(parsed: ParsedSource) -> ParseError:
    """Build a ParseError describing the first broken node in source order."""
    broken = next(
        (node for node in iter_preorder(parsed.root) if node.type == "ERROR" or node.is_missing),
        parsed.root,
    )
    row, column = broken.start_point
    if broken.is_missing:
        message = f"Missing '{broken.type}'"
    else:
        excerpt = parsed.text_of(broken)[:_ERROR_EXCERPT_LENGTH].strip()
        message = f"Unexpected token near {excerpt!r}" if excerpt else "Unexpected end of input"
    logger.debug(f"Syntax error at {row + 1}:{column + 1}: {message}")
    return ParseError(message, line=row + 1, column=column + 1)


def iter_preorder(root: Node) -> Iterator[Node]:
    """Yield every node under root in source order, parents before children."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def argument_nodes(call: Node) -> List[Node]:
    """Arguments of a call expression, without punctuation or comments."""
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if node_kind(child) is not NodeKind.COMMENT]


def unwrap_parentheses(node: Optional[Node]) -> Optional[Node]:
    """Strip any number of enclosing parentheses, e.g. ``((function(){}))``."""
    while node is not None and node_kind(node) is NodeKind.PARENTHESIZED:
        inner = [child for child in node.named_children if node_kind(child) is not NodeKind.COMMENT]
        if len(inner) != 1:
            return node
        node = inner[0]
    return node


def string_value(node: Optional[Node], parsed: ParsedSource) -> Optional[str]:
    """Value of a string literal node, or None when the node is not a string literal."""
    if node_kind(node) is not NodeKind.STRING:
        return None

    parts = []
    for child in node.named_children:
        text = parsed.text_of(child)
        if child.type == "escape_sequence":
            parts.append(_decode_escape(text))
        else:
            parts.append(text)

    # Astral escapes arrive as two halves of a UTF-16 surrogate pair
    value = "".join(parts).encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        logger.debug(f"Lone surrogate in string literal, keeping raw text: {parsed.text_of(node)}")
        return parsed.text_of(node)[1:-1]
    return value


def _decode_escape(sequence: str) -> str:
    body = sequence[1:]
    if not body:
        return ""
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body[0] in "\n\r\u2028\u2029":
        # Line continuation
        return ""
    if _OCTAL_ESCAPE.fullmatch(body):
        # Legacy octal escape, valid in sloppy-mode scripts
        return chr(int(body, 8))
    if body[0] == "x" and len(body) == 3:
        return chr(int(body[1:], 16))
    if body[0] == "u":
        digits = body[2:-1] if body.startswith("u{") else body[1:]
        code_point = int(digits, 16)
        if code_point > _MAX_CODE_POINT:
            return sequence
        return chr(code_point)
    return body
