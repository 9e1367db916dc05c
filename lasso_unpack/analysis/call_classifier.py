"""
Classification of call expressions found in a Lasso bundle.

A call is relevant when it is either a method call on the module registry
(``$_mod.def(...)``, ``$_mod.installed(...)``, ...) or an immediately invoked
function expression, which is how the bundle bootstraps its own loader runtime.
Every other call is ordinary JavaScript and classifies to None.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

from tree_sitter import Node

from .models import CallKind, REGISTRY_VERBS
from .syntax import (
    NodeKind,
    ParsedSource,
    argument_nodes,
    node_kind,
    unwrap_parentheses,
)

logger = logging.getLogger(__name__)


@dataclass
class ClassifiedCall:
    """A call node tagged with the registration kind it represents."""

    kind: CallKind
    node: Node
    arguments: List[Node]
    receiver: str = ""

    @property
    def size(self) -> int:
        """Length in bytes of the whole call expression."""
        return max(self.node.end_byte - self.node.start_byte, 0)

    def argument(self, index: int) -> Optional[Node]:
        if 0 <= index < len(self.arguments):
            return self.arguments[index]
        return None


class CallClassifier:
    """Tags call expressions with their registration kind."""

    def __init__(self, receiver: Optional[str] = None):
        """Initialize the classifier.

        Args:
            receiver: When set, only method calls on an object whose source text
                equals this value (e.g. ``$_mod``) are recognized
        """
        self.receiver = receiver

    def classify(self, node: Node, parsed: ParsedSource) -> Optional[ClassifiedCall]:
        """Classify one syntax node.

        Returns:
            ClassifiedCall for registry method calls and loader bootstrap calls,
            None for anything else
        """
        if node_kind(node) is not NodeKind.CALL:
            return None

        callee = unwrap_parentheses(node.child_by_field_name("function"))
        callee_kind = node_kind(callee)

        if callee_kind is NodeKind.FUNCTION:
            return ClassifiedCall(CallKind.LOADER_BOOTSTRAP, node, argument_nodes(node))

        if callee_kind is not NodeKind.MEMBER:
            return None

        prop = callee.child_by_field_name("property")
        if node_kind(prop) is not NodeKind.PROPERTY_IDENTIFIER:
            return None

        kind = REGISTRY_VERBS.get(parsed.text_of(prop))
        if kind is None:
            return None

        obj = callee.child_by_field_name("object")
        receiver = parsed.text_of(obj) if obj is not None else ""
        if self.receiver is not None and receiver != self.receiver:
            logger.debug(f"Skipping {kind.value} call on receiver {receiver!r}")
            return None

        return ClassifiedCall(kind, node, argument_nodes(node), receiver=receiver)
