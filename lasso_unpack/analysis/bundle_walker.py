"""
Single-pass walk over a parsed Lasso bundle.

The walker visits nodes in source order. Ordinary code is descended into so that
registration calls nested in arbitrary JavaScript are still found; a call that
classifies as a registration or loader bootstrap is not descended into, because
its arguments are module bodies and loader internals, not further registrations.
"""

from typing import Iterator, Optional
import logging

from .call_classifier import CallClassifier
from .models import ManifestRecord, UnpackResult, UnpackStatus
from .record_builder import RecordBuilder
from .syntax import ParsedSource, parse_source

logger = logging.getLogger(__name__)


class BundleWalker:
    """Decodes a bundle's registration calls into ordered manifest records."""

    def __init__(
        self,
        classifier: Optional[CallClassifier] = None,
        builder: Optional[RecordBuilder] = None,
    ):
        self.classifier = classifier or CallClassifier()
        self.builder = builder or RecordBuilder()

    def iter_records(self, parsed: ParsedSource) -> Iterator[ManifestRecord]:
        """Lazily yield one record per recognized call, in source order.

        The iterator is tied to the given parse and cannot be restarted midway;
        call again for a fresh pass.
        """
        stack = [parsed.root]
        while stack:
            node = stack.pop()
            call = self.classifier.classify(node, parsed)
            if call is None:
                stack.extend(reversed(node.children))
                continue

            record = self.builder.build(call, parsed)
            if record is not None:
                yield record

    def walk(self, parsed: ParsedSource) -> UnpackResult:
        """Walk an already parsed bundle."""
        if parsed.statement_count() == 0:
            logger.debug("Bundle has no statements")
            return UnpackResult(status=UnpackStatus.EMPTY_INPUT)

        records = list(self.iter_records(parsed))
        logger.debug(f"Decoded {len(records)} records")
        return UnpackResult(status=UnpackStatus.OK, records=records)

    def unpack_source(self, text: str) -> UnpackResult:
        """Parse and walk bundle text.

        Raises:
            ParseError: If the text is not valid JavaScript
        """
        return self.walk(parse_source(text))


def unpack_source(
    text: str,
    receiver: Optional[str] = None,
    include_content: bool = True,
    include_loader: bool = True,
) -> UnpackResult:
    """Decode bundle text into an UnpackResult with default components."""
    walker = BundleWalker(
        classifier=CallClassifier(receiver=receiver),
        builder=RecordBuilder(include_content=include_content, include_loader=include_loader),
    )
    return walker.unpack_source(text)
