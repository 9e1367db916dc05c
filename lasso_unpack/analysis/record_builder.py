"""
Builds manifest records from classified registration calls.

Each call kind has its own argument shape:

- ``def(path, factory)``                   path decoded, factory body extracted
- ``installed(parent, name, version)``     name and version taken as written
- ``main(path, relativeMain)``             first argument decoded, second kept as target
- ``remap(fromPath, toPath)``              same as main
- ``builtin(name, target)``                same as main
- ``(function(){ ... })()``                fixed loader identity
- ``run(path)``                            no record

Missing or non-literal arguments leave the corresponding fields empty.
"""

from typing import Optional
import logging

from .call_classifier import ClassifiedCall
from .content_extractor import extract_factory_body
from .models import CallKind, LOADER_IDENTITY, LOADER_PATH, ManifestRecord
from .path_decoder import decode_alias_source, decode_installed, decode_module_path
from .syntax import ParsedSource, string_value

logger = logging.getLogger(__name__)


class RecordBuilder:
    """Turns classified calls into manifest records."""

    def __init__(self, include_content: bool = True, include_loader: bool = True):
        self.include_content = include_content
        self.include_loader = include_loader

    def build(self, call: ClassifiedCall, parsed: ParsedSource) -> Optional[ManifestRecord]:
        """Build the record for one call, or None when the kind emits nothing."""
        kind = call.kind

        if not kind.emits_record:
            return None
        if kind is CallKind.LOADER_BOOTSTRAP:
            return self._build_loader(call) if self.include_loader else None

        record = ManifestRecord(verb=kind, size=call.size)
        if kind is CallKind.DEF:
            self._fill_def(record, call, parsed)
        elif kind is CallKind.INSTALLED:
            self._fill_installed(record, call, parsed)
        elif kind.is_alias:
            self._fill_alias(record, call, parsed)
        else:
            raise ValueError(f"Unhandled call kind: {kind}")
        return record

    def _literal(self, call: ClassifiedCall, index: int, parsed: ParsedSource) -> str:
        value = string_value(call.argument(index), parsed)
        if value is None:
            logger.debug(f"{call.kind.value} call has no string literal at argument {index}")
            return ""
        return value

    def _build_loader(self, call: ClassifiedCall) -> ManifestRecord:
        record = ManifestRecord(verb=CallKind.LOADER_BOOTSTRAP, size=call.size, path=LOADER_PATH)
        record.apply_identity(LOADER_IDENTITY)
        return record

    def _fill_def(self, record: ManifestRecord, call: ClassifiedCall, parsed: ParsedSource) -> None:
        record.path = self._literal(call, 0, parsed)
        record.apply_identity(decode_module_path(record.path))
        if self.include_content:
            record.content = extract_factory_body(parsed, call.argument(1))

    def _fill_installed(self, record: ManifestRecord, call: ClassifiedCall, parsed: ParsedSource) -> None:
        record.path = self._literal(call, 0, parsed)
        record.apply_identity(
            decode_installed(self._literal(call, 1, parsed), self._literal(call, 2, parsed))
        )

    def _fill_alias(self, record: ManifestRecord, call: ClassifiedCall, parsed: ParsedSource) -> None:
        record.path = self._literal(call, 0, parsed)
        record.target = self._literal(call, 1, parsed)
        record.apply_identity(decode_alias_source(record.path))
