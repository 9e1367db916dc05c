"""
Main API interface for lasso-unpack

Provides a unified facade over the decode pipeline: reading bundle files,
walking them into manifest records and writing the manifest next to each input.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from pathlib import Path
from dataclasses import dataclass

from .analysis.bundle_walker import BundleWalker
from .analysis.call_classifier import CallClassifier
from .analysis.models import ManifestRecord, UnpackResult
from .analysis.record_builder import RecordBuilder
from .config import UnpackConfig
from .exceptions import ParseError

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Empty File"


@dataclass
class FileOutcome:
    """Result of processing one input file."""

    input_path: str
    result: Optional[UnpackResult] = None
    manifest_path: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input": self.input_path,
            "success": self.success,
            "empty_input": bool(self.result and self.result.is_empty_input),
            "records": len(self.result.records) if self.result else 0,
            "manifest": self.manifest_path,
            "error": self.error,
        }


def write_manifest(records: Iterable[ManifestRecord], manifest_path: Union[str, Path], indent: int = 2) -> Path:
    """Serialize records as a JSON array, in order, to manifest_path."""
    manifest_path = Path(manifest_path)
    payload = [record.to_dict() for record in records]
    text = json.dumps(payload, indent=indent, ensure_ascii=False)
    manifest_path.write_text(text + "\n", encoding="utf-8")
    return manifest_path


class LassoUnpack:
    """
    Main API class for lasso-unpack.

    Wraps the bundle walker with configuration-driven file handling.
    """

    def __init__(self, config: Optional[UnpackConfig] = None):
        """
        Initialize with optional configuration.

        Args:
            config: Optional configuration object. If None, uses default configuration.
        """
        self.config = config or UnpackConfig.default()
        extraction = self.config.extraction_settings
        self.walker = BundleWalker(
            classifier=CallClassifier(receiver=extraction.receiver),
            builder=RecordBuilder(
                include_content=extraction.include_content,
                include_loader=extraction.include_loader,
            ),
        )

    def unpack_text(self, text: str) -> UnpackResult:
        """Decode bundle text held in memory."""
        return self.walker.unpack_source(text)

    def unpack_file(self, input_path: Union[str, Path]) -> UnpackResult:
        """Read and decode one bundle file.

        Raises:
            ParseError: If the file is not valid JavaScript
            OSError: If the file cannot be read
        """
        input_path = Path(input_path)
        text = input_path.read_text(encoding=self.config.output_settings.encoding)
        try:
            return self.unpack_text(text)
        except ParseError as e:
            raise e.with_file(str(input_path)) from e

    def manifest_path_for(self, input_path: Union[str, Path]) -> Path:
        """Where the manifest for input_path is written."""
        output = self.config.output_settings
        directory = Path(output.output_dir) if output.output_dir else Path(input_path).resolve().parent
        return directory / output.manifest_name

    def process_file(self, input_path: Union[str, Path]) -> FileOutcome:
        """Decode one file and write its manifest; failures are captured in the outcome."""
        outcome = FileOutcome(input_path=str(input_path))
        try:
            result = self.unpack_file(input_path)
        except (ParseError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to unpack {input_path}: {e}")
            outcome.error = str(e)
            return outcome

        outcome.result = result
        if result.is_empty_input:
            logger.info(f"{input_path}: {EMPTY_INPUT_MESSAGE}")
            return outcome

        manifest_path = self.manifest_path_for(input_path)
        try:
            manifest_path.parent.mkdir(parents=True, exist_ok=True)
            write_manifest(result.records, manifest_path, indent=self.config.output_settings.indent)
        except (OSError, UnicodeError) as e:
            logger.error(f"Failed to write manifest {manifest_path}: {e}")
            outcome.error = str(e)
            return outcome

        outcome.manifest_path = str(manifest_path)
        logger.info(f"Wrote {len(result.records)} records to {manifest_path}")
        return outcome

    def unpack_files(self, input_paths: Iterable[Union[str, Path]]) -> List[FileOutcome]:
        """Process each input independently, in the order given."""
        return [self.process_file(path) for path in input_paths]
