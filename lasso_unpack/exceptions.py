"""
Exception hierarchy for lasso-unpack.

Only parse-level failures and configuration problems are exceptions; node-level
irregularities inside a bundle are absorbed into best-effort records.
"""

from typing import Optional


class LassoUnpackError(Exception):
    """Base class for all lasso-unpack errors."""

    pass


class ConfigurationError(LassoUnpackError):
    """Raised when configuration validation fails."""

    pass


class ParseError(LassoUnpackError):
    """Raised when a bundle is not syntactically valid JavaScript."""

    def __init__(
        self,
        message: str,
        line: int = 0,
        column: int = 0,
        file_path: Optional[str] = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.file_path = file_path
        super().__init__(str(self))

    def with_file(self, file_path: str) -> "ParseError":
        """Return a copy of this error bound to a file path."""
        return ParseError(self.message, self.line, self.column, file_path)

    def __str__(self) -> str:
        location = f"{self.line}:{self.column}"
        if self.file_path:
            location = f"{self.file_path}:{location}"
        return f"{location}: {self.message}"
