"""
Output formatters for CLI commands.

Renders per-file outcomes and per-package size summaries for the terminal.
"""

from typing import List

from lasso_unpack.analysis.models import PackageSizeSummary
from lasso_unpack.api import EMPTY_INPUT_MESSAGE, FileOutcome
from lasso_unpack.cli.rich_output import RichOutputManager


def format_outcome(outcome: FileOutcome) -> str:
    """One-line description of a processed file."""
    if not outcome.success:
        return f"{outcome.input_path}: {outcome.error}"
    if outcome.result is not None and outcome.result.is_empty_input:
        return f"{outcome.input_path}: {EMPTY_INPUT_MESSAGE}"

    count = len(outcome.result.records) if outcome.result else 0
    noun = "record" if count == 1 else "records"
    return f"{outcome.input_path}: {count} {noun} -> {outcome.manifest_path}"


def format_size(num_bytes: int) -> str:
    """Human readable byte count."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


def print_size_summary(
    output: RichOutputManager, title: str, summaries: List[PackageSizeSummary]
) -> None:
    """Render package size summaries as a table."""
    table = output.create_table(title, ["Package", "Version", "Modules", "Size", "Gzip"])
    for summary in summaries:
        output.add_table_row(
            table,
            summary.package_name,
            summary.version or "-",
            summary.module_count,
            format_size(summary.total_size),
            format_size(summary.gzip_size),
        )
    output.print_table(table)
