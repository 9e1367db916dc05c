"""
Command-line interface for lasso-unpack

Decodes one or more Lasso bundles and writes a manifest of their embedded
modules next to each input.
"""

import argparse
import json
import sys
import logging
from typing import List, Optional

from lasso_unpack import __version__
from lasso_unpack.analysis.size_stats import summarize_sizes
from lasso_unpack.api import LassoUnpack
from lasso_unpack.cli.formatters import format_outcome, print_size_summary
from lasso_unpack.cli.rich_output import get_rich_output, set_rich_enabled
from lasso_unpack.config import ConfigurationError, UnpackConfig, load_config

USAGE_LINE = "Usage: lasso-unpack < bundle.js >"


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lasso-unpack",
        description="Decode the modules embedded in a Lasso bundle into a JSON manifest",
    )

    parser.add_argument("inputs", nargs="*", metavar="bundle.js", help="Bundle files to unpack")

    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output and debug logging",
    )

    parser.add_argument(
        "--output-dir",
        "-o",
        type=str,
        help="Directory for manifests (default: alongside each input)",
    )

    parser.add_argument("--manifest-name", type=str, help="Manifest file name")

    parser.add_argument(
        "--receiver",
        type=str,
        help="Only decode calls on this receiver, e.g. '$_mod'",
    )

    parser.add_argument(
        "--no-content",
        action="store_true",
        help="Omit module source text from def records",
    )

    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a per-package size table for each bundle",
    )

    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format for processed files (default: text)",
    )

    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Disable rich terminal output (use plain text)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def apply_cli_overrides(config: UnpackConfig, args: argparse.Namespace) -> UnpackConfig:
    """Apply command-line options on top of the loaded configuration."""
    if args.output_dir:
        config.output_settings.output_dir = args.output_dir
    if args.manifest_name:
        config.output_settings.manifest_name = args.manifest_name
    if args.receiver:
        config.extraction_settings.receiver = args.receiver
    if args.no_content:
        config.extraction_settings.include_content = False
    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit status."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.inputs:
        print(f"No input provided\n{USAGE_LINE}", file=sys.stderr)
        return 1

    setup_logging(args.verbose)
    set_rich_enabled(not args.no_rich)
    output = get_rich_output()

    try:
        config = apply_cli_overrides(load_config(args.config), args)
    except ConfigurationError as e:
        output.print_error(f"Configuration error: {e}")
        return 1

    unpacker = LassoUnpack(config)
    exit_code = 0

    outcomes = unpacker.unpack_files(args.inputs)
    if args.format == "json":
        print(json.dumps([outcome.to_dict() for outcome in outcomes], indent=2, ensure_ascii=False))
        return 0 if all(outcome.success for outcome in outcomes) else 1

    for outcome in outcomes:
        line = format_outcome(outcome)
        if not outcome.success:
            output.print_error(line)
            exit_code = 1
        elif outcome.result.is_empty_input:
            output.print_warning(line)
        else:
            output.print_success(line)
            if args.summary:
                print_size_summary(output, outcome.input_path, summarize_sizes(outcome.result.records))

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
