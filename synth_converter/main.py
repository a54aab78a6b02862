#!/usr/bin/env python3
"""
synth-converter CLI - convert synthesis batch JSON into cat+ RDF.

Usage:
    python -m synth_converter.main --help
    python -m synth_converter.main data/example_batch.json --stdout --format turtle
    python -m synth_converter.main --input-dir ./data --output ./output
"""

import argparse
import logging
import sys
from pathlib import Path

import pyfiglet
from dotenv import load_dotenv

from synth_converter import __version__
from synth_converter.config.settings import DEFAULT_CONFIG_PATH, load_config
from synth_converter.errors import ConversionError
from synth_converter.loaders import BatchLoadError, load_batch
from synth_converter.pipeline import Pipeline, convert_batch
from synth_converter.utils.logging import setup_colored_logging

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    setup_colored_logging(level=level)


def print_banner() -> None:
    """Print the application banner."""
    banner = pyfiglet.figlet_format("synth-conv", font="standard", width=100)
    print("".center(80, "*"), file=sys.stderr)
    print(banner, file=sys.stderr)
    print(" Synthesis batches -> cat+ RDF ".center(80, "*"), file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="synth-converter",
        description="Convert synthesis batch records into cat+ ontology triples",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print one batch as Turtle
  synth-converter data/example_batch.json --stdout

  # Convert a directory into a run folder with Turtle and JSON-LD
  synth-converter --input-dir ./data --output ./output

  # Stable action IRIs instead of blank nodes
  synth-converter data/example_batch.json --named-actions --format json-ld --stdout
        """,
    )

    parser.add_argument(
        "inputs",
        nargs="*",
        type=str,
        help="Batch JSON files (default: every *.json in the input directory)",
    )

    parser.add_argument(
        "--input-dir",
        "-i",
        type=str,
        default=None,
        help="Directory containing batch JSON files (default: ./data)",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Output directory for run folders (default: ./output)",
    )

    parser.add_argument(
        "--format",
        "-f",
        action="append",
        choices=["turtle", "ttl", "json-ld", "jsonld"],
        default=None,
        help="Output format, repeatable (default: from config)",
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Write a single batch to stdout instead of a run folder",
    )

    parser.add_argument(
        "--named-actions",
        action="store_true",
        help="Give actions deterministic IRIs instead of blank nodes",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help="YAML configuration file",
    )

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    parser.add_argument("--debug", action="store_true", help="Enable debug output (very verbose)")
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Suppress all output except errors"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def apply_cli_overrides(settings, args: argparse.Namespace) -> None:
    """Apply CLI arguments to settings."""
    if args.input_dir:
        settings.paths.input_dir = Path(args.input_dir)

    if args.output:
        settings.paths.output_dir = Path(args.output)

    if args.format:
        aliases = {"ttl": "turtle", "jsonld": "json-ld"}
        settings.output.formats = list(dict.fromkeys(aliases.get(f, f) for f in args.format))

    if args.named_actions:
        settings.identity.action_nodes = "named"


def write_to_stdout(settings, args: argparse.Namespace) -> int:
    """Convert exactly one batch and print its renderings."""
    if len(args.inputs) != 1:
        print("❌ --stdout needs exactly one input file", file=sys.stderr)
        return 2

    batch = load_batch(args.inputs[0])
    result = convert_batch(batch, settings)
    for fmt in settings.output.formats:
        sys.stdout.write(result.renderings[fmt])
        if not result.renderings[fmt].endswith("\n"):
            sys.stdout.write("\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.quiet:
        setup_logging(verbose=False, debug=False)
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=args.verbose, debug=args.debug)

    if not args.quiet and not args.stdout:
        print_banner()

    try:
        settings = load_config(args.config)
        apply_cli_overrides(settings, args)
    except Exception as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        if args.stdout:
            return write_to_stdout(settings, args)

        pipeline = Pipeline(settings=settings)
        result = pipeline.execute(paths=args.inputs or None)

        if not args.quiet:
            result.print_summary()

        return 1 if result.batches_failed else 0

    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user", file=sys.stderr)
        return 130

    except BatchLoadError as e:
        print(f"❌ Input error: {e}", file=sys.stderr)
        return 2

    except ConversionError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"❌ Conversion error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
