"""
workflowdoc Command-Line Interface

This module provides the CLI entry point. It orchestrates the full
pipeline: discovery -> extraction -> rendering -> output.

Usage:
    workflowdoc
    workflowdoc --workflows-dir .github/workflows --output WORKFLOWS.md
    workflowdoc --dry-run
    workflowdoc --verbose

Exit Codes:
    0  Report generated (also when no workflows were found)
    1  Missing workflows directory, enumeration failure, invalid
       configuration, or the report could not be written
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from workflowdoc import __version__
from workflowdoc.config import DEFAULT_OUTPUT, DEFAULT_WORKFLOWS_DIR, Settings, load_settings
from workflowdoc.discovery import discover_workflows, extract_workflows
from workflowdoc.errors import ConfigError, ReportWriteError, WorkflowsDirNotFoundError
from workflowdoc.log import setup_logger
from workflowdoc.renderer import render_report, write_report


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser.

    Flags default to None so that unset flags fall through to the
    configuration file.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="workflowdoc",
        description=(
            "Generate Markdown documentation for CI workflows from\n"
            "'# @workflow.<field>: <value>' annotation comments."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Recognized annotations:\n"
            "  # @workflow.name, description, owners, tags,\n"
            "  # @workflow.params, results, permissions, requirements\n"
            "\n"
            "Settings may also be given in the [tool.workflowdoc] table of pyproject.toml.\n"
        ),
    )

    parser.add_argument(
        "--workflows-dir",
        type=str,
        default=None,
        help=f"Path to the workflows directory (default: {DEFAULT_WORKFLOWS_DIR})",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help=f"Path to the output markdown file (default: {DEFAULT_OUTPUT})",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated report to stdout instead of writing a file",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="pyproject.toml to read settings from (default: ./pyproject.toml if present)",
    )

    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Number of threads used to read workflow files (default: 1)",
    )

    # Verbosity
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=None,
        help="Enable verbose logging",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=None,
        help="Suppress all output except errors",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def run_pipeline(
    settings: Settings,
    logger: logging.Logger,
    dry_run: bool = False,
) -> int:
    """
    Run discovery, extraction and rendering.

    Args:
        settings: Resolved settings
        logger: Logger for progress and per-file warnings
        dry_run: If True, print to stdout instead of writing

    Returns:
        Exit code (0 = success, 1 = error)
    """
    workflows_dir = Path(settings.workflows_dir)
    logger.info(
        "Starting workflow documentation generation (workflows-dir=%s, output=%s)",
        workflows_dir,
        settings.output,
    )

    # Step 1: Discovery
    try:
        if not workflows_dir.exists():
            raise WorkflowsDirNotFoundError(workflows_dir)
        discovery = discover_workflows(workflows_dir, logger=logger)
    except WorkflowsDirNotFoundError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error("Failed to enumerate workflows: %s", e)
        print(f"Error parsing workflows: {e}", file=sys.stderr)
        return 1

    # Step 2: Extraction
    batch = extract_workflows(
        discovery.files,
        logger=logger,
        max_workers=settings.max_workers,
    )
    records = batch.records
    logger.info("Parsed workflows (count=%d)", len(records))

    if not records:
        logger.warning("No workflow files found in %s", workflows_dir)
        if not settings.quiet:
            print(f"Warning: No workflow files found in {workflows_dir}", file=sys.stderr)
    elif not any(record.is_annotated for record in records):
        logger.warning("No workflow annotations found in %s", workflows_dir)
        if not settings.quiet:
            print(f"Warning: No workflow annotations found in {workflows_dir}", file=sys.stderr)

    # Step 3: Render
    content = render_report(records)

    if dry_run:
        print(content, end="")
        logger.info("Dry run - no file written")
        return 0

    # Step 4: Output
    output_path = Path(settings.output).absolute()
    logger.info("Generating markdown documentation (output=%s)", output_path)

    try:
        write_report(content, output_path)
    except ReportWriteError as e:
        logger.error("%s", e)
        print(f"Error generating markdown: {e}", file=sys.stderr)
        return 1

    logger.info("Documentation generation complete (workflows=%d)", len(records))
    if not settings.quiet:
        print(f"Successfully generated workflow documentation at {output_path}")
        print(f"Documented {len(records)} workflow(s)")

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Flags alone decide verbosity until the config file has been read.
    logger = setup_logger(verbose=bool(args.verbose), quiet=bool(args.quiet))

    try:
        settings = load_settings(args.config, logger=logger)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.max_workers is not None and args.max_workers < 1:
        parser.error("--max-workers must be at least 1")

    settings = settings.merged(
        workflows_dir=args.workflows_dir,
        output=args.output,
        verbose=args.verbose,
        quiet=args.quiet,
        max_workers=args.max_workers,
    )

    logger = setup_logger(verbose=settings.verbose, quiet=settings.quiet)
    return run_pipeline(settings, logger, dry_run=args.dry_run)


if __name__ == "__main__":
    sys.exit(main())
