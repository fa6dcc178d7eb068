#!/usr/bin/env python3
"""Docdigest: daily activity report for a GitHub project and its docs.

Fetches the last 24 hours of commits, releases and merged pull requests,
plus a snapshot of the documentation index and platform release notes,
and writes one Markdown report per day to daily/<YYYY>/<MM>/<DD>.md.
Meant to be run once a day from cron or CI.

Commands:
    run         Fetch all sources and write today's report (default)
    status      Show configuration and today's output path

Examples:
    python main.py                        # Same as 'run'
    python main.py run --dry-run          # Print the report, don't write it
    python main.py run --output-dir out   # Write under out/ instead of daily/
    python main.py status

Environment:
    See config.py for all configuration options
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from config import Config
from observability.logging import setup_logging
from observability.tracing import setup_tracing
from storage import report_path
from timewindow import utc_now

logger = logging.getLogger(__name__)


def cmd_run(args: argparse.Namespace, config: Config) -> int:
    """Fetch all sources and write (or print) today's report.

    Args:
        args: Parsed command line arguments
        config: Application configuration

    Returns:
        Exit code (0 for success)
    """
    from pipeline import build_daily_report, run_once

    if getattr(args, "output_dir", None):
        config.output_dir = Path(args.output_dir)

    try:
        if getattr(args, "dry_run", False):
            report, markdown = asyncio.run(build_daily_report(config))
            sys.stdout.write(markdown)
            logger.info("Dry run complete | summary=%s", report.summary)
            return 0

        stats = asyncio.run(run_once(config))
        logger.info("Report saved to: %s", stats.path)
        logger.info("Run complete | stats=%s", json.dumps(stats.to_dict()))
        return 0
    except KeyboardInterrupt:
        logger.info("Stopped by user (Ctrl+C)")
        return 130  # Standard exit code for SIGINT
    except Exception as e:
        logger.error("Run failed | error=%s type=%s", e, type(e).__name__, exc_info=True)
        return 1


def cmd_status(args: argparse.Namespace, config: Config) -> int:
    """Print the effective configuration as JSON."""
    today = utc_now().date()
    status = {
        "config": {
            "github_repo": config.github_repo,
            "github_api_url": config.github_api_url,
            "docs_index_url": config.docs_index_url,
            "docs_base_url": config.docs_base_url,
            "release_notes_url": config.release_notes_url,
            "request_timeout": config.request_timeout,
            "enable_logfire": config.enable_logfire,
        },
        "output": {
            "output_dir": str(config.output_dir),
            "today": str(report_path(config.output_dir, today, config.report_ext)),
        },
    }
    print(json.dumps(status, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Docdigest: daily project activity report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Fetch sources and write today's report")
    run_parser.add_argument(
        "--output-dir",
        help="Root directory for reports (default: config OUTPUT_DIR)",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the rendered report to stdout instead of writing it",
    )

    subparsers.add_parser("status", help="Show configuration and output path")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.load()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if error := config.validate():
        print(f"Configuration error: {error}", file=sys.stderr)
        return 1

    setup_logging(config, verbose=args.verbose)
    if config.enable_logfire:
        setup_tracing(enabled=True, service_name="docdigest", token=config.logfire_token)

    commands = {
        "run": cmd_run,
        "status": cmd_status,
    }
    command = args.command or "run"
    return commands[command](args, config)


if __name__ == "__main__":
    sys.exit(main())
