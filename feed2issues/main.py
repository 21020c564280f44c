"""Application entrypoint for feed2issues.

This script runs the high-level flow once:
1) resolve inputs and build the run configuration
2) fetch the feed and list existing issues
3) create GitHub issues (or dry-run) and set the ``issues`` output
"""

from __future__ import annotations

import argparse
import signal
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .fetchers import FeedFetchError
from .orchestrator import Orchestrator
from .output.github_client import TrackerError
from .output.pipeline_reporter import append_step_summary, format_issue_numbers, write_action_output
from .utils.config_loader import (
    AGGREGATE_INPUT,
    CHARACTER_LIMIT_INPUT,
    CONTENT_FILTER_INPUT,
    DRY_RUN_INPUT,
    FEED_INPUT,
    LABELS_INPUT,
    LAST_TIME_INPUT,
    PREFIX_INPUT,
    TITLE_FILTER_INPUT,
    TITLE_INCLUSION_FILTER_INPUT,
    ConfigError,
    load_inputs_file,
    load_pipeline_config,
    load_run_settings,
    resolve_inputs,
)
from .utils.logging import configure_logging, get_logger

EXIT_CANCELLED = 130

# argparse dest -> action input name
_OVERRIDE_OPTIONS: Dict[str, str] = {
    "feed": FEED_INPUT,
    "prefix": PREFIX_INPUT,
    "labels": LABELS_INPUT,
    "last_time": LAST_TIME_INPUT,
    "title_filter": TITLE_FILTER_INPUT,
    "title_inclusion_filter": TITLE_INCLUSION_FILTER_INPUT,
    "content_filter": CONTENT_FILTER_INPUT,
    "character_limit": CHARACTER_LIMIT_INPUT,
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create GitHub issues from the entries of an RSS/Atom feed",
    )
    parser.add_argument(
        "--inputs",
        default=None,
        help="YAML file mapping action input names to values",
    )
    parser.add_argument(
        "--repository",
        default=None,
        help="Target repository as owner/name (default: $GITHUB_REPOSITORY)",
    )
    parser.add_argument("--feed", help="Feed URL")
    parser.add_argument("--prefix", help="Prefix prepended to every issue title")
    parser.add_argument("--labels", help="Comma-separated labels for created issues")
    parser.add_argument("--last-time", help="Only consider entries newer than this duration, e.g. 48h")
    parser.add_argument("--title-filter", help="Skip entries whose title matches this regex")
    parser.add_argument(
        "--title-inclusion-filter",
        help="Skip entries whose title does not match this regex",
    )
    parser.add_argument("--content-filter", help="Skip entries whose content matches this regex")
    parser.add_argument("--character-limit", help="Truncate issue content to this many characters")
    parser.add_argument(
        "--aggregate",
        action="store_true",
        help="Fold all new entries into a single issue",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run without creating issues; log what would be created",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (default: $LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace) -> Dict[str, Optional[str]]:
    overrides: Dict[str, Optional[str]] = {
        name: getattr(args, dest) for dest, name in _OVERRIDE_OPTIONS.items()
    }
    if args.aggregate:
        overrides[AGGREGATE_INPUT] = "true"
    if args.dry_run:
        overrides[DRY_RUN_INPUT] = "true"
    return overrides


def _raise_cancelled(signum, frame) -> None:  # noqa: ARG001 - signal handler signature
    raise KeyboardInterrupt(f"received signal {signum}")


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(override=False)
    args = parse_args(argv)
    configure_logging(level=args.log_level)
    logger = get_logger("f2i.main")
    signal.signal(signal.SIGTERM, _raise_cancelled)

    try:
        file_inputs = load_inputs_file(args.inputs) if args.inputs else {}
        inputs = resolve_inputs(_overrides(args), file_inputs=file_inputs)
        config = load_pipeline_config(inputs)
        settings = load_run_settings(inputs, repository=args.repository)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    try:
        result = Orchestrator(settings, config).run()
    except FeedFetchError as exc:
        logger.error("%s", exc)
        return 1
    except TrackerError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logger.error("Run cancelled; issues already created are kept")
        return EXIT_CANCELLED

    write_action_output("issues", format_issue_numbers(result.created))
    append_step_summary(result.report)
    return 0


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())
