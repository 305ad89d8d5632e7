#!/usr/bin/env python3
# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
pagecollect command-line interface.

Usage:
    pagecollect [--count=N] [--max-pages=N] [--json] [--head]

Examples:
    # 100 newest Hacker News entries as numbered text
    pagecollect

    # 150 entries as JSON, visiting at most 10 pages
    pagecollect --count=150 --max-pages=10 --json

    # Watch the browser while it works
    pagecollect --count=30 --headed

Exit status is 0 when the requested number of entries was collected and 1
otherwise, including runs aborted by a browser or navigation failure.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Any, List, Optional

from pagecollect.collector.reporter import Outcome, render_json, render_text
from pagecollect.collector.runner import run_collection
from pagecollect.core.config import (
    CollectorConfig,
    DEFAULT_COUNT,
    DEFAULT_MAX_PAGES,
    build_config,
    coerce_positive,
    load_config_from_file,
)
from pagecollect.exceptions import ConfigurationError
from pagecollect.utils.logger import configure_logging, logger


def get_version() -> str:
    """Get the pagecollect version."""
    try:
        import pagecollect
        return getattr(pagecollect, "__version__", "unknown")
    except ImportError:
        return "unknown"


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser.

    Every option accepts a missing or malformed value instead of exiting:
    counts fall back to their defaults, and switches given an explicit value
    (``--head=1``) are ignored.
    """
    parser = argparse.ArgumentParser(
        prog="pagecollect",
        description="Collect unique, time-ordered entries from a paginated listing.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--count",
        nargs="?",
        const="",
        default=None,
        metavar="N",
        help=f"How many entries to collect (default: {DEFAULT_COUNT})",
    )
    parser.add_argument(
        "--max-pages",
        dest="max_pages",
        nargs="?",
        const="",
        default=None,
        metavar="N",
        help=f"Maximum pages to visit (default: {DEFAULT_MAX_PAGES})",
    )
    parser.add_argument(
        "--head", "--headed",
        dest="head",
        nargs="?",
        const=True,
        default=False,
        help="Show the browser window (default: headless)",
    )
    parser.add_argument(
        "--json",
        nargs="?",
        const=True,
        default=False,
        help="Output JSON instead of a numbered list",
    )
    parser.add_argument(
        "--start-url",
        dest="start_url",
        nargs="?",
        default=None,
        help="URL of the first page",
    )
    parser.add_argument(
        "--config",
        nargs="?",
        default=None,
        metavar="FILE",
        help="YAML or JSON configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=os.environ.get("PAGECOLLECT_LOG_LEVEL", "WARNING").upper(),
        help="DEBUG, INFO, WARNING, ERROR or CRITICAL (default: WARNING)",
    )
    parser.add_argument(
        "--human-readable", "--human",
        dest="human_readable",
        action="store_true",
        default=os.environ.get("PAGECOLLECT_LOG_FORMAT", "json").lower() == "human",
        help="Use human-readable log format instead of JSON",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_version()}",
    )
    return parser


def build_run_config(args: argparse.Namespace) -> CollectorConfig:
    """
    Combine defaults, environment, an optional config file and CLI flags.

    Raises:
        ConfigurationError: If the config file or resulting values are invalid
    """
    base = load_config_from_file(args.config) if args.config else build_config()
    overrides: dict = {"start_url": args.start_url}
    if args.count is not None:
        overrides["count"] = coerce_positive(args.count, DEFAULT_COUNT)
    if args.max_pages is not None:
        overrides["max_pages"] = coerce_positive(args.max_pages, DEFAULT_MAX_PAGES)
    if args.head is True:
        overrides["headless"] = False
    if args.json is True:
        overrides["json_output"] = True
    return base.with_overrides(**overrides)


def _run_async(coro: Any) -> Any:
    """Run an async coroutine from sync context."""
    return asyncio.run(coro)


def emit(outcome: Outcome, json_output: bool) -> None:
    """Write the rendered outcome to stdout."""
    if json_output:
        print(render_json(outcome))
        return
    if outcome.error is not None:
        print(f"Error: {outcome.error}", file=sys.stderr)
    for line in render_text(outcome):
        print(line)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    parser = create_parser()
    args, unknown = parser.parse_known_args(argv)

    configure_logging(level=args.log_level, human_readable=args.human_readable)
    if unknown:
        logger.debug(f"Ignoring unknown arguments: {unknown}")

    try:
        config = build_run_config(args)
    except ConfigurationError as e:
        logger.error(str(e))
        outcome = Outcome(
            ok=False,
            requested=coerce_positive(args.count, DEFAULT_COUNT),
            collected=0,
            pages=0,
            max_pages=coerce_positive(args.max_pages, DEFAULT_MAX_PAGES),
            error=str(e),
        )
        emit(outcome, args.json is True)
        return outcome.exit_code

    outcome = _run_async(run_collection(config))
    emit(outcome, config.json_output)
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
