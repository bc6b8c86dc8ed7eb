"""
Command-line interface for the HTML validator.
"""

import argparse
import asyncio
import logging
import sys
import time

from w3c_validate.api import Validator, check_input
from w3c_validate.config import (
    DEFAULT_CLI_WARNINGS,
    DEFAULT_CONCURRENCY,
    DEFAULT_DEPTH,
    DEFAULT_USER_AGENT,
    ValidateOptions,
)
from w3c_validate.errors import ValidationError
from w3c_validate.report import Reporter
from w3c_validate.utils.log import log, setup_logging

_RED = "\033[31m"
_RESET = "\033[0m"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="w3c-validate-html",
        description="Validate HTML with the Nu Html Checker (vnu.jar): a URL "
                    "(crawled to --depth), a file or folder, or a raw HTML string.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  w3c-validate-html https://example.com\n"
            "  w3c-validate-html https://example.com --depth 0 --json\n"
            "  w3c-validate-html ./public --warnings 0\n"
            "  w3c-validate-html --target ./index.html --errors-only\n"
        ),
    )
    parser.add_argument(
        "target", nargs="?", default="",
        help="URL, file/folder path, or HTML string to validate",
    )
    parser.add_argument(
        "-t", "--target", dest="target_opt", default="", metavar="TARGET",
        help="Same as the positional target",
    )
    parser.add_argument(
        "--depth", type=int, default=DEFAULT_DEPTH,
        help=f"Maximum crawl depth from the start URL (default: {DEFAULT_DEPTH})",
    )
    parser.add_argument(
        "--concurrency", type=int, default=DEFAULT_CONCURRENCY,
        help=f"Pages validated in parallel (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--warnings", type=int, default=DEFAULT_CLI_WARNINGS, metavar="0|1",
        help=f"Collect warnings; 0 disables (default: {DEFAULT_CLI_WARNINGS})",
    )
    parser.add_argument(
        "--exclude", default="", metavar="LIST",
        help="Comma-separated substrings; matching URLs are not crawled",
    )
    parser.add_argument(
        "--same-origin", action=argparse.BooleanOptionalAction, default=True,
        help="Only crawl URLs on the start URL's origin (default: on)",
    )
    parser.add_argument(
        "--strip-query", action="store_true", default=False,
        help="Do not crawl URLs that carry a query string",
    )
    parser.add_argument(
        "-e", "--errors-only", action="store_true", default=False,
        help="Pass/fail on errors only, even when warnings are collected",
    )
    parser.add_argument(
        "--user-agent", default=DEFAULT_USER_AGENT,
        help="User-Agent header sent when fetching pages",
    )
    parser.add_argument(
        "--html", action="store_true", default=False,
        help="Force the checker's HTML parser for every document",
    )
    parser.add_argument(
        "--json", action="store_true", default=False,
        help="Print a single JSON summary instead of per-page lines",
    )
    parser.add_argument(
        "--progress", action="store_true", default=False,
        help="Show a progress bar (requires tqdm)",
    )
    parser.add_argument(
        "--work-dir", default=None, metavar="DIR",
        help="Directory for fetched pages (default: a fresh temp dir)",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable verbose debug logging",
    )
    parser.add_argument(
        "--log-file",
        help="Write detailed logs to this file (always at DEBUG level)",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> ValidateOptions:
    return ValidateOptions(
        depth=args.depth,
        concurrency=args.concurrency,
        warnings=args.warnings,
        exclude=args.exclude,
        errors_only=args.errors_only,
        same_origin=args.same_origin,
        strip_query=args.strip_query,
        user_agent=args.user_agent,
        json=args.json,
        html=args.html,
        progress=args.progress,
        work_dir=args.work_dir,
    )


def _fail(message: str) -> None:
    prefix = "error"
    if sys.stderr.isatty():
        prefix = f"{_RED}error{_RESET}"
    print(f"{prefix} {message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(debug=args.debug, log_file=args.log_file)
    if args.debug:
        logging.getLogger("aiohttp").setLevel(logging.DEBUG)

    target = args.target_opt or args.target
    if not target:
        parser.print_usage(sys.stderr)
        sys.exit(1)

    options = options_from_args(args)
    reporter = Reporter(json_mode=options.json, progress=options.progress)

    t0 = time.monotonic()
    try:
        check_input(target)
        summary = asyncio.run(Validator().validate(target, options, reporter=reporter))
    except (ValidationError, OSError) as exc:
        _fail(str(exc))
        sys.exit(1)
    except KeyboardInterrupt:
        _fail("interrupted")
        sys.exit(1)
    log.info("Total elapsed time: %.1f s", time.monotonic() - t0)

    if options.json:
        reporter.summary_json(summary)

    sys.exit(1 if summary.failed > 0 else 0)


if __name__ == "__main__":
    main()
