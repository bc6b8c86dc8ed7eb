"""
Validation of local HTML files: a single file or a whole directory tree.
"""

import asyncio
import os
from pathlib import Path

from w3c_validate.checker.issues import parse_issues
from w3c_validate.checker.runner import run_one
from w3c_validate.config import HTML_FILE_RE, ValidateOptions
from w3c_validate.errors import NoStructuredOutput, NotHtmlFile, PathNotFound
from w3c_validate.report import Reporter
from w3c_validate.results import PageResult, RunSummary
from w3c_validate.utils.log import log


def _expand(target: str | Path) -> list[Path]:
    abs_path = Path(os.path.expanduser(str(target))).resolve()

    if not abs_path.exists():
        raise PathNotFound(str(target))

    if abs_path.is_file():
        if not HTML_FILE_RE.search(abs_path.name):
            raise NotHtmlFile(str(target))
        return [abs_path]

    return sorted(
        p for p in abs_path.rglob("*")
        if p.is_file() and HTML_FILE_RE.search(p.name)
    )


async def expand_files(target: str | Path) -> list[Path]:
    """
    Resolve *target* to the absolute HTML files it designates.

    Raises :class:`PathNotFound` if it does not exist and
    :class:`NotHtmlFile` for a single file without an ``.html``/``.htm``
    extension.  Directories are walked recursively, in sorted order.
    """
    return await asyncio.to_thread(_expand, target)


def display_path(path: Path) -> str:
    """*path* relative to the current directory, when possible."""
    try:
        rel = os.path.relpath(path, os.getcwd())
    except ValueError:
        return str(path)
    return rel or str(path)


async def validate_file(path: Path, options: ValidateOptions, jar_path: Path) -> PageResult:
    """Run the checker on one local file.

    A checker run without a JSON payload yields a failed result rather
    than an exception.
    """
    outcome = await run_one(path, jar_path, html=options.html)
    try:
        issues = parse_issues(outcome, options.warnings)
    except NoStructuredOutput as exc:
        log.warning("[ERR] %s – %s", path, exc)
        result = PageResult.failure(display_path(path), str(exc))
        result.final_url = None
        result.local_file = path
        return result

    return PageResult.from_issues(
        display_path(path),
        issues,
        options.include_warnings,
        local_file=path,
    )


async def validate_files(
    target: str | Path,
    options: ValidateOptions,
    jar_path: Path,
    reporter: Reporter | None = None,
) -> RunSummary:
    """Validate every HTML file under *target*, one at a time."""
    files = await expand_files(target)
    reporter = reporter or Reporter(json_mode=options.json)
    summary = RunSummary()

    log.info("Validating %d HTML file(s) under %s", len(files), target)
    reporter.banner(f"w3c validating {len(files)} HTML files in {target}")
    reporter.start_progress(total=len(files), desc="Validating")

    try:
        for path in files:
            result = await validate_file(path, options, jar_path)
            summary.record(result)
            reporter.page(result)
            reporter.advance()
            log.info("%s %s", "[PASS]" if result.ok else "[FAIL]", result.url)
    finally:
        reporter.finish()

    return summary
