"""
Top-level entry point: classify the input and dispatch it to the
crawler, the file-set validator or the raw-string validator.
"""

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Any, Coroutine, Mapping

from w3c_validate.checker.binary import CheckerBinary, default_checker
from w3c_validate.checker.issues import parse_issues
from w3c_validate.checker.runner import run_one
from w3c_validate.config import ValidateOptions
from w3c_validate.core.crawler import Crawler
from w3c_validate.core.files import validate_files
from w3c_validate.errors import InvalidInput
from w3c_validate.report import Reporter
from w3c_validate.results import PageResult, RunSummary
from w3c_validate.utils.classify import InputKind, classify
from w3c_validate.utils.log import log

OptionsLike = ValidateOptions | Mapping[str, Any] | None


class Validator:
    """
    Validation service bound to one checker binary.

    The java check and vnu.jar download happen on the first call and the
    resolved jar path is handed explicitly to every checker run after that.
    """

    def __init__(self, checker: CheckerBinary | None = None) -> None:
        self.checker = checker or default_checker

    async def validate(
        self,
        target: str,
        options: OptionsLike = None,
        reporter: Reporter | None = None,
    ) -> RunSummary:
        kind = check_input(target)
        opts = ValidateOptions.coerce(options)
        reporter = reporter or Reporter(json_mode=opts.json, progress=opts.progress)
        target = target.strip() if kind is not InputKind.HTML else target

        jar_path = await self.checker.ensure()
        log.debug("Input classified as %s", kind.value)

        if kind is InputKind.URL:
            crawler = Crawler(target, opts, jar_path, reporter=reporter)
            return await crawler.run()
        if kind is InputKind.PATH:
            return await validate_files(target, opts, jar_path, reporter=reporter)
        return await self.validate_html_string(target, opts, jar_path, reporter=reporter)

    async def validate_html_string(
        self,
        html: str,
        options: ValidateOptions,
        jar_path: Path,
        reporter: Reporter | None = None,
    ) -> RunSummary:
        """Validate a raw HTML string through a throw-away temp file."""
        tmp_dir = Path(tempfile.mkdtemp(prefix="w3c-validate-html-str-"))
        try:
            tmp_file = tmp_dir / "input.html"
            await asyncio.to_thread(tmp_file.write_text, html, encoding="utf-8")
            outcome = await run_one(tmp_file, jar_path, html=options.html)
            issues = parse_issues(outcome, options.warnings)
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)

        result = PageResult.from_issues(None, issues, options.include_warnings)
        summary = RunSummary()
        summary.record(result)
        if reporter is not None:
            reporter.page(result)
        return summary


def check_input(target: Any) -> InputKind:
    """Classify *target*, raising :class:`InvalidInput` for anything that
    is not a non-empty URL, path or HTML string."""
    if not isinstance(target, str) or not target.strip():
        raise InvalidInput("Input must be a non-empty string (URL, file, or HTML)")
    kind = classify(target)
    if kind is None:
        raise InvalidInput(f"Input is not a URL, file path, or HTML: {target[:80]!r}")
    return kind


def validate(target: str, options: OptionsLike = None) -> Coroutine[Any, Any, RunSummary]:
    """
    Validate a URL (crawling from it), a file or folder path, or a raw
    HTML string, and return the run summary.

    Raises :class:`~w3c_validate.errors.InvalidInput` for bad input,
    :class:`~w3c_validate.errors.JavaRuntimeMissing` when java is absent
    and :class:`~w3c_validate.errors.CheckerUnavailable` when vnu.jar
    cannot be obtained.

    Input is checked before the coroutine is returned, so bad input
    raises immediately rather than on await.
    """
    check_input(target)
    return Validator().validate(target, options)


def validate_sync(target: str, options: OptionsLike = None) -> RunSummary:
    """Blocking wrapper around :func:`validate`."""
    check_input(target)
    return asyncio.run(validate(target, options))
