"""
w3c_validate
============
Validate HTML with the Nu Html Checker (vnu.jar) – a single page, a whole
site crawled from a seed URL, a file or folder of ``.html`` files, or a
raw HTML string – and report errors with ``file:line:col`` locations.

Package structure
-----------------
w3c_validate/
├── __init__.py       – package init and public API
├── api.py            – input classification and dispatch (``validate``)
├── cli.py            – argparse CLI (``python -m w3c_validate``)
├── config.py         – constants and ``ValidateOptions``
├── errors.py         – exception taxonomy
├── report.py         – human-readable / JSON output
├── results.py        – Issue, PageResult, RunSummary
├── session.py        – aiohttp / requests session factories
├── checker/          – vnu.jar acquisition, subprocess runner, JSON parsing
├── core/             – worker pool, crawler, page and file validators
├── extraction/       – hyperlink extraction via BeautifulSoup
└── utils/            – input classification, URL policy, logging

Quick start
-----------
    import asyncio
    from w3c_validate import validate

    summary = asyncio.run(validate("https://example.com", {"depth": 1}))
    print(summary.passed, summary.failed)
"""

from .api import Validator, validate, validate_sync
from .config import ValidateOptions
from .errors import (
    CheckerUnavailable,
    FetchError,
    InvalidInput,
    JavaRuntimeMissing,
    NoStructuredOutput,
    NotHtmlFile,
    PathNotFound,
    ValidationError,
)
from .results import Issue, PageResult, RunSummary

__version__ = "1.0.0"

__all__ = [
    "Validator",
    "validate",
    "validate_sync",
    "ValidateOptions",
    "CheckerUnavailable",
    "FetchError",
    "InvalidInput",
    "JavaRuntimeMissing",
    "NoStructuredOutput",
    "NotHtmlFile",
    "PathNotFound",
    "ValidationError",
    "Issue",
    "PageResult",
    "RunSummary",
]
