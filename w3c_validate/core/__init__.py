"""Core validation logic – worker pool, crawler, page and file validators."""

from w3c_validate.core.crawler import Crawler
from w3c_validate.core.files import expand_files, validate_files
from w3c_validate.core.page import validate_one_url
from w3c_validate.core.pool import run_pool
from w3c_validate.core.storage import ArtifactStore, save_html, to_safe_name

__all__ = [
    "Crawler",
    "expand_files",
    "validate_files",
    "validate_one_url",
    "run_pool",
    "ArtifactStore",
    "save_html",
    "to_safe_name",
]
