"""Utility helpers for input classification, URL policy and logging."""

from w3c_validate.utils.classify import InputKind, classify, is_file_path, is_html, is_url
from w3c_validate.utils.log import setup_logging, log
from w3c_validate.utils.url import is_crawlable, origin_of, to_abs_url

__all__ = [
    "InputKind",
    "classify",
    "is_file_path",
    "is_html",
    "is_url",
    "is_crawlable",
    "origin_of",
    "to_abs_url",
    "setup_logging",
    "log",
]
