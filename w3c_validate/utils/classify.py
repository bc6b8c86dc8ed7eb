"""
Input classification: URL, filesystem path, or raw HTML fragment.
"""

import os
import re
import urllib.parse
from enum import Enum

_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)
_HTML_START_RE = re.compile(r"^<(!doctype\b|!--|[a-z][\w:-]*\b)", re.IGNORECASE)
# absolute or explicit relative: posix, windows drive, UNC, tilde, ./ ../
_PATH_PREFIX_RE = re.compile(r"^(?:[a-zA-Z]:[\\/]|\\\\|/|~[\\/]|\.{1,2}[\\/])")
_SEPARATOR_RE = re.compile(r"[\\/]")
_NON_SEPARATOR_RE = re.compile(r"[^\s\\/]")


class InputKind(str, Enum):
    URL = "url"
    PATH = "path"
    HTML = "html"


def is_url(text: str) -> bool:
    """True for an ``http://`` / ``https://`` URL with a hostname."""
    s = str(text or "").strip()
    if not _HTTP_RE.match(s):
        return False
    try:
        parsed = urllib.parse.urlsplit(s)
    except ValueError:
        return False
    return parsed.scheme.lower() in ("http", "https") and bool(parsed.hostname)


def is_html(text: str) -> bool:
    """True if *text* starts (after whitespace) with a doctype, comment or tag."""
    if not isinstance(text, str):
        return False
    s = text.strip()
    if not s or s[0] != "<":
        return False
    return bool(_HTML_START_RE.match(s))


def is_file_path(text: str) -> bool:
    """True if *text* looks like a file or folder path on any OS."""
    s = str(text or "").strip()
    if not s or is_url(s) or is_html(s):
        return False
    if _PATH_PREFIX_RE.match(s):
        return True
    # contains a separator and is not just separators
    return bool(_SEPARATOR_RE.search(s) and _NON_SEPARATOR_RE.search(s))


def classify(text: str) -> InputKind | None:
    """Return the kind of *text*, or ``None`` when it matches none.

    URLs win over paths, and paths win over HTML.  A bare name that exists
    on disk counts as a path.
    """
    if is_url(text):
        return InputKind.URL
    if is_file_path(text):
        return InputKind.PATH
    if is_html(text):
        return InputKind.HTML
    # bare names such as "index.html" with no separator
    if os.path.exists(str(text).strip()):
        return InputKind.PATH
    return None
