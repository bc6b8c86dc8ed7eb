"""
Configuration constants and run options for the HTML validator.
"""

import os
import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_DEPTH = 2
DEFAULT_CONCURRENCY = 4
DEFAULT_WARNINGS = 0           # library default; the CLI turns warnings on
DEFAULT_CLI_WARNINGS = 1
DEFAULT_USER_AGENT = "Mozilla/5.0 (w3c-validate-html)"

# ---------------------------------------------------------------------------
# Checker binary (vnu.jar) cache
# ---------------------------------------------------------------------------
# Single, deterministic cache location in the OS temp dir
CACHE_DIR = Path(tempfile.gettempdir()) / "w3c-validate-html"
CACHED_JAR = CACHE_DIR / "vnu.jar"

JAR_URLS = [
    "https://github.com/validator/validator/releases/latest/download/vnu.jar",
]

# Leading bytes of every zip (and therefore jar) archive
JAR_SIGNATURE = b"PK"

JAVA_BIN = "java"
DOWNLOAD_USER_AGENT = "curl/8 (+python)"
DOWNLOAD_CHUNK = 65536

# Proxy variables blanked before spawning the checker
PROXY_ENV_VARS = (
    "http_proxy", "https_proxy", "no_proxy",
    "HTTP_PROXY", "HTTPS_PROXY", "NO_PROXY",
)

# ---------------------------------------------------------------------------
# Networking
# ---------------------------------------------------------------------------
REQUEST_TIMEOUT = 30           # seconds per page fetch
DOWNLOAD_TIMEOUT = 300         # seconds for the vnu.jar download
MAX_REDIRECTS = 10
MAX_RETRIES = 3

# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------
HTML_FILE_RE = re.compile(r"\.html?$", re.IGNORECASE)
DEFAULT_PAGE_NAME = "index.html"

_LIST_SPLIT_RE = re.compile(r"[,\s]+")


def to_list(value: Any) -> list[str]:
    """Normalise a comma/whitespace separated string (or a list) into a
    list of non-empty strings."""
    if not value:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value if str(v)]
    return [part for part in _LIST_SPLIT_RE.split(str(value)) if part]


def _as_int(value: Any, default: int) -> int:
    """Leading-integer parse: ``2.0`` → 2, ``"1.5"`` → 1, junk → *default*."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        if isinstance(value, float):
            return int(value)
        text = str(value).strip()
        try:
            return int(text)
        except ValueError:
            return int(float(text))
    except (ValueError, OverflowError):
        return default


@dataclass
class ValidateOptions:
    """Options recognised by every validation entry point."""
    depth: int = DEFAULT_DEPTH
    concurrency: int = DEFAULT_CONCURRENCY
    warnings: int = DEFAULT_WARNINGS
    exclude: list[str] = field(default_factory=list)
    errors_only: bool = False
    same_origin: bool = True
    strip_query: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    json: bool = False
    html: bool = False
    progress: bool = False
    work_dir: Path | None = None

    def __post_init__(self) -> None:
        self.depth = max(0, _as_int(self.depth, DEFAULT_DEPTH))
        self.concurrency = max(1, _as_int(self.concurrency, DEFAULT_CONCURRENCY))
        self.warnings = max(0, _as_int(self.warnings, DEFAULT_WARNINGS))
        self.exclude = to_list(self.exclude)
        if self.work_dir is not None:
            self.work_dir = Path(self.work_dir)

    @property
    def include_warnings(self) -> bool:
        """True when collected warnings count towards pass/fail."""
        return not self.errors_only and self.warnings > 0

    # Accepts both the camelCase keys of the JSON/JS config shape and
    # the snake_case attribute names.
    _ALIASES = {
        "errorsOnly": "errors_only",
        "sameOrigin": "same_origin",
        "stripQuery": "strip_query",
        "userAgent": "user_agent",
        "workDir": "work_dir",
    }

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "ValidateOptions":
        """Build options from a plain mapping, ignoring unknown keys."""
        known = set(cls.__dataclass_fields__)
        kwargs: dict[str, Any] = {}
        for key, value in (values or {}).items():
            name = cls._ALIASES.get(key, key)
            if name in known and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: "ValidateOptions | Mapping[str, Any] | None") -> "ValidateOptions":
        if isinstance(options, cls):
            return options
        return cls.from_mapping(options)


def default_work_dir() -> Path:
    """Return a fresh per-run directory for crawled HTML artifacts."""
    path = CACHE_DIR / f"site-{os.getpid()}-{os.urandom(4).hex()}"
    path.mkdir(parents=True, exist_ok=True)
    return path
