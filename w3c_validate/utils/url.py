"""
URL normalisation, origin and crawl-policy helpers.
"""

import re
import urllib.parse
from typing import Protocol

_SKIP_SCHEME_RE = re.compile(r"^(mailto|tel|javascript|data):", re.IGNORECASE)
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)
_DEFAULT_PORTS = {"http": 80, "https": 443}


def origin_of(url: str) -> str:
    """
    Return the ``scheme://host[:port]`` origin of *url*.

    Default ports are omitted so ``https://x.test:443`` and
    ``https://x.test`` share an origin.  Returns ``""`` when *url* has no
    usable scheme/host.
    """
    try:
        parsed = urllib.parse.urlsplit(url)
        port = parsed.port
    except ValueError:
        return ""
    if not parsed.scheme or not parsed.hostname:
        return ""
    scheme = parsed.scheme.lower()
    host = parsed.hostname.lower()
    if ":" in host:
        host = f"[{host}]"
    if port is None or port == _DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def to_abs_url(href: str | None, base: str) -> str | None:
    """
    Resolve *href* against *base* and drop its fragment.

    Returns ``None`` for empty hrefs, ``mailto:``/``tel:``/``javascript:``/
    ``data:`` links and anything that cannot be resolved.
    """
    if not href:
        return None
    raw = str(href).strip()
    if not raw or _SKIP_SCHEME_RE.match(raw):
        return None

    try:
        absolute, _fragment = urllib.parse.urldefrag(urllib.parse.urljoin(base, raw))
        parsed = urllib.parse.urlsplit(absolute)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return None

    if parsed.scheme in ("http", "https"):
        if not parsed.netloc:
            return None
        if not parsed.path:
            absolute = urllib.parse.urlunsplit(
                (parsed.scheme, parsed.netloc, "/", parsed.query, "")
            )
    return absolute


class CrawlPolicy(Protocol):
    same_origin: bool
    strip_query: bool
    exclude: list[str]


def is_crawlable(href: str | None, policy: CrawlPolicy, origin: str) -> bool:
    """
    Decide whether a discovered absolute URL may be queued.

    Rules apply in order: non-empty and parseable, ``http(s)`` scheme,
    same origin as the seed (``policy.same_origin``), no query string
    (``policy.strip_query``), and no ``policy.exclude`` substring.
    """
    if not href:
        return False
    try:
        urllib.parse.urlsplit(href).port
    except ValueError:
        return False

    if not _HTTP_RE.match(href):
        return False

    if policy.same_origin:
        candidate = origin_of(href)
        if not candidate or candidate != origin:
            return False

    if policy.strip_query and "?" in href:
        return False

    for needle in policy.exclude or ():
        if needle and needle in href:
            return False

    return True
