"""
Hyperlink extraction via BeautifulSoup.

Only navigational links are collected (``<a href>`` and ``<area href>``);
stylesheets, scripts and images are not pages to validate.
"""

from w3c_validate.utils.log import log
from w3c_validate.utils.url import to_abs_url

try:
    import lxml  # noqa: F401
    _BS4_PARSER = "lxml"
except ImportError:
    _BS4_PARSER = "html.parser"

from bs4 import BeautifulSoup

_LINK_TAGS = ("a", "area")


def extract_links(html: str | bytes | None, base_url: str) -> list[str]:
    """
    Return the absolute URLs of every hyperlink in *html*, resolved
    against *base_url*, fragments removed, deduplicated in first-seen
    order.

    Malformed markup never raises; an unparsable document yields ``[]``.
    """
    if not html:
        return []
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")

    try:
        soup = BeautifulSoup(html, _BS4_PARSER)
    except Exception as exc:
        log.debug("[SKIP] Unparsable HTML from %s: %s", base_url, exc)
        return []

    found: list[str] = []
    seen: set[str] = set()
    for el in soup.find_all(_LINK_TAGS, href=True):
        href = el.get("href")
        if isinstance(href, list):
            href = " ".join(href)
        absolute = to_abs_url(href, base_url)
        if absolute and absolute not in seen:
            seen.add(absolute)
            found.append(absolute)
    return found
