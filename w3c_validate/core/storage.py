"""
File storage helpers – mapping URLs to safe file names and saving the
fetched HTML that the checker reads.
"""

import asyncio
import os
import re
import tempfile
from pathlib import Path

from bs4 import BeautifulSoup

from w3c_validate.config import DEFAULT_PAGE_NAME, HTML_FILE_RE
from w3c_validate.utils.log import log

# html.parser keeps fragments as they are; lxml would wrap them in <html><body>
_PRETTY_PARSER = "html.parser"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_SAFE_CHAR_RE = re.compile(r"[A-Za-z0-9/._-]")
_SLASHES_RE = re.compile(r"/+")
_UNDERSCORES_RE = re.compile(r"_+")

# Readable tokens for URL separators; any other unsafe char becomes "_"
_CHAR_TOKENS = {
    "?": "__q__",
    "&": "__and__",
    "=": "__eq__",
    "#": "__hash__",
}


def to_safe_name(url: str) -> str:
    """
    Derive a flat, filesystem-safe ``.html`` file name from *url*.

    The scheme is dropped, query separators become readable tokens,
    path slashes become underscores and runs of underscores collapse.
    Always ends in ``.html``/``.htm``; falls back to ``index.html``.
    """
    s = _SCHEME_RE.sub("", str(url or ""))
    s = _SLASHES_RE.sub("/", s)

    out = "".join(
        ch if _SAFE_CHAR_RE.match(ch) else _CHAR_TOKENS.get(ch, "_")
        for ch in s
    )

    out = _SLASHES_RE.sub("/", out)
    out = _UNDERSCORES_RE.sub("_", out)
    out = out.replace("/", "_")
    out = out.strip("_")

    if not out:
        out = DEFAULT_PAGE_NAME
    if not HTML_FILE_RE.search(out):
        out += ".html"
    return out


def prettify_html(html: str | None) -> str:
    """Re-indent *html* for human review.

    Falls back to the original text when it cannot be parsed.
    """
    text = str(html or "")
    if not text.strip():
        return text
    try:
        return BeautifulSoup(text, _PRETTY_PARSER).prettify()
    except Exception as exc:
        log.debug("[SKIP] Could not prettify HTML, storing as fetched: %s", exc)
        return text


def write_atomic(dest: Path, text: str) -> Path:
    """Write *text* to a unique ``.part`` file beside *dest* and rename
    it over *dest*."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    tmp: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=dest.parent,
            prefix=dest.name + ".",
            suffix=".part",
            delete=False,
        ) as fh:
            tmp = Path(fh.name)
            fh.write(text)
        os.replace(tmp, dest)
    except OSError:
        if tmp is not None:
            try:
                tmp.unlink()
            except FileNotFoundError:
                pass
        raise
    log.debug("Saved → %s (%d chars)", dest, len(text))
    return dest


class ArtifactStore:
    """
    Saved pages of one run under *work_dir*.

    Every URL saved through the same store gets its own file: when two
    URLs map to the same safe name (``/about`` and ``/about/``), later
    ones are suffixed ``-1``, ``-2`` ... before the extension.
    """

    def __init__(self, work_dir: Path) -> None:
        self.work_dir = Path(work_dir)
        self._claimed: set[str] = set()

    def claim(self, page_url: str) -> Path:
        """Reserve and return a file path for *page_url*."""
        name = to_safe_name(page_url)
        ext_at = HTML_FILE_RE.search(name).start()
        stem, ext = name[:ext_at], name[ext_at:]

        candidate = name
        n = 0
        while candidate in self._claimed:
            n += 1
            candidate = f"{stem}-{n}{ext}"
        self._claimed.add(candidate)
        if n:
            log.debug("[SKIP] %s already claimed, saving %s as %s", name, page_url, candidate)
        return self.work_dir / candidate

    async def save(self, page_url: str, html: str | None) -> Path:
        """Prettify and persist *html* for *page_url*; return the path."""
        dest = self.claim(page_url)
        return await asyncio.to_thread(_save_pretty, dest, html)


def _save_pretty(dest: Path, html: str | None) -> Path:
    return write_atomic(dest, prettify_html(html))


async def save_html(
    work_dir: Path,
    page_url: str,
    html: str | None,
    store: ArtifactStore | None = None,
) -> Path:
    """Persist *html* for *page_url* under *work_dir* and return the path.

    The stored file is the pretty-printed document; checker line and
    column numbers refer to it.  Pass the run's *store* so that URLs
    sharing a safe name do not overwrite each other.
    """
    store = store or ArtifactStore(work_dir)
    return await store.save(page_url, html)
