"""
Single-page unit of work: fetch, save, check, extract links.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path

import aiohttp

from w3c_validate.checker.issues import parse_issues
from w3c_validate.checker.runner import run_one
from w3c_validate.config import MAX_REDIRECTS, ValidateOptions
from w3c_validate.core.storage import ArtifactStore, save_html
from w3c_validate.errors import FetchError
from w3c_validate.extraction.links import extract_links
from w3c_validate.results import PageResult
from w3c_validate.utils.log import log


@dataclass
class FetchedPage:
    url: str
    final_url: str
    status: int
    html: str


async def fetch_html(session: aiohttp.ClientSession, page_url: str) -> FetchedPage:
    """GET *page_url*, following redirects.

    Raises :class:`FetchError` on a non-2xx status, a network error, a
    timeout or too many redirects.
    """
    log.debug("[FETCH] GET %s", page_url)
    try:
        async with session.get(
            page_url,
            allow_redirects=True,
            max_redirects=MAX_REDIRECTS,
        ) as resp:
            final_url = str(resp.url) if resp.url else page_url
            if not 200 <= resp.status < 300:
                raise FetchError(
                    f"request failed {resp.status} {page_url}",
                    url=page_url,
                    status=resp.status,
                )
            html = await resp.text(errors="replace")
    except aiohttp.TooManyRedirects as exc:
        raise FetchError(f"too many redirects {page_url}", url=page_url) from exc
    except aiohttp.ClientError as exc:
        raise FetchError(f"request failed {page_url} – {exc}", url=page_url) from exc
    except asyncio.TimeoutError as exc:
        raise FetchError(f"request timed out {page_url}", url=page_url) from exc

    if final_url != page_url:
        log.debug("[FETCH] Redirect: %s → %s", page_url, final_url)
    return FetchedPage(url=page_url, final_url=final_url, status=resp.status, html=html)


async def validate_one_url(
    page_url: str,
    options: ValidateOptions,
    work_dir: Path,
    session: aiohttp.ClientSession,
    jar_path: Path,
    store: ArtifactStore | None = None,
) -> PageResult:
    """
    Validate one page: fetch it, save the pretty-printed HTML under
    *work_dir*, run the checker on the saved file and collect outbound
    links from the raw markup relative to the final (post-redirect) URL.

    A crawl passes its *store* so pages sharing a safe file name are
    saved to distinct files.  Fetch, storage and checker failures
    propagate to the caller.
    """
    fetched = await fetch_html(session, page_url)
    log.debug("[FETCH] %d %s (%d chars)", fetched.status, fetched.final_url, len(fetched.html))

    local_file = await save_html(work_dir, fetched.final_url, fetched.html, store=store)
    outcome = await run_one(local_file, jar_path, html=options.html)
    issues = parse_issues(outcome, options.warnings)

    return PageResult.from_issues(
        page_url,
        issues,
        options.include_warnings,
        final_url=fetched.final_url,
        links=extract_links(fetched.html, fetched.final_url),
        local_file=local_file,
    )
