"""
HTTP session creation.

Provides:
* an ``aiohttp.ClientSession`` for fetching pages concurrently during a crawl
* a ``requests.Session`` with retry logic for the one-off vnu.jar download
"""

import aiohttp
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from w3c_validate.config import (
    DEFAULT_USER_AGENT,
    DOWNLOAD_USER_AGENT,
    MAX_RETRIES,
    REQUEST_TIMEOUT,
)

_PAGE_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def build_session(user_agent: str = DOWNLOAD_USER_AGENT) -> requests.Session:
    """Return a ``requests.Session`` with retry logic on 5xx errors."""
    session = requests.Session()
    retry = Retry(
        total=MAX_RETRIES,
        backoff_factor=0.5,
        status_forcelist=[500, 502, 503, 504],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": user_agent})
    return session


def build_client_session(
    user_agent: str | None = None,
    concurrency: int = 0,
    timeout: float = REQUEST_TIMEOUT,
) -> aiohttp.ClientSession:
    """Return an ``aiohttp.ClientSession`` for page fetches.

    The connector's connection limit follows *concurrency* so a crawl
    never opens more sockets than it has jobs in flight.  Must be created
    inside a running event loop.
    """
    connector = aiohttp.TCPConnector(limit=max(0, concurrency))
    headers = {
        "User-Agent": user_agent or DEFAULT_USER_AGENT,
        "Accept": _PAGE_ACCEPT,
        "Accept-Language": "en-US,en;q=0.8",
        "Cache-Control": "no-cache",
    }
    return aiohttp.ClientSession(
        connector=connector,
        headers=headers,
        timeout=aiohttp.ClientTimeout(total=timeout),
        raise_for_status=False,
        trust_env=False,
    )
