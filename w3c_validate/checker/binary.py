"""
Java detection and vnu.jar acquisition.

The jar is cached at a single, deterministic location in the OS temp
dir.  A cached file is trusted only if it starts with the zip signature;
otherwise it is downloaded again to ``<name>.part`` and renamed into
place, so an interrupted download never leaves a truncated jar behind.
"""

import asyncio
import os
from pathlib import Path

import requests

from w3c_validate.config import (
    CACHED_JAR,
    DOWNLOAD_CHUNK,
    DOWNLOAD_TIMEOUT,
    JAR_SIGNATURE,
    JAR_URLS,
    JAVA_BIN,
)
from w3c_validate.errors import CheckerUnavailable, JavaRuntimeMissing
from w3c_validate.session import build_session
from w3c_validate.utils.log import log


async def has_java(java_bin: str = JAVA_BIN) -> bool:
    """True if ``java -version`` can be executed.

    ``java -version`` writes to stderr, so any stderr output counts as
    success even when the exit code is not 0.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            java_bin, "-version",
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError:
        return False
    _, stderr = await proc.communicate()
    return proc.returncode == 0 or bool(stderr)


def is_jar(path: Path) -> bool:
    """True if *path* exists and starts with the zip ``PK`` header."""
    try:
        with Path(path).open("rb") as fh:
            return fh.read(len(JAR_SIGNATURE)) == JAR_SIGNATURE
    except OSError:
        return False


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def download(url: str, dest: Path, session: requests.Session | None = None) -> Path:
    """Stream *url* to *dest* via a temporary ``.part`` file.

    Raises ``requests.RequestException`` or ``OSError`` on failure, in
    which case no file is left at either name.
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    tmp = dest.with_name(dest.name + ".part")
    session = session or build_session()

    log.info("[JAR] Downloading %s", url)
    try:
        with session.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT,
                         allow_redirects=True) as resp:
            resp.raise_for_status()
            total = 0
            with tmp.open("wb") as fh:
                for chunk in resp.iter_content(chunk_size=DOWNLOAD_CHUNK):
                    if chunk:
                        fh.write(chunk)
                        total += len(chunk)
        os.replace(tmp, dest)
    except BaseException:
        _remove(tmp)
        raise

    log.info("[JAR] Saved → %s (%d bytes)", dest, total)
    return dest


def resolve_jar_path(
    cached: Path = CACHED_JAR,
    urls: list[str] | None = None,
    session: requests.Session | None = None,
) -> Path:
    """Return a usable vnu.jar path, downloading it if necessary.

    Raises :class:`CheckerUnavailable` when every download URL fails.
    """
    cached = Path(cached)
    if cached.exists() and is_jar(cached):
        log.debug("[JAR] Using cached %s", cached)
        return cached

    cached.parent.mkdir(parents=True, exist_ok=True)
    _remove(cached)

    for url in urls if urls is not None else JAR_URLS:
        try:
            download(url, cached, session=session)
            if is_jar(cached):
                return cached
            log.warning("[JAR] %s did not return a jar archive", url)
        except (requests.RequestException, OSError) as exc:
            log.warning("[JAR] Failed to download %s – %s", url, exc)
        _remove(cached)

    raise CheckerUnavailable()


class CheckerBinary:
    """Lazily resolved java + vnu.jar pair.

    Resolution happens at most once per instance; later calls return the
    cached path.  A process normally shares :data:`default_checker`.
    """

    def __init__(self, cached: Path = CACHED_JAR, urls: list[str] | None = None) -> None:
        self.cached = Path(cached)
        self.urls = list(urls) if urls is not None else list(JAR_URLS)
        self._jar_path: Path | None = None
        self._lock: asyncio.Lock | None = None

    @property
    def jar_path(self) -> Path | None:
        return self._jar_path

    async def ensure(self) -> Path:
        """Check for java and return the jar path, fetching it once.

        Raises :class:`JavaRuntimeMissing` or :class:`CheckerUnavailable`.
        """
        if self._jar_path is not None:
            return self._jar_path
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if self._jar_path is not None:
                return self._jar_path
            if not await has_java():
                raise JavaRuntimeMissing()
            self._jar_path = await asyncio.to_thread(
                resolve_jar_path, self.cached, self.urls
            )
        return self._jar_path


default_checker = CheckerBinary()
