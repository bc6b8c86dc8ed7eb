"""
Breadth-first crawl-and-validate orchestrator.

Starting from a seed URL, pages are validated in sequential rounds.  Each
round takes up to ``concurrency`` unseen jobs off the front of the queue
and runs them through the bounded worker pool; links found on pages whose
depth is below the limit are filtered and queued for later rounds.

* Every URL is dispatched at most once per run (seen-set).
* Pages at the maximum depth are validated but never expanded.
* A failing page becomes a failed result; it never aborts the crawl.
"""

from collections import deque
from pathlib import Path

import aiohttp

from w3c_validate.config import ValidateOptions, default_work_dir
from w3c_validate.core.page import validate_one_url
from w3c_validate.core.pool import run_pool
from w3c_validate.core.storage import ArtifactStore
from w3c_validate.report import Reporter
from w3c_validate.results import Job, PageResult, RunSummary
from w3c_validate.session import build_client_session
from w3c_validate.utils.log import log
from w3c_validate.utils.url import is_crawlable, origin_of


class Crawler:
    """
    Crawl a site from *start_url* and validate every reachable page
    within the depth, origin and exclusion policy of *options*.
    """

    def __init__(
        self,
        start_url: str,
        options: ValidateOptions,
        jar_path: Path,
        work_dir: Path | None = None,
        reporter: Reporter | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.start_url = start_url
        self.options = options
        self.jar_path = jar_path
        self.work_dir = work_dir
        self.reporter = reporter or Reporter(json_mode=options.json)
        self.origin = origin_of(start_url)

        self._session = session
        self._owns_session = session is None
        self._queue: deque[Job] = deque()
        self._seen: set[str] = set()
        self.store: ArtifactStore | None = None
        self.summary = RunSummary()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self) -> RunSummary:
        if self.work_dir is None:
            self.work_dir = self.options.work_dir or default_work_dir()
        Path(self.work_dir).mkdir(parents=True, exist_ok=True)
        self.store = ArtifactStore(self.work_dir)

        log.info("Start URL   : %s", self.start_url)
        log.info("Origin      : %s", self.origin or "(none)")
        log.info("Max depth   : %d", self.options.depth)
        log.info("Concurrency : %d", self.options.concurrency)
        log.info("Artifacts   : %s", self.work_dir)

        self.reporter.banner(f"w3c validating html starting at {self.start_url}")
        self.reporter.start_progress(total=1, desc="Crawling")

        if self._session is None:
            self._session = build_client_session(
                self.options.user_agent, self.options.concurrency
            )
        try:
            self._queue.append(Job(url=self.start_url, depth=0))
            while self._queue:
                await self._run_round()
        finally:
            if self._owns_session:
                await self._session.close()
                self._session = None
            self.reporter.finish()

        log.info(
            "Crawl complete. validated=%d  passed=%d  failed=%d",
            len(self.summary.results),
            self.summary.passed,
            self.summary.failed,
        )
        return self.summary

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _next_batch(self) -> list[Job]:
        """Pop up to ``concurrency`` unseen jobs, marking them seen."""
        batch: list[Job] = []
        while self._queue and len(batch) < self.options.concurrency:
            job = self._queue.popleft()
            if job.url in self._seen:
                log.debug("[SKIP] Already dispatched: %s", job.url)
                self.reporter.advance(done=1)
                continue
            self._seen.add(job.url)
            batch.append(job)
        return batch

    async def _run_round(self) -> None:
        batch = self._next_batch()
        if not batch:
            return

        log.info("[QUEUE] round of %d (queued=%d seen=%d)",
                 len(batch), len(self._queue), len(self._seen))
        results = await run_pool(batch, self.options.concurrency, self._validate_job)

        for job, result in zip(batch, results):
            self.summary.record(result)
            self.reporter.page(result)
            log.info("%s %s", "[PASS]" if result.ok else "[FAIL]", result.final_url or job.url)

            queued = 0
            if job.depth < self.options.depth:
                queued = self._enqueue_links(result, job.depth + 1)
            self.reporter.advance(done=1, discovered=queued)

    def _enqueue_links(self, result: PageResult, depth: int) -> int:
        queued = 0
        for link in result.links:
            if not is_crawlable(link, self.options, self.origin):
                continue
            if link in self._seen:
                continue
            self._queue.append(Job(url=link, depth=depth))
            queued += 1
        if queued:
            log.debug("  +%d links queued from %s at depth %d",
                      queued, result.final_url or result.url, depth)
        return queued

    async def _validate_job(self, job: Job) -> PageResult:
        """Validate one page, turning any failure into a failed result."""
        try:
            result = await validate_one_url(
                job.url, self.options, self.work_dir, self._session, self.jar_path,
                store=self.store,
            )
        except Exception as exc:
            log.warning("[ERR] %s – %s", job.url, exc)
            return PageResult.failure(job.url, str(exc) or exc.__class__.__name__, depth=job.depth)
        result.depth = job.depth
        return result
