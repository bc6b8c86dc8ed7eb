"""
Tests for fetching and validating a single page.
"""

import asyncio
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp

from w3c_validate.config import ValidateOptions
from w3c_validate.core.page import fetch_html, validate_one_url
from w3c_validate.core.pool import run_pool
from w3c_validate.core.storage import ArtifactStore, prettify_html
from w3c_validate.errors import FetchError, NoStructuredOutput
from w3c_validate.results import ProcessOutcome


class _FakeResponse:
    def __init__(self, status=200, body="", url=None):
        self.status = status
        self.url = url
        self._body = body

    async def text(self, errors="strict"):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def _session(response=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return session


class TestFetchHtml(unittest.IsolatedAsyncioTestCase):

    async def test_ok(self):
        session = _session(_FakeResponse(200, "<p>hi</p>", url="https://x.test/"))
        page = await fetch_html(session, "https://x.test/")
        self.assertEqual(page.html, "<p>hi</p>")
        self.assertEqual(page.final_url, "https://x.test/")
        self.assertTrue(session.get.call_args.kwargs["allow_redirects"])

    async def test_redirect_final_url(self):
        session = _session(_FakeResponse(200, "ok", url="https://x.test/new"))
        page = await fetch_html(session, "https://x.test/old")
        self.assertEqual(page.url, "https://x.test/old")
        self.assertEqual(page.final_url, "https://x.test/new")

    async def test_non_2xx(self):
        session = _session(_FakeResponse(404, "gone", url="https://x.test/missing"))
        with self.assertRaises(FetchError) as ctx:
            await fetch_html(session, "https://x.test/missing")
        self.assertEqual(ctx.exception.status, 404)
        self.assertIn("404", str(ctx.exception))

    async def test_network_error(self):
        session = _session(error=aiohttp.ClientConnectionError("refused"))
        with self.assertRaises(FetchError):
            await fetch_html(session, "https://x.test/")

    async def test_timeout(self):
        session = _session(error=asyncio.TimeoutError())
        with self.assertRaises(FetchError) as ctx:
            await fetch_html(session, "https://x.test/slow")
        self.assertIn("timed out", str(ctx.exception))


class TestValidateOneUrl(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.work_dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    async def test_valid_page(self):
        html = '<!doctype html><title>t</title><a href="/next">n</a>'
        session = _session(_FakeResponse(200, html, url="https://x.test/start"))
        run = AsyncMock(return_value=ProcessOutcome("", '{"messages":[]}', 0))
        with patch("w3c_validate.core.page.run_one", run):
            result = await validate_one_url(
                "https://x.test/start", ValidateOptions(), self.work_dir, session, Path("vnu.jar")
            )
        self.assertTrue(result.ok)
        self.assertEqual(result.links, ["https://x.test/next"])
        self.assertEqual(result.local_file, self.work_dir / "x.test_start.html")
        self.assertEqual(result.local_file.read_text(encoding="utf-8"), prettify_html(html))
        run.assert_awaited_once_with(result.local_file, Path("vnu.jar"), html=False)

    async def test_fetch_status_logged(self):
        session = _session(_FakeResponse(203, "<p>x</p>", url="https://x.test/moved"))
        run = AsyncMock(return_value=ProcessOutcome("[]", "", 0))
        with patch("w3c_validate.core.page.run_one", run), \
                self.assertLogs("w3c-validate", level="DEBUG") as logs:
            await validate_one_url(
                "https://x.test/old", ValidateOptions(), self.work_dir, session, Path("j")
            )
        self.assertTrue(any("203 https://x.test/moved" in line for line in logs.output))

    async def test_links_resolve_against_final_url(self):
        session = _session(_FakeResponse(200, '<a href="sibling">s</a>', url="https://x.test/docs/"))
        run = AsyncMock(return_value=ProcessOutcome("[]", "", 0))
        with patch("w3c_validate.core.page.run_one", run):
            result = await validate_one_url(
                "https://x.test/docs", ValidateOptions(), self.work_dir, session, Path("vnu.jar")
            )
        self.assertEqual(result.final_url, "https://x.test/docs/")
        self.assertEqual(result.links, ["https://x.test/docs/sibling"])

    async def test_errors_fail_the_page(self):
        report = {"messages": [{"type": "error", "lastLine": 3, "lastColumn": 4, "message": "Stray end tag"}]}
        session = _session(_FakeResponse(200, "<p>", url="https://x.test/"))
        run = AsyncMock(return_value=ProcessOutcome("", json.dumps(report), 1))
        with patch("w3c_validate.core.page.run_one", run):
            result = await validate_one_url(
                "https://x.test/", ValidateOptions(), self.work_dir, session, Path("vnu.jar")
            )
        self.assertFalse(result.ok)
        self.assertEqual(result.errors[0].line, 3)

    async def test_warnings_only_fail_when_counted(self):
        report = [{"type": "info", "subType": "warning", "message": "w"}]
        session = _session(_FakeResponse(200, "<p>", url="https://x.test/"))
        run = AsyncMock(return_value=ProcessOutcome(json.dumps(report), "", 0))
        with patch("w3c_validate.core.page.run_one", run):
            strict = await validate_one_url(
                "https://x.test/", ValidateOptions(warnings=1), self.work_dir, session, Path("j")
            )
            lenient = await validate_one_url(
                "https://x.test/", ValidateOptions(warnings=1, errors_only=True),
                self.work_dir, session, Path("j"),
            )
        self.assertFalse(strict.ok)
        self.assertTrue(lenient.ok)
        self.assertEqual(len(lenient.warnings), 1)

    async def test_missing_json_propagates(self):
        session = _session(_FakeResponse(200, "<p>", url="https://x.test/"))
        run = AsyncMock(return_value=ProcessOutcome("", "Error: Unable to access jarfile", 1))
        with patch("w3c_validate.core.page.run_one", run):
            with self.assertRaises(NoStructuredOutput):
                await validate_one_url(
                    "https://x.test/", ValidateOptions(), self.work_dir, session, Path("j")
                )

    async def test_same_round_pages_with_one_safe_name_keep_their_own_markup(self):
        bodies = {
            "https://x.test/about": "<p>page-A</p>",
            "https://x.test/about/": "<p>page-B</p>",
        }
        session = MagicMock()
        session.get.side_effect = lambda url, **kw: _FakeResponse(200, bodies[url], url=url)

        async def checker_reports_what_it_reads(path, jar_path, html=False):
            await asyncio.sleep(0.01)
            content = Path(path).read_text(encoding="utf-8")
            marker = "page-A" if "page-A" in content else "page-B"
            return ProcessOutcome(json.dumps([{"type": "error", "message": marker}]), "", 1)

        store = ArtifactStore(self.work_dir)

        async def worker(url):
            return await validate_one_url(
                url, ValidateOptions(), self.work_dir, session, Path("j"), store=store
            )

        with patch("w3c_validate.core.page.run_one", checker_reports_what_it_reads):
            a, b = await run_pool(list(bodies), 2, worker)

        self.assertEqual(a.errors[0].msg, "page-A")
        self.assertEqual(b.errors[0].msg, "page-B")
        self.assertEqual(a.local_file.name, "x.test_about.html")
        self.assertEqual(b.local_file.name, "x.test_about-1.html")
        self.assertEqual(sorted(p.name for p in self.work_dir.iterdir()),
                         ["x.test_about-1.html", "x.test_about.html"])


if __name__ == "__main__":
    unittest.main()
