"""
Tests for the checker subprocess invocation.
"""

import os
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from w3c_validate.checker.runner import build_args, checker_env, run_one
from w3c_validate.config import PROXY_ENV_VARS


def _fake_process(stdout=b"", stderr=b"", returncode=0):
    proc = MagicMock()
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    proc.returncode = returncode
    return proc


class TestBuildArgs(unittest.TestCase):
    def test_layout(self):
        args = build_args("/tmp/vnu.jar", "/tmp/page.html")
        self.assertEqual(args[0], "java")
        self.assertIn("-Djava.net.useSystemProxies=false", args)
        jar_at = args.index("-jar")
        self.assertEqual(args[jar_at + 1], "/tmp/vnu.jar")
        self.assertEqual(
            args[jar_at + 2:],
            ["--format", "json", "--asciiquotes", "--no-langdetect", "/tmp/page.html"],
        )

    def test_proxy_properties_precede_jar(self):
        args = build_args("vnu.jar", "a.html")
        self.assertLess(args.index("-Dhttps.proxyHost="), args.index("-jar"))

    def test_force_html_parser(self):
        args = build_args("vnu.jar", "a.html", html=True)
        self.assertEqual(args[-2:], ["--html", "a.html"])
        self.assertNotIn("--html", build_args("vnu.jar", "a.html"))


class TestCheckerEnv(unittest.TestCase):
    def test_proxies_blanked(self):
        with patch.dict(os.environ, {"HTTPS_PROXY": "http://proxy:3128", "KEEP_ME": "1"}):
            env = checker_env()
            self.assertEqual(env["KEEP_ME"], "1")
            for name in PROXY_ENV_VARS:
                self.assertEqual(env[name], "")
            # the real environment is left alone
            self.assertEqual(os.environ["HTTPS_PROXY"], "http://proxy:3128")


class TestRunOne(unittest.IsolatedAsyncioTestCase):

    async def test_captures_streams(self):
        proc = _fake_process(stdout=b"", stderr=b'{"messages":[]}', returncode=0)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)) as spawn:
            outcome = await run_one("/tmp/p.html", "/tmp/vnu.jar")
        self.assertEqual(outcome.stderr, '{"messages":[]}')
        self.assertEqual(outcome.exit_code, 0)
        args, kwargs = spawn.call_args
        self.assertEqual(args[-1], "/tmp/p.html")
        self.assertEqual(kwargs["env"]["http_proxy"], "")

    async def test_nonzero_exit_does_not_raise(self):
        proc = _fake_process(stdout=b"[]", stderr=b"", returncode=1)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            outcome = await run_one("p.html", "vnu.jar")
        self.assertEqual(outcome.exit_code, 1)
        self.assertEqual(outcome.stdout, "[]")

    async def test_invalid_utf8_replaced(self):
        proc = _fake_process(stdout=b"\xff[]", returncode=0)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            outcome = await run_one("p.html", "vnu.jar")
        self.assertTrue(outcome.stdout.endswith("[]"))

    async def test_spawn_failure(self):
        with patch("asyncio.create_subprocess_exec",
                   AsyncMock(side_effect=FileNotFoundError("java"))):
            outcome = await run_one("p.html", "vnu.jar")
        self.assertEqual(outcome.exit_code, 1)
        self.assertEqual(outcome.stdout, "")


if __name__ == "__main__":
    unittest.main()
