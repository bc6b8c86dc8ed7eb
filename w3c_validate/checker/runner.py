"""
Invocation of the vnu.jar checker as an asyncio subprocess.
"""

import asyncio
import os
from pathlib import Path

from w3c_validate.config import JAVA_BIN, PROXY_ENV_VARS
from w3c_validate.results import ProcessOutcome
from w3c_validate.utils.log import log

# JVM system properties that stop vnu from picking up a proxy on its own
_JVM_PROXY_ARGS = [
    "-Djava.net.useSystemProxies=false",
    "-Dhttp.proxyHost=", "-Dhttp.proxyPort=",
    "-Dhttps.proxyHost=", "-Dhttps.proxyPort=",
]


def checker_env() -> dict[str, str]:
    """Return a copy of ``os.environ`` with proxy variables blanked."""
    env = dict(os.environ)
    for name in PROXY_ENV_VARS:
        env[name] = ""
    return env


def build_args(jar_path: str | Path, file: str | Path, html: bool = False) -> list[str]:
    """Command line for checking *file* with the jar at *jar_path*."""
    args = [
        JAVA_BIN,
        *_JVM_PROXY_ARGS,
        "-jar", str(jar_path),
        "--format", "json",
        "--asciiquotes",
        "--no-langdetect",
    ]
    if html:
        args.append("--html")
    args.append(str(file))
    return args


async def run_one(file: str | Path, jar_path: str | Path, html: bool = False) -> ProcessOutcome:
    """
    Run the checker against a single *file*.

    Never raises on a non-zero exit status: vnu's exit code does not
    reliably reflect validity, so the captured streams are returned for
    :func:`w3c_validate.checker.issues.parse_issues` to interpret.  A
    process that cannot be spawned yields exit code 1 and empty output.
    """
    args = build_args(jar_path, file, html=html)
    log.debug("[CHECK] %s", file)

    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=checker_env(),
        )
    except OSError as exc:
        log.warning("[ERR] Could not start checker for %s: %s", file, exc)
        return ProcessOutcome(stdout="", stderr=str(exc), exit_code=1)

    stdout, stderr = await proc.communicate()
    outcome = ProcessOutcome(
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        exit_code=proc.returncode or 0,
    )
    log.debug("[CHECK] %s exited with %d", file, outcome.exit_code)
    return outcome
