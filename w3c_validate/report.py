"""
Terminal and JSON reporting of validation results.

Human-readable mode prints one ``✔``/``✖`` line per page on stdout and,
for failing pages, one line per error on stderr ending in a clickable
``path:line:col`` location.  JSON mode prints nothing until the run is
over and then exactly one JSON document.
"""

import json
import os
import sys
from pathlib import Path
from typing import TextIO

try:
    from tqdm import tqdm as _tqdm
    _TQDM_AVAILABLE = True
except ImportError:
    _TQDM_AVAILABLE = False

from w3c_validate.results import PageResult, RunSummary

_RESET = "\033[0m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_DIM = "\033[2m"
_BOLD_CYAN = "\033[1;36m"


def _use_colour(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def error_location(result: PageResult, line: int, col: int) -> str:
    """``file:line[:col]`` for an error, preferring the saved artifact."""
    where = str(result.local_file) if result.local_file else (result.url or "<input>")
    if where and not os.path.isabs(where) and os.path.exists(where):
        where = str(Path(where).resolve())
    loc = f"{where}:{line or 0}"
    if col:
        loc += f":{col}"
    return loc


class Reporter:
    """Writes run output, optionally behind a tqdm progress bar."""

    def __init__(
        self,
        json_mode: bool = False,
        progress: bool = False,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.json_mode = json_mode
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self._progress = progress and _TQDM_AVAILABLE and not json_mode
        self._bar = None

    # ------------------------------------------------------------------
    # Low-level output
    # ------------------------------------------------------------------

    def _paint(self, text: str, colour: str, stream: TextIO) -> str:
        if not _use_colour(stream):
            return text
        return f"{colour}{text}{_RESET}"

    def _write(self, text: str, stream: TextIO) -> None:
        if self._bar is not None:
            self._bar.write(text, file=stream)
        else:
            print(text, file=stream, flush=True)

    # ------------------------------------------------------------------
    # Progress bar
    # ------------------------------------------------------------------

    def start_progress(self, total: int, desc: str = "Validating") -> None:
        if not self._progress or self._bar is not None:
            return
        self._bar = _tqdm(
            total=total,
            desc=desc,
            unit="page",
            dynamic_ncols=True,
            file=self.err,
            leave=False,
        )

    def advance(self, done: int = 1, discovered: int = 0) -> None:
        if self._bar is None:
            return
        if discovered:
            self._bar.total += discovered
        self._bar.update(done)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    # ------------------------------------------------------------------
    # Report lines
    # ------------------------------------------------------------------

    def banner(self, text: str) -> None:
        if self.json_mode:
            return
        self._write("", self.out)
        self._write(self._paint(text, _BOLD_CYAN, self.out), self.out)
        self._write("", self.out)

    def page(self, result: PageResult) -> None:
        """Print one page line, plus its errors when it failed."""
        if self.json_mode:
            return
        label = result.final_url or result.url or "<input>"
        if result.ok:
            self._write(self._paint(f"  ✔ {label}", _GREEN, self.out), self.out)
            return

        self._write(self._paint(f"  ✖ {label}", _RED, self.out), self.out)
        for issue in result.errors:
            where = error_location(result, issue.line, issue.col)
            self._write(
                self._paint(f"      {issue.msg}", _RED, self.err)
                + " "
                + self._paint(where, _DIM, self.err),
                self.err,
            )

    def finish(self) -> None:
        """Close the progress bar and end the human-readable block."""
        self.close()
        if not self.json_mode:
            self._write("", self.out)

    def summary_json(self, summary: RunSummary) -> None:
        """Print the whole run as one JSON document."""
        print(json.dumps(summary.to_dict()), file=self.out, flush=True)
