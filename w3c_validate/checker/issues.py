"""
Parsing of the checker's JSON diagnostics into errors and warnings.

vnu prints its JSON report either as a bare list of messages or as an
object with a ``messages`` list, sometimes surrounded by other text
(JVM notices, progress output).  The first parseable payload found in
stdout, then stderr, then both combined, is used.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from w3c_validate.results import Issue, IssueSet, ProcessOutcome
from w3c_validate.errors import NoStructuredOutput

_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_INT_RE = re.compile(r"\s*[-+]?\d+")


class PayloadShape(str, Enum):
    LIST = "list"            # top-level JSON array of messages
    MESSAGES = "messages"    # {"messages": [...]}
    UNKNOWN = "unknown"      # parsed, but carries no message list


@dataclass(frozen=True)
class Payload:
    shape: PayloadShape
    entries: tuple

    @classmethod
    def from_json(cls, data: Any) -> "Payload":
        if isinstance(data, list):
            return cls(PayloadShape.LIST, tuple(data))
        if isinstance(data, dict) and isinstance(data.get("messages"), list):
            return cls(PayloadShape.MESSAGES, tuple(data["messages"]))
        return cls(PayloadShape.UNKNOWN, ())


def _try_slice(text: str, opener: str, closer: str) -> Any:
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end == -1 or end <= start:
        return None
    try:
        return json.loads(text[start:end + 1])
    except ValueError:
        return None


def find_json(text: str | None) -> Any:
    """Return the first JSON array, else the first JSON object, embedded
    in *text*, or ``None``."""
    s = str(text or "")
    data = _try_slice(s, "[", "]")
    if data is not None:
        return data
    return _try_slice(s, "{", "}")


def locate_payload(outcome: ProcessOutcome) -> Payload:
    """Find the structured payload in *outcome*'s streams.

    Raises :class:`NoStructuredOutput` when none of them contains JSON.
    """
    for text in (outcome.stdout, outcome.stderr, (outcome.stdout or "") + (outcome.stderr or "")):
        data = find_json(text)
        if data is not None:
            return Payload.from_json(data)
    raise NoStructuredOutput()


def clean_message(text: Any) -> str:
    """Collapse runs of whitespace and trim."""
    return _WHITESPACE_RE.sub(" ", str(text or "")).strip()


def _first_int(entry: dict, *keys: str) -> int:
    for key in keys:
        value = entry.get(key)
        if not value:
            continue
        m = _LEADING_INT_RE.match(str(value))
        return max(0, int(m.group(0))) if m else 0
    return 0


def issues_from_payload(payload: Payload, warnings: int = 0) -> IssueSet:
    """Split *payload* entries into errors and warning-grade warnings.

    ``error`` entries are always kept.  ``info``/``warning`` entries are
    kept as warnings only when *warnings* > 0 and the entry is warning
    grade by type or sub-type; plain informational notes are dropped.
    Entries with an empty message are skipped.
    """
    issues = IssueSet()

    for raw in payload.entries:
        entry = raw if isinstance(raw, dict) else {}
        kind = str(entry.get("type") or "").lower()
        sub_kind = str(entry.get("subType") or "").lower()

        msg = clean_message(entry.get("message") or entry.get("msg") or "")
        if not msg:
            continue

        issue = Issue(
            line=_first_int(entry, "lastLine", "firstLine", "line"),
            col=_first_int(entry, "lastColumn", "firstColumn", "column"),
            msg=msg,
        )

        if kind == "error":
            issues.errors.append(issue)
            continue

        if warnings > 0 and kind in ("info", "warning"):
            if sub_kind == "warning" or kind == "warning":
                issues.warnings.append(issue)

    return issues


def parse_issues(outcome: ProcessOutcome, warnings: int = 0) -> IssueSet:
    """Locate the JSON payload in *outcome* and classify its entries."""
    return issues_from_payload(locate_payload(outcome), warnings)
