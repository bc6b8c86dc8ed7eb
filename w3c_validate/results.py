"""
Result types shared by the runner, the page validator and the crawler.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Job:
    """One crawl unit: a URL and its BFS distance from the seed."""
    url: str
    depth: int


@dataclass
class Issue:
    """One checker diagnostic."""
    line: int
    col: int
    msg: str

    def to_dict(self) -> dict:
        return {"line": self.line, "col": self.col, "msg": self.msg}


@dataclass
class IssueSet:
    """Errors and warnings parsed from one checker run."""
    errors: list[Issue] = field(default_factory=list)
    warnings: list[Issue] = field(default_factory=list)

    def is_ok(self, include_warnings: bool) -> bool:
        if self.errors:
            return False
        return not (include_warnings and self.warnings)


@dataclass
class ProcessOutcome:
    """Captured output of one checker subprocess."""
    stdout: str
    stderr: str
    exit_code: int


@dataclass
class PageResult:
    """Outcome of validating one crawled page or one local file."""
    url: str | None
    ok: bool
    errors: list[Issue] = field(default_factory=list)
    warnings: list[Issue] = field(default_factory=list)
    final_url: str | None = None
    links: list[str] = field(default_factory=list)
    depth: int = 0
    # Saved artifact the diagnostics' line/col refer to, if any
    local_file: Path | None = None

    @classmethod
    def from_issues(
        cls,
        url: str | None,
        issues: IssueSet,
        include_warnings: bool,
        **extra,
    ) -> "PageResult":
        return cls(
            url=url,
            ok=issues.is_ok(include_warnings),
            errors=issues.errors,
            warnings=issues.warnings,
            **extra,
        )

    @classmethod
    def failure(cls, url: str, message: str, depth: int = 0) -> "PageResult":
        """A not-ok result carrying *message* as its single error."""
        return cls(
            url=url,
            ok=False,
            errors=[Issue(line=0, col=0, msg=message)],
            final_url=url,
            depth=depth,
        )

    def to_dict(self) -> dict:
        return {
            "url": self.final_url or self.url,
            "ok": self.ok,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass
class RunSummary:
    """Aggregated pass/fail counts for a whole run."""
    passed: int = 0
    failed: int = 0
    results: list[PageResult] = field(default_factory=list)

    def record(self, result: PageResult) -> None:
        self.results.append(result)
        if result.ok:
            self.passed += 1
        else:
            self.failed += 1

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }
