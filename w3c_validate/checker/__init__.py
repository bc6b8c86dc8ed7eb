"""vnu.jar checker: binary acquisition, subprocess invocation, output parsing."""

from w3c_validate.checker.binary import CheckerBinary, default_checker, has_java, is_jar, resolve_jar_path
from w3c_validate.checker.issues import parse_issues
from w3c_validate.checker.runner import run_one

__all__ = [
    "CheckerBinary",
    "default_checker",
    "has_java",
    "is_jar",
    "resolve_jar_path",
    "parse_issues",
    "run_one",
]
