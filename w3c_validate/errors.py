"""
Exception taxonomy.

Setup failures (``InvalidInput``, ``JavaRuntimeMissing``,
``CheckerUnavailable``, ``PathNotFound``, ``NotHtmlFile``) abort the whole
run.  ``FetchError`` and ``NoStructuredOutput`` describe a single page or
file and are turned into a failed result by the caller.
"""


class ValidationError(Exception):
    """Base class for every error raised by this package."""


class InvalidInput(ValidationError, ValueError):
    """The top-level input is empty, not a string, or not recognisable."""


class JavaRuntimeMissing(ValidationError):
    """No ``java`` executable is available to run the checker."""

    def __init__(self, message: str = "java not found") -> None:
        super().__init__(message)


class CheckerUnavailable(ValidationError):
    """vnu.jar could not be found in the cache nor downloaded."""

    def __init__(self, message: str = "failed to obtain vnu.jar") -> None:
        super().__init__(message)


class PathNotFound(ValidationError, FileNotFoundError):
    """A file or directory target does not exist."""

    def __init__(self, target: str) -> None:
        super().__init__(f"path not found {target}")
        self.target = target


class NotHtmlFile(ValidationError):
    """A single-file target does not carry an HTML extension."""

    def __init__(self, target: str) -> None:
        super().__init__(f"not an html file {target}")
        self.target = target


class NoStructuredOutput(ValidationError):
    """The checker did not emit a parseable JSON payload."""

    def __init__(self, message: str = "validator did not produce JSON output") -> None:
        super().__init__(message)


class FetchError(ValidationError):
    """A page could not be fetched (non-2xx, network error, redirects)."""

    def __init__(self, message: str, url: str, status: int = 0) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
