"""errors.py – exception hierarchy shared by the navigator, mapper and client."""
from __future__ import annotations

__all__ = [
    "JiraClientError",
    "ResolutionFailed",
    "NotAnObject",
    "DocumentError",
    "MalformedIssue",
    "IssueError",
]


class JiraClientError(Exception):
    """Base class for every error raised by libjira."""


class ResolutionFailed(JiraClientError):
    """A path could not be walked through a document."""

    def __init__(self, path: str, msg: str = "Path resolution failed"):
        super().__init__(f"{msg}: {path!r}")
        self.path = path


class NotAnObject(ResolutionFailed):
    """An intermediate node on the path is not a JSON object."""

    def __init__(self, path: str, segment: str):
        super().__init__(path, f"Bad path, {segment!r} is not an object")
        self.segment = segment


class DocumentError(JiraClientError):
    """A response body could not be parsed as JSON."""


class MalformedIssue(JiraClientError):
    """A required issue field is missing or has the wrong type."""

    def __init__(self, field: str, reason: str = "missing or not a string"):
        super().__init__(f"Bad issue: field {field!r} {reason}")
        self.field = field


class IssueError(JiraClientError):
    """The server rejected an issue creation request."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"{status_code}: {body}")
        self.status_code = status_code
        self.body = body
