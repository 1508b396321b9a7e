from libjira.config import Options
from libjira.errors import (
    DocumentError,
    IssueError,
    JiraClientError,
    MalformedIssue,
    NotAnObject,
    ResolutionFailed,
)
from libjira.models import Attachment, Comment, Issue, JiraProject, NewTaskOptions, SearchFilter
from libjira.navigator import load_document, resolve
from libjira.mapper import build_issue, build_project_map
from libjira.query import build_query
from libjira.jira_client import JiraClient

__all__ = [
    "Options",
    "DocumentError",
    "IssueError",
    "JiraClientError",
    "MalformedIssue",
    "NotAnObject",
    "ResolutionFailed",
    "Attachment",
    "Comment",
    "Issue",
    "JiraProject",
    "NewTaskOptions",
    "SearchFilter",
    "load_document",
    "resolve",
    "build_issue",
    "build_project_map",
    "build_query",
    "JiraClient",
]
