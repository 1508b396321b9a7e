#!/usr/bin/env python
"""
mapper.py – Turn generic Jira JSON documents into model objects.

Field policy for issues:

    • required (``key``, ``fields/summary``, ``fields/issuetype/name``):
      a failed lookup or a non-string raises :class:`MalformedIssue`.
    • optional (description, status, assignee, parent):
      any failure silently becomes ``""``.
    • time tracking (``timeoriginalestimate`` & co.): the lookup itself must
      succeed, but a non-numeric value is read as ``0``.
    • comments / attachments: malformed elements are dropped, the rest kept.

Usage::

    from libjira.navigator import load_document
    from libjira.mapper import build_issue

    issue = build_issue(load_document(resp.content))
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from .config import Options
from .errors import JiraClientError, MalformedIssue, ResolutionFailed
from .models import Attachment, Comment, Issue, JiraProject
from .navigator import Node, resolve

__all__ = [
    "collect_valid",
    "build_issue",
    "build_issue_list",
    "build_comments",
    "build_attachments",
    "build_project_map",
    "build_project_keys",
    "build_task_types",
    "friendly_type_name",
]

log = logging.getLogger("libjira.mapper")

T = TypeVar("T")

REQUIRED_FIELDS = {
    "key": "key",
    "summary": "fields/summary",
    "type": "fields/issuetype/name",
}
OPTIONAL_FIELDS = {
    "description": "fields/description",
    "status": "fields/status/name",
    "assignee": "fields/assignee/name",
}
TIME_FIELDS = {
    "original_estimate": "fields/timeoriginalestimate",
    "remaining_estimate": "fields/timeremainingestimate",
    "time_spent": "fields/timespent",
}
PARENT_PATH = "fields/parent/key"
COMMENTS_PATH = "fields/comment/comments"
ATTACHMENTS_PATH = "fields/attachment"

_DEFAULT_OPTIONS = Options()


# ---------------------------------------------------------------------------
# Small helpers
# ---------------------------------------------------------------------------

def collect_valid(elements: Any, build: Callable[[Any], Optional[T]]) -> List[T]:
    """Apply *build* to every element of *elements*, keeping non-``None`` results.

    A non-list input yields an empty list.
    """
    if not isinstance(elements, list):
        return []
    out: List[T] = []
    for element in elements:
        item = build(element)
        if item is not None:
            out.append(item)
    return out


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _optional_str(path: str, document: Node) -> str:
    try:
        value = resolve(path, document)
    except ResolutionFailed:
        return ""
    return value if isinstance(value, str) else ""


def _required_str(name: str, path: str, document: Node) -> str:
    try:
        value = resolve(path, document)
    except ResolutionFailed as exc:
        raise MalformedIssue(name, f"could not be resolved ({exc})") from exc
    if not isinstance(value, str):
        raise MalformedIssue(name)
    return value


def _time_field(name: str, path: str, document: Node) -> float:
    try:
        value = resolve(path, document)
    except ResolutionFailed as exc:
        raise MalformedIssue(name, f"could not be resolved ({exc})") from exc
    return value if _is_number(value) else 0


def _string_at(node: Any, key: str) -> Optional[str]:
    if not isinstance(node, dict):
        return None
    value = node.get(key)
    return value if isinstance(value, str) else None


# ---------------------------------------------------------------------------
# Nested elements
# ---------------------------------------------------------------------------

def _comment_from_node(node: Any) -> Optional[Comment]:
    cid = _string_at(node, "id")
    body = _string_at(node, "body")
    author = _string_at(node.get("author") if isinstance(node, dict) else None, "displayName")
    if cid is None or body is None or author is None:
        return None
    return Comment(id=cid, body=body, author_name=author)


def _attachment_from_node(node: Any) -> Optional[Attachment]:
    name = _string_at(node, "filename")
    url = _string_at(node, "content")
    self_url = _string_at(node, "self")
    if name is None or url is None or self_url is None:
        return None
    return Attachment(name=name, url=url, self_url=self_url)


def build_comments(elements: Any) -> List[Comment]:
    """Map a raw comment list, dropping entries without id/body/author."""
    return collect_valid(elements, _comment_from_node)


def build_attachments(document: Node) -> List[Attachment]:
    """Map ``fields/attachment``; a missing list is simply empty."""
    try:
        elements = resolve(ATTACHMENTS_PATH, document)
    except ResolutionFailed:
        return []
    return collect_valid(elements, _attachment_from_node)


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------

def build_issue(document: Node, options: Optional[Options] = None) -> Issue:
    """Build an :class:`Issue` from a single issue document.

    Raises :class:`MalformedIssue` naming the first required field that is
    missing or of the wrong type.
    """
    options = options or _DEFAULT_OPTIONS
    required = {name: _required_str(name, path, document) for name, path in REQUIRED_FIELDS.items()}
    if not required["key"]:
        raise MalformedIssue("key", "is empty")

    optional = {name: _optional_str(path, document) for name, path in OPTIONAL_FIELDS.items()}
    parent_key = _optional_str(PARENT_PATH, document)
    times = {name: _time_field(name, path, document) for name, path in TIME_FIELDS.items()}

    try:
        raw_comments = resolve(COMMENTS_PATH, document)
    except ResolutionFailed as exc:
        raise MalformedIssue("comments", f"could not be resolved ({exc})") from exc
    comments = build_comments(raw_comments)
    if isinstance(raw_comments, list) and len(comments) < len(raw_comments):
        log.log(
            options.log_level,
            "%s: dropped %s malformed comment(s)",
            required["key"],
            len(raw_comments) - len(comments),
        )

    files = build_attachments(document)
    issue = Issue(
        parent=f" of {parent_key}" if parent_key else "",
        comments=comments,
        files=files,
        **required,
        **optional,
        **times,
    )
    log.log(options.log_level, "Mapped %s (%s comments, %s files)", issue.key, len(comments), len(files))
    return issue


def build_issue_list(document: Node, options: Optional[Options] = None) -> List[Issue]:
    """Map the ``issues`` array of a search response.

    Issues that fail to build are logged and left out.
    """
    try:
        elements = resolve("issues", document)
    except ResolutionFailed:
        return []
    if not isinstance(elements, list):
        return []

    issues: List[Issue] = []
    for element in elements:
        try:
            issues.append(build_issue(element, options))
        except JiraClientError as exc:
            log.warning("Skipping issue: %s", exc)
    return issues


# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

def friendly_type_name(type_name: str) -> str:
    """``"Sub Task"`` -> ``"sub-task"``."""
    return type_name.lower().replace(" ", "-")


def _projects(document: Node) -> Iterable[Any]:
    projects = resolve("projects", document)
    return projects if isinstance(projects, list) else []


def build_project_map(document: Node) -> Dict[str, JiraProject]:
    """Map ``projects`` (createmeta) to ``{display name: JiraProject}``.

    Missing name/key/id become ``""``. When two projects share a name
    (unnamed ones included) the later one replaces the earlier.
    """
    projmap: Dict[str, JiraProject] = {}
    for node in _projects(document):
        project = JiraProject(
            id=_optional_str("id", node),
            name=_optional_str("name", node),
            key=_optional_str("key", node),
        )
        if project.name in projmap:
            log.warning("Duplicate project name %r, keeping %r", project.name, project.key)
        projmap[project.name] = project
    return projmap


def build_project_keys(document: Node) -> List[str]:
    """Keys from a top-level project list (``GET /project``)."""
    return collect_valid(document, lambda node: _string_at(node, "key"))


def build_task_types(document: Node) -> Dict[str, Dict[str, str]]:
    """Map ``projects`` (createmeta) to ``{project name: {friendly: type name}}``."""
    projmap: Dict[str, Dict[str, str]] = {}
    for node in _projects(document):
        name = _string_at(node, "name")
        if name is None:
            continue
        type_names = collect_valid(
            node.get("issuetypes"), lambda t: _string_at(t, "name")
        )
        projmap[name] = {friendly_type_name(t): t for t in type_names}
    return projmap
