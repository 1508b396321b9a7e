#!/usr/bin/env python
"""models.py – lightweight data structures used across the package."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "Comment",
    "Attachment",
    "Issue",
    "JiraProject",
    "SearchFilter",
    "NewTaskOptions",
]


@dataclass
class Comment:
    id: str
    body: str
    author_name: str

    def __str__(self) -> str:
        return f"[{self.id}] {self.author_name}: {self.body}"


@dataclass
class Attachment:
    name: str
    url: str
    self_url: str


@dataclass
class Issue:
    """A Jira issue with the fields the client cares about.

    ``parent`` is a display label (``" of ABC-1"``) rather than a bare key so
    it can be appended straight after the issue type.
    """

    key: str
    summary: str
    type: str

    status: str = ""
    description: str = ""
    assignee: str = ""
    parent: str = ""

    original_estimate: float = 0
    remaining_estimate: float = 0
    time_spent: float = 0

    comments: List[Comment] = field(default_factory=list)
    files: List[Attachment] = field(default_factory=list)

    def headline(self) -> str:
        """One-line summary: ``KEY [Type of PARENT] (Status) Summary``."""
        status = f" ({self.status})" if self.status else ""
        return f"{self.key} [{self.type}{self.parent}]{status} {self.summary}"

    def to_document(self) -> str:
        """Return a multi-line, human readable rendering of the issue."""
        comments_txt = "\n".join(str(c) for c in self.comments) or "None"
        files_txt = ", ".join(f.name for f in self.files) or "None"

        return (
            f"{self.headline()}\n"
            f"Assignee: {self.assignee or '-'}\n"
            f"Estimate: {self.original_estimate:.0f}s "
            f"(remaining {self.remaining_estimate:.0f}s, spent {self.time_spent:.0f}s)\n"
            f"Files: {files_txt}\n\n"
            f"Description:\n{self.description}\n\n"
            f"Comments:\n{comments_txt}"
        )

    def to_json(self) -> str:
        """Convenience for raw JSON dumps (includes every field)."""
        return json.dumps(asdict(self), ensure_ascii=False, indent=2)


@dataclass(frozen=True)
class JiraProject:
    id: str
    name: str
    key: str


@dataclass
class SearchFilter:
    """Search criteria; every field is optional.

    ``jql`` is a raw query that, when set, replaces all the other criteria.
    """

    project: str = ""
    current_sprint: bool = False
    open: bool = False
    issue: str = ""
    jql: str = ""
    types: List[str] = field(default_factory=list)
    not_types: List[str] = field(default_factory=list)
    statuses: List[str] = field(default_factory=list)
    not_statuses: List[str] = field(default_factory=list)


@dataclass
class NewTaskOptions:
    task_type: str
    summary: str
    original_estimate: str = ""
    parent: Optional[Issue] = None
    # ``name=value`` pairs sent as plain fields / select-list fields
    fields: List[str] = field(default_factory=list)
    select_fields: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    description: str = ""

    def to_fields(self, project_key: str, issue_type: str) -> Dict[str, Any]:
        """Build the ``fields`` payload for ``POST /issue``."""
        fields: Dict[str, Any] = {
            "summary": self.summary,
            "project": {"key": project_key},
            "issuetype": {"name": issue_type},
        }
        if self.parent is not None:
            fields["parent"] = {"key": self.parent.key}
        if self.description:
            fields["description"] = self.description
        if self.original_estimate:
            fields["timetracking"] = {"originalEstimate": self.original_estimate}
        if self.labels:
            fields["labels"] = list(self.labels)
        for name, value in _split_pairs(self.fields):
            fields[name] = value
        for name, value in _split_pairs(self.select_fields):
            fields[name] = {"value": value}
        return fields


def _split_pairs(pairs: List[str]):
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep:
            continue
        yield name, value
