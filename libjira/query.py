"""query.py – Build JQL search strings from a :class:`SearchFilter`.

The result is already escaped for the ``jql=`` query parameter (spaces become
``+``) and always ends with ``order by rank``.
"""
from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

from .models import SearchFilter

__all__ = ["build_query", "search_url", "escape"]

JOIN = " AND "
ORDER_BY = "order by rank"


def escape(text: str) -> str:
    return text.replace(" ", "+")


def _quoted_list(values: Sequence[str]) -> str:
    return ",".join(f"'{v}'" for v in values)


def _issue_clause(f: SearchFilter) -> str:
    return f"issue = '{f.issue}' or parent = '{f.issue}'"


# Fixed clause order; each entry contributes at most one predicate.
CLAUSES: List[Tuple[Callable[[SearchFilter], object], Callable[[SearchFilter], str]]] = [
    (lambda f: f.current_sprint, lambda f: "sprint in openSprints()"),
    (lambda f: f.open, lambda f: "status = 'open'"),
    (lambda f: f.issue, _issue_clause),
    (lambda f: f.project, lambda f: f"project = '{f.project}'"),
    (lambda f: f.types, lambda f: f"type in ({_quoted_list(f.types)})"),
    # quoted like the other list clauses; unquoted multi-word names break JQL
    (lambda f: f.not_types, lambda f: f"type not in ({_quoted_list(f.not_types)})"),
    (lambda f: f.statuses, lambda f: f"status in ({_quoted_list(f.statuses)})"),
    (lambda f: f.not_statuses, lambda f: f"status not in ({_quoted_list(f.not_statuses)})"),
]


def build_query(search: SearchFilter) -> str:
    """Return the escaped JQL for *search*.

    A non-empty ``search.jql`` is used as-is and every other criterion is
    ignored. With no criteria at all the query is just ``order+by+rank``.
    """
    if search.jql:
        return escape(search.jql)

    clauses = [escape(render(search)) for wanted, render in CLAUSES if wanted(search)]
    if not clauses:
        return escape(ORDER_BY)
    return escape(JOIN).join(clauses) + escape(" " + ORDER_BY)


def search_url(server: str, search: SearchFilter) -> str:
    """Full search endpoint URL for *search* on *server* (bare host name)."""
    return f"https://{server}/rest/api/2/search?jql={build_query(search)}&fields=*all"
