#!/usr/bin/env python
"""jira_client.py – Thin wrapper around Jira REST API v2.

* Uses **tenacity** for retry/back‑off on transient GET failures.
* Parses every body through :mod:`libjira.navigator` and builds models via
  :mod:`libjira.mapper`; no raw dicts leak out of the public methods.
* Search URLs come from :mod:`libjira.query`.

The class is stateless beyond the underlying ``requests.Session`` and the
:class:`~libjira.config.Options` it was created with.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import requests
from requests.auth import HTTPBasicAuth
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import Options
from .errors import IssueError, JiraClientError
from .mapper import (
    build_issue,
    build_issue_list,
    build_project_keys,
    build_project_map,
    build_task_types,
)
from .models import Issue, JiraProject, NewTaskOptions, SearchFilter
from .navigator import load_document, resolve
from .query import search_url

log = logging.getLogger(__name__)

NUM_RE = re.compile(r"[0-9]+")


def num_only(text: str) -> str:
    """Return the first run of digits in *text*."""
    match = NUM_RE.search(text)
    if match is None:
        raise JiraClientError("Not a number")
    return match.group(0)


def labels_update(labels: Sequence[str]) -> List[Dict[str, str]]:
    return [{"add": label} for label in labels]


class JiraClient:  # pylint: disable=too-many-public-methods
    """Jira REST v2 helper.

    Parameters
    ----------
    options : Options
        Credentials, server host name (no scheme), TLS toggle, default
        project and verbosity.
    session : requests.Session, optional
        Pre-built session (tests inject a mock here).
    """

    API = "rest/api/2"

    def __init__(self, options: Options, *, session: Optional[requests.Session] = None):
        self.options = options
        self.base_url = f"https://{options.server}"
        self.timeout = options.timeout

        sess = session or requests.Session()
        sess.auth = HTTPBasicAuth(options.user, options.passwd)
        sess.verify = not options.no_check_ssl
        self.session = sess

    # ------------------------------------------------------------------
    # Low-level HTTP
    # ------------------------------------------------------------------

    def url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def issue_url(self, *parts: str) -> str:
        return self.url("/".join((self.API, "issue") + parts))

    def _trace(self, method: str, url: str) -> None:
        log.log(self.options.log_level, "%s %s", method, url)

    @retry(
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(requests.RequestException),
        reraise=True,
    )
    def get(self, url: str) -> requests.Response:
        self._trace("GET", url)
        return self.session.get(url, timeout=self.timeout)

    def post(self, url: str, *, json: Any = None, files: Any = None) -> requests.Response:
        self._trace("POST", url)
        headers = {"X-Atlassian-Token": "nocheck"}
        return self.session.post(url, json=json, files=files, headers=headers, timeout=self.timeout)

    def put(self, url: str, *, json: Any = None) -> requests.Response:
        self._trace("PUT", url)
        return self.session.put(url, json=json, timeout=self.timeout)

    def delete(self, url: str) -> requests.Response:
        self._trace("DELETE", url)
        return self.session.delete(url, timeout=self.timeout)

    @staticmethod
    def _check(resp: requests.Response, limit: int = 400, msg: Optional[str] = None) -> requests.Response:
        if resp.status_code >= limit:
            log.debug("Status %s: %s", resp.status_code, resp.text[:300])
            raise JiraClientError(msg or f"{resp.status_code} {resp.reason}: {resp.text[:200]}")
        return resp

    def _get_document(self, url: str, limit: int = 400) -> Any:
        resp = self._check(self.get(url), limit)
        return load_document(resp.content)

    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    def search(self, search: SearchFilter) -> List[Issue]:
        """Return every issue matching *search* (single page, ``fields=*all``)."""
        document = self._get_document(search_url(self.options.server, search), limit=300)
        issues = build_issue_list(document, self.options)
        log.debug("Search returned %s issues", len(issues))
        return issues

    def get_issue(self, issue_key: str) -> Issue:
        return build_issue(self._get_document(self.issue_url(issue_key)), self.options)

    def add_comment(self, issue_key: str, comment: str) -> None:
        self._check(self.post(self.issue_url(issue_key, "comment"), json={"body": comment}))

    def del_comment(self, issue_key: str, comment_id: str) -> None:
        self._del_by_id("comment", issue_key, comment_id)

    def del_worklog(self, issue_key: str, worklog_id: str) -> None:
        self._del_by_id("worklog", issue_key, worklog_id)

    def _del_by_id(self, issue_object: str, issue_key: str, object_id: str) -> None:
        try:
            cid = num_only(object_id)
        except JiraClientError as exc:
            raise JiraClientError(f"Bad {issue_object} id") from exc
        self._check(self.delete(self.issue_url(issue_key, issue_object, cid)))

    def del_attachment(self, issue_key: str, name: str) -> None:
        issue = self.get_issue(issue_key)
        for att in issue.files:
            if att.name != name:
                continue
            resp = self.delete(att.self_url)
            if resp.status_code == 404:
                raise JiraClientError("Not found")
            if resp.status_code == 403:
                raise JiraClientError("Unauthorized")
            self._check(resp)
            log.info("File %s removed from %s", name, issue_key)
            return
        raise JiraClientError("File not found")

    def upload(self, issue_key: str, file: str) -> None:
        path = Path(file)
        try:
            fh = path.open("rb")
        except OSError as exc:
            raise JiraClientError(f"Cannot read {file}: {exc}") from exc
        with fh:
            resp = self.post(self.issue_url(issue_key, "attachments"), files={"file": (path.name, fh)})
        self._check(resp, limit=300)
        log.info("File %s uploaded to %s", path.name, issue_key)

    def add_tags(self, issue_key: str, tags: Sequence[str]) -> None:
        self.update_issue(issue_key, {"labels": labels_update(tags)})

    def update_issue(self, issue_key: str, update: Dict[str, Any]) -> None:
        resp = self.put(self.url(f"rest/api/latest/issue/{issue_key}"), json={"update": update})
        if resp.status_code != 204:
            log.debug("Update of %s answered %s", issue_key, resp.status_code)
            raise JiraClientError("Bad request")
        log.info("Issue %s updated!", issue_key)

    # ------------------------------------------------------------------
    # Project metadata
    # ------------------------------------------------------------------

    def _createmeta(self) -> Any:
        return self._get_document(self.issue_url("createmeta"))

    def get_task_types(self) -> Dict[str, Dict[str, str]]:
        return build_task_types(self._createmeta())

    def get_task_type(self, friendly_name: str) -> str:
        """Resolve a friendly type name (``sub-task``) in the default project."""
        types = self.get_task_types().get(self.options.project, {})
        try:
            return types[friendly_name]
        except KeyError:
            log.log(self.options.log_level, "Known types for %r: %s", self.options.project, sorted(types))
            raise JiraClientError(f"Task name not found for friendly name {friendly_name}.") from None

    def get_proj_list(self) -> List[str]:
        return build_project_keys(self._get_document(self.url(f"{self.API}/project")))

    def get_projects(self) -> Dict[str, JiraProject]:
        return build_project_map(self._createmeta())

    def create_task(self, project: str, nto: NewTaskOptions) -> str:
        """Create an issue in *project* (display name); return its key."""
        issue_type = self.get_task_type(nto.task_type)
        projects = self.get_projects()
        project_key = projects[project].key if project in projects else ""
        payload = {"fields": nto.to_fields(project_key, issue_type)}
        log.log(self.options.log_level, "Creating issue: %s", payload)

        resp = self.post(self.issue_url(), json=payload)
        if resp.status_code != 201:
            raise IssueError(resp.status_code, resp.text)
        key = resolve("key", load_document(resp.content))
        key = key if isinstance(key, str) else ""
        log.info("%s successfully created!", key)
        return key


__all__ = ["JiraClient", "num_only", "labels_update"]
