"""Test configuration ensuring local package import when editable install not active.

Also provides a realistic issue document shared by the mapper and client tests.
"""

from __future__ import annotations

import copy
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

ISSUE = {
    "key": "OPS-12",
    "self": "https://jira.example.com/rest/api/2/issue/10012",
    "fields": {
        "summary": "Rotate TLS certificates",
        "description": "The wildcard cert expires next week.",
        "issuetype": {"name": "Sub-task"},
        "status": {"name": "In Progress"},
        "assignee": {"name": "alice", "displayName": "Alice"},
        "parent": {"key": "OPS-10"},
        "timeoriginalestimate": 7200,
        "timeremainingestimate": 3600,
        "timespent": 3600,
        "comment": {
            "comments": [
                {"id": "100", "body": "Started", "author": {"displayName": "Alice"}},
                {"id": "101", "body": "Need creds", "author": {"displayName": "Bob"}},
            ]
        },
        "attachment": [
            {
                "filename": "cert.pem",
                "content": "https://jira.example.com/secure/attachment/5/cert.pem",
                "self": "https://jira.example.com/rest/api/2/attachment/5",
            }
        ],
    },
}


@pytest.fixture
def issue_doc():
    return copy.deepcopy(ISSUE)
