import logging

import pytest

from libjira.config import Options
from libjira.errors import MalformedIssue, ResolutionFailed
from libjira.mapper import (
    build_attachments,
    build_comments,
    build_issue,
    build_issue_list,
    build_project_keys,
    build_project_map,
    build_task_types,
    collect_valid,
    friendly_type_name,
)
from libjira.models import Attachment, Comment, JiraProject


def test_build_issue_full(issue_doc):
    issue = build_issue(issue_doc)
    assert issue.key == "OPS-12"
    assert issue.summary == "Rotate TLS certificates"
    assert issue.type == "Sub-task"
    assert issue.status == "In Progress"
    assert issue.assignee == "alice"
    assert issue.parent == " of OPS-10"
    assert issue.original_estimate == 7200
    assert issue.remaining_estimate == 3600
    assert issue.time_spent == 3600
    assert issue.comments == [
        Comment(id="100", body="Started", author_name="Alice"),
        Comment(id="101", body="Need creds", author_name="Bob"),
    ]
    assert issue.files == [
        Attachment(
            name="cert.pem",
            url="https://jira.example.com/secure/attachment/5/cert.pem",
            self_url="https://jira.example.com/rest/api/2/attachment/5",
        )
    ]


def test_verbose_raises_diagnostics_to_info(issue_doc, caplog):
    issue_doc["fields"]["comment"]["comments"].append({"id": "9", "body": "no author"})
    caplog.set_level(logging.INFO, logger="libjira.mapper")

    build_issue(issue_doc)
    assert caplog.messages == []

    build_issue(issue_doc, Options(verbose=True))
    assert "OPS-12: dropped 1 malformed comment(s)" in caplog.messages
    assert all(r.levelno == logging.INFO for r in caplog.records)


@pytest.mark.parametrize(
    "mutate, field",
    [
        (lambda d: d.pop("key"), "key"),
        (lambda d: d.update(key=12), "key"),
        (lambda d: d.update(key=""), "key"),
        (lambda d: d["fields"].pop("summary"), "summary"),
        (lambda d: d["fields"].pop("issuetype"), "type"),
        (lambda d: d["fields"]["issuetype"].update(name=None), "type"),
    ],
)
def test_required_fields(issue_doc, mutate, field):
    mutate(issue_doc)
    with pytest.raises(MalformedIssue) as exc:
        build_issue(issue_doc)
    assert exc.value.field == field


def test_optional_fields_default_to_empty(issue_doc):
    fields = issue_doc["fields"]
    del fields["description"]
    fields["status"] = None
    fields["assignee"] = "not-an-object"
    del fields["parent"]
    issue = build_issue(issue_doc)
    assert issue.description == ""
    assert issue.status == ""
    assert issue.assignee == ""
    assert issue.parent == ""


def test_empty_parent_key_gives_no_label(issue_doc):
    issue_doc["fields"]["parent"] = {"key": ""}
    assert build_issue(issue_doc).parent == ""


def test_time_fields_tolerate_wrong_types(issue_doc):
    fields = issue_doc["fields"]
    fields["timespent"] = "3600"
    fields["timeoriginalestimate"] = None
    del fields["timeremainingestimate"]
    issue = build_issue(issue_doc)
    assert issue.time_spent == 0
    assert issue.original_estimate == 0
    assert issue.remaining_estimate == 0


def test_time_fields_reject_booleans(issue_doc):
    issue_doc["fields"]["timespent"] = True
    assert build_issue(issue_doc).time_spent == 0


def test_malformed_comment_is_dropped(issue_doc):
    comments = issue_doc["fields"]["comment"]["comments"]
    comments.append({"id": "102", "body": "ghost", "author": {}})
    issue = build_issue(issue_doc)
    assert [c.id for c in issue.comments] == ["100", "101"]


def test_comments_field_is_required(issue_doc):
    del issue_doc["fields"]["comment"]
    with pytest.raises(MalformedIssue) as exc:
        build_issue(issue_doc)
    assert exc.value.field == "comments"


def test_empty_comment_container_is_fine(issue_doc):
    issue_doc["fields"]["comment"] = {}
    assert build_issue(issue_doc).comments == []


def test_attachments_are_optional(issue_doc):
    del issue_doc["fields"]["attachment"]
    assert build_issue(issue_doc).files == []


def test_build_comments_drops_each_kind_of_bad_element():
    good = {"id": "1", "body": "ok", "author": {"displayName": "Ann"}}
    elements = [
        good,
        "string",
        {"id": 1, "body": "x", "author": {"displayName": "A"}},
        {"id": "2", "author": {"displayName": "A"}},
        {"id": "3", "body": "x"},
        {"id": "4", "body": "x", "author": "Ann"},
    ]
    assert build_comments(elements) == [Comment(id="1", body="ok", author_name="Ann")]
    assert build_comments(None) == []


def test_build_attachments_drops_bad_elements():
    doc = {
        "fields": {
            "attachment": [
                {"filename": "a.txt", "content": "u1", "self": "s1"},
                {"filename": "b.txt", "content": "u2"},
                {"filename": 3, "content": "u3", "self": "s3"},
                None,
            ]
        }
    }
    assert build_attachments(doc) == [Attachment(name="a.txt", url="u1", self_url="s1")]
    assert build_attachments({"fields": {"attachment": {"not": "a list"}}}) == []
    assert build_attachments({}) == []


def test_collect_valid():
    assert collect_valid([1, 2, 3, 4], lambda n: n * 10 if n % 2 else None) == [10, 30]
    assert collect_valid("abc", lambda c: c) == []


def test_build_issue_list_skips_broken_issues(issue_doc):
    doc = {"issues": [issue_doc, {"key": "BAD-1"}, issue_doc]}
    issues = build_issue_list(doc)
    assert [i.key for i in issues] == ["OPS-12", "OPS-12"]
    assert build_issue_list({"issues": None}) == []
    assert build_issue_list([]) == []


def test_build_project_map():
    doc = {
        "projects": [
            {"id": "1", "name": "Operations", "key": "OPS"},
            {"id": "2", "key": "NON"},
            {"id": 3, "name": "Web", "key": "WEB"},
        ]
    }
    projmap = build_project_map(doc)
    assert projmap["Operations"] == JiraProject(id="1", name="Operations", key="OPS")
    assert projmap[""] == JiraProject(id="2", name="", key="NON")
    assert projmap["Web"].id == ""


def test_build_project_map_unnamed_collision_keeps_last(caplog):
    caplog.set_level(logging.WARNING, logger="libjira.mapper")
    doc = {"projects": [{"key": "A"}, {"key": "B"}]}
    assert build_project_map(doc) == {"": JiraProject(id="", name="", key="B")}
    assert [r.levelno for r in caplog.records] == [logging.WARNING]
    assert "Duplicate project name" in caplog.records[0].getMessage()


def test_build_project_map_edge_cases():
    assert build_project_map({}) == {}
    assert build_project_map({"projects": "nope"}) == {}
    with pytest.raises(ResolutionFailed):
        build_project_map(["not", "an", "object"])


def test_build_task_types():
    doc = {
        "projects": [
            {
                "name": "Operations",
                "issuetypes": [{"name": "Sub Task"}, {"name": "Bug"}, {"id": "9"}],
            },
            {"key": "NONAME", "issuetypes": [{"name": "Task"}]},
            {"name": "Empty"},
        ]
    }
    assert build_task_types(doc) == {
        "Operations": {"sub-task": "Sub Task", "bug": "Bug"},
        "Empty": {},
    }


def test_friendly_type_name():
    assert friendly_type_name("New Feature") == "new-feature"


def test_build_project_keys():
    doc = [{"key": "OPS"}, {"name": "no key"}, {"key": "WEB"}]
    assert build_project_keys(doc) == ["OPS", "WEB"]
    assert build_project_keys({"key": "OPS"}) == []
