"""cli.py – Console entry‑point for the libjira package.

Run ``libjira search --sprint --open`` to list issues, ``libjira show KEY``
to print one, and so on; ``libjira -h`` lists every sub‑command.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import requests

from .config import Options
from .errors import JiraClientError
from .jira_client import JiraClient
from .models import NewTaskOptions, SearchFilter

log = logging.getLogger("libjira.cli")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _search(client: JiraClient, args: argparse.Namespace) -> None:
    search = SearchFilter(
        project=args.project or "",
        current_sprint=args.sprint,
        open=args.open,
        issue=args.issue or "",
        jql=args.jql or "",
        types=args.type or [],
        not_types=args.not_type or [],
        statuses=args.status or [],
        not_statuses=args.not_status or [],
    )
    for issue in client.search(search):
        print(issue.headline())


def _show(client: JiraClient, args: argparse.Namespace) -> None:
    issue = client.get_issue(args.key)
    print(issue.to_json() if args.json else issue.to_document())


def _create(client: JiraClient, args: argparse.Namespace) -> None:
    nto = NewTaskOptions(
        task_type=args.task_type,
        summary=args.summary,
        original_estimate=args.estimate or "",
        parent=client.get_issue(args.parent) if args.parent else None,
        fields=args.field or [],
        select_fields=args.select or [],
        labels=args.label or [],
        description=args.description or "",
    )
    print(client.create_task(args.target, nto))


def _projects(client: JiraClient, args: argparse.Namespace) -> None:
    for name, project in sorted(client.get_projects().items()):
        print(f"{project.key}\t{project.id}\t{name}")


def _types(client: JiraClient, args: argparse.Namespace) -> None:
    for project, types in sorted(client.get_task_types().items()):
        print(project)
        for friendly, name in sorted(types.items()):
            print(f"  {friendly}\t{name}")


COMMANDS = {
    "search": _search,
    "show": _show,
    "comment": lambda c, a: c.add_comment(a.key, a.text),
    "rm-comment": lambda c, a: c.del_comment(a.key, a.id),
    "rm-worklog": lambda c, a: c.del_worklog(a.key, a.id),
    "upload": lambda c, a: c.upload(a.key, a.file),
    "rm-file": lambda c, a: c.del_attachment(a.key, a.name),
    "tag": lambda c, a: c.add_tags(a.key, a.labels),
    "create": _create,
    "projects": _projects,
    "types": _types,
}


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="libjira", description="Jira REST command-line client")
    p.add_argument("-u", "--user", help="Your username (default: $JIRA_USER)")
    p.add_argument("-p", "--pass", dest="passwd", help="Your password (default: $JIRA_PASSWORD)")
    p.add_argument("-n", "--no-check-ssl", action="store_true", default=None, help="Don't check ssl validity")
    p.add_argument("-v", "--verbose", action="store_true", help="Be verbose")
    p.add_argument("-j", "--project", help="Default project (default: $JIRA_PROJECT)")
    p.add_argument("-s", "--server", help="Jira server, just the domain name (default: $JIRA_SERVER)")
    sub = p.add_subparsers(dest="cmd", required=True)

    search = sub.add_parser("search", help="Search issues")
    search.add_argument("--sprint", action="store_true", help="Only issues in open sprints")
    search.add_argument("--open", action="store_true", help="Only open issues")
    search.add_argument("--issue", help="An issue and its sub-tasks")
    search.add_argument("--type", action="append", help="Include issue type (repeatable)")
    search.add_argument("--not-type", action="append", help="Exclude issue type (repeatable)")
    search.add_argument("--status", action="append", help="Include status (repeatable)")
    search.add_argument("--not-status", action="append", help="Exclude status (repeatable)")
    search.add_argument("--jql", help="Raw JQL; overrides every other filter")

    show = sub.add_parser("show", help="Print a single issue")
    show.add_argument("key")
    show.add_argument("--json", action="store_true", help="Dump as JSON")

    comment = sub.add_parser("comment", help="Comment on an issue")
    comment.add_argument("key")
    comment.add_argument("text")

    for name, what in (("rm-comment", "comment"), ("rm-worklog", "worklog entry")):
        rm = sub.add_parser(name, help=f"Delete a {what}")
        rm.add_argument("key")
        rm.add_argument("id")

    upload = sub.add_parser("upload", help="Attach a file to an issue")
    upload.add_argument("key")
    upload.add_argument("file")

    rm_file = sub.add_parser("rm-file", help="Remove an attachment by file name")
    rm_file.add_argument("key")
    rm_file.add_argument("name")

    tag = sub.add_parser("tag", help="Add labels to an issue")
    tag.add_argument("key")
    tag.add_argument("labels", nargs="+")

    create = sub.add_parser("create", help="Create an issue")
    create.add_argument("target", metavar="PROJECT", help="Project display name")
    create.add_argument("task_type", metavar="TYPE", help="Friendly type name, e.g. sub-task")
    create.add_argument("summary")
    create.add_argument("--parent", help="Parent issue key")
    create.add_argument("--description")
    create.add_argument("--estimate", help="Original estimate, e.g. 2h")
    create.add_argument("--label", action="append")
    create.add_argument("--field", action="append", metavar="NAME=VALUE")
    create.add_argument("--select", action="append", metavar="NAME=VALUE")

    sub.add_parser("projects", help="List projects")
    sub.add_parser("types", help="List issue types per project")

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    options = Options.from_env(
        user=args.user,
        passwd=args.passwd,
        server=args.server,
        no_check_ssl=args.no_check_ssl,
        verbose=args.verbose,
        project=args.project,
    )
    if not options.server:
        parser.error("no server given (use --server or set JIRA_SERVER)")

    client = JiraClient(options)
    try:
        COMMANDS[args.cmd](client, args)
    except (JiraClientError, requests.RequestException) as exc:
        log.error("%s failed: %s", args.cmd, exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
