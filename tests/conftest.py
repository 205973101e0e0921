"""
Shared fixtures: an in-memory repository and a recording mailer.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from rollcall.core.config import RollcallSettings
from rollcall.core.errors import StorageError
from rollcall.core.github import GitHubItem, RecordStore
from rollcall.core.mailer import Mailer
from rollcall.core.schema import EPOCH


NOW = datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

TEMPLATES = {
    1: {"subject": "{{ jcTitle }}: is your listing current?", "body": "<p>Please check {{jcTitle}}.</p>"},
    2: {"subject": "Reminder: {{ jcTitle }}", "body": "<p>Still waiting on {{ jcTitle }}.</p>"},
    3: {"subject": "Final reminder: {{ jcTitle }}", "body": "<p>Last call for {{ jcTitle }}.</p>"},
    4: {"subject": "{{ jcTitle }} deactivated", "body": "<p>{{ jcTitle }} is now inactive.</p>"},
}


def days_ago(days: int) -> int:
    return int((NOW - timedelta(days=days)).timestamp())


def jc_content(jcid: str = "oxford", title: str = "Oxford RepliCats",
               contact: Optional[str] = "owner@example.org",
               additional: Optional[str] = None,
               last_update: Optional[int] = None,
               last_message: Optional[int] = 0,
               level: Optional[int] = 0) -> str:
    """Journal club markdown with front matter metadata."""
    lines = ["---", "layout: journal-club", f"jcid: {jcid}", f"title: {title}"]
    if contact is not None:
        lines.append(f"contact: {contact}")
    if additional is not None:
        lines.append(f"additional-contact: {additional}")
    if last_update is not None:
        lines.append(f"last-update-timestamp: {last_update}")
    if last_message is not None:
        lines.append(f"last-message-timestamp: {last_message}")
    if level is not None:
        lines.append(f"last-message-level: {level}")
    lines += ["---", "", "We meet on the first Tuesday of each month.", ""]
    return "\n".join(lines)


class FakeRecordStore(RecordStore):
    """In-memory stand-in for the repository contents API."""

    def __init__(self):
        self.files: Dict[str, Dict] = {}
        self.failing_urls = set()
        self.fail_on: Dict[str, StorageError] = {}
        self.calls: List[tuple] = []
        self._sha_counter = 0

    def _next_sha(self) -> str:
        self._sha_counter += 1
        return f"sha{self._sha_counter}"

    def url_for(self, path: str) -> str:
        return f"https://api.example/contents/{path}"

    def add(self, path: str, content: str, modified_at: datetime = EPOCH) -> str:
        self.files[path] = {"content": content, "sha": self._next_sha(), "modified_at": modified_at}
        return self.url_for(path)

    def add_templates(self, templates: Dict[int, Dict] = None):
        for level, template in (templates or TEMPLATES).items():
            self.add(f"_emails/rollcall-message-{level}.json", json.dumps(template))

    def _path_for(self, url: str) -> str:
        return url.split("/contents/", 1)[1]

    def _maybe_fail(self, operation: str):
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def list_items(self, collection: str):
        self.calls.append(("list", collection))
        self._maybe_fail("list")
        prefix = collection.rstrip("/") + "/"
        return [
            {"path": path, "url": self.url_for(path), "type": "file", "sha": f["sha"]}
            for path, f in self.files.items() if path.startswith(prefix)
        ]

    def get_item(self, url: str) -> GitHubItem:
        self.calls.append(("get", url))
        if url in self.failing_urls:
            raise StorageError("Server Error (502)", 502)
        path = self._path_for(url)
        if path not in self.files:
            raise StorageError("Not Found (404)", 404)
        f = self.files[path]
        return GitHubItem(path=path, url=url, sha=f["sha"], content=f["content"], modified_at=f["modified_at"])

    def get_file(self, path: str) -> str:
        self.calls.append(("get_file", path))
        self._maybe_fail("get_file")
        if path not in self.files:
            raise StorageError("Not Found (404)", 404)
        return self.files[path]["content"]

    def create_item(self, path: str, content: str, message: str) -> None:
        self.calls.append(("create", path, message))
        self._maybe_fail("create")
        if path in self.files:
            raise StorageError("Unprocessable Entity (422)", 422)
        self.add(path, content)

    def update_item(self, url: str, content: str, sha: str, message: str) -> None:
        self.calls.append(("update", url, message))
        self._maybe_fail("update")
        path = self._path_for(url)
        if self.files[path]["sha"] != sha:
            raise StorageError("Conflict (409)", 409)
        self.files[path].update(content=content, sha=self._next_sha())

    def delete_item(self, url: str, sha: str, message: str) -> None:
        self.calls.append(("delete", url, message))
        self._maybe_fail("delete")
        path = self._path_for(url)
        if self.files[path]["sha"] != sha:
            raise StorageError("Conflict (409)", 409)
        del self.files[path]

    def operations(self) -> List[str]:
        return [c[0] for c in self.calls]


class FakeMailer(Mailer):
    """Records sent messages; optionally fails every send."""

    def __init__(self, error: Optional[str] = None):
        self.error = error
        self.sent: List[Dict] = []

    def send(self, recipients, subject, body):
        self.sent.append({"recipients": tuple(recipients), "subject": subject, "body": body})
        return self.error


def make_settings(**overrides) -> RollcallSettings:
    values = dict(
        sandbox=False,
        github_repo_api="https://api.github.com/repos/example/journal-clubs",
        github_api_user="jc-rollcall",
        github_token="ghp_test",
        mailgun_api_key="key-test",
        mailgun_domain="mg.example.org",
        mailgun_host="api.mailgun.net",
        from_email_address="rollcall@example.org",
        fetch_workers=4,
    )
    values.update(overrides)
    return RollcallSettings(**values)


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def sandbox_settings():
    return make_settings(sandbox=True)
