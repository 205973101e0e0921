"""
Record storage backed by the GitHub repository contents API.

Journal clubs, their inactive archive and the email templates all live as
files in one repository. Writes carry the blob sha they were read at, so a
concurrent edit turns into a rejected update instead of a lost one.
"""

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional

import requests

from .errors import StorageError
from .schema import EPOCH


@dataclass(frozen=True)
class GitHubItem:
    """A fetched repository file."""
    path: str
    url: str
    sha: str
    content: str
    modified_at: datetime = EPOCH


def decode_content(encoded: str) -> str:
    """Decode the base64 payload of a contents API response."""
    return base64.b64decode(encoded or "").decode("utf-8")


def encode_content(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def parse_last_modified(value: Optional[str]) -> datetime:
    """Parse an HTTP Last-Modified header, falling back to the epoch."""
    if not value:
        return EPOCH
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class RecordStore(ABC):
    """
    Storage operations the rollcall needs.
    All methods raise StorageError on a non-success answer or a network error.
    """

    @abstractmethod
    def list_items(self, collection: str) -> List[Dict[str, Any]]:
        """List the entries of a collection (dicts with at least path, url, type)."""
        pass

    @abstractmethod
    def get_item(self, url: str) -> GitHubItem:
        """Fetch one item with its content, sha and last-modified time."""
        pass

    @abstractmethod
    def get_file(self, path: str) -> str:
        """Fetch the decoded text of the file at `path`."""
        pass

    @abstractmethod
    def create_item(self, path: str, content: str, message: str) -> None:
        pass

    @abstractmethod
    def update_item(self, url: str, content: str, sha: str, message: str) -> None:
        pass

    @abstractmethod
    def delete_item(self, url: str, sha: str, message: str) -> None:
        pass


class GitHubRecordStore(RecordStore):
    """RecordStore over https://api.github.com/repos/<owner>/<repo>."""

    def __init__(self, api_base: str, user: str, token: str,
                 timeout: float = 30.0, session: requests.Session = None):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "User-Agent": user,
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
        }

    def contents_url(self, path: str) -> str:
        return f"{self.api_base}/contents/{path.lstrip('/')}"

    def _request(self, method: str, url: str, payload: Dict[str, Any] = None) -> requests.Response:
        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StorageError(f"{method} {url} failed: {e}") from e
        if not response.ok:
            raise StorageError(f"{response.reason} ({response.status_code})", response.status_code)
        return response

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise StorageError(f"{response.url} returned invalid JSON: {e}", response.status_code) from e

    def _file_json(self, response: requests.Response) -> Dict[str, Any]:
        data = self._json(response)
        if not isinstance(data, dict):
            raise StorageError(f"{response.url} is not a file", response.status_code)
        return data

    def list_items(self, collection: str) -> List[Dict[str, Any]]:
        items = self._json(self._request("GET", self.contents_url(collection)))
        if not isinstance(items, list):
            raise StorageError(f"{collection} is not a directory")
        return items

    def get_item(self, url: str) -> GitHubItem:
        response = self._request("GET", url)
        data = self._file_json(response)
        if "sha" not in data:
            raise StorageError(f"{url} has no revision sha")
        return GitHubItem(
            path=data.get("path", ""),
            url=data.get("url", url),
            sha=data["sha"],
            content=decode_content(data.get("content")),
            modified_at=parse_last_modified(response.headers.get("last-modified")),
        )

    def get_file(self, path: str) -> str:
        data = self._file_json(self._request("GET", self.contents_url(path)))
        return decode_content(data.get("content"))

    def create_item(self, path: str, content: str, message: str) -> None:
        self._request("PUT", self.contents_url(path), {
            "message": message,
            "content": encode_content(content),
        })

    def update_item(self, url: str, content: str, sha: str, message: str) -> None:
        self._request("PUT", url, {
            "message": message,
            "content": encode_content(content),
            "sha": sha,
        })

    def delete_item(self, url: str, sha: str, message: str) -> None:
        self._request("DELETE", url, {
            "message": message,
            "sha": sha,
        })
