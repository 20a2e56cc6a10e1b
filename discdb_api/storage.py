import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .config import Settings
from .errors import ConflictError, FetchError, WriteError
from .jsonl import parse_strict

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 5


@dataclass
class VersionedBlob:
    text: str
    sha: str   # content version token; precondition for the next write


class SnapshotSource:
    """Anonymous read of the raw blob from the static host."""

    def __init__(self, url: str, user_agent: str, timeout: float = 15.0):
        self.url = url
        self.headers = {"User-Agent": user_agent}
        self.timeout = (CONNECT_TIMEOUT, timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SnapshotSource":
        return cls(settings.raw_url, settings.user_agent, settings.timeout)

    def fetch_text(self) -> str:
        try:
            resp = requests.get(self.url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Snapshot fetch from %s failed: %s", self.url, e)
            raise FetchError("Failed to fetch database") from e
        if not resp.ok:
            logger.warning("Snapshot fetch from %s returned %s", self.url, resp.status_code)
            raise FetchError("Failed to fetch database", {"status": resp.status_code})
        resp.encoding = "utf-8"
        return resp.text

    def fetch_snapshot(self) -> List[Dict[str, Any]]:
        return parse_strict(self.fetch_text())


class ContentStore:
    """Authenticated read-with-sha and conditional write through the GitHub contents API."""

    def __init__(self, contents_url: str, token: str, branch: str,
                 user_agent: str, timeout: float = 15.0):
        self.url = contents_url
        self.branch = branch
        self.headers = {
            "Authorization": f"token {token}",
            "User-Agent": user_agent,
            "Accept": "application/vnd.github.v3+json",
        }
        self.timeout = (CONNECT_TIMEOUT, timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ContentStore":
        return cls(settings.contents_url, settings.github_token, settings.branch,
                   settings.user_agent, settings.timeout)

    def _get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        try:
            resp = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Content API read failed: %s", e)
            raise FetchError("Failed to fetch current database") from e
        if not resp.ok:
            logger.warning("Content API read returned %s", resp.status_code)
            raise FetchError("Failed to fetch current database", {"status": resp.status_code})
        try:
            data = resp.json()
        except ValueError as e:
            raise FetchError("Unexpected content API response") from e
        if not isinstance(data, dict):
            raise FetchError("Unexpected content API response")
        return data

    @staticmethod
    def _decode(data: Dict[str, Any]) -> str:
        if data.get("encoding") != "base64":
            raise FetchError("Unexpected content API response",
                             {"encoding": data.get("encoding")})
        try:
            # the API wraps base64 output at 60 columns
            raw = base64.b64decode(data["content"].replace("\n", ""))
            return raw.decode("utf-8")
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError("Unexpected content API response") from e

    def read(self) -> VersionedBlob:
        data = self._get_json(self.url, params={"ref": self.branch})
        sha = data.get("sha")
        if not sha:
            raise FetchError("Unexpected content API response")

        if data.get("encoding") != "base64":
            # files over 1 MB come back with encoding "none" and empty content;
            # the git blob for the same sha still carries the bytes
            git_url = data.get("git_url")
            if not git_url:
                raise FetchError("Unexpected content API response",
                                 {"encoding": data.get("encoding")})
            logger.info("Reading large database through blob %s", sha)
            data = self._get_json(git_url)
        return VersionedBlob(text=self._decode(data), sha=sha)

    def write(self, text: str, sha: str, message: str) -> str:
        """PUT `text` only if the stored blob still has `sha`. Returns the new sha."""
        body = {
            "message": message,
            "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
            "sha": sha,
            "branch": self.branch,
        }
        try:
            resp = requests.put(self.url, headers=self.headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Content API write failed: %s", e)
            raise WriteError("Failed to commit contribution", {"details": str(e)}) from e

        if resp.status_code == 409:
            logger.info("Write rejected, %s no longer matches the stored blob", sha)
            raise ConflictError(
                "Database changed since it was read; retry the contribution",
                {"details": resp.text},
            )
        if not resp.ok:
            logger.warning("Content API write returned %s: %s", resp.status_code, resp.text)
            raise WriteError("Failed to commit contribution", {"details": resp.text})

        try:
            return resp.json()["content"]["sha"]
        except (KeyError, TypeError, ValueError):
            return ""
