"""
GitHub Contents API document store.

Reads and writes the README through ``/repos/{repo}/contents/{path}``. The file
blob sha is the change token: GitHub rejects a PUT whose sha no longer matches
the current file, which is how concurrent edits are detected.
"""

import base64
from typing import Optional
from urllib.parse import quote

import requests

from readme_sync.contexts.sync.collaborators import DocumentSnapshot
from readme_sync.contexts.sync.config import GitHubSettings
from readme_sync.contexts.sync.exceptions import DocumentStoreError, StaleChangeTokenError
from readme_sync.contexts.sync.logger import _log_debug

GITHUB_API_VERSION = "2022-11-28"
REQUEST_TIMEOUT = 30

# Status codes GitHub uses for a sha that no longer matches the file
STALE_STATUS_CODES = {409}


def decode_base64_to_utf8(payload: str) -> str:
    # The contents API wraps base64 payloads with newlines
    return base64.b64decode(payload.replace("\n", "")).decode("utf-8")


def encode_utf8_to_base64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def encode_content_path(path: str) -> str:
    """URL-encode each path segment, keeping the slashes."""
    return "/".join(quote(segment, safe="") for segment in path.split("/"))


def _is_stale_sha_response(response: requests.Response) -> bool:
    if response.status_code in STALE_STATUS_CODES:
        return True
    return response.status_code == 422 and "sha" in response.text.lower()


class GitHubContentsStore:
    """
    DocumentStore backed by a file in a GitHub repository.

    Args:
        settings: Repository, path, branch, API base URL and token
        session: Optional requests session (tests pass a stub)
    """

    def __init__(self, settings: GitHubSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def target(self) -> str:
        return self.settings.target

    @property
    def contents_url(self) -> str:
        base_url = self.settings.api_base_url.rstrip("/")
        repo = self.settings.require_repo()
        return f"{base_url}/repos/{repo}/contents/{encode_content_path(self.settings.path)}"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.settings.require_token()}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def read(self) -> DocumentSnapshot:
        """
        Fetch the README and its blob sha.

        Raises:
            DocumentStoreError: On a non-2xx response or non-base64 content
        """
        params = {"ref": self.settings.branch} if self.settings.branch else None
        _log_debug(f"GET {self.contents_url}")

        response = self.session.get(
            self.contents_url, headers=self._headers(), params=params, timeout=REQUEST_TIMEOUT
        )
        if not response.ok:
            raise DocumentStoreError(
                "Failed to fetch README from GitHub", response.status_code, response.text
            )

        payload = response.json()
        if payload.get("encoding") != "base64":
            raise DocumentStoreError(f"Unexpected GitHub content encoding: {payload.get('encoding')}")

        return DocumentSnapshot(
            content=decode_base64_to_utf8(payload["content"]), change_token=payload["sha"]
        )

    def write(self, new_content: str, change_token: str, message: str) -> None:
        """
        Commit new README content, conditioned on ``change_token``.

        Raises:
            StaleChangeTokenError: If the README changed since it was read
            DocumentStoreError: On any other non-2xx response
        """
        body = {
            "message": message,
            "content": encode_utf8_to_base64(new_content),
            "sha": change_token,
        }
        if self.settings.branch:
            body["branch"] = self.settings.branch

        _log_debug(f"PUT {self.contents_url} (sha {change_token})")

        response = self.session.put(
            self.contents_url, headers=self._headers(), json=body, timeout=REQUEST_TIMEOUT
        )
        if response.ok:
            return

        if _is_stale_sha_response(response):
            raise StaleChangeTokenError(
                "README changed on GitHub since it was read", response.status_code, response.text
            )
        raise DocumentStoreError(
            "Failed to update README on GitHub", response.status_code, response.text
        )
