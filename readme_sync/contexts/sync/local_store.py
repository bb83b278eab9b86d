"""
Local file document store.

Lets a README on disk go through the same sync path as the GitHub one. The
change token is the SHA-256 of the file content at read time.
"""

import hashlib
from pathlib import Path

from readme_sync.contexts.sync.collaborators import DocumentSnapshot
from readme_sync.contexts.sync.exceptions import DocumentStoreError, StaleChangeTokenError


def sha256_checksum(content: str) -> str:
    """SHA-256 hex digest of a UTF-8 string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class LocalFileDocumentStore:
    """DocumentStore for a file on the local filesystem."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def target(self) -> str:
        return str(self.path)

    def _read_text(self) -> str:
        try:
            # newline="" keeps \r\n intact so the byte comparison is honest
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError as e:
            raise DocumentStoreError(f"README not found: {self.path}") from e

    def read(self) -> DocumentSnapshot:
        content = self._read_text()
        return DocumentSnapshot(content=content, change_token=sha256_checksum(content))

    def write(self, new_content: str, change_token: str, message: str) -> None:
        """
        Overwrite the file if it still matches ``change_token``.

        ``message`` is accepted for interface parity and not stored.

        Raises:
            StaleChangeTokenError: If the file changed since it was read
        """
        if sha256_checksum(self._read_text()) != change_token:
            raise StaleChangeTokenError(f"README changed on disk since it was read: {self.path}")

        with open(self.path, "w", encoding="utf-8", newline="") as f:
            f.write(new_content)
