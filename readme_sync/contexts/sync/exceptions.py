"""Custom exceptions for the sync context."""

from typing import Optional

from readme_sync.contexts.table.exceptions import ReadmeSyncError


class SyncConfigError(ReadmeSyncError):
    """
    Raised when a required setting is missing (e.g., the GitHub token).

    Attributes:
        setting: Environment variable or config key that was missing
    """

    def __init__(self, setting: str, hint: Optional[str] = None):
        self.setting = setting
        message = f"Missing {setting}"
        if hint:
            message += f" ({hint})"
        super().__init__(message)


class DocumentStoreError(ReadmeSyncError):
    """
    Raised when reading or writing the README fails.

    Attributes:
        message: Error description
        status_code: HTTP status from the store, when there is one
        response_text: Raw response body, when there is one
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response_text = response_text

        parts = [message]
        if status_code is not None:
            parts[0] = f"{message} ({status_code})"
        if response_text:
            parts.append(response_text)

        super().__init__(": ".join(parts))


class StaleChangeTokenError(DocumentStoreError):
    """
    Raised when the README changed between read and write.

    The write was rejected; nothing was overwritten. Re-running the whole sync
    picks up the new content.
    """

    pass
