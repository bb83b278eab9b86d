"""
Sync Context

Responsibilities:
- Exports verified job postings for publication
- Reads and conditionally writes the README (GitHub or local file)
- Orchestrates a sync run and reports whether anything changed

Owns: Collaborator I/O, configuration, commit messages
Never: Edits table text directly (delegates to the table context)
"""

from readme_sync.contexts.sync.collaborators import DocumentSnapshot, DocumentStore, JobExporter
from readme_sync.contexts.sync.config import (
    GitHubSettings,
    SyncSettings,
    load_github_settings,
    load_sync_settings,
)
from readme_sync.contexts.sync.exceptions import (
    DocumentStoreError,
    StaleChangeTokenError,
    SyncConfigError,
)
from readme_sync.contexts.sync.export import JsonFileJobExporter, filter_verified_jobs
from readme_sync.contexts.sync.github_contents import GitHubContentsStore
from readme_sync.contexts.sync.local_store import LocalFileDocumentStore
from readme_sync.contexts.sync.orchestrator import SyncResult, run_sync_action, sync_readme_jobs

__all__ = [
    # Orchestration
    "sync_readme_jobs",
    "run_sync_action",
    "SyncResult",
    # Collaborators
    "DocumentSnapshot",
    "DocumentStore",
    "JobExporter",
    "JsonFileJobExporter",
    "GitHubContentsStore",
    "LocalFileDocumentStore",
    "filter_verified_jobs",
    # Configuration
    "SyncSettings",
    "GitHubSettings",
    "load_sync_settings",
    "load_github_settings",
    # Errors
    "SyncConfigError",
    "DocumentStoreError",
    "StaleChangeTokenError",
]
