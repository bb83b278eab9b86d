"""
Interfaces for the two external collaborators of a sync run.

The orchestrator only depends on these protocols, so tests can pass in-memory
fakes and deployments can swap GitHub for another store.
"""

from dataclasses import dataclass
from typing import List, Protocol

from readme_sync.contexts.table.row_data_structure import ExportRecord


@dataclass(frozen=True)
class DocumentSnapshot:
    """README content plus the token needed to write it back."""

    content: str
    change_token: str


class JobExporter(Protocol):
    """Source of export records, already filtered and sorted newest first."""

    def export(self) -> List[ExportRecord]: ...


class DocumentStore(Protocol):
    """
    Versioned storage for the README.

    ``write`` must reject a stale ``change_token`` (raise) rather than
    overwrite content it has not seen.
    """

    @property
    def target(self) -> str: ...

    def read(self) -> DocumentSnapshot: ...

    def write(self, new_content: str, change_token: str, message: str) -> None: ...
