"""
Verified job export.

Selects the postings published in the README: status Verified, tagged with the
configured country, experience level and job category, newest first.

Input rows follow the shape of the data store's joined select:

    {
        "id": "...", "title": "...", "created_at": "...", "url": "...",
        "company_id": "...", "job_status": "Verified",
        "company": {"company_name": "..."},
        "job_posting_country": [{"country": {"country_name": "Singapore"}}],
        "job_posting_experience_level": [{"experience_level": {"experience_level": "Internship"}}],
        "job_posting_job_category": [{"job_category": {"job_category_name": "Tech"}}]
    }
"""

import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from readme_sync.contexts.sync.config import SyncSettings
from readme_sync.contexts.sync.exceptions import SyncConfigError
from readme_sync.contexts.sync.logger import _log_debug, _log_info
from readme_sync.contexts.table.row_data_structure import ExportRecord

JobRow = Mapping[str, Any]


def _joined_values(job: JobRow, join_key: str, table_key: str, value_key: str) -> List[str]:
    values = []
    for link in job.get(join_key) or []:
        target = (link or {}).get(table_key) or {}
        if target.get(value_key) is not None:
            values.append(target[value_key])
    return values


def has_country(job: JobRow, country_name: str) -> bool:
    return country_name in _joined_values(job, "job_posting_country", "country", "country_name")


def has_experience_level(job: JobRow, experience_level: str) -> bool:
    return experience_level in _joined_values(
        job, "job_posting_experience_level", "experience_level", "experience_level"
    )


def has_job_category(job: JobRow, job_category: str) -> bool:
    return job_category in _joined_values(
        job, "job_posting_job_category", "job_category", "job_category_name"
    )


def to_export_record(job: JobRow) -> ExportRecord:
    """Flatten a joined job row into an ExportRecord."""
    company = job.get("company") or {}
    return ExportRecord.from_dict(
        {
            "job_posting_id": job.get("id"),
            "title": job.get("title"),
            "created_at": job.get("created_at"),
            "apply_url": job.get("url"),
            "company_id": job.get("company_id"),
            "company_name": company.get("company_name"),
        }
    )


def filter_verified_jobs(jobs: Iterable[JobRow], settings: SyncSettings) -> List[ExportRecord]:
    """
    Keep matching jobs and return them as ExportRecords, newest first.

    Raises:
        InvalidExportRecordError: If a matching row is malformed
    """
    selected = [
        job
        for job in jobs
        if job.get("job_status") == settings.job_status
        and has_country(job, settings.country)
        and has_experience_level(job, settings.experience_level)
        and has_job_category(job, settings.job_category)
    ]

    records = [to_export_record(job) for job in selected]
    # sorted() is stable, so equal timestamps keep source order
    return sorted(records, key=lambda record: record.sort_timestamp, reverse=True)


class JsonFileJobExporter:
    """
    Exports verified jobs from a JSON dump of job postings.

    The file holds either a list of job rows or ``{"data": [...]}``.
    """

    def __init__(self, settings: SyncSettings, export_path: Optional[Path] = None):
        self.settings = settings
        path = export_path or settings.export_path
        if not path:
            raise SyncConfigError("README_SYNC_JOBS_EXPORT_PATH", "path to job postings JSON")
        self.export_path = Path(path)

    def _load_rows(self) -> List[JobRow]:
        payload = json.loads(self.export_path.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            payload = payload.get("data") or []
        return payload

    def export(self) -> List[ExportRecord]:
        rows = self._load_rows()
        _log_debug(f"Loaded {len(rows)} job rows from {self.export_path}")

        records = filter_verified_jobs(rows, self.settings)
        _log_info(
            f"Exported {len(records)} {self.settings.job_status} jobs "
            f"({self.settings.country} / {self.settings.experience_level} / {self.settings.job_category})"
        )
        return records
