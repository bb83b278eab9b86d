"""
Integration tests for the JSON job exporter, settings loading and the sync
event log.
"""

import json
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from readme_sync.contexts.sync.config import (
    GitHubSettings,
    SyncSettings,
    load_github_settings,
    load_sync_settings,
)
from readme_sync.contexts.sync.exceptions import SyncConfigError
from readme_sync.contexts.sync.export import JsonFileJobExporter, filter_verified_jobs
from readme_sync.contexts.table.exceptions import InvalidExportRecordError
from readme_sync.utils.event_logging import get_recent_events, log_sync_event


def make_job(job_id, created_at, **overrides):
    job = {
        "id": job_id,
        "title": "Backend Intern",
        "created_at": created_at,
        "url": "https://example.com/apply",
        "company_id": "c-1",
        "job_status": "Verified",
        "company": {"company_name": "Example Co"},
        "job_posting_country": [{"country": {"country_name": "Singapore"}}],
        "job_posting_experience_level": [{"experience_level": {"experience_level": "Internship"}}],
        "job_posting_job_category": [
            {"job_category": {"job_category_name": "Design"}},
            {"job_category": {"job_category_name": "Tech"}},
        ],
    }
    job.update(overrides)
    return job


JOBS = [
    make_job("a", "2024-01-01T00:00:00Z"),
    make_job("b", "2024-03-01T00:00:00Z"),
    make_job("c", "2024-02-01T00:00:00Z", job_status="Pending"),
    make_job("d", "2024-02-01T00:00:00Z", job_posting_country=[{"country": {"country_name": "Malaysia"}}]),
    make_job("e", "2024-02-01T00:00:00Z", job_posting_experience_level=[]),
    make_job("f", "2024-02-01T00:00:00Z", job_posting_job_category=None),
    make_job("g", "2024-03-01T00:00:00Z"),
]


@pytest.mark.integration
class TestFilterVerifiedJobs:
    """Tests for filter_verified_jobs()."""

    def test_filters_and_sorts_newest_first(self):
        records = filter_verified_jobs(JOBS, SyncSettings())
        # b and g share a timestamp and keep source order
        assert [r.job_posting_id for r in records] == ["b", "g", "a"]

    def test_record_fields(self):
        record = filter_verified_jobs(JOBS, SyncSettings())[-1]
        assert record.company_name == "Example Co"
        assert record.apply_url == "https://example.com/apply"
        assert record.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_other_filters(self):
        settings = SyncSettings(country="Malaysia")
        assert [r.job_posting_id for r in filter_verified_jobs(JOBS, settings)] == ["d"]

    def test_malformed_matching_row(self):
        with pytest.raises(InvalidExportRecordError):
            filter_verified_jobs([make_job("x", "2024-01-01", company=None)], SyncSettings())


@pytest.mark.integration
class TestJsonFileJobExporter:
    """Tests for JsonFileJobExporter."""

    def test_list_payload(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps(JOBS), encoding="utf-8")
        records = JsonFileJobExporter(SyncSettings(), path).export()
        assert len(records) == 3

    def test_data_envelope(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps({"data": JOBS[:1]}), encoding="utf-8")
        assert [r.job_posting_id for r in JsonFileJobExporter(SyncSettings(), path).export()] == ["a"]

    def test_path_from_settings(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text("[]", encoding="utf-8")
        exporter = JsonFileJobExporter(SyncSettings(export_path=str(path)))
        assert exporter.export() == []

    def test_missing_path(self):
        with pytest.raises(SyncConfigError):
            JsonFileJobExporter(SyncSettings())


@pytest.fixture
def clean_env(monkeypatch):
    for var in (
        "README_SYNC_SITE_URL",
        "README_SYNC_JOBS_EXPORT_PATH",
        "README_SYNC_GITHUB_TOKEN",
        "README_SYNC_REPO",
        "README_SYNC_PATH",
        "README_SYNC_BRANCH",
        "README_SYNC_GITHUB_API_BASE_URL",
    ):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.mark.integration
class TestSettingsLoading:
    """Tests for load_sync_settings() and load_github_settings()."""

    def test_defaults(self, clean_env):
        settings = load_sync_settings()
        assert settings == SyncSettings()
        assert settings.commit_message(3) == "sync(readme): update SG internship tech verified jobs (3)"

    def test_yaml_then_env_then_overrides(self, clean_env, tmp_path):
        config = tmp_path / "sync.yaml"
        config.write_text(
            "site_url: https://file.example/\n"
            "job_category: Data\n"
            "button_width: 180\n"
            "github:\n"
            "  repo: file/repo\n"
            "  branch: main\n"
            "  token: from-file\n",
            encoding="utf-8",
        )
        clean_env.setenv("README_SYNC_SITE_URL", "https://env.example")
        clean_env.setenv("README_SYNC_REPO", "env/repo")

        settings = load_sync_settings(config, overrides={"job_category": "Tech"})
        assert settings.site_url == "https://env.example"
        assert settings.job_category == "Tech"
        assert settings.button_width == 180

        github = load_github_settings(config)
        assert github.repo == "env/repo"
        assert github.branch == "main"
        assert github.token is None

    def test_token_from_env(self, clean_env):
        clean_env.setenv("README_SYNC_GITHUB_TOKEN", "ghp_env")
        assert load_github_settings().require_token() == "ghp_env"

    def test_unknown_key_rejected(self, clean_env, tmp_path):
        config = tmp_path / "sync.yaml"
        config.write_text("not_a_setting: 1\n", encoding="utf-8")
        with pytest.raises(Exception):
            load_sync_settings(config)

    def test_render_settings(self):
        render = SyncSettings(site_url="https://x.example/", display_timezone="UTC").render_settings()
        assert render.site_url == "https://x.example"
        assert render.display_timezone == ZoneInfo("UTC")

    def test_github_settings_errors(self):
        with pytest.raises(SyncConfigError):
            GitHubSettings().require_token()
        with pytest.raises(SyncConfigError):
            GitHubSettings().require_repo()


@pytest.mark.integration
class TestSyncEventLog:
    """Tests for the JSON Lines sync event log."""

    def test_append_and_filter(self, tmp_path):
        events_file = tmp_path / "logs" / "events.log"
        log_sync_event("sync_started", "t", events_file=events_file, dry_run=False)
        log_sync_event("sync_committed", "t", events_file=events_file, exported_count=2)

        events = get_recent_events(events_file=events_file)
        assert [e["event_type"] for e in events] == ["sync_started", "sync_committed"]
        assert events[1]["exported_count"] == 2
        assert "timestamp" in events[0]

        assert len(get_recent_events(n=1, events_file=events_file)) == 1
        assert get_recent_events(event_type="sync_noop", events_file=events_file) == []

    def test_unknown_event_type(self, tmp_path):
        with pytest.raises(ValueError):
            log_sync_event("sync_exploded", "t", events_file=tmp_path / "e.log")

    def test_missing_file(self, tmp_path):
        assert get_recent_events(events_file=tmp_path / "none.log") == []

    def test_malformed_lines_skipped(self, tmp_path):
        events_file = tmp_path / "e.log"
        events_file.write_text('not json\n{"event_type": "sync_noop"}\n', encoding="utf-8")
        assert get_recent_events(events_file=events_file) == [{"event_type": "sync_noop"}]
