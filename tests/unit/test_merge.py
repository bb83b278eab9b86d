"""
Unit tests for the jobs table merge engine.

Covers ordering, ownership of machine vs community rows, header reuse,
idempotence, and anchor handling on complete README documents.
"""

import math
from datetime import datetime, timezone

import pytest

from readme_sync.contexts.table.exceptions import MissingAnchorsError
from readme_sync.contexts.table.merge import (
    merge_export_records,
    merge_jobs_table,
    merged_row_sort_key,
    order_rows,
)
from readme_sync.contexts.table.patterns import JOBS_TABLE_END, JOBS_TABLE_START
from readme_sync.contexts.table.renderer import RenderSettings, build_desired_rows
from readme_sync.contexts.table.row_data_structure import ExportRecord, MergedRow, RowKind

UTM = "utm_source=github&utm_medium=readme&utm_campaign=sg-intern-tech"
HEADER = "| Company | Role | Track | Application | Date Added |"
SEPARATOR = "|---|---|---|---|---:|"
BETA_ID = "11111111-1111-1111-1111-111111111111"
GAMMA_ID = "22222222-2222-2222-2222-222222222222"
DELTA_ID = "33333333-3333-3333-3333-333333333333"


def track_cell(job_id: str) -> str:
    return (
        f'<a href="https://didtheyghost.me/job/{job_id}?{UTM}">'
        '<img alt="Track" src="readme-buttons/track.svg" width="220" /></a>'
    )


def apply_cell(href: str) -> str:
    return f'<a href="{href}"><img alt="Apply" src="readme-buttons/apply.svg" width="220" /></a>'


def make_record(job_id: str, company: str, created_at: datetime, apply_url=None) -> ExportRecord:
    return ExportRecord(
        job_posting_id=job_id,
        title="Backend Intern",
        created_at=created_at,
        apply_url=apply_url,
        company_id=company.lower().replace(" ", "-"),
        company_name=company,
    )


def make_readme(*block_lines: str) -> str:
    block = "\n".join(["", *block_lines, ""])
    return f"# SG Internships\n\nIntro text.\n\n{JOBS_TABLE_START}{block}{JOBS_TABLE_END}\n\n## Footer\n"


def table_lines(readme: str) -> list:
    """Rows between the anchors, header and separator excluded."""
    block = readme.split(JOBS_TABLE_START, 1)[1].split(JOBS_TABLE_END, 1)[0]
    lines = [line for line in block.split("\n") if line]
    return lines[2:]


ACME_ROW = "| Acme | SWE | [TRACK](https://x/job/abc) | https://acme.com/apply | 2024-01-01 |"
BETA = make_record(BETA_ID, "Beta Co", datetime(2024, 6, 1, tzinfo=timezone.utc))
BETA_ROW = f"| [Beta Co](https://didtheyghost.me/company/beta-co?{UTM}) | Backend Intern | {track_cell(BETA_ID)} | - | 01 Jun 2024 |"
ACME_NORMALIZED = f"| Acme | SWE | [TRACK](https://x/job/abc) | {apply_cell('https://acme.com/apply')} | 01 Jan 2024 |"


@pytest.mark.unit
class TestMergeScenario:
    """One machine row merged into a table with one community row."""

    def test_exact_output(self):
        readme = make_readme(HEADER, SEPARATOR, ACME_ROW)
        result = merge_export_records(readme, [BETA])

        assert result.changed
        assert result.next_readme == make_readme(HEADER, SEPARATOR, BETA_ROW, ACME_NORMALIZED)
        assert result.machine_rows == 1
        assert result.community_rows == 1
        assert result.invalid_dates == 0

    def test_second_run_is_noop(self):
        first = merge_export_records(make_readme(HEADER, SEPARATOR, ACME_ROW), [BETA])
        second = merge_export_records(first.next_readme, [BETA])

        assert not second.changed
        assert second.next_readme == first.next_readme

    def test_text_outside_anchors_untouched(self):
        readme = make_readme(HEADER, SEPARATOR, ACME_ROW)
        result = merge_export_records(readme, [BETA])

        before, _, _ = readme.partition(JOBS_TABLE_START)
        _, _, after = readme.partition(JOBS_TABLE_END)
        assert result.next_readme.startswith(before + JOBS_TABLE_START)
        assert result.next_readme.endswith(JOBS_TABLE_END + after)

    def test_missing_end_anchor(self):
        readme = f"# SG Internships\n{JOBS_TABLE_START}\n{HEADER}\n"
        with pytest.raises(MissingAnchorsError) as exc_info:
            merge_export_records(readme, [BETA])
        assert exc_info.value.reason == "missing_end"

    def test_empty_export_keeps_community_rows(self):
        readme = make_readme(HEADER, SEPARATOR, ACME_ROW)
        result = merge_export_records(readme, [])
        assert table_lines(result.next_readme) == [ACME_NORMALIZED]


@pytest.mark.unit
class TestMachineRowOwnership:
    """Machine rows are regenerated from the export on every run."""

    def test_stale_machine_row_regenerated(self):
        stale = f"| Old Name | Old Title | {track_cell(BETA_ID)} | - | 01 Jan 2020 |"
        result = merge_export_records(make_readme(HEADER, SEPARATOR, stale), [BETA])

        assert table_lines(result.next_readme) == [BETA_ROW]
        assert result.dropped_machine_rows == 0

    def test_unexported_machine_row_dropped(self):
        gone = f"| Gone | Intern | {track_cell(GAMMA_ID)} | - | 01 Jan 2024 |"
        result = merge_export_records(make_readme(HEADER, SEPARATOR, gone, ACME_ROW), [BETA])

        assert table_lines(result.next_readme) == [BETA_ROW, ACME_NORMALIZED]
        assert result.dropped_machine_rows == 1

    def test_machine_row_uses_export_apply_url(self):
        record = make_record(
            BETA_ID, "Beta Co", datetime(2024, 6, 1, tzinfo=timezone.utc), "https://beta.co/apply"
        )
        result = merge_export_records(make_readme(HEADER, SEPARATOR), [record])
        assert apply_cell("https://beta.co/apply") in table_lines(result.next_readme)[0]

    def test_escaped_names_stable_over_runs(self):
        """Names with backslashes and pipes keep one machine row per job."""
        record = ExportRecord(
            job_posting_id=BETA_ID,
            title="C:\\temp | data",
            created_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
            apply_url=None,
            company_id="a-b",
            company_name="A\\|B",
        )
        outputs = [make_readme(HEADER, SEPARATOR)]
        for _ in range(3):
            outputs.append(merge_export_records(outputs[-1], [record]).next_readme)

        assert outputs[1] == outputs[2] == outputs[3]
        assert len(table_lines(outputs[3])) == 1
        assert merge_export_records(outputs[3], [record]).dropped_machine_rows == 0


@pytest.mark.unit
class TestOrdering:
    """Final table ordering rules."""

    def test_newest_first_with_community_between(self):
        records = [
            make_record(GAMMA_ID, "Gamma", datetime(2024, 3, 1, tzinfo=timezone.utc)),
            make_record(BETA_ID, "Beta Co", datetime(2024, 6, 1, tzinfo=timezone.utc)),
            make_record(DELTA_ID, "Delta", datetime(2024, 1, 1, tzinfo=timezone.utc)),
        ]
        community = "| Acme | SWE | - | - | 2024-04-15 |"
        broken = "| Zed | SWE | - | - | someday |"
        readme = make_readme(HEADER, SEPARATOR, broken, community)

        result = merge_export_records(readme, records)
        companies = [line.split(" | ")[0] for line in table_lines(result.next_readme)]

        assert companies == [
            "| [Beta Co](https://didtheyghost.me/company/beta-co?" + UTM + ")",
            "| Acme",
            "| [Gamma](https://didtheyghost.me/company/gamma?" + UTM + ")",
            "| [Delta](https://didtheyghost.me/company/delta?" + UTM + ")",
            "| Zed",
        ]
        assert table_lines(result.next_readme)[-1] == "| Zed | SWE | - | - | ⚠️ Invalid date: someday |"
        assert result.invalid_dates == 1

    def test_invalid_date_is_idempotent(self):
        readme = make_readme(HEADER, SEPARATOR, "| Zed | SWE | - | - | someday |")
        first = merge_export_records(readme, [])
        second = merge_export_records(first.next_readme, [])

        assert first.changed
        assert not second.changed
        assert second.invalid_dates == 1

    def test_equal_timestamps_put_community_first(self):
        """'01 Jun 2024' is midnight in Singapore, i.e. 31 May 16:00 UTC."""
        record = make_record(BETA_ID, "Beta Co", datetime(2024, 5, 31, 16, tzinfo=timezone.utc))
        community = "| Acme | SWE | - | - | 01 Jun 2024 |"
        result = merge_export_records(make_readme(HEADER, SEPARATOR, community), [record])

        lines = table_lines(result.next_readme)
        assert lines[0] == community
        assert lines[1].startswith("| [Beta Co]")

    def test_equal_community_dates_keep_document_order(self):
        rows = ["| B | SWE | - | - | 01 Jun 2024 |", "| A | SWE | - | - | 2024-06-01 |"]
        result = merge_export_records(make_readme(HEADER, SEPARATOR, *rows), [])
        assert table_lines(result.next_readme) == [rows[0], "| A | SWE | - | - | 01 Jun 2024 |"]

    def test_sort_key_unknown_date_after_oldest(self):
        dated = MergedRow(cells=(), kind=RowKind.MACHINE, sort_timestamp=0, tie_break_index=5)
        undated = MergedRow(cells=(), kind=RowKind.COMMUNITY, sort_timestamp=math.inf, tie_break_index=0)

        assert merged_row_sort_key(dated) < merged_row_sort_key(undated)
        assert order_rows([undated, dated]) == [dated, undated]


@pytest.mark.unit
class TestHeaderHandling:
    """Header reuse and block cleanup."""

    def test_empty_block_gets_default_header(self):
        readme = f"{JOBS_TABLE_START}{JOBS_TABLE_END}"
        result = merge_export_records(readme, [BETA])

        assert result.next_readme == f"{JOBS_TABLE_START}\n{HEADER}\n{SEPARATOR}\n{BETA_ROW}\n{JOBS_TABLE_END}"

    def test_legacy_header_kept(self):
        legacy = ["| Company | Role | Track | Apply | Added |", "|:--|:--|:--|:--|--:|"]
        result = merge_export_records(make_readme(*legacy), [BETA])
        assert result.next_readme == make_readme(*legacy, BETA_ROW)

    def test_lone_header_replaced_with_default(self):
        result = merge_export_records(make_readme("| Company | Role |"), [BETA])
        assert result.next_readme == make_readme(HEADER, SEPARATOR, BETA_ROW)

    def test_prose_between_anchors_dropped(self):
        readme = make_readme("Some note about the table", HEADER, SEPARATOR)
        result = merge_export_records(readme, [BETA])

        assert result.next_readme == make_readme(HEADER, SEPARATOR, BETA_ROW)
        assert result.dropped_other_lines == 1

    def test_indented_community_row_written_stripped(self):
        readme = make_readme(HEADER, SEPARATOR, "   | Acme | SWE | - | - | 01 Jan 2024 |")
        result = merge_export_records(readme, [])
        assert table_lines(result.next_readme) == ["| Acme | SWE | - | - | 01 Jan 2024 |"]


@pytest.mark.unit
def test_merge_jobs_table_accepts_desired_rows():
    """The row-level entry point gives the same text as the record-level one."""
    readme = make_readme(HEADER, SEPARATOR, ACME_ROW)
    desired = build_desired_rows([BETA], RenderSettings())

    assert merge_jobs_table(readme, desired).next_readme == merge_export_records(readme, [BETA]).next_readme
