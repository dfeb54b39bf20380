import datetime

import pytest

from marine_ops.services.progress_aggregator import (
    MalformedProgressError,
    ProgressEntry,
    ProgressSummary,
    aggregate_work_order,
    compute_progress_stats,
    round_half_up,
    summarize_progress,
)

D = datetime.date


def _entry(pct, day, seq=0, **kwargs):
    return ProgressEntry(percentage=pct, report_date=D(2026, 3, day), sequence=seq, **kwargs)


class TestSummarizeProgress:
    def test_no_reports(self):
        summary = summarize_progress([])
        assert summary.current_progress == 0
        assert summary.latest_progress_date is None
        assert summary.progress_count == 0
        assert summary.progress_history == ()

    def test_latest_date_wins_regardless_of_input_order(self):
        summary = summarize_progress([_entry(80, 5, seq=2), _entry(50, 2, seq=1)])
        assert summary.current_progress == 80
        assert summary.latest_progress_date == D(2026, 3, 5)
        assert summary.progress_count == 2
        assert [h.progress for h in summary.progress_history] == [80, 50]

    def test_same_date_first_inserted_wins(self):
        summary = summarize_progress([_entry(70, 5, seq=9), _entry(60, 5, seq=3)])
        assert summary.current_progress == 60

    def test_evidence_flag(self):
        summary = summarize_progress([_entry(10, 1), _entry(20, 2, has_evidence=True)])
        assert summary.has_evidence is True


class TestFromMapping:
    def test_parses_iso_string_and_decimal_text(self):
        entry = ProgressEntry.from_mapping(
            {"id": 7, "report_date": "2026-03-05T10:00:00", "progress_percentage": "80.00"}
        )
        assert entry.report_date == D(2026, 3, 5)
        assert entry.percentage == 80
        assert entry.sequence == 7
        assert entry.reporter_name == "Unknown"

    def test_missing_date_is_malformed(self):
        with pytest.raises(MalformedProgressError):
            ProgressEntry.from_mapping({"id": 1, "progress_percentage": 10})

    def test_non_numeric_percentage_is_malformed(self):
        with pytest.raises(MalformedProgressError):
            ProgressEntry.from_mapping({"report_date": "2026-03-05", "progress_percentage": "abc"})

    def test_project_variant_key(self):
        entry = ProgressEntry.from_mapping(
            {"report_date": D(2026, 3, 1), "progress": 35}, percentage_key="progress"
        )
        assert entry.percentage == 35


class TestAggregateWorkOrder:
    def test_unweighted_mean(self):
        result = aggregate_work_order(
            [ProgressSummary(current_progress=80), ProgressSummary(current_progress=0)]
        )
        assert result.overall_progress == 40
        assert result.is_fully_completed is False
        assert result.detail_count == 2

    def test_half_up_rounding(self):
        result = aggregate_work_order(
            [ProgressSummary(current_progress=50), ProgressSummary(current_progress=51)]
        )
        assert result.overall_progress == 51

    def test_no_details(self):
        result = aggregate_work_order([])
        assert result.overall_progress == 0
        assert result.is_fully_completed is False
        assert result.verification_status is False

    def test_fully_completed_and_verified(self):
        result = aggregate_work_order(
            [ProgressSummary(current_progress=100), ProgressSummary(current_progress=100)],
            [False, True],
        )
        assert result.overall_progress == 100
        assert result.is_fully_completed is True
        assert result.verification_status is True


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.125, 2) == 0.13


class TestProgressStats:
    def test_behind_schedule_and_completed(self):
        today = D(2026, 3, 10)
        projects = [
            summarize_progress([_entry(100, 1)]),
            summarize_progress([_entry(40, 2)]),   # 8 days old
            summarize_progress([_entry(60, 9)]),   # 1 day old
            summarize_progress([]),                # not tracked
        ]
        details = [
            summarize_progress([_entry(100, 3, has_evidence=True)]),
            summarize_progress([_entry(50, 3)]),
        ]

        stats = compute_progress_stats(projects, details, today=today)

        assert stats.total_projects == 3
        assert stats.completed_projects == 1
        assert stats.active_projects == 2
        assert stats.projects_behind_schedule == 1
        assert stats.projects_on_track == 1
        assert stats.average_project_progress == 66.67
        assert stats.total_work_details == 2
        assert stats.completed_work_details == 1
        assert stats.work_details_with_evidence == 1
        assert stats.average_details_progress == 75.0

    def test_empty(self):
        stats = compute_progress_stats([], [], today=D(2026, 3, 10))
        assert stats.total_projects == 0
        assert stats.average_project_progress == 0.0
