"""
Progress aggregation.

Pure, synchronous helpers that turn already-fetched progress reports into
the derived values shown on the dashboard and written to the export:

- ``summarize_progress`` — latest report, count and history for one parent
  (a work detail, or a work order in the project-level variant).
- ``aggregate_work_order`` — overall progress, completion and verification
  flags for a work order from its work-detail summaries.
- ``compute_progress_stats`` — dashboard statistics across work orders and
  work details.

Design notes
------------
- No I/O happens here; callers load rows and convert them with
  ``ProgressEntry.from_record`` / ``ProgressEntry.from_mapping``.
- Same-date reports are ordered explicitly by ``sequence`` (insertion
  order, lowest wins) instead of relying on sort stability.
- Percentages are validated at input time by the progress service; the
  aggregator does not clamp or re-check them.
- Rounding is half-up, matching what users see in the browser dashboard.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from marine_ops.utils.constants import DAYS_BEHIND_SCHEDULE, PROGRESS_MAX


class MalformedProgressError(ValueError):
    """Raised when a progress record lacks a usable date or percentage."""


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProgressEntry:
    """One progress report reduced to the fields the aggregator needs.

    Attributes:
        percentage: Completion 0–100.
        report_date: Day the progress was observed.
        reporter_name: Display name of the reporting user.
        sequence: Insertion order (database id); breaks same-date ties.
        has_evidence: Whether an evidence document was attached.
    """

    percentage: float
    report_date: datetime.date
    reporter_name: str = "Unknown"
    sequence: int = 0
    has_evidence: bool = False

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        percentage_key: str = "progress_percentage",
        sequence: int | None = None,
    ) -> ProgressEntry:
        """Build an entry from a plain mapping (query row, JSON payload).

        Raises:
            MalformedProgressError: If the date or percentage is missing or
                cannot be parsed.
        """
        report_id = data.get("id")
        label = f"progress report {report_id}" if report_id is not None else "progress report"

        report_date = _coerce_date(data.get("report_date"), label)
        percentage = _coerce_percentage(data.get(percentage_key), percentage_key, label)

        if sequence is None:
            sequence = report_id if isinstance(report_id, int) else 0

        return cls(
            percentage=percentage,
            report_date=report_date,
            reporter_name=data.get("reporter_name") or "Unknown",
            sequence=sequence,
            has_evidence=bool(data.get("evidence_url")),
        )

    @classmethod
    def from_record(cls, record: Any, percentage_attr: str = "progress_percentage") -> ProgressEntry:
        """Build an entry from a ``WorkProgress`` or ``ProjectProgress`` row."""
        reporter = getattr(record, "reporter", None)
        return cls.from_mapping(
            {
                "id": record.id,
                "report_date": record.report_date,
                percentage_attr: getattr(record, percentage_attr),
                "reporter_name": getattr(reporter, "name", None),
                "evidence_url": getattr(record, "evidence_url", None),
            },
            percentage_key=percentage_attr,
        )


@dataclass(frozen=True)
class ProgressHistoryItem:
    date: datetime.date
    progress: float
    reporter: str


@dataclass(frozen=True)
class ProgressSummary:
    """Derived progress values for a single parent.

    Attributes:
        current_progress: Percentage of the most recent report, 0 if none.
        latest_progress_date: Date of the most recent report, or ``None``.
        progress_count: Number of reports.
        has_evidence: True if any report carries an evidence document.
        progress_history: Every report, newest first.
    """

    current_progress: float = 0
    latest_progress_date: datetime.date | None = None
    progress_count: int = 0
    has_evidence: bool = False
    progress_history: tuple[ProgressHistoryItem, ...] = ()

    @property
    def is_completed(self) -> bool:
        return self.current_progress >= PROGRESS_MAX


@dataclass(frozen=True)
class WorkOrderProgress:
    """Aggregate over all work details of one work order."""

    overall_progress: int = 0
    is_fully_completed: bool = False
    verification_status: bool = False
    detail_count: int = 0


@dataclass
class ProgressStats:
    """Dashboard statistics (project level and work-detail level)."""

    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    average_project_progress: float = 0.0
    projects_behind_schedule: int = 0
    projects_on_track: int = 0
    total_work_details: int = 0
    completed_work_details: int = 0
    work_details_with_evidence: int = 0
    average_details_progress: float = 0.0


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _coerce_date(value: Any, label: str) -> datetime.date:
    if value is None or value == "":
        raise MalformedProgressError(f"{label}: missing report_date")
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value[:10])
        except ValueError as exc:
            raise MalformedProgressError(
                f"{label}: report_date {value!r} is not an ISO date"
            ) from exc
    raise MalformedProgressError(
        f"{label}: report_date has unsupported type {type(value).__name__}"
    )


def _coerce_percentage(value: Any, key: str, label: str) -> float:
    if value is None or value == "" or isinstance(value, bool):
        raise MalformedProgressError(f"{label}: missing {key}")
    try:
        number = float(Decimal(str(value)))
    except (InvalidOperation, ValueError) as exc:
        raise MalformedProgressError(f"{label}: {key} {value!r} is not a number") from exc
    return int(number) if number.is_integer() else number


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like the browser does (``Math.round``) instead of banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def summarize_progress(entries: Iterable[ProgressEntry]) -> ProgressSummary:
    """Return the latest progress, count and history for one parent.

    The most recent ``report_date`` wins. When several reports share that
    date, the one inserted first (lowest ``sequence``) wins.

    Args:
        entries: Progress reports of a single work detail or work order.

    Returns:
        A ``ProgressSummary``; all-zero when ``entries`` is empty.
    """
    ordered = sorted(entries, key=lambda e: (-e.report_date.toordinal(), e.sequence))
    if not ordered:
        return ProgressSummary()

    latest = ordered[0]
    return ProgressSummary(
        current_progress=latest.percentage,
        latest_progress_date=latest.report_date,
        progress_count=len(ordered),
        has_evidence=any(e.has_evidence for e in ordered),
        progress_history=tuple(
            ProgressHistoryItem(date=e.report_date, progress=e.percentage, reporter=e.reporter_name)
            for e in ordered
        ),
    )


def aggregate_work_order(
    detail_summaries: Sequence[ProgressSummary],
    verified_flags: Iterable[bool] = (),
) -> WorkOrderProgress:
    """Combine work-detail summaries into work-order level values.

    Args:
        detail_summaries: One summary per live work detail.
        verified_flags: For each work detail, whether it has a verification
            record with ``work_verification == True``.

    Returns:
        ``overall_progress`` as the half-up rounded unweighted mean of
        ``current_progress`` (0 without details), ``is_fully_completed``
        only if there is at least one detail and all are at 100, and
        ``verification_status`` if any detail is verified.
    """
    count = len(detail_summaries)
    if count == 0:
        overall = 0
    else:
        overall = round_half_up(sum(s.current_progress for s in detail_summaries) / count)

    return WorkOrderProgress(
        overall_progress=overall,
        is_fully_completed=count > 0 and all(
            s.current_progress == PROGRESS_MAX for s in detail_summaries
        ),
        verification_status=any(verified_flags),
        detail_count=count,
    )


def compute_progress_stats(
    project_summaries: Sequence[ProgressSummary],
    detail_summaries: Sequence[ProgressSummary],
    today: datetime.date | None = None,
) -> ProgressStats:
    """Compute dashboard statistics.

    Only parents with at least one report count as projects / tracked
    work details.  A project is behind schedule when it is below 100 % and
    its latest report is more than ``DAYS_BEHIND_SCHEDULE`` days old.

    Args:
        project_summaries: One summary per work order (project-level reports).
        detail_summaries: One summary per work detail.
        today: Reference date; defaults to ``date.today()``.
    """
    today = today or datetime.date.today()
    projects = [s for s in project_summaries if s.progress_count]
    details = [s for s in detail_summaries if s.progress_count]

    completed = sum(1 for s in projects if s.is_completed)
    behind = sum(
        1
        for s in projects
        if not s.is_completed
        and (today - s.latest_progress_date).days > DAYS_BEHIND_SCHEDULE
    )
    active = len(projects) - completed

    def _avg(items: list[ProgressSummary]) -> float:
        if not items:
            return 0.0
        return round_half_up(sum(s.current_progress for s in items) / len(items), 2)

    return ProgressStats(
        total_projects=len(projects),
        active_projects=active,
        completed_projects=completed,
        average_project_progress=_avg(projects),
        projects_behind_schedule=behind,
        projects_on_track=active - behind,
        total_work_details=len(details),
        completed_work_details=sum(1 for s in details if s.is_completed),
        work_details_with_evidence=sum(1 for s in details if s.has_evidence),
        average_details_progress=_avg(details),
    )
