"""
Delivery metrics for one course, computed from already-fetched Classroom records.

Everything here is pure: callers capture ``now`` once and pass it in, so the
classification of every item and the window filters agree with each other.
All instants are naive local wall-clock datetimes.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Mapping, Optional, Sequence, Union

from classroom_progress.schemas.classroom import CourseWork, DueDate, StudentSubmission, TimeOfDay
from classroom_progress.schemas.metrics import (
    CourseMetrics,
    CourseMetricsReport,
    CourseworkStatus,
    MetricsDetails,
    MetricsSummary,
    WindowSummary,
)

logger = logging.getLogger(__name__)

DELIVERED_STATES = frozenset({"TURNED_IN", "RETURNED"})


@dataclass(frozen=True)
class Delivered:
    on_time: Optional[bool]  # None when due or submission time is unknown
    submitted_at: Optional[datetime]
    delay_hours: Optional[int] = None


@dataclass(frozen=True)
class Pending:
    due: Optional[datetime]


@dataclass(frozen=True)
class Overdue:
    due: datetime


Disposition = Union[Delivered, Pending, Overdue]


@dataclass(frozen=True)
class ItemResult:
    item: CourseWork
    submission: Optional[StudentSubmission]
    due: Optional[datetime]
    disposition: Disposition


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_local(instant: Optional[datetime], tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Aware instants are converted to the viewer's wall clock; naive ones are already local."""
    if instant is None or instant.tzinfo is None:
        return instant
    return instant.astimezone(tz).replace(tzinfo=None)


def resolve_due(
    due_date: Optional[DueDate],
    due_time: Optional[TimeOfDay] = None,
) -> Optional[datetime]:
    """
    Combine Classroom's dueDate/dueTime into one local instant.

    Missing time fields default independently to 23:59:59 (end of the due day).
    Out-of-range components are not clamped: the item is logged and treated as
    having no deadline.
    """
    if due_date is None:
        return None

    hours = minutes = seconds = None
    if due_time is not None:
        hours, minutes, seconds = due_time.hours, due_time.minutes, due_time.seconds

    try:
        return datetime(
            due_date.year,
            due_date.month or 1,
            due_date.day or 1,
            23 if hours is None else hours,
            59 if minutes is None else minutes,
            59 if seconds is None else seconds,
        )
    except (TypeError, ValueError) as exc:
        logger.warning("Ignoring malformed due date %s %s: %s", due_date, due_time, exc)
        return None


def classify(
    item: CourseWork,
    submission: Optional[StudentSubmission],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> Disposition:
    return _dispose(resolve_due(item.due_date, item.due_time), submission, now, tz)


def _dispose(
    due: Optional[datetime],
    submission: Optional[StudentSubmission],
    now: datetime,
    tz: Optional[tzinfo],
) -> Disposition:
    delivered = submission is not None and submission.state in DELIVERED_STATES

    if delivered:
        submitted_at = to_local(submission.update_time, tz)
        if due is None or submitted_at is None:
            return Delivered(on_time=None, submitted_at=submitted_at)
        if submitted_at <= due:
            return Delivered(on_time=True, submitted_at=submitted_at)
        delay = round_half_up((submitted_at - due) / timedelta(hours=1))
        return Delivered(on_time=False, submitted_at=submitted_at, delay_hours=delay)

    if due is not None and due < now:
        return Overdue(due=due)
    return Pending(due=due)


def classify_all(
    items: Sequence[CourseWork],
    submissions_by_id: Mapping[str, Optional[StudentSubmission]],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> list[ItemResult]:
    results = []
    for item in items:
        submission = submissions_by_id.get(item.id)
        due = resolve_due(item.due_date, item.due_time)
        results.append(
            ItemResult(
                item=item,
                submission=submission,
                due=due,
                disposition=_dispose(due, submission, now, tz),
            )
        )
    return results


def aggregate(results: Sequence[ItemResult]) -> CourseMetrics:
    turned_in = returned = pending = overdue = on_time = 0
    delays: list[int] = []

    for r in results:
        d = r.disposition
        if isinstance(d, Delivered):
            if r.submission.state == "TURNED_IN":
                turned_in += 1
            else:
                returned += 1
            if d.on_time:
                on_time += 1
            elif d.on_time is False:
                delays.append(d.delay_hours)
        elif isinstance(d, Overdue):
            overdue += 1
        else:
            pending += 1

    submitted = turned_in + returned
    return CourseMetrics(
        total_tasks=len(results),
        turned_in=turned_in,
        returned=returned,
        submitted=submitted,
        pending=pending,
        overdue=overdue,
        on_time_estimate=on_time,
        percent_on_time=round_half_up(on_time * 100 / submitted) if submitted else 0,
        avg_delay_hours=round_half_up(sum(delays) / len(delays)) if delays else 0,
    )


def aggregate_course(
    items: Sequence[CourseWork],
    submissions_by_id: Mapping[str, Optional[StudentSubmission]],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> CourseMetrics:
    return aggregate(classify_all(items, submissions_by_id, now, tz))


def week_start(now: datetime) -> datetime:
    """Monday 00:00 of the week containing ``now``."""
    monday = now - timedelta(days=now.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def summarize_window(results: Sequence[ItemResult], start: datetime) -> WindowSummary:
    """
    Re-count results that fall inside a window beginning at ``start``.

    Delivered items are anchored on their submission time; pending and overdue
    items on their due instant, so items without a deadline never show up here.
    """
    delivered = on_time = pending = overdue = 0

    for r in results:
        d = r.disposition
        if isinstance(d, Delivered):
            if d.submitted_at is not None and d.submitted_at >= start:
                delivered += 1
                if d.on_time:
                    on_time += 1
        elif d.due is not None and d.due >= start:
            if isinstance(d, Overdue):
                overdue += 1
            else:
                pending += 1

    return WindowSummary(
        delivered=delivered,
        on_time_percent=round_half_up(on_time * 100 / delivered) if delivered else 0,
        pending=pending,
        overdue=overdue,
    )


def format_remaining(instant: Optional[datetime], now: datetime) -> str:
    if instant is None:
        return ""

    diff = instant - now
    future = diff >= timedelta(0)
    total = int(abs(diff).total_seconds())

    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60

    if days > 0:
        text = f"{days}d {hours}h"
    elif hours > 0:
        text = f"{hours}h {minutes}m"
    else:
        text = f"{minutes}m"

    return f"In {text}" if future else f"{text} ago"


def _status_row(result: ItemResult, now: datetime) -> CourseworkStatus:
    d = result.disposition
    row = CourseworkStatus(
        id=result.item.id,
        title=result.item.title or "",
        status="pending",
        due=result.due,
        remaining=format_remaining(result.due, now),
    )
    if isinstance(d, Delivered):
        row.status = "delivered"
        row.state = result.submission.state
        row.submitted_at = d.submitted_at
        row.on_time = d.on_time
        row.delay_hours = d.delay_hours
    elif isinstance(d, Overdue):
        row.status = "overdue"
    return row


def compute_course_metrics(
    items: Sequence[CourseWork],
    submissions_by_id: Mapping[str, Optional[StudentSubmission]],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> CourseMetricsReport:
    results = classify_all(items, submissions_by_id, now, tz)

    details = MetricsDetails()
    for r in results:
        row = _status_row(r, now)
        getattr(details, row.status).append(row)

    return CourseMetricsReport(
        metrics=aggregate(results),
        details=details,
        summary=MetricsSummary(
            week=summarize_window(results, week_start(now)),
            month=summarize_window(results, month_start(now)),
        ),
    )
