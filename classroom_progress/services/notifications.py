from datetime import datetime, timedelta, tzinfo
from typing import Mapping, Optional, Sequence

from classroom_progress.core.config import RECENT_ANNOUNCEMENTS_LIMIT, REMINDER_HORIZON
from classroom_progress.schemas.classroom import Announcement, CourseWork, StudentSubmission
from classroom_progress.schemas.notifications import Reminder
from classroom_progress.services.metrics import Delivered, ItemResult, classify_all, format_remaining


def _reminder(result: ItemResult, now: datetime) -> Reminder:
    return Reminder(
        id=result.item.id,
        title=result.item.title or "",
        due=result.due,
        remaining=format_remaining(result.due, now),
        alternate_link=result.item.alternate_link,
    )


def build_reminders(
    items: Sequence[CourseWork],
    submissions_by_id: Mapping[str, Optional[StudentSubmission]],
    now: datetime,
    horizon: timedelta = REMINDER_HORIZON,
    tz: Optional[tzinfo] = None,
) -> tuple[list[Reminder], list[Reminder]]:
    """
    Returns: (upcoming, missing)

    - upcoming: due after now and no later than now + horizon
    - missing: not delivered and due before now + horizon (includes overdue work)
    """
    until = now + horizon
    upcoming: list[Reminder] = []
    missing: list[Reminder] = []

    for r in classify_all(items, submissions_by_id, now, tz):
        if r.due is None:
            continue
        if now < r.due <= until:
            upcoming.append(_reminder(r, now))
        if not isinstance(r.disposition, Delivered) and r.due < until:
            missing.append(_reminder(r, now))

    return upcoming, missing


def recent_announcements(
    announcements: Sequence[Announcement],
    limit: int = RECENT_ANNOUNCEMENTS_LIMIT,
) -> list[Announcement]:
    # the API request already orders by updateTime desc
    return list(announcements[:limit])
