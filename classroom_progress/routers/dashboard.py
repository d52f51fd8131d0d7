import logging

from fastapi import APIRouter, Depends

from classroom_progress.clients.classroom import ClassroomClient, GoogleAPIError
from classroom_progress.core.clock import local_now, viewer_timezone
from classroom_progress.core.deps import get_classroom_client
from classroom_progress.schemas.metrics import CourseMetricsReport
from classroom_progress.schemas.notifications import Reminders
from classroom_progress.services.metrics import compute_course_metrics
from classroom_progress.services.notifications import build_reminders, recent_announcements

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


@router.get("/courses/{course_id}/metrics", response_model=CourseMetricsReport)
def course_metrics(
    course_id: str,
    classroom: ClassroomClient = Depends(get_classroom_client),
):
    coursework = classroom.list_coursework(course_id)
    submissions = classroom.get_my_submissions(course_id, [cw.id for cw in coursework])

    # one clock reading for the whole pass
    now = local_now()
    report = compute_course_metrics(coursework, submissions, now, viewer_timezone())

    logger.info(
        "Metrics for course %s: %s tasks, %s submitted",
        course_id,
        report.metrics.total_tasks,
        report.metrics.submitted,
    )
    return report


@router.get("/courses/{course_id}/notifications", response_model=Reminders)
def course_notifications(
    course_id: str,
    classroom: ClassroomClient = Depends(get_classroom_client),
):
    # announcements are best effort; the reminders below are not
    try:
        announcements = recent_announcements(classroom.list_announcements(course_id))
    except GoogleAPIError as exc:
        logger.warning("Announcements unavailable for course %s: %s", course_id, exc)
        announcements = []

    coursework = classroom.list_coursework(course_id)
    submissions = classroom.get_my_submissions(course_id, [cw.id for cw in coursework])

    now = local_now()
    upcoming, missing = build_reminders(coursework, submissions, now, tz=viewer_timezone())
    return Reminders(announcements=announcements, upcoming=upcoming, missing=missing)
