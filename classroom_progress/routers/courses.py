from fastapi import APIRouter, Depends

from classroom_progress.clients.classroom import ClassroomClient
from classroom_progress.core.deps import get_classroom_client
from classroom_progress.schemas.classroom import Announcement, Course, CourseWork, StudentSubmission

router = APIRouter()


@router.get("", response_model=list[Course])
def list_courses(classroom: ClassroomClient = Depends(get_classroom_client)):
    return classroom.list_courses()


@router.get("/{course_id}/coursework", response_model=list[CourseWork])
def list_coursework(
    course_id: str,
    classroom: ClassroomClient = Depends(get_classroom_client),
):
    return classroom.list_coursework(course_id)


@router.get("/{course_id}/announcements", response_model=list[Announcement])
def list_announcements(
    course_id: str,
    classroom: ClassroomClient = Depends(get_classroom_client),
):
    return classroom.list_announcements(course_id)


@router.get(
    "/{course_id}/coursework/{coursework_id}/submissions",
    response_model=list[StudentSubmission],
)
def list_my_submissions(
    course_id: str,
    coursework_id: str,
    classroom: ClassroomClient = Depends(get_classroom_client),
):
    return classroom.list_my_submissions(course_id, coursework_id)
