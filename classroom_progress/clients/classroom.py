"""
Read-only Google Classroom REST client for the signed-in user.

Every call runs with the user's bearer credential. Non-2xx answers and
transport failures are raised as GoogleAPIError so the HTTP layer can
show the upstream status instead of partial data.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional
from urllib.parse import quote

import httpx

from classroom_progress.core.config import (
    ANNOUNCEMENTS_PAGE_SIZE,
    CLASSROOM_API_BASE,
    COURSES_PAGE_SIZE,
    FETCH_CONCURRENCY,
    REQUEST_TIMEOUT_SECONDS,
)
from classroom_progress.schemas.classroom import Announcement, Course, CourseWork, StudentSubmission

logger = logging.getLogger(__name__)


class GoogleAPIError(Exception):
    def __init__(self, status_code: int, message: str, details: Optional[str] = None):
        super().__init__(f"{status_code} {message}")
        self.status_code = status_code
        self.message = message
        self.details = details


def _seg(value: str) -> str:
    return quote(value, safe="")


class ClassroomClient:
    def __init__(
        self,
        access_token: str,
        base_url: str = CLASSROOM_API_BASE,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_workers: int = FETCH_CONCURRENCY,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.max_workers = max(1, max_workers)
        self._http = httpx.Client(
            base_url=base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ClassroomClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        try:
            res = self._http.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.error("Classroom request %s failed: %s", path, exc)
            raise GoogleAPIError(502, "Classroom API unreachable", str(exc)) from exc

        if res.is_error:
            logger.warning("Classroom request %s -> %s", path, res.status_code)
            raise GoogleAPIError(res.status_code, "Google API error", res.text)

        return res.json()

    def _get_all(self, path: str, key: str, params: Optional[dict[str, Any]] = None) -> list[dict]:
        """Follow nextPageToken until the listing is exhausted."""
        params = dict(params or {})
        items: list[dict] = []
        while True:
            data = self._get(path, params)
            items.extend(data.get(key, []))
            token = data.get("nextPageToken")
            if not token:
                return items
            params["pageToken"] = token

    def list_courses(self) -> list[Course]:
        data = self._get("/courses", {"courseStates": "ACTIVE", "pageSize": COURSES_PAGE_SIZE})
        return [Course.model_validate(c) for c in data.get("courses", [])]

    def list_coursework(self, course_id: str) -> list[CourseWork]:
        raw = self._get_all(f"/courses/{_seg(course_id)}/courseWork", "courseWork")
        return [CourseWork.model_validate(cw) for cw in raw]

    def list_announcements(self, course_id: str) -> list[Announcement]:
        data = self._get(
            f"/courses/{_seg(course_id)}/announcements",
            {"orderBy": "updateTime desc", "pageSize": ANNOUNCEMENTS_PAGE_SIZE},
        )
        return [Announcement.model_validate(a) for a in data.get("announcements", [])]

    def list_my_submissions(self, course_id: str, coursework_id: str) -> list[StudentSubmission]:
        raw = self._get_all(
            f"/courses/{_seg(course_id)}/courseWork/{_seg(coursework_id)}/studentSubmissions",
            "studentSubmissions",
            {"userId": "me"},
        )
        return [StudentSubmission.model_validate(s) for s in raw]

    def get_my_submissions(
        self,
        course_id: str,
        coursework_ids: list[str],
    ) -> dict[str, Optional[StudentSubmission]]:
        """
        Fetch the caller's submission for each coursework in parallel.

        From the student's side there is at most one record per coursework; the
        first one wins. Any failed fetch propagates, so callers never aggregate
        over a partial set.
        """
        if not coursework_ids:
            return {}

        def first(cw_id: str) -> Optional[StudentSubmission]:
            subs = self.list_my_submissions(course_id, cw_id)
            return subs[0] if subs else None

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(coursework_ids))) as pool:
            found = list(pool.map(first, coursework_ids))

        return dict(zip(coursework_ids, found))
