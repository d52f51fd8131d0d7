from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from classroom_progress.clients.classroom import GoogleAPIError
from classroom_progress.core.current_user import get_current_user
from classroom_progress.core.deps import get_classroom_client, get_oauth_client
from classroom_progress.core.security import create_session_token
from classroom_progress.main import app
from classroom_progress.schemas.classroom import Announcement, Course, CourseWork, StudentSubmission

FIXED_NOW = datetime(2024, 3, 15, 12, 0, 0)  # a Friday


class FakeClassroom:
    """In-memory stand-in for ClassroomClient, seeded per test."""

    def __init__(self):
        self.courses = [Course(id="c1", name="Algebra", section="A", courseState="ACTIVE")]
        self.coursework = {
            "c1": [
                CourseWork(id="w1", title="Essay", dueDate={"year": 2024, "month": 3, "day": 10}),
                CourseWork(id="w2", title="Quiz", dueDate={"year": 2024, "month": 3, "day": 10}),
                CourseWork(
                    id="w3",
                    title="Project",
                    dueDate={"year": 2024, "month": 3, "day": 18},
                    dueTime={"hours": 9, "minutes": 0},
                ),
                CourseWork(id="w4", title=None),
            ]
        }
        self.submissions = {
            "w1": StudentSubmission(id="s1", state="TURNED_IN", updateTime="2024-03-09T10:00:00"),
            "w2": StudentSubmission(id="s2", state="RETURNED", updateTime="2024-03-11T05:00:00"),
            "w3": StudentSubmission(id="s3", state="CREATED"),
        }
        self.announcements = {
            "c1": [Announcement(id=f"a{i}", text=f"note {i}") for i in range(7)],
        }
        self.fail_with: GoogleAPIError | None = None
        self.fail_announcements = False

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def list_courses(self):
        self._check()
        return self.courses

    def list_coursework(self, course_id):
        self._check()
        return self.coursework.get(course_id, [])

    def list_announcements(self, course_id):
        if self.fail_announcements:
            raise GoogleAPIError(403, "Google API error", "scope missing")
        return self.announcements.get(course_id, [])

    def list_my_submissions(self, course_id, coursework_id):
        self._check()
        s = self.submissions.get(coursework_id)
        return [s] if s else []

    def get_my_submissions(self, course_id, coursework_ids):
        self._check()
        return {cw_id: self.submissions.get(cw_id) for cw_id in coursework_ids}


class FakeOAuth:
    def __init__(self):
        self.refreshed_with = None

    def authorization_url(self, state):
        return f"https://accounts.example.test/auth?state={state}"

    def exchange_code(self, code):
        if code == "bad":
            raise GoogleAPIError(400, "Google OAuth error", "invalid_grant")
        return {"access_token": "google-at", "refresh_token": "google-rt", "expires_in": 3600}

    def userinfo(self, access_token):
        return {"email": "student1@example.com", "name": "Student One"}

    def refresh(self, refresh_token):
        self.refreshed_with = refresh_token
        return {"access_token": "google-at-2", "expires_in": 3600}


def session_token(expires_in: timedelta | None = timedelta(hours=1), refresh_token: str | None = "google-rt") -> str:
    data = {
        "sub": "student1@example.com",
        "name": "Student One",
        "gat": "google-at",
        "grt": refresh_token,
    }
    if expires_in is not None:
        data["gexp"] = int((datetime.now(timezone.utc) + expires_in).timestamp())
    return create_session_token(data)


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def fake_classroom():
    return FakeClassroom()


@pytest.fixture()
def fake_oauth():
    return FakeOAuth()


@pytest.fixture()
def client(fake_classroom, fake_oauth, monkeypatch):
    """Test client with Classroom and OAuth swapped for fakes; auth is still enforced."""

    def override_get_classroom_client(current_user=Depends(get_current_user)):
        yield fake_classroom

    monkeypatch.setattr("classroom_progress.routers.dashboard.local_now", lambda: FIXED_NOW)
    monkeypatch.setattr("classroom_progress.routers.dashboard.viewer_timezone", lambda: None)

    app.dependency_overrides[get_classroom_client] = override_get_classroom_client
    app.dependency_overrides[get_oauth_client] = lambda: fake_oauth
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def student_headers():
    return auth_header(session_token())
