from classroom_progress.clients.classroom import GoogleAPIError


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_courses_require_authentication(client):
    r = client.get("/courses")
    assert r.status_code == 401


def test_list_courses_passes_through_upstream_shape(client, student_headers):
    r = client.get("/courses", headers=student_headers, follow_redirects=False)
    assert r.status_code == 200, r.text
    [course] = r.json()
    assert course["id"] == "c1"
    assert course["courseState"] == "ACTIVE"


def test_list_coursework_and_submissions(client, student_headers):
    r = client.get("/courses/c1/coursework", headers=student_headers)
    assert r.status_code == 200, r.text
    assert [cw["id"] for cw in r.json()] == ["w1", "w2", "w3", "w4"]
    assert r.json()[0]["dueDate"] == {"year": 2024, "month": 3, "day": 10}

    r = client.get("/courses/c1/coursework/w1/submissions", headers=student_headers)
    assert r.status_code == 200, r.text
    assert r.json()[0]["state"] == "TURNED_IN"


def test_course_metrics(client, student_headers):
    r = client.get("/courses/c1/metrics", headers=student_headers)
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["metrics"] == {
        "total_tasks": 4,
        "turned_in": 1,
        "returned": 1,
        "submitted": 2,
        "pending": 2,
        "overdue": 0,
        "on_time_estimate": 1,
        "percent_on_time": 50,
        "avg_delay_hours": 5,
    }
    assert body["summary"]["week"] == {"delivered": 1, "on_time_percent": 0, "pending": 1, "overdue": 0}
    assert body["summary"]["month"] == {"delivered": 2, "on_time_percent": 50, "pending": 1, "overdue": 0}

    assert [row["id"] for row in body["details"]["delivered"]] == ["w1", "w2"]
    assert [row["id"] for row in body["details"]["pending"]] == ["w3", "w4"]
    assert body["details"]["overdue"] == []
    assert body["details"]["pending"][0]["remaining"] == "In 2d 21h"
    assert body["details"]["pending"][1]["due"] is None


def test_course_metrics_for_empty_course(client, student_headers):
    r = client.get("/courses/empty/metrics", headers=student_headers)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["metrics"]["total_tasks"] == 0
    assert body["metrics"]["percent_on_time"] == 0
    assert body["details"] == {"pending": [], "overdue": [], "delivered": []}


def test_upstream_failure_returns_error_not_metrics(client, fake_classroom, student_headers):
    fake_classroom.fail_with = GoogleAPIError(429, "Google API error", "Quota exceeded")

    r = client.get("/courses/c1/metrics", headers=student_headers)
    assert r.status_code == 429
    assert r.json() == {"error": "Google API error", "details": "Quota exceeded"}
    assert "metrics" not in r.json()


def test_notifications(client, student_headers):
    r = client.get("/courses/c1/notifications", headers=student_headers)
    assert r.status_code == 200, r.text
    body = r.json()

    assert [a["id"] for a in body["announcements"]] == ["a0", "a1", "a2", "a3", "a4"]
    assert [u["id"] for u in body["upcoming"]] == ["w3"]
    assert [m["id"] for m in body["missing"]] == ["w3"]


def test_notifications_survive_announcement_failure(client, fake_classroom, student_headers):
    fake_classroom.fail_announcements = True

    r = client.get("/courses/c1/notifications", headers=student_headers)
    assert r.status_code == 200, r.text
    assert r.json()["announcements"] == []
    assert [u["id"] for u in r.json()["upcoming"]] == ["w3"]
