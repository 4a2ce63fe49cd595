"""Tests for the course player: outline, lesson access and progress."""


class TestOutline:
    def test_requires_enrollment(self, api, client):
        _, course, _ = api.published_course()
        _, student = api.user()
        response = client.get(f"/api/v1/learn/{course['slug']}", headers=student)
        assert response.status_code == 403

    def test_instructor_sees_own_outline(self, api, client):
        owner, course, _ = api.published_course()
        response = client.get(f"/api/v1/learn/{course['slug']}", headers=owner)
        assert response.status_code == 200

    def test_fresh_enrollment_starts_at_first_lesson(self, api, client):
        _, course, lessons = api.published_course(lessons=3)
        _, student = api.user()
        api.enroll(student, course["id"])

        outline = client.get(f"/api/v1/learn/{course['slug']}", headers=student).json()["data"]
        assert outline["progress_percent"] == 0
        assert outline["completed_count"] == 0
        assert outline["current_lesson_id"] == lessons[0]["id"]
        assert [lesson["completed"] for lesson in outline["lessons"]] == [False, False, False]
        assert outline["completed_at"] is None


class TestLessonAccess:
    def test_free_preview_is_public(self, api, client):
        _, course, lessons = api.published_course(lessons=2, free_lessons=(0,))
        response = client.get(f"/api/v1/learn/{course['slug']}/lessons/{lessons[0]['id']}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["lesson"]["content"] == "Body"
        assert data["previous_lesson_id"] is None
        assert data["next_lesson_id"] == lessons[1]["id"]

    def test_paid_lesson_needs_enrollment(self, api, client):
        _, course, lessons = api.published_course(lessons=2, free_lessons=(0,))
        url = f"/api/v1/learn/{course['slug']}/lessons/{lessons[1]['id']}"
        assert client.get(url).status_code == 403

        _, student = api.user()
        assert client.get(url, headers=student).status_code == 403

        api.enroll(student, course["id"])
        response = client.get(url, headers=student)
        assert response.status_code == 200
        assert response.json()["data"]["previous_lesson_id"] == lessons[0]["id"]
        assert response.json()["data"]["next_lesson_id"] is None

    def test_lesson_from_another_course_is_404(self, api, client):
        headers, course, _ = api.published_course()
        _, _, other_lessons = api.published_course(headers, title="Other course")
        response = client.get(f"/api/v1/learn/{course['slug']}/lessons/{other_lessons[0]['id']}")
        assert response.status_code == 404

    def test_archived_course_stays_open_to_enrolled_learners(self, api, client):
        owner, course, lessons = api.published_course(lessons=2, free_lessons=())
        _, student = api.user()
        _, stranger = api.user()
        api.enroll(student, course["id"])
        client.post(f"/api/v1/instructor/courses/{course['id']}/archive", headers=owner)

        url = f"/api/v1/learn/{course['slug']}/lessons/{lessons[1]['id']}"
        assert client.get(url, headers=student).status_code == 200
        assert client.get(url, headers=stranger).status_code == 404


class TestProgress:
    def test_completing_lessons_updates_progress(self, api, client):
        _, course, lessons = api.published_course(lessons=3)
        _, student = api.user()
        api.enroll(student, course["id"])

        response = client.post(f"/api/v1/learn/lessons/{lessons[0]['id']}/complete", headers=student)
        assert response.status_code == 200
        progress = response.json()["data"]
        assert progress["completed_count"] == 1
        assert progress["total_lessons"] == 3
        assert progress["progress_percent"] == 33
        assert progress["course_completed"] is False

        outline = client.get(f"/api/v1/learn/{course['slug']}", headers=student).json()["data"]
        assert outline["current_lesson_id"] == lessons[1]["id"]
        assert outline["lessons"][0]["completed"] is True

    def test_completion_is_idempotent(self, api, client):
        _, course, lessons = api.published_course(lessons=2)
        _, student = api.user()
        api.enroll(student, course["id"])

        url = f"/api/v1/learn/lessons/{lessons[0]['id']}/complete"
        client.post(url, headers=student)
        progress = client.post(url, headers=student).json()["data"]
        assert progress["completed_count"] == 1
        assert progress["progress_percent"] == 50

    def test_finishing_and_reopening_a_course(self, api, client):
        _, course, lessons = api.published_course(lessons=2)
        _, student = api.user()
        api.enroll(student, course["id"])

        for lesson in lessons:
            progress = client.post(f"/api/v1/learn/lessons/{lesson['id']}/complete", headers=student).json()["data"]
        assert progress["course_completed"] is True
        assert progress["progress_percent"] == 100

        outline = client.get(f"/api/v1/learn/{course['slug']}", headers=student).json()["data"]
        assert outline["completed_at"] is not None
        assert outline["current_lesson_id"] == lessons[-1]["id"]

        response = client.delete(f"/api/v1/learn/lessons/{lessons[0]['id']}/complete", headers=student)
        assert response.status_code == 200
        assert response.json()["data"]["course_completed"] is False

        outline = client.get(f"/api/v1/learn/{course['slug']}", headers=student).json()["data"]
        assert outline["completed_at"] is None
        assert outline["current_lesson_id"] == lessons[0]["id"]

    def test_progress_requires_enrollment(self, api, client):
        _, course, lessons = api.published_course()
        _, student = api.user()
        response = client.post(f"/api/v1/learn/lessons/{lessons[0]['id']}/complete", headers=student)
        assert response.status_code == 403

    def test_unknown_lesson(self, api, client):
        _, student = api.user()
        response = client.post("/api/v1/learn/lessons/4242/complete", headers=student)
        assert response.status_code == 404

    def test_my_courses_reports_progress(self, api, client):
        _, course, lessons = api.published_course(lessons=4)
        _, student = api.user()
        api.enroll(student, course["id"])
        client.post(f"/api/v1/learn/lessons/{lessons[0]['id']}/complete", headers=student)

        mine = client.get("/api/v1/me/courses", headers=student).json()["data"]
        assert len(mine) == 1
        assert mine[0]["course"]["id"] == course["id"]
        assert mine[0]["progress_percent"] == 25
