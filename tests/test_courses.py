"""Tests for the course catalog and instructor authoring endpoints."""


class TestAuthoring:
    def test_students_cannot_author(self, api, client):
        _, headers = api.user()
        response = client.post("/api/v1/instructor/courses", json={"title": "Nope"}, headers=headers)
        assert response.status_code == 403
        assert response.json()["message"] == "You do not have permission to perform this action"

    def test_new_course_is_a_draft_with_slug(self, api):
        user, headers = api.user(role="INSTRUCTOR")
        course = api.create_course(headers, title="Async Python: The Basics!", price=1999, currency="USD")

        assert course["status"] == "DRAFT"
        assert course["slug"] == "async-python-the-basics"
        assert course["currency"] == "usd"
        assert course["price"] == 1999
        assert course["instructor"] == {"id": user["id"], "full_name": user["full_name"]}

    def test_slug_collisions_get_numbered(self, api):
        _, headers = api.user(role="INSTRUCTOR")
        slugs = [api.create_course(headers, title="Data Science")["slug"] for _ in range(3)]
        assert slugs == ["data-science", "data-science-1", "data-science-2"]

    def test_slug_is_stable_when_title_changes(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        course = api.create_course(headers, title="Original Title")
        response = client.put(
            f"/api/v1/instructor/courses/{course['id']}", json={"title": "Renamed"}, headers=headers
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Renamed"
        assert data["slug"] == "original-title"

    def test_only_owner_or_admin_can_edit(self, api, client):
        _, owner = api.user(role="INSTRUCTOR")
        _, other = api.user(role="INSTRUCTOR")
        _, admin = api.admin()
        course = api.create_course(owner)

        response = client.put(
            f"/api/v1/instructor/courses/{course['id']}", json={"price": 500}, headers=other
        )
        assert response.status_code == 403

        response = client.put(
            f"/api/v1/instructor/courses/{course['id']}", json={"price": 500}, headers=admin
        )
        assert response.status_code == 200
        assert response.json()["data"]["price"] == 500

    def test_publish_requires_a_lesson(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        course = api.create_course(headers)
        response = client.post(f"/api/v1/instructor/courses/{course['id']}/publish", headers=headers)
        assert response.status_code == 400

        api.add_lesson(headers, course["id"])
        assert api.publish(headers, course["id"])["status"] == "PUBLISHED"

    def test_lessons_append_in_order_and_update_count(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        course = api.create_course(headers)
        first = api.add_lesson(headers, course["id"], title="One")
        second = api.add_lesson(headers, course["id"], title="Two")
        assert (first["order_index"], second["order_index"]) == (0, 1)

        response = client.get("/api/v1/instructor/courses", headers=headers)
        assert response.json()["data"][0]["total_lesson"] == 2

    def test_delete_lesson_updates_count(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        _, course, lessons = api.published_course(headers, lessons=2)

        response = client.delete(f"/api/v1/instructor/lessons/{lessons[0]['id']}", headers=headers)
        assert response.status_code == 200

        detail = client.get(f"/api/v1/courses/{course['slug']}").json()["data"]
        assert detail["total_lesson"] == 1
        assert [lesson["id"] for lesson in detail["lessons"]] == [lessons[1]["id"]]

    def test_published_course_keeps_its_last_lesson(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        _, course, lessons = api.published_course(headers, lessons=1)

        response = client.delete(f"/api/v1/instructor/lessons/{lessons[0]['id']}", headers=headers)
        assert response.status_code == 400
        assert response.json()["message"] == "A published course must keep at least one lesson"
        assert client.get(f"/api/v1/courses/{course['slug']}").json()["data"]["total_lesson"] == 1

    def test_draft_course_can_lose_every_lesson(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        course = api.create_course(headers)
        lesson = api.add_lesson(headers, course["id"])

        response = client.delete(f"/api/v1/instructor/lessons/{lesson['id']}", headers=headers)
        assert response.status_code == 200
        assert client.get("/api/v1/instructor/courses", headers=headers).json()["data"][0]["total_lesson"] == 0

    def test_update_lesson(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        course = api.create_course(headers)
        lesson = api.add_lesson(headers, course["id"])
        response = client.put(
            f"/api/v1/instructor/lessons/{lesson['id']}",
            json={"title": "Better title", "is_free": True},
            headers=headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Better title"
        assert data["is_free"] is True

    def test_unknown_course_is_404(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        response = client.post("/api/v1/instructor/courses/999/publish", headers=headers)
        assert response.status_code == 404


class TestCatalog:
    def test_only_published_courses_are_listed(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        api.create_course(headers, title="Still a draft")
        _, published, _ = api.published_course(headers, title="Live course")

        page = client.get("/api/v1/courses").json()["data"]
        assert page["total"] == 1
        assert [c["id"] for c in page["items"]] == [published["id"]]

    def test_archived_courses_leave_the_catalog(self, api, client):
        headers, course, _ = api.published_course()
        client.post(f"/api/v1/instructor/courses/{course['id']}/archive", headers=headers)
        assert client.get("/api/v1/courses").json()["data"]["total"] == 0

    def test_keyword_level_and_price_filters(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        api.published_course(headers, title="Intro to Django", level="BEGINNER")
        api.published_course(headers, title="Advanced Django", level="ADVANCED", price=4900)
        api.published_course(headers, title="Rust for Pythonistas", description="Django devs welcome")

        def titles(**params):
            items = client.get("/api/v1/courses", params=params).json()["data"]["items"]
            return sorted(c["title"] for c in items)

        assert titles(keyword="DJANGO") == ["Advanced Django", "Intro to Django", "Rust for Pythonistas"]
        assert titles(keyword="django", level="ADVANCED") == ["Advanced Django"]
        assert titles(free="true") == ["Intro to Django", "Rust for Pythonistas"]
        assert titles(free="false") == ["Advanced Django"]

    def test_keyword_wildcards_match_literally(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        for title in ("100% Python", "Intro to Django", "snake_case style"):
            api.published_course(headers, title=title, lessons=1)

        def titles(keyword):
            items = client.get("/api/v1/courses", params={"keyword": keyword}).json()["data"]["items"]
            return [c["title"] for c in items]

        assert titles("%") == ["100% Python"]
        assert titles("_") == ["snake_case style"]
        assert titles("e_c") == ["snake_case style"]
        assert titles("\\") == []

    def test_sort_by_price_and_paging(self, api, client):
        _, headers = api.user(role="INSTRUCTOR")
        for price in (3000, 1000, 2000):
            api.published_course(headers, title=f"Course {price}", price=price, lessons=1)

        asc = client.get("/api/v1/courses", params={"sort": "price_asc"}).json()["data"]
        assert [c["price"] for c in asc["items"]] == [1000, 2000, 3000]

        desc = client.get("/api/v1/courses", params={"sort": "price_desc", "size": 2, "page": 1}).json()["data"]
        assert desc["total"] == 3
        assert desc["page"] == 1
        assert [c["price"] for c in desc["items"]] == [1000]

    def test_invalid_paging_is_rejected(self, client):
        assert client.get("/api/v1/courses", params={"size": 0}).status_code == 400
        assert client.get("/api/v1/courses", params={"size": 101}).status_code == 400
        assert client.get("/api/v1/courses", params={"sort": "random"}).status_code == 400


class TestCourseDetail:
    def test_detail_has_outline_without_content(self, api, client):
        _, course, lessons = api.published_course(lessons=2)
        response = client.get(f"/api/v1/courses/{course['slug']}")
        assert response.status_code == 200
        detail = response.json()["data"]
        assert [lesson["id"] for lesson in detail["lessons"]] == [lesson["id"] for lesson in lessons]
        assert "content" not in detail["lessons"][0]

    def test_draft_is_hidden_from_public(self, api, client):
        user_headers = api.user()[1]
        _, owner = api.user(role="INSTRUCTOR")
        draft = api.create_course(owner, title="Secret Draft")

        assert client.get(f"/api/v1/courses/{draft['slug']}").status_code == 404
        assert client.get(f"/api/v1/courses/{draft['slug']}", headers=user_headers).status_code == 404
        assert client.get(f"/api/v1/courses/{draft['slug']}", headers=owner).status_code == 200

    def test_unknown_slug(self, client):
        response = client.get("/api/v1/courses/no-such-course")
        assert response.status_code == 404
        assert response.json()["status"] == "ERROR"
