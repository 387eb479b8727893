import asyncio

import pytest

from blog_catalog_api.app.core.errors import AuthenticationError
from blog_catalog_api.app.schemas.blog import BlogCreate
from blog_catalog_api.app.schemas.user import UserSummary
from blog_catalog_api.app.services.blog_service import BlogService
from conftest import INITIAL_BLOGS, blogs_in_db, login, register, users_in_db


class TestListBlogs:
    def test_blogs_returned_as_json(self, client, initial_blogs):
        response = client.get("/api/v1/blogs/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")

    def test_all_blogs_returned(self, client, initial_blogs):
        assert len(client.get("/api/v1/blogs/").json()) == len(INITIAL_BLOGS)

    def test_specific_blog_is_among_them(self, client, initial_blogs):
        titles = [blog["title"] for blog in client.get("/api/v1/blogs/").json()]
        assert INITIAL_BLOGS[1]["title"] in titles

    def test_blogs_have_id_and_owner_summary(self, client, initial_blogs):
        for blog in client.get("/api/v1/blogs/").json():
            assert blog["id"] is not None
            assert blog["owner"] == {"id": blog["owner"]["id"], "username": "root", "name": "Superuser"}
            assert "password_hash" not in blog["owner"]

    def test_empty_catalogue(self, client):
        assert client.get("/api/v1/blogs/").json() == []

    def test_get_single_blog(self, client, initial_blogs):
        blog = initial_blogs[0]
        response = client.get(f"/api/v1/blogs/{blog['id']}")
        assert response.status_code == 200
        assert response.json() == blog

    def test_get_unknown_blog_is_bad_id(self, client, initial_blogs):
        response = client.get("/api/v1/blogs/9999")
        assert response.status_code == 400
        assert response.json() == {"error": "bad id"}

    def test_id_beyond_sqlite_integer_is_bad_id(self, client, initial_blogs):
        response = client.get("/api/v1/blogs/99999999999999999999")
        assert response.status_code == 400
        assert response.json() == {"error": "bad id"}


class TestCreateBlog:
    def test_valid_blog_can_be_added(self, client, auth_headers, initial_blogs):
        new_blog = {"title": "CoolTitle", "author": "Cool Test Author", "url": "coolexample.com", "likes": 123}
        response = client.post("/api/v1/blogs/", json=new_blog, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["likes"] == 123

        blogs_after = blogs_in_db()
        assert len(blogs_after) == len(INITIAL_BLOGS) + 1
        assert "CoolTitle" in [blog["title"] for blog in blogs_after]

    def test_blog_without_likes_gets_zero(self, client, auth_headers, initial_blogs):
        new_blog = {"title": "CoolTitle", "author": "Cool Test Author", "url": "coolexample.com"}
        response = client.post("/api/v1/blogs/", json=new_blog, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["likes"] == 0
        assert blogs_in_db()[-1]["likes"] == 0

    def test_blog_is_recorded_on_owner(self, client, auth_headers, initial_blogs):
        owner = users_in_db()[0]
        assert owner["owned_blogs"] == [blog["id"] for blog in initial_blogs]
        assert all(blog["owner_id"] == owner["id"] for blog in blogs_in_db())

    def test_blog_without_title_or_url_is_rejected(self, client, auth_headers, initial_blogs):
        for invalid in ({"author": "Cool Test Author", "likes": 12}, {"title": "Only title"}, {"url": "only.url"}):
            response = client.post("/api/v1/blogs/", json=invalid, headers=auth_headers)
            assert response.status_code == 400
            assert "error" in response.json()
        assert len(blogs_in_db()) == len(INITIAL_BLOGS)

    def test_error_message_names_the_field(self, client, auth_headers):
        response = client.post("/api/v1/blogs/", json={"url": "x.com"}, headers=auth_headers)
        assert response.json() == {"error": "title: title is required"}

    def test_wrongly_typed_likes_is_a_validation_error(self, client, auth_headers):
        response = client.post(
            "/api/v1/blogs/", json={"title": "t", "url": "u", "likes": "many"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("likes:")
        assert blogs_in_db() == []

    def test_likes_beyond_sqlite_integer_rejected(self, client, auth_headers):
        response = client.post(
            "/api/v1/blogs/", json={"title": "t", "url": "u", "likes": 10**20}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("likes:")
        assert blogs_in_db() == []

    def test_creation_without_token_fails(self, client, initial_blogs):
        new_blog = {"title": "CoolTitle", "url": "coolexample.com"}
        response = client.post("/api/v1/blogs/", json=new_blog)
        assert response.status_code == 401
        assert response.json() == {"error": "token missing or invalid"}
        assert response.headers["www-authenticate"] == "Bearer"
        assert len(blogs_in_db()) == len(INITIAL_BLOGS)

    def test_creation_with_bad_token_fails(self, client, initial_blogs):
        response = client.post(
            "/api/v1/blogs/",
            json={"title": "CoolTitle", "url": "coolexample.com"},
            headers={"Authorization": "Bearer not.a.token"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "token missing or invalid"}
        assert len(blogs_in_db()) == len(INITIAL_BLOGS)

    def test_creation_with_expired_token_fails(self, client):
        user = register(client)
        token = client.app.state.credentials.issue_token(user["id"], user["username"], expires_delta=-10)
        response = client.post(
            "/api/v1/blogs/",
            json={"title": "CoolTitle", "url": "coolexample.com"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "token missing or invalid"}

    def test_creation_for_vanished_account_fails(self, database):
        ghost = UserSummary(id=4242, username="ghost", name="Deleted Account")
        with pytest.raises(AuthenticationError):
            asyncio.run(BlogService.create_blog(BlogCreate(title="t", url="u"), ghost))
        assert blogs_in_db() == []


class TestDeleteBlog:
    def test_owner_can_delete(self, client, auth_headers, initial_blogs):
        blog_to_delete = initial_blogs[0]
        response = client.delete(f"/api/v1/blogs/{blog_to_delete['id']}", headers=auth_headers)
        assert response.status_code == 204
        assert response.content == b""

        blogs_after = blogs_in_db()
        assert len(blogs_after) == len(INITIAL_BLOGS) - 1
        assert blog_to_delete["title"] not in [blog["title"] for blog in blogs_after]

        listed = client.get("/api/v1/blogs/").json()
        assert blog_to_delete["id"] not in [blog["id"] for blog in listed]
        owner = client.get("/api/v1/users/").json()[0]
        assert blog_to_delete["id"] not in [blog["id"] for blog in owner["owned_blogs"]]
        assert users_in_db()[0]["owned_blogs"] == [initial_blogs[1]["id"]]

    def test_non_owner_cannot_delete(self, client, initial_blogs):
        register(client, username="intruder", password="password", name="Intruder")
        headers = login(client, username="intruder", password="password")
        response = client.delete(f"/api/v1/blogs/{initial_blogs[0]['id']}", headers=headers)
        assert response.status_code == 403
        assert response.json() == {"error": "operation not permitted"}
        assert len(blogs_in_db()) == len(INITIAL_BLOGS)

    def test_anonymous_cannot_delete(self, client, initial_blogs):
        response = client.delete(f"/api/v1/blogs/{initial_blogs[0]['id']}")
        assert response.status_code == 401
        assert len(blogs_in_db()) == len(INITIAL_BLOGS)

    def test_deleting_missing_blog_fails(self, client, auth_headers, initial_blogs):
        blog_id = initial_blogs[0]["id"]
        assert client.delete(f"/api/v1/blogs/{blog_id}", headers=auth_headers).status_code == 204
        response = client.delete(f"/api/v1/blogs/{blog_id}", headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "bad id"}

    def test_deleting_malformed_id_fails(self, client, auth_headers, initial_blogs):
        response = client.delete("/api/v1/blogs/not-an-id", headers=auth_headers)
        assert response.status_code == 400
        assert len(blogs_in_db()) == len(INITIAL_BLOGS)

    def test_deleting_id_beyond_sqlite_integer_fails(self, client, auth_headers, initial_blogs):
        response = client.delete("/api/v1/blogs/99999999999999999999", headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "bad id"}
        assert len(blogs_in_db()) == len(INITIAL_BLOGS)


class TestUpdateBlog:
    def test_likes_can_be_changed(self, client, initial_blogs):
        original = initial_blogs[0]
        changed = {**original, "likes": original["likes"] + 1}
        response = client.put(f"/api/v1/blogs/{original['id']}", json=changed)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json()["likes"] == original["likes"] + 1
        assert blogs_in_db()[0]["likes"] == original["likes"] + 1

    def test_full_replace_keeps_owner(self, client, initial_blogs):
        original = initial_blogs[0]
        response = client.put(
            f"/api/v1/blogs/{original['id']}",
            json={"title": "New title", "author": None, "url": "new.example.com", "likes": 1},
        )
        body = response.json()
        assert (body["title"], body["author"], body["url"], body["likes"]) == ("New title", None, "new.example.com", 1)
        assert body["owner"] == original["owner"]

    def test_unknown_id_changes_nothing(self, client, initial_blogs):
        original = initial_blogs[0]
        before = blogs_in_db()
        response = client.put("/api/v1/blogs/9999", json={**original, "likes": original["likes"] + 1})
        assert response.status_code == 400
        assert response.json() == {"error": "bad id"}
        assert blogs_in_db() == before

    def test_malformed_id_changes_nothing(self, client, initial_blogs):
        before = blogs_in_db()
        response = client.put("/api/v1/blogs/5a422a851b54a676234d17f7", json={"likes": 99})
        assert response.status_code == 400
        assert response.json() == {"error": "bad id"}
        assert blogs_in_db() == before

    def test_negative_likes_rejected(self, client, initial_blogs):
        response = client.put(f"/api/v1/blogs/{initial_blogs[0]['id']}", json={"likes": -3})
        assert response.status_code == 400
        assert blogs_in_db()[0]["likes"] == INITIAL_BLOGS[0]["likes"]

    def test_huge_likes_rejected(self, client, initial_blogs):
        response = client.put(f"/api/v1/blogs/{initial_blogs[0]['id']}", json={"likes": 10**20})
        assert response.status_code == 400
        assert blogs_in_db()[0]["likes"] == INITIAL_BLOGS[0]["likes"]

    def test_id_beyond_sqlite_integer_changes_nothing(self, client, initial_blogs):
        before = blogs_in_db()
        response = client.put("/api/v1/blogs/99999999999999999999", json={"likes": 99})
        assert response.status_code == 400
        assert response.json() == {"error": "bad id"}
        assert blogs_in_db() == before


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
