"""
Name: Posts Endpoint Tests

Responsibilities:
  - Public listing (only active, author summary, pagination)
  - Create/update/delete with ownership rules
  - Image upload validation (MIME, size, storage availability)
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from postboard.domain.entities import Post
from postboard.domain.value_objects import ListFilter
from postboard.identity.users import UserRole

pytestmark = pytest.mark.unit

VALID_POST = {"title": "Mi viaje", "description": "Una descripción suficientemente larga"}
PNG = ("foto.png", b"\x89PNG\r\n\x1a\nfake", "image/png")


def _seed(post_repo, author, *, title="Post", is_active=True, image=None):
    return post_repo.create_post(
        Post(
            id=uuid4(),
            title=title,
            description="Descripción de prueba",
            author_id=author.id,
            image=image,
            is_active=is_active,
        )
    )


class TestPublicListing:
    def test_lists_only_active_with_author(self, client, make_user, post_repo):
        author = make_user(name="Ana", email="ana@x.com")
        _seed(post_repo, author, title="Visible")
        _seed(post_repo, author, title="Oculto", is_active=False)

        res = client.get("/posts")

        assert res.status_code == 200
        body = res.json()
        assert [p["title"] for p in body["items"]] == ["Visible"]
        assert body["items"][0]["author"] == {
            "id": str(author.id),
            "name": "Ana",
            "email": "ana@x.com",
        }
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}

    def test_no_token_needed(self, client):
        res = client.get("/posts")
        assert res.status_code == 200
        assert res.json()["items"] == []

    def test_search_and_limit(self, client, make_user, post_repo):
        author = make_user()
        for n in range(3):
            _seed(post_repo, author, title=f"Viaje {n}")
        _seed(post_repo, author, title="Receta")

        res = client.get("/posts", params={"search": "viaje", "limit": 2})

        body = res.json()
        assert len(body["items"]) == 2
        assert body["pagination"]["total"] == 3
        assert body["pagination"]["pages"] == 2

    def test_invalid_page_is_400(self, client):
        res = client.get("/posts", params={"page": 0})
        assert res.status_code == 400
        assert any(e.get("field") == "page" for e in res.json()["errors"])


class TestGetPost:
    def test_requires_token(self, client, make_user, post_repo):
        post = _seed(post_repo, make_user())
        assert client.get(f"/posts/{post.id}").status_code == 401

    def test_found(self, client, make_user, auth_headers, post_repo):
        author = make_user()
        post = _seed(post_repo, author, title="Detalle")

        res = client.get(f"/posts/{post.id}", headers=auth_headers(make_user()))

        assert res.status_code == 200
        assert res.json()["title"] == "Detalle"

    def test_missing_is_404(self, client, make_user, auth_headers):
        res = client.get(f"/posts/{uuid4()}", headers=auth_headers(make_user()))
        assert res.status_code == 404
        assert res.json()["code"] == "NOT_FOUND"

    def test_malformed_id_is_400(self, client, make_user, auth_headers):
        res = client.get("/posts/not-a-uuid", headers=auth_headers(make_user()))
        assert res.status_code == 400


class TestCreatePost:
    def test_create_ok(self, client, make_user, auth_headers, post_repo):
        author = make_user(name="Ana")

        res = client.post("/posts", data=VALID_POST, headers=auth_headers(author))

        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "Post created successfully"
        assert body["post"]["title"] == "Mi viaje"
        assert body["post"]["is_active"] is True
        assert body["post"]["image"] is None
        assert body["post"]["author"]["name"] == "Ana"
        assert post_repo.count(ListFilter()) == 1

    def test_requires_token(self, client):
        assert client.post("/posts", data=VALID_POST).status_code == 401

    def test_missing_title_reports_field(self, client, make_user, auth_headers):
        res = client.post(
            "/posts",
            data={"description": VALID_POST["description"]},
            headers=auth_headers(make_user()),
        )

        assert res.status_code == 400
        errors = res.json()["errors"]
        assert [e["field"] for e in errors if "field" in e] == ["title"]

    def test_image_without_storage_is_503(self, client, make_user, auth_headers):
        res = client.post(
            "/posts",
            data=VALID_POST,
            files={"image": PNG},
            headers=auth_headers(make_user()),
        )
        assert res.status_code == 503
        assert res.json()["code"] == "SERVICE_UNAVAILABLE"

    def test_non_image_upload_is_400(self, client, make_user, auth_headers):
        res = client.post(
            "/posts",
            data=VALID_POST,
            files={"image": ("notas.txt", b"hola", "text/plain")},
            headers=auth_headers(make_user()),
        )
        assert res.status_code == 400
        assert {"field": "image", "message": "El archivo debe ser una imagen."} in res.json()["errors"]


class TestImageUploads:
    @pytest.fixture
    def image_storage(self):
        storage = MagicMock()
        storage.generate_presigned_url.return_value = "https://cdn.example.com/signed"
        return storage

    def test_create_with_image(self, client, make_user, auth_headers, image_storage):
        res = client.post(
            "/posts",
            data=VALID_POST,
            files={"image": PNG},
            headers=auth_headers(make_user()),
        )

        assert res.status_code == 201
        post = res.json()["post"]
        assert post["image"].startswith("posts/")
        assert post["image"].endswith(".png")
        assert post["image_url"] == "https://cdn.example.com/signed"

        key, content, content_type = image_storage.upload_file.call_args.args
        assert key == post["image"]
        assert content == PNG[1]
        assert content_type == "image/png"

    def test_invalid_fields_do_not_upload(self, client, make_user, auth_headers, image_storage):
        res = client.post(
            "/posts",
            data={"title": "x", "description": "corta"},
            files={"image": PNG},
            headers=auth_headers(make_user()),
        )
        assert res.status_code == 400
        image_storage.upload_file.assert_not_called()

    def test_oversized_image_is_413(
        self, client, make_user, auth_headers, image_storage, monkeypatch
    ):
        from postboard.crosscutting import config as app_config

        monkeypatch.setenv("MAX_IMAGE_BYTES", "4")
        app_config.get_settings.cache_clear()

        res = client.post(
            "/posts",
            data=VALID_POST,
            files={"image": PNG},
            headers=auth_headers(make_user()),
        )

        assert res.status_code == 413
        image_storage.upload_file.assert_not_called()

    def test_stranger_update_with_image_does_not_upload(
        self, client, make_user, auth_headers, post_repo, image_storage
    ):
        post = _seed(post_repo, make_user())

        res = client.put(
            f"/posts/{post.id}",
            files={"image": PNG},
            headers=auth_headers(make_user()),
        )

        assert res.status_code == 403
        image_storage.upload_file.assert_not_called()

    def test_owner_replaces_image(self, client, make_user, auth_headers, post_repo, image_storage):
        author = make_user()
        post = _seed(post_repo, author, image="posts/old.png")

        res = client.put(
            f"/posts/{post.id}", files={"image": PNG}, headers=auth_headers(author)
        )

        assert res.status_code == 200
        new_key = res.json()["post"]["image"]
        assert new_key != "posts/old.png"
        assert post_repo.get_post(post.id).image == new_key
        assert post_repo.get_post(post.id).title == "Post"


class TestUpdatePost:
    def test_owner_updates_title_only(self, client, make_user, auth_headers, post_repo):
        author = make_user()
        post = _seed(post_repo, author)

        res = client.put(
            f"/posts/{post.id}", data={"title": "Nuevo título"}, headers=auth_headers(author)
        )

        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Post updated successfully"
        assert body["post"]["title"] == "Nuevo título"
        assert body["post"]["description"] == "Descripción de prueba"

    def test_blank_fields_are_ignored(self, client, make_user, auth_headers, post_repo):
        author = make_user()
        post = _seed(post_repo, author, title="Original")

        res = client.put(
            f"/posts/{post.id}",
            data={"title": "   ", "description": ""},
            headers=auth_headers(author),
        )

        assert res.status_code == 200
        assert res.json()["post"]["title"] == "Original"

    def test_stranger_is_forbidden(self, client, make_user, auth_headers, post_repo):
        post = _seed(post_repo, make_user(), title="Original")

        res = client.put(
            f"/posts/{post.id}", data={"title": "Hackeado"}, headers=auth_headers(make_user())
        )

        assert res.status_code == 403
        assert post_repo.get_post(post.id).title == "Original"

    def test_admin_can_update_any_post(self, client, make_user, auth_headers, post_repo):
        post = _seed(post_repo, make_user())
        admin = make_user(role=UserRole.ADMIN)

        res = client.put(
            f"/posts/{post.id}", data={"title": "Moderado"}, headers=auth_headers(admin)
        )

        assert res.status_code == 200

    def test_too_short_title_is_400(self, client, make_user, auth_headers, post_repo):
        author = make_user()
        post = _seed(post_repo, author)

        res = client.put(f"/posts/{post.id}", data={"title": "ab"}, headers=auth_headers(author))

        assert res.status_code == 400

    def test_missing_post_is_404(self, client, make_user, auth_headers):
        res = client.put(
            f"/posts/{uuid4()}", data={"title": "Nuevo título"}, headers=auth_headers(make_user())
        )
        assert res.status_code == 404


class TestDeletePost:
    def test_owner_deletes_then_404(self, client, make_user, auth_headers, post_repo):
        author = make_user()
        post = _seed(post_repo, author)
        headers = auth_headers(author)

        res = client.delete(f"/posts/{post.id}", headers=headers)

        assert res.status_code == 200
        assert res.json() == {"message": "Post deleted successfully"}
        assert client.get(f"/posts/{post.id}", headers=headers).status_code == 404
        assert client.delete(f"/posts/{post.id}", headers=headers).status_code == 404

    def test_stranger_cannot_delete(self, client, make_user, auth_headers, post_repo):
        post = _seed(post_repo, make_user())

        res = client.delete(f"/posts/{post.id}", headers=auth_headers(make_user()))

        assert res.status_code == 403
        assert post_repo.get_post(post.id) is not None
