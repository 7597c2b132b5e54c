"""
Name: In-Memory Repository Tests

Responsibilities:
  - Ordering and pagination guard rails
  - Email uniqueness (case-insensitive)
  - Thread-safe toggles
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from postboard.domain.entities import Post
from postboard.domain.errors import EmailAlreadyExistsError
from postboard.domain.value_objects import ListFilter
from postboard.identity.users import User

pytestmark = pytest.mark.unit

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _user(email: str) -> User:
    return User(id=uuid4(), name="Nombre", email=email, password_hash="h")


class TestInMemoryUserRepository:
    def test_duplicate_email_differing_in_case(self, user_repo):
        user_repo.create_user(_user("ana@example.com"))
        with pytest.raises(EmailAlreadyExistsError):
            user_repo.create_user(_user("ANA@example.com"))

    def test_create_fills_timestamps(self, user_repo):
        stored = user_repo.create_user(_user("ana@example.com"))
        assert stored.created_at is not None
        assert stored.updated_at is not None

    def test_set_active_unknown_user(self, user_repo):
        assert user_repo.set_user_active(uuid4(), False) is None

    def test_get_users_by_ids(self, user_repo):
        a = user_repo.create_user(_user("a@example.com"))
        user_repo.create_user(_user("b@example.com"))
        assert user_repo.get_users_by_ids([a.id, uuid4()]) == [a]


class TestInMemoryPostRepository:
    def _post(self, n: int, **kwargs) -> Post:
        return Post(
            id=uuid4(),
            title=f"Post {n}",
            description="Descripción de prueba",
            author_id=uuid4(),
            created_at=BASE_TIME + timedelta(seconds=n),
            **kwargs,
        )

    def test_find_page_newest_first_with_offset(self, post_repo):
        for n in range(5):
            post_repo.create_post(self._post(n))

        page = post_repo.find_page(ListFilter(), offset=1, limit=2)

        assert [p.title for p in page] == ["Post 3", "Post 2"]

    def test_find_page_guard_rails(self, post_repo):
        post_repo.create_post(self._post(1))
        assert post_repo.find_page(ListFilter(), offset=0, limit=0) == []
        assert len(post_repo.find_page(ListFilter(), offset=-5, limit=10)) == 1

    def test_update_keeps_author(self, post_repo):
        post = post_repo.create_post(self._post(1))
        updated = post_repo.update_post(post.id, title="Otro título")
        assert updated.author_id == post.author_id
        assert updated.title == "Otro título"

    def test_concurrent_toggles_are_not_lost(self, post_repo):
        post = post_repo.create_post(self._post(1))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: post_repo.toggle_post_active(post.id), range(100)))

        # 100 toggles (par) => estado original
        assert post_repo.get_post(post.id).is_active is True

    def test_delete_twice(self, post_repo):
        post = post_repo.create_post(self._post(1))
        assert post_repo.delete_post(post.id) is True
        assert post_repo.delete_post(post.id) is False
