"""
CRC - domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for users and posts (ports).
- Keep identity/application independent from PostgreSQL or in-memory storage.
- Share one listing contract (find_page + count over a ListFilter) so QueryEngine
  can paginate users and posts identically.

Collaborators
- identity.users: User
- domain.entities: Post
- domain.value_objects: ListFilter
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- find_page MUST order by created_at DESC, id DESC.
- create_user MUST raise EmailAlreadyExistsError on case-insensitive email clash.
- No optimistic locking: concurrent updates resolve last-write-wins.
"""

from typing import List, Optional, Protocol, Sequence, TypeVar
from uuid import UUID

from ..identity.users import User
from .entities import Post
from .value_objects import ListFilter

T_co = TypeVar("T_co", covariant=True)


class ListSource(Protocol[T_co]):
    """R: Anything QueryEngine can paginate."""

    def find_page(
        self, list_filter: ListFilter, *, offset: int, limit: int
    ) -> Sequence[T_co]: ...

    def count(self, list_filter: ListFilter) -> int: ...


class UserRepository(ListSource[User], Protocol):
    """
    R: Interface for user persistence.

    Search semantics: case-insensitive substring on name OR email.
    """

    def get_user_by_id(self, user_id: UUID) -> Optional[User]: ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        """R: Lookup is case-insensitive."""
        ...

    def get_users_by_ids(self, user_ids: Sequence[UUID]) -> List[User]: ...

    def create_user(self, user: User) -> User:
        """R: Raises EmailAlreadyExistsError when the email is taken."""
        ...

    def set_user_active(self, user_id: UUID, is_active: bool) -> Optional[User]: ...

    def set_user_role(self, user_id: UUID, role: str) -> Optional[User]: ...


class PostRepository(ListSource[Post], Protocol):
    """
    R: Interface for post persistence.

    Search semantics: every search token must match a token of
    title + description (case-insensitive).
    """

    def get_post(self, post_id: UUID) -> Optional[Post]: ...

    def create_post(self, post: Post) -> Post: ...

    def update_post(
        self,
        post_id: UUID,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Optional[Post]:
        """R: Only non-None fields are written; author_id/is_active untouched."""
        ...

    def toggle_post_active(self, post_id: UUID) -> Optional[Post]:
        """R: Atomic flip of is_active. None if the post does not exist."""
        ...

    def delete_post(self, post_id: UUID) -> bool:
        """R: Hard delete. False if the post did not exist."""
        ...
