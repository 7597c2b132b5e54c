"""
===============================================================================
POST STORE (Post Mutation Rules)
===============================================================================

Name:
    PostStore

Business Goal:
    Ser el único dueño de la entidad Post y de sus reglas de mutación:
      - author_id se fija en create y nunca se reasigna
      - solo autor o admin modifican/borran
      - solo admin activa/desactiva (el rol lo verifica AccessControlGate
        antes de llegar acá)

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    PostStore

Responsibilities:
    - create / get / authorize_modify / update / delete (ownership) /
      admin_toggle_active / admin_delete.
    - Validar inputs con validadores explícitos ANTES de persistir.
    - Devolver PostResult / DeletePostResult tipados.

Collaborators:
    - domain.repositories.PostRepository
    - identity.access_control.AccessControlGate (authorize_ownership)
    - domain.validation.validate_post_fields

Orden de chequeos en update/delete:
    NOT_FOUND -> FORBIDDEN -> VALIDATION_ERROR -> mutación.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

from ..crosscutting.logger import logger
from ..domain.entities import Post, utcnow
from ..domain.errors import DomainError
from ..domain.post_policy import Requester
from ..domain.repositories import PostRepository
from ..domain.validation import validate_post_fields
from ..domain.value_objects import PostPatch
from ..identity.access_control import AccessControlGate

_RESOURCE = "Post"


@dataclass
class PostResult:
    post: Post | None = None
    error: DomainError | None = None


@dataclass
class DeletePostResult:
    deleted: bool
    error: DomainError | None = None


class PostStore:
    def __init__(self, posts: PostRepository, gate: AccessControlGate):
        self._posts = posts
        self._gate = gate

    def create(
        self,
        author_id: UUID,
        title: str,
        description: str,
        image: str | None = None,
    ) -> PostResult:
        errors = validate_post_fields(title, description)
        if errors:
            return PostResult(error=DomainError.validation(errors))

        now = utcnow()
        post = self._posts.create_post(
            Post(
                id=uuid4(),
                title=title.strip(),
                description=description.strip(),
                author_id=author_id,
                image=image,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info(
            "Post creado", extra={"post_id": str(post.id), "author_id": str(author_id)}
        )
        return PostResult(post=post)

    def get(self, post_id: UUID) -> PostResult:
        post = self._posts.get_post(post_id)
        if post is None:
            return PostResult(error=DomainError.not_found(_RESOURCE))
        return PostResult(post=post)

    def authorize_modify(self, post_id: UUID, requester: Requester) -> PostResult:
        """NOT_FOUND -> FORBIDDEN, sin mutar (p.ej. antes de subir una imagen)."""
        post = self._posts.get_post(post_id)
        if post is None:
            return PostResult(error=DomainError.not_found(_RESOURCE))

        decision = self._gate.authorize_ownership(requester, post.author_id)
        if not decision.allowed:
            return PostResult(error=decision.error)
        return PostResult(post=post)

    def update(self, post_id: UUID, requester: Requester, patch: PostPatch) -> PostResult:
        checked = self.authorize_modify(post_id, requester)
        if checked.error is not None:
            return checked
        post = checked.post

        errors = validate_post_fields(patch.title, patch.description, partial=True)
        if errors:
            return PostResult(error=DomainError.validation(errors))

        if patch.is_empty():
            return PostResult(post=post)

        updated = self._posts.update_post(
            post_id,
            title=patch.title.strip() if patch.title is not None else None,
            description=(
                patch.description.strip() if patch.description is not None else None
            ),
            image=patch.image,
        )
        if updated is None:
            # R: borrado entre la lectura y la escritura.
            return PostResult(error=DomainError.not_found(_RESOURCE))

        logger.info("Post actualizado", extra={"post_id": str(post_id)})
        return PostResult(post=updated)

    def delete(self, post_id: UUID, requester: Requester) -> DeletePostResult:
        checked = self.authorize_modify(post_id, requester)
        if checked.error is not None:
            return DeletePostResult(deleted=False, error=checked.error)

        return self._hard_delete(post_id)

    def admin_toggle_active(self, post_id: UUID) -> PostResult:
        post = self._posts.toggle_post_active(post_id)
        if post is None:
            return PostResult(error=DomainError.not_found(_RESOURCE))
        logger.info(
            "Post activación cambiada",
            extra={"post_id": str(post_id), "is_active": post.is_active},
        )
        return PostResult(post=post)

    def admin_delete(self, post_id: UUID) -> DeletePostResult:
        return self._hard_delete(post_id)

    def _hard_delete(self, post_id: UUID) -> DeletePostResult:
        if not self._posts.delete_post(post_id):
            return DeletePostResult(deleted=False, error=DomainError.not_found(_RESOURCE))
        logger.info("Post eliminado", extra={"post_id": str(post_id)})
        return DeletePostResult(deleted=True)
