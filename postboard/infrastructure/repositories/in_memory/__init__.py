from .post import InMemoryPostRepository
from .user import InMemoryUserRepository

__all__ = ["InMemoryPostRepository", "InMemoryUserRepository"]
