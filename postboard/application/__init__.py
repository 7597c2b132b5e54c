"""Application layer: list queries and post mutation rules."""

from .post_store import DeletePostResult, PostResult, PostStore
from .query_engine import ListPage, Pagination, QueryEngine

__all__ = [
    "DeletePostResult",
    "PostResult",
    "PostStore",
    "ListPage",
    "Pagination",
    "QueryEngine",
]
