from .posts import (
    AuthorRes,
    MessageRes,
    PostEnvelopeRes,
    PostRes,
    UserRes,
    UserStatsRes,
    to_post_res,
    to_stats_res,
    to_user_res,
)

__all__ = [
    "AuthorRes",
    "MessageRes",
    "PostEnvelopeRes",
    "PostRes",
    "UserRes",
    "UserStatsRes",
    "to_post_res",
    "to_stats_res",
    "to_user_res",
]
