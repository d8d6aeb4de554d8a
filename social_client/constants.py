"""Project-wide constant values."""
from __future__ import annotations

from typing import Final

AUTH_SIGNUP = "/auth/signup"
AUTH_LOGIN = "/auth/login"
AUTH_ME = "/auth/me"

# 401s from these endpoints mean "bad credentials", not "stale token"
AUTH_ENDPOINTS: Final[tuple[str, ...]] = (AUTH_LOGIN, AUTH_SIGNUP)

POSTS = "/posts"
USERS = "/users"
USERS_SEARCH = "/users/search"
COMMENTS = "/comments"
HEALTH = "/health"


def post_path(post_id: str) -> str:
    return f"{POSTS}/{post_id}"


def post_like_path(post_id: str) -> str:
    return f"{POSTS}/{post_id}/like"


def post_repost_path(post_id: str) -> str:
    return f"{POSTS}/{post_id}/repost"


def post_mention_path(username: str) -> str:
    return f"{POSTS}/mention/{username}"


def user_path(user_id: str) -> str:
    return f"{USERS}/{user_id}"


def user_by_username_path(username: str) -> str:
    return f"{USERS}/username/{username}"


def user_posts_path(user_id: str) -> str:
    return f"{USERS}/{user_id}/posts"


def user_posts_by_username_path(username: str) -> str:
    return f"{USERS}/username/{username}/posts"


def comment_path(comment_id: str) -> str:
    return f"{COMMENTS}/{comment_id}"


def comments_for_post_path(post_id: str) -> str:
    return f"{COMMENTS}/post/{post_id}"


def comment_like_path(comment_id: str) -> str:
    return f"{COMMENTS}/{comment_id}/like"


PAGINATION_DEFAULTS: Final[dict[str, int]] = {
    "default_page": 1,
    "default_limit": 10,
    "max_limit": 100,
}

MENTION_SEARCH_LIMIT = 8
DEFAULT_MAX_TEXT_LENGTH = 500

__all__ = [
    "AUTH_SIGNUP",
    "AUTH_LOGIN",
    "AUTH_ME",
    "AUTH_ENDPOINTS",
    "POSTS",
    "USERS",
    "USERS_SEARCH",
    "COMMENTS",
    "HEALTH",
    "post_path",
    "post_like_path",
    "post_repost_path",
    "post_mention_path",
    "user_path",
    "user_by_username_path",
    "user_posts_path",
    "user_posts_by_username_path",
    "comment_path",
    "comments_for_post_path",
    "comment_like_path",
    "PAGINATION_DEFAULTS",
    "MENTION_SEARCH_LIMIT",
    "DEFAULT_MAX_TEXT_LENGTH",
]
