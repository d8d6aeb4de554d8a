"""Typed wrappers around the service endpoints."""
from __future__ import annotations

import logging
import re
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import TypeAdapter, ValidationError

from .. import constants
from ..config import get_settings
from ..schemas import (
    AuthPayload,
    CandidateUser,
    Comment,
    CommentCreate,
    HealthStatus,
    LoginRequest,
    Page,
    Post,
    PostWrite,
    SignupRequest,
    UserSummary,
)
from .api_gateway import ApiGateway
from .results import ApiResult, ClientError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_OBJECT_ID_RE = re.compile(r"^[a-f\d]{24}$", re.IGNORECASE)

_post_adapter = TypeAdapter(Post)
_comment_adapter = TypeAdapter(Comment)
_user_adapter = TypeAdapter(UserSummary)
_post_page_adapter = TypeAdapter(Page[Post])
_user_page_adapter = TypeAdapter(Page[UserSummary])
_comment_page_adapter = TypeAdapter(Page[Comment])
_candidates_adapter = TypeAdapter(list[CandidateUser])
_auth_adapter = TypeAdapter(AuthPayload)
_health_adapter = TypeAdapter(HealthStatus)


def _validated(result: ApiResult[Any], adapter: TypeAdapter[T]) -> ApiResult[T]:
    if not result.ok:
        return ApiResult.failure(result.error)  # type: ignore[arg-type]
    try:
        return ApiResult.success(adapter.validate_python(result.value))
    except ValidationError as exc:
        logger.warning("Response failed validation | type=%s errors=%s", adapter, exc.error_count())
        return ApiResult.failure(ClientError("Invalid response from server", cause=exc))


def _rejected(exc: ValidationError) -> ApiResult[Any]:
    """Turn a locally invalid request payload into a failed result."""

    field_errors = {
        ".".join(str(part) for part in error["loc"]): error["msg"]
        for error in exc.errors()
    }
    return ApiResult.failure(ClientError("Invalid request", cause=exc, field_errors=field_errors))


def _unwrap_key(result: ApiResult[Any], key: str) -> ApiResult[Any]:
    # Comment endpoints wrap their payload as ``{comment: {...}}``
    if result.ok and isinstance(result.value, dict) and isinstance(result.value.get(key), dict):
        return ApiResult.success(result.value[key])
    return result


def _page_params(page: int, limit: int | None) -> dict[str, int]:
    settings = get_settings()
    size = settings.default_page_limit if limit is None else limit
    size = max(1, min(size, settings.max_page_limit))
    return {"page": max(1, page), "limit": size}


def is_object_id(value: str) -> bool:
    return bool(_OBJECT_ID_RE.match(value or ""))


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class _Resource:
    def __init__(self, gateway: ApiGateway) -> None:
        self._gateway = gateway


class AuthApi(_Resource):
    """Login, signup and identity lookups."""

    @staticmethod
    def _auth_result(result: ApiResult[Any], default_message: str) -> ApiResult[AuthPayload]:
        if not result.ok:
            return ApiResult.failure(result.error)  # type: ignore[arg-type]
        envelope = result.value
        if not isinstance(envelope, dict):
            return ApiResult.failure(ClientError(default_message))
        if envelope.get("success") is False:
            return ApiResult.failure(ClientError(envelope.get("message") or default_message))
        # Token and user sit either beside ``success`` or inside ``data``
        source = envelope
        if "token" not in envelope and isinstance(envelope.get("data"), dict):
            source = envelope["data"]
        return _validated(ApiResult.success(source), _auth_adapter)

    async def login(self, email: str, password: str) -> ApiResult[AuthPayload]:
        body = LoginRequest(email=email, password=password).model_dump(by_alias=True)
        result = await self._gateway.post(constants.AUTH_LOGIN, body, normalize=False)
        return self._auth_result(result, "Login failed")

    async def signup(self, username: str, email: str, password: str) -> ApiResult[AuthPayload]:
        body = SignupRequest(
            username=username,
            email=email,
            password=password,
            confirm_password=password,
        ).model_dump(by_alias=True)
        result = await self._gateway.post(constants.AUTH_SIGNUP, body, normalize=False)
        return self._auth_result(result, "Signup failed")

    async def me(self) -> ApiResult[UserSummary]:
        return _validated(await self._gateway.get(constants.AUTH_ME), _user_adapter)


class PostsApi(_Resource):
    async def list_posts(self, page: int = 1, limit: int | None = None) -> ApiResult[Page[Post]]:
        result = await self._gateway.get(constants.POSTS, params=_page_params(page, limit))
        return _validated(result, _post_page_adapter)

    async def get_post(self, post_id: str) -> ApiResult[Post]:
        return _validated(await self._gateway.get(constants.post_path(_segment(post_id))), _post_adapter)

    async def create_post(self, title: str, content: str) -> ApiResult[Post]:
        try:
            body = PostWrite(title=title, content=content).model_dump(by_alias=True)
        except ValidationError as exc:
            return _rejected(exc)
        return _validated(await self._gateway.post(constants.POSTS, body), _post_adapter)

    async def update_post(self, post_id: str, title: str, content: str) -> ApiResult[Post]:
        try:
            body = PostWrite(title=title, content=content).model_dump(by_alias=True)
        except ValidationError as exc:
            return _rejected(exc)
        result = await self._gateway.put(constants.post_path(_segment(post_id)), body)
        return _validated(result, _post_adapter)

    async def delete_post(self, post_id: str) -> ApiResult[None]:
        result = await self._gateway.delete(constants.post_path(_segment(post_id)))
        return result.map(lambda _: None)

    async def toggle_like(self, post_id: str) -> ApiResult[Post]:
        result = await self._gateway.post(constants.post_like_path(_segment(post_id)))
        return _validated(result, _post_adapter)

    async def repost(self, post_id: str) -> ApiResult[Post]:
        result = await self._gateway.post(constants.post_repost_path(_segment(post_id)))
        return _validated(result, _post_adapter)

    async def posts_by_mention(self, username: str, page: int = 1, limit: int | None = None) -> ApiResult[Page[Post]]:
        result = await self._gateway.get(
            constants.post_mention_path(_segment(username)),
            params=_page_params(page, limit),
        )
        return _validated(result, _post_page_adapter)


class UsersApi(_Resource):
    async def list_users(self, page: int = 1, limit: int | None = None) -> ApiResult[Page[UserSummary]]:
        result = await self._gateway.get(constants.USERS, params=_page_params(page, limit))
        return _validated(result, _user_page_adapter)

    async def get_user(self, id_or_username: str) -> ApiResult[UserSummary]:
        """Fetch a profile by object id, or by username for anything else."""

        if is_object_id(id_or_username):
            path = constants.user_path(id_or_username)
        else:
            path = constants.user_by_username_path(_segment(id_or_username))
        return _validated(await self._gateway.get(path), _user_adapter)

    async def user_posts(self, id_or_username: str, page: int = 1, limit: int | None = None) -> ApiResult[Page[Post]]:
        if is_object_id(id_or_username):
            path = constants.user_posts_path(id_or_username)
        else:
            path = constants.user_posts_by_username_path(_segment(id_or_username))
        result = await self._gateway.get(path, params=_page_params(page, limit))
        return _validated(result, _post_page_adapter)

    async def search_users(self, query: str, limit: int = constants.MENTION_SEARCH_LIMIT) -> ApiResult[list[CandidateUser]]:
        result = await self._gateway.get(constants.USERS_SEARCH, params={"q": query, "limit": limit})
        # Some deployments answer with a page instead of a bare list
        if result.ok and isinstance(result.value, dict) and isinstance(result.value.get("data"), list):
            result = ApiResult.success(result.value["data"])
        return _validated(result, _candidates_adapter)


class CommentsApi(_Resource):
    async def create_comment(self, post_id: str, content: str, parent_comment_id: str | None = None) -> ApiResult[Comment]:
        try:
            body = CommentCreate(
                post_id=post_id,
                content=content,
                parent_comment_id=parent_comment_id,
            ).model_dump(by_alias=True, exclude_none=True)
        except ValidationError as exc:
            return _rejected(exc)
        result = await self._gateway.post(constants.COMMENTS, body)
        return _validated(_unwrap_key(result, "comment"), _comment_adapter)

    async def comments_for_post(self, post_id: str, page: int = 1, limit: int | None = None) -> ApiResult[Page[Comment]]:
        result = await self._gateway.get(
            constants.comments_for_post_path(_segment(post_id)),
            params=_page_params(page, limit),
        )
        return _validated(result, _comment_page_adapter)

    async def toggle_like(self, comment_id: str) -> ApiResult[Comment]:
        result = await self._gateway.post(constants.comment_like_path(_segment(comment_id)))
        return _validated(_unwrap_key(result, "comment"), _comment_adapter)

    async def delete_comment(self, comment_id: str) -> ApiResult[None]:
        result = await self._gateway.delete(constants.comment_path(_segment(comment_id)))
        return result.map(lambda _: None)


class HealthApi(_Resource):
    async def check(self) -> ApiResult[HealthStatus]:
        result = await self._gateway.get(constants.HEALTH, normalize=False)
        return _validated(result, _health_adapter)


class SocialApi:
    """Bundle of every resource client sharing one gateway."""

    def __init__(self, gateway: ApiGateway) -> None:
        self.gateway = gateway
        self.auth = AuthApi(gateway)
        self.posts = PostsApi(gateway)
        self.users = UsersApi(gateway)
        self.comments = CommentsApi(gateway)
        self.health = HealthApi(gateway)


__all__ = [
    "AuthApi",
    "CommentsApi",
    "HealthApi",
    "PostsApi",
    "SocialApi",
    "UsersApi",
    "is_object_id",
]
