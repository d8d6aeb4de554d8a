"""Process-wide wiring of the gateway, session and list loaders."""
from __future__ import annotations

import httpx

from .clients.api_gateway import ApiGateway
from .clients.resources import SocialApi
from .config import Settings, get_settings
from .schemas import Comment, Post, UserSummary
from .security.token_store import FileTokenStore, TokenStore
from .services.auth_session import AuthSession
from .services.mention_input import MentionInput
from .services.pagination import PaginatedCollection


class SocialClient:
    """Builds one gateway and one :class:`AuthSession` and hands out per-view helpers."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        token_store: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.token_store = token_store or FileTokenStore(self.settings.token_path)
        self.gateway = ApiGateway(
            self.token_store,
            base_url=self.settings.api_base_url,
            timeout=self.settings.request_timeout,
            transport=transport,
        )
        self.api = SocialApi(self.gateway)
        self.session = AuthSession(self.api.auth, self.token_store)

    async def __aenter__(self) -> "SocialClient":
        await self.session.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.gateway.aclose()

    def community_posts(self, limit: int | None = None) -> PaginatedCollection[Post]:
        return PaginatedCollection(lambda page: self.api.posts.list_posts(page, limit), name="community-posts")

    def user_posts(self, id_or_username: str, limit: int | None = None) -> PaginatedCollection[Post]:
        return PaginatedCollection(
            lambda page: self.api.users.user_posts(id_or_username, page, limit),
            name=f"user-posts:{id_or_username}",
        )

    def mentioned_posts(self, username: str, limit: int | None = None) -> PaginatedCollection[Post]:
        return PaginatedCollection(
            lambda page: self.api.posts.posts_by_mention(username, page, limit),
            name=f"mentions:{username}",
        )

    def users(self, limit: int | None = None) -> PaginatedCollection[UserSummary]:
        return PaginatedCollection(lambda page: self.api.users.list_users(page, limit), name="users")

    def comments(self, post_id: str, limit: int | None = None) -> PaginatedCollection[Comment]:
        return PaginatedCollection(
            lambda page: self.api.comments.comments_for_post(post_id, page, limit),
            name=f"comments:{post_id}",
        )

    def mention_input(self, *, max_length: int | None = None) -> MentionInput:
        return MentionInput(
            self.api.users,
            max_length=max_length,
            debounce=self.settings.mention_debounce_seconds,
            search_limit=self.settings.mention_search_limit,
        )


__all__ = ["SocialClient"]
