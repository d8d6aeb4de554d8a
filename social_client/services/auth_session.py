"""Client-side authentication session lifecycle."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from ..clients.resources import AuthApi
from ..clients.results import ApiResult
from ..schemas import AuthPayload, SessionState, UserSummary
from ..security.token_store import TokenStore, is_token_expired

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionState], None]


@dataclass(slots=True)
class AuthResult:
    """Outcome of a login or signup attempt; failures carry a user-facing message."""

    success: bool
    error: str | None = None
    user: UserSummary | None = None


class AuthSession:
    """Owns the signed-in identity and the persisted credential token.

    One instance is built at process start and handed to every consumer that
    needs to know who is signed in. ``login``, ``signup`` and ``initialize`` are
    not serialized against each other; when two overlap, whichever resolves
    last determines the final state.
    """

    def __init__(self, auth_api: AuthApi, token_store: TokenStore) -> None:
        self._auth_api = auth_api
        self._token_store = token_store
        self._state = SessionState(is_loading=True)
        self._listeners: list[SessionListener] = []
        self._initialized = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user(self) -> UserSummary | None:
        return self._state.user

    @property
    def token(self) -> str | None:
        return self._state.token

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for state changes and return an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _set_state(self, **changes: Any) -> None:
        values = {
            "user": self._state.user,
            "token": self._state.token,
            "is_loading": self._state.is_loading,
        }
        values.update(changes)
        values["is_authenticated"] = values["user"] is not None and values["token"] is not None
        self._state = SessionState(**values)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Session listener failed")

    async def initialize(self) -> None:
        """Restore the session from the persisted token, if one exists."""

        if self._initialized:
            logger.debug("AuthSession.initialize called more than once; ignoring")
            return
        self._initialized = True

        stored = self._token_store.get_token()
        if stored:
            if is_token_expired(stored):
                logger.info("Stored token expired; discarding without a round trip")
                self._discard_credentials()
            else:
                self._set_state(token=stored)
                result = await self._auth_api.me()
                if result.ok:
                    self._set_state(user=result.value, token=stored)
                else:
                    logger.error("Token validation failed | error=%r", result.error)
                    self._discard_credentials()

        self._set_state(is_loading=False)

    def _discard_credentials(self) -> None:
        self._token_store.remove_token()
        self._set_state(user=None, token=None)

    def _apply(self, result: ApiResult[AuthPayload], default_message: str) -> AuthResult:
        if not result.ok or result.value is None:
            message = result.message or default_message
            logger.info("Authentication failed | message=%s", message)
            return AuthResult(success=False, error=message)
        payload = result.value
        self._token_store.set_token(payload.token)
        self._set_state(user=payload.user, token=payload.token)
        return AuthResult(success=True, user=payload.user)

    async def login(self, email: str, password: str) -> AuthResult:
        result = await self._auth_api.login(email, password)
        return self._apply(result, "Login failed")

    async def signup(self, username: str, email: str, password: str) -> AuthResult:
        result = await self._auth_api.signup(username, email, password)
        return self._apply(result, "Signup failed")

    def logout(self) -> None:
        """Forget the current identity locally. Safe to call repeatedly."""

        self._discard_credentials()

    def update_user(self, **partial: Any) -> UserSummary | None:
        """Merge ``partial`` fields into the signed-in user without a round trip."""

        current = self._state.user
        if current is None:
            return None
        merged = UserSummary.model_validate({**current.model_dump(), **partial})
        self._set_state(user=merged)
        return merged


__all__ = ["AuthResult", "AuthSession", "SessionListener"]
