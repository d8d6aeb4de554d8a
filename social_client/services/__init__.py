"""Convenience exports for service layer."""
from .auth_session import AuthResult, AuthSession
from .call_state import CallState
from .debounce import Debouncer
from .mention_input import MentionInput, MentionQuery, TextTooLongError, extract_mention_query
from .mentions import extract_mentions, mentions_user, render_mentions
from .pagination import PageState, PaginatedCollection

__all__ = [
    "AuthResult",
    "AuthSession",
    "CallState",
    "Debouncer",
    "MentionInput",
    "MentionQuery",
    "TextTooLongError",
    "extract_mention_query",
    "extract_mentions",
    "mentions_user",
    "render_mentions",
    "PageState",
    "PaginatedCollection",
]
