"""Credential storage helpers."""
from .token_store import (
    FileTokenStore,
    MemoryTokenStore,
    TokenStore,
    is_token_expired,
    is_token_valid,
    token_expiry,
)

__all__ = [
    "FileTokenStore",
    "MemoryTokenStore",
    "TokenStore",
    "is_token_expired",
    "is_token_valid",
    "token_expiry",
]
