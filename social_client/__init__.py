"""Session and data-synchronization layer for the social blogging service."""
from .client import SocialClient
from .clients import ApiError, ApiGateway, ApiResult, SocialApi
from .services import AuthSession, MentionInput, PaginatedCollection

__all__ = [
    "SocialClient",
    "ApiError",
    "ApiGateway",
    "ApiResult",
    "SocialApi",
    "AuthSession",
    "MentionInput",
    "PaginatedCollection",
]

__version__ = "0.1.0"
