"""HTTP access to the social service."""
from .api_gateway import ApiGateway, classify_status, is_auth_endpoint, normalize_envelope
from .resources import AuthApi, CommentsApi, HealthApi, PostsApi, SocialApi, UsersApi, is_object_id
from .results import (
    ApiError,
    ApiResult,
    ClientError,
    Forbidden,
    ServerError,
    Unauthorized,
    Unreachable,
)

__all__ = [
    "ApiGateway",
    "classify_status",
    "is_auth_endpoint",
    "normalize_envelope",
    "AuthApi",
    "CommentsApi",
    "HealthApi",
    "PostsApi",
    "SocialApi",
    "UsersApi",
    "is_object_id",
    "ApiError",
    "ApiResult",
    "ClientError",
    "Forbidden",
    "ServerError",
    "Unauthorized",
    "Unreachable",
]
