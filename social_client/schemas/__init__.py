"""Convenience exports for schema layer."""
from .auth import AuthPayload, LoginRequest, SessionState, SignupRequest
from .health import HealthStatus
from .posts import Comment, CommentCreate, Page, Pagination, Post, PostWrite
from .users import CandidateUser, ServerModel, UserSummary

__all__ = [
    "AuthPayload",
    "LoginRequest",
    "SessionState",
    "SignupRequest",
    "HealthStatus",
    "Comment",
    "CommentCreate",
    "Page",
    "Pagination",
    "Post",
    "PostWrite",
    "CandidateUser",
    "ServerModel",
    "UserSummary",
]
