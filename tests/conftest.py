"""Shared fixtures: an in-process fake of the social service reached over ASGI."""
from __future__ import annotations

import os
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, Header, Request, Response, status
from fastapi.responses import JSONResponse
from jose import jwt

os.environ.setdefault("SOCIAL_API_BASE_URL", "http://testserver/api")

from social_client.clients import ApiGateway, SocialApi  # noqa: E402
from social_client.security import MemoryTokenStore  # noqa: E402

BASE_URL = "http://testserver/api"
TEST_SECRET = "test-secret-key"


def make_token(subject: str = "u1", *, expires_in: int = 3600) -> str:
    payload = {"sub": subject, "exp": int(time.time()) + expires_in}
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


def make_user(index: int, username: str | None = None) -> dict[str, Any]:
    name = username or f"user{index}"
    return {
        "_id": f"{index:024x}",
        "username": name,
        "email": f"{name}@example.test",
        "createdAt": "2024-01-01T00:00:00Z",
    }


def make_post(index: int, author: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "_id": f"post-{index}",
        "title": f"Post {index}",
        "content": f"Body of post {index}",
        "author": author or make_user(1, "alice"),
        "likes": [],
        "comments": [],
        "rePosts": [],
        "mentions": [],
        "createdAt": "2024-01-02T00:00:00Z",
        "updatedAt": "2024-01-02T00:00:00Z",
    }


@dataclass
class FakeBackend:
    """Mutable state behind the fake service; tests tweak it directly."""

    users: list[dict[str, Any]] = field(default_factory=lambda: [
        make_user(1, "alice"),
        make_user(2, "alan"),
        make_user(3, "bob"),
    ])
    posts: list[dict[str, Any]] = field(default_factory=lambda: [make_post(i) for i in range(1, 26)])
    password: str = "secret"
    valid_tokens: set[str] = field(default_factory=set)
    requests: list[dict[str, Any]] = field(default_factory=list)

    def issue_token(self, subject: str = "u1") -> str:
        token = make_token(subject)
        self.valid_tokens.add(token)
        return token

    def bearer(self, authorization: str | None) -> str | None:
        if not authorization or not authorization.lower().startswith("bearer "):
            return None
        return authorization.split(" ", 1)[1]


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


def _page(items: list[dict[str, Any]], page: int, limit: int) -> dict[str, Any]:
    start = (page - 1) * limit
    chunk = items[start:start + limit]
    total = len(items)
    total_pages = (total + limit - 1) // limit
    return {
        "success": True,
        "message": "ok",
        "data": chunk,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": total_pages,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        },
    }


def build_backend_app(backend: FakeBackend) -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def _record(request: Request, call_next):
        backend.requests.append({
            "method": request.method,
            "path": request.url.path,
            "query": dict(request.query_params),
            "headers": dict(request.headers),
        })
        return await call_next(request)

    @app.post("/api/auth/login")
    async def login(payload: dict[str, Any]):
        user = next((u for u in backend.users if u["email"] == payload.get("email")), None)
        if user is None or payload.get("password") != backend.password:
            return _error(status.HTTP_401_UNAUTHORIZED, "Invalid email or password")
        token = backend.issue_token(user["_id"])
        return {"success": True, "message": "Login successful", "token": token, "user": user}

    @app.post("/api/auth/signup")
    async def signup(payload: dict[str, Any]):
        if payload.get("password") != payload.get("confirmPassword"):
            return _error(
                status.HTTP_400_BAD_REQUEST,
                "Validation failed",
                errors=[{"field": "confirmPassword", "message": "Passwords do not match"}],
            )
        if any(u["username"] == payload.get("username") for u in backend.users):
            return _error(status.HTTP_400_BAD_REQUEST, "Username already taken")
        user = make_user(len(backend.users) + 1, payload["username"])
        user["email"] = payload["email"]
        backend.users.append(user)
        token = backend.issue_token(user["_id"])
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={"success": True, "message": "User created", "data": {"token": token, "user": user}},
        )

    @app.get("/api/auth/me")
    async def me(authorization: str | None = Header(default=None)):
        token = backend.bearer(authorization)
        if token not in backend.valid_tokens:
            return _error(status.HTTP_401_UNAUTHORIZED, "Invalid token")
        return {"success": True, "data": {"user": backend.users[0]}}

    @app.get("/api/posts")
    async def list_posts(page: int = 1, limit: int = 10, authorization: str | None = Header(default=None)):
        token = backend.bearer(authorization)
        if token is not None and token not in backend.valid_tokens:
            return _error(status.HTTP_401_UNAUTHORIZED, "Token expired")
        return _page(backend.posts, page, limit)

    @app.get("/api/posts/mention/{username}")
    async def posts_by_mention(username: str, page: int = 1, limit: int = 10):
        mentioned = [p for p in backend.posts if f"@{username}" in p["content"]]
        return _page(mentioned, page, limit)

    @app.get("/api/posts/{post_id}")
    async def get_post(post_id: str):
        post = next((p for p in backend.posts if p["_id"] == post_id), None)
        if post is None:
            return _error(status.HTTP_404_NOT_FOUND, "Post not found")
        return {"success": True, "data": {"post": post}}

    @app.post("/api/posts")
    async def create_post(payload: dict[str, Any], authorization: str | None = Header(default=None)):
        if backend.bearer(authorization) not in backend.valid_tokens:
            return _error(status.HTTP_401_UNAUTHORIZED, "Authentication required")
        post = make_post(len(backend.posts) + 1)
        post.update(title=payload["title"], content=payload["content"])
        backend.posts.insert(0, post)
        return JSONResponse(status_code=status.HTTP_201_CREATED, content={"success": True, "post": post})

    @app.delete("/api/posts/{post_id}")
    async def delete_post(post_id: str):
        if post_id == "locked":
            return _error(status.HTTP_403_FORBIDDEN, "Not your post")
        backend.posts = [p for p in backend.posts if p["_id"] != post_id]
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/api/posts/{post_id}/like")
    async def like_post(post_id: str):
        post = next(p for p in backend.posts if p["_id"] == post_id)
        post["likes"] = post["likes"] + ["u1"]
        return {"success": True, "message": "Post liked", "data": {"post": post}}

    @app.get("/api/users/search")
    async def search_users(q: str = "", limit: int = 10):
        matches = [u for u in backend.users if u["username"].startswith(q)]
        return {"success": True, "data": matches[:limit]}

    @app.get("/api/users")
    async def list_users(page: int = 1, limit: int = 10):
        return _page(backend.users, page, limit)

    @app.get("/api/users/username/{username}")
    async def get_user_by_username(username: str):
        user = next((u for u in backend.users if u["username"] == username), None)
        if user is None:
            return _error(status.HTTP_404_NOT_FOUND, "User not found")
        return {"success": True, "data": {"user": user}}

    @app.get("/api/users/{user_id}")
    async def get_user(user_id: str):
        user = next((u for u in backend.users if u["_id"] == user_id), None)
        if user is None:
            return _error(status.HTTP_404_NOT_FOUND, "User not found")
        return {"success": True, "user": user}

    @app.get("/api/comments/post/{post_id}")
    async def comments_for_post(post_id: str, page: int = 1, limit: int = 10):
        comments = [
            {"_id": f"c{i}", "content": f"comment {i}", "post": post_id, "author": backend.users[0]}
            for i in range(1, 4)
        ]
        return {"success": True, "data": {"data": comments[:limit], "pagination": {"page": page, "hasNext": False}}}

    @app.post("/api/comments")
    async def create_comment(payload: dict[str, Any]):
        comment = {"_id": "c-new", "content": payload["content"], "post": payload["postId"]}
        if payload.get("parentCommentId"):
            comment["parentComment"] = payload["parentCommentId"]
        return JSONResponse(status_code=status.HTTP_201_CREATED, content={"success": True, "data": {"comment": comment}})

    @app.get("/api/health")
    async def health():
        return {"success": True, "message": "Server is running", "timestamp": "2024-01-01T00:00:00Z", "uptime": 12.5}

    @app.get("/api/boom")
    async def boom():
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Maintenance in progress")

    return app


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def backend_transport(backend: FakeBackend) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=build_backend_app(backend))


@pytest.fixture
def token_store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest_asyncio.fixture
async def gateway(token_store: MemoryTokenStore, backend_transport: httpx.ASGITransport) -> AsyncIterator[ApiGateway]:
    async with ApiGateway(token_store, base_url=BASE_URL, transport=backend_transport) as gw:
        yield gw


@pytest.fixture
def api(gateway: ApiGateway) -> SocialApi:
    return SocialApi(gateway)
