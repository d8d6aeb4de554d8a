"""Persisted storage for the bearer credential token."""
from __future__ import annotations

import json
import logging
import threading
import time
from pathlib import Path
from typing import Any, Protocol

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

_TOKEN_KEY = "token"


def _unverified_claims(token: str) -> dict[str, Any] | None:
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    return claims if isinstance(claims, dict) else None


def token_expiry(token: str | None) -> float | None:
    """Return the ``exp`` claim of ``token`` as epoch seconds, when it can be decoded."""

    if not token:
        return None
    claims = _unverified_claims(token)
    if not claims:
        return None
    try:
        return float(claims["exp"])
    except (KeyError, TypeError, ValueError):
        return None


def is_token_valid(token: str | None, *, now: float | None = None) -> bool:
    """Cheap local check that ``token`` is a JWT whose ``exp`` lies in the future.

    The signature is not verified; the server stays authoritative.
    """

    expiry = token_expiry(token)
    if expiry is None:
        return False
    current = time.time() if now is None else now
    return expiry > current


def is_token_expired(token: str | None, *, now: float | None = None) -> bool:
    """True only when ``token`` decodes and carries an ``exp`` already in the past."""

    expiry = token_expiry(token)
    if expiry is None:
        return False
    current = time.time() if now is None else now
    return expiry <= current


class TokenStore(Protocol):
    def get_token(self) -> str | None:
        """Return the persisted token, if any."""
        ...

    def set_token(self, token: str) -> None:
        """Persist ``token``, replacing any previous value."""
        ...

    def remove_token(self) -> None:
        """Forget the persisted token. Must be safe to call repeatedly."""
        ...


class MemoryTokenStore(TokenStore):
    """Process-local token storage, mainly for tests and short-lived scripts."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def remove_token(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """Stores the token as ``{"token": "..."}`` in a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get_token(self) -> str | None:
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            logger.warning("Token store unreadable | path=%s", self._path)
            return None
        if not isinstance(data, dict):
            return None
        token = str(data.get(_TOKEN_KEY) or "").strip()
        return token or None

    def set_token(self, token: str) -> None:
        value = (token or "").strip()
        if not value:
            raise ValueError("token must be a non-empty string")
        with self._lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
                with tmp_path.open("w", encoding="utf-8") as fh:
                    json.dump({_TOKEN_KEY: value}, fh)
                tmp_path.replace(self._path)
            except OSError:
                logger.exception("Failed to persist token | path=%s", self._path)

    def remove_token(self) -> None:
        with self._lock:
            try:
                self._path.unlink()
            except FileNotFoundError:
                return
            except OSError:
                logger.exception("Failed to remove token | path=%s", self._path)


__all__ = [
    "TokenStore",
    "MemoryTokenStore",
    "FileTokenStore",
    "token_expiry",
    "is_token_valid",
    "is_token_expired",
]
