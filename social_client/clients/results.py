"""Result and error types produced by the API gateway."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class ApiError(RuntimeError):
    """Base class for every classified gateway failure."""

    default_message = "Request failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        status: int = 0,
        path: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message = (message or "").strip() or self.default_message
        self.status = status
        self.path = path
        self.cause = cause
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status!r}, message={self.message!r}, path={self.path!r})"


class Unreachable(ApiError):
    """The service could not be reached (connection failure or timeout)."""

    default_message = "Unable to reach the server. Check your connection and try again."


class Unauthorized(ApiError):
    """HTTP 401: missing, invalid or expired credentials."""

    default_message = "Authentication required"


class Forbidden(ApiError):
    """HTTP 403: the caller is authenticated but not allowed to do this."""

    default_message = "You do not have permission to perform this action"


class ClientError(ApiError):
    """Any other 4xx response, optionally with per-field validation messages."""

    def __init__(
        self,
        message: str | None = None,
        *,
        status: int = 0,
        path: str | None = None,
        cause: BaseException | None = None,
        field_errors: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, status=status, path=path, cause=cause)
        self.field_errors: dict[str, str] = dict(field_errors or {})


class ServerError(ApiError):
    """5xx response from the service."""

    default_message = "The server encountered an error. Please try again later."


@dataclass(slots=True)
class ApiResult(Generic[T]):
    """Either a success payload or exactly one classified :class:`ApiError`."""

    value: T | None = None
    error: ApiError | None = None

    @classmethod
    def success(cls, value: T) -> "ApiResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ApiError) -> "ApiResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error is not None else None

    def unwrap(self) -> T:
        """Return the payload or raise the carried error."""

        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def map(self, func: Callable[[T], U]) -> "ApiResult[U]":
        if self.error is not None:
            return ApiResult(error=self.error)
        return ApiResult(value=func(self.value))  # type: ignore[arg-type]


def field_errors_from(payload: Any) -> dict[str, str]:
    """Fold ``errors: [{field, message}]`` into a ``{field: message}`` mapping."""

    if not isinstance(payload, dict):
        return {}
    raw = payload.get("errors")
    if not isinstance(raw, list):
        return {}
    result: dict[str, str] = {}
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        field = entry.get("field") or entry.get("path") or entry.get("param")
        message = entry.get("message") or entry.get("msg")
        if isinstance(field, str) and field and isinstance(message, str):
            result.setdefault(field, message)
    return result


__all__ = [
    "ApiError",
    "ApiResult",
    "ClientError",
    "Forbidden",
    "ServerError",
    "Unauthorized",
    "Unreachable",
    "field_errors_from",
]
