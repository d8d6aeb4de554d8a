"""Tracks the progress of a single gateway call for a view."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Generic, TypeVar

from ..clients.results import ApiResult

T = TypeVar("T")


@dataclass(slots=True)
class CallState(Generic[T]):
    data: T | None = None
    loading: bool = False
    error: str | None = None

    async def execute(self, call: Awaitable[ApiResult[T]]) -> ApiResult[T]:
        self.loading = True
        self.error = None
        try:
            result = await call
        finally:
            self.loading = False
        if result.ok:
            self.data = result.value
        else:
            self.data = None
            self.error = result.message or "An error occurred"
        return result

    def reset(self) -> None:
        self.data = None
        self.loading = False
        self.error = None


__all__ = ["CallState"]
