"""Incremental loader shared by every paginated list view."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, TypeVar

from ..clients.results import ApiResult
from ..schemas import Page

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")

PageFetcher = Callable[[int], Awaitable[ApiResult[Page[ItemT]]]]


@dataclass(slots=True)
class PageState(Generic[ItemT]):
    items: list[ItemT] = field(default_factory=list)
    page: int = 0
    has_next: bool = False
    loading: bool = False
    error: str | None = None


class PaginatedCollection(Generic[ItemT]):
    """Loads pages of ``ItemT`` through ``fetch`` and accumulates them in order.

    Loads never overlap: a ``load`` issued while another is running is
    dropped, not queued. Loading page 1 replaces the accumulated items; any
    other page is appended.
    """

    def __init__(self, fetch: PageFetcher[ItemT], *, name: str | None = None) -> None:
        self._fetch = fetch
        self._name = name or "collection"
        self._state: PageState[ItemT] = PageState()

    @property
    def state(self) -> PageState[ItemT]:
        return self._state

    @property
    def items(self) -> list[ItemT]:
        return self._state.items

    @property
    def page(self) -> int:
        return self._state.page

    @property
    def has_next(self) -> bool:
        return self._state.has_next

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    async def load(self, page: int = 1) -> bool:
        """Fetch ``page``; returns ``False`` when the call was dropped or failed."""

        if page < 1:
            raise ValueError("page must be >= 1")
        state = self._state
        if state.loading:
            logger.debug("Load dropped while busy | collection=%s page=%s", self._name, page)
            return False

        state.loading = True
        state.error = None
        try:
            result = await self._fetch(page)
        finally:
            state.loading = False

        if not result.ok or result.value is None:
            state.error = result.message or "Failed to load items"
            logger.warning("Page load failed | collection=%s page=%s error=%s", self._name, page, state.error)
            return False

        received = list(result.value.data)
        if page == 1:
            state.items = received
        else:
            state.items.extend(received)
        state.page = page
        state.has_next = bool(result.value.pagination.has_next)
        return True

    async def load_more(self) -> bool:
        if self._state.loading or not self._state.has_next:
            return False
        return await self.load(self._state.page + 1)

    async def refresh(self) -> bool:
        """Reload from the first page, discarding previously appended pages."""

        return await self.load(1)

    def prepend(self, item: ItemT) -> None:
        """Show a freshly created item at the top without refetching."""

        self._state.items.insert(0, item)

    def remove(self, predicate: Callable[[ItemT], bool]) -> int:
        before = len(self._state.items)
        self._state.items = [item for item in self._state.items if not predicate(item)]
        return before - len(self._state.items)


__all__ = ["PageFetcher", "PageState", "PaginatedCollection"]
