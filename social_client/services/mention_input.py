"""Text-editing engine behind the ``@mention`` autocomplete in comment composers."""
from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass

from ..clients.resources import UsersApi
from ..config import get_settings
from ..constants import DEFAULT_MAX_TEXT_LENGTH, MENTION_SEARCH_LIMIT
from ..schemas import CandidateUser
from .debounce import Debouncer

logger = logging.getLogger(__name__)

# ``\Z`` rather than ``$`` so a trailing newline closes the query
_ACTIVE_MENTION_RE = re.compile(r"@(\w*)\Z")


class TextTooLongError(ValueError):
    """Raised when an edit would push the text past the composer's limit."""

    def __init__(self, length: int, max_length: int) -> None:
        super().__init__(f"Text length {length} exceeds the limit of {max_length} characters")
        self.length = length
        self.max_length = max_length


@dataclass(frozen=True, slots=True)
class MentionQuery:
    raw_text: str
    caret_offset: int
    query_text: str
    anchor_offset: int


def extract_mention_query(text: str, caret_offset: int) -> MentionQuery | None:
    """Return the ``@word`` token that ends exactly at ``caret_offset``, if any."""

    caret = max(0, min(caret_offset, len(text)))
    match = _ACTIVE_MENTION_RE.search(text, 0, caret)
    if match is None:
        return None
    return MentionQuery(
        raw_text=text,
        caret_offset=caret,
        query_text=match.group(1),
        anchor_offset=match.start(),
    )


class MentionInput:
    """Tracks the composer text, detects the active mention and drives user search.

    Searches fire only after ``debounce`` seconds without further edits, and a
    response is applied only if no edit happened while it was in flight.
    """

    def __init__(
        self,
        users_api: UsersApi,
        *,
        max_length: int | None = None,
        debounce: float | None = None,
        search_limit: int | None = None,
    ) -> None:
        settings = get_settings()
        self._users_api = users_api
        self._max_length = max_length if max_length is not None else settings.comment_max_length or DEFAULT_MAX_TEXT_LENGTH
        self._search_limit = search_limit if search_limit is not None else settings.mention_search_limit or MENTION_SEARCH_LIMIT
        delay = debounce if debounce is not None else settings.mention_debounce_seconds
        self._debouncer = Debouncer(delay)

        self._text = ""
        self._caret = 0
        self._query: MentionQuery | None = None
        self._open = False
        self._candidates: list[CandidateUser] = []
        self._generation = 0
        self._inflight: int | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def text(self) -> str:
        return self._text

    @property
    def caret_offset(self) -> int:
        return self._caret

    @property
    def query(self) -> MentionQuery | None:
        return self._query

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def candidates(self) -> list[CandidateUser]:
        return list(self._candidates)

    @property
    def searching(self) -> bool:
        return self._inflight is not None

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def remaining_characters(self) -> int:
        return self._max_length - len(self._text)

    def _check_length(self, text: str) -> None:
        if len(text) > self._max_length:
            raise TextTooLongError(len(text), self._max_length)

    def on_text_change(self, new_text: str, caret_offset: int) -> MentionQuery | None:
        """Record an edit and reopen, update or close the mention query."""

        self._check_length(new_text)
        self._text = new_text
        self._caret = max(0, min(caret_offset, len(new_text)))
        self._generation += 1

        query = extract_mention_query(new_text, self._caret)
        if query is None:
            self._dismiss()
            return None

        self._query = query
        self._open = True
        if query.query_text:
            generation = self._generation
            self._debouncer.schedule(lambda: self._dispatch_search(query.query_text, generation))
        else:
            # Bare "@": show the surface, but there is nothing to search for yet
            self._debouncer.cancel()
            self._candidates = []
            self._inflight = None
        return query

    def _dismiss(self) -> None:
        self._debouncer.cancel()
        self._query = None
        self._open = False
        self._candidates = []
        self._inflight = None

    def _dispatch_search(self, query_text: str, generation: int) -> None:
        if generation != self._generation:
            return
        self._inflight = generation
        task = asyncio.get_running_loop().create_task(self._search(query_text, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _search(self, query_text: str, generation: int) -> None:
        try:
            result = await self._users_api.search_users(query_text, self._search_limit)
        except Exception:
            logger.exception("Error searching users | query=%s", query_text)
            result = None
        finally:
            if self._inflight == generation:
                self._inflight = None

        if generation != self._generation:
            logger.debug("Discarding stale mention results | query=%s", query_text)
            return
        if result is not None and result.ok:
            self._candidates = list(result.value or [])
            return
        if result is not None:
            logger.error("Error searching users | query=%s error=%r", query_text, result.error)
        self._candidates = []

    async def wait_for_search(self) -> None:
        """Wait until every search already dispatched has settled."""

        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def select_candidate(self, username: str) -> tuple[str, int]:
        """Replace the active ``@query`` with ``@username `` and return ``(text, caret)``."""

        query = self._query
        if query is None:
            raise ValueError("No active mention to complete")
        name = (username or "").strip().lstrip("@")
        if not name:
            raise ValueError("username must not be empty")

        insertion = f"@{name} "
        suffix = self._text[query.caret_offset:]
        # The inserted trailing space doubles as a separator already in the text
        if suffix.startswith(" "):
            suffix = suffix[1:]
        new_text = self._text[: query.anchor_offset] + insertion + suffix
        self._check_length(new_text)

        self._text = new_text
        self._caret = query.anchor_offset + len(insertion)
        self._generation += 1
        self._dismiss()
        return self._text, self._caret

    def reset(self) -> None:
        """Clear the composer, e.g. after the comment has been submitted."""

        self._generation += 1
        self._dismiss()
        self._text = ""
        self._caret = 0

    def close(self) -> None:
        self._generation += 1
        self._dismiss()
        for task in list(self._tasks):
            task.cancel()


__all__ = ["MentionInput", "MentionQuery", "TextTooLongError", "extract_mention_query"]
