"""Helpers for ``@username`` tokens embedded in post and comment bodies."""
from __future__ import annotations

import re

from markupsafe import Markup, escape

_MENTION_RE = re.compile(r"@(\w+)")


def extract_mentions(text: str | None) -> list[str]:
    """Return the distinct usernames mentioned in ``text``, in order of first use."""

    seen: dict[str, None] = {}
    for name in _MENTION_RE.findall(text or ""):
        seen.setdefault(name, None)
    return list(seen)


def mentions_user(text: str | None, username: str) -> bool:
    wanted = (username or "").lower()
    return any(name.lower() == wanted for name in _MENTION_RE.findall(text or ""))


def render_mentions(text: str | None, href: str = "/user/{username}", css_class: str = "mention") -> Markup:
    """Escape ``text`` and turn every ``@username`` into a profile link."""

    escaped = str(escape(text or ""))

    def _link(match: re.Match[str]) -> str:
        username = match.group(1)
        url = escape(href.format(username=username))
        return f'<a href="{url}" class="{escape(css_class)}">@{username}</a>'

    return Markup(_MENTION_RE.sub(_link, escaped))


__all__ = ["extract_mentions", "mentions_user", "render_mentions"]
