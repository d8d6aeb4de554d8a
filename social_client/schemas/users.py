"""Pydantic schemas for user resources returned by the service."""
from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ServerModel(BaseModel):
    """Base for payloads emitted by the service (camelCase keys, Mongo-style ``_id``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class UserSummary(ServerModel):
    """Public identity of a user as returned by auth and user endpoints."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    username: str
    email: str | None = None
    created_at: datetime | None = None


class CandidateUser(ServerModel):
    """A user suggested by the mention autocomplete search."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    username: str
    email: str | None = None
