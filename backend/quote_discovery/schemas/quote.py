"""Corpus Schemas: validated Quote and Collection records enforced at ingestion.

Invariants:
    - Quote and Collection are frozen: the engine reads them, never mutates them
    - Missing author/is_liked coerce to ""/False so downstream code never sees None
    - Blank category coerces to None (uncategorized)
    - Naive created_at is interpreted as UTC
    - Collection.quote_ids keeps first-seen order with duplicates collapsed

Design Decisions:
    - camelCase aliases: corpus payloads arrive in the client's wire shape
    - coerce_numbers_to_str: numeric ids from callers are accepted as opaque strings
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for records exchanged with callers and storage (camelCase on the wire)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class Quote(WireModel):
    """A single quote owned by the caller."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    text: str
    author: str = ""
    category: str | None = None
    tags: tuple[str, ...] = ()
    is_liked: bool = False
    created_at: datetime | None = None
    source: str | None = None

    @field_validator("author", mode="before")
    @classmethod
    def default_author(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("is_liked", mode="before")
    @classmethod
    def default_is_liked(cls, v: object) -> object:
        return False if v is None else v

    @field_validator("category")
    @classmethod
    def blank_category_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v: object) -> object:
        return () if v is None else v

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class Collection(WireModel):
    """A named group of quote ids owned by the caller."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    quote_ids: tuple[str, ...] = ()

    @field_validator("quote_ids", mode="before")
    @classmethod
    def dedupe_quote_ids(cls, v: object) -> object:
        if v is None:
            return ()
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(dict.fromkeys(str(i) for i in v))
        return v
