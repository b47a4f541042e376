"""Catalog data model: untrusted raw records and normalized entries."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RawRecord(BaseModel):
    """A record as received from the catalog source.

    Accepts both the documented field names and the upstream spellings
    (`_id`, `url`). Unknown fields are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    title: str
    source_url: str = Field("", validation_alias=AliasChoices("sourceUrl", "url", "source_url"))
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    category: str = ""
    duration: Optional[str] = None
    views: Any = None
    created_at: str = Field(validation_alias=AliasChoices("createdAt", "created_at"))
    status: str = ""
    thumbnail: Optional[str] = None

    @field_validator("id", "duration", mode="before")
    @classmethod
    def _number_to_str(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("id", "title", "created_at")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("source_url", "description", "category", "status", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("keywords", mode="before")
    @classmethod
    def _keywords(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [str(k) for k in value if k is not None]
        return value


@dataclass(frozen=True)
class CatalogEntry:
    """Normalized, display-ready catalog record. Never mutated after creation."""
    id: str
    title: str
    category: str
    date: date
    views: int
    uploader: str
    duration: str
    thumbnail_url: str
    verified: bool
    description: str
    source_url: str
    video_id: Optional[str] = None
    thumbnail_candidates: tuple[str, ...] = ()
    views_estimated: bool = False  # True when views is filler, not source data
    uploader_sourced: bool = False  # uploader/verified are placeholders today

    def to_dict(self) -> dict:
        d = asdict(self)
        d["date"] = self.date.isoformat()
        d["thumbnail_candidates"] = list(self.thumbnail_candidates)
        return d


@dataclass(frozen=True)
class SkippedRecord:
    """A raw record rejected during normalization."""
    index: int
    record_id: str
    reason: str


@dataclass(frozen=True)
class NormalizeResult:
    entries: tuple[CatalogEntry, ...] = ()
    skipped: tuple[SkippedRecord, ...] = field(default_factory=tuple)
