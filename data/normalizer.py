"""Raw record -> CatalogEntry normalization.

Each record is validated on its own; a bad record is skipped and reported
instead of aborting the whole batch.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any, Optional

from pydantic import ValidationError

from data.models import CatalogEntry, NormalizeResult, RawRecord, SkippedRecord
from youtube.extractor import extract_video_id, thumbnail_candidates

logger = logging.getLogger(__name__)

UNKNOWN_DURATION = "N/A"

# Filler range for records without a usable view count: [low, high)
VIEWS_FILLER_RANGE = (50_000, 1_050_000)

# Not sourced from record data: every entry gets the same uploader and badge.
UNSOURCED_UPLOADER = "AcrossMedia"
UNSOURCED_VERIFIED = True


class RecordValidationError(ValueError):
    """A raw record is missing required fields or carries unusable values."""

    def __init__(self, reason: str, record_id: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.record_id = record_id


def parse_views(value: Any) -> Optional[int]:
    """Parse a raw view count. Returns None when it is absent or unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value >= 0 else None
    try:
        n = int(str(value).strip())
    except ValueError:
        return None
    return n if n >= 0 else None


def parse_date(timestamp: str) -> date:
    """Calendar date from the date portion of an ISO-8601 timestamp.

    No timezone conversion: "2024-03-01T23:30:00-05:00" is 2024-03-01.
    """
    day = timestamp.strip().split("T", 1)[0].split(" ", 1)[0]
    try:
        return date.fromisoformat(day)
    except ValueError:
        raise RecordValidationError(f"invalid createdAt {timestamp!r}") from None


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
    return f"{loc}: {err.get('msg', 'invalid')}"


class Normalizer:
    """Builds CatalogEntry values from raw source records.

    `fill_missing_views` keeps the legacy behaviour of inventing a view count
    for records without one; the entry is flagged with `views_estimated`
    either way. Pass a seeded `rng` for reproducible filler.
    """

    def __init__(self, fill_missing_views: bool = True,
                 uploader: str = UNSOURCED_UPLOADER,
                 rng: Optional[random.Random] = None):
        self.fill_missing_views = fill_missing_views
        self.uploader = uploader
        self.rng = rng or random.Random()

    def _filler_views(self) -> int:
        if not self.fill_missing_views:
            return 0
        low, high = VIEWS_FILLER_RANGE
        return self.rng.randrange(low, high)

    def normalize_record(self, raw: Mapping[str, Any]) -> CatalogEntry:
        """Normalize one record. Raises RecordValidationError if unusable."""
        if not isinstance(raw, Mapping):
            raise RecordValidationError(f"expected an object, got {type(raw).__name__}")
        try:
            record = RawRecord.model_validate(dict(raw))
        except ValidationError as e:
            record_id = raw.get("id") or raw.get("_id") or ""
            raise RecordValidationError(_first_error(e), record_id=str(record_id)) from None

        try:
            created = parse_date(record.created_at)
        except RecordValidationError as e:
            e.record_id = record.id
            raise

        views = parse_views(record.views)
        estimated = views is None
        if estimated:
            views = self._filler_views()

        video_id = extract_video_id(record.source_url)
        thumbs = thumbnail_candidates(record.thumbnail, video_id)

        return CatalogEntry(
            id=record.id,
            title=record.title,
            category=record.category,
            date=created,
            views=views,
            uploader=self.uploader,
            duration=record.duration or UNKNOWN_DURATION,
            thumbnail_url=thumbs[0],
            verified=UNSOURCED_VERIFIED,
            description=record.description,
            source_url=record.source_url,
            video_id=video_id,
            thumbnail_candidates=thumbs,
            views_estimated=estimated,
        )

    def normalize(self, raws: Iterable[Any]) -> NormalizeResult:
        """Normalize a batch, preserving order and skipping invalid records."""
        entries: list[CatalogEntry] = []
        skipped: list[SkippedRecord] = []
        seen_ids: set[str] = set()
        for index, raw in enumerate(raws):
            try:
                entry = self.normalize_record(raw)
                if entry.id in seen_ids:
                    raise RecordValidationError(f"duplicate id {entry.id!r}", record_id=entry.id)
            except RecordValidationError as e:
                logger.warning("Skipping catalog record #%d (%s): %s",
                               index, e.record_id or "no id", e.reason)
                skipped.append(SkippedRecord(index=index, record_id=e.record_id, reason=e.reason))
                continue
            seen_ids.add(entry.id)
            entries.append(entry)

        estimated = sum(1 for e in entries if e.views_estimated)
        if estimated:
            logger.info("%d of %d catalog entries have no view count (views estimated)",
                        estimated, len(entries))
        return NormalizeResult(entries=tuple(entries), skipped=tuple(skipped))
