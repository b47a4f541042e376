"""Shared pytest fixtures for Showreel tests."""

import random
from datetime import date

import pytest

from config import Config, WebConfig, CatalogConfig
from data.models import CatalogEntry
from data.normalizer import Normalizer


def make_entry(entry_id: str, title: str = "", category: str = "Corporate",
               day: str = "2024-01-01", views: int = 1000,
               uploader: str = "AcrossMedia", video_id: str | None = None) -> CatalogEntry:
    """CatalogEntry with sensible defaults for query/formatter tests."""
    vid = video_id if video_id is not None else f"vid{entry_id}"
    return CatalogEntry(
        id=entry_id,
        title=title or f"Video {entry_id}",
        category=category,
        date=date.fromisoformat(day),
        views=views,
        uploader=uploader,
        duration="3:00",
        thumbnail_url=f"https://img.youtube.com/vi/{vid}/hqdefault.jpg",
        verified=True,
        description="",
        source_url=f"https://www.youtube.com/watch?v={vid}" if vid else "",
        video_id=vid or None,
        thumbnail_candidates=(f"https://img.youtube.com/vi/{vid}/hqdefault.jpg",),
    )


def make_raw(record_id: str, title: str = "", category: str = "Corporate",
             created_at: str = "2024-01-01T10:00:00.000Z", views="1000",
             url: str = "", **extra) -> dict:
    """Raw source record in the upstream shape (_id, url, createdAt)."""
    raw = {
        "_id": record_id,
        "title": title or f"Video {record_id}",
        "url": url or f"https://www.youtube.com/watch?v=yt{record_id}",
        "description": f"About {record_id}",
        "keywords": ["brand"],
        "category": category,
        "views": views,
        "createdAt": created_at,
        "status": "published",
    }
    raw.update(extra)
    return raw


@pytest.fixture
def normalizer():
    """Normalizer with a seeded RNG so filler views are reproducible."""
    return Normalizer(rng=random.Random(1234))


@pytest.fixture
def raw_records():
    return [
        make_raw("a1", title="Brand Film", category="Branding",
                 created_at="2024-03-01T09:00:00Z", views="2500000"),
        make_raw("a2", title="Annual Report", category="Corporate",
                 created_at="2024-01-15T12:00:00Z", views="1500"),
        make_raw("a3", title="Red Carpet", category="Celebrity",
                 created_at="2024-02-10T18:30:00Z", views="500",
                 url="https://youtu.be/shortID9"),
    ]


@pytest.fixture
def entries():
    """25 entries across categories with distinct dates and views."""
    cats = ["Corporate", "Branding", "Celebrity", "Entertainment"]
    return [
        make_entry(
            f"e{i:02d}",
            title=f"Clip {i:02d}",
            category=cats[i % len(cats)],
            day=f"2024-01-{i + 1:02d}",
            views=(i * 7919) % 100_000,
        )
        for i in range(25)
    ]


@pytest.fixture
def sample_config():
    """Minimal Config with safe defaults for testing."""
    return Config(
        web=WebConfig(host="127.0.0.1", port=9999, session_secret="test-secret"),
        catalog=CatalogConfig(source_url="http://catalog.test/api/videos", fetch_timeout=5),
    )


@pytest.fixture
def config_yaml(tmp_path):
    """Write a minimal config.yaml and return its path."""
    cfg = tmp_path / "config.yaml"
    cfg.write_text("""\
web:
  host: 0.0.0.0
  port: 8080
  session_secret: "s3cret"
catalog:
  source_url: "http://videos.internal:3001/api/videos"
  fetch_timeout: 15
  page_size: 24
  fill_missing_views: false
  uploader: "Studio"
""")
    return cfg
