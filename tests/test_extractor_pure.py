"""Tests for pure (no-network) functions in youtube/extractor.py."""

import pytest

from youtube.extractor import (
    extract_video_id,
    thumbnail_candidates,
    thumbnail_url,
    embed_url,
    watch_url,
    NO_THUMBNAIL_URL,
)


class TestExtractVideoId:
    @pytest.mark.parametrize("input_val, expected", [
        # Watch URLs
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("http://youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://platform.example/watch?v=abc123&t=5s", "abc123"),
        # Short links
        ("https://youtu.be/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("youtu.be/xyz?si=share", "xyz"),
        # Terminators
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=120", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?v=abc#t=30", "abc"),
        ("https://youtu.be/abc\nnext line", "abc"),
    ])
    def test_valid_extraction(self, input_val, expected):
        assert extract_video_id(input_val) == expected

    @pytest.mark.parametrize("input_val", [
        "",
        None,
        42,
        "not a url",
        "dQw4w9WgXcQ",  # bare IDs are not URLs
        "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        "https://vimeo.com/123456",
        "https://www.youtube.com/watch?v=",
        "https://youtu.be/",
        "https://notyoutu.be/abc123",
        "https://example.com/notyoutu.be/abc123",
    ])
    def test_no_identifier_returns_none(self, input_val):
        assert extract_video_id(input_val) is None


class TestThumbnailCandidates:
    def test_declared_first(self):
        result = thumbnail_candidates("https://cdn.example/t.jpg", "abc")
        assert result == (
            "https://cdn.example/t.jpg",
            "https://img.youtube.com/vi/abc/hqdefault.jpg",
            "https://i.ytimg.com/vi/abc/hqdefault.jpg",
        )

    def test_derived_when_not_declared(self):
        assert thumbnail_candidates(None, "abc")[0] == thumbnail_url("abc")
        assert thumbnail_candidates("", "abc")[0] == thumbnail_url("abc")

    def test_declared_without_id(self):
        assert thumbnail_candidates("https://cdn.example/t.jpg", None) == ("https://cdn.example/t.jpg",)

    def test_placeholder_when_nothing_known(self):
        assert thumbnail_candidates(None, None) == (NO_THUMBNAIL_URL,)

    def test_no_duplicates(self):
        result = thumbnail_candidates(thumbnail_url("abc"), "abc")
        assert len(result) == len(set(result)) == 2


class TestUrlBuilders:
    def test_embed_url(self):
        assert embed_url("abc") == "https://www.youtube.com/embed/abc?autoplay=1&controls=1&rel=0"

    def test_watch_url(self):
        assert watch_url("abc") == "https://www.youtube.com/watch?v=abc"
