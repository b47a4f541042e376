from __future__ import annotations

import re
from typing import Any, Optional

# Watch form matches on any host; short links only under the youtu.be host.
YOUTUBE_URL_PATTERN = re.compile(
    r'(?:/watch\?v=|(?:^|[/.])youtu\.be/)([^&\n?#]+)'
)

THUMBNAIL_TEMPLATE = "https://img.youtube.com/vi/{video_id}/hqdefault.jpg"
FALLBACK_THUMBNAIL_TEMPLATE = "https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"
NO_THUMBNAIL_URL = "https://i.ytimg.com/img/no_thumbnail.jpg"

EMBED_TEMPLATE = "https://www.youtube.com/embed/{video_id}?autoplay=1&controls=1&rel=0"
WATCH_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"

# Thumbnail/embed CDN hostnames referenced by the URLs above (single source of truth)
THUMB_ALLOWED_HOSTS = frozenset({"img.youtube.com", "i.ytimg.com"})
EMBED_HOST = "www.youtube.com"


def extract_video_id(url: Any) -> Optional[str]:
    """Extract a YouTube video ID from a watch URL or a youtu.be short link.

    Returns None for anything else, including None and non-string input.
    """
    if not isinstance(url, str) or not url:
        return None
    match = YOUTUBE_URL_PATTERN.search(url)
    if match:
        return match.group(1)
    return None


def thumbnail_url(video_id: str) -> str:
    return THUMBNAIL_TEMPLATE.format(video_id=video_id)


def thumbnail_candidates(declared: Optional[str], video_id: Optional[str]) -> tuple[str, ...]:
    """Ordered thumbnail URLs for a renderer to try, best first.

    declared thumbnail > derived hqdefault > ytimg mirror. Falls back to the
    no-thumbnail placeholder when there is neither a declared URL nor an ID.
    """
    candidates: list[str] = []
    if declared:
        candidates.append(declared)
    if video_id:
        candidates.append(thumbnail_url(video_id))
        candidates.append(FALLBACK_THUMBNAIL_TEMPLATE.format(video_id=video_id))
    if not candidates:
        candidates.append(NO_THUMBNAIL_URL)
    # de-dup, keep order
    return tuple(dict.fromkeys(candidates))


def embed_url(video_id: str) -> str:
    """Player URL: autoplay on, controls on, related videos suppressed."""
    return EMBED_TEMPLATE.format(video_id=video_id)


def watch_url(video_id: str) -> str:
    """Canonical share link for a video."""
    return WATCH_TEMPLATE.format(video_id=video_id)
