"""Shared constants and helper functions used across web routers."""

import time
from typing import Optional

from fastapi import Request

from catalog.query import CATEGORIES, Page, QueryState, SortOrder, category_counts
from catalog.ui_state import (
    CopyNotice, MenuState, PlaybackState, Playing,
    menu_from_dict, playback_from_dict,
)
from data.catalog_session import CatalogSession
from data.models import CatalogEntry
from utils import format_views, page_window

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_EMPTY_MESSAGES = {
    "loading": "Loading videos…",
    "fetch_failed": "Couldn't load the video collection right now. Please try again later.",
    "empty_catalog": "There are no videos in the collection yet.",
    "no_results": "No videos found. Try adjusting your search terms or filters.",
}

_SESSION_QUERY = "query"
_SESSION_MENU = "menu"
_SESSION_PLAYBACK = "playback"
_SESSION_COPIED_AT = "copied_at"


# ---------------------------------------------------------------------------
# Session-scoped state
# ---------------------------------------------------------------------------

def load_query_state(request: Request) -> QueryState:
    return QueryState.from_dict(request.session.get(_SESSION_QUERY))


def save_query_state(request: Request, state: QueryState) -> None:
    request.session[_SESSION_QUERY] = state.to_dict()


def load_menu(request: Request) -> MenuState:
    return menu_from_dict(request.session.get(_SESSION_MENU))


def save_menu(request: Request, state: MenuState) -> None:
    request.session[_SESSION_MENU] = state.to_dict()


def load_playback(request: Request) -> PlaybackState:
    return playback_from_dict(request.session.get(_SESSION_PLAYBACK))


def save_playback(request: Request, state: PlaybackState) -> None:
    request.session[_SESSION_PLAYBACK] = state.to_dict()


def load_copy_notice(request: Request) -> Optional[CopyNotice]:
    copied_at = request.session.get(_SESSION_COPIED_AT)
    if copied_at is None:
        return None
    try:
        return CopyNotice(float(copied_at))
    except (TypeError, ValueError):
        return None


def start_copy_notice(request: Request) -> CopyNotice:
    notice = CopyNotice(time.time())
    request.session[_SESSION_COPIED_AT] = notice.copied_at
    return notice


# ---------------------------------------------------------------------------
# Query parameter handling
# ---------------------------------------------------------------------------

def apply_query_params(state: QueryState, category: Optional[str] = None,
                       q: Optional[str] = None, sort: Optional[str] = None,
                       page: Optional[int] = None) -> QueryState:
    """Apply request parameters as state transitions.

    Only an actual change of category, search or sort resets the page.
    Raises ValueError for values outside the closed vocabularies.
    """
    if category is not None and category != state.category:
        if category not in CATEGORIES:
            raise ValueError(f"unknown category {category!r}")
        state = state.with_category(category)
    if q is not None and q != state.search_term:
        state = state.with_search(q)
    if sort is not None and sort != state.sort_order.value:
        try:
            state = state.with_sort(sort)
        except ValueError:
            raise ValueError(f"unknown sort order {sort!r}") from None
    if page is not None:
        state = state.with_page(page)
    return state


# ---------------------------------------------------------------------------
# Response shaping
# ---------------------------------------------------------------------------

def entry_card(entry: CatalogEntry, playable: Optional[bool] = None) -> dict:
    """JSON-ready entry with display values attached."""
    card = entry.to_dict()
    card["views_display"] = format_views(entry.views)
    card["playable"] = bool(entry.video_id) if playable is None else playable
    return card


def empty_state(session: CatalogSession, page: Page) -> str:
    """Which empty-state message applies, or "" when there is something to show."""
    if page.total:
        return ""
    if not session.loaded:
        return "loading"
    if session.fetch_failed:
        return "fetch_failed"
    if not session.snapshot:
        return "empty_catalog"
    return "no_results"


def catalog_payload(session: CatalogSession, page: Page, state: QueryState) -> dict:
    empty = empty_state(session, page)
    return {
        "videos": [entry_card(e) for e in page.entries],
        "page": page.page,
        "page_size": page.page_size,
        "total_pages": page.total_pages,
        "total": page.total,
        "has_previous": page.has_previous,
        "has_next": page.has_next,
        "page_window": page_window(page.page, page.total_pages),
        "show_pagination": page.total_pages > 1,
        "query": state.to_dict(),
        "empty_state": empty,
        "message": _EMPTY_MESSAGES.get(empty, ""),
        "loading": not session.loaded or session.fetching,
    }


def playback_payload(state: PlaybackState) -> dict:
    payload = state.to_dict()
    if isinstance(state, Playing):
        payload["embed_url"] = state.embed_url
    return payload


def catalog_options(session: CatalogSession) -> dict:
    return {
        "categories": list(CATEGORIES),
        "category_counts": category_counts(session.snapshot),
        "sort_orders": [{"value": s.value, "label": s.label,
                         "alias_of": s.canonical.value if s.canonical is not s else None}
                        for s in SortOrder],
    }
