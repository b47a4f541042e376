"""Catalog query engine: filter -> sort -> paginate over an immutable snapshot."""

from __future__ import annotations

import logging
import math
from collections import OrderedDict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from data.models import CatalogEntry

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"
CATEGORIES = (ALL_CATEGORIES, "Corporate", "Branding", "Celebrity", "Entertainment")
PAGE_SIZE = 12
ORDERED_CACHE_SIZE = 64


class SortOrder(str, Enum):
    """Catalog sort keys.

    VIEWS is an alias of POPULAR: both order by view count, highest first.
    """
    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"
    VIEWS = "views"

    @property
    def canonical(self) -> "SortOrder":
        return SORT_ALIASES.get(self, self)

    @property
    def label(self) -> str:
        return SORT_LABELS[self]


SORT_ALIASES = {SortOrder.VIEWS: SortOrder.POPULAR}

SORT_LABELS = {
    SortOrder.NEWEST: "Newest first",
    SortOrder.OLDEST: "Oldest first",
    SortOrder.POPULAR: "Most popular",
    SortOrder.VIEWS: "Most viewed",
}


@dataclass(frozen=True)
class QueryState:
    """What the user is looking at. Filter changes always go back to page 1."""
    category: str = ALL_CATEGORIES
    search_term: str = ""
    sort_order: SortOrder = SortOrder.NEWEST
    page: int = 1

    def with_category(self, category: str) -> "QueryState":
        return replace(self, category=category, page=1)

    def with_search(self, search_term: str) -> "QueryState":
        return replace(self, search_term=search_term, page=1)

    def with_sort(self, sort_order: SortOrder | str) -> "QueryState":
        return replace(self, sort_order=SortOrder(sort_order), page=1)

    def with_page(self, page: int) -> "QueryState":
        return replace(self, page=page)

    def reset(self) -> "QueryState":
        """Clear all filters (the empty-results action)."""
        return QueryState()

    @property
    def is_default(self) -> bool:
        return (self.category, self.search_term, self.sort_order) == \
            (ALL_CATEGORIES, "", SortOrder.NEWEST)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "search_term": self.search_term,
            "sort_order": self.sort_order.value,
            "page": self.page,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "QueryState":
        """Rebuild from session storage; anything malformed falls back to defaults."""
        if not data:
            return cls()
        try:
            return cls(
                category=str(data.get("category", ALL_CATEGORIES)),
                search_term=str(data.get("search_term", "")),
                sort_order=SortOrder(data.get("sort_order", SortOrder.NEWEST.value)),
                page=max(1, int(data.get("page", 1))),
            )
        except (TypeError, ValueError):
            logger.debug("Discarding malformed query state: %r", data)
            return cls()


@dataclass(frozen=True)
class Page:
    entries: tuple[CatalogEntry, ...]
    page: int
    total_pages: int
    total: int
    page_size: int = PAGE_SIZE

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def filter_entries(entries: Iterable[CatalogEntry], category: str,
                   search_term: str) -> list[CatalogEntry]:
    """Category equality (unless "All") AND case-insensitive title/uploader substring."""
    term = search_term.casefold()
    matches = []
    for entry in entries:
        if category != ALL_CATEGORIES and entry.category != category:
            continue
        if term and term not in entry.title.casefold() and term not in entry.uploader.casefold():
            continue
        matches.append(entry)
    return matches


def sort_entries(entries: Iterable[CatalogEntry], sort_order: SortOrder | str) -> list[CatalogEntry]:
    """Stable sort; equal keys keep their input order."""
    order = SortOrder(sort_order).canonical
    if order is SortOrder.OLDEST:
        return sorted(entries, key=lambda e: e.date)
    if order is SortOrder.POPULAR:
        return sorted(entries, key=lambda e: e.views, reverse=True)
    return sorted(entries, key=lambda e: e.date, reverse=True)


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    """ceil(count / page_size); 0 for an empty result (no pagination controls)."""
    if count <= 0:
        return 0
    return math.ceil(count / page_size)


def clamp_page(page: int, pages: int) -> int:
    return min(max(page, 1), max(pages, 1))


def paginate(entries: Sequence[CatalogEntry], page: int,
             page_size: int = PAGE_SIZE) -> Page:
    """Slice out one page. Out-of-range pages yield an empty slice, not an error."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    pages = total_pages(len(entries), page_size)
    start = max(page - 1, 0) * page_size
    visible = tuple(entries[start:start + page_size])
    return Page(entries=visible, page=page, total_pages=pages,
                total=len(entries), page_size=page_size)


def category_counts(snapshot: Sequence[CatalogEntry]) -> dict[str, int]:
    """Sidebar counts per category; "All" counts the whole snapshot."""
    counts = dict.fromkeys(CATEGORIES, 0)
    counts[ALL_CATEGORIES] = len(snapshot)
    for entry in snapshot:
        if entry.category in counts and entry.category != ALL_CATEGORIES:
            counts[entry.category] += 1
    return counts


class QueryEngine:
    """Runs queries against one snapshot.

    Ordered results are memoized per (category, term, canonical sort), keeping
    the `cache_size` most recently used orderings. The requested page is
    clamped into range on every run.
    """

    def __init__(self, snapshot: Sequence[CatalogEntry], page_size: int = PAGE_SIZE,
                 cache_size: int = ORDERED_CACHE_SIZE):
        self.snapshot = tuple(snapshot)
        self.page_size = page_size
        self.cache_size = cache_size
        self._ordered_cache: OrderedDict[tuple[str, str, SortOrder], list[CatalogEntry]] = OrderedDict()

    def ordered(self, state: QueryState) -> list[CatalogEntry]:
        key = (state.category, state.search_term.casefold(), state.sort_order.canonical)
        cached = self._ordered_cache.get(key)
        if cached is not None:
            self._ordered_cache.move_to_end(key)
            return cached
        matches = filter_entries(self.snapshot, state.category, state.search_term)
        cached = sort_entries(matches, state.sort_order)
        self._ordered_cache[key] = cached
        while len(self._ordered_cache) > self.cache_size:
            self._ordered_cache.popitem(last=False)
        return cached

    def run(self, state: QueryState) -> tuple[Page, QueryState]:
        """Returns the visible page and the state with its page clamped."""
        ordered = self.ordered(state)
        page = clamp_page(state.page, total_pages(len(ordered), self.page_size))
        if page != state.page:
            state = state.with_page(page)
        return paginate(ordered, page, self.page_size), state

    def get(self, entry_id: str) -> Optional[CatalogEntry]:
        for entry in self.snapshot:
            if entry.id == entry_id:
                return entry
        return None
