"""Page routes: server-rendered catalog page and its form actions."""

from typing import Optional

from fastapi import APIRouter, Request, Query
from fastapi.responses import HTMLResponse, RedirectResponse

from catalog.query import CATEGORIES, SortOrder, category_counts
from catalog.ui_state import Idle, MenuClosed, Playing, toggle_menu
from web.shared import templates
from web.deps import get_catalog_session
from web.helpers import (
    apply_query_params, catalog_payload, load_copy_notice, load_menu,
    load_playback, load_query_state, save_menu, save_playback, save_query_state,
    start_copy_notice,
)
from youtube.extractor import watch_url

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    category: Optional[str] = Query(None, max_length=50),
    q: Optional[str] = Query(None, max_length=200),
    sort: Optional[str] = Query(None, max_length=20),
    page: Optional[int] = Query(None, ge=1),
):
    """Catalog page: sidebar filters, video grid, pagination, player overlay."""
    session = get_catalog_session(request)
    state = load_query_state(request)
    try:
        state = apply_query_params(state, category=category, q=q, sort=sort, page=page)
    except ValueError:
        return RedirectResponse(url="/", status_code=303)
    result, state = session.query(state)
    save_query_state(request, state)
    notice = load_copy_notice(request)
    return templates.TemplateResponse(request, "index.html", {
        **catalog_payload(session, result, state),
        "entries": result.entries,
        "categories": CATEGORIES,
        "category_counts": category_counts(session.snapshot),
        "sort_orders": list(SortOrder),
        "state": state,
        "menu": load_menu(request),
        "watch_url": watch_url,
        "playback": load_playback(request),
        "copied": bool(notice and notice.is_active()),
    })


@router.post("/play/{entry_id}")
async def play_page(request: Request, entry_id: str):
    entry = get_catalog_session(request).get(entry_id)
    if entry and entry.video_id:
        save_playback(request, Playing(entry.id, entry.video_id))
    return RedirectResponse(url="/", status_code=303)


@router.post("/close")
async def close_page(request: Request):
    save_playback(request, Idle())
    return RedirectResponse(url="/", status_code=303)


@router.post("/clear")
async def clear_filters(request: Request):
    save_query_state(request, load_query_state(request).reset())
    return RedirectResponse(url="/", status_code=303)


@router.post("/menu/{entry_id}")
async def toggle_menu_page(request: Request, entry_id: str):
    if get_catalog_session(request).get(entry_id):
        save_menu(request, toggle_menu(load_menu(request), entry_id))
    return RedirectResponse(url="/", status_code=303)


@router.post("/share/{entry_id}")
async def share_page(request: Request, entry_id: str):
    """Copy-link action: starts the "copied" notice and closes the menu."""
    entry = get_catalog_session(request).get(entry_id)
    if entry and entry.video_id:
        start_copy_notice(request)
        save_menu(request, MenuClosed())
    return RedirectResponse(url="/", status_code=303)
