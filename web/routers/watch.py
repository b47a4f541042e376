"""Playback, share menu, and share-link routes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from catalog.ui_state import Idle, MenuClosed, Playing, toggle_menu
from web.shared import limiter
from web.deps import get_catalog_session
from web.helpers import (
    load_copy_notice, load_menu, load_playback, playback_payload,
    save_menu, save_playback, start_copy_notice,
)
from youtube.extractor import watch_url

router = APIRouter()


def _lookup(request: Request, entry_id: str):
    """Returns (entry, error_response)."""
    entry = get_catalog_session(request).get(entry_id)
    if not entry:
        return None, JSONResponse({"error": "not_found"}, status_code=404)
    if not entry.video_id:
        return None, JSONResponse({"error": "not_playable"}, status_code=409)
    return entry, None


@router.post("/api/videos/{entry_id}/play")
@limiter.limit("60/minute")
async def play_video(request: Request, entry_id: str):
    """Open the player for an entry."""
    entry, error = _lookup(request, entry_id)
    if error:
        return error
    state = Playing(entry.id, entry.video_id)
    save_playback(request, state)
    return JSONResponse(playback_payload(state))


@router.post("/api/player/close")
async def close_player(request: Request):
    state = Idle()
    save_playback(request, state)
    return JSONResponse(playback_payload(state))


@router.get("/api/player")
async def player_state(request: Request):
    return JSONResponse(playback_payload(load_playback(request)))


@router.post("/api/videos/{entry_id}/menu")
async def toggle_share_menu(request: Request, entry_id: str):
    """Open the share menu for this entry, or close it if already open."""
    if not get_catalog_session(request).get(entry_id):
        return JSONResponse({"error": "not_found"}, status_code=404)
    state = toggle_menu(load_menu(request), entry_id)
    save_menu(request, state)
    return JSONResponse(state.to_dict())


@router.post("/api/videos/{entry_id}/share")
@limiter.limit("30/minute")
async def share_video(request: Request, entry_id: str):
    """Share link for the clipboard; starts the "copied" notice and closes the menu."""
    entry, error = _lookup(request, entry_id)
    if error:
        return error
    notice = start_copy_notice(request)
    save_menu(request, MenuClosed())
    return JSONResponse({
        "url": watch_url(entry.video_id),
        "copied": True,
        "notice_seconds": notice.duration,
    })


@router.get("/api/share/status")
async def share_status(request: Request):
    notice = load_copy_notice(request)
    if notice is None or not notice.is_active():
        return JSONResponse({"copied": False, "remaining": 0.0})
    return JSONResponse({"copied": True, "remaining": round(notice.remaining(), 2)})
