"""Catalog API routes: filtered, sorted, paginated video listing."""

import logging
from typing import Optional

from fastapi import APIRouter, Request, Query
from fastapi.responses import JSONResponse

from web.shared import limiter
from web.deps import get_catalog_session
from web.helpers import (
    apply_query_params, catalog_payload, catalog_options,
    load_query_state, save_query_state,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/catalog")
@limiter.limit("60/minute")
async def api_catalog(
    request: Request,
    category: Optional[str] = Query(None, max_length=50),
    q: Optional[str] = Query(None, max_length=200),
    sort: Optional[str] = Query(None, max_length=20),
    page: Optional[int] = Query(None, ge=1),
):
    """Visible page for the session's query state, after applying any given changes."""
    session = get_catalog_session(request)
    try:
        state = apply_query_params(load_query_state(request), category=category,
                                   q=q, sort=sort, page=page)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    result, state = session.query(state)
    save_query_state(request, state)
    return JSONResponse(catalog_payload(session, result, state))


@router.post("/api/catalog/reset")
@limiter.limit("60/minute")
async def api_catalog_reset(request: Request):
    """Clear filters: All categories, no search, newest first, page 1."""
    session = get_catalog_session(request)
    state = load_query_state(request).reset()
    result, state = session.query(state)
    save_query_state(request, state)
    return JSONResponse(catalog_payload(session, result, state))


@router.post("/api/catalog/refresh")
@limiter.limit("5/minute")
async def api_catalog_refresh(request: Request):
    """Refetch the catalog source and rebuild the snapshot."""
    session = get_catalog_session(request)
    applied = await session.refresh()
    result, state = session.query(load_query_state(request))
    save_query_state(request, state)
    payload = catalog_payload(session, result, state)
    payload["refreshed"] = applied
    payload["skipped"] = len(session.skipped)
    return JSONResponse(payload)


@router.get("/api/catalog/options")
async def api_catalog_options(request: Request):
    """Closed category and sort vocabularies, with per-category entry counts."""
    return JSONResponse(catalog_options(get_catalog_session(request)))
