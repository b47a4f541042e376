"""HTTP middleware: security headers."""

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from youtube.extractor import EMBED_HOST, THUMB_ALLOWED_HOSTS

logger = logging.getLogger(__name__)


def build_csp(extra_img_hosts: tuple[str, ...] = ()) -> str:
    """Content-Security-Policy allowing YouTube thumbnails and the embed player."""
    img_hosts = " ".join(f"https://{h}" for h in sorted(THUMB_ALLOWED_HOSTS) + list(extra_img_hosts))
    return (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-inline'; "
        "style-src 'self' 'unsafe-inline'; "
        f"img-src 'self' https: {img_hosts}; "
        f"frame-src https://{EMBED_HOST}; "
        "connect-src 'self'; "
        "object-src 'none'; "
        "base-uri 'self'"
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    def __init__(self, app, csp: str = ""):
        super().__init__(app)
        self.csp = csp or build_csp()

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = self.csp
        return response
