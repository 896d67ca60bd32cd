from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from voicenotes.config import settings
from voicenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from fastapi import Request
    from starlette.types import ASGIApp

logger = get_logger(__name__)


class SecurityMiddleware(BaseHTTPMiddleware):
    """Adds security headers and logs reminder trigger calls."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "connect-src 'self' https://*.supabase.co; "
            "frame-ancestors 'none';"
        )

        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"

        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
        response.headers["Pragma"] = "no-cache"

        if request.url.path.startswith(f"{settings.api_prefix}/reminders"):
            client_ip = request.client.host if request.client else "unknown"
            logger.info(
                "Reminder trigger called",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "ip": client_ip,
                    "status_code": response.status_code,
                }
            )

        return response
