"""FastAPI middleware resolving the admin session of each request."""

import logging
from typing import Callable
from uuid import UUID

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from managers.session.session_manager import SessionManager

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"
PUBLIC_PATHS = {"/api/auth/login", "/health", "/docs", "/openapi.json", "/redoc"}


class AuthMiddleware(BaseHTTPMiddleware):
    """Rejects API requests that do not carry a known session id."""

    def __init__(self, app, get_session_manager: Callable[[], SessionManager]):
        super().__init__(app)
        self.get_session_manager = get_session_manager

    async def dispatch(self, request: Request, call_next) -> Response:
        logger.info(f"Request: {request.method} {request.url.path}")

        if request.url.path in PUBLIC_PATHS or not request.url.path.startswith("/api"):
            return await call_next(request)

        raw_id = request.headers.get(SESSION_HEADER, "").strip()
        try:
            session_id = UUID(raw_id)
        except ValueError:
            logger.warning(f"Missing or malformed session id on {request.url.path}")
            return JSONResponse(status_code=401, content={"detail": "You are not logged in."})

        session = self.get_session_manager().get_session(session_id)
        if session is None or not session.auth_store.authenticated:
            logger.warning(f"Unknown or logged out session {session_id}")
            return JSONResponse(status_code=401, content={"detail": "Your session has expired. Please log in again."})

        request.state.session = session
        return await call_next(request)
