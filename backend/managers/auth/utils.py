"""
Request helpers shared by the routes.
"""

import logging

from fastapi import HTTPException, Request

from managers.session.session_models import AdminSession

logger = logging.getLogger(__name__)


async def get_admin_session(request: Request) -> AdminSession:
    """Get the admin session from request state (set by middleware)."""
    session = getattr(request.state, "session", None)
    if session is None:
        raise HTTPException(status_code=401, detail="You are not logged in.")
    return session
