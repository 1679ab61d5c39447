"""Login and logout routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from managers.app_factory.app_factory import app_factory
from managers.auth.utils import get_admin_session
from managers.session.session_models import AdminSession
from modules.api_client.errors import BackendClientError

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginBody(BaseModel):
    email: str = ""
    password: str = ""


@auth_router.post("/login")
async def login(body: LoginBody):
    """Log in against the backend and open a session."""
    session_manager = app_factory.get_session_manager()
    session = session_manager.create_session(user_email=body.email.strip() or None)
    try:
        _, user = await app_factory.get_auth_manager(session).login(body.model_dump())
    except BackendClientError:
        session_manager.delete_session(session.id)
        raise
    session.user = user
    return {"session_id": str(session.id), "user": user}


@auth_router.post("/logout")
async def logout(session: AdminSession = Depends(get_admin_session)):
    """Clear the token and drop the session."""
    app_factory.get_session_manager().delete_session(session.id)
    logger.info(f"Session {session.id} logged out")
    return {"message": "Logged out successfully"}
