"""Admin routes for reading the application log.

FastAPI routes that delegate to the logging manager.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from managers.app_factory.app_factory import app_factory
from managers.auth.utils import get_admin_session
from managers.session.session_models import AdminSession

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/api/admin", tags=["admin"])

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@admin_router.get("/logs/viewer")
async def get_logs(
    lines: int = Query(default=500, ge=1, le=10000),
    level_filter: Optional[str] = None,
    session: AdminSession = Depends(get_admin_session),
):
    """Most recent log entries, optionally only one level."""
    if level_filter is not None and level_filter.upper() not in LOG_LEVELS:
        raise HTTPException(status_code=400, detail=f"Unknown log level: {level_filter}")

    logging_manager = app_factory.get_logging_manager()
    entries = logging_manager.read_logs(lines=lines, level=level_filter)
    logger.info(f"Admin {session.user_email} read {len(entries)} log entries")
    return {
        "entries": entries,
        "total": len(entries),
        "log_file": str(logging_manager.get_log_file_path()),
    }
