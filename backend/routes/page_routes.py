"""List page routes.

FastAPI routes that delegate to the session's page controllers. Every
response carries the notifications raised while handling it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from managers.app_factory.app_factory import app_factory
from managers.auth.utils import get_admin_session
from managers.session.session_models import AdminSession
from modules.api_client.resources import HistoryApi, UsersApi
from modules.listing.models import QueryState
from modules.listing.page_controller import ResourcePageController
from modules.listing.row_normalizer import normalize_all, normalize_history, normalize_user

logger = logging.getLogger(__name__)

pages_router = APIRouter(prefix="/api", tags=["pages"])


class SearchBody(BaseModel):
    text: str = ""
    immediate: bool = False


class FilterBody(BaseModel):
    tag: str


class PageBody(BaseModel):
    page: int


class SortBody(BaseModel):
    sort_by: Optional[str] = None
    sort_order: Optional[Literal["asc", "desc"]] = None


class ConfirmBody(BaseModel):
    target_id: str


class EditorBody(BaseModel):
    mode: Literal["create", "edit"]
    target_id: Optional[str] = None


class ActionBody(BaseModel):
    target_id: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)


def _respond(session: AdminSession, **body: Any) -> Dict[str, Any]:
    session.update_timestamp()
    body["notifications"] = session.notifier.drain()
    return body


async def _open_page(session: AdminSession, page: str) -> ResourcePageController:
    controller = app_factory.get_session_manager().get_page(session, page)
    if controller is None:
        raise HTTPException(status_code=404, detail=f"Unknown page: {page}")
    if not controller.started:
        await controller.start()
    return controller


@pages_router.get("/pages")
async def list_pages(session: AdminSession = Depends(get_admin_session)):
    """Pages available to the admin."""
    pages = app_factory.get_session_manager().pages
    return _respond(session, pages=[definition.summary() for definition in pages.values()])


@pages_router.get("/pages/{page}")
async def get_page(page: str, session: AdminSession = Depends(get_admin_session)):
    """Current rows, pagination and state of a page."""
    controller = await _open_page(session, page)
    await controller.wait_idle()
    return _respond(session, view=controller.view())


@pages_router.post("/pages/{page}/search")
async def search(page: str, body: SearchBody, session: AdminSession = Depends(get_admin_session)):
    """Type into the search box; the query is committed after the debounce window."""
    controller = await _open_page(session, page)
    controller.set_search_text(body.text)
    if body.immediate:
        controller.query.commit_search_now()
        await controller.wait_idle()
    return _respond(session, view=controller.view())


@pages_router.post("/pages/{page}/filter")
async def set_filter(page: str, body: FilterBody, session: AdminSession = Depends(get_admin_session)):
    controller = await _open_page(session, page)
    controller.set_filter(body.tag)
    await controller.wait_idle()
    return _respond(session, view=controller.view())


@pages_router.post("/pages/{page}/page")
async def set_page(page: str, body: PageBody, session: AdminSession = Depends(get_admin_session)):
    """Move to another page; out of range pages are ignored."""
    controller = await _open_page(session, page)
    accepted = controller.set_page(body.page)
    await controller.wait_idle()
    return _respond(session, accepted=accepted, view=controller.view())


@pages_router.post("/pages/{page}/sort")
async def set_sort(page: str, body: SortBody, session: AdminSession = Depends(get_admin_session)):
    controller = await _open_page(session, page)
    controller.set_sort(body.sort_by, body.sort_order)
    await controller.wait_idle()
    return _respond(session, view=controller.view())


@pages_router.post("/pages/{page}/refresh")
async def refresh(page: str, session: AdminSession = Depends(get_admin_session)):
    controller = await _open_page(session, page)
    controller.refresh()
    await controller.wait_idle()
    return _respond(session, view=controller.view())


@pages_router.post("/pages/{page}/confirm")
async def arm_confirmation(page: str, body: ConfirmBody, session: AdminSession = Depends(get_admin_session)):
    """Arm a destructive action on one record."""
    controller = await _open_page(session, page)
    controller.arm(body.target_id)
    return _respond(session, view=controller.view())


@pages_router.delete("/pages/{page}/confirm")
async def cancel_confirmation(page: str, session: AdminSession = Depends(get_admin_session)):
    controller = await _open_page(session, page)
    controller.cancel()
    return _respond(session, view=controller.view())


@pages_router.post("/pages/{page}/editor")
async def open_editor(page: str, body: EditorBody, session: AdminSession = Depends(get_admin_session)):
    controller = await _open_page(session, page)
    controller.open_editor(body.mode, body.target_id)
    return _respond(session, view=controller.view())


@pages_router.delete("/pages/{page}/editor")
async def close_editor(page: str, session: AdminSession = Depends(get_admin_session)):
    controller = await _open_page(session, page)
    controller.close_editor()
    return _respond(session, view=controller.view())


@pages_router.post("/pages/{page}/actions/{action}")
async def run_action(
    page: str, action: str, body: ActionBody, session: AdminSession = Depends(get_admin_session)
):
    """Dispatch a mutation and return its outcome with the refreshed page."""
    controller = await _open_page(session, page)
    outcome = await controller.mutate(action, body.target_id, body.payload)
    await controller.wait_idle()
    return _respond(session, outcome=outcome.to_dict(), view=controller.view())


# --- Detail reads ---


@pages_router.get("/users/{user_id}")
async def get_user(user_id: str, session: AdminSession = Depends(get_admin_session)):
    """One user with their business details."""
    record = await UsersApi(session.client).get_by_id(user_id)
    return _respond(session, user=normalize_user(record).to_dict(), raw=record)


@pages_router.get("/businesses/{business_id}/history")
async def get_business_history(
    business_id: str, page: int = 1, limit: int = 100, session: AdminSession = Depends(get_admin_session)
):
    """Points history scoped to one business."""
    query = QueryState(page=max(1, page), page_size=max(1, limit), sort_by="timestamp", sort_order="desc")
    result = await HistoryApi(session.client).list_for_business(business_id, query)
    rows = normalize_all(result.records, normalize_history)
    return _respond(
        session,
        rows=[row.to_dict() for row in rows],
        total_count=result.pagination.total,
        total_pages=result.pagination.resolved_total_pages(query.page_size),
    )
