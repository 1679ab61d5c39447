"""
Page controller: one list page of one admin session.

Wires the query state, fetch coordinator and mutation dispatcher together.
Query changes spawn a fetch task; overlapping tasks run concurrently and the
coordinator applies only the newest response. A successful mutation bumps
``refresh_version`` and spawns exactly one re-fetch. Create mutations jump to
page 1 first; every other mutation keeps the current page. A result that
reports fewer pages than the page it was fetched for moves the query to the
last page and fetches once more.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set

from modules.api_client.errors import InvalidInputError, UnauthenticatedError

from .fetch_coordinator import CategoryTabsLoader, FetchCoordinator, business_tabs
from .models import (
    ALL_FILTER,
    CategoryTab,
    EditorState,
    EmptyState,
    EmptyStateKind,
    MutationIntent,
    MutationKind,
    MutationOutcome,
    QueryState,
)
from .mutation_dispatcher import MutationDispatcher
from .page_definition import PageDefinition
from .query_state import QueryStateController
from .rows import Row

logger = logging.getLogger(__name__)

EDITOR_MODES = ("create", "edit")


class ResourcePageController:
    """State and behaviour behind one list page."""

    def __init__(
        self,
        definition: PageDefinition,
        api: Any,
        notifier,
        debounce_seconds: float = 0.4,
        default_page_size: int = 15,
    ):
        self.definition = definition
        self.api = api
        self.notifier = notifier
        self.refresh_version = 0
        self.editor: Optional[EditorState] = None
        self._tasks: Set[asyncio.Task] = set()
        self._auth_error: Optional[UnauthenticatedError] = None
        self._started = False

        self.query = QueryStateController(
            initial=definition.initial_query(default_page_size),
            debounce_seconds=debounce_seconds,
            filters=definition.filter_tags(),
            on_change=self._on_query_change,
        )
        self.coordinator = FetchCoordinator(api.list, definition.normalizer_for, notifier)
        self.dispatcher = MutationDispatcher(api, notifier, on_success=self._after_mutation)
        self.tabs_loader: Optional[CategoryTabsLoader] = None
        if definition.business_tabs:
            self.tabs_loader = CategoryTabsLoader(
                api.list, business_tabs, definition.normalizer, notifier,
                page_size=self.query.state.page_size,
            )

    # --- lifecycle ---

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Load filter tabs (once) and the first page."""
        if self._started:
            return
        self._started = True
        if self.tabs_loader is not None:
            tabs = await self.tabs_loader.load()
            self.query.allow_filters(tab.tag for tab in tabs)
        self._spawn_fetch()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """
        Wait for every in-flight fetch.

        Raises:
            UnauthenticatedError: When one of them was rejected for missing auth
        """
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                break
            await asyncio.gather(*pending, return_exceptions=True)
        if self._auth_error is not None:
            error, self._auth_error = self._auth_error, None
            raise error

    def close(self) -> None:
        self.query.dispose()
        for task in self._tasks:
            task.cancel()

    def _spawn_fetch(self) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(
            self._run_fetch(self.query.state, self.refresh_version)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_fetch(self, query: QueryState, refresh_version: int) -> None:
        try:
            result = await self.coordinator.fetch(query, refresh_version)
        except UnauthenticatedError as e:
            logger.warning(f"{self.definition.name}: fetch rejected, not authenticated")
            self._auth_error = e
            return
        if result is None:
            return
        self.query.total_pages = result.total_pages
        if query.page > result.total_pages:
            # the result set shrank under the current page
            logger.info(
                f"{self.definition.name}: page {query.page} is past the last page {result.total_pages}, moving back"
            )
            self.query.set_page(result.total_pages)

    def _on_query_change(self, state: QueryState) -> None:
        if not self._started:
            return
        self._spawn_fetch()

    # --- query ---

    def set_search_text(self, raw: str) -> None:
        self.query.set_search_text(raw)

    def set_filter(self, tag: str) -> None:
        self.query.set_filter(tag)

    def set_page(self, page: int) -> bool:
        return self.query.set_page(page)

    def set_sort(self, sort_by: Optional[str], sort_order: Optional[str] = None) -> None:
        self.query.set_sort(sort_by, sort_order)

    def refresh(self) -> None:
        """Re-fetch the current query."""
        self.refresh_version += 1
        self._spawn_fetch()

    # --- editor and confirmation ---

    def open_editor(self, mode: str, target_id: Optional[str] = None) -> EditorState:
        if mode not in EDITOR_MODES:
            raise InvalidInputError(f"Unknown editor mode: {mode}")
        if mode == "edit" and not target_id:
            raise InvalidInputError("A record is required to edit.")
        self.editor = EditorState(mode=mode, target_id=target_id if mode == "edit" else None)
        return self.editor

    def close_editor(self) -> None:
        self.editor = None

    def arm(self, target_id: str) -> None:
        self.dispatcher.arm(target_id)

    def cancel(self) -> None:
        self.dispatcher.cancel()

    # --- mutations ---

    async def mutate(
        self, action_name: str, target_id: Optional[str] = None, payload: Optional[Dict[str, Any]] = None
    ) -> MutationOutcome:
        action = self.definition.actions.get(action_name)
        if action is None:
            raise InvalidInputError(f"Unknown action for {self.definition.name}: {action_name}")
        intent = MutationIntent(kind=action.kind, action=action_name, target_id=target_id, payload=payload or {})
        return await self.dispatcher.dispatch(intent, action)

    def _after_mutation(self, outcome: MutationOutcome) -> None:
        self.editor = None
        if outcome.intent is not None and outcome.intent.kind is MutationKind.CREATE:
            self.query.reset_page()
        self.refresh()

    # --- view ---

    @property
    def rows(self):
        return self.coordinator.rows

    @property
    def tabs(self) -> List[CategoryTab]:
        if self.tabs_loader is not None:
            return [CategoryTab(ALL_FILTER, "All Businesses")] + self.tabs_loader.tabs
        return list(self.definition.filters)

    def row_actions(self, row: Row) -> List[str]:
        return self.definition.row_actions(row, self.query.state)

    def empty_state(self) -> Optional[EmptyState]:
        if self.coordinator.rows or not self._started:
            return None
        query = self.query.state
        if self.coordinator.load_error is not None:
            kind = EmptyStateKind.ERROR
        elif query.search_debounced:
            kind = EmptyStateKind.NO_RESULTS
        elif query.filter != self.definition.default_filter:
            kind = EmptyStateKind.FILTERED
        else:
            kind = EmptyStateKind.NO_DATA
        return self.definition.empty_state(kind, query)

    def view(self) -> Dict[str, Any]:
        empty = self.empty_state()
        return {
            "page": self.definition.name,
            "title": self.definition.title,
            "query": self.query.state.to_dict(),
            "rows": [dict(row.to_dict(), actions=self.row_actions(row)) for row in self.coordinator.rows],
            "total_count": self.coordinator.total_count,
            "total_pages": self.coordinator.total_pages,
            "loading": self.coordinator.loading,
            "search_pending": self.query.search_pending,
            "refresh_version": self.refresh_version,
            "tabs": [tab.to_dict() for tab in self.tabs],
            "editor": self.editor.to_dict() if self.editor else None,
            "pending_confirmation": self.dispatcher.pending_target,
            "empty_state": empty.to_dict() if empty else None,
        }
