"""
Query state controller.

Owns the ``QueryState`` snapshot for one page and applies the rules for how
user input changes it:

- search text is stored at once but committed only after the debounce window,
  and committing it moves back to page 1
- a filter change commits immediately and moves back to page 1
- a page change outside ``1..total_pages`` is ignored; a committed search or
  filter change drops the known page count back to 1 until its result lands
- a change that leaves the fetch-relevant fields as they were does not notify
"""

import logging
from typing import Callable, Iterable, Optional

from modules.api_client.errors import InvalidInputError

from .debounce import Debouncer
from .models import QueryState

logger = logging.getLogger(__name__)

ChangeListener = Callable[[QueryState], None]


class QueryStateController:
    """Mutable holder of the current ``QueryState`` of one page."""

    def __init__(
        self,
        initial: Optional[QueryState] = None,
        debounce_seconds: float = 0.4,
        filters: Optional[Iterable[str]] = None,
        on_change: Optional[ChangeListener] = None,
    ):
        self._state = initial or QueryState()
        self._debouncer = Debouncer(debounce_seconds)
        self._filters = set(filters) if filters is not None else None
        self._total_pages = 1
        self.on_change = on_change

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @total_pages.setter
    def total_pages(self, value: int) -> None:
        self._total_pages = max(1, int(value))

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    def allow_filters(self, tags: Iterable[str]) -> None:
        """Extend the accepted filter tags, e.g. once business tabs are known."""
        if self._filters is None:
            self._filters = set()
        self._filters.update(tags)

    def set_search_text(self, raw: str) -> None:
        raw = raw or ""
        self._state = self._state.evolve(search_raw=raw)
        self._debouncer.schedule(self._commit_search, raw)

    def commit_search_now(self) -> None:
        """Commit the typed search text without waiting for the debounce."""
        self._debouncer.flush(self._commit_search, self._state.search_raw)

    def set_filter(self, tag: str) -> None:
        if self._filters is not None and tag not in self._filters:
            raise InvalidInputError(f"Unknown filter: {tag}")
        self._apply(self._state.evolve(filter=tag, page=1), new_result_set=True)

    def set_page(self, page: int) -> bool:
        if not isinstance(page, int) or isinstance(page, bool) or page < 1 or page > self._total_pages:
            logger.debug(f"Ignoring page {page!r} outside 1..{self._total_pages}")
            return False
        self._apply(self._state.evolve(page=page))
        return True

    def set_sort(self, sort_by: Optional[str], sort_order: Optional[str] = None) -> None:
        if sort_order not in (None, "asc", "desc"):
            raise InvalidInputError("Sort order must be 'asc' or 'desc'.")
        if sort_by is None:
            sort_order = None
        self._apply(self._state.evolve(sort_by=sort_by, sort_order=sort_order))

    def reset_page(self) -> None:
        """Move to page 1 without notifying listeners."""
        self._state = self._state.evolve(page=1)

    def dispose(self) -> None:
        self._debouncer.cancel()

    def _commit_search(self, raw: str) -> None:
        term = raw.strip()
        if term == self._state.search_debounced:
            return
        self._apply(self._state.evolve(search_debounced=term, page=1), new_result_set=True)

    def _apply(self, new_state: QueryState, new_result_set: bool = False) -> None:
        changed = new_state.fetch_key() != self._state.fetch_key()
        self._state = new_state
        if changed and new_result_set:
            self._total_pages = 1
        if changed and self.on_change is not None:
            self.on_change(new_state)
