"""
Fetch coordination for list pages.

Every query change issues one list request tagged with an increasing sequence
number. Only the response to the latest issued request is applied; earlier
ones are dropped when they land, whether they succeeded or failed. Failures are
turned into one notification and leave the previous rows in place, except on
the very first load, which ends in an explicit error state instead.
"""

import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple

from modules.api_client.envelopes import ListPage
from modules.api_client.errors import BackendClientError, UnauthenticatedError

from .models import PLACEHOLDER, CategoryTab, FetchResult, QueryState
from .row_normalizer import Normalizer, normalize_all
from .rows import Row

logger = logging.getLogger(__name__)

PageFetcher = Callable[[QueryState], Awaitable[ListPage]]
NormalizerSelector = Callable[[QueryState], Normalizer]


class FetchCoordinator:
    """Issues list requests and applies only the newest response."""

    def __init__(self, fetch_page: PageFetcher, select_normalizer: NormalizerSelector, notifier):
        self._fetch_page = fetch_page
        self._select_normalizer = select_normalizer
        self._notifier = notifier
        self._issued = 0
        self._in_flight = 0

        self.rows: Tuple[Row, ...] = ()
        self.total_count = 0
        self.total_pages = 1
        self.loaded = False
        self.load_error: Optional[str] = None
        self.last_applied: Optional[int] = None

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def latest_issued(self) -> int:
        return self._issued

    def _is_latest(self, sequence: int) -> bool:
        return sequence == self._issued

    async def fetch(self, query: QueryState, refresh_version: int = 0) -> Optional[FetchResult]:
        """
        Issue one list request for ``query``.

        Returns:
            The applied result, or None when the request failed or was superseded

        Raises:
            UnauthenticatedError: When the token is missing or rejected
        """
        self._issued += 1
        sequence = self._issued
        self._in_flight += 1
        logger.debug(f"Fetch #{sequence} page={query.page} search={query.search_debounced!r} "
                     f"filter={query.filter} refresh={refresh_version}")
        try:
            page = await self._fetch_page(query)
        except UnauthenticatedError:
            raise
        except BackendClientError as e:
            if not self._is_latest(sequence):
                logger.debug(f"Dropping failure of superseded fetch #{sequence}: {e.message}")
                return None
            logger.warning(f"Fetch #{sequence} failed: {e.message}")
            self._notifier.notify_error(e.message)
            if not self.loaded:
                self.load_error = e.message
                self.rows = ()
                self.total_count = 0
                self.total_pages = 1
            return None
        finally:
            self._in_flight -= 1

        if not self._is_latest(sequence):
            logger.debug(f"Dropping stale response #{sequence}; latest is #{self._issued}")
            return None

        normalizer = self._select_normalizer(query)
        rows = normalize_all(page.records, normalizer)
        result = FetchResult(
            rows=rows,
            total_count=page.pagination.total,
            total_pages=page.pagination.resolved_total_pages(query.page_size),
            request_version=sequence,
        )
        self.rows = result.rows
        self.total_count = result.total_count
        self.total_pages = result.total_pages
        self.loaded = True
        self.load_error = None
        self.last_applied = sequence
        return result


class CategoryTabsLoader:
    """
    One-shot fetch of the first page to enumerate business filter tabs.

    The loaded flag is set before the request goes out so concurrent callers
    cannot start a second fetch. A failed fetch leaves only the "all" tab.
    """

    def __init__(self, fetch_page: PageFetcher, extract: Callable[[Iterable[Row]], List[CategoryTab]],
                 normalizer: Normalizer, notifier, page_size: int = 15):
        self._fetch_page = fetch_page
        self._extract = extract
        self._normalizer = normalizer
        self._notifier = notifier
        self._page_size = page_size
        self._started = False
        self.tabs: List[CategoryTab] = []

    @property
    def started(self) -> bool:
        return self._started

    async def load(self) -> List[CategoryTab]:
        if self._started:
            return self.tabs
        self._started = True
        try:
            page = await self._fetch_page(QueryState(page=1, page_size=self._page_size))
        except UnauthenticatedError:
            raise
        except BackendClientError as e:
            logger.warning(f"Unable to load filter tabs: {e.message}")
            self._notifier.notify_error(e.message)
            return self.tabs
        self.tabs = self._extract(normalize_all(page.records, self._normalizer))
        logger.debug(f"Loaded {len(self.tabs)} filter tabs")
        return self.tabs


def business_tabs(rows: Iterable[Row]) -> List[CategoryTab]:
    """Distinct businesses in first-seen order, skipping rows with no business."""
    seen = {}
    for row in rows:
        business_id = getattr(row, "business_id", None)
        if not business_id or business_id == PLACEHOLDER or business_id in seen:
            continue
        seen[business_id] = CategoryTab(tag=business_id, label=getattr(row, "business_name", business_id))
    return list(seen.values())
