"""Static description of one list page: what it fetches, filters and offers."""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .models import ALL_FILTER, CategoryTab, EmptyState, EmptyStateKind, QueryState
from .mutation_dispatcher import MutationAction
from .row_normalizer import Normalizer
from .rows import Row

EmptyStateBuilder = Callable[[EmptyStateKind, QueryState], EmptyState]
RowActions = Callable[[Row, QueryState], List[str]]


def _no_row_actions(row: Row, query: QueryState) -> List[str]:
    return []


def generic_empty_state(noun: str, no_data_message: Optional[str] = None) -> EmptyStateBuilder:
    """Empty-state wording used by pages without special cases."""

    def build(kind: EmptyStateKind, query: QueryState) -> EmptyState:
        title = f"No {noun} found"
        if kind is EmptyStateKind.ERROR:
            return EmptyState(kind, f"Unable to load {noun}", "Something went wrong while loading. Please try again.")
        if kind is EmptyStateKind.NO_RESULTS:
            return EmptyState(kind, title, "Try adjusting your search criteria.")
        if kind is EmptyStateKind.FILTERED:
            return EmptyState(kind, title, "Try selecting a different filter.")
        return EmptyState(kind, title, no_data_message or f"There are no {noun} to display.")

    return build


@dataclass(frozen=True)
class PageDefinition:
    """
    Everything that differs between list pages.

    ``api_factory`` builds the page's resource API from the shared HTTP client.
    ``filter_normalizers`` overrides the row normalizer for tabs served by a
    different endpoint (the users page's business requests tab).
    """

    name: str
    title: str
    api_factory: Callable[[Any], Any]
    normalizer: Normalizer
    filters: Tuple[CategoryTab, ...] = ()
    default_filter: str = ALL_FILTER
    filter_normalizers: Mapping[str, Normalizer] = field(default_factory=dict)
    business_tabs: bool = False
    page_size: Optional[int] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    actions: Mapping[str, MutationAction] = field(default_factory=dict)
    row_actions: RowActions = _no_row_actions
    empty_state: EmptyStateBuilder = generic_empty_state("records")

    def normalizer_for(self, query: QueryState) -> Normalizer:
        return self.filter_normalizers.get(query.filter, self.normalizer)

    def filter_tags(self) -> List[str]:
        """Accepted filter tags; business tabs are added once loaded."""
        if self.business_tabs:
            return [ALL_FILTER]
        return [tab.tag for tab in self.filters] or [ALL_FILTER]

    def initial_query(self, default_page_size: int) -> QueryState:
        return QueryState(
            page_size=self.page_size or default_page_size,
            filter=self.default_filter,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
        )

    def with_overrides(self, overrides: Optional[Dict[str, Any]]) -> "PageDefinition":
        """Apply ``page_size``/``sort_by``/``sort_order`` from the pages config file."""
        if not overrides:
            return self
        changes = {key: overrides[key] for key in ("page_size", "sort_by", "sort_order") if key in overrides}
        return replace(self, **changes)

    def summary(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "filters": [tab.to_dict() for tab in self.filters],
            "actions": sorted(self.actions),
        }
