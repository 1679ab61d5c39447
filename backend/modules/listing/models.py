"""Domain models for the list-and-mutation controllers."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

ALL_FILTER = "all"
PLACEHOLDER = "—"


@dataclass(frozen=True)
class QueryState:
    """What should currently be fetched for one page."""

    page: int = 1
    page_size: int = 15
    search_raw: str = ""
    search_debounced: str = ""
    filter: str = ALL_FILTER
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None

    def __post_init__(self):
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.sort_order not in (None, "asc", "desc"):
            raise ValueError(f"sort_order must be 'asc' or 'desc', got {self.sort_order!r}")

    def evolve(self, **changes: Any) -> "QueryState":
        return replace(self, **changes)

    def fetch_key(self) -> Tuple[Any, ...]:
        """The fields a list request depends on. ``search_raw`` is not one of them."""
        return (self.page, self.page_size, self.search_debounced, self.filter, self.sort_by, self.sort_order)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "search_raw": self.search_raw,
            "search": self.search_debounced,
            "filter": self.filter,
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
        }


@dataclass(frozen=True)
class Identifier:
    """A relationship the backend sent as a bare id."""

    id: str


@dataclass(frozen=True)
class IdentifierWithDetails:
    """A relationship the backend sent as an embedded object."""

    id: str
    details: Dict[str, Any] = field(default_factory=dict)


Ref = Union[Identifier, IdentifierWithDetails]


@dataclass(frozen=True)
class CategoryTab:
    """One filter tab."""

    tag: str
    label: str

    def to_dict(self) -> Dict[str, str]:
        return {"tag": self.tag, "label": self.label}


@dataclass(frozen=True)
class FetchResult:
    """Rows and pagination produced by one successful list request."""

    rows: Tuple[Any, ...]
    total_count: int
    total_pages: int
    request_version: int


class MutationKind(str, Enum):
    """Kinds of mutation a page can dispatch."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    STATUS_TRANSITION = "status_transition"


@dataclass(frozen=True)
class MutationIntent:
    """A user action on its way to the backend."""

    kind: MutationKind
    action: str
    target_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MutationOutcome:
    """What happened to a dispatched intent."""

    success: bool
    message: str
    intent: Optional[MutationIntent] = None
    data: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "action": self.intent.action if self.intent else None,
            "target_id": self.intent.target_id if self.intent else None,
        }


class EmptyStateKind(str, Enum):
    NO_DATA = "no_data"
    NO_RESULTS = "no_results"
    FILTERED = "filtered"
    ERROR = "error"


@dataclass(frozen=True)
class EmptyState:
    """Message shown when a page has no rows to display."""

    kind: EmptyStateKind
    title: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "title": self.title, "message": self.message}


@dataclass
class EditorState:
    """The create/edit form associated with a page, if open."""

    mode: str
    target_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"mode": self.mode, "target_id": self.target_id}
