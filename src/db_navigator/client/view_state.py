# src/db_navigator/client/view_state.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

ASCENDING = "asc"
DESCENDING = "desc"


class ViewStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True)
class SortConfig:
    column: str
    direction: str = ASCENDING

    def toggled(self, column: str) -> "SortConfig":
        """
        Sort state after a click on a column header.

        The sorted column flips direction; any other column starts ascending.
        """
        if column == self.column:
            return SortConfig(column, DESCENDING if self.direction == ASCENDING else ASCENDING)
        return SortConfig(column, ASCENDING)


def next_sort(current: Optional[SortConfig], column: str) -> SortConfig:
    if current is None:
        return SortConfig(column, ASCENDING)
    return current.toggled(column)


@dataclass
class TableView:
    """
    Visible state of one open table.

    ``request_token`` identifies the most recently issued fetch; only a
    completion carrying that token may change the rows shown.
    """
    table: str
    page: int = 1
    sort: Optional[SortConfig] = None
    filters: Dict[str, str] = field(default_factory=dict)
    status: ViewStatus = ViewStatus.IDLE
    rows: List[Dict[str, Any]] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    request_token: int = 0
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status is ViewStatus.LOADING

    def active_filters(self) -> Dict[str, str]:
        return {column: value for column, value in self.filters.items() if value.strip()}

    def apply_result(self, data: Dict[str, Any]) -> None:
        """
        Show a fetched page.

        Columns follow the first row; an empty page keeps the known header.
        """
        self.rows = list(data.get("rows") or [])
        if self.rows:
            self.columns = list(self.rows[0].keys())
            self.total_count = int(data.get("totalCount") or 0)
            self.total_pages = int(data.get("totalPages") or 0)
        else:
            self.total_count = 0
            self.total_pages = 0
        self.status = ViewStatus.LOADED
        self.error = None

    def apply_error(self, message: str) -> None:
        self.rows = []
        self.total_count = 0
        self.total_pages = 0
        self.status = ViewStatus.ERROR
        self.error = message

    def showing_range(self, page_size: int) -> str:
        """Summary line such as ``Showing 21 to 40 of 95 rows``."""
        if self.total_count == 0:
            return "No rows to show"
        first = (self.page - 1) * page_size + 1
        last = min(self.page * page_size, self.total_count)
        return f"Showing {first} to {last} of {self.total_count} rows"
