# src/db_navigator/database/query_builder.py
"""
Statement construction for table views.

Table and column names cannot be bound parameters, so they are the only
user-supplied values interpolated into statement text; each one is checked
against ``SAFE_IDENTIFIER`` first. Filter values, LIMIT and OFFSET are always
bound as positional ``?`` parameters.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from db_navigator.core.exceptions.custom_exceptions import InvalidIdentifierError, InvalidRequestError

SAFE_IDENTIFIER = re.compile(r'[A-Za-z0-9_]+')

ASC = "ASC"
DESC = "DESC"

# Escape character for LIKE patterns
LIKE_ESCAPE = "!"


def validate_identifier(name: Any, kind: str = "identifier") -> str:
    """
    Check a table/column/database name against the safe-identifier pattern.

    Args:
        name (Any): Candidate identifier
        kind (str): What the identifier names, used in the error message

    Returns:
        str: The identifier, unchanged

    Raises:
        InvalidIdentifierError: If the name is not a non-empty run of letters, digits and underscores
    """
    if not isinstance(name, str) or not SAFE_IDENTIFIER.fullmatch(name):
        raise InvalidIdentifierError(str(name), kind)
    return name


def normalize_direction(direction: Optional[str]) -> str:
    """Map a client sort direction to ASC/DESC. Anything but "desc" sorts ascending."""
    if isinstance(direction, str) and direction.strip().lower() == "desc":
        return DESC
    return ASC


@dataclass(frozen=True)
class SortSpec:
    column: str
    direction: str = ASC

    def __post_init__(self):
        object.__setattr__(self, "direction", normalize_direction(self.direction))


@dataclass
class ViewRequest:
    """
    A declarative request for one page of a table.

    Blank filter values are dropped on construction, so ``filters`` only
    holds conditions that reach the WHERE clause.
    """
    table: str
    page: int = 1
    page_size: int = 20
    sort: Optional[SortSpec] = None
    filters: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise InvalidRequestError(f"Page must be a positive integer, got {self.page!r}")
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int) or self.page_size < 1:
            raise InvalidRequestError(f"Page size must be a positive integer, got {self.page_size!r}")
        self.filters = active_filters(self.filters or {})

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class BuiltStatement:
    text: str
    params: Tuple[Any, ...] = ()


def active_filters(filters: Mapping[str, Any]) -> Dict[str, str]:
    """Drop filter entries whose value is blank once trimmed."""
    return {
        column: value
        for column, value in filters.items()
        if value is not None and str(value).strip() != ""
    }


def escape_like(value: Any) -> str:
    """Escape LIKE wildcards so the value matches as a literal substring."""
    text = str(value)
    for special in (LIKE_ESCAPE, "%", "_"):
        text = text.replace(special, LIKE_ESCAPE + special)
    return text


def build_where_clause(filters: Mapping[str, str]) -> BuiltStatement:
    """
    Build the WHERE clause shared by the count and data statements.

    Each condition is a case-insensitive literal substring match:
    ``LOWER(column) LIKE LOWER(?) ESCAPE '!'`` bound to ``%value%`` with the
    value's ``%``, ``_`` and ``!`` escaped.

    Args:
        filters (Mapping[str, str]): Column to substring filters

    Returns:
        BuiltStatement: Clause text (empty when there are no conditions) and its parameters
    """
    conditions = []
    params = []
    for column, value in active_filters(filters).items():
        validate_identifier(column, "column")
        conditions.append(f"LOWER({column}) LIKE LOWER(?) ESCAPE '{LIKE_ESCAPE}'")
        params.append(f"%{escape_like(value)}%")

    if not conditions:
        return BuiltStatement("", ())
    return BuiltStatement("WHERE " + " AND ".join(conditions), tuple(params))


def build_order_clause(sort: Optional[SortSpec]) -> str:
    # No secondary key: rows with equal sort values keep storage order,
    # which is not guaranteed to be stable from one page to the next.
    if sort is None or not sort.column:
        return ""
    return f"ORDER BY {validate_identifier(sort.column, 'column')} {normalize_direction(sort.direction)}"


def build_statements(request: ViewRequest) -> Tuple[BuiltStatement, BuiltStatement]:
    """
    Build the count and data statements for a view request.

    Every identifier is validated before any text is produced, so an
    invalid request yields no statement at all.

    Args:
        request (ViewRequest): The page to fetch

    Returns:
        Tuple[BuiltStatement, BuiltStatement]: (count statement, data statement)

    Raises:
        InvalidIdentifierError: If the table, a filter column or the sort column is unsafe
    """
    table = validate_identifier(request.table, "table")
    where = build_where_clause(request.filters)
    order_by = build_order_clause(request.sort)

    count_parts = [f"SELECT COUNT(*) AS total FROM {table}"]
    data_parts = [f"SELECT * FROM {table}"]
    if where.text:
        count_parts.append(where.text)
        data_parts.append(where.text)
    if order_by:
        data_parts.append(order_by)
    data_parts.append("LIMIT ? OFFSET ?")

    count = BuiltStatement(" ".join(count_parts), where.params)
    data = BuiltStatement(" ".join(data_parts), where.params + (request.page_size, request.offset))
    return count, data


# Fixed introspection statements per SQL dialect; none of them takes user input.
_DATABASE_LISTING = {
    "mysql": "SHOW DATABASES",
    "postgresql": "SELECT datname AS database_name FROM pg_database WHERE NOT datistemplate ORDER BY datname",
    "sqlite": "SELECT name AS database_name FROM pragma_database_list",
}

_TABLE_LISTING = {
    "mysql": "SHOW TABLES",
    "postgresql": (
        "SELECT tablename AS table_name FROM pg_catalog.pg_tables "
        "WHERE schemaname = current_schema() ORDER BY tablename"
    ),
    "sqlite": (
        "SELECT name AS table_name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    ),
}


def list_databases_statement(dialect: str = "mysql") -> BuiltStatement:
    return BuiltStatement(_DATABASE_LISTING.get(dialect, _DATABASE_LISTING["mysql"]))


def list_tables_statement(dialect: str = "mysql") -> BuiltStatement:
    return BuiltStatement(_TABLE_LISTING.get(dialect, _TABLE_LISTING["mysql"]))
