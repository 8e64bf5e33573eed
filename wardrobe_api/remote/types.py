from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

UNIQUE_VIOLATION_CODE = "23505"
FOREIGN_KEY_VIOLATION_CODE = "23503"

FilterOp = Literal["eq", "neq", "ilike", "in", "is"]


@dataclass(frozen=True)
class Filter:
    column: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class QuerySpec:
    """Typed description of a read against one table.

    ``range`` is an inclusive ``(from, to)`` row window; ``count`` asks the
    backend for the total number of rows matching the filters.
    """

    table: str
    columns: Sequence[str] = ("*",)
    filters: Sequence[Filter] = ()
    order: Sequence[Order] = ()
    range: Optional[Tuple[int, int]] = None
    count: bool = False

    def where(self, column: str, op: FilterOp, value: Any) -> "QuerySpec":
        return QuerySpec(
            table=self.table,
            columns=self.columns,
            filters=(*self.filters, Filter(column, op, value)),
            order=self.order,
            range=self.range,
            count=self.count,
        )


@dataclass(frozen=True)
class QueryResult:
    rows: List[Dict[str, Any]]
    count: Optional[int] = None

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user: AuthUser


class RemoteError(Exception):
    """Failure reported by the data/auth platform.

    ``code`` is the Postgres SQLSTATE (e.g. ``23505``) or the auth error code
    when the platform supplies one.
    """

    def __init__(self, message: str, *, code: Optional[str] = None, status: Optional[int] = None):
        self.message = message
        self.code = code
        self.status = status
        super().__init__(message)

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION_CODE
