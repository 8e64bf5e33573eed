"""
In-process stand-in for the hosted data/auth platform.

Keeps the schema's uniqueness and foreign-key constraints and reports
violations with the same Postgres error codes the real platform returns,
so services behave identically against either backend.
"""
import re
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from wardrobe_api.remote.types import (
    FOREIGN_KEY_VIOLATION_CODE,
    UNIQUE_VIOLATION_CODE,
    AuthSession,
    AuthUser,
    Filter,
    QueryResult,
    QuerySpec,
    RemoteError,
)


@dataclass(frozen=True)
class TableSchema:
    unique: Tuple[Tuple[str, ...], ...] = ()
    unique_ci: Tuple[str, ...] = ()
    foreign_keys: Dict[str, str] = field(default_factory=dict)
    cascade_from: Dict[str, str] = field(default_factory=dict)
    defaults: Dict[str, Any] = field(default_factory=dict)
    timestamps: bool = False


SCHEMA: Dict[str, TableSchema] = {
    "profiles": TableSchema(unique=(("username",),), timestamps=True),
    "item_categories": TableSchema(unique_ci=("name",), defaults={"is_required": False}),
    "styles": TableSchema(unique_ci=("name",)),
    "wardrobe_items": TableSchema(
        foreign_keys={"category_id": "item_categories"},
        defaults={"brand": None},
        timestamps=True,
    ),
    "creations": TableSchema(
        unique=(("user_id", "name"),),
        foreign_keys={"style_id": "styles"},
        defaults={"status": "pending"},
        timestamps=True,
    ),
    "creation_items": TableSchema(
        unique=(("creation_id", "item_id"),),
        foreign_keys={"creation_id": "creations", "item_id": "wardrobe_items"},
        cascade_from={"creation_id": "creations", "item_id": "wardrobe_items"},
    ),
}


def _like_regex(pattern: str) -> re.Pattern:
    out = []
    for ch in pattern:
        if ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
    return re.compile("".join(out), re.IGNORECASE | re.DOTALL)


def _matches(row: Dict[str, Any], f: Filter) -> bool:
    value = row.get(f.column)
    if f.op == "eq":
        return value == f.value
    if f.op == "neq":
        return value != f.value
    if f.op == "ilike":
        return value is not None and _like_regex(str(f.value)).fullmatch(str(value)) is not None
    if f.op == "in":
        return value in set(f.value)
    if f.op == "is":
        return value is f.value
    raise RemoteError(f"unsupported filter operator {f.op}", code="PGRST100")


def _project(row: Dict[str, Any], columns: Sequence[str]) -> Dict[str, Any]:
    if not columns or "*" in columns:
        return dict(row)
    return {c: row.get(c) for c in columns}


def _sort_key(column: str) -> Callable[[Dict[str, Any]], Tuple[bool, Any]]:
    def key(row: Dict[str, Any]) -> Tuple[bool, Any]:
        value = row.get(column)
        if value is None:
            return (True, "")
        return (False, value.lower() if isinstance(value, str) else value)

    return key


def default_can_add_to_creation(remote: "InMemoryRemote", params: Dict[str, Any]) -> bool:
    creation = remote.get_row("creations", params.get("p_creation_id"))
    item = remote.get_row("wardrobe_items", params.get("p_item_id"))
    if not creation or not item:
        return False
    return creation["user_id"] == item["user_id"]


class InMemoryRemote:
    def __init__(self) -> None:
        self._tables: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in SCHEMA}
        self._users: Dict[str, Dict[str, Any]] = {}
        self._tokens: Dict[str, str] = {}
        self._functions: Dict[str, Callable[["InMemoryRemote", Dict[str, Any]], Any]] = {
            "can_add_to_creation": default_can_add_to_creation,
        }
        self._last_ts: Optional[datetime] = None

    # --- helpers ------------------------------------------------------------

    def _now(self) -> str:
        now = datetime.now(timezone.utc)
        if self._last_ts is not None and now <= self._last_ts:
            now = self._last_ts + timedelta(microseconds=1)
        self._last_ts = now
        return now.isoformat()

    def _table(self, name: str) -> Dict[str, Dict[str, Any]]:
        if name not in self._tables:
            raise RemoteError(f'relation "public.{name}" does not exist', code="42P01", status=404)
        return self._tables[name]

    def get_row(self, table: str, row_id: Any) -> Optional[Dict[str, Any]]:
        return self._table(table).get(row_id)

    def register_function(self, name: str, fn: Callable[["InMemoryRemote", Dict[str, Any]], Any]) -> None:
        self._functions[name] = fn

    def _check_constraints(self, table: str, row: Dict[str, Any]) -> None:
        schema = SCHEMA[table]
        others = [r for r in self._tables[table].values() if r["id"] != row["id"]]
        for cols in schema.unique:
            key = tuple(row.get(c) for c in cols)
            if any(tuple(o.get(c) for c in cols) == key for o in others):
                raise RemoteError(
                    f'duplicate key value violates unique constraint "{table}_{"_".join(cols)}_key"',
                    code=UNIQUE_VIOLATION_CODE,
                    status=409,
                )
        for col in schema.unique_ci:
            value = (row.get(col) or "").lower()
            if any((o.get(col) or "").lower() == value for o in others):
                raise RemoteError(
                    f'duplicate key value violates unique constraint "{table}_{col}_lower_idx"',
                    code=UNIQUE_VIOLATION_CODE,
                    status=409,
                )
        for col, ref in schema.foreign_keys.items():
            if row.get(col) is not None and row[col] not in self._tables[ref]:
                raise RemoteError(
                    f'insert or update on table "{table}" violates foreign key constraint "{table}_{col}_fkey"',
                    code=FOREIGN_KEY_VIOLATION_CODE,
                    status=409,
                )

    def _cascade(self, table: str, removed_ids: List[str]) -> None:
        for child, schema in SCHEMA.items():
            for col, parent in schema.cascade_from.items():
                if parent != table:
                    continue
                rows = self._tables[child]
                for rid in [r["id"] for r in rows.values() if r.get(col) in removed_ids]:
                    rows.pop(rid, None)

    # --- data ---------------------------------------------------------------

    async def query_table(self, spec: QuerySpec) -> QueryResult:
        rows = [r for r in self._table(spec.table).values() if all(_matches(r, f) for f in spec.filters)]
        for o in reversed(spec.order):
            rows.sort(key=_sort_key(o.column), reverse=not o.ascending)
        total = len(rows) if spec.count else None
        if spec.range is not None:
            start, end = spec.range
            rows = rows[start : end + 1]
        return QueryResult(rows=[_project(r, spec.columns) for r in rows], count=total)

    async def insert(self, table: str, row: Dict[str, Any], *, columns: Sequence[str] = ("*",)) -> Dict[str, Any]:
        rows = self._table(table)
        schema = SCHEMA[table]
        new = {**schema.defaults, **row}
        new.setdefault("id", str(uuid.uuid4()))
        if schema.timestamps:
            now = self._now()
            new.setdefault("created_at", now)
            new.setdefault("updated_at", now)
        self._check_constraints(table, new)
        rows[new["id"]] = new
        return _project(new, columns)

    async def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Sequence[Filter],
        *,
        columns: Sequence[str] = ("*",),
    ) -> List[Dict[str, Any]]:
        rows = self._table(table)
        targets = [r for r in rows.values() if all(_matches(r, f) for f in filters)]
        updated = []
        for current in targets:
            candidate = {**current, **values}
            self._check_constraints(table, candidate)
            updated.append(candidate)
        for candidate in updated:
            rows[candidate["id"]] = candidate
        return [_project(r, columns) for r in updated]

    async def delete(self, table: str, filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        rows = self._table(table)
        removed = [rows.pop(r["id"]) for r in list(rows.values()) if all(_matches(r, f) for f in filters)]
        self._cascade(table, [r["id"] for r in removed])
        return removed

    async def call_function(self, name: str, params: Dict[str, Any]) -> Any:
        fn = self._functions.get(name)
        if fn is None:
            raise RemoteError(f"Could not find the function public.{name}", code="PGRST202", status=404)
        return fn(self, params)

    # --- auth ---------------------------------------------------------------

    def _auth_user(self, data: Dict[str, Any]) -> AuthUser:
        return AuthUser(id=data["id"], email=data["email"], user_metadata=dict(data["metadata"]))

    def _register(self, email: str, password: str, metadata: Dict[str, Any], exists_message: str) -> AuthUser:
        key = email.lower()
        if key in self._users:
            raise RemoteError(exists_message, code="user_already_exists", status=422)
        if len(password or "") < 6:
            raise RemoteError("Password should be at least 6 characters.", code="weak_password", status=422)
        data = {"id": str(uuid.uuid4()), "email": email, "password": password, "metadata": dict(metadata)}
        self._users[key] = data
        return self._auth_user(data)

    async def introspect_token(self, token: str) -> Optional[AuthUser]:
        user_id = self._tokens.get(token)
        if user_id is None:
            return None
        data = next((u for u in self._users.values() if u["id"] == user_id), None)
        return self._auth_user(data) if data else None

    async def create_user(self, email: str, password: str, metadata: Dict[str, Any]) -> AuthUser:
        return self._register(email, password, metadata, "User already registered")

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = self._users.get((email or "").lower())
        if not data or not secrets.compare_digest(data["password"].encode(), (password or "").encode()):
            raise RemoteError("Invalid login credentials", code="invalid_credentials", status=400)
        token = secrets.token_urlsafe(32)
        self._tokens[token] = data["id"]
        return AuthSession(access_token=token, user=self._auth_user(data))

    async def admin_create_user(self, email: str, password: str, *, email_confirm: bool = True) -> AuthUser:
        return self._register(email, password, {}, "A user with this email address has already been registered")

    async def aclose(self) -> None:
        return None
