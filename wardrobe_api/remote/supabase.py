"""
Supabase-backed remote service built on the official async SDK.

Table access goes through the PostgREST query builder and identity through
the GoTrue client; the only adapter code is the mapping from ``QuerySpec``
onto the builder and from SDK errors onto ``RemoteError``.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import httpx
from supabase import AsyncClient, AuthError, PostgrestAPIError, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from wardrobe_api.remote.types import AuthSession, AuthUser, Filter, QueryResult, QuerySpec, RemoteError

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Awaitable[AsyncClient]]

# Signing in on a client rebinds its table requests to the user's token,
# so table access, end-user auth and admin auth each get their own client.
DATA, AUTH, ADMIN = "data", "auth", "admin"


def _value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _apply_filters(query: Any, filters: Sequence[Filter]) -> Any:
    for f in filters:
        if f.op == "in":
            query = query.in_(f.column, [_value(v) for v in f.value])
        elif f.op == "is":
            query = query.is_(f.column, "null" if f.value is None else _value(f.value))
        else:
            query = getattr(query, f.op)(f.column, _value(f.value))
    return query


def _project(row: Dict[str, Any], columns: Sequence[str]) -> Dict[str, Any]:
    if not columns or "*" in columns:
        return row
    return {c: row.get(c) for c in columns}


def _user_from(user: Any) -> AuthUser:
    return AuthUser(id=str(user.id), email=user.email, user_metadata=dict(user.user_metadata or {}))


class SupabaseRemote:
    def __init__(
        self,
        url: str,
        api_key: str,
        service_role_key: str = "",
        *,
        timeout: float = 10.0,
        client_factory: ClientFactory = acreate_client,
    ) -> None:
        if not url or not api_key:
            raise ValueError(
                "Supabase configuration missing. Ensure SUPABASE_URL and SUPABASE_KEY are set in the environment/.env"
            )
        self._url = url
        self._api_key = api_key
        self._service_role_key = service_role_key
        self._timeout = timeout
        self._factory = client_factory
        self._clients: Dict[str, AsyncClient] = {}
        self._lock = asyncio.Lock()

    async def _client(self, role: str) -> AsyncClient:
        async with self._lock:
            if role not in self._clients:
                key = self._service_role_key if role == ADMIN else self._api_key
                options = AsyncClientOptions(
                    postgrest_client_timeout=self._timeout,
                    auto_refresh_token=False,
                    persist_session=False,
                )
                self._clients[role] = await self._factory(self._url, key, options=options)
            return self._clients[role]

    async def _execute(self, query: Any) -> Any:
        try:
            return await query.execute()
        except PostgrestAPIError as e:
            logger.info("supabase query failed: %s (%s)", e.message, e.code)
            raise RemoteError(e.message or str(e), code=e.code) from e
        except httpx.HTTPError as e:
            logger.warning("supabase transport error: %s", e)
            raise RemoteError(str(e) or type(e).__name__, code="network") from e

    async def _auth(self, call: Awaitable[Any]) -> Any:
        try:
            return await call
        except AuthError as e:
            code, status = getattr(e, "code", None), getattr(e, "status", None)
            logger.info("supabase auth call failed: %s (%s)", e.message, code)
            raise RemoteError(e.message, code=code, status=status) from e
        except httpx.HTTPError as e:
            logger.warning("supabase auth transport error: %s", e)
            raise RemoteError(str(e) or type(e).__name__, code="network") from e

    # --- data ---------------------------------------------------------------

    async def query_table(self, spec: QuerySpec) -> QueryResult:
        client = await self._client(DATA)
        query = client.table(spec.table).select(",".join(spec.columns), count="exact" if spec.count else None)
        query = _apply_filters(query, spec.filters)
        for o in spec.order:
            query = query.order(o.column, desc=not o.ascending)
        if spec.range is not None:
            query = query.range(*spec.range)
        resp = await self._execute(query)
        return QueryResult(rows=resp.data or [], count=resp.count if spec.count else None)

    async def insert(self, table: str, row: Dict[str, Any], *, columns: Sequence[str] = ("*",)) -> Dict[str, Any]:
        client = await self._client(DATA)
        resp = await self._execute(client.table(table).insert(row))
        if not resp.data:
            raise RemoteError(f"insert into {table} returned no row")
        return _project(resp.data[0], columns)

    async def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Sequence[Filter],
        *,
        columns: Sequence[str] = ("*",),
    ) -> List[Dict[str, Any]]:
        client = await self._client(DATA)
        resp = await self._execute(_apply_filters(client.table(table).update(values), filters))
        return [_project(r, columns) for r in resp.data or []]

    async def delete(self, table: str, filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        client = await self._client(DATA)
        resp = await self._execute(_apply_filters(client.table(table).delete(), filters))
        return resp.data or []

    async def call_function(self, name: str, params: Dict[str, Any]) -> Any:
        client = await self._client(DATA)
        resp = await self._execute(client.rpc(name, params))
        return resp.data

    # --- auth ---------------------------------------------------------------

    async def introspect_token(self, token: str) -> Optional[AuthUser]:
        client = await self._client(AUTH)
        try:
            resp = await self._auth(client.auth.get_user(token))
        except RemoteError as e:
            if e.status in (401, 403):
                return None
            raise
        user = resp.user if resp else None
        return _user_from(user) if user and user.id else None

    async def create_user(self, email: str, password: str, metadata: Dict[str, Any]) -> AuthUser:
        client = await self._client(AUTH)
        resp = await self._auth(
            client.auth.sign_up({"email": email, "password": password, "options": {"data": metadata}})
        )
        if not resp.user or not resp.user.id:
            raise RemoteError("signup returned no user")
        return _user_from(resp.user)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        client = await self._client(AUTH)
        resp = await self._auth(client.auth.sign_in_with_password({"email": email, "password": password}))
        if not resp.session or not resp.session.access_token or not resp.user:
            raise RemoteError("sign-in returned no session")
        return AuthSession(access_token=resp.session.access_token, user=_user_from(resp.user))

    async def admin_create_user(self, email: str, password: str, *, email_confirm: bool = True) -> AuthUser:
        if not self._service_role_key:
            raise RemoteError("SUPABASE_SERVICE_ROLE_KEY is not set")
        client = await self._client(ADMIN)
        resp = await self._auth(
            client.auth.admin.create_user({"email": email, "password": password, "email_confirm": email_confirm})
        )
        return _user_from(resp.user)

    async def aclose(self) -> None:
        data = self._clients.pop(DATA, None)
        if data is not None:
            await data.postgrest.aclose()
        self._clients.clear()
