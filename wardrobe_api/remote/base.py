from typing import Any, Dict, List, Optional, Protocol, Sequence

from wardrobe_api.remote.types import AuthSession, AuthUser, Filter, QueryResult, QuerySpec


class RemoteService(Protocol):
    async def query_table(self, spec: QuerySpec) -> QueryResult:
        ...

    async def insert(self, table: str, row: Dict[str, Any], *, columns: Sequence[str] = ("*",)) -> Dict[str, Any]:
        ...

    async def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Sequence[Filter],
        *,
        columns: Sequence[str] = ("*",),
    ) -> List[Dict[str, Any]]:
        ...

    async def delete(self, table: str, filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        ...

    async def call_function(self, name: str, params: Dict[str, Any]) -> Any:
        ...

    async def introspect_token(self, token: str) -> Optional[AuthUser]:
        ...

    async def create_user(self, email: str, password: str, metadata: Dict[str, Any]) -> AuthUser:
        ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        ...

    async def admin_create_user(self, email: str, password: str, *, email_confirm: bool = True) -> AuthUser:
        ...

    async def aclose(self) -> None:
        ...
