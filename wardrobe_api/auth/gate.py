import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi.security import HTTPAuthorizationCredentials

from wardrobe_api.core.errors import Forbidden, Unauthenticated
from wardrobe_api.remote.base import RemoteService
from wardrobe_api.remote.types import RemoteError

logger = logging.getLogger(__name__)

INVALID_TOKEN = "Invalid or expired token"
INVALID_CREDENTIALS = "Unauthorized: missing or invalid credentials"


@dataclass(frozen=True)
class Principal:
    id: Optional[str]
    email: Optional[str] = None
    is_admin: bool = False


ADMIN = Principal(id=None, email=None, is_admin=True)


class CredentialGate:
    """Admits a request through the admin secret or a bearer token."""

    def __init__(self, remote: RemoteService, admin_secret: str) -> None:
        self._remote = remote
        self._admin_secret = admin_secret or ""

    def admit_admin(self, provided: Optional[str]) -> Principal:
        if not provided:
            raise Unauthenticated("Missing x-admin-secret header")
        if not self._admin_secret:
            raise Forbidden("Server misconfiguration: admin secret is not set")
        if not hmac.compare_digest(provided.encode(), self._admin_secret.encode()):
            raise Forbidden("Invalid admin secret")
        return ADMIN

    async def admit_bearer(self, creds: Optional[HTTPAuthorizationCredentials]) -> Principal:
        if creds is None:
            raise Unauthenticated("Missing Authorization header")
        token = creds.credentials
        if creds.scheme.lower() != "bearer" or not token:
            raise Unauthenticated("Invalid Authorization header format. Expected: Bearer <token>")
        try:
            user = await self._remote.introspect_token(token)
        except RemoteError as e:
            logger.warning("token introspection failed: %s", e.message)
            raise Unauthenticated(INVALID_TOKEN) from e
        if user is None:
            raise Unauthenticated(INVALID_TOKEN)
        return Principal(id=user.id, email=user.email)

    async def admit_any(
        self, admin_secret: Optional[str], creds: Optional[HTTPAuthorizationCredentials]
    ) -> Principal:
        if admin_secret:
            try:
                return self.admit_admin(admin_secret)
            except (Unauthenticated, Forbidden):
                pass
        try:
            return await self.admit_bearer(creds)
        except Unauthenticated:
            raise Unauthenticated(INVALID_CREDENTIALS) from None
