from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from wardrobe_api.auth.gate import CredentialGate, Principal

bearer = HTTPBearer(auto_error=False)
admin_secret_header = APIKeyHeader(name="x-admin-secret", auto_error=False)


def get_gate(request: Request) -> CredentialGate:
    return request.app.state.container.gate


async def require_admin(
    secret: Optional[str] = Depends(admin_secret_header),
    gate: CredentialGate = Depends(get_gate),
) -> Principal:
    return gate.admit_admin(secret)


async def require_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    gate: CredentialGate = Depends(get_gate),
) -> Principal:
    return await gate.admit_bearer(creds)


async def require_user_or_admin(
    secret: Optional[str] = Depends(admin_secret_header),
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    gate: CredentialGate = Depends(get_gate),
) -> Principal:
    return await gate.admit_any(secret, creds)


def get_current_user_id(principal: Principal = Depends(require_user)) -> str:
    return principal.id
