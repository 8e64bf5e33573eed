"""
Profile lifecycle: signup, login, username allocation and self-or-admin
profile access.

Every authenticated principal owns exactly one ``profiles`` row keyed by the
principal id. Rows are created on signup, or lazily on the first login of an
account that pre-dates its profile.
"""
import logging
import re
from typing import Any, Dict, Optional

from wardrobe_api.auth.access import allow
from wardrobe_api.auth.gate import Principal
from wardrobe_api.core.errors import (
    Conflict,
    Forbidden,
    InternalError,
    NotFound,
    Unauthenticated,
    UsernameAllocationError,
    ValidationFailed,
)
from wardrobe_api.remote.base import RemoteService
from wardrobe_api.remote.types import Filter, QuerySpec, RemoteError
from wardrobe_api.services.common import remote_call, utcnow_iso

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = ("id", "username", "created_at", "updated_at")
USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
USERNAME_MIN, USERNAME_MAX = 3, 30
INVALID_LOGIN = "Invalid email or password"


def username_from_email(email: str) -> str:
    base = re.sub(r"[^A-Za-z0-9_]", "_", email.split("@")[0])
    return base if len(base) >= USERNAME_MIN else f"{base}_user"


def _check_username(username: str) -> None:
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        raise ValidationFailed(f"username must be between {USERNAME_MIN} and {USERNAME_MAX} characters")
    if not USERNAME_RE.match(username):
        raise ValidationFailed("username can only contain letters, numbers and underscores")


class ProfileService:
    def __init__(self, remote: RemoteService, *, max_username_attempts: int = 50) -> None:
        self._remote = remote
        self._max_attempts = max_username_attempts

    async def username_exists(self, username: str, *, exclude_id: Optional[str] = None) -> bool:
        spec = QuerySpec(table="profiles", columns=("id",), range=(0, 0)).where("username", "eq", username)
        if exclude_id:
            spec = spec.where("id", "neq", exclude_id)
        res = await remote_call(self._remote.query_table(spec), "Failed to validate username uniqueness")
        return bool(res.rows)

    async def ensure_unique_username(self, base: str) -> str:
        candidate = base
        for suffix in range(1, self._max_attempts + 1):
            if not await self.username_exists(candidate):
                return candidate
            candidate = f"{base}{suffix}"
        raise UsernameAllocationError()

    async def fetch_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        spec = QuerySpec(table="profiles", columns=PROFILE_COLUMNS).where("id", "eq", user_id)
        res = await remote_call(self._remote.query_table(spec), "Failed to fetch user profile")
        return res.first()

    async def ensure_profile(self, user_id: str, username: str) -> Dict[str, Any]:
        existing = await self.fetch_profile(user_id)
        if existing:
            return existing
        try:
            return await self._remote.insert(
                "profiles", {"id": user_id, "username": username}, columns=PROFILE_COLUMNS
            )
        except RemoteError as e:
            # Lost a race with a concurrent request creating the same profile.
            if e.is_unique_violation:
                raced = await self.fetch_profile(user_id)
                if raced:
                    return raced
            logger.error("profile insert for %s failed: %s", user_id, e.message)
            raise InternalError("Failed to create user profile") from e

    async def signup(self, email: str, password: str, username: Optional[str] = None) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationFailed("Email and password are required")

        chosen = (username or "").strip()
        if chosen:
            _check_username(chosen)
        else:
            chosen = username_from_email(email)
        chosen = await self.ensure_unique_username(chosen)

        try:
            user = await self._remote.create_user(email, password, {"username": chosen})
        except RemoteError as e:
            # Already registered, weak password, ...
            raise ValidationFailed(e.message) from e
        if not user.id:
            raise InternalError("User registration failed: missing user ID")

        logger.info("registered user %s as %s", user.id, chosen)
        return await self.ensure_profile(user.id, chosen)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationFailed("Email and password are required")
        try:
            session = await self._remote.sign_in_with_password(email, password)
        except RemoteError as e:
            logger.info("login rejected: %s", e.code)
            raise Unauthenticated(INVALID_LOGIN) from e
        if not session.access_token or not session.user.id:
            raise Unauthenticated(INVALID_LOGIN)

        profile = await self.fetch_profile(session.user.id)
        if profile is None:
            username = await self.ensure_unique_username(username_from_email(email))
            profile = await self.ensure_profile(session.user.id, username)
        return {"access_token": session.access_token, "profile": profile}

    async def get_profile(self, target_user_id: str, principal: Principal) -> Dict[str, Any]:
        if not allow(principal, target_user_id):
            raise Forbidden("You can only access your own profile")
        profile = await self.fetch_profile(target_user_id)
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    async def update_profile(
        self, target_user_id: str, principal: Principal, username: Optional[str] = None
    ) -> Dict[str, Any]:
        if not allow(principal, target_user_id):
            raise Forbidden("You can only update your own profile")
        if username is None:
            raise ValidationFailed("No fields provided for update")

        username = username.strip()
        _check_username(username)
        if await self.username_exists(username, exclude_id=target_user_id):
            raise Conflict("Username is already taken")

        try:
            rows = await self._remote.update(
                "profiles",
                {"username": username, "updated_at": utcnow_iso()},
                [Filter("id", "eq", target_user_id)],
                columns=PROFILE_COLUMNS,
            )
        except RemoteError as e:
            if e.is_unique_violation:
                raise Conflict("Username is already taken") from e
            logger.error("profile update for %s failed: %s", target_user_id, e.message)
            raise InternalError("Failed to update profile") from e
        if not rows:
            raise NotFound("Profile not found")
        return rows[0]
