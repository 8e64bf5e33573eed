import logging
from typing import Dict, Optional

from wardrobe_api.core.errors import InternalError, ValidationFailed
from wardrobe_api.remote.base import RemoteService
from wardrobe_api.remote.types import RemoteError

logger = logging.getLogger(__name__)


class AdminUserService:
    def __init__(self, remote: RemoteService) -> None:
        self._remote = remote

    async def create_user(self, email: str, password: str) -> Dict[str, Optional[str]]:
        try:
            user = await self._remote.admin_create_user(email, password, email_confirm=True)
        except RemoteError as e:
            msg = e.message or "Failed to create user"
            lowered = msg.lower()
            if "duplicate" in lowered or "already registered" in lowered or "already been registered" in lowered:
                raise ValidationFailed("User with this email already exists") from e
            logger.error("admin user creation failed: %s", msg)
            raise InternalError(msg) from e
        logger.info("admin created user %s", user.id)
        return {"id": user.id, "email": user.email}
