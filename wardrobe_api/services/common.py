import logging
from datetime import datetime, timezone
from typing import Awaitable, TypeVar

from wardrobe_api.core.errors import InternalError
from wardrobe_api.remote.types import RemoteError

T = TypeVar("T")

logger = logging.getLogger("wardrobe_api.remote")


async def remote_call(call: Awaitable[T], failure: str) -> T:
    """Await a remote call, turning any platform error into a 500 with ``failure`` as message."""
    try:
        return await call
    except RemoteError as e:
        logger.error("%s: %s (code=%s)", failure, e.message, e.code)
        raise InternalError(failure) from e


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
