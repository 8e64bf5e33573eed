import logging
from typing import Any, Dict, List, Optional

from wardrobe_api.core.errors import InternalError, NotFound, ValidationFailed
from wardrobe_api.core.pagination import page_window
from wardrobe_api.remote.base import RemoteService
from wardrobe_api.remote.types import Filter, Order, QuerySpec, RemoteError
from wardrobe_api.schemas.wardrobe import WardrobeItemQuery
from wardrobe_api.services.common import remote_call, utcnow_iso

logger = logging.getLogger(__name__)

ITEM_COLUMNS = ("id", "user_id", "category_id", "name", "color", "brand", "created_at", "updated_at")
EDITABLE_FIELDS = ("category_id", "name", "color", "brand")


def _clean(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


class WardrobeService:
    def __init__(self, remote: RemoteService) -> None:
        self._remote = remote

    async def list(self, user_id: str, query: WardrobeItemQuery) -> List[Dict[str, Any]]:
        spec = QuerySpec(
            table="wardrobe_items",
            columns=ITEM_COLUMNS,
            order=(Order(query.sort_by, ascending=query.order == "asc"), Order("id")),
            range=page_window(query.page, query.limit),
        ).where("user_id", "eq", user_id)
        if query.category_id:
            spec = spec.where("category_id", "eq", query.category_id)
        if query.color:
            spec = spec.where("color", "ilike", f"%{query.color}%")
        if query.brand:
            spec = spec.where("brand", "ilike", f"%{query.brand}%")
        res = await remote_call(self._remote.query_table(spec), "Failed to fetch wardrobe items")
        return res.rows

    async def create(
        self,
        user_id: str,
        category_id: Optional[str],
        name: Optional[str],
        color: Optional[str],
        brand: Optional[str] = None,
    ) -> Dict[str, Any]:
        name, color = _clean(name), _clean(color)
        if not category_id or not name or not color:
            raise ValidationFailed("category_id, name and color are required")
        row = {
            "user_id": user_id,
            "category_id": str(category_id),
            "name": name,
            "color": color,
            "brand": _clean(brand) or None,
        }
        # An unknown category is reported like any other write failure.
        return await remote_call(
            self._remote.insert("wardrobe_items", row, columns=ITEM_COLUMNS), "Failed to create wardrobe item"
        )

    async def get_owned(self, user_id: str, item_id: str) -> Dict[str, Any]:
        """Existing item owned by ``user_id``; someone else's item is reported as missing."""
        spec = QuerySpec(table="wardrobe_items", columns=ITEM_COLUMNS).where("id", "eq", item_id)
        res = await remote_call(self._remote.query_table(spec), "Failed to fetch wardrobe item")
        item = res.first()
        if item is None or item["user_id"] != user_id:
            raise NotFound(f"Wardrobe item with id {item_id} not found")
        return item

    async def update(self, user_id: str, item_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        current = await self.get_owned(user_id, item_id)

        changes = {}
        for key in EDITABLE_FIELDS:
            value = fields.get(key)
            if isinstance(value, str):
                changes[key] = value.strip()
            elif value is not None:
                changes[key] = str(value)
        for key in ("name", "color"):
            if key in changes and not changes[key]:
                raise ValidationFailed(f"{key} cannot be empty")
        if "brand" in changes:
            changes["brand"] = changes["brand"] or None
        if not changes:
            return current

        changes["updated_at"] = utcnow_iso()
        try:
            rows = await self._remote.update(
                "wardrobe_items",
                changes,
                [Filter("id", "eq", item_id), Filter("user_id", "eq", user_id)],
                columns=ITEM_COLUMNS,
            )
        except RemoteError as e:
            logger.error("wardrobe item %s update failed: %s", item_id, e.message)
            raise InternalError("Failed to update wardrobe item") from e
        if not rows:
            raise NotFound(f"Wardrobe item with id {item_id} not found")
        return rows[0]

    async def remove(self, user_id: str, item_id: str) -> None:
        await self.get_owned(user_id, item_id)
        await remote_call(
            self._remote.delete(
                "wardrobe_items", [Filter("id", "eq", item_id), Filter("user_id", "eq", user_id)]
            ),
            "Failed to delete wardrobe item",
        )
        logger.info("user %s deleted wardrobe item %s", user_id, item_id)
