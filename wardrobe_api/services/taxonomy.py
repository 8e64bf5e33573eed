"""
Admin-managed reference data: item categories and styles.

Both tables share one shape (``name`` unique case-insensitively, plus a
``display_name``), so a single registry serves both; categories add the
``is_required`` flag that gates creation generation.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from wardrobe_api.core.errors import Conflict, InternalError, NotFound, ValidationFailed
from wardrobe_api.remote.base import RemoteService
from wardrobe_api.remote.types import Filter, Order, QuerySpec, RemoteError
from wardrobe_api.services.common import remote_call

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxonomyKind:
    table: str
    columns: Tuple[str, ...]
    label: str
    id_label: str
    plural: str
    has_required: bool = False


CATEGORIES = TaxonomyKind(
    table="item_categories",
    columns=("id", "name", "display_name", "is_required"),
    label="Category",
    id_label="Item category",
    plural="item categories",
    has_required=True,
)
STYLES = TaxonomyKind(
    table="styles",
    columns=("id", "name", "display_name"),
    label="Style",
    id_label="Style",
    plural="styles",
)


class TaxonomyRegistry:
    def __init__(self, remote: RemoteService, kind: TaxonomyKind) -> None:
        self._remote = remote
        self.kind = kind

    def _spec(self) -> QuerySpec:
        return QuerySpec(table=self.kind.table, columns=self.kind.columns)

    def _taken(self, name: str) -> Conflict:
        return Conflict(f"{self.kind.label} with name '{name}' already exists")

    async def list_all(self) -> List[Dict[str, Any]]:
        spec = QuerySpec(
            table=self.kind.table, columns=self.kind.columns, order=(Order("display_name", ascending=True),)
        )
        res = await remote_call(self._remote.query_table(spec), f"Failed to fetch {self.kind.plural}")
        if not res.rows:
            raise NotFound(f"No {self.kind.plural} found")
        return res.rows

    async def get(self, row_id: str) -> Optional[Dict[str, Any]]:
        res = await remote_call(
            self._remote.query_table(self._spec().where("id", "eq", row_id)),
            f"Failed to fetch {self.kind.id_label.lower()}",
        )
        return res.first()

    async def list_where(self, column: str, value: Any) -> List[Dict[str, Any]]:
        res = await remote_call(
            self._remote.query_table(self._spec().where(column, "eq", value)),
            f"Failed to fetch {self.kind.plural}",
        )
        return res.rows

    async def _name_taken(self, name: str, *, exclude_id: Optional[str] = None) -> bool:
        spec = QuerySpec(table=self.kind.table, columns=("id",)).where("name", "ilike", name)
        if exclude_id:
            spec = spec.where("id", "neq", exclude_id)
        res = await remote_call(self._remote.query_table(spec), f"Failed to check existing {self.kind.plural}")
        return bool(res.rows)

    async def create(self, name: Optional[str], display_name: Optional[str], is_required: Optional[bool] = None) -> Dict[str, Any]:
        name = (name or "").strip()
        display_name = (display_name or "").strip()
        if not name or not display_name:
            raise ValidationFailed("name and display_name are required")
        if await self._name_taken(name):
            raise self._taken(name)

        row: Dict[str, Any] = {"name": name, "display_name": display_name}
        if self.kind.has_required:
            row["is_required"] = bool(is_required)
        try:
            created = await self._remote.insert(self.kind.table, row, columns=self.kind.columns)
        except RemoteError as e:
            if e.is_unique_violation:
                raise self._taken(name) from e
            logger.error("%s insert failed: %s", self.kind.table, e.message)
            raise InternalError(f"Failed to create {self.kind.id_label.lower()}") from e
        logger.info("created %s %s (%s)", self.kind.id_label.lower(), created.get("id"), name)
        return created

    async def update(self, row_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        existing = await self.get(row_id)
        if existing is None:
            raise NotFound(f"{self.kind.id_label} with id {row_id} not found")

        changes: Dict[str, Any] = {}
        if isinstance(fields.get("name"), str):
            name = fields["name"].strip()
            if not name:
                raise ValidationFailed("name cannot be empty")
            if name != existing["name"] and await self._name_taken(name, exclude_id=row_id):
                raise self._taken(name)
            changes["name"] = name
        if isinstance(fields.get("display_name"), str):
            display = fields["display_name"].strip()
            if not display:
                raise ValidationFailed("display_name cannot be empty")
            changes["display_name"] = display
        if self.kind.has_required and isinstance(fields.get("is_required"), bool):
            changes["is_required"] = fields["is_required"]

        if not changes:
            return existing

        try:
            rows = await self._remote.update(
                self.kind.table, changes, [Filter("id", "eq", row_id)], columns=self.kind.columns
            )
        except RemoteError as e:
            if e.is_unique_violation:
                raise Conflict(f"{self.kind.label} name already exists") from e
            logger.error("%s update failed: %s", self.kind.table, e.message)
            raise InternalError(f"Failed to update {self.kind.id_label.lower()}") from e
        if not rows:
            raise NotFound(f"{self.kind.id_label} with id {row_id} not found")
        return rows[0]
