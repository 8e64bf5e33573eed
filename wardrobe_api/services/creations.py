"""
Creation workflow: manual creations, proposal generation, item links and the
pending -> accepted / pending -> rejected transitions.

Multi-step operations issue sequential remote calls without a transaction;
a failure part-way leaves the rows written so far in place.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from wardrobe_api.core.errors import AppError, Conflict, Forbidden, InternalError, NotFound, ValidationFailed
from wardrobe_api.core.pagination import page_window
from wardrobe_api.generation.base import CreationProposer
from wardrobe_api.generation.types import CreationProposal, ProposalRequest
from wardrobe_api.remote.base import RemoteService
from wardrobe_api.remote.types import Filter, Order, QuerySpec, RemoteError
from wardrobe_api.schemas.creations import CreationQuery
from wardrobe_api.services.common import remote_call, utcnow_iso
from wardrobe_api.services.taxonomy import TaxonomyRegistry
from wardrobe_api.services.wardrobe import ITEM_COLUMNS

logger = logging.getLogger(__name__)

CREATION_COLUMNS = ("id", "name", "image_path", "style_id", "status", "created_at", "updated_at", "user_id")
LINK_COLUMNS = ("id", "creation_id", "item_id")
PENDING, ACCEPTED, REJECTED = "pending", "accepted", "rejected"
NAME_TAKEN = "A creation with this name already exists for the user"
MAX_NAME_ATTEMPTS = 50


class CreationService:
    def __init__(
        self,
        remote: RemoteService,
        styles: TaxonomyRegistry,
        categories: TaxonomyRegistry,
        proposer: CreationProposer,
    ) -> None:
        self._remote = remote
        self._styles = styles
        self._categories = categories
        self._proposer = proposer

    # --- reads --------------------------------------------------------------

    async def list(self, user_id: str, query: CreationQuery) -> List[Dict[str, Any]]:
        spec = QuerySpec(
            table="creations",
            columns=CREATION_COLUMNS,
            order=(Order(query.sort_by, ascending=query.order == "asc"), Order("id")),
            range=page_window(query.page, query.limit),
        ).where("user_id", "eq", user_id)
        if query.status:
            spec = spec.where("status", "eq", query.status)
        if query.style_id:
            spec = spec.where("style_id", "eq", query.style_id)
        if query.search:
            spec = spec.where("name", "ilike", f"%{query.search}%")
        res = await remote_call(self._remote.query_table(spec), "Failed to list creations")
        return res.rows

    async def _fetch(self, creation_id: str) -> Optional[Dict[str, Any]]:
        spec = QuerySpec(table="creations", columns=CREATION_COLUMNS).where("id", "eq", creation_id)
        res = await remote_call(self._remote.query_table(spec), "Failed to fetch creation")
        return res.first()

    async def _owned_creation(self, creation_id: str, user_id: str) -> Dict[str, Any]:
        creation = await self._fetch(creation_id)
        if creation is None or creation["user_id"] != user_id:
            raise NotFound("Creation not found")
        return creation

    async def _name_taken(self, user_id: str, name: str) -> bool:
        spec = (
            QuerySpec(table="creations", columns=("id",), range=(0, 0))
            .where("user_id", "eq", user_id)
            .where("name", "eq", name)
        )
        res = await remote_call(self._remote.query_table(spec), "Failed to verify creation name uniqueness")
        return bool(res.rows)

    async def _require_style(self, style_id: str) -> Dict[str, Any]:
        style = await self._styles.get(style_id)
        if style is None:
            raise NotFound(f"Style with id {style_id} not found")
        return style

    # --- manual creation ----------------------------------------------------

    async def create_manual(self, user_id: str, style_id: str, name: str, image_path: str) -> Dict[str, Any]:
        name = (name or "").strip()
        if not name:
            raise ValidationFailed("name is required")
        if await self._name_taken(user_id, name):
            raise Conflict(NAME_TAKEN)
        await self._require_style(style_id)
        try:
            return await self._insert_creation(user_id, style_id, name, image_path)
        except RemoteError as e:
            if e.is_unique_violation:
                raise Conflict(NAME_TAKEN) from e
            logger.error("creation insert failed: %s", e.message)
            raise InternalError("Failed to create the creation") from e

    async def _insert_creation(self, user_id: str, style_id: str, name: str, image_path: str) -> Dict[str, Any]:
        row = {"name": name, "image_path": image_path, "style_id": style_id, "user_id": user_id, "status": PENDING}
        return await self._remote.insert("creations", row, columns=CREATION_COLUMNS)

    # --- generation ---------------------------------------------------------

    async def missing_required_categories(self, user_id: str) -> List[Dict[str, Any]]:
        required = await self._categories.list_where("is_required", True)
        spec = QuerySpec(table="wardrobe_items", columns=("category_id",)).where("user_id", "eq", user_id)
        res = await remote_call(self._remote.query_table(spec), "Failed to fetch user wardrobe items")
        owned = {row["category_id"] for row in res.rows}
        return [c for c in required if c["id"] not in owned]

    async def generate(self, user_id: str, style_id: str) -> List[Dict[str, Any]]:
        style = await self._require_style(style_id)

        missing = await self.missing_required_categories(user_id)
        if missing:
            names = ", ".join(c["display_name"] for c in missing)
            raise ValidationFailed(f"Missing required wardrobe items: {names}")

        try:
            items = await self._user_items(user_id)
            proposals = await self._proposer.propose(
                ProposalRequest(user_id=user_id, style_id=style_id, style=style, items=items)
            )
            created = [await self._persist_proposal(user_id, style_id, p) for p in proposals]
        except (RemoteError, InternalError) as e:
            logger.error("generation for user %s failed: %s", user_id, e)
            raise InternalError("An error occurred while generating creations") from e
        except AppError:
            raise
        except Exception as e:
            logger.exception("creation proposer failed for user %s", user_id)
            raise InternalError("An error occurred while generating creations") from e

        logger.info("generated %d creations for user %s (style %s)", len(created), user_id, style_id)
        return created

    async def _user_items(self, user_id: str) -> List[Dict[str, Any]]:
        spec = QuerySpec(table="wardrobe_items", columns=ITEM_COLUMNS).where("user_id", "eq", user_id)
        res = await remote_call(self._remote.query_table(spec), "Failed to fetch wardrobe items")
        return res.rows

    async def _free_name(self, user_id: str, name: str) -> str:
        candidate = name
        for n in range(2, MAX_NAME_ATTEMPTS + 2):
            if not await self._name_taken(user_id, candidate):
                return candidate
            candidate = f"{name} ({n})"
        raise InternalError("Unable to allocate a creation name")

    async def _persist_proposal(self, user_id: str, style_id: str, proposal: CreationProposal) -> Dict[str, Any]:
        name = await self._free_name(user_id, proposal.name)
        creation = await self._insert_creation(user_id, style_id, name, proposal.image_path)
        for item_id in proposal.item_ids:
            await self._remote.insert(
                "creation_items", {"creation_id": creation["id"], "item_id": item_id}, columns=LINK_COLUMNS
            )
        return creation

    # --- transitions --------------------------------------------------------

    async def _transition(self, creation_id: str, user_id: str, status: str, verb: str) -> None:
        creation = await self._fetch(creation_id)
        if creation is None:
            raise NotFound(f"Creation with id {creation_id} not found")
        if creation["user_id"] != user_id:
            raise ValidationFailed(f"You do not have permission to {verb} this creation")
        if creation["status"] != PENDING:
            raise Conflict(f"Creation is already {creation['status']}")

        rows = await remote_call(
            self._remote.update(
                "creations",
                {"status": status, "updated_at": utcnow_iso()},
                [Filter("id", "eq", creation_id), Filter("status", "eq", PENDING)],
                columns=("id", "status"),
            ),
            f"Failed to {verb} the creation",
        )
        if not rows:
            raise Conflict("Creation is no longer pending")
        logger.info("user %s marked creation %s as %s", user_id, creation_id, status)

    async def accept(self, creation_id: str, user_id: str) -> None:
        await self._transition(creation_id, user_id, ACCEPTED, "accept")

    async def reject(self, creation_id: str, user_id: str) -> None:
        await self._transition(creation_id, user_id, REJECTED, "reject")

    # --- item links ---------------------------------------------------------

    async def list_items(
        self,
        creation_id: str,
        user_id: str,
        *,
        page: int = 1,
        limit: int = 20,
        expand: Optional[str] = None,
        include_total: bool = False,
    ) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        await self._owned_creation(creation_id, user_id)

        spec = QuerySpec(
            table="creation_items",
            columns=LINK_COLUMNS,
            order=(Order("id"),),
            range=page_window(page, limit),
            count=include_total,
        ).where("creation_id", "eq", creation_id)
        res = await remote_call(self._remote.query_table(spec), "Failed to list creation items")
        links = res.rows
        total = (res.count if res.count is not None else len(links)) if include_total else None

        if expand == "item" and links:
            item_spec = (
                QuerySpec(table="wardrobe_items", columns=ITEM_COLUMNS)
                .where("id", "in", [link["item_id"] for link in links])
                .where("user_id", "eq", user_id)
            )
            items = await remote_call(self._remote.query_table(item_spec), "Failed to expand wardrobe items")
            by_id = {it["id"]: it for it in items.rows}
            links = [{**link, "item": by_id.get(link["item_id"])} for link in links]
        return links, total

    async def add_item(self, creation_id: str, item_id: str, user_id: str) -> Dict[str, Any]:
        await self._owned_creation(creation_id, user_id)

        spec = (
            QuerySpec(table="wardrobe_items", columns=("id", "user_id"))
            .where("id", "eq", item_id)
            .where("user_id", "eq", user_id)
        )
        res = await remote_call(self._remote.query_table(spec), "Failed to verify wardrobe item ownership")
        if res.first() is None:
            raise NotFound("Wardrobe item not found")

        can_add = await remote_call(
            self._remote.call_function("can_add_to_creation", {"p_creation_id": creation_id, "p_item_id": item_id}),
            "Failed to validate relation",
        )
        if not can_add:
            raise Forbidden("Item cannot be added to this creation")

        try:
            return await self._remote.insert(
                "creation_items", {"creation_id": creation_id, "item_id": item_id}, columns=LINK_COLUMNS
            )
        except RemoteError as e:
            if e.is_unique_violation:
                raise Conflict("This item is already added to the creation") from e
            logger.error("creation item insert failed: %s", e.message)
            raise InternalError("Failed to add item to creation") from e
