from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, UUID4

from wardrobe_api.core.pagination import DEFAULT_LIMIT, MAX_LIMIT

WardrobeSortField = Literal["created_at", "updated_at", "name", "color", "brand"]


class WardrobeItemCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    category_id: UUID4
    name: str = Field(max_length=120)
    color: str = Field(max_length=60)
    brand: Optional[str] = Field(None, max_length=120)


class WardrobeItemUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    category_id: Optional[UUID4] = None
    name: Optional[str] = Field(None, max_length=120)
    color: Optional[str] = Field(None, max_length=60)
    brand: Optional[str] = Field(None, max_length=120)


class WardrobeItemOut(BaseModel):
    id: str
    user_id: str
    category_id: str
    name: str
    color: str
    brand: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class WardrobeItemQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    category_id: Optional[str] = None
    color: Optional[str] = None
    brand: Optional[str] = None
    sort_by: WardrobeSortField = "created_at"
    order: Literal["asc", "desc"] = "desc"
