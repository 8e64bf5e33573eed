from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, UUID4, field_validator

from wardrobe_api.core.pagination import DEFAULT_LIMIT, MAX_LIMIT
from wardrobe_api.schemas.wardrobe import WardrobeItemOut

CreationStatus = Literal["pending", "accepted", "rejected"]
CreationSortField = Literal["created_at", "updated_at", "name", "status"]


class CreationCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    style_id: UUID4
    name: str = Field(min_length=1)
    image_path: str = Field(min_length=1, pattern=r"(?i)\.(png|jpg|jpeg|webp)$")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name should not be empty")
        return v


class GenerateCreationsIn(BaseModel):
    model_config = ConfigDict(extra="forbid")
    style_id: UUID4


class AddCreationItemIn(BaseModel):
    model_config = ConfigDict(extra="forbid")
    item_id: UUID4


class CreationOut(BaseModel):
    id: str
    user_id: str
    style_id: str
    name: str
    image_path: str
    status: CreationStatus
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CreationItemOut(BaseModel):
    id: str
    creation_id: str
    item_id: str
    item: Optional[WardrobeItemOut] = None


class CreationQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    status: Optional[CreationStatus] = None
    style_id: Optional[str] = None
    search: Optional[str] = None
    sort_by: CreationSortField = "created_at"
    order: Literal["asc", "desc"] = "desc"
