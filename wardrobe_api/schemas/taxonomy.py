from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

KEBAB_CASE = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = Field(min_length=2, max_length=50, pattern=KEBAB_CASE)
    display_name: str = Field(min_length=2, max_length=60)
    is_required: Optional[bool] = None


class CategoryUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: Optional[str] = Field(None, min_length=2, max_length=50, pattern=KEBAB_CASE)
    display_name: Optional[str] = Field(None, min_length=2, max_length=60)
    is_required: Optional[bool] = None


class CategoryOut(BaseModel):
    id: str
    name: str
    display_name: str
    is_required: bool = False


class StyleCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = Field(min_length=2, max_length=50, pattern=KEBAB_CASE)
    display_name: str = Field(min_length=2, max_length=60)


class StyleUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: Optional[str] = Field(None, min_length=2, max_length=50, pattern=KEBAB_CASE)
    display_name: Optional[str] = Field(None, min_length=2, max_length=60)


class StyleOut(BaseModel):
    id: str
    name: str
    display_name: str
