from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class AdminUserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class AdminUserOut(BaseModel):
    id: str
    email: Optional[str] = None
