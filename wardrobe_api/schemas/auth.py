from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AdditionalMetadata(BaseModel):
    model_config = ConfigDict(extra="forbid")
    username: Optional[str] = Field(None, min_length=3)


class SignupIn(BaseModel):
    model_config = ConfigDict(extra="forbid")
    email: EmailStr
    password: str = Field(min_length=6)
    additional_metadata: Optional[AdditionalMetadata] = None


class LoginIn(BaseModel):
    model_config = ConfigDict(extra="forbid")
    email: EmailStr
    password: str = Field(min_length=6)


class ProfileOut(BaseModel):
    id: str
    username: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class LoginOut(BaseModel):
    access_token: str
    profile: ProfileOut


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    username: Optional[str] = Field(None, min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_]+$")
