from fastapi import APIRouter, Depends, status

from wardrobe_api.core.container import Container, get_container
from wardrobe_api.schemas.auth import LoginIn, LoginOut, ProfileOut, SignupIn

router = APIRouter(prefix="/auth/v1", tags=["auth"])


@router.post("/signup", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupIn, container: Container = Depends(get_container)):
    username = body.additional_metadata.username if body.additional_metadata else None
    return await container.profiles.signup(body.email, body.password, username)


@router.post("/login", response_model=LoginOut)
async def login(body: LoginIn, container: Container = Depends(get_container)):
    return await container.profiles.login(body.email, body.password)
