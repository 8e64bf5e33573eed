from fastapi import APIRouter, Depends
from pydantic import UUID4

from wardrobe_api.auth.deps import require_user_or_admin
from wardrobe_api.auth.gate import Principal
from wardrobe_api.core.container import Container, get_container
from wardrobe_api.schemas.auth import ProfileOut, ProfileUpdate

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/{user_id}", response_model=ProfileOut)
async def get_profile(
    user_id: UUID4,
    principal: Principal = Depends(require_user_or_admin),
    container: Container = Depends(get_container),
):
    return await container.profiles.get_profile(str(user_id), principal)


@router.patch("/{user_id}", response_model=ProfileOut)
async def update_profile(
    user_id: UUID4,
    body: ProfileUpdate,
    principal: Principal = Depends(require_user_or_admin),
    container: Container = Depends(get_container),
):
    return await container.profiles.update_profile(str(user_id), principal, body.username)
