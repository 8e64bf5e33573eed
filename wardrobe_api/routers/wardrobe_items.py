from typing import Annotated, List

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import UUID4

from wardrobe_api.auth.deps import get_current_user_id
from wardrobe_api.core.container import Container, get_container
from wardrobe_api.schemas.wardrobe import WardrobeItemCreate, WardrobeItemOut, WardrobeItemQuery, WardrobeItemUpdate

router = APIRouter(prefix="/wardrobe_items", tags=["wardrobe"])


@router.get("", response_model=List[WardrobeItemOut])
async def list_items(
    query: Annotated[WardrobeItemQuery, Query()],
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    return await container.wardrobe.list(user_id, query)


@router.post("", response_model=WardrobeItemOut, status_code=status.HTTP_201_CREATED)
async def create_item(
    body: WardrobeItemCreate,
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    return await container.wardrobe.create(user_id, str(body.category_id), body.name, body.color, body.brand)


@router.patch("/{item_id}", response_model=WardrobeItemOut)
async def update_item(
    item_id: UUID4,
    body: WardrobeItemUpdate,
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    return await container.wardrobe.update(user_id, str(item_id), body.model_dump(exclude_unset=True))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: UUID4,
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    await container.wardrobe.remove(user_id, str(item_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
