from typing import Annotated, List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import UUID4

from wardrobe_api.auth.deps import get_current_user_id
from wardrobe_api.core.container import Container, get_container
from wardrobe_api.core.pagination import DEFAULT_LIMIT, MAX_LIMIT, total_headers
from wardrobe_api.schemas.common import MessageOut, parse_flag
from wardrobe_api.schemas.creations import (
    AddCreationItemIn,
    CreationCreate,
    CreationItemOut,
    CreationOut,
    CreationQuery,
    GenerateCreationsIn,
)

router = APIRouter(prefix="/creations", tags=["creations"])


@router.get("", response_model=List[CreationOut])
async def list_creations(
    query: Annotated[CreationQuery, Query()],
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    return await container.creations.list(user_id, query)


@router.post("", response_model=CreationOut, status_code=status.HTTP_201_CREATED)
async def create_creation(
    body: CreationCreate,
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    return await container.creations.create_manual(user_id, str(body.style_id), body.name, body.image_path)


@router.post("/generate", response_model=List[CreationOut])
async def generate_creations(
    body: GenerateCreationsIn,
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    return await container.creations.generate(user_id, str(body.style_id))


@router.get("/{creation_id}/items", response_model=List[CreationItemOut], response_model_exclude_unset=True)
async def list_creation_items(
    creation_id: UUID4,
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    expand: Optional[Literal["item"]] = Query(None),
    include_total: Optional[str] = Query(None, alias="includeTotal"),
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    with_total = parse_flag(include_total)
    links, total = await container.creations.list_items(
        str(creation_id), user_id, page=page, limit=limit, expand=expand, include_total=with_total
    )
    if with_total and total is not None:
        response.headers.update(total_headers(page, limit, total))
    return links


@router.post("/{creation_id}/items", response_model=CreationItemOut, status_code=status.HTTP_201_CREATED, response_model_exclude_unset=True)
async def add_creation_item(
    creation_id: UUID4,
    body: AddCreationItemIn,
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    return await container.creations.add_item(str(creation_id), str(body.item_id), user_id)


@router.post("/{creation_id}/accept", response_model=MessageOut)
async def accept_creation(
    creation_id: UUID4,
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    await container.creations.accept(str(creation_id), user_id)
    return {"message": "Creation accepted successfully"}


@router.post("/{creation_id}/reject", response_model=MessageOut)
async def reject_creation(
    creation_id: UUID4,
    user_id: str = Depends(get_current_user_id),
    container: Container = Depends(get_container),
):
    await container.creations.reject(str(creation_id), user_id)
    return {"message": "Creation rejected successfully"}
