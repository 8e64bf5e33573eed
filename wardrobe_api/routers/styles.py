from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import UUID4

from wardrobe_api.auth.deps import require_admin, require_user
from wardrobe_api.core.container import Container, get_container
from wardrobe_api.schemas.taxonomy import StyleCreate, StyleOut, StyleUpdate

router = APIRouter(prefix="/styles", tags=["styles"], dependencies=[Depends(require_user)])
admin_router = APIRouter(prefix="/admin/styles", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[StyleOut])
async def list_styles(container: Container = Depends(get_container)):
    return await container.styles.list_all()


@admin_router.post("", response_model=StyleOut, status_code=status.HTTP_201_CREATED)
async def create_style(body: StyleCreate, container: Container = Depends(get_container)):
    return await container.styles.create(body.name, body.display_name)


@admin_router.put("/{style_id}", response_model=StyleOut)
async def update_style(style_id: UUID4, body: StyleUpdate, container: Container = Depends(get_container)):
    return await container.styles.update(str(style_id), body.model_dump(exclude_unset=True))
