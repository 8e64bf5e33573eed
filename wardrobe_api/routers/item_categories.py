from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import UUID4

from wardrobe_api.auth.deps import require_admin, require_user
from wardrobe_api.core.container import Container, get_container
from wardrobe_api.schemas.taxonomy import CategoryCreate, CategoryOut, CategoryUpdate

router = APIRouter(prefix="/item_categories", tags=["item-categories"], dependencies=[Depends(require_user)])
admin_router = APIRouter(prefix="/admin/item_categories", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[CategoryOut])
async def list_categories(container: Container = Depends(get_container)):
    return await container.categories.list_all()


@admin_router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryCreate, container: Container = Depends(get_container)):
    return await container.categories.create(body.name, body.display_name, body.is_required)


@admin_router.put("/{category_id}", response_model=CategoryOut)
async def update_category(category_id: UUID4, body: CategoryUpdate, container: Container = Depends(get_container)):
    return await container.categories.update(str(category_id), body.model_dump(exclude_unset=True))
