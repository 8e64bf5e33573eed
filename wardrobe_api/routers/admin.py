from fastapi import APIRouter, Depends, status

from wardrobe_api.auth.deps import require_admin
from wardrobe_api.core.container import Container, get_container
from wardrobe_api.schemas.admin import AdminUserCreate, AdminUserOut

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/users", response_model=AdminUserOut, status_code=status.HTTP_201_CREATED)
async def create_user(body: AdminUserCreate, container: Container = Depends(get_container)):
    return await container.admin_users.create_user(body.email, body.password)
