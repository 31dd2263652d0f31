"""User Routes — share-picker listing and ADMIN-only user administration."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from larder.api.dependencies import get_current_principal
from larder.core.domain_types import Principal
from larder.infrastructure.database import get_db
from larder.schemas.user import RoleUpdate, UserCreate, UserResponse
from larder.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("")
async def list_users(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    users = await UserService(db).list_users()
    return {"data": [UserResponse.model_validate(u) for u in users]}


@router.get("/me")
async def current_user(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).get(principal.id)
    return {"data": UserResponse.model_validate(user)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).create_user(principal, body)
    return {"data": UserResponse.model_validate(user)}


@router.patch("/{user_id}/role")
async def update_role(
    user_id: UUID,
    body: RoleUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).set_role(principal, user_id, body.role)
    return {"data": UserResponse.model_validate(user)}
