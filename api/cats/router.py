"""
FastAPI router for cat endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends

from auth import dependencies as auth_dependencies
from auth.policy import Caller, Role
from core import db

from .repository import CatRepository
from .schemas import Cat, CatCreate, CatUpdate, MessageResponse

router = APIRouter()


def get_cat_repository() -> CatRepository:
    return CatRepository(db.pool())


@router.get("/cats")
async def list_cats(repository: CatRepository = Depends(get_cat_repository)) -> list[Cat]:
    return await repository.list_all()


@router.get("/cats/{cat_id}")
async def get_cat(
    cat_id: int,
    repository: CatRepository = Depends(get_cat_repository),
) -> Cat:
    return await repository.get_by_id(cat_id)


@router.post("/cats")
async def create_cat(
    payload: CatCreate,
    current_user: Caller = Depends(auth_dependencies.get_current_user),
    repository: CatRepository = Depends(get_cat_repository),
) -> MessageResponse:
    """
    Create a cat. Non-admin callers always own what they create.
    """
    if current_user.role is not Role.ADMIN:
        payload = payload.model_copy(update={"owner": current_user.user_id})
    cat_id = await repository.create(payload)
    return MessageResponse(message="cat added", id=cat_id)


@router.put("/cats/{cat_id}")
async def update_cat(
    cat_id: int,
    payload: CatUpdate = Body(...),
    current_user: Caller = Depends(auth_dependencies.get_current_user),
    repository: CatRepository = Depends(get_cat_repository),
) -> MessageResponse:
    # Only the keys the client actually sent.
    fields = payload.model_dump(exclude_unset=True)
    await repository.update(cat_id, fields, current_user.user_id, current_user.role)
    return MessageResponse(message="cat modified", id=cat_id)


@router.delete("/cats/{cat_id}")
async def delete_cat(
    cat_id: int,
    current_user: Caller = Depends(auth_dependencies.get_current_user),
    repository: CatRepository = Depends(get_cat_repository),
) -> MessageResponse:
    await repository.delete(cat_id, current_user.user_id, current_user.role)
    return MessageResponse(message="cat deleted", id=cat_id)
