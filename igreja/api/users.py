"""
Users API endpoints (admin only)
"""

from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict
import uuid

from igreja.api import unwrap
from igreja.context import AppContext
from igreja.core.dependencies import require_admin

router = APIRouter()


@router.get("")
async def list_users(ctx: AppContext = Depends(require_admin)):
    return unwrap(await ctx.users.list(), ctx)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(fields: Dict[str, Any] = Body(...), ctx: AppContext = Depends(require_admin)):
    return unwrap(await ctx.users.create(fields), ctx)


@router.patch("/{user_id}")
async def update_user(
    user_id: uuid.UUID,
    fields: Dict[str, Any] = Body(...),
    ctx: AppContext = Depends(require_admin),
):
    return unwrap(await ctx.users.update(user_id, fields), ctx)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: uuid.UUID, ctx: AppContext = Depends(require_admin)):
    """Removes the profile; the login identity is kept"""
    unwrap(await ctx.users.delete(user_id), ctx)
