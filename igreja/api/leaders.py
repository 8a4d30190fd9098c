"""
Leaders API endpoints
"""

from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict
import uuid

from igreja.api import unwrap
from igreja.context import AppContext
from igreja.core.dependencies import require_session

router = APIRouter()


@router.get("")
async def list_leaders(ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.leaders.list(), ctx)


@router.get("/available")
async def list_available_leaders(ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.leaders.list_available(), ctx)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_leader(fields: Dict[str, Any] = Body(...), ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.leaders.create(fields), ctx)


@router.patch("/{leader_id}")
async def update_leader(
    leader_id: uuid.UUID,
    fields: Dict[str, Any] = Body(...),
    ctx: AppContext = Depends(require_session),
):
    return unwrap(await ctx.leaders.update(leader_id, fields), ctx)


@router.delete("/{leader_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_leader(leader_id: uuid.UUID, ctx: AppContext = Depends(require_session)):
    unwrap(await ctx.leaders.delete(leader_id), ctx)


@router.post("/{leader_id}/user", status_code=status.HTTP_201_CREATED)
async def create_leader_user(
    leader_id: uuid.UUID,
    payload: Dict[str, Any] = Body(...),
    ctx: AppContext = Depends(require_session),
):
    """Give the leader a login with the leader's email"""
    outcome = unwrap(await ctx.leaders.create_user_for_leader(leader_id, payload.get("password", "")), ctx)
    return {
        "outcome": outcome.outcome,
        "user_id": outcome.context["identity"].id,
        "leader": outcome.context["link"],
    }
