"""
Members API endpoints
"""

from fastapi import APIRouter, Body, Depends, Query, status
from typing import Any, Dict, List, Optional
import uuid

from igreja.api import unwrap
from igreja.context import AppContext
from igreja.core.dependencies import require_session
from igreja.models.member import MemberStatus

router = APIRouter()


@router.get("")
async def list_members(
    search: Optional[str] = None,
    member_status: Optional[MemberStatus] = Query(default=None, alias="status"),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    ctx: AppContext = Depends(require_session),
):
    """All members, or a filtered page when search/status/limit are given"""
    if search or member_status or limit:
        return unwrap(await ctx.members.search(search, member_status, limit or 50, offset), ctx)
    return unwrap(await ctx.members.list(), ctx)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_member(fields: Dict[str, Any] = Body(...), ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.members.create(fields), ctx)


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def import_members(rows: List[Dict[str, Any]] = Body(...), ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.members.create_many(rows), ctx)


@router.patch("/{member_id}")
async def update_member(
    member_id: uuid.UUID,
    fields: Dict[str, Any] = Body(...),
    ctx: AppContext = Depends(require_session),
):
    return unwrap(await ctx.members.update(member_id, fields), ctx)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(member_id: uuid.UUID, ctx: AppContext = Depends(require_session)):
    unwrap(await ctx.members.delete(member_id), ctx)
