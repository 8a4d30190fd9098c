"""
Public discovery API endpoints (no session)
"""

from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict

from igreja.api import unwrap
from igreja.context import AppContext
from igreja.core.dependencies import get_context

router = APIRouter()


@router.get("/leaders")
async def available_leaders(ctx: AppContext = Depends(get_context)):
    return unwrap(await ctx.public.available_leaders(), ctx)


@router.get("/members")
async def active_members(ctx: AppContext = Depends(get_context)):
    return unwrap(await ctx.public.active_members(), ctx)


@router.post("/appointments", status_code=status.HTTP_201_CREATED)
async def book_appointment(fields: Dict[str, Any] = Body(...), ctx: AppContext = Depends(get_context)):
    return unwrap(await ctx.public.book_appointment(fields), ctx)


@router.get("/events")
async def public_events(ctx: AppContext = Depends(get_context)):
    return unwrap(await ctx.public.list_public_events(), ctx)
