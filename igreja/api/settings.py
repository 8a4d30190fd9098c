"""
Settings API endpoints
"""

from fastapi import APIRouter, Body, Depends, File, UploadFile
from typing import Any, Dict

from igreja.api import unwrap
from igreja.backend.storage import FileObject
from igreja.context import AppContext
from igreja.core.dependencies import require_session

router = APIRouter()


@router.get("")
async def get_settings_view(ctx: AppContext = Depends(require_session)):
    return {"profile": ctx.session.profile, "church": ctx.tenant}


@router.patch("")
async def update_user_settings(fields: Dict[str, Any] = Body(...), ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.settings.update_user_settings(fields), ctx)


@router.post("/password")
async def update_password(payload: Dict[str, Any] = Body(...), ctx: AppContext = Depends(require_session)):
    unwrap(await ctx.settings.update_password(payload.get("password", "")), ctx)
    return {"message": ctx.notifier.last.description}


@router.get("/church")
async def get_church_settings(ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.settings.get_church_settings(), ctx)


@router.patch("/church")
async def update_church_settings(fields: Dict[str, Any] = Body(...), ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.settings.update_church_settings(fields), ctx)


@router.post("/logo")
async def upload_logo(logo: UploadFile = File(...), ctx: AppContext = Depends(require_session)):
    file = FileObject(filename=logo.filename or "logo", content=await logo.read(), content_type=logo.content_type)
    url = unwrap(await ctx.settings.upload_logo(file), ctx)
    return {"logo": url, "church": ctx.tenant}
