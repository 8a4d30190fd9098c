"""
Events API endpoints

Event detail and registration are public; everything else needs a session.
"""

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile, status
from typing import Any, Dict, Optional
import json
import uuid

from igreja.api import unwrap
from igreja.backend.storage import FileObject
from igreja.context import AppContext
from igreja.core.dependencies import get_context, require_session

router = APIRouter()


async def _file_object(upload: UploadFile) -> FileObject:
    return FileObject(
        filename=upload.filename or "banner",
        content=await upload.read(),
        content_type=upload.content_type,
    )


@router.get("")
async def list_events(ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.events.list(), ctx)


@router.get("/upcoming")
async def upcoming_events(limit: int = 10, ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.events.upcoming(limit), ctx)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(fields: Dict[str, Any] = Body(...), ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.events.create(fields), ctx)


@router.post("/new", status_code=status.HTTP_201_CREATED)
async def create_event_with_banner(
    data: str = Form(...),
    banner: Optional[UploadFile] = File(default=None),
    ctx: AppContext = Depends(require_session),
):
    """Multipart form: event fields as JSON in `data`, optional banner file"""
    try:
        fields = json.loads(data)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Dados inválidos: JSON malformado")
    file = await _file_object(banner) if banner is not None else None
    return unwrap(await ctx.events.create_with_banner(fields, file), ctx)


@router.get("/{event_id}")
async def get_public_event(event_id: uuid.UUID, ctx: AppContext = Depends(get_context)):
    """Public event page; private events are not found"""
    event = unwrap(await ctx.public.get_public_event(event_id), ctx)
    return {"event": event, "link": ctx.events.get_public_event_link(event.id)}


@router.get("/{event_id}/edit")
async def get_event_for_edit(event_id: uuid.UUID, ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.events.get_by_id(event_id), ctx)


@router.patch("/{event_id}")
async def update_event(
    event_id: uuid.UUID,
    fields: Dict[str, Any] = Body(...),
    ctx: AppContext = Depends(require_session),
):
    return unwrap(await ctx.events.update(event_id, fields), ctx)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: uuid.UUID, ctx: AppContext = Depends(require_session)):
    unwrap(await ctx.events.delete(event_id), ctx)


@router.post("/{event_id}/banner")
async def upload_event_banner(
    event_id: uuid.UUID,
    banner: UploadFile = File(...),
    ctx: AppContext = Depends(require_session),
):
    return unwrap(await ctx.events.attach_banner(event_id, await _file_object(banner)), ctx)


@router.get("/{event_id}/registrations")
async def list_registrations(event_id: uuid.UUID, ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.events.list_registrations(event_id), ctx)


@router.post("/{event_id}/registrations", status_code=status.HTTP_201_CREATED)
async def register_for_event(
    event_id: uuid.UUID,
    fields: Dict[str, Any] = Body(...),
    ctx: AppContext = Depends(get_context),
):
    return unwrap(await ctx.public.register_for_event(event_id, fields), ctx)
