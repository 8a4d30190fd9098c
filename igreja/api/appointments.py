"""
Appointments API endpoints
"""

from fastapi import APIRouter, Body, Depends, HTTPException, status
from typing import Any, Dict, Optional
from datetime import datetime
import uuid

from igreja.api import unwrap
from igreja.context import AppContext
from igreja.core.dependencies import require_session
from igreja.schemas.appointment import AppointmentStatusBulkUpdate

router = APIRouter()


@router.get("")
async def list_appointments(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    leader_id: Optional[uuid.UUID] = None,
    ctx: AppContext = Depends(require_session),
):
    """All appointments, or those in [start, end] (optionally of one leader)"""
    if start is None and end is None:
        return unwrap(await ctx.appointments.list(), ctx)
    if start is None or end is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Informe início e fim do período")
    return unwrap(await ctx.appointments.list_by_date_range(start, end, leader_id), ctx)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_appointment(fields: Dict[str, Any] = Body(...), ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.appointments.create(fields), ctx)


@router.post("/status")
async def update_statuses(payload: AppointmentStatusBulkUpdate, ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.appointments.update_status_many(payload.ids, payload.status), ctx)


@router.patch("/{appointment_id}")
async def update_appointment(
    appointment_id: uuid.UUID,
    fields: Dict[str, Any] = Body(...),
    ctx: AppContext = Depends(require_session),
):
    return unwrap(await ctx.appointments.update(appointment_id, fields), ctx)


@router.post("/{appointment_id}/complete")
async def complete_appointment(appointment_id: uuid.UUID, ctx: AppContext = Depends(require_session)):
    return unwrap(await ctx.appointments.complete(appointment_id), ctx)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(appointment_id: uuid.UUID, ctx: AppContext = Depends(require_session)):
    unwrap(await ctx.appointments.delete(appointment_id), ctx)
