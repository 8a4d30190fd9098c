"""
Appointments between leaders and members
"""

from datetime import datetime
from typing import List, Sequence
import structlog

from igreja.core import messages
from igreja.core.errors import BackendError, NotAuthenticated, ValidationFailed
from igreja.core.results import Result
from igreja.models.appointment import Appointment, AppointmentStatus
from igreja.repositories.base import TenantScopedRepository, validate
from igreja.schemas.appointment import AppointmentCreate, AppointmentStatusBulkUpdate, AppointmentUpdate

logger = structlog.get_logger(__name__)


class AppointmentRepository(TenantScopedRepository[Appointment]):
    table_name = "appointments"
    label = messages.APPOINTMENTS
    create_schema = AppointmentCreate
    update_schema = AppointmentUpdate
    order_by = "scheduled_at"
    order_desc = False

    async def complete(self, id) -> Result[Appointment]:
        return await self.update(id, {"status": AppointmentStatus.COMPLETED})

    async def list_by_date_range(
        self,
        start: datetime,
        end: datetime,
        leader_id=None,
    ) -> Result[List[Appointment]]:
        """Appointments scheduled in [start, end], earliest first"""
        try:
            query = self.scoped(self.table.select()).gte("scheduled_at", start).lte("scheduled_at", end)
            if leader_id is not None:
                query = query.eq("leader_id", leader_id)
            rows = await query.order("scheduled_at").execute()
        except NotAuthenticated as e:
            return Result.failure(e)
        except BackendError as e:
            return self._fail(e, self.label.load_failed())
        return Result.success(rows)

    async def update_status_many(self, ids: Sequence, status) -> Result[List[Appointment]]:
        try:
            values = validate(AppointmentStatusBulkUpdate, {"ids": list(ids), "status": status})
        except ValidationFailed as e:
            return self._invalid(e)

        try:
            rows = await (
                self.scoped(self.table.update({"status": values["status"]}))
                .in_("id", values["ids"])
                .execute()
            )
        except NotAuthenticated as e:
            return self._unauthenticated(e)
        except BackendError as e:
            return self._fail(e, self.label.update_failed())

        logger.info("Appointment statuses updated", count=len(rows), status=values["status"].value)
        self.notifier.success(f"{len(rows)} agendamentos atualizados com sucesso!")
        await self.list()
        return Result.success(rows)
