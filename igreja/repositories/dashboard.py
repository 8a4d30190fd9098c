"""
Dashboard statistics for the current church
"""

from datetime import datetime
import structlog

from pydantic import BaseModel

from igreja.backend.service import BackendClient
from igreja.core.errors import BackendError, NotAuthenticated
from igreja.core.notifications import Notifier
from igreja.core.results import Result
from igreja.models.appointment import AppointmentStatus
from igreja.models.member import MemberStatus
from igreja.session import SessionStore

logger = structlog.get_logger(__name__)


class DashboardStats(BaseModel):
    active_members: int = 0
    leaders: int = 0
    upcoming_events: int = 0
    upcoming_appointments: int = 0


class DashboardRepository:
    def __init__(self, client: BackendClient, session: SessionStore, notifier: Notifier):
        self.client = client
        self.session = session
        self.notifier = notifier

    async def stats(self) -> Result[DashboardStats]:
        tenant_id = self.session.tenant_id
        if tenant_id is None:
            return Result.failure(NotAuthenticated())

        now = datetime.utcnow()
        try:
            stats = DashboardStats(
                active_members=await (
                    self.client.table("members").select()
                    .eq("tenant_id", tenant_id).eq("status", MemberStatus.ACTIVE).count()
                ),
                leaders=await self.client.table("leaders").select().eq("tenant_id", tenant_id).count(),
                upcoming_events=await (
                    self.client.table("events").select()
                    .eq("tenant_id", tenant_id).gte("scheduled_at", now).count()
                ),
                upcoming_appointments=await (
                    self.client.table("appointments").select()
                    .eq("tenant_id", tenant_id)
                    .eq("status", AppointmentStatus.SCHEDULED)
                    .gte("scheduled_at", now)
                    .count()
                ),
            )
        except BackendError as e:
            logger.error("Dashboard stats failed", error=e.message, code=e.code)
            self.notifier.error("Não foi possível carregar as estatísticas.")
            return Result.failure(e)
        return Result.success(stats)
