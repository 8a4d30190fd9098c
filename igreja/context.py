"""
Application context: everything one signed-in session works with

Created when a session starts, closed when it ends. Nothing here is a
module-level singleton; views receive the context they act on.
"""

from typing import Optional
import structlog

from igreja.backend.service import BackendClient, HostedBackend
from igreja.core.cache import TTLCache
from igreja.core.events import EventBus
from igreja.core.notifications import Notifier
from igreja.repositories import (
    AppointmentRepository,
    DashboardRepository,
    EventRepository,
    LeaderRepository,
    MemberRepository,
    PublicDirectory,
    SettingsRepository,
    UserRepository,
)
from igreja.session import SessionStore
from igreja.tenancy import TenantResolver

logger = structlog.get_logger(__name__)


class AppContext:
    def __init__(self, client: BackendClient):
        self.client = client
        self.bus = EventBus()
        self.notifier = Notifier()
        self.cache = TTLCache()

        self.session = SessionStore(client, self.bus, self.notifier)
        self.tenants = TenantResolver(client, self.session, self.bus)

        self.members = MemberRepository(client, self.session, self.notifier)
        self.leaders = LeaderRepository(client, self.session, self.notifier)
        self.appointments = AppointmentRepository(client, self.session, self.notifier)
        self.events = EventRepository(client, self.session, self.notifier)
        self.users = UserRepository(client, self.session, self.notifier)
        self.settings = SettingsRepository(client, self.session, self.bus, self.notifier)
        self.dashboard = DashboardRepository(client, self.session, self.notifier)
        self.public = PublicDirectory(client, self.notifier)
        self.closed = False

    @classmethod
    async def create(cls, backend: HostedBackend, access_token: Optional[str] = None) -> "AppContext":
        """Wire a context and restore the session behind access_token, if any"""
        ctx = cls(backend.client())
        ctx.session.start()
        ctx.tenants.start()
        if access_token:
            await ctx.session.restore_session(access_token)
        return ctx

    @property
    def tenant(self):
        return self.tenants.tenant

    async def close(self):
        if self.closed:
            return
        self.session.close()
        self.tenants.close()
        self.bus.clear_subscribers()
        self.cache.clear()
        self.closed = True
        logger.debug("Application context closed")
