"""
Tenant resolver: the church record of the signed-in profile
"""

from typing import Callable, List, Optional
import structlog

from igreja.backend.service import BackendClient
from igreja.core.errors import BackendError
from igreja.core.events import EventBus, ProfileChanged, SignedOut, TenantUpdated
from igreja.models.tenant import Tenant
from igreja.session import SessionStore

logger = structlog.get_logger(__name__)


class TenantResolver:
    """Keeps the current tenant in step with the profile and with TenantUpdated signals"""

    def __init__(self, client: BackendClient, session: SessionStore, bus: EventBus):
        self.client = client
        self.session = session
        self.bus = bus
        self.tenant: Optional[Tenant] = None
        self._unsubscribers: List[Callable[[], None]] = []

    def start(self):
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self.bus.subscribe(ProfileChanged, self._on_profile_changed),
            self.bus.subscribe(TenantUpdated, self._on_tenant_updated),
            self.bus.subscribe(SignedOut, self._on_signed_out),
        ]

    def close(self):
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    async def fetch_tenant(self) -> Optional[Tenant]:
        """Load the tenant row; a missing row is fine, a backend error keeps the old value"""
        tenant_id = self.session.tenant_id
        if tenant_id is None:
            return self.tenant

        try:
            tenant = await self.client.table("tenants").select().eq("id", tenant_id).maybe_single()
        except BackendError as e:
            logger.error("Tenant fetch failed", tenant_id=str(tenant_id), error=e.message, code=e.code)
            return self.tenant

        if tenant is None:
            logger.info("Tenant not found", tenant_id=str(tenant_id))
        self.tenant = tenant
        return self.tenant

    async def _on_profile_changed(self, event: ProfileChanged):
        if event.tenant_id is None:
            self.tenant = None
            return
        await self.fetch_tenant()

    async def _on_tenant_updated(self, event: TenantUpdated):
        if self.session.tenant_id is not None and event.tenant_id == self.session.tenant_id:
            await self.fetch_tenant()

    async def _on_signed_out(self, event: SignedOut):
        self.tenant = None
