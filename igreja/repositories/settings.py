"""
Personal and church settings
"""

from typing import Any, Dict
import structlog

from igreja.backend.service import BackendClient
from igreja.backend.storage import FileObject
from igreja.core import messages
from igreja.core.errors import BackendError, NotAuthenticated, PermissionDenied, ValidationFailed
from igreja.core.events import EventBus, TenantUpdated
from igreja.core.notifications import Notifier
from igreja.core.results import Result
from igreja.models.profile import Profile
from igreja.models.tenant import Tenant
from igreja.repositories.base import validate
from igreja.schemas.tenant import ChurchSettingsUpdate
from igreja.schemas.user import PasswordUpdate, UserSettingsUpdate
from igreja.session import SessionStore

logger = structlog.get_logger(__name__)


class SettingsRepository:
    """Profile settings for everyone, church settings and logo for admins"""

    def __init__(self, client: BackendClient, session: SessionStore, bus: EventBus, notifier: Notifier):
        self.client = client
        self.session = session
        self.bus = bus
        self.notifier = notifier

    def _fail(self, error: Exception, description: str) -> Result:
        if isinstance(error, BackendError):
            logger.error("Settings call failed", error=error.message, code=error.code)
        self.notifier.error(description)
        return Result.failure(error)

    def _require_admin(self, description: str):
        if self.session.profile is None:
            raise NotAuthenticated()
        if not self.session.is_admin:
            raise PermissionDenied(description)

    async def update_user_settings(self, fields: Dict[str, Any]) -> Result[Profile]:
        try:
            values = validate(UserSettingsUpdate, fields, partial=True)
        except ValidationFailed as e:
            return self._fail(e, messages.invalid_data(str(e)))
        if self.session.user is None:
            return self._fail(NotAuthenticated(), messages.NOT_AUTHENTICATED)

        try:
            rows = await self.client.table("profiles").update(values).eq("id", self.session.user.id).execute()
        except BackendError as e:
            return self._fail(e, "Não foi possível atualizar as configurações.")

        await self.session.refresh_profile()
        self.notifier.success("Configurações atualizadas com sucesso!")
        return Result.success(rows[0] if rows else None)

    async def update_password(self, password: str) -> Result[None]:
        try:
            validate(PasswordUpdate, {"password": password})
        except ValidationFailed as e:
            return self._fail(e, messages.invalid_data(str(e)))

        try:
            await self.client.auth.update_user(password=password)
        except BackendError as e:
            return self._fail(e, "Não foi possível atualizar a senha.")

        self.notifier.success("Senha atualizada com sucesso!")
        return Result.success()

    async def get_church_settings(self) -> Result[Tenant]:
        tenant_id = self.session.tenant_id
        if tenant_id is None:
            return Result.failure(NotAuthenticated())
        try:
            tenant = await self.client.table("tenants").select().eq("id", tenant_id).maybe_single()
        except BackendError as e:
            return self._fail(e, "Não foi possível carregar as configurações da igreja.")
        if tenant is None:
            return Result.missing()
        return Result.success(tenant)

    async def update_church_settings(self, fields: Dict[str, Any]) -> Result[Tenant]:
        try:
            self._require_admin(messages.NO_CHURCH_PERMISSION)
            values = validate(ChurchSettingsUpdate, fields, partial=True)
        except NotAuthenticated as e:
            return self._fail(e, messages.NOT_AUTHENTICATED)
        except PermissionDenied as e:
            return self._fail(e, e.message)
        except ValidationFailed as e:
            return self._fail(e, messages.invalid_data(str(e)))

        tenant_id = self.session.tenant_id
        try:
            rows = await self.client.table("tenants").update(values).eq("id", tenant_id).execute()
        except BackendError as e:
            return self._fail(e, "Não foi possível atualizar as configurações da igreja.")

        tenant = rows[0] if rows else None
        await self.bus.publish(TenantUpdated(tenant_id=tenant_id, logo=tenant.logo if tenant else None))
        self.notifier.success("Configurações da igreja atualizadas com sucesso!")
        return Result.success(tenant)

    async def upload_logo(self, file: FileObject) -> Result[str]:
        """Replace the church logo ({tenantId}.{ext}) and announce the change"""
        try:
            self._require_admin(messages.NO_LOGO_PERMISSION)
        except NotAuthenticated as e:
            return self._fail(e, messages.NOT_AUTHENTICATED)
        except PermissionDenied as e:
            return self._fail(e, e.message)

        tenant_id = self.session.tenant_id
        bucket = self.client.storage.from_(self.client.settings.CHURCH_LOGOS_BUCKET)
        path = f"{tenant_id}.{file.extension}"
        try:
            await bucket.upload(path, file.content, content_type=file.content_type, upsert=True)
            url = bucket.get_public_url(path)
            await self.client.table("tenants").update({"logo": url}).eq("id", tenant_id).execute()
        except BackendError as e:
            return self._fail(e, "Não foi possível atualizar o logo.")

        await self.bus.publish(TenantUpdated(tenant_id=tenant_id, logo=url))
        self.notifier.success("Logo atualizado com sucesso!")
        return Result.success(url)
