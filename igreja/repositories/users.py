"""
Users (profiles) of the current church, as managed by an admin

Deleting a user removes the profile row only; the login identity stays.
"""

from typing import Any, Dict
import structlog

from igreja.core import messages
from igreja.core.errors import AuthError, BackendError, NotAuthenticated, ValidationFailed
from igreja.core.results import Result
from igreja.models.profile import Profile
from igreja.repositories.base import TenantScopedRepository, validate
from igreja.schemas.user import UserCreate, UserUpdate

logger = structlog.get_logger(__name__)


class UserRepository(TenantScopedRepository[Profile]):
    table_name = "profiles"
    label = messages.USERS
    create_schema = UserCreate
    update_schema = UserUpdate

    async def create(self, fields: Dict[str, Any]) -> Result[Profile]:
        """Provision a login in the current church; the new-user hook creates the profile"""
        try:
            values = validate(self.create_schema, fields)
        except ValidationFailed as e:
            return self._invalid(e)

        try:
            metadata = {
                "name": values["name"],
                "role": values["role"].value,
                "tenant_id": str(self.tenant_id()),
            }
            if values.get("phone"):
                metadata["phone"] = values["phone"]
            user = await self.client.auth.admin_create_user(values["email"], values["password"], user_metadata=metadata)
            profile = await self.table.select().eq("id", user.id).single()
        except NotAuthenticated as e:
            return self._unauthenticated(e)
        except AuthError as e:
            return self._fail(e, messages.auth_message(e.kind))
        except BackendError as e:
            return self._fail(e, self.label.create_failed())

        logger.info("User provisioned", user_id=str(user.id), role=metadata["role"])
        self.notifier.success(self.label.created())
        await self.list()
        return Result.success(profile)
