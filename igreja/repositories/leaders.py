"""
Leaders of the current church and their optional login accounts
"""

from typing import Any, Dict, List
import structlog

from igreja.core import messages
from igreja.core.errors import AuthError, BackendError, NotAuthenticated, NotFoundError, ValidationFailed
from igreja.core.permissions import UserRole
from igreja.core.results import Result
from igreja.core.saga import Saga, SagaOutcome, SagaResult
from igreja.models.leader import Leader
from igreja.repositories.base import TenantScopedRepository, validate
from igreja.schemas.leader import LeaderCreate, LeaderUpdate, LeaderUserCreate

logger = structlog.get_logger(__name__)

LEADER_ALREADY_LINKED = "Este líder já possui um usuário vinculado."
LEADER_USER_CREATED = "Usuário criado para o líder com sucesso!"
LEADER_USER_FAILED = "Não foi possível criar o usuário do líder."
MANUAL_CLEANUP = "A operação falhou parcialmente e exige limpeza manual."


class LeaderAlreadyLinked(BackendError):
    def __init__(self, leader_id):
        super().__init__("Leader already has a user account", code="leader_linked", details=str(leader_id))


class LeaderRepository(TenantScopedRepository[Leader]):
    table_name = "leaders"
    label = messages.LEADERS
    create_schema = LeaderCreate
    update_schema = LeaderUpdate

    async def list_available(self) -> Result[List[Leader]]:
        """Leaders open for appointments, by name"""
        try:
            rows = await (
                self.scoped(self.table.select())
                .eq("is_available_for_appointments", True)
                .order("name")
                .execute()
            )
        except NotAuthenticated as e:
            return Result.failure(e)
        except BackendError as e:
            return self._fail(e, self.label.load_failed())
        return Result.success(rows)

    async def create_user_for_leader(self, leader_id, password: str) -> Result[SagaResult]:
        """
        Provision a login for a leader and link it back to the leader row.

        Step one creates the identity with the leader's email; step two
        stores its id on the leader. If the link fails the identity is
        deleted again. A leader that already has a login is rejected
        before anything is created.
        """
        try:
            validate(LeaderUserCreate, {"password": password})
        except ValidationFailed as e:
            return self._invalid(e)

        found = await self.get(leader_id)
        if not found.ok:
            return found
        if found.not_found:
            return self._fail(NotFoundError(details=f"leaders.id={leader_id}"), LEADER_USER_FAILED)

        leader = found.data
        if leader.user_id is not None:
            return self._fail(LeaderAlreadyLinked(leader.id), LEADER_ALREADY_LINKED)

        async def create_identity(context: Dict[str, Any]):
            return await self.client.auth.admin_create_user(
                leader.email,
                password,
                user_metadata={
                    "name": leader.name,
                    "phone": leader.phone,
                    "role": UserRole.LEADER.value,
                    "tenant_id": str(leader.tenant_id),
                },
            )

        async def delete_identity(context: Dict[str, Any]):
            await self.client.auth.admin_delete_user(context["identity"].id)

        async def link_identity(context: Dict[str, Any]):
            rows = await (
                self.table.update({"user_id": context["identity"].id})
                .eq("id", leader.id)
                .eq("tenant_id", leader.tenant_id)
                .execute()
            )
            if not rows:
                raise NotFoundError(details=f"leaders.id={leader.id}")
            return rows[0]

        saga = (
            Saga("leader_user_provisioning")
            .step("identity", create_identity, compensation=delete_identity)
            .step("link", link_identity)
        )
        outcome = await saga.run({"leader_id": leader.id})

        if outcome.ok:
            self.notifier.success(LEADER_USER_CREATED)
            await self.list()
            return Result(data=outcome)

        error = outcome.error
        if isinstance(error, AuthError):
            description = messages.auth_message(error.kind)
        elif outcome.outcome == SagaOutcome.MANUAL_CLEANUP:
            description = MANUAL_CLEANUP
        else:
            description = LEADER_USER_FAILED
        self._fail(error, description)
        return Result(data=outcome, error=error)
