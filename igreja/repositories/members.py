"""
Members of the current church
"""

from typing import Any, Dict, List, Optional
import structlog

from igreja.core import messages
from igreja.core.errors import BackendError, NotAuthenticated, ValidationFailed
from igreja.core.results import Result
from igreja.models.member import Member, MemberStatus
from igreja.repositories.base import TenantScopedRepository, validate
from igreja.schemas.member import MemberCreate, MemberUpdate

logger = structlog.get_logger(__name__)


class MemberRepository(TenantScopedRepository[Member]):
    table_name = "members"
    label = messages.MEMBERS
    create_schema = MemberCreate
    update_schema = MemberUpdate

    async def search(
        self,
        search: Optional[str] = None,
        status: Optional[MemberStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[List[Member]]:
        """Name/email substring and status filter, newest first, paginated"""
        try:
            query = self.scoped(self.table.select())
            if search:
                query = query.ilike_any(["name", "email"], search)
            if status:
                query = query.eq("status", status)
            rows = await query.order("created_at", desc=True).range(offset, offset + limit - 1).execute()
        except NotAuthenticated as e:
            return Result.failure(e)
        except BackendError as e:
            return self._fail(e, self.label.load_failed())
        return Result.success(rows)

    async def create_many(self, rows: List[Dict[str, Any]]) -> Result[List[Member]]:
        """Bulk import; every row is validated before anything is written"""
        batch, errors = [], []
        for index, fields in enumerate(rows):
            try:
                batch.append(validate(self.create_schema, fields, prefix=str(index)))
            except ValidationFailed as e:
                errors.extend(e.errors)
        if errors:
            return self._invalid(ValidationFailed(errors))
        if not batch:
            return Result.success([])

        try:
            tenant_id = self.tenant_id()
            for values in batch:
                values["tenant_id"] = tenant_id
            created = await self.table.insert(batch)
        except NotAuthenticated as e:
            return self._unauthenticated(e)
        except BackendError as e:
            return self._fail(e, "Não foi possível importar os membros.")

        logger.info("Members imported", count=len(created))
        self.notifier.success(f"{len(created)} membros importados com sucesso!")
        await self.list()
        return Result.success(created)
