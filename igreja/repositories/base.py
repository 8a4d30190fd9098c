"""
Tenant-scoped entity access

Every operation returns a Result and never raises for the CRUD paths.
Successful mutations notify and reload the list; failures notify and
leave the list as it was.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
import uuid
import structlog

from pydantic import BaseModel, ValidationError
from sqlmodel import SQLModel

from igreja.backend.service import BackendClient
from igreja.backend.tables import Query, Table
from igreja.core import messages
from igreja.core.errors import BackendError, NotAuthenticated, NotFoundError, ValidationFailed
from igreja.core.notifications import Notifier
from igreja.core.results import Result
from igreja.session import SessionStore

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


def validate(schema: Type[BaseModel], fields: Dict[str, Any], prefix: str = "", partial: bool = False) -> Dict[str, Any]:
    """Run a schema and return the values to write, or raise ValidationFailed"""
    try:
        model = schema.model_validate(fields)
    except ValidationError as e:
        raise ValidationFailed.from_pydantic(e, prefix=prefix) from e
    if partial:
        return model.model_dump(exclude_unset=True)
    return model.model_dump(exclude_none=True)


class TenantScopedRepository(Generic[ModelT]):
    """list/create/update/delete on one table, filtered by the session's tenant"""

    table_name: str
    label: messages.EntityLabel
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    order_by: str = "created_at"
    order_desc: bool = True

    def __init__(self, client: BackendClient, session: SessionStore, notifier: Notifier):
        self.client = client
        self.session = session
        self.notifier = notifier
        self.items: List[ModelT] = []

    @property
    def table(self) -> Table:
        return self.client.table(self.table_name)

    def tenant_id(self) -> uuid.UUID:
        tenant_id = self.session.tenant_id
        if tenant_id is None:
            raise NotAuthenticated()
        return tenant_id

    def scoped(self, query: Query) -> Query:
        return query.eq("tenant_id", self.tenant_id())

    def list_query(self) -> Query:
        return self.scoped(self.table.select()).order(self.order_by, desc=self.order_desc)

    # Failure helpers

    def _fail(self, error: Exception, description: str, title: str = "Erro") -> Result:
        if isinstance(error, BackendError):
            logger.error(
                "Backend call failed",
                table=self.table_name,
                error=error.message,
                code=error.code,
                details=error.details,
            )
        self.notifier.error(description, title=title)
        return Result.failure(error)

    def _invalid(self, error: ValidationFailed) -> Result:
        logger.info("Validation failed", table=self.table_name, fields=error.paths)
        return self._fail(error, messages.invalid_data(str(error)))

    def _unauthenticated(self, error: NotAuthenticated) -> Result:
        return self._fail(error, messages.NOT_AUTHENTICATED)

    # CRUD

    async def list(self) -> Result[List[ModelT]]:
        try:
            rows = await self.list_query().execute()
        except NotAuthenticated as e:
            return Result.failure(e)
        except BackendError as e:
            return self._fail(e, self.label.load_failed())
        self.items = rows
        return Result.success(rows)

    async def get(self, id) -> Result[ModelT]:
        """One row of the tenant; absence is reported as not found, not as an error"""
        try:
            row = await self.scoped(self.table.select()).eq("id", id).maybe_single()
        except NotAuthenticated as e:
            return Result.failure(e)
        except BackendError as e:
            return self._fail(e, self.label.load_failed())
        if row is None:
            return Result.missing()
        return Result.success(row)

    async def prepare_create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    async def prepare_update(self, id, values: Dict[str, Any]) -> Dict[str, Any]:
        """Adjust a validated patch against the stored row; may raise ValidationFailed"""
        return values

    async def create(self, fields: Dict[str, Any]) -> Result[ModelT]:
        try:
            values = await self.prepare_create(validate(self.create_schema, fields))
        except ValidationFailed as e:
            return self._invalid(e)

        try:
            values["tenant_id"] = self.tenant_id()
            rows = await self.table.insert(values)
        except NotAuthenticated as e:
            return self._unauthenticated(e)
        except BackendError as e:
            return self._fail(e, self.label.create_failed())

        self.notifier.success(self.label.created())
        await self.list()
        return Result.success(rows[0])

    async def update(self, id, fields: Dict[str, Any]) -> Result[ModelT]:
        try:
            values = validate(self.update_schema, fields, partial=True)
        except ValidationFailed as e:
            return self._invalid(e)

        try:
            values = await self.prepare_update(id, values)
            rows = await self.scoped(self.table.update(values)).eq("id", id).execute()
        except ValidationFailed as e:
            return self._invalid(e)
        except NotAuthenticated as e:
            return self._unauthenticated(e)
        except BackendError as e:
            return self._fail(e, self.label.update_failed())

        if not rows:
            return self._fail(NotFoundError(details=f"{self.table_name}.id={id}"), self.label.update_failed())

        self.notifier.success(self.label.updated())
        await self.list()
        return Result.success(rows[0])

    async def delete(self, id) -> Result[None]:
        try:
            await self.scoped(self.table.delete()).eq("id", id).execute()
        except NotAuthenticated as e:
            return self._unauthenticated(e)
        except BackendError as e:
            return self._fail(e, self.label.delete_failed())

        self.notifier.success(self.label.deleted())
        await self.list()
        return Result.success()

    def find(self, id) -> Optional[ModelT]:
        """Row from the last loaded list"""
        return next((row for row in self.items if str(row.id) == str(id)), None)
