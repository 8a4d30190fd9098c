"""
Events of the current church, their banners and registrations
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import time
import structlog

from igreja.backend.storage import FileObject, StorageBucket
from igreja.core import messages
from igreja.core.errors import BackendError, FieldError, NotAuthenticated, NotFoundError, ValidationFailed
from igreja.core.results import Result
from igreja.core.saga import Saga, SagaOutcome, SagaResult
from igreja.models.event import Event, EventRegistration
from igreja.repositories.base import TenantScopedRepository, validate
from igreja.schemas.event import EventCreate, EventUpdate

logger = structlog.get_logger(__name__)

BANNER_UPLOAD_FAILED = "Não foi possível enviar o banner do evento."
MANUAL_CLEANUP = "O evento foi criado parcialmente e exige limpeza manual."
PRICE_REQUIRED = "Preço é obrigatório para eventos pagos"


def banner_path(event_id, extension: str, timestamp: Optional[int] = None) -> str:
    """banners/{eventId}-{timestamp}.{ext}"""
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    return f"banners/{event_id}-{timestamp}.{extension}"


class EventRepository(TenantScopedRepository[Event]):
    table_name = "events"
    label = messages.EVENTS
    create_schema = EventCreate
    update_schema = EventUpdate
    order_by = "scheduled_at"
    order_desc = False

    @property
    def banners(self) -> StorageBucket:
        return self.client.storage.from_(self.client.settings.EVENT_BANNERS_BUCKET)

    async def prepare_update(self, id, values: Dict[str, Any]) -> Dict[str, Any]:
        if "price" not in values and "requires_payment" not in values:
            return values
        current = await self.scoped(self.table.select()).eq("id", id).maybe_single()
        if current is None:
            return values

        requires_payment = values.get("requires_payment")
        if requires_payment is None:
            requires_payment = current.requires_payment
        # A free event never keeps a price
        if not requires_payment:
            values["price"] = None
        elif values.get("price", current.price) is None:
            raise ValidationFailed([FieldError("price", PRICE_REQUIRED)])
        return values

    def get_public_event_link(self, event_id) -> str:
        return f"{self.client.settings.SITE_URL.rstrip('/')}/events/{event_id}"

    async def get_by_id(self, event_id) -> Result[Event]:
        return await self.get(event_id)

    async def upcoming(self, limit: int = 10) -> Result[List[Event]]:
        try:
            rows = await (
                self.scoped(self.table.select())
                .gte("scheduled_at", datetime.utcnow())
                .order("scheduled_at")
                .limit(limit)
                .execute()
            )
        except NotAuthenticated as e:
            return Result.failure(e)
        except BackendError as e:
            return self._fail(e, self.label.load_failed())
        return Result.success(rows)

    async def list_public(self) -> Result[List[Event]]:
        """Public events of every church"""
        try:
            rows = await self.table.select().eq("is_public", True).order("scheduled_at").execute()
        except BackendError as e:
            return self._fail(e, self.label.load_failed())
        return Result.success(rows)

    async def list_registrations(self, event_id) -> Result[List[EventRegistration]]:
        found = await self.get(event_id)
        if not found.ok or found.not_found:
            return found
        try:
            rows = await (
                self.client.table("event_registrations")
                .select()
                .eq("event_id", event_id)
                .order("registered_at", desc=True)
                .execute()
            )
        except BackendError as e:
            return self._fail(e, "Não foi possível carregar as inscrições.")
        return Result.success(rows)

    # Banners

    async def _store_banner(self, file: FileObject, event_id) -> Dict[str, str]:
        path = banner_path(event_id, file.extension)
        await self.banners.upload(path, file.content, content_type=file.content_type)
        return {"path": path, "url": self.banners.get_public_url(path)}

    async def upload_banner(self, file: FileObject, event_id) -> Result[str]:
        """Store a banner for the event and return its public URL"""
        try:
            stored = await self._store_banner(file, event_id)
        except BackendError as e:
            return self._fail(e, BANNER_UPLOAD_FAILED)
        return Result.success(stored["url"])

    async def attach_banner(self, event_id, file: FileObject) -> Result[Event]:
        """Upload a banner and store its URL on the event"""
        uploaded = await self.upload_banner(file, event_id)
        if not uploaded.ok:
            return uploaded
        return await self.update(event_id, {"banner": uploaded.data})

    async def create_with_banner(self, fields: Dict[str, Any], banner: Optional[FileObject] = None) -> Result[Event]:
        """
        Create an event and, when a banner is given, upload it and attach its URL.

        Runs as a saga: a failed upload deletes the new event row, a failed
        attach removes the stored file and the row.
        """
        if banner is None:
            return await self.create(fields)

        try:
            values = validate(self.create_schema, fields)
            values["tenant_id"] = self.tenant_id()
        except ValidationFailed as e:
            return self._invalid(e)
        except NotAuthenticated as e:
            return self._unauthenticated(e)

        async def insert_event(context):
            rows = await self.table.insert(values)
            return rows[0]

        async def delete_event(context):
            await self.table.delete().eq("id", context["event"].id).execute()

        async def upload(context):
            return await self._store_banner(banner, context["event"].id)

        async def remove_upload(context):
            await self.banners.remove([context["upload"]["path"]])

        async def attach(context):
            rows = await (
                self.table.update({"banner": context["upload"]["url"]})
                .eq("id", context["event"].id)
                .execute()
            )
            if not rows:
                raise NotFoundError(details=f"events.id={context['event'].id}")
            return rows[0]

        saga = (
            Saga("event_with_banner")
            .step("event", insert_event, compensation=delete_event)
            .step("upload", upload, compensation=remove_upload)
            .step("attach", attach)
        )
        outcome: SagaResult = await saga.run()

        if not outcome.ok:
            description = MANUAL_CLEANUP if outcome.outcome == SagaOutcome.MANUAL_CLEANUP else self.label.create_failed()
            self._fail(outcome.error, description)
            return Result(data=None, error=outcome.error)

        self.notifier.success(self.label.created())
        await self.list()
        return Result.success(outcome.context["attach"])
