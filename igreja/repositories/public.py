"""
Public discovery: the one deliberate path across church boundaries

Needs no session. Visitors find available leaders and public events of
any church, book appointments and register for events.
"""

from typing import Any, Dict, List
import structlog

from pydantic import ValidationError

from igreja.backend.service import BackendClient
from igreja.core import messages
from igreja.core.errors import BackendError, NotFoundError, ValidationFailed
from igreja.core.notifications import Notifier
from igreja.core.results import Result
from igreja.core.saga import Saga
from igreja.models.appointment import Appointment, AppointmentStatus
from igreja.models.event import Event, EventRegistration, PaymentStatus
from igreja.models.leader import Leader
from igreja.models.member import Member, MemberStatus
from igreja.repositories.base import validate
from igreja.schemas.event import EventRegistrationCreate
from igreja.schemas.public import PublicBookingCreate

logger = structlog.get_logger(__name__)

LEADER_NOT_FOUND = "Líder não encontrado ou indisponível para agendamentos."
BOOKING_DONE = "Agendamento realizado com sucesso!"
BOOKING_FAILED = "Não foi possível realizar o agendamento."
REGISTRATION_DONE = "Inscrição realizada com sucesso!"
REGISTRATION_FAILED = "Não foi possível realizar a inscrição."


class PublicDirectory:
    def __init__(self, client: BackendClient, notifier: Notifier):
        self.client = client
        self.notifier = notifier

    def _fail(self, error: Exception, description: str, title: str = "Erro") -> Result:
        if isinstance(error, BackendError):
            logger.error("Public call failed", error=error.message, code=error.code)
        self.notifier.error(description, title=title)
        return Result.failure(error)

    async def available_leaders(self) -> Result[List[Leader]]:
        try:
            rows = await (
                self.client.table("leaders")
                .select()
                .eq("is_available_for_appointments", True)
                .order("name")
                .execute()
            )
        except BackendError as e:
            return self._fail(e, messages.LEADERS.load_failed())
        return Result.success(rows)

    async def active_members(self) -> Result[List[Member]]:
        try:
            rows = await (
                self.client.table("members")
                .select()
                .eq("status", MemberStatus.ACTIVE)
                .order("name")
                .execute()
            )
        except BackendError as e:
            return self._fail(e, messages.MEMBERS.load_failed())
        return Result.success(rows)

    async def book_appointment(self, fields: Dict[str, Any]) -> Result[Appointment]:
        """Book with an available leader; a new visitor first becomes a member of the leader's church"""
        try:
            booking = PublicBookingCreate.model_validate(fields)
        except ValidationError as e:
            error = ValidationFailed.from_pydantic(e)
            return self._fail(error, messages.invalid_data(str(error)))

        try:
            leader = await self.client.table("leaders").select().eq("id", booking.leader_id).maybe_single()
        except BackendError as e:
            return self._fail(e, BOOKING_FAILED)
        if leader is None or not leader.is_available_for_appointments:
            return self._fail(NotFoundError(details=f"leaders.id={booking.leader_id}"), LEADER_NOT_FOUND)

        async def resolve_member(context):
            if not booking.is_new_visitor:
                return {"id": booking.member_id, "created": False}
            rows = await self.client.table("members").insert({
                "tenant_id": leader.tenant_id,
                "name": booking.visitor_name,
                "email": booking.visitor_email,
                "phone": booking.visitor_phone,
                "status": MemberStatus.ACTIVE,
                "groups": [],
            })
            return {"id": rows[0].id, "created": True}

        async def remove_visitor(context):
            if context["member"]["created"]:
                await self.client.table("members").delete().eq("id", context["member"]["id"]).execute()

        async def insert_appointment(context):
            rows = await self.client.table("appointments").insert({
                "tenant_id": leader.tenant_id,
                "leader_id": leader.id,
                "member_id": context["member"]["id"],
                "title": booking.title,
                "description": booking.description,
                "scheduled_at": booking.scheduled_at,
                "duration": booking.duration,
                "status": AppointmentStatus.SCHEDULED,
            })
            return rows[0]

        outcome = await (
            Saga("public_booking")
            .step("member", resolve_member, compensation=remove_visitor)
            .step("appointment", insert_appointment)
            .run()
        )
        if not outcome.ok:
            return self._fail(outcome.error, BOOKING_FAILED)

        self.notifier.success(BOOKING_DONE)
        return Result.success(outcome.context["appointment"])

    async def get_public_event(self, event_id) -> Result[Event]:
        """A public event; private or unknown events are both "not found" """
        try:
            event = await self.client.table("events").select().eq("id", event_id).maybe_single()
        except BackendError as e:
            return self._fail(e, messages.EVENTS.load_failed())
        if event is None or not event.is_public:
            return Result.missing()
        return Result.success(event)

    async def list_public_events(self) -> Result[List[Event]]:
        try:
            rows = await self.client.table("events").select().eq("is_public", True).order("scheduled_at").execute()
        except BackendError as e:
            return self._fail(e, messages.EVENTS.load_failed())
        return Result.success(rows)

    async def register_for_event(self, event_id, fields: Dict[str, Any]) -> Result[EventRegistration]:
        """Register an attendee; paid events start with a pending payment"""
        try:
            values = validate(EventRegistrationCreate, fields)
        except ValidationFailed as e:
            return self._fail(e, messages.invalid_data(str(e)))

        found = await self.get_public_event(event_id)
        if not found.ok:
            return found
        if found.not_found:
            return self._fail(
                NotFoundError(details=f"events.id={event_id}"),
                messages.EVENT_NOT_PUBLIC,
                title=messages.EVENT_NOT_FOUND_TITLE,
            )

        event = found.data
        values["event_id"] = event.id
        if event.requires_payment:
            values["payment_status"] = PaymentStatus.PENDING

        try:
            rows = await self.client.table("event_registrations").insert(values)
        except BackendError as e:
            return self._fail(e, REGISTRATION_FAILED)

        self.notifier.success(REGISTRATION_DONE)
        return Result.success(rows[0])
