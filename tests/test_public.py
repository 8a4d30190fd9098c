"""
Tests for the public (no session) directory
"""

import pytest

from igreja.models.appointment import AppointmentStatus
from igreja.models.event import PaymentStatus
from igreja.models.member import MemberStatus

from factories import event_fields, leader_fields, member_fields

UNKNOWN_ID = "6f1c2b7a-0a4e-4b8e-9c59-3d7f1e2a4b6c"
VISITOR = {
    "visitor_name": "Joana Lima",
    "visitor_email": "joana@example.com",
    "visitor_phone": "11933332222",
}
ATTENDEE = {
    "attendee_name": "Lucas Rocha",
    "attendee_email": "lucas@example.com",
    "attendee_phone": "11988887777",
}


def booking(leader_id, **overrides):
    fields = {
        "leader_id": str(leader_id),
        "title": "Primeira visita",
        "scheduled_at": "2030-04-01T15:00:00Z",
    }
    fields.update(overrides)
    return fields


@pytest.mark.asyncio
async def test_available_leaders_across_churches(ctx, admin_ctx, other_ctx):
    await admin_ctx.leaders.create(leader_fields(name="Pedro Santos"))
    await admin_ctx.leaders.create(leader_fields(name="Paulo Ocupado", email="paulo@x.com", is_available_for_appointments=False))
    await other_ctx.leaders.create(leader_fields(name="Ana Lider", email="ana@y.com"))

    result = await ctx.public.available_leaders()

    assert [leader.name for leader in result.data] == ["Ana Lider", "Pedro Santos"]


@pytest.mark.asyncio
async def test_active_members_across_churches(ctx, admin_ctx, other_ctx):
    await admin_ctx.members.create(member_fields(name="Maria Silva"))
    await admin_ctx.members.create(member_fields(name="Inativo Souza", email="i@x.com", status="inactive"))
    await other_ctx.members.create(member_fields(name="Bia Costa", email="bia@y.com"))

    result = await ctx.public.active_members()

    assert [member.name for member in result.data] == ["Bia Costa", "Maria Silva"]


@pytest.mark.asyncio
async def test_booking_creates_visitor_in_leaders_church(ctx, admin_ctx):
    leader = (await admin_ctx.leaders.create(leader_fields())).data

    result = await ctx.public.book_appointment(booking(leader.id, **VISITOR))

    assert result.ok
    appointment = result.data
    assert appointment.tenant_id == admin_ctx.session.tenant_id
    assert appointment.status == AppointmentStatus.SCHEDULED
    assert ctx.notifier.last.description == "Agendamento realizado com sucesso!"

    members = (await admin_ctx.members.list()).data
    assert [(m.name, m.status) for m in members] == [("Joana Lima", MemberStatus.ACTIVE)]
    assert appointment.member_id == members[0].id


@pytest.mark.asyncio
async def test_booking_for_existing_member(ctx, admin_ctx):
    leader = (await admin_ctx.leaders.create(leader_fields())).data
    member = (await admin_ctx.members.create(member_fields())).data

    result = await ctx.public.book_appointment(booking(leader.id, member_id=str(member.id)))

    assert result.data.member_id == member.id
    assert len((await admin_ctx.members.list()).data) == 1


@pytest.mark.asyncio
async def test_booking_needs_member_or_visitor_data(ctx, admin_ctx):
    leader = (await admin_ctx.leaders.create(leader_fields())).data

    result = await ctx.public.book_appointment(booking(leader.id, visitor_name="Joana Lima"))

    assert not result.ok
    assert "Para novos visitantes, preencha nome, email e telefone." in ctx.notifier.last.description


@pytest.mark.asyncio
async def test_booking_with_unknown_or_unavailable_leader(ctx, admin_ctx):
    busy = (await admin_ctx.leaders.create(leader_fields(is_available_for_appointments=False))).data

    for leader_id in (UNKNOWN_ID, busy.id):
        result = await ctx.public.book_appointment(booking(leader_id, **VISITOR))
        assert not result.ok
        assert ctx.notifier.last.description == "Líder não encontrado ou indisponível para agendamentos."

    assert (await admin_ctx.members.list()).data == []


@pytest.mark.asyncio
async def test_private_event_is_not_found(ctx, admin_ctx):
    private = (await admin_ctx.events.create(event_fields(is_public=False))).data
    public = (await admin_ctx.events.create(event_fields(title="Aberto", is_public=True))).data

    assert (await ctx.public.get_public_event(private.id)).not_found
    assert (await ctx.public.get_public_event(UNKNOWN_ID)).not_found
    assert (await ctx.public.get_public_event(public.id)).data.title == "Aberto"
    assert [e.title for e in (await ctx.public.list_public_events()).data] == ["Aberto"]


@pytest.mark.asyncio
async def test_register_for_free_event(ctx, admin_ctx):
    event = (await admin_ctx.events.create(event_fields())).data

    result = await ctx.public.register_for_event(event.id, ATTENDEE)

    assert result.data.payment_status is None
    assert ctx.notifier.last.description == "Inscrição realizada com sucesso!"


@pytest.mark.asyncio
async def test_register_for_paid_event_starts_pending(ctx, admin_ctx):
    event = (await admin_ctx.events.create(event_fields(requires_payment=True, price="20.00"))).data

    result = await ctx.public.register_for_event(event.id, ATTENDEE)

    assert result.data.payment_status == PaymentStatus.PENDING


@pytest.mark.asyncio
async def test_register_for_private_event(ctx, admin_ctx):
    event = (await admin_ctx.events.create(event_fields(is_public=False))).data

    result = await ctx.public.register_for_event(event.id, ATTENDEE)

    assert not result.ok
    assert ctx.notifier.last.title == "Evento não encontrado"
    assert ctx.notifier.last.description == "Este evento não está disponível publicamente."


@pytest.mark.asyncio
async def test_booking_with_member_of_another_church(ctx, admin_ctx, other_ctx):
    leader = (await admin_ctx.leaders.create(leader_fields())).data
    foreign_member = (await other_ctx.members.create(member_fields())).data

    result = await ctx.public.book_appointment(booking(leader.id, member_id=str(foreign_member.id)))

    assert result.error.code == "42501"
    assert ctx.notifier.last.description == "Não foi possível realizar o agendamento."
    assert (await admin_ctx.appointments.list()).data == []
    assert (await other_ctx.appointments.list()).data == []
