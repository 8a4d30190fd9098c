"""
Tests for the appointments module
"""

import pytest
import pytest_asyncio
from datetime import datetime

from igreja.models.appointment import AppointmentStatus

from factories import appointment_fields, leader_fields, member_fields


@pytest_asyncio.fixture
async def people(admin_ctx):
    member = (await admin_ctx.members.create(member_fields())).data
    leader = (await admin_ctx.leaders.create(leader_fields())).data
    return leader, member


@pytest.mark.asyncio
async def test_status_defaults_to_scheduled(admin_ctx, people):
    leader, member = people
    fields = appointment_fields(leader.id, member.id, scheduled_at="2030-03-01T14:00:00.000Z", duration=60)

    appointment = (await admin_ctx.appointments.create(fields)).data

    assert appointment.status == AppointmentStatus.SCHEDULED
    assert appointment.duration == 60
    assert appointment.scheduled_at == datetime(2030, 3, 1, 14, 0)


@pytest.mark.asyncio
async def test_list_ordered_by_schedule(admin_ctx, people):
    leader, member = people
    await admin_ctx.appointments.create(appointment_fields(leader.id, member.id, title="Depois", scheduled_at="2030-03-02T10:00:00Z"))
    await admin_ctx.appointments.create(appointment_fields(leader.id, member.id, title="Antes", scheduled_at="2030-03-01T10:00:00Z"))

    titles = [a.title for a in (await admin_ctx.appointments.list()).data]
    assert titles == ["Antes", "Depois"]


@pytest.mark.asyncio
async def test_complete(admin_ctx, people):
    leader, member = people
    appointment = (await admin_ctx.appointments.create(appointment_fields(leader.id, member.id))).data

    result = await admin_ctx.appointments.complete(appointment.id)

    assert result.data.status == AppointmentStatus.COMPLETED


@pytest.mark.asyncio
async def test_any_status_can_follow_any_other(admin_ctx, people):
    leader, member = people
    appointment = (await admin_ctx.appointments.create(appointment_fields(leader.id, member.id))).data

    for status in ("cancelled", "completed", "scheduled", "cancelled"):
        result = await admin_ctx.appointments.update(appointment.id, {"status": status})
        assert result.data.status.value == status


@pytest.mark.asyncio
async def test_list_by_date_range(admin_ctx, people):
    leader, member = people
    other_leader = (await admin_ctx.leaders.create(leader_fields(name="Outro", email="outro@x.com"))).data
    for day, who in ((1, leader), (5, leader), (5, other_leader), (20, leader)):
        await admin_ctx.appointments.create(
            appointment_fields(who.id, member.id, title=f"dia {day}", scheduled_at=f"2030-03-{day:02d}T09:00:00Z")
        )

    march = await admin_ctx.appointments.list_by_date_range(datetime(2030, 3, 1), datetime(2030, 3, 10))
    assert [a.title for a in march.data] == ["dia 1", "dia 5", "dia 5"]

    mine = await admin_ctx.appointments.list_by_date_range(datetime(2030, 3, 1), datetime(2030, 3, 31), leader.id)
    assert [a.title for a in mine.data] == ["dia 1", "dia 5", "dia 20"]


@pytest.mark.asyncio
async def test_update_status_many(admin_ctx, people):
    leader, member = people
    ids = [
        (await admin_ctx.appointments.create(appointment_fields(leader.id, member.id, title=f"a{i}"))).data.id
        for i in range(3)
    ]

    result = await admin_ctx.appointments.update_status_many(ids[:2], "cancelled")

    assert len(result.data) == 2
    statuses = {a.title: a.status for a in admin_ctx.appointments.items}
    assert statuses == {
        "a0": AppointmentStatus.CANCELLED,
        "a1": AppointmentStatus.CANCELLED,
        "a2": AppointmentStatus.SCHEDULED,
    }


@pytest.mark.asyncio
async def test_update_status_many_rejects_bad_status(admin_ctx, people):
    result = await admin_ctx.appointments.update_status_many(["6f1c2b7a-0a4e-4b8e-9c59-3d7f1e2a4b6c"], "postponed")

    assert result.error.paths == ["status"]


@pytest.mark.asyncio
async def test_create_rejects_people_of_another_church(admin_ctx, other_ctx, people):
    leader, member = people
    foreign_leader = (await other_ctx.leaders.create(leader_fields())).data
    foreign_member = (await other_ctx.members.create(member_fields())).data

    for leader_id, member_id in ((foreign_leader.id, foreign_member.id), (leader.id, foreign_member.id), (foreign_leader.id, member.id)):
        result = await admin_ctx.appointments.create(appointment_fields(leader_id, member_id))
        assert result.error.code == "42501"
        assert admin_ctx.notifier.last.description == "Não foi possível criar o agendamento."

    assert (await admin_ctx.appointments.list()).data == []


@pytest.mark.asyncio
async def test_update_rejects_people_of_another_church(admin_ctx, other_ctx, people):
    leader, member = people
    appointment = (await admin_ctx.appointments.create(appointment_fields(leader.id, member.id))).data
    foreign_leader = (await other_ctx.leaders.create(leader_fields())).data

    result = await admin_ctx.appointments.update(appointment.id, {"leader_id": str(foreign_leader.id)})

    assert result.error.code == "42501"
    (stored,) = (await admin_ctx.appointments.list()).data
    assert stored.leader_id == leader.id


@pytest.mark.asyncio
async def test_create_with_unknown_leader(admin_ctx, people):
    _, member = people

    result = await admin_ctx.appointments.create(
        appointment_fields("6f1c2b7a-0a4e-4b8e-9c59-3d7f1e2a4b6c", member.id)
    )

    assert result.error.code == "23503"
