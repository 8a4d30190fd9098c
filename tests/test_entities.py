"""
Behaviour shared by every tenant-scoped entity module
"""

import pytest
from unittest import mock

from igreja.core.errors import BackendError, ValidationFailed

from factories import appointment_fields, event_fields, leader_fields, member_fields


async def _wrap(payload):
    return payload


async def _appointment_payload(ctx):
    member = (await ctx.members.create(member_fields())).data
    leader = (await ctx.leaders.create(leader_fields())).data
    return appointment_fields(leader.id, member.id)


async def _user_payload(ctx):
    return {"name": "Joana", "email": "joana@example.com", "password": "TempPass1", "role": "leader"}


ENTITIES = {
    "members": (lambda ctx: _wrap(member_fields()), "name"),
    "leaders": (lambda ctx: _wrap(leader_fields()), "type"),
    "appointments": (_appointment_payload, "title"),
    "events": (lambda ctx: _wrap(event_fields()), "location"),
    "users": (_user_payload, "email"),
}


@pytest.mark.asyncio
@pytest.mark.parametrize("entity", list(ENTITIES))
async def test_missing_required_field_makes_no_backend_call(admin_ctx, entity):
    build, required = ENTITIES[entity]
    repo = getattr(admin_ctx, entity)
    payload = await build(admin_ctx)
    del payload[required]

    with mock.patch.object(admin_ctx.client, "table", wraps=admin_ctx.client.table) as table, \
            mock.patch.object(admin_ctx.client.auth, "admin_create_user") as create_user:
        result = await repo.create(payload)

    assert isinstance(result.error, ValidationFailed)
    assert required in result.error.paths
    assert table.call_count == 0
    create_user.assert_not_called()
    assert admin_ctx.notifier.last.description.startswith("Dados inválidos")


@pytest.mark.asyncio
@pytest.mark.parametrize("entity", list(ENTITIES))
async def test_created_row_appears_in_list(admin_ctx, entity):
    build, _ = ENTITIES[entity]
    repo = getattr(admin_ctx, entity)

    result = await repo.create(await build(admin_ctx))

    assert result.ok
    assert result.data.tenant_id == admin_ctx.session.tenant_id
    listed = await repo.list()
    assert result.data.id in [row.id for row in listed.data]
    # create refreshes the local list by itself
    assert repo.find(result.data.id) is not None


@pytest.mark.asyncio
@pytest.mark.parametrize("entity", list(ENTITIES))
async def test_deleted_row_leaves_list(admin_ctx, entity):
    build, _ = ENTITIES[entity]
    repo = getattr(admin_ctx, entity)
    created = (await repo.create(await build(admin_ctx))).data

    result = await repo.delete(created.id)

    assert result.ok
    listed = await repo.list()
    assert created.id not in [row.id for row in listed.data]
    assert repo.find(created.id) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("entity", ["members", "leaders", "events"])
async def test_list_is_tenant_isolated(admin_ctx, other_ctx, entity):
    build, _ = ENTITIES[entity]
    mine = (await getattr(admin_ctx, entity).create(await build(admin_ctx))).data
    theirs = (await getattr(other_ctx, entity).create(await build(other_ctx))).data

    my_rows = (await getattr(admin_ctx, entity).list()).data
    their_rows = (await getattr(other_ctx, entity).list()).data

    assert {row.tenant_id for row in my_rows} == {admin_ctx.session.tenant_id}
    assert {row.tenant_id for row in their_rows} == {other_ctx.session.tenant_id}
    assert theirs.id not in [row.id for row in my_rows]
    assert mine.id not in [row.id for row in their_rows]


@pytest.mark.asyncio
async def test_users_list_is_tenant_isolated(admin_ctx, other_ctx):
    mine = {row.id for row in (await admin_ctx.users.list()).data}
    theirs = {row.id for row in (await other_ctx.users.list()).data}

    assert mine == {admin_ctx.session.profile.id}
    assert theirs == {other_ctx.session.profile.id}


@pytest.mark.asyncio
async def test_cannot_update_or_delete_other_tenants_rows(admin_ctx, other_ctx):
    theirs = (await other_ctx.members.create(member_fields())).data

    update = await admin_ctx.members.update(theirs.id, {"name": "Invasor"})
    await admin_ctx.members.delete(theirs.id)

    assert not update.ok
    still_there = (await other_ctx.members.get(theirs.id)).data
    assert still_there.name == "Maria Silva"


@pytest.mark.asyncio
async def test_backend_error_keeps_previous_list(admin_ctx):
    await admin_ctx.members.create(member_fields())
    before = list(admin_ctx.members.items)

    error = BackendError("server closed the connection unexpectedly", code="08006")
    with mock.patch("igreja.backend.tables.Query.execute", side_effect=error):
        result = await admin_ctx.members.list()

    assert not result.ok
    assert admin_ctx.members.items == before
    assert admin_ctx.notifier.last.description == "Não foi possível carregar os membros."


@pytest.mark.asyncio
async def test_operations_without_session_fail_softly(ctx):
    listed = await ctx.members.list()
    created = await ctx.members.create(member_fields())

    assert not listed.ok
    assert not created.ok
    assert ctx.notifier.last.description == "Usuário não autenticado"
