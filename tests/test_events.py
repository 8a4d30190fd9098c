"""
Tests for the events module: pricing, banners and registrations
"""

import pytest
import re
from decimal import Decimal
from unittest import mock

from igreja.backend.storage import FileObject, StorageBucket
from igreja.backend.tables import Table
from igreja.core.errors import BackendError
from igreja.repositories.events import banner_path

from factories import event_fields

BANNER = FileObject(filename="cartaz.PNG", content=b"\x89PNG banner", content_type="image/png")


def _stored_files(backend):
    return backend.object_store.keys("event-banners")


@pytest.mark.asyncio
async def test_new_event_has_no_attendees(admin_ctx):
    event = (await admin_ctx.events.create(event_fields())).data

    assert event.current_attendees == 0
    assert event.speakers == ["Pr. João"]
    assert admin_ctx.notifier.last.description == "Evento criado com sucesso!"


@pytest.mark.asyncio
async def test_free_event_carries_no_price(admin_ctx):
    await admin_ctx.events.create(event_fields(requires_payment=False, price="25.00"))

    (event,) = (await admin_ctx.events.list()).data
    assert event.requires_payment is False
    assert event.price is None


@pytest.mark.asyncio
async def test_paid_event_price_survives_round_trip(admin_ctx):
    await admin_ctx.events.create(event_fields(requires_payment=True, price="49.90"))

    (event,) = (await admin_ctx.events.list()).data
    assert event.requires_payment is True
    assert event.price == Decimal("49.90")


@pytest.mark.asyncio
async def test_turning_event_free_clears_price(admin_ctx):
    event = (await admin_ctx.events.create(event_fields(requires_payment=True, price="30"))).data

    updated = (await admin_ctx.events.update(event.id, {"requires_payment": False})).data

    assert updated.price is None


@pytest.mark.asyncio
async def test_price_patch_on_free_event_is_dropped(admin_ctx):
    event = (await admin_ctx.events.create(event_fields())).data

    updated = (await admin_ctx.events.update(event.id, {"price": "50.00"})).data

    assert updated.requires_payment is False
    assert updated.price is None


@pytest.mark.asyncio
async def test_making_event_paid_requires_price(admin_ctx):
    event = (await admin_ctx.events.create(event_fields())).data

    result = await admin_ctx.events.update(event.id, {"requires_payment": True})

    assert result.error.paths == ["price"]
    (stored,) = (await admin_ctx.events.list()).data
    assert stored.requires_payment is False


@pytest.mark.asyncio
async def test_price_patch_on_paid_event(admin_ctx):
    event = (await admin_ctx.events.create(event_fields(requires_payment=True, price="30"))).data

    updated = (await admin_ctx.events.update(event.id, {"price": "10"})).data

    assert updated.price == Decimal("10")
    assert updated.requires_payment is True


@pytest.mark.asyncio
async def test_get_by_id_not_found_is_not_an_error(admin_ctx):
    result = await admin_ctx.events.get_by_id("6f1c2b7a-0a4e-4b8e-9c59-3d7f1e2a4b6c")

    assert result.ok
    assert result.not_found
    assert result.data is None


@pytest.mark.asyncio
async def test_public_event_link_is_pure(admin_ctx):
    with mock.patch.object(admin_ctx.client, "table") as table:
        link = admin_ctx.events.get_public_event_link("abc")
    assert link == "http://igreja.test/events/abc"
    table.assert_not_called()


def test_banner_path():
    assert banner_path("e1", "png", timestamp=1700000000000) == "banners/e1-1700000000000.png"
    assert re.fullmatch(r"banners/e1-\d{13}\.jpg", banner_path("e1", "jpg"))


@pytest.mark.asyncio
async def test_upload_banner_returns_public_url(admin_ctx, backend):
    event = (await admin_ctx.events.create(event_fields())).data

    url = (await admin_ctx.events.upload_banner(BANNER, event.id)).data

    assert re.fullmatch(rf"http://testserver/storage/event-banners/banners/{event.id}-\d+\.png", url)
    assert len(_stored_files(backend)) == 1


@pytest.mark.asyncio
async def test_create_with_banner(admin_ctx, backend):
    result = await admin_ctx.events.create_with_banner(event_fields(), BANNER)

    assert result.ok
    assert result.data.banner.startswith("http://testserver/storage/event-banners/banners/")
    assert admin_ctx.events.find(result.data.id).banner == result.data.banner
    assert len(_stored_files(backend)) == 1


@pytest.mark.asyncio
async def test_create_with_banner_upload_failure_removes_event(admin_ctx, backend):
    with mock.patch.object(StorageBucket, "upload", side_effect=BackendError("bucket not found", code="404")):
        result = await admin_ctx.events.create_with_banner(event_fields(), BANNER)

    assert not result.ok
    assert (await admin_ctx.events.list()).data == []
    assert admin_ctx.notifier.last.description == "Não foi possível criar o evento."


@pytest.mark.asyncio
async def test_create_with_banner_attach_failure_removes_file_and_event(admin_ctx, backend):
    with mock.patch.object(Table, "update", side_effect=BackendError("permission denied")):
        result = await admin_ctx.events.create_with_banner(event_fields(), BANNER)

    assert not result.ok
    assert (await admin_ctx.events.list()).data == []
    assert _stored_files(backend) == []


@pytest.mark.asyncio
async def test_create_with_banner_validates_first(admin_ctx):
    with mock.patch.object(StorageBucket, "upload") as upload:
        result = await admin_ctx.events.create_with_banner(event_fields(title=""), BANNER)

    assert result.error.paths == ["title"]
    upload.assert_not_called()


@pytest.mark.asyncio
async def test_create_without_banner_is_plain_create(admin_ctx):
    result = await admin_ctx.events.create_with_banner(event_fields(), None)
    assert result.ok
    assert result.data.banner is None


@pytest.mark.asyncio
async def test_upcoming_skips_past_events(admin_ctx):
    await admin_ctx.events.create(event_fields(title="Passado", scheduled_at="2001-01-01T10:00:00Z"))
    await admin_ctx.events.create(event_fields(title="Futuro", scheduled_at="2099-01-01T10:00:00Z"))

    assert [e.title for e in (await admin_ctx.events.upcoming()).data] == ["Futuro"]


@pytest.mark.asyncio
async def test_list_public_spans_tenants(admin_ctx, other_ctx):
    await admin_ctx.events.create(event_fields(title="Público X", is_public=True))
    await admin_ctx.events.create(event_fields(title="Privado X", is_public=False))
    await other_ctx.events.create(event_fields(title="Público Y", is_public=True))

    titles = sorted(e.title for e in (await admin_ctx.events.list_public()).data)
    assert titles == ["Público X", "Público Y"]


@pytest.mark.asyncio
async def test_list_registrations_of_own_event_only(admin_ctx, other_ctx):
    event = (await admin_ctx.events.create(event_fields())).data
    await admin_ctx.public.register_for_event(
        event.id, {"attendee_name": "Lucas", "attendee_email": "lucas@x.com", "attendee_phone": "11988887777"}
    )

    mine = await admin_ctx.events.list_registrations(event.id)
    theirs = await other_ctx.events.list_registrations(event.id)

    assert [r.attendee_name for r in mine.data] == ["Lucas"]
    assert theirs.not_found
