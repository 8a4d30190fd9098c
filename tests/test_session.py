"""
Tests for the session store and the tenant resolver
"""

import pytest
import uuid
from unittest import mock

from igreja.context import AppContext
from igreja.core.errors import AuthErrorKind, BackendError, ValidationFailed
from igreja.core.events import ProfileChanged, SignedOut, TenantUpdated
from igreja.core.permissions import UserRole

from factories import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.mark.asyncio
async def test_sign_up_then_sign_in(backend, ctx):
    """Sign up creates the church and its admin; the same credentials then sign in"""
    result = await ctx.session.sign_up("a@b.com", "Secret123", "Ana", "Igreja X")

    assert result.ok
    assert ctx.session.profile.name == "Ana"
    assert ctx.session.profile.role == UserRole.ADMIN
    assert ctx.tenant.name == "Igreja X"
    assert ctx.tenant.slug == "igreja-x"
    assert ctx.session.tenant_id == ctx.tenant.id

    fresh = await AppContext.create(backend)
    signed_in = await fresh.session.sign_in("a@b.com", "Secret123")
    assert signed_in.ok
    assert fresh.session.profile.id == ctx.session.profile.id
    assert fresh.tenant.id == ctx.tenant.id
    await fresh.close()


@pytest.mark.asyncio
async def test_sign_in_failure_is_typed_and_localized(admin_ctx, backend):
    fresh = await AppContext.create(backend)
    result = await fresh.session.sign_in(ADMIN_EMAIL, "WrongPass1")

    assert not result.ok
    assert result.error.kind == AuthErrorKind.INVALID_CREDENTIALS
    assert fresh.notifier.last.description == "Email ou senha incorretos. Verifique suas credenciais."
    assert fresh.session.profile is None
    await fresh.close()


@pytest.mark.asyncio
async def test_sign_up_duplicate_email(admin_ctx, backend):
    fresh = await AppContext.create(backend)
    result = await fresh.session.sign_up(ADMIN_EMAIL, ADMIN_PASSWORD, "Ana", "Outra")

    assert result.error.kind == AuthErrorKind.ALREADY_REGISTERED
    assert "já está cadastrado" in fresh.notifier.last.description
    await fresh.close()


@pytest.mark.asyncio
async def test_sign_up_validates_before_calling_auth(ctx):
    with mock.patch.object(ctx.client.auth, "sign_up") as auth_sign_up:
        result = await ctx.session.sign_up("not-an-email", "weak", "A", None)

    assert isinstance(result.error, ValidationFailed)
    assert set(result.error.paths) == {"email", "password", "name"}
    auth_sign_up.assert_not_called()


@pytest.mark.asyncio
async def test_sign_out_clears_profile_and_tenant(admin_ctx):
    received = []

    async def on_signed_out(event):
        received.append(event)

    admin_ctx.bus.subscribe(SignedOut, on_signed_out)
    await admin_ctx.session.sign_out()

    assert admin_ctx.session.user is None
    assert admin_ctx.session.profile is None
    assert admin_ctx.tenant is None
    assert not admin_ctx.session.is_member
    assert len(received) == 1

    # The context stays usable for the next sign-in
    result = await admin_ctx.session.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
    assert result.ok
    assert admin_ctx.tenant is not None


@pytest.mark.asyncio
async def test_restore_session_from_token(admin_ctx, backend):
    token = admin_ctx.client.auth.session.access_token

    restored = await AppContext.create(backend, access_token=token)

    assert restored.session.user.email == ADMIN_EMAIL
    assert restored.session.profile.id == admin_ctx.session.profile.id
    assert restored.tenant.name == "Igreja X"
    await restored.close()


@pytest.mark.asyncio
async def test_restore_session_never_raises(ctx):
    user = await ctx.session.restore_session("garbage-token")

    assert user is None
    assert ctx.session.profile is None


@pytest.mark.asyncio
async def test_refresh_profile_keeps_previous_profile_on_error(admin_ctx):
    previous = admin_ctx.session.profile

    with mock.patch.object(admin_ctx.client, "table", side_effect=BackendError("connection reset")):
        result = await admin_ctx.session.refresh_profile()

    assert not result.ok
    assert admin_ctx.session.profile is previous
    assert admin_ctx.notifier.last.variant.value == "destructive"


@pytest.mark.asyncio
async def test_refresh_profile_keeps_previous_profile_when_row_missing(admin_ctx):
    previous = admin_ctx.session.profile
    await admin_ctx.client.table("profiles").delete().eq("id", previous.id).execute()

    result = await admin_ctx.session.refresh_profile()

    assert result.not_found
    assert admin_ctx.session.profile is previous
    assert admin_ctx.notifier.last.description == "Não foi possível carregar o perfil do usuário."


@pytest.mark.asyncio
async def test_refresh_profile_publishes_profile_changed(admin_ctx):
    received = []

    async def on_profile(event):
        received.append(event)

    admin_ctx.bus.subscribe(ProfileChanged, on_profile)
    await admin_ctx.client.table("profiles").update({"role": "leader"}).eq("id", admin_ctx.session.profile.id).execute()
    await admin_ctx.session.refresh_profile()

    assert admin_ctx.session.role == UserRole.LEADER
    assert received[0].tenant_id == admin_ctx.session.tenant_id


@pytest.mark.asyncio
async def test_derived_role_checks(admin_ctx):
    session = admin_ctx.session
    assert (session.is_admin, session.is_leader, session.is_member) == (True, True, True)
    assert session.has_permission("manage_finances")

    await admin_ctx.client.table("profiles").update({"role": "member"}).eq("id", session.profile.id).execute()
    await session.refresh_profile()

    assert (session.is_admin, session.is_leader, session.is_member) == (False, False, True)
    assert not session.has_permission("manage_events")
    assert session.has_permission("view_public_events")


@pytest.mark.asyncio
async def test_unauthenticated_has_no_permissions(ctx):
    assert not ctx.session.has_permission("view_public_events")
    assert ctx.session.tenant_id is None


# Tenant resolver

@pytest.mark.asyncio
async def test_fetch_tenant_without_profile_is_noop(ctx):
    with mock.patch.object(ctx.client, "table") as table:
        assert await ctx.tenants.fetch_tenant() is None
    table.assert_not_called()


@pytest.mark.asyncio
async def test_tenant_updated_triggers_refetch(admin_ctx):
    tenant_id = admin_ctx.tenant.id
    await admin_ctx.client.table("tenants").update({"logo": "http://cdn/logo.png"}).eq("id", tenant_id).execute()
    assert admin_ctx.tenant.logo is None

    await admin_ctx.bus.publish(TenantUpdated(tenant_id=tenant_id, logo="http://cdn/logo.png"))

    assert admin_ctx.tenant.logo == "http://cdn/logo.png"


@pytest.mark.asyncio
async def test_tenant_backend_error_keeps_prior_state(admin_ctx):
    previous = admin_ctx.tenant

    with mock.patch.object(admin_ctx.client, "table", side_effect=BackendError("timeout")):
        tenant = await admin_ctx.tenants.fetch_tenant()

    assert tenant is previous
    assert admin_ctx.tenant is previous


@pytest.mark.asyncio
async def test_missing_tenant_row_is_not_an_error(admin_ctx):
    profile = admin_ctx.session.profile
    original, profile.tenant_id = profile.tenant_id, uuid.uuid4()
    try:
        tenant = await admin_ctx.tenants.fetch_tenant()
    finally:
        profile.tenant_id = original

    assert tenant is None
    assert admin_ctx.notifier.last.variant.value != "destructive"


@pytest.mark.asyncio
async def test_close_unsubscribes_everything(admin_ctx):
    await admin_ctx.close()

    assert admin_ctx.bus.subscriber_count(TenantUpdated) == 0
    assert admin_ctx.bus.subscriber_count(ProfileChanged) == 0
    assert admin_ctx.client.auth._listeners == []
