"""
Unit tests for the saga runner, TTL cache, event bus and notifier
"""

import pytest
import uuid

from igreja.core.cache import TTLCache
from igreja.core.events import EventBus, ProfileChanged, SignedOut, TenantUpdated
from igreja.core.notifications import NotificationVariant, Notifier
from igreja.core.saga import Saga, SagaOutcome


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


# Saga

@pytest.mark.asyncio
async def test_saga_completes_and_collects_step_results():
    async def first(ctx):
        return 1

    async def second(ctx):
        return ctx["first"] + 1

    result = await Saga("demo").step("first", first).step("second", second).run()

    assert result.ok
    assert result.outcome == SagaOutcome.COMPLETED
    assert result.context["second"] == 2


@pytest.mark.asyncio
async def test_saga_compensates_in_reverse_order():
    calls = []

    async def ok(ctx):
        return "done"

    async def undo_a(ctx):
        calls.append("undo_a")

    async def undo_b(ctx):
        calls.append("undo_b")

    async def boom(ctx):
        raise RuntimeError("boom")

    result = await (
        Saga("demo")
        .step("a", ok, undo_a)
        .step("b", ok, undo_b)
        .step("c", boom)
        .run()
    )

    assert result.outcome == SagaOutcome.COMPENSATED
    assert result.failed_step == "c"
    assert str(result.error) == "boom"
    assert calls == ["undo_b", "undo_a"]


@pytest.mark.asyncio
async def test_saga_failed_compensation_needs_manual_cleanup():
    async def ok(ctx):
        return "done"

    async def broken_undo(ctx):
        raise RuntimeError("cannot undo")

    async def boom(ctx):
        raise RuntimeError("boom")

    result = await Saga("demo").step("a", ok, broken_undo).step("b", boom).run()

    assert result.outcome == SagaOutcome.MANUAL_CLEANUP
    assert list(result.compensation_errors) == ["a"]
    assert not result.ok


@pytest.mark.asyncio
async def test_failing_first_step_has_nothing_to_compensate():
    async def boom(ctx):
        raise ValueError("nope")

    result = await Saga("demo").step("a", boom).run()
    assert result.outcome == SagaOutcome.COMPENSATED
    assert result.compensation_errors == {}


# TTL cache

@pytest.mark.asyncio
async def test_cache_reuses_fresh_value():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    calls = []

    async def fetch():
        calls.append(1)
        return len(calls)

    assert await cache.get("k", fetch, ttl_minutes=5) == 1
    clock.now += 60
    assert await cache.get("k", fetch, ttl_minutes=5) == 1
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_cache_refetches_after_ttl():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    values = iter(["old", "new"])

    async def fetch():
        return next(values)

    assert await cache.get("k", fetch, ttl_minutes=1) == "old"
    clock.now += 61
    assert await cache.get("k", fetch, ttl_minutes=1) == "new"


@pytest.mark.asyncio
async def test_cache_clear_and_clear_expired():
    clock = FakeClock()
    cache = TTLCache(clock=clock)

    async def fetch():
        return "v"

    await cache.get("short", fetch, ttl_minutes=1)
    await cache.get("long", fetch, ttl_minutes=10)
    clock.now += 120
    cache.clear_expired()
    assert "short" not in cache
    assert "long" in cache

    cache.clear("long")
    assert len(cache) == 0


# Event bus

@pytest.mark.asyncio
async def test_event_bus_delivers_by_event_type():
    bus = EventBus()
    received = []

    async def on_tenant(event):
        received.append(event)

    bus.subscribe(TenantUpdated, on_tenant)
    tenant_id = uuid.uuid4()
    await bus.publish(TenantUpdated(tenant_id=tenant_id, logo="http://x/logo.png"))
    await bus.publish(SignedOut())

    assert len(received) == 1
    assert received[0].tenant_id == tenant_id
    assert received[0].to_dict()["event_type"] == "TenantUpdated"


@pytest.mark.asyncio
async def test_event_bus_unsubscribe():
    bus = EventBus()
    received = []

    async def handler(event):
        received.append(event)

    unsubscribe = bus.subscribe(ProfileChanged, handler)
    assert bus.subscriber_count(ProfileChanged) == 1
    unsubscribe()
    assert bus.subscriber_count(ProfileChanged) == 0

    await bus.publish(ProfileChanged(profile_id=None, tenant_id=None))
    assert received == []


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    received = []

    async def broken(event):
        raise RuntimeError("handler bug")

    async def healthy(event):
        received.append(event)

    bus.subscribe(SignedOut, broken)
    bus.subscribe(SignedOut, healthy)
    await bus.publish(SignedOut())

    assert len(received) == 1


# Notifier

def test_notifier_variants_and_drain():
    notifier = Notifier()
    notifier.success("Membro criado com sucesso!")
    notifier.error("Não foi possível criar o membro.")

    assert notifier.last.variant == NotificationVariant.DESTRUCTIVE
    assert notifier.last.title == "Erro"
    assert [n.title for n in notifier.drain()] == ["Sucesso", "Erro"]
    assert notifier.notifications == []
