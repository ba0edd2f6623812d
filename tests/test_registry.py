"""Token registry: create, lookup, list, revoke, sweep"""

import threading

import pytest

from magiclink.registry import (
    DEFAULT_LABEL,
    DEFAULT_TTL_MS,
    LinkExpired,
    LinkNotFound,
    LinkRegistry,
)


class FakeClock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return LinkRegistry(clock=clock)


def test_tokens_are_unique(registry):
    tokens = {registry.create().token for _ in range(500)}
    assert len(tokens) == 500


def test_create_applies_requested_ttl_exactly(registry, clock):
    clock.now = 1_700_000_000_000
    record = registry.create(label="Acme", ttl_ms=90_000)
    assert record.created_at == clock.now
    assert record.expires_at - record.created_at == 90_000
    assert record.label == "Acme"
    assert record.access_count == 0


@pytest.mark.parametrize("ttl", [None, 0, -1, -60_000])
def test_create_falls_back_to_default_ttl(registry, ttl):
    record = registry.create(ttl_ms=ttl)
    assert record.expires_at - record.created_at == DEFAULT_TTL_MS == 2 * 60 * 60 * 1000


def test_create_uses_configured_default_ttl(clock):
    registry = LinkRegistry(default_ttl_ms=5_000, clock=clock)
    record = registry.create()
    assert record.ttl_ms == 5_000


def test_non_positive_default_ttl_is_rejected():
    with pytest.raises(ValueError):
        LinkRegistry(default_ttl_ms=0)


@pytest.mark.parametrize("label", [None, ""])
def test_missing_label_defaults_to_unnamed(registry, label):
    assert registry.create(label=label).label == DEFAULT_LABEL == "Unnamed"


def test_create_returns_a_copy(registry):
    record = registry.create()
    record.access_count = 99
    record.expires_at = 0
    view = registry.lookup(record.token)
    assert view.access_count == 1
    assert view.expires_at == DEFAULT_TTL_MS


def test_lookup_unknown_token_raises_not_found(registry):
    with pytest.raises(LinkNotFound):
        registry.lookup("nope")


def test_lookup_succeeds_until_deadline_then_expires(registry, clock):
    token = registry.create(ttl_ms=1_000).token

    for t in (0, 500, 999):
        clock.now = t
        assert registry.lookup(token).remaining_ms == 1_000 - t

    clock.now = 1_000
    with pytest.raises(LinkExpired):
        registry.lookup(token)
    # The expired record was deleted by the lookup
    assert len(registry) == 0
    with pytest.raises(LinkNotFound):
        registry.lookup(token)


def test_successful_lookups_count_accesses(registry, clock):
    token = registry.create(ttl_ms=60_000).token
    for k in range(1, 4):
        assert registry.lookup(token).access_count == k

    [active] = registry.list_active()
    assert active.access_count == 3


def test_failed_lookups_do_not_count(registry, clock):
    live = registry.create(ttl_ms=60_000).token
    registry.lookup(live)
    with pytest.raises(LinkNotFound):
        registry.lookup("missing")

    [active] = registry.list_active()
    assert active.access_count == 1


def test_lookup_view_is_read_only(registry):
    token = registry.create().token
    view = registry.lookup(token)
    with pytest.raises(Exception):
        view.access_count = 10
    assert registry.lookup(token).access_count == 2


def test_list_active_filters_expired_and_rounds_minutes(registry, clock):
    a = registry.create(label="a", ttl_ms=90_000).token   # 1.5 min
    b = registry.create(label="b", ttl_ms=150_000).token  # 2.5 min
    registry.create(label="c", ttl_ms=10_000)

    clock.now = 10_000
    active = registry.list_active()
    assert [v.token for v in active] == [a, b]
    assert [v.remaining_minutes for v in active] == [1, 2]

    clock.now = 0
    assert [v.remaining_minutes for v in registry.list_active()] == [2, 3, 0]


def test_list_active_takes_explicit_time_and_does_not_mutate(registry):
    registry.create(ttl_ms=1_000)
    assert registry.list_active(now=1_000) == []
    # Still held: listing never deletes
    assert len(registry) == 1
    assert len(registry.list_active(now=999)) == 1


def test_revoke_is_final(registry):
    token = registry.create().token
    registry.revoke(token)
    with pytest.raises(LinkNotFound):
        registry.revoke(token)
    with pytest.raises(LinkNotFound):
        registry.lookup(token)


def test_revoke_removes_expired_links_too(registry, clock):
    token = registry.create(ttl_ms=1_000).token
    clock.now = 5_000
    registry.revoke(token)
    assert len(registry) == 0


def test_sweep_removes_exactly_the_expired_links(registry, clock):
    registry.create(ttl_ms=1_000)
    registry.create(ttl_ms=2_000)
    keep = registry.create(ttl_ms=3_000).token

    assert registry.sweep(now=2_000) == 2
    assert [v.token for v in registry.list_active(now=2_000)] == [keep]
    assert registry.sweep(now=2_000) == 0


def test_sweep_defaults_to_clock(registry, clock):
    registry.create(ttl_ms=1_000)
    assert registry.sweep() == 0
    clock.now = 1_000
    assert registry.sweep() == 1


def test_scenario_lookup_then_expire(registry, clock):
    x = registry.create(label="Acme", ttl_ms=60_000).token

    clock.now = 30_000
    view = registry.lookup(x)
    assert view.access_count == 1
    assert view.label == "Acme"

    clock.now = 70_000
    with pytest.raises(LinkExpired):
        registry.lookup(x)
    with pytest.raises(LinkNotFound):
        registry.lookup(x)


def test_scenario_revoke_before_expiry(registry):
    y = registry.create().token
    registry.revoke(y)
    with pytest.raises(LinkNotFound):
        registry.lookup(y)


def test_concurrent_lookups_and_sweeps_lose_no_updates(registry):
    token = registry.create(ttl_ms=60_000).token
    registry.create(ttl_ms=60_000)
    threads_n, per_thread = 8, 250
    start = threading.Barrier(threads_n + 1)
    removed = []

    def viewer():
        start.wait()
        for _ in range(per_thread):
            registry.lookup(token)

    def sweeper():
        start.wait()
        for _ in range(per_thread):
            removed.append(registry.sweep())
            registry.list_active()

    threads = [threading.Thread(target=viewer) for _ in range(threads_n)]
    threads.append(threading.Thread(target=sweeper))
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert removed == [0] * per_thread
    [active, _] = registry.list_active()
    assert active.token == token
    assert active.access_count == threads_n * per_thread
