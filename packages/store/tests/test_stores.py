"""Tests for reviewbot-store implementations."""

from __future__ import annotations

import threading

import pytest

from reviewbot_store.base import BaseSessionStore
from reviewbot_store.memory import MemorySessionStore
from reviewbot_store.models import InteractionSession
from reviewbot_store.noop import NoOpSessionStore


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


# ---------------------------------------------------------------------------
# NoOpSessionStore
# ---------------------------------------------------------------------------


class TestNoOpSessionStore:
    def test_open_returns_session_with_token(self):
        session = NoOpSessionStore().open(42, ["Add tests"], user_id="U1")
        assert isinstance(session, InteractionSession)
        assert session.token
        assert session.pr_number == 42
        assert session.suggestions == ["Add tests"]

    def test_get_always_misses(self):
        store = NoOpSessionStore()
        session = store.open(42, ["Add tests"])
        assert store.get(session.token) is None

    def test_discard_and_close_do_not_raise(self):
        store = NoOpSessionStore()
        store.discard("unknown")
        store.close()


# ---------------------------------------------------------------------------
# MemorySessionStore
# ---------------------------------------------------------------------------


class TestMemorySessionStore:
    def test_is_a_session_store(self):
        assert isinstance(MemorySessionStore(), BaseSessionStore)

    def test_open_and_get(self):
        store = MemorySessionStore()
        session = store.open(42, ["Add tests", "Rename foo"], user_id="U1")

        found = store.get(session.token)
        assert found is session
        assert found.pr_number == 42
        assert found.suggestions == ["Add tests", "Rename foo"]
        assert found.user_id == "U1"

    def test_tokens_are_unique(self):
        store = MemorySessionStore()
        tokens = {store.open(1, ["a"]).token for _ in range(50)}
        assert len(tokens) == 50

    def test_suggestions_are_copied(self):
        suggestions = ["Add tests"]
        session = MemorySessionStore().open(1, suggestions)
        suggestions.append("Injected later")
        assert session.suggestions == ["Add tests"]

    def test_unknown_token_misses(self):
        assert MemorySessionStore().get("nope") is None

    def test_discard(self):
        store = MemorySessionStore()
        token = store.open(1, ["a"]).token
        store.discard(token)
        assert store.get(token) is None
        store.discard(token)  # second discard is ignored

    def test_expires_after_ttl(self):
        clock = FakeClock()
        store = MemorySessionStore(ttl_seconds=60, clock=clock)
        token = store.open(1, ["a"]).token

        clock.now += 59.9
        assert store.get(token) is not None
        clock.now += 0.1
        assert store.get(token) is None

    def test_expired_sessions_are_purged(self):
        clock = FakeClock()
        store = MemorySessionStore(ttl_seconds=10, clock=clock)
        store.open(1, ["a"])
        store.open(2, ["b"])
        clock.now += 5
        store.open(3, ["c"])
        assert len(store) == 3

        clock.now += 6
        assert len(store) == 1

    def test_close_clears_sessions(self):
        store = MemorySessionStore()
        token = store.open(1, ["a"]).token
        store.close()
        assert store.get(token) is None
        assert len(store) == 0

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_rejects_non_positive_ttl(self, ttl):
        with pytest.raises(ValueError):
            MemorySessionStore(ttl_seconds=ttl)

    def test_concurrent_open(self):
        store = MemorySessionStore()
        tokens = []
        lock = threading.Lock()

        def worker(n):
            token = store.open(n, [f"suggestion {n}"]).token
            with lock:
                tokens.append(token)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, 21)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 20
        assert sorted(store.get(t).pr_number for t in tokens) == list(range(1, 21))
