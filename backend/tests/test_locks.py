"""Tests for the per-user lock registry."""

import gc
import threading

from app.services.habits import locks


class TestUserLock:
    def test_idle_users_are_dropped(self):
        before = len(locks._user_locks)
        for i in range(100):
            with locks.user_lock(f"idle-{i}"):
                pass
        gc.collect()
        assert len(locks._user_locks) == before

    def test_same_user_shares_lock_while_held(self):
        with locks.user_lock("u1"):
            held = locks.get_user_lock("u1")
            assert held.lock.locked()
            assert locks.get_user_lock("u1") is held

    def test_serializes_same_user(self):
        order = []

        def writer():
            with locks.user_lock("u1"):
                order.append("second")

        with locks.user_lock("u1"):
            t = threading.Thread(target=writer)
            t.start()
            t.join(timeout=0.05)
            assert t.is_alive()
            order.append("first")
        t.join(timeout=1)

        assert order == ["first", "second"]
