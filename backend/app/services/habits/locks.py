"""
Per-user mutual exclusion for multi-row habit writes
"""
from contextlib import contextmanager
from typing import Iterator
import threading
import weakref


class _UserLock:
    """Lock for one user; lives only while some caller holds a reference"""

    def __init__(self):
        self.lock = threading.Lock()


_registry_lock = threading.Lock()
_user_locks: "weakref.WeakValueDictionary[str, _UserLock]" = weakref.WeakValueDictionary()


def get_user_lock(user_id: str) -> _UserLock:
    """Get (or create) the lock guarding writes for one user"""
    with _registry_lock:
        entry = _user_locks.get(user_id)
        if entry is None:
            entry = _UserLock()
            _user_locks[user_id] = entry
        return entry


@contextmanager
def user_lock(user_id: str) -> Iterator[None]:
    """
    Serialize writers for one user within this process

    Guards create/remove so compaction never works from a stale active
    count, and toggle so two in-flight toggles cannot insert the same event.
    Once no writer for the user is waiting or running, the registry entry
    is dropped.
    """
    entry = get_user_lock(user_id)
    with entry.lock:
        yield
