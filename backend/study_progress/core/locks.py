"""
Per-user locks.
Serializes read-modify-write of a single user's progress record within one process.
"""
import asyncio
import logging
import weakref

logger = logging.getLogger(__name__)


class UserLockRegistry:
    """
    Hands out one asyncio.Lock per user id.

    Locks are held weakly so ids that are no longer in use drop out
    of the registry once no coroutine holds a reference.
    """

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, user_id: str) -> asyncio.Lock:
        """Get (or create) the lock for a user."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
            logger.debug(f"Created progress lock for user={user_id}")
        return lock

    def __len__(self) -> int:
        return len(self._locks)
