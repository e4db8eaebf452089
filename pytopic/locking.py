"""Lock-guarded wrappers for sharing one SubscriptionIndex.

Each wrapper serializes every index call, reads included, behind one exclusive lock.
"""

import asyncio
import threading
from typing import Hashable, List, Optional

from .index import Subscription, SubscriptionIndex


class ThreadSafeSubscriptionIndex:
    """SubscriptionIndex guarded by a threading.Lock."""

    def __init__(self, index: Optional[SubscriptionIndex] = None):
        self.index = index or SubscriptionIndex()
        self.lock = threading.Lock()

    def subscribe(self, subscriber_id: Hashable, topic_filter: str):
        with self.lock:
            self.index.subscribe(subscriber_id, topic_filter)

    def unsubscribe(self, subscriber_id: Hashable, topic_filter: str) -> bool:
        with self.lock:
            return self.index.unsubscribe(subscriber_id, topic_filter)

    def unsubscribe_all(self, subscriber_id: Hashable) -> int:
        with self.lock:
            return self.index.unsubscribe_all(subscriber_id)

    def publish(self, topic: str, unique: Optional[bool] = None):
        with self.lock:
            return self.index.publish(topic, unique=unique)

    def subscriptions(self, subscriber_id: Optional[Hashable] = None) -> List[Subscription]:
        with self.lock:
            return self.index.subscriptions(subscriber_id)

    def stats(self) -> dict:
        with self.lock:
            return self.index.stats()

    def __len__(self):
        with self.lock:
            return len(self.index)


class AsyncSubscriptionIndex:
    """SubscriptionIndex guarded by an asyncio.Lock for use from coroutines."""

    def __init__(self, index: Optional[SubscriptionIndex] = None):
        self.index = index or SubscriptionIndex()
        self.lock = None

    async def _ensure_lock(self):
        """Ensure lock is initialized (must be called from async context)."""
        if self.lock is None:
            self.lock = asyncio.Lock()

    async def subscribe(self, subscriber_id: Hashable, topic_filter: str):
        await self._ensure_lock()
        async with self.lock:
            self.index.subscribe(subscriber_id, topic_filter)

    async def unsubscribe(self, subscriber_id: Hashable, topic_filter: str) -> bool:
        await self._ensure_lock()
        async with self.lock:
            return self.index.unsubscribe(subscriber_id, topic_filter)

    async def unsubscribe_all(self, subscriber_id: Hashable) -> int:
        await self._ensure_lock()
        async with self.lock:
            return self.index.unsubscribe_all(subscriber_id)

    async def publish(self, topic: str, unique: Optional[bool] = None):
        await self._ensure_lock()
        async with self.lock:
            return self.index.publish(topic, unique=unique)

    async def subscriptions(self, subscriber_id: Optional[Hashable] = None) -> List[Subscription]:
        await self._ensure_lock()
        async with self.lock:
            return self.index.subscriptions(subscriber_id)

    async def stats(self) -> dict:
        await self._ensure_lock()
        async with self.lock:
            return self.index.stats()
