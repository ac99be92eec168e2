# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
In-process snapshot feed backing the live forum and mood views.

Writers call ``publish(topic)`` after committing. Each subscriber gets the
full current state once on subscribe and again after every publish; it
replaces its local copy wholesale. A reconnecting client just subscribes
again and starts from a fresh snapshot.

Subscribers live on the event loop and wait on ``asyncio.Event``. Writers
run in the threadpool and wake them with ``call_soon_threadsafe``, so an
idle stream holds no worker thread. Only the snapshot query itself runs in
the threadpool.
"""

import asyncio
import json
import logging
import os
import threading
from typing import Any, AsyncIterator, Callable, Dict, Optional, Set

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

HEARTBEAT_SECONDS = float(os.getenv("SNAPSHOT_HEARTBEAT_SECONDS", "15"))


def posts_topic() -> str:
    return "posts"


def post_topic(post_id: int) -> str:
    return f"posts/{post_id}"


def comments_topic(post_id: int) -> str:
    return f"posts/{post_id}/comments"


def mood_topic(user_id: int) -> str:
    return f"moodEntries/{user_id}"


class Subscription:
    """One listener on one topic, bound to the event loop it was created on.

    Publishes collapse into a single pending flag.
    """

    def __init__(self, topic: str, loop: asyncio.AbstractEventLoop):
        self.topic = topic
        self._loop = loop
        self._changed = asyncio.Event()

    def notify(self):
        # Safe from any thread, including the loop's own
        if self._loop.is_closed():
            return
        try:
            self._loop.call_soon_threadsafe(self._changed.set)
        except RuntimeError:
            # Loop shut down between the check and the call; nobody is listening
            logger.debug("📴 Dropped notify for %s, loop closed", self.topic)

    async def wait(self, timeout: Optional[float] = None) -> bool:
        if not self._changed.is_set():
            try:
                await asyncio.wait_for(self._changed.wait(), timeout)
            except asyncio.TimeoutError:
                return False
        self._changed.clear()
        return True


class SnapshotFeed:
    def __init__(self, heartbeat_seconds: float = HEARTBEAT_SECONDS):
        self.heartbeat_seconds = heartbeat_seconds
        self._lock = threading.RLock()
        self._subscribers: Dict[str, Set[Subscription]] = {}

    def subscribe(self, topic: str) -> Subscription:
        """Must be called from a coroutine; the subscription belongs to the running loop."""
        subscription = Subscription(topic, asyncio.get_running_loop())
        with self._lock:
            self._subscribers.setdefault(topic, set()).add(subscription)
        logger.debug("📡 Subscribed to %s", topic)
        return subscription

    def unsubscribe(self, subscription: Subscription):
        with self._lock:
            listeners = self._subscribers.get(subscription.topic)
            if listeners is None:
                return
            listeners.discard(subscription)
            if not listeners:
                del self._subscribers[subscription.topic]
        logger.debug("📴 Unsubscribed from %s", subscription.topic)

    def publish(self, *topics: str):
        with self._lock:
            listeners = [s for topic in topics for s in self._subscribers.get(topic, ())]
        for subscription in listeners:
            subscription.notify()

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, ()))

    async def stream(self, topic: str, loader: Callable[[], Any]) -> AsyncIterator[Optional[Any]]:
        """Yield ``loader()`` now and after every publish; ``None`` marks an idle heartbeat.

        ``loader`` is blocking (it queries the database) and runs in the
        threadpool. The sequence never ends on its own. Closing the
        generator unsubscribes.
        """
        subscription = self.subscribe(topic)
        try:
            yield await run_in_threadpool(loader)
            while True:
                if await subscription.wait(self.heartbeat_seconds):
                    yield await run_in_threadpool(loader)
                else:
                    yield None
        finally:
            self.unsubscribe(subscription)


async def to_sse(stream: AsyncIterator[Optional[Any]]) -> AsyncIterator[str]:
    """Format a snapshot stream as Server-Sent Events. Closing this closes ``stream``."""
    try:
        async for snapshot in stream:
            if snapshot is None:
                yield ": keep-alive\n\n"
                continue
            yield f"event: snapshot\ndata: {json.dumps(snapshot, default=str)}\n\n"
    finally:
        await stream.aclose()


feed = SnapshotFeed()
