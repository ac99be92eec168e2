"""
In-process snapshot feed: subscribe, publish, stream and SSE framing.
"""

from __future__ import annotations

import asyncio
import json

import anyio.to_thread
import pytest
from fastapi.concurrency import run_in_threadpool

from mindful_youth.services.snapshot_feed import SnapshotFeed, to_sse


@pytest.mark.asyncio
async def test_stream_yields_initial_snapshot_then_one_per_publish() -> None:
    feed = SnapshotFeed(heartbeat_seconds=5)
    state = {"value": 1}
    stream = feed.stream("posts", lambda: dict(state))

    assert await stream.__anext__() == {"value": 1}
    assert feed.subscriber_count("posts") == 1

    state["value"] = 2
    feed.publish("posts")
    assert await asyncio.wait_for(stream.__anext__(), 1) == {"value": 2}

    await stream.aclose()
    assert feed.subscriber_count("posts") == 0


@pytest.mark.asyncio
async def test_publish_from_worker_thread_wakes_stream() -> None:
    feed = SnapshotFeed(heartbeat_seconds=5)
    stream = feed.stream("posts", lambda: "snapshot")
    await stream.__anext__()

    await run_in_threadpool(feed.publish, "posts")

    assert await asyncio.wait_for(stream.__anext__(), 1) == "snapshot"
    await stream.aclose()


@pytest.mark.asyncio
async def test_idle_stream_yields_heartbeat() -> None:
    feed = SnapshotFeed(heartbeat_seconds=0.01)
    stream = feed.stream("posts", lambda: [])

    await stream.__anext__()
    assert await stream.__anext__() is None
    await stream.aclose()


@pytest.mark.asyncio
async def test_idle_streams_hold_no_worker_threads() -> None:
    feed = SnapshotFeed(heartbeat_seconds=5)
    limiter = anyio.to_thread.current_default_thread_limiter()
    streams = [feed.stream("posts", lambda: "snapshot") for _ in range(limiter.total_tokens + 10)]
    for stream in streams:
        await stream.__anext__()
    pending = [asyncio.ensure_future(stream.__anext__()) for stream in streams]
    await asyncio.sleep(0.05)

    assert limiter.borrowed_tokens == 0
    assert await asyncio.wait_for(run_in_threadpool(lambda: "still served"), 1) == "still served"

    feed.publish("posts")
    assert await asyncio.wait_for(asyncio.gather(*pending), 2) == ["snapshot"] * len(streams)
    for stream in streams:
        await stream.aclose()
    assert feed.subscriber_count("posts") == 0


@pytest.mark.asyncio
async def test_publish_only_reaches_matching_topic() -> None:
    feed = SnapshotFeed()
    listening = feed.subscribe("posts/1")
    other = feed.subscribe("posts/2")

    feed.publish("posts/1")

    assert await listening.wait(1) is True
    assert await other.wait(0.05) is False


@pytest.mark.asyncio
async def test_publishes_collapse_into_one_wakeup() -> None:
    feed = SnapshotFeed()
    subscription = feed.subscribe("posts")

    feed.publish("posts")
    feed.publish("posts")

    assert await subscription.wait(1) is True
    assert await subscription.wait(0.05) is False


@pytest.mark.asyncio
async def test_sse_framing_and_close() -> None:
    feed = SnapshotFeed(heartbeat_seconds=0.01)
    frames = to_sse(feed.stream("posts", lambda: {"likes": 1}))

    assert await frames.__anext__() == "event: snapshot\ndata: " + json.dumps({"likes": 1}) + "\n\n"
    assert await frames.__anext__() == ": keep-alive\n\n"

    await frames.aclose()
    assert feed.subscriber_count("posts") == 0
