import asyncio

import pytest

from deployinfo.middlewares.inflight import InFlightMiddleware, InFlightTracker


async def _noop_receive():
    return {"type": "http.request", "body": b"", "more_body": False}


async def _noop_send(message):
    return None


def test_counts_active_http_requests():
    tracker = InFlightTracker()
    seen = []

    async def app(scope, receive, send):
        seen.append(tracker.active)

    mw = InFlightMiddleware(app, tracker)
    asyncio.run(mw({"type": "http"}, _noop_receive, _noop_send))

    assert seen == [1]
    assert tracker.idle
    assert tracker.abandoned == 0


def test_ignores_non_http_scopes():
    tracker = InFlightTracker()
    seen = []

    async def app(scope, receive, send):
        seen.append(tracker.active)

    mw = InFlightMiddleware(app, tracker)
    asyncio.run(mw({"type": "lifespan"}, _noop_receive, _noop_send))

    assert seen == [0]


def test_cancelled_request_is_counted_as_abandoned():
    tracker = InFlightTracker()

    async def app(scope, receive, send):
        await asyncio.sleep(10)

    async def scenario():
        mw = InFlightMiddleware(app, tracker)
        task = asyncio.create_task(mw({"type": "http"}, _noop_receive, _noop_send))
        await asyncio.sleep(0.01)
        assert tracker.active == 1
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert tracker.idle
    assert tracker.abandoned == 1


def test_errors_still_release_the_slot():
    tracker = InFlightTracker()

    async def app(scope, receive, send):
        raise RuntimeError("boom")

    mw = InFlightMiddleware(app, tracker)
    with pytest.raises(RuntimeError):
        asyncio.run(mw({"type": "http"}, _noop_receive, _noop_send))

    assert tracker.idle
    assert tracker.abandoned == 0
