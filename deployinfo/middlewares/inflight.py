"""Tracks HTTP requests that are still running.

The server lifecycle reads this after uvicorn returns to tell a graceful
shutdown from one where the grace period ran out and requests were cancelled.
"""
from __future__ import annotations

import asyncio

from starlette.types import ASGIApp, Receive, Scope, Send


class InFlightTracker:
    def __init__(self) -> None:
        self.active = 0
        self.abandoned = 0

    @property
    def idle(self) -> bool:
        return self.active == 0


class InFlightMiddleware:
    """Pure ASGI middleware; HTTP scopes only."""

    def __init__(self, app: ASGIApp, tracker: InFlightTracker) -> None:
        self.app = app
        self.tracker = tracker

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        self.tracker.active += 1
        try:
            await self.app(scope, receive, send)
        except asyncio.CancelledError:
            self.tracker.abandoned += 1
            raise
        finally:
            self.tracker.active -= 1
