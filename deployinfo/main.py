from __future__ import annotations

from fastapi import FastAPI

from deployinfo.api.main import api_router
from deployinfo.middlewares.inflight import InFlightMiddleware, InFlightTracker
from deployinfo.middlewares.telemetry import RequestContextMiddleware


def create_app(tracker: InFlightTracker | None = None) -> FastAPI:
    tracker = tracker or InFlightTracker()

    app = FastAPI(
        title="Deploy Info Service",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.inflight = tracker

    app.add_middleware(RequestContextMiddleware)
    # Added last so it wraps everything, including cancellation on forced shutdown
    app.add_middleware(InFlightMiddleware, tracker=tracker)

    app.include_router(api_router)
    return app
