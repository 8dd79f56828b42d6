"""Server lifecycle: Starting -> Serving -> ShuttingDown -> Stopped.

uvicorn does the serving. Signal handling and the shutdown outcome live here:
a shutdown that outlives the grace period is logged and mapped to a non-zero
exit code.
"""
from __future__ import annotations

import asyncio
import contextlib
import signal
import socket
from collections.abc import Iterator
from enum import Enum, IntEnum

import uvicorn
from fastapi import FastAPI

from deployinfo.core.logging import get_logger
from deployinfo.core.settings import Settings
from deployinfo.main import create_app
from deployinfo.middlewares.inflight import InFlightTracker

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ExitCode(IntEnum):
    OK = 0
    STARTUP_FAILURE = 1
    FORCED_SHUTDOWN = 2


class ShutdownOutcome(str, Enum):
    GRACEFUL = "graceful"
    FORCED = "forced"


class ServiceServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the caller."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    def request_shutdown(self, sig: int | None = None) -> None:
        log = get_logger()
        sig_name = signal.Signals(sig).name if sig is not None else None
        if self.should_exit and sig == signal.SIGINT:
            log.warning("shutdown.force_requested", signal=sig_name)
            self.force_exit = True
            return
        log.info("shutdown.requested", signal=sig_name)
        self.should_exit = True


def bind_listener(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def build_server(app: FastAPI, settings: Settings) -> ServiceServer:
    config = uvicorn.Config(
        app,
        host=settings.HOST,
        port=settings.PORT,
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
        timeout_keep_alive=settings.KEEP_ALIVE_SECONDS,
        lifespan="off",
        access_log=False,
        # logging is configured by configure_logging()
        log_config=None,
    )
    return ServiceServer(config)


async def serve(
    server: ServiceServer, sock: socket.socket, tracker: InFlightTracker
) -> ShutdownOutcome:
    """Serve until shutdown is requested, then report how it ended.

    Returns FORCED when requests were still running once uvicorn gave up
    waiting (grace period expired or a second SIGINT), GRACEFUL otherwise.
    """
    await server.serve(sockets=[sock])

    log = get_logger()
    if tracker.abandoned or not tracker.idle:
        log.error(
            "shutdown.forced",
            abandoned=tracker.abandoned + tracker.active,
            grace_seconds=server.config.timeout_graceful_shutdown,
        )
        return ShutdownOutcome.FORCED

    log.info("server.stopped")
    return ShutdownOutcome.GRACEFUL


@contextlib.contextmanager
def shutdown_signals(server: ServiceServer) -> Iterator[None]:
    loop = asyncio.get_running_loop()
    for sig in HANDLED_SIGNALS:
        try:
            loop.add_signal_handler(sig, server.request_shutdown, sig)
        except NotImplementedError:  # Windows
            signal.signal(sig, lambda s, _frame: server.request_shutdown(s))
    try:
        yield
    finally:
        for sig in HANDLED_SIGNALS:
            try:
                loop.remove_signal_handler(sig)
            except NotImplementedError:
                signal.signal(sig, signal.SIG_DFL)


async def run_server(settings: Settings) -> ExitCode:
    log = get_logger()
    try:
        sock = bind_listener(settings.HOST, settings.PORT)
    except OSError as exc:
        log.error(
            "server.bind_failed",
            host=settings.HOST,
            port=settings.PORT,
            error=str(exc),
        )
        return ExitCode.STARTUP_FAILURE

    tracker = InFlightTracker()
    server = build_server(create_app(tracker), settings)

    try:
        with shutdown_signals(server):
            log.info(
                "server.starting",
                host=settings.HOST,
                port=sock.getsockname()[1],
                grace_seconds=settings.SHUTDOWN_GRACE_SECONDS,
            )
            outcome = await serve(server, sock, tracker)
    finally:
        sock.close()

    if outcome is ShutdownOutcome.FORCED:
        return ExitCode.FORCED_SHUTDOWN
    return ExitCode.OK
