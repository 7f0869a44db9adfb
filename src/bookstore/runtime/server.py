"""Process lifecycle: connect, listen, drain on SIGINT/SIGTERM, release storage."""

from __future__ import annotations

import asyncio
import contextlib
import signal
from collections.abc import Callable
from enum import Enum

import uvicorn
from loguru import logger

from src.bookstore.api.http.app import create_app
from src.bookstore.api.http.app_data import build_dependencies
from src.bookstore.core.errors import StorageUnavailable
from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config

DRAIN_TIMEOUT_SECONDS = 5.0


class LifecycleState(str, Enum):
    STARTING = "starting"
    LISTENING = "listening"
    DRAINING = "draining"
    STOPPED = "stopped"


class _ManagedServer(uvicorn.Server):
    """uvicorn server whose signals are handled by the LifecycleController."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield


class LifecycleController:
    """Runs the HTTP server for the lifetime of the process.

    STARTING opens the storage connection (failure aborts), LISTENING serves
    until a termination signal, DRAINING waits up to ``drain_timeout`` for
    in-flight requests before forcing the listener closed, STOPPED releases
    the storage connection.
    """

    def __init__(
        self,
        config: ConfigData | None = None,
        database_factory: Callable[[ConfigData], DbSessionService] = DbSessionService,
        drain_timeout: float = DRAIN_TIMEOUT_SECONDS,
    ):
        self.config = config or get_config()
        self.drain_timeout = drain_timeout
        self.state = LifecycleState.STARTING
        self.server: uvicorn.Server | None = None
        self.database: DbSessionService | None = None
        self._database_factory = database_factory
        self._stop_event: asyncio.Event | None = None

    def request_shutdown(self) -> None:
        """Trigger the LISTENING -> DRAINING transition."""
        if self._stop_event is not None:
            self._stop_event.set()

    def _build_server(self) -> uvicorn.Server:
        dependencies = build_dependencies(self.database)
        app = create_app(dependencies, self.config)
        server_config = uvicorn.Config(
            app,
            host=self.config.app.host,
            port=self.config.app.port,
            access_log=False,  # the request middleware logs every request
            log_config=None,
            lifespan="on",
        )
        return _ManagedServer(server_config)

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> list[int]:
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown)
                installed.append(sig)
            except (NotImplementedError, RuntimeError):
                # Windows / non-main thread
                pass
        return installed

    async def run(self) -> None:
        """Serve until shut down.

        Raises:
            StorageUnavailable: The store could not be reached at startup.
        """
        self.state = LifecycleState.STARTING
        self.database = self._database_factory(self.config)
        try:
            self.database.connect()
        except StorageUnavailable:
            logger.critical("Could not reach the book store; aborting startup")
            self.database.close()
            raise
        logger.info("Successfully initialized the book store")

        loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        installed = self._install_signal_handlers(loop)

        try:
            self.server = self._build_server()
            logger.info(
                "Starting HTTP listener [{}:{}]",
                self.config.app.host,
                self.config.app.port,
            )
            serve_task = asyncio.create_task(self.server.serve(), name="http-server")
            stop_task = asyncio.create_task(self._stop_event.wait(), name="stop-signal")
            self.state = LifecycleState.LISTENING

            try:
                await asyncio.wait(
                    {serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                stop_task.cancel()

            if not serve_task.done():
                await self._drain(serve_task)
            else:
                # The server stopped on its own; surface any error it raised
                await serve_task
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            self._release()

    async def _drain(self, serve_task: asyncio.Task) -> None:
        self.state = LifecycleState.DRAINING
        logger.info(
            "Shutdown signal received; draining requests (timeout: {}s)...",
            self.drain_timeout,
        )
        self.server.should_exit = True
        try:
            await asyncio.wait_for(asyncio.shield(serve_task), timeout=self.drain_timeout)
            logger.info("Server stopped")
        except TimeoutError:
            logger.warning(
                "Drain timed out after {}s; closing remaining connections",
                self.drain_timeout,
            )
            self.server.force_exit = True
            await asyncio.gather(serve_task, return_exceptions=True)

    def _release(self) -> None:
        if self.database is not None:
            self.database.close()
        self.state = LifecycleState.STOPPED
        logger.info("Book store connection released")
