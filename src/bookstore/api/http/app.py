"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.api.http.errors import error_response, register_error_handlers
from src.bookstore.api.http.routers import health
from src.bookstore.api.http.routers.service import book
from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config

__all__ = ["create_app"]


def create_app(
    dependencies: ApplicationDependencies,
    config: ConfigData | None = None,
) -> FastAPI:
    """Build the HTTP application around already-constructed dependencies.

    The caller owns the storage connection: it is opened before the app is
    built and released after the server stops.
    """
    config = config or get_config()
    environment = config.app.environment

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up application in {} environment", environment)
        try:
            yield
        finally:
            logger.info("Shutting down application")

    app = FastAPI(
        title="Bookstore",
        lifespan=lifespan,
        docs_url=None if environment == "production" else "/docs",
        redoc_url=None if environment == "production" else "/redoc",
    )
    app.state.app_dependencies = dependencies

    # --- CORS configuration ---
    cors = config.app.cors
    if environment == "production" and cors.allow_credentials and "*" in cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_origin_regex=cors.origin_regex,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
        expose_headers=cors.expose_headers,
        max_age=cors.max_age,
    )

    # --- Request logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        xff = request.headers.get("x-forwarded-for")
        client_ip = (
            xff.split(",")[0].strip()
            if xff
            else request.client.host
            if request.client
            else "unknown"
        )

        base_ctx = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": client_ip,
            "user_agent": request.headers.get("user-agent", "unknown"),
        }

        start = time.perf_counter()

        with logger.contextualize(**base_ctx):
            try:
                logger.debug("request.start")
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return error_response(
                    500,
                    "server encountered an unknown error",
                    headers={"X-Request-ID": request_id},
                )

            duration_ms = (time.perf_counter() - start) * 1000
            log = logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            )
            if response.status_code >= 500:
                log.error("request.end")
            elif response.status_code >= 400:
                log.warning("request.end")
            else:
                log.info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

    register_error_handlers(app)

    # --- Router registration ---
    app.include_router(health.router)
    app.include_router(book.router)

    return app
