"""Liveness endpoints. They never touch the store."""

from fastapi import APIRouter
from starlette.responses import PlainTextResponse

router = APIRouter(tags=["health"])

PONG = "Pong!"


@router.get("/health", response_class=PlainTextResponse)
@router.get("/api/v1/ping", response_class=PlainTextResponse)
async def ping() -> str:
    """Liveness probe; 200 as long as the process is serving."""
    return PONG
