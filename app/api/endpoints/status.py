"""Liveness endpoints for the contact relay API."""

import time
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.core.config import settings
from app.models.contact import HealthResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root():
    return f"{settings.PROJECT_NAME} is running"


@router.get("/health", response_model=HealthResponse)
async def health():
    # epoch milliseconds
    return HealthResponse(ok=True, timestamp=int(time.time() * 1000))
