from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import asyncio
import json
import logging
import os

from app.api.dependencies import get_mail_relay
from app.api.endpoints import contact, status
from app.core.config import settings
from app.core.logging import setup_logging
from app.services.mail_service import MailRelay

setup_logging()

logger = logging.getLogger(__name__)

LOG_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "log_config.json")


async def verify_smtp_connection(relay: MailRelay) -> None:
    try:
        await relay.verify()
    except Exception as e:
        logger.error(f"SMTP connection failed: {str(e)}")
    else:
        logger.info(f"SMTP connected successfully to {settings.SMTP_HOST}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.SMTP_USER:
        logger.warning("SMTP_USER environment variable is not set")

    verify_task = None
    if settings.SMTP_VERIFY_ON_STARTUP:
        relay = app.dependency_overrides.get(get_mail_relay, get_mail_relay)()
        verify_task = asyncio.create_task(verify_smtp_connection(relay))
    yield
    if verify_task is not None and not verify_task.done():
        verify_task.cancel()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for relaying website contact form submissions to an operator mailbox",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.include_router(status.router, tags=["status"])

app.include_router(contact.router, prefix="/api", tags=["contact"])


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.info(f"Invalid request body for {request.url.path}: {errors}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": f"Invalid request body: {errors}"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn

    with open(LOG_CONFIG_PATH, "r") as file:
        LOGGING_CONFIG = json.load(file)

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=LOGGING_CONFIG,
    )
