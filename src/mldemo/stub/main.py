"""
Contract stub of the four model backends.

Serves the same paths, request bodies and reply shapes as the real model
server (string probabilities, localized survival labels, bare predictions)
with deterministic fake outputs. Mounted under `/api` so the client's
default base URL points straight at it:

    uvicorn mldemo.stub.main:app --port 8000
"""

from contextlib import asynccontextmanager
import logging
from typing import Final

from fastapi import FastAPI

from mldemo.client import config
from mldemo.client.logs import configure_logging
from mldemo.stub import routes
from mldemo.stub.middleware import RequestContextMiddleware

logger = logging.getLogger("mldemo.stub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging once the settings (or their test override) are known."""
    settings: config.Settings = app.dependency_overrides.get(
        config.get_settings, config.get_settings
    )()

    configure_logging(json_logs=settings.LOG_JSON, level=settings.LOG_LEVEL)
    logger.info("Contract stub ready")

    yield


app: Final[FastAPI] = FastAPI(lifespan=lifespan, title="mldemo-stub")

app.add_middleware(RequestContextMiddleware)

app.include_router(routes.router)
