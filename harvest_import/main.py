# main.py
from __future__ import annotations

import json
import time
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

# Import logging utilities early so that the logger configuration is
# applied before any other modules emit log messages.
from harvest_import.logging_config import logger

from harvest_import.clients.http_client import HarvestApiClient
from harvest_import.core.exceptions import ConfigurationError, TransportError
from harvest_import.routes.imports import router as imports_router


def create_app(http_client: Optional[HarvestApiClient] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # one pooled Harvest client shared by every request
        app.state.http_client = http_client or HarvestApiClient()
        try:
            yield
        finally:
            app.state.http_client.close()

    app = FastAPI(title="Harvest Import", default_response_class=ORJSONResponse, lifespan=lifespan)
    app.include_router(imports_router)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.warning(json.dumps({
            "event": "configuration_error",
            "path": request.url.path,
            "detail": str(exc),
            "fields": exc.fields,
        }))
        return ORJSONResponse(status_code=400, content={"detail": str(exc), "fields": exc.fields})

    @app.exception_handler(TransportError)
    async def transport_error_handler(request: Request, exc: TransportError):
        logger.error(json.dumps({
            "event": "transport_error",
            "path": request.url.path,
            "detail": str(exc),
            "status_code": exc.status_code,
        }))
        return ORJSONResponse(status_code=502, content={"detail": str(exc), "upstream_status": exc.status_code})

    # Every incoming request is logged with path, method, status and
    # processing time.
    @app.middleware("http")  # type: ignore[misc]
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000
        logger.info(json.dumps({
            "event": "http_request",
            "path": request.url.path,
            "method": request.method,
            "status": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }))
        return response

    return app


app = create_app()
