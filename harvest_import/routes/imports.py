"""
routes/imports.py
------------------

API routes that drive a Harvest import source. The overview performs a
count request, ``run`` drains the source page after page, and
``batch`` imports the single page selected by an offset so that an
external batch processor can own the paging loop.
"""

from __future__ import annotations

import json
from fastapi import APIRouter, Depends, Request

from harvest_import.clients.http_client import HarvestApiClient
from harvest_import.logging_config import logger
from harvest_import.schemas.imports import (
    ImportBatchRequest,
    ImportBatchResponse,
    ImportOverviewRequest,
    ImportOverviewResponse,
    ImportRunRequest,
    ImportRunResponse,
)
from harvest_import.services.import_service import build_source, import_overview, run_batch, run_import

router = APIRouter(prefix="/imports/harvest", tags=["Harvest"])


def get_http_client(request: Request) -> HarvestApiClient:
    """Dependency to retrieve the shared Harvest client from the application state."""
    return request.app.state.http_client


@router.post("/overview", response_model=ImportOverviewResponse)
def post_overview(data: ImportOverviewRequest, http_client: HarvestApiClient = Depends(get_http_client)):
    logger.info(json.dumps({
        "event": "import_overview_request",
        "endpoint": data.source.endpoint.value,
    }))
    source = build_source(data.source, http_client, batch=False)
    return import_overview(source, data.source)


@router.post("/run", response_model=ImportRunResponse)
def post_run(data: ImportRunRequest, http_client: HarvestApiClient = Depends(get_http_client)):
    logger.info(json.dumps({
        "event": "import_run_request",
        "endpoint": data.source.endpoint.value,
        "max_items": data.max_items,
    }))
    source = build_source(data.source, http_client, batch=False)
    return run_import(source, data.max_items)


@router.post("/batch", response_model=ImportBatchResponse)
def post_batch(data: ImportBatchRequest, http_client: HarvestApiClient = Depends(get_http_client)):
    logger.info(json.dumps({
        "event": "import_batch_request",
        "endpoint": data.source.endpoint.value,
        "offset": data.offset,
    }))
    source = build_source(data.source, http_client, batch=True)
    return run_batch(source, data.offset)
