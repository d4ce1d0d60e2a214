"""
services/import_service.py
---------------------------

Host side of the import: the pieces of an import pipeline that drive a
source. The overview and the standalone run depend only on
:class:`ImportSource`; a batch run also reports the page bookkeeping of
the Harvest record iterator. Every record passes through
:func:`prepare_row` before being handed back.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from harvest_import.logging_config import log_call, logger
from harvest_import.schemas.imports import ImportBatchResponse, ImportOverviewResponse, ImportRunResponse
from harvest_import.schemas.source import SourceConfiguration
from harvest_import.services.harvest_source import HarvestSource
from harvest_import.services.import_source import ImportSource
from harvest_import.services.page_fetcher import Transport
from harvest_import.services.row_enricher import prepare_row


def build_source(config: SourceConfiguration, transport: Transport, *, batch: bool) -> HarvestSource:
    return HarvestSource(config, transport, batch=batch)


@log_call
def import_overview(source: ImportSource, config: SourceConfiguration) -> ImportOverviewResponse:
    """Report how many items the endpoint would import."""
    source.check_requirements()
    total = source.count()
    message = f"Ready to import {total} items from the endpoint {config.endpoint.value}."
    logger.info(json.dumps({
        "event": "import_overview",
        "endpoint": config.endpoint.value,
        "count": total,
    }))
    return ImportOverviewResponse(endpoint=config.endpoint, count=total, message=message)


def run_import(source: ImportSource, max_items: Optional[int] = None) -> ImportRunResponse:
    """Drain a standalone source, following page rollovers to the end."""
    records: List[Dict[str, Any]] = []
    iterator = source.initialize_iterator()
    for record in iterator:
        records.append(prepare_row(record))
        if max_items is not None and len(records) >= max_items:
            break
    logger.info(json.dumps({
        "event": "import_run_complete",
        "records": len(records),
        "truncated": max_items is not None and len(records) >= max_items,
    }))
    return ImportRunResponse(count=len(records), records=records)


def run_batch(source: HarvestSource, offset: int) -> ImportBatchResponse:
    """Import the single page that ``offset`` falls on."""
    iterator = source.initialize_iterator(offset)
    records = [prepare_row(record) for record in iterator]
    pagination = iterator.pagination
    next_offset: Optional[int] = offset + pagination.limit_count
    if not records or next_offset >= pagination.total_entries:
        next_offset = None
    logger.info(json.dumps({
        "event": "import_batch_complete",
        "offset": offset,
        "page": pagination.current_page,
        "records": len(records),
        "next_offset": next_offset,
    }))
    return ImportBatchResponse(
        page=pagination.current_page,
        total_entries=pagination.total_entries,
        count=len(records),
        records=records,
        next_offset=next_offset,
    )
