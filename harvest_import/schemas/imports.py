"""
schemas/imports.py
-------------------

Request and response bodies of the ``/imports/harvest`` routes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from harvest_import.schemas.source import Endpoint, SourceConfiguration


class ImportOverviewRequest(BaseModel):
    source: SourceConfiguration


class ImportRunRequest(BaseModel):
    source: SourceConfiguration
    max_items: Optional[int] = Field(None, ge=1, description="Stop after this many records.")


class ImportBatchRequest(BaseModel):
    source: SourceConfiguration
    offset: int = Field(0, ge=0, description="Batch offset, a multiple of the page size.")


class ImportOverviewResponse(BaseModel):
    endpoint: Endpoint
    count: int
    message: str


class ImportRunResponse(BaseModel):
    count: int
    records: List[Dict[str, Any]]


class ImportBatchResponse(BaseModel):
    page: int
    total_entries: int
    count: int
    records: List[Dict[str, Any]]
    next_offset: Optional[int] = None
