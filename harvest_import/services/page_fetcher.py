"""
services/page_fetcher.py
-------------------------

Issues a single Harvest API call for one page of a source. The stored
``params`` template has its date tokens resolved, is decoded into a
query mapping and receives the ``page`` and ``per_page`` keys before
being handed to the transport.

Transport failures are not caught here; retries are the transport's
business.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

from harvest_import.core.exceptions import InvalidParamsError
from harvest_import.logging_config import logger
from harvest_import.schemas.source import Credentials, SourceConfiguration
from harvest_import.utils.tokens import resolve_param_tokens

Record = Dict[str, Any]


class Transport(Protocol):
    def fetch(self, endpoint: str, credentials: Credentials, query: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass
class Page:
    """One response slice: items in response order and the total-count hint."""

    items: List[Record] = field(default_factory=list)
    total_entries: int = 0

    def __len__(self) -> int:
        return len(self.items)


def decode_params(raw_params: str) -> Dict[str, Any]:
    """Decode a resolved ``params`` template into a query mapping.

    An empty template yields ``{}``. A list of objects is merged left to
    right.

    :raises InvalidParamsError: for malformed JSON or unsupported shapes
    """
    if not raw_params or not raw_params.strip():
        return {}
    try:
        decoded = json.loads(raw_params)
    except ValueError as exc:
        raise InvalidParamsError(f"Query parameters are not valid JSON: {exc}") from exc
    if decoded is None:
        return {}
    if isinstance(decoded, dict):
        return decoded
    if isinstance(decoded, list) and all(isinstance(item, dict) for item in decoded):
        merged: Dict[str, Any] = {}
        for item in decoded:
            merged.update(item)
        return merged
    raise InvalidParamsError("Query parameters must be a JSON object or a list of objects.")


def build_query(config: SourceConfiguration, page: int, limit_count: int) -> Dict[str, Any]:
    params = decode_params(resolve_param_tokens(config.params))
    params["page"] = page
    if limit_count > 0:
        params["per_page"] = limit_count
    return params


class PageFetcher:
    """Fetch pages of one configured endpoint through a transport."""

    def __init__(self, transport: Transport, config: SourceConfiguration) -> None:
        self.transport = transport
        self.config = config

    def fetch(self, page: int, limit_count: int) -> Page:
        endpoint = self.config.endpoint.value
        query = build_query(self.config, page, limit_count)
        response = self.transport.fetch(endpoint, self.config.credentials, query)
        result = Page(items=list(response[endpoint] or []), total_entries=int(response["total_entries"] or 0))
        logger.info(json.dumps({
            "event": "page_fetch",
            "endpoint": endpoint,
            "page": page,
            "per_page": limit_count,
            "items": len(result),
            "total_entries": result.total_entries,
        }))
        return result
