"""
clients/http_client.py
----------------------

Generic RESTful client for the Harvest v2 API, with connection
pooling, timeouts and retries for idempotent requests. The client
should be instantiated once per process and shared via the FastAPI
lifespan event. It uses ``httpx`` under the hood and honours the
global settings defined in :mod:`harvest_import.core.config`.

Retries apply to GET requests only, on connection errors and on
429/5xx responses. Every other failure is raised as
:class:`~harvest_import.core.exceptions.TransportError`.
"""

from __future__ import annotations

import json
import time
from typing import Any, Dict, Mapping, Optional
import httpx

from harvest_import.core.auth import build_auth_headers, build_endpoint_url
from harvest_import.core.config import get_settings
from harvest_import.core.exceptions import TransportError
from harvest_import.logging_config import log_http_request, logger
from harvest_import.schemas.source import Credentials

# HTTP status codes that should trigger a retry
RETRY_STATUS = {429, 500, 502, 503, 504}


class HarvestApiClient:
    """Synchronous Harvest API client.

    One instance serves every tenant, so credentials travel with each
    call instead of living on the client. :meth:`fetch` is the
    capability consumed by the page fetcher: it performs a GET and
    checks that the body carries the paging metadata.
    """

    def __init__(self, client: Optional[httpx.Client] = None) -> None:
        settings = get_settings()
        self.timeout = settings.http_timeout
        # HTTPX Client uses connection pooling
        self._client = client or httpx.Client(timeout=self.timeout)
        self.max_retries = settings.http_max_retries
        self.backoff_factor = settings.http_backoff_factor

    def __enter__(self) -> "HarvestApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTPX client and release resources."""
        self._client.close()

    def _send(self, method: str, url: str, headers: Dict[str, str], params: Dict[str, Any]) -> httpx.Response:
        """Perform one HTTP request, retrying GETs on transient failures."""
        retries = self.max_retries if method == "GET" else 0
        attempt = 0
        start_time = time.time()
        log_http_request(method, url, headers=headers, params=params)
        while True:
            try:
                response = self._client.request(method, url, headers=headers, params=params)
            except httpx.HTTPError as exc:
                if attempt < retries:
                    attempt += 1
                    time.sleep(self.backoff_factor * (2 ** (attempt - 1)))
                    continue
                logger.error(json.dumps({
                    "event": "http_error",
                    "method": method,
                    "url": url,
                    "detail": str(exc),
                }))
                raise TransportError(f"Request to {url} failed: {exc}") from exc
            if response.status_code in RETRY_STATUS and attempt < retries:
                attempt += 1
                time.sleep(self.backoff_factor * (2 ** (attempt - 1)))
                continue
            duration_ms = (time.time() - start_time) * 1000
            log_http_request(method, url, headers=headers, params=params,
                             status=response.status_code, duration_ms=duration_ms)
            return response

    def request(
        self,
        method: str,
        endpoint: str,
        query_params: Optional[Mapping[str, Any]] = None,
        *,
        credentials: Credentials,
    ) -> Any:
        """Generic request method returning the decoded JSON body.

        Headers are built from ``credentials`` on every call; the client
        itself holds no tenant state and can be shared across threads.
        """
        method_upper = method.upper()
        url = build_endpoint_url(endpoint)
        headers = build_auth_headers(credentials.token, credentials.account_id)
        response = self._send(method_upper, url, headers, dict(query_params or {}))
        if response.is_error:
            raise TransportError(
                f"Harvest responded {response.status_code} for {endpoint}: {response.text[:200]}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Malformed JSON body from {endpoint}.", status_code=response.status_code) from exc

    def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None, *, credentials: Credentials) -> Any:
        """Get request method."""
        return self.request("GET", endpoint, params, credentials=credentials)

    def fetch(self, endpoint: str, credentials: Credentials, query: Mapping[str, Any]) -> Dict[str, Any]:
        """Fetch one page of ``endpoint`` and check its paging metadata.

        :raises TransportError: on network failure, non-2xx status, or a
            body lacking ``total_entries`` or the ``endpoint`` item list
        :return: the decoded response mapping
        """
        body = self.get(endpoint, query, credentials=credentials)
        if not isinstance(body, dict) or "total_entries" not in body or endpoint not in body:
            raise TransportError(f"Response from {endpoint} is missing total_entries or {endpoint}.")
        return body
