"""Shared fixtures for the Harvest import tests."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import pytest

from harvest_import.core.exceptions import TransportError
from harvest_import.schemas.source import Credentials, SourceConfiguration


def make_projects(start: int, stop: int) -> List[Dict[str, Any]]:
    return [{"id": i, "name": f"Project {i}", "code": f"ACME-{i:03d}"} for i in range(start, stop + 1)]


class FakeTransport:
    """In-memory stand-in for HarvestApiClient.fetch."""

    def __init__(
        self,
        pages: Dict[int, List[Dict[str, Any]]],
        total_entries: Optional[int] = None,
        fail_pages: Iterable[int] = (),
    ) -> None:
        self.pages = pages
        self.total_entries = (
            total_entries if total_entries is not None else sum(len(p) for p in pages.values())
        )
        self.fail_pages = set(fail_pages)
        self.calls: List[Dict[str, Any]] = []

    def fetch(self, endpoint: str, credentials: Credentials, query: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append({"endpoint": endpoint, "credentials": credentials, "query": dict(query)})
        page = query["page"]
        if page in self.fail_pages:
            raise TransportError(f"Harvest responded 503 for {endpoint}", status_code=503)
        return {"total_entries": self.total_entries, endpoint: list(self.pages.get(page, []))}

    @property
    def requested_pages(self) -> List[int]:
        return [call["query"]["page"] for call in self.calls]


@pytest.fixture
def config() -> SourceConfiguration:
    return SourceConfiguration(
        client_id="123456",
        personal_access_token="pat-secret",
        endpoint="projects",
        params='{"is_active": "true"}',
        throttle=10,
    )


@pytest.fixture
def three_page_transport() -> FakeTransport:
    """25 projects served 10 per page."""
    return FakeTransport(
        {1: make_projects(1, 10), 2: make_projects(11, 20), 3: make_projects(21, 25)},
        total_entries=25,
    )
