"""Tests for the /imports/harvest routes against a mocked Harvest API."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from harvest_import.clients.http_client import HarvestApiClient
from harvest_import.main import create_app

from tests.conftest import make_projects

PAGES = {1: make_projects(1, 10), 2: make_projects(11, 20), 3: make_projects(21, 25)}
PAGES[3][0]["code"] = "US-Globex-21"

SOURCE = {
    "client_id": "123456",
    "personal_access_token": "pat-secret",
    "endpoint": "projects",
    "params": '{"is_active": "true"}',
    "throttle": 10,
}


def harvest_handler(request: httpx.Request) -> httpx.Response:
    if request.headers.get("Authorization") != "Bearer pat-secret":
        return httpx.Response(401, json={"error": "invalid_token"})
    page = int(request.url.params["page"])
    return httpx.Response(200, json={"total_entries": 25, "projects": PAGES.get(page, []), "page": page})


@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def client(requests_seen):
    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        return harvest_handler(request)

    harvest = HarvestApiClient(client=httpx.Client(transport=httpx.MockTransport(handler)))
    harvest.backoff_factor = 0
    with TestClient(create_app(http_client=harvest)) as test_client:
        yield test_client


class TestOverview:
    def test_overview_reports_count(self, client, requests_seen):
        response = client.post("/imports/harvest/overview", json={"source": SOURCE})

        assert response.status_code == 200
        assert response.json() == {
            "endpoint": "projects",
            "count": 25,
            "message": "Ready to import 25 items from the endpoint projects.",
        }
        assert [r.url.params["page"] for r in requests_seen] == ["1"]

    def test_missing_token_is_bad_request(self, client, requests_seen):
        source = dict(SOURCE, personal_access_token="")
        response = client.post("/imports/harvest/overview", json={"source": source})

        assert response.status_code == 400
        assert response.json()["fields"] == ["personal_access_token"]
        assert requests_seen == []

    def test_unknown_endpoint_is_rejected(self, client):
        source = dict(SOURCE, endpoint="invoices")
        assert client.post("/imports/harvest/overview", json={"source": source}).status_code == 422


class TestRun:
    def test_run_follows_every_page(self, client, requests_seen):
        response = client.post("/imports/harvest/run", json={"source": SOURCE})

        body = response.json()
        assert response.status_code == 200
        assert body["count"] == 25
        assert [r["id"] for r in body["records"]] == list(range(1, 26))
        assert body["records"][0]["prefix"] == "acme"
        assert body["records"][20]["signed"] is False
        assert body["records"][20]["prefix"] == "globex"
        assert [r.url.params["page"] for r in requests_seen] == ["1", "2", "3", "4"]

    def test_run_respects_max_items(self, client, requests_seen):
        response = client.post("/imports/harvest/run", json={"source": SOURCE, "max_items": 12})

        assert response.json()["count"] == 12
        assert [r.url.params["page"] for r in requests_seen] == ["1", "2"]

    def test_upstream_failure_is_bad_gateway(self, client):
        source = dict(SOURCE, personal_access_token="wrong")
        response = client.post("/imports/harvest/run", json={"source": source})

        assert response.status_code == 502
        assert response.json()["upstream_status"] == 401

    def test_invalid_params_template(self, client, requests_seen):
        source = dict(SOURCE, params="{not json")
        response = client.post("/imports/harvest/run", json={"source": source})

        assert response.status_code == 400
        assert response.json()["fields"] == ["params"]
        assert requests_seen == []


class TestBatch:
    @pytest.mark.parametrize(
        "offset,page,ids,next_offset",
        [
            (0, 1, list(range(1, 11)), 10),
            (10, 2, list(range(11, 21)), 20),
            (20, 3, list(range(21, 26)), None),
        ],
    )
    def test_batch_pages(self, client, requests_seen, offset, page, ids, next_offset):
        response = client.post("/imports/harvest/batch", json={"source": SOURCE, "offset": offset})

        body = response.json()
        assert body["page"] == page
        assert body["total_entries"] == 25
        assert [r["id"] for r in body["records"]] == ids
        assert body["next_offset"] == next_offset
        assert [r.url.params["page"] for r in requests_seen] == [str(page)]

    def test_batch_past_the_end(self, client):
        body = client.post("/imports/harvest/batch", json={"source": SOURCE, "offset": 40}).json()
        assert body["count"] == 0
        assert body["next_offset"] is None
