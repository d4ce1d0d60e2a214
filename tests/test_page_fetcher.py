"""Unit tests for PageFetcher and query construction."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from harvest_import.core.exceptions import InvalidParamsError, TransportError
from harvest_import.schemas.source import Credentials, SourceConfiguration
from harvest_import.services.page_fetcher import PageFetcher, build_query, decode_params

from tests.conftest import FakeTransport, make_projects


class TestDecodeParams:
    """Test decoding of the params template."""

    @pytest.mark.parametrize("raw", ["", "   ", "null"])
    def test_empty_template(self, raw):
        assert decode_params(raw) == {}

    def test_object(self):
        assert decode_params('{"is_active": "true", "client_id": 5}') == {"is_active": "true", "client_id": 5}

    def test_list_of_objects_is_merged(self):
        assert decode_params('[{"is_active": "true"}, {"client_id": 5}]') == {"is_active": "true", "client_id": 5}

    def test_malformed_json(self):
        with pytest.raises(InvalidParamsError) as exc_info:
            decode_params('{"is_active": ')
        assert exc_info.value.fields == ["params"]

    @pytest.mark.parametrize("raw", ['"text"', "[1, 2]", "42"])
    def test_unsupported_shape(self, raw):
        with pytest.raises(InvalidParamsError):
            decode_params(raw)


class TestBuildQuery:
    """Test overlay of paging keys on the decoded params."""

    def test_page_and_per_page_overlay(self, config):
        assert build_query(config, 3, 10) == {"is_active": "true", "page": 3, "per_page": 10}

    def test_template_page_is_overridden(self):
        config = SourceConfiguration(client_id="1", personal_access_token="t", params='{"page": 99}')
        assert build_query(config, 2, 10)["page"] == 2

    def test_zero_limit_omits_per_page(self, config):
        assert "per_page" not in build_query(config, 1, 0)

    def test_date_tokens_are_resolved(self):
        config = SourceConfiguration(client_id="1", personal_access_token="t", params='{"from": "[date:today]"}')
        query = build_query(config, 1, 10)
        resolved = datetime.fromisoformat(query["from"])
        assert resolved.date() == datetime.now(timezone.utc).date()


class TestPageFetcher:
    """Test one page fetch through the transport."""

    def test_fetch_returns_items_and_total(self, config):
        transport = FakeTransport({1: make_projects(1, 10)}, total_entries=25)
        page = PageFetcher(transport, config).fetch(1, 10)

        assert [item["id"] for item in page.items] == list(range(1, 11))
        assert page.total_entries == 25
        assert len(page) == 10

    def test_fetch_passes_endpoint_credentials_and_query(self, config):
        transport = FakeTransport({2: make_projects(11, 12)})
        PageFetcher(transport, config).fetch(2, 10)

        call = transport.calls[0]
        assert call["endpoint"] == "projects"
        assert call["credentials"] == Credentials(token="pat-secret", account_id="123456")
        assert call["query"] == {"is_active": "true", "page": 2, "per_page": 10}

    def test_time_entries_endpoint_reads_its_own_key(self):
        config = SourceConfiguration(client_id="1", personal_access_token="t", endpoint="time_entries")

        class TimeEntriesTransport:
            def fetch(self, endpoint, credentials, query):
                return {"total_entries": 1, "time_entries": [{"id": 7}], "projects": [{"id": 1}]}

        page = PageFetcher(TimeEntriesTransport(), config).fetch(1, 10)
        assert page.items == [{"id": 7}]

    def test_transport_errors_propagate(self, config):
        transport = FakeTransport({}, fail_pages=[1])
        with pytest.raises(TransportError) as exc_info:
            PageFetcher(transport, config).fetch(1, 10)
        assert exc_info.value.status_code == 503

    def test_invalid_params_fail_before_network(self):
        config = SourceConfiguration(client_id="1", personal_access_token="t", params="{broken")
        transport = FakeTransport({1: make_projects(1, 1)})
        with pytest.raises(InvalidParamsError):
            PageFetcher(transport, config).fetch(1, 10)
        assert transport.calls == []
