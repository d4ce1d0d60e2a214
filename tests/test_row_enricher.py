"""Unit tests for project code enrichment and value transforms."""

from __future__ import annotations

import pytest

from harvest_import.services.row_enricher import prepare_row
from harvest_import.utils.transforms import harvest_date_to_timestamp


class TestPrepareRow:
    """Test prefix/signed annotation of project rows."""

    def test_signed_code(self):
        row = prepare_row({"id": 1, "code": "ACME-042"})
        assert row["prefix"] == "acme"
        assert row["signed"] is True

    def test_unsigned_code(self):
        row = prepare_row({"id": 1, "code": "US-Globex-7"})
        assert row["prefix"] == "globex"
        assert row["signed"] is False

    def test_unsigned_without_prefix(self):
        row = prepare_row({"code": "US"})
        assert row == {"code": "US", "prefix": "", "signed": False}

    def test_code_without_separator(self):
        assert prepare_row({"code": "Internal"})["prefix"] == "internal"

    @pytest.mark.parametrize("record", [{"id": 1}, {"id": 1, "code": None}, {"id": 1, "code": ""}])
    def test_rows_without_code_pass_through(self, record):
        assert prepare_row(record) == record

    def test_input_not_mutated(self):
        record = {"code": "ACME-1"}
        prepare_row(record)
        assert record == {"code": "ACME-1"}


class TestHarvestDateToTimestamp:
    """Test date string to Unix timestamp conversion."""

    def test_date_time_with_zone(self):
        assert harvest_date_to_timestamp("2024-03-01T09:30:00Z") == 1709285400

    def test_date_only(self):
        assert harvest_date_to_timestamp("2024-03-01") == 1709251200

    @pytest.mark.parametrize("value", [None, "", "zzqx blorp", 12])
    def test_unparseable(self, value):
        assert harvest_date_to_timestamp(value) is None

    def test_applied_by_host_mapping_only(self):
        """prepare_row leaves dates as Harvest sent them; a mapping converts them."""
        row = prepare_row({"code": "ACME-1", "starts_on": "2024-03-01"})
        assert row["starts_on"] == "2024-03-01"
        assert harvest_date_to_timestamp(row["starts_on"]) == 1709251200
