"""
harvest_import package
----------------------

Paginated import source for the Harvest v2 API. ``HarvestSource`` turns
Harvest's page-oriented endpoints into a stream of records for an
import pipeline; the FastAPI application in :mod:`harvest_import.main`
exposes it over HTTP.
"""

from harvest_import.services.harvest_source import HarvestSource, IteratorState, RecordIterator  # noqa: F401

__all__ = ["HarvestSource", "IteratorState", "RecordIterator"]
