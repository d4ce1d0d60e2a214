"""
services/harvest_source.py
---------------------------

Import source for the Harvest API.

Harvest is paginated and rate limited, while an import pipeline wants a
plain stream of records. ``HarvestSource`` bridges the two. It
translates the pipeline's (limit, offset) batch cursor into a Harvest
page number and serves that page through a ``RecordIterator``.

The iterator runs in one of two modes, chosen when the source is
built:

* batch mode: an external batch processor owns cross-page advancement
  and calls :meth:`HarvestSource.initialize_iterator` with a new offset
  for every batch. The iterator stops at the end of its page.
* standalone mode: nothing drives the offset (a CLI run, a single HTTP
  request draining the source). When the page is used up the iterator
  requests the next page itself and keeps going until Harvest returns
  an empty page. Otherwise the source would always be limited to a
  single page.

Neither class is safe for concurrent use.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Optional

from harvest_import.core.config import get_settings
from harvest_import.core.exceptions import MissingClientIdError, MissingCredentialError
from harvest_import.logging_config import log_call, logger
from harvest_import.schemas.source import SourceConfiguration
from harvest_import.services.import_source import ImportSource
from harvest_import.services.page_fetcher import Page, PageFetcher, Record, Transport
from harvest_import.utils.pagination import PaginationState, compute_page, effective_limit_count


class IteratorState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    EXHAUSTED = "exhausted"


class RecordIterator:
    """Forward iterator over one page of records, with optional page rollover.

    Records come out in response order, and page N is always fully
    consumed before page N+1 is requested. A fetch that fails leaves
    both the page and the pagination state as they were.
    """

    def __init__(self, fetcher: PageFetcher, limit_count: int, *, batch: bool = False) -> None:
        self.fetcher = fetcher
        self.batch = batch
        self.state = IteratorState.UNINITIALIZED
        self.pagination = PaginationState(limit_count=limit_count)
        self.page = Page()
        self.position = 0

    def initialize(self, limit_offset: int = 0) -> "RecordIterator":
        """Fetch the page for ``limit_offset`` and move to READY."""
        limit_count = self.pagination.limit_count
        page_number = compute_page(limit_count, limit_offset)
        page = self.fetcher.fetch(page_number, limit_count)
        self.pagination = PaginationState(
            limit_count=limit_count,
            current_page=page_number,
            total_entries=page.total_entries,
            limit_offset=limit_offset,
        )
        self._load(page)
        self.state = IteratorState.READY
        return self

    def _load(self, page: Page) -> None:
        self.page = page
        self.position = 0

    @property
    def remaining(self) -> int:
        """Records left on the current page."""
        return len(self.page) - self.position

    def advance(self) -> Optional[Record]:
        """Return the next record, rolling over to the next page if allowed.

        Returns ``None`` once exhausted; further calls keep returning
        ``None`` without touching the network.
        """
        if self.state is IteratorState.UNINITIALIZED:
            raise RuntimeError("RecordIterator.initialize() must be called before advancing.")
        if self.state is IteratorState.EXHAUSTED:
            return None
        if self.remaining > 0:
            record = self.page.items[self.position]
            self.position += 1
            return record
        if self.batch:
            self._exhaust()
            return None

        # Standalone: get the next page of data.
        next_page = self.pagination.next_page
        page = self.fetcher.fetch(next_page, self.pagination.limit_count)
        self.pagination = self.pagination.with_page(next_page, page.total_entries)
        logger.info(json.dumps({
            "event": "page_rollover",
            "page": next_page,
            "items": len(page),
        }))
        if not page.items:
            self._exhaust()
            return None
        self._load(page)
        return self.advance()

    def _exhaust(self) -> None:
        self.state = IteratorState.EXHAUSTED
        logger.info(json.dumps({
            "event": "iterator_exhausted",
            "page": self.pagination.current_page,
            "batch": self.batch,
        }))

    def __iter__(self) -> "RecordIterator":
        return self

    def __next__(self) -> Record:
        record = self.advance()
        if record is None:
            raise StopIteration
        return record

    def __str__(self) -> str:
        return json.dumps(self.page.items)


class HarvestSource(ImportSource):
    """Provides a flexible, generic import source for the Harvest API."""

    def __init__(
        self,
        config: SourceConfiguration,
        transport: Transport,
        *,
        batch: bool = False,
        default_limit: Optional[int] = None,
    ) -> None:
        self.config = config
        self.batch = batch
        self.default_limit = default_limit or get_settings().default_limit_count
        self.fetcher = PageFetcher(transport, config)
        self.iterator: Optional[RecordIterator] = None
        self.total_entries = 0

    @property
    def limit_count(self) -> int:
        return effective_limit_count(self.config.throttle, self.default_limit)

    def is_valid(self) -> bool:
        return bool(self.config.personal_access_token) and bool(self.config.client_id)

    def check_requirements(self) -> None:
        if not self.config.personal_access_token:
            raise MissingCredentialError()
        if not self.config.client_id:
            raise MissingClientIdError()

    @log_call
    def count(self) -> int:
        """Return the total number of items reported by Harvest.

        Always performs its own request for page 1, so the result can
        drift from what an ongoing iteration sees if the remote data
        changes in between.
        """
        self.check_requirements()
        page = self.fetcher.fetch(1, self.limit_count)
        self.total_entries = page.total_entries
        return self.total_entries

    def initialize_iterator(self, limit_offset: int = 0) -> RecordIterator:
        """Initialize the iterator with results from an API request.

        The current page is derived from the limit count and the offset
        set by the batch processor, which grows by one limit count per
        batch.
        """
        self.check_requirements()
        iterator = RecordIterator(self.fetcher, self.limit_count, batch=self.batch)
        iterator.initialize(limit_offset)
        self.iterator = iterator
        self.total_entries = iterator.pagination.total_entries
        return iterator

    def next(self) -> Optional[Dict[str, Any]]:
        if self.iterator is None:
            raise RuntimeError("initialize_iterator() must be called before next().")
        return self.iterator.advance()

    def __iter__(self) -> RecordIterator:
        return self.initialize_iterator()

    def __str__(self) -> str:
        return str(self.iterator) if self.iterator is not None else "[]"
