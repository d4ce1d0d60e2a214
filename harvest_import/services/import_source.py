"""
services/import_source.py
--------------------------

The contract between an import pipeline and a paginated source. The
pipeline only ever talks to this interface: it validates the source,
asks for a count, starts an iterator at a batch offset and advances it
one record at a time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional


class ImportSource(ABC):
    """Narrow source interface consumed by the import service."""

    @property
    @abstractmethod
    def limit_count(self) -> int:
        """Number of records requested per page."""

    @abstractmethod
    def is_valid(self) -> bool:
        """True when the source is configured well enough to fetch."""

    @abstractmethod
    def check_requirements(self) -> None:
        """Raise a ConfigurationError when required options are missing."""

    @abstractmethod
    def count(self) -> int:
        """Total number of records available from the remote API."""

    @abstractmethod
    def initialize_iterator(self, limit_offset: int = 0) -> Iterator[Dict[str, Any]]:
        """Fetch the page matching ``limit_offset`` and return an iterator over it."""

    @abstractmethod
    def next(self) -> Optional[Dict[str, Any]]:
        """Advance one record; ``None`` once the iterator is exhausted."""
