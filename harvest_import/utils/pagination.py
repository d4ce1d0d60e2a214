"""
utils/pagination.py
--------------------

Page arithmetic for Harvest sources driven by a batch processor.

A batch driver hands the source a page size (the limit count) and an
offset that grows by one page size per batch. Harvest on the other hand
wants a 1-based page number, so ``compute_page`` translates one into
the other. ``PaginationState`` is the immutable bookkeeping owned by a
single record iterator: current page, total entries reported by the
last response, and the limit count/offset the iterator was started
with.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from harvest_import.core.exceptions import InvalidLimitError


def compute_page(limit_count: int, limit_offset: int) -> int:
    """Return the 1-based page number for a (limit, offset) batch cursor.

    The offset is expected to be a multiple of the limit. Other offsets
    land on the page containing the offset (floor division).

    :raises InvalidLimitError: if ``limit_count`` is not positive
    """
    if limit_count <= 0:
        raise InvalidLimitError(limit_count)
    return (limit_count + limit_offset) // limit_count


def effective_limit_count(throttle: Optional[int], default_limit: int) -> int:
    """Return ``throttle`` when set and positive, else the host default."""
    if throttle is not None and throttle > 0:
        return throttle
    return default_limit


@dataclass(frozen=True)
class PaginationState:
    """Paging bookkeeping of one record iterator.

    Instances are immutable; the iterator swaps in the state returned
    by :meth:`with_page` only once the matching fetch has succeeded.
    ``total_entries`` is 0 until the first response has been seen.
    """

    limit_count: int
    current_page: int = 1
    total_entries: int = 0
    limit_offset: int = 0

    def with_page(self, page: int, total_entries: int) -> "PaginationState":
        return replace(self, current_page=page, total_entries=total_entries)

    @property
    def next_page(self) -> int:
        return self.current_page + 1
