"""
utils/transforms.py
--------------------

Field-level value transforms for Harvest records.

These are helpers for the host pipeline's field mappings (for example
turning a project's ``starts_on`` into a timestamp column). The source
and the import service hand records back untouched apart from
:func:`~harvest_import.services.row_enricher.prepare_row`, so nothing
here runs unless a mapping asks for it.
"""

from __future__ import annotations

from typing import Any, Optional

import dateparser

from harvest_import.core.config import get_settings


def harvest_date_to_timestamp(value: Any) -> Optional[int]:
    """Convert a Harvest date or date-time string to Unix seconds.

    Harvest sends dates such as ``2024-03-01`` and timestamps such as
    ``2024-03-01T09:30:00Z``. Returns ``None`` for empty or unparseable
    values.
    """
    if not value or not isinstance(value, str):
        return None
    parsed = dateparser.parse(
        value,
        settings={
            "TIMEZONE": get_settings().date_timezone,
            "RETURN_AS_TIMEZONE_AWARE": True,
        },
    )
    if parsed is None:
        return None
    return int(parsed.timestamp())
