"""
services/row_enricher.py
-------------------------

Agency-specific processing for projects with particular code prefixes.

Harvest project codes look like ``ACME-042`` or ``US-ACME-042``. The
leading part names the client prefix; a leading ``US`` marks unsigned
work, in which case the prefix is the second part.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping


def prepare_row(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``record`` annotated with ``prefix`` and ``signed``.

    Records without a ``code`` are returned unchanged (as a copy).
    """
    row = dict(record)
    code = row.get("code")
    if not code:
        return row
    parts = str(code).split("-")
    prefix = parts[0]
    signed = True
    # Unsigned work:
    if parts[0] == "US":
        signed = False
        prefix = parts[1] if len(parts) > 1 else ""
    row["signed"] = signed
    row["prefix"] = prefix.lower()
    return row
