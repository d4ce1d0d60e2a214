"""
Stateless helpers: page arithmetic, ``[date:...]`` token resolution and
value transforms.
"""

from harvest_import.utils.pagination import PaginationState, compute_page, effective_limit_count
from harvest_import.utils.tokens import resolve_param_tokens
from harvest_import.utils.transforms import harvest_date_to_timestamp

__all__ = [
    "PaginationState",
    "compute_page",
    "effective_limit_count",
    "resolve_param_tokens",
    "harvest_date_to_timestamp",
]
