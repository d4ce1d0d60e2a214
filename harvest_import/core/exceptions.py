"""
core/exceptions.py
-------------------

Error hierarchy for the Harvest import adapter.

Configuration errors are detected before any network call and are
never retried. Transport errors originate in
:class:`harvest_import.clients.http_client.HarvestApiClient` and travel
through the page fetcher and the record iterator unchanged.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class HarvestImportError(Exception):
    """Base exception for all adapter errors."""


class ConfigurationError(HarvestImportError):
    """The source configuration cannot be used to issue requests."""

    def __init__(self, message: str, fields: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.fields: List[str] = list(fields or [])


class MissingCredentialError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("Missing required personal access token.", ["personal_access_token"])


class MissingClientIdError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("Missing required client id.", ["client_id"])


class InvalidParamsError(ConfigurationError):
    """The ``params`` template does not decode to a query mapping."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ["params"])


class InvalidLimitError(ConfigurationError):
    """Page size must be a positive integer."""

    def __init__(self, limit_count: int) -> None:
        super().__init__(f"Limit count must be positive, got {limit_count}.", ["throttle"])
        self.limit_count = limit_count


class TransportError(HarvestImportError):
    """Network failure, non-success HTTP status or malformed response body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
