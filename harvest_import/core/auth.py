"""
core/auth.py
-------------

Utility functions for building authenticated requests to Harvest.

Harvest v2 authenticates with a personal access token sent as a
bearer token, plus the account id in the ``Harvest-Account-ID``
header. See
https://help.getharvest.com/api-v2/authentication-api/authentication/authentication/.
"""

from __future__ import annotations

from typing import Dict

from harvest_import.core.config import get_settings


def get_base_url() -> str:
    """Return the API base URL without a trailing slash."""
    return get_settings().base_uri.rstrip("/")


def build_endpoint_url(endpoint: str) -> str:
    """Join an endpoint name such as ``projects`` onto the base URL."""
    return f"{get_base_url()}/{endpoint.lstrip('/')}"


def build_auth_headers(token: str, account_id: str | int) -> Dict[str, str]:
    """Create the HTTP headers required for an authenticated call.

    :param token: Harvest personal access token
    :param account_id: Harvest account id (the ``client_id`` of a source)
    :return: a dictionary of headers suitable for use with httpx
    """
    return {
        "Harvest-Account-ID": str(account_id),
        "Authorization": f"Bearer {token}",
        "Accept": "application/json",
        "User-Agent": get_settings().user_agent,
    }
