"""
schemas/source.py
------------------

Configuration of a Harvest import source. A ``SourceConfiguration`` is
supplied once when a source is built and is never mutated afterwards,
hence the frozen model.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional
from pydantic import BaseModel, ConfigDict, Field


class Endpoint(str, Enum):
    """Harvest endpoints a source can import from.

    The value is both the API path and the key holding the item list
    in the response body.
    """

    PROJECTS = "projects"
    TIME_ENTRIES = "time_entries"


class Credentials(NamedTuple):
    token: str
    account_id: str


class SourceConfiguration(BaseModel):
    """Options recognised by the Harvest import source."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    client_id: Optional[str] = Field("", description="Harvest account id identifying the tenant.")
    personal_access_token: Optional[str] = Field("", description="Harvest personal access token.")
    endpoint: Endpoint = Endpoint.PROJECTS
    params: str = Field(
        "",
        description='JSON encoded query parameters, e.g. {"is_active": "true"}. '
                    "Dynamic dates may be given as [date:today], [date:first day of last month], etc.",
    )
    throttle: Optional[int] = Field(10, description="Number of API items requested per page.")

    @property
    def credentials(self) -> Credentials:
        return Credentials(token=self.personal_access_token or "", account_id=self.client_id or "")
