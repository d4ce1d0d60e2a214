"""
Route package for the Harvest import service.

Each module defines an ``APIRouter`` that ``harvest_import.main``
includes in the application.
"""

__all__ = ["imports"]

from . import imports  # noqa: E402,F401
