"""
Root application entry point for the Harvest import service
===========================================================

Exposes the FastAPI application instance defined in
``harvest_import/main.py`` so that Uvicorn can import ``main:app``.

Usage
-----

.. code-block:: bash

    uvicorn main:app --host 0.0.0.0 --port 8000
"""

from harvest_import.main import app  # noqa: F401 re-export for Uvicorn

__all__ = ["app"]
