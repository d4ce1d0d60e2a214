"""
logging_config.py
------------------

Shared logging configuration for the Harvest import adapter. Every
message is a JSON string with an ``event`` key so that page fetches,
rollovers and outbound HTTP calls can be followed in any log
aggregator.

Import ``logger`` and call its methods instead of ``logging.info``
directly. The ``log_call`` decorator records entry and exit of
service functions at DEBUG level with credentials stripped.
"""

from __future__ import annotations

import json
import logging
import sys
from functools import wraps
from typing import Any, Callable, Dict

# -----------------------------------------------------------------------------
# Configure global logging
# -----------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("harvest_import")

SENSITIVE_KEYWORDS = ("token", "password", "secret")
SENSITIVE_HEADERS = {"authorization", "harvest-account-id"}


def _sanitize(obj: Any) -> Any:
    """Recursively sanitise objects for logging.

    Dictionaries lose any key containing 'token', 'password' or
    'secret'. Lists and tuples are processed element-wise. Pydantic
    models are dumped first so their fields get the same treatment.

    Parameters
    ----------
    obj : Any
        Arbitrary Python object to sanitise.

    Returns
    -------
    Any
        A sanitised representation of the input suitable for JSON serialisation.
    """
    if isinstance(obj, (bytes, bytearray)):
        return f"<binary {len(obj)} bytes>"
    if isinstance(obj, dict):
        clean: Dict[str, Any] = {}
        for k, v in obj.items():
            if any(keyword in str(k).lower() for keyword in SENSITIVE_KEYWORDS):
                continue
            clean[k] = _sanitize(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [_sanitize(i) for i in obj]
    if hasattr(obj, "model_dump"):
        return _sanitize(obj.model_dump(mode="json"))
    try:
        return json.loads(json.dumps(obj))
    except (TypeError, ValueError):
        return str(obj)


def log_call(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to log entry and exit of functions.

    Emits a ``call_start`` event before the wrapped function runs and a
    ``call_end`` event after it returns, both at DEBUG level. Arguments
    and the return value pass through :func:`_sanitize`.

    Examples
    --------

    >>> @log_call
    ... def add(a, b):
    ...     return a + b
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(json.dumps({
                "event": "call_start",
                "function": func.__name__,
                "args": _sanitize(args),
                "kwargs": _sanitize(kwargs),
            }))
        result = func(*args, **kwargs)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(json.dumps({
                "event": "call_end",
                "function": func.__name__,
                "result": _sanitize(result),
            }))
        return result

    return wrapper


def log_http_request(method: str, url: str, *, headers: Dict[str, Any] | None = None,
                     params: Dict[str, Any] | None = None, status: int | None = None,
                     duration_ms: float | None = None) -> None:
    """Log an outbound HTTP request at DEBUG level.

    Headers carrying the bearer token or the Harvest account id are
    dropped; only method, URL, query, status and duration are kept.

    Parameters
    ----------
    method : str
        The HTTP method (GET, POST, etc.)
    url : str
        The URL being requested.
    headers : dict, optional
        Request headers.  Sensitive keys are removed.
    params : dict, optional
        Query parameters.
    status : int, optional
        Response status code (log end only).
    duration_ms : float, optional
        Time taken in milliseconds (log end only).
    """
    data: Dict[str, Any] = {
        "event": "http_request",
        "method": method,
        "url": url,
    }
    if headers is not None:
        data["headers"] = {k: v for k, v in headers.items() if k.lower() not in SENSITIVE_HEADERS}
    if params:
        data["params"] = _sanitize(params)
    if status is not None:
        data["status"] = status
    if duration_ms is not None:
        data["duration_ms"] = round(duration_ms, 2)
    logger.debug(json.dumps(data))
