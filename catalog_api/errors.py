# catalog_api/errors.py
"""
Exceptions raised by the catalogue services.

Each class maps onto one HTTP status in ``main.py``:

* ``InvalidArgument``  -> 400
* ``NotFound``         -> 404 (with the applied query when one is attached)
* ``UpstreamFailure``  -> 500 (detail is logged, never sent to the client)
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base class for every error the catalogue reports to clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(CatalogError):
    status_code = 400


class NotFound(CatalogError):
    status_code = 404

    def __init__(self, message: str, query: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.query = query


class UpstreamFailure(CatalogError):
    status_code = 500
