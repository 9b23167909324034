"""
Minimal JSON-over-HTTP client used for calls to other deployments of
this service. Only the Python standard library is used; every request
carries a timeout so a slow peer cannot stall a request forever.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any

from . import config
from .errors import UpstreamFailure


logger = logging.getLogger(__name__)


def get_json(url: str, timeout: float = config.HTTP_TIMEOUT_SECONDS) -> Any:
    """Perform an HTTP GET and return the decoded JSON body.

    Any network error, non-200 status or undecodable body is logged and
    reported as ``UpstreamFailure``.
    """
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            if response.status != 200:
                raise UpstreamFailure(f"GET {url} returned status {response.status}")
            data = response.read().decode("utf-8", errors="ignore")
    except urllib.error.HTTPError as exc:
        logger.error("GET %s returned status %s", url, exc.code)
        raise UpstreamFailure(f"GET {url} returned status {exc.code}") from exc
    except (urllib.error.URLError, OSError) as exc:
        logger.error("Error fetching %s: %s", url, exc)
        raise UpstreamFailure(f"GET {url} failed") from exc
    try:
        return json.loads(data)
    except ValueError as exc:
        logger.error("Invalid JSON from %s: %s", url, exc)
        raise UpstreamFailure(f"GET {url} returned invalid JSON") from exc
