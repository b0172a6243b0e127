"""Shared outbound request handling for the NHTSA clients.

One request per call. No retries, no backoff.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
CONNECT_TIMEOUT_SECONDS = 10.0


class UpstreamError(Exception):
    """An upstream call did not produce a usable JSON response.

    ``status_code`` is the HTTP status for non-success responses and ``None``
    when the request never completed (connect failure, timeout) or the body
    was not JSON.
    """

    def __init__(self, url: str, status_code: Optional[int] = None, detail: str = ""):
        self.url = url
        self.status_code = status_code
        self.detail = detail
        if status_code is not None:
            message = f"NHTSA API error: {status_code}"
        else:
            message = f"NHTSA API request failed: {detail or 'no response'}"
        super().__init__(message)


def _timeout() -> httpx.Timeout:
    total = float(os.environ.get("UPSTREAM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
    return httpx.Timeout(total, connect=min(CONNECT_TIMEOUT_SECONDS, total))


def new_client() -> httpx.AsyncClient:
    """Create the client used for one request's upstream calls."""
    return httpx.AsyncClient(timeout=_timeout())


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[dict] = None,
) -> dict:
    """GET ``url`` and return the decoded JSON body.

    Raises:
        UpstreamError: on a non-2xx status, a transport failure, or a body that
            is not a JSON object.
    """
    try:
        response = await client.get(url, params=params)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise UpstreamError(url, exc.response.status_code) from exc
    except httpx.RequestError as exc:
        raise UpstreamError(url, detail=f"{type(exc).__name__}: {exc}") from exc

    try:
        data = response.json()
    except ValueError as exc:
        raise UpstreamError(url, detail="response body is not JSON") from exc

    # Every NHTSA endpoint answers with an object; anything else is unusable.
    if not isinstance(data, dict):
        raise UpstreamError(url, detail=f"unexpected body: {type(data).__name__}")
    return data
