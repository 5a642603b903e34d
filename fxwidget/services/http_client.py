"""Async HTTP JSON fetcher with limited retries.

Wraps a shared httpx.AsyncClient (built with redirects followed). Focus: GET a
JSON object, retry transport failures and 5xx answers with exponential
backoff, and translate everything else into the widget's error taxonomy:
connection problems become TransportError, any other httpx failure or
non-2xx/unparseable answer becomes ServiceError.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from fxwidget.core.errors import ServiceError, TransportError

logger = logging.getLogger("fxwidget.http")


def make_async_client(
    timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True)


def _decode(resp: httpx.Response, url: str) -> Dict[str, Any]:
    try:
        data = resp.json()
    except ValueError as e:
        raise ServiceError(
            f"Invalid JSON from {url}: {e}", status_code=resp.status_code
        ) from e
    if not isinstance(data, dict):
        raise ServiceError(
            f"Expected JSON object from {url}, got {type(data).__name__}",
            status_code=resp.status_code,
        )
    return data


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Mapping[str, Any]] = None,
    *,
    retries: int = 1,
    backoff: float = 0.5,
) -> Dict[str, Any]:
    last_err: Optional[ServiceError] = None
    for attempt in range(retries + 1):
        try:
            resp = await client.get(url, params=params)
        except httpx.TransportError as e:  # connect errors, timeouts
            last_err = TransportError(f"Request to {url} failed: {e!r}")
        except httpx.HTTPError as e:  # bad content-encoding, redirect loops
            raise ServiceError(f"Malformed response from {url}: {e!r}") from e
        else:
            if resp.status_code >= 500:
                last_err = ServiceError(
                    f"HTTP {resp.status_code} for {resp.request.url}",
                    status_code=resp.status_code,
                )
            elif not resp.is_success:
                # Client errors and unfollowed 3xx will not improve on retry
                raise ServiceError(
                    f"HTTP {resp.status_code} for {resp.request.url}",
                    status_code=resp.status_code,
                )
            else:
                return _decode(resp, url)
        if attempt == retries:
            break
        logger.debug("retrying %s after %s (attempt %d)", url, last_err, attempt + 1)
        await asyncio.sleep(backoff * (2**attempt))
    assert last_err is not None
    raise last_err
