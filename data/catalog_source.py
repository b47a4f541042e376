"""Catalog source: a single HTTP read of the configured video endpoint."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


class CatalogFetchError(Exception):
    """Transport, HTTP status, or body parse failure while fetching the catalog."""


def extract_records(body: Any) -> list:
    """Pull the record list out of a response body.

    Accepts {"videos": [...]} or a bare list; any other shape is zero records.
    """
    if isinstance(body, dict):
        videos = body.get("videos")
        if isinstance(videos, list):
            return videos
    elif isinstance(body, list):
        return body
    logger.warning("Unexpected catalog body shape (%s), treating as empty", type(body).__name__)
    return []


@runtime_checkable
class CatalogSourceProtocol(Protocol):
    """Anything that can produce raw catalog records; use for type hints and test stubs."""

    async def fetch(self) -> list: ...


class HttpCatalogSource:
    """Fetches raw records with httpx. One attempt, no retry.

    `transport` is passed through to httpx.AsyncClient (tests use MockTransport).
    """

    def __init__(self, url: str, timeout: float = 10,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def fetch(self) -> list:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(self.url, headers={"Accept": "application/json"})
                resp.raise_for_status()
                body = resp.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise CatalogFetchError(f"request to {self.url} failed: {e}") from e
        except ValueError as e:
            raise CatalogFetchError(f"invalid JSON from {self.url}: {e}") from e
        records = extract_records(body)
        logger.info("Fetched %d catalog records from %s", len(records), self.url)
        return records
