# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Retrieval of schema documents over HTTP or from the local filesystem."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_TIMEOUT_SECONDS = 60.0


class SchemaRetrievalFailed(Exception):
    """Raised when a schema document cannot be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to retrieve '{url}': {reason}")
        self.url = url


class SchemaNotFound(SchemaRetrievalFailed):
    """Raised when the server or filesystem reports that a schema does not exist."""

    def __init__(self, url: str) -> None:
        super().__init__(url, "not found")


async def download(url: str, *, client: httpx.AsyncClient | None = None) -> bytes:
    """Fetch *url* and return the response body.

    Args:
        url: An ``http(s)`` URL.
        client: Optional client to reuse; a short-lived one is created otherwise.

    Raises:
        SchemaNotFound: On HTTP 404.
        SchemaRetrievalFailed: On any other HTTP status error or transport error.
    """
    if client is None:
        async with _new_client() as owned:
            return await _get(owned, url)
    return await _get(client, url)


async def read_source(source: str, *, client: httpx.AsyncClient | None = None) -> bytes:
    """Read *source*, which is either an ``http(s)`` URL or a local path.

    Raises:
        SchemaNotFound: If the URL returns 404 or the file does not exist.
        SchemaRetrievalFailed: On any other failure.
    """
    if is_url(source):
        return await download(source, client=client)
    try:
        return await asyncio.to_thread(Path(source).read_bytes)
    except FileNotFoundError:
        raise SchemaNotFound(source) from None
    except OSError as exc:
        raise SchemaRetrievalFailed(source, str(exc)) from exc


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


# ################
# Implementation
# ################


def _new_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=DEFAULT_TIMEOUT_SECONDS,
        follow_redirects=True,
        headers={"User-Agent": "kindgen"},
    )


async def _get(client: httpx.AsyncClient, url: str) -> bytes:
    logger.debug("GET %s", url)
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code == 404:
            raise SchemaNotFound(url) from exc
        raise SchemaRetrievalFailed(url, f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise SchemaRetrievalFailed(url, str(exc) or type(exc).__name__) from exc
    return response.content
