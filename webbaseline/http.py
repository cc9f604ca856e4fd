"""HTTP client layer for pywebbaseline."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from contextvars import ContextVar
import json
import logging
from typing import Any

import httpx

from ._version import __version__
from .constants import DEFAULT_TIMEOUT_SECONDS, FEATURES_URL
from .exceptions import ContentError, HttpStatusError, NetworkError, RequestTimeoutError

LOGGER = logging.getLogger(__name__)

_SHARED_CLIENT: ContextVar[httpx.AsyncClient | None] = ContextVar(
    "pywebbaseline_shared_client", default=None
)


def _build_headers() -> dict[str, str]:
    return {
        "User-Agent": f"pywebbaseline/{__version__}",
        "Accept": "application/json",
    }


@asynccontextmanager
async def use_shared_client(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> AsyncIterator[httpx.AsyncClient]:
    """Provide a reusable HTTP client for all fetches within one run."""
    async with httpx.AsyncClient(
        timeout=timeout, follow_redirects=True, headers=_build_headers()
    ) as client:
        token = _SHARED_CLIENT.set(client)
        try:
            yield client
        finally:
            _SHARED_CLIENT.reset(token)


async def _get_text(
    url: str,
    params: Mapping[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    request_params = dict(params or {})
    shared_client = _SHARED_CLIENT.get()
    retry_once = True
    while True:
        try:
            if shared_client is None or timeout != DEFAULT_TIMEOUT_SECONDS:
                async with httpx.AsyncClient(
                    timeout=timeout, follow_redirects=True, headers=_build_headers()
                ) as client:
                    response = await client.get(url, params=request_params)
            else:
                response = await shared_client.get(url, params=request_params)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(url) from exc
        except httpx.ConnectError as exc:
            if retry_once:
                retry_once = False
                LOGGER.debug("Connect error for %s, retrying once", url)
                continue
            raise NetworkError(url, cause=exc.__class__.__name__) from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise NetworkError(url, cause=exc.__class__.__name__) from exc

        if response.status_code != 200:
            raise HttpStatusError(response.status_code, str(response.url))

        body = response.text
        if not body.strip():
            raise ContentError(str(response.url), reason="empty")
        return body


def _parse_json_payload(raw: str, url: str) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise ContentError(url, reason="malformed JSON") from exc


async def fetch_json(
    url: str,
    params: Mapping[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """Fetch and decode a JSON document with friendly failures."""
    return _parse_json_payload(await _get_text(url, params=params, timeout=timeout), url)


async def fetch_feature_catalog(
    url: str = FEATURES_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """Fetch the full web platform feature catalog payload."""
    LOGGER.debug("Fetching feature catalog from %s", url)
    return await fetch_json(url, timeout=timeout)
