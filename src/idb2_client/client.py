"""HTTP side of the client: endpoint helpers and the Flux query path.

Query text is forwarded verbatim and the raw ``httpx.Response`` is handed
back; nothing here parses CSV results.

Example::

    server = ServerInfo("http://localhost:8086", org="acme", bucket="metrics", token="...")
    resp = query(server, 'from(bucket:"metrics") |> range(start: -1h)')
    print(resp.status_code, resp.text)

    resp = await query_async(server, flux, on_complete=lambda r: print(r.text))
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

import httpx

from idb2_client.config import ServerInfo
from idb2_client.errors import TransportError

log = logging.getLogger("idb2_client.client")

WRITE_PATH = "/api/v2/write"
QUERY_PATH = "/api/v2/query"

QUERY_HEADERS = {
    "Accept": "application/csv",
    "Content-type": "application/vnd.flux",
}

ResponseCallback = Callable[[httpx.Response], Any]


def auth_headers(server: ServerInfo) -> dict[str, str]:
    return {"Authorization": f"Token {server.token}"}


def write_url(server: ServerInfo) -> str:
    return server.base_url + WRITE_PATH


def query_url(server: ServerInfo) -> str:
    return server.base_url + QUERY_PATH


def write_params(server: ServerInfo) -> dict[str, str]:
    params = {"org": server.org, "bucket": server.bucket}
    if server.precision is not None:
        params["precision"] = server.precision
    return params


def post(
    server: ServerInfo,
    url: str,
    *,
    params: dict[str, str],
    headers: dict[str, str],
    content: str,
    client: httpx.Client | None = None,
) -> httpx.Response:
    """Blocking POST. A caller-supplied *client* is used as is and left open."""
    try:
        if client is not None:
            return client.post(url, params=params, headers=headers, content=content.encode("utf-8"))
        with httpx.Client(timeout=server.timeout_s, verify=server.verify) as owned:
            return owned.post(url, params=params, headers=headers, content=content.encode("utf-8"))
    except httpx.HTTPError as e:
        raise TransportError(f"POST {url} failed: {e}") from e


async def post_async(
    server: ServerInfo,
    url: str,
    *,
    params: dict[str, str],
    headers: dict[str, str],
    content: str,
    client: httpx.AsyncClient | None = None,
) -> httpx.Response:
    """Async POST on the running event loop."""
    try:
        if client is not None:
            return await client.post(url, params=params, headers=headers, content=content.encode("utf-8"))
        async with httpx.AsyncClient(timeout=server.timeout_s, verify=server.verify) as owned:
            return await owned.post(url, params=params, headers=headers, content=content.encode("utf-8"))
    except httpx.HTTPError as e:
        raise TransportError(f"POST {url} failed: {e}") from e


async def deliver(response: httpx.Response, on_complete: ResponseCallback | None) -> None:
    """Hand *response* to a completion handler, awaiting it if it is async."""
    if on_complete is None:
        return
    result = on_complete(response)
    if inspect.isawaitable(result):
        await result


def query(server: ServerInfo, flux: str, *, client: httpx.Client | None = None) -> httpx.Response:
    """Send *flux* to the query endpoint and return the raw response."""
    log.debug("Query to %s (%d chars)", server.base_url, len(flux))
    return post(
        server,
        query_url(server),
        params={"org": server.org},
        headers={**auth_headers(server), **QUERY_HEADERS},
        content=flux,
        client=client,
    )


async def query_async(
    server: ServerInfo,
    flux: str,
    on_complete: ResponseCallback | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> httpx.Response:
    """Async ``query``; *on_complete* receives the response when it arrives."""
    log.debug("Async query to %s (%d chars)", server.base_url, len(flux))
    resp = await post_async(
        server,
        query_url(server),
        params={"org": server.org},
        headers={**auth_headers(server), **QUERY_HEADERS},
        content=flux,
        client=client,
    )
    await deliver(resp, on_complete)
    return resp
