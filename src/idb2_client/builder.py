"""Write batch builder — fluent point accumulation with a single flush.

Points are accumulated in insertion order and sent as one line-protocol
payload to ``/api/v2/write``. On success the builder is reset to a single
empty point; on a rejected write the points are kept so the caller can
retry the same batch.

Not safe for concurrent mutation; use one builder per thread/task.

Example::

    server = ServerInfo("http://localhost:8086", org="acme", bucket="metrics", token="...")
    b = Builder()
    b.meas("cpu").tag("host", "server01").field("value", 23.5).timestamp_now()
    b.new_point().meas("mem").field_uint("free", 1024).timestamp(1622547800000000000)
    b.post_http(server)
"""

from __future__ import annotations

import logging
import time

import httpx

from idb2_client.client import (
    ResponseCallback,
    auth_headers,
    deliver,
    post,
    post_async,
    write_params,
    write_url,
)
from idb2_client.config import ServerInfo
from idb2_client.errors import error_from_response, require
from idb2_client.fields import (
    DEFAULT_FLOAT_FORMAT,
    BoolField,
    FloatField,
    IntField,
    StringField,
    UIntField,
    field_value,
)
from idb2_client.protocol import UNSET_TIMESTAMP, Point, encode_points

log = logging.getLogger("idb2_client.builder")


class Builder:
    """Accumulates points and flushes them in one write request."""

    def __init__(self) -> None:
        self._points: list[Point] = [Point()]

    @property
    def _current(self) -> Point:
        return self._points[-1]

    @property
    def points(self) -> tuple[Point, ...]:
        """Pending points, excluding an untouched trailing point."""
        if self._current.is_empty:
            return tuple(self._points[:-1])
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self.points)

    # ----- point construction -----

    def meas(self, name: str) -> Builder:
        """Set the measurement of the current point (once per point)."""
        require(isinstance(name, str), "measurement is a str")
        require(not self._current.has_measurement, "measurement not already set on the current point")
        self._current.measurement = name
        return self

    def new_point(self) -> Builder:
        """Start the next point of the batch."""
        if not self._current.is_empty:
            self._points.append(Point())
        return self

    def tag(self, key: str, value: str) -> Builder:
        require(isinstance(key, str) and isinstance(value, str), "tag key and value are str")
        self._current.tags.append((key, value))
        return self

    def field(self, key: str, value: object, fmt: str | None = None) -> Builder:
        """Append a field; plain ints are written as signed integers."""
        require(isinstance(key, str), "field key is a str")
        self._current.fields.append((key, field_value(value, fmt)))
        return self

    def field_str(self, key: str, value: str) -> Builder:
        require(isinstance(key, str), "field key is a str")
        self._current.fields.append((key, StringField(value)))
        return self

    def field_uint(self, key: str, value: int) -> Builder:
        require(isinstance(key, str), "field key is a str")
        self._current.fields.append((key, UIntField(value)))
        return self

    def field_int(self, key: str, value: int) -> Builder:
        require(isinstance(key, str), "field key is a str")
        self._current.fields.append((key, IntField(value)))
        return self

    def field_float(self, key: str, value: float, fmt: str = DEFAULT_FLOAT_FORMAT) -> Builder:
        require(isinstance(key, str), "field key is a str")
        self._current.fields.append((key, FloatField(value, fmt)))
        return self

    def field_bool(self, key: str, value: bool) -> Builder:
        require(isinstance(key, str), "field key is a str")
        self._current.fields.append((key, BoolField(value)))
        return self

    def timestamp(self, unix_nanos: int) -> Builder:
        """Set (or overwrite) the current point's timestamp in nanoseconds."""
        require(0 <= unix_nanos < UNSET_TIMESTAMP, "timestamp is an unsigned 64-bit value below the unset marker")
        self._current.timestamp = unix_nanos
        return self

    def timestamp_now(self) -> Builder:
        return self.timestamp(time.time_ns())

    def reset(self) -> None:
        """Drop every pending point."""
        self._points = [Point()]

    # ----- serialization / flush -----

    def payload(self) -> str:
        """Line-protocol text for all points, in insertion order.

        A trailing point left empty by ``new_point()`` is ignored; any other
        incomplete point raises ``PreconditionError``.
        """
        return encode_points(self._batch(), stacklevel=2)

    def post_http(self, server: ServerInfo, *, client: httpx.Client | None = None) -> httpx.Response:
        """Send all points in one write request.

        Raises:
            PreconditionError: a point is incomplete; nothing is sent.
            PostError: the server rejected the write; points are kept.
            TransportError: no response was received; points are kept.
        """
        body = encode_points(self._batch(), stacklevel=2)
        log.debug("Posting %d point(s), %d bytes to %s", len(self._batch()), len(body), server.base_url)
        resp = post(
            server,
            write_url(server),
            params=write_params(server),
            headers=auth_headers(server),
            content=body,
            client=client,
        )
        self._finish(resp)
        return resp

    async def post_http_async(
        self,
        server: ServerInfo,
        on_complete: ResponseCallback | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> httpx.Response:
        """Async ``post_http``; *on_complete* receives the response when it arrives.

        The handler also sees rejected writes. An accepted batch is discarded
        even if the handler raises. Error and reset behaviour match
        ``post_http``.
        """
        body = encode_points(self._batch(), stacklevel=2)
        log.debug("Posting %d point(s), %d bytes to %s (async)", len(self._batch()), len(body), server.base_url)
        resp = await post_async(
            server,
            write_url(server),
            params=write_params(server),
            headers=auth_headers(server),
            content=body,
            client=client,
        )
        try:
            await deliver(resp, on_complete)
        finally:
            self._finish(resp)
        return resp

    # ----- internal -----

    def _batch(self) -> list[Point]:
        if len(self._points) > 1 and self._current.is_empty:
            return self._points[:-1]
        return self._points

    def _finish(self, resp: httpx.Response) -> None:
        if not resp.is_success:
            log.warning("Write rejected with HTTP %d: %s", resp.status_code, resp.text)
            raise error_from_response(resp.status_code, resp.text)
        self.reset()
