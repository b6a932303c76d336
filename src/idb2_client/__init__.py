"""idb2-client — line-protocol writer and Flux query client for InfluxDB v2.

Builds points with a fluent builder, serializes them into line-protocol
text and posts the batch to ``/api/v2/write`` in one request. Flux queries
are forwarded verbatim to ``/api/v2/query``.

Example usage::

    import asyncio
    from idb2_client import Builder, ServerInfo, PostError, query

    server = ServerInfo(
        "http://localhost:8086", org="acme", bucket="metrics", token="s3cr3t"
    )

    b = Builder()
    b.meas("cpu").tag("host", "server01").field("value", 23.5).timestamp_now()
    b.new_point()
    b.meas("disk").tag("path", "/var").field_uint("free", 1 << 30).timestamp_now()
    try:
        b.post_http(server)
    except PostError as e:
        print(e.status_code, e.response)

    resp = query(server, 'from(bucket: "metrics") |> range(start: -1h)')
    print(resp.text)

    async def main():
        b = Builder()
        b.meas("cpu").field_bool("up", True).timestamp_now()
        await b.post_http_async(server, on_complete=lambda r: print(r.status_code))

    asyncio.run(main())
"""

from idb2_client.builder import Builder
from idb2_client.client import QUERY_PATH, WRITE_PATH, query, query_async
from idb2_client.config import ServerInfo
from idb2_client.errors import (
    Idb2Error,
    PostError,
    PreconditionError,
    TransportError,
)
from idb2_client.fields import (
    BoolField,
    FieldValue,
    FloatField,
    IntField,
    StringField,
    UIntField,
    field_value,
)
from idb2_client.protocol import (
    UNSET_TIMESTAMP,
    Point,
    encode_point,
    encode_points,
    escape,
)

__version__ = "0.1.0"

__all__ = [
    # Protocol
    "UNSET_TIMESTAMP",
    "Point",
    "encode_point",
    "encode_points",
    "escape",
    # Field values
    "FieldValue",
    "StringField",
    "UIntField",
    "IntField",
    "FloatField",
    "BoolField",
    "field_value",
    # Errors
    "Idb2Error",
    "PostError",
    "TransportError",
    "PreconditionError",
    # Config
    "ServerInfo",
    # Builder
    "Builder",
    # Query
    "WRITE_PATH",
    "QUERY_PATH",
    "query",
    "query_async",
]
