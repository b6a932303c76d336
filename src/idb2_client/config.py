"""Server connection settings."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

WRITE_PRECISIONS = ("ns", "us", "ms", "s")


@dataclass(slots=True)
class ServerInfo:
    """Where and as whom points are written and queries are sent."""

    url: str = "http://127.0.0.1:8086"
    org: str = ""
    bucket: str = ""
    token: str = ""
    port: int | None = None
    precision: str | None = None
    timeout_s: float = 10.0
    verify: bool = True

    def __post_init__(self) -> None:
        if self.precision is not None and self.precision not in WRITE_PRECISIONS:
            raise ValueError(f"precision must be one of {WRITE_PRECISIONS}, got {self.precision!r}")

    @property
    def base_url(self) -> str:
        """``url`` without a trailing slash, with ``port`` applied if set."""
        url = self.url.rstrip("/")
        if self.port is None:
            return url
        parts = urlsplit(url)
        host = parts.hostname or ""
        if ":" in host:
            host = f"[{host}]"
        netloc = f"{host}:{self.port}"
        if parts.username:
            userinfo = parts.username
            if parts.password:
                userinfo += f":{parts.password}"
            netloc = f"{userinfo}@{netloc}"
        return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))

    def with_url(self, url: str) -> ServerInfo:
        self.url = url
        return self

    def with_port(self, port: int) -> ServerInfo:
        self.port = port
        return self

    def with_org(self, org: str) -> ServerInfo:
        self.org = org
        return self

    def with_bucket(self, bucket: str) -> ServerInfo:
        self.bucket = bucket
        return self

    def with_token(self, token: str) -> ServerInfo:
        self.token = token
        return self

    def with_precision(self, precision: str | None) -> ServerInfo:
        if precision is not None and precision not in WRITE_PRECISIONS:
            raise ValueError(f"precision must be one of {WRITE_PRECISIONS}, got {precision!r}")
        self.precision = precision
        return self

    def with_timeout(self, timeout_s: float) -> ServerInfo:
        self.timeout_s = timeout_s
        return self

    def with_verify(self, verify: bool) -> ServerInfo:
        self.verify = verify
        return self
