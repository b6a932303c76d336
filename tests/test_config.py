"""Tests for ServerInfo defaults, builder methods, and URL handling."""

import pytest

from idb2_client.config import ServerInfo


class TestServerInfo:
    """Test ServerInfo defaults and builder methods."""

    def test_defaults(self):
        cfg = ServerInfo()
        assert cfg.url == "http://127.0.0.1:8086"
        assert cfg.port is None
        assert cfg.precision is None
        assert cfg.timeout_s == 10.0
        assert cfg.verify is True

    def test_positional(self):
        cfg = ServerInfo("http://db:8086", "acme", "metrics", "tok")
        assert cfg.org == "acme"
        assert cfg.bucket == "metrics"
        assert cfg.token == "tok"

    def test_builder_chain(self):
        cfg = (
            ServerInfo()
            .with_url("https://db.example.com")
            .with_org("acme")
            .with_bucket("metrics")
            .with_token("tok")
            .with_precision("ms")
            .with_timeout(2.5)
            .with_verify(False)
        )
        assert cfg.url == "https://db.example.com"
        assert cfg.org == "acme"
        assert cfg.bucket == "metrics"
        assert cfg.token == "tok"
        assert cfg.precision == "ms"
        assert cfg.timeout_s == 2.5
        assert cfg.verify is False

    def test_invalid_precision(self):
        with pytest.raises(ValueError):
            ServerInfo(precision="h")
        with pytest.raises(ValueError):
            ServerInfo().with_precision("minutes")


class TestBaseUrl:
    """Test base_url normalisation and port override."""

    def test_trailing_slash_stripped(self):
        assert ServerInfo("http://db:8086/").base_url == "http://db:8086"

    def test_port_override(self):
        cfg = ServerInfo("http://db:8086").with_port(9999)
        assert cfg.base_url == "http://db:9999"

    def test_port_added(self):
        assert ServerInfo("http://db", port=8086).base_url == "http://db:8086"

    def test_port_keeps_path(self):
        cfg = ServerInfo("https://proxy.local/influx/", port=443)
        assert cfg.base_url == "https://proxy.local:443/influx"

    def test_port_keeps_userinfo(self):
        cfg = ServerInfo("http://u:p@db:1", port=2)
        assert cfg.base_url == "http://u:p@db:2"

    def test_ipv6_host(self):
        cfg = ServerInfo("http://[::1]:8086", port=9000)
        assert cfg.base_url == "http://[::1]:9000"
