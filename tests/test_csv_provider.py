"""Tests for the CSV source provider."""

import httpx
import pytest

from airdrop_analytics.core.exceptions import SourceUnavailableError
from airdrop_analytics.core.types import DataSource
from airdrop_analytics.providers.csv_source import AirdropCSVProvider, is_remote

URL = "https://example.com/airdrop.csv"


class TestIsRemote:
    def test_urls(self):
        assert is_remote("https://example.com/a.csv")
        assert is_remote("http://localhost:8000/a.csv")
        assert not is_remote("data/airdrop.csv")
        assert not is_remote("/tmp/https.csv")


class TestRemoteFetch:
    """Tests for fetching over HTTP."""

    def test_success(self, csv_transport, scenario_csv):
        """Test that a 200 response body is returned as text."""
        provider = AirdropCSVProvider(source_url=URL, transport=csv_transport(scenario_csv))

        assert provider.fetch_text() == scenario_csv

        trail = provider.get_audit_trail()
        assert len(trail) == 1
        assert trail[0].source == DataSource.REMOTE_CSV
        assert trail[0].action == "fetch"
        assert trail[0].success
        assert trail[0].endpoint == URL

    def test_explicit_source_overrides_default(self, csv_transport, scenario_csv):
        """Test fetching a URL other than the configured one."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, content=scenario_csv.encode())

        provider = AirdropCSVProvider(source_url=URL, transport=httpx.MockTransport(handler))
        provider.fetch_text("https://mirror.example.org/other.csv")

        assert seen == ["https://mirror.example.org/other.csv"]

    def test_utf8_bom_stripped(self, csv_transport):
        """Test that a leading byte order mark does not reach the parser."""
        provider = AirdropCSVProvider(
            source_url=URL,
            transport=csv_transport(b"\xef\xbb\xbfaddress,amount\n0xa,1\n"),
        )

        assert provider.fetch_text().startswith("address,amount")

    @pytest.mark.parametrize("status_code", [404, 500, 503])
    def test_error_status(self, csv_transport, status_code):
        """Test that an error status is terminal."""
        provider = AirdropCSVProvider(source_url=URL, transport=csv_transport("nope", status_code))

        with pytest.raises(SourceUnavailableError) as exc_info:
            provider.fetch_text()

        assert exc_info.value.status_code == status_code
        assert exc_info.value.endpoint == URL
        assert f"HTTP {status_code}" in str(exc_info.value)
        assert not provider.get_audit_trail()[-1].success

    def test_single_attempt(self):
        """Test that a failure is not retried."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        provider = AirdropCSVProvider(source_url=URL, transport=httpx.MockTransport(handler))

        with pytest.raises(SourceUnavailableError):
            provider.fetch_text()
        assert len(calls) == 1

    def test_network_error(self):
        """Test that transport errors become SourceUnavailableError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = AirdropCSVProvider(source_url=URL, transport=httpx.MockTransport(handler))

        with pytest.raises(SourceUnavailableError, match="connection refused"):
            provider.fetch_text()
        assert provider.get_audit_trail()[-1].error_message == "connection refused"

    def test_timeout(self):
        """Test that a timeout is reported, not retried."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        provider = AirdropCSVProvider(source_url=URL, transport=httpx.MockTransport(handler))

        with pytest.raises(SourceUnavailableError):
            provider.fetch_text()

    def test_non_utf8_body(self, csv_transport):
        """Test that undecodable bytes are treated as unavailable."""
        provider = AirdropCSVProvider(source_url=URL, transport=csv_transport(b"\xff\xfe\x00"))

        with pytest.raises(SourceUnavailableError, match="not UTF-8"):
            provider.fetch_text()
        assert not provider.get_audit_trail()[-1].success

    def test_is_available(self, csv_transport):
        assert AirdropCSVProvider(source_url=URL, transport=csv_transport("")).is_available()
        assert not AirdropCSVProvider(source_url=URL, transport=csv_transport("", 404)).is_available()


class TestLocalFile:
    """Tests for reading from disk."""

    def test_read_file(self, scenario_file, scenario_csv):
        """Test that a local path is read directly."""
        provider = AirdropCSVProvider()

        assert provider.fetch_text(scenario_file) == scenario_csv

        entry = provider.get_audit_trail()[-1]
        assert entry.source == DataSource.LOCAL_FILE
        assert entry.action == "read"
        assert entry.success

    def test_missing_file(self, tmp_path):
        """Test that a missing file is unavailable."""
        provider = AirdropCSVProvider()

        with pytest.raises(SourceUnavailableError) as exc_info:
            provider.fetch_text(tmp_path / "missing.csv")

        assert exc_info.value.source == DataSource.LOCAL_FILE.value
        assert not provider.get_audit_trail()[-1].success

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes("address,amount\n0xé,1\n".encode("latin-1"))

        with pytest.raises(SourceUnavailableError):
            AirdropCSVProvider().fetch_text(path)

    def test_is_available(self, scenario_file, tmp_path):
        assert AirdropCSVProvider(source_url=str(scenario_file)).is_available()
        assert not AirdropCSVProvider(source_url=str(tmp_path / "missing.csv")).is_available()

    def test_clear_audit_trail(self, scenario_file):
        provider = AirdropCSVProvider()
        provider.fetch_text(scenario_file)
        provider.clear_audit_trail()

        assert provider.get_audit_trail() == []
