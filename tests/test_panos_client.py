"""
Tests for PanosAPIClient

Tests the async PAN-OS XML API client implementation with aiohttp.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import xml.etree.ElementTree as ET

from panloadmonitor.api.panos_client import (
    PanosAPIClient,
    PanosAPIError,
    PanosConnection,
    parse_response
)
from panloadmonitor.utils.config import OperationalConfig, PanosConfig


class FakeResponse:
    """Minimal stand-in for an aiohttp response context manager."""

    def __init__(self, text: str, status: int = 200):
        self._text = text
        self.status = status

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def text(self):
        return self._text

    def raise_for_status(self):
        raise RuntimeError(f"HTTP {self.status}")


class FakeSession:
    """Records posted forms and replays canned responses."""

    def __init__(self, *responses: FakeResponse):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def post(self, url, data=None, headers=None):
        self.calls.append({"url": url, "data": data, "headers": headers})
        return self.responses.pop(0)

    async def close(self):
        self.closed = True


@pytest.fixture
def panos_config():
    """Create a test PAN-OS config."""
    return PanosConfig(host="fw1.example.com", api_key="test_key")


@pytest.fixture
def ops_config():
    """Create a test operational config."""
    return OperationalConfig(
        rate_limit_delay=0.0,
        max_retries=2,
        retry_delay=0.0
    )


class TestParseResponse:
    """Tests for the response envelope check."""

    def test_success(self):
        """Test a success envelope is returned."""
        root = parse_response('<response status="success"><result>ok</result></response>')
        assert root.findtext("result") == "ok"

    def test_bare_report(self):
        """Test a synchronous report body is accepted."""
        root = parse_response("<report><result/></report>")
        assert root.tag == "report"

    def test_error_message(self):
        """Test error envelopes raise with the device message."""
        body = '<response status="error" code="403"><result><msg>Invalid credentials.</msg></result></response>'
        with pytest.raises(PanosAPIError) as excinfo:
            parse_response(body)
        assert "Invalid credentials." in str(excinfo.value)
        assert excinfo.value.code == "403"

    def test_malformed_xml(self):
        """Test a non XML body raises."""
        with pytest.raises(PanosAPIError):
            parse_response("<html>oops")


class TestPanosConnection:
    """Tests for PanosConnection class."""

    @pytest.fixture
    def connection(self, panos_config, ops_config):
        """Create a test connection."""
        return PanosConnection(panos_config, ops_config)

    def test_init_builds_api_url(self, connection):
        """Test that API URL is correctly constructed."""
        assert connection.api_url == "https://fw1.example.com/api/"

    def test_init_with_scheme(self, ops_config):
        """Test that an explicit scheme is preserved."""
        config = PanosConfig(host="http://10.0.0.1/", api_key="k")
        assert PanosConnection(config, ops_config).api_url == "http://10.0.0.1/api/"

    def test_headers_carry_key(self, connection):
        """Test the API key travels in the X-PAN-KEY header."""
        assert connection.headers["X-PAN-KEY"] == "test_key"

    def test_headers_without_key(self, ops_config):
        """Test no key header before keygen."""
        conn = PanosConnection(PanosConfig(host="fw1", username="admin", password="x"), ops_config)
        assert "X-PAN-KEY" not in conn.headers

    @pytest.mark.asyncio
    async def test_target_added_to_requests(self, connection):
        """Test the Panorama target is sent with op calls."""
        session = FakeSession(FakeResponse('<response status="success"/>'))
        connection.session = session
        connection.target = "0001"

        await connection.execute_async("op", {"type": "op", "cmd": "<show/>"})

        assert session.calls[0]["data"]["target"] == "0001"
        assert session.calls[0]["url"] == "https://fw1.example.com/api/"

    @pytest.mark.asyncio
    async def test_api_error_not_retried(self, connection):
        """Test device errors propagate immediately."""
        session = FakeSession(
            FakeResponse('<response status="error"><msg>bad command</msg></response>'),
            FakeResponse('<response status="success"/>')
        )
        connection.session = session

        with pytest.raises(PanosAPIError):
            await connection.execute_async("op", {"type": "op", "cmd": "<bad/>"})
        assert len(session.calls) == 1

    @pytest.mark.asyncio
    async def test_transport_error_retried(self, connection):
        """Test HTTP failures are retried up to max_retries."""
        session = FakeSession(
            FakeResponse("Service Unavailable", status=503),
            FakeResponse('<response status="success"><result>ok</result></response>')
        )
        connection.session = session

        root = await connection.execute_async("op", {"type": "op", "cmd": "<show/>"})

        assert root.findtext("result") == "ok"
        assert len(session.calls) == 2

    @pytest.mark.asyncio
    async def test_close_handles_no_session(self, connection):
        """Test that close() handles no session gracefully."""
        connection.session = None
        await connection.close()  # Should not raise


class TestPanosAPIClient:
    """Tests for PanosAPIClient facade."""

    @pytest.mark.asyncio
    async def test_keygen_stores_key(self, ops_config):
        """Test a generated key is used for later calls."""
        client = PanosAPIClient(PanosConfig(host="fw1", username="admin", password="pw"), ops_config)
        response = ET.fromstring('<response status="success"><result><key>ABC123</key></result></response>')

        with patch.object(client.connection, "execute_async", new_callable=AsyncMock) as mock_exec:
            mock_exec.return_value = response
            await client.authenticate()

            params = mock_exec.call_args[0][1]
            assert params == {"type": "keygen", "user": "admin", "password": "pw"}

        assert client.connection.api_key == "ABC123"
        assert client.connection.headers["X-PAN-KEY"] == "ABC123"

    @pytest.mark.asyncio
    async def test_authenticate_skips_keygen_with_key(self, panos_config, ops_config):
        """Test a configured key avoids keygen."""
        client = PanosAPIClient(panos_config, ops_config)
        with patch.object(client.connection, "execute_async", new_callable=AsyncMock) as mock_exec:
            await client.authenticate()
            mock_exec.assert_not_called()

    @pytest.mark.asyncio
    async def test_keygen_without_key_raises(self, ops_config):
        """Test a response lacking a key raises."""
        client = PanosAPIClient(PanosConfig(host="fw1", username="a", password="b"), ops_config)
        with patch.object(client.connection, "execute_async", new_callable=AsyncMock) as mock_exec:
            mock_exec.return_value = ET.fromstring('<response status="success"><result/></response>')
            with pytest.raises(PanosAPIError):
                await client.keygen("a", "b")

    @pytest.mark.asyncio
    async def test_op_and_report_params(self, panos_config, ops_config):
        """Test op and report build the right request types."""
        client = PanosAPIClient(panos_config, ops_config)
        with patch.object(client.connection, "execute_async", new_callable=AsyncMock) as mock_exec:
            await client.op("<show><system><info></info></system></show>")
            assert mock_exec.call_args[0][1] == {
                "type": "op",
                "cmd": "<show><system><info></info></system></show>"
            }

            await client.report("<type/>")
            assert mock_exec.call_args[0][1] == {
                "type": "report",
                "reporttype": "dynamic",
                "cmd": "<type/>"
            }

    def test_set_target(self, panos_config, ops_config):
        """Test target is set and cleared."""
        client = PanosAPIClient(panos_config, ops_config)
        client.set_target("0001")
        assert client.connection.target == "0001"
        client.set_target("")
        assert client.connection.target is None

    @pytest.mark.asyncio
    async def test_context_manager(self, panos_config, ops_config):
        """Test async context manager closes the session."""
        async with PanosAPIClient(panos_config, ops_config) as client:
            client.connection.session = MagicMock(closed=False, close=AsyncMock())

        assert client.connection.session is None
