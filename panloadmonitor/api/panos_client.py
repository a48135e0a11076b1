"""
PanLoadMonitor - PAN-OS XML API Client

This module provides asynchronous access to the PAN-OS XML management API
using aiohttp.

Split into focused classes:
- PanosConnection: Session management, rate limiting, retries and the
  response envelope check
- PanosAPIClient: Facade with keygen, operational commands and reports
"""

import asyncio
import logging
import time
import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional

import aiohttp

from panloadmonitor.utils.config import OperationalConfig, PanosConfig


logger = logging.getLogger(__name__)


class PanosAPIError(Exception):
    """
    Exception raised when the device answers with an error envelope
    or a body that is not XML.
    """
    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


def parse_response(text: str) -> ET.Element:
    """
    Parse an XML API response and check its status.

    Args:
        text: Response body

    Returns:
        The root element (<response> or <report>)

    Raises:
        PanosAPIError: If the body is not XML or status is not success
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as error:
        raise PanosAPIError(f"Malformed XML response: {error}") from error

    # Synchronous reports come back as a bare <report> element
    status = root.get("status")
    if status == "success" or (root.tag != "response" and status is None):
        return root

    messages = [
        " ".join(node.itertext()).strip()
        for node in root.iter("msg")
    ]
    message = "; ".join(m for m in messages if m) or f"API returned status {status!r}"
    raise PanosAPIError(message, code=root.get("code"))


class PanosConnection:
    """
    Manages the aiohttp session towards one PAN-OS device or Panorama.

    Responsibilities:
    - Initialize and maintain aiohttp ClientSession
    - Apply rate limiting between requests using asyncio.sleep
    - Execute API calls with async retry logic
    - Route calls to a managed firewall through Panorama (target)
    """

    def __init__(self, panos_config: PanosConfig, operational_config: OperationalConfig):
        """
        Initialize the PAN-OS connection manager.

        Args:
            panos_config: Device host and credentials
            operational_config: Operational settings (rate limits, retries)
        """
        self.config = panos_config
        self.ops_config = operational_config
        self.session: Optional[aiohttp.ClientSession] = None
        self.api_key: Optional[str] = panos_config.api_key
        self.target: Optional[str] = None
        self._last_request_time = 0.0

        host = panos_config.host or ""
        if not host.startswith("http"):
            host = f"https://{host}"
        self.base_url = host.rstrip("/")
        self.api_url = f"{self.base_url}/api/"

        logger.info(f"[INFO] PAN-OS API connection configured for {self.base_url}")

    @property
    def headers(self) -> Dict[str, str]:
        """Request headers, including the API key once known."""
        headers = {"Accept": "application/xml"}
        if self.api_key:
            headers["X-PAN-KEY"] = self.api_key
        return headers

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session exists, creating if needed."""
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.ops_config.request_timeout, connect=10)
            connector = aiohttp.TCPConnector(ssl=None if self.config.verify_ssl else False)
            self.session = aiohttp.ClientSession(timeout=timeout, connector=connector)
            logger.debug("Created new aiohttp session")
        return self.session

    async def apply_rate_limit_async(self) -> None:
        """Apply rate limiting between API requests using async sleep."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self.ops_config.rate_limit_delay:
            await asyncio.sleep(self.ops_config.rate_limit_delay - elapsed)
        self._last_request_time = time.time()

    async def execute_async(self, operation: str, params: Dict[str, Any]) -> ET.Element:
        """
        Execute an XML API request with retry logic.

        Args:
            operation: Description of the operation (for logging)
            params: Form parameters (type, cmd, ...)

        Returns:
            Parsed <response> element

        Raises:
            PanosAPIError: If the device reports an error (not retried)
            aiohttp.ClientError: On HTTP errors after retries
        """
        session = await self._ensure_session()
        data = dict(params)
        if self.target and data.get("type") != "keygen":
            data["target"] = self.target

        last_error: Optional[Exception] = None

        for attempt in range(1, self.ops_config.max_retries + 1):
            try:
                await self.apply_rate_limit_async()
                logger.debug(f"{operation}: POST {self.api_url} type={data.get('type')}")

                async with session.post(self.api_url, data=data, headers=self.headers) as response:
                    text = await response.text()
                    if response.status >= 400 and not text.lstrip().startswith("<"):
                        response.raise_for_status()
                    return parse_response(text)

            except PanosAPIError:
                raise  # Device rejected the request, retrying will not help
            except Exception as error:
                last_error = error
                logger.warning(
                    f"[WARN] {operation} failed (attempt {attempt}/{self.ops_config.max_retries}): {error}"
                )
                if attempt < self.ops_config.max_retries:
                    await asyncio.sleep(self.ops_config.retry_delay * attempt)

        logger.error(f"[ERROR] {operation} failed after {self.ops_config.max_retries} attempts")
        if last_error is not None:
            raise last_error
        raise RuntimeError(f"{operation} failed with unknown error")

    async def close(self) -> None:
        """Close the aiohttp session and clean up resources."""
        if self.session and not self.session.closed:
            await self.session.close()
            logger.debug("Closed aiohttp session")
        self.session = None


class PanosAPIClient:
    """
    Async facade over the PAN-OS XML API calls the monitor needs.

    Usage:
        async with PanosAPIClient(panos_config, ops_config) as client:
            await client.authenticate()
            response = await client.op("<show><system><info></info></system></show>")
    """

    def __init__(self, panos_config: PanosConfig, operational_config: OperationalConfig):
        """
        Initialize the API client.

        Args:
            panos_config: Device host and credentials
            operational_config: Operational settings
        """
        self.config = panos_config
        self.ops_config = operational_config
        self.connection = PanosConnection(panos_config, operational_config)

    async def __aenter__(self) -> "PanosAPIClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit with cleanup."""
        await self.close()

    async def authenticate(self) -> None:
        """
        Make sure an API key is available, generating one if needed.

        Raises:
            PanosAPIError: If key generation is rejected
        """
        if self.connection.api_key:
            logger.debug("Using configured API key")
            return
        await self.keygen(self.config.username or "", self.config.password or "")

    async def keygen(self, username: str, password: str) -> str:
        """
        Generate an API key from username and password.

        Args:
            username: Administrator user name
            password: Administrator password

        Returns:
            The generated API key

        Raises:
            PanosAPIError: If the response carries no key
        """
        logger.info(f"[...] Generating API key for user {username}")
        response = await self.connection.execute_async(
            "Generate API key",
            {"type": "keygen", "user": username, "password": password}
        )
        key = response.findtext("./result/key")
        if not key:
            raise PanosAPIError("Key generation response carries no key")

        self.connection.api_key = key
        logger.info("[OK] API key generated")
        return key

    async def op(self, cmd: str) -> ET.Element:
        """
        Run an operational command.

        Args:
            cmd: XML command, e.g. <show><system><info></info></system></show>

        Returns:
            Parsed <response> element
        """
        return await self.connection.execute_async(
            f"Operational command {cmd[:40]}",
            {"type": "op", "cmd": cmd}
        )

    async def report(self, cmd: str, report_name: str = "", report_type: str = "dynamic") -> ET.Element:
        """
        Run a report.

        Args:
            cmd: Ad-hoc report definition
            report_name: Report name (empty for ad-hoc reports)
            report_type: PAN-OS report type

        Returns:
            Parsed <response> element
        """
        params = {"type": "report", "reporttype": report_type, "cmd": cmd}
        if report_name:
            params["reportname"] = report_name
        return await self.connection.execute_async(f"Report {report_type}", params)

    def set_target(self, serial: Optional[str]) -> None:
        """
        Route subsequent calls to a firewall managed by Panorama.

        Args:
            serial: Firewall serial number, or None/"" for Panorama itself
        """
        self.connection.target = serial or None
        if serial:
            logger.debug(f"Target set to device {serial}")

    async def close(self) -> None:
        """Close all connections and clean up resources."""
        await self.connection.close()
        logger.debug("PanosAPIClient closed")
