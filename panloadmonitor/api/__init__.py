"""
PanLoadMonitor - API modules

This package contains the PAN-OS XML API client.
"""

from panloadmonitor.api.panos_client import (
    PanosAPIClient,
    PanosAPIError,
    PanosConnection,
    parse_response
)

__all__ = [
    "PanosAPIClient",
    "PanosAPIError",
    "PanosConnection",
    "parse_response"
]
