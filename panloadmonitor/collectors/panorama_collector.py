"""
PanLoadMonitor - Panorama Collector

Lists the firewalls connected to a Panorama so each one can be polled
through the target parameter.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List

from panloadmonitor.api.panos_client import PanosAPIClient
from panloadmonitor.models.dimensions import DeviceEntry


logger = logging.getLogger(__name__)

SHOW_DEVICE_GROUPS = "<show><devicegroups></devicegroups></show>"


def parse_device_groups(response: ET.Element) -> List[DeviceEntry]:
    """
    Extract connected firewalls from a show devicegroups response.

    A firewall listed in several device groups is returned once, with
    the software version of its first listing.

    Args:
        response: Parsed <response> element

    Returns:
        Connected DeviceEntry objects in listing order
    """
    devices = {}
    for group in response.iterfind(".//devicegroups/entry"):
        for device in group.iterfind("devices/entry"):
            serial = (device.findtext("serial", default="") or "").strip()
            if not serial:
                serial = device.get("name", "")
            if not serial:
                continue

            connected = (device.findtext("connected", default="") or "").strip() != "no"
            if not connected or serial in devices:
                continue

            devices[serial] = DeviceEntry(
                serial=serial,
                connected=True,
                sw_version=(device.findtext("sw-version", default="") or "").strip()
            )

    return list(devices.values())


class PanoramaCollector:
    """Collector for the firewalls managed by a Panorama."""

    def __init__(self, api_client: PanosAPIClient):
        """
        Initialize the Panorama collector.

        Args:
            api_client: Authenticated PAN-OS API client pointed at Panorama
        """
        self.api_client = api_client

    async def get_connected_devices(self) -> List[DeviceEntry]:
        """
        Get the firewalls currently connected to Panorama.

        Returns:
            List of DeviceEntry objects
        """
        logger.info("[...] Retrieving list of connected devices")
        self.api_client.set_target(None)
        response = await self.api_client.op(SHOW_DEVICE_GROUPS)
        devices = parse_device_groups(response)
        logger.info(f"[OK] Found {len(devices)} connected devices")
        return devices
