"""
PanLoadMonitor - Data Collectors Package

Collectors for gathering telemetry from PAN-OS devices and Panorama.
"""

from panloadmonitor.collectors.device_collector import (
    DeviceCollector,
    parse_resource_monitor,
    parse_system_info,
    parse_traffic_report
)
from panloadmonitor.collectors.panorama_collector import (
    PanoramaCollector,
    parse_device_groups
)

__all__ = [
    "DeviceCollector",
    "parse_resource_monitor",
    "parse_system_info",
    "parse_traffic_report",
    "PanoramaCollector",
    "parse_device_groups"
]
