"""
PanLoadMonitor - Data Models Package

Dataclass models for devices, telemetry feeds and report rows.
"""

from panloadmonitor.models.dimensions import (
    DeviceContext,
    DeviceEntry,
    MANAGEMENT_CORE_MODELS
)
from panloadmonitor.models.facts import (
    ParsedValue,
    TimestampedSample,
    SystemInfo,
    ResourceMonitorReport,
    HourlyReportRow,
    REPORT_HEADER
)

__all__ = [
    "DeviceContext",
    "DeviceEntry",
    "MANAGEMENT_CORE_MODELS",
    "ParsedValue",
    "TimestampedSample",
    "SystemInfo",
    "ResourceMonitorReport",
    "HourlyReportRow",
    "REPORT_HEADER"
]
