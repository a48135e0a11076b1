"""
PanLoadMonitor - Device Collector

Collects the three telemetry feeds from one PAN-OS firewall and fuses them
into the hourly report.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List

from panloadmonitor.aggregators.hour_extractor import extract_hour
from panloadmonitor.aggregators.report_fuser import ReportFuser, build_report_rows
from panloadmonitor.api.panos_client import PanosAPIClient
from panloadmonitor.models.facts import (
    ResourceMonitorReport,
    SystemInfo,
    TimestampedSample
)


logger = logging.getLogger(__name__)

SHOW_SYSTEM_INFO = "<show><system><info></info></system></show>"
SHOW_RESOURCE_MONITOR_HOUR = "<show><running><resource-monitor><hour></hour></resource-monitor></running></show>"
TRAFFIC_BY_HOUR_REPORT = (
    "<type><appstat>"
    "<aggregate-by><member>hour-of-receive_time</member></aggregate-by>"
    "<values><member>nbytes</member></values>"
    "</appstat></type>"
    "<period>last-24-hrs</period><topn>25</topn><topm>10</topm>"
)


def parse_system_info(response: ET.Element) -> SystemInfo:
    """
    Build SystemInfo from a show system info response.

    Args:
        response: Parsed <response> element

    Returns:
        SystemInfo with the hour taken from the device clock
    """
    model = response.findtext(".//system/model", default="") or ""
    device_time = response.findtext(".//system/time", default="") or ""

    hour = extract_hour(device_time)
    if not hour.ok:
        logger.warning(f"[WARN] Could not read hour from device time {device_time!r}, using 0")

    return SystemInfo(model=model.strip(), time=device_time, hour=hour.value if hour.ok else 0)


def parse_resource_monitor(response: ET.Element) -> ResourceMonitorReport:
    """
    Build ResourceMonitorReport from a resource-monitor hour response.

    Every child of <data-processors> (dp0, dp1, ...) is one data plane.

    Args:
        response: Parsed <response> element

    Returns:
        ResourceMonitorReport, empty when no data processors are listed
    """
    data_processors = response.find(".//data-processors")
    if data_processors is None:
        logger.warning("[WARN] Resource monitor response lists no data processors")
        return ResourceMonitorReport()

    planes = []
    for data_plane in data_processors:
        cores = [
            (entry.findtext("value", default="") or "").strip()
            for entry in data_plane.findall("hour/cpu-load-average/entry")
        ]
        planes.append(cores)

    return ResourceMonitorReport(planes=planes)


def parse_traffic_report(response: ET.Element) -> List[TimestampedSample]:
    """
    Build traffic samples from a bytes-by-hour report.

    Args:
        response: Parsed <report> or <response> element

    Returns:
        List of TimestampedSample in report order
    """
    samples = []
    for entry in response.iter("entry"):
        raw_time = entry.findtext("hour-of-receive_time")
        if raw_time is None:
            continue
        samples.append(TimestampedSample(
            raw_timestamp=raw_time.strip(),
            value=(entry.findtext("nbytes", default="") or "").strip()
        ))
    return samples


class DeviceCollector:
    """
    Collector for the hourly load and throughput report of one firewall.

    Feeds collected, in order:
    - show system info: model and clock
    - resource monitor: hourly per-core data-plane load
    - traffic report: bytes by hour of receive time, last 24 hours
    """

    def __init__(self, api_client: PanosAPIClient):
        """
        Initialize the device collector.

        Args:
            api_client: Authenticated PAN-OS API client
        """
        self.api_client = api_client
        logger.debug("DeviceCollector initialized")

    async def collect_system_info(self) -> SystemInfo:
        """Fetch model and clock."""
        response = await self.api_client.op(SHOW_SYSTEM_INFO)
        system_info = parse_system_info(response)
        logger.debug(f"Model {system_info.model}, device time {system_info.time!r}")
        return system_info

    async def collect_resource_monitor(self) -> ResourceMonitorReport:
        """Fetch the hourly resource-monitor report."""
        response = await self.api_client.op(SHOW_RESOURCE_MONITOR_HOUR)
        report = parse_resource_monitor(response)
        logger.debug(f"Resource monitor lists {report.data_plane_count} data planes")
        return report

    async def collect_traffic_report(self) -> List[TimestampedSample]:
        """Fetch bytes by hour of receive time for the last 24 hours."""
        response = await self.api_client.report(TRAFFIC_BY_HOUR_REPORT)
        samples = parse_traffic_report(response)
        logger.debug(f"Traffic report returned {len(samples)} entries")
        return samples

    async def collect_hourly_report(self) -> List[List[str]]:
        """
        Collect all feeds and fuse them.

        Returns:
            Header row plus 24 rows of [hour, dpload, mbps]

        Raises:
            LoadMatrixError: If the resource monitor has no eligible data
            PanosAPIError: If the device rejects a request
        """
        logger.info("[...] Collecting system info")
        system_info = await self.collect_system_info()

        logger.info("[...] Collecting resource monitor data")
        resource_report = await self.collect_resource_monitor()

        logger.info("[...] Collecting traffic report")
        traffic_report = await self.collect_traffic_report()

        rows, stats = build_report_rows(system_info, resource_report, traffic_report)

        for name, count in stats.items():
            if count:
                logger.warning(f"[WARN] {count} {name.replace('_', ' ')} coerced to zero or dropped")

        active_hours = sum(1 for row in rows if not row.is_empty)
        logger.info(f"[OK] Hourly report for {system_info.model}: {active_hours}/24 hours with data")
        return ReportFuser.to_csv_rows(rows)
