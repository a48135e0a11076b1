"""
PanLoadMonitor - Report Fuser

Fuses hourly traffic totals and data-plane load into the 24 row
hourly report.
"""

from typing import Dict, List, Mapping, Tuple

from panloadmonitor.aggregators.hour_extractor import HOURS_PER_DAY
from panloadmonitor.aggregators.load_matrix import LoadMatrix, LoadMatrixError
from panloadmonitor.aggregators.traffic_aggregator import TrafficAggregator
from panloadmonitor.models.dimensions import DeviceContext
from panloadmonitor.models.facts import (
    REPORT_HEADER,
    HourlyReportRow,
    ResourceMonitorReport,
    SystemInfo,
    TimestampedSample
)


# Bytes accumulated over one hour -> reported Mbps figure
BYTES_PER_MBPS_HOUR = 360_000_000.0


class ReportFuser:
    """
    Combines traffic and load per hour of day.

    An hour without traffic (no total, or a zero total) or with zero
    mean load is emitted as a zero row.
    """

    def __init__(self, bytes_divisor: float = BYTES_PER_MBPS_HOUR):
        """
        Initialize the report fuser.

        Args:
            bytes_divisor: Divisor turning hourly bytes into Mbps
        """
        self.bytes_divisor = bytes_divisor

    def fuse(
        self,
        context: DeviceContext,
        hourly_bytes: Mapping[int, int],
        load_matrix: LoadMatrix
    ) -> List[HourlyReportRow]:
        """
        Build one row per hour, 0 to 23.

        Args:
            context: Device context selecting eligible cores
            hourly_bytes: Total bytes per hour of day
            load_matrix: Populated load matrix

        Returns:
            24 HourlyReportRow objects in hour order

        Raises:
            LoadMatrixError: If the matrix holds no eligible load data
        """
        first_core = context.first_eligible_core_index
        if not load_matrix.has_eligible_data(first_core):
            raise LoadMatrixError(
                f"Resource monitor report has no eligible cores for model {context.model}"
            )

        rows = []
        for hour in range(HOURS_PER_DAY):
            mean_load = load_matrix.mean_load_for_hour(hour, first_core)
            nbytes = hourly_bytes.get(hour)

            if mean_load == 0 or not nbytes:
                rows.append(HourlyReportRow(hour, 0.0, 0.0))
            else:
                rows.append(HourlyReportRow(hour, mean_load, nbytes / self.bytes_divisor))

        return rows

    @staticmethod
    def to_csv_rows(rows: List[HourlyReportRow]) -> List[List[str]]:
        """Header row followed by the formatted hourly rows."""
        return [list(REPORT_HEADER)] + [row.to_csv_row() for row in rows]


def build_report_rows(
    system_info: SystemInfo,
    resource_report: ResourceMonitorReport,
    traffic_report: List[TimestampedSample]
) -> Tuple[List[HourlyReportRow], Dict[str, int]]:
    """
    Fuse the three feeds of one device into hourly rows.

    Args:
        system_info: Model and clock of the device
        resource_report: Resource-monitor hourly load report
        traffic_report: Traffic samples by hour of receive time

    Returns:
        Tuple of (24 rows, parse statistics for the caller to log)

    Raises:
        LoadMatrixError: If the load report has no eligible data
    """
    context = DeviceContext.from_model(system_info.model)
    load_matrix = LoadMatrix().populate(resource_report, system_info.hour)
    aggregator = TrafficAggregator()
    hourly_bytes = aggregator.aggregate(traffic_report)

    rows = ReportFuser().fuse(context, hourly_bytes, load_matrix)
    stats = {
        "load_parse_failures": load_matrix.parse_failures,
        "traffic_parse_failures": aggregator.parse_failures,
        "traffic_dropped_samples": aggregator.dropped_samples
    }
    return rows, stats


def produce_hourly_report(
    system_info: SystemInfo,
    resource_report: ResourceMonitorReport,
    traffic_report: List[TimestampedSample]
) -> List[List[str]]:
    """
    Produce the hourly CSV report for one device.

    Args:
        system_info: Model and clock of the device
        resource_report: Resource-monitor hourly load report
        traffic_report: Traffic samples by hour of receive time

    Returns:
        Header row plus 24 rows of [hour, dpload, mbps]

    Raises:
        LoadMatrixError: If the load report has no eligible data
    """
    rows, _ = build_report_rows(system_info, resource_report, traffic_report)
    return ReportFuser.to_csv_rows(rows)
