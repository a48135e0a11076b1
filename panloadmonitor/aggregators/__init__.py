"""
PanLoadMonitor - Aggregators Package

Hour-of-day alignment and fusion of the telemetry feeds.
"""

from panloadmonitor.aggregators.hour_extractor import (
    HOURS_PER_DAY,
    extract_hour,
    parse_unsigned
)
from panloadmonitor.aggregators.traffic_aggregator import (
    HourlyByteTotal,
    TrafficAggregator
)
from panloadmonitor.aggregators.load_matrix import (
    LoadMatrix,
    LoadMatrixError,
    LoadSampleCube,
    ReportShapeError,
    hour_ring_offset
)
from panloadmonitor.aggregators.report_fuser import (
    BYTES_PER_MBPS_HOUR,
    ReportFuser,
    build_report_rows,
    produce_hourly_report
)

__all__ = [
    "HOURS_PER_DAY",
    "extract_hour",
    "parse_unsigned",
    "HourlyByteTotal",
    "TrafficAggregator",
    "LoadMatrix",
    "LoadMatrixError",
    "LoadSampleCube",
    "ReportShapeError",
    "hour_ring_offset",
    "BYTES_PER_MBPS_HOUR",
    "ReportFuser",
    "build_report_rows",
    "produce_hourly_report"
]
