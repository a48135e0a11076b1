"""
PanLoadMonitor - Fact Models

Data models for the three telemetry feeds and the fused hourly report.
Grain: Device x Hour-of-day
"""

from dataclasses import dataclass, field
from typing import List


REPORT_HEADER = ["hour", "dpload", "mbps"]


@dataclass(frozen=True)
class ParsedValue:
    """
    Outcome of a lenient numeric parse.

    The value defaults to zero on failure; ok tells the caller whether
    the raw text was well formed so it can decide to log or ignore.
    """
    value: int
    ok: bool = True


@dataclass(frozen=True)
class TimestampedSample:
    """One traffic report entry as delivered on the wire."""
    raw_timestamp: str
    value: str


@dataclass
class SystemInfo:
    """
    System identity and clock of a polled device.

    hour is the hour-of-day read from the device clock and anchors the
    resource-monitor samples.
    """
    model: str
    time: str
    hour: int = 0


@dataclass
class ResourceMonitorReport:
    """
    Per-data-plane, per-core hourly load report.

    planes[p][c] is the comma separated sample list of core c on data
    plane p, most recent hour first.
    """
    planes: List[List[str]] = field(default_factory=list)

    @property
    def data_plane_count(self) -> int:
        """Number of data planes in the report."""
        return len(self.planes)


@dataclass(frozen=True)
class HourlyReportRow:
    """
    Fused output row for one hour of the day.

    Primary Key: hour
    """
    hour: int
    mean_load: float
    megabits_per_second: float

    def to_csv_row(self) -> List[str]:
        """Render as CSV cells with two decimal places."""
        return [
            str(self.hour),
            f"{self.mean_load:.2f}",
            f"{self.megabits_per_second:.2f}"
        ]

    @property
    def is_empty(self) -> bool:
        """True for zero-filled rows."""
        return self.mean_load == 0 and self.megabits_per_second == 0
