"""
PanLoadMonitor - CSV Loader

Writes hourly reports as comma separated files, one per device and day.
"""

import csv
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence


logger = logging.getLogger(__name__)


class CSVReportWriter:
    """
    Writes report rows under an output directory.

    File names:
    - YYYYMMDD.csv for a single firewall
    - YYYYMMDD_<serial>.csv for firewalls polled through Panorama
    """

    def __init__(self, output_dir: Path):
        """
        Initialize the writer.

        Args:
            output_dir: Existing directory receiving the reports
        """
        self.output_dir = Path(output_dir)

    @staticmethod
    def file_prefix(day: date) -> str:
        """Date prefix shared by all reports of one cycle."""
        return day.strftime("%Y%m%d")

    def build_file_name(self, day: date, serial: Optional[str] = None) -> Path:
        """
        Build the report path for a day and optional device serial.

        Args:
            day: Day of the collection cycle
            serial: Firewall serial when polled through Panorama

        Returns:
            Path of the CSV file
        """
        prefix = self.file_prefix(day)
        name = f"{prefix}_{serial}.csv" if serial else f"{prefix}.csv"
        return self.output_dir / name

    def write(self, rows: Sequence[Sequence[str]], file_name: Path) -> Path:
        """
        Write rows to a CSV file, replacing any previous content.

        Args:
            rows: Header and data rows
            file_name: Target path

        Returns:
            The written path

        Raises:
            OSError: If the file cannot be written
        """
        with open(file_name, "w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerows(rows)

        logger.info(f"[OK] Saved {file_name} ({len(rows)} rows)")
        return file_name


def read_report(file_name: Path) -> List[List[str]]:
    """Read back a report written by CSVReportWriter."""
    with open(file_name, newline="", encoding="utf-8") as handle:
        return [row for row in csv.reader(handle)]
