"""
PanLoadMonitor - Loaders Package

Report output writers.
"""

from panloadmonitor.loaders.csv_loader import CSVReportWriter, read_report

__all__ = [
    "CSVReportWriter",
    "read_report"
]
