"""
PanLoadMonitor - PAN-OS Data-Plane Load & Throughput Reporting

This package polls the PAN-OS XML API for system info, resource-monitor CPU
samples and hourly traffic volume, and fuses them into a 24 hour CSV report
of data-plane load and throughput.
"""

__version__ = "26.10.19"
__author__ = "Network Operations"
