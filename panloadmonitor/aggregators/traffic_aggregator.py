"""
PanLoadMonitor - Traffic Aggregator

Rolls traffic report samples up to total bytes per hour of day.
"""

from typing import Dict, Iterable

from panloadmonitor.aggregators.hour_extractor import (
    HOURS_PER_DAY,
    extract_hour,
    parse_unsigned
)
from panloadmonitor.models.facts import TimestampedSample


HourlyByteTotal = Dict[int, int]


class TrafficAggregator:
    """
    Aggregator for hour-of-receive-time traffic samples.

    Duplicate hours are merged by summation, so the result does not
    depend on sample order.
    """

    def __init__(self):
        """Initialize the traffic aggregator."""
        self.parse_failures = 0
        self.dropped_samples = 0

    def aggregate(self, samples: Iterable[TimestampedSample]) -> HourlyByteTotal:
        """
        Sum bytes per hour of day.

        Malformed timestamps count towards hour 0 and malformed byte
        values count as 0 bytes. Samples whose hour lies outside the day
        are dropped.

        Args:
            samples: Traffic report samples

        Returns:
            Fresh mapping of hour -> total bytes
        """
        self.parse_failures = 0
        self.dropped_samples = 0
        totals: HourlyByteTotal = {}

        for sample in samples:
            hour = extract_hour(sample.raw_timestamp)
            nbytes = parse_unsigned(sample.value, bits=64)

            if not hour.ok:
                self.parse_failures += 1
                if hour.value >= HOURS_PER_DAY:
                    self.dropped_samples += 1
                    continue
            if not nbytes.ok:
                self.parse_failures += 1

            totals[hour.value] = totals.get(hour.value, 0) + nbytes.value

        return totals

    @staticmethod
    def merge(*totals: HourlyByteTotal) -> HourlyByteTotal:
        """
        Merge several hourly totals by summing matching hours.

        Args:
            *totals: Hourly totals to merge

        Returns:
            New merged mapping
        """
        merged: HourlyByteTotal = {}
        for total in totals:
            for hour, nbytes in total.items():
                merged[hour] = merged.get(hour, 0) + nbytes
        return merged
