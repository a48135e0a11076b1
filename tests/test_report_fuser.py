"""
PanLoadMonitor - Report Fuser Tests

Unit tests for fusing traffic and load into the hourly report.
"""

import unittest

from panloadmonitor.aggregators.load_matrix import LoadMatrix, LoadMatrixError
from panloadmonitor.aggregators.report_fuser import (
    BYTES_PER_MBPS_HOUR,
    ReportFuser,
    build_report_rows,
    produce_hourly_report
)
from panloadmonitor.models.dimensions import DeviceContext
from panloadmonitor.models.facts import (
    HourlyReportRow,
    ResourceMonitorReport,
    SystemInfo,
    TimestampedSample
)


class TestDeviceContext(unittest.TestCase):
    """Test cases for model specific core eligibility."""

    def test_management_core_models(self):
        """Test models reserving core 0 start at core 1."""
        self.assertEqual(DeviceContext.from_model("PA-200").first_eligible_core_index, 1)
        self.assertEqual(DeviceContext.from_model("PA-VM").first_eligible_core_index, 1)

    def test_other_models(self):
        """Test every other model uses all cores."""
        self.assertEqual(DeviceContext.from_model("PA-3020").first_eligible_core_index, 0)
        self.assertEqual(DeviceContext.from_model("").first_eligible_core_index, 0)


class TestReportFuser(unittest.TestCase):
    """Test cases for ReportFuser.fuse."""

    def setUp(self):
        """Set up a PA-200 with one plane and two cores anchored at 05:00."""
        self.context = DeviceContext.from_model("PA-200")
        report = ResourceMonitorReport(planes=[["40,10", "60,20"]])
        self.matrix = LoadMatrix().populate(report, anchor_hour=5)
        self.fuser = ReportFuser()

    def test_divisor_constant(self):
        """Test the bytes to Mbps divisor."""
        self.assertEqual(BYTES_PER_MBPS_HOUR, 360_000_000.0)

    def test_end_to_end_row(self):
        """Test the anchor hour row with traffic."""
        rows = self.fuser.fuse(self.context, {5: 1_620_000_000}, self.matrix)

        self.assertEqual(rows[5], HourlyReportRow(5, 60.0, 4.5))
        self.assertEqual(rows[5].to_csv_row(), ["5", "60.00", "4.50"])

    def test_twenty_four_rows_in_order(self):
        """Test one row per hour in ascending order."""
        rows = self.fuser.fuse(self.context, {}, self.matrix)
        self.assertEqual([row.hour for row in rows], list(range(24)))

    def test_missing_traffic_gives_zero_row(self):
        """Test an hour with load but no traffic total is zero filled."""
        rows = self.fuser.fuse(self.context, {}, self.matrix)
        self.assertEqual(rows[5].to_csv_row(), ["5", "0.00", "0.00"])

    def test_zero_load_gives_zero_row(self):
        """Test an hour with traffic but zero load is zero filled."""
        rows = self.fuser.fuse(self.context, {6: 900_000_000}, self.matrix)
        self.assertEqual(rows[6].to_csv_row(), ["6", "0.00", "0.00"])

    def test_zero_bytes_with_load_gives_zero_row(self):
        """Test a zero byte total with non zero load is still zero filled."""
        rows = self.fuser.fuse(self.context, {5: 0}, self.matrix)
        self.assertTrue(rows[5].is_empty)
        self.assertEqual(rows[5].to_csv_row(), ["5", "0.00", "0.00"])

    def test_previous_hour_uses_slot_one(self):
        """Test the hour before the anchor reads the second sample."""
        rows = self.fuser.fuse(self.context, {4: 360_000_000}, self.matrix)
        self.assertEqual(rows[4].to_csv_row(), ["4", "20.00", "1.00"])

    def test_no_eligible_cores_raises(self):
        """Test a report without eligible cores fails instead of emitting rows."""
        matrix = LoadMatrix().populate(ResourceMonitorReport(planes=[["50"]]), anchor_hour=0)
        with self.assertRaises(LoadMatrixError):
            self.fuser.fuse(self.context, {0: 100}, matrix)

    def test_csv_rows_have_header(self):
        """Test CSV rendering prepends the header."""
        csv_rows = ReportFuser.to_csv_rows(self.fuser.fuse(self.context, {}, self.matrix))
        self.assertEqual(csv_rows[0], ["hour", "dpload", "mbps"])
        self.assertEqual(len(csv_rows), 25)


class TestProduceHourlyReport(unittest.TestCase):
    """Test cases for the single entry point."""

    def setUp(self):
        """Set up feeds for a PA-3020 read at 05:12."""
        self.system_info = SystemInfo(model="PA-3020", time="2023/06/01 05:12:44", hour=5)
        self.resource_report = ResourceMonitorReport(planes=[["10,30", "30,50"]])
        self.traffic = [
            TimestampedSample("2023/06/01 05:00:00", "720000000"),
            TimestampedSample("2023/06/01 05:00:00", "180000000"),
            TimestampedSample("2023/06/01 04:00:00", "bogus"),
        ]

    def test_report_rows(self):
        """Test header and fused rows."""
        rows = produce_hourly_report(self.system_info, self.resource_report, self.traffic)

        self.assertEqual(len(rows), 25)
        self.assertEqual(rows[0], ["hour", "dpload", "mbps"])
        self.assertEqual(rows[6], ["5", "20.00", "2.50"])
        # Hour 4 has load 40 but its only sample was malformed (0 bytes)
        self.assertEqual(rows[5], ["4", "0.00", "0.00"])
        self.assertEqual(rows[1], ["0", "0.00", "0.00"])

    def test_parse_statistics(self):
        """Test malformed samples are reported to the caller."""
        _, stats = build_report_rows(self.system_info, self.resource_report, self.traffic)
        self.assertEqual(stats["traffic_parse_failures"], 1)
        self.assertEqual(stats["load_parse_failures"], 0)

    def test_empty_resource_monitor_raises(self):
        """Test an empty load report is a structured failure."""
        with self.assertRaises(LoadMatrixError):
            produce_hourly_report(self.system_info, ResourceMonitorReport(), self.traffic)


if __name__ == "__main__":
    unittest.main()
