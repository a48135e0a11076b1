"""
PanLoadMonitor - Main Entry Point

This module provides the command line entry point: poll a PAN-OS firewall
(or every firewall connected to a Panorama) and write the hourly data-plane
load and throughput report as CSV.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, date
from pathlib import Path
from typing import List, Optional

import aiohttp

from panloadmonitor.aggregators.load_matrix import ReportShapeError
from panloadmonitor.api.panos_client import PanosAPIClient, PanosAPIError
from panloadmonitor.collectors.device_collector import DeviceCollector
from panloadmonitor.collectors.panorama_collector import PanoramaCollector
from panloadmonitor.loaders.csv_loader import CSVReportWriter
from panloadmonitor.utils.config import Config
from panloadmonitor.utils.logging_config import setup_logging


logger = logging.getLogger(__name__)

# Failures of one device that should not abort the whole cycle
COLLECTION_ERRORS = (PanosAPIError, ReportShapeError, aiohttp.ClientError, asyncio.TimeoutError, OSError)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list (default: sys.argv)

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        description="PanLoadMonitor - PAN-OS hourly data-plane load and throughput report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One report from a firewall using an API key
  panloadmonitor --host fw1.example.com -k <api-key> --dir reports

  # Every firewall connected to Panorama, once a day
  panloadmonitor --host panorama.example.com -u admin -p secret --panorama --loop -i
        """
    )

    parser.add_argument("--host", "-H", help="Hostname or IP address (env: PANOS_HOST)")
    parser.add_argument("-u", dest="username", help="Username (env: PANOS_USERNAME)")
    parser.add_argument("-p", dest="password", help="Password (env: PANOS_PASSWORD)")
    parser.add_argument("-k", dest="api_key", help="API key (env: PANOS_API_KEY)")
    parser.add_argument("--dir", dest="output_dir", help="Output directory (env: OUTPUT_DIR)")
    parser.add_argument(
        "--panorama",
        action="store_true",
        help="Loop through all devices connected to Panorama"
    )
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Keep running, one sample every LOOP_INTERVAL_HOURS (default 24)"
    )
    parser.add_argument(
        "-i",
        dest="interactive",
        action="store_true",
        help="Provide interactive (non cron) stepped information"
    )
    parser.add_argument(
        "-d",
        dest="debug",
        action="store_true",
        help="Generate debug traces"
    )

    return parser.parse_args(argv)


def apply_arguments(config: Config, args: argparse.Namespace) -> Config:
    """
    Override environment configuration with command line values.

    Args:
        config: Configuration loaded from the environment
        args: Parsed arguments

    Returns:
        The updated configuration
    """
    if args.host:
        config.panos.host = args.host
    if args.username:
        config.panos.username = args.username
    if args.password:
        config.panos.password = args.password
    if args.api_key:
        config.panos.api_key = args.api_key
    if args.output_dir:
        config.output.output_dir = Path(args.output_dir)
    return config


async def collect_device(
    client: PanosAPIClient,
    writer: CSVReportWriter,
    day: date,
    serial: Optional[str] = None
) -> Path:
    """
    Collect and save the report of one firewall.

    Args:
        client: Authenticated API client
        writer: CSV writer
        day: Day of the cycle (file prefix)
        serial: Firewall serial when polled through Panorama

    Returns:
        Path of the written report
    """
    rows = await DeviceCollector(client).collect_hourly_report()
    return writer.write(rows, writer.build_file_name(day, serial))


async def run_cycle(
    client: PanosAPIClient,
    writer: CSVReportWriter,
    panorama: bool,
    day: date
) -> bool:
    """
    Run one collection cycle.

    Args:
        client: Authenticated API client
        writer: CSV writer
        panorama: Poll every connected firewall through Panorama
        day: Day of the cycle

    Returns:
        True if every device report was written
    """
    logger.info(f"[INFO] Sample prefix will be {writer.file_prefix(day)}")

    if not panorama:
        try:
            await collect_device(client, writer, day)
            return True
        except COLLECTION_ERRORS as error:
            logger.error(f"[ERROR] Collection failed: {error}")
            return False

    try:
        devices = await PanoramaCollector(client).get_connected_devices()
    except COLLECTION_ERRORS as error:
        logger.error(f"[ERROR] Could not list Panorama devices: {error}")
        return False

    failures = 0
    try:
        for device in devices:
            logger.info(f"[INFO] Switching to device serial number {device.serial}")
            client.set_target(device.serial)
            try:
                await collect_device(client, writer, day, device.serial)
            except COLLECTION_ERRORS as error:
                failures += 1
                logger.error(f"[ERROR] Device {device.serial} failed: {error}")
    finally:
        client.set_target(None)

    if failures:
        logger.warning(f"[WARN] {failures}/{len(devices)} devices failed")
    return failures == 0


async def run_monitor(config: Config, panorama: bool, loop: bool) -> bool:
    """
    Authenticate, then run one cycle or keep cycling.

    Args:
        config: Validated configuration
        panorama: Poll through Panorama
        loop: Repeat every loop interval

    Returns:
        Result of the last cycle
    """
    writer = CSVReportWriter(config.output.output_dir)
    interval_seconds = config.output.loop_interval_hours * 3600

    async with PanosAPIClient(config.panos, config.operational) as client:
        await client.authenticate()

        while True:
            success = await run_cycle(client, writer, panorama, datetime.now().date())
            if not loop:
                return success
            logger.info("[INFO] Going to sleep until next tick ...")
            await asyncio.sleep(interval_seconds)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for PanLoadMonitor.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = parse_arguments(argv)

    try:
        config = apply_arguments(Config(), args)
    except ValueError as error:
        print(f"Error: invalid configuration value: {error}", file=sys.stderr)
        return 2

    setup_logging(debug=args.debug, interactive=args.interactive, log_dir=config.log_dir)

    logger.debug("Starting Program...")

    try:
        config.panos.validate()
        config.operational.validate()
        config.validate_output_dir()
    except ValueError as error:
        logger.error(f"[ERROR] {error}")
        return 2

    try:
        success = asyncio.run(run_monitor(config, args.panorama, args.loop))

    except KeyboardInterrupt:
        logger.warning("[WARN] Operation interrupted by user")
        return 130

    except COLLECTION_ERRORS as error:
        logger.error(f"[ERROR] Operation failed: {error}")
        return 1

    if success:
        logger.info("[DONE] PanLoadMonitor - Complete")
    else:
        logger.error("[ERROR] PanLoadMonitor - Failed")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
