"""
PanLoadMonitor - Configuration Management

This module handles loading and validating configuration from environment variables
and configuration files.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class PanosConfig:
    """Configuration for the PAN-OS XML API connection."""
    host: Optional[str] = None
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    verify_ssl: bool = False

    def validate(self) -> None:
        """
        Check that a host and one set of credentials are present.

        Raises:
            ValueError: If the connection cannot be configured
        """
        if not self.host:
            raise ValueError("Provide the hostname or IP address of the PAN-OS device (--host)")
        if self.api_key:
            return
        if not self.username:
            raise ValueError("Either username and password or an API key must be provided")
        if not self.password:
            raise ValueError("Both username and password must be provided")


@dataclass
class OperationalConfig:
    """Configuration for operational parameters."""
    rate_limit_delay: float = 0.1
    max_retries: int = 3
    retry_delay: float = 1.0
    request_timeout: float = 120.0

    def validate(self) -> None:
        """
        Check that every request gets at least one attempt.

        Raises:
            ValueError: If retry or timing values are out of range
        """
        if self.max_retries < 1:
            raise ValueError(f"MAX_RETRIES must be at least 1, got {self.max_retries}")
        if self.rate_limit_delay < 0 or self.retry_delay < 0:
            raise ValueError("RATE_LIMIT_DELAY and RETRY_DELAY must not be negative")
        if self.request_timeout <= 0:
            raise ValueError(f"REQUEST_TIMEOUT must be positive, got {self.request_timeout}")


@dataclass
class OutputConfig:
    """Configuration for report output and scheduling."""
    output_dir: Path = field(default_factory=lambda: Path("."))
    loop_interval_hours: float = 24.0


@dataclass
class Config:
    """
    Main configuration class that aggregates all configuration sections.

    Loads configuration from environment variables with .env file support.
    Values may be overridden afterwards from the command line.
    """
    panos: PanosConfig = field(default_factory=PanosConfig)
    operational: OperationalConfig = field(default_factory=OperationalConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_dir: Path = field(default_factory=lambda: Path("data/logs"))

    def __post_init__(self):
        """Load configuration from environment after initialization."""
        # Load .env file if it exists
        env_file = Path(".env")
        if env_file.exists():
            load_dotenv(env_file)

        self.panos = PanosConfig(
            host=os.getenv("PANOS_HOST"),
            api_key=os.getenv("PANOS_API_KEY"),
            username=os.getenv("PANOS_USERNAME"),
            password=os.getenv("PANOS_PASSWORD"),
            verify_ssl=self._get_bool_env("PANOS_VERIFY_SSL", False)
        )

        self.operational = OperationalConfig(
            rate_limit_delay=float(os.getenv("RATE_LIMIT_DELAY", "0.1")),
            max_retries=int(os.getenv("MAX_RETRIES", "3")),
            retry_delay=float(os.getenv("RETRY_DELAY", "1.0")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "120"))
        )

        self.output = OutputConfig(
            output_dir=Path(os.getenv("OUTPUT_DIR", ".")),
            loop_interval_hours=float(os.getenv("LOOP_INTERVAL_HOURS", "24"))
        )

        self.log_dir = Path(os.getenv("LOG_DIR", "data/logs"))

    @staticmethod
    def _get_bool_env(key: str, default: bool) -> bool:
        """
        Get a boolean environment variable.

        Args:
            key: Environment variable name
            default: Value when the variable is not set

        Returns:
            True for 1/true/yes/on (case insensitive)
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.strip().lower() in TRUE_VALUES

    def validate_output_dir(self) -> None:
        """
        Check that the output directory exists and is a directory.

        Raises:
            ValueError: If the path is missing or not a directory
        """
        output_dir = self.output.output_dir
        if not output_dir.exists():
            raise ValueError(f"Output directory {output_dir} does not exist")
        if not output_dir.is_dir():
            raise ValueError(f"{output_dir} exists but it is not a directory")
