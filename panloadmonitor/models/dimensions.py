"""
PanLoadMonitor - Dimension Models

Data models describing the polled devices.
"""

from dataclasses import dataclass


# Models that reserve core 0 of the data plane for management tasks
MANAGEMENT_CORE_MODELS = ("PA-200", "PA-VM")


@dataclass(frozen=True)
class DeviceContext:
    """
    Device dimension - decides which cores count towards data-plane load.

    Primary Key: model
    """
    model: str
    first_eligible_core_index: int = 0

    @classmethod
    def from_model(cls, model: str) -> "DeviceContext":
        """
        Create DeviceContext from the model string of show system info.

        Args:
            model: Device model (e.g., "PA-3020")

        Returns:
            DeviceContext instance
        """
        first_core = 1 if model in MANAGEMENT_CORE_MODELS else 0
        return cls(model=model, first_eligible_core_index=first_core)


@dataclass(frozen=True)
class DeviceEntry:
    """
    Firewall managed by Panorama.

    Primary Key: serial
    """
    serial: str
    connected: bool = True
    sw_version: str = ""
