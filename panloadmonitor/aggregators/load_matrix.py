"""
PanLoadMonitor - Load Matrix

Holds the resource-monitor hourly CPU samples in a fixed size cube and
answers "mean data-plane load for hour H" lookups.

Sample slots form a ring indexed by hour of day: slot 0 is the hour the
device clock was read at (the anchor), slot N is N hours earlier.
"""

from typing import Optional, Tuple

from panloadmonitor.aggregators.hour_extractor import HOURS_PER_DAY, parse_unsigned
from panloadmonitor.models.facts import ResourceMonitorReport


MAX_SAMPLES = 60
MAX_DATA_PLANES = 20
MAX_CORES = 60


class ReportShapeError(ValueError):
    """Raised when a feed does not have the shape the report needs."""


class LoadMatrixError(ReportShapeError):
    """
    Raised when the load matrix cannot answer a lookup.

    Covers lookups before populate() and reports with no data planes or
    no eligible cores.
    """


def hour_ring_offset(anchor_hour: int, target_hour: int) -> int:
    """
    Number of hours between target_hour and the anchor, looking back.

    A target later in the day than the anchor belongs to yesterday.

    Args:
        anchor_hour: Hour of day of sample slot 0
        target_hour: Hour of day to look up

    Returns:
        Slot offset in range 0-23
    """
    return (anchor_hour - target_hour) % HOURS_PER_DAY


class LoadSampleCube:
    """
    Fixed capacity [slot][data plane][core] grid of load bytes.

    Values are stored as unsigned bytes; anything wider wraps.
    """

    def __init__(
        self,
        max_samples: int = MAX_SAMPLES,
        max_data_planes: int = MAX_DATA_PLANES,
        max_cores: int = MAX_CORES
    ):
        self.max_samples = max_samples
        self.max_data_planes = max_data_planes
        self.max_cores = max_cores
        self._values = bytearray(max_samples * max_data_planes * max_cores)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.max_samples, self.max_data_planes, self.max_cores)

    def _index(self, slot: int, plane: int, core: int) -> int:
        if not (0 <= slot < self.max_samples
                and 0 <= plane < self.max_data_planes
                and 0 <= core < self.max_cores):
            raise LoadMatrixError(
                f"Cell ({slot}, {plane}, {core}) outside cube {self.shape}"
            )
        return (slot * self.max_data_planes + plane) * self.max_cores + core

    def get(self, slot: int, plane: int, core: int) -> int:
        return self._values[self._index(slot, plane, core)]

    def set(self, slot: int, plane: int, core: int, value: int) -> None:
        self._values[self._index(slot, plane, core)] = value & 0xFF


class LoadMatrix:
    """
    Resource-monitor load samples anchored at a known hour of day.

    Dimensions are recorded once, at the end of populate(), and are read
    only afterwards.
    """

    def __init__(self, cube: Optional[LoadSampleCube] = None):
        """
        Initialize an empty load matrix.

        Args:
            cube: Storage to fill (creates a default capacity cube if None)
        """
        self.cube = cube or LoadSampleCube()
        self.parse_failures = 0
        self._populated = False
        self._anchor_hour = 0
        self._data_plane_count = 0
        self._core_counts: Tuple[int, ...] = ()
        self._sample_count = 0

    @property
    def populated(self) -> bool:
        return self._populated

    @property
    def anchor_hour(self) -> int:
        return self._anchor_hour

    @property
    def data_plane_count(self) -> int:
        return self._data_plane_count

    @property
    def core_counts(self) -> Tuple[int, ...]:
        """Cores observed on each data plane, in report order."""
        return self._core_counts

    @property
    def core_count_per_plane(self) -> int:
        """
        Core count used for lookups.

        This is the core count of the last data plane in the report,
        which matches what the device tooling has always reported.
        """
        return self._core_counts[-1] if self._core_counts else 0

    @property
    def max_core_count(self) -> int:
        return max(self._core_counts, default=0)

    @property
    def sample_count(self) -> int:
        """Samples observed on the last core of the last data plane."""
        return self._sample_count

    def populate(self, report: ResourceMonitorReport, anchor_hour: int) -> "LoadMatrix":
        """
        Fill the cube from a resource-monitor report.

        Args:
            report: Per-plane, per-core sample lists, most recent first
            anchor_hour: Hour of day the most recent sample represents

        Returns:
            self, for chaining

        Raises:
            LoadMatrixError: If already populated or the report does not
                fit the cube
        """
        if self._populated:
            raise LoadMatrixError("Load matrix is already populated")
        if not 0 <= anchor_hour < HOURS_PER_DAY:
            raise LoadMatrixError(f"Anchor hour {anchor_hour} outside 0-23")

        planes = report.planes
        if len(planes) > self.cube.max_data_planes:
            raise LoadMatrixError(
                f"Report has {len(planes)} data planes, capacity is {self.cube.max_data_planes}"
            )

        # Parse and check the whole report before touching the cube
        parsed = []
        parse_failures = 0
        core_counts = []
        sample_count = 0
        for plane_index, cores in enumerate(planes):
            if len(cores) > self.cube.max_cores:
                raise LoadMatrixError(
                    f"Data plane {plane_index} has {len(cores)} cores, capacity is {self.cube.max_cores}"
                )
            core_counts.append(len(cores))
            for core_index, raw_samples in enumerate(cores):
                samples = raw_samples.split(",")
                if len(samples) > self.cube.max_samples:
                    raise LoadMatrixError(
                        f"Core {plane_index}/{core_index} has {len(samples)} samples, "
                        f"capacity is {self.cube.max_samples}"
                    )
                sample_count = len(samples)
                for slot, raw_value in enumerate(samples):
                    load = parse_unsigned(raw_value)
                    if not load.ok:
                        parse_failures += 1
                    parsed.append((slot, plane_index, core_index, load.value))

        for slot, plane_index, core_index, value in parsed:
            self.cube.set(slot, plane_index, core_index, value)

        self.parse_failures = parse_failures
        self._anchor_hour = anchor_hour
        self._data_plane_count = len(planes)
        self._core_counts = tuple(core_counts)
        self._sample_count = sample_count
        self._populated = True
        return self

    def has_eligible_data(self, first_core_index: int) -> bool:
        """
        Check whether mean_load_for_hour() can be called.

        Args:
            first_core_index: First core included in the mean

        Returns:
            True if populated with at least one plane and one eligible core
        """
        return (
            self._populated
            and self._data_plane_count > 0
            and self.core_count_per_plane - first_core_index > 0
        )

    def mean_load_for_hour(self, target_hour: int, first_core_index: int = 0) -> float:
        """
        Mean load across all data planes and eligible cores for one hour.

        Args:
            target_hour: Hour of day 0-23
            first_core_index: First core included in the mean

        Returns:
            Mean load percentage

        Raises:
            LoadMatrixError: If not populated or no eligible cores exist
        """
        if not self.has_eligible_data(first_core_index):
            raise LoadMatrixError(
                f"No eligible load data (populated={self._populated}, "
                f"data_planes={self._data_plane_count}, "
                f"cores={self.core_count_per_plane}, first_core={first_core_index})"
            )

        slot = hour_ring_offset(self._anchor_hour, target_hour)
        core_count = self.core_count_per_plane
        load_sum = 0
        for plane in range(self._data_plane_count):
            for core in range(first_core_index, core_count):
                load_sum += self.cube.get(slot, plane, core)

        return load_sum / (self._data_plane_count * (core_count - first_core_index))
