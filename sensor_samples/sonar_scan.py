"""A full sonar scan: several beams stored together as an image."""

from __future__ import annotations

import math
from datetime import datetime

import numpy as np

from sensor_samples.frame import EPOCH
from sensor_samples.sonar_beam import SonarBeam

_SWAPPED_FIELDS = (
    "data",
    "time",
    "beamwidth_vertical",
    "beamwidth_horizontal",
    "sampling_interval",
    "number_of_beams",
    "number_of_bins",
    "start_bearing",
    "angular_resolution",
    "memory_layout_column",
    "polar_coordinates",
    "speed_of_sound",
)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _resized(items: list, size: int, filler) -> list:
    return items[:size] + [filler] * max(0, size - len(items))


class SonarScan:
    """Sonar data of several beams, stored as a bins x beams byte image.

    With ``memory_layout_column`` set, one beam is stored per column,
    otherwise one beam per row. Beams go from left to right, so the end
    bearing is usually smaller than the start bearing. Angles are radians.
    """

    def __init__(
        self,
        number_of_beams: int = 0,
        number_of_bins: int = 0,
        start_bearing: float = 0.0,
        angular_resolution: float = 0.0,
        memory_layout_column: bool = True,
    ) -> None:
        self.time: datetime = EPOCH
        self.data = bytearray()
        # A beam whose timestamp is the epoch counts as not set; an empty
        # list means `time` applies to all beams.
        self.time_beams: list[datetime] = []
        self.number_of_beams = 0
        self.number_of_bins = 0
        self.start_bearing = 0.0
        self.angular_resolution = 0.0
        self.sampling_interval = 0.0
        self.speed_of_sound = 0.0
        self.beamwidth_horizontal = 0.0
        self.beamwidth_vertical = 0.0
        self.memory_layout_column = True
        self.polar_coordinates = True
        self.init(
            number_of_beams,
            number_of_bins,
            start_bearing,
            angular_resolution,
            memory_layout_column,
            0,
        )

    def init(
        self,
        number_of_beams: int,
        number_of_bins: int,
        start_bearing: float,
        angular_resolution: float,
        memory_layout_column: bool = True,
        val: int = -1,
    ) -> None:
        """Set the layout; fill the data with val unless it is negative."""
        if self.number_of_beams != number_of_beams or self.number_of_bins != number_of_bins:
            self.number_of_beams = number_of_beams
            self.number_of_bins = number_of_bins
            size = number_of_beams * number_of_bins
            if size < len(self.data):
                del self.data[size:]
            else:
                self.data.extend(bytes(size - len(self.data)))
        self.start_bearing = start_bearing
        self.angular_resolution = angular_resolution
        self.memory_layout_column = memory_layout_column
        self.speed_of_sound = 0.0
        self.beamwidth_horizontal = 0.0
        self.beamwidth_vertical = 0.0
        self.reset(val)

    def copy(self, bcopy: bool = True) -> SonarScan:
        """Copy the metadata, and the data and beam times if bcopy."""
        scan = SonarScan()
        scan.init(
            self.number_of_beams,
            self.number_of_bins,
            self.start_bearing,
            self.angular_resolution,
            self.memory_layout_column,
        )
        scan.time = self.time
        scan.beamwidth_vertical = self.beamwidth_vertical
        scan.beamwidth_horizontal = self.beamwidth_horizontal
        scan.sampling_interval = self.sampling_interval
        scan.speed_of_sound = self.speed_of_sound
        scan.polar_coordinates = self.polar_coordinates
        if bcopy:
            scan.set_data(self.data)
            scan.time_beams = list(self.time_beams)
        return scan

    def reset(self, val: int = 0) -> None:
        """Clear time and beam times; fill data bytes with val unless negative."""
        self.time = EPOCH
        if self.data and val >= 0:
            self.data[:] = bytes([val % 256]) * len(self.data)
        self.time_beams.clear()

    def beam_index_for_bearing(self, bearing: float, range_check: bool = True) -> int:
        """Index of the beam holding the given bearing, -1 if out of range."""
        index = _round_half_away((self.start_bearing - bearing) / self.angular_resolution)
        if range_check and (index < 0 or index >= self.number_of_beams):
            return -1
        return index

    def has_sonar_beam(self, bearing: float | SonarBeam) -> bool:
        """Whether a beam was already added for the bearing (or the beam's bearing)."""
        if isinstance(bearing, SonarBeam):
            bearing = bearing.bearing
        index = self.beam_index_for_bearing(bearing)
        if index < 0:
            return False
        if not self.time_beams:
            return True
        return self.time_beams[index] != EPOCH

    def add_sonar_beam(self, sonar_beam: SonarBeam, resize: bool = True) -> None:
        """Store a beam at the position of its bearing.

        The layout must be one beam per row. If the bearing lies beyond the
        last beam the scan grows when resize is set; otherwise ValueError.
        """
        if self.memory_layout_column:
            raise ValueError(
                "cannot add sonar beam: memory layout is one beam per column, "
                "call toggle_memory_layout()"
            )
        if self.number_of_bins < len(sonar_beam.beam):
            raise ValueError("cannot add sonar beam: too many bins")
        index = self.beam_index_for_bearing(sonar_beam.bearing, False)
        if index < 0:
            raise ValueError("cannot add sonar beam: negative index")
        if index >= self.number_of_beams:
            if not resize:
                raise ValueError("cannot add sonar beam: bearing is out of range")
            self.number_of_beams = index + 1
            size = self.number_of_beams * self.number_of_bins
            self.data.extend(bytes(size - len(self.data)))
        if len(self.time_beams) != self.number_of_beams:
            self.time_beams = _resized(self.time_beams, self.number_of_beams, EPOCH)

        self.time_beams[index] = sonar_beam.time
        self.sampling_interval = sonar_beam.sampling_interval
        self.beamwidth_vertical = sonar_beam.beamwidth_vertical
        self.beamwidth_horizontal = sonar_beam.beamwidth_horizontal
        self.speed_of_sound = sonar_beam.speed_of_sound
        start = index * self.number_of_bins
        self.data[start : start + len(sonar_beam.beam)] = sonar_beam.beam

    def get_sonar_beam(self, bearing: float) -> SonarBeam:
        """Return the beam stored for a bearing; the layout must be one beam per row."""
        if self.memory_layout_column:
            raise ValueError("get_sonar_beam: wrong memory layout")
        index = self.beam_index_for_bearing(bearing)
        if index < 0:
            raise LookupError("get_sonar_beam: no data for the given bearing")
        start = self.number_of_bins * index
        return SonarBeam(
            time=self.time_beams[index] if len(self.time_beams) > index else self.time,
            bearing=bearing,
            sampling_interval=self.sampling_interval,
            speed_of_sound=self.speed_of_sound,
            beamwidth_horizontal=self.beamwidth_horizontal,
            beamwidth_vertical=self.beamwidth_vertical,
            beam=self.data[start : start + self.number_of_bins],
        )

    def toggle_memory_layout(self) -> None:
        """Switch between one beam per column and one beam per row."""
        pixels = np.frombuffer(bytes(self.data), dtype=np.uint8)
        if self.memory_layout_column:
            shape = (self.number_of_bins, self.number_of_beams)
        else:
            shape = (self.number_of_beams, self.number_of_bins)
        self.data = bytearray(pixels.reshape(shape).T.tobytes())
        self.memory_layout_column = not self.memory_layout_column

    def swap(self, other: SonarScan) -> None:
        """Exchange data and metadata with another scan (beam times stay put)."""
        for name in _SWAPPED_FIELDS:
            mine = getattr(self, name)
            setattr(self, name, getattr(other, name))
            setattr(other, name, mine)

    @property
    def number_of_bytes(self) -> int:
        return len(self.data)

    @property
    def bin_count(self) -> int:
        """Total number of bins: beams times bins per beam."""
        return self.number_of_beams * self.number_of_bins

    @property
    def end_bearing(self) -> float:
        return self.start_bearing - self.angular_resolution * (self.number_of_beams - 1)

    @property
    def spatial_resolution(self) -> float:
        """Length of one bin in metres (the interval covers the round trip)."""
        return self.sampling_interval * 0.5 * self.speed_of_sound

    def set_data(self, data: bytes | bytearray | memoryview) -> None:
        """Replace the raw data."""
        self.data = bytearray(data)