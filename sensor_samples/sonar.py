"""Sonar data for both mechanical scanning and multibeam devices."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Sequence

from sensor_samples.frame import EPOCH
from sensor_samples.sonar_beam import SonarBeam
from sensor_samples.sonar_scan import SonarScan

_SPEED_OF_SOUND_IN_WATER = 1497.0


def _resized(items: list, size: int, filler) -> list:
    return items[:size] + [filler] * max(0, size - len(items))


def _to_bytes(values: Sequence[float], gain: float) -> bytearray:
    """Scale bin values to bytes, normalizing first if any value exceeds 1."""
    if not values:
        raise ValueError("cannot convert a sonar without bins")
    raw = list(values)
    peak = max(raw)
    if peak > 1:
        raw = [v / peak for v in raw]
    scale = 255 * gain
    out = bytearray()
    for v in raw:
        scaled = v * scale
        if math.isnan(scaled):
            out.append(0)
        else:
            out.append(min(255, max(0, int(scaled))))
    return out


class Sonar:
    """Echo data of one or more sonar beams.

    Bins are stored beam-first: the bins of beam N run from
    ``N * bin_count`` to ``(N + 1) * bin_count``. Bin values are normalized,
    1.0 meaning the received signal equals the transmitted one. Angles are in
    radians, times are datetimes and durations are timedeltas.
    """

    def __init__(
        self,
        time: datetime = EPOCH,
        bin_duration: timedelta = timedelta(0),
        bin_count: int = 0,
        beam_width: float = math.nan,
        beam_height: float = math.nan,
        beam_count: int | None = None,
        per_beam_timestamps: bool = False,
    ) -> None:
        self.time = time
        # Per-beam acquisition start times; empty means `time` applies to all.
        self.timestamps: list[datetime] = []
        self.bin_duration = bin_duration
        self.beam_width = beam_width
        self.beam_height = beam_height
        self.bearings: list[float] = []
        self.speed_of_sound = self.speed_of_sound_in_water()
        self.bin_count = bin_count
        self.beam_count = 0
        self.bins: list[float] = []
        if beam_count is not None:
            self.resize(bin_count, beam_count, per_beam_timestamps)

    def __repr__(self) -> str:
        return (
            f"Sonar(time={self.time!r}, bin_count={self.bin_count}, "
            f"beam_count={self.beam_count})"
        )

    @staticmethod
    def speed_of_sound_in_water() -> float:
        """Default speed of sound in water, in m/s."""
        return _SPEED_OF_SOUND_IN_WATER

    def resize(self, bin_count: int, beam_count: int, per_beam_timestamps: bool) -> None:
        """Resize the storage; new bearings and bins are unknown (NaN)."""
        if per_beam_timestamps:
            self.timestamps = _resized(self.timestamps, beam_count, EPOCH)
        else:
            self.timestamps = []
        self.bearings = _resized(self.bearings, beam_count, math.nan)
        self.bins = _resized(self.bins, beam_count * bin_count, math.nan)
        self.bin_count = bin_count
        self.beam_count = beam_count

    @classmethod
    def from_single_beam(
        cls,
        time: datetime,
        bin_duration: timedelta,
        beam_width: float,
        beam_height: float,
        bins: Sequence[float],
        bearing: float = math.nan,
        speed_of_sound: float = _SPEED_OF_SOUND_IN_WATER,
    ) -> Sonar:
        """Build a structure holding a single beam."""
        sample = cls(time, bin_duration, len(bins), beam_width, beam_height)
        sample.speed_of_sound = speed_of_sound
        sample.push_beam(bins, bearing)
        return sample

    def bin_relative_start_time(self, bin_idx: int) -> timedelta:
        """Start of a bin relative to its beam's acquisition time."""
        return self.bin_duration * bin_idx

    def beam_acquisition_start_time(self, beam: int) -> datetime:
        """Acquisition start of a beam."""
        if not self.timestamps:
            return self.time
        return self.timestamps[beam]

    def bin_time(self, bin_idx: int, beam: int) -> datetime:
        """Absolute start time of a bin."""
        return self.beam_acquisition_start_time(beam) + self.bin_relative_start_time(bin_idx)

    def bin_start_distance(self, bin_idx: int) -> float:
        """Distance in metres of the start of a bin from the emission point."""
        return self.bin_relative_start_time(bin_idx).total_seconds() * self.speed_of_sound

    def set_regular_beam_bearings(self, start: float, interval: float) -> None:
        """Set evenly spaced bearings for all beam_count beams."""
        bearings = []
        angle = start
        for _ in range(self.beam_count):
            bearings.append(angle)
            angle += interval
        self.bearings = bearings

    def push_beam(
        self,
        bins: Sequence[float],
        bearing: float | None = None,
        beam_time: datetime | None = None,
    ) -> None:
        """Append one beam, with its bearing and acquisition time if given.

        Raises ValueError when no beam time is given but the structure uses
        per-beam timestamps.
        """
        if beam_time is None:
            if self.timestamps:
                raise ValueError(
                    "cannot push a beam without time: the structure uses "
                    "per-beam timestamps"
                )
            self.push_beam_bins(bins)
        else:
            self.push_beam_bins(bins)
            self.timestamps.append(beam_time)
        if bearing is not None:
            self.bearings.append(bearing)

    def push_beam_bins(self, beam_bins: Sequence[float]) -> None:
        """Append the bins of one beam; their number must equal bin_count."""
        if len(beam_bins) != self.bin_count:
            raise ValueError("the provided beam does not match the expected bin_count")
        self.bins.extend(beam_bins)
        self.beam_count += 1

    def set_beam(
        self,
        beam: int,
        bins: Sequence[float],
        bearing: float | None = None,
        beam_time: datetime | None = None,
    ) -> None:
        """Replace one beam, with its bearing and acquisition time if given.

        Raises ValueError when no beam time is given but the structure uses
        per-beam timestamps.
        """
        if beam_time is None:
            if self.timestamps:
                raise ValueError(
                    "cannot set a beam without time: the structure uses "
                    "per-beam timestamps"
                )
            self.set_beam_bins(beam, bins)
        else:
            self.set_beam_bins(beam, bins)
            self.timestamps[beam] = beam_time
        if bearing is not None:
            self.bearings[beam] = bearing

    def set_beam_bins(self, beam: int, beam_bins: Sequence[float]) -> None:
        """Overwrite the bins of one beam; their number must equal bin_count."""
        if len(beam_bins) != self.bin_count:
            raise ValueError("the provided beam does not match the expected bin_count")
        start = beam * self.bin_count
        self.bins[start : start + self.bin_count] = list(beam_bins)

    def beam_bearing(self, beam: int) -> float:
        """Bearing of the centre of a beam; zero is the front of the device."""
        return self.bearings[beam]

    def beam_bins(self, beam: int) -> list[float]:
        """Copy of the bins of one beam."""
        start = beam * self.bin_count
        return self.bins[start : start + self.bin_count]

    def get_beam(self, beam: int) -> Sonar:
        """A structure holding only the given beam."""
        return self.from_single_beam(
            self.beam_acquisition_start_time(beam),
            self.bin_duration,
            self.beam_width,
            self.beam_height,
            self.beam_bins(beam),
            self.beam_bearing(beam),
            self.speed_of_sound,
        )

    def validate(self) -> None:
        """Raise ValueError if the sizes of the fields are inconsistent."""
        if self.bin_count * self.beam_count != len(self.bins):
            raise ValueError(
                "the number of elements in 'bins' does not match the bin and beam counts"
            )
        if self.timestamps and len(self.timestamps) != self.beam_count:
            raise ValueError(
                "the number of elements in 'timestamps' does not match the beam count"
            )
        if len(self.bearings) != self.beam_count:
            raise ValueError(
                "the number of elements in 'bearings' does not match the beam count"
            )

    @classmethod
    def from_sonar_scan(cls, old: SonarScan, gain: float = 1) -> Sonar:
        """Convert a byte-valued sonar scan; bins become byte / 255 * gain."""
        if not old.polar_coordinates:
            raise ValueError(
                "there's no such thing as a non-polar sonar device, fix your driver"
            )
        sonar = cls(
            old.time,
            timedelta(seconds=old.spatial_resolution / old.speed_of_sound),
            old.number_of_bins,
            old.beamwidth_horizontal,
            old.beamwidth_vertical,
        )
        sonar.timestamps = list(old.time_beams)
        sonar.speed_of_sound = old.speed_of_sound
        sonar.beam_count = old.number_of_beams
        scan = old.copy()
        if old.memory_layout_column:
            scan.toggle_memory_layout()
        size = sonar.bin_count * sonar.beam_count
        sonar.bins = [value / 255 * gain for value in scan.data[:size]]
        sonar.set_regular_beam_bearings(old.start_bearing, old.angular_resolution)
        sonar.validate()
        return sonar

    @classmethod
    def from_sonar_beam(cls, old: SonarBeam, gain: float = 1) -> Sonar:
        """Convert a byte-valued sonar beam; bins become byte / 255 * gain."""
        sonar = cls(
            old.time,
            timedelta(seconds=old.sampling_interval / 2.0),
            len(old.beam),
            old.beamwidth_horizontal,
            old.beamwidth_vertical,
        )
        sonar.speed_of_sound = old.speed_of_sound
        sonar.push_beam([value / 255 * gain for value in old.beam], old.bearing)
        return sonar

    def to_sonar_beam(self, gain: float = 1) -> SonarBeam:
        """Convert to a byte-valued beam, normalizing if any bin exceeds 1."""
        return SonarBeam(
            time=self.time,
            bearing=self.bearings[0],
            sampling_interval=self.bin_duration.total_seconds() * 2.0,
            speed_of_sound=self.speed_of_sound,
            beamwidth_horizontal=self.beam_width,
            beamwidth_vertical=self.beam_height,
            beam=_to_bytes(self.bins, gain),
        )

    def to_sonar_scan(self, gain: float = 1) -> SonarScan:
        """Convert to a byte-valued scan with one beam per row."""
        start_bearing = self.bearings[0]
        data = _to_bytes(self.bins, gain)
        scan = SonarScan()
        scan.time = self.time
        scan.time_beams = list(self.timestamps)
        scan.speed_of_sound = self.speed_of_sound
        scan.number_of_bins = self.bin_count
        scan.number_of_beams = self.beam_count
        scan.beamwidth_horizontal = self.beam_width
        scan.beamwidth_vertical = self.beam_height
        scan.start_bearing = start_bearing
        scan.angular_resolution = self.beam_width / self.beam_count
        scan.memory_layout_column = False
        scan.polar_coordinates = True
        scan.data = data
        return scan