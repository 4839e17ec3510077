"""A single sonar beam: the echo bins received along one bearing."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import datetime

from sensor_samples.frame import EPOCH


@dataclass
class SonarBeam:
    """Echo strengths (bins) received along one beam of a sonar.

    Angles are in radians; ``bearing`` is zero at the front of the device.
    """

    time: datetime = EPOCH
    bearing: float = 0.0
    sampling_interval: float = math.nan
    speed_of_sound: float = math.nan
    beamwidth_horizontal: float = math.nan
    beamwidth_vertical: float = math.nan
    beam: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        self.beam = bytearray(self.beam)

    @property
    def spatial_resolution(self) -> float:
        """Length of one bin in metres.

        The sampling interval covers the round trip of the sound, hence the
        factor one half.
        """
        return self.sampling_interval * 0.5 * self.speed_of_sound

    def copy(self) -> SonarBeam:
        """Return an independent copy of this beam."""
        return SonarBeam(
            time=self.time,
            bearing=self.bearing,
            sampling_interval=self.sampling_interval,
            speed_of_sound=self.speed_of_sound,
            beamwidth_horizontal=self.beamwidth_horizontal,
            beamwidth_vertical=self.beamwidth_vertical,
            beam=bytearray(self.beam),
        )

    def swap(self, other: SonarBeam) -> None:
        """Exchange all content with another beam."""
        for f in fields(self):
            mine = getattr(self, f.name)
            setattr(self, f.name, getattr(other, f.name))
            setattr(other, f.name, mine)