"""Inertial samples: raw IMU readings and rigid body accelerations."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

import numpy as np

from sensor_samples.frame import EPOCH


def _unknown_vector() -> np.ndarray:
    return np.full(3, math.nan)


@dataclass
class IMUSensors:
    """Raw accelerometer, gyro and magnetometer readings."""

    time: datetime = EPOCH
    acc: np.ndarray = field(default_factory=_unknown_vector)
    gyro: np.ndarray = field(default_factory=_unknown_vector)
    mag: np.ndarray = field(default_factory=_unknown_vector)


class RigidBodyAcceleration:
    """Linear (m/s^2) and angular (rad/s^2) acceleration of a body.

    The covariances start out invalidated.
    """

    def __init__(self) -> None:
        self.time: datetime = EPOCH
        self.acceleration = _unknown_vector()
        self.angular_acceleration = _unknown_vector()
        self.cov_acceleration = np.zeros((3, 3))
        self.cov_angular_acceleration = np.zeros((3, 3))
        self.invalidate()

    def invalidate(self) -> None:
        """Scale identity covariances by infinity.

        The diagonal becomes infinite; off-diagonal entries (zero times
        infinity) become NaN.
        """
        with np.errstate(invalid="ignore"):
            self.cov_acceleration = np.eye(3) * math.inf
            self.cov_angular_acceleration = np.eye(3) * math.inf