"""State of a rigid body: pose, velocities and their covariances."""

from __future__ import annotations

import math
from datetime import datetime

import numpy as np

from sensor_samples.frame import EPOCH

_EULER_PRECISION = 1e-12


def _rotation_matrix(q: np.ndarray) -> np.ndarray:
    """Rotation matrix of a quaternion (w, x, y, z), without normalizing it."""
    w, x, y, z = (float(v) for v in q)
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
    )


def _quaternion(m: np.ndarray) -> np.ndarray:
    """Quaternion (w, x, y, z) of a 3x3 rotation matrix."""
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0.0:
        t = math.sqrt(trace + 1.0)
        w = 0.5 * t
        t = 0.5 / t
        return np.array(
            [w, (m[2, 1] - m[1, 2]) * t, (m[0, 2] - m[2, 0]) * t, (m[1, 0] - m[0, 1]) * t]
        )
    i = 0
    if m[1, 1] > m[0, 0]:
        i = 1
    if m[2, 2] > m[i, i]:
        i = 2
    j = (i + 1) % 3
    k = (j + 1) % 3
    t = math.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
    vector = np.zeros(3)
    vector[i] = 0.5 * t
    t = 0.5 / t
    w = (m[k, j] - m[j, k]) * t
    vector[j] = (m[j, i] + m[i, j]) * t
    vector[k] = (m[k, i] + m[i, k]) * t
    return np.concatenate(([w], vector))


def _euler(orientation: np.ndarray) -> tuple[float, float, float]:
    """ZYX Euler angles (yaw, pitch, roll) of a quaternion."""
    m = _rotation_matrix(orientation)
    norm = math.hypot(m[2, 2], m[2, 1])
    pitch = math.atan2(-m[2, 0], norm)
    if norm > _EULER_PRECISION:
        yaw = math.atan2(m[1, 0], m[0, 0])
        roll = math.atan2(m[2, 1], m[2, 2])
    else:
        yaw = 0.0
        roll = (1.0 if m[2, 1] > 0 else -1.0) * math.atan2(-m[0, 1], m[1, 1])
    return yaw, pitch, roll


def _roll_pitch_terms(orientation) -> tuple[float, float, float, float]:
    _, pitch, roll = _euler(np.asarray(orientation, dtype=np.float64))
    return math.sin(roll), math.cos(roll), math.sin(pitch), math.cos(pitch)


def angular_velocity_to_euler_rate(angular_velocity, orientation) -> np.ndarray:
    """Map an angular velocity to the rate of the ZYX Euler angles.

    Returns (yaw rate, pitch rate, roll rate). The orientation is a
    quaternion (w, x, y, z).
    """
    sr, cr, sp, cp = _roll_pitch_terms(orientation)
    with np.errstate(divide="ignore", invalid="ignore"):
        jacobian = np.array(
            [
                [0.0, np.divide(sr, cp), np.divide(cr, cp)],
                [0.0, cr, -sr],
                [1.0, np.divide(sr * sp, cp), np.divide(cr * sp, cp)],
            ]
        )
        return jacobian @ np.asarray(angular_velocity, dtype=np.float64)


def euler_rate_to_angular_velocity(euler_rate, orientation) -> np.ndarray:
    """Map a ZYX Euler angle rate (yaw, pitch, roll) to an angular velocity."""
    sr, cr, sp, cp = _roll_pitch_terms(orientation)
    jacobian_inv = np.array(
        [
            [-sp, 0.0, 1.0],
            [cp * sr, cr, 0.0],
            [cp * cr, -sr, 0.0],
        ]
    )
    return jacobian_inv @ np.asarray(euler_rate, dtype=np.float64)


class RigidBodyState:
    """State of the source frame expressed in the target frame.

    ``position`` is in metres, ``orientation`` a quaternion (w, x, y, z),
    ``velocity`` in m/s in the target frame and ``angular_velocity`` an
    axis-angle rate in the source frame. Each has a 3x3 covariance.
    """

    def __init__(self, do_invalidation: bool = True) -> None:
        self.time: datetime = EPOCH
        self.source_frame = ""
        self.target_frame = ""
        self.position = np.zeros(3)
        self.cov_position = np.zeros((3, 3))
        self.orientation = np.array([1.0, 0.0, 0.0, 0.0])
        self.cov_orientation = np.zeros((3, 3))
        self.velocity = np.zeros(3)
        self.cov_velocity = np.zeros((3, 3))
        self.angular_velocity = np.zeros(3)
        self.cov_angular_velocity = np.zeros((3, 3))
        if do_invalidation:
            self.invalidate()

    def set_transform(self, transform) -> None:
        """Set position and orientation from a 4x4 homogeneous transform."""
        matrix = np.asarray(transform, dtype=np.float64)
        if matrix.shape != (4, 4):
            raise ValueError("a transform must be a 4x4 homogeneous matrix")
        self.position = matrix[:3, 3].copy()
        self.orientation = _quaternion(matrix[:3, :3])

    @property
    def transform(self) -> np.ndarray:
        """The pose as a 4x4 homogeneous transform."""
        result = np.eye(4)
        result[:3, :3] = _rotation_matrix(self.orientation)
        result[:3, 3] = self.position
        return result

    @property
    def yaw(self) -> float:
        return _euler(self.orientation)[0]

    @property
    def pitch(self) -> float:
        return _euler(self.orientation)[1]

    @property
    def roll(self) -> float:
        return _euler(self.orientation)[2]

    @property
    def euler_rate(self) -> np.ndarray:
        """Time derivative of the ZYX Euler angles (yaw, pitch, roll)."""
        return angular_velocity_to_euler_rate(self.angular_velocity, self.orientation)

    @property
    def yaw_rate(self) -> float:
        return float(self.euler_rate[0])

    @property
    def pitch_rate(self) -> float:
        return float(self.euler_rate[1])

    @property
    def roll_rate(self) -> float:
        return float(self.euler_rate[2])

    def set_angular_velocity_from_euler_rate(self, euler_rate) -> None:
        """Set the angular velocity from a ZYX Euler angle rate."""
        self.angular_velocity = euler_rate_to_angular_velocity(euler_rate, self.orientation)

    @classmethod
    def unknown(cls) -> RigidBodyState:
        """A state at the origin with unknown (infinite) covariances."""
        result = cls(False)
        result.init_unknown()
        return result

    @classmethod
    def invalid(cls) -> RigidBodyState:
        """A state with every value and covariance set to NaN."""
        return cls(True)

    def invalidate(self) -> None:
        """Set all values and covariances to NaN."""
        self.invalidate_orientation()
        self.invalidate_orientation_covariance()
        self.invalidate_position()
        self.invalidate_position_covariance()
        self.invalidate_velocity()
        self.invalidate_velocity_covariance()
        self.invalidate_angular_velocity()
        self.invalidate_angular_velocity_covariance()

    def init_unknown(self) -> None:
        """Zero values, identity orientation and infinite covariances."""
        self.position = np.zeros(3)
        self.velocity = np.zeros(3)
        self.orientation = np.array([1.0, 0.0, 0.0, 0.0])
        self.angular_velocity = np.zeros(3)
        self.cov_position = self.unknown_covariance()
        self.cov_orientation = self.unknown_covariance()
        self.cov_velocity = self.unknown_covariance()
        self.cov_angular_velocity = self.unknown_covariance()

    @staticmethod
    def is_valid_value(vec, dim: int | None = None) -> bool:
        """Whether a vector (or one of its entries) is not NaN."""
        values = np.asarray(vec, dtype=np.float64)
        if dim is not None:
            return not math.isnan(values[dim])
        return not bool(np.isnan(values[:3]).any())

    @staticmethod
    def is_valid_orientation(orientation) -> bool:
        """Whether a quaternion has no NaN and is of unit length."""
        q = np.asarray(orientation, dtype=np.float64)
        if np.isnan(q).any():
            return False
        return abs(float(np.dot(q, q)) - 1.0) < 1e-6

    @staticmethod
    def is_known_value(cov, dim: int | None = None) -> bool:
        """Whether a covariance diagonal (or one entry of it) is not infinite."""
        matrix = np.asarray(cov, dtype=np.float64)
        if dim is not None:
            return not math.isinf(matrix[dim, dim])
        return not bool(np.isinf(np.diag(matrix)[:3]).any())

    @staticmethod
    def is_valid_covariance(cov, dim: int | None = None) -> bool:
        """Whether a covariance (or one diagonal entry) is not NaN."""
        matrix = np.asarray(cov, dtype=np.float64)
        if dim is not None:
            return not math.isnan(matrix[dim, dim])
        return not bool(np.isnan(matrix[:3, :3]).any())

    @staticmethod
    def invalid_value() -> np.ndarray:
        return np.full(3, math.nan)

    @staticmethod
    def invalid_orientation() -> np.ndarray:
        return np.full(4, math.nan)

    @staticmethod
    def unknown_covariance() -> np.ndarray:
        return np.full((3, 3), math.inf)

    @staticmethod
    def invalid_covariance() -> np.ndarray:
        return np.full((3, 3), math.nan)

    def has_valid_position(self, idx: int | None = None) -> bool:
        return self.is_valid_value(self.position, idx)

    def has_valid_position_covariance(self) -> bool:
        return self.is_valid_covariance(self.cov_position)

    def invalidate_position(self) -> None:
        self.position = self.invalid_value()

    def invalidate_position_covariance(self) -> None:
        self.cov_position = self.invalid_covariance()

    def has_valid_orientation(self) -> bool:
        return self.is_valid_orientation(self.orientation)

    def has_valid_orientation_covariance(self) -> bool:
        return self.is_valid_covariance(self.cov_orientation)

    def invalidate_orientation(self) -> None:
        self.orientation = self.invalid_orientation()

    def invalidate_orientation_covariance(self) -> None:
        self.cov_orientation = self.invalid_covariance()

    def has_valid_velocity(self, idx: int | None = None) -> bool:
        return self.is_valid_value(self.velocity, idx)

    def has_valid_velocity_covariance(self) -> bool:
        return self.is_valid_covariance(self.cov_velocity)

    def invalidate_velocity(self) -> None:
        self.velocity = self.invalid_value()

    def invalidate_velocity_covariance(self) -> None:
        self.cov_velocity = self.invalid_covariance()

    def has_valid_angular_velocity(self, idx: int | None = None) -> bool:
        return self.is_valid_value(self.angular_velocity, idx)

    def has_valid_angular_velocity_covariance(self) -> bool:
        return self.is_valid_covariance(self.cov_angular_velocity)

    def invalidate_angular_velocity(self) -> None:
        self.angular_velocity = self.invalid_value()

    def invalidate_angular_velocity_covariance(self) -> None:
        self.cov_angular_velocity = self.invalid_covariance()

    def invalidate_values(
        self,
        position: bool,
        orientation: bool,
        velocity: bool = True,
        angular_velocity: bool = True,
    ) -> None:
        """Set the selected values to NaN."""
        if position:
            self.invalidate_position()
        if orientation:
            self.invalidate_orientation()
        if velocity:
            self.invalidate_velocity()
        if angular_velocity:
            self.invalidate_angular_velocity()

    def invalidate_covariances(
        self,
        position: bool = True,
        orientation: bool = True,
        velocity: bool = True,
        angular_velocity: bool = True,
    ) -> None:
        """Set the selected covariances to NaN."""
        if position:
            self.invalidate_position_covariance()
        if orientation:
            self.invalidate_orientation_covariance()
        if velocity:
            self.invalidate_velocity_covariance()
        if angular_velocity:
            self.invalidate_angular_velocity_covariance()