"""Axis-aligned and oriented 3D bounding boxes with uncertainty."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

import numpy as np

from sensor_samples.frame import EPOCH


def _unknown_vector(size: int) -> np.ndarray:
    return np.full(size, math.nan)


def _unknown_matrix() -> np.ndarray:
    return np.full((3, 3), math.nan)


@dataclass
class BoundingBox:
    """Axis-aligned bounding box: centre position and (width, height, length).

    Unknown values are NaN; the covariances start unknown.
    """

    time: datetime = EPOCH
    position: np.ndarray = field(default_factory=lambda: _unknown_vector(3))
    dimension: np.ndarray = field(default_factory=lambda: _unknown_vector(3))
    cov_position: np.ndarray = field(init=False, default_factory=_unknown_matrix)
    cov_dimension: np.ndarray = field(init=False, default_factory=_unknown_matrix)

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=np.float64).reshape(3)
        self.dimension = np.asarray(self.dimension, dtype=np.float64).reshape(3)

    def has_valid_bounding_box(self) -> bool:
        """Whether position and dimension are both finite."""
        return self.has_valid_position() and self.has_valid_dimension()

    def has_valid_position(self) -> bool:
        return bool(np.isfinite(self.position).all())

    def has_valid_dimension(self) -> bool:
        return bool(np.isfinite(self.dimension).all())

    def has_valid_covariance(self) -> bool:
        """Whether both covariance matrices are finite."""
        return self.has_valid_cov_position() and self.has_valid_cov_dimension()

    def has_valid_cov_position(self) -> bool:
        return bool(np.isfinite(self.cov_position).all())

    def has_valid_cov_dimension(self) -> bool:
        return bool(np.isfinite(self.cov_dimension).all())


@dataclass
class OrientedBoundingBox(BoundingBox):
    """Bounding box rotated about its centre.

    ``orientation`` is a quaternion given as (w, x, y, z).
    """

    orientation: np.ndarray = field(default_factory=lambda: _unknown_vector(4))
    cov_orientation: np.ndarray = field(init=False, default_factory=_unknown_matrix)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.orientation = np.asarray(self.orientation, dtype=np.float64).reshape(4)

    def _rotation_matrix(self) -> np.ndarray:
        w, x, y, z = self.orientation
        with np.errstate(invalid="ignore", over="ignore"):
            return np.array(
                [
                    [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
                    [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
                    [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
                ]
            )

    def has_valid_bounding_box(self) -> bool:
        """Whether position, dimension and orientation are all finite."""
        return super().has_valid_bounding_box() and self.has_valid_orientation()

    def has_valid_orientation(self) -> bool:
        return bool(np.isfinite(self._rotation_matrix()).all())

    def has_valid_covariance(self) -> bool:
        """Whether all three covariance matrices are finite."""
        return super().has_valid_covariance() and self.has_valid_cov_orientation()

    def has_valid_cov_orientation(self) -> bool:
        return bool(np.isfinite(self.cov_orientation).all())