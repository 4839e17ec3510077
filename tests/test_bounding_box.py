import math
from datetime import datetime, timezone

import numpy as np

from sensor_samples.bounding_box import BoundingBox, OrientedBoundingBox
from sensor_samples.frame import EPOCH


def test_default_box_is_unknown():
    box = BoundingBox()
    assert box.time == EPOCH
    assert np.isnan(box.position).all()
    assert np.isnan(box.dimension).all()
    assert np.isnan(box.cov_position).all()
    assert np.isnan(box.cov_dimension).all()
    assert not box.has_valid_bounding_box()
    assert not box.has_valid_covariance()


def test_box_with_position_and_dimension():
    stamp = datetime(2020, 1, 1, tzinfo=timezone.utc)
    box = BoundingBox(stamp, [1.0, 2.0, 3.0], [0.5, 0.5, 2.0])
    assert box.time == stamp
    assert np.allclose(box.position, [1.0, 2.0, 3.0])
    assert box.has_valid_position()
    assert box.has_valid_dimension()
    assert box.has_valid_bounding_box()
    assert not box.has_valid_covariance()


def test_infinite_values_are_invalid():
    box = BoundingBox(position=[math.inf, 0.0, 0.0], dimension=[1.0, 1.0, 1.0])
    assert not box.has_valid_position()
    assert box.has_valid_dimension()
    assert not box.has_valid_bounding_box()


def test_covariances_checked_separately():
    box = BoundingBox()
    box.cov_position = np.eye(3)
    assert box.has_valid_cov_position()
    assert not box.has_valid_cov_dimension()
    assert not box.has_valid_covariance()
    box.cov_dimension = np.eye(3)
    assert box.has_valid_covariance()


def test_covariance_is_not_a_constructor_argument():
    box = BoundingBox(EPOCH, [0.0, 0.0, 0.0], [1.0, 1.0, 1.0])
    assert not box.has_valid_cov_position()


def test_default_oriented_box_is_unknown():
    box = OrientedBoundingBox()
    assert np.isnan(box.orientation).all()
    assert np.isnan(box.cov_orientation).all()
    assert not box.has_valid_orientation()
    assert not box.has_valid_bounding_box()
    assert not box.has_valid_covariance()


def test_oriented_box_needs_orientation():
    box = OrientedBoundingBox(EPOCH, [1.0, 2.0, 3.0], [1.0, 1.0, 1.0])
    assert box.has_valid_position()
    assert box.has_valid_dimension()
    assert not box.has_valid_bounding_box()

    box.orientation = np.array([1.0, 0.0, 0.0, 0.0])
    assert box.has_valid_orientation()
    assert box.has_valid_bounding_box()


def test_oriented_box_with_identity_orientation():
    box = OrientedBoundingBox(EPOCH, [0.0, 0.0, 0.0], [2.0, 2.0, 2.0], [1.0, 0.0, 0.0, 0.0])
    assert box.has_valid_bounding_box()
    assert isinstance(box, BoundingBox)


def test_oriented_box_covariance_includes_orientation():
    box = OrientedBoundingBox()
    box.cov_position = np.eye(3)
    box.cov_dimension = np.eye(3)
    assert not box.has_valid_covariance()
    box.cov_orientation = np.eye(3)
    assert box.has_valid_cov_orientation()
    assert box.has_valid_covariance()


def test_infinite_orientation_is_invalid():
    box = OrientedBoundingBox(orientation=[math.inf, 0.0, 0.0, 0.0])
    assert not box.has_valid_orientation()