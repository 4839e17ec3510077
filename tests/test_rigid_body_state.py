import math

import numpy as np
import pytest

from sensor_samples.rigid_body_state import (
    RigidBodyState,
    angular_velocity_to_euler_rate,
    euler_rate_to_angular_velocity,
)

IDENTITY = np.array([1.0, 0.0, 0.0, 0.0])


def _about_z(angle):
    return np.array([math.cos(angle / 2), 0.0, 0.0, math.sin(angle / 2)])


def _about_y(angle):
    return np.array([math.cos(angle / 2), 0.0, math.sin(angle / 2), 0.0])


def test_invalid_state_has_nothing_valid():
    state = RigidBodyState.invalid()
    assert not state.has_valid_position()
    assert not state.has_valid_orientation()
    assert not state.has_valid_velocity()
    assert not state.has_valid_angular_velocity()
    assert not state.has_valid_position_covariance()
    assert not state.has_valid_orientation_covariance()
    assert not state.has_valid_velocity_covariance()
    assert not state.has_valid_angular_velocity_covariance()


def test_unknown_state_is_valid_but_not_known():
    state = RigidBodyState.unknown()
    assert np.array_equal(state.position, np.zeros(3))
    assert np.array_equal(state.orientation, IDENTITY)
    assert state.has_valid_position()
    assert state.has_valid_orientation()
    assert state.has_valid_position_covariance()
    assert not RigidBodyState.is_known_value(state.cov_position)
    assert np.isposinf(state.cov_velocity).all()


def test_transform_round_trip():
    angle = 0.5
    matrix = np.eye(4)
    matrix[:3, :3] = [
        [math.cos(angle), -math.sin(angle), 0.0],
        [math.sin(angle), math.cos(angle), 0.0],
        [0.0, 0.0, 1.0],
    ]
    matrix[:3, 3] = [1.0, 2.0, 3.0]
    state = RigidBodyState()
    state.set_transform(matrix)
    assert np.allclose(state.position, [1.0, 2.0, 3.0])
    assert np.allclose(state.orientation, _about_z(angle))
    assert np.allclose(state.transform, matrix)
    assert state.yaw == pytest.approx(angle)
    assert state.pitch == pytest.approx(0.0)
    assert state.roll == pytest.approx(0.0)


def test_set_transform_rejects_wrong_shape():
    with pytest.raises(ValueError):
        RigidBodyState().set_transform(np.eye(3))


def test_pitch_is_read_from_orientation():
    state = RigidBodyState.unknown()
    state.orientation = _about_y(0.3)
    assert state.pitch == pytest.approx(0.3)
    assert state.yaw == pytest.approx(0.0)


def test_identity_orientation_swaps_rate_order():
    rates = angular_velocity_to_euler_rate([0.1, 0.2, 0.3], IDENTITY)
    assert np.allclose(rates, [0.3, 0.2, 0.1])


@pytest.mark.parametrize(
    "orientation",
    [IDENTITY, _about_z(1.0), _about_y(0.4), _about_y(-0.7) * 1.0],
)
def test_euler_rate_round_trip(orientation):
    euler_rate = np.array([0.25, -0.5, 0.75])
    omega = euler_rate_to_angular_velocity(euler_rate, orientation)
    assert np.allclose(angular_velocity_to_euler_rate(omega, orientation), euler_rate)


def test_state_rate_accessors_follow_angular_velocity():
    state = RigidBodyState.unknown()
    state.orientation = _about_y(0.2)
    euler_rate = np.array([0.1, 0.2, 0.3])
    state.set_angular_velocity_from_euler_rate(euler_rate)
    assert np.allclose(state.euler_rate, euler_rate)
    assert state.yaw_rate == pytest.approx(0.1)
    assert state.pitch_rate == pytest.approx(0.2)
    assert state.roll_rate == pytest.approx(0.3)


def test_single_dimension_checks():
    state = RigidBodyState.unknown()
    state.position[1] = math.nan
    assert state.has_valid_position(0)
    assert not state.has_valid_position(1)
    assert not state.has_valid_position()
    cov = np.eye(3)
    cov[2, 2] = math.inf
    assert RigidBodyState.is_known_value(cov, 0)
    assert not RigidBodyState.is_known_value(cov, 2)
    assert RigidBodyState.is_valid_covariance(cov, 2)


def test_non_unit_orientation_is_invalid():
    assert RigidBodyState.is_valid_orientation(IDENTITY)
    assert not RigidBodyState.is_valid_orientation(IDENTITY * 2)
    assert not RigidBodyState.is_valid_orientation(RigidBodyState.invalid_orientation())


def test_invalidate_values_is_selective():
    state = RigidBodyState.unknown()
    state.invalidate_values(True, False, velocity=False, angular_velocity=True)
    assert not state.has_valid_position()
    assert state.has_valid_orientation()
    assert state.has_valid_velocity()
    assert not state.has_valid_angular_velocity()


def test_invalidate_covariances_is_selective():
    state = RigidBodyState.unknown()
    state.invalidate_covariances(position=False, velocity=False)
    assert state.has_valid_position_covariance()
    assert not state.has_valid_orientation_covariance()
    assert state.has_valid_velocity_covariance()
    assert not state.has_valid_angular_velocity_covariance()