import numpy as np
import pytest
from acceleration import AccelerationPair
from config import BOTTOM_ANGLE, TWO_PI
from kinematics import KinematicState
from velocity import Velocity


def test_update_cartesian_places_bob_on_circle():
    s = KinematicState(r=2.0, theta=BOTTOM_ANGLE)
    s.update_cartesian()
    assert s.x == pytest.approx(0.0, abs=1e-12)
    assert s.y == pytest.approx(-2.0)
    assert s.radius() == pytest.approx(2.0)

def test_update_cartesian_normalizes_negative_angle():
    s = KinematicState(r=1.0, theta=-np.pi / 2)
    s.update_cartesian()
    assert s.theta == pytest.approx(BOTTOM_ANGLE)
    assert s.y == pytest.approx(-1.0)

@pytest.mark.parametrize("theta", [0.3, 1.0, np.pi / 2, 2.5, np.pi, 4.0, BOTTOM_ANGLE, 5.5, 6.2])
def test_update_theta_recovers_angle(theta):
    s = KinematicState(r=1.5, theta=theta)
    s.update_cartesian()
    s.theta = 0.0
    s.update_theta()
    assert s.theta == pytest.approx(theta, abs=1e-12)

def test_update_theta_bottom_and_top():
    s = KinematicState(r=1.0)
    s.x, s.y = 0.0, -1.0
    s.update_theta()
    assert s.theta == pytest.approx(BOTTOM_ANGLE)

    s.x, s.y = 0.0, 1.0
    s.update_theta()
    assert s.theta == pytest.approx(np.pi / 2)

def test_update_theta_stays_within_two_pi():
    s = KinematicState(r=1.0)
    s.x, s.y = 1.0, 0.0
    s.update_theta()
    assert 0.0 < s.theta <= TWO_PI
    assert np.cos(s.theta) == pytest.approx(1.0)

def test_position_update_uses_newest_acceleration():
    s = KinematicState(r=1.0)
    s.x, s.y = 0.5, -0.5
    acc = AccelerationPair()
    acc.newest = (100.0, 100.0)
    acc.rotate()
    acc.newest = (0.0, -1.0)
    s.position_update(acc, Velocity(1.0, 2.0), 0.1)
    assert s.x == pytest.approx(0.6)
    assert s.y == pytest.approx(-0.5 + 0.2 - 0.005)

def test_copy_is_independent():
    s = KinematicState(r=1.0, theta=1.0, omega0=2.0)
    s.update_cartesian()
    other = s.copy()
    s.x = 10.0
    s.omega0 = 0.0
    assert other.x == pytest.approx(np.cos(1.0))
    assert other.omega0 == 2.0
