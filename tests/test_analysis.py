import numpy as np
import pytest
from analysis import (
    slack_angle, angular_velocity, flight_time_closed_form, predict_first_collision,
)
from config import PendulumConfig, BOTTOM_ANGLE


@pytest.fixture(scope="module")
def reference_prediction():
    return predict_first_collision(PendulumConfig(gamma=3.0))


def test_slack_angle():
    assert slack_angle(3.0) == pytest.approx(np.arcsin(1 / 3))
    assert slack_angle(2.0) == pytest.approx(0.0)
    assert slack_angle(5.0) == pytest.approx(np.pi / 2)

def test_slack_angle_out_of_range():
    with pytest.raises(ValueError):
        slack_angle(6.0)

def test_angular_velocity_at_slack_point():
    th = slack_angle(3.0)
    omega = angular_velocity(th, np.sqrt(3.0), 1.0, 1.0)
    assert omega ** 2 == pytest.approx(np.sin(th))
    assert angular_velocity(BOTTOM_ANGLE, np.sqrt(3.0), 1.0, 1.0) == pytest.approx(np.sqrt(3.0))

def test_reference_values(reference_prediction):
    pred = reference_prediction
    assert pred.slack_angle == pytest.approx(0.3398, abs=1e-4)
    assert pred.flight_time == pytest.approx(2.1773, abs=1e-3)
    assert pred.collision_pos == pytest.approx(np.array([0.5238, -0.8518]), abs=1e-3)
    assert pred.collision_angle == pytest.approx(5.264, abs=1e-3)

@pytest.mark.parametrize("gamma", [2.5, 3.0, 3.7, 4.5])
def test_flight_time_matches_closed_form(gamma):
    pred = predict_first_collision(PendulumConfig(gamma=gamma))
    assert pred.flight_time == pytest.approx(flight_time_closed_form(gamma), rel=1e-6)

def test_collision_on_circle(reference_prediction):
    pred = reference_prediction
    assert np.linalg.norm(pred.slack_pos) == pytest.approx(1.0)
    assert np.linalg.norm(pred.collision_pos) == pytest.approx(1.0, abs=1e-8)
    assert pred.collision_time == pytest.approx(pred.slack_time + pred.flight_time)

def test_energy_balance(reference_prediction):
    pred = reference_prediction
    assert pred.energy_before == pytest.approx(1.5, abs=1e-8)
    assert pred.energy_after < pred.energy_before
    radial = np.array([np.cos(pred.collision_angle), np.sin(pred.collision_angle)])
    assert np.dot(pred.tangential_vel, radial) == pytest.approx(0.0, abs=1e-12)

def test_scales_with_length_and_gravity():
    pred = predict_first_collision(PendulumConfig(gamma=3.0, length=2.0, g=9.81))
    assert pred.slack_angle == pytest.approx(slack_angle(3.0))
    assert pred.flight_time == pytest.approx(
        flight_time_closed_form(3.0, length=2.0, g=9.81), rel=1e-6)

def test_requires_bottom_launch():
    with pytest.raises(ValueError):
        predict_first_collision(PendulumConfig(launch_angle=0.0))
