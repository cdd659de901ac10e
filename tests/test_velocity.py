import numpy as np
import pytest
from acceleration import AccelerationPair
from errors import GeometryExhausted
from velocity import Velocity, CollisionCase, classify_collision


def _velocity(speed, beta):
    return Velocity(speed * np.cos(beta), speed * np.sin(beta))

def _tangential_part(v, theta):
    tangent = np.array([-np.sin(theta), np.cos(theta)])
    return np.dot([v.x, v.y], tangent) * tangent


@pytest.mark.parametrize("theta, beta, expected", [
    (0.2, 1.5 * np.pi + 0.5, CollisionCase.A8),
    (2.0, 2.5, CollisionCase.B4_B5),
    (3.5, 4.0, CollisionCase.C6_C7),
    (3.5, 3.0, CollisionCase.C5),
    (5.3, 4.6, CollisionCase.D6_D7),
])
def test_classify_collision(theta, beta, expected):
    assert classify_collision(theta, beta) is expected

@pytest.mark.parametrize("theta, beta", [
    (0.2, 1.0),
    (2.0, 1.0),
    (3.5, 3.5),
    (5.3, 5.5),
])
def test_classify_collision_outside_table(theta, beta):
    with pytest.raises(GeometryExhausted) as excinfo:
        classify_collision(theta, beta)
    assert excinfo.value.theta == pytest.approx(theta)
    assert excinfo.value.beta == pytest.approx(beta)
    assert "Precision limit reached" in str(excinfo.value)

def test_case_signs():
    assert CollisionCase.D6_D7.label == "D6/D7"
    assert (CollisionCase.D6_D7.speed_sign, CollisionCase.D6_D7.x_sign,
            CollisionCase.D6_D7.y_sign) == (-1, 1, -1)
    assert (CollisionCase.A8.speed_sign, CollisionCase.A8.x_sign,
            CollisionCase.A8.y_sign) == (-1, -1, -1)

def test_polar_angle_range():
    assert Velocity(1.0, 0.0).polar_angle() == pytest.approx(0.0)
    assert Velocity(0.0, -1.0).polar_angle() == pytest.approx(1.5 * np.pi)
    assert Velocity(-1.0, -1e-12).polar_angle() < 2 * np.pi

def test_verlet_update_averages_accelerations():
    acc = AccelerationPair()
    acc.newest = (0.0, -1.0)
    acc.rotate()
    acc.newest = (2.0, -3.0)
    v = Velocity(1.0, 1.0)
    v.verlet_update(acc, 0.5)
    assert v.x == pytest.approx(1.5)
    assert v.y == pytest.approx(0.0)

@pytest.mark.parametrize("theta, beta", [
    (2.0, 2.5),     # B4/B5
    (3.5, 4.0),     # C6/C7
    (5.3, 4.6),     # D6/D7
])
def test_projection_keeps_tangential_component(theta, beta):
    v = _velocity(1.7, beta)
    expected = _tangential_part(v, theta)
    v.project_to_tangential(theta)
    assert np.allclose([v.x, v.y], expected, atol=1e-12)
    assert v.radial_component(theta) == pytest.approx(0.0, abs=1e-12)

def test_c5_projection_is_tangential_but_reversed():
    theta, beta = 3.5, 3.0
    v = _velocity(1.0, beta)
    expected = _tangential_part(v, theta)
    case = v.project_to_tangential(theta)
    assert case is CollisionCase.C5
    assert v.radial_component(theta) == pytest.approx(0.0, abs=1e-12)
    assert np.allclose([v.x, v.y], -expected, atol=1e-12)

def test_a8_projection_follows_sign_table():
    theta, beta = 0.2, 1.5 * np.pi + 0.5
    speed = 2.0
    v = _velocity(speed, beta)
    v.project_to_tangential(theta)
    v_tg = -speed * np.sin(beta - theta)
    assert v.x == pytest.approx(-v_tg * np.sin(theta))
    assert v.y == pytest.approx(-v_tg * np.cos(theta))

@pytest.mark.parametrize("theta, beta", [
    (0.2, 1.5 * np.pi + 0.5),
    (2.0, 2.5),
    (3.5, 4.0),
    (3.5, 3.0),
    (5.3, 4.6),
])
def test_projection_never_increases_speed(theta, beta):
    v = _velocity(1.3, beta)
    v.project_to_tangential(theta)
    assert v.magnitude() <= 1.3 + 1e-12

def test_failed_projection_leaves_velocity_untouched():
    v = _velocity(1.0, 1.0)
    with pytest.raises(GeometryExhausted):
        v.project_to_tangential(0.2)
    assert v.x == pytest.approx(np.cos(1.0))
    assert v.y == pytest.approx(np.sin(1.0))
