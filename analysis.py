"""
Slack Pendulum: Analytical Predictions
======================================
Reference values for the first taut arc, the first ballistic flight and the
first collision of a pendulum launched from the bottom. Used to check the
Verlet integrator and the tension state machine.

Phases:
1. Taut arc from the bottom up to the slack angle (quadrature)
2. Free flight until the bob is back on the circle (solve_ivp + event)
3. Collision: radial velocity removed
"""

from dataclasses import dataclass

import numpy as np
from scipy.integrate import quad, solve_ivp

from config import PendulumConfig, BOTTOM_ANGLE, TWO_PI


@dataclass
class CollisionPrediction:
    """Predicted first slack transition and first collision."""

    # Slack transition
    slack_angle: float = 0.0        # [rad], same convention as theta
    slack_time: float = 0.0         # [s]
    slack_pos: np.ndarray = None    # (2,)
    slack_vel: np.ndarray = None    # (2,)

    # Free flight
    flight_time: float = 0.0

    # Collision
    collision_time: float = 0.0
    collision_pos: np.ndarray = None
    collision_vel: np.ndarray = None    # just before the string catches
    collision_angle: float = 0.0
    tangential_vel: np.ndarray = None   # just after the string catches

    # Energy
    energy_before: float = 0.0
    energy_after: float = 0.0


def slack_angle(gamma: float) -> float:
    """
    Angle at which the string of a bottom-launched pendulum goes slack.

    Zero tension with alpha = 1.5*pi gives sin(theta) = (gamma - 2) / 3, in
    the first quadrant for 2 < gamma < 5.
    """
    if not -1 <= (gamma - 2) / 3 <= 1:
        raise ValueError(f"string never goes slack for gamma = {gamma}")
    return float(np.arcsin((gamma - 2) / 3))


def angular_velocity(theta, omega0: float, length: float, g: float,
                     alpha: float = BOTTOM_ANGLE):
    """Angular velocity on a taut arc that started at ``alpha`` with ``omega0``."""
    return np.sqrt(omega0**2 + 2 * g / length * (np.sin(alpha) - np.sin(theta)))


def flight_time_closed_form(gamma: float, length: float = 1.0, g: float = 1.0) -> float:
    """
    Duration of the first free flight.

    Starting on the circle with tangential velocity and zero tension, the
    squared radius minus l^2 is t^3 * (t * g^2 / 4 - g * vy), which vanishes
    again at t = 4 * vy / g.
    """
    th = slack_angle(gamma)
    omega_s = np.sqrt(g / length * np.sin(th))
    vy = length * omega_s * np.cos(th)
    return float(4 * vy / g)


def predict_first_collision(config: PendulumConfig, rtol: float = 1e-10,
                            atol: float = 1e-12) -> CollisionPrediction:
    """
    Predict the first slack transition and collision of a bottom launch.

    Parameters
    ----------
    config : PendulumConfig
        Run parameters; launch_angle must be the bottom of the swing

    Returns
    -------
    CollisionPrediction
    """
    cfg = config
    if not np.isclose(cfg.launch_angle, BOTTOM_ANGLE):
        raise ValueError("predictions assume a launch from the bottom of the swing")

    l, g, m = cfg.length, cfg.g, cfg.mass
    omega0 = cfg.omega0
    pred = CollisionPrediction()

    # =====================================================================
    # PHASE A: Taut arc
    # =====================================================================
    th_s = slack_angle(cfg.gamma)
    pred.slack_angle = th_s

    # theta runs from 1.5*pi through 2*pi up to the slack angle
    pred.slack_time, _ = quad(
        lambda th: 1.0 / angular_velocity(th, omega0, l, g),
        BOTTOM_ANGLE, TWO_PI + th_s,
        epsabs=atol, epsrel=rtol, limit=200,
    )

    omega_s = angular_velocity(th_s, omega0, l, g)
    pred.slack_pos = l * np.array([np.cos(th_s), np.sin(th_s)])
    pred.slack_vel = l * omega_s * np.array([-np.sin(th_s), np.cos(th_s)])

    # =====================================================================
    # PHASE B: Free flight
    # =====================================================================
    def ballistic_eom(t, state):
        """Projectile motion under gravity."""
        x, y, vx, vy = state
        return [vx, vy, 0.0, -g]

    def string_taut(t, state):
        return np.hypot(state[0], state[1]) - l
    string_taut.terminal = True
    string_taut.direction = 1

    # Upper bound: time to fall twice the string length from rest
    t_bound = 2 * np.sqrt(4 * l / g) + 4 * np.linalg.norm(pred.slack_vel) / g

    sol = solve_ivp(
        ballistic_eom,
        [0, t_bound],
        np.concatenate([pred.slack_pos, pred.slack_vel]),
        method='RK45',
        events=[string_taut],
        rtol=rtol,
        atol=atol,
        max_step=1e-2 * np.sqrt(l / g),
    )

    if sol.t_events[0].size == 0:
        raise RuntimeError("free flight did not return to the circle")

    pred.flight_time = float(sol.t_events[0][0])
    final = sol.y_events[0][0]
    pred.collision_time = pred.slack_time + pred.flight_time
    pred.collision_pos = final[:2]
    pred.collision_vel = final[2:]

    theta_c = np.arctan2(final[1], final[0])
    if theta_c < 0:
        theta_c += TWO_PI
    pred.collision_angle = float(theta_c)

    # =====================================================================
    # PHASE C: Collision
    # =====================================================================
    tangent = np.array([-np.sin(theta_c), np.cos(theta_c)])
    pred.tangential_vel = np.dot(pred.collision_vel, tangent) * tangent

    height = final[1] + l
    pred.energy_before = float(m * g * height + m * np.dot(final[2:], final[2:]) / 2)
    pred.energy_after = float(
        m * g * height + m * np.dot(pred.tangential_vel, pred.tangential_vel) / 2)

    return pred
