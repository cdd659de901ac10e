"""
Slack Pendulum: Velocity
========================
Cartesian velocity of the bob with the Verlet half-step and the tangential
projection applied when the string catches.

At the collision point the velocity may have any orientation. The cases are
organised by the values of theta (current string angle) and beta (polar
angle of the velocity): letters A-D give the quadrant of theta, digits 1-8
the interval holding beta.
"""

import logging
from enum import Enum

import numpy as np

from config import TWO_PI
from errors import GeometryExhausted

logger = logging.getLogger(__name__)

HALF_PI = np.pi / 2


class CollisionCase(Enum):
    """
    Recognised (theta, beta) configurations at re-engagement.

    Each value carries the case label and the signs (s, sx, sy) of

        v_tg = s * |v| * sin(beta - theta)
        vx = sx * v_tg * sin(theta)
        vy = sy * v_tg * cos(theta)
    """

    A8 = ("A8", -1, -1, -1)
    B4_B5 = ("B4/B5", 1, -1, 1)
    C5 = ("C5", -1, -1, 1)
    C6_C7 = ("C6/C7", 1, -1, 1)
    D6_D7 = ("D6/D7", -1, 1, -1)

    def __init__(self, label, speed_sign, x_sign, y_sign):
        self.label = label
        self.speed_sign = speed_sign
        self.x_sign = x_sign
        self.y_sign = y_sign


def classify_collision(theta: float, beta: float) -> CollisionCase:
    """
    Find the geometric case of a velocity with polar angle ``beta`` hitting
    the circle at angle ``theta``.

    Parameters
    ----------
    theta : float
        String angle in [0, 2*pi]
    beta : float
        Velocity angle in [0, 2*pi)

    Returns
    -------
    CollisionCase

    Raises
    ------
    GeometryExhausted
        If the pair falls outside every recognised case
    """
    # first quadrant
    if 0 <= theta < HALF_PI:
        if beta - 1.5 * np.pi > theta:
            return CollisionCase.A8

    # second quadrant, only B5 is reachable in practice
    elif HALF_PI <= theta < np.pi:
        if beta > theta and beta - HALF_PI < theta:
            return CollisionCase.B4_B5

    # third quadrant
    elif np.pi <= theta < 1.5 * np.pi:
        if beta > theta and beta - HALF_PI < theta:
            return CollisionCase.C6_C7
        if beta < theta:
            return CollisionCase.C5

    # fourth quadrant
    elif 1.5 * np.pi <= theta <= TWO_PI:
        if theta - HALF_PI < beta < theta:
            return CollisionCase.D6_D7

    raise GeometryExhausted(theta, beta)


class Velocity:
    """Cartesian velocity (x, y) of the bob."""

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = x
        self.y = y

    def verlet_update(self, acc, dt: float):
        """Velocity half of the Verlet step: average of both accelerations."""
        ax, ay = acc.mean()
        self.x += ax * dt
        self.y += ay * dt

    def magnitude(self) -> float:
        return np.sqrt(self.x * self.x + self.y * self.y)

    def polar_angle(self) -> float:
        """Angle of the velocity vector in [0, 2*pi)."""
        beta = np.arctan2(self.y, self.x)
        if beta < 0:
            beta += TWO_PI
        return beta

    def radial_component(self, theta: float) -> float:
        """Projection on the outward string direction at angle ``theta``."""
        return self.x * np.cos(theta) + self.y * np.sin(theta)

    def project_to_tangential(self, theta: float, log: logging.Logger = None) -> CollisionCase:
        """
        Keep only the component perpendicular to the string.

        Parameters
        ----------
        theta : float
            String angle at the collision
        log : logging.Logger, optional
            Destination of the trace lines, module logger by default

        Returns
        -------
        CollisionCase : The case used for the projection
        """
        log = log if log is not None else logger
        beta = self.polar_angle()
        log.debug("beta: %.15g theta: %.15g", beta, theta)

        case = classify_collision(theta, beta)
        log.debug("tangential projection case %s", case.label)

        v_tg = case.speed_sign * self.magnitude() * np.sin(beta - theta)
        self.x = case.x_sign * v_tg * np.sin(theta)
        self.y = case.y_sign * v_tg * np.cos(theta)
        return case

    def copy(self) -> "Velocity":
        return Velocity(self.x, self.y)
