"""
Slack Pendulum: Kinematic State
===============================
Cartesian and polar description of the bob position. No physics here,
only coordinate transforms and the Verlet position update.
"""

import numpy as np

from config import BOTTOM_ANGLE, TWO_PI


class KinematicState:
    """
    Position of the bob.

    Attributes
    ----------
    x, y : float
        Cartesian coordinates, anchor at the origin
    r : float
        String length
    theta : float
        Angle measured from the +x axis, 1.5*pi at the bottom of the swing
    omega0 : float
        Angular velocity at the start of the current taut phase
    """

    def __init__(self, r: float = 0.0, theta: float = 0.0, omega0: float = 0.0):
        self.x = 0.0
        self.y = 0.0
        self.r = r
        self.theta = theta
        self.omega0 = omega0

    def update_cartesian(self):
        """Place the bob on the circle at the current angle."""
        if self.theta < 0:
            self.theta += TWO_PI
        self.x = self.r * np.cos(self.theta)
        self.y = self.r * np.sin(self.theta)

    def update_theta(self):
        """Recover the angle from the Cartesian coordinates."""
        self.theta = np.arctan2(self.x, -self.y) + BOTTOM_ANGLE
        if self.theta > TWO_PI:
            self.theta -= TWO_PI

    def position_update(self, acc, velocity, dt: float):
        """Verlet position update with the newest acceleration sample."""
        ax, ay = acc.newest
        self.x += velocity.x * dt + ax * dt * dt / 2
        self.y += velocity.y * dt + ay * dt * dt / 2

    def radius(self) -> float:
        """Distance from the anchor."""
        return np.sqrt(self.x * self.x + self.y * self.y)

    def copy(self) -> "KinematicState":
        other = KinematicState(self.r, self.theta, self.omega0)
        other.x, other.y = self.x, self.y
        return other
