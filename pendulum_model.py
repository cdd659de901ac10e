"""
Slack Pendulum: Simulation Model
================================
Pendulum body on an inextensible string that may go slack:
- Oscillatory phase (string taut, T > 0)
- Ballistic phase (string slack, T = 0)
- Collisions when the string catches again, which remove the radial
  velocity component

The body is advanced with velocity Verlet. The tension follows from energy
conservation along the current taut arc and drives a two-state machine.
"""

import logging

import numpy as np

from acceleration import AccelerationPair
from config import (
    PendulumConfig, CollisionEvent, OutputMode, TAUT_ONLY_MODES,
    GRAVITY, BOTTOM_ANGLE, TWO_PI, STRING_BREAK_FRACTION, PHASE_WRAP_TOLERANCE,
)
from diagnostics import DiagnosticWriter
from errors import PendulumError, ConstraintViolated
from kinematics import KinematicState
from velocity import Velocity


def string_tension(theta: float, alpha: float, omega0: float, r: float,
                   mass: float, g: float = GRAVITY) -> float:
    """
    Tension of a taut string at angle ``theta``.

    The arc started at angle ``alpha`` with angular velocity ``omega0``;
    the value is negative where a taut string cannot hold the bob.
    """
    return mass * g * (-3 * np.sin(theta) + 2 * np.sin(alpha) + r / g * omega0 * omega0)


class PendulumBody:
    """
    Bob of a pendulum whose string can go slack.

    Handles two regimes:
    1. Taut: tension pulls the bob towards the anchor
    2. Slack: projectile motion under gravity

    The body owns its position, velocity and acceleration samples; none of
    them is shared with other objects.
    """

    def __init__(self, length: float, angle: float, omega: float, mass: float, dt: float,
                 output_mode: int = OutputMode.NONE, g: float = GRAVITY,
                 writer: DiagnosticWriter = None, logger: logging.Logger = None):
        """
        Initialize the body at the launch point.

        Parameters
        ----------
        length : float
            String length [m]
        angle : float
            Launch angle from the +x axis [rad], 1.5*pi is the bottom
        omega : float
            Launch angular velocity [rad/s]
        mass : float
            Bob mass [kg]
        dt : float
            Time step [s]
        output_mode : int
            Diagnostic projection, see OutputMode
        g : float
            Gravitational acceleration
        writer : DiagnosticWriter, optional
            Sink for diagnostic samples (discarding by default)
        logger : logging.Logger, optional
            Sink for event trace lines
        """
        self.mass = mass
        self.dt = dt
        self.g = g

        self.tension = 0.0
        self.collision = False
        self.n_collisions = 0
        self.collisions = []
        self.last_xc = 0.0      # last collision's abscissa
        self.last_yc = 0.0      # last collision's ordinate

        self.output_mode = output_mode
        self.default_output_mode = output_mode
        self.writer = writer if writer is not None else DiagnosticWriter()
        self.log = logger if logger is not None else logging.getLogger(__name__)

        # Elapsed time, last angle increment and angle at the start of the arc
        self.t = 0.0
        self.dtheta = 0.0
        self.alpha = angle

        self.state = KinematicState(length, angle, omega)
        self.velocity = Velocity(-omega * length * np.sin(angle),
                                 -omega * length * np.cos(angle))
        self.acc = AccelerationPair()

        # Initialization for the Verlet method
        self.state.update_cartesian()
        self.compute_acceleration()

        # dtheta is not known before the first step
        if self.output_mode != OutputMode.PHASE_SPACE:
            self.write(0.0, 0.0)

    @classmethod
    def from_config(cls, config: PendulumConfig, writer: DiagnosticWriter = None,
                    logger: logging.Logger = None) -> "PendulumBody":
        """Create a body from run parameters."""
        return cls(config.length, config.launch_angle, config.omega0, config.mass,
                   config.dt, output_mode=config.output_mode, g=config.g,
                   writer=writer, logger=logger)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def x(self) -> float:
        return self.state.x

    @property
    def y(self) -> float:
        return self.state.y

    @property
    def theta(self) -> float:
        return self.state.theta

    @property
    def length(self) -> float:
        return self.state.r

    @property
    def omega0(self) -> float:
        return self.state.omega0

    @property
    def taut(self) -> bool:
        return self.tension > 0

    @property
    def last_collision(self):
        return self.last_xc, self.last_yc

    def last_collision_angle(self) -> float:
        """Angle of the last collision point, same convention as theta."""
        return np.arctan2(self.last_xc, -self.last_yc) + BOTTOM_ANGLE

    def energy(self) -> float:
        """Current total energy, potential measured from the lowest point."""
        v = self.velocity.magnitude()
        return self.mass * self.g * (self.state.y + self.state.r) + self.mass * v * v / 2

    def radial_velocity(self) -> float:
        """Velocity component along the string, outward positive."""
        return self.velocity.radial_component(self.state.theta)

    def write(self, dtheta: float, t: float):
        self.writer.write(self, dtheta, t)

    # ------------------------------------------------------------------
    # Dynamics
    # ------------------------------------------------------------------

    def _tension(self) -> float:
        s = self.state
        return string_tension(s.theta, self.alpha, s.omega0, s.r, self.mass, self.g)

    def compute_acceleration(self):
        """
        Rotate the acceleration samples and compute the new one.

        Runs the tension state machine, which may detect the string going
        slack or catching again (a collision).

        Raises
        ------
        ConstraintViolated
            If the bob is more than 10% beyond the string length
        GeometryExhausted
            If the collision geometry matches no projection case
        """
        s = self.state
        old_tension = self.tension
        delta = self.velocity.magnitude() * self.dt  # distance since last step
        epsilon = s.r - s.radius()                   # distance from the bob to the circle
        old_theta = s.theta

        self.acc.rotate()
        s.update_theta()

        self.tension = self._tension()

        if self.tension < 0:
            self.tension = 0.0
            # interrupt output while the wire is not stretched
            if self.output_mode in TAUT_ONLY_MODES:
                self.output_mode = OutputMode.NONE

        # The bob has not yet travelled far enough to take up the slack
        if epsilon > delta and old_tension == 0 and self.t:
            self.tension = 0.0

        if old_tension and self.tension == 0:
            self.log.info(
                "The wire is no longer stretched at t = %.15g. "
                "Coordinates: x: %.15g y: %.15g Energy: %.15g",
                self.t, s.x, s.y, self.energy())
            if self.output_mode == OutputMode.TRAJECTORY:
                self.writer.break_segment()

        # the radial component of the velocity vanishes when the wire is stretched again
        if old_tension == 0 and self.tension > 0 and self.t:
            self._collide(epsilon)

        dtheta = s.theta - old_theta
        # keep dtheta continuous across the 0/2pi boundary
        if dtheta + PHASE_WRAP_TOLERANCE > TWO_PI:
            dtheta -= TWO_PI
        if -dtheta + PHASE_WRAP_TOLERANCE > TWO_PI:
            dtheta += TWO_PI
        self.dtheta = dtheta

        radius = s.radius()
        if radius - s.r > s.r * STRING_BREAK_FRACTION:
            raise ConstraintViolated(self.t, s.x, s.y, radius, s.r)

        self.acc.newest = (-self.tension * np.cos(s.theta) / self.mass,
                           -self.tension * np.sin(s.theta) / self.mass - self.g)

    def _collide(self, epsilon: float):
        """Re-engage the string: keep the tangential velocity only."""
        self.n_collisions += 1
        self.collision = True
        energy_before = self.energy()

        self.log.info(
            "Collision number: %d. The wire is stretched again at t = %.15g. "
            "Length error: %.15g.", self.n_collisions, self.t, epsilon)

        case = self.velocity.project_to_tangential(self.state.theta, self.log)
        self._reinitialize()

        self.last_xc = self.state.x
        self.last_yc = self.state.y
        if self.output_mode == OutputMode.NONE:
            self.output_mode = self.default_output_mode

        self.collisions.append(CollisionEvent(
            index=self.n_collisions,
            time=float(self.t),
            x=float(self.state.x),
            y=float(self.state.y),
            theta=float(self.state.theta),
            case=case.label,
            length_error=float(epsilon),
            energy_before=float(energy_before),
            energy_after=float(self.energy()),
        ))

    def _reinitialize(self):
        """Start a new taut arc from the current angle and speed."""
        self.state.omega0 = self.velocity.magnitude() / self.state.r
        self.alpha = self.state.theta

        # omega0 changed, so does the tension
        self.tension = max(self._tension(), 0.0)

        self.write(self.dtheta, self.t)
        self.log.info(
            "Coordinates: x: %.15g y: %.15g Energy after movement: %.15g",
            self.state.x, self.state.y, self.energy())

    def move(self) -> float:
        """
        Advance the body by one time step (velocity Verlet).

        Returns
        -------
        float : Angle increment of the step

        Raises
        ------
        PendulumError
            The body is left in the state it had before the call
        """
        snapshot = self._snapshot()
        try:
            self.t += self.dt
            self.state.position_update(self.acc, self.velocity, self.dt)
            self.compute_acceleration()
        except PendulumError:
            self._restore(snapshot)
            raise

        if not self.collision:
            self.velocity.verlet_update(self.acc, self.dt)
        else:
            self.collision = False

        return self.dtheta

    def _snapshot(self) -> dict:
        return {
            'state': self.state.copy(),
            'velocity': self.velocity.copy(),
            'acc': self.acc.copy(),
            'tension': self.tension,
            'collision': self.collision,
            'n_collisions': self.n_collisions,
            'n_events': len(self.collisions),
            'last_xc': self.last_xc,
            'last_yc': self.last_yc,
            'output_mode': self.output_mode,
            't': self.t,
            'dtheta': self.dtheta,
            'alpha': self.alpha,
        }

    def _restore(self, snapshot: dict):
        del self.collisions[snapshot.pop('n_events'):]
        for name, value in snapshot.items():
            setattr(self, name, value)
