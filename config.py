"""
Slack Pendulum: Configuration and Constants
===========================================
Dataclasses for run parameters and results, physical constants and
numerical tolerances.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional
import numpy as np


# Physical constants
# The simulator works in reduced units with unit gravity
GRAVITY = 1.0

# Launch geometry
# Angles are measured from the +x axis, the bottom of the swing is 1.5*pi
BOTTOM_ANGLE = 1.5 * np.pi
TWO_PI = 2 * np.pi

# Admissible launch parameter gamma = omega0^2 * l / g
# gamma <= 2: the string never goes slack
# gamma >= 5: the pendulum loops over the top without collisions
GAMMA_MIN = 2.0
GAMMA_MAX = 5.0

# Numerical tolerances
STRING_BREAK_FRACTION = 0.1   # Relative stretch at which the string is "broken"
PHASE_WRAP_TOLERANCE = 1e-3   # Slack for the 0/2pi correction of dtheta [rad]
SIGN_CHANGES_TO_STOP = 3      # dtheta sign changes needed to close a phase loop

# Output
OUTPUT_PRECISION = 18         # Significant digits in data files

# Default file names of the command line front end
INPUT_FILE = "input.dat"
TRAJECTORY_FILE = "trajectory.dat"
LOG_FILE = "log.dat"
RESULTS_FILE = "results.dat"


class OutputMode(IntEnum):
    """Projection written by the diagnostic writer."""

    NONE = 0                   # no output
    TRAJECTORY = 1             # x y
    PHASE_SPACE = 2            # theta dtheta/dt
    ENERGY = 3                 # t E
    X_OF_T = 4                 # t x
    Y_OF_T = 5                 # t y
    THETA_OF_T = 6             # t theta
    OMEGA_OF_T = 7             # t dtheta/dt
    ENERGY_PER_COLLISION = 8   # n E


# Modes that only make sense while the string is taut
TAUT_ONLY_MODES = (OutputMode.PHASE_SPACE, OutputMode.X_OF_T)

OUTPUT_MODE_DESCRIPTIONS = {
    OutputMode.NONE: "no output",
    OutputMode.TRAJECTORY: "trajectory equation",
    OutputMode.PHASE_SPACE: "phase space",
    OutputMode.ENERGY: "E(t)",
    OutputMode.X_OF_T: "x(t)",
    OutputMode.Y_OF_T: "y(t)",
    OutputMode.THETA_OF_T: "theta(t)",
    OutputMode.OMEGA_OF_T: "dtheta / dt (t)",
    OutputMode.ENERGY_PER_COLLISION: "E(nrCollisions)",
}


def launch_angle_from_degrees(degrees: float) -> float:
    """Convert an angle measured from the bottom [deg] to the internal angle [rad]."""
    return np.deg2rad(degrees) + BOTTOM_ANGLE


@dataclass
class PendulumConfig:
    """Configuration parameters for one pendulum run."""

    # Body
    mass: float = 1.0          # Bob mass [kg]
    length: float = 1.0        # String length [m]

    # Launch
    gamma: float = 3.0                  # omega0^2 * l / g, must be in (2, 5)
    launch_angle: float = BOTTOM_ANGLE  # [rad], measured from +x

    # Integration
    sim_time: float = 100.0    # Total simulated time [s]
    dt: float = 1e-4           # Time step [s]
    write_stride: int = 100    # Steps between diagnostic emissions
    max_collisions: int = 100  # Stop after this many collisions

    # Physics
    g: float = GRAVITY

    # Output
    output_mode: int = OutputMode.NONE
    verbose: bool = False

    @property
    def omega0(self) -> float:
        """Launch angular velocity derived from gamma."""
        return float(np.sqrt(self.gamma * self.g / self.length))

    def validate(self):
        """Raise ValueError if the parameters cannot describe a valid run."""
        if not GAMMA_MIN < self.gamma < GAMMA_MAX:
            raise ValueError(
                f"{self.gamma} is not a valid value for gamma "
                f"(must be between {GAMMA_MIN:g} and {GAMMA_MAX:g})")
        if self.max_collisions <= 0:
            raise ValueError(
                f"{self.max_collisions} is not a valid value for maximum number of collisions")
        if self.mass <= 0 or self.length <= 0:
            raise ValueError("mass and length must be positive")
        if self.dt <= 0 or self.sim_time <= 0:
            raise ValueError("time step and simulation time must be positive")
        if self.write_stride <= 0:
            raise ValueError("number of steps between file writes must be positive")
        if self.output_mode not in tuple(OutputMode):
            raise ValueError(f"Choice {self.output_mode} is unavailable")

    @classmethod
    def from_input_file(cls, path: str, **overrides) -> "PendulumConfig":
        """
        Read run parameters from a whitespace separated input file.

        The file holds, in S.I. units::

            mass length sim_time dt write_stride

        Parameters
        ----------
        path : str
            Input file name
        **overrides
            Remaining fields (gamma, max_collisions, output_mode, ...)

        Returns
        -------
        PendulumConfig
        """
        with open(path) as f:
            tokens = f.read().split()

        if len(tokens) < 5:
            raise ValueError(
                f"{path}: expected 'mass length sim_time dt write_stride', "
                f"got {len(tokens)} values")

        mass, length, sim_time, dt = (float(tok) for tok in tokens[:4])
        write_stride = int(tokens[4])

        return cls(mass=mass, length=length, sim_time=sim_time, dt=dt,
                   write_stride=write_stride, **overrides)


@dataclass
class CollisionEvent:
    """One re-engagement of the string."""

    index: int                 # 1-based collision number
    time: float
    x: float
    y: float
    theta: float
    case: str                  # Tangential projection case label (A8, B4/B5, ...)
    length_error: float        # r - |p| when the string caught
    energy_before: float
    energy_after: float


@dataclass
class RunResult:
    """Results from a pendulum run."""

    config: PendulumConfig = None

    # Termination
    stop_reason: str = ""      # 'time', 'collisions', 'energy' or 'error'
    error: Optional[str] = None

    # Final state
    time: float = 0.0
    n_steps: int = 0
    n_collisions: int = 0
    energy: float = 0.0
    last_collision_angle: float = 0.0

    # Collisions
    collisions: List[CollisionEvent] = field(default_factory=list)

    # Sampled traces (every write_stride steps)
    t: np.ndarray = None
    x: np.ndarray = None
    y: np.ndarray = None
    theta: np.ndarray = None
    dtheta: np.ndarray = None
    total_energy: np.ndarray = None
    tension: np.ndarray = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_results_line(self) -> str:
        """Render the tab separated line appended to the results file."""
        cfg = self.config
        head = f"{cfg.dt}\t{cfg.gamma}\t"
        if self.failed:
            head += f"err:\t{self.error}\t"
        values = (self.energy, self.last_collision_angle, self.time)
        tail = "\t".join(repr(float(v)) for v in values)
        return f"{head}{self.n_collisions}\t{tail}\n"
