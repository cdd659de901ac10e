"""
Slack Pendulum: Diagnostic Output
=================================
Formats the selected projection of the body state as plain text columns,
one sample per line, suitable for gnuplot or numpy.loadtxt.
"""

from typing import Optional, TextIO

from config import OutputMode, OUTPUT_PRECISION
from errors import InvalidOutputSelector


class DiagnosticWriter:
    """
    Text sink for diagnostic samples.

    Parameters
    ----------
    stream : file-like, optional
        Destination. ``None`` discards every sample.
    precision : int
        Significant digits per value
    """

    def __init__(self, stream: Optional[TextIO] = None, precision: int = OUTPUT_PRECISION):
        self.stream = stream
        self.precision = precision
        self.lines_written = 0

    def _fmt(self, value) -> str:
        return f"{float(value):.{self.precision}g}"

    def _emit(self, *values):
        if self.stream is not None:
            self.stream.write(" ".join(self._fmt(v) for v in values) + "\n")
        self.lines_written += 1

    def break_segment(self):
        """Separate trajectory pieces (gnuplot data blocks)."""
        if self.stream is not None:
            self.stream.write("\n\n\n")

    def write(self, body, dtheta: float, t: float):
        """
        Emit one sample of ``body`` according to its current output mode.

        Parameters
        ----------
        body : PendulumBody
            Source of the state
        dtheta : float
            Angle increment of the last step
        t : float
            Elapsed time

        Raises
        ------
        InvalidOutputSelector
            If the body carries an unknown output mode
        """
        try:
            mode = OutputMode(body.output_mode)
        except ValueError:
            raise InvalidOutputSelector(body.output_mode) from None

        if mode == OutputMode.NONE:
            return

        if mode == OutputMode.TRAJECTORY:
            self._emit(body.x, body.y)
            if body.collision:
                self.break_segment()
        elif mode == OutputMode.PHASE_SPACE:
            self._emit(body.theta, dtheta / body.dt)
        elif mode == OutputMode.ENERGY:
            self._emit(t, body.energy())
        elif mode == OutputMode.X_OF_T:
            self._emit(t, body.x)
        elif mode == OutputMode.Y_OF_T:
            self._emit(t, body.y)
        elif mode == OutputMode.THETA_OF_T:
            self._emit(t, body.theta)
        elif mode == OutputMode.OMEGA_OF_T:
            self._emit(t, dtheta / body.dt)
        elif mode == OutputMode.ENERGY_PER_COLLISION:
            self._emit(body.n_collisions, body.energy())
