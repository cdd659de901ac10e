"""
Slack Pendulum: Errors
======================
Failures that end a run. None of them is retried: the body reports the
failing condition and keeps its last valid state for the caller.
"""


class PendulumError(Exception):
    """Base class for fatal simulation errors."""


class GeometryExhausted(PendulumError):
    """No tangential projection case matches the collision geometry."""

    def __init__(self, theta: float, beta: float):
        self.theta = float(theta)
        self.beta = float(beta)
        super().__init__(
            f"Precision limit reached for the given parameters "
            f"(theta = {self.theta!r}, beta = {self.beta!r})")


class ConstraintViolated(PendulumError):
    """The bob moved too far from the anchor: the string broke."""

    def __init__(self, t: float, x: float, y: float, radius: float, length: float):
        self.t = float(t)
        self.x = float(x)
        self.y = float(y)
        self.radius = float(radius)
        self.length = float(length)
        super().__init__(
            f"The thread was broken at t = {self.t!r} "
            f"(|p| = {self.radius!r}, l = {self.length!r})")


class InvalidOutputSelector(PendulumError):
    """Unknown diagnostic output mode."""

    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Invalid output mode: {mode!r}")
