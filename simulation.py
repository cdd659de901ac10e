"""
Slack Pendulum: Simulation Driver
=================================
Time loop around PendulumBody. Stops on the time limit, the collision cap,
energy exhaustion, or the first fatal PendulumError.
"""

import logging
from typing import Optional, TextIO

import numpy as np

from config import PendulumConfig, RunResult, SIGN_CHANGES_TO_STOP
from diagnostics import DiagnosticWriter
from errors import PendulumError
from pendulum_model import PendulumBody

logger = logging.getLogger(__name__)


def run_simulation(config: PendulumConfig, stream: Optional[TextIO] = None,
                   log: logging.Logger = None, record_trace: bool = True) -> RunResult:
    """
    Run one pendulum simulation.

    Parameters
    ----------
    config : PendulumConfig
        Run parameters
    stream : file-like, optional
        Destination of the diagnostic samples selected by config.output_mode
    log : logging.Logger, optional
        Destination of the event trace
    record_trace : bool
        Keep numpy traces sampled every config.write_stride steps

    Returns
    -------
    RunResult : Final state, collisions and traces. A fatal error stops the
        run; the result then holds the error message and the last valid state.
    """
    log = log if log is not None else logger
    cfg = config
    result = RunResult(config=cfg)

    writer = DiagnosticWriter(stream)
    body = PendulumBody.from_config(cfg, writer=writer, logger=log)

    trace = []

    def sample():
        trace.append((body.t, body.x, body.y, body.theta, body.dtheta,
                      body.energy(), body.tension))

    if record_trace:
        sample()

    # Energy needed to reach the horizontal, below it no collision can follow
    energy_floor = cfg.mass * cfg.g * cfg.length
    sign_changes = 0
    step = 0
    result.stop_reason = "time"

    while body.t < cfg.sim_time:
        if body.n_collisions >= cfg.max_collisions:
            result.stop_reason = "collisions"
            break

        old_dtheta = body.dtheta
        try:
            dtheta = body.move()

            # file size optimization
            if step % cfg.write_stride == 0:
                body.write(dtheta, body.t)
        except PendulumError as e:
            log.error("%s", e)
            result.error = str(e)
            result.stop_reason = "error"
            break

        if record_trace and step % cfg.write_stride == 0:
            sample()
        step += 1

        if body.energy() < energy_floor:
            if old_dtheta * dtheta < 0:
                sign_changes += 1
            # make sure that the ellipse in phase space is complete
            if sign_changes == SIGN_CHANGES_TO_STOP:
                result.stop_reason = "energy"
                break

    result.time = float(body.t)
    result.n_steps = step
    result.n_collisions = body.n_collisions
    result.energy = float(body.energy())
    result.last_collision_angle = float(body.last_collision_angle())
    result.collisions = list(body.collisions)

    if record_trace:
        data = np.array(trace)
        result.t = data[:, 0]
        result.x = data[:, 1]
        result.y = data[:, 2]
        result.theta = data[:, 3]
        result.dtheta = data[:, 4]
        result.total_energy = data[:, 5]
        result.tension = data[:, 6]

    return result


def test_simulation():
    """Run the reference case and print a summary."""
    print("=" * 60)
    print("Slack Pendulum Simulation Test")
    print("=" * 60)

    config = PendulumConfig(gamma=3.0, max_collisions=5, sim_time=50.0)
    print(f"\nConfiguration:")
    print(f"  mass: {config.mass} kg")
    print(f"  length: {config.length} m")
    print(f"  gamma: {config.gamma}")
    print(f"  omega0: {config.omega0:.6f} rad/s")
    print(f"  dt: {config.dt} s")

    print("\nRunning simulation...")
    result = run_simulation(config)

    print(f"\nResults:")
    print(f"  Stop reason: {result.stop_reason}")
    print(f"  Time: {result.time:.4f} s")
    print(f"  Number of collisions: {result.n_collisions}")
    print(f"  Energy: {result.energy:.10f}")
    for event in result.collisions:
        print(f"  #{event.index} t={event.time:.4f} case={event.case} "
              f"E: {event.energy_before:.6f} -> {event.energy_after:.6f}")
    if result.failed:
        print(f"  Error: {result.error}")

    return result


if __name__ == "__main__":
    result = test_simulation()
