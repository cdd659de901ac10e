"""
Slack Pendulum: Gamma Sweep
===========================
Collision statistics over a range of launch parameters.

For every gamma of the grid one run is made; the batch line
``dt gamma n_collisions energy last_angle t`` is appended to the results
file and a JSON summary is written at the end.
"""

import argparse
import json
import os
import time
import warnings
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List

import numpy as np

from config import PendulumConfig, RunResult, GAMMA_MIN, GAMMA_MAX, RESULTS_FILE
from simulation import run_simulation


@dataclass
class SweepResult:
    """Results from a gamma sweep."""
    gammas: np.ndarray
    n_collisions: np.ndarray
    energies: np.ndarray
    last_angles: np.ndarray
    errors: List[str] = field(default_factory=list)
    runs: List[RunResult] = field(default_factory=list)
    sweep_time: float = 0.0

    def to_dict(self) -> dict:
        return {
            "gamma": self.gammas.tolist(),
            "n_collisions": self.n_collisions.tolist(),
            "energy": self.energies.tolist(),
            "last_collision_angle": self.last_angles.tolist(),
            "errors": self.errors,
            "sweep_time_s": self.sweep_time,
            "finished": datetime.now().isoformat(),
        }


def gamma_grid(start: float, stop: float, n: int) -> np.ndarray:
    """Evenly spaced gamma values, dropping those outside (2, 5)."""
    gammas = np.linspace(start, stop, n)
    valid = (gammas > GAMMA_MIN) & (gammas < GAMMA_MAX)
    if not np.all(valid):
        warnings.warn(f"Dropping {np.count_nonzero(~valid)} gamma values outside "
                      f"({GAMMA_MIN:g}, {GAMMA_MAX:g})")
    return gammas[valid]


def run_sweep(gammas, base_config: PendulumConfig = None, results_file: str = None,
              verbose: bool = True) -> SweepResult:
    """
    Run one simulation per gamma.

    Parameters
    ----------
    gammas : array_like
        Launch parameters
    base_config : PendulumConfig, optional
        Remaining parameters shared by all runs
    results_file : str, optional
        Append one batch line per run to this file
    verbose : bool
        Print progress

    Returns
    -------
    SweepResult
    """
    base_config = base_config if base_config is not None else PendulumConfig()
    gammas = np.asarray(gammas, dtype=float)

    if verbose:
        print("=" * 60)
        print("Gamma Sweep")
        print("=" * 60)
        print(f"Runs: {len(gammas)}")
        print(f"dt: {base_config.dt}, max collisions: {base_config.max_collisions}")
        print()

    start_time = time.time()
    runs = []
    errors = []

    for i, gamma in enumerate(gammas):
        config = replace(base_config, gamma=float(gamma), output_mode=0)
        result = run_simulation(config, record_trace=False)
        runs.append(result)

        if result.failed:
            errors.append(f"gamma={gamma}: {result.error}")

        if results_file is not None:
            with open(results_file, 'a') as f:
                f.write(result.to_results_line())

        if verbose:
            status = f"ERROR ({result.error})" if result.failed else result.stop_reason
            print(f"  [{i + 1}/{len(gammas)}] gamma = {gamma:.4f}: "
                  f"{result.n_collisions} collisions, E = {result.energy:.6f}, {status}")

    sweep = SweepResult(
        gammas=gammas,
        n_collisions=np.array([r.n_collisions for r in runs], dtype=int),
        energies=np.array([r.energy for r in runs]),
        last_angles=np.array([r.last_collision_angle for r in runs]),
        errors=errors,
        runs=runs,
        sweep_time=time.time() - start_time,
    )

    if verbose:
        print(f"\nSweep finished in {sweep.sweep_time:.1f} s")

    return sweep


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Collision statistics of the slack pendulum over a range of gamma.")
    parser.add_argument("--start", type=float, default=2.05, help="first gamma")
    parser.add_argument("--stop", type=float, default=4.95, help="last gamma")
    parser.add_argument("-n", "--num", type=int, default=30, help="number of runs")
    parser.add_argument("--dt", type=float, default=1e-4, help="time step")
    parser.add_argument("--sim-time", type=float, default=1000.0, help="simulated time per run")
    parser.add_argument("--max-collisions", type=int, default=100,
                        help="collision cap per run")
    parser.add_argument("--results", default=RESULTS_FILE,
                        help="file the batch lines are appended to")
    parser.add_argument("--summary", default="sweep_summary.json",
                        help="JSON summary written at the end")
    args = parser.parse_args(argv)

    base = PendulumConfig(dt=args.dt, sim_time=args.sim_time,
                          max_collisions=args.max_collisions)
    sweep = run_sweep(gamma_grid(args.start, args.stop, args.num), base,
                      results_file=args.results)

    with open(args.summary, 'w') as f:
        json.dump(sweep.to_dict(), f, indent=2)

    print(f"Results appended to: {os.path.abspath(args.results)}")
    print(f"Summary saved to: {os.path.abspath(args.summary)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
