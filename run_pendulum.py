"""
Slack Pendulum: Command Line
============================
Simulates the trajectory and the number of collisions (the string suddenly
stretching again) of a pendulum launched from the bottom with a velocity
perpendicular to the string. The launch is characterised by
gamma = omega0^2 * l / g, between 2 and 5.

Usage::

    run_pendulum.py                                     (interactive)
    run_pendulum.py GAMMA MAX_COLLISIONS [PHASE_FILE]   (batch)

Mass, string length, simulation time, time step and the number of steps
between file writes are read from ``input.dat``.

Interactive runs write the selected projection to ``trajectory.dat`` and
print the collision count and energy. Batch runs append
``dt gamma n_collisions energy last_angle t`` to ``results.dat``; with
PHASE_FILE the phase portrait is written there. ``--verbose`` traces every
collision to ``log.dat``.
"""

import argparse
import logging
import sys

from config import (
    PendulumConfig, OutputMode, OUTPUT_MODE_DESCRIPTIONS, BOTTOM_ANGLE,
    INPUT_FILE, TRAJECTORY_FILE, LOG_FILE, RESULTS_FILE,
)
from simulation import run_simulation


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Oscillatory-ballistic motion of a pendulum with a slack string.")
    parser.add_argument("gamma", nargs="?", type=float,
                        help="launch parameter omega0^2 * l / g, between 2 and 5")
    parser.add_argument("max_collisions", nargs="?", type=int,
                        help="stop after this many collisions")
    parser.add_argument("phase_file", nargs="?",
                        help="write the phase space portrait to this file")
    parser.add_argument("--input", default=INPUT_FILE,
                        help="mass, length, sim time, dt, write stride (default: %(default)s)")
    parser.add_argument("--output", default=TRAJECTORY_FILE,
                        help="diagnostic output of interactive runs (default: %(default)s)")
    parser.add_argument("--results", default=RESULTS_FILE,
                        help="batch results file (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help=f"trace collisions to {LOG_FILE}")
    return parser


def _make_logger(verbose: bool) -> logging.Logger:
    log = logging.getLogger("slack_pendulum")
    if verbose:
        handler = logging.FileHandler(LOG_FILE, mode='w')
        handler.setFormatter(logging.Formatter("%(message)s"))
        log.addHandler(handler)
        log.setLevel(logging.DEBUG)
    return log


def _prompt_output_mode() -> int:
    print("Possible output modes:")
    for mode in OutputMode:
        print(f"{int(mode)}. {OUTPUT_MODE_DESCRIPTIONS[mode]}")
    return int(input(f"Output mode(0 - {len(OutputMode) - 1}): "))


def _prompt_run_parameters():
    gamma = float(input("Gamma(between 2 and 5): "))
    max_collisions = int(input("Maximum number of collisions: "))
    return gamma, max_collisions


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    batch = args.gamma is not None

    if batch and args.max_collisions is None:
        parser.error("the batch mode needs both gamma and max_collisions")

    if batch:
        gamma, max_collisions = args.gamma, args.max_collisions
        output_mode = OutputMode.PHASE_SPACE if args.phase_file else OutputMode.NONE
        output_path = args.phase_file
    else:
        try:
            output_mode = _prompt_output_mode()
            gamma, max_collisions = _prompt_run_parameters()
        except ValueError as e:
            print(f"Invalid input: {e}. Try again.", file=sys.stderr)
            return 1
        output_path = args.output

    try:
        config = PendulumConfig.from_input_file(
            args.input,
            gamma=gamma,
            max_collisions=max_collisions,
            launch_angle=BOTTOM_ANGLE,
            output_mode=output_mode,
            verbose=args.verbose,
        )
        config.validate()
    except (OSError, ValueError) as e:
        print(f"{e}. Try again.", file=sys.stderr)
        if batch:
            parser.print_usage(sys.stderr)
        return 1

    log = _make_logger(config.verbose)

    if output_path is not None and config.output_mode != OutputMode.NONE:
        with open(output_path, 'w') as out:
            result = run_simulation(config, stream=out, log=log, record_trace=False)
    else:
        result = run_simulation(config, log=log, record_trace=False)

    if result.failed:
        print(f"{result.error}")

    if batch:
        with open(args.results, 'a') as f:
            f.write(result.to_results_line())
    else:
        print(f"Number of collisions: {result.n_collisions}")
        print(f"Energy: {result.energy!r}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
