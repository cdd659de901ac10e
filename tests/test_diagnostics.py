import io
from types import SimpleNamespace

import pytest
from config import OutputMode
from diagnostics import DiagnosticWriter
from errors import InvalidOutputSelector


def _body(mode, collision=False):
    return SimpleNamespace(
        output_mode=mode, x=0.5, y=-0.25, theta=4.0, dt=0.01,
        collision=collision, n_collisions=2, energy=lambda: 1.5,
    )

def _lines(mode, **kwargs):
    out = io.StringIO()
    DiagnosticWriter(out).write(_body(mode, **kwargs), 0.02, 3.0)
    return out.getvalue()


@pytest.mark.parametrize("mode, expected", [
    (OutputMode.TRAJECTORY, "0.5 -0.25\n"),
    (OutputMode.PHASE_SPACE, "4 2\n"),
    (OutputMode.ENERGY, "3 1.5\n"),
    (OutputMode.X_OF_T, "3 0.5\n"),
    (OutputMode.Y_OF_T, "3 -0.25\n"),
    (OutputMode.THETA_OF_T, "3 4\n"),
    (OutputMode.ENERGY_PER_COLLISION, "2 1.5\n"),
])
def test_modes(mode, expected):
    assert _lines(mode) == expected

def test_omega_uses_time_step():
    t, omega = _lines(OutputMode.OMEGA_OF_T).split()
    assert float(t) == 3.0
    assert float(omega) == pytest.approx(2.0)

def test_none_writes_nothing():
    out = io.StringIO()
    writer = DiagnosticWriter(out)
    writer.write(_body(OutputMode.NONE), 0.0, 0.0)
    assert out.getvalue() == ""
    assert writer.lines_written == 0

def test_trajectory_break_after_collision():
    assert _lines(OutputMode.TRAJECTORY, collision=True) == "0.5 -0.25\n\n\n\n"

def test_integer_mode_accepted():
    assert _lines(3) == "3 1.5\n"

@pytest.mark.parametrize("mode", [9, 10, -1])
def test_invalid_mode(mode):
    with pytest.raises(InvalidOutputSelector) as excinfo:
        DiagnosticWriter(io.StringIO()).write(_body(mode), 0.0, 0.0)
    assert excinfo.value.mode == mode

def test_discarding_writer_counts_lines():
    writer = DiagnosticWriter()
    writer.write(_body(OutputMode.ENERGY), 0.0, 1.0)
    writer.break_segment()
    assert writer.lines_written == 1

def test_full_precision():
    out = io.StringIO()
    body = _body(OutputMode.X_OF_T)
    body.x = 0.1
    DiagnosticWriter(out).write(body, 0.0, 1.0)
    assert float(out.getvalue().split()[1]) == 0.1
