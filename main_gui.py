"""
Slack Pendulum: Visualization and Animation
===========================================
Plots for a pendulum run:
- Animation of the bob and string
- Trajectory with collision points
- Phase portrait (theta vs dtheta/dt)
- Energy and tension over time
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.patches import Circle
import matplotlib.gridspec as gridspec

from config import PendulumConfig, RunResult
from simulation import run_simulation


class PendulumVisualizer:
    """
    Interactive visualization for pendulum runs.
    """

    def __init__(self, config: PendulumConfig = None):
        """
        Initialize visualizer.

        Parameters
        ----------
        config : PendulumConfig, optional
            Run parameters
        """
        self.config = config if config is not None else PendulumConfig()
        self.result = None
        self.animation = None

        # Figure and axes
        self.fig = None
        self.ax_main = None
        self.ax_info = None
        self.ax_phase = None
        self.ax_energy = None
        self.ax_tension = None

        # Plot elements
        self._plot_elements = {}

    def run_simulation(self) -> RunResult:
        """Run simulation with current config."""
        self.result = run_simulation(self.config)
        return self.result

    def create_figure(self):
        """Create the main figure with all subplots."""
        self.fig = plt.figure(figsize=(14, 9))
        self.fig.suptitle('Slack Pendulum Simulator', fontsize=14, fontweight='bold')

        gs = gridspec.GridSpec(2, 3, figure=self.fig, height_ratios=[2, 1],
                               hspace=0.3, wspace=0.3)

        # Main animation plot (spans 2 columns)
        self.ax_main = self.fig.add_subplot(gs[0, :2])
        self.ax_main.set_title('Pendulum')
        self.ax_main.set_xlabel('X [m]')
        self.ax_main.set_ylabel('Y [m]')
        self.ax_main.set_aspect('equal')
        self.ax_main.grid(True, alpha=0.3)

        # Info panel (right side)
        self.ax_info = self.fig.add_subplot(gs[0, 2])
        self.ax_info.axis('off')

        self.ax_phase = self.fig.add_subplot(gs[1, 0])
        self.ax_energy = self.fig.add_subplot(gs[1, 1])
        self.ax_tension = self.fig.add_subplot(gs[1, 2])

        return self.fig

    def _init_plot_elements(self):
        """Initialize plot elements for animation."""
        ax = self.ax_main
        l = self.config.length

        ax.set_xlim(-1.3 * l, 1.3 * l)
        ax.set_ylim(-1.3 * l, 1.3 * l)

        # Circle reachable by a taut string
        self._plot_elements['circle'] = Circle((0, 0), l, fill=False, color='gray',
                                               linestyle=':', alpha=0.6)
        ax.add_patch(self._plot_elements['circle'])

        # Anchor
        self._plot_elements['anchor'] = Circle((0, 0), 0.03 * l, color='black', zorder=10)
        ax.add_patch(self._plot_elements['anchor'])

        self._plot_elements['string'], = ax.plot([], [], 'k-', linewidth=1.5, label='String')
        self._plot_elements['bob'] = Circle((0, 0), 0.05 * l, color='tab:red', zorder=5)
        ax.add_patch(self._plot_elements['bob'])

        # Trajectory trail
        self._plot_elements['trail'], = ax.plot([], [], 'tab:blue', linewidth=1, alpha=0.5)

        # Collision points
        if self.result is not None and self.result.collisions:
            xc = [c.x for c in self.result.collisions]
            yc = [c.y for c in self.result.collisions]
            self._plot_elements['collisions'], = ax.plot(xc, yc, 'rx', markersize=8,
                                                         label='Collisions')

        self._plot_elements['time_text'] = ax.text(0.02, 0.98, '', transform=ax.transAxes,
                                                   verticalalignment='top', fontsize=10)

        ax.legend(loc='upper right', fontsize=8)

    def _update_main_plot(self, frame_idx: int):
        """Update main animation plot for given frame."""
        if self.result is None or self.result.t is None:
            return

        n_frames = len(self.result.t)
        if frame_idx >= n_frames:
            frame_idx = n_frames - 1

        x = self.result.x[frame_idx]
        y = self.result.y[frame_idx]
        taut = self.result.tension[frame_idx] > 0

        # Draw the string only while it is stretched
        if taut:
            self._plot_elements['string'].set_data([0, x], [0, y])
        else:
            self._plot_elements['string'].set_data([], [])

        self._plot_elements['bob'].center = (x, y)
        self._plot_elements['trail'].set_data(self.result.x[:frame_idx + 1],
                                              self.result.y[:frame_idx + 1])

        t = self.result.t[frame_idx]
        state = 'taut' if taut else 'slack'
        self._plot_elements['time_text'].set_text(f't = {t:.3f} s ({state})')

    def _update_info_panel(self):
        """Update info panel with results."""
        self.ax_info.clear()
        self.ax_info.axis('off')

        if self.result is None:
            return

        cfg = self.config
        res = self.result
        lines = [
            "CONFIGURATION",
            f"mass: {cfg.mass:.3f} kg",
            f"length: {cfg.length:.3f} m",
            f"gamma: {cfg.gamma:.4f}",
            f"omega0: {cfg.omega0:.4f} rad/s",
            f"dt: {cfg.dt:g} s",
            "",
            "RESULTS",
            f"Stop reason: {res.stop_reason}",
            f"Time: {res.time:.3f} s",
            f"Collisions: {res.n_collisions}",
            f"Energy: {res.energy:.6f} J",
            f"Last collision angle: {np.rad2deg(res.last_collision_angle):.2f} deg",
        ]
        if res.failed:
            lines += ["", "ERROR", res.error]

        text = '\n'.join(lines)
        self.ax_info.text(0.05, 0.95, text, transform=self.ax_info.transAxes,
                          verticalalignment='top', fontsize=9, family='monospace')

    def _plot_phase(self, ax=None):
        """Plot the phase portrait over the taut samples."""
        ax = ax if ax is not None else self.ax_phase
        ax.clear()
        ax.set_title('Phase Portrait')
        ax.set_xlabel('θ [rad]')
        ax.set_ylabel('dθ/dt [rad/s]')
        ax.grid(True, alpha=0.3)

        if self.result is None or self.result.t is None:
            return

        taut = self.result.tension > 0
        omega = self.result.dtheta / self.config.dt
        ax.plot(self.result.theta[taut], omega[taut], '.', markersize=1)

    def _plot_energy(self, ax=None):
        """Plot energy vs time, collisions marked."""
        ax = ax if ax is not None else self.ax_energy
        ax.clear()
        ax.set_title('Energy')
        ax.set_xlabel('Time [s]')
        ax.set_ylabel('Energy [J]')
        ax.grid(True, alpha=0.3)

        if self.result is None or self.result.t is None:
            return

        ax.plot(self.result.t, self.result.total_energy, 'k-')
        for event in self.result.collisions:
            ax.axvline(x=event.time, color='red', linestyle='--', alpha=0.4)

    def _plot_tension(self, ax=None):
        """Plot string tension vs time."""
        ax = ax if ax is not None else self.ax_tension
        ax.clear()
        ax.set_title('String Tension')
        ax.set_xlabel('Time [s]')
        ax.set_ylabel('Tension [N]')
        ax.grid(True, alpha=0.3)

        if self.result is None or self.result.t is None:
            return

        t = self.result.t
        tension = self.result.tension
        ax.plot(t, tension, 'r-')

        # Mark slack intervals
        slack = tension <= 0
        if np.any(slack):
            ax.fill_between(t, 0, np.max(tension), where=slack,
                            color='gray', alpha=0.2, label='SLACK')
            ax.legend(fontsize=8)

    def animate(self, interval: int = 30, repeat: bool = True, show: bool = True):
        """
        Create and show animation.

        Parameters
        ----------
        interval : int
            Frame interval in milliseconds
        repeat : bool
            Whether to loop animation
        show : bool
            Call plt.show()
        """
        if self.result is None:
            self.run_simulation()

        if self.fig is None:
            self.create_figure()

        self._init_plot_elements()

        self._update_info_panel()
        self._plot_phase()
        self._plot_energy()
        self._plot_tension()

        n_frames = len(self.result.t) if self.result.t is not None else 1

        def init():
            return list(self._plot_elements.values())

        def update(frame):
            self._update_main_plot(frame)
            return list(self._plot_elements.values())

        self.animation = FuncAnimation(
            self.fig, update, frames=n_frames,
            init_func=init, interval=interval,
            blit=False, repeat=repeat
        )

        if show:
            plt.show()
        return self.animation

    def plot_static(self, show: bool = True):
        """Show static plots (no animation)."""
        if self.result is None:
            self.run_simulation()

        if self.fig is None:
            self.create_figure()

        self._init_plot_elements()

        # Plot final state with the whole trail
        if self.result.t is not None:
            self._update_main_plot(len(self.result.t) - 1)

        self._update_info_panel()
        self._plot_phase()
        self._plot_energy()
        self._plot_tension()

        if show:
            plt.show()
        return self.fig

    def plot_trajectory(self, show: bool = True):
        """Plot just the bob trajectory."""
        if self.result is None:
            self.run_simulation()

        fig, ax = plt.subplots(figsize=(8, 8))
        ax.set_title('Trajectory')
        ax.set_xlabel('X [m]')
        ax.set_ylabel('Y [m]')
        ax.set_aspect('equal')
        ax.grid(True, alpha=0.3)

        l = self.config.length
        ax.add_patch(Circle((0, 0), l, fill=False, color='gray', linestyle=':'))

        taut = self.result.tension > 0
        ax.plot(self.result.x[taut], self.result.y[taut], 'b.', markersize=1, label='Taut')
        ax.plot(self.result.x[~taut], self.result.y[~taut], '.', color='orange',
                markersize=1, label='Slack')

        if self.result.collisions:
            ax.plot([c.x for c in self.result.collisions],
                    [c.y for c in self.result.collisions],
                    'rx', markersize=10, markeredgewidth=2, label='Collisions')

        ax.legend()
        if show:
            plt.show()
        return fig


def compare_gammas(gammas=(2.5, 3.0, 3.5, 4.0), show: bool = True):
    """Compare trajectories for several launch parameters."""
    fig, axes = plt.subplots(2, 2, figsize=(12, 12))
    axes = axes.flatten()

    for ax, gamma in zip(axes, gammas):
        config = PendulumConfig(gamma=gamma, max_collisions=10, sim_time=60.0)
        result = run_simulation(config)

        ax.set_title(f'gamma = {gamma}\nCollisions: {result.n_collisions}')
        ax.set_xlabel('X [m]')
        ax.set_ylabel('Y [m]')
        ax.set_aspect('equal')
        ax.grid(True, alpha=0.3)

        ax.plot(result.x, result.y, 'b-', linewidth=0.5)
        if result.collisions:
            ax.plot([c.x for c in result.collisions], [c.y for c in result.collisions], 'rx')

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def interactive_demo(gamma: float = 3.0):
    """Run interactive demo."""
    config = PendulumConfig(gamma=gamma, max_collisions=10, sim_time=60.0,
                            write_stride=200)
    viz = PendulumVisualizer(config)

    print("Running simulation...")
    result = viz.run_simulation()

    print(f"\nResults:")
    print(f"  Collisions: {result.n_collisions}")
    print(f"  Energy: {result.energy:.6f}")
    print(f"  Stop reason: {result.stop_reason}")

    print("\nStarting animation...")
    viz.animate(interval=20)


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == '--compare':
        compare_gammas()
    elif len(sys.argv) > 1 and sys.argv[1] == '--trajectory':
        viz = PendulumVisualizer()
        viz.run_simulation()
        viz.plot_trajectory()
    elif len(sys.argv) > 1 and sys.argv[1] == '--static':
        viz = PendulumVisualizer()
        viz.run_simulation()
        viz.plot_static()
    else:
        interactive_demo()
