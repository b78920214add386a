from __future__ import annotations
import os
from typing import Sequence
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from tetherlab.trajectory import Trajectory


def _finish(fig: Figure, save_path: str | None, show: bool) -> Figure:
    fig.tight_layout()
    if save_path:
        os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
        fig.savefig(save_path, dpi=180, bbox_inches="tight")
    if show:
        plt.show()
    return fig


def plot_free_end(
    trajectory: Trajectory,
    save_path: str | None = None,
    show: bool = True,
) -> Figure:
    """
    Height and vertical velocity of the free end versus time (twin y-axes).

    Parameters
    ----------
    trajectory : Trajectory
    save_path : str | None
        If given, save the figure to this path (png/svg).
    show : bool
        Whether to call plt.show().

    Returns
    -------
    fig : Figure
    """
    t = trajectory.t
    z = trajectory.free_end_positions[:, 2]
    vz = trajectory.free_end_velocities[:, 2]

    fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    ax.plot(t, z, color="green", lw=2.0, label="pos_z")
    ax.set_xlabel("time [s]")
    ax.set_ylabel("pos_z [m]")
    ax.grid(True, alpha=0.3)

    ax_v = ax.twinx()
    ax_v.plot(t, vz, color="red", lw=1.5, label="vel_z")
    ax_v.set_ylabel("vel_z [m/s]")
    ax.set_title("Free end of the tether")
    return _finish(fig, save_path, show)


def plot_tether_snapshots(
    trajectory: Trajectory,
    times: Sequence[float] | None = None,
    save_path: str | None = None,
    show: bool = True,
) -> Figure:
    """
    Chain shape in the x-z plane at selected times.

    Parameters
    ----------
    trajectory : Trajectory
    times : Sequence[float] | None
        Times to draw; the nearest sample is used. Default: 6 evenly spaced samples.
    save_path : str | None
    show : bool

    Returns
    -------
    fig : Figure
    """
    if times is None:
        indices = np.linspace(0, len(trajectory) - 1, min(6, len(trajectory))).astype(int)
    else:
        indices = [int(np.argmin(np.abs(trajectory.t - tk))) for tk in times]

    fig, ax = plt.subplots(1, 1, figsize=(7, 7))
    colors = plt.cm.viridis(np.linspace(0.0, 1.0, len(indices)))
    for color, k in zip(colors, indices):
        pos = trajectory.positions[k]
        ax.plot(pos[:, 0], pos[:, 2], "-o", color=color, ms=3, label=f"t={trajectory.t[k]:.2f}s")
    ax.scatter([trajectory.positions[0, 0, 0]], [trajectory.positions[0, 0, 2]],
               color="#ea4335", s=40, zorder=3, label="anchor")
    ax.set_xlabel("x [m]"); ax.set_ylabel("z [m]")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    ax.set_title("Tether shape")
    return _finish(fig, save_path, show)


def plot_tensions(
    trajectory: Trajectory,
    save_path: str | None = None,
    show: bool = True,
) -> Figure:
    """Spring tension of every segment versus time. Needs trajectory.settings."""
    tensions = trajectory.tensions()

    fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    for i in range(tensions.shape[1]):
        ax.plot(trajectory.t, tensions[:, i], lw=1.5, label=f"segment {i + 1}")
    ax.set_xlabel("t [s]"); ax.set_ylabel("tension [N]")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    ax.set_title("Segment tensions")
    return _finish(fig, save_path, show)
