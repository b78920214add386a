# src/tetherlab/utils/io.py
import pandas as pd
from pathlib import Path

from tetherlab.config import TetherSettings
from tetherlab.trajectory import Trajectory


def save_trajectory(trajectory: Trajectory, filepath: str | Path) -> Path:
    """
    Save a trajectory to CSV (one row per sample, columns as in the CSVLogger).

    Args:
        trajectory: Samples to export.
        filepath: Destination path (e.g., 'results/run1.csv').
    """
    if len(trajectory) == 0:
        raise ValueError("Trajectory is empty. Nothing to save.")

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    trajectory.to_dataframe().to_csv(path, index=False, float_format="%.10e")
    return path


def load_trajectory(filepath: str | Path, settings: TetherSettings | None = None) -> Trajectory:
    """Read a CSV written by save_trajectory or CSVLogger (position and velocity columns required)."""
    df = pd.read_csv(filepath)
    return Trajectory.from_dataframe(df, settings)
