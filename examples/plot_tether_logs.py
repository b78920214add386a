"""
Standalone plotting script for existing simulation logs.

Useful for re-generating plots after a simulation has completed.
"""
import sys
from pathlib import Path
import argparse

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tetherlab.utils.io import load_trajectory
from tetherlab.visualization.plotting import (
    plot_free_end,
    plot_tether_snapshots,
)


def main():
    """Plot simulation results from CSV log."""
    parser = argparse.ArgumentParser(
        description="Generate plots from tetherlab simulation logs"
    )
    parser.add_argument(
        "csv_path",
        type=str,
        help="Path to simulation CSV file"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for plots (default: same as CSV)"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display plots interactively"
    )

    args = parser.parse_args()

    csv_path = Path(args.csv_path)
    if not csv_path.exists():
        print(f"Error: CSV file not found: {csv_path}")
        sys.exit(1)

    output_dir = Path(args.output_dir) if args.output_dir else csv_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    traj = load_trajectory(csv_path)
    print(f"Loaded {len(traj)} samples, {traj.segments} segments")

    plot_free_end(traj, save_path=str(output_dir / "free_end.png"), show=args.show)
    plot_tether_snapshots(traj, save_path=str(output_dir / "snapshots.png"), show=args.show)
    print(f"Plots saved to: {output_dir}")


if __name__ == "__main__":
    main()
