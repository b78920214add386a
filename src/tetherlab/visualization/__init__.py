from .plotting import plot_free_end, plot_tensions, plot_tether_snapshots

__all__ = ["plot_free_end", "plot_tether_snapshots", "plot_tensions"]
