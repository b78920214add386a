"""
CSV logging for tether trajectories with buffered writes.

Buffers rows in memory and writes in batches to minimize I/O overhead.
Implements context manager protocol for safe resource handling.
"""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, TextIO

import numpy as np
from numpy.typing import NDArray

VALID_FIELDS = ("p", "v", "tension")


class CSVLogger:
    """
    Buffered CSV logger for tether samples.

    Parameters
    ----------
    filepath : str | Path
        Output CSV file path
    buffer_size : int
        Number of rows to buffer before writing. Higher = fewer writes but more memory.
    fields : list[str] | None
        What to log. Default: ["p", "v", "tension"]
        Options: "p" (node positions), "v" (node velocities),
                 "tension" (segment spring tensions)

    Notes
    -----
    Column layout: ``t``, then ``node{i}.p_x`` ... ``node{i}.v_z`` for every
    node, then ``segment{i}.tension`` for segments 1..n. The node columns
    match :meth:`tetherlab.trajectory.Trajectory.to_dataframe`.

    Examples
    --------
    >>> with CSVLogger("run.csv", fields=["p", "v"]) as logger:
    ...     for sample in trajectory:
    ...         logger.log(sample.t, sample.positions, sample.velocities)
    """

    def __init__(
        self,
        filepath: str | Path,
        buffer_size: int = 1000,
        fields: list[str] | None = None,
    ) -> None:
        self.filepath = Path(filepath)
        self.buffer_size = int(buffer_size)
        self.fields = list(fields) if fields is not None else list(VALID_FIELDS)

        invalid = set(self.fields) - set(VALID_FIELDS)
        if invalid:
            raise ValueError(f"Invalid fields: {invalid}. Valid options: {set(VALID_FIELDS)}")
        if self.buffer_size < 1:
            raise ValueError(f"buffer_size must be >= 1, got {buffer_size}")

        self._buffer: list[list[str]] = []
        self._file: TextIO | None = None
        self._writer: Any = None  # csv.writer is a function, not a type
        self._header_written = False

        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    def __enter__(self) -> CSVLogger:
        """Open (and truncate) the file for writing."""
        self._file = open(self.filepath, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        self._buffer.clear()
        self._header_written = False
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close file, flushing any remaining data."""
        self.close()

    @property
    def logs_tension(self) -> bool:
        return "tension" in self.fields

    def _write_header(self, node_count: int) -> None:
        hdr = ["t"]
        for i in range(node_count):
            for field in ("p", "v"):
                if field in self.fields:
                    hdr.extend(f"node{i}.{field}_{axis}" for axis in ("x", "y", "z"))
        if self.logs_tension:
            hdr.extend(f"segment{i}.tension" for i in range(1, node_count))

        self._writer.writerow(hdr)
        self._file.flush()
        self._header_written = True

    def log(
        self,
        t: float,
        positions: NDArray[np.float64],
        velocities: NDArray[np.float64],
        tensions: NDArray[np.float64] | None = None,
    ) -> None:
        """
        Buffer one sample.

        Parameters
        ----------
        t : float
            Sample time [s]
        positions, velocities : NDArray[np.float64]
            Node states (n+1, 3)
        tensions : NDArray[np.float64] | None
            Segment tensions (n,); required when "tension" is logged

        Notes
        -----
        Opens the file on first call if not using the context manager.
        Writes to disk when the buffer is full.
        """
        if self._file is None:
            self.__enter__()

        if not self._header_written:
            self._write_header(len(positions))

        row = [f"{t:.10f}"]
        for i in range(len(positions)):
            if "p" in self.fields:
                row.extend(f"{x:.10e}" for x in positions[i])
            if "v" in self.fields:
                row.extend(f"{x:.10e}" for x in velocities[i])
        if self.logs_tension:
            if tensions is None:
                raise ValueError("tensions are required when logging the 'tension' field")
            row.extend(f"{x:.10e}" for x in tensions)

        self._buffer.append(row)

        if len(self._buffer) >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write buffered data to disk and clear buffer."""
        if self._writer and self._buffer:
            self._writer.writerows(self._buffer)
            if self._file:
                self._file.flush()
            self._buffer.clear()

    def close(self) -> None:
        """Flush remaining data and close file."""
        self.flush()
        if self._file:
            self._file.close()
            self._file = None
            self._writer = None
