"""Data structures for grid breakup configuration and results.

Architecture: input grid, per-rank geometry, run config and run results

                 Params (input/config)         Results (output)
                 ─────────────────────         ────────────────
Global           Grid                          BreakupResult
(one per run)    rows, cols, eps,              ranks_written, files,
                 max_iterations, values        failed_rank, wall_time...

Per-rank         ChunkDescriptor
                 rank, start/end row/col
                 (halo included)...

BreakupParams carries the run configuration built once by the CLI or Hydra.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import numpy as np


# ============================================================================
# Global grid
# ============================================================================


@dataclass(frozen=True, eq=False)
class Grid:
    """Global grid loaded from a grid file.

    ``values`` is a C-ordered float64 array of shape ``(rows, cols)``, so the
    element (r, c) sits at flat index ``r * cols + c``. The array is made
    read-only on construction.
    """

    rows: int
    cols: int
    eps: float
    max_iterations: int
    values: np.ndarray

    def __post_init__(self):
        values = np.ascontiguousarray(self.values, dtype=np.float64)
        if values.shape != (self.rows, self.cols):
            values = values.reshape(self.rows, self.cols)
        values.flags.writeable = False
        object.__setattr__(self, "values", values)

    @property
    def flat(self) -> np.ndarray:
        """Row-major flat view of the values."""
        return self.values.ravel()

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)


# ============================================================================
# Per-rank geometry
# ============================================================================


@dataclass(frozen=True)
class ChunkDescriptor:
    """Extents owned by a single rank.

    All bounds are inclusive, 0-based and in global grid coordinates. The
    ``start_*``/``end_*`` fields already include the halo; ``inner_*`` are the
    extents before halo widening.
    """

    rank: int
    start_row: int
    end_row: int
    start_col: int
    end_col: int

    # Position in the chunk grid
    chunk_row: int = 0
    chunk_col: int = 0

    # Extents before halo widening
    inner_start_row: Optional[int] = None
    inner_end_row: Optional[int] = None
    inner_start_col: Optional[int] = None
    inner_end_col: Optional[int] = None

    @property
    def local_rows(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def local_cols(self) -> int:
        return self.end_col - self.start_col + 1

    @property
    def local_shape(self) -> tuple[int, int]:
        return (self.local_rows, self.local_cols)

    def slices(self) -> tuple[slice, slice]:
        """Slices selecting this chunk (halo included) from the global array."""
        return (
            slice(self.start_row, self.end_row + 1),
            slice(self.start_col, self.end_col + 1),
        )

    def inner_slices(self) -> tuple[slice, slice]:
        """Slices selecting the cells this rank owns exclusively."""
        return (
            slice(self.inner_start_row, self.inner_end_row + 1),
            slice(self.inner_start_col, self.inner_end_col + 1),
        )

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "chunk_row": self.chunk_row,
            "chunk_col": self.chunk_col,
            "start_row": self.start_row,
            "end_row": self.end_row,
            "start_col": self.start_col,
            "end_col": self.end_col,
            "local_rows": self.local_rows,
            "local_cols": self.local_cols,
        }


# ============================================================================
# Run configuration
# ============================================================================

OPERATIONS = ("breakup", "combine")


@dataclass
class BreakupParams:
    """Run configuration, built once by argument parsing or Hydra.

    ``num_col_chunks`` is the CLI's ``-ichunk`` (column-wise chunks) and
    ``num_row_chunks`` is ``-jchunk`` (row-wise chunks). An empty ``output``
    means "use the input path as the base name".
    """

    input: str = "sample.txt"
    output: Optional[str] = None
    num_row_chunks: int = 1
    num_col_chunks: int = 1
    operation: str = "breakup"  # "breakup" | "combine"
    max_workers: int = 1

    def __post_init__(self):
        if not self.output:
            self.output = self.input
        if self.operation not in OPERATIONS:
            raise ValueError(f"Unknown operation: {self.operation}")
        if self.num_row_chunks <= 0 or self.num_col_chunks <= 0:
            raise ValueError(
                f"Chunk counts must be positive, got {self.num_row_chunks} x {self.num_col_chunks}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @property
    def n_ranks(self) -> int:
        return self.num_row_chunks * self.num_col_chunks


# ============================================================================
# Run results
# ============================================================================


@dataclass
class BreakupResult:
    """Outcome of one breakup run.

    ``ranks_written`` counts the chunk files that were completely written, so
    callers can decide whether to clean up after a partial run.
    """

    n_ranks: int
    ranks_written: int = 0
    files: List[Path] = field(default_factory=list)
    failed_rank: Optional[int] = None
    error: Optional[str] = None
    wall_time: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.failed_rank is None and self.ranks_written == self.n_ranks

    def to_dict(self) -> dict:
        """Convert to a plain dict (paths as strings, None values dropped)."""
        out = {
            "n_ranks": self.n_ranks,
            "ranks_written": self.ranks_written,
            "files": [str(p) for p in self.files],
            "success": self.success,
        }
        for key in ("failed_rank", "error", "wall_time"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out
