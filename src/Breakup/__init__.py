"""Red/Black grid breakup package.

Splits a 2D relaxation-solver grid into rectangular chunks, one per worker
rank, each widened by a one-cell halo along internal boundaries, and writes
every chunk to its own file in the input grid format.

Components
----------
- load_grid: parse a grid file into a Grid
- get_chunk_extents / ChunkPlan: per-rank extents including halo
- write_subgrid / write_chunk_file: serialize one chunk
- break_grid_file / run: load once, write every rank, fail fast
"""

from .datastructures import (
    Grid,
    ChunkDescriptor,
    BreakupParams,
    BreakupResult,
)
from .errors import (
    BreakupError,
    FormatError,
    ValidationError,
    ConfigurationError,
    GridIOError,
)
from .loader import load_grid
from .decomposition import ChunkPlan, get_chunk_extents
from .writer import chunk_path, write_subgrid, write_chunk_file
from .breakup import break_grid_file, combine_chunk_files, run

__all__ = [
    # Data structures
    "Grid",
    "ChunkDescriptor",
    "BreakupParams",
    "BreakupResult",
    # Errors
    "BreakupError",
    "FormatError",
    "ValidationError",
    "ConfigurationError",
    "GridIOError",
    # Components
    "load_grid",
    "ChunkPlan",
    "get_chunk_extents",
    "chunk_path",
    "write_subgrid",
    "write_chunk_file",
    "break_grid_file",
    "combine_chunk_files",
    "run",
]
