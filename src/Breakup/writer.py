"""Chunk file writing.

A chunk file uses the grid-file grammar with the chunk's local dimensions:
column count, row count, threshold and iteration count on separate lines,
then one line per row of ``%7g``-formatted values, each followed by a space.
"""

import logging
from pathlib import Path

from .errors import GridIOError

log = logging.getLogger(__name__)


def format_value(value: float) -> str:
    """Six significant digits, right-aligned to width 7."""
    return f"{value:7g}"


def chunk_path(base, rank) -> Path:
    """Path of the chunk file for ``rank``: ``{base}.{rank}``."""
    return Path(f"{base}.{rank}")


def write_subgrid(grid, info, fp):
    """Stream the chunk described by ``info`` to the open text stream ``fp``.

    Parameters
    ----------
    grid : Grid
        Global grid.
    info : ChunkDescriptor
        Extents to write (halo included).
    fp : file-like
        Writable text stream.

    Raises
    ------
    GridIOError
        If any write fails. The destination may be partially written.
    """
    try:
        fp.write(f"{info.local_cols}\n{info.local_rows}\n{grid.eps:g}\n{grid.max_iterations}\n")
    except OSError as e:
        raise GridIOError(f"Error writing header to chunk file for rank {info.rank}: {e}") from e

    block = grid.values[info.slices()]
    try:
        for row in block:
            fp.write("".join(f"{format_value(v)} " for v in row))
            fp.write("\n")
    except OSError as e:
        raise GridIOError(f"Error writing data to chunk file for rank {info.rank}: {e}") from e


def write_chunk_file(grid, info, base) -> Path:
    """Create (or truncate) ``{base}.{rank}`` and write the chunk into it.

    A partially written file is removed before the error is raised.
    """
    path = chunk_path(base, info.rank)
    log.info(f"writing data for rank {info.rank} to {path}")

    try:
        fp = open(path, "w")
    except OSError as e:
        raise GridIOError(f"Unable to open file {path}: {e.strerror or e}") from e

    try:
        with fp:
            write_subgrid(grid, info, fp)
    except OSError as e:
        path.unlink(missing_ok=True)
        if isinstance(e, GridIOError):
            raise
        raise GridIOError(f"Error closing chunk file {path}: {e}") from e

    return path
