"""Domain decomposition of a 2D grid into halo-widened chunks.

Pure index arithmetic with no I/O: given the global grid extents and a
(row-chunks x column-chunks) factorization, compute the inclusive extents each
rank owns, widened by one ghost row/column along every internal boundary.
"""

import logging

import pandas as pd

from .datastructures import ChunkDescriptor
from .errors import ConfigurationError

log = logging.getLogger(__name__)

# Smallest chunk span (halo included) along each axis
MIN_CHUNK_CELLS = 3


def split_extent(index: int, n: int, parts: int) -> tuple[int, int]:
    """Inclusive [start, end] of piece ``index`` when splitting ``n`` cells into ``parts``.

    Uses truncating integer division, so uneven remainders are spread by
    truncation rather than rebalanced.
    """
    start = index * n // parts
    end = (index + 1) * n // parts - 1
    return start, end


def get_chunk_extents(rank, global_rows, global_cols, num_row_chunks, num_col_chunks):
    """Compute the extents of the chunk owned by ``rank``.

    Parameters
    ----------
    rank : int
        Chunk rank, row-major over the chunk grid.
    global_rows, global_cols : int
        Global grid dimensions.
    num_row_chunks, num_col_chunks : int
        Number of chunks along the row and column axes.

    Returns
    -------
    ChunkDescriptor
        Inclusive extents in global coordinates, halo included.

    Raises
    ------
    ConfigurationError
        If the chunk spans fewer than 3 rows or 3 columns including halo.
    """
    if num_row_chunks <= 0 or num_col_chunks <= 0:
        raise ValueError(
            f"Chunk counts must be positive, got {num_row_chunks} x {num_col_chunks}"
        )

    chunk_row = rank // num_col_chunks
    chunk_col = rank % num_col_chunks

    inner_start_row, inner_end_row = split_extent(chunk_row, global_rows, num_row_chunks)
    inner_start_col, inner_end_col = split_extent(chunk_col, global_cols, num_col_chunks)

    start_row, end_row = inner_start_row, inner_end_row
    start_col, end_col = inner_start_col, inner_end_col

    # Ghost lines on every side that faces another chunk
    if chunk_row > 0:
        start_row -= 1  # north
    if chunk_row < num_row_chunks - 1:
        end_row += 1  # south
    if chunk_col > 0:
        start_col -= 1  # west
    if chunk_col < num_col_chunks - 1:
        end_col += 1  # east

    log.debug(
        f"chunk for rank {rank} is rows {start_row}-{end_row}, cols {start_col}-{end_col}"
    )

    if (end_row - start_row) < MIN_CHUNK_CELLS - 1 or (end_col - start_col) < MIN_CHUNK_CELLS - 1:
        raise ConfigurationError(
            f"Invalid breakup for a {global_rows} x {global_cols} grid: rank {rank} would span "
            f"{end_row - start_row + 1} x {end_col - start_col + 1} cells; chunks must be at "
            f"least {MIN_CHUNK_CELLS} cells in all dimensions"
        )

    return ChunkDescriptor(
        rank=rank,
        start_row=start_row,
        end_row=end_row,
        start_col=start_col,
        end_col=end_col,
        chunk_row=chunk_row,
        chunk_col=chunk_col,
        inner_start_row=inner_start_row,
        inner_end_row=inner_end_row,
        inner_start_col=inner_start_col,
        inner_end_col=inner_end_col,
    )


class ChunkPlan:
    """Chunk layout for one grid and one factorization.

    Parameters
    ----------
    global_rows, global_cols : int
        Global grid dimensions.
    num_row_chunks : int
        Number of row-wise chunks (``-jchunk``).
    num_col_chunks : int
        Number of column-wise chunks (``-ichunk``).

    Examples
    --------
    >>> plan = ChunkPlan(global_rows=4, global_cols=4, num_row_chunks=2, num_col_chunks=1)
    >>> info = plan.get_rank_info(1)
    >>> (info.start_row, info.end_row)
    (1, 3)
    """

    def __init__(self, global_rows, global_cols, num_row_chunks=1, num_col_chunks=1):
        if num_row_chunks <= 0 or num_col_chunks <= 0:
            raise ValueError(
                f"Chunk counts must be positive, got {num_row_chunks} x {num_col_chunks}"
            )
        self.global_rows = global_rows
        self.global_cols = global_cols
        self.num_row_chunks = num_row_chunks
        self.num_col_chunks = num_col_chunks

    @property
    def n_ranks(self) -> int:
        return self.num_row_chunks * self.num_col_chunks

    # =========================================================================
    # Query Interface
    # =========================================================================

    def get_rank_info(self, rank):
        """Plan the chunk for ``rank``; raises ConfigurationError if it is too small."""
        if not 0 <= rank < self.n_ranks:
            raise ValueError(f"Rank {rank} out of range [0, {self.n_ranks - 1}]")
        return get_chunk_extents(
            rank,
            self.global_rows,
            self.global_cols,
            self.num_row_chunks,
            self.num_col_chunks,
        )

    def get_all_rank_info(self):
        """Plan every rank in rank order."""
        return [self.get_rank_info(rank) for rank in range(self.n_ranks)]

    def validate(self):
        """Raise the first ConfigurationError of the factorization, if any."""
        self.get_all_rank_info()

    def neighbors(self, rank) -> dict:
        """Ranks sharing a halo with ``rank`` (None at the global perimeter)."""
        if not 0 <= rank < self.n_ranks:
            raise ValueError(f"Rank {rank} out of range [0, {self.n_ranks - 1}]")
        row, col = divmod(rank, self.num_col_chunks)
        return {
            "north": rank - self.num_col_chunks if row > 0 else None,
            "south": rank + self.num_col_chunks if row < self.num_row_chunks - 1 else None,
            "west": rank - 1 if col > 0 else None,
            "east": rank + 1 if col < self.num_col_chunks - 1 else None,
        }

    def to_frame(self) -> pd.DataFrame:
        """Extents of every rank as a DataFrame indexed by rank."""
        records = [info.to_dict() for info in self.get_all_rank_info()]
        return pd.DataFrame.from_records(records).set_index("rank")
