"""Break a grid file into per-rank chunk files.

The grid is loaded once, then every rank is planned and written in rank
order. The first failing rank stops the run; chunk files already written stay
on disk and the returned BreakupResult reports how many ranks succeeded.
"""

import logging
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from time import perf_counter

from .datastructures import BreakupParams, BreakupResult
from .decomposition import ChunkPlan
from .errors import BreakupError
from .loader import load_grid
from .writer import write_chunk_file

log = logging.getLogger(__name__)


def _process_rank(grid, plan, rank, output_base):
    """Plan one rank, then write its chunk file. Nothing is opened if planning fails."""
    info = plan.get_rank_info(rank)
    return write_chunk_file(grid, info, output_base)


def _record_failure(result, rank, error):
    log.error(f"rank {rank} failed: {error}")
    if result.failed_rank is None or rank < result.failed_rank:
        result.failed_rank = rank
        result.error = str(error)


def _run_sequential(grid, plan, output_base, result):
    for rank in range(plan.n_ranks):
        try:
            path = _process_rank(grid, plan, rank, output_base)
        except BreakupError as e:
            _record_failure(result, rank, e)
            break
        result.files.append(path)
        result.ranks_written += 1


def _run_threaded(grid, plan, output_base, result, max_workers):
    """Run ranks on a thread pool, submitting in rank order.

    Once any rank fails no further ranks are submitted; ranks already in
    flight are allowed to finish.
    """
    written = {}
    next_rank = 0

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        pending = {}
        while pending or (next_rank < plan.n_ranks and result.failed_rank is None):
            while (
                result.failed_rank is None
                and next_rank < plan.n_ranks
                and len(pending) < max_workers
            ):
                future = executor.submit(_process_rank, grid, plan, next_rank, output_base)
                pending[future] = next_rank
                next_rank += 1

            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                rank = pending.pop(future)
                try:
                    written[rank] = future.result()
                except BreakupError as e:
                    _record_failure(result, rank, e)

    result.files = [written[rank] for rank in sorted(written)]
    result.ranks_written = len(written)


def break_grid_file(input_path, output_base, num_row_chunks=1, num_col_chunks=1, max_workers=1):
    """Break ``input_path`` into ``num_row_chunks * num_col_chunks`` chunk files.

    Parameters
    ----------
    input_path : str or Path
        Grid file to break up.
    output_base : str or Path
        Base name; rank ``r`` is written to ``{output_base}.{r}``.
    num_row_chunks : int
        Number of row-wise chunks.
    num_col_chunks : int
        Number of column-wise chunks.
    max_workers : int
        Ranks processed concurrently. 1 processes them strictly in order.

    Returns
    -------
    BreakupResult
        Per-run outcome; ``success`` is False if any rank was not written.

    Raises
    ------
    BreakupError
        If the input grid cannot be loaded. No chunk files are written.
    """
    t0 = perf_counter()
    grid = load_grid(input_path)
    plan = ChunkPlan(grid.rows, grid.cols, num_row_chunks, num_col_chunks)
    result = BreakupResult(n_ranks=plan.n_ranks)

    log.info(
        f"Breaking {grid.rows} x {grid.cols} grid into {num_row_chunks} x {num_col_chunks} chunks"
    )

    try:
        if max_workers > 1:
            _run_threaded(grid, plan, output_base, result, max_workers)
        else:
            _run_sequential(grid, plan, output_base, result)
    finally:
        del grid

    result.wall_time = perf_counter() - t0

    if result.success:
        log.info(f"Wrote {result.ranks_written} chunk files in {result.wall_time:.3f}s")
    else:
        log.error(
            f"Breakup incomplete: {result.ranks_written} of {result.n_ranks} ranks written "
            f"(rank {result.failed_rank} failed)"
        )
    return result


def combine_chunk_files(input_base, output_path):
    """Reassemble chunk files into a global grid (reserved, not implemented)."""
    raise NotImplementedError("combine operation is not implemented")


def run(params: BreakupParams) -> BreakupResult:
    """Run the operation selected by ``params``."""
    if params.operation == "combine":
        return combine_chunk_files(params.input, params.output)

    log.info(f"Red/Black Breakup - processing file {params.input}")
    return break_grid_file(
        params.input,
        params.output,
        num_row_chunks=params.num_row_chunks,
        num_col_chunks=params.num_col_chunks,
        max_workers=params.max_workers,
    )
