"""Tests for chunk extent planning."""

import numpy as np
import pytest
from Breakup import ChunkPlan, ConfigurationError, get_chunk_extents

VALID_LAYOUTS = [
    (4, 4, 2, 1),
    (4, 4, 1, 2),
    (10, 12, 3, 4),
    (7, 9, 2, 3),
    (50, 37, 5, 4),
    (5, 5, 1, 1),
    (8, 3, 2, 1),
    (101, 64, 7, 9),
]


class TestPartitionCoverage:
    """Inner extents tile the global grid exactly."""

    @pytest.mark.parametrize("rows,cols,nr,nc", VALID_LAYOUTS)
    def test_full_coverage_no_overlaps(self, rows, cols, nr, nc):
        """Each global cell is owned by exactly one rank's inner region."""
        plan = ChunkPlan(rows, cols, nr, nc)

        owners = np.zeros((rows, cols), dtype=int)
        for info in plan.get_all_rank_info():
            owners[info.inner_slices()] += 1

        assert np.all(owners == 1)

    @pytest.mark.parametrize("rows,cols,nr,nc", VALID_LAYOUTS)
    def test_rank_is_row_major(self, rows, cols, nr, nc):
        """rank = chunk_row * num_col_chunks + chunk_col."""
        plan = ChunkPlan(rows, cols, nr, nc)

        for info in plan.get_all_rank_info():
            assert info.rank == info.chunk_row * nc + info.chunk_col

    def test_uneven_division_truncates(self):
        """Remainders are spread by truncating division, not rebalanced."""
        plan = ChunkPlan(10, 6, 3, 1)
        inner = [(i.inner_start_row, i.inner_end_row) for i in plan.get_all_rank_info()]

        assert inner == [(0, 2), (3, 5), (6, 9)]


class TestHalo:
    """Halo widening along internal boundaries only."""

    @pytest.mark.parametrize("rows,cols,nr,nc", VALID_LAYOUTS)
    def test_halo_reaches_one_cell_into_neighbor(self, rows, cols, nr, nc):
        """Neighboring extents each reach exactly one cell into the other's inner region."""
        plan = ChunkPlan(rows, cols, nr, nc)

        for info in plan.get_all_rank_info():
            nbrs = plan.neighbors(info.rank)
            if nbrs["south"] is not None:
                south = plan.get_rank_info(nbrs["south"])
                assert info.end_row == south.inner_start_row
                assert south.start_row == info.inner_end_row
            if nbrs["east"] is not None:
                east = plan.get_rank_info(nbrs["east"])
                assert info.end_col == east.inner_start_col
                assert east.start_col == info.inner_end_col

    @pytest.mark.parametrize("rows,cols,nr,nc", VALID_LAYOUTS)
    def test_no_halo_on_global_perimeter(self, rows, cols, nr, nc):
        """Perimeter sides keep their inner extent."""
        plan = ChunkPlan(rows, cols, nr, nc)

        for info in plan.get_all_rank_info():
            if info.chunk_row == 0:
                assert info.start_row == 0
            if info.chunk_row == nr - 1:
                assert info.end_row == rows - 1
            if info.chunk_col == 0:
                assert info.start_col == 0
            if info.chunk_col == nc - 1:
                assert info.end_col == cols - 1

    @pytest.mark.parametrize("rows,cols,nr,nc", VALID_LAYOUTS)
    def test_minimum_size(self, rows, cols, nr, nc):
        """Every planned chunk spans at least 3 x 3 cells."""
        for info in ChunkPlan(rows, cols, nr, nc).get_all_rank_info():
            assert info.local_rows >= 3
            assert info.local_cols >= 3

    def test_single_rank_gets_whole_grid(self):
        """A 1 x 1 factorization has no halo at all."""
        info = get_chunk_extents(0, 5, 7, 1, 1)

        assert (info.start_row, info.end_row, info.start_col, info.end_col) == (0, 4, 0, 6)
        assert info.local_shape == (5, 7)


class TestScenarios:
    """Worked examples."""

    def test_two_row_chunks_on_4x4(self):
        """4x4 split into 2 row chunks: rows 0-2 and 1-3, all columns."""
        plan = ChunkPlan(4, 4, num_row_chunks=2, num_col_chunks=1)
        r0, r1 = plan.get_all_rank_info()

        assert (r0.start_row, r0.end_row, r0.start_col, r0.end_col) == (0, 2, 0, 3)
        assert (r1.start_row, r1.end_row, r1.start_col, r1.end_col) == (1, 3, 0, 3)

    def test_interior_rank_has_four_halos(self):
        """Center rank of a 3x3 chunk grid is widened on all sides."""
        info = get_chunk_extents(4, 9, 9, 3, 3)

        assert (info.inner_start_row, info.inner_end_row) == (3, 5)
        assert (info.start_row, info.end_row) == (2, 6)
        assert (info.start_col, info.end_col) == (2, 6)

    def test_too_fine_breakup_fails(self):
        """3x3 grid split 2x2 is smaller than 3x3 at rank 0."""
        with pytest.raises(ConfigurationError):
            get_chunk_extents(0, 3, 3, 2, 2)

        with pytest.raises(ConfigurationError):
            ChunkPlan(3, 3, 2, 2).validate()

    def test_thin_strip_fails(self):
        """One column per chunk plus one halo is too narrow."""
        with pytest.raises(ConfigurationError, match="at least 3"):
            get_chunk_extents(0, 10, 3, 1, 2)


class TestNeighbors:
    """Neighbor lookup on the chunk grid."""

    def test_neighbor_reciprocity(self):
        """If A neighbors B, then B neighbors A."""
        plan = ChunkPlan(30, 30, 3, 4)
        opposites = {"north": "south", "south": "north", "west": "east", "east": "west"}

        for rank in range(plan.n_ranks):
            for direction, neighbor in plan.neighbors(rank).items():
                if neighbor is not None:
                    assert plan.neighbors(neighbor)[opposites[direction]] == rank

    def test_corner_has_2_neighbors(self):
        plan = ChunkPlan(30, 30, 3, 3)
        nbrs = plan.neighbors(0)

        assert nbrs["north"] is None and nbrs["west"] is None
        assert nbrs["south"] == 3 and nbrs["east"] == 1


class TestEdgeCases:
    """Argument errors and the extent table."""

    @pytest.mark.parametrize("nr,nc", [(0, 1), (1, 0), (-1, 2)])
    def test_non_positive_chunk_counts(self, nr, nc):
        with pytest.raises(ValueError):
            ChunkPlan(10, 10, nr, nc)

    def test_rank_out_of_range(self):
        plan = ChunkPlan(10, 10, 2, 2)

        with pytest.raises(ValueError):
            plan.get_rank_info(4)

    def test_to_frame(self):
        """Extent table has one row per rank."""
        df = ChunkPlan(4, 4, 2, 1).to_frame()

        assert list(df.index) == [0, 1]
        assert df.loc[1, "start_row"] == 1
        assert df.loc[0, "local_rows"] == 3
