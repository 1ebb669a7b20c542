"""Shared fixtures for grid breakup tests."""

import numpy as np
import pytest


def format_grid_file(rows, cols, values, eps=0.001, max_iterations=100):
    """Render a grid file: header on separate lines, one row of values per line."""
    lines = [str(rows), str(cols), f"{eps}", str(max_iterations)]
    arr = np.asarray(values, dtype=np.float64).reshape(rows, cols)
    lines += [" ".join(repr(float(v)) for v in row) for row in arr]
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_grid(tmp_path):
    """Factory writing a grid file into tmp_path; values default to 0..rows*cols-1."""

    def _write(rows, cols, values=None, eps=0.001, max_iterations=100, name="grid.txt"):
        if values is None:
            values = np.arange(rows * cols, dtype=np.float64)
        path = tmp_path / name
        path.write_text(format_grid_file(rows, cols, values, eps, max_iterations))
        return path

    return _write
