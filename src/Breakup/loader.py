"""Grid file loading.

A grid file is a whitespace-delimited text stream: a 4-field header (row
count, column count, convergence threshold, max iterations) followed by
``rows * cols`` floating-point values in row-major order.
"""

import logging
from pathlib import Path

import numpy as np

from .datastructures import Grid
from .errors import FormatError, GridIOError, ValidationError

log = logging.getLogger(__name__)

HEADER_FIELDS = ("row count", "column count", "convergence threshold", "max iterations")


def _read_tokens(path: Path) -> list[str]:
    try:
        with open(path, "r") as f:
            return f.read().split()
    except OSError as e:
        raise GridIOError(f"Unable to open input file {path}: {e.strerror or e}") from e


def read_header(tokens, path, cols_first=False):
    """Parse and validate the 4-field header.

    Returns
    -------
    tuple
        (rows, cols, eps, max_iterations)
    """
    fields = HEADER_FIELDS
    if cols_first:
        fields = (HEADER_FIELDS[1], HEADER_FIELDS[0]) + HEADER_FIELDS[2:]

    if len(tokens) < len(fields):
        missing = fields[len(tokens)]
        raise FormatError(f"Error reading header of {path}: missing {missing}")

    parsers = (int, int, float, int)
    values = []
    for name, parse, token in zip(fields, parsers, tokens):
        try:
            values.append(parse(token))
        except ValueError:
            raise FormatError(
                f"Error reading header of {path}: cannot parse {name} from {token!r}"
            ) from None

    first, second, eps, max_iterations = values
    rows, cols = (second, first) if cols_first else (first, second)

    if rows <= 0 or cols <= 0:
        raise ValidationError(
            f"non-positive dimension in {path}: {rows} x {cols}; rows and columns must be greater than 0"
        )
    if max_iterations <= 0:
        raise ValidationError(
            f"non-positive iteration count in {path}: {max_iterations}; must be greater than 0"
        )
    if not eps >= 0.0:
        raise ValidationError(f"negative threshold in {path}: {eps}; must be 0.0 or greater")

    return rows, cols, eps, max_iterations


def read_data(tokens, rows, cols, path) -> np.ndarray:
    """Parse ``rows * cols`` values into a (rows, cols) array.

    Trailing tokens beyond the declared size are ignored.
    """
    n = rows * cols
    data = tokens[:n]

    if len(data) < n:
        r, c = divmod(len(data), cols)
        raise FormatError(f"error reading grid data in {path} at ({r}, {c}): unexpected end of file")

    try:
        values = np.array(data, dtype=np.float64)
    except ValueError:
        # Locate the offending token for the message
        for idx, token in enumerate(data):
            try:
                float(token)
            except ValueError:
                r, c = divmod(idx, cols)
                raise FormatError(
                    f"error reading grid data in {path} at ({r}, {c}): {token!r} is not a number"
                ) from None
        raise

    return values.reshape(rows, cols)


def load_grid(path, cols_first=False) -> Grid:
    """Load a grid file into memory.

    Parameters
    ----------
    path : str or Path
        Grid file to read.
    cols_first : bool
        Read the two dimension fields as (columns, rows), the order chunk
        files are written in.

    Returns
    -------
    Grid
        Loaded grid with read-only values.

    Raises
    ------
    GridIOError
        If the file cannot be opened or read.
    FormatError
        If the header or data cannot be parsed.
    ValidationError
        If header values violate the domain constraints.
    """
    path = Path(path)
    tokens = _read_tokens(path)

    rows, cols, eps, max_iterations = read_header(tokens, path, cols_first=cols_first)
    values = read_data(tokens[len(HEADER_FIELDS):], rows, cols, path)

    log.debug(f"Loaded {rows} x {cols} grid from {path} (eps={eps:g}, max_iterations={max_iterations})")
    return Grid(rows=rows, cols=cols, eps=eps, max_iterations=max_iterations, values=values)
