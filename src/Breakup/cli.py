"""Command-line interface for the grid breakup tool.

Usage:
    rb-breakup -in grid.txt -out chunks/grid -ichunk 2 -jchunk 3
    python -m Breakup -in grid.txt -plan -ichunk 2 -jchunk 2
"""

import logging
import sys
from argparse import ArgumentParser

from .breakup import run
from .datastructures import BreakupParams
from .decomposition import ChunkPlan
from .errors import BreakupError
from .loader import load_grid

log = logging.getLogger(__name__)

OPTS_HELP = """\
\t-help           print this message
\t-ichunk n       number of columnwise chunks to break
\t-jchunk n       number of rowwise chunks to break
\t-in filename    name of input file to break or combine. if combine, files named filename.rank will be combined
\t-out filename   name of results file to write. if break, files will be written to filename.rank
\t-combine        combine chunk files (not implemented)
\t-workers n      number of chunks written concurrently (default: 1)
\t-plan           print the chunk extents and exit without writing
\t-v              verbose (debug) logging
"""


def create_parser(prog=None) -> ArgumentParser:
    """Create the argument parser with the single-dash option names."""
    parser = ArgumentParser(prog=prog, add_help=False, allow_abbrev=False)
    parser.add_argument("-help", action="store_true")
    parser.add_argument("-in", dest="input", default="sample.txt")
    parser.add_argument("-out", dest="output", default=None)
    parser.add_argument("-ichunk", dest="num_col_chunks", type=int, default=1)
    parser.add_argument("-jchunk", dest="num_row_chunks", type=int, default=1)
    parser.add_argument("-combine", action="store_true")
    parser.add_argument("-workers", dest="max_workers", type=int, default=1)
    parser.add_argument("-plan", action="store_true")
    parser.add_argument("-v", dest="verbose", action="store_true")
    return parser


def write_usage(prog, stream=None):
    stream = stream or sys.stdout
    stream.write(f"Usage:  {prog} [-in filename] [-out filename] [-ichunk n] [-jchunk n]\n")
    stream.write(OPTS_HELP)


def print_plan(params: BreakupParams):
    """Print the extent table for the configured breakup."""
    grid = load_grid(params.input)
    plan = ChunkPlan(grid.rows, grid.cols, params.num_row_chunks, params.num_col_chunks)
    print(plan.to_frame().to_string())


def main(argv=None) -> int:
    """Parse arguments, run the breakup and return the process exit code."""
    argv = sys.argv[1:] if argv is None else list(argv)
    prog = "rb-breakup"

    if "/?" in argv:
        write_usage(prog)
        return 0

    parser = create_parser(prog)
    try:
        args, unknown = parser.parse_known_args(argv)
    except SystemExit:
        # Missing or malformed option value; argparse has already reported it
        write_usage(prog)
        return 1

    if args.help:
        write_usage(prog)
        return 0

    if unknown:
        print(f'Unrecognized argument "{unknown[0]}"')
        write_usage(prog)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        params = BreakupParams(
            input=args.input,
            output=args.output,
            num_row_chunks=args.num_row_chunks,
            num_col_chunks=args.num_col_chunks,
            operation="combine" if args.combine else "breakup",
            max_workers=args.max_workers,
        )
        if args.plan:
            print_plan(params)
            return 0
        result = run(params)
    except (BreakupError, ValueError, NotImplementedError) as e:
        log.error(str(e))
        return 1

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
