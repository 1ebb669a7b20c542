"""Error kinds raised while breaking a grid file into chunks.

All errors are raised at the lowest-level operation and propagate unchanged;
nothing is retried.
"""


class BreakupError(Exception):
    """Base class for all grid breakup errors."""


class FormatError(BreakupError):
    """Header or grid data cannot be parsed as expected."""


class ValidationError(BreakupError):
    """Parsed header values violate domain constraints."""


class ConfigurationError(BreakupError):
    """Requested chunk factorization is too fine for the grid."""


class GridIOError(BreakupError, OSError):
    """Open, read or write failure at the OS boundary."""
