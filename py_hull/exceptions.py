"""Exception types raised by the hull pipeline."""


class HullError(Exception):
    """Base class for all hull computation errors."""


class HullConfigError(HullError, ValueError):
    """Invalid configuration: concavity, cell size or tuning options."""


class HullInputError(HullError, ValueError):
    """Input points that cannot be read as finite 2-D coordinates."""


class GridInvariantError(HullError, AssertionError):
    """The spatial grid was asked to do something its state does not allow.

    This signals a logic error in the caller (for example removing a point
    that was never bucketed), never bad user input.
    """
