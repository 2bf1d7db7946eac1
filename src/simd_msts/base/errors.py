class MstsError(Exception):
    """Base class for all errors raised by simd_msts."""


class CursorUnderflowError(MstsError, IndexError):
    """A cursor was asked for more values than it holds."""


class CompositionError(MstsError, RuntimeError):
    """The registered parameters and builder steps disagree on the layout."""
