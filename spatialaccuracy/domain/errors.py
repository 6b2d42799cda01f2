"""Exception taxonomy for spatialaccuracy.

Every error raised by the evaluation pipeline derives from
SpatialAccuracyError so callers can catch the whole family at once.

No GDAL imports. Only depends on: builtins.
"""


class SpatialAccuracyError(Exception):
    """Base class for all spatialaccuracy errors."""
    pass


class InvalidInputTypeError(SpatialAccuracyError, TypeError):
    """Raised when a raster or polygon argument is not the expected type."""
    pass


class NotCategoricalError(SpatialAccuracyError, ValueError):
    """Raised when a raster layer carries no category table."""
    pass


class UnknownClassError(SpatialAccuracyError, ValueError):
    """Raised when the requested class is absent from the category table."""

    def __init__(self, requested, available):
        self.requested = requested
        self.available = tuple(available)
        super().__init__(
            f"Target class '{requested}' not found. "
            f"Available classes: {', '.join(self.available)}"
        )


class AmbiguousClassError(SpatialAccuracyError, ValueError):
    """Raised when a class label maps to more than one raster code."""

    def __init__(self, requested, codes):
        self.requested = requested
        self.codes = tuple(codes)
        super().__init__(
            f"Target class '{requested}' maps to multiple raster codes: "
            f"{list(self.codes)}"
        )
