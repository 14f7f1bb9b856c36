"""Exceptions raised by the trend analysis pipeline."""


class TrendAnalysisError(Exception):
    """Base class for all trend analysis failures."""


class EmptyInputError(TrendAnalysisError):
    """Raised when a series has no observations to work with."""


class NoTrendSeedError(TrendAnalysisError):
    """Raised when no observation moves far enough from day-zero to seed a trend."""


class DegenerateSeriesError(TrendAnalysisError):
    """Raised when a ratio cannot be formed (empty series or zero divisor)."""


class NonFiniteValueError(TrendAnalysisError, ValueError):
    """Raised when a NaN or infinite value reaches grid alignment."""


class MalformedRecordError(TrendAnalysisError, ValueError):
    """Raised when a numeric field cannot be parsed at the input boundary."""
