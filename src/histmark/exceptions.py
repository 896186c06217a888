"""
Exception classes for histmark.

Custom exception hierarchy for better error handling and debugging.
"""

from __future__ import annotations


class HistmarkException(Exception):
    """
    Base exception class for all histmark-related errors.

    This serves as the root exception that all other histmark exceptions inherit
    from, allowing users to catch all histmark-specific errors with a single
    except clause.
    """


class BinningError(HistmarkException):
    """
    Exception raised when bin edges cannot be generated.

    This typically occurs when:
    - The requested bin count is smaller than one
    - A domain bound is NaN or infinite
    - The domain minimum is greater than its maximum
    """


class ScaleError(HistmarkException):
    """
    Exception raised when a scale receives an invalid range.
    """


class UnknownAttributeError(HistmarkException, KeyError):
    """
    Raised when reading or writing an attribute the histogram node does not publish.
    """
