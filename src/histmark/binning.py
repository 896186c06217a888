"""
Uniform binning of one-dimensional samples.

Provides the pure functions that turn a numeric range and a bin count into
bin edges and midpoints, and that assign the samples of a domain to those
bins.
"""

from __future__ import annotations

import logging
import math

import numpy as np
import numpy.typing as npt

from histmark.exceptions import BinningError

log = logging.getLogger(__name__)

FloatArray = npt.NDArray[np.float64]
IntArray = npt.NDArray[np.int64]


def as_sample(values: npt.ArrayLike) -> FloatArray:
    """Coerce an array-like of numbers into a flat ``float64`` array."""
    return np.asarray(values, dtype=np.float64).ravel()


def generate_edges(min_val: float, max_val: float, bin_count: int) -> FloatArray:
    """
    Create ``bin_count + 1`` uniformly spaced bin edges over ``[min_val, max_val]``.

    The first and last edges are assigned ``min_val`` and ``max_val`` directly
    rather than computed from the step, so accumulated rounding can never push
    them past the domain.

    Args:
        min_val: Lower bound of the domain.
        max_val: Upper bound of the domain.
        bin_count: Number of bins, at least one.

    Returns:
        Array of non-decreasing edges with ``edges[0] == min_val`` and
        ``edges[-1] == max_val``.

    Raises:
        BinningError: If ``bin_count < 1``, a bound is not finite, or
            ``min_val > max_val``.

    >>> generate_edges(0.0, 10.0, 5).tolist()
    [0.0, 2.0, 4.0, 6.0, 8.0, 10.0]
    """
    if isinstance(bin_count, bool) or int(bin_count) != bin_count or bin_count < 1:
        msg = f"Number of bins must be a positive integer, got {bin_count!r}"
        raise BinningError(msg)
    if not (math.isfinite(min_val) and math.isfinite(max_val)):
        msg = f"Domain bounds must be finite, got ({min_val}, {max_val})"
        raise BinningError(msg)
    if min_val > max_val:
        msg = f"Domain max ({max_val}) must be >= min ({min_val})"
        raise BinningError(msg)

    bin_count = int(bin_count)
    offsets = np.arange(bin_count, dtype=np.float64)
    edges = np.empty(bin_count + 1, dtype=np.float64)
    width = max_val - min_val
    if math.isfinite(width):
        edges[:-1] = min_val + offsets * (width / bin_count)
    else:
        # the width overflows float64, so build the edges at half scale
        half_step = (max_val / 2 - min_val / 2) / bin_count
        edges[:-1] = 2.0 * (min_val / 2 + offsets * half_step)
    edges[0] = min_val
    edges[-1] = max_val
    return edges


def midpoints(edges: npt.ArrayLike) -> FloatArray:
    """Midpoints of adjacent bin edges."""
    edges = as_sample(edges)
    return 0.5 * edges[:-1] + 0.5 * edges[1:]


def bin_width(edges: npt.ArrayLike) -> float:
    """Width of a bin; bins are uniform so the first one is representative."""
    edges = as_sample(edges)
    if len(edges) < 2:
        return 0.0
    return float(edges[1] - edges[0])


def filter_sample(
    sample: npt.ArrayLike, min_val: float, max_val: float
) -> FloatArray:
    """
    Keep the finite values of ``sample`` inside the closed range ``[min_val, max_val]``.

    Both boundaries are inclusive.
    """
    values = as_sample(sample)
    finite = np.isfinite(values)
    if not finite.all():
        log.warning("Dropping %d non-finite sample value(s)", int((~finite).sum()))
    return values[finite & (values >= min_val) & (values <= max_val)]


def bin_sample(sample: npt.ArrayLike, edges: npt.ArrayLike) -> IntArray:
    """
    Count the samples falling in each bin.

    Bin ``i`` holds values with ``edges[i] <= v < edges[i + 1]``; the last bin
    is closed on both ends so values equal to the maximum are kept. A value
    lying exactly on an interior edge is counted in the upper bin. Values
    outside ``[edges[0], edges[-1]]`` are ignored.

    Args:
        sample: Raw values.
        edges: Non-decreasing bin edges, at least two.

    Returns:
        Integer counts, one per bin.

    >>> bin_sample([0, 1, 2, 3, 4], [0.0, 2.0, 4.0]).tolist()
    [2, 3]
    """
    edges = as_sample(edges)
    if len(edges) < 2:
        msg = f"At least two bin edges are required, got {len(edges)}"
        raise BinningError(msg)

    n_bins = len(edges) - 1
    kept = filter_sample(sample, edges[0], edges[-1])
    index = np.searchsorted(edges, kept, side="right") - 1
    # values on the upper boundary land past the last bin
    index = np.clip(index, 0, n_bins - 1)
    return np.bincount(index, minlength=n_bins).astype(np.int64)
