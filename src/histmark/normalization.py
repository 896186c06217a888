"""
Density normalization of binned counts.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from histmark.binning import FloatArray


def normalize(
    raw_counts: npt.ArrayLike, bin_width: float, enabled: bool
) -> FloatArray:
    """
    Convert raw bin counts into a probability density.

    When ``enabled`` is false the raw counts are returned unchanged (as floats).
    Otherwise each count is divided by ``sum(raw_counts) * bin_width`` so the
    total area of the histogram is one. An all-zero histogram stays all zero,
    and a zero ``bin_width`` (degenerate domain) falls back to dividing by the
    sum only.

    Args:
        raw_counts: Per-bin counts.
        bin_width: Uniform width of a bin.
        enabled: Whether to normalize.

    Returns:
        New array of per-bin values; the input is never modified.

    >>> normalize([1, 3], 0.5, True).tolist()
    [0.5, 1.5]
    """
    counts = np.array(raw_counts, dtype=np.float64)
    if not enabled:
        return counts

    total = counts.sum()
    if total == 0:
        return np.zeros_like(counts)
    if bin_width > 0:
        return counts / (total * bin_width)
    return counts / total
