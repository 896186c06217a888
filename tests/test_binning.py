"""
Unit tests for the binning functions.

Tests edge generation, midpoints, bin widths, sample filtering and the
assignment of samples to bins, including boundary tie-breaks.
"""

from __future__ import annotations

import numpy as np
import pytest

from histmark.binning import (
    as_sample,
    bin_sample,
    bin_width,
    filter_sample,
    generate_edges,
    midpoints,
)
from histmark.exceptions import BinningError


class TestGenerateEdges:
    """Tests for generate_edges."""

    def test_simple_edges(self):
        """Test uniform edges over an integer range."""
        edges = generate_edges(0.0, 10.0, 5)
        assert edges.tolist() == [0.0, 2.0, 4.0, 6.0, 8.0, 10.0]

    @pytest.mark.parametrize(
        ("min_val", "max_val", "bin_count"),
        [
            (0.0, 1.0, 1),
            (0.1, 0.7, 3),
            (-3.3, 17.9, 7),
            (1e-9, 1e9, 13),
            (0.0, 0.3, 10),
            (-1.0, -0.1, 9),
            (-1e308, 1e308, 4),
            (-1.7e308, 1.7e308, 4),
            (-1.7e308, 1.7e308, 1),
        ],
    )
    def test_edge_properties(self, min_val, max_val, bin_count):
        """Test edge count, monotonicity and exact boundaries."""
        edges = generate_edges(min_val, max_val, bin_count)
        assert len(edges) == bin_count + 1
        assert np.all(np.isfinite(edges))
        assert np.all(np.diff(edges) >= 0)
        assert edges[0] == min_val
        assert edges[-1] == max_val

    def test_last_edge_is_exact_max(self):
        """Test the last edge is not computed through the step."""
        # 3 * (0.3 / 3) rounds below 0.3
        edges = generate_edges(0.0, 0.3, 3)
        assert edges[-1] == 0.3

    def test_degenerate_domain(self):
        """Test a zero-width domain yields repeated edges."""
        edges = generate_edges(2.0, 2.0, 4)
        assert edges.tolist() == [2.0] * 5

    @pytest.mark.parametrize("bin_count", [0, -1, 2.5])
    def test_invalid_bin_count(self, bin_count):
        """Test non-positive or fractional bin counts are rejected."""
        with pytest.raises(BinningError, match="Number of bins must be a positive integer"):
            generate_edges(0.0, 1.0, bin_count)

    def test_inverted_domain(self):
        """Test min > max is rejected."""
        with pytest.raises(BinningError, match=r"Domain max \(0\.0\) must be >= min \(1\.0\)"):
            generate_edges(1.0, 0.0, 3)

    @pytest.mark.parametrize(("min_val", "max_val"), [(np.nan, 1.0), (0.0, np.inf)])
    def test_non_finite_domain(self, min_val, max_val):
        """Test NaN or infinite bounds are rejected."""
        with pytest.raises(BinningError, match="must be finite"):
            generate_edges(min_val, max_val, 3)


class TestMidpointsAndWidth:
    """Tests for midpoints and bin_width."""

    def test_midpoints(self):
        """Test midpoints are averages of adjacent edges."""
        assert midpoints([0.0, 2.0, 4.0, 6.0]).tolist() == [1.0, 3.0, 5.0]

    def test_midpoints_extreme_domain(self):
        """Test midpoints of edges near the float64 limit stay finite."""
        edges = generate_edges(-1.7e308, 1.7e308, 4)
        mids = midpoints(edges)
        assert np.all(np.isfinite(mids))
        assert np.all((mids > edges[:-1]) & (mids < edges[1:]))

    def test_midpoints_length(self):
        """Test there is one midpoint fewer than edges."""
        edges = generate_edges(-1.0, 1.0, 8)
        assert len(midpoints(edges)) == len(edges) - 1

    def test_bin_width(self):
        """Test the bin width of uniform edges."""
        assert bin_width(generate_edges(0.0, 10.0, 5)) == pytest.approx(2.0)

    @pytest.mark.parametrize("edges", [[], [1.0]])
    def test_bin_width_without_bins(self, edges):
        """Test bin_width is zero without a complete bin."""
        assert bin_width(edges) == 0.0


class TestFilterSample:
    """Tests for filter_sample."""

    def test_inclusive_boundaries(self):
        """Test values equal to either bound are kept."""
        kept = filter_sample([-1.0, 0.0, 0.5, 1.0, 1.5], 0.0, 1.0)
        assert kept.tolist() == [0.0, 0.5, 1.0]

    def test_non_finite_values_dropped(self):
        """Test NaN and infinities are never kept."""
        kept = filter_sample([np.nan, 0.5, np.inf, -np.inf], -np.inf, np.inf)
        assert kept.tolist() == [0.5]

    def test_as_sample_flattens(self):
        """Test array-likes are flattened to float64."""
        values = as_sample([[1, 2], [3, 4]])
        assert values.dtype == np.float64
        assert values.tolist() == [1.0, 2.0, 3.0, 4.0]


class TestBinSample:
    """Tests for bin_sample."""

    def test_eleven_integers(self):
        """Test integers 0..10 in five bins, with 10 in the last bin."""
        counts = bin_sample(range(11), generate_edges(0.0, 10.0, 5))
        assert counts.tolist() == [2, 2, 2, 2, 3]
        assert counts.sum() == 11

    def test_interior_edge_goes_to_upper_bin(self):
        """Test a value exactly on an interior edge is counted in the upper bin."""
        counts = bin_sample([2.0], [0.0, 2.0, 4.0])
        assert counts.tolist() == [0, 1]

    def test_max_value_in_last_bin(self):
        """Test the last bin is closed on both ends."""
        counts = bin_sample([4.0], [0.0, 2.0, 4.0])
        assert counts.tolist() == [0, 1]

    def test_min_value_in_first_bin(self):
        """Test the first edge is inclusive."""
        counts = bin_sample([0.0], [0.0, 2.0, 4.0])
        assert counts.tolist() == [1, 0]

    def test_out_of_range_excluded(self):
        """Test values outside the edges are ignored."""
        counts = bin_sample([-0.1, 0.5, 3.9, 4.1, np.nan], [0.0, 2.0, 4.0])
        assert counts.tolist() == [1, 1]

    def test_counts_sum_to_in_range_samples(self):
        """Test counts sum to the number of samples within the edges."""
        rng = np.random.default_rng(0)
        sample = rng.normal(0.0, 2.0, size=5000)
        edges = generate_edges(-3.0, 3.0, 17)
        counts = bin_sample(sample, edges)
        assert len(counts) == 17
        assert counts.sum() == np.count_nonzero((sample >= -3.0) & (sample <= 3.0))

    def test_matches_numpy_histogram(self):
        """Test the bin convention agrees with numpy.histogram."""
        rng = np.random.default_rng(1)
        sample = rng.uniform(-1.0, 1.0, size=1000)
        edges = generate_edges(-0.5, 0.75, 9)
        expected, _ = np.histogram(sample, bins=edges)
        assert bin_sample(sample, edges).tolist() == expected.tolist()

    def test_empty_sample(self):
        """Test an empty sample gives all-zero counts."""
        assert bin_sample([], [0.0, 1.0, 2.0]).tolist() == [0, 0]

    def test_degenerate_edges(self):
        """Test a zero-width domain puts every matching value in the last bin."""
        counts = bin_sample([2.0, 2.0, 3.0], generate_edges(2.0, 2.0, 3))
        assert counts.tolist() == [0, 0, 2]

    def test_too_few_edges(self):
        """Test at least two edges are required."""
        with pytest.raises(BinningError, match="At least two bin edges"):
            bin_sample([1.0], [1.0])


class TestLogging:
    """Tests for diagnostics emitted while binning."""

    def test_non_finite_values_warned(self, caplog):
        """Test dropping non-finite values is reported."""
        with caplog.at_level("WARNING", logger="histmark"):
            filter_sample([np.nan, 1.0, np.inf], 0.0, 2.0)
        assert "Dropping 2 non-finite sample value(s)" in caplog.text
