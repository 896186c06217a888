"""
Unit tests for density normalization.
"""

from __future__ import annotations

import numpy as np
import pytest

from histmark.normalization import normalize


class TestNormalize:
    """Tests for normalize."""

    def test_disabled_passes_counts_through(self):
        """Test raw counts are returned unchanged when disabled."""
        assert normalize([2, 2, 2, 2, 3], 2.0, False).tolist() == [2, 2, 2, 2, 3]

    def test_density(self):
        """Test counts are divided by total count times bin width."""
        counts = normalize([2, 2, 2, 2, 3], 2.0, True)
        np.testing.assert_allclose(counts, np.array([2, 2, 2, 2, 3]) / (11 * 2))

    def test_unit_area(self):
        """Test the normalized histogram has unit area."""
        rng = np.random.default_rng(2)
        raw = rng.integers(0, 50, size=23)
        width = 0.37
        counts = normalize(raw, width, True)
        assert np.sum(counts * width) == pytest.approx(1.0)

    def test_zero_total(self):
        """Test an all-zero histogram stays zero instead of dividing by zero."""
        counts = normalize([0, 0, 0], 1.5, True)
        assert counts.tolist() == [0.0, 0.0, 0.0]

    def test_zero_width(self):
        """Test a degenerate domain falls back to probability mass."""
        counts = normalize([0, 1, 3], 0.0, True)
        assert counts.tolist() == [0.0, 0.25, 0.75]

    def test_empty(self):
        """Test empty counts stay empty."""
        assert normalize([], 1.0, True).tolist() == []

    @pytest.mark.parametrize("enabled", [True, False])
    def test_idempotent(self, enabled):
        """Test repeated normalization of the same raw counts is identical."""
        raw = [4, 0, 7, 1]
        first = normalize(raw, 0.5, enabled)
        second = normalize(raw, 0.5, enabled)
        assert first.tolist() == second.tolist()

    def test_input_not_modified(self):
        """Test the input array is left untouched."""
        raw = np.array([1.0, 3.0])
        normalize(raw, 0.5, True)
        assert raw.tolist() == [1.0, 3.0]
