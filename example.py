#!/usr/bin/env python3
"""
Example usage of histmark.

This script demonstrates:
1. Binning a sample against shared scales
2. Switching to density mode without rebinning
3. Two histograms sharing one sample scale
4. Preserving the sample domain
"""

import logging
import time
from contextlib import contextmanager

import numpy as np

import histmark as hm
from histmark.logging import setup as setup_logging


@contextmanager
def time_block(label):
    start = time.perf_counter()
    yield
    end = time.perf_counter()
    print(f"{label}: {end - start:.4f} seconds")


def show(node):
    for index in range(len(node.count)):
        data = node.get_data_dict(index)
        print(
            f"  [{data['bin_start']:8.3f}, {data['bin_end']:8.3f}]  {data['count']:.4f}"
        )


def main():
    """Main example function demonstrating histmark features."""
    setup_logging()
    logging.getLogger("histmark").setLevel(logging.INFO)

    print("=== histmark Example ===\n")

    x_scale = hm.LinearScale(name="x")
    y_scale = hm.LinearScale(name="y")
    scales = {"sample": x_scale, "count": y_scale}

    print("1. Raw counts")
    print("=" * 40)
    node = hm.HistogramNode(sample=list(range(11)), bins=5, scales=scales)
    node.data_updated.connect(lambda: print(f"  data_updated -> y domain {y_scale.domain}"))
    show(node)
    print()

    print("2. Density mode")
    print("=" * 40)
    node.normalized = True
    show(node)
    print(f"  area: {np.sum(node.count * node.state.bin_width):.6f}")
    print()

    print("3. A second histogram widens the shared sample scale")
    print("=" * 40)
    rng = np.random.default_rng(42)
    with time_block("Binning 100k normal samples"):
        other = hm.HistogramNode(
            sample=rng.normal(5.0, 4.0, size=100_000), bins=20, scales=scales
        )
    print(f"  x domain: {x_scale.domain}")
    node.update_data()
    print(f"  first histogram now bins over {node.edges[0]:.3f} .. {node.edges[-1]:.3f}")
    print()

    print("4. Preserving the sample domain")
    print("=" * 40)
    other.preserve_domain = {"sample": True}
    print(f"  x domain after withdrawal: {x_scale.domain}")
    print(f"  contributors: {sorted(x_scale.contributions)}")


if __name__ == "__main__":
    main()
