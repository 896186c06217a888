"""
histmark: reactive histogram aggregation with shared-scale domain negotiation
"""

from __future__ import annotations

from histmark._version import version as __version__
from histmark.config import HistogramConfig
from histmark.domains import Domain, DomainCoordinator, PreserveDomain
from histmark.node import HistogramNode, HistogramState
from histmark.scales import LinearScale

__all__ = [
    "Domain",
    "DomainCoordinator",
    "HistogramConfig",
    "HistogramNode",
    "HistogramState",
    "LinearScale",
    "PreserveDomain",
    "__version__",
]
