"""
Domain models and negotiation with shared scales.

Provides the Pydantic models describing a binning domain and the per-axis
preserve flags, and the :class:`DomainCoordinator` that negotiates the sample
(x) and count (y) domains of a histogram with its two scales.
"""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt
from pydantic import BaseModel, ConfigDict, model_validator

from histmark.scales import LinearScale

log = logging.getLogger(__name__)

#: Headroom above the tallest bin when setting the count domain.
COUNT_HEADROOM = 1.05


class Domain(BaseModel):
    """
    Closed range ``[min, max]`` over which binning occurs.

    Parameters:
        min: Lower bound of the range
        max: Upper bound of the range
    """

    model_config = ConfigDict(frozen=True)

    min: float
    max: float

    @model_validator(mode="after")
    def validate_range(self) -> Domain:
        """Validate that max >= min."""
        if self.max < self.min:
            msg = f"Domain: max ({self.max}) must be >= min ({self.min})"
            raise ValueError(msg)
        return self

    @classmethod
    def from_range(cls, domain_range: tuple[float, float]) -> Domain:
        """Create a Domain from a ``(min, max)`` pair."""
        return cls(min=domain_range[0], max=domain_range[1])

    def as_tuple(self) -> tuple[float, float]:
        """Return the domain as a ``(min, max)`` pair."""
        return (self.min, self.max)

    def __contains__(self, value: float) -> bool:
        return self.min <= value <= self.max


class PreserveDomain(BaseModel):
    """
    Per-axis flags controlling whether a histogram writes to its scales.

    Parameters:
        sample: Keep the sample (x) scale's domain instead of contributing the data extent
        count: Keep the count (y) scale's domain instead of fitting it to the tallest bin
    """

    model_config = ConfigDict(frozen=True)

    sample: bool = False
    count: bool = False


class DomainCoordinator:
    """
    Negotiates the sample and count domains of one histogram with its scales.

    Every contribution is made under an owner identity derived from
    ``owner_id`` (``<owner_id>_sample`` and ``<owner_id>_count``), so repeated
    negotiation by the same histogram replaces its previous contribution
    instead of accumulating.

    Attributes:
        owner_id: Stable identity of the histogram.
        sample_scale: Scale of the sample (x) axis.
        count_scale: Scale of the count (y) axis.
    """

    def __init__(
        self, owner_id: str, sample_scale: LinearScale, count_scale: LinearScale
    ) -> None:
        self.owner_id = owner_id
        self.sample_scale = sample_scale
        self.count_scale = count_scale
        self._domain: Domain | None = None

    @property
    def sample_owner(self) -> str:
        """Owner key used on the sample scale."""
        return f"{self.owner_id}_sample"

    @property
    def count_owner(self) -> str:
        """Owner key used on the count scale."""
        return f"{self.owner_id}_count"

    @property
    def domain(self) -> Domain | None:
        """Sample domain observed by the last negotiation, if any."""
        return self._domain

    def negotiate_sample(self, sample: npt.ArrayLike, preserve: bool) -> Domain:
        """
        Negotiate the sample (x) domain used for binning.

        Unless ``preserve`` is set, the extent of ``sample`` is contributed to
        the sample scale; other producers on that scale may widen it. With
        ``preserve`` set, any previous contribution is withdrawn and the domain
        reported by the remaining contributors is used.

        Returns:
            The effective domain reported by the sample scale.
        """
        if preserve:
            self.sample_scale.del_domain([], self.sample_owner)
        else:
            self.sample_scale.compute_and_set_domain(sample, self.sample_owner)
        self._domain = Domain.from_range(self.sample_scale.domain)
        log.debug("%s: sample domain %s", self.owner_id, self._domain.as_tuple())
        return self._domain

    def negotiate_count(
        self, counts: npt.ArrayLike, preserve: bool
    ) -> tuple[float, float] | None:
        """
        Fit the count (y) domain to ``[0, COUNT_HEADROOM * max(counts)]``.

        Nothing is touched when ``preserve`` is set. Empty ``counts`` withdraw
        this histogram's contribution.

        Returns:
            The count scale's domain, or None if it was left alone.
        """
        if preserve:
            return None
        values = np.asarray(counts, dtype=np.float64)
        if len(values) == 0:
            return self.count_scale.del_domain([], self.count_owner)
        return self.count_scale.set_domain(
            [0.0, float(values.max()) * COUNT_HEADROOM], self.count_owner
        )

    def withdraw(self) -> None:
        """Withdraw every contribution of this histogram from both scales."""
        self.sample_scale.del_domain([], self.sample_owner)
        self.count_scale.del_domain([], self.count_owner)
        self._domain = None


__all__ = ("COUNT_HEADROOM", "Domain", "DomainCoordinator", "PreserveDomain")
