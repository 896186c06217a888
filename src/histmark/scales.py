"""
Shared axis scales.

A scale is shared by every data producer drawn against the same axis. Each
producer contributes the extent of its data under a stable owner identity and
the scale combines all contributions into one domain. Contributions are keyed
by owner, so repeating a contribution is idempotent and withdrawing it undoes
it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from types import MappingProxyType

import numpy as np
import numpy.typing as npt
from psygnal import Signal

from histmark.exceptions import ScaleError

log = logging.getLogger(__name__)

Range = tuple[float, float]

#: Domain of a scale that never received a contribution.
DEFAULT_DOMAIN: Range = (0.0, 1.0)


class LinearScale:
    """
    Linear scale with an owner-keyed registry of contributed ranges.

    The effective domain is the union of all contributions, i.e. the smallest
    contributed minimum and the largest contributed maximum. Explicit ``min``
    and ``max`` pin the corresponding bound regardless of contributions. Without
    contributions the domain falls back to ``DEFAULT_DOMAIN`` (or the pinned
    bounds).

    Attributes:
        name: Optional label used in log messages.
        min: Fixed lower bound, or None to derive it from contributions.
        max: Fixed upper bound, or None to derive it from contributions.
    """

    domain_changed = Signal(object)

    def __init__(
        self,
        min: float | None = None,  # noqa: A002
        max: float | None = None,  # noqa: A002
        name: str = "",
    ) -> None:
        for bound in (min, max):
            if bound is not None and not math.isfinite(bound):
                msg = f"Scale '{name}': pinned bounds must be finite, got ({min}, {max})"
                raise ScaleError(msg)
        if min is not None and max is not None and max < min:
            msg = f"Scale '{name}': max ({max}) must be >= min ({min})"
            raise ScaleError(msg)
        self.name = name
        self.min = min
        self.max = max
        self._contributions: dict[str, Range] = {}
        self._domain: Range = self._combined()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, domain={self._domain})"

    @property
    def domain(self) -> Range:
        """Current combined domain as ``(min, max)``."""
        return self._domain

    @property
    def contributions(self) -> Mapping[str, Range]:
        """Read-only view of the ranges contributed per owner."""
        return MappingProxyType(self._contributions)

    def compute_and_set_domain(self, values: npt.ArrayLike, owner_id: str) -> Range:
        """
        Contribute the extent of ``values`` under ``owner_id``.

        Non-finite values are ignored; if nothing finite remains the owner's
        contribution is withdrawn instead.

        Returns:
            The combined domain after the update.
        """
        data = np.asarray(values, dtype=np.float64).ravel()
        data = data[np.isfinite(data)]
        if len(data) == 0:
            return self.del_domain([], owner_id)
        self._contributions[owner_id] = (float(data.min()), float(data.max()))
        return self._update_domain()

    def del_domain(self, values: Sequence[float], owner_id: str) -> Range:  # noqa: ARG002
        """
        Withdraw the contribution of ``owner_id``, if any.

        ``values`` is accepted for call compatibility and ignored.

        Returns:
            The combined domain after the update.
        """
        if self._contributions.pop(owner_id, None) is not None:
            log.debug("Scale %r: withdrew contribution of %s", self.name, owner_id)
        return self._update_domain()

    def set_domain(self, domain_range: Sequence[float], owner_id: str) -> Range:
        """
        Contribute an explicit ``(min, max)`` range under ``owner_id``.

        Raises:
            ScaleError: If the range does not have two finite, ordered bounds.

        Returns:
            The combined domain after the update.
        """
        if len(domain_range) != 2:
            msg = f"Scale '{self.name}': a range needs exactly two bounds, got {len(domain_range)}"
            raise ScaleError(msg)
        low, high = float(domain_range[0]), float(domain_range[1])
        if not (math.isfinite(low) and math.isfinite(high)):
            msg = f"Scale '{self.name}': range bounds must be finite, got ({low}, {high})"
            raise ScaleError(msg)
        if high < low:
            msg = f"Scale '{self.name}': max ({high}) must be >= min ({low})"
            raise ScaleError(msg)
        self._contributions[owner_id] = (low, high)
        return self._update_domain()

    def _combined(self) -> Range:
        low, high = DEFAULT_DOMAIN
        if self._contributions:
            low = min(lo for lo, _ in self._contributions.values())
            high = max(hi for _, hi in self._contributions.values())
        if self.min is not None:
            low = float(self.min)
        if self.max is not None:
            high = float(self.max)
        if high < low:
            # a pinned bound outside the data extent collapses the domain onto it
            if self.max is None:
                high = low
            else:
                low = high
        return (low, high)

    def _update_domain(self) -> Range:
        new_domain = self._combined()
        if new_domain != self._domain:
            log.debug("Scale %r: domain %s -> %s", self.name, self._domain, new_domain)
            self._domain = new_domain
            self.domain_changed.emit(new_domain)
        return self._domain


__all__ = ("DEFAULT_DOMAIN", "LinearScale")
