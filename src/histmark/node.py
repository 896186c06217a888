"""
Reactive histogram node.

:class:`HistogramNode` owns the input attributes of one histogram (sample, bin
count, normalization and preserve-domain flags), negotiates its domains with
the shared sample and count scales, and republishes bin edges, midpoints and
counts whenever an input changes. Each recompute replaces the published
:class:`HistogramState` in one step and then emits ``data_updated`` exactly
once.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

import hist
import numpy as np
import numpy.typing as npt
from psygnal import Signal
from pydantic import BaseModel, ConfigDict, Field

from histmark.binning import (
    as_sample,
    bin_sample,
    bin_width,
    filter_sample,
    generate_edges,
    midpoints,
)
from histmark.config import HistogramConfig
from histmark.domains import DomainCoordinator, PreserveDomain
from histmark.exceptions import UnknownAttributeError
from histmark.graph import UpdatePath, update_path_for
from histmark.normalization import normalize
from histmark.scales import LinearScale

log = logging.getLogger(__name__)


class HistogramState(BaseModel):
    """
    One consistent snapshot of a histogram's derived outputs.

    Attributes:
        edges: ``bins + 1`` bin edges, or empty when there is no data
        midpoints: Centre of each bin
        count: Published per-bin values (raw counts or density)
        raw_count: Integer per-bin counts before normalization
    """

    model_config = ConfigDict(frozen=True)

    edges: list[float] = Field(default_factory=list)
    midpoints: list[float] = Field(default_factory=list)
    count: list[float] = Field(default_factory=list)
    raw_count: list[int] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True for the no-data state."""
        return not self.edges

    @property
    def bin_width(self) -> float:
        """Uniform width of the bins (0 without data)."""
        return bin_width(self.edges)


#: Attributes readable through :meth:`HistogramNode.get_typed_field`.
TYPED_FIELDS = ("sample", "count", "midpoints", "edges", "raw_count")


class HistogramNode:
    """
    Histogram mark keeping its bins synchronized with its inputs.

    A change to ``sample``, ``bins`` or ``preserve_domain`` reruns the whole
    pipeline (sample domain, edges, binning, normalization, count domain). A
    change to ``normalized`` alone renormalizes the cached raw counts.

    Args:
        config: Initial input attributes; defaults are used when omitted.
        scales: Mapping with the ``sample`` and ``count`` scales. Missing scales
            are created privately for this node.
        model_id: Stable identity used for scale contributions; random if omitted.
        **kwargs: Overrides applied on top of ``config``.

    Signals:
        data_updated: Emitted once after every completed recompute.
        changes_saved: Emitted by :meth:`save_changes` with the published state.

    Example:
        >>> x_scale, y_scale = LinearScale(), LinearScale()
        >>> node = HistogramNode(
        ...     sample=list(range(11)), bins=5,
        ...     scales={"sample": x_scale, "count": y_scale},
        ... )
        >>> node.midpoints.tolist()
        [1.0, 3.0, 5.0, 7.0, 9.0]
    """

    data_updated = Signal()
    changes_saved = Signal(dict)

    def __init__(
        self,
        config: HistogramConfig | None = None,
        *,
        scales: Mapping[str, LinearScale] | None = None,
        model_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        base = config if config is not None else HistogramConfig()
        self._config = base.updated(**kwargs) if kwargs else base.model_copy()
        self.model_id = model_id or uuid.uuid4().hex
        scales = dict(scales or {})
        self.scales: dict[str, LinearScale] = {
            "sample": scales.get("sample") or LinearScale(name="sample"),
            "count": scales.get("count") or LinearScale(name="count"),
        }
        self.coordinator = DomainCoordinator(
            self.model_id, self.scales["sample"], self.scales["count"]
        )
        self._state = HistogramState()
        self.update_data()
        self.normalize_data(True)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(model_id={self.model_id!r}, "
            f"bins={self.bins}, n_sample={len(self._config.sample)}, "
            f"normalized={self.normalized})"
        )

    # -- inputs -------------------------------------------------------------

    @property
    def config(self) -> HistogramConfig:
        """Copy of the current input attributes."""
        return self._config.model_copy()

    @property
    def bins(self) -> int:
        return self._config.bins

    @bins.setter
    def bins(self, value: int) -> None:
        self.set(bins=value)

    @property
    def sample(self) -> npt.NDArray[np.float64]:
        return as_sample(self._config.sample)

    @sample.setter
    def sample(self, value: npt.ArrayLike) -> None:
        self.set(sample=value)

    @property
    def normalized(self) -> bool:
        return self._config.normalized

    @normalized.setter
    def normalized(self, value: bool) -> None:
        self.set(normalized=value)

    @property
    def preserve_domain(self) -> PreserveDomain:
        return self._config.preserve_domain

    @preserve_domain.setter
    def preserve_domain(self, value: PreserveDomain | Mapping[str, bool]) -> None:
        self.set(preserve_domain=value)

    @property
    def scales_metadata(self) -> dict[str, dict[str, str]]:
        return {
            name: meta.model_dump() for name, meta in self._config.scales_metadata.items()
        }

    def set(self, **changes: Any) -> UpdatePath:
        """
        Apply one or more attribute changes and run the update they require.

        Changes are validated together; on a validation error nothing is
        applied, and if the update itself fails the previous inputs are
        restored. A batch runs the most demanding update path among its
        attributes once.

        Raises:
            UnknownAttributeError: If an attribute is not an input of the node.
            pydantic.ValidationError: If a value is invalid.

        Returns:
            The update path that was run.
        """
        unknown = sorted(set(changes) - set(HistogramConfig.model_fields))
        if unknown:
            msg = f"Unknown histogram attribute(s): {', '.join(unknown)}"
            raise UnknownAttributeError(msg)

        new_config = self._config.updated(**changes)
        changed = [
            name for name in changes if getattr(new_config, name) != getattr(self._config, name)
        ]
        previous, self._config = self._config, new_config

        path = update_path_for(changed)
        log.debug("%s: %s changed, running %s update", self.model_id, changed, path.value)
        try:
            if path is UpdatePath.FULL:
                self.update_data()
            elif path is UpdatePath.NORMALIZE:
                self.normalize_data(True)
        except Exception:
            # keep the inputs in step with the published state
            self._config = previous
            raise
        return path

    # -- outputs ------------------------------------------------------------

    @property
    def state(self) -> HistogramState:
        """Currently published snapshot."""
        return self._state

    @property
    def edges(self) -> npt.NDArray[np.float64]:
        return np.asarray(self._state.edges, dtype=np.float64)

    @property
    def midpoints(self) -> npt.NDArray[np.float64]:
        return np.asarray(self._state.midpoints, dtype=np.float64)

    @property
    def count(self) -> npt.NDArray[np.float64]:
        return np.asarray(self._state.count, dtype=np.float64)

    @property
    def raw_count(self) -> npt.NDArray[np.int64]:
        return np.asarray(self._state.raw_count, dtype=np.int64)

    def get_typed_field(self, name: str) -> np.ndarray:
        """
        Read an array-valued attribute as a numpy array.

        Raises:
            UnknownAttributeError: If ``name`` is not an array-valued attribute.
        """
        if name not in TYPED_FIELDS:
            msg = f"'{name}' is not an array-valued histogram attribute"
            raise UnknownAttributeError(msg)
        return getattr(self, name)

    def set_typed_field(self, name: str, value: npt.ArrayLike) -> UpdatePath:
        """
        Write an array-valued input attribute.

        Only ``sample`` is writable; derived arrays are recomputed, never set.
        """
        if name != "sample":
            msg = f"'{name}' is not a writable array-valued histogram attribute"
            raise UnknownAttributeError(msg)
        return self.set(sample=value)

    # -- pipeline -----------------------------------------------------------

    def update_data(self) -> None:
        """
        Rebin the sample and publish the result.

        Runs sample domain negotiation, edge generation, binning,
        normalization and count domain negotiation, then swaps in the new
        state and emits ``data_updated``.
        """
        # an empty sample withdraws this node's extent from the sample scale
        domain = self.coordinator.negotiate_sample(
            self._config.sample, self._config.preserve_domain.sample
        )
        in_domain = filter_sample(self._config.sample, domain.min, domain.max)
        if len(in_domain) == 0:
            log.info("%s: no sample value inside %s", self.model_id, domain.as_tuple())
            raw = HistogramState()
        else:
            edges = generate_edges(domain.min, domain.max, self._config.bins)
            raw = HistogramState(
                edges=edges.tolist(),
                midpoints=midpoints(edges).tolist(),
                raw_count=bin_sample(in_domain, edges).tolist(),
            )
        self._publish(self._normalized(raw))

    def normalize_data(self, save_and_update: bool = True) -> HistogramState:
        """
        Renormalize the cached raw counts without rebinning.

        Args:
            save_and_update: Publish the result, refit the count scale and emit
                ``data_updated``. When false the published state is untouched.

        Returns:
            The renormalized state.
        """
        state = self._normalized(self._state)
        if save_and_update:
            self._publish(state)
        return state

    def _normalized(self, state: HistogramState) -> HistogramState:
        count = normalize(state.raw_count, state.bin_width, self._config.normalized)
        return state.model_copy(update={"count": count.tolist()})

    def _publish(self, state: HistogramState) -> None:
        self.coordinator.negotiate_count(state.count, self._config.preserve_domain.count)
        self._state = state
        self.save_changes()
        self.data_updated.emit()

    def update_domains(self) -> None:
        """Refit the count scale to the published counts."""
        self.coordinator.negotiate_count(
            self._state.count, self._config.preserve_domain.count
        )

    def save_changes(self) -> dict[str, Any]:
        """
        Emit ``changes_saved`` with the published attributes.

        Returns:
            JSON-compatible snapshot of the node's observable attributes.
        """
        snapshot = {
            "model_id": self.model_id,
            "bins": self._config.bins,
            "sample": list(self._config.sample),
            "normalized": self._config.normalized,
            "preserve_domain": self._config.preserve_domain.model_dump(),
            "scales_metadata": self.scales_metadata,
            **self._state.model_dump(),
        }
        self.changes_saved.emit(snapshot)
        return snapshot

    # -- views --------------------------------------------------------------

    def get_data_dict(self, index: int) -> dict[str, Any]:
        """
        Describe bin ``index`` for tooltips and selections.

        Raises:
            IndexError: If ``index`` is not a bin of the published state.
        """
        if not 0 <= index < len(self._state.count):
            msg = f"Bin index {index} out of range for {len(self._state.count)} bin(s)"
            raise IndexError(msg)
        return {
            "midpoint": self._state.midpoints[index],
            "bin_start": self._state.edges[index],
            "bin_end": self._state.edges[index + 1],
            "index": index,
            "count": self._state.count[index],
        }

    def to_hist(self) -> hist.Hist:
        """
        Convert the published bins into a :class:`hist.Hist`.

        Raises:
            ValueError: Without data, or when the domain is degenerate.
        """
        if self._state.is_empty:
            msg = "Histogram has no data to convert"
            raise ValueError(msg)
        h = hist.Hist(
            hist.axis.Variable(self._state.edges, name="sample"),
            storage=hist.storage.Double(),
        )
        h.view()[...] = self._state.count
        return h

    def close(self) -> None:
        """Withdraw this node's contributions from its scales."""
        self.coordinator.withdraw()


__all__ = ("HistogramNode", "HistogramState")
