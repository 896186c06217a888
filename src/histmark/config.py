"""
Configuration of a histogram node.

:class:`HistogramConfig` lists every input attribute of a histogram together
with its default. Instances are composed by value: a node copies the config it
is given and validates each change against it.
"""

from __future__ import annotations

from typing import Any, Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from histmark.domains import PreserveDomain


class ScaleMetadata(BaseModel):
    """
    Role of one data attribute with respect to the axes.

    Parameters:
        orientation: Direction the attribute is drawn along
        dimension: Axis dimension the attribute maps to
    """

    model_config = ConfigDict(frozen=True)

    orientation: Literal["horizontal", "vertical"]
    dimension: Literal["x", "y"]


def default_scales_metadata() -> dict[str, ScaleMetadata]:
    """Samples run along the horizontal x axis, counts along the vertical y axis."""
    return {
        "sample": ScaleMetadata(orientation="horizontal", dimension="x"),
        "count": ScaleMetadata(orientation="vertical", dimension="y"),
    }


class HistogramConfig(BaseModel):
    """
    Input attributes of a histogram node.

    Attributes:
        bins: Number of bins, at least one (default 10)
        sample: Raw values to aggregate (default empty)
        normalized: Publish a probability density instead of raw counts (default False)
        preserve_domain: Per-axis flags keeping the scales' domains (default both False)
        scales_metadata: Axis role of the ``sample`` and ``count`` attributes
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    bins: PositiveInt = 10
    sample: list[float] = Field(default_factory=list, repr=False)
    normalized: bool = False
    preserve_domain: PreserveDomain = Field(default_factory=PreserveDomain)
    scales_metadata: dict[str, ScaleMetadata] = Field(
        default_factory=default_scales_metadata, repr=False
    )

    @field_validator("sample", mode="before")
    @classmethod
    def coerce_sample(cls, value: Any) -> Any:
        """Accept any one-dimensional array-like of numbers, e.g. numpy arrays."""
        if isinstance(value, (list, tuple)):
            return value
        array = np.asarray(value)
        if array.ndim > 1:
            msg = f"sample must be one-dimensional, got shape {array.shape}"
            raise ValueError(msg)
        return array.ravel().tolist()

    def updated(self, **changes: Any) -> HistogramConfig:
        """
        Return a validated copy with ``changes`` applied.

        Raises:
            pydantic.ValidationError: If a changed value is invalid or unknown.
        """
        return type(self).model_validate({**dict(self), **changes})


__all__ = ("HistogramConfig", "ScaleMetadata", "default_scales_metadata")
