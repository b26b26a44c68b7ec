# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Bounding boxes tagged with a coordinate reference system."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

# ###############
# Public Interface
# ###############

DEGREE_CRS: frozenset[str] = frozenset({"EPSG:4326", "EPSG:4258", "CRS:84"})
"""Reference systems whose coordinates are degrees."""


class Extent(BaseModel):
    """An axis-aligned bounding box in a given reference system.

    Corners are always normalized on construction so that ``minx <= maxx``
    and ``miny <= maxy``, whatever order the input corners came in.
    """

    model_config = ConfigDict(frozen=True)

    minx: float
    miny: float
    maxx: float
    maxy: float
    crs: str = "CRS:84"

    @model_validator(mode="before")
    @classmethod
    def _order_corners(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not all(k in data for k in ("minx", "miny", "maxx", "maxy")):
            return data
        try:
            x1, x2 = float(data["minx"]), float(data["maxx"])
            y1, y2 = float(data["miny"]), float(data["maxy"])
        except (TypeError, ValueError):
            return data
        return {**data, "minx": min(x1, x2), "maxx": max(x1, x2), "miny": min(y1, y2), "maxy": max(y1, y2)}

    @classmethod
    def from_bbox(cls, bbox: Sequence[float], crs: str = "CRS:84") -> Extent:
        """Build an extent from a ``(x1, y1, x2, y2)`` sequence in any corner order."""
        if len(bbox) != 4:
            raise ValueError(f"an extent needs 4 coordinates, got {len(bbox)}")
        x1, y1, x2, y2 = bbox
        return cls(minx=x1, miny=y1, maxx=x2, maxy=y2, crs=crs)

    @property
    def bbox(self) -> tuple[float, float, float, float]:
        """Return ``(minx, miny, maxx, maxy)``."""
        return (self.minx, self.miny, self.maxx, self.maxy)
