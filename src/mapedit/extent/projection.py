# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Extent reprojection between coordinate reference systems using pyproj."""

from __future__ import annotations

import functools
import logging
import math
from collections.abc import Callable

from pyproj import Transformer
from pyproj.exceptions import ProjError

from mapedit.model.extent import DEGREE_CRS, Extent

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

Projector = Callable[[Extent, str, str], Extent]
"""Signature of an extent reprojection function: ``(extent, from_crs, to_crs) -> extent``."""


def project_extent(extent: Extent, from_crs: str, to_crs: str) -> Extent:
    """Reproject *extent* from *from_crs* into *to_crs*.

    All four corners are transformed and the result is their bounding box.
    Coordinates are always handled in x/y (lon/lat) order. When either
    reference system is unknown to PROJ or the transformation fails, a
    warning is logged and *extent* is returned unchanged.

    Args:
        extent: The extent to reproject.
        from_crs: Source reference system, e.g. ``CRS:84`` or ``EPSG:2100``.
        to_crs: Target reference system.

    Returns:
        The reprojected extent tagged with *to_crs*.
    """
    source = from_crs.strip().upper()
    target = to_crs.strip().upper()
    if not source or not target or source == target:
        return extent.model_copy(update={"crs": target or extent.crs})

    try:
        transformer = _transformer(source, target)
        corners = [
            (extent.minx, extent.miny),
            (extent.minx, extent.maxy),
            (extent.maxx, extent.miny),
            (extent.maxx, extent.maxy),
        ]
        points = [transformer.transform(x, y) for x, y in corners]
    except ProjError as exc:
        logger.warning("Cannot reproject extent from %s to %s: %s", source, target, exc)
        return extent

    xs = [x for x, _ in points]
    ys = [y for _, y in points]
    if not all(math.isfinite(v) for v in xs + ys):
        logger.warning("Reprojection from %s to %s produced non-finite coordinates", source, target)
        return extent
    return Extent(minx=min(xs), miny=min(ys), maxx=max(xs), maxy=max(ys), crs=target)


def is_degree_crs(crs: str) -> bool:
    """Return True when *crs* is one of the geographic (degree based) reference systems."""
    return crs.strip().upper() in DEGREE_CRS


def format_coordinate(value: float, crs: str) -> str:
    """Format one coordinate: six decimals for degree systems, three otherwise; ``0`` for non-finite values."""
    if not math.isfinite(value):
        return "0"
    return f"{value:.{6 if is_degree_crs(crs) else 3}f}"


def format_extent(extent: Extent, crs: str | None = None) -> str:
    """Render ``minx miny maxx maxy`` using the precision of *crs* (default: the extent's own)."""
    target = crs or extent.crs
    return " ".join(format_coordinate(value, target) for value in extent.bbox)


# ################
# Implementation
# ################

# PROJ knows the lon/lat WGS84 system as OGC:CRS84, not by its WMS name.
_PROJ_ALIASES = {"CRS:84": "OGC:CRS84"}


@functools.lru_cache(maxsize=64)
def _transformer(source: str, target: str) -> Transformer:
    return Transformer.from_crs(
        _PROJ_ALIASES.get(source, source),
        _PROJ_ALIASES.get(target, target),
        always_xy=True,
    )
