# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""High-level tests for the MapEdit result models."""

import pydantic
import pytest

from mapedit.model import Diagnostic, Extent, IssueKind, LayerInfo, Severity, WfsVerdict


def test_diagnostic_location() -> None:
    """The location omits the column for end-of-file issues."""
    located = Diagnostic(line_no=3, col=5, kind=IssueKind.NESTING, severity=Severity.HARD, message="m")
    eof = Diagnostic(line_no=9, col=0, kind=IssueKind.MISSING_END, severity=Severity.HARD, message="m")
    assert located.location() == "line 3, column 5"
    assert eof.location() == "line 9"


def test_diagnostic_severity() -> None:
    """is_hard reflects the severity."""
    soft = Diagnostic(line_no=1, col=1, kind=IssueKind.CONTEXT, severity=Severity.SOFT, message="m")
    assert not soft.is_hard
    assert soft.excerpt == ""


def test_diagnostic_is_frozen() -> None:
    """Diagnostics are immutable once created."""
    diag = Diagnostic(line_no=1, col=1, kind=IssueKind.CONTEXT, severity=Severity.SOFT, message="m")
    with pytest.raises(pydantic.ValidationError):
        diag.line_no = 2  # type: ignore[misc]


def test_extent_corners_are_normalized() -> None:
    """Swapped corners are put in min/max order on construction."""
    extent = Extent(minx=5, miny=8, maxx=1, maxy=2, crs="EPSG:2100")
    assert extent.bbox == (1, 2, 5, 8)


def test_extent_from_bbox() -> None:
    """from_bbox accepts any corner order and defaults to CRS:84."""
    extent = Extent.from_bbox([21.0, 36.0, 20.0, 35.0])
    assert extent.bbox == (20.0, 35.0, 21.0, 36.0)
    assert extent.crs == "CRS:84"


def test_extent_from_bbox_needs_four_values() -> None:
    """A bounding box with the wrong number of values is rejected."""
    with pytest.raises(ValueError, match="4 coordinates"):
        Extent.from_bbox([1.0, 2.0])


def test_wfs_verdict_defaults() -> None:
    """A verdict starts with an empty reason trail."""
    verdict = WfsVerdict(supported=False)
    assert verdict.reasons == []


def test_layer_info_defaults() -> None:
    """Only the name is required for a layer summary."""
    layer = LayerInfo(name="roads")
    assert (layer.type, layer.title, layer.line) == (None, None, 0)
