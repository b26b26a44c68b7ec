# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Result models for mapfile analysis (diagnostics, extents, layers, WFS verdicts)."""

from mapedit.model.diagnostics import Diagnostic, IssueKind, Recovery, Severity
from mapedit.model.extent import DEGREE_CRS, Extent
from mapedit.model.layer import LayerInfo
from mapedit.model.wfs import WfsVerdict

__all__ = [
    # Diagnostics
    "Diagnostic",
    "IssueKind",
    "Recovery",
    "Severity",
    # Extents
    "DEGREE_CRS",
    "Extent",
    # Services
    "LayerInfo",
    "WfsVerdict",
]
