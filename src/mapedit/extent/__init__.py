# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Viewport-driven EXTENT synchronization and extent reprojection."""

from mapedit.extent.projection import Projector, format_coordinate, format_extent, project_extent
from mapedit.extent.sync import ExtentSyncResult, extract_block_crs, sync_extent, synchronize_extent

__all__ = [
    # Projection
    "Projector",
    "format_coordinate",
    "format_extent",
    "project_extent",
    # Synchronization
    "ExtentSyncResult",
    "extract_block_crs",
    "sync_extent",
    "synchronize_extent",
]
