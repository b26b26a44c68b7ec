# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""OGC service support for mapfile layers: listing, WFS checks and metadata defaults."""

from mapedit.services.layers import list_layers
from mapedit.services.ogc_metadata import MetadataUpdate, ensure_metadata, ensure_ogc_metadata
from mapedit.services.wfs_support import classify_wfs_support, compute_layer_verdict

__all__ = [
    "MetadataUpdate",
    "classify_wfs_support",
    "compute_layer_verdict",
    "ensure_metadata",
    "ensure_ogc_metadata",
    "list_layers",
]
