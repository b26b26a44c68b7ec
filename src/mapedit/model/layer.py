# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Summary of a mapfile LAYER as shown in layer listings."""

from __future__ import annotations

from pydantic import BaseModel

# ###############
# Public Interface
# ###############


class LayerInfo(BaseModel):
    """Name, geometry type and display title of one LAYER.

    Attributes:
        name: The layer's ``NAME``.
        type: The ``TYPE`` value as written, or None.
        title: The ``TITLE`` directive, else the first title-like METADATA entry.
        line: 1-based line number of the ``LAYER`` opener.
    """

    name: str
    type: str | None = None
    title: str | None = None
    line: int = 0
