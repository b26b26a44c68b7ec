# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""WFS exposability verdicts for mapfile layers."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class WfsVerdict(BaseModel):
    """Whether a layer can be served through WFS, with the reasoning trail."""

    supported: bool
    reasons: list[str] = _Field(default_factory=list)
