# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Offline, strict WFS-capability classification of mapfile layers.

A layer is reported as WFS capable only when all of these hold:

1. It is not ``TYPE RASTER`` (WFS serves vector features only).
2. WFS is explicitly enabled by ``wfs_enable_request`` or
   ``ows_enable_request``, on the layer or inherited from ``WEB`` metadata,
   with a value that allows ``GetFeature`` (or ``*`` / ``all``).
3. The layer's own METADATA provides a title (``wfs_title`` / ``ows_title``)
   and an SRS (``wfs_srs`` / ``ows_srs``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from mapedit.model.wfs import WfsVerdict
from mapedit.parser.blocks import BlockStack, LineIndex
from mapedit.parser.lexer import split_lines
from mapedit.parser.metadata import metadata_entry

# ###############
# Public Interface
# ###############

ENABLE_KEYS: tuple[str, ...] = ("wfs_enable_request", "ows_enable_request")
TITLE_KEYS: tuple[str, ...] = ("wfs_title", "ows_title")
SRS_KEYS: tuple[str, ...] = ("wfs_srs", "ows_srs")

_DISABLED_VALUES = frozenset({"", "none", "0", "false", "off"})


def compute_layer_verdict(
    layer_type: str | None,
    layer_metadata: Mapping[str, str],
    web_metadata: Mapping[str, str],
) -> WfsVerdict:
    """Apply the strict WFS rules to one layer.

    Rules are evaluated in order and the first failing rule decides. Metadata
    keys are matched case-insensitively.

    Args:
        layer_type: The layer's ``TYPE`` value, if any.
        layer_metadata: Entries of the layer's own METADATA block.
        web_metadata: Entries of the map-level ``WEB`` METADATA block.

    Returns:
        The verdict together with the ordered reasons that led to it.
    """
    layer_meta = _lower_keys(layer_metadata)
    web_meta = _lower_keys(web_metadata)

    if (layer_type or "").strip().upper() == "RASTER":
        return WfsVerdict(supported=False, reasons=["TYPE=RASTER (WFS is vector-only)"])

    enable = _find_enable_flag(layer_meta, web_meta)
    if enable is None:
        return WfsVerdict(
            supported=False,
            reasons=["missing enable metadata (wfs_enable_request / ows_enable_request)"],
        )

    key, value, scope = enable
    reasons = [f"{key}={value} (scope={scope})"]
    if not _allows_get_feature(value):
        return WfsVerdict(supported=False, reasons=[*reasons, "enable metadata does not allow GetFeature"])

    missing = []
    if not _has_any(layer_meta, TITLE_KEYS):
        missing.append("missing wfs_title/ows_title")
    if not _has_any(layer_meta, SRS_KEYS):
        missing.append("missing wfs_srs/ows_srs")
    if missing:
        return WfsVerdict(supported=False, reasons=[*reasons, *missing])

    return WfsVerdict(supported=True, reasons=[*reasons, "has basic WFS metadata (title + srs)"])


def classify_wfs_support(text: str) -> dict[str, WfsVerdict]:
    """Classify every named LAYER of a mapfile.

    Each verdict is computed when its LAYER block closes, using the WEB
    metadata seen up to that point. Layers without a ``NAME`` are skipped.

    Args:
        text: The mapfile source.

    Returns:
        Mapping from layer name to :class:`WfsVerdict`, in source order.
    """
    index = LineIndex(split_lines(text))
    stack = BlockStack()
    web_metadata: dict[str, str] = {}
    current: _LayerState | None = None
    verdicts: dict[str, WfsVerdict] = {}

    for line, info in zip(index.lines, index.infos, strict=True):
        if not info.has_code:
            continue

        if info.is_end:
            popped = stack.close().popped
            if popped is not None and popped.kind == "LAYER" and current is not None:
                if current.name:
                    verdicts[current.name] = compute_layer_verdict(current.type, current.metadata, web_metadata)
                current = None
            continue

        if info.is_opener and info.first_word is not None:
            stack.push(info.first_word, 0, 0)
            if info.first_word == "LAYER":
                current = _LayerState()
            continue

        context = stack.current.kind
        in_layer = stack.contains("LAYER")

        if context == "METADATA" and stack.contains("WEB") and not in_layer:
            entry = metadata_entry(line, info.scan)
            if entry is not None:
                web_metadata[entry.key] = entry.value
            continue

        if current is None:
            continue

        if context == "LAYER":
            tokens = info.scan.tokens
            if info.first_word == "NAME" and len(tokens) > 1:
                current.name = tokens[1].text
            elif info.first_word == "TYPE" and len(tokens) > 1:
                current.type = tokens[1].text
        elif context == "METADATA" and in_layer and stack.open_frames[-2].kind == "LAYER":
            entry = metadata_entry(line, info.scan)
            if entry is not None:
                current.metadata[entry.key] = entry.value

    return verdicts


# ################
# Implementation
# ################


@dataclass
class _LayerState:
    name: str | None = None
    type: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)


def _lower_keys(entries: Mapping[str, str]) -> dict[str, str]:
    return {key.lower(): value for key, value in entries.items()}


def _find_enable_flag(layer_meta: Mapping[str, str], web_meta: Mapping[str, str]) -> tuple[str, str, str] | None:
    for scope, entries in (("layer", layer_meta), ("web", web_meta)):
        for key in ENABLE_KEYS:
            if key in entries:
                return key, entries[key], scope
    return None


def _allows_get_feature(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _DISABLED_VALUES:
        return False
    return "getfeature" in lowered or "*" in lowered or "all" in lowered


def _has_any(entries: Mapping[str, str], keys: tuple[str, ...]) -> bool:
    return any(entries.get(key, "").strip() for key in keys)
