# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Listing of the named layers of a mapfile with their display titles."""

from __future__ import annotations

from collections.abc import Iterable

from mapedit.model.layer import LayerInfo
from mapedit.parser.blocks import LineIndex, resolve_openers
from mapedit.parser.lexer import split_lines
from mapedit.parser.metadata import metadata_entry

# ###############
# Public Interface
# ###############

TITLE_METADATA_KEYS: tuple[str, ...] = ("wms_title", "ows_title", "title", "wfs_title", "gml_featuretype_title")
"""METADATA keys consulted for a layer title, in priority order, after ``TITLE``."""


def list_layers(text: str, *, extra_openers: Iterable[str] = ()) -> list[LayerInfo]:
    """Return every named, closed LAYER block of *text* in source order.

    ``NAME``, ``TYPE`` and ``TITLE`` are read from direct children of the
    LAYER. Title metadata is read from METADATA blocks that are direct
    children too, so a ``wms_title`` inside a CLASS does not name the layer.

    Args:
        text: The mapfile source.
        extra_openers: Additional block keywords.

    Returns:
        One :class:`LayerInfo` per layer. Layers without a ``NAME`` and a
        trailing LAYER that never closes are left out.
    """
    index = LineIndex(split_lines(text), resolve_openers(extra_openers))
    layers: list[LayerInfo] = []
    cursor = 0
    while cursor < len(index):
        info = index.infos[cursor]
        if not (info.is_opener and info.first_word == "LAYER"):
            cursor += 1
            continue
        end = index.find_block_end(cursor)
        if end <= cursor:
            break
        layer = _read_layer(index, cursor, end)
        if layer is not None:
            layers.append(layer)
        cursor = end + 1
    return layers


def layer_title(title: str | None, metadata: dict[str, str]) -> str | None:
    """Pick the display title: the ``TITLE`` directive, then title metadata by priority."""
    if title:
        return title
    lowered = {key.lower(): value for key, value in metadata.items()}
    for key in TITLE_METADATA_KEYS:
        if lowered.get(key):
            return lowered[key]
    return None


# ################
# Implementation
# ################


def _read_layer(index: LineIndex, start: int, end: int) -> LayerInfo | None:
    directives: dict[str, str] = {}
    metadata: dict[str, str] = {}
    for line_index, depth, info in index.walk(start, end):
        if depth != 1:
            continue
        if info.is_opener and info.first_word == "METADATA":
            meta_end = index.find_block_end(line_index)
            for meta_line in range(line_index + 1, meta_end):
                entry = metadata_entry(index.lines[meta_line], index.infos[meta_line].scan)
                if entry is not None:
                    metadata.setdefault(entry.key, entry.value)
        elif info.first_word in ("NAME", "TYPE", "TITLE") and len(info.scan.tokens) > 1:
            directives.setdefault(info.first_word, info.scan.tokens[1].text)

    name = directives.get("NAME")
    if not name:
        return None
    return LayerInfo(
        name=name,
        type=directives.get("TYPE"),
        title=layer_title(directives.get("TITLE"), metadata),
        line=start + 1,
    )
