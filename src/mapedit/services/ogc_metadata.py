# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Insertion of the minimal METADATA a mapfile needs to be served over WMS and WFS.

The map-level ``WEB`` block receives ``wms_enable_request`` /
``wfs_enable_request`` and the online resource URLs; every named LAYER
receives ``wms_title`` / ``wfs_title`` (its NAME) and ``gml_include_items``.
Entries that already exist are never overwritten; only missing keys and
missing blocks are added.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel
from pydantic import Field as _Field

from mapedit.parser.blocks import LineIndex
from mapedit.parser.lexer import split_lines
from mapedit.parser.metadata import metadata_entry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_ONLINE_RESOURCE = "http://localhost:4300/api/wms"


class MetadataUpdate(BaseModel):
    """Outcome of :func:`ensure_ogc_metadata`.

    Attributes:
        text: The rewritten mapfile (the input when nothing was added).
        changed: True when *text* differs from the input.
        web_keys: Keys added to the WEB METADATA block.
        layer_keys: Keys added per LAYER, keyed by layer name.
    """

    text: str
    changed: bool = False
    web_keys: list[str] = _Field(default_factory=list)
    layer_keys: dict[str, list[str]] = _Field(default_factory=dict)


def web_metadata_defaults(online_resource: str = DEFAULT_ONLINE_RESOURCE) -> dict[str, str]:
    """Return the WEB METADATA entries that enable WMS and WFS requests."""
    return {
        "wms_enable_request": "*",
        "wfs_enable_request": "*",
        "wms_onlineresource": online_resource,
        "wfs_onlineresource": online_resource,
    }


def layer_metadata_defaults(name: str) -> dict[str, str]:
    """Return the LAYER METADATA entries that title a layer for WMS and WFS."""
    return {"wms_title": name, "wfs_title": name, "gml_include_items": "all"}


def ensure_ogc_metadata(
    text: str,
    online_resource: str = DEFAULT_ONLINE_RESOURCE,
    *,
    web: bool = True,
    layers: bool = True,
) -> MetadataUpdate:
    """Add the WEB and LAYER metadata entries a mapfile is missing.

    A missing WEB block is inserted before the first LAYER of the MAP (or
    before the MAP's END), so that every layer inherits it. A missing
    METADATA block is created as the last child of its WEB or LAYER. Unnamed
    layers are skipped.

    Args:
        text: The mapfile source.
        online_resource: URL written to ``wms_onlineresource`` / ``wfs_onlineresource``.
        web: Complete the WEB METADATA block.
        layers: Complete the METADATA of every named LAYER.

    Returns:
        A :class:`MetadataUpdate`. When the MAP block cannot be located the
        input text is returned unchanged.
    """
    newline = "\r\n" if "\r\n" in text else "\n"
    index = LineIndex(split_lines(text))

    map_start = index.find_block_start("MAP")
    if map_start < 0 or not index.infos[map_start].is_opener:
        logger.warning("No MAP block found; metadata left untouched")
        return MetadataUpdate(text=text)
    map_end = index.find_block_end(map_start)
    if map_end <= map_start:
        logger.warning("END of the MAP block opened at line %d not found; metadata left untouched", map_start + 1)
        return MetadataUpdate(text=text)

    web_keys: list[str] = []
    if web:
        web_keys = _ensure_web(index, map_start, map_end, web_metadata_defaults(online_resource))
        map_end = index.find_block_end(map_start)

    layer_keys: dict[str, list[str]] = {}
    if layers:
        cursor = map_start + 1
        while cursor < map_end:
            info = index.infos[cursor]
            if not (info.is_opener and info.first_word == "LAYER"):
                cursor += 1
                continue
            layer_end = index.find_block_end(cursor)
            if layer_end <= cursor:
                break
            name = _layer_name(index, cursor, layer_end)
            if name is None:
                cursor = layer_end + 1
                continue
            added = _ensure_metadata_entries(index, cursor, layer_end, layer_metadata_defaults(name))
            if added:
                logger.debug("LAYER %s: added %s", name, ", ".join(added))
                layer_keys[name] = added
            map_end = index.find_block_end(map_start)
            cursor = index.find_block_end(cursor) + 1

    out = newline.join(index.lines)
    return MetadataUpdate(text=out, changed=out != text, web_keys=web_keys, layer_keys=layer_keys)


def ensure_metadata(text: str, online_resource: str = DEFAULT_ONLINE_RESOURCE) -> str:
    """Same as :func:`ensure_ogc_metadata` but return only the rewritten text."""
    return ensure_ogc_metadata(text, online_resource).text


# ################
# Implementation
# ################


def _ensure_web(index: LineIndex, map_start: int, map_end: int, defaults: dict[str, str]) -> list[str]:
    web_start = index.find_block_start("WEB", map_start + 1, map_end)
    if web_start < 0 or not index.infos[web_start].is_opener:
        at = index.find_block_start("LAYER", map_start + 1, map_end)
        at = map_end if at < 0 else at
        outer = index.inner_indent(map_start, map_end)
        unit = _indent_unit(index, map_start, map_end)
        block = [f"{outer}WEB", f"{outer}{unit}METADATA"]
        block += [f"{outer}{unit * 2}{_entry(key, value)}" for key, value in defaults.items()]
        block += [f"{outer}{unit}END", f"{outer}END"]
        _insert_lines(index, at, block)
        logger.debug("Line %d: inserted WEB block", at + 1)
        return list(defaults)

    web_end = index.find_block_end(web_start)
    if web_end <= web_start:
        logger.warning("END of the WEB block opened at line %d not found; WEB metadata left untouched", web_start + 1)
        return []
    return _ensure_metadata_entries(index, web_start, web_end, defaults)


def _ensure_metadata_entries(index: LineIndex, start: int, end: int, defaults: dict[str, str]) -> list[str]:
    """Add the missing *defaults* to the direct METADATA child of a block. Return the added keys."""
    meta_start = -1
    for line_index, depth, info in index.walk(start, end):
        if depth == 1 and info.is_opener and info.first_word == "METADATA":
            meta_start = line_index
            break

    if meta_start < 0:
        outer = index.inner_indent(start, end)
        unit = _indent_unit(index, start, end)
        block = [f"{outer}METADATA"]
        block += [f"{outer}{unit}{_entry(key, value)}" for key, value in defaults.items()]
        block += [f"{outer}END"]
        _insert_lines(index, end, block)
        return list(defaults)

    meta_end = index.find_block_end(meta_start)
    if meta_end <= meta_start:
        return []
    present: set[str] = set()
    for line_index in range(meta_start + 1, meta_end):
        entry = metadata_entry(index.lines[line_index], index.infos[line_index].scan)
        if entry is not None:
            present.add(entry.key.lower())
    missing = [key for key in defaults if key not in present]
    indent = index.inner_indent(meta_start, meta_end)
    _insert_lines(index, meta_end, [f"{indent}{_entry(key, defaults[key])}" for key in missing])
    return missing


def _layer_name(index: LineIndex, start: int, end: int) -> str | None:
    for _, depth, info in index.walk(start, end):
        if depth == 1 and info.first_word == "NAME" and len(info.scan.tokens) > 1:
            return info.scan.tokens[1].text
    return None


def _indent_unit(index: LineIndex, start: int, end: int) -> str:
    outer = index.lines[start][: len(index.lines[start]) - len(index.lines[start].lstrip())]
    inner = index.inner_indent(start, end)
    if inner.startswith(outer) and len(inner) > len(outer):
        return inner[len(outer) :]
    return "  "


def _insert_lines(index: LineIndex, at: int, lines: list[str]) -> None:
    for offset, line in enumerate(lines):
        index.insert(at + offset, line)


def _entry(key: str, value: str) -> str:
    return f'"{key}" "{value}"'
