# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Synchronization of MAP and LAYER extents with a viewport bounding box.

The viewport is reprojected into the reference system of every block before
the block's depth-1 ``EXTENT`` line is replaced or inserted. Existing
``wms_extent`` / ``wfs_extent`` metadata values are rewritten alongside, but
never added.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence

from pydantic import BaseModel
from pydantic import Field as _Field

from mapedit.extent.projection import Projector, format_extent, project_extent
from mapedit.model.diagnostics import Recovery
from mapedit.model.extent import Extent
from mapedit.parser.blocks import LineIndex
from mapedit.parser.lexer import split_lines
from mapedit.parser.metadata import metadata_entry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_VIEWPORT_CRS = "CRS:84"

METADATA_EXTENT_KEYS: frozenset[str] = frozenset({"wms_extent", "wfs_extent"})

SRS_METADATA_KEYS: tuple[str, ...] = ("wfs_srs", "wms_srs", "ows_srs")


class ExtentSyncResult(BaseModel):
    """Outcome of :func:`synchronize_extent`.

    Attributes:
        text: The rewritten mapfile (the input when nothing could be done).
        changed: True when *text* differs from the input.
        map_crs: Reference system used for the MAP block, None if no MAP was found.
        layer_crs: Reference system used per LAYER, keyed by layer name.
        recoveries: Heuristic fallbacks that fired while locating blocks.
    """

    text: str
    changed: bool = False
    map_crs: str | None = None
    layer_crs: dict[str, str] = _Field(default_factory=dict)
    recoveries: list[Recovery] = _Field(default_factory=list)


def synchronize_extent(
    text: str,
    viewport: Extent | Sequence[float],
    viewport_crs: str = DEFAULT_VIEWPORT_CRS,
    *,
    add_missing: bool = True,
    update_map: bool = True,
    update_layers: bool = True,
    projector: Projector = project_extent,
) -> ExtentSyncResult:
    """Rewrite MAP and LAYER extents to match a viewport.

    Args:
        text: The mapfile source.
        viewport: The viewport as an :class:`Extent` or ``(x1, y1, x2, y2)`` in any corner order.
        viewport_crs: Reference system of a sequence viewport; ignored for an :class:`Extent`.
        add_missing: Insert an ``EXTENT`` line where a block has none.
        update_map: Rewrite the MAP block's extent.
        update_layers: Rewrite the extent of every LAYER block.
        projector: Reprojection function, :func:`project_extent` by default.

    Returns:
        An :class:`ExtentSyncResult`. When the MAP block cannot be located the
        input text is returned unchanged.
    """
    if not text.strip():
        return ExtentSyncResult(text=text)

    source = viewport if isinstance(viewport, Extent) else Extent.from_bbox(viewport, viewport_crs)
    newline = "\r\n" if "\r\n" in text else "\n"
    index = LineIndex(split_lines(text))
    recoveries: list[Recovery] = []

    map_start = index.find_block_start("MAP")
    if map_start < 0:
        logger.warning("No MAP block found; extent left untouched")
        return ExtentSyncResult(text=text)

    map_end = index.find_block_end(map_start)
    if map_end <= map_start:
        fallback = index.find_last_end(map_start)
        if fallback <= map_start:
            logger.warning("END of the MAP block opened at line %d not found; extent left untouched", map_start + 1)
            return ExtentSyncResult(text=text)
        logger.warning(
            "END of the MAP block not found by depth counting; using the last END at line %d", fallback + 1
        )
        recoveries.append(Recovery.LAST_END)
        map_end = fallback

    map_crs = (
        _block_crs(index, map_start, map_end)
        or _first_layer_crs(index, map_start, map_end)
        or DEFAULT_VIEWPORT_CRS
    )
    logger.debug("MAP reference system: %s", map_crs)

    if update_map:
        target = projector(source, source.crs, map_crs)
        map_end += _write_extent(index, map_start, map_end, format_extent(target, map_crs), "MAP", add_missing)
        _rewrite_metadata_extents(index, map_start, map_end, format_extent(target, map_crs))

    layer_crs: dict[str, str] = {}
    if update_layers:
        cursor = map_start + 1
        while cursor < map_end:
            info = index.infos[cursor]
            if not (info.is_opener and info.first_word == "LAYER"):
                cursor += 1
                continue
            layer_end = index.find_block_end(cursor)
            if layer_end <= cursor:
                cursor += 1
                continue

            crs = _block_crs(index, cursor, layer_end) or map_crs
            name = _layer_name(index, cursor, layer_end) or f"(unnamed@{cursor + 1})"
            layer_crs[name] = crs
            logger.debug("LAYER %s reference system: %s", name, crs)

            target = projector(source, source.crs, crs)
            inserted = _write_extent(index, cursor, layer_end, format_extent(target, crs), "LAYER", add_missing)
            layer_end += inserted
            map_end += inserted
            _rewrite_metadata_extents(index, cursor, layer_end, format_extent(target, crs))
            cursor = layer_end + 1

    out = newline.join(index.lines)
    return ExtentSyncResult(
        text=out,
        changed=out != text,
        map_crs=map_crs,
        layer_crs=layer_crs,
        recoveries=recoveries,
    )


def sync_extent(
    text: str,
    viewport: Extent | Sequence[float],
    viewport_crs: str = DEFAULT_VIEWPORT_CRS,
    *,
    add_missing: bool = True,
    update_map: bool = True,
    update_layers: bool = True,
    projector: Projector = project_extent,
) -> str:
    """Same as :func:`synchronize_extent` but return only the rewritten text."""
    return synchronize_extent(
        text,
        viewport,
        viewport_crs,
        add_missing=add_missing,
        update_map=update_map,
        update_layers=update_layers,
        projector=projector,
    ).text


def extract_block_crs(text: str, keyword: str = "MAP") -> str | None:
    """Return the reference system declared by the first *keyword* block of *text*, if any."""
    index = LineIndex(split_lines(text))
    start = index.find_block_start(keyword)
    if start < 0:
        return None
    end = index.find_block_end(start)
    if end <= start:
        end = len(index)
    return _block_crs(index, start, end)


# ################
# Implementation
# ################

_EPSG_RE = re.compile(r"EPSG\s*:\s*(\d+)", re.IGNORECASE)
_INIT_EPSG_RE = re.compile(r"init\s*=\s*epsg\s*:\s*(\d+)", re.IGNORECASE)
_SRID_RE = re.compile(r"\bsrid\s*=\s*(\d+)", re.IGNORECASE)

_METADATA_LINE_RE = re.compile(
    r"""^(?P<indent>\s*)
        (?:(?P<kq>["'])(?P<qkey>[^"']*)(?P=kq)|(?P<key>[A-Za-z0-9_]+))
        \s+
        (?:(?P<vq>["'])(?P<qval>.*?)(?P=vq)|(?P<val>[^\s#"'][^#]*?))
        (?P<comment>\s*(?:(?:\#|//).*)?)$""",
    re.VERBOSE,
)


def _projection_span(index: LineIndex, start: int, end: int) -> tuple[int, int] | None:
    """Return the first and last line of a block's direct PROJECTION child.

    Both the multi-line form and ``PROJECTION "init=epsg:2100" END`` on one
    line are recognized; the latter spans a single line.
    """
    for line_index, depth, info in index.walk(start, end):
        if depth != 1 or info.first_word != "PROJECTION":
            continue
        if info.is_opener:
            return line_index, index.find_block_end(line_index)
        if any(word.upper == "END" for word in info.scan.words[1:]):
            return line_index, line_index
    return None


def _block_crs(index: LineIndex, start: int, end: int) -> str | None:
    """Resolve a block's reference system: PROJECTION, then ``srid=``, then SRS metadata."""
    projection = _projection_span(index, start, end)
    if projection is not None:
        chunk = "\n".join(index.lines[projection[0] : projection[1] + 1])
        match = _EPSG_RE.search(chunk) or _INIT_EPSG_RE.search(chunk)
        if match is not None:
            return f"EPSG:{match.group(1)}"

    for line_index, depth, info in index.walk(start, end):
        if depth == 1 and info.first_word in ("DATA", "CONNECTION"):
            match = _SRID_RE.search(index.lines[line_index])
            if match is not None:
                return f"EPSG:{match.group(1)}"

    entries: dict[str, str] = {}
    for meta_start, meta_end in _metadata_blocks(index, start, end):
        for line_index in range(meta_start + 1, meta_end):
            entry = metadata_entry(index.lines[line_index], index.infos[line_index].scan)
            if entry is not None:
                entries.setdefault(entry.key.lower(), entry.value)
    for key in SRS_METADATA_KEYS:
        match = _EPSG_RE.search(entries.get(key, ""))
        if match is not None:
            return f"EPSG:{match.group(1)}"
    return None


def _first_layer_crs(index: LineIndex, map_start: int, map_end: int) -> str | None:
    for line_index, _, info in index.walk(map_start, map_end):
        if info.is_opener and info.first_word == "LAYER":
            layer_end = index.find_block_end(line_index)
            if layer_end > line_index:
                return _block_crs(index, line_index, layer_end)
    return None


def _layer_name(index: LineIndex, start: int, end: int) -> str | None:
    for line_index, depth, info in index.walk(start, end):
        if depth == 1 and info.first_word == "NAME" and len(info.scan.tokens) > 1:
            return info.scan.tokens[1].text
    return None


def _metadata_blocks(index: LineIndex, start: int, end: int) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` of METADATA blocks inside a span, skipping nested LAYER blocks."""
    cursor = start + 1
    while cursor < end:
        info = index.infos[cursor]
        if info.is_opener and info.first_word in ("LAYER", "METADATA"):
            block_end = index.find_block_end(cursor)
            if block_end > cursor:
                if info.first_word == "METADATA":
                    yield cursor, block_end
                cursor = block_end + 1
                continue
        cursor += 1


def _write_extent(index: LineIndex, start: int, end: int, values: str, kind: str, add_missing: bool) -> int:
    """Replace or insert the depth-1 EXTENT of a block. Return the number of inserted lines."""
    for line_index, depth, info in index.walk(start, end):
        if depth == 1 and info.first_word == "EXTENT":
            line = index.lines[line_index]
            replacement = line[: len(line) - len(line.lstrip())] + f"EXTENT {values}"
            if replacement != line:
                logger.debug("Line %d: %s EXTENT -> %s", line_index + 1, kind, values)
                index.replace(line_index, replacement)
            return 0

    if not add_missing:
        return 0

    after = min(max(_insert_after(index, start, end, kind), start), end - 1)
    index.insert(after + 1, f"{index.inner_indent(start, end)}EXTENT {values}")
    logger.debug("Line %d: inserted %s EXTENT %s", after + 2, kind, values)
    return 1


def _insert_after(index: LineIndex, start: int, end: int, kind: str) -> int:
    projection = _projection_span(index, start, end)
    if projection is not None:
        return projection[1]

    anchor = "SIZE" if kind == "MAP" else "NAME"
    for line_index, depth, info in index.walk(start, end):
        if depth == 1 and info.first_word == anchor:
            return line_index
    return start


def _rewrite_metadata_extents(index: LineIndex, start: int, end: int, values: str) -> None:
    """Rewrite the value of existing ``wms_extent`` / ``wfs_extent`` entries inside a span."""
    for meta_start, meta_end in _metadata_blocks(index, start, end):
        for line_index in range(meta_start + 1, meta_end):
            info = index.infos[line_index]
            if not info.has_code:
                continue
            line = index.lines[line_index]
            match = _METADATA_LINE_RE.match(line)
            if match is None:
                continue
            key = match.group("qkey") if match.group("kq") else match.group("key")
            if key.lower() not in METADATA_EXTENT_KEYS:
                continue
            key_token = f"{match.group('kq')}{key}{match.group('kq')}" if match.group("kq") else key
            value_token = f"{match.group('vq')}{values}{match.group('vq')}" if match.group("vq") else values
            rendered = f"{match.group('indent')}{key_token} {value_token}{match.group('comment')}"
            if rendered != line:
                logger.debug("Line %d: %s -> %s", line_index + 1, key, values)
                index.replace(line_index, rendered)
