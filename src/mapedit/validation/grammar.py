# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Static grammar tables for the heuristic syntax/context checker.

The tables are deliberately not exhaustive: they cover the keywords commonly
seen in MapServer 7/8 mapfiles so that obvious context mistakes and typos can
be flagged. MapServer itself remains the authority on validity.
"""

from mapedit.parser.blocks import ROOT

# ###############
# Public Interface
# ###############

ALLOWED_PARENTS: dict[str, frozenset[str]] = {
    "MAP": frozenset({ROOT}),
    "LAYER": frozenset({"MAP"}),
    "CLASS": frozenset({"LAYER"}),
    "STYLE": frozenset({"CLASS", "LABEL", "LEADER"}),
    "LABEL": frozenset({"CLASS", "LEGEND", "SCALEBAR"}),
    "LEADER": frozenset({"CLASS"}),
    "WEB": frozenset({"MAP"}),
    "METADATA": frozenset({"MAP", "LAYER", "CLASS", "WEB", "OUTPUTFORMAT"}),
    "PROJECTION": frozenset({"MAP", "LAYER"}),
    "OUTPUTFORMAT": frozenset({"MAP"}),
    "SYMBOL": frozenset({"MAP", ROOT}),
    "LEGEND": frozenset({"MAP"}),
    "SCALEBAR": frozenset({"MAP"}),
    "QUERYMAP": frozenset({"MAP"}),
    "REFERENCE": frozenset({"MAP"}),
    "CLUSTER": frozenset({"LAYER"}),
    "GRID": frozenset({"LAYER"}),
    "COMPOSITE": frozenset({"LAYER"}),
    "FEATURE": frozenset({"LAYER"}),
    "JOIN": frozenset({"LAYER"}),
    "IDENTIFY": frozenset({"LAYER"}),
    "SCALETOKEN": frozenset({"LAYER"}),
    "VALUES": frozenset({"SCALETOKEN"}),
    "VALIDATION": frozenset({"MAP", "LAYER", "CLASS", "WEB"}),
    "POINTS": frozenset({"FEATURE", "SYMBOL"}),
    "PATTERN": frozenset({"STYLE"}),
}
"""Block kind -> block kinds it may be nested in."""

ALLOWED_FIRST_TOKENS: dict[str, frozenset[str] | None] = {
    ROOT: frozenset({"MAP", "SYMBOL"}),
    "MAP": frozenset(
        {
            "NAME", "STATUS", "EXTENT", "UNITS", "SIZE", "IMAGETYPE", "IMAGECOLOR",
            "SHAPEPATH", "FONTSET", "SYMBOLSET", "CONFIG", "DEBUG",
            "OUTPUTFORMAT", "SYMBOL", "WEB", "LAYER",
            "LEGEND", "SCALEBAR", "QUERYMAP", "REFERENCE",
            "PROJECTION", "METADATA", "VALIDATION",
            "MAXSIZE", "RESOLUTION", "DEFRESOLUTION", "ANGLE", "TRANSPARENT",
            "SCALEDENOM", "TEMPLATEPATTERN", "DATAPATTERN",
            "END", "INCLUDE",
        }
    ),  # fmt: skip
    "LAYER": frozenset(
        {
            "NAME", "TYPE", "STATUS", "DATA", "CONNECTION", "CONNECTIONTYPE", "CONNECTIONOPTIONS",
            "FILTER", "FILTERITEM", "FILTERTYPE",
            "CLASSITEM", "CLASSGROUP", "LABELITEM", "GROUP", "STYLEITEM",
            "MINSCALEDENOM", "MAXSCALEDENOM", "SYMBOLSCALEDENOM",
            "LABELMINSCALEDENOM", "LABELMAXSCALEDENOM",
            "MINDISTANCE", "MAXDISTANCE",
            "OPACITY", "TRANSPARENCY", "OFFSITE",
            "PROCESSING", "VALIDATION", "TEMPLATE", "HEADER", "FOOTER",
            "TOLERANCE", "TOLERANCEUNITS", "SIZEUNITS", "UNITS", "EXTENT",
            "LABELCACHE", "POSTLABELCACHE", "LABELREQUIRES", "REQUIRES",
            "TILEINDEX", "TILEITEM", "GEOMTRANSFORM", "MASK", "ENCODING", "DEBUG",
            "UTFDATA", "UTFITEM",
            "PROJECTION", "METADATA",
            "CLASS", "CLUSTER", "GRID", "COMPOSITE", "FEATURE", "JOIN", "IDENTIFY", "SCALETOKEN",
            "END", "INCLUDE",
        }
    ),  # fmt: skip
    "CLASS": frozenset(
        {
            "NAME", "TITLE", "GROUP", "EXPRESSION", "TEXT", "STATUS", "DEBUG",
            "MINSCALEDENOM", "MAXSCALEDENOM", "MINFEATURESIZE",
            "STYLE", "LABEL", "LEADER",
            "TEMPLATE", "KEYIMAGE",
            "METADATA", "VALIDATION",
            "OPACITY",
            "END", "INCLUDE",
        }
    ),  # fmt: skip
    "STYLE": frozenset(
        {
            "COLOR", "OUTLINECOLOR", "BACKGROUNDCOLOR", "WIDTH", "MINWIDTH", "MAXWIDTH", "OUTLINEWIDTH",
            "SIZE", "MINSIZE", "MAXSIZE",
            "SYMBOL", "PATTERN", "GAP", "INITIALGAP", "ANGLE", "OFFSET", "POLAROFFSET",
            "LINECAP", "LINEJOIN", "LINEJOINMAXSIZE",
            "GEOMTRANSFORM", "RANGEITEM", "COLORRANGE", "DATARANGE",
            "MINSCALEDENOM", "MAXSCALEDENOM",
            "OPACITY",
            "END",
        }
    ),  # fmt: skip
    "LABEL": frozenset(
        {
            "TEXT", "TYPE", "FONT", "SIZE", "MINSIZE", "MAXSIZE",
            "COLOR", "OUTLINECOLOR", "OUTLINEWIDTH", "SHADOWCOLOR", "SHADOWSIZE",
            "POSITION", "OFFSET", "ANGLE", "WRAP", "BUFFER", "ALIGN", "ENCODING",
            "FORCE", "PARTIALS", "PRIORITY", "MAXLENGTH", "MAXOVERLAPANGLE",
            "MINDISTANCE", "MINFEATURESIZE", "REPEATDISTANCE", "EXPRESSION",
            "MINSCALEDENOM", "MAXSCALEDENOM",
            "STYLE",
            "END",
        }
    ),  # fmt: skip
    "LEADER": frozenset({"GRIDSTEP", "MAXDISTANCE", "STYLE", "END"}),
    "WEB": frozenset(
        {
            "IMAGEPATH", "IMAGEURL", "TEMPLATE", "HEADER", "FOOTER", "ERROR", "EMPTY",
            "MINSCALEDENOM", "MAXSCALEDENOM", "QUERYFORMAT", "LEGENDFORMAT", "BROWSEFORMAT",
            "METADATA", "VALIDATION", "END",
        }
    ),  # fmt: skip
    "OUTPUTFORMAT": frozenset(
        {"NAME", "DRIVER", "MIMETYPE", "IMAGEMODE", "EXTENSION", "FORMATOPTION", "TRANSPARENT", "END", "METADATA"}
    ),
    "METADATA": None,
    "PROJECTION": None,
    "VALIDATION": None,
    "VALUES": None,
    "POINTS": None,
    "PATTERN": None,
    "SYMBOL": frozenset(
        {"NAME", "TYPE", "IMAGE", "POINTS", "FILLED", "ANCHORPOINT", "ANTIALIAS", "CHARACTER", "FONT", "TRANSPARENT", "END"}
    ),
    "LEGEND": frozenset(
        {"STATUS", "KEYSIZE", "KEYSPACING", "IMAGECOLOR", "OUTLINECOLOR", "POSITION", "POSTLABELCACHE",
         "LABEL", "TEMPLATE", "END"}
    ),  # fmt: skip
    "SCALEBAR": frozenset(
        {"STATUS", "SIZE", "INTERVALS", "UNITS", "COLOR", "BACKGROUNDCOLOR", "OUTLINECOLOR", "IMAGECOLOR",
         "POSITION", "STYLE", "TRANSPARENT", "POSTLABELCACHE", "ALIGN", "LABEL", "END"}
    ),  # fmt: skip
    "QUERYMAP": frozenset({"STATUS", "SIZE", "COLOR", "STYLE", "END"}),
    "REFERENCE": frozenset({"STATUS", "IMAGE", "EXTENT", "SIZE", "COLOR", "OUTLINECOLOR", "MARKER", "MARKERSIZE", "END"}),
    "CLUSTER": frozenset({"MAXDISTANCE", "REGION", "BUFFER", "GROUP", "FILTER", "END"}),
    "GRID": frozenset({"MINARCS", "MAXARCS", "MININTERVAL", "MAXINTERVAL", "MINSUBDIVIDE", "MAXSUBDIVIDE", "LABELFORMAT", "END"}),
    "COMPOSITE": frozenset({"OPACITY", "COMPOP", "COMPFILTER", "END"}),
    "FEATURE": frozenset({"POINTS", "ITEMS", "TEXT", "WKT", "END"}),
    "JOIN": frozenset(
        {"NAME", "TABLE", "FROM", "TO", "TYPE", "CONNECTION", "CONNECTIONTYPE", "TEMPLATE", "HEADER", "FOOTER", "END"}
    ),
    "IDENTIFY": frozenset({"CLASSAUTO", "CLASSGROUP", "END"}),
    "SCALETOKEN": frozenset({"NAME", "VALUES", "END"}),
}
"""Context (innermost block kind) -> keywords expected as the first token of a line.

``None`` marks free-form contexts where first tokens are not checked.
"""


def _collect_known_keywords() -> frozenset[str]:
    known: set[str] = {"END"}
    for context, keywords in ALLOWED_FIRST_TOKENS.items():
        if context != ROOT:
            known.add(context)
        if keywords is not None:
            known.update(keywords)
    known.update(ALLOWED_PARENTS)
    return frozenset(known)


GLOBAL_KNOWN: frozenset[str] = _collect_known_keywords()
"""Every keyword the checker knows about, used for typo detection."""


def contexts_accepting(keyword: str) -> list[str]:
    """Return the block kinds (excluding ROOT) whose first-token set contains *keyword*, sorted."""
    return sorted(
        context
        for context, keywords in ALLOWED_FIRST_TOKENS.items()
        if context != ROOT and keywords is not None and keyword in keywords
    )
