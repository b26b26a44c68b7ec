# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Dash-based read-only report viewer for a single mapfile."""

import dash
from dash import html

from mapedit.model.diagnostics import Diagnostic
from mapedit.model.layer import LayerInfo
from mapedit.model.wfs import WfsVerdict
from mapedit.services.layers import list_layers
from mapedit.services.wfs_support import classify_wfs_support
from mapedit.validation.balance import BalanceReport, analyze_balance
from mapedit.validation.syntax import SyntaxReport, detect_syntax_issues
from mapedit.workspace.config import MapEditConfig

# ###############
# Public Interface
# ###############

APP_TITLE = "MapEdit Mapfile Report"


def create_app(text: str, source_label: str = "<mapfile>", config: MapEditConfig | None = None) -> dash.Dash:
    """Create the report viewer for the given mapfile text.

    The analyses run once, when the app is created; the page is static.
    """
    config = config or MapEditConfig()
    balance = analyze_balance(text, **config.balance.model_dump())
    syntax = detect_syntax_issues(text, **config.syntax.model_dump())
    layers = list_layers(text)
    verdicts = classify_wfs_support(text)

    app = dash.Dash(__name__, title=APP_TITLE)
    app.layout = _build_layout(source_label, balance, syntax, layers, verdicts)
    return app


# ################
# Implementation
# ################

_CELL_STYLE = {"border": "1px solid #ccc", "padding": "0.25rem 0.5rem", "textAlign": "left"}
_SEVERITY_COLORS = {"HARD": "#b00020", "SOFT": "#8a6d00"}


def _build_layout(
    source_label: str,
    balance: BalanceReport,
    syntax: SyntaxReport,
    layers: list[LayerInfo],
    verdicts: dict[str, WfsVerdict],
) -> html.Div:
    """Build the application layout."""
    return html.Div(
        [
            html.H1(APP_TITLE),
            html.P(f"Mapfile: {source_label}"),
            html.Hr(),
            html.H2("END balance"),
            html.Pre(balance.message, id="balance-report"),
            html.H2("Syntax and context"),
            _issues_table(syntax),
            html.P(
                f"{syntax.suppressed_soft} soft warning(s) suppressed after a HARD error.",
                style={"color": "#666"},
            )
            if syntax.suppressed_soft
            else None,
            html.H2("Layers"),
            _layer_table(layers, verdicts),
        ],
        style={"fontFamily": "sans-serif", "padding": "2rem"},
    )


def _issues_table(report: SyntaxReport) -> html.P | html.Table:
    if report.ok:
        return html.P("No obvious syntax problems found.", id="syntax-report")
    header = html.Tr([html.Th(name, style=_CELL_STYLE) for name in ("Line", "Column", "Severity", "Kind", "Message")])
    return html.Table([header, *(_issue_row(issue) for issue in report.issues)], id="syntax-report")


def _issue_row(issue: Diagnostic) -> html.Tr:
    color = _SEVERITY_COLORS.get(issue.severity.value, "inherit")
    return html.Tr(
        [
            html.Td(str(issue.line_no), style=_CELL_STYLE),
            html.Td(str(issue.col) if issue.col else "", style=_CELL_STYLE),
            html.Td(issue.severity.value, style={**_CELL_STYLE, "color": color}),
            html.Td(issue.kind.value, style=_CELL_STYLE),
            html.Td(issue.message, style=_CELL_STYLE),
        ]
    )


def _layer_table(layers: list[LayerInfo], verdicts: dict[str, WfsVerdict]) -> html.P | html.Table:
    if not layers:
        return html.P("No named layers found.", id="layer-report")
    header = html.Tr([html.Th(name, style=_CELL_STYLE) for name in ("Layer", "Type", "Title", "WFS", "Reasons")])
    rows = []
    for layer in layers:
        verdict = verdicts.get(layer.name, WfsVerdict(supported=False))
        rows.append(
            html.Tr(
                [
                    html.Td(layer.name, style=_CELL_STYLE),
                    html.Td(layer.type or "", style=_CELL_STYLE),
                    html.Td(layer.title or "", style=_CELL_STYLE),
                    html.Td("yes" if verdict.supported else "no", style=_CELL_STYLE),
                    html.Td(html.Ul([html.Li(reason) for reason in verdict.reasons]), style=_CELL_STYLE),
                ]
            )
        )
    return html.Table([header, *rows], id="layer-report")
