# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the MapEdit command-line interface."""

import argparse
import json
import logging
import sys
from pathlib import Path

from mapedit.workspace.config import ConfigError, MapEditConfig, find_config, load_config

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the MapEdit CLI."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("file", help="Path to the mapfile")
    common.add_argument(
        "--config",
        default=None,
        help="Path to a .mapedit.yaml settings file (default: the one next to the mapfile, if any)",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(
        prog="mapedit",
        description="MapEdit - MapServer mapfile analysis and rewriting tool",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # format subcommand
    format_parser = subparsers.add_parser(
        "format",
        parents=[common],
        help="Re-indent a mapfile",
        description="Print the mapfile re-indented by block nesting.",
    )
    format_parser.add_argument("--indent", type=int, default=None, help="Spaces per nesting level (default: 4)")

    # ends subcommand
    ends_parser = subparsers.add_parser(
        "ends",
        parents=[common],
        help="Report unmatched END lines",
        description="Report extra END lines and blocks that are never closed.",
    )
    ends_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Run the heuristic syntax checks",
        description="Check END balance, block nesting and keyword context. Exits with 1 on HARD issues.",
    )
    check_parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    check_parser.add_argument("--no-notes", action="store_true", help="Omit the explanatory notes")

    # sync-extent subcommand
    sync_parser = subparsers.add_parser(
        "sync-extent",
        parents=[common],
        help="Rewrite MAP and LAYER extents from a bounding box",
        description="Print the mapfile with EXTENT lines synchronized to the given bounding box.",
    )
    sync_parser.add_argument(
        "--extent",
        nargs=4,
        type=float,
        required=True,
        metavar=("MINX", "MINY", "MAXX", "MAXY"),
        help="Viewport bounding box",
    )
    sync_parser.add_argument("--crs", default=None, help="Reference system of the bounding box (default: CRS:84)")
    sync_parser.add_argument("--no-map", action="store_true", help="Leave the MAP extent untouched")
    sync_parser.add_argument("--no-layers", action="store_true", help="Leave LAYER extents untouched")
    sync_parser.add_argument("--no-insert", action="store_true", help="Do not insert missing EXTENT lines")

    # wfs subcommand
    wfs_parser = subparsers.add_parser(
        "wfs",
        parents=[common],
        help="Classify layers by WFS capability",
        description="Report for every named LAYER whether it can be served through WFS.",
    )
    wfs_parser.add_argument("--json", action="store_true", help="Print the verdicts as JSON")

    # layers subcommand
    layers_parser = subparsers.add_parser(
        "layers",
        parents=[common],
        help="List named layers with type, title and WFS support",
        description="List every named LAYER with its TYPE, display title and WFS verdict.",
    )
    layers_parser.add_argument("--json", action="store_true", help="Print the listing as JSON")

    # ensure-metadata subcommand
    metadata_parser = subparsers.add_parser(
        "ensure-metadata",
        parents=[common],
        help="Add missing WMS/WFS metadata",
        description="Print the mapfile with the WEB and LAYER METADATA entries needed for WMS/WFS added.",
    )
    metadata_parser.add_argument(
        "--online-resource",
        default=None,
        help="URL for wms_onlineresource / wfs_onlineresource (default: http://localhost:4300/api/wms)",
    )
    metadata_parser.add_argument("--no-web", action="store_true", help="Leave the WEB block untouched")
    metadata_parser.add_argument("--no-layers", action="store_true", help="Leave LAYER blocks untouched")

    # serve subcommand
    serve_parser = subparsers.add_parser(
        "serve",
        parents=[common],
        help="Launch the report viewer",
        description="Launch a read-only web page with the check report and WFS verdicts.",
    )
    serve_parser.add_argument("--port", type=int, default=8050, help="Port to run the server on (default: 8050)")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind the server to (default: 127.0.0.1)")

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Load the mapfile and settings, then dispatch to the subcommand handler."""
    path = Path(args.file)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: file '{path}' does not exist.", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
        return 1

    config_path = Path(args.config) if args.config else find_config(path)
    try:
        config = load_config(config_path) if config_path is not None else MapEditConfig()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "format":
        return _cmd_format(args, text, config)
    if args.command == "ends":
        return _cmd_ends(args, text, config)
    if args.command == "check":
        return _cmd_check(args, text, config)
    if args.command == "sync-extent":
        return _cmd_sync_extent(args, text, config)
    if args.command == "wfs":
        return _cmd_wfs(args, text)
    if args.command == "layers":
        return _cmd_layers(args, text)
    if args.command == "ensure-metadata":
        return _cmd_ensure_metadata(args, text, config)
    if args.command == "serve":
        return _cmd_serve(args, text, config)
    return 0


def _cmd_format(args: argparse.Namespace, text: str, config: MapEditConfig) -> int:
    """Handle the format subcommand."""
    from mapedit.formatting.formatter import format_mapfile

    settings = config.format
    indent = args.indent if args.indent is not None else settings.indent
    sys.stdout.write(format_mapfile(text, indent, extra_openers=settings.extra_openers))
    return 0


def _cmd_ends(args: argparse.Namespace, text: str, config: MapEditConfig) -> int:
    """Handle the ends subcommand."""
    from mapedit.validation.balance import analyze_balance

    report = analyze_balance(text, **config.balance.model_dump())
    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(report.message)
    return 0 if report.ok else 1


def _cmd_check(args: argparse.Namespace, text: str, config: MapEditConfig) -> int:
    """Handle the check subcommand."""
    from mapedit.validation.balance import analyze_balance
    from mapedit.validation.syntax import detect_syntax_issues

    balance = analyze_balance(text, **config.balance.model_dump())
    syntax = detect_syntax_issues(text, **config.syntax.model_dump())

    if args.json:
        payload = {
            "balance": balance.model_dump(mode="json"),
            "syntax": syntax.model_dump(mode="json"),
        }
        print(json.dumps(payload, indent=2))
    else:
        print(balance.message)
        print()
        print(syntax.render(include_notes=not args.no_notes))

    return 1 if syntax.has_hard or not balance.ok else 0


def _cmd_sync_extent(args: argparse.Namespace, text: str, config: MapEditConfig) -> int:
    """Handle the sync-extent subcommand."""
    from mapedit.extent.sync import synchronize_extent

    settings = config.extent
    try:
        result = synchronize_extent(
            text,
            args.extent,
            args.crs or settings.viewport_crs,
            add_missing=settings.add_missing and not args.no_insert,
            update_map=settings.update_map and not args.no_map,
            update_layers=settings.update_layers and not args.no_layers,
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if result.map_crs is None:
        print("Warning: no MAP block could be located; the mapfile is unchanged.", file=sys.stderr)
    sys.stdout.write(result.text)
    return 0


def _cmd_wfs(args: argparse.Namespace, text: str) -> int:
    """Handle the wfs subcommand."""
    from mapedit.services.wfs_support import classify_wfs_support

    verdicts = classify_wfs_support(text)
    if args.json:
        print(json.dumps({name: verdict.model_dump() for name, verdict in verdicts.items()}, indent=2))
        return 0

    if not verdicts:
        print("No named layers found.")
        return 0
    for name, verdict in verdicts.items():
        status = "supported" if verdict.supported else "not supported"
        print(f"{name}: {status}")
        for reason in verdict.reasons:
            print(f"  - {reason}")
    return 0


def _cmd_layers(args: argparse.Namespace, text: str) -> int:
    """Handle the layers subcommand."""
    from mapedit.services.layers import list_layers
    from mapedit.services.wfs_support import classify_wfs_support

    layers = list_layers(text)
    verdicts = classify_wfs_support(text)
    if args.json:
        payload = [
            {**layer.model_dump(), "wfs": verdicts[layer.name].model_dump() if layer.name in verdicts else None}
            for layer in layers
        ]
        print(json.dumps(payload, indent=2))
        return 0

    if not layers:
        print("No named layers found.")
        return 0
    for layer in layers:
        verdict = verdicts.get(layer.name)
        wfs = "WFS" if verdict is not None and verdict.supported else "no WFS"
        print(f"{layer.name}\t{layer.type or '-'}\t{layer.title or '-'}\t{wfs}")
    return 0


def _cmd_ensure_metadata(args: argparse.Namespace, text: str, config: MapEditConfig) -> int:
    """Handle the ensure-metadata subcommand."""
    from mapedit.services.ogc_metadata import ensure_ogc_metadata

    update = ensure_ogc_metadata(
        text,
        args.online_resource or config.metadata.online_resource,
        web=not args.no_web,
        layers=not args.no_layers,
    )
    if not update.changed:
        print("Note: no metadata was added.", file=sys.stderr)
    sys.stdout.write(update.text)
    return 0


def _cmd_serve(args: argparse.Namespace, text: str, config: MapEditConfig) -> int:
    """Handle the serve subcommand."""
    from mapedit.webui.app import create_app

    print(f"Serving mapfile report at http://{args.host}:{args.port}/")
    app = create_app(text, source_label=args.file, config=config)
    app.run(host=args.host, port=args.port, debug=False)
    return 0
