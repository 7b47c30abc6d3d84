#!/usr/bin/env python3
# ============================================================================
# CLI BLUEPRINT RUNNER
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Tool - Run a blueprint locally
# PURPOSE: Build an entity tree from YAML, start it and report its sensors
# CREATED: 18 OCT 2026
# ============================================================================
"""
Run a blueprint in-process.

1. Loads the blueprint YAML
2. Builds and manages the entity tree
3. Starts the root application
4. Prints every entity's sensors (optionally stopping the tree first)

Usage:
    # Run a blueprint file
    python tools/run_blueprint.py blueprints/conditional_restart.yaml

    # Stop the tree afterwards, JSON output, debug logging
    python tools/run_blueprint.py blueprints/loop_with_pause.yaml --stop --json --log-level DEBUG

Exit code is 1 if the blueprint fails to load, build, start or stop.
"""

import argparse
import json
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.errors import ControlFlowError
from core.logging import configure_logging
from entities.base import Entity
from entities.registry import list_entity_types
from runtime.management import ManagementContext
from services.blueprint_service import BlueprintService
from __version__ import __version__


def describe_tree(entity: Entity, depth: int = 0) -> list:
    """Flatten an entity tree into printable rows."""
    rows = [{
        "depth": depth,
        "name": entity.display_name,
        "type": entity.entity_type,
        "id": entity.plan_id or entity.id,
        "sensors": {k: getattr(v, "value", v) for k, v in entity.sensors.as_dict().items()},
    }]
    for child in entity.children:
        rows.extend(describe_tree(child, depth + 1))
    return rows


def print_rows(rows: list, as_json: bool) -> None:
    if as_json:
        print(json.dumps(rows, indent=2, default=str))
        return

    for row in rows:
        indent = "  " * row["depth"]
        sensors = ", ".join(f"{k}={v}" for k, v in row["sensors"].items())
        print(f"{indent}{row['name']} [{row['type']} {row['id']}] {sensors}")


def print_types(as_json: bool) -> None:
    types = sorted(list_entity_types(), key=lambda t: t["name"])
    if as_json:
        print(json.dumps(types, indent=2))
        return

    for entity_type in types:
        print(f"{entity_type['name']:<12} {entity_type['description']}")


def run(path: str, stop: bool = False, as_json: bool = False) -> int:
    service = BlueprintService()
    try:
        blueprint = service.load_file(path)
    except ControlFlowError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    with ManagementContext() as mgmt:
        try:
            app = service.build(blueprint, mgmt)
        except ControlFlowError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        exit_code = 0
        try:
            app.start([])
        except Exception as e:
            print(f"ERROR: {blueprint.name} failed to start: {e}", file=sys.stderr)
            exit_code = 1

        if stop:
            try:
                app.stop()
            except Exception as e:
                print(f"ERROR: {blueprint.name} failed to stop: {e}", file=sys.stderr)
                exit_code = 1

        print_rows(describe_tree(app), as_json)
        return exit_code


def main():
    parser = argparse.ArgumentParser(
        description="Build and start an entity tree from a blueprint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s blueprints/conditional_restart.yaml
  %(prog)s blueprints/loop_with_pause.yaml --stop --json
  %(prog)s --list-types
        """,
    )
    parser.add_argument("blueprint", nargs="?", help="Path to the blueprint YAML file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--stop", "-s",
        action="store_true",
        help="Stop the tree after it starts",
    )
    parser.add_argument(
        "--list-types",
        action="store_true",
        help="List the entity types a blueprint can use and exit",
    )
    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Print sensors as JSON",
    )
    parser.add_argument(
        "--log-level", "-l",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        help="Log level (default: INFO or $LOG_LEVEL)",
    )

    args = parser.parse_args()
    if args.list_types:
        print_types(args.json)
        return
    if not args.blueprint:
        parser.error("a blueprint path is required")

    configure_logging(level=args.log_level, stream=sys.stderr)
    sys.exit(run(args.blueprint, stop=args.stop, as_json=args.json))


if __name__ == "__main__":
    main()
