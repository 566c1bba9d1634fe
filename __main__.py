"""CLI entry point for laylder.

This module acts as the central entry point for the project's CLI tools.
It loads schemas from JSON files, runs the engine over them and prints
the result to stdout; diagnostics go to the log on stderr.
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from laylder.config import EnvVar, get_default_grid_size, get_environment
from laylder.core import get_logger, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _write_output(text: str, output: Path | None) -> None:
    """Write ``text`` to ``output``, or stdout when no path is given."""
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    logger.info(f"Wrote {output}")


def _load_schema_file(path: Path):
    """Load a schema file, logging why it failed.

    Returns:
        The Schema, or None when the file cannot be read or parsed.
    """
    from laylder.schema import load_schema

    try:
        return load_schema(_read_json(path))
    except FileNotFoundError:
        logger.error(f"File not found: {path}")
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
    except ValidationError as e:
        logger.error(f"Malformed schema in {path}:\n{e}")
    return None


def _add_policy_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--policy",
        "-p",
        type=str,
        default=None,
        choices=["transitive", "one-to-one"],
        help="Link policy (default: LAYLDER_LINK_POLICY or transitive)",
    )


def _resolve_policy(args: argparse.Namespace):
    from laylder.links import default_policy, parse_policy

    return parse_policy(args.policy) if args.policy else default_policy()


# =============================================================================
# Validate Command
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Normalize (unless disabled) and validate a schema file."""
    from laylder.normalize import normalize_schema
    from laylder.validation import format_validation_result, validate_schema

    schema = _load_schema_file(args.schema)
    if schema is None:
        return 1

    if not args.no_normalize:
        schema = normalize_schema(schema, _resolve_policy(args))

    result = validate_schema(schema)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_validation_result(result))

    strict = get_environment(EnvVar.LAYLDER_STRICT, override=args.strict or None)
    if not result.valid:
        return 1
    if strict and result.warnings:
        logger.error(f"{len(result.warnings)} warning(s) in strict mode")
        return 1
    return 0


def handle_validate_command(argv: list[str]) -> int:
    """Handle the validate command."""
    parser = argparse.ArgumentParser(
        prog="python . validate",
        description="Validate a layout schema (normalized first by default)",
    )
    parser.add_argument("schema", type=Path, help="Schema JSON file")
    parser.add_argument(
        "--no-normalize",
        action="store_true",
        help="Validate the schema exactly as written",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as failures (also LAYLDER_STRICT)",
    )
    _add_policy_argument(parser)
    args = parser.parse_args(argv)
    return cmd_validate(args)


# =============================================================================
# Normalize Command
# =============================================================================


def cmd_normalize(args: argparse.Namespace) -> int:
    """Normalize a schema file and write the result."""
    from laylder.normalize import normalize_schema
    from laylder.schema import dump_schema

    schema = _load_schema_file(args.schema)
    if schema is None:
        return 1

    normalized = normalize_schema(schema, _resolve_policy(args))
    _write_output(dump_schema(normalized), args.output)
    return 0


def handle_normalize_command(argv: list[str]) -> int:
    """Handle the normalize command."""
    parser = argparse.ArgumentParser(
        prog="python . normalize",
        description="Fill per-breakpoint gaps by inheritance",
    )
    parser.add_argument("schema", type=Path, help="Schema JSON file")
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    _add_policy_argument(parser)
    args = parser.parse_args(argv)
    return cmd_normalize(args)


# =============================================================================
# Groups Command
# =============================================================================


def cmd_groups(args: argparse.Namespace) -> int:
    """Print the link groups of a schema file."""
    from laylder.links import groups_of

    schema = _load_schema_file(args.schema)
    if schema is None:
        return 1

    groups = groups_of(schema.component_links, schema.component_ids(), _resolve_policy(args))
    if args.json:
        print(json.dumps(groups))
        return 0

    for index, group in enumerate(groups, start=1):
        labels = []
        for cid in group:
            component = schema.component(cid)
            labels.append(f"{component.name} ({cid})" if component else cid)
        print(f"{index}. {', '.join(labels)}")
    return 0


def handle_groups_command(argv: list[str]) -> int:
    """Handle the groups command."""
    parser = argparse.ArgumentParser(
        prog="python . groups",
        description="Show components linked across breakpoints",
    )
    parser.add_argument("schema", type=Path, help="Schema JSON file")
    parser.add_argument("--json", action="store_true", help="Print groups as JSON")
    _add_policy_argument(parser)
    args = parser.parse_args(argv)
    return cmd_groups(args)


# =============================================================================
# Areas Command
# =============================================================================


def cmd_areas_to_rects(args: argparse.Namespace) -> int:
    """Convert a grid-area matrix file to a rectangle list."""
    from laylder.areas import areas_to_rects

    try:
        areas = _read_json(args.input)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    if not isinstance(areas, list) or not all(isinstance(row, list) for row in areas):
        logger.error("Areas file must contain a list of rows")
        return 1

    rects = areas_to_rects(areas)
    _write_output(json.dumps([r.to_dict() for r in rects], indent=2), args.output)
    return 0


def cmd_rects_to_areas(args: argparse.Namespace) -> int:
    """Convert a rectangle list file to a grid-area matrix."""
    from laylder.areas import AreaRect, rects_to_areas

    default_cols, default_rows = get_default_grid_size()
    cols = args.cols if args.cols is not None else default_cols
    rows = args.rows if args.rows is not None else default_rows

    try:
        rects = [AreaRect.from_dict(item) for item in _read_json(args.input)]
        areas = rects_to_areas(rects, cols, rows)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Invalid rectangle list: {e}")
        return 1

    _write_output(json.dumps(areas), args.output)
    return 0


def handle_areas_command(argv: list[str]) -> int:
    """Handle grid-area conversion commands."""
    parser = argparse.ArgumentParser(
        prog="python . areas",
        description="Convert between grid-area matrices and rectangle lists",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    to_rects = subparsers.add_parser("to-rects", help="Matrix of ids to rectangles")
    to_rects.add_argument("input", type=Path, help="JSON file with a matrix of ids")
    to_rects.add_argument("--output", "-o", type=Path, default=None)
    to_rects.set_defaults(func=cmd_areas_to_rects)

    to_areas = subparsers.add_parser("to-areas", help="Rectangles to matrix of ids")
    to_areas.add_argument("input", type=Path, help="JSON file with a rectangle list")
    to_areas.add_argument(
        "--cols", type=int, default=None, help="Grid columns (default: LAYLDER_GRID_COLS)"
    )
    to_areas.add_argument(
        "--rows", type=int, default=None, help="Grid rows (default: LAYLDER_GRID_ROWS)"
    )
    to_areas.add_argument("--output", "-o", type=Path, default=None)
    to_areas.set_defaults(func=cmd_rects_to_areas)

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


# =============================================================================
# JSON Schema Command
# =============================================================================


def handle_json_schema_command(argv: list[str]) -> int:
    """Print the JSON Schema of the layout schema format."""
    from laylder.schema import export_json_schema

    parser = argparse.ArgumentParser(
        prog="python . json-schema",
        description="Export the JSON Schema describing schema files",
    )
    parser.add_argument("--output", "-o", type=Path, default=None)
    args = parser.parse_args(argv)
    _write_output(json.dumps(export_json_schema(), indent=2), args.output)
    return 0


# =============================================================================
# Test Command
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . dev test                # Run all tests
        python . dev test --unit         # Run only unit tests
        python . dev test --integration  # Run CLI and end-to-end tests
        python . dev test -v             # Run with verbose output
        python . dev test -k "overlap"   # Run tests matching pattern

    Test Tiers:
        unit        - Pure engine tests beside each module
        integration - CLI subprocess and full-pipeline tests
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


def handle_dev_command(argv: list[str]) -> int:
    """Handle development workflow commands.

    Usage:
        python . dev test [args]       # Run pytest
        python . dev env               # Show configuration variables
    """
    if not argv:
        print("Development workflow commands")
        print("\nUsage: python . dev {command} [args]")
        print("\nCommands:")
        print("  test       Run pytest with tier options")
        print("  env        Show configuration variables and current values")
        print("\nExamples:")
        print("  python . dev test --unit           # Fast unit tests")
        print("  python . dev test --integration    # CLI and pipeline tests")
        return 1

    subcommand = argv[0]
    subargs = argv[1:]

    dev_commands = {
        "test": lambda: cmd_test(subargs),
        "env": cmd_env,
    }

    if subcommand in dev_commands:
        return dev_commands[subcommand]()

    logger.error(f"Unknown dev command: {subcommand}")
    return handle_dev_command([])


def cmd_env() -> int:
    """Print every configuration variable with its resolved value."""
    from laylder.config import get_environment_info, list_environment_variables

    for var in list_environment_variables():
        info = get_environment_info(var)
        print(f"{info.name}={get_environment(var)}  [{info.category}] {info.description}")
    return 0


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Schema ===")
    print("  validate     Normalize and validate a schema file")
    print("  normalize    Fill per-breakpoint gaps by inheritance")
    print("  groups       Show components linked across breakpoints")
    print("  json-schema  Export the JSON Schema of the file format")
    print("\n=== Canvas ===")
    print("  areas        Convert grid-area matrices and rectangle lists")
    print("\n=== Development ===")
    print("  dev          Development workflows (test, env)")
    print("\nExamples:")
    print("  python . validate layout.json")
    print("  python . validate layout.json --json --strict")
    print("  python . normalize layout.json -o normalized.json")
    print("  python . groups layout.json --policy one-to-one")
    print("  python . areas to-rects areas.json")
    print("  python . areas to-areas rects.json --cols 12 --rows 8")
    print("\nFor dev command details: python . dev")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    if command == "dev":
        return handle_dev_command(rest_args)

    commands = {
        "validate": lambda: handle_validate_command(rest_args),
        "normalize": lambda: handle_normalize_command(rest_args),
        "groups": lambda: handle_groups_command(rest_args),
        "areas": lambda: handle_areas_command(rest_args),
        "json-schema": lambda: handle_json_schema_command(rest_args),
    }

    if command in commands:
        setup_logging(get_environment(EnvVar.LAYLDER_LOG_LEVEL))
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
