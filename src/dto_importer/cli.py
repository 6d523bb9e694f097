"""
CLI for inferring record definitions.

Commands:
- infer: Print the canonical record definitions of a data or schema file
- types: List the available parser types
"""

import argparse
import json
import sys
from typing import Any

import yaml
from pydantic import ValidationError

from dto_importer import parsers
from dto_importer.errors import ImporterError
from dto_importer.importer import Importer
from dto_importer.key_fields import apply_settings_key_fields, set_key_fields
from dto_importer.observability import setup_logging


def build_options(args: argparse.Namespace) -> dict[str, Any]:
    """Collect parse options from command arguments."""
    options: dict[str, Any] = {}
    if args.type:
        options["type"] = args.type
    if args.namespace:
        options["namespace"] = args.namespace
    if args.base_path:
        options["base_path"] = args.base_path
    if args.max_depth is not None:
        options["max_depth"] = args.max_depth
    return options


def cmd_infer(args: argparse.Namespace) -> int:
    """Infer records from a file and print them."""
    setup_logging(sys.stderr)
    apply_settings_key_fields()

    if args.key_fields:
        set_key_fields([f.strip() for f in args.key_fields.split(",") if f.strip()])

    try:
        result = Importer().run_file(args.path, build_options(args))
    except FileNotFoundError:
        print(f"Error: File not found: {args.path}", file=sys.stderr)
        return 1
    except ImporterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Error: Invalid options: {e}", file=sys.stderr)
        return 1

    for diagnostic in result.diagnostics:
        location = ".".join(p for p in (diagnostic.record, diagnostic.field) if p)
        print(
            f"Warning: {diagnostic.message}" + (f" ({location})" if location else ""),
            file=sys.stderr,
        )

    records = result.to_dict()
    if args.format == "yaml":
        print(yaml.safe_dump(records, sort_keys=False), end="")
    else:
        print(json.dumps(records, indent=2))
    return 0


def cmd_types(args: argparse.Namespace) -> int:
    """List the available parser types."""
    for name, label in parsers.type_labels().items():
        print(f"{name}: {label}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="dto-importer",
        description="Infer record (DTO) definitions from example data or JSON Schema / OpenAPI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # infer command
    infer_parser = subparsers.add_parser("infer", help="Infer records from a JSON/YAML file")
    infer_parser.add_argument("path", help="Data, JSON Schema or OpenAPI file")
    infer_parser.add_argument("--type", choices=list(parsers.types().keys()),
                              help="Parser type (detected when omitted)")
    infer_parser.add_argument("--namespace", help="Namespace prefix for record names")
    infer_parser.add_argument("--base-path", help="Base path for external $ref files")
    infer_parser.add_argument("--key-fields", help="Comma-separated associative key candidates")
    infer_parser.add_argument("--max-depth", type=int, help="Maximum inline nesting depth")
    infer_parser.add_argument("--format", choices=["json", "yaml"], default="json",
                              help="Output format")

    # types command
    subparsers.add_parser("types", help="List parser types")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "infer":
        return cmd_infer(args)
    elif args.command == "types":
        return cmd_types(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
