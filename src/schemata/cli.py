"""schemata CLI: export, catalog and check commands."""

import argparse
import importlib
import json
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import List, Optional

from schemata._internal.canonical_json import canonical_dumps


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


class LoadError(Exception):
    """A MODULE:ATTR target could not be imported or is not a schema."""
    pass


def load_schema(target: str):
    """Resolve ``package.module:attr`` to a Schema object.

    Raises:
        LoadError: bad target syntax, import failure, missing attribute or non-schema
    """
    from schemata.kernel.schema import Schema

    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise LoadError(f"Expected MODULE:ATTR, got '{target}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise LoadError(f"Cannot import module '{module_name}': {e}") from e
    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise LoadError(f"'{module_name}' has no attribute '{attr}'") from e
    if not isinstance(obj, Schema):
        raise LoadError(f"'{target}' is not a schema (got {type(obj).__name__})")
    return obj


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _cmd_export(args) -> int:
    from schemata.kernel.reflection import ReflectionOptions

    schema = load_schema(args.target)
    options = ReflectionOptions(ref_template=args.ref_template, defs_key=args.defs_key)
    print(canonical_dumps(schema.to_structural_schema(options), indent=args.indent))
    return EXIT_OK


def _cmd_catalog(args) -> int:
    from schemata.catalog import CatalogOptions, catalog_json

    for module_name in args.modules:
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            raise LoadError(f"Cannot import module '{module_name}': {e}") from e
    options = CatalogOptions(title=args.title, version=args.doc_version)
    text = catalog_json(options=options, indent=args.indent)
    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(text + "\n", encoding="utf-8")
        if not args.quiet:
            print("[OK] Catalog written")
            print(f"  Catalog: {args.out}")
    else:
        print(text)
    return EXIT_OK


def _cmd_check(args) -> int:
    schema = load_schema(args.target)
    try:
        data = json.loads(args.file.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise LoadError(f"File not found: {args.file}") from e
    except json.JSONDecodeError as e:
        raise LoadError(f"Invalid JSON in {args.file}: {e}") from e

    result = schema.safe_parse(data)
    if result.ok:
        if not args.quiet:
            print("[OK] Input is valid")
        return EXIT_OK
    if not args.quiet:
        print(f"[FAILED] {len(result.error.issues)} issue(s)")
        for issue in result.error.issues:
            print(f"  {issue.code.value}: {issue.render()}")
    return EXIT_INVALID


def build_parser() -> argparse.ArgumentParser:
    try:
        schemata_version = get_version("schemata")
    except PackageNotFoundError:
        schemata_version = "dev"

    parser = argparse.ArgumentParser(
        prog="schemata",
        description="schemata: validate data and export JSON-Schema descriptions"
    )
    parser.add_argument("--version", action="version", version=f"schemata {schemata_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging."
    )
    parent_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Pretty-print JSON output with this indentation"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    export_parser = subparsers.add_parser(
        "export",
        help="Print the JSON-Schema of one schema object",
        parents=[parent_parser]
    )
    export_parser.add_argument(
        "target",
        help="Schema to export, as MODULE:ATTR"
    )
    export_parser.add_argument(
        "--ref-template",
        default="#/$defs/{name}",
        help="Reference template for named schemas"
    )
    export_parser.add_argument(
        "--defs-key",
        default="$defs",
        help="Key under which named definitions are collected"
    )

    catalog_parser = subparsers.add_parser(
        "catalog",
        help="Import modules and print every named schema as an OpenAPI components document",
        parents=[parent_parser]
    )
    catalog_parser.add_argument(
        "modules",
        nargs="+",
        help="Modules that define (and name) schemas"
    )
    catalog_parser.add_argument(
        "--title",
        default="Schema catalog",
        help="Document title"
    )
    catalog_parser.add_argument(
        "--doc-version",
        default="0.0.0",
        help="Document version"
    )
    catalog_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write the catalog to this file instead of stdout"
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate a JSON file against a schema",
        parents=[parent_parser]
    )
    check_parser.add_argument(
        "target",
        help="Schema to validate against, as MODULE:ATTR"
    )
    check_parser.add_argument(
        "file",
        type=Path,
        help="Path to the JSON input"
    )
    return parser


COMMANDS = {
    "export": _cmd_export,
    "catalog": _cmd_catalog,
    "check": _cmd_check,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_USAGE

    _configure_logging(args.verbose, args.quiet)
    # Modules named on the command line are importable from the working directory
    if "" not in sys.path:
        sys.path.insert(0, "")

    try:
        return COMMANDS[args.command](args)
    except LoadError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
