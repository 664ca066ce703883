"""Command-line interface for reverse engineering a Glue Data Catalog."""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .api import GlueReverseEngineer
from .config import RunConfig, Selection
from .exceptions import ConfigurationError, GlueReverseError
from .logging import setup_logging


def _load_config(args: argparse.Namespace) -> RunConfig:
    config = RunConfig.from_yaml(args.config)
    level = args.log_level or config.logging.level
    redact = args.redact_logs or config.logging.redaction
    setup_logging(level=level, redact_secrets=redact)
    return config


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _print_error(error: GlueReverseError) -> None:
    print(f"ERROR: {error.message}", file=sys.stderr)


def build_selection(
    config_selection: Selection,
    databases: Optional[List[str]],
    tables: Optional[List[str]],
) -> Selection:
    """Merge ``--database`` / ``--table`` arguments over the configured selection.

    Args:
        config_selection: Selection from the config file
        databases: Database names given on the command line
        tables: ``database.table`` names given on the command line

    Returns:
        Selection to extract

    Raises:
        ConfigurationError: If a table argument is not ``database.table``
    """
    if not databases and not tables:
        return config_selection

    container_names: List[str] = list(databases or [])
    selected: Dict[str, List[str]] = {}
    for full_name in tables or []:
        database, sep, table = full_name.partition(".")
        if not sep or not database or not table:
            raise ConfigurationError(
                f"Table must be in the form database.table: {full_name}"
            )
        selected.setdefault(database, []).append(table)
        if database not in container_names:
            container_names.append(database)

    return Selection(container_names=container_names, selected_entities=selected)


def check_connection_command(args: argparse.Namespace) -> int:
    """Check that the catalog is reachable with the configured credentials.

    Returns:
        Exit code (0=success, 1=catalog failure, 2=configuration error)
    """
    try:
        config = _load_config(args)
    except ConfigurationError as e:
        _print_error(e)
        return 2

    engine = GlueReverseEngineer(settings=config.runtime)
    result = engine.test_connection(config.connection)
    _print_json({"ok": result.ok, "error": result.error})
    return 0 if result.ok else 1


def list_command(args: argparse.Namespace) -> int:
    """List databases and their tables.

    With ``--all`` further pages are requested until the listing is exhausted.

    Returns:
        Exit code (0=success, 1=catalog failure, 2=configuration error)
    """
    try:
        config = _load_config(args)
    except ConfigurationError as e:
        _print_error(e)
        return 2

    engine = GlueReverseEngineer(settings=config.runtime)
    entries: List[Dict[str, Any]] = []
    try:
        while True:
            page = [entry.to_dict() for entry in engine.list_containers_with_entities(config.connection)]
            has_more = bool(page) and page[-1].get("loadMore", False)
            if not (args.all and has_more):
                entries.extend(page)
                break
            entries.extend(page[:-1])
    except GlueReverseError as e:
        _print_error(e)
        return 2 if isinstance(e, ConfigurationError) else 1
    finally:
        engine.disconnect()

    _print_json(entries)
    return 0


def extract_command(args: argparse.Namespace) -> int:
    """Extract schema documents for the selected tables.

    Returns:
        Exit code (0=success, 1=catalog failure, 2=configuration error)
    """
    try:
        config = _load_config(args)
        selection = build_selection(config.selection, args.database, args.table)
    except ConfigurationError as e:
        _print_error(e)
        return 2

    if not selection.container_names:
        print("ERROR: No databases selected", file=sys.stderr)
        return 2

    engine = GlueReverseEngineer(settings=config.runtime)
    try:
        documents = engine.extract_schemas(config.connection, selection)
    except GlueReverseError as e:
        _print_error(e)
        return 2 if isinstance(e, ConfigurationError) else 1
    finally:
        engine.disconnect()

    _print_json([document.to_dict() for document in documents])
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Reverse engineer AWS Glue Data Catalog databases and tables into JSON schema documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check credentials
  glue-reverse test-connection --config glue.yaml

  # List all databases with their tables
  glue-reverse list --config glue.yaml --all

  # Extract two tables
  glue-reverse extract --config glue.yaml --table sales.orders --table sales.customers
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version number and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level override (default: from config, INFO)",
    )
    parser.add_argument(
        "--redact-logs",
        action="store_true",
        help="Redact secrets in log output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    test_parser = subparsers.add_parser(
        "test-connection",
        help="Check connectivity and credentials",
        description="List one page of databases to verify the catalog is reachable.",
    )
    test_parser.add_argument("--config", required=True, help="Path to configuration YAML file")

    list_parser = subparsers.add_parser(
        "list",
        help="List databases and their tables",
        description="List up to 100 databases with all of their tables. A trailing "
        "'Load more' entry means further databases exist.",
    )
    list_parser.add_argument("--config", required=True, help="Path to configuration YAML file")
    list_parser.add_argument(
        "--all",
        action="store_true",
        help="Keep requesting pages until every database is listed",
    )

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract schema documents",
        description="Reverse engineer the selected tables into JSON schema documents. "
        "Without --database/--table the selection from the config file is used.",
    )
    extract_parser.add_argument("--config", required=True, help="Path to configuration YAML file")
    extract_parser.add_argument(
        "--database",
        action="append",
        help="Database to include (repeatable)",
    )
    extract_parser.add_argument(
        "--table",
        action="append",
        help="Table to extract as database.table (repeatable)",
    )

    args = parser.parse_args(argv)

    if args.command == "test-connection":
        return check_connection_command(args)
    if args.command == "list":
        return list_command(args)
    if args.command == "extract":
        return extract_command(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
