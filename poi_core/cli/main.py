"""CLI main entry point with subcommand structure."""
import argparse
import logging
import sys
from typing import Optional

from poi_core import __version__
from poi_core.exceptions import RuleTableError


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='osmpoi',
        description='osmpoi - classify OpenStreetMap elements into POI categories',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  osmpoi classify map.osm -o pois.json
  osmpoi classify map.osm -o pois.geojson -f geojson --workers 4
  osmpoi explain --tag name=Corner --tag amenity=restaurant --tag cuisine=pizza
  osmpoi rules --key shop
  osmpoi query pois.json --bbox 13.3,52.5,13.4,52.6
  osmpoi query pois.json --element node 123
'''
    )

    # Global options
    parser.add_argument('--version', '-V', action='version',
                        version=f'osmpoi {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Suppress non-error output')
    parser.add_argument('--verbose', '-v', action='count', default=0,
                        help='Increase verbosity')

    subparsers = parser.add_subparsers(dest='command', title='commands',
                                       description='Available commands')

    from poi_core.cli.commands.classify import setup_parser as setup_classify
    setup_classify(subparsers)

    from poi_core.cli.commands.explain import setup_parser as setup_explain
    setup_explain(subparsers)

    from poi_core.cli.commands.rules import setup_parser as setup_rules
    setup_rules(subparsers)

    from poi_core.cli.commands.query import setup_parser as setup_query
    setup_query(subparsers)

    return parser


def configure_logging(verbose: int = 0, quiet: bool = False) -> None:
    """Configure the root logger from the global verbosity flags."""
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s',
                        stream=sys.stderr)
    logging.getLogger().setLevel(level)


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 0

    configure_logging(parsed_args.verbose, parsed_args.quiet)

    try:
        if parsed_args.command == 'classify':
            from poi_core.cli.commands.classify import run as cmd_classify
            return cmd_classify(parsed_args)
        elif parsed_args.command == 'explain':
            from poi_core.cli.commands.explain import run as cmd_explain
            return cmd_explain(parsed_args)
        elif parsed_args.command == 'rules':
            from poi_core.cli.commands.rules import run as cmd_rules
            return cmd_rules(parsed_args)
        elif parsed_args.command == 'query':
            from poi_core.cli.commands.query import run as cmd_query
            return cmd_query(parsed_args)
        else:
            parser.print_help()
            return 0

    except FileNotFoundError as e:
        print(f"osmpoi: error: File not found: {e}", file=sys.stderr)
        return 3
    except PermissionError as e:
        print(f"osmpoi: error: Permission denied: {e}", file=sys.stderr)
        return 4
    except RuleTableError as e:
        print(f"osmpoi: error: Invalid rule table: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"osmpoi: error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
