"""Command-line interface for osmpoi.

Usage:
    # After pip install:
    osmpoi --help
    osmpoi classify map.osm -o pois.json
    osmpoi explain --tag name=Foo --tag amenity=pharmacy

    # Or via Python:
    python -m poi_core.cli
"""

import sys
from poi_core.cli.main import main as _main, create_parser

__all__ = ['main', 'create_parser']


def main() -> int:
    """Entry point for the osmpoi console script.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        return _main() or 0
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
