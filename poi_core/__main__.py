"""Allow running poi_core as a module.

Usage:
    python -m poi_core --help
    python -m poi_core classify map.osm -o pois.geojson -f geojson
"""

import sys
from poi_core.cli import main

if __name__ == "__main__":
    sys.exit(main())
