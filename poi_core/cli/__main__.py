"""Allow running poi_core.cli as a module.

Usage:
    python -m poi_core.cli --help
"""

import sys
from poi_core.cli import main

if __name__ == "__main__":
    sys.exit(main())
