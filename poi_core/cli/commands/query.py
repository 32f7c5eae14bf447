"""Query command - look up stored records by bounding box or identity."""
import json
import sys

from poi_core.config import DEFAULT_QUERY_LIMIT
from poi_core.store import POIStore, parse_bbox


def setup_parser(subparsers):
    """Setup the query subcommand parser."""
    parser = subparsers.add_parser(
        'query',
        help='Query classified records saved by classify -f json',
        description='Return records as {"elements": [...]} by bbox or by id'
    )

    parser.add_argument('store', help='JSON records file')
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--bbox', metavar='W,S,E,N',
                       help='Bounding box west,south,east,north')
    group.add_argument('--element', nargs=2, metavar=('TYPE', 'ID'),
                       help='Element type (node/n, way/w, relation/r) and id')
    parser.add_argument('--limit', type=int, default=DEFAULT_QUERY_LIMIT,
                        help=f'Maximum elements for --bbox (default: {DEFAULT_QUERY_LIMIT})')

    parser.set_defaults(func=run)
    return parser


def run(args):
    """Execute the query command."""
    store = POIStore.load(args.store)

    if args.bbox:
        bbox = parse_bbox(args.bbox)
        response = store.query_bbox(bbox.west, bbox.south, bbox.east, bbox.north,
                                    limit=args.limit)
    else:
        element_type, element_id = args.element
        try:
            element_id = int(element_id)
        except ValueError:
            print(f"Error: Invalid element id '{element_id}'", file=sys.stderr)
            return 1
        response = store.get_element(element_type, element_id)
        if response is None:
            print("Error: Element not found", file=sys.stderr)
            return 1

    print(json.dumps(response, indent=2, ensure_ascii=False))
    return 0
