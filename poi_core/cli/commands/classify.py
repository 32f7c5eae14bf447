"""Classify command - turn an OSM file into classified POI records."""
import sys
from pathlib import Path

from poi_core.config import ClassifierConfig
from poi_core.export import EXPORTERS, get_exporter
from poi_core.pipeline import POIPipeline


def setup_parser(subparsers):
    """Setup the classify subcommand parser."""
    parser = subparsers.add_parser(
        'classify',
        help='Classify named POIs in an OSM file',
        description='Classify OSM nodes and building ways into POI categories'
    )

    parser.add_argument('input', help='Input OSM XML file')
    parser.add_argument('-o', '--output',
                        help='Output file (omit to print statistics only)')
    parser.add_argument(
        '-f', '--format',
        choices=sorted(EXPORTERS),
        default='json',
        help='Output format (default: json)'
    )
    parser.add_argument(
        '--tag-field',
        action='append',
        metavar='KEY',
        help='Tag to add as a shapefile attribute column (repeatable)'
    )
    parser.add_argument('--rules', help='Rule table JSON (default: bundled table)')
    parser.add_argument('--workers', type=int,
                        help='Worker processes for classification (default: 1)')
    parser.add_argument(
        '--no-prefilter',
        action='store_true',
        help='Classify every element, not just named elements with POI keys'
    )
    parser.add_argument(
        '--include-all-ways',
        action='store_true',
        help='Locate any closed way, not only those tagged building'
    )
    parser.add_argument(
        '--stats',
        action='store_true',
        help='Print classification statistics'
    )

    parser.set_defaults(func=run)
    return parser


def print_stats(result, top: int = 15) -> None:
    """Print a human-readable summary of a pipeline run."""
    stats = result.stats
    print(f"\nPOI Classification: {result.source}")
    print("=" * 60)
    print(f"Elements read: {stats.elements_read} "
          f"(nodes {stats.nodes}, ways {stats.ways}, relations {stats.relations})")
    print(f"Classified: {stats.classified}")
    print(f"Skipped: {stats.skipped}")
    print(f"  prefiltered: {stats.prefiltered}")
    print(f"  unsupported: {stats.unsupported}")
    print(f"  unnamed: {stats.unnamed}")
    print(f"  unclassified: {stats.unclassified}")
    print(f"  missing geometry: {stats.missing_geometry}")

    if stats.class_counts:
        print("\nTop classes:")
        for class_name, count in stats.top_classes(top):
            print(f"  {class_name}: {count}")

    print(f"\nProcessing time: {stats.processing_time:.3f}s")


def run(args):
    """Execute the classify command."""
    if not Path(args.input).exists():
        raise FileNotFoundError(args.input)

    if args.tag_field and args.format != 'shapefile':
        print("Error: --tag-field only applies to shapefile output", file=sys.stderr)
        return 1

    if args.workers is not None and args.workers < 1:
        print("Error: --workers must be at least 1", file=sys.stderr)
        return 1

    config = ClassifierConfig.from_env(
        rules_path=args.rules,
        workers=args.workers,
        prefilter=False if args.no_prefilter else None,
        way_requires_building=False if args.include_all_ways else None,
    )
    pipeline = POIPipeline(config=config)
    result = pipeline.process_file(args.input)

    if args.output:
        options = {}
        if args.tag_field:
            options['tag_fields'] = args.tag_field
        exporter = get_exporter(args.format, **options)
        exporter.export(result, args.output)
        if not args.quiet:
            print(f"Wrote {len(result.records)} records to {args.output} "
                  f"({exporter.get_format_name()})")

    if args.stats or not args.output:
        print_stats(result)

    return 0
