"""Rules command - list the compiled rule index in scan order."""
import json

from poi_core.config import ClassifierConfig
from poi_core.rules.loader import load_rule_index


def setup_parser(subparsers):
    """Setup the rules subcommand parser."""
    parser = subparsers.add_parser(
        'rules',
        help='List classification rules grouped by key',
        description='Show each key bucket of the rule index in scan order'
    )

    parser.add_argument('--rules', help='Rule table JSON (default: bundled table)')
    parser.add_argument('--key', '-k', help='Only show the bucket for this key')
    parser.add_argument('--json', action='store_true', help='Output as JSON')

    parser.set_defaults(func=run)
    return parser


def run(args):
    """Execute the rules command."""
    config = ClassifierConfig.from_env(rules_path=args.rules)
    index = load_rule_index(config.rules_path)

    keys = [args.key] if args.key else list(index)

    if args.json:
        output = {
            key: [{'class': r.class_name,
                   'pairs': [list(p) for p in r.pairs],
                   'specificity': r.specificity}
                  for r in index.candidates(key)]
            for key in keys
        }
        print(json.dumps(output, indent=2))
        return 0

    if not args.quiet:
        print(f"{len(index.categories)} classes, {index.rule_count} rules, "
              f"{len(index)} keys")
    for key in keys:
        rules = index.candidates(key)
        print(f"\n{key} ({len(rules)} rules):")
        for rule in rules:
            print(f"  [{rule.specificity}] {rule}")
    return 0
