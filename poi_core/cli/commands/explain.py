"""Explain command - show how a tag set is classified."""
import json
import sys

from poi_core.classification.classifier import Classifier
from poi_core.config import ClassifierConfig
from poi_core.rules.loader import load_rule_index


def setup_parser(subparsers):
    """Setup the explain subcommand parser."""
    parser = subparsers.add_parser(
        'explain',
        help='Show the class and winning rule for a tag set',
        description='Classify a single tag set given as key=value pairs'
    )

    parser.add_argument('--tag', '-t', action='append', default=[],
                        metavar='KEY=VALUE', help='Tag (repeatable)')
    parser.add_argument('--rules', help='Rule table JSON (default: bundled table)')
    parser.add_argument('--json', action='store_true', help='Output as JSON')

    parser.set_defaults(func=run)
    return parser


def parse_tags(pairs):
    """Parse ['k=v', ...] into a dict; raises ValueError on a bad pair."""
    tags = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise ValueError(f"Invalid tag '{pair}'. Expected KEY=VALUE")
        tags[key] = value
    return tags


def run(args):
    """Execute the explain command."""
    try:
        tags = parse_tags(args.tag)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    config = ClassifierConfig.from_env(rules_path=args.rules)
    classifier = Classifier(load_rule_index(config.rules_path), config.fallback_keys)
    decision = classifier.explain(tags)

    if args.json:
        print(json.dumps({
            'tags': tags,
            'class': decision.class_name,
            'reason': decision.reason,
            'rule': str(decision.rule) if decision.rule else None,
        }, indent=2, ensure_ascii=False))
        return 0

    print(f"Class: {decision.class_name if decision.is_poi else '(not a POI)'}")
    print(f"Reason: {decision.reason}")
    if decision.rule is not None:
        print(f"Rule: {decision.rule}")
    return 0
