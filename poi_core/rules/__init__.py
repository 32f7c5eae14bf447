"""Category rule table, loader and index."""

from poi_core.rules.base import Category, MatchRule
from poi_core.rules.index import RuleIndex, build_rule_index, categories_from_pairs
from poi_core.rules.loader import (
    DEFAULT_RULES_PATH, load_rule_index, load_rule_table, parse_rule_table
)

__all__ = [
    'Category', 'MatchRule', 'RuleIndex',
    'build_rule_index', 'categories_from_pairs',
    'DEFAULT_RULES_PATH', 'load_rule_index', 'load_rule_table', 'parse_rule_table',
]
