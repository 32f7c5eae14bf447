"""Rule index: the rule table compiled into per-key candidate lists.

Each rule is registered under the key of its first pair only. Within a
key's bucket, candidates are ordered so that a scan that stops at the
first match finds the most constrained rule available for that key:

1. more non-wildcard pairs (specificity) first,
2. then more pairs overall,
3. then declaration order in the table (the sort is stable).
"""
import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from poi_core.exceptions import RuleTableError
from poi_core.rules.base import Category, MatchRule

logger = logging.getLogger(__name__)


def _rank(rule: MatchRule) -> Tuple[int, int]:
    return (rule.specificity, rule.pair_count)


class RuleIndex:
    """Immutable mapping from tag key to its ordered candidate rules.

    Built once and shared read-only by every classification call, so it is
    safe to hand to concurrent workers.
    """

    __slots__ = ('_buckets', '_categories')

    def __init__(self, buckets: Mapping[str, Tuple[MatchRule, ...]],
                 categories: Tuple[Category, ...] = ()):
        self._buckets = MappingProxyType(dict(buckets))
        self._categories = tuple(categories)

    def __reduce__(self):
        # MappingProxyType cannot be pickled; rebuild from a plain dict
        return (RuleIndex, (dict(self._buckets), self._categories))

    def candidates(self, key: str) -> Tuple[MatchRule, ...]:
        """Candidate rules for a tag key in scan order (empty if none)."""
        return self._buckets.get(key, ())

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._buckets))

    def __len__(self) -> int:
        return len(self._buckets)

    @property
    def keys(self) -> List[str]:
        """Indexed tag keys in lexicographic order."""
        return sorted(self._buckets)

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self._categories

    @property
    def rule_count(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def items(self) -> Iterator[Tuple[str, Tuple[MatchRule, ...]]]:
        for key in self.keys:
            yield key, self._buckets[key]


def build_rule_index(categories: Iterable[Category]) -> RuleIndex:
    """Compile categories into a RuleIndex.

    Args:
        categories: Categories in table order, each with one or more rules

    Returns:
        RuleIndex keyed by each rule's first tag key

    Raises:
        RuleTableError: If a category is unnamed or has no rules
    """
    categories = tuple(categories)
    buckets: Dict[str, List[MatchRule]] = {}

    for category in categories:
        if not category.name:
            raise RuleTableError("Category with an empty class name")
        if not category.rules:
            raise RuleTableError(f"Class '{category.name}' has no match rules")
        for rule in category.rules:
            buckets.setdefault(rule.first_key, []).append(rule)

    ordered = {}
    for key, bucket in buckets.items():
        # Stable sort keeps declaration order for equal ranks
        bucket.sort(key=lambda r: r.position)
        bucket.sort(key=_rank, reverse=True)
        ordered[key] = tuple(bucket)

    index = RuleIndex(ordered, categories)
    logger.debug("Built rule index: %d classes, %d rules, %d keys",
                 len(categories), index.rule_count, len(index))
    return index


def categories_from_pairs(
    table: Sequence[Tuple[str, Sequence[Sequence[Tuple[str, str]]]]]
) -> List[Category]:
    """Build categories from (class, [[(key, value), ...], ...]) tuples.

    Positions are assigned in table order, so this is the programmatic
    equivalent of loading a JSON rule table.
    """
    categories = []
    position = 0
    for class_name, matches in table:
        rules = []
        for pairs in matches:
            rules.append(MatchRule(class_name,
                                   tuple(tuple(p) for p in pairs),
                                   position))
            position += 1
        categories.append(Category(class_name, tuple(rules)))
    return categories
