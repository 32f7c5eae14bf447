"""Element classifier: tags in, POI class (or None) out.

Decision procedure for one tag mapping:

1. No ``name`` key: not a POI.
2. Walk the tag keys in lexicographic order. For each key present in the
   index, scan its candidates in rank order; the first rule whose pairs
   all hold decides the class. The first key that yields a match wins,
   there is no search across keys for a better-ranked rule.
3. Otherwise, any fallback key present (amenity, shop, leisure, tourism by
   default): ``misc``.
4. Otherwise not a POI.

Key order is fixed to sorted order so the result never depends on how the
reader happened to build the tag dict.
"""
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from typing import AbstractSet, Any, Optional

from poi_core.config import FALLBACK_POI_KEYS, MISC_CLASS, NAME_KEY
from poi_core.rules.base import MatchRule
from poi_core.rules.index import RuleIndex


@dataclass(frozen=True)
class Decision:
    """Outcome of classifying one tag set, with the reason behind it."""
    class_name: Optional[str]
    rule: Optional[MatchRule] = None
    reason: str = 'no_match'  # 'rule', 'fallback', 'unnamed' or 'no_match'

    @property
    def is_poi(self) -> bool:
        return self.class_name is not None


UNNAMED = Decision(None, reason='unnamed')
NO_MATCH = Decision(None, reason='no_match')


def _find_rule(tags: MappingABC, index: RuleIndex) -> Optional[MatchRule]:
    for key in sorted(k for k in tags if isinstance(k, str)):
        if key not in index:
            continue
        for rule in index.candidates(key):
            if rule.matches(tags):
                return rule
    return None


def explain(tags: Any, index: RuleIndex,
            fallback_keys: AbstractSet[str] = FALLBACK_POI_KEYS) -> Decision:
    """Classify tags and report which rule or fallback decided.

    Args:
        tags: Element tag mapping (anything else is treated as no tags)
        index: Compiled rule index
        fallback_keys: Keys that mark an unmatched element as misc

    Returns:
        Decision; class_name is None when the element is not a POI
    """
    if not isinstance(tags, MappingABC) or NAME_KEY not in tags:
        return UNNAMED

    rule = _find_rule(tags, index)
    if rule is not None:
        return Decision(rule.class_name, rule, 'rule')

    if any(key in tags for key in fallback_keys):
        return Decision(MISC_CLASS, reason='fallback')

    return NO_MATCH


def classify(tags: Any, index: RuleIndex,
             fallback_keys: AbstractSet[str] = FALLBACK_POI_KEYS) -> Optional[str]:
    """Return the POI class for a tag mapping, 'misc', or None."""
    return explain(tags, index, fallback_keys).class_name


class Classifier:
    """Classifier bound to one rule index and fallback key set.

    Holds no mutable state, so one instance can serve any number of
    threads, or be pickled to worker processes.
    """

    def __init__(self, index: RuleIndex,
                 fallback_keys: AbstractSet[str] = FALLBACK_POI_KEYS):
        self.index = index
        self.fallback_keys = frozenset(fallback_keys)

    def classify(self, tags: Any) -> Optional[str]:
        """Return the POI class for a tag mapping, 'misc', or None."""
        return explain(tags, self.index, self.fallback_keys).class_name

    def explain(self, tags: Any) -> Decision:
        """Classify and return the full Decision."""
        return explain(tags, self.index, self.fallback_keys)

    def __repr__(self) -> str:
        return (f"Classifier(keys={len(self.index)}, rules={self.index.rule_count}, "
                f"fallback={sorted(self.fallback_keys)})")
