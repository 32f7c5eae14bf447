"""Rule table data structures."""
from dataclasses import dataclass, field
from typing import Mapping, Tuple

from poi_core.config import WILDCARD
from poi_core.exceptions import RuleTableError

TagPair = Tuple[str, str]


@dataclass(frozen=True)
class MatchRule:
    """A conjunction of (key, value) requirements for one category.

    Every pair must hold for the rule to fire. A value of '*' only
    requires the key to be present.
    """
    class_name: str
    pairs: Tuple[TagPair, ...]
    position: int = 0  # declaration order across the whole table
    specificity: int = field(init=False)

    def __post_init__(self):
        where = f"Rule #{self.position} of class '{self.class_name}'"
        if not self.pairs:
            raise RuleTableError(f"{where} has no tag pairs")
        for pair in self.pairs:
            if len(pair) != 2:
                raise RuleTableError(
                    f"{where} has a malformed pair {pair!r}; expected [key, value]"
                )
            key, value = pair
            if not isinstance(key, str) or not key:
                raise RuleTableError(f"{where} has an invalid key {key!r}")
            if not isinstance(value, str):
                raise RuleTableError(
                    f"{where} has a non-string value {value!r} for key '{key}'"
                )
        object.__setattr__(
            self, 'specificity',
            sum(1 for _, value in self.pairs if value != WILDCARD)
        )

    @property
    def pair_count(self) -> int:
        return len(self.pairs)

    @property
    def first_key(self) -> str:
        """The index key this rule is registered under."""
        return self.pairs[0][0]

    def matches(self, tags: Mapping[str, str]) -> bool:
        """Check if an element's tags satisfy every pair of this rule.

        Args:
            tags: Element's tag mapping

        Returns:
            True if all keys are present and all non-wildcard values are equal
        """
        for key, expected in self.pairs:
            if key not in tags:
                return False
            if expected != WILDCARD and tags[key] != expected:
                return False
        return True

    def __str__(self) -> str:
        """String representation for debugging."""
        body = ' + '.join(f"{k}={v}" for k, v in self.pairs)
        return f"{self.class_name}: {body}"


@dataclass(frozen=True)
class Category:
    """A POI class and the alternative rules that select it."""
    name: str
    rules: Tuple[MatchRule, ...] = ()

    def to_dict(self) -> dict:
        """Convert back to the rule table JSON shape."""
        return {
            'class': self.name,
            'matches': [[list(pair) for pair in rule.pairs] for rule in self.rules],
        }
