"""Rule table loading and validation.

The rule table is a JSON list of entries::

    [
      {"class": "pharmacy", "matches": [[["amenity", "pharmacy"]]]},
      {"class": "bakery", "matches": [[["shop", "bakery"]],
                                      [["amenity", "cafe"], ["cuisine", "bakery"]]]}
    ]

Each ``matches`` entry is an alternative rule: a list of [key, value]
pairs that must all hold, where value may be ``"*"``.
"""
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from poi_core.exceptions import RuleTableError
from poi_core.rules.base import Category, MatchRule
from poi_core.rules.index import RuleIndex, build_rule_index

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent / 'data' / 'poi_mapping.json'


def _parse_pair(raw: Any, where: str) -> tuple:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise RuleTableError(f"{where}: expected [key, value] pair, got {raw!r}")
    key, value = raw
    if not isinstance(key, str) or not key:
        raise RuleTableError(f"{where}: tag key must be a non-empty string, got {key!r}")
    if not isinstance(value, str):
        raise RuleTableError(f"{where}: tag value must be a string, got {value!r}")
    return (key, value)


def parse_rule_table(data: Any) -> List[Category]:
    """Convert decoded rule table data into Category objects.

    Args:
        data: Decoded JSON (a list of {class, matches} entries)

    Returns:
        Categories in table order, rules numbered in declaration order

    Raises:
        RuleTableError: If any entry, rule or pair is malformed
    """
    if not isinstance(data, list):
        raise RuleTableError(
            f"Rule table must be a list of categories, got {type(data).__name__}"
        )

    categories = []
    position = 0
    seen = set()

    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise RuleTableError(f"Entry {i}: expected an object, got {entry!r}")

        class_name = entry.get('class')
        if not isinstance(class_name, str) or not class_name:
            raise RuleTableError(f"Entry {i}: missing or empty 'class'")

        matches = entry.get('matches')
        if not isinstance(matches, list) or not matches:
            raise RuleTableError(f"Class '{class_name}': 'matches' must be a non-empty list")

        if class_name in seen:
            logger.warning("Class '%s' is declared more than once", class_name)
        seen.add(class_name)

        rules = []
        for j, raw_rule in enumerate(matches):
            where = f"Class '{class_name}' rule {j}"
            if not isinstance(raw_rule, list) or not raw_rule:
                raise RuleTableError(f"{where}: must be a non-empty list of pairs")
            pairs = tuple(_parse_pair(p, where) for p in raw_rule)
            rules.append(MatchRule(class_name, pairs, position))
            position += 1

        categories.append(Category(class_name, tuple(rules)))

    return categories


def load_rule_table(path: Optional[Union[str, Path]] = None) -> List[Category]:
    """Load and validate a rule table JSON file.

    Args:
        path: Rule table path; defaults to the bundled poi_mapping.json

    Returns:
        List of Category objects

    Raises:
        FileNotFoundError: If the file does not exist
        RuleTableError: If the file is not valid JSON or is malformed
    """
    path = Path(path) if path else DEFAULT_RULES_PATH

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise RuleTableError(f"{path}: invalid JSON: {e}") from e

    categories = parse_rule_table(data)
    logger.info("Loaded %d categories from %s", len(categories), path)
    return categories


def load_rule_index(path: Optional[Union[str, Path]] = None) -> RuleIndex:
    """Load a rule table and compile it into a RuleIndex."""
    return build_rule_index(load_rule_table(path))
