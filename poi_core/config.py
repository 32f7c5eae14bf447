"""Classification settings and externalized key sets.

The key sets are plain frozensets so they can be extended or swapped
without touching the classifier. ClassifierConfig bundles them with the
pipeline options and can be populated from OSMPOI_* environment variables.
"""
import os
from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional

# Rule value meaning "key must be present, any value"
WILDCARD = '*'

# Class assigned when no rule matches but a fallback key is present
MISC_CLASS = 'misc'

NAME_KEY = 'name'

# Keys whose presence marks an unmatched element as a generic POI
FALLBACK_POI_KEYS: FrozenSet[str] = frozenset({
    'amenity', 'shop', 'leisure', 'tourism'
})

# Keys accepted by the import prefilter. Wider than FALLBACK_POI_KEYS:
# office/craft elements reach the classifier but never fall back to misc.
IMPORT_FILTER_KEYS: FrozenSet[str] = FALLBACK_POI_KEYS | frozenset({
    'office', 'craft'
})

# Ways are only POI candidates when closed and carrying this key
WAY_AREA_KEY = 'building'

# Cap on rows returned by a bounding-box query
DEFAULT_QUERY_LIMIT = 1000

ENV_FALLBACK_KEYS = 'OSMPOI_FALLBACK_KEYS'
ENV_IMPORT_KEYS = 'OSMPOI_IMPORT_KEYS'
ENV_RULES = 'OSMPOI_RULES'
ENV_WORKERS = 'OSMPOI_WORKERS'


def parse_key_list(value: str) -> FrozenSet[str]:
    """Parse a comma-separated key list, ignoring blanks.

    Examples:
        >>> sorted(parse_key_list("amenity, shop,,"))
        ['amenity', 'shop']
    """
    return frozenset(k.strip() for k in value.split(',') if k.strip())


@dataclass(frozen=True)
class ClassifierConfig:
    """Options shared by the classifier, the prefilter and the pipeline."""
    fallback_keys: FrozenSet[str] = FALLBACK_POI_KEYS
    import_filter_keys: FrozenSet[str] = IMPORT_FILTER_KEYS
    prefilter: bool = True
    way_requires_building: bool = True
    include_relations: bool = False
    workers: int = 1
    rules_path: Optional[str] = None
    query_limit: int = DEFAULT_QUERY_LIMIT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 **overrides) -> 'ClassifierConfig':
        """Build a config from OSMPOI_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ
            **overrides: Explicit values that win over the environment

        Returns:
            ClassifierConfig instance

        Raises:
            ValueError: If OSMPOI_WORKERS is not a positive integer
        """
        env = os.environ if environ is None else environ
        values = {}

        if env.get(ENV_FALLBACK_KEYS):
            values['fallback_keys'] = parse_key_list(env[ENV_FALLBACK_KEYS])
        if env.get(ENV_IMPORT_KEYS):
            values['import_filter_keys'] = parse_key_list(env[ENV_IMPORT_KEYS])
        if env.get(ENV_RULES):
            values['rules_path'] = env[ENV_RULES]
        if env.get(ENV_WORKERS):
            workers = int(env[ENV_WORKERS])
            if workers < 1:
                raise ValueError(f"{ENV_WORKERS} must be >= 1, got {workers}")
            values['workers'] = workers

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
