"""Import prefilter and bounding box filter.

The prefilter drops elements that can never become records before any
geometry or rule work is done: relations, unnamed elements, and elements
without any POI-indicating key. Its key set (which includes office and
craft) is separate from the classifier's fallback keys.
"""
import math
from dataclasses import dataclass
from typing import AbstractSet, Dict, Iterable, Iterator, Mapping

from poi_core.config import IMPORT_FILTER_KEYS, NAME_KEY
from poi_core.exceptions import InvalidBBoxError
from poi_core.models.elements import OSMElement


class ImportFilter:
    """Accept named nodes/ways carrying at least one POI key."""

    def __init__(self, keys: AbstractSet[str] = IMPORT_FILTER_KEYS,
                 element_kinds: AbstractSet[str] = frozenset({'node', 'way'})):
        """Initialize filter.

        Args:
            keys: Tag keys of which at least one must be present
            element_kinds: Element kinds that may pass
        """
        self.keys = frozenset(keys)
        self.element_kinds = frozenset(element_kinds)
        self.accepted = 0
        self.rejected = 0

    def matches(self, kind: str, tags: Mapping[str, str]) -> bool:
        """Check if an element passes the prefilter.

        Args:
            kind: 'node', 'way' or 'relation'
            tags: Element's tag dictionary

        Returns:
            True if the element should be classified
        """
        if kind not in self.element_kinds:
            return False
        if NAME_KEY not in tags:
            return False
        return any(key in tags for key in self.keys)

    def accepts(self, element: OSMElement) -> bool:
        """Check an element and update the accept/reject counters."""
        if self.matches(element.kind, element.tags):
            self.accepted += 1
            return True
        self.rejected += 1
        return False

    def filter(self, elements: Iterable[OSMElement]) -> Iterator[OSMElement]:
        """Yield only the elements that pass."""
        for element in elements:
            if self.accepts(element):
                yield element

    def __str__(self) -> str:
        kinds = ','.join(sorted(self.element_kinds))
        return f"accept:{kinds}:name=*+({'|'.join(sorted(self.keys))})"


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box in west, south, east, north order."""
    west: float
    south: float
    east: float
    north: float

    def __post_init__(self):
        edges = (self.west, self.south, self.east, self.north)
        if not all(math.isfinite(v) for v in edges):
            raise InvalidBBoxError(
                "Invalid bbox format. Coordinates must be finite numbers"
            )
        if self.south > self.north:
            raise InvalidBBoxError(
                f"south ({self.south}) is greater than north ({self.north})"
            )
        if self.west > self.east:
            raise InvalidBBoxError(
                f"west ({self.west}) is greater than east ({self.east})"
            )

    def contains(self, lat: float, lon: float) -> bool:
        """Check if a point is within the bounding box (edges inclusive).

        Args:
            lat: Point latitude
            lon: Point longitude

        Returns:
            True if point is within bounds
        """
        return (self.south <= lat <= self.north and
                self.west <= lon <= self.east)

    @classmethod
    def parse(cls, text: str) -> 'BoundingBox':
        """Parse 'west,south,east,north'.

        Raises:
            InvalidBBoxError: If there are not exactly four finite numbers
        """
        parts = [p.strip() for p in str(text).split(',')]
        if len(parts) != 4:
            raise InvalidBBoxError(
                "Invalid bbox format. Expected: west,south,east,north"
            )
        try:
            west, south, east, north = (float(p) for p in parts)
        except ValueError as e:
            raise InvalidBBoxError(
                "Invalid bbox format. Expected: west,south,east,north"
            ) from e
        return cls(west, south, east, north)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary representation."""
        return {
            'west': self.west,
            'south': self.south,
            'east': self.east,
            'north': self.north
        }
