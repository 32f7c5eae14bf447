"""Classification statistics data model."""
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Any
from collections import defaultdict


@dataclass
class ClassificationStats:
    """Counters for one classification run.

    Every element read ends up in exactly one bucket: prefiltered,
    unsupported, missing geometry, unnamed, unclassified, or classified
    (split into per-class counts).
    """
    elements_read: int = 0
    nodes: int = 0
    ways: int = 0
    relations: int = 0

    prefiltered: int = 0
    unsupported: int = 0
    missing_geometry: int = 0
    unnamed: int = 0
    unclassified: int = 0

    class_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    processing_time: float = 0.0

    @property
    def classified(self) -> int:
        """Total records produced."""
        return sum(self.class_counts.values())

    @property
    def skipped(self) -> int:
        """Total elements that produced no record."""
        return (self.prefiltered + self.unsupported + self.missing_geometry +
                self.unnamed + self.unclassified)

    def count_element(self, kind: str) -> None:
        """Count one element read from the source."""
        self.elements_read += 1
        if kind == 'node':
            self.nodes += 1
        elif kind == 'way':
            self.ways += 1
        else:
            self.relations += 1

    def count_class(self, class_name: str) -> None:
        self.class_counts[class_name] += 1

    def top_classes(self, n: int = 15) -> List[Tuple[str, int]]:
        """Most frequent classes, ties broken by name."""
        return sorted(self.class_counts.items(), key=lambda x: (-x[1], x[0]))[:n]

    def merge(self, other: 'ClassificationStats') -> None:
        """Add another run's counters into this one."""
        for name in ('elements_read', 'nodes', 'ways', 'relations',
                     'prefiltered', 'unsupported', 'missing_geometry',
                     'unnamed', 'unclassified'):
            setattr(self, name, getattr(self, name) + getattr(other, name))
        for class_name, count in other.class_counts.items():
            self.class_counts[class_name] += count
        self.processing_time += other.processing_time

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        rate = self.elements_read / max(self.processing_time, 0.001)
        return {
            'elements': {
                'nodes': self.nodes,
                'ways': self.ways,
                'relations': self.relations,
                'total': self.elements_read,
            },
            'classified': self.classified,
            'skipped': {
                'prefiltered': self.prefiltered,
                'unsupported': self.unsupported,
                'missing_geometry': self.missing_geometry,
                'unnamed': self.unnamed,
                'unclassified': self.unclassified,
                'total': self.skipped,
            },
            'classes': dict(sorted(self.class_counts.items())),
            'processing_time_seconds': self.processing_time,
            'elements_per_second': rate,
        }
