"""OSM Element data models.

These are the raw elements handed to the classifier by the reader. The
classifier and the record builder only read them.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Tuple, Any, Optional, Union


@dataclass
class OSMNode:
    """OSM Node with location, tags and edit metadata.

    Represents a point feature in OpenStreetMap with latitude/longitude
    coordinates and associated tags.
    """
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)
    version: int = 0
    timestamp: Optional[datetime] = None

    kind = 'node'

    @property
    def coordinates(self) -> Tuple[float, float]:
        """(lon, lat) pair in GeoJSON axis order."""
        return (self.lon, self.lat)


@dataclass
class OSMWay:
    """OSM Way with node references, tags and edit metadata.

    Represents a linear or area feature defined by an ordered list of node
    references.
    """
    id: int
    node_refs: List[int] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    version: int = 0
    timestamp: Optional[datetime] = None

    kind = 'way'

    @property
    def is_closed(self) -> bool:
        """Check if this way forms a closed loop."""
        return (len(self.node_refs) >= 4 and
                self.node_refs[0] == self.node_refs[-1])

    def resolve_coordinates(
        self, node_coords: Dict[int, Tuple[float, float]]
    ) -> Optional[List[Tuple[float, float]]]:
        """Look up (lon, lat) for every node reference.

        Args:
            node_coords: Dict mapping node IDs to (lat, lon) tuples

        Returns:
            List of (lon, lat) tuples, or None if any reference is missing
        """
        coordinates = []
        for node_id in self.node_refs:
            if node_id not in node_coords:
                return None
            lat, lon = node_coords[node_id]
            coordinates.append((lon, lat))
        return coordinates


@dataclass
class OSMRelation:
    """OSM Relation with members, tags and edit metadata."""
    id: int
    members: List[Dict[str, Any]] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    version: int = 0
    timestamp: Optional[datetime] = None

    kind = 'relation'

    @property
    def member_count(self) -> int:
        """Get the number of members in this relation."""
        return len(self.members)


OSMElement = Union[OSMNode, OSMWay, OSMRelation]

ELEMENT_KINDS = ('node', 'way', 'relation')
