"""Point locations for classified elements.

Nodes are located at their coordinates. Closed ways are located at the
centroid of the polygon they outline. Relations are not located.
All coordinates are (lon, lat) pairs, GeoJSON axis order.
"""
from typing import Dict, Optional, Sequence, Tuple

from poi_core.config import WAY_AREA_KEY
from poi_core.models.elements import OSMElement, OSMNode, OSMWay

Point = Tuple[float, float]

# Rings with a smaller absolute signed area are treated as degenerate
_MIN_AREA = 1e-18


def get_signed_area(coordinates: Sequence[Point]) -> float:
    """Signed shoelace area of a ring in squared degrees.

    Positive for counter-clockwise rings. The ring may or may not repeat
    its first point at the end.
    """
    n = len(coordinates)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        x1, y1 = coordinates[i]
        x2, y2 = coordinates[(i + 1) % n]
        area += x1 * y2 - x2 * y1
    return area / 2.0


def get_ring_centroid(coordinates: Sequence[Point]) -> Optional[Point]:
    """Calculate the centroid of a polygon ring.

    Uses the area-weighted polygon centroid; degenerate (zero-area) rings
    fall back to the mean of their distinct vertices.

    Args:
        coordinates: Ring coordinates as [(lon, lat), ...]

    Returns:
        (lon, lat) centroid, or None for an empty ring

    Examples:
        >>> get_ring_centroid([(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)])
        (1.0, 1.0)
    """
    if not coordinates:
        return None

    ring = list(coordinates)
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring = ring[:-1]

    area = get_signed_area(ring)
    if abs(area) < _MIN_AREA:
        n = len(ring)
        return (sum(c[0] for c in ring) / n, sum(c[1] for c in ring) / n)

    cx = cy = 0.0
    n = len(ring)
    for i in range(n):
        x1, y1 = ring[i]
        x2, y2 = ring[(i + 1) % n]
        cross = x1 * y2 - x2 * y1
        cx += (x1 + x2) * cross
        cy += (y1 + y2) * cross

    return (cx / (6.0 * area), cy / (6.0 * area))


def node_point(node: OSMNode) -> Point:
    """Location of a node as (lon, lat)."""
    return (float(node.lon), float(node.lat))


def way_centroid(way: OSMWay,
                 node_coords: Dict[int, Tuple[float, float]]) -> Optional[Point]:
    """Centroid of a closed way's polygon.

    Args:
        way: The way
        node_coords: Dict mapping node IDs to (lat, lon) tuples

    Returns:
        (lon, lat) centroid, or None if the way is open or a node is missing
    """
    if not way.is_closed:
        return None
    coordinates = way.resolve_coordinates(node_coords)
    if coordinates is None:
        return None
    return get_ring_centroid(coordinates)


class ElementGeometry:
    """Locate elements against a node coordinate cache.

    Args:
        node_coords: Dict mapping node IDs to (lat, lon), usually the
            parser's cache
        way_requires_building: Only locate closed ways tagged building
    """

    def __init__(self, node_coords: Dict[int, Tuple[float, float]],
                 way_requires_building: bool = True):
        self.node_coords = node_coords
        self.way_requires_building = way_requires_building

    def is_candidate(self, element: OSMElement) -> bool:
        """Whether the element kind/shape can yield a located POI at all."""
        if element.kind == 'node':
            return True
        if element.kind == 'way':
            if not element.is_closed:
                return False
            return not self.way_requires_building or WAY_AREA_KEY in element.tags
        return False

    def locate(self, element: OSMElement) -> Optional[Point]:
        """Point location for an element, or None if it cannot be located."""
        if element.kind == 'node':
            return node_point(element)
        if element.kind == 'way':
            return way_centroid(element, self.node_coords)
        return None
