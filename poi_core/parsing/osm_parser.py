"""Memory-mapped OSM XML reader.

Scans OSM XML with pre-compiled byte patterns instead of a DOM, so large
extracts are read in a single pass with constant memory apart from the
node coordinate cache needed for way geometry.
"""
import logging
import mmap
import re
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union
from xml.sax.saxutils import unescape

from poi_core.models.elements import OSMElement, OSMNode, OSMRelation, OSMWay

logger = logging.getLogger(__name__)

_XML_ENTITIES = {'&quot;': '"', '&apos;': "'"}

NODE_PATTERN = re.compile(rb'<node\s([^<>]*?)(/?)>', re.DOTALL)
NODE_CLOSE_PATTERN = re.compile(rb'</node>')
WAY_PATTERN = re.compile(rb'<way\s([^<>]*?)>(.*?)</way>', re.DOTALL)
RELATION_PATTERN = re.compile(rb'<relation\s([^<>]*?)>(.*?)</relation>', re.DOTALL)
ATTR_PATTERN = re.compile(rb'([\w:]+)="([^"]*)"')
TAG_PATTERN = re.compile(rb'<tag\s+k="([^"]*)"\s+v="([^"]*)"[^>]*/?>')
ND_PATTERN = re.compile(rb'<nd\s+ref="([^"]+)"[^>]*/>')
MEMBER_PATTERN = re.compile(
    rb'<member\s+type="([^"]+)"\s+ref="([^"]+)"\s+role="([^"]*)"[^>]*/>'
)


def _text(raw: bytes) -> str:
    return unescape(raw.decode('utf-8'), _XML_ENTITIES)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an OSM timestamp attribute into an aware UTC datetime.

    Examples:
        >>> parse_timestamp("2021-03-04T05:06:07Z").isoformat()
        '2021-03-04T05:06:07+00:00'
    """
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class OSMParser:
    """Single-pass OSM XML reader using memory-mapping + compiled patterns."""

    def __init__(self):
        self.stats = {
            'bytes_processed': 0,
            'elements_parsed': 0,
            'tags_extracted': 0,
            'parsing_time': 0.0,
            'malformed_elements': 0,
        }

        # Coordinate cache for way geometry reconstruction: id -> (lat, lon)
        self.node_coordinates: Dict[int, Tuple[float, float]] = {}

    def extract_attributes(self, raw: bytes) -> Dict[str, str]:
        """Decode the attributes of an opening tag."""
        return {k.decode('ascii'): _text(v) for k, v in ATTR_PATTERN.findall(raw)}

    def extract_tags(self, element_content: bytes) -> Dict[str, str]:
        """Extract tag key-value pairs from element content.

        Args:
            element_content: Raw bytes of element content

        Returns:
            Dict of tag key-value pairs
        """
        tags = {}
        for match in TAG_PATTERN.finditer(element_content):
            try:
                tags[_text(match.group(1))] = _text(match.group(2))
                self.stats['tags_extracted'] += 1
            except UnicodeDecodeError:
                continue
        return tags

    def extract_node_refs(self, way_content: bytes) -> List[int]:
        """Extract node reference IDs from way content."""
        return [int(m.group(1)) for m in ND_PATTERN.finditer(way_content)]

    def extract_members(self, relation_content: bytes) -> List[Dict[str, Any]]:
        """Extract member references from relation content.

        Returns:
            List of member dicts with 'type', 'ref', and 'role' keys
        """
        members = []
        for match in MEMBER_PATTERN.finditer(relation_content):
            try:
                members.append({
                    'type': match.group(1).decode('utf-8'),
                    'ref': int(match.group(2)),
                    'role': _text(match.group(3))
                })
            except (UnicodeDecodeError, ValueError):
                continue
        return members

    def _metadata(self, attrs: Dict[str, str]) -> Tuple[int, int, Optional[datetime]]:
        return (int(attrs['id']),
                int(attrs.get('version') or 0),
                parse_timestamp(attrs.get('timestamp')))

    def parse_nodes(self, data: Union[mmap.mmap, bytes]) -> Iterator[OSMNode]:
        """Parse nodes, caching every coordinate and yielding tagged nodes.

        Args:
            data: Memory-mapped file data (or bytes)

        Yields:
            OSMNode objects that carry at least one tag
        """
        for match in NODE_PATTERN.finditer(data):
            try:
                attrs = self.extract_attributes(match.group(1))
                node_id, version, timestamp = self._metadata(attrs)
                lat = float(attrs['lat'])
                lon = float(attrs['lon'])
            except (KeyError, ValueError, UnicodeDecodeError):
                # Deleted nodes in diffs carry no coordinates
                self.stats['malformed_elements'] += 1
                continue

            self.node_coordinates[node_id] = (lat, lon)

            tags = {}
            if match.group(2) != b'/':
                end_pos = match.end()
                close_match = NODE_CLOSE_PATTERN.search(data, end_pos)
                if close_match:
                    tags = self.extract_tags(data[end_pos:close_match.start()])

            if tags:
                self.stats['elements_parsed'] += 1
                yield OSMNode(id=node_id, lat=lat, lon=lon, tags=tags,
                              version=version, timestamp=timestamp)

    def parse_ways(self, data: Union[mmap.mmap, bytes]) -> Iterator[OSMWay]:
        """Parse ways that have both tags and node references."""
        for match in WAY_PATTERN.finditer(data):
            try:
                attrs = self.extract_attributes(match.group(1))
                way_id, version, timestamp = self._metadata(attrs)
                content = match.group(2)
                node_refs = self.extract_node_refs(content)
                tags = self.extract_tags(content)
            except (KeyError, ValueError, UnicodeDecodeError):
                self.stats['malformed_elements'] += 1
                continue

            if tags and node_refs:
                self.stats['elements_parsed'] += 1
                yield OSMWay(id=way_id, node_refs=node_refs, tags=tags,
                             version=version, timestamp=timestamp)

    def parse_relations(self, data: Union[mmap.mmap, bytes]) -> Iterator[OSMRelation]:
        """Parse relations that have both tags and members."""
        for match in RELATION_PATTERN.finditer(data):
            try:
                attrs = self.extract_attributes(match.group(1))
                relation_id, version, timestamp = self._metadata(attrs)
                content = match.group(2)
                members = self.extract_members(content)
                tags = self.extract_tags(content)
            except (KeyError, ValueError, UnicodeDecodeError):
                self.stats['malformed_elements'] += 1
                continue

            if tags and members:
                self.stats['elements_parsed'] += 1
                yield OSMRelation(id=relation_id, members=members, tags=tags,
                                  version=version, timestamp=timestamp)

    def iter_elements(self, file_path: str,
                      include_relations: bool = False) -> Iterator[OSMElement]:
        """Stream elements from a file: all nodes, then ways, then relations.

        Node coordinates are cached while nodes are read, so every way
        yielded afterwards can be located.

        Args:
            file_path: Path to OSM XML file
            include_relations: If True, also yield relations
        """
        start_time = time.time()

        with open(file_path, 'rb') as f:
            if f.seek(0, 2) == 0:
                logger.warning("Empty OSM file: %s", file_path)
                return
            f.seek(0)
            with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as mm:
                self.stats['bytes_processed'] += len(mm)
                yield from self.parse_nodes(mm)
                yield from self.parse_ways(mm)
                if include_relations:
                    yield from self.parse_relations(mm)

        self.stats['parsing_time'] += time.time() - start_time
        logger.debug("Parsed %s: %d elements", file_path, self.stats['elements_parsed'])

    def parse_file(
        self,
        file_path: str,
        include_relations: bool = False
    ) -> Union[Tuple[List[OSMNode], List[OSMWay]],
               Tuple[List[OSMNode], List[OSMWay], List[OSMRelation]]]:
        """Parse a complete file into lists.

        Args:
            file_path: Path to OSM XML file
            include_relations: If True, also parse relations

        Returns:
            Tuple of (nodes, ways) or (nodes, ways, relations) if include_relations
        """
        nodes, ways, relations = [], [], []
        for element in self.iter_elements(file_path, include_relations):
            if element.kind == 'node':
                nodes.append(element)
            elif element.kind == 'way':
                ways.append(element)
            else:
                relations.append(element)

        if include_relations:
            return nodes, ways, relations
        return nodes, ways

    def get_performance_stats(self) -> Dict[str, Any]:
        """Get parser statistics."""
        processing_rate = (self.stats['elements_parsed'] /
                           max(self.stats['parsing_time'], 0.001))
        return {
            **self.stats,
            'processing_rate_elem_per_sec': processing_rate,
            'nodes_cached_for_geometry': len(self.node_coordinates),
        }

    def reset_stats(self) -> None:
        """Reset all statistics and the coordinate cache."""
        for key in self.stats:
            self.stats[key] = 0
        self.stats['parsing_time'] = 0.0
        self.node_coordinates.clear()
