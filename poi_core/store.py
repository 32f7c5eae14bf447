"""In-memory POI store with bounding-box and by-identity queries.

Records are keyed by (kind, id); writing a record for an existing key
replaces it. Query responses use the Overpass element shape::

    {"elements": [{"type": "node", "id": 1, "lat": .., "lon": .., "tags": {..}}]}
"""
import json
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from poi_core.config import DEFAULT_QUERY_LIMIT
from poi_core.exceptions import InvalidElementTypeError
from poi_core.filters.import_filter import BoundingBox
from poi_core.models.records import CODE_KINDS, ClassifiedRecord

logger = logging.getLogger(__name__)

ELEMENT_TYPE_ALIASES = {
    'node': 'node', 'n': 'node',
    'way': 'way', 'w': 'way',
    'relation': 'relation', 'r': 'relation',
}


def parse_bbox(value: str) -> BoundingBox:
    """Validate a 'west,south,east,north' string.

    Raises:
        InvalidBBoxError: If the string is malformed or the box is inverted
    """
    return BoundingBox.parse(value)


def normalize_element_type(element_type: str) -> str:
    """Map node/n, way/w, relation/r (any case) or N/W/R codes to a kind.

    Raises:
        InvalidElementTypeError: For anything else
    """
    if element_type in CODE_KINDS:
        return CODE_KINDS[element_type]
    kind = ELEMENT_TYPE_ALIASES.get(str(element_type).lower())
    if kind is None:
        raise InvalidElementTypeError(
            f"Invalid type '{element_type}'. Use node, way, or relation"
        )
    return kind


class POIStore:
    """Records keyed by (kind, id) with simple spatial lookup."""

    def __init__(self, records: Iterable[ClassifiedRecord] = ()):
        self._records: Dict[Tuple[str, int], ClassifiedRecord] = {}
        self.upsert_many(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ClassifiedRecord]:
        return iter(self._records.values())

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def upsert(self, record: ClassifiedRecord) -> bool:
        """Insert or replace a record.

        Returns:
            True if a record with the same key was replaced
        """
        replaced = record.key in self._records
        self._records[record.key] = record
        return replaced

    def upsert_many(self, records: Iterable[ClassifiedRecord]) -> int:
        """Upsert records; returns how many were written."""
        count = 0
        for record in records:
            self.upsert(record)
            count += 1
        return count

    def delete(self, element_type: str, element_id: int) -> bool:
        """Remove a record; returns False if it was not stored."""
        key = (normalize_element_type(element_type), int(element_id))
        return self._records.pop(key, None) is not None

    def get(self, element_type: str, element_id: int) -> Optional[ClassifiedRecord]:
        """Look up one record by type and id."""
        key = (normalize_element_type(element_type), int(element_id))
        return self._records.get(key)

    def query_bbox(self, west: float, south: float, east: float, north: float,
                   limit: int = DEFAULT_QUERY_LIMIT) -> Dict[str, list]:
        """Records located inside a bounding box, edges inclusive.

        Args:
            west, south, east, north: Box edges in degrees
            limit: Maximum number of elements returned

        Returns:
            {"elements": [...]} with up to limit elements in insertion order

        Raises:
            InvalidBBoxError: If the box is inverted
        """
        bbox = BoundingBox(west, south, east, north)
        return {'elements': [r.to_element() for r in self.records_in(bbox, limit)]}

    def records_in(self, bbox: Union[BoundingBox, str],
                   limit: int = DEFAULT_QUERY_LIMIT) -> List[ClassifiedRecord]:
        """Located records inside bbox (a BoundingBox or 'w,s,e,n' string)."""
        if not isinstance(bbox, BoundingBox):
            bbox = parse_bbox(bbox)

        found = []
        for record in self._records.values():
            if record.geometry is None:
                continue
            if len(found) >= limit:
                break
            if bbox.contains(record.lat, record.lon):
                found.append(record)
        return found

    def get_element(self, element_type: str,
                    element_id: int) -> Optional[Dict[str, list]]:
        """By-identity query; {"elements": [element]} or None if absent.

        Raises:
            InvalidElementTypeError: For an unknown element type
        """
        record = self.get(element_type, element_id)
        if record is None:
            return None
        return {'elements': [record.to_element()]}

    def save(self, path: str) -> int:
        """Write all records as a JSON list; returns the record count."""
        data = [record.to_dict() for record in self._records.values()]
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False)
        return len(data)

    @classmethod
    def load(cls, path: str) -> 'POIStore':
        """Load records written by save() or by the JSON exporter.

        Accepts either a bare list of records or an object with a
        'records' list.
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get('records', [])
        store = cls(ClassifiedRecord.from_dict(item) for item in data)
        logger.info("Loaded %d records from %s", len(store), path)
        return store
