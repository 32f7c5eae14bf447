"""Classified POI record data model."""
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple

# Short type codes used by the storage layer
KIND_CODES = {'node': 'N', 'way': 'W', 'relation': 'R'}
CODE_KINDS = {code: kind for kind, code in KIND_CODES.items()}


@dataclass(frozen=True)
class ClassifiedRecord:
    """A classified element ready for storage.

    Identity is (kind, id). The record is produced once per qualifying
    element and is never modified afterwards; the store replaces it
    wholesale on update.
    """
    kind: str
    id: int
    class_name: str
    tags: Dict[str, str] = field(default_factory=dict)
    name: Optional[str] = None
    geometry: Optional[Tuple[float, float]] = None  # (lon, lat)
    version: int = 0
    timestamp: str = ''

    @property
    def key(self) -> Tuple[str, int]:
        """Storage key (kind, id)."""
        return (self.kind, self.id)

    @property
    def lon(self) -> Optional[float]:
        return self.geometry[0] if self.geometry else None

    @property
    def lat(self) -> Optional[float]:
        return self.geometry[1] if self.geometry else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the output record contract.

        Returns:
            Dict with kind, id, name, class, tags, geometry, version and
            timestamp keys; name is omitted when absent.
        """
        result: Dict[str, Any] = {
            'kind': self.kind,
            'id': self.id,
            'class': self.class_name,
            'tags': dict(self.tags),
            'geometry': list(self.geometry) if self.geometry else None,
            'version': self.version,
            'timestamp': self.timestamp,
        }
        if self.name is not None:
            result['name'] = self.name
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClassifiedRecord':
        """Rebuild a record from its to_dict() form."""
        geometry = data.get('geometry')
        return cls(
            kind=data['kind'],
            id=int(data['id']),
            class_name=data['class'],
            tags=dict(data.get('tags') or {}),
            name=data.get('name'),
            geometry=(float(geometry[0]), float(geometry[1])) if geometry else None,
            version=int(data.get('version', 0)),
            timestamp=data.get('timestamp', ''),
        )

    def to_geojson_feature(self) -> Dict[str, Any]:
        """Convert to GeoJSON Feature.

        Returns:
            GeoJSON Feature dict with Point geometry (null when unlocated)
        """
        geometry = None
        if self.geometry:
            geometry = {
                "type": "Point",
                "coordinates": [self.lon, self.lat]
            }

        return {
            "type": "Feature",
            "geometry": geometry,
            "properties": {
                "id": self.id,
                "osm_type": self.kind,
                "class": self.class_name,
                "name": self.name,
                "version": self.version,
                "timestamp": self.timestamp,
                "tags": dict(self.tags),
            }
        }

    def to_element(self) -> Dict[str, Any]:
        """Convert to an Overpass-style element for query responses.

        The name is folded back into the tags when present.
        """
        tags = dict(self.tags)
        if self.name is not None:
            tags['name'] = self.name
        return {
            'type': self.kind,
            'id': self.id,
            'lat': self.lat,
            'lon': self.lon,
            'tags': tags,
        }
