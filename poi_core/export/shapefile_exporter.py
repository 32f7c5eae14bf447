"""Shapefile export functionality.

Requires pyshp: pip install osmpoi[shapefile]

Every record is located at a single point, so the output is one point
shapefile ({basename}.shp, .shx, .dbf and a WGS84 .prj).
"""
import os
from typing import Any, Dict, Iterable, List, Optional

from poi_core.export.base import BaseExporter
from poi_core.pipeline import PipelineResult

# Optional import - graceful handling if pyshp not installed
try:
    import shapefile
    HAS_PYSHP = True
except ImportError:
    HAS_PYSHP = False
    shapefile = None


# WGS84 projection definition for .prj file
WGS84_PRJ = (
    'GEOGCS["GCS_WGS_1984",DATUM["D_WGS_1984",'
    'SPHEROID["WGS_1984",6378137,298.257223563]],'
    'PRIMEM["Greenwich",0],UNIT["Degree",0.017453292519943295]]'
)


class ShapefileExporter(BaseExporter):
    """Export classified records to an ESRI point shapefile.

    Requires pyshp: pip install osmpoi[shapefile]
    """

    # Maximum field name length for DBF format
    MAX_FIELD_NAME = 10

    # Maximum DBF character field length
    MAX_VALUE_LENGTH = 254

    STANDARD_FIELDS = [
        ('osm_id', 'C', 20),
        ('osm_type', 'C', 10),
        ('class', 'C', 40),
        ('name', 'C', 100),
        ('version', 'N', 10),
        ('timestamp', 'C', 20),
    ]

    def __init__(self, tag_fields: Optional[Iterable[str]] = None):
        """Initialize Shapefile exporter.

        Args:
            tag_fields: OSM tag keys to add as extra DBF fields

        Raises:
            ImportError: If pyshp is not installed
        """
        if not HAS_PYSHP:
            raise ImportError(
                "pyshp is required for Shapefile export. "
                "Install with: pip install osmpoi[shapefile]"
            )
        self.tag_fields = sorted(tag_fields) if tag_fields else []

    def get_format_name(self) -> str:
        return 'shapefile'

    def export(self, result: PipelineResult,
               output_file: str) -> Dict[str, Any]:
        """Export to Shapefile format.

        Args:
            result: PipelineResult with records and statistics
            output_file: Base output file path (extension will be stripped)

        Returns:
            Result dict with metadata including paths to created files
        """
        base_path = os.path.splitext(output_file)[0]
        located = [r for r in result.records if r.geometry is not None]

        writer = shapefile.Writer(base_path, shapeType=shapefile.POINT)
        for name, ftype, size in self.STANDARD_FIELDS:
            writer.field(name, ftype, size)

        used = [name for name, _, _ in self.STANDARD_FIELDS]
        field_mapping = {}
        for tag in self.tag_fields:
            truncated = self._truncate_field_name(tag, used)
            used.append(truncated)
            field_mapping[tag] = truncated
            writer.field(truncated, 'C', 100)

        for record in located:
            writer.point(record.lon, record.lat)
            attributes = {
                'osm_id': str(record.id),
                'osm_type': record.kind,
                'class': record.class_name,
                'name': (record.name or '')[:self.MAX_VALUE_LENGTH],
                'version': record.version,
                'timestamp': record.timestamp,
            }
            for tag, truncated in field_mapping.items():
                attributes[truncated] = record.tags.get(tag, '')[:self.MAX_VALUE_LENGTH]
            writer.record(**attributes)

        writer.close()

        with open(f"{base_path}.prj", 'w', encoding='utf-8') as prj:
            prj.write(WGS84_PRJ)

        return {
            'metadata': result.build_metadata(
                format='shapefile',
                files_created=[f"{base_path}.shp"],
                points_exported=len(located),
                skipped_without_geometry=len(result.records) - len(located)
            )
        }

    def _truncate_field_name(self, name: str, existing: List[str]) -> str:
        """Truncate field name to DBF limit, ensuring uniqueness.

        Args:
            name: Original field name
            existing: Already used field names

        Returns:
            Unique truncated field name (max 10 chars)
        """
        truncated = name[:self.MAX_FIELD_NAME]
        if truncated not in existing:
            return truncated

        counter = 1
        while True:
            suffix = str(counter)
            candidate = f"{name[:self.MAX_FIELD_NAME - len(suffix)]}{suffix}"
            if candidate not in existing:
                return candidate
            counter += 1

    @staticmethod
    def is_available() -> bool:
        """Check if pyshp is installed."""
        return HAS_PYSHP


def shapefile_available() -> bool:
    """Check if shapefile export is available.

    Returns:
        True if pyshp is installed
    """
    return HAS_PYSHP
