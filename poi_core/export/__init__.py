"""Export functionality for classified records."""

from poi_core.export.base import BaseExporter
from poi_core.export.json_exporter import JSONExporter, GeoJSONExporter
from poi_core.export.csv_exporter import CSVExporter
from poi_core.export.shapefile_exporter import ShapefileExporter, shapefile_available

EXPORTERS = {
    'json': JSONExporter,
    'geojson': GeoJSONExporter,
    'csv': CSVExporter,
    'shapefile': ShapefileExporter,
}


def get_exporter(format_name: str, **options) -> BaseExporter:
    """Instantiate the exporter for a format name.

    Args:
        format_name: Key of EXPORTERS
        **options: Keyword arguments for the exporter (e.g. tag_fields)

    Raises:
        ValueError: For an unknown format
        ImportError: For shapefile output without pyshp installed
    """
    try:
        exporter_class = EXPORTERS[format_name]
    except KeyError:
        raise ValueError(f"Unknown output format: {format_name}") from None
    return exporter_class(**options)


__all__ = [
    'BaseExporter', 'JSONExporter', 'GeoJSONExporter', 'CSVExporter',
    'ShapefileExporter', 'shapefile_available', 'get_exporter', 'EXPORTERS',
]
