"""JSON and GeoJSON export functionality."""
import json
from typing import Any, Dict

from poi_core.export.base import BaseExporter
from poi_core.pipeline import PipelineResult


class JSONExporter(BaseExporter):
    """Export records in the record contract form, plus run metadata.

    The output can be loaded back with POIStore.load().
    """

    def __init__(self, indent: int = 2):
        self.indent = indent

    def get_format_name(self) -> str:
        return 'json'

    def export(self, result: PipelineResult,
               output_file: str) -> Dict[str, Any]:
        """Export records to JSON.

        Args:
            result: PipelineResult with records and statistics
            output_file: Output file path

        Returns:
            Result dict with records and metadata
        """
        output = {
            'records': [record.to_dict() for record in result.records],
            'metadata': result.build_metadata(format='json')
        }

        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(output, f, indent=self.indent, ensure_ascii=False)

        return output


class GeoJSONExporter(BaseExporter):
    """Export records as a FeatureCollection of Point features."""

    def get_format_name(self) -> str:
        return 'geojson'

    def export(self, result: PipelineResult,
               output_file: str) -> Dict[str, Any]:
        """Export to GeoJSON FeatureCollection.

        Args:
            result: PipelineResult with records and statistics
            output_file: Output file path

        Returns:
            Result dict with metadata
        """
        features = [record.to_geojson_feature() for record in result.records]

        geojson = {
            'type': 'FeatureCollection',
            'features': features,
            'properties': {
                'source': result.source,
                'generator': 'osmpoi',
                'feature_count': len(features)
            }
        }

        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(geojson, f, indent=2, ensure_ascii=False)

        return {
            'metadata': result.build_metadata(
                format='geojson',
                features_exported=len(features)
            )
        }
