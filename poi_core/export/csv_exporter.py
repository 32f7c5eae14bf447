"""CSV export functionality."""
import csv
import json
from typing import Any, Dict

from poi_core.export.base import BaseExporter
from poi_core.models.records import KIND_CODES
from poi_core.pipeline import PipelineResult

CSV_COLUMNS = ['id', 'osm_type', 'class', 'name', 'lat', 'lon',
               'version', 'timestamp', 'tags']


class CSVExporter(BaseExporter):
    """Export one row per record; tags are kept as a JSON object column."""

    def get_format_name(self) -> str:
        return 'csv'

    def export(self, result: PipelineResult,
               output_file: str) -> Dict[str, Any]:
        """Export to CSV format.

        Args:
            result: PipelineResult with records and statistics
            output_file: Output file path

        Returns:
            Result dict with metadata
        """
        with open(output_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            writer.writeheader()
            for record in result.records:
                writer.writerow({
                    'id': record.id,
                    'osm_type': KIND_CODES[record.kind],
                    'class': record.class_name,
                    'name': record.name or '',
                    'lat': record.lat,
                    'lon': record.lon,
                    'version': record.version,
                    'timestamp': record.timestamp,
                    'tags': json.dumps(record.tags, ensure_ascii=False,
                                       sort_keys=True),
                })

        return {
            'metadata': result.build_metadata(
                format='csv',
                columns=len(CSV_COLUMNS),
                rows=len(result.records)
            )
        }
