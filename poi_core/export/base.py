"""Base class for record exporters."""
from abc import ABC, abstractmethod
from typing import Any, Dict

from poi_core.pipeline import PipelineResult


class BaseExporter(ABC):
    """Abstract base class for exporters."""

    @abstractmethod
    def export(self, result: PipelineResult,
               output_file: str) -> Dict[str, Any]:
        """Export classified records to file.

        Args:
            result: PipelineResult with records and statistics
            output_file: Output file path

        Returns:
            Metadata dictionary
        """
        pass

    @abstractmethod
    def get_format_name(self) -> str:
        """Get the format name (e.g., 'json', 'geojson').

        Returns:
            Format name string
        """
        pass
