"""Element prefiltering and spatial filters."""

from poi_core.filters.import_filter import BoundingBox, ImportFilter

__all__ = ['BoundingBox', 'ImportFilter']
