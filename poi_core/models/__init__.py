"""Data models for OSM elements, classified records and run statistics."""

from poi_core.models.elements import OSMNode, OSMWay, OSMRelation, OSMElement
from poi_core.models.records import ClassifiedRecord
from poi_core.models.statistics import ClassificationStats

__all__ = [
    'OSMNode', 'OSMWay', 'OSMRelation', 'OSMElement',
    'ClassifiedRecord', 'ClassificationStats',
]
