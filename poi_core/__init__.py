"""
poi_core - OpenStreetMap POI classification.

Maps the free-form tags of OSM elements onto a fixed vocabulary of POI
classes using a declarative rule table, and turns the classified
elements into located records for export and querying.
"""

__version__ = "1.0.0"

from poi_core.exceptions import (
    PoiCoreError, RuleTableError, InvalidElementTypeError, InvalidBBoxError
)
from poi_core.config import ClassifierConfig, FALLBACK_POI_KEYS, IMPORT_FILTER_KEYS
from poi_core.models import (
    OSMNode, OSMWay, OSMRelation, ClassifiedRecord, ClassificationStats
)
from poi_core.rules import (
    Category, MatchRule, RuleIndex, build_rule_index, load_rule_index, load_rule_table
)
from poi_core.classification import Classifier, Decision, classify, explain, build_record
from poi_core.filters import BoundingBox, ImportFilter
from poi_core.parsing import OSMParser
from poi_core.pipeline import POIPipeline, PipelineResult, classify_elements
from poi_core.store import POIStore

__all__ = [
    '__version__',
    # Errors
    'PoiCoreError', 'RuleTableError', 'InvalidElementTypeError', 'InvalidBBoxError',
    # Config
    'ClassifierConfig', 'FALLBACK_POI_KEYS', 'IMPORT_FILTER_KEYS',
    # Models
    'OSMNode', 'OSMWay', 'OSMRelation', 'ClassifiedRecord', 'ClassificationStats',
    # Rules
    'Category', 'MatchRule', 'RuleIndex', 'build_rule_index',
    'load_rule_index', 'load_rule_table',
    # Classification
    'Classifier', 'Decision', 'classify', 'explain', 'build_record',
    # Filters / parsing
    'BoundingBox', 'ImportFilter', 'OSMParser',
    # Pipeline / store
    'POIPipeline', 'PipelineResult', 'classify_elements', 'POIStore',
]
