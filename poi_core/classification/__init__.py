"""Tag classification and record assembly."""

from poi_core.classification.classifier import Classifier, Decision, classify, explain
from poi_core.classification.record_builder import build_record, format_timestamp

__all__ = ['Classifier', 'Decision', 'classify', 'explain',
           'build_record', 'format_timestamp']
