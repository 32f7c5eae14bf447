"""Exception hierarchy for poi_core."""


class PoiCoreError(Exception):
    """Base exception for poi_core."""
    pass


class RuleTableError(PoiCoreError):
    """Raised when the category rule table is malformed.

    A malformed table is a configuration defect: it aborts index
    construction instead of silently dropping the offending rule.
    """
    pass


class InvalidElementTypeError(PoiCoreError, ValueError):
    """Raised when an element type is not node, way or relation."""
    pass


class InvalidBBoxError(PoiCoreError, ValueError):
    """Raised when a bounding box cannot be parsed or is inverted."""
    pass
