"""Build storage records from classified elements."""
from datetime import datetime, timezone
from typing import Optional, Tuple, Union

from poi_core.config import NAME_KEY
from poi_core.models.elements import OSMElement
from poi_core.models.records import ClassifiedRecord

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'

TimestampLike = Union[datetime, int, float, None]


def format_timestamp(ts: TimestampLike) -> str:
    """Format an instant as ISO-8601 UTC, truncated to the second.

    Naive datetimes are taken to be UTC already; numbers are epoch
    seconds. A missing timestamp formats as an empty string.

    Examples:
        >>> format_timestamp(0)
        '1970-01-01T00:00:00Z'
    """
    if ts is None:
        return ''
    if isinstance(ts, (int, float)):
        ts = datetime.fromtimestamp(ts, tz=timezone.utc)
    elif ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def build_record(element: OSMElement,
                 class_name: Optional[str],
                 geometry: Optional[Tuple[float, float]] = None,
                 name: Optional[str] = None) -> Optional[ClassifiedRecord]:
    """Assemble the record for a classified element.

    Args:
        element: The element as read from the source
        class_name: Result of classification; None means skip
        geometry: (lon, lat) from the geometry collaborator
        name: Name stripped from the tags by the producer, if any

    Returns:
        ClassifiedRecord, or None when the element is not a POI
    """
    if class_name is None:
        return None

    tags = dict(element.tags)
    if NAME_KEY in tags:
        name = tags[NAME_KEY]
    elif name is not None:
        tags[NAME_KEY] = name

    return ClassifiedRecord(
        kind=element.kind,
        id=element.id,
        class_name=class_name,
        tags=tags,
        name=name,
        geometry=geometry,
        version=element.version,
        timestamp=format_timestamp(element.timestamp),
    )
