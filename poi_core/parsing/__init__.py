"""OSM XML reading."""

from poi_core.parsing.osm_parser import OSMParser, parse_timestamp

__all__ = ['OSMParser', 'parse_timestamp']
