"""Pytest fixtures for osmpoi tests."""
import json

import pytest


POI_OSM = '''<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6">
  <node id="1" lat="52.52" lon="13.40" version="3" timestamp="2021-03-04T05:06:07Z">
    <tag k="amenity" v="pharmacy"/>
    <tag k="name" v="ACME"/>
    <tag k="shop" v="chemist"/>
  </node>
  <node id="2" lat="52.51" lon="13.41" version="1" timestamp="2020-01-01T00:00:00Z">
    <tag k="shop" v="bakery"/>
    <tag k="name" v="Bread Box"/>
  </node>
  <node id="3" lat="52.50" lon="13.42">
    <tag k="amenity" v="bench"/>
  </node>
  <node id="4" lat="52.50" lon="13.43">
    <tag k="highway" v="bus_stop"/>
    <tag k="name" v="Hauptbahnhof"/>
  </node>
  <node id="5" lat="52.53" lon="13.44">
    <tag k="amenity" v="bench"/>
    <tag k="name" v="Memorial Bench"/>
  </node>
  <node id="6" lat="52.54" lon="13.45">
    <tag k="office" v="government"/>
    <tag k="name" v="Finance Ministry"/>
  </node>
  <node id="7" lat="52.55" lon="13.46">
    <tag k="amenity" v="restaurant"/>
    <tag k="name" v="Fish &amp; Chips"/>
  </node>
  <node id="10" lat="52.50" lon="13.40"/>
  <node id="11" lat="52.50" lon="13.42"/>
  <node id="12" lat="52.52" lon="13.42"/>
  <node id="13" lat="52.52" lon="13.40"/>
  <way id="100" version="2" timestamp="2019-06-01T12:00:00Z">
    <nd ref="10"/>
    <nd ref="11"/>
    <nd ref="12"/>
    <nd ref="13"/>
    <nd ref="10"/>
    <tag k="building" v="yes"/>
    <tag k="name" v="City Museum"/>
    <tag k="tourism" v="museum"/>
  </way>
  <way id="101">
    <nd ref="10"/>
    <nd ref="12"/>
    <nd ref="13"/>
    <nd ref="10"/>
    <tag k="amenity" v="parking"/>
    <tag k="name" v="Museum Car Park"/>
  </way>
  <way id="102">
    <nd ref="10"/>
    <nd ref="11"/>
    <nd ref="12"/>
    <tag k="building" v="yes"/>
    <tag k="name" v="Bookshop Row"/>
    <tag k="shop" v="books"/>
  </way>
  <relation id="200">
    <member type="way" ref="100" role="outer"/>
    <tag k="amenity" v="school"/>
    <tag k="name" v="Campus"/>
    <tag k="type" v="multipolygon"/>
  </relation>
</osm>'''


@pytest.fixture
def poi_osm_file(tmp_path):
    """OSM file mixing POI nodes, building ways and elements that are skipped.

    With default settings: nodes 1, 2, 5, 6, 7 and way 100 are classified;
    nodes 3 (unnamed) and 4 (no POI key) are prefiltered; ways 101 (no
    building tag) and 102 (open) are unsupported.
    """
    file = tmp_path / "pois.osm"
    file.write_text(POI_OSM, encoding='utf-8')
    return file


@pytest.fixture
def empty_osm_file(tmp_path):
    """Create empty OSM file."""
    content = '''<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6">
</osm>'''
    file = tmp_path / "empty.osm"
    file.write_text(content)
    return file


@pytest.fixture
def small_index():
    """Rule index over a handful of classes."""
    from poi_core.rules.index import build_rule_index, categories_from_pairs
    return build_rule_index(categories_from_pairs([
        ("pharmacy", [[("amenity", "pharmacy")]]),
        ("chemist", [[("shop", "chemist")]]),
        ("bakery", [[("shop", "bakery")]]),
        ("bread_bakery", [[("shop", "bakery"), ("cuisine", "bread")]]),
        ("vending_machine", [[("amenity", "vending_machine"), ("vending", "*")]]),
        ("office", [[("office", "*")]]),
    ]))


@pytest.fixture
def default_index():
    """Index built from the bundled rule table."""
    from poi_core.rules.loader import load_rule_index
    return load_rule_index()


@pytest.fixture
def sample_node():
    """Create sample OSMNode."""
    from datetime import datetime, timezone
    from poi_core.models.elements import OSMNode
    return OSMNode(
        id=12345,
        lat=51.5,
        lon=-0.1,
        tags={"amenity": "pharmacy", "name": "Test Pharmacy"},
        version=4,
        timestamp=datetime(2022, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
    )


@pytest.fixture
def sample_way():
    """Create sample closed building OSMWay."""
    from poi_core.models.elements import OSMWay
    return OSMWay(
        id=67890,
        node_refs=[1, 2, 3, 4, 1],
        tags={"building": "yes", "tourism": "museum", "name": "Test Museum"}
    )


@pytest.fixture
def square_coords():
    """Node coordinates (lat, lon) for a 2x2 degree square."""
    return {1: (0.0, 0.0), 2: (0.0, 2.0), 3: (2.0, 2.0), 4: (2.0, 0.0)}


@pytest.fixture
def sample_records():
    """Records spread over two areas."""
    from poi_core.models.records import ClassifiedRecord
    return [
        ClassifiedRecord(kind='node', id=1, class_name='pharmacy',
                         tags={'amenity': 'pharmacy', 'name': 'ACME'}, name='ACME',
                         geometry=(13.40, 52.52), version=3,
                         timestamp='2021-03-04T05:06:07Z'),
        ClassifiedRecord(kind='node', id=2, class_name='bakery',
                         tags={'shop': 'bakery'}, name='Bread Box',
                         geometry=(13.41, 52.51), version=1,
                         timestamp='2020-01-01T00:00:00Z'),
        ClassifiedRecord(kind='way', id=100, class_name='museum',
                         tags={'tourism': 'museum', 'building': 'yes',
                               'name': 'City Museum'},
                         name='City Museum', geometry=(13.41, 52.51), version=2,
                         timestamp='2019-06-01T12:00:00Z'),
        ClassifiedRecord(kind='node', id=9, class_name='hotel',
                         tags={'tourism': 'hotel', 'name': 'Far Away Inn'},
                         name='Far Away Inn', geometry=(-0.1, 51.5)),
    ]


@pytest.fixture
def rule_table_file(tmp_path):
    """Write a rule table JSON file and return its path."""
    def _write(data, name="rules.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding='utf-8')
        return path
    return _write
